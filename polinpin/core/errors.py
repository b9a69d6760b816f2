"""Typed failures raised by the services.

Every error carries a machine-readable ``code`` and the HTTP status the
transport layer answers with. Services never build HTTP responses themselves.
"""


class PolinpinError(Exception):
    """Base class for all service failures."""

    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> dict:
        return {"detail": self.message, "code": self.code}


class StudyNotFoundError(PolinpinError):
    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, study_id: str):
        super().__init__(f"Study '{study_id}' not found")
        self.study_id = study_id


class UnauthenticatedError(PolinpinError):
    code = "UNAUTHENTICATED"
    status_code = 401

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class SessionExpiredError(UnauthenticatedError):
    code = "SESSION_EXPIRED"

    def __init__(self, username: str):
        super().__init__("Session expired")
        self.username = username


class UsernameTakenError(PolinpinError):
    code = "USERNAME_TAKEN"
    status_code = 409

    def __init__(self, username: str):
        super().__init__(f"Username '{username}' is already registered")
        self.username = username


class NotEnoughObservationsError(PolinpinError):
    code = "NOT_ENOUGH_OBSERVATIONS"
    status_code = 409

    def __init__(self, study_id: str, count: int, required: int):
        super().__init__(
            f"Study '{study_id}' has {count} observation(s), statistics need at least {required}"
        )
        self.study_id = study_id
        self.count = count
        self.required = required
