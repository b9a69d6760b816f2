import logging

from polinpin.core.errors import UnauthenticatedError, UsernameTakenError
from polinpin.models.user import User, UserInfo, UserSession
from polinpin.services.passwords import PasswordHasher
from polinpin.services.session_manager import SessionManager
from polinpin.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)

REGISTRATION_POLICIES = ("overwrite", "reject")


class AuthService:
    """Register/login flows over a UserDirectory and a SessionManager.

    The two stores are updated as independent steps; nothing is held across
    both of them.
    """

    def __init__(
        self,
        users: UserDirectory,
        sessions: SessionManager,
        hasher: PasswordHasher,
        registration_policy: str = "overwrite",
    ):
        if registration_policy not in REGISTRATION_POLICIES:
            raise ValueError(f"Unknown registration policy: {registration_policy!r}")
        self.users = users
        self.sessions = sessions
        self.hasher = hasher
        self.registration_policy = registration_policy

    def register(self, name: str, username: str, password: str) -> UserSession:
        user = User(name=name, username=username, password=self.hasher.hash(password))
        if self.registration_policy == "reject":
            if not self.users.insert(user):
                raise UsernameTakenError(username)
        else:
            self.users.upsert(user)
        logger.info(f"Registered user {username!r}")
        token = self.sessions.issue_token(username)
        return UserSession(name=user.name, token=token)

    def login(self, username: str, password: str) -> UserSession:
        user = self.users.find(username)
        if user is None:
            self.hasher.burn(password)
            logger.warning(f"Login failed for unknown user {username!r}")
            raise UnauthenticatedError()
        if not self.hasher.verify(password, user.password):
            logger.warning(f"Login failed for {username!r}: wrong password")
            raise UnauthenticatedError()
        token = self.sessions.issue_token(username)
        return UserSession(name=user.name, token=token)

    def identify(self, token: str) -> UserInfo:
        username = self.sessions.resolve(token)
        user = self.users.find(username)
        if user is None:
            raise UnauthenticatedError("Invalid session token")
        return UserInfo(name=user.name, username=user.username)

    def logout(self, token: str) -> None:
        username = self.sessions.resolve(token)
        self.sessions.revoke(username, token)
