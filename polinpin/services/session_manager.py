"""Opaque session tokens, one active token per username.

Tokens are random strings from the ``secrets`` module. Issuing a token for a
user replaces whatever token they held before. A token can optionally expire
``ttl_seconds`` after it was issued; ``None`` means it never expires.
"""
import logging
import secrets
import string
import threading
import time
from typing import Callable, Dict, Optional

from polinpin.core.errors import SessionExpiredError, UnauthenticatedError
from polinpin.models.user import SessionRecord

logger = logging.getLogger(__name__)

TOKEN_ALPHABET = string.ascii_letters + string.digits
MIN_TOKEN_LENGTH = 30


class SessionManager:
    def __init__(
        self,
        token_length: int = 32,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.time,
    ):
        if token_length < MIN_TOKEN_LENGTH:
            raise ValueError(f"token_length must be at least {MIN_TOKEN_LENGTH}, got {token_length}")
        if ttl_seconds is not None and ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive or None")
        self.token_length = token_length
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._sessions: Dict[str, SessionRecord] = {}
        # token -> username, kept in step with _sessions under the same lock
        self._owners: Dict[str, str] = {}
        self._lock = threading.Lock()

    def _generate_token(self) -> str:
        return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(self.token_length))

    def issue_token(self, username: str) -> str:
        token = self._generate_token()
        record = SessionRecord(username=username, token=token, created_at=self.clock())
        with self._lock:
            previous = self._sessions.get(username)
            if previous is not None:
                self._owners.pop(previous.token, None)
            self._sessions[username] = record
            self._owners[token] = username
        logger.info(f"Issued session token for {username!r}")
        return token

    def _is_expired(self, record: SessionRecord) -> bool:
        if self.ttl_seconds is None:
            return False
        return self.clock() - record.created_at >= self.ttl_seconds

    def check(self, username: str, token: str) -> None:
        """Raise unless ``token`` is the user's current, unexpired token."""
        with self._lock:
            record = self._sessions.get(username)
        if record is None or not secrets.compare_digest(record.token.encode(), token.encode()):
            raise UnauthenticatedError("Invalid session token")
        if self._is_expired(record):
            logger.info(f"Session for {username!r} expired")
            raise SessionExpiredError(username)

    def validate(self, username: str, token: str) -> bool:
        try:
            self.check(username, token)
        except UnauthenticatedError:
            return False
        return True

    def resolve(self, token: str) -> str:
        """Return the username owning ``token``."""
        with self._lock:
            username = self._owners.get(token)
        if username is None:
            raise UnauthenticatedError("Invalid session token")
        self.check(username, token)
        return username

    def revoke(self, username: str, token: str) -> bool:
        """Drop the user's session only if ``token`` is still the current one."""
        with self._lock:
            record = self._sessions.get(username)
            if record is None or not secrets.compare_digest(record.token.encode(), token.encode()):
                return False
            del self._sessions[username]
            self._owners.pop(record.token, None)
        logger.info(f"Revoked session for {username!r}")
        return True
