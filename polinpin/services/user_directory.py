import threading
from typing import Dict, Optional

from polinpin.models.user import User


class UserDirectory:
    def __init__(self):
        self._users: Dict[str, User] = {}
        self._lock = threading.Lock()

    def find(self, username: str) -> Optional[User]:
        with self._lock:
            user = self._users.get(username)
        return user.model_copy() if user else None

    def upsert(self, user: User) -> None:
        # No uniqueness check here: callers wanting "already registered" must test first
        record = user.model_copy()
        with self._lock:
            self._users[record.username] = record

    def insert(self, user: User) -> bool:
        """Add ``user`` only if the username is free; False when it is taken."""
        record = user.model_copy()
        with self._lock:
            if record.username in self._users:
                return False
            self._users[record.username] = record
        return True

    def __contains__(self, username: str) -> bool:
        with self._lock:
            return username in self._users

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)
