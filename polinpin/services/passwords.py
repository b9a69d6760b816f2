import hashlib
import bcrypt


class PasswordHasher:
    """bcrypt hashing with a SHA-256 pre-hash.

    The pre-hash keeps passwords longer than bcrypt's 72 byte limit from being
    silently truncated. Any object offering ``hash``, ``verify`` and ``burn``
    can be handed to :class:`AuthService` instead.
    """

    def __init__(self, rounds: int = 12):
        self.rounds = rounds
        # Compared against when the user does not exist, so a miss costs the same as a hit
        self._dummy_hash = self.hash("polinpin-dummy-password")

    def _pre_hash(self, password: str) -> str:
        if not password: return ""
        return hashlib.sha256(password.encode('utf-8')).hexdigest()

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(self._pre_hash(password).encode('utf-8'), salt).decode('utf-8')

    def verify(self, plain: str, hashed: str) -> bool:
        try:
            return bcrypt.checkpw(self._pre_hash(plain).encode('utf-8'), hashed.encode('utf-8'))
        except ValueError:
            # Stored value is not a bcrypt hash
            return False

    def burn(self, plain: str) -> None:
        self.verify(plain, self._dummy_hash)
