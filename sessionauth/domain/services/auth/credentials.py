"""Password hashing and verification.

Uses passlib's ``CryptContext`` with bcrypt: salted, deliberately slow, and
compared in constant time. ``verify`` never raises; a malformed or missing
hash is indistinguishable from a wrong password to the caller.
"""

from typing import Optional

from passlib.context import CryptContext
from structlog import get_logger

logger = get_logger(__name__)


class CredentialVerifier:
    """Hashes new passwords and verifies candidates against stored hashes.

    Attributes:
        pwd_context (CryptContext): Passlib context for bcrypt password hashing.
    """

    def __init__(self, work_factor: int = 12):
        self.pwd_context = CryptContext(
            schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=work_factor
        )

    def hash(self, plaintext: str) -> str:
        """Return a salted bcrypt hash of ``plaintext``."""
        return self.pwd_context.hash(plaintext)

    def verify(self, plaintext: Optional[str], stored_hash: Optional[str]) -> bool:
        """Check ``plaintext`` against ``stored_hash``.

        Returns False for an empty candidate, for accounts without a password
        (``stored_hash`` is ``None``) and for hashes passlib cannot identify.
        The empty-candidate and no-hash paths still burn one hash computation
        so that response time does not reveal whether the account exists.
        """
        if not stored_hash:
            self.dummy_verify()
            return False
        if not plaintext:
            self.dummy_verify()
            return False
        try:
            return self.pwd_context.verify(plaintext, stored_hash)
        except (ValueError, TypeError) as exc:
            logger.warning("Unverifiable password hash", error_type=type(exc).__name__)
            return False

    def dummy_verify(self) -> None:
        """Spend the time of one verification without a real hash."""
        self.pwd_context.dummy_verify()
