"""
Utility functions for the auth module.

Password hashing uses bcrypt: salted, with an adjustable work factor, so
two hashes of the same password never match byte-for-byte.
"""

from typing import Optional

import bcrypt

from rbac_directory.config import settings


class PasswordHasher:
    """One-way adaptive hash plus verify."""

    def __init__(self, rounds: Optional[int] = None):
        self.rounds = rounds if rounds is not None else settings.BCRYPT_ROUNDS

    def hash(self, password: str) -> str:
        """Return a salted bcrypt digest for `password`."""
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("ascii")

    def verify(self, password: str, digest: str) -> bool:
        """
        Check `password` against a stored digest.

        Returns False for a malformed digest (or an over-long password)
        instead of raising.
        """
        try:
            return bcrypt.checkpw(password.encode("utf-8"), digest.encode("ascii"))
        except (ValueError, TypeError, UnicodeEncodeError, AttributeError):
            return False
