"""Password hashing for protected images, backed by bcrypt."""

from __future__ import annotations

import bcrypt

# bcrypt only reads the first 72 bytes of a secret
BCRYPT_MAX_BYTES = 72
MIN_ROUNDS = 4


class BcryptCredentialGate:
    """Hash and verify per-image passwords.

    Args:
        rounds: bcrypt cost factor; values below bcrypt's minimum are raised to it.
    """

    def __init__(self, rounds: int = 5) -> None:
        self.rounds = max(MIN_ROUNDS, rounds)

    @staticmethod
    def _encode(secret: str) -> bytes:
        return secret.encode("utf-8")[:BCRYPT_MAX_BYTES]

    def hash_secret(self, secret: str) -> bytes:
        """Return a salted one-way hash of ``secret``."""
        return bcrypt.hashpw(self._encode(secret), bcrypt.gensalt(rounds=self.rounds))

    def verify_secret(self, secret: str, hashed: bytes) -> bool:
        """Return True when ``secret`` matches ``hashed``; False on mismatch or a malformed hash."""
        if not secret or not hashed:
            return False
        try:
            return bcrypt.checkpw(self._encode(secret), hashed)
        except ValueError:
            return False
