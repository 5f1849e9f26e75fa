"""bcrypt wrapper used for every stored credential."""

import secrets

import bcrypt

# bcrypt only considers the first 72 bytes of a secret.
_BCRYPT_MAX_BYTES = 72


class PasswordHasher:
    """Salted one-way hashing of account passwords."""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """
        Hash a plain text password with a fresh salt.

        Args:
            password: Plain text password

        Returns:
            bcrypt digest as text
        """
        return bcrypt.hashpw(
            self._encode(password), bcrypt.gensalt(rounds=self.rounds)
        ).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Check a plain text password against a digest produced by ``hash``."""
        try:
            return bcrypt.checkpw(self._encode(password), password_hash.encode("utf-8"))
        except ValueError:
            # Malformed or foreign digest
            return False

    def unusable_hash(self) -> str:
        """Digest of a random secret nobody knows, for OAuth-provisioned accounts."""
        return self.hash(secrets.token_urlsafe(32))

    @staticmethod
    def _encode(password: str) -> bytes:
        return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
