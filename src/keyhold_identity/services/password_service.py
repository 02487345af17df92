"""Password hashing service using bcrypt.

Provides adaptive one-way hashing and constant-time verification for
passwords and for other short secrets (reset tokens, placeholder
passwords) that must never be stored in the clear.
"""

import bcrypt

from keyhold_identity.exceptions import WeakPasswordError

# bcrypt only looks at the first 72 bytes; newer releases refuse longer input
BCRYPT_MAX_BYTES = 72


class PasswordHashingService:
    """Service for secure secret hashing and verification.

    Uses bcrypt with a fixed work factor chosen at construction time.
    Policy checks are not done here; see ``CredentialStore``.

    Examples
    --------
    >>> service = PasswordHashingService(rounds=4)
    >>> hashed = service.hash("Passw0rd!")
    >>> service.verify("Passw0rd!", hashed)
    True
    >>> service.verify("wrong_password", hashed)
    False
    """

    DEFAULT_ROUNDS = 12

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        """Initialize the password hashing service.

        Parameters
        ----------
        rounds
            The bcrypt work factor (log2 of iterations). Default is 12.
            Tests use 4 to stay fast.
        """
        self._rounds = rounds

    @property
    def rounds(self) -> int:
        return self._rounds

    def hash(self, secret: str) -> str:
        """Hash a plaintext secret.

        Parameters
        ----------
        secret
            The plaintext to hash

        Returns
        -------
        The bcrypt hash as a string

        Raises
        ------
        WeakPasswordError
            If the secret is empty or exceeds bcrypt's input limit
        """
        encoded = secret.encode("utf-8")
        if not encoded:
            msg = "Password cannot be empty"
            raise WeakPasswordError(msg)
        if len(encoded) > BCRYPT_MAX_BYTES:
            msg = f"Password cannot exceed {BCRYPT_MAX_BYTES} bytes"
            raise WeakPasswordError(msg)

        salt = bcrypt.gensalt(rounds=self._rounds)
        hashed = bcrypt.hashpw(encoded, salt)
        return hashed.decode("utf-8")

    def verify(self, secret: str, secret_hash: str) -> bool:
        """Verify a secret against a hash.

        Parameters
        ----------
        secret
            The plaintext to check
        secret_hash
            The bcrypt hash to verify against

        Returns
        -------
        True if the secret matches, False otherwise
        """
        try:
            return bcrypt.checkpw(
                secret.encode("utf-8"),
                secret_hash.encode("utf-8"),
            )
        except (ValueError, TypeError):
            # Invalid hash format or over-long input
            return False

    def needs_rehash(self, secret_hash: str) -> bool:
        """Check if a hash was produced with a different work factor.

        Parameters
        ----------
        secret_hash
            The existing hash to check

        Returns
        -------
        True if the hash should be regenerated
        """
        try:
            # bcrypt format: $2b$XX$...
            parts = secret_hash.split("$")
            if len(parts) >= 3:
                current_rounds = int(parts[2])
                return current_rounds != self._rounds
        except (ValueError, IndexError):
            pass
        return True
