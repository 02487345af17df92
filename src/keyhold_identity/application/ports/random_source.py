"""Random source port."""

from typing import Protocol


class RandomSource(Protocol):
    """Cryptographically secure random bytes."""

    def bytes(self, n: int) -> bytes:
        """Return ``n`` random bytes."""
        ...
