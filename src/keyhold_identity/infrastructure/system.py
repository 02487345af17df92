"""Production implementations of the clock and random source ports."""

import secrets
from datetime import datetime

from keyhold_identity.domain.shared.time import utc_now


class SystemClock:
    def now(self) -> datetime:
        return utc_now()


class SecureRandomSource:
    """Random bytes from the operating system CSPRNG."""

    def bytes(self, n: int) -> bytes:
        return secrets.token_bytes(n)
