"""Clock port."""

from datetime import datetime
from typing import Protocol


class Clock(Protocol):
    """Source of the current time.

    Services never call ``datetime.now`` directly so that expiry logic can
    be tested against a fixed instant.
    """

    def now(self) -> datetime:
        """Return the current timezone-aware UTC instant."""
        ...
