"""Abstract repository interface for password reset records."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from uuid import UUID


@dataclass(frozen=True)
class PasswordResetRecord:
    """Immutable password reset record.

    Keyed by email rather than principal id so that requesting a reset never
    depends on (or reveals) whether the account exists.
    """

    id: UUID
    email: str
    token_hash: str
    created_at: datetime

    def expires_at(self, window: timedelta) -> datetime:
        return self.created_at + window

    def is_expired(self, now: datetime, window: timedelta) -> bool:
        """Check if the record is past its validity window."""
        return now > self.expires_at(window)


class PasswordResetRepository(ABC):
    """Abstract repository for password reset records."""

    @abstractmethod
    async def create(self, email: str, token_hash: str, now: datetime) -> UUID:
        """Create a new password reset record.

        Parameters
        ----------
        email
            Address the reset was requested for
        token_hash
            bcrypt hash of the raw token
        now
            Creation instant

        Returns
        -------
        The record's unique identifier
        """

    @abstractmethod
    async def find_all_for_email(self, email: str) -> list[PasswordResetRecord]:
        """All records for an email, newest first."""

    @abstractmethod
    async def delete_by_id(self, record_id: UUID) -> int:
        """Delete a single record. Returns rows deleted."""

    @abstractmethod
    async def delete_all_for_email(self, email: str) -> int:
        """Delete every record for an email. Returns rows deleted.

        A return value of zero tells a consumer that a concurrent consumer
        already removed the records.
        """

    @abstractmethod
    async def delete_created_before(self, cutoff: datetime) -> int:
        """Delete records created before ``cutoff``.

        Returns
        -------
        Number of records deleted
        """
