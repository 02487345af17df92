"""Abstract repository interface for session tokens."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class SessionTokenData:
    """Immutable session token data."""

    id: UUID
    principal_id: UUID
    label: str
    token: str
    expires_at: datetime | None
    last_used_at: datetime | None
    created_at: datetime
    updated_at: datetime

    def is_expired(self, now: datetime) -> bool:
        """Check if the token has expired. Tokens without expiry never do."""
        if self.expires_at is None:
            return False
        return now >= self.expires_at

    def __repr__(self) -> str:
        return (
            f"SessionTokenData(id={self.id}, principal_id={self.principal_id}, "
            f"label={self.label!r}, expires_at={self.expires_at})"
        )


class SessionTokenRepository(ABC):
    """Abstract repository for opaque bearer session tokens."""

    @abstractmethod
    async def create(
        self,
        principal_id: UUID,
        label: str,
        token: str,
        expires_at: datetime | None,
        now: datetime,
    ) -> SessionTokenData:
        """Store a newly issued token.

        Parameters
        ----------
        principal_id
            Owner of the token
        label
            Human readable label (e.g. ``auth_token``)
        token
            The opaque token value; unique in the store
        expires_at
            Expiry instant, or None for a non-expiring token
        now
            Creation instant

        Raises
        ------
        TokenCollisionError
            If the token value already exists
        """

    @abstractmethod
    async def find_active(self, token: str, now: datetime) -> SessionTokenData | None:
        """Find a token that has not expired at ``now``.

        Tokens whose ``expires_at`` is NULL count as active.
        """

    @abstractmethod
    async def touch(self, token_id: UUID, now: datetime) -> None:
        """Record a use of the token (sets ``last_used_at``)."""

    @abstractmethod
    async def delete_by_token(self, token: str) -> int:
        """Delete a token by value. Returns the number of rows deleted."""

    @abstractmethod
    async def delete_all_for_principal(self, principal_id: UUID) -> int:
        """Delete every token of a principal. Returns rows deleted."""

    @abstractmethod
    async def delete_expired(self, now: datetime) -> int:
        """Delete tokens whose expiry lies before ``now``."""

    @abstractmethod
    async def delete_without_expiry(self) -> int:
        """Delete tokens issued without any expiry."""

    @abstractmethod
    async def list_for_principal(self, principal_id: UUID) -> list[SessionTokenData]:
        """List a principal's tokens, newest first."""
