"""Principal repository interface."""

from abc import ABC, abstractmethod
from typing import Optional, Union
from uuid import UUID

from keyhold_identity.domain.principal.aggregates.principal import (
    Principal,
    PrincipalCredentials,
)
from keyhold_identity.domain.principal.value_objects.email import Email


class PrincipalRepository(ABC):
    """Repository interface for Principal aggregates.

    Lookups come in two flavours: plain accessors return a ``Principal``
    without any secret; the ``*_credentials`` accessors additionally return
    the stored password hash.
    """

    @abstractmethod
    async def find_by_id(self, principal_id: UUID) -> Optional[Principal]:
        """Find a principal by its ID."""

    @abstractmethod
    async def find_by_email(self, email: Union[str, Email]) -> Optional[Principal]:
        """Find a principal by its email address."""

    @abstractmethod
    async def find_by_external_id(self, external_id: str) -> Optional[Principal]:
        """Find a principal by its linked external identity."""

    @abstractmethod
    async def find_credentials_by_id(
        self,
        principal_id: UUID,
    ) -> Optional[PrincipalCredentials]:
        """Find a principal and its password hash by ID."""

    @abstractmethod
    async def find_credentials_by_email(
        self,
        email: Union[str, Email],
    ) -> Optional[PrincipalCredentials]:
        """Find a principal and its password hash by email."""

    @abstractmethod
    async def add(self, principal: Principal, password_hash: str) -> None:
        """Insert a new principal with its initial password hash.

        Raises EmailAlreadyExistsError or ExternalIdentityConflictError on
        uniqueness violations.
        """

    @abstractmethod
    async def save(self, principal: Principal) -> None:
        """Update an existing principal (everything but the password hash)."""

    @abstractmethod
    async def update_password_hash(
        self,
        principal_id: UUID,
        password_hash: str,
    ) -> bool:
        """Replace the password hash. Returns False if no principal matched."""

    @abstractmethod
    async def delete(self, principal_id: UUID) -> bool:
        """Physically delete a principal. Returns False if none matched."""

    @abstractmethod
    async def count(self) -> int:
        """Count all principals."""

    @abstractmethod
    async def list_all(self, include_inactive: bool = True) -> list[Principal]:
        """List principals ordered by creation time."""
