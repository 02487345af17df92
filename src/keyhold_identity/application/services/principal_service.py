"""Principal administration used by route handlers."""

from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from keyhold_identity.application.config import IdentityConfig
from keyhold_identity.application.ports import Clock
from keyhold_identity.application.services.credential_store import CredentialStore
from keyhold_identity.application.services.session_token_service import (
    SessionTokenService,
)
from keyhold_identity.domain.principal import (
    DEFAULT_ROLE,
    Email,
    Principal,
    PrincipalCredentials,
    PrincipalRepository,
)
from keyhold_identity.exceptions import (
    CannotModifySelfError,
    EmailAlreadyExistsError,
    PrincipalNotFoundError,
)

logger = logging.getLogger(__name__)


class PrincipalService:
    """CRUD over principals.

    Deletion is a soft delete (deactivate and revoke every token) unless
    hard deletion is configured.
    """

    def __init__(  # noqa: PLR0913
        self,
        principal_repository: PrincipalRepository,
        credential_store: CredentialStore,
        token_service: SessionTokenService,
        config: IdentityConfig,
        clock: Clock,
    ):
        self._principal_repo = principal_repository
        self._credentials = credential_store
        self._token_service = token_service
        self._config = config
        self._clock = clock

    async def create_principal(
        self,
        email: str,
        name: str,
        password: str,
        role: str = DEFAULT_ROLE,
    ) -> Principal:
        """Register a principal with a policy-checked password.

        Raises
        ------
        InvalidEmailError
            If the email does not parse
        WeakPasswordError
            If the password breaks the policy
        EmailAlreadyExistsError
            If the email is taken
        """
        email_obj = Email(email)
        self._credentials.ensure_valid(password)

        if await self._principal_repo.find_by_email(email_obj) is not None:
            raise EmailAlreadyExistsError(email_obj.value)

        principal = Principal.create(
            email=email_obj,
            name=name,
            role=role,
            now=self._clock.now(),
        )
        await self._principal_repo.add(principal, self._credentials.hash(password))
        logger.info("Created principal: %s (role: %s)", principal.id, principal.role)
        return principal

    async def get_principal(self, principal_id: UUID) -> Principal:
        principal = await self._principal_repo.find_by_id(principal_id)
        if principal is None:
            raise PrincipalNotFoundError(str(principal_id))
        return principal

    async def get_principal_with_credentials(
        self,
        principal_id: UUID,
    ) -> PrincipalCredentials:
        credentials = await self._principal_repo.find_credentials_by_id(principal_id)
        if credentials is None:
            raise PrincipalNotFoundError(str(principal_id))
        return credentials

    async def find_by_email(self, email: str) -> Optional[Principal]:
        return await self._principal_repo.find_by_email(email)

    async def list_principals(self, include_inactive: bool = False) -> list[Principal]:
        return await self._principal_repo.list_all(include_inactive=include_inactive)

    async def update_principal(  # noqa: PLR0913
        self,
        principal_id: UUID,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        role: Optional[str] = None,
        active: Optional[bool] = None,
        password: Optional[str] = None,
        acting_principal_id: Optional[UUID] = None,
    ) -> Principal:
        """Apply a partial update. ``None`` leaves a field unchanged.

        Raises
        ------
        PrincipalNotFoundError
            If no principal has this ID
        CannotModifySelfError
            If the acting principal tries to change its own active flag
        EmailAlreadyExistsError
            If the new email belongs to another principal
        WeakPasswordError
            If the new password breaks the policy
        """
        principal = await self.get_principal(principal_id)
        now = self._clock.now()

        if (
            active is not None
            and active != principal.active
            and acting_principal_id == principal_id
        ):
            raise CannotModifySelfError

        if password is not None:
            self._credentials.ensure_valid(password)

        # An unchanged stored address is kept even if it predates the syntax check
        if email is not None and email.strip() != principal.email:
            email_obj = Email(email)
            if email_obj.value != principal.email:
                other = await self._principal_repo.find_by_email(email_obj)
                if other is not None and other.id != principal.id:
                    raise EmailAlreadyExistsError(email_obj.value)
                principal.change_email(email_obj, now=now)

        if name is not None and name != principal.name:
            principal.rename(name, now=now)

        if role is not None and role != principal.role:
            principal.change_role(role, now=now)

        deactivated = False
        if active is not None and active != principal.active:
            if active:
                principal.activate(now=now)
            else:
                principal.deactivate(now=now)
                deactivated = True

        await self._principal_repo.save(principal)

        if password is not None:
            await self._credentials.update_password(principal.id, password)

        if deactivated:
            await self._token_service.revoke_all_for_principal(principal.id)

        logger.info("Updated principal: %s", principal.id)
        return principal

    async def delete_principal(self, principal_id: UUID) -> None:
        """Soft or hard delete, depending on configuration. Tokens are always revoked."""
        principal = await self.get_principal(principal_id)
        await self._token_service.revoke_all_for_principal(principal.id)

        if self._config.hard_delete:
            await self._principal_repo.delete(principal.id)
            logger.info("Deleted principal: %s", principal.id)
            return

        if principal.active:
            principal.deactivate(now=self._clock.now())
            await self._principal_repo.save(principal)
        logger.info("Deactivated principal: %s", principal.id)

    async def has_any_principals(self) -> bool:
        return await self._principal_repo.count() > 0
