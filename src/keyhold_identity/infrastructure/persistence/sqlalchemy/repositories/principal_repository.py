"""SQLAlchemy implementation of PrincipalRepository."""

import logging
from typing import Optional, Union
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from keyhold_identity.domain.principal import (
    Email,
    Principal,
    PrincipalCredentials,
    PrincipalRepository,
)
from keyhold_identity.domain.shared.time import ensure_tz_aware, utc_now
from keyhold_identity.exceptions import (
    EmailAlreadyExistsError,
    ExternalIdentityConflictError,
    PrincipalNotFoundError,
)
from keyhold_identity.infrastructure.persistence.sqlalchemy.models import (
    PrincipalModel,
)
from keyhold_identity.infrastructure.persistence.sqlalchemy.repositories._utils import (
    integrity_detail,
    translate_store_errors,
)

logger = logging.getLogger(__name__)


class PrincipalRepositorySQLAlchemy(PrincipalRepository):
    """SQLAlchemy implementation of the PrincipalRepository interface."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @translate_store_errors
    async def find_by_id(self, principal_id: UUID) -> Optional[Principal]:
        model = await self._find_model_by_id(principal_id)
        if model is None:
            return None
        return self._map_to_domain(model)

    @translate_store_errors
    async def find_by_email(self, email: Union[str, Email]) -> Optional[Principal]:
        model = await self._find_model_by_email(email)
        if model is None:
            return None
        return self._map_to_domain(model)

    @translate_store_errors
    async def find_by_external_id(self, external_id: str) -> Optional[Principal]:
        stmt = select(PrincipalModel).where(PrincipalModel.external_id == external_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            return None
        return self._map_to_domain(model)

    @translate_store_errors
    async def find_credentials_by_id(
        self,
        principal_id: UUID,
    ) -> Optional[PrincipalCredentials]:
        model = await self._find_model_by_id(principal_id)
        if model is None:
            return None
        return self._map_to_credentials(model)

    @translate_store_errors
    async def find_credentials_by_email(
        self,
        email: Union[str, Email],
    ) -> Optional[PrincipalCredentials]:
        model = await self._find_model_by_email(email)
        if model is None:
            return None
        return self._map_to_credentials(model)

    @translate_store_errors
    async def add(self, principal: Principal, password_hash: str) -> None:
        model = self._map_to_model(principal, password_hash)
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as e:
            self._raise_conflict(e, principal)
        logger.info("Created principal: %s", principal.id)

    @translate_store_errors
    async def save(self, principal: Principal) -> None:
        model = await self._find_model_by_id(principal.id)
        if model is None:
            raise PrincipalNotFoundError(str(principal.id))

        self._update_model(model, principal)
        try:
            await self._session.flush()
        except IntegrityError as e:
            self._raise_conflict(e, principal)
        logger.debug("Updated principal: %s", principal.id)

    @translate_store_errors
    async def update_password_hash(
        self,
        principal_id: UUID,
        password_hash: str,
    ) -> bool:
        stmt = (
            update(PrincipalModel)
            .where(PrincipalModel.id == principal_id)
            .values(password_hash=password_hash, updated_at=utc_now())
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        return result.rowcount > 0  # type: ignore[attr-defined]

    @translate_store_errors
    async def delete(self, principal_id: UUID) -> bool:
        stmt = delete(PrincipalModel).where(PrincipalModel.id == principal_id)
        result = await self._session.execute(stmt)
        await self._session.flush()
        deleted = result.rowcount > 0  # type: ignore[attr-defined]
        if deleted:
            logger.info("Deleted principal: %s", principal_id)
        return deleted

    @translate_store_errors
    async def count(self) -> int:
        stmt = select(func.count()).select_from(PrincipalModel)
        result = await self._session.execute(stmt)
        return result.scalar_one()

    @translate_store_errors
    async def list_all(self, include_inactive: bool = True) -> list[Principal]:
        stmt = select(PrincipalModel).order_by(PrincipalModel.created_at)
        if not include_inactive:
            stmt = stmt.where(PrincipalModel.active.is_(True))
        result = await self._session.execute(stmt)
        return [self._map_to_domain(model) for model in result.scalars().all()]

    async def _find_model_by_id(self, principal_id: UUID) -> Optional[PrincipalModel]:
        stmt = select(PrincipalModel).where(PrincipalModel.id == principal_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def _find_model_by_email(
        self,
        email: Union[str, Email],
    ) -> Optional[PrincipalModel]:
        # Lookups never reject input; a malformed address simply matches nothing
        if not isinstance(email, Email):
            email = Email.trusted(email)
        email_value = email.value
        stmt = select(PrincipalModel).where(PrincipalModel.email == email_value)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _raise_conflict(self, error: IntegrityError, principal: Principal) -> None:
        detail = integrity_detail(error)
        if "external_id" in detail and principal.external_id is not None:
            raise ExternalIdentityConflictError(principal.external_id) from error
        if "email" in detail:
            raise EmailAlreadyExistsError(principal.email) from error
        raise error

    def _map_to_domain(self, model: PrincipalModel) -> Principal:
        return Principal.reconstitute(
            id=model.id,
            email=model.email,
            name=model.name,
            role=model.role,
            active=model.active,
            external_id=model.external_id,
            avatar_url=model.avatar_url,
            created_at=ensure_tz_aware(model.created_at),
            updated_at=ensure_tz_aware(model.updated_at),
        )

    def _map_to_credentials(self, model: PrincipalModel) -> PrincipalCredentials:
        return PrincipalCredentials(
            principal=self._map_to_domain(model),
            password_hash=model.password_hash,
        )

    def _map_to_model(self, principal: Principal, password_hash: str) -> PrincipalModel:
        return PrincipalModel(
            id=principal.id,
            email=principal.email,
            name=principal.name,
            password_hash=password_hash,
            role=principal.role,
            active=principal.active,
            external_id=principal.external_id,
            avatar_url=principal.avatar_url,
            created_at=principal.created_at,
            updated_at=principal.updated_at,
        )

    def _update_model(self, model: PrincipalModel, principal: Principal) -> None:
        model.email = principal.email
        model.name = principal.name
        model.role = principal.role
        model.active = principal.active
        model.external_id = principal.external_id
        model.avatar_url = principal.avatar_url
        model.updated_at = principal.updated_at
