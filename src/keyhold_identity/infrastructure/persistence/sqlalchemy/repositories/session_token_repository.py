"""SQLAlchemy implementation of SessionTokenRepository."""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import delete, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from keyhold_identity.domain.shared.time import ensure_tz_aware
from keyhold_identity.exceptions import PrincipalNotFoundError, TokenCollisionError
from keyhold_identity.infrastructure.persistence.sqlalchemy.models import (
    SessionTokenModel,
)
from keyhold_identity.infrastructure.persistence.sqlalchemy.repositories._utils import (
    integrity_detail,
    translate_store_errors,
)
from keyhold_identity.repositories import SessionTokenData, SessionTokenRepository


class SessionTokenRepositorySQLAlchemy(SessionTokenRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    @translate_store_errors
    async def create(
        self,
        principal_id: UUID,
        label: str,
        token: str,
        expires_at: Optional[datetime],
        now: datetime,
    ) -> SessionTokenData:
        model = SessionTokenModel(
            id=uuid4(),
            principal_id=principal_id,
            label=label,
            token=token,
            expires_at=expires_at,
            last_used_at=None,
            created_at=now,
            updated_at=now,
        )
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as e:
            if "foreign key" in integrity_detail(e):
                raise PrincipalNotFoundError(str(principal_id)) from e
            raise TokenCollisionError from e
        return self._map_to_data(model)

    @translate_store_errors
    async def find_active(self, token: str, now: datetime) -> Optional[SessionTokenData]:
        stmt = select(SessionTokenModel).where(
            SessionTokenModel.token == token,
            or_(
                SessionTokenModel.expires_at.is_(None),
                SessionTokenModel.expires_at > now,
            ),
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            return None
        return self._map_to_data(model)

    @translate_store_errors
    async def touch(self, token_id: UUID, now: datetime) -> None:
        stmt = (
            update(SessionTokenModel)
            .where(SessionTokenModel.id == token_id)
            .values(last_used_at=now, updated_at=now)
        )
        await self._session.execute(stmt)
        await self._session.flush()

    @translate_store_errors
    async def delete_by_token(self, token: str) -> int:
        stmt = delete(SessionTokenModel).where(SessionTokenModel.token == token)
        return await self._execute_delete(stmt)

    @translate_store_errors
    async def delete_all_for_principal(self, principal_id: UUID) -> int:
        stmt = delete(SessionTokenModel).where(
            SessionTokenModel.principal_id == principal_id,
        )
        return await self._execute_delete(stmt)

    @translate_store_errors
    async def delete_expired(self, now: datetime) -> int:
        # Datetime criteria cannot be evaluated against loaded rows
        stmt = (
            delete(SessionTokenModel)
            .where(
                SessionTokenModel.expires_at.is_not(None),
                SessionTokenModel.expires_at <= now,
            )
            .execution_options(synchronize_session=False)
        )
        return await self._execute_delete(stmt)

    @translate_store_errors
    async def delete_without_expiry(self) -> int:
        stmt = delete(SessionTokenModel).where(SessionTokenModel.expires_at.is_(None))
        return await self._execute_delete(stmt)

    @translate_store_errors
    async def list_for_principal(self, principal_id: UUID) -> list[SessionTokenData]:
        stmt = (
            select(SessionTokenModel)
            .where(SessionTokenModel.principal_id == principal_id)
            .order_by(SessionTokenModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._map_to_data(model) for model in result.scalars().all()]

    async def _execute_delete(self, stmt) -> int:
        result = await self._session.execute(stmt)
        await self._session.flush()
        return result.rowcount  # type: ignore[attr-defined]

    def _map_to_data(self, model: SessionTokenModel) -> SessionTokenData:
        return SessionTokenData(
            id=model.id,
            principal_id=model.principal_id,
            label=model.label,
            token=model.token,
            expires_at=_aware_or_none(model.expires_at),
            last_used_at=_aware_or_none(model.last_used_at),
            created_at=ensure_tz_aware(model.created_at),
            updated_at=ensure_tz_aware(model.updated_at),
        )


def _aware_or_none(value: Optional[datetime]) -> Optional[datetime]:
    return ensure_tz_aware(value) if value is not None else None
