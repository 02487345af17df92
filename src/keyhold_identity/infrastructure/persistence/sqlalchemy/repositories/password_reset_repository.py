"""SQLAlchemy implementation of PasswordResetRepository."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from keyhold_identity.domain.shared.time import ensure_tz_aware
from keyhold_identity.infrastructure.persistence.sqlalchemy.models import (
    PasswordResetModel,
)
from keyhold_identity.infrastructure.persistence.sqlalchemy.repositories._utils import (
    translate_store_errors,
)
from keyhold_identity.repositories import (
    PasswordResetRecord,
    PasswordResetRepository,
)


class PasswordResetRepositorySQLAlchemy(PasswordResetRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    @translate_store_errors
    async def create(self, email: str, token_hash: str, now: datetime) -> UUID:
        record_id = uuid4()
        model = PasswordResetModel(
            id=record_id,
            email=email,
            token_hash=token_hash,
            created_at=now,
        )
        self._session.add(model)
        await self._session.flush()
        return record_id

    @translate_store_errors
    async def find_all_for_email(self, email: str) -> list[PasswordResetRecord]:
        stmt = (
            select(PasswordResetModel)
            .where(PasswordResetModel.email == email)
            .order_by(PasswordResetModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [
            PasswordResetRecord(
                id=model.id,
                email=model.email,
                token_hash=model.token_hash,
                created_at=ensure_tz_aware(model.created_at),
            )
            for model in result.scalars().all()
        ]

    @translate_store_errors
    async def delete_by_id(self, record_id: UUID) -> int:
        stmt = delete(PasswordResetModel).where(PasswordResetModel.id == record_id)
        return await self._execute_delete(stmt)

    @translate_store_errors
    async def delete_all_for_email(self, email: str) -> int:
        stmt = delete(PasswordResetModel).where(PasswordResetModel.email == email)
        return await self._execute_delete(stmt)

    @translate_store_errors
    async def delete_created_before(self, cutoff: datetime) -> int:
        stmt = (
            delete(PasswordResetModel)
            .where(PasswordResetModel.created_at < cutoff)
            .execution_options(synchronize_session=False)
        )
        return await self._execute_delete(stmt)

    async def _execute_delete(self, stmt) -> int:
        result = await self._session.execute(stmt)
        await self._session.flush()
        return result.rowcount  # type: ignore[attr-defined]
