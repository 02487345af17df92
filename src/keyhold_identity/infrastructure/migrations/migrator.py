"""Ordered, exactly-once schema migrations."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Optional

from sqlalchemy import insert, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from keyhold_identity.application.ports import Clock
from keyhold_identity.domain.shared.time import ensure_tz_aware
from keyhold_identity.exceptions import (
    MigrationAlreadyAppliedError,
    MigrationFailedError,
    PersistenceError,
)
from keyhold_identity.infrastructure.migrations.base import (
    MigrationRecord,
    MigrationReport,
    MigrationStep,
)
from keyhold_identity.infrastructure.migrations.inspector import SchemaInspector
from keyhold_identity.infrastructure.migrations.steps import (
    DEFAULT_MIGRATIONS,
    MIGRATIONS_TABLE_STEP,
)
from keyhold_identity.infrastructure.persistence.sqlalchemy.models import (
    MigrationModel,
)
from keyhold_identity.infrastructure.system import SystemClock

logger = logging.getLogger(__name__)

MIGRATIONS_TABLE = MigrationModel.__tablename__


class SchemaMigrator:
    """Applies named migrations exactly once, in declaration order.

    Each step runs in one transaction together with the insert that records
    it. The unique migration name makes a second process's insert fail; that
    step is then rolled back and reported as raced instead of failed.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        steps: Optional[Sequence[MigrationStep]] = None,
        clock: Optional[Clock] = None,
    ):
        self._engine = engine
        self._steps = tuple(steps) if steps is not None else DEFAULT_MIGRATIONS
        self._clock = clock or SystemClock()
        self._inspector = SchemaInspector(engine)

    @property
    def inspector(self) -> SchemaInspector:
        return self._inspector

    @property
    def steps(self) -> tuple[MigrationStep, ...]:
        return self._steps

    async def applied_records(self) -> list[MigrationRecord]:
        """Recorded migrations in application order.

        Raises
        ------
        PersistenceError
            If the store cannot be reached
        """
        if not await self._inspector.table_exists(MIGRATIONS_TABLE):
            return []

        stmt = select(MigrationModel).order_by(MigrationModel.id)
        try:
            async with self._engine.connect() as conn:
                rows = (await conn.execute(stmt)).all()
        except (SQLAlchemyError, OSError) as e:
            msg = f"Could not read applied migrations: {e}"
            raise PersistenceError(msg) from e

        return [
            MigrationRecord(
                id=row.id,
                name=row.name,
                executed_at=ensure_tz_aware(row.executed_at),
            )
            for row in rows
        ]

    async def applied_migrations(self) -> list[str]:
        return [record.name for record in await self.applied_records()]

    async def pending_migrations(
        self,
        steps: Optional[Sequence[MigrationStep]] = None,
    ) -> list[MigrationStep]:
        """Steps not yet recorded, in declaration order."""
        applied = set(await self.applied_migrations())
        return [step for step in self._resolve(steps) if step.name not in applied]

    async def apply(
        self,
        steps: Optional[Sequence[MigrationStep]] = None,
    ) -> MigrationReport:
        """Run every pending step.

        Raises
        ------
        MigrationFailedError
            On the first failing step; later steps stay pending
        PersistenceError
            If the store cannot be reached
        """
        steps = self._resolve(steps)
        await self._ensure_migrations_table()

        pending = await self.pending_migrations(steps)
        if not pending:
            logger.info("Schema is up to date")
            return MigrationReport()

        applied: list[str] = []
        raced: list[str] = []
        for step in pending:
            try:
                await self._run_step(step)
            except MigrationAlreadyAppliedError:
                logger.warning(
                    "Migration %s was recorded by another process; rolled back",
                    step.name,
                )
                raced.append(step.name)
                continue
            applied.append(step.name)

        logger.info("Applied %d migration(s)", len(applied))
        return MigrationReport(applied=tuple(applied), raced=tuple(raced))

    async def check_schema_ready(self) -> bool:
        """Readiness check: True when every known migration is recorded.

        Never raises; store failures count as not ready.
        """
        try:
            if not await self._inspector.table_exists(MIGRATIONS_TABLE):
                return False
            return not await self.pending_migrations()
        except PersistenceError as e:
            logger.warning("Schema readiness check failed: %s", e)
            return False

    def _resolve(
        self,
        steps: Optional[Sequence[MigrationStep]],
    ) -> tuple[MigrationStep, ...]:
        return tuple(steps) if steps is not None else self._steps

    async def _ensure_migrations_table(self) -> None:
        try:
            async with self._engine.begin() as conn:
                await MIGRATIONS_TABLE_STEP.run(conn)
        except (SQLAlchemyError, OSError) as e:
            msg = f"Could not create {MIGRATIONS_TABLE} table: {e}"
            raise PersistenceError(msg) from e

    async def _run_step(self, step: MigrationStep) -> None:
        logger.info("Applying migration: %s", step.name)
        try:
            async with self._engine.begin() as conn:
                await step.run(conn)
                try:
                    await conn.execute(
                        insert(MigrationModel).values(
                            name=step.name,
                            executed_at=self._clock.now(),
                        ),
                    )
                except IntegrityError as e:
                    raise MigrationAlreadyAppliedError(step.name) from e
        except MigrationAlreadyAppliedError:
            raise
        except Exception as e:
            logger.error("Migration %s failed: %s", step.name, e)
            raise MigrationFailedError(step.name, str(e)) from e
