"""Schema migrations against a real PostgreSQL instance."""

import pytest
from sqlalchemy import text

from keyhold_identity import MigrationFailedError
from keyhold_identity.infrastructure.migrations import (
    DEFAULT_MIGRATIONS,
    MigrationStep,
    SchemaMigrator,
)

pytestmark = pytest.mark.integration


class TestPostgresMigrations:
    @pytest.mark.asyncio
    async def test_clean_database_is_ready(self, clean_postgres):
        migrator = SchemaMigrator(clean_postgres)

        assert await migrator.check_schema_ready() is True
        assert await migrator.applied_migrations() == [
            step.name for step in DEFAULT_MIGRATIONS
        ]

    @pytest.mark.asyncio
    async def test_reapply_is_a_no_op(self, clean_postgres):
        report = await SchemaMigrator(clean_postgres).apply()

        assert report.applied == ()

    @pytest.mark.asyncio
    async def test_failed_step_leaves_no_partial_change(self, clean_postgres):
        async def half_done(conn) -> None:
            await conn.execute(text("CREATE TABLE half_done (id INTEGER)"))
            msg = "second statement failed"
            raise RuntimeError(msg)

        migrator = SchemaMigrator(
            clean_postgres,
            steps=[*DEFAULT_MIGRATIONS, MigrationStep("half_done", half_done)],
        )

        with pytest.raises(MigrationFailedError):
            await migrator.apply()

        assert not await migrator.inspector.table_exists("half_done")
        pending = [s.name for s in await migrator.pending_migrations()]
        assert pending == ["half_done"]
