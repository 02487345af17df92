"""Built-in schema migrations, in application order.

Every step checks the live schema first, so running it against a database
that already has the change is a no-op.
"""

import logging
from collections.abc import Callable

from sqlalchemy import (
    Boolean,
    Column,
    Connection,
    MetaData,
    String,
    Table,
    Text,
    true,
)
from sqlalchemy.ext.asyncio import AsyncConnection
from sqlalchemy.schema import CreateColumn

from keyhold_identity.infrastructure.migrations.base import MigrationStep, StepRunner
from keyhold_identity.infrastructure.migrations.inspector import has_column, has_index
from keyhold_identity.infrastructure.persistence.sqlalchemy.models import (
    MigrationModel,
    PasswordResetModel,
    PrincipalModel,
    SessionTokenModel,
)

logger = logging.getLogger(__name__)


def _create_table(table: Table) -> StepRunner:
    async def run(conn: AsyncConnection) -> None:
        await conn.run_sync(lambda sync_conn: table.create(sync_conn, checkfirst=True))

    return run


def add_column_if_absent(conn: Connection, table_name: str, column: Column) -> bool:
    """Add ``column`` to an existing table unless it is already there.

    The column definition is compiled for the connection's dialect.
    Returns True when the column was added.
    """
    if has_column(conn, table_name, column.name):
        return False

    # CreateColumn needs the column bound to a table
    Table(table_name, MetaData(), column)
    column_ddl = CreateColumn(column).compile(dialect=conn.dialect)
    table_ddl = conn.dialect.identifier_preparer.quote(table_name)
    conn.exec_driver_sql(f"ALTER TABLE {table_ddl} ADD COLUMN {column_ddl}")
    logger.info("Added column %s.%s", table_name, column.name)
    return True


def _add_columns(table_name: str, columns: Callable[[], list[Column]]) -> StepRunner:
    def add_all(conn: Connection) -> None:
        for column in columns():
            add_column_if_absent(conn, table_name, column)

    async def run(conn: AsyncConnection) -> None:
        await conn.run_sync(add_all)

    return run


def _create_indexes(*tables: Table) -> StepRunner:
    def create_all(conn: Connection) -> None:
        for table in tables:
            for index in sorted(table.indexes, key=lambda i: i.name or ""):
                if has_index(conn, table.name, index.name):
                    continue
                index.create(conn)
                logger.info("Created index %s", index.name)

    async def run(conn: AsyncConnection) -> None:
        await conn.run_sync(create_all)

    return run


def _active_column() -> list[Column]:
    return [Column("active", Boolean(), nullable=False, server_default=true())]


def _external_identity_columns() -> list[Column]:
    return [
        Column("external_id", String(255), nullable=True),
        Column("avatar_url", Text(), nullable=True),
    ]


MIGRATIONS_TABLE_STEP = MigrationStep(
    "create_migrations_table",
    _create_table(MigrationModel.__table__),
)

DEFAULT_MIGRATIONS: tuple[MigrationStep, ...] = (
    MIGRATIONS_TABLE_STEP,
    MigrationStep("create_principals_table", _create_table(PrincipalModel.__table__)),
    MigrationStep(
        "create_session_tokens_table",
        _create_table(SessionTokenModel.__table__),
    ),
    MigrationStep(
        "create_password_resets_table",
        _create_table(PasswordResetModel.__table__),
    ),
    MigrationStep(
        "add_active_to_principals",
        _add_columns("principals", _active_column),
    ),
    MigrationStep(
        "add_external_identity_fields",
        _add_columns("principals", _external_identity_columns),
    ),
    MigrationStep(
        "add_indexes",
        _create_indexes(
            PrincipalModel.__table__,
            SessionTokenModel.__table__,
            PasswordResetModel.__table__,
        ),
    ),
)
