"""Schema introspection that separates "absent" from "unreachable"."""

import logging
from collections.abc import Callable
from typing import TypeVar

from sqlalchemy import Connection, inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from keyhold_identity.exceptions import PersistenceError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def has_column(conn: Connection, table: str, column: str) -> bool:
    inspector = inspect(conn)
    if not inspector.has_table(table):
        return False
    return any(c["name"] == column for c in inspector.get_columns(table))


def has_index(conn: Connection, table: str, index: str) -> bool:
    inspector = inspect(conn)
    if not inspector.has_table(table):
        return False
    return any(i["name"] == index for i in inspector.get_indexes(table))


class SchemaInspector:
    """Answers questions about the live schema.

    Every method raises ``PersistenceError`` when the store cannot be
    reached, and returns False only when the object is genuinely missing.
    """

    def __init__(self, engine: AsyncEngine):
        self._engine = engine

    async def table_exists(self, name: str) -> bool:
        return await self._inspect(lambda conn: inspect(conn).has_table(name))

    async def column_exists(self, table: str, column: str) -> bool:
        return await self._inspect(lambda conn: has_column(conn, table, column))

    async def index_exists(self, table: str, name: str) -> bool:
        return await self._inspect(lambda conn: has_index(conn, table, name))

    async def table_names(self) -> list[str]:
        return await self._inspect(
            lambda conn: sorted(inspect(conn).get_table_names()),
        )

    async def _inspect(self, fn: Callable[[Connection], T]) -> T:
        try:
            async with self._engine.connect() as conn:
                return await conn.run_sync(fn)
        except (SQLAlchemyError, OSError) as e:
            logger.error("Schema inspection failed: %s", e)
            msg = f"Schema inspection failed: {e}"
            raise PersistenceError(msg) from e
