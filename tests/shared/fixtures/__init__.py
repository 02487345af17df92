"""Shared pytest fixtures for all test packages."""

from tests.shared.fixtures.database import (
    async_engine,
    clean_postgres,
    db_session,
    db_session_maker,
    migrated_engine,
    postgres_container,
    sqlite_engine,
    sqlite_session,
    sqlite_session_maker,
)
from tests.shared.fixtures.doubles import (
    FIXED_NOW,
    FixedClock,
    RecordingMailer,
    RepeatingRandomSource,
    SequenceRandomSource,
)
from tests.shared.fixtures.factories import (
    STRONG_PASSWORD,
    TestPrincipalFactory,
    make_config,
)

__all__ = [
    "FIXED_NOW",
    "STRONG_PASSWORD",
    "FixedClock",
    "RecordingMailer",
    "RepeatingRandomSource",
    "SequenceRandomSource",
    "TestPrincipalFactory",
    "async_engine",
    "clean_postgres",
    "db_session",
    "db_session_maker",
    "migrated_engine",
    "postgres_container",
    "sqlite_engine",
    "sqlite_session",
    "sqlite_session_maker",
    "make_config",
]
