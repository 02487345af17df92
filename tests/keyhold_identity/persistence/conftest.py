"""
Pytest configuration for persistence tests on in-memory SQLite.

Re-exports the shared SQLite fixtures and adds a service factory bound to
the test session.
"""

import pytest

from keyhold_identity.infrastructure import IdentityServiceFactory
from tests.shared.fixtures.database import (
    migrated_engine,
    sqlite_engine,
    sqlite_session,
    sqlite_session_maker,
)

__all__ = [
    "migrated_engine",
    "sqlite_engine",
    "sqlite_session",
    "sqlite_session_maker",
]


@pytest.fixture
def factory(sqlite_session, config, mailer, clock, random_source):
    return IdentityServiceFactory(
        sqlite_session,
        config,
        mailer,
        clock=clock,
        random_source=random_source,
    )
