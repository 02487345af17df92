"""
Pytest configuration for keyhold_identity integration tests.

Integration tests use Testcontainers for an ephemeral PostgreSQL instance.
Import the shared fixtures to make them available.
"""

# Re-export shared database fixtures
from tests.shared.fixtures.database import (
    async_engine,
    clean_postgres,
    db_session,
    db_session_maker,
    postgres_container,
)

__all__ = [
    "async_engine",
    "clean_postgres",
    "db_session",
    "db_session_maker",
    "postgres_container",
]
