"""Schema migrations."""

from keyhold_identity.infrastructure.migrations.base import (
    MigrationRecord,
    MigrationReport,
    MigrationStep,
)
from keyhold_identity.infrastructure.migrations.inspector import SchemaInspector
from keyhold_identity.infrastructure.migrations.migrator import SchemaMigrator
from keyhold_identity.infrastructure.migrations.steps import (
    DEFAULT_MIGRATIONS,
    add_column_if_absent,
)

__all__ = [
    "DEFAULT_MIGRATIONS",
    "MigrationRecord",
    "MigrationReport",
    "MigrationStep",
    "SchemaInspector",
    "SchemaMigrator",
    "add_column_if_absent",
]
