"""Infrastructure adapters: persistence, migrations, mail and system ports."""

from keyhold_identity.infrastructure.database import (
    create_engine,
    create_session_maker,
    session_scope,
)
from keyhold_identity.infrastructure.email import SmtpMailer, build_mailer
from keyhold_identity.infrastructure.factory import IdentityServiceFactory
from keyhold_identity.infrastructure.migrations import (
    DEFAULT_MIGRATIONS,
    MigrationReport,
    MigrationStep,
    SchemaInspector,
    SchemaMigrator,
)
from keyhold_identity.infrastructure.system import SecureRandomSource, SystemClock

__all__ = [
    "DEFAULT_MIGRATIONS",
    "IdentityServiceFactory",
    "MigrationReport",
    "MigrationStep",
    "SchemaInspector",
    "SchemaMigrator",
    "SecureRandomSource",
    "SmtpMailer",
    "SystemClock",
    "build_mailer",
    "create_engine",
    "create_session_maker",
    "session_scope",
]
