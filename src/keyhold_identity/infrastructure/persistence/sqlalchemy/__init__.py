"""SQLAlchemy persistence for keyhold."""

from keyhold_identity.infrastructure.persistence.sqlalchemy.base import (
    Base,
    TimestampMixin,
)
from keyhold_identity.infrastructure.persistence.sqlalchemy.models import (
    MigrationModel,
    PasswordResetModel,
    PrincipalModel,
    SessionTokenModel,
)
from keyhold_identity.infrastructure.persistence.sqlalchemy.repositories import (
    PasswordResetRepositorySQLAlchemy,
    PrincipalRepositorySQLAlchemy,
    SessionTokenRepositorySQLAlchemy,
)

__all__ = [
    "Base",
    "MigrationModel",
    "PasswordResetModel",
    "PasswordResetRepositorySQLAlchemy",
    "PrincipalModel",
    "PrincipalRepositorySQLAlchemy",
    "SessionTokenModel",
    "SessionTokenRepositorySQLAlchemy",
    "TimestampMixin",
]
