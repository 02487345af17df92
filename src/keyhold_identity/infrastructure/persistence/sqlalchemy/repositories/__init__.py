"""SQLAlchemy repository implementations."""

from keyhold_identity.infrastructure.persistence.sqlalchemy.repositories.password_reset_repository import (
    PasswordResetRepositorySQLAlchemy,
)
from keyhold_identity.infrastructure.persistence.sqlalchemy.repositories.principal_repository import (
    PrincipalRepositorySQLAlchemy,
)
from keyhold_identity.infrastructure.persistence.sqlalchemy.repositories.session_token_repository import (
    SessionTokenRepositorySQLAlchemy,
)

__all__ = [
    "PasswordResetRepositorySQLAlchemy",
    "PrincipalRepositorySQLAlchemy",
    "SessionTokenRepositorySQLAlchemy",
]
