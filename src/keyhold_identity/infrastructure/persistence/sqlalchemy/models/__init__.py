"""SQLAlchemy models for keyhold."""

from keyhold_identity.infrastructure.persistence.sqlalchemy.models.migration_model import (
    MigrationModel,
)
from keyhold_identity.infrastructure.persistence.sqlalchemy.models.password_reset_model import (
    PasswordResetModel,
)
from keyhold_identity.infrastructure.persistence.sqlalchemy.models.principal_model import (
    PrincipalModel,
)
from keyhold_identity.infrastructure.persistence.sqlalchemy.models.session_token_model import (
    SessionTokenModel,
)

__all__ = [
    "MigrationModel",
    "PasswordResetModel",
    "PrincipalModel",
    "SessionTokenModel",
]
