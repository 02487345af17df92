"""Abstract repository interfaces for tokens and reset records."""

from keyhold_identity.repositories.password_reset_repository import (
    PasswordResetRecord,
    PasswordResetRepository,
)
from keyhold_identity.repositories.session_token_repository import (
    SessionTokenData,
    SessionTokenRepository,
)

__all__ = [
    "PasswordResetRecord",
    "PasswordResetRepository",
    "SessionTokenData",
    "SessionTokenRepository",
]
