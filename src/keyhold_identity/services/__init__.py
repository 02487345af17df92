"""Stateless services: secret hashing and password policy evaluation."""

from keyhold_identity.services.password_policy import (
    COMMON_PASSWORDS,
    PasswordHint,
    PasswordPolicy,
    PasswordPolicyValidator,
    PasswordStrength,
    PasswordValidationResult,
    PasswordViolation,
)
from keyhold_identity.services.password_service import (
    BCRYPT_MAX_BYTES,
    PasswordHashingService,
)

__all__ = [
    "BCRYPT_MAX_BYTES",
    "COMMON_PASSWORDS",
    "PasswordHashingService",
    "PasswordHint",
    "PasswordPolicy",
    "PasswordPolicyValidator",
    "PasswordStrength",
    "PasswordValidationResult",
    "PasswordViolation",
]
