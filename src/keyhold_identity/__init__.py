"""Keyhold Identity - principals, credentials, sessions and password resets.

This package handles:
- Principal management (CRUD, roles, soft delete)
- Authentication (password login, opaque session tokens)
- Password policy, hashing and one-time reset tokens
- Linking verified external identities to local principals
- Ordered, idempotent schema migrations
"""

from keyhold_identity.application import (
    ExpiryConfig,
    IdentityConfig,
    SweepConfig,
    has_permission,
    is_whitelisted,
    path_matches_pattern,
)
from keyhold_identity.application.ports import Clock, Mailer, RandomSource
from keyhold_identity.application.services import (
    AuthenticationService,
    CredentialStore,
    ExternalIdentity,
    IdentityLinkingService,
    IssuedToken,
    PasswordResetService,
    PrincipalService,
    RegistrationService,
    SessionTokenService,
    SweepResult,
)
from keyhold_identity.domain.principal import (
    ADMIN_ROLE,
    DEFAULT_ROLE,
    Email,
    Principal,
    PrincipalCredentials,
    PrincipalRepository,
)
from keyhold_identity.exceptions import (
    AuthenticationError,
    CannotModifySelfError,
    ConfigurationError,
    ConflictError,
    EmailAlreadyExistsError,
    ExpiredError,
    ExternalIdentityConflictError,
    InactivePrincipalError,
    InvalidCredentialsError,
    InvalidEmailError,
    InvalidResetTokenError,
    KeyholdError,
    MigrationAlreadyAppliedError,
    MigrationFailedError,
    PersistenceError,
    PrincipalNotFoundError,
    PrincipalNotRegisteredError,
    ResetTokenExpiredError,
    TokenCollisionError,
    UnverifiedIdentityError,
    ValidationError,
    WeakPasswordError,
)
from keyhold_identity.repositories import (
    PasswordResetRecord,
    PasswordResetRepository,
    SessionTokenData,
    SessionTokenRepository,
)
from keyhold_identity.services import (
    PasswordHashingService,
    PasswordPolicy,
    PasswordPolicyValidator,
    PasswordValidationResult,
)

__all__ = [
    # Domain - Principal
    "ADMIN_ROLE",
    "DEFAULT_ROLE",
    "Email",
    "Principal",
    "PrincipalCredentials",
    "PrincipalRepository",
    # Exceptions
    "AuthenticationError",
    "CannotModifySelfError",
    "ConfigurationError",
    "ConflictError",
    "EmailAlreadyExistsError",
    "ExpiredError",
    "ExternalIdentityConflictError",
    "InactivePrincipalError",
    "InvalidCredentialsError",
    "InvalidEmailError",
    "InvalidResetTokenError",
    "KeyholdError",
    "MigrationAlreadyAppliedError",
    "MigrationFailedError",
    "PersistenceError",
    "PrincipalNotFoundError",
    "PrincipalNotRegisteredError",
    "ResetTokenExpiredError",
    "TokenCollisionError",
    "UnverifiedIdentityError",
    "ValidationError",
    "WeakPasswordError",
    # Repositories
    "PasswordResetRecord",
    "PasswordResetRepository",
    "SessionTokenData",
    "SessionTokenRepository",
    # Services
    "PasswordHashingService",
    "PasswordPolicy",
    "PasswordPolicyValidator",
    "PasswordValidationResult",
    # Application
    "AuthenticationService",
    "Clock",
    "CredentialStore",
    "ExpiryConfig",
    "ExternalIdentity",
    "IdentityConfig",
    "IdentityLinkingService",
    "IssuedToken",
    "Mailer",
    "PasswordResetService",
    "PrincipalService",
    "RandomSource",
    "RegistrationService",
    "SessionTokenService",
    "SweepConfig",
    "SweepResult",
    "has_permission",
    "is_whitelisted",
    "path_matches_pattern",
]
