"""Application services for identity management."""

from keyhold_identity.application.services.authentication_service import (
    AuthenticationService,
)
from keyhold_identity.application.services.credential_store import CredentialStore
from keyhold_identity.application.services.identity_linking_service import (
    OAUTH_TOKEN_LABEL,
    ExternalIdentity,
    IdentityLinkingService,
)
from keyhold_identity.application.services.password_reset_service import (
    PasswordResetService,
    ResetOutcome,
)
from keyhold_identity.application.services.principal_service import PrincipalService
from keyhold_identity.application.services.registration_service import (
    RegistrationService,
)
from keyhold_identity.application.services.session_token_service import (
    DEFAULT_TOKEN_LABEL,
    IssuedToken,
    SessionTokenService,
    SweepResult,
)

__all__ = [
    "DEFAULT_TOKEN_LABEL",
    "OAUTH_TOKEN_LABEL",
    "AuthenticationService",
    "CredentialStore",
    "ExternalIdentity",
    "IdentityLinkingService",
    "IssuedToken",
    "PasswordResetService",
    "PrincipalService",
    "RegistrationService",
    "ResetOutcome",
    "SessionTokenService",
    "SweepResult",
]
