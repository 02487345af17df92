"""Identity and authentication exceptions.

These exceptions are raised by the keyhold_identity package and should be
caught and handled by the calling layer. Every class derives from
``KeyholdError`` and carries a human readable ``message``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from keyhold_identity.services.password_policy import PasswordValidationResult


class KeyholdError(Exception):
    """Base exception for all keyhold errors."""

    def __init__(self, message: str = "Identity error"):
        self.message = message
        super().__init__(self.message)


# -----------------------------------------------------------------------------
# Validation
# -----------------------------------------------------------------------------


class ValidationError(KeyholdError):
    """Raised for bad input shape or policy violations."""

    def __init__(self, message: str = "Invalid input"):
        super().__init__(message)


class InvalidEmailError(ValidationError):
    """Raised when email format is invalid."""

    def __init__(self, message: str = "Invalid email address"):
        super().__init__(message)


class WeakPasswordError(ValidationError):
    """Raised when a password doesn't meet the configured policy."""

    def __init__(
        self,
        message: str = "Password does not meet requirements",
        result: PasswordValidationResult | None = None,
    ):
        self.result = result
        if result is not None and result.violations:
            codes = ", ".join(v.value for v in result.violations)
            message = f"{message}: {codes}"
        super().__init__(message)


# -----------------------------------------------------------------------------
# Authentication
# -----------------------------------------------------------------------------


class AuthenticationError(KeyholdError):
    """Opaque "not authenticated" outcome. Never says why."""

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class InvalidCredentialsError(AuthenticationError):
    """Raised when email or password is incorrect during login."""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


class InactivePrincipalError(AuthenticationError):
    """Raised when an authenticated principal is deactivated."""

    def __init__(self, message: str = "Account is inactive"):
        super().__init__(message)


class UnverifiedIdentityError(AuthenticationError):
    """Raised when an external identity does not assert a verified email."""

    def __init__(self, message: str = "External identity email is not verified"):
        super().__init__(message)


class PrincipalNotRegisteredError(AuthenticationError):
    """Raised when an external identity maps to no local principal."""

    def __init__(self, message: str = "No account is registered for this identity"):
        super().__init__(message)


class InvalidResetTokenError(AuthenticationError):
    """Raised when a password reset token is invalid."""

    def __init__(self, message: str = "Invalid password reset token"):
        super().__init__(message)


# -----------------------------------------------------------------------------
# Conflicts
# -----------------------------------------------------------------------------


class ConflictError(KeyholdError):
    """Raised when a uniqueness constraint would be violated."""

    def __init__(self, message: str = "Conflicting record"):
        super().__init__(message)


class EmailAlreadyExistsError(ConflictError):
    """Email already registered."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Email already registered: {email}")


class ExternalIdentityConflictError(ConflictError):
    """External identity already linked to another principal."""

    def __init__(self, external_id: str):
        self.external_id = external_id
        super().__init__(f"External identity already linked: {external_id}")


class TokenCollisionError(ConflictError):
    """A freshly generated session token already exists in the store."""

    def __init__(self, message: str = "Session token collision"):
        super().__init__(message)


class MigrationAlreadyAppliedError(ConflictError):
    """Another writer recorded the migration first."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Migration already recorded: {name}")


# -----------------------------------------------------------------------------
# Expiry, configuration, persistence
# -----------------------------------------------------------------------------


class ExpiredError(KeyholdError):
    """Raised when a time-boxed credential is past its window."""

    def __init__(self, message: str = "Credential has expired"):
        super().__init__(message)


class ResetTokenExpiredError(ExpiredError):
    """Raised when a password reset token is past its window."""

    def __init__(self, message: str = "Password reset token has expired"):
        super().__init__(message)


class ConfigurationError(KeyholdError):
    """Raised for missing or unsafe configuration. Fatal at startup."""

    def __init__(self, message: str = "Invalid configuration"):
        super().__init__(message)


class PersistenceError(KeyholdError):
    """Raised when the store is unreachable or a store call fails."""

    def __init__(self, message: str = "Persistence failure"):
        super().__init__(message)


class MigrationFailedError(PersistenceError):
    """Raised when a migration step fails. Remaining steps stay pending."""

    def __init__(self, name: str, reason: str = ""):
        self.name = name
        message = f"Migration {name} failed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


# -----------------------------------------------------------------------------
# Principal administration
# -----------------------------------------------------------------------------


class PrincipalNotFoundError(KeyholdError):
    """Principal not found."""

    def __init__(self, principal_id: str):
        self.principal_id = principal_id
        super().__init__(f"Principal not found: {principal_id}")


class CannotModifySelfError(KeyholdError):
    """An actor tried to change its own active status."""

    def __init__(self, message: str = "You cannot change your own active status"):
        super().__init__(message)
