"""Password policy, hashing and stored-credential updates."""

from __future__ import annotations

import logging
from typing import Optional, Union
from uuid import UUID

from keyhold_identity.application.config import IdentityConfig
from keyhold_identity.domain.principal import (
    Email,
    PrincipalCredentials,
    PrincipalRepository,
)
from keyhold_identity.exceptions import (
    InvalidEmailError,
    PrincipalNotFoundError,
    WeakPasswordError,
)
from keyhold_identity.services import (
    PasswordHashingService,
    PasswordPolicy,
    PasswordPolicyValidator,
    PasswordValidationResult,
)

logger = logging.getLogger(__name__)

# Verified against when the email is unknown so both login failures cost one bcrypt check
_DUMMY_SECRET = "keyhold-timing-equalizer"


class CredentialStore:
    """Hashes, verifies and stores principal passwords.

    Policy evaluation never raises; ``ensure_valid`` is the explicit
    rejecting variant used by code paths that accept a new password.
    """

    def __init__(
        self,
        principal_repository: PrincipalRepository,
        password_service: PasswordHashingService,
        config: IdentityConfig,
        policy_validator: Optional[PasswordPolicyValidator] = None,
    ):
        self._principal_repo = principal_repository
        self._password_service = password_service
        self._config = config
        self._validator = policy_validator or PasswordPolicyValidator(
            config.password_policy,
        )
        self._dummy_hash: Optional[str] = None

    @property
    def policy(self) -> PasswordPolicy:
        return self._config.password_policy

    def validate_policy(
        self,
        password: str,
        policy: Optional[PasswordPolicy] = None,
    ) -> PasswordValidationResult:
        """Evaluate a password. Violations are reported, not raised."""
        return self._validator.validate(password, policy or self._config.password_policy)

    def ensure_valid(self, password: str) -> PasswordValidationResult:
        """Evaluate a password and raise if it breaks the policy.

        Raises
        ------
        WeakPasswordError
            Carrying the full validation result
        """
        result = self.validate_policy(password)
        if not result.is_valid:
            raise WeakPasswordError(result=result)
        return result

    def hash(self, password: str) -> str:
        return self._password_service.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        return self._password_service.verify(password, password_hash)

    async def update_password(self, principal_id: UUID, new_password: str) -> None:
        """Validate, hash and store a new password for a principal.

        Raises
        ------
        WeakPasswordError
            If the password breaks the policy
        PrincipalNotFoundError
            If no principal has this ID
        """
        self.ensure_valid(new_password)
        new_hash = self.hash(new_password)
        updated = await self._principal_repo.update_password_hash(principal_id, new_hash)
        if not updated:
            raise PrincipalNotFoundError(str(principal_id))
        logger.info("Password updated for principal: %s", principal_id)

    async def update_password_by_email(
        self,
        email: Union[str, Email],
        new_password: str,
    ) -> bool:
        """Same as ``update_password`` keyed by email.

        Returns False when no principal has this email.
        """
        self.ensure_valid(new_password)
        principal = await self._principal_repo.find_by_email(email)
        if principal is None:
            return False
        new_hash = self.hash(new_password)
        updated = await self._principal_repo.update_password_hash(principal.id, new_hash)
        if updated:
            logger.info("Password updated for principal: %s", principal.id)
        return updated

    async def verify_principal(
        self,
        email: str,
        password: str,
    ) -> Optional[PrincipalCredentials]:
        """Check an email/password pair.

        Unknown, malformed and wrong-password cases all return None after
        exactly one bcrypt comparison.
        """
        try:
            credentials = await self._principal_repo.find_credentials_by_email(email)
        except InvalidEmailError:
            credentials = None

        if credentials is None:
            self.verify(password, self._get_dummy_hash())
            logger.debug("Credential check for unknown email")
            return None

        if not self.verify(password, credentials.password_hash):
            logger.debug("Credential check failed for principal: %s", credentials.principal.id)
            return None

        if self._password_service.needs_rehash(credentials.password_hash):
            credentials = await self._rehash(credentials, password)

        return credentials

    async def _rehash(
        self,
        credentials: PrincipalCredentials,
        password: str,
    ) -> PrincipalCredentials:
        # Only reachable with the plaintext in hand, i.e. right after a match
        principal_id = credentials.principal.id
        new_hash = self.hash(password)
        await self._principal_repo.update_password_hash(principal_id, new_hash)
        logger.info(
            "Rehashed password for principal %s with %d rounds",
            principal_id,
            self._password_service.rounds,
        )
        return PrincipalCredentials(principal=credentials.principal, password_hash=new_hash)

    def _get_dummy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = self._password_service.hash(_DUMMY_SECRET)
        return self._dummy_hash
