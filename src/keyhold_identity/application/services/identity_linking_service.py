"""Mapping verified external identities onto local principals."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from keyhold_identity.application.config import IdentityConfig
from keyhold_identity.application.ports import Clock, RandomSource
from keyhold_identity.application.services.credential_store import CredentialStore
from keyhold_identity.application.services.session_token_service import (
    IssuedToken,
    SessionTokenService,
)
from keyhold_identity.domain.principal import (
    DEFAULT_ROLE,
    Email,
    Principal,
    PrincipalRepository,
)
from keyhold_identity.exceptions import (
    InactivePrincipalError,
    PrincipalNotRegisteredError,
    UnverifiedIdentityError,
)

logger = logging.getLogger(__name__)

OAUTH_TOKEN_LABEL = "oauth_auth_token"
PLACEHOLDER_PASSWORD_PREFIX = "OAUTH_"
PLACEHOLDER_PASSWORD_BYTES = 32


@dataclass(frozen=True)
class ExternalIdentity:
    """Identity asserted by an external provider after its own sign-in flow."""

    external_id: str
    email: str
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    verified: bool = False


class IdentityLinkingService:
    """Resolves external identities to principals.

    Resolution order: linked external id, then matching email (which links
    the identity), then optional auto-provisioning. Whether an inactive
    principal may sign in is decided by ``sign_in``, not by ``resolve``.
    """

    def __init__(  # noqa: PLR0913
        self,
        principal_repository: PrincipalRepository,
        credential_store: CredentialStore,
        token_service: SessionTokenService,
        config: IdentityConfig,
        clock: Clock,
        random_source: RandomSource,
    ):
        self._principal_repo = principal_repository
        self._credentials = credential_store
        self._token_service = token_service
        self._config = config
        self._clock = clock
        self._random = random_source

    async def resolve(
        self,
        identity: ExternalIdentity,
        allow_auto_provision: Optional[bool] = None,
    ) -> Optional[Principal]:
        """Find, link or create the principal for an external identity.

        Parameters
        ----------
        identity
            The provider's assertion
        allow_auto_provision
            Overrides the configured auto-provisioning flag when given

        Returns
        -------
        The principal, or None when the identity is unknown and
        auto-provisioning is off

        Raises
        ------
        UnverifiedIdentityError
            If the provider did not assert a verified email
        """
        if not identity.verified:
            raise UnverifiedIdentityError

        if allow_auto_provision is None:
            allow_auto_provision = self._config.allow_auto_provision

        principal = await self._principal_repo.find_by_external_id(identity.external_id)
        if principal is not None:
            if principal.refresh_avatar(identity.avatar_url, now=self._clock.now()):
                await self._principal_repo.save(principal)
            return principal

        email = Email(identity.email)
        principal = await self._principal_repo.find_by_email(email)
        if principal is not None:
            if principal.external_id and principal.external_id != identity.external_id:
                logger.warning(
                    "Replacing external identity on principal %s",
                    principal.id,
                )
            principal.link_external_identity(
                identity.external_id,
                identity.avatar_url,
                now=self._clock.now(),
            )
            await self._principal_repo.save(principal)
            logger.info("Linked external identity to principal: %s", principal.id)
            return principal

        if not allow_auto_provision:
            logger.debug("External identity is not registered")
            return None

        return await self._provision(identity, email)

    async def sign_in(
        self,
        identity: ExternalIdentity,
        remember_me: bool = False,
    ) -> tuple[Principal, IssuedToken]:
        """Resolve an identity and issue a session token for it.

        Raises
        ------
        UnverifiedIdentityError
            If the provider did not assert a verified email
        PrincipalNotRegisteredError
            If the identity resolves to nobody
        InactivePrincipalError
            If the resolved principal is deactivated
        """
        principal = await self.resolve(identity)
        if principal is None:
            raise PrincipalNotRegisteredError
        if not principal.active:
            raise InactivePrincipalError

        token = await self._token_service.issue(
            principal.id,
            label=OAUTH_TOKEN_LABEL,
            remember_me=remember_me,
        )
        return principal, token

    async def _provision(self, identity: ExternalIdentity, email: Email) -> Principal:
        # Placeholder is never revealed, so password login stays impossible
        placeholder = (
            PLACEHOLDER_PASSWORD_PREFIX
            + self._random.bytes(PLACEHOLDER_PASSWORD_BYTES).hex()
        )
        principal = Principal.create(
            email=email,
            name=identity.display_name or email.local_part,
            role=DEFAULT_ROLE,
            external_id=identity.external_id,
            avatar_url=identity.avatar_url,
            now=self._clock.now(),
        )
        await self._principal_repo.add(principal, self._credentials.hash(placeholder))
        logger.info("Auto-provisioned principal %s from external identity", principal.id)
        return principal
