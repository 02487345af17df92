"""Opaque bearer session tokens."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from keyhold_identity.application.config import IdentityConfig, SweepConfig
from keyhold_identity.application.ports import Clock, RandomSource
from keyhold_identity.domain.principal import (
    Principal,
    PrincipalCredentials,
    PrincipalRepository,
)
from keyhold_identity.repositories import SessionTokenData, SessionTokenRepository

logger = logging.getLogger(__name__)

TOKEN_BYTES = 64
DEFAULT_TOKEN_LABEL = "auth_token"


@dataclass(frozen=True)
class IssuedToken:
    """A freshly issued token. The only place the raw value leaves the service."""

    token: str
    expires_at: Optional[datetime]
    label: str = DEFAULT_TOKEN_LABEL

    def __repr__(self) -> str:
        return f"IssuedToken(label={self.label!r}, expires_at={self.expires_at})"


@dataclass(frozen=True)
class SweepResult:
    expired_count: int
    no_expiry_count: int

    @property
    def total_count(self) -> int:
        return self.expired_count + self.no_expiry_count


class SessionTokenService:
    """Issues, validates and revokes session tokens.

    Tokens are 64 random bytes, hex encoded. The store's unique constraint
    on the token value is the collision backstop.
    """

    def __init__(  # noqa: PLR0913
        self,
        token_repository: SessionTokenRepository,
        principal_repository: PrincipalRepository,
        config: IdentityConfig,
        clock: Clock,
        random_source: RandomSource,
    ):
        self._token_repo = token_repository
        self._principal_repo = principal_repository
        self._config = config
        self._clock = clock
        self._random = random_source

    async def issue(
        self,
        principal_id: UUID,
        label: str = DEFAULT_TOKEN_LABEL,
        remember_me: bool = False,
    ) -> IssuedToken:
        """Create and store a new token.

        Parameters
        ----------
        principal_id
            Owner of the token
        label
            Human readable label stored with the token
        remember_me
            Use the long remember-me window instead of the session window

        Returns
        -------
        The raw token and its expiry (None when the window is unset)

        Raises
        ------
        TokenCollisionError
            If the generated value already exists in the store
        PrincipalNotFoundError
            If no principal has this ID
        """
        now = self._clock.now()
        window = self._config.expiry.window(remember_me)
        expires_at = now + window if window is not None else None
        if expires_at is None:
            logger.warning("Issuing non-expiring token for principal: %s", principal_id)

        token = self._random.bytes(TOKEN_BYTES).hex()
        await self._token_repo.create(
            principal_id=principal_id,
            label=label,
            token=token,
            expires_at=expires_at,
            now=now,
        )
        logger.debug("Issued %s token for principal: %s", label, principal_id)
        return IssuedToken(token=token, expires_at=expires_at, label=label)

    async def validate(self, token: str) -> Optional[Principal]:
        """Resolve a token to its principal, or None if missing or expired."""
        credentials = await self.validate_with_credentials(token)
        return credentials.principal if credentials is not None else None

    async def validate_with_credentials(
        self,
        token: str,
    ) -> Optional[PrincipalCredentials]:
        """Like ``validate`` but also returns the stored password hash."""
        data = await self._find_and_touch(token)
        if data is None:
            return None
        return await self._principal_repo.find_credentials_by_id(data.principal_id)

    async def revoke_by_token(self, token: str) -> int:
        if not token:
            return 0
        return await self._token_repo.delete_by_token(token)

    async def revoke_all_for_principal(
        self,
        principal_id: UUID,
        keep_token: Optional[str] = None,
    ) -> int:
        """Delete every token of a principal, optionally sparing one."""
        if keep_token is None:
            count = await self._token_repo.delete_all_for_principal(principal_id)
        else:
            count = 0
            for data in await self._token_repo.list_for_principal(principal_id):
                if data.token != keep_token:
                    count += await self._token_repo.delete_by_token(data.token)
        if count:
            logger.info("Revoked %d token(s) for principal: %s", count, principal_id)
        return count

    async def sweep(self, config: Optional[SweepConfig] = None) -> SweepResult:
        """Delete expired tokens and, if configured, tokens without expiry."""
        config = config or self._config.sweep
        expired = await self._token_repo.delete_expired(self._clock.now())
        no_expiry = 0
        if config.include_no_expiry:
            no_expiry = await self._token_repo.delete_without_expiry()

        result = SweepResult(expired_count=expired, no_expiry_count=no_expiry)
        logger.info(
            "Token sweep removed %d expired and %d non-expiring token(s)",
            result.expired_count,
            result.no_expiry_count,
        )
        return result

    async def list_for_principal(self, principal_id: UUID) -> list[SessionTokenData]:
        return await self._token_repo.list_for_principal(principal_id)

    async def last_login_at(self, principal_id: UUID) -> Optional[datetime]:
        """Creation time of the principal's newest token."""
        tokens = await self._token_repo.list_for_principal(principal_id)
        return tokens[0].created_at if tokens else None

    async def _find_and_touch(self, token: str) -> Optional[SessionTokenData]:
        if not token:
            return None
        now = self._clock.now()
        data = await self._token_repo.find_active(token, now)
        if data is None:
            return None
        await self._token_repo.touch(data.id, now)
        return data
