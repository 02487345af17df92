"""Authentication service for password login and session handling."""

from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from keyhold_identity.application.services.credential_store import CredentialStore
from keyhold_identity.application.services.session_token_service import (
    DEFAULT_TOKEN_LABEL,
    IssuedToken,
    SessionTokenService,
)
from keyhold_identity.domain.principal import Principal, PrincipalRepository
from keyhold_identity.exceptions import (
    InactivePrincipalError,
    InvalidCredentialsError,
)

logger = logging.getLogger(__name__)


class AuthenticationService:
    """
    Application service for principal authentication.

    Orchestrates the credential store and session tokens to provide:
    - Login with password
    - Logout
    - Token to principal resolution
    - Password change
    """

    def __init__(
        self,
        principal_repository: PrincipalRepository,
        credential_store: CredentialStore,
        token_service: SessionTokenService,
    ):
        self._principal_repo = principal_repository
        self._credentials = credential_store
        self._token_service = token_service

    async def login(
        self,
        email: str,
        password: str,
        remember_me: bool = False,
    ) -> tuple[Principal, IssuedToken]:
        credentials = await self._credentials.verify_principal(email, password)
        if credentials is None:
            raise InvalidCredentialsError

        principal = credentials.principal
        if not principal.active:
            raise InactivePrincipalError

        token = await self._token_service.issue(
            principal.id,
            label=DEFAULT_TOKEN_LABEL,
            remember_me=remember_me,
        )
        logger.info("Principal logged in: %s", principal.id)
        return principal, token

    async def logout(self, token: str) -> bool:
        """Revoke a token. Returns False if it was already gone."""
        return await self._token_service.revoke_by_token(token) > 0

    async def current_principal(self, token: str) -> Optional[Principal]:
        """Resolve a bearer token to an active principal."""
        principal = await self._token_service.validate(token)
        if principal is None or not principal.active:
            return None
        return principal

    async def change_password(  # noqa: PLR0913
        self,
        principal_id: UUID,
        current_password: str,
        new_password: str,
        revoke_other_sessions: bool = False,
        current_token: Optional[str] = None,
    ) -> None:
        """Replace a password after checking the current one.

        Parameters
        ----------
        principal_id
            Principal changing its password
        current_password
            Must match the stored hash
        new_password
            Must satisfy the password policy
        revoke_other_sessions
            Delete the principal's other tokens afterwards
        current_token
            Token spared from revocation (the caller's own session)

        Raises
        ------
        InvalidCredentialsError
            If the current password is wrong or the principal is unknown
        WeakPasswordError
            If the new password breaks the policy
        """
        credentials = await self._principal_repo.find_credentials_by_id(principal_id)
        if credentials is None:
            msg = "Principal credentials not found"
            raise InvalidCredentialsError(msg)
        if not self._credentials.verify(current_password, credentials.password_hash):
            msg = "Current password is incorrect"
            raise InvalidCredentialsError(msg)

        await self._credentials.update_password(principal_id, new_password)

        if revoke_other_sessions:
            await self._token_service.revoke_all_for_principal(
                principal_id,
                keep_token=current_token,
            )

        logger.info("Password changed for principal: %s", principal_id)
