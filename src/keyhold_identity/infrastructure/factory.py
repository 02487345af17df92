"""Wires repositories and services onto one database session."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from keyhold_identity.application.config import IdentityConfig
from keyhold_identity.application.ports import Clock, Mailer, RandomSource
from keyhold_identity.application.services import (
    AuthenticationService,
    CredentialStore,
    IdentityLinkingService,
    PasswordResetService,
    PrincipalService,
    RegistrationService,
    SessionTokenService,
)
from keyhold_identity.infrastructure.persistence.sqlalchemy.repositories import (
    PasswordResetRepositorySQLAlchemy,
    PrincipalRepositorySQLAlchemy,
    SessionTokenRepositorySQLAlchemy,
)
from keyhold_identity.infrastructure.system import SecureRandomSource, SystemClock
from keyhold_identity.services import PasswordHashingService

logger = logging.getLogger(__name__)


class IdentityServiceFactory:
    """Builds identity services that share one session (one transaction).

    Instances are created on demand and cached for the factory's lifetime,
    which should match the session's.
    """

    def __init__(  # noqa: PLR0913
        self,
        session: AsyncSession,
        config: IdentityConfig,
        mailer: Mailer,
        clock: Optional[Clock] = None,
        random_source: Optional[RandomSource] = None,
    ):
        self._session = session
        self._config = config
        self._mailer = mailer
        self._clock = clock or SystemClock()
        self._random = random_source or SecureRandomSource()

        # Cached instances (created on demand)
        self._principal_repo: PrincipalRepositorySQLAlchemy | None = None
        self._token_repo: SessionTokenRepositorySQLAlchemy | None = None
        self._reset_repo: PasswordResetRepositorySQLAlchemy | None = None
        self._credential_store: CredentialStore | None = None
        self._token_service: SessionTokenService | None = None

    @property
    def session(self) -> AsyncSession:
        return self._session

    @property
    def config(self) -> IdentityConfig:
        return self._config

    def principal_repository(self) -> PrincipalRepositorySQLAlchemy:
        if self._principal_repo is None:
            self._principal_repo = PrincipalRepositorySQLAlchemy(self._session)
        return self._principal_repo

    def session_token_repository(self) -> SessionTokenRepositorySQLAlchemy:
        if self._token_repo is None:
            self._token_repo = SessionTokenRepositorySQLAlchemy(self._session)
        return self._token_repo

    def password_reset_repository(self) -> PasswordResetRepositorySQLAlchemy:
        if self._reset_repo is None:
            self._reset_repo = PasswordResetRepositorySQLAlchemy(self._session)
        return self._reset_repo

    def credential_store(self) -> CredentialStore:
        if self._credential_store is None:
            self._credential_store = CredentialStore(
                self.principal_repository(),
                PasswordHashingService(rounds=self._config.bcrypt_rounds),
                self._config,
            )
        return self._credential_store

    def session_token_service(self) -> SessionTokenService:
        if self._token_service is None:
            self._token_service = SessionTokenService(
                self.session_token_repository(),
                self.principal_repository(),
                self._config,
                self._clock,
                self._random,
            )
        return self._token_service

    def password_reset_service(self) -> PasswordResetService:
        return PasswordResetService(
            self.principal_repository(),
            self.password_reset_repository(),
            self.credential_store(),
            self._mailer,
            self._config,
            self._clock,
            self._random,
        )

    def registration_service(self) -> RegistrationService:
        return RegistrationService(
            self.principal_repository(),
            self.password_reset_repository(),
            self.credential_store(),
            self._mailer,
            self._config,
            self._clock,
            self._random,
        )

    def identity_linking_service(self) -> IdentityLinkingService:
        return IdentityLinkingService(
            self.principal_repository(),
            self.credential_store(),
            self.session_token_service(),
            self._config,
            self._clock,
            self._random,
        )

    def authentication_service(self) -> AuthenticationService:
        return AuthenticationService(
            self.principal_repository(),
            self.credential_store(),
            self.session_token_service(),
        )

    def principal_service(self) -> PrincipalService:
        return PrincipalService(
            self.principal_repository(),
            self.credential_store(),
            self.session_token_service(),
            self._config,
            self._clock,
        )
