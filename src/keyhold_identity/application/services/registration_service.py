"""Self-registration with email confirmation."""

from __future__ import annotations

import logging

from keyhold_identity.application.config import IdentityConfig
from keyhold_identity.application.ports import Clock, Mailer, RandomSource
from keyhold_identity.application.services.confirmation_email import (
    build_confirmation_link,
    render_confirmation_email,
)
from keyhold_identity.application.services.credential_store import CredentialStore
from keyhold_identity.domain.principal import (
    DEFAULT_ROLE,
    Email,
    Principal,
    PrincipalRepository,
)
from keyhold_identity.exceptions import EmailAlreadyExistsError
from keyhold_identity.repositories import PasswordResetRepository

logger = logging.getLogger(__name__)

CONFIRMATION_TOKEN_BYTES = 32


class RegistrationService:
    """Registers inactive principals and activates them on confirmation.

    Confirmation tokens are one-time secrets stored as bcrypt hashes in the
    password reset store, keyed by email. They stay valid for
    ``IdentityConfig.confirmation_window``.
    """

    def __init__(  # noqa: PLR0913
        self,
        principal_repository: PrincipalRepository,
        reset_repository: PasswordResetRepository,
        credential_store: CredentialStore,
        mailer: Mailer,
        config: IdentityConfig,
        clock: Clock,
        random_source: RandomSource,
    ):
        self._principal_repo = principal_repository
        self._reset_repo = reset_repository
        self._credentials = credential_store
        self._mailer = mailer
        self._config = config
        self._clock = clock
        self._random = random_source

    async def register(self, email: str, name: str, password: str) -> Principal:
        """Create an inactive principal and mail it a confirmation link.

        A failed delivery is logged; the principal still exists and the
        call succeeds.

        Raises
        ------
        InvalidEmailError
            If the email does not parse
        WeakPasswordError
            If the password breaks the policy
        EmailAlreadyExistsError
            If the email is taken, whether or not that account is confirmed
        """
        email_obj = Email(email)
        self._credentials.ensure_valid(password)

        if await self._principal_repo.find_by_email(email_obj) is not None:
            raise EmailAlreadyExistsError(email_obj.value)

        now = self._clock.now()
        principal = Principal.create(
            email=email_obj,
            name=name,
            role=DEFAULT_ROLE,
            active=False,
            now=now,
        )
        await self._principal_repo.add(principal, self._credentials.hash(password))

        raw_token = self._random.bytes(CONFIRMATION_TOKEN_BYTES).hex()
        await self._reset_repo.create(
            principal.email,
            self._credentials.hash(raw_token),
            now,
        )
        logger.info("Registered principal %s, awaiting confirmation", principal.id)

        link = build_confirmation_link(
            self._config.reset_base_url,
            raw_token,
            principal.email,
        )
        subject, text_body, html_body = render_confirmation_email(
            name,
            link,
            self._config.confirmation_window,
        )
        try:
            self._mailer.send(principal.email, subject, text_body, html_body)
        except Exception as e:
            logger.error("Failed to send confirmation email: %s", e)
        return principal

    async def confirm_email(self, raw_token: str, email: str) -> bool:
        """Activate the principal behind ``email`` if ``raw_token`` matches.

        Returns False for an unknown, expired or already used token. An
        expired match is deleted; other records for the email are kept.
        """
        if not raw_token:
            return False
        email_value = Email.trusted(email).value

        records = await self._reset_repo.find_all_for_email(email_value)
        match = next(
            (r for r in records if self._credentials.verify(raw_token, r.token_hash)),
            None,
        )
        if match is None:
            logger.debug("Confirmation token matched no record")
            return False

        now = self._clock.now()
        if match.is_expired(now, self._config.confirmation_window):
            await self._reset_repo.delete_by_id(match.id)
            logger.info("Expired confirmation token used; record %s removed", match.id)
            return False

        # Deleting first claims the token; a concurrent confirmation sees zero rows
        if await self._reset_repo.delete_by_id(match.id) == 0:
            logger.info("Confirmation token already used concurrently")
            return False

        principal = await self._principal_repo.find_by_email(email_value)
        if principal is None:
            logger.warning("Confirmation for an email with no principal")
            return False

        if not principal.active:
            principal.activate(now=now)
            await self._principal_repo.save(principal)
        logger.info("Email confirmed for principal: %s", principal.id)
        return True
