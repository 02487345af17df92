"""One-time password reset tokens."""

from __future__ import annotations

import logging
from datetime import timedelta
from enum import Enum
from typing import Optional

from keyhold_identity.application.config import IdentityConfig
from keyhold_identity.application.ports import Clock, Mailer, RandomSource
from keyhold_identity.application.services.credential_store import CredentialStore
from keyhold_identity.application.services.reset_email import (
    build_reset_link,
    render_reset_email,
)
from keyhold_identity.domain.principal import Email, PrincipalRepository
from keyhold_identity.exceptions import InvalidResetTokenError, ResetTokenExpiredError
from keyhold_identity.repositories import PasswordResetRepository

logger = logging.getLogger(__name__)

RESET_TOKEN_BYTES = 32


class ResetOutcome(str, Enum):
    CONSUMED = "consumed"
    EXPIRED = "expired"
    INVALID = "invalid"


class PasswordResetService:
    """Service for handling password reset requests and token consumption.

    Raw tokens are only ever sent by mail; the store keeps bcrypt hashes.
    Records are keyed by email and a successful consumption removes every
    record for that email.
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

    async def request_reset(self, email: str) -> None:
        """Start a reset for ``email``.

        Returns normally whether or not the email is registered, and whether
        or not the mail could be delivered.
        """
        principal = await self._principal_repo.find_by_email(email)
        if principal is None:
            # Silent to prevent email enumeration
            logger.debug("Password reset requested for unknown email")
            return

        raw_token = self._random.bytes(RESET_TOKEN_BYTES).hex()
        token_hash = self._credentials.hash(raw_token)
        await self._reset_repo.create(principal.email, token_hash, self._clock.now())

        reset_link = build_reset_link(
            self._config.reset_base_url,
            raw_token,
            principal.email,
        )
        subject, text_body, html_body = render_reset_email(
            reset_link,
            self._config.reset_window,
        )
        try:
            self._mailer.send(principal.email, subject, text_body, html_body)
            logger.info("Password reset email sent to principal: %s", principal.id)
        except Exception as e:
            # Don't raise - the record already exists
            logger.error("Failed to send password reset email: %s", e)

    async def consume(self, raw_token: str, email: str, new_password: str) -> bool:
        """Use a reset token to set a new password.

        Returns True only when the token matched, was inside its window and
        this call was the one that removed the email's records.

        Raises
        ------
        WeakPasswordError
            If the token is valid but the new password breaks the policy.
            Nothing is deleted in that case.
        """
        outcome = await self._consume(raw_token, email, new_password)
        return outcome is ResetOutcome.CONSUMED

    async def reset_password(self, raw_token: str, email: str, new_password: str) -> None:
        """Raising variant of ``consume``.

        Raises
        ------
        ResetTokenExpiredError
            If the token matched but its window has passed
        InvalidResetTokenError
            If the token matched nothing or a concurrent call consumed it
        WeakPasswordError
            If the new password breaks the policy
        """
        outcome = await self._consume(raw_token, email, new_password)
        if outcome is ResetOutcome.EXPIRED:
            raise ResetTokenExpiredError
        if outcome is ResetOutcome.INVALID:
            raise InvalidResetTokenError

    async def sweep_expired(self, window: Optional[timedelta] = None) -> int:
        """Delete every record older than ``window``.

        Defaults to ``IdentityConfig.record_retention`` so that pending
        registration confirmations outlive a shorter reset window.
        """
        window = window or self._config.record_retention
        cutoff = self._clock.now() - window
        deleted = await self._reset_repo.delete_created_before(cutoff)
        logger.info("Reset sweep removed %d record(s)", deleted)
        return deleted

    async def _consume(
        self,
        raw_token: str,
        email: str,
        new_password: str,
    ) -> ResetOutcome:
        if not raw_token:
            return ResetOutcome.INVALID
        email_value = Email.trusted(email).value

        records = await self._reset_repo.find_all_for_email(email_value)
        match = next(
            (r for r in records if self._credentials.verify(raw_token, r.token_hash)),
            None,
        )
        if match is None:
            logger.debug("Reset token matched no record")
            return ResetOutcome.INVALID

        if match.is_expired(self._clock.now(), self._config.reset_window):
            await self._reset_repo.delete_by_id(match.id)
            logger.info("Expired reset token used; record %s removed", match.id)
            return ResetOutcome.EXPIRED

        self._credentials.ensure_valid(new_password)

        # Deleting first claims the records; a concurrent consumer sees zero rows
        deleted = await self._reset_repo.delete_all_for_email(email_value)
        if deleted == 0:
            logger.info("Reset token already consumed concurrently")
            return ResetOutcome.INVALID

        updated = await self._credentials.update_password_by_email(
            email_value,
            new_password,
        )
        if not updated:
            logger.warning("Reset consumed for an email with no principal")
            return ResetOutcome.INVALID

        logger.info("Password reset completed (%d record(s) cleared)", deleted)
        return ResetOutcome.CONSUMED
