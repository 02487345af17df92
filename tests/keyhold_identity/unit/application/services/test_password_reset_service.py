"""Unit tests for PasswordResetService."""

from datetime import timedelta
from unittest.mock import AsyncMock
from urllib.parse import parse_qs, urlparse
from uuid import uuid4

import pytest

from keyhold_identity import (
    CredentialStore,
    InvalidResetTokenError,
    PasswordHashingService,
    PasswordResetRecord,
    PasswordResetService,
    ResetTokenExpiredError,
    WeakPasswordError,
)
from keyhold_identity.application.services.reset_email import (
    PASSWORD_RESET_SUBJECT,
    build_reset_link,
    describe_window,
)
from tests.shared.fixtures.doubles import (
    FIXED_NOW,
    FixedClock,
    RecordingMailer,
    SequenceRandomSource,
)
from tests.shared.fixtures.factories import (
    OTHER_STRONG_PASSWORD,
    TestPrincipalFactory,
    make_config,
)


def _extract_token(mail_body: str) -> str:
    link = next(line for line in mail_body.splitlines() if "reset-password" in line)
    return parse_qs(urlparse(link.strip()).query)["token"][0]


class TestResetEmail:
    def test_link_encodes_email(self):
        link = build_reset_link("https://app.example.com/", "abc", "a+b@example.com")

        assert link == (
            "https://app.example.com/reset-password?token=abc&email=a%2Bb%40example.com"
        )

    @pytest.mark.parametrize(
        ("window", "expected"),
        [
            (timedelta(hours=1), "1 hour"),
            (timedelta(hours=2), "2 hours"),
            (timedelta(minutes=30), "30 minutes"),
            (timedelta(minutes=1), "1 minute"),
            (timedelta(seconds=90), "1 minute"),
            (timedelta(seconds=45), "45 seconds"),
            (timedelta(seconds=1), "1 second"),
        ],
    )
    def test_describe_window(self, window, expected):
        assert describe_window(window) == expected


class TestPasswordResetServiceBase:
    def setup_method(self):
        self.principal_repo = AsyncMock()
        self.reset_repo = AsyncMock()
        self.config = make_config()
        self.store = CredentialStore(
            self.principal_repo,
            PasswordHashingService(rounds=4),
            self.config,
        )
        self.mailer = RecordingMailer()
        self.clock = FixedClock()
        self.principal = TestPrincipalFactory.alice()
        self.service = self._service(self.mailer)

    def _service(self, mailer):
        return PasswordResetService(
            self.principal_repo,
            self.reset_repo,
            self.store,
            mailer,
            self.config,
            self.clock,
            SequenceRandomSource(),
        )

    def _record(self, raw_token, created_at=FIXED_NOW):
        return PasswordResetRecord(
            id=uuid4(),
            email=self.principal.email,
            token_hash=self.store.hash(raw_token),
            created_at=created_at,
        )


class TestRequestReset(TestPasswordResetServiceBase):
    @pytest.mark.asyncio
    async def test_unknown_email_is_silent(self):
        self.principal_repo.find_by_email.return_value = None

        await self.service.request_reset("nobody@example.com")

        self.reset_repo.create.assert_not_called()
        assert self.mailer.sent == []

    @pytest.mark.asyncio
    async def test_stores_hash_and_mails_raw_token(self):
        self.principal_repo.find_by_email.return_value = self.principal

        await self.service.request_reset(self.principal.email)

        email, token_hash, now = self.reset_repo.create.call_args.args
        assert email == self.principal.email
        assert now == FIXED_NOW

        mail = self.mailer.last
        assert mail.to == self.principal.email
        assert mail.subject == PASSWORD_RESET_SUBJECT
        assert "1 hour" in mail.text_body
        assert mail.html_body is not None

        raw_token = _extract_token(mail.text_body)
        assert len(raw_token) == 64
        assert raw_token not in token_hash
        assert self.store.verify(raw_token, token_hash)

    @pytest.mark.asyncio
    async def test_link_points_at_configured_base_url(self):
        self.principal_repo.find_by_email.return_value = self.principal

        await self.service.request_reset(self.principal.email)

        assert (
            "https://app.example.com/reset-password?token="
            in self.mailer.last.text_body
        )
        assert "email=Alice%40Example.com" in self.mailer.last.text_body

    @pytest.mark.asyncio
    async def test_mail_failure_is_swallowed(self):
        self.principal_repo.find_by_email.return_value = self.principal
        service = self._service(RecordingMailer(fail=True))

        await service.request_reset(self.principal.email)

        self.reset_repo.create.assert_awaited_once()


class TestConsume(TestPasswordResetServiceBase):
    @pytest.mark.asyncio
    async def test_valid_token_sets_password(self):
        record = self._record("raw-token")
        self.reset_repo.find_all_for_email.return_value = [record]
        self.reset_repo.delete_all_for_email.return_value = 1
        self.principal_repo.find_by_email.return_value = self.principal
        self.principal_repo.update_password_hash.return_value = True

        ok = await self.service.consume(
            "raw-token",
            self.principal.email,
            OTHER_STRONG_PASSWORD,
        )

        assert ok is True
        self.reset_repo.delete_all_for_email.assert_awaited_once_with(
            self.principal.email,
        )
        _, new_hash = self.principal_repo.update_password_hash.call_args.args
        assert self.store.verify(OTHER_STRONG_PASSWORD, new_hash)

    @pytest.mark.asyncio
    async def test_matches_any_outstanding_record(self):
        self.reset_repo.find_all_for_email.return_value = [
            self._record("newer"),
            self._record("older"),
        ]
        self.reset_repo.delete_all_for_email.return_value = 2
        self.principal_repo.find_by_email.return_value = self.principal
        self.principal_repo.update_password_hash.return_value = True

        assert await self.service.consume(
            "older",
            self.principal.email,
            OTHER_STRONG_PASSWORD,
        )

    @pytest.mark.asyncio
    async def test_tampered_token_deletes_nothing(self):
        self.reset_repo.find_all_for_email.return_value = [self._record("raw-token")]

        ok = await self.service.consume(
            "raw-tokeX",
            self.principal.email,
            OTHER_STRONG_PASSWORD,
        )

        assert ok is False
        self.reset_repo.delete_all_for_email.assert_not_called()
        self.reset_repo.delete_by_id.assert_not_called()
        self.principal_repo.update_password_hash.assert_not_called()

    @pytest.mark.asyncio
    async def test_expired_token_deletes_its_record(self):
        record = self._record("raw-token")
        self.reset_repo.find_all_for_email.return_value = [record]
        self.clock.advance(hours=1, seconds=1)

        ok = await self.service.consume(
            "raw-token",
            self.principal.email,
            OTHER_STRONG_PASSWORD,
        )

        assert ok is False
        self.reset_repo.delete_by_id.assert_awaited_once_with(record.id)
        self.principal_repo.update_password_hash.assert_not_called()

    @pytest.mark.asyncio
    async def test_token_still_valid_at_window_edge(self):
        self.reset_repo.find_all_for_email.return_value = [self._record("raw-token")]
        self.reset_repo.delete_all_for_email.return_value = 1
        self.principal_repo.find_by_email.return_value = self.principal
        self.principal_repo.update_password_hash.return_value = True
        self.clock.advance(hours=1)

        assert await self.service.consume(
            "raw-token",
            self.principal.email,
            OTHER_STRONG_PASSWORD,
        )

    @pytest.mark.asyncio
    async def test_concurrent_consumer_wins(self):
        self.reset_repo.find_all_for_email.return_value = [self._record("raw-token")]
        self.reset_repo.delete_all_for_email.return_value = 0

        ok = await self.service.consume(
            "raw-token",
            self.principal.email,
            OTHER_STRONG_PASSWORD,
        )

        assert ok is False
        self.principal_repo.update_password_hash.assert_not_called()

    @pytest.mark.asyncio
    async def test_weak_password_keeps_token(self):
        self.reset_repo.find_all_for_email.return_value = [self._record("raw-token")]

        with pytest.raises(WeakPasswordError):
            await self.service.consume("raw-token", self.principal.email, "weak")

        self.reset_repo.delete_all_for_email.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_token(self):
        assert not await self.service.consume("", self.principal.email, "x")
        self.reset_repo.find_all_for_email.assert_not_called()

    @pytest.mark.asyncio
    async def test_malformed_email_matches_nothing(self):
        self.reset_repo.find_all_for_email.return_value = []

        assert not await self.service.consume("raw-token", " not-an-email ", "x")
        self.reset_repo.find_all_for_email.assert_awaited_once_with("not-an-email")


class TestResetPassword(TestPasswordResetServiceBase):
    @pytest.mark.asyncio
    async def test_unknown_token_raises_invalid(self):
        self.reset_repo.find_all_for_email.return_value = []

        with pytest.raises(InvalidResetTokenError):
            await self.service.reset_password(
                "raw-token",
                self.principal.email,
                OTHER_STRONG_PASSWORD,
            )

    @pytest.mark.asyncio
    async def test_expired_token_raises_expired(self):
        self.reset_repo.find_all_for_email.return_value = [
            self._record("raw-token", created_at=FIXED_NOW - timedelta(hours=2)),
        ]

        with pytest.raises(ResetTokenExpiredError):
            await self.service.reset_password(
                "raw-token",
                self.principal.email,
                OTHER_STRONG_PASSWORD,
            )


class TestSweepExpired(TestPasswordResetServiceBase):
    @pytest.mark.asyncio
    async def test_default_window(self):
        self.reset_repo.delete_created_before.return_value = 3

        assert await self.service.sweep_expired() == 3
        self.reset_repo.delete_created_before.assert_awaited_once_with(
            FIXED_NOW - timedelta(hours=24),
        )

    @pytest.mark.asyncio
    async def test_custom_window(self):
        self.reset_repo.delete_created_before.return_value = 0

        await self.service.sweep_expired(timedelta(days=1))

        self.reset_repo.delete_created_before.assert_awaited_once_with(
            FIXED_NOW - timedelta(days=1),
        )
