"""Unit tests for SmtpMailer and build_mailer."""

from unittest.mock import patch

import pytest

from keyhold_config import Settings
from keyhold_identity import ConfigurationError
from keyhold_identity.infrastructure import SmtpMailer, build_mailer

SMTP_MODULE = "keyhold_identity.infrastructure.email.smtp_mailer.smtplib"


def _settings(**overrides) -> Settings:
    values = {
        "smtp_enabled": True,
        "smtp_host": "smtp.example.com",
        "smtp_port": 587,
        "smtp_user": "mailer",
        "smtp_password": "secret",
        "smtp_from_email": "noreply@example.com",
        "smtp_from_name": "Keyhold",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestSmtpMailer:
    def test_disabled_mailer_sends_nothing(self):
        mailer = SmtpMailer(_settings(smtp_enabled=False))

        with patch(SMTP_MODULE) as smtplib:
            mailer.send("alice@example.com", "Hi", "body")

        smtplib.SMTP.assert_not_called()
        smtplib.SMTP_SSL.assert_not_called()

    def test_starttls_delivery(self):
        mailer = SmtpMailer(_settings())

        with patch(SMTP_MODULE) as smtplib:
            server = smtplib.SMTP.return_value
            mailer.send("alice@example.com", "Hi", "plain", "<p>html</p>")

        smtplib.SMTP.assert_called_once_with("smtp.example.com", 587)
        server.starttls.assert_called_once()
        session = server.__enter__.return_value
        session.login.assert_called_once_with("mailer", "secret")
        message = session.send_message.call_args.args[0]
        assert message["To"] == "alice@example.com"
        assert message["From"] == "Keyhold <noreply@example.com>"
        assert len(message.get_payload()) == 2

    def test_implicit_tls_delivery(self):
        mailer = SmtpMailer(_settings(smtp_port=465, smtp_starttls=False))

        with patch(SMTP_MODULE) as smtplib:
            mailer.send("alice@example.com", "Hi", "plain")

        smtplib.SMTP.assert_not_called()
        args = smtplib.SMTP_SSL.call_args.args
        assert args == ("smtp.example.com", 465)

    def test_anonymous_relay_skips_login(self):
        mailer = SmtpMailer(
            _settings(smtp_user="", smtp_starttls=False, smtp_use_tls=False),
        )

        with patch(SMTP_MODULE) as smtplib:
            server = smtplib.SMTP.return_value
            mailer.send("alice@example.com", "Hi", "plain")

        server.starttls.assert_not_called()
        server.__enter__.return_value.login.assert_not_called()

    def test_delivery_failure_propagates(self):
        mailer = SmtpMailer(_settings())

        with patch(SMTP_MODULE) as smtplib:
            smtplib.SMTPException = OSError
            smtplib.SMTP.side_effect = ConnectionRefusedError("refused")

            with pytest.raises(ConnectionRefusedError):
                mailer.send("alice@example.com", "Hi", "plain")

    def test_plain_text_only_message(self):
        message = SmtpMailer(_settings()).build_message("a@example.com", "Hi", "plain")

        assert len(message.get_payload()) == 1


class TestBuildMailer:
    def test_enabled_without_host(self):
        with pytest.raises(ConfigurationError, match="smtp_host"):
            build_mailer(_settings(smtp_host=""))

    def test_enabled_without_sender(self):
        with pytest.raises(ConfigurationError, match="smtp_from_email"):
            build_mailer(_settings(smtp_from_email=""))

    def test_disabled_needs_no_host(self):
        mailer = build_mailer(_settings(smtp_enabled=False, smtp_host=""))

        assert isinstance(mailer, SmtpMailer)
        assert mailer.enabled is False
