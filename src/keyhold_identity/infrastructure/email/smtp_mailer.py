"""SMTP implementation of the ``Mailer`` port."""

import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from keyhold_config.settings import Settings
from keyhold_identity.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class SmtpMailer:
    """Sends multipart (plain text plus optional HTML) mail over SMTP.

    ``smtp_use_tls`` without ``smtp_starttls`` selects implicit TLS
    (usually port 465); otherwise a plain connection is opened and upgraded
    with STARTTLS when enabled. With SMTP disabled, messages are logged and
    dropped.
    """

    def __init__(self, settings: Settings):
        self._settings = settings

    @property
    def enabled(self) -> bool:
        return self._settings.smtp_enabled

    @property
    def sender(self) -> str:
        return f"{self._settings.smtp_from_name} <{self._settings.smtp_from_email}>"

    def send(
        self,
        to: str,
        subject: str,
        text_body: str,
        html_body: Optional[str] = None,
    ) -> None:
        """Deliver one message.

        Raises
        ------
        smtplib.SMTPException, OSError
            When the server rejects the message or cannot be reached
        """
        if not self.enabled:
            logger.warning("SMTP disabled, email not sent to %s", to)
            return

        message = self.build_message(to, subject, text_body, html_body)
        try:
            with self._connect() as server:
                self._login(server)
                server.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send email to %s: %s", to, e)
            raise
        logger.info("Email sent to %s", to)

    def build_message(
        self,
        to: str,
        subject: str,
        text_body: str,
        html_body: Optional[str] = None,
    ) -> MIMEMultipart:
        message = MIMEMultipart("alternative")
        message["Subject"] = subject
        message["From"] = self.sender
        message["To"] = to
        message.attach(MIMEText(text_body, "plain"))
        if html_body:
            message.attach(MIMEText(html_body, "html"))
        return message

    def _connect(self) -> smtplib.SMTP:
        host, port = self._settings.smtp_host, self._settings.smtp_port
        if self._settings.smtp_use_tls and not self._settings.smtp_starttls:
            return smtplib.SMTP_SSL(host, port, context=ssl.create_default_context())

        server = smtplib.SMTP(host, port)
        if self._settings.smtp_starttls:
            server.starttls(context=ssl.create_default_context())
        return server

    def _login(self, server: smtplib.SMTP) -> None:
        if not self._settings.smtp_user:
            return
        password = (
            self._settings.smtp_password.get_secret_value()
            if self._settings.smtp_password
            else ""
        )
        server.login(self._settings.smtp_user, password)


def build_mailer(settings: Settings) -> SmtpMailer:
    """Create the mailer, failing fast on incomplete SMTP settings.

    Raises
    ------
    ConfigurationError
        If SMTP is enabled without a host or sender address
    """
    if settings.smtp_enabled:
        missing = [
            name
            for name, value in (
                ("smtp_host", settings.smtp_host),
                ("smtp_from_email", settings.smtp_from_email),
            )
            if not value
        ]
        if missing:
            msg = f"SMTP is enabled but not configured: {', '.join(missing)}"
            raise ConfigurationError(msg)
    else:
        logger.info("SMTP disabled; outgoing mail will be logged and dropped")
    return SmtpMailer(settings)
