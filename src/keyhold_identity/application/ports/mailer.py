"""Mailer port."""

from typing import Optional, Protocol


class Mailer(Protocol):
    """Outbound email delivery.

    Implementations may raise on delivery failure; callers that must not
    fail because of mail (password reset) catch and log.
    """

    def send(
        self,
        to: str,
        subject: str,
        text_body: str,
        html_body: Optional[str] = None,
    ) -> None:
        """Send a single message.

        Parameters
        ----------
        to
            Recipient address
        subject
            Subject line
        text_body
            Plain-text body
        html_body
            Optional HTML alternative
        """
        ...
