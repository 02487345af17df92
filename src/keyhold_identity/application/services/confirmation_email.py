"""Registration confirmation email content."""

from datetime import timedelta
from html import escape
from urllib.parse import quote

from keyhold_identity.application.services.reset_email import describe_window

CONFIRMATION_SUBJECT = "Confirm your email address"

CONFIRMATION_TEXT = """Hi {name},

Welcome! Please click the link below to confirm your email address and activate your account:

{confirmation_link}

This link will expire in {window}.

If you did not create an account, please ignore this email.
"""  # noqa: E501

CONFIRMATION_HTML = """
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
</head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; background-color: #f9fafb; margin: 0; padding: 20px;">
    <div style="max-width: 600px; margin: 0 auto; background-color: #ffffff; border-radius: 8px; padding: 40px;">
        <h2 style="color: #111827; margin-top: 0;">Welcome, {name}!</h2>
        <p style="color: #374151; line-height: 1.6;">Please confirm your email address to activate your account.</p>
        <p style="margin: 30px 0; text-align: center;">
            <a href="{confirmation_link}" style="display: inline-block; padding: 14px 28px; background-color: #16a34a; color: #ffffff !important; text-decoration: none; border-radius: 6px; font-weight: 600;">Confirm Email Address</a>
        </p>
        <p style="color: #6b7280; font-size: 14px;">Or copy and paste this link into your browser:</p>
        <p style="word-break: break-all; color: #2563eb; font-size: 14px;">{confirmation_link}</p>
        <p style="color: #9ca3af; font-size: 13px;">This link will expire in {window}.</p>
        <p style="color: #9ca3af; font-size: 13px; margin-top: 40px;">If you did not create an account, please ignore this email. Your account will remain inactive.</p>
    </div>
</body>
</html>
"""  # noqa: E501


def build_confirmation_link(base_url: str, raw_token: str, email: str) -> str:
    """``{base}/confirm-email?token=...&email=...`` with the email URL-encoded."""
    return (
        f"{base_url.rstrip('/')}/confirm-email"
        f"?token={raw_token}&email={quote(email, safe='')}"
    )


def render_confirmation_email(
    name: str,
    confirmation_link: str,
    window: timedelta,
) -> tuple[str, str, str]:
    """Return ``(subject, text_body, html_body)``."""
    window_text = describe_window(window)
    return (
        CONFIRMATION_SUBJECT,
        CONFIRMATION_TEXT.format(
            name=name,
            confirmation_link=confirmation_link,
            window=window_text,
        ),
        CONFIRMATION_HTML.format(
            name=escape(name),
            confirmation_link=escape(confirmation_link),
            window=window_text,
        ),
    )
