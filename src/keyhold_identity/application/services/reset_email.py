"""Password reset email content."""

from datetime import timedelta
from urllib.parse import quote

PASSWORD_RESET_SUBJECT = "Password Reset Request"

PASSWORD_RESET_TEXT = """Hello,

You requested a password reset for your account.

Click the link below to reset your password (valid for {window}):
{reset_link}

If you didn't request this, you can safely ignore this email.
"""

PASSWORD_RESET_HTML = """
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
</head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; background-color: #f9fafb; margin: 0; padding: 20px;">
    <div style="max-width: 600px; margin: 0 auto; background-color: #ffffff; border-radius: 8px; padding: 40px;">
        <h2 style="color: #111827; margin-top: 0;">Password Reset Request</h2>
        <p style="color: #374151; line-height: 1.6;">You requested a password reset for your account.</p>
        <p style="color: #374151; line-height: 1.6;">This link is valid for {window}.</p>
        <p style="margin: 30px 0; text-align: center;">
            <a href="{reset_link}" style="display: inline-block; padding: 14px 28px; background-color: #2563eb; color: #ffffff !important; text-decoration: none; border-radius: 6px; font-weight: 600;">Reset Password</a>
        </p>
        <p style="color: #6b7280; font-size: 14px;">Or copy and paste this link into your browser:</p>
        <p style="word-break: break-all; color: #2563eb; font-size: 14px;">{reset_link}</p>
        <p style="color: #9ca3af; font-size: 13px; margin-top: 40px;">If you didn't request this, you can safely ignore this email.</p>
    </div>
</body>
</html>
"""  # noqa: E501


def build_reset_link(base_url: str, raw_token: str, email: str) -> str:
    """``{base}/reset-password?token=...&email=...`` with the email URL-encoded."""
    return (
        f"{base_url.rstrip('/')}/reset-password"
        f"?token={raw_token}&email={quote(email, safe='')}"
    )


def describe_window(window: timedelta) -> str:
    """Human readable lifetime, e.g. ``1 hour`` or ``30 minutes``."""
    seconds = int(window.total_seconds())
    if seconds < 60:
        return f"{seconds} second" if seconds == 1 else f"{seconds} seconds"
    minutes = seconds // 60
    if minutes and minutes % 60 == 0:
        hours = minutes // 60
        return f"{hours} hour" if hours == 1 else f"{hours} hours"
    return f"{minutes} minute" if minutes == 1 else f"{minutes} minutes"


def render_reset_email(reset_link: str, window: timedelta) -> tuple[str, str, str]:
    """Return ``(subject, text_body, html_body)``."""
    window_text = describe_window(window)
    return (
        PASSWORD_RESET_SUBJECT,
        PASSWORD_RESET_TEXT.format(reset_link=reset_link, window=window_text),
        PASSWORD_RESET_HTML.format(reset_link=reset_link, window=window_text),
    )
