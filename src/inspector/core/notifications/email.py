"""Transactional email using the Resend API."""

import html
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from urllib.parse import urlencode

import resend

from src.inspector.core.config import get_settings
from src.inspector.core.logging import get_logger

logger = get_logger(__name__)

_email_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="email_sender")

_BODY_STYLE = (
    "font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; "
    "line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;"
)
_BUTTON_STYLE = (
    "background-color: #f97316; color: white; padding: 12px 24px; "
    "text-decoration: none; border-radius: 6px; display: inline-block; font-weight: 500;"
)
_MUTED_STYLE = "color: #666; font-size: 14px;"


def _send(to: str, subject: str, body_html: str, email_type: str) -> bool:
    """Send an email with a hard timeout. Never raises.

    Without RESEND_API_KEY the email is only logged (development mode).
    """
    settings = get_settings()
    if not settings.resend_api_key:
        logger.warning("RESEND_API_KEY not set - email not sent", email_type=email_type)
        return True

    resend.api_key = settings.resend_api_key
    params = {"from": settings.email_from, "to": [to], "subject": subject, "html": body_html}

    try:
        future = _email_executor.submit(resend.Emails.send, params)
        future.result(timeout=settings.email_send_timeout_seconds)
    except FuturesTimeoutError:
        logger.error(
            "Email send timed out",
            email_type=email_type,
            timeout=settings.email_send_timeout_seconds,
        )
        return False
    except Exception as e:
        logger.error("Failed to send email", email_type=email_type, error=str(e))
        return False

    logger.info("Email sent", email_type=email_type)
    return True


def send_password_reset_email(to: str, token: str, user_name: str) -> bool:
    """Send the password reset link. The token is only ever placed in the URL."""
    settings = get_settings()
    query = urlencode({"email": to, "token": token})
    reset_url = f"{settings.app_url}/reset-password?{query}"
    return _send(
        to,
        "Reset your password",
        _get_password_reset_html(user_name, reset_url, settings.password_reset_expire_minutes),
        "password_reset",
    )


def send_password_changed_email(to: str, user_name: str) -> bool:
    """Tell the user their password changed and all sessions were signed out."""
    settings = get_settings()
    return _send(
        to,
        f"Your {settings.app_name} password was changed",
        _get_password_changed_html(user_name, settings.app_name),
        "password_changed",
    )


def _get_password_reset_html(user_name: str, reset_url: str, expire_minutes: int) -> str:
    safe_user_name = html.escape(user_name)
    safe_url = html.escape(reset_url, quote=True)
    return f"""<!DOCTYPE html>
<html>
<head><meta charset="utf-8"></head>
<body style="{_BODY_STYLE}">
    <h1 style="margin-bottom: 24px;">Reset your password</h1>
    <p>Hi {safe_user_name},</p>
    <p>We received a request to reset your password. Click below to choose a new one:</p>
    <p style="margin: 32px 0;"><a href="{safe_url}" style="{_BUTTON_STYLE}">Reset Password</a></p>
    <p style="{_MUTED_STYLE}">
        This link expires in {expire_minutes} minutes and can be used once.
        If you didn't request a reset, you can ignore this email.
    </p>
</body>
</html>"""


def _get_password_changed_html(user_name: str, app_name: str) -> str:
    safe_user_name = html.escape(user_name)
    return f"""<!DOCTYPE html>
<html>
<head><meta charset="utf-8"></head>
<body style="{_BODY_STYLE}">
    <p>Hi {safe_user_name},</p>
    <p>The password for your {html.escape(app_name)} account was just changed.
    You have been signed out on all devices.</p>
    <p style="{_MUTED_STYLE}">If this wasn't you, contact an administrator immediately.</p>
</body>
</html>"""
