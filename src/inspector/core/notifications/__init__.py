"""Notification utilities - email."""

from src.inspector.core.notifications.email import (
    send_password_changed_email,
    send_password_reset_email,
)

__all__ = [
    "send_password_changed_email",
    "send_password_reset_email",
]
