"""Shared enums for models."""

from enum import Enum


class UserRole(str, Enum):
    """Application role carried in the access token."""

    ADMIN = "Admin"
    ENGINEER = "Engineer"


class RevocationReason(str, Enum):
    """Why a refresh token was revoked."""

    REFRESH = "refresh"
    LOGOUT = "logout"
    PASSWORD_CHANGE = "password_change"
    DEACTIVATION = "deactivation"
    LOCK = "lock"
