"""Token factories for test data generation."""

import secrets
from datetime import timedelta

from polyfactory import Use

from src.inspector.core.security import hash_token
from src.inspector.models import PasswordResetToken, RefreshToken, RevocationReason
from tests.factories.base import BaseFactory, generate_uuid7, utc_now


def generate_token_hash() -> str:
    return hash_token(secrets.token_urlsafe(32))


class RefreshTokenFactory(BaseFactory):
    __model__ = RefreshToken

    id = Use(generate_uuid7)
    user_id = None  # Required FK - must be set explicitly
    token_hash = Use(generate_token_hash)
    expires_at = Use(lambda: utc_now() + timedelta(days=7))
    created_at = Use(utc_now)
    revoked = False
    revoked_reason = None
    revoked_at = None
    ip_address = None
    user_agent = None

    @classmethod
    def revoked_token(cls, reason: RevocationReason = RevocationReason.LOGOUT, **kwargs):
        return cls.build(revoked=True, revoked_reason=reason.value, revoked_at=utc_now(), **kwargs)

    @classmethod
    def expired(cls, days_ago: int = 1, **kwargs):
        return cls.build(expires_at=utc_now() - timedelta(days=days_ago), **kwargs)


class PasswordResetTokenFactory(BaseFactory):
    __model__ = PasswordResetToken

    id = Use(generate_uuid7)
    user_id = None  # Required FK - must be set explicitly
    token_hash = Use(generate_token_hash)
    expires_at = Use(lambda: utc_now() + timedelta(hours=1))
    created_at = Use(utc_now)
    used = False
    used_at = None

    @classmethod
    def expired(cls, **kwargs):
        return cls.build(expires_at=utc_now() - timedelta(minutes=1), **kwargs)
