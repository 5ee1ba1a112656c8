"""User factory for test data generation."""

from datetime import timedelta

from polyfactory import PostGenerated, Use

from src.inspector.core.security import hash_password
from src.inspector.models import User, UserRole
from tests.factories.base import BaseFactory, generate_uuid7, utc_now

# Satisfies the password policy, so it can also be sent to change/reset endpoints
DEFAULT_TEST_PASSWORD = "Correct-Horse-Battery-Staple-9"

# Hashing is the slow part of building a user; do it once
_DEFAULT_HASH = hash_password(DEFAULT_TEST_PASSWORD)


def _username() -> str:
    return f"user_{generate_uuid7().hex[-10:]}"


class UserFactory(BaseFactory):
    __model__ = User

    id = Use(generate_uuid7)
    email = Use(lambda: f"inspector_{generate_uuid7().hex[-10:]}@example.com")
    username = Use(_username)
    normalized_username = PostGenerated(lambda _name, values: values["username"].lower())
    hashed_password = _DEFAULT_HASH
    full_name = "Test Engineer"
    role = UserRole.ENGINEER.value
    is_active = True
    is_locked = False
    lockout_end = None
    login_attempts = 0
    last_login_at = None
    last_login_ip = None
    email_confirmed = True
    created_at = Use(utc_now)
    updated_at = Use(utc_now)

    @classmethod
    def admin(cls, **kwargs):
        return cls.build(
            role=UserRole.ADMIN.value,
            full_name=kwargs.pop("full_name", "Site Admin"),
            **kwargs,
        )

    @classmethod
    def inactive(cls, **kwargs):
        return cls.build(is_active=False, **kwargs)

    @classmethod
    def locked(cls, minutes: int = 30, **kwargs):
        return cls.build(
            is_locked=True,
            lockout_end=utc_now() + timedelta(minutes=minutes),
            **kwargs,
        )
