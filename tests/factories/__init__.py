"""Test factories for generating test data.

    from tests.factories import UserFactory, RefreshTokenFactory, ...
"""

from tests.factories.auth import PasswordResetTokenFactory, RefreshTokenFactory
from tests.factories.base import BaseFactory, generate_uuid7, utc_now
from tests.factories.user import DEFAULT_TEST_PASSWORD, UserFactory

__all__ = [
    # Base
    "BaseFactory",
    "generate_uuid7",
    "utc_now",
    # User
    "DEFAULT_TEST_PASSWORD",
    "UserFactory",
    # Tokens
    "PasswordResetTokenFactory",
    "RefreshTokenFactory",
]
