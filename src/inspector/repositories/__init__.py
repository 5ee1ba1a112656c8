"""Repository layer - data access abstraction."""

from src.inspector.repositories.base import BaseRepository
from src.inspector.repositories.password_reset import PasswordResetTokenRepository
from src.inspector.repositories.token import RefreshTokenRepository
from src.inspector.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "PasswordResetTokenRepository",
    "RefreshTokenRepository",
    "UserRepository",
]
