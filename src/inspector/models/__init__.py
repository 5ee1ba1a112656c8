"""Model exports.

Import from here: `from src.inspector.models import User, RefreshToken`
"""

from src.inspector.models.auth import PasswordResetToken, RefreshToken
from src.inspector.models.enums import RevocationReason, UserRole
from src.inspector.models.user import User

__all__ = [
    # Enums
    "RevocationReason",
    "UserRole",
    # Models
    "PasswordResetToken",
    "RefreshToken",
    "User",
]
