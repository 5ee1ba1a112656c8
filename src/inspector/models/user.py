"""User model - the credential store."""

from datetime import datetime
from uuid import UUID, uuid7

from sqlmodel import Field, SQLModel

from src.inspector.models.base import utc_now
from src.inspector.models.enums import UserRole


class User(SQLModel, table=True):
    """User account. Never deleted, only deactivated."""

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid7, primary_key=True)
    # Stored lower-cased, so uniqueness is case-insensitive
    email: str = Field(max_length=255, unique=True, index=True)
    username: str = Field(max_length=50)
    normalized_username: str = Field(max_length=50, unique=True, index=True)
    hashed_password: str = Field(max_length=255)
    full_name: str = Field(max_length=100)
    role: str = Field(default=UserRole.ENGINEER.value, max_length=20)
    is_active: bool = Field(default=True)
    is_locked: bool = Field(default=False)
    lockout_end: datetime | None = Field(default=None)
    login_attempts: int = Field(default=0)
    last_login_at: datetime | None = Field(default=None)
    last_login_ip: str | None = Field(default=None, max_length=45)
    email_confirmed: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def display_name(self) -> str:
        return self.username or self.email

    def is_locked_out(self, now: datetime) -> bool:
        """True while an administrative or failed-login lock is in force."""
        if not self.is_locked:
            return False
        return self.lockout_end is None or self.lockout_end > now
