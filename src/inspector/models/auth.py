"""Authentication-related models - refresh and password reset tokens."""

from datetime import datetime
from uuid import UUID, uuid7

from sqlmodel import Field, SQLModel

from src.inspector.models.base import utc_now


class RefreshToken(SQLModel, table=True):
    """Refresh token storage. Only the SHA256 hash of the secret is persisted."""

    __tablename__ = "refresh_tokens"

    id: UUID = Field(default_factory=uuid7, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", ondelete="CASCADE", index=True)
    token_hash: str = Field(max_length=255, unique=True, index=True)
    expires_at: datetime = Field(index=True)
    created_at: datetime = Field(default_factory=utc_now)
    revoked: bool = Field(default=False)
    revoked_reason: str | None = Field(default=None, max_length=50)
    revoked_at: datetime | None = Field(default=None)
    ip_address: str | None = Field(default=None, max_length=45)
    user_agent: str | None = Field(default=None, max_length=512)

    def is_active(self, now: datetime) -> bool:
        return not self.revoked and self.expires_at > now


class PasswordResetToken(SQLModel, table=True):
    """Single-use, time-limited password reset token."""

    __tablename__ = "password_reset_tokens"

    id: UUID = Field(default_factory=uuid7, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", ondelete="CASCADE", index=True)
    token_hash: str = Field(max_length=255, unique=True, index=True)
    expires_at: datetime
    created_at: datetime = Field(default_factory=utc_now)
    used: bool = Field(default=False)
    used_at: datetime | None = Field(default=None)
