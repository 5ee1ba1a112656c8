from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field, field_serializer

from src.inspector.models import UserRole
from src.inspector.schemas.common import CamelModel, as_utc


class UserRead(CamelModel):
    id: UUID
    email: EmailStr
    username: str
    full_name: str
    role: UserRole
    is_active: bool
    is_locked: bool
    email_confirmed: bool
    last_login_at: datetime | None = None
    created_at: datetime

    @field_serializer("created_at", "last_login_at")
    def serialize_timestamps(self, value: datetime | None) -> str | None:
        return as_utc(value).isoformat() if value else None


class LockUserRequest(CamelModel):
    """Admin lock. Omitting minutes uses the configured default (24h)."""

    minutes: int | None = Field(default=None, ge=1, le=60 * 24 * 365)


class TokenCleanupResponse(CamelModel):
    deleted: int
