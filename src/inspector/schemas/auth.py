import re
from datetime import datetime

from pydantic import EmailStr, Field, field_serializer, field_validator
from zxcvbn import zxcvbn

from src.inspector.models import UserRole
from src.inspector.schemas.common import CamelModel, as_utc
from src.inspector.schemas.user import UserRead

# Minimum zxcvbn score (0-4 scale): 3 = "safely unguessable"
MIN_PASSWORD_SCORE = 3
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 128

COMMON_PASSWORDS = frozenset({"password", "123456", "qwerty", "admin", "user", "test"})
USERNAME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9._-]*$")
FULL_NAME_PATTERN = re.compile(r"^[a-zA-Z\s\-']+$")


def validate_password_policy(password: str) -> str:
    """Composition rules first, then zxcvbn entropy estimation."""
    if not re.search(r"[A-Z]", password):
        raise ValueError("Password must contain at least one uppercase letter")
    if not re.search(r"[a-z]", password):
        raise ValueError("Password must contain at least one lowercase letter")
    if not re.search(r"\d", password):
        raise ValueError("Password must contain at least one digit")
    if not re.search(r"[^a-zA-Z0-9]", password):
        raise ValueError("Password must contain at least one special character")
    if password.lower() in COMMON_PASSWORDS:
        raise ValueError("Password is too common")

    result = zxcvbn(password)
    if result["score"] < MIN_PASSWORD_SCORE:
        feedback = result.get("feedback", {})
        warning = feedback.get("warning", "")
        suggestions = feedback.get("suggestions", [])
        if warning:
            raise ValueError(f"Weak password: {warning}")
        if suggestions:
            raise ValueError(f"Weak password: {suggestions[0]}")
        raise ValueError("Password is too weak. Use a longer password with a mix of characters.")
    return password


class RegisterRequest(CamelModel):
    email: EmailStr
    username: str = Field(min_length=3, max_length=50)
    password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)
    full_name: str = Field(min_length=2, max_length=100)
    # Anything other than Engineer needs an Admin bearer token
    role: UserRole = UserRole.ENGINEER

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        if not USERNAME_PATTERN.fullmatch(v):
            raise ValueError(
                "Username must start with a letter and contain only letters, digits, '.', '_' or '-'"
            )
        return v

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v: str) -> str:
        v = v.strip()
        if not FULL_NAME_PATTERN.fullmatch(v):
            raise ValueError("Full name may only contain letters, spaces, hyphens and apostrophes")
        return v

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        return validate_password_policy(v)


class LoginRequest(CamelModel):
    email: EmailStr
    # No policy checks here: a login must fail with the generic message, not a 422
    password: str = Field(min_length=1, max_length=PASSWORD_MAX_LENGTH)


class RefreshRequest(CamelModel):
    refresh_token: str = Field(min_length=1, max_length=512)


class LogoutRequest(CamelModel):
    refresh_token: str = Field(default="", max_length=512)


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(min_length=1, max_length=PASSWORD_MAX_LENGTH)
    new_password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)

    @field_validator("new_password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        return validate_password_policy(v)


class ForgotPasswordRequest(CamelModel):
    email: EmailStr


class ResetPasswordRequest(CamelModel):
    email: EmailStr
    token: str = Field(min_length=16, max_length=256)
    new_password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)

    @field_validator("new_password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        return validate_password_policy(v)


class TokenResponse(CamelModel):
    """Token pair on the wire: {token, refreshToken, expiresAt, refreshTokenExpiresAt}."""

    token: str
    refresh_token: str
    expires_at: datetime
    refresh_token_expires_at: datetime

    @field_serializer("expires_at", "refresh_token_expires_at")
    def serialize_expiry(self, value: datetime) -> str:
        return as_utc(value).isoformat()


class AuthResponse(TokenResponse):
    """Login / registration response: the token pair plus the user profile."""

    user: UserRead


class PrincipalRead(CamelModel):
    """Identity as seen by the authorization guard (from access token claims)."""

    user_id: str
    name: str
    email: str
    role: str
