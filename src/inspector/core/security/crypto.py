"""Cryptographic utilities - password hashing and opaque token generation."""

import base64
import secrets
from hashlib import sha256

import argon2

from src.inspector.core.config import get_settings

# 64 random bytes = 512 bits of entropy
REFRESH_TOKEN_BYTES = 64
RESET_TOKEN_BYTES = 32


def hash_token(token: str) -> str:
    """Hash a token using SHA256 for secure storage."""
    return sha256(token.encode()).hexdigest()


def generate_refresh_token() -> str:
    """Generate an opaque refresh token (base64 of 64 random bytes)."""
    return base64.b64encode(secrets.token_bytes(REFRESH_TOKEN_BYTES)).decode()


def generate_reset_token() -> str:
    """Generate a URL-safe single-use password reset token."""
    return secrets.token_urlsafe(RESET_TOKEN_BYTES)


def _create_password_hasher() -> argon2.PasswordHasher:
    """Create password hasher with settings from config."""
    settings = get_settings()
    return argon2.PasswordHasher(
        time_cost=settings.argon2_time_cost,
        memory_cost=settings.argon2_memory_cost,
        parallelism=settings.argon2_parallelism,
    )


_password_hasher = _create_password_hasher()

# Verified against when the account does not exist so both paths cost the same
DUMMY_PASSWORD_HASH = _password_hasher.hash(secrets.token_urlsafe(16))


def hash_password(password: str) -> str:
    """Hash password using Argon2id."""
    return _password_hasher.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """Verify password against hash. Returns False on any error."""
    try:
        _password_hasher.verify(hashed, password)
        return True
    except argon2.exceptions.VerifyMismatchError:
        return False
    except argon2.exceptions.InvalidHashError:
        return False
