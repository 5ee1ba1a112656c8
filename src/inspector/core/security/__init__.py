"""Security utilities - hashing, JWT access tokens, principal.

Re-exports all security-related functions for convenience.
"""

from src.inspector.core.security.crypto import (
    DUMMY_PASSWORD_HASH,
    generate_refresh_token,
    generate_reset_token,
    hash_password,
    hash_token,
    verify_password,
)
from src.inspector.core.security.headers import SecurityHeadersMiddleware
from src.inspector.core.security.principal import Principal
from src.inspector.core.security.tokens import (
    TokenType,
    create_access_token,
    decode_access_token,
)

__all__ = [
    # Crypto
    "DUMMY_PASSWORD_HASH",
    "generate_refresh_token",
    "generate_reset_token",
    "hash_password",
    "hash_token",
    "verify_password",
    # Access tokens
    "TokenType",
    "create_access_token",
    "decode_access_token",
    # Identity
    "Principal",
    # Middleware
    "SecurityHeadersMiddleware",
]
