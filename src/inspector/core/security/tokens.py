"""JWT access tokens.

Access tokens are stateless: validity is signature + issuer + audience + expiry.
They cannot be revoked before they expire.
"""

from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID, uuid7

from jose import JWTError, jwt

from src.inspector.core.config import get_settings


class TokenType:
    """Token type claim values."""

    ACCESS = "access"


def create_access_token(
    subject: str | UUID,
    name: str,
    email: str,
    role: str,
    full_name: str | None = None,
    expires_delta: timedelta | None = None,
) -> tuple[str, datetime]:
    """Create a signed JWT access token.

    Returns (token, expiry as naive UTC datetime).
    """
    settings = get_settings()
    now = datetime.now(UTC)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    expire = now + expires_delta

    to_encode = {
        "sub": str(subject),
        "name": name,
        "email": email,
        "full_name": full_name or "",
        "role": role,
        "type": TokenType.ACCESS,
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "iat": now,
        "exp": expire,
        "jti": str(uuid7()),
    }
    token: str = jwt.encode(  # type: ignore[assignment]
        to_encode,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return token, expire.replace(tzinfo=None)


def decode_access_token(token: str) -> dict[str, Any] | None:
    """Decode and validate an access token. Returns None on any failure.

    Checks signature, expiry, issuer, audience and the token type claim.
    """
    settings = get_settings()
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
        )
    except JWTError:
        return None

    if payload.get("type") != TokenType.ACCESS:
        return None
    if not payload.get("sub") or not payload.get("role"):
        return None
    return payload
