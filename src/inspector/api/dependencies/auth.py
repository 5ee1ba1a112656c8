"""Authorization guard dependencies.

The guard trusts the access token alone: signature, issuer, audience, expiry
and type. It does not look the user up, so a deactivated account keeps access
until its current access token expires.
"""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, status

from src.inspector.core.exceptions import ApiError
from src.inspector.core.logging import bind_user_context, get_logger
from src.inspector.core.security import Principal, decode_access_token
from src.inspector.models import UserRole

logger = get_logger(__name__)

BEARER_PREFIX = "Bearer "
INSUFFICIENT_PERMISSIONS = "Insufficient permissions"


def _unauthorized(message: str) -> ApiError:
    return ApiError(
        status.HTTP_401_UNAUTHORIZED,
        message,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_principal(
    authorization: Annotated[str | None, Header()] = None,
) -> Principal:
    """Validate the bearer access token and return the caller's identity."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise _unauthorized("Missing or invalid authorization header")

    payload = decode_access_token(authorization[len(BEARER_PREFIX) :].strip())
    if payload is None:
        raise _unauthorized("Invalid or expired token")

    principal = Principal.from_claims(payload)
    if principal is None:
        raise _unauthorized("Invalid token payload")

    bind_user_context(principal.user_id, principal.role.value, principal.email)
    return principal


CurrentPrincipal = Annotated[Principal, Depends(get_principal)]


async def get_optional_principal(
    authorization: Annotated[str | None, Header()] = None,
) -> Principal | None:
    """Like get_principal, but anonymous callers get None instead of a 401."""
    if authorization is None:
        return None
    return await get_principal(authorization)


OptionalPrincipal = Annotated[Principal | None, Depends(get_optional_principal)]


def require_roles(*roles: UserRole):  # type: ignore[no-untyped-def]
    """Build a dependency that admits only principals holding one of the roles."""

    async def _require(principal: CurrentPrincipal) -> Principal:
        if not principal.has_role(*roles):
            logger.warning(
                "Role check failed",
                required=[role.value for role in roles],
                role=principal.role.value,
            )
            raise ApiError(status.HTTP_403_FORBIDDEN, INSUFFICIENT_PERMISSIONS)
        return principal

    return _require


AdminPrincipal = Annotated[Principal, Depends(require_roles(UserRole.ADMIN))]


def ensure_owner_or_admin(principal: Principal, owner_id: UUID | str | None) -> None:
    """Raise 403 unless the caller owns the resource or is an Admin."""
    if not principal.can_access(owner_id):
        logger.warning("Ownership check failed", owner_id=str(owner_id))
        raise ApiError(status.HTTP_403_FORBIDDEN, INSUFFICIENT_PERMISSIONS)
