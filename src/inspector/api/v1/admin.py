"""Admin maintenance endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query

from src.inspector.api.dependencies import AdminPrincipal, TokenServiceDep
from src.inspector.schemas import TokenCleanupResponse

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post(
    "/tokens/cleanup",
    response_model=TokenCleanupResponse,
    summary="Delete stale refresh tokens",
    description=(
        "Delete refresh tokens that expired, or were revoked, more than "
        "`retentionDays` days ago. Requires the Admin role."
    ),
)
async def cleanup_tokens(
    principal: AdminPrincipal,
    service: TokenServiceDep,
    retention_days: Annotated[int | None, Query(alias="retentionDays", ge=0, le=3650)] = None,
) -> TokenCleanupResponse:
    deleted = await service.cleanup_expired(retention_days)
    return TokenCleanupResponse(deleted=deleted)
