"""User endpoints: profile lookup and account administration."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.inspector.api.dependencies import (
    AdminPrincipal,
    CurrentPrincipal,
    UserServiceDep,
    ensure_owner_or_admin,
)
from src.inspector.api.errors import raise_for_failure
from src.inspector.core.exceptions import ApiError
from src.inspector.models import User, UserRole
from src.inspector.schemas import LockUserRequest, PaginatedResponse, UserRead
from src.inspector.services import ServiceResult

router = APIRouter(prefix="/users", tags=["users"])


def _user_or_raise(result: ServiceResult[User]) -> UserRead:
    if not result.success or result.data is None:
        raise_for_failure(result)
    return UserRead.model_validate(result.data)


@router.get(
    "",
    response_model=PaginatedResponse[UserRead],
    responses={403: {"description": "Admin role required"}},
)
async def list_users(
    principal: AdminPrincipal,
    service: UserServiceDep,
    cursor: Annotated[str | None, Query(description="Cursor from the previous page")] = None,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
    role: Annotated[UserRole | None, Query()] = None,
    search: Annotated[str | None, Query(max_length=100, description="Email or username prefix")] = None,
) -> PaginatedResponse[UserRead]:
    """List accounts, newest first."""
    users, next_cursor, has_more = await service.list_users(
        cursor, limit, role=role.value if role else None, search=search
    )
    return PaginatedResponse(
        items=[UserRead.model_validate(user) for user in users],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.get(
    "/{user_id}",
    response_model=UserRead,
    responses={403: {"description": "Neither the owner nor an Admin"}, 404: {"description": "User not found"}},
)
async def get_user(user_id: UUID, principal: CurrentPrincipal, service: UserServiceDep) -> UserRead:
    """A user's profile. Visible to that user and to Admins."""
    ensure_owner_or_admin(principal, user_id)
    user = await service.get_by_id(user_id)
    if user is None:
        raise ApiError(status.HTTP_404_NOT_FOUND, "User not found")
    return UserRead.model_validate(user)


@router.post("/{user_id}/deactivate", response_model=UserRead)
async def deactivate_user(
    user_id: UUID, principal: AdminPrincipal, service: UserServiceDep
) -> UserRead:
    """Deactivate the account and revoke its refresh tokens."""
    return _user_or_raise(await service.deactivate(principal, user_id))


@router.post("/{user_id}/activate", response_model=UserRead)
async def activate_user(
    user_id: UUID, principal: AdminPrincipal, service: UserServiceDep
) -> UserRead:
    return _user_or_raise(await service.activate(principal, user_id))


@router.post("/{user_id}/lock", response_model=UserRead)
async def lock_user(
    user_id: UUID,
    principal: AdminPrincipal,
    service: UserServiceDep,
    data: LockUserRequest | None = None,
) -> UserRead:
    """Lock the account and revoke its refresh tokens."""
    minutes = data.minutes if data else None
    return _user_or_raise(await service.lock(principal, user_id, minutes))


@router.post("/{user_id}/unlock", response_model=UserRead)
async def unlock_user(
    user_id: UUID, principal: AdminPrincipal, service: UserServiceDep
) -> UserRead:
    return _user_or_raise(await service.unlock(principal, user_id))
