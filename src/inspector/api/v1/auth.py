"""Authentication endpoints."""

from fastapi import APIRouter, status
from starlette.requests import Request

from src.inspector.api.dependencies import (
    AuthServiceDep,
    Client,
    CurrentPrincipal,
    OptionalPrincipal,
    TokenServiceDep,
)
from src.inspector.api.errors import raise_for_failure
from src.inspector.core.exceptions import ApiError
from src.inspector.core.rate_limit import limiter
from src.inspector.models import UserRole
from src.inspector.schemas import (
    ApiResponse,
    AuthResponse,
    ChangePasswordRequest,
    ForgotPasswordRequest,
    LoginRequest,
    LogoutRequest,
    PrincipalRead,
    RefreshRequest,
    RegisterRequest,
    ResetPasswordRequest,
    TokenResponse,
    UserRead,
)
from src.inspector.services import AuthSession, TokenPair
from src.inspector.services.token_service import INVALID_REFRESH_TOKEN

router = APIRouter(prefix="/auth", tags=["auth"])


def _token_response(pair: TokenPair) -> TokenResponse:
    return TokenResponse(
        token=pair.access_token,
        refresh_token=pair.refresh_token,
        expires_at=pair.access_expires_at,
        refresh_token_expires_at=pair.refresh_expires_at,
    )


def _auth_response(auth: AuthSession) -> AuthResponse:
    return AuthResponse(
        **_token_response(auth.tokens).model_dump(),
        user=UserRead.model_validate(auth.user),
    )


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        403: {"description": "Only an Admin may register a non-Engineer account"},
        409: {"description": "Email or username already exists"},
    },
)
@limiter.limit("3/hour")
async def register(
    request: Request,
    data: RegisterRequest,
    service: AuthServiceDep,
    client: Client,
    principal: OptionalPrincipal,
) -> AuthResponse:
    """Create an account and return a token pair for it."""
    if data.role != UserRole.ENGINEER and (principal is None or not principal.is_admin()):
        raise ApiError(status.HTTP_403_FORBIDDEN, "Insufficient permissions")

    result = await service.register(
        email=data.email,
        username=data.username,
        password=data.password,
        full_name=data.full_name,
        role=data.role,
        ip_address=client.ip_address,
        user_agent=client.user_agent,
    )
    if not result.success or result.data is None:
        raise_for_failure(result)
    return _auth_response(result.data)


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={401: {"description": "Invalid credentials, deactivated or locked account"}},
)
@limiter.limit("5/minute")
async def login(
    request: Request,
    data: LoginRequest,
    service: AuthServiceDep,
    client: Client,
) -> AuthResponse:
    """Authenticate with email and password."""
    result = await service.login(
        data.email,
        data.password,
        ip_address=client.ip_address,
        user_agent=client.user_agent,
    )
    if not result.success or result.data is None:
        raise_for_failure(result)
    return _auth_response(result.data)


@router.post(
    "/refresh",
    response_model=TokenResponse,
    responses={401: {"description": "Invalid or expired refresh token"}},
)
@limiter.limit("10/minute")
async def refresh(
    request: Request,
    data: RefreshRequest,
    service: TokenServiceDep,
    client: Client,
) -> TokenResponse:
    """Exchange a refresh token for a new pair. The presented token is spent."""
    result = await service.refresh(
        data.refresh_token,
        ip_address=client.ip_address,
        user_agent=client.user_agent,
    )
    if not result.success or result.data is None:
        raise ApiError(
            status.HTTP_401_UNAUTHORIZED,
            INVALID_REFRESH_TOKEN,
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _token_response(result.data)


@router.post("/logout", response_model=ApiResponse)
async def logout(data: LogoutRequest, service: AuthServiceDep) -> ApiResponse:
    """Revoke a refresh token.

    The access token is not revoked; it stays usable until it expires.
    """
    result = await service.logout(data.refresh_token)
    if not result.success:
        raise_for_failure(result)
    return ApiResponse(message=result.message)


@router.post("/change-password", response_model=ApiResponse)
@limiter.limit("5/minute")
async def change_password(
    request: Request,
    data: ChangePasswordRequest,
    service: AuthServiceDep,
    principal: CurrentPrincipal,
) -> ApiResponse:
    result = await service.change_password(principal, data.current_password, data.new_password)
    if not result.success:
        raise_for_failure(result)
    return ApiResponse(message=result.message)


@router.post("/forgot-password", response_model=ApiResponse)
@limiter.limit("3/hour")
async def forgot_password(
    request: Request,
    data: ForgotPasswordRequest,
    service: AuthServiceDep,
) -> ApiResponse:
    """Always answers the same way, whether or not the account exists."""
    result = await service.forgot_password(data.email)
    return ApiResponse(message=result.message)


@router.post("/reset-password", response_model=ApiResponse)
@limiter.limit("5/minute")
async def reset_password(
    request: Request,
    data: ResetPasswordRequest,
    service: AuthServiceDep,
) -> ApiResponse:
    result = await service.reset_password(data.email, data.token, data.new_password)
    if not result.success:
        raise_for_failure(result)
    return ApiResponse(message=result.message)


@router.get("/me", response_model=PrincipalRead)
async def me(principal: CurrentPrincipal) -> PrincipalRead:
    """Identity carried by the caller's access token."""
    return PrincipalRead(
        user_id=str(principal.user_id),
        name=principal.name,
        email=principal.email,
        role=principal.role.value,
    )
