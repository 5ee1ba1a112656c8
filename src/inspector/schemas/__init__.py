from src.inspector.schemas.auth import (
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
)
from src.inspector.schemas.common import ApiResponse, CamelModel
from src.inspector.schemas.pagination import PaginatedResponse
from src.inspector.schemas.user import LockUserRequest, TokenCleanupResponse, UserRead

__all__ = [
    # Common
    "ApiResponse",
    "CamelModel",
    "PaginatedResponse",
    # Auth
    "AuthResponse",
    "ChangePasswordRequest",
    "ForgotPasswordRequest",
    "LoginRequest",
    "LogoutRequest",
    "PrincipalRead",
    "RefreshRequest",
    "RegisterRequest",
    "ResetPasswordRequest",
    "TokenResponse",
    # Users
    "LockUserRequest",
    "TokenCleanupResponse",
    "UserRead",
]
