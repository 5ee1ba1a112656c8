from src.inspector.services.auth_service import AuthService, AuthSession
from src.inspector.services.results import FailureKind, ServiceResult
from src.inspector.services.token_service import TokenPair, TokenService
from src.inspector.services.user_service import UserService

__all__ = [
    "AuthService",
    "AuthSession",
    "FailureKind",
    "ServiceResult",
    "TokenPair",
    "TokenService",
    "UserService",
]
