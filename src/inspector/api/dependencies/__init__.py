"""FastAPI dependency injection definitions.

Re-exports all dependencies for convenience.
"""

from src.inspector.api.dependencies.auth import (
    AdminPrincipal,
    CurrentPrincipal,
    OptionalPrincipal,
    ensure_owner_or_admin,
    get_optional_principal,
    get_principal,
    require_roles,
)
from src.inspector.api.dependencies.db import DBSession, get_db_session
from src.inspector.api.dependencies.repositories import (
    PasswordResetRepo,
    TokenRepo,
    UserRepo,
    get_password_reset_repository,
    get_token_repository,
    get_user_repository,
)
from src.inspector.api.dependencies.request import Client, ClientInfo, get_client_info
from src.inspector.api.dependencies.services import (
    AuthServiceDep,
    TokenServiceDep,
    UserServiceDep,
    get_auth_service,
    get_token_service,
    get_user_service,
)

__all__ = [
    # Database
    "DBSession",
    "get_db_session",
    # Auth
    "AdminPrincipal",
    "CurrentPrincipal",
    "OptionalPrincipal",
    "ensure_owner_or_admin",
    "get_optional_principal",
    "get_principal",
    "require_roles",
    # Request
    "Client",
    "ClientInfo",
    "get_client_info",
    # Repositories
    "PasswordResetRepo",
    "TokenRepo",
    "UserRepo",
    "get_password_reset_repository",
    "get_token_repository",
    "get_user_repository",
    # Services
    "AuthServiceDep",
    "TokenServiceDep",
    "UserServiceDep",
    "get_auth_service",
    "get_token_service",
    "get_user_service",
]
