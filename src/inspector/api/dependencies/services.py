"""Service factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.inspector.api.dependencies.db import DBSession
from src.inspector.api.dependencies.repositories import PasswordResetRepo, TokenRepo, UserRepo
from src.inspector.services import AuthService, TokenService, UserService


def get_token_service(user_repo: UserRepo, token_repo: TokenRepo, session: DBSession) -> TokenService:
    return TokenService(user_repo, token_repo, session)


TokenServiceDep = Annotated[TokenService, Depends(get_token_service)]


def get_auth_service(
    user_repo: UserRepo,
    reset_repo: PasswordResetRepo,
    token_service: TokenServiceDep,
    session: DBSession,
) -> AuthService:
    return AuthService(user_repo, reset_repo, token_service, session)


def get_user_service(
    user_repo: UserRepo,
    token_service: TokenServiceDep,
    session: DBSession,
) -> UserService:
    return UserService(user_repo, token_service, session)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
