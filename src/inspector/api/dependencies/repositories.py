"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.inspector.api.dependencies.db import DBSession
from src.inspector.repositories import (
    PasswordResetTokenRepository,
    RefreshTokenRepository,
    UserRepository,
)


def get_user_repository(session: DBSession) -> UserRepository:
    return UserRepository(session)


def get_token_repository(session: DBSession) -> RefreshTokenRepository:
    return RefreshTokenRepository(session)


def get_password_reset_repository(session: DBSession) -> PasswordResetTokenRepository:
    return PasswordResetTokenRepository(session)


UserRepo = Annotated[UserRepository, Depends(get_user_repository)]
TokenRepo = Annotated[RefreshTokenRepository, Depends(get_token_repository)]
PasswordResetRepo = Annotated[PasswordResetTokenRepository, Depends(get_password_reset_repository)]
