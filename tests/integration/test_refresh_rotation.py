"""Refresh-token rotation at the service level, including concurrent redemption."""

import asyncio

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel import select

from src.inspector.core.security import hash_token
from src.inspector.models import RefreshToken, RevocationReason, User
from src.inspector.repositories import RefreshTokenRepository, UserRepository
from src.inspector.services import FailureKind, TokenService
from src.inspector.services.token_service import INVALID_REFRESH_TOKEN
from tests.factories import RefreshTokenFactory

pytestmark = pytest.mark.integration


def _token_service(session: AsyncSession) -> TokenService:
    return TokenService(UserRepository(session), RefreshTokenRepository(session), session)


async def _issue(session_factory: async_sessionmaker[AsyncSession], user: User) -> str:
    async with session_factory() as session:
        pair = _token_service(session).issue_token_pair(user)
        await session.commit()
    return pair.refresh_token


async def test_concurrent_refresh_has_exactly_one_winner(
    session_factory: async_sessionmaker[AsyncSession], engineer: User
):
    presented = await _issue(session_factory, engineer)

    async def redeem():
        async with session_factory() as session:
            return await _token_service(session).refresh(presented)

    results = await asyncio.gather(redeem(), redeem())

    winners = [result for result in results if result.success]
    losers = [result for result in results if not result.success]
    assert len(winners) == 1
    assert len(losers) == 1
    assert losers[0].message == INVALID_REFRESH_TOKEN
    assert losers[0].failure == FailureKind.AUTHENTICATION

    async with session_factory() as session:
        result = await session.execute(
            select(RefreshToken).where(RefreshToken.user_id == engineer.id)
        )
        tokens = list(result.scalars())
    # The presented token plus exactly one replacement
    assert len(tokens) == 2
    assert [token.revoked for token in tokens].count(False) == 1


async def test_expired_token_is_invalid(
    session_factory: async_sessionmaker[AsyncSession],
    db_session: AsyncSession,
    engineer: User,
):
    presented = "expired-refresh-token-value"
    db_session.add(
        RefreshTokenFactory.expired(user_id=engineer.id, token_hash=hash_token(presented))
    )
    await db_session.commit()

    async with session_factory() as session:
        result = await _token_service(session).refresh(presented)

    assert not result.success
    assert result.message == INVALID_REFRESH_TOKEN


async def test_revoke_all_returns_hashes_with_remaining_lifetime(
    session_factory: async_sessionmaker[AsyncSession], engineer: User
):
    first = await _issue(session_factory, engineer)
    second = await _issue(session_factory, engineer)

    async with session_factory() as session:
        service = _token_service(session)
        revoked = await service.revoke_all_for_user(engineer.id, RevocationReason.PASSWORD_CHANGE)
        await session.commit()

    assert {token_hash for token_hash, _ in revoked} == {hash_token(first), hash_token(second)}
    assert all(ttl > 0 for _, ttl in revoked)
