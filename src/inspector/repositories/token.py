"""Repository for RefreshToken entity - the refresh token store."""

from datetime import timedelta
from uuid import UUID

from sqlalchemy import and_, delete, or_, update
from sqlmodel import select

from src.inspector.models import RefreshToken, RevocationReason
from src.inspector.models.base import utc_now
from src.inspector.repositories.base import BaseRepository


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """Refresh token store. Rows are looked up by the SHA256 hash of the secret."""

    model = RefreshToken

    async def get_by_hash(self, token_hash: str) -> RefreshToken | None:
        result = await self.session.execute(
            select(RefreshToken).where(RefreshToken.token_hash == token_hash)
        )
        # A duplicate hash is treated as a miss rather than an error
        rows = result.scalars().all()
        return rows[0] if len(rows) == 1 else None

    async def revoke_if_active(self, token_hash: str, reason: RevocationReason) -> bool:
        """Atomically revoke a token that is not yet revoked.

        Single conditional UPDATE, so of two concurrent callers presenting the
        same token exactly one sees a row affected.

        Returns True if this call revoked the token.
        """
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.token_hash == token_hash)  # type: ignore[arg-type]
            .where(RefreshToken.revoked == False)  # type: ignore[arg-type]  # noqa: E712
            .values(revoked=True, revoked_reason=reason.value, revoked_at=utc_now())
        )
        result = await self.session.execute(stmt)
        return (result.rowcount or 0) == 1  # type: ignore[attr-defined]

    async def get_active_tokens_for_user(self, user_id: UUID) -> list[RefreshToken]:
        """All non-revoked, non-expired tokens of a user."""
        result = await self.session.execute(
            select(RefreshToken).where(
                RefreshToken.user_id == user_id,
                RefreshToken.revoked == False,  # noqa: E712
                RefreshToken.expires_at > utc_now(),
            )
        )
        return list(result.scalars().all())

    async def revoke_all_for_user(self, user_id: UUID, reason: RevocationReason) -> int:
        """Revoke every non-revoked token of a user. Returns the number revoked."""
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.user_id == user_id)  # type: ignore[arg-type]
            .where(RefreshToken.revoked == False)  # type: ignore[arg-type]  # noqa: E712
            .values(revoked=True, revoked_reason=reason.value, revoked_at=utc_now())
        )
        result = await self.session.execute(stmt)
        return result.rowcount or 0  # type: ignore[attr-defined]

    async def cleanup_expired(self, retention_days: int) -> int:
        """Delete tokens expired, or revoked, more than retention_days ago.

        Returns the number of rows deleted. The caller commits.
        """
        cutoff = utc_now() - timedelta(days=retention_days)
        stmt = delete(RefreshToken).where(
            or_(
                RefreshToken.expires_at < cutoff,  # type: ignore[arg-type]
                and_(
                    RefreshToken.revoked == True,  # type: ignore[arg-type]  # noqa: E712
                    RefreshToken.revoked_at < cutoff,  # type: ignore[arg-type,operator]
                ),
            )
        )
        result = await self.session.execute(stmt)
        return result.rowcount or 0  # type: ignore[attr-defined]
