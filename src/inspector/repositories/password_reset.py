"""Repository for PasswordResetToken entity."""

from uuid import UUID

from sqlmodel import select, update

from src.inspector.models import PasswordResetToken
from src.inspector.models.base import utc_now
from src.inspector.repositories.base import BaseRepository


class PasswordResetTokenRepository(BaseRepository[PasswordResetToken]):
    model = PasswordResetToken

    async def get_valid_by_hash(self, token_hash: str) -> PasswordResetToken | None:
        """Get an unused, non-expired token by its hash."""
        result = await self.session.execute(
            select(PasswordResetToken).where(
                PasswordResetToken.token_hash == token_hash,
                PasswordResetToken.used == False,  # noqa: E712
                PasswordResetToken.expires_at > utc_now(),
            )
        )
        return result.scalar_one_or_none()

    async def invalidate_user_tokens(self, user_id: UUID) -> None:
        """Mark all outstanding tokens of a user as used."""
        await self.session.execute(
            update(PasswordResetToken)
            .where(PasswordResetToken.user_id == user_id)  # type: ignore[arg-type]
            .where(PasswordResetToken.used == False)  # type: ignore[arg-type]  # noqa: E712
            .values(used=True, used_at=utc_now())
        )

    async def mark_used(self, token: PasswordResetToken) -> bool:
        """Consume a token. Conditional on it still being unused, so it can be redeemed once."""
        result = await self.session.execute(
            update(PasswordResetToken)
            .where(PasswordResetToken.id == token.id)  # type: ignore[arg-type]
            .where(PasswordResetToken.used == False)  # type: ignore[arg-type]  # noqa: E712
            .values(used=True, used_at=utc_now())
        )
        return (result.rowcount or 0) == 1  # type: ignore[attr-defined]
