"""Repository for User entity."""

from sqlalchemy import or_
from sqlmodel import select

from src.inspector.models import User
from src.inspector.repositories.base import BaseRepository


def normalize_email(email: str) -> str:
    return email.strip().lower()


def normalize_username(username: str) -> str:
    return username.strip().lower()


class UserRepository(BaseRepository[User]):
    """Credential store lookups. All comparisons are case-insensitive."""

    model = User

    async def get_by_email(self, email: str) -> User | None:
        result = await self.session.execute(
            select(User).where(User.email == normalize_email(email))
        )
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> User | None:
        result = await self.session.execute(
            select(User).where(User.normalized_username == normalize_username(username))
        )
        return result.scalar_one_or_none()

    async def exists_by_email(self, email: str) -> bool:
        return await self.get_by_email(email) is not None

    async def exists_by_username(self, username: str) -> bool:
        return await self.get_by_username(username) is not None

    async def list_users(
        self,
        cursor: str | None,
        limit: int,
        role: str | None = None,
        search: str | None = None,
    ) -> tuple[list[User], str | None, bool]:
        """List users newest first, optionally filtered by role or email/username prefix."""
        query = select(User)
        if role:
            query = query.where(User.role == role)
        if search:
            term = f"{search.strip().lower()}%"
            query = query.where(
                or_(User.email.like(term), User.normalized_username.like(term))  # type: ignore[attr-defined]
            )
        return await self.paginate(query, cursor, limit, User.created_at)
