"""Base repository with common data access operations."""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from src.inspector.schemas.pagination import decode_cursor, encode_cursor

class BaseRepository[ModelType: SQLModel]:
    """Base repository.

    Repositories handle data access only. Transaction control (commit/rollback)
    belongs to the service layer.
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, id: UUID) -> ModelType | None:
        result = await self.session.execute(
            select(self.model).where(self.model.id == id)  # type: ignore[attr-defined]
        )
        return result.scalar_one_or_none()

    def add(self, entity: ModelType) -> None:
        """Add entity to session (no flush/commit)."""
        self.session.add(entity)

    async def paginate(
        self,
        query: Any,
        cursor: str | None,
        limit: int,
        cursor_field: Any,
    ) -> tuple[list[ModelType], str | None, bool]:
        """Cursor-based pagination, newest first.

        Returns (items, next_cursor, has_more). An undecodable cursor restarts
        from the first page.
        """
        if cursor:
            after = _cursor_value(cursor)
            if after is not None:
                query = query.where(cursor_field < after)

        query = query.order_by(cursor_field.desc()).limit(limit + 1)
        result = await self.session.execute(query)
        items = list(result.scalars().all())

        has_more = len(items) > limit
        items = items[:limit]

        next_cursor = None
        if has_more and items:
            last = getattr(items[-1], cursor_field.key)
            if last is not None:
                next_cursor = encode_cursor(
                    last.isoformat() if isinstance(last, datetime) else str(last)
                )

        return items, next_cursor, has_more


def _cursor_value(cursor: str) -> datetime | UUID | str | None:
    """Decode a cursor into the comparable it was made from. None if undecodable."""
    try:
        raw = decode_cursor(cursor)
    except (ValueError, TypeError):
        return None
    for parse in (datetime.fromisoformat, UUID):
        try:
            return parse(raw)
        except ValueError:
            continue
    return raw
