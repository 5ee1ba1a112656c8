"""Cursor-based pagination."""

import base64
from typing import Generic, TypeVar

from pydantic import Field

from src.inspector.schemas.common import CamelModel

T = TypeVar("T")


class PaginatedResponse(CamelModel, Generic[T]):
    """A page of items plus an opaque cursor for the next page."""

    items: list[T]
    next_cursor: str | None = Field(
        default=None,
        description="Opaque cursor for fetching the next page. None if no more pages.",
    )
    has_more: bool = Field(default=False, description="Whether more items follow this page.")


def encode_cursor(value: str) -> str:
    return base64.urlsafe_b64encode(value.encode()).decode()


def decode_cursor(cursor: str) -> str:
    """Decode a cursor. Raises ValueError if it is not valid base64 text."""
    try:
        return base64.urlsafe_b64decode(cursor.encode()).decode()
    except Exception as e:
        raise ValueError("Invalid cursor") from e
