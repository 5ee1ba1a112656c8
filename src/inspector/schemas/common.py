"""Shared schema base classes and the API response envelope."""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for wire schemas: camelCase JSON, snake_case attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(CamelModel):
    """Envelope for operations that only report an outcome."""

    success: bool = True
    message: str
    errors: list[str] = Field(default_factory=list)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes read from the database."""
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value
