"""Outcome values returned by services for expected failures.

Services never raise for a wrong password or an expired token; they return a
failed ServiceResult. Exceptions are left for conditions nobody expected.
"""

from dataclasses import dataclass, field
from enum import Enum


class FailureKind(str, Enum):
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    VALIDATION = "validation"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class ServiceResult[T]:
    success: bool
    message: str
    data: T | None = None
    errors: list[str] = field(default_factory=list)
    failure: FailureKind | None = None

    @classmethod
    def ok(cls, message: str, data: T | None = None) -> "ServiceResult[T]":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(
        cls,
        kind: FailureKind,
        message: str,
        errors: list[str] | None = None,
    ) -> "ServiceResult[T]":
        return cls(success=False, message=message, errors=errors or [], failure=kind)
