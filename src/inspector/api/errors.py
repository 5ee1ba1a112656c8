"""Translate failed ServiceResults into HTTP errors."""

from typing import NoReturn

from fastapi import status

from src.inspector.core.exceptions import ApiError
from src.inspector.services import FailureKind, ServiceResult

FAILURE_STATUS: dict[FailureKind, int] = {
    FailureKind.AUTHENTICATION: status.HTTP_401_UNAUTHORIZED,
    FailureKind.AUTHORIZATION: status.HTTP_403_FORBIDDEN,
    FailureKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    FailureKind.CONFLICT: status.HTTP_409_CONFLICT,
    FailureKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
}


def raise_for_failure(result: ServiceResult) -> NoReturn:  # type: ignore[type-arg]
    """Raise the ApiError matching a failed result."""
    status_code = FAILURE_STATUS.get(result.failure, status.HTTP_400_BAD_REQUEST)  # type: ignore[arg-type]
    headers = (
        {"WWW-Authenticate": "Bearer"}
        if status_code == status.HTTP_401_UNAUTHORIZED
        else None
    )
    raise ApiError(status_code, result.message, result.errors, headers=headers)
