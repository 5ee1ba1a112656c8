"""HTTP error envelope and exception handlers.

Every error response has the same shape:

    {"success": false, "message": "...", "errors": [...], "request_id": "..."}
"""

from typing import Any

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.inspector.core.logging import get_logger

logger = get_logger(__name__)

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"


class ApiError(HTTPException):
    """HTTPException that also carries a list of error details."""

    def __init__(
        self,
        status_code: int,
        message: str,
        errors: list[str] | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(status_code=status_code, detail=message, headers=headers)
        self.errors = errors or []


def error_body(message: str, errors: list[str] | None = None) -> dict[str, Any]:
    return {
        "success": False,
        "message": message,
        "errors": errors or [],
        "request_id": correlation_id.get(),
    }


def _format_validation_error(error: dict[str, Any]) -> str:
    # Drop the leading "body"/"query" segment: "body.email" -> "email"
    location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(location)
    message = str(error.get("msg", "Invalid value"))
    return f"{field}: {message}" if field else message


def setup_exception_handlers(app: FastAPI) -> None:
    """Register handlers that render the error envelope with request_id."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(str(exc.detail), getattr(exc, "errors", None)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content=error_body(
                "Validation failed",
                [_format_validation_error(error) for error in exc.errors()],
            ),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=correlation_id.get(),
            path=request.url.path,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body(UNEXPECTED_ERROR_MESSAGE),
        )
