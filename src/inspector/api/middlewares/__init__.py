"""Application middlewares."""

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import RequestResponseEndpoint

from src.inspector.core.config import Settings
from src.inspector.core.rate_limit import global_rate_limit_middleware
from src.inspector.core.security import SecurityHeadersMiddleware

from .logging_context import logging_context_middleware
from .request_tracking import request_tracking_middleware

__all__ = [
    "setup_middlewares",
    "global_rate_limit_middleware",
    "logging_context_middleware",
    "request_tracking_middleware",
]


def setup_middlewares(app: FastAPI, settings: Settings) -> None:
    """Install the middleware stack, innermost first.

    Starlette runs the last-added middleware first. The correlation ID is
    therefore assigned before the logging context is bound, and rate-limited
    responses still carry CORS and security headers.
    """

    @app.middleware("http")
    async def _logging_context(request: Request, call_next: RequestResponseEndpoint) -> Response:
        return await logging_context_middleware(request, call_next)

    @app.middleware("http")
    async def _request_tracking(request: Request, call_next: RequestResponseEndpoint) -> Response:
        return await request_tracking_middleware(request, call_next)

    @app.middleware("http")
    async def _global_rate_limit(request: Request, call_next: RequestResponseEndpoint) -> Response:
        return await global_rate_limit_middleware(request, call_next)

    csp = None
    if not settings.enable_openapi and settings.csp_production:
        csp = settings.csp_production
    app.add_middleware(SecurityHeadersMiddleware, content_security_policy=csp)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )

    app.add_middleware(CorrelationIdMiddleware)
