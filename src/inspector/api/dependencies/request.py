"""Client metadata recorded alongside issued refresh tokens."""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Request

from src.inspector.core.config import get_settings


@dataclass(frozen=True)
class ClientInfo:
    ip_address: str | None
    user_agent: str | None


def get_client_ip(
    forwarded_for: str | None,
    client_host: str | None,
    trusted_proxies: list[str] | None = None,
) -> str | None:
    """Connection peer, or the first X-Forwarded-For address when the peer is a trusted proxy."""
    if not forwarded_for or client_host not in (trusted_proxies or []):
        return client_host
    return forwarded_for.split(",")[0].strip()[:45] or client_host


def get_client_info(request: Request) -> ClientInfo:
    return ClientInfo(
        ip_address=get_client_ip(
            request.headers.get("x-forwarded-for"),
            request.client.host if request.client else None,
            get_settings().trusted_proxy_ips,
        ),
        user_agent=request.headers.get("user-agent"),
    )


Client = Annotated[ClientInfo, Depends(get_client_info)]
