"""Helpers shared by the HTTP-level tests."""

from typing import Any

from httpx import AsyncClient

from tests.factories import DEFAULT_TEST_PASSWORD

API = "/api/v1"


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


async def login(client: AsyncClient, email: str, password: str = DEFAULT_TEST_PASSWORD) -> dict[str, Any]:
    """Log in through the API and return the AuthResponse body."""
    response = await client.post(f"{API}/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()


async def refresh(client: AsyncClient, refresh_token: str) -> Any:
    return await client.post(f"{API}/auth/refresh", json={"refreshToken": refresh_token})
