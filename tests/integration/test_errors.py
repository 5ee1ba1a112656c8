"""Error envelope, request correlation and response headers."""

from unittest.mock import patch

import pytest
from httpx import ASGITransport, AsyncClient

from src.inspector.main import create_app
from src.inspector.services.token_service import TokenService
from tests.helpers import API

pytestmark = pytest.mark.integration


async def test_not_found_uses_error_envelope(client: AsyncClient):
    response = await client.get(f"{API}/nonexistent-endpoint")

    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Not Found"
    assert body["errors"] == []
    assert body["request_id"]


async def test_request_id_matches_response_header(client: AsyncClient):
    response = await client.get(f"{API}/nonexistent-endpoint")

    assert response.json()["request_id"] == response.headers["x-request-id"]


async def test_incoming_request_id_is_propagated(client: AsyncClient):
    request_id = "2f1d7a3c-7d0e-4c53-9a4a-5c8f3b7e1a90"

    response = await client.get(
        f"{API}/nonexistent-endpoint", headers={"X-Request-ID": request_id}
    )

    assert response.json()["request_id"] == request_id


async def test_schema_validation_lists_fields(client: AsyncClient):
    response = await client.post(f"{API}/auth/login", json={"email": "not-an-email"})

    assert response.status_code == 422
    body = response.json()
    assert body["message"] == "Validation failed"
    fields = {error.split(":")[0] for error in body["errors"]}
    assert {"email", "password"} <= fields


async def test_unexpected_error_is_opaque(engine):
    app = create_app()
    transport = ASGITransport(app=app, raise_app_exceptions=False)

    with patch.object(TokenService, "refresh", side_effect=RuntimeError("db exploded: secret")):
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.post(
                f"{API}/auth/refresh", json={"refreshToken": "whatever"}
            )

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "An unexpected error occurred"
    assert "secret" not in response.text


async def test_security_headers_are_set(client: AsyncClient):
    response = await client.get(f"{API}/nonexistent-endpoint")

    assert response.headers["x-content-type-options"] == "nosniff"
    assert response.headers["x-frame-options"] == "DENY"
    assert response.headers["cache-control"] == "no-store"
    assert "content-security-policy" in response.headers
