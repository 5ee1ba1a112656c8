"""Tests for password hashing, opaque tokens and JWT access tokens."""

import base64
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest
from jose import jwt

from src.inspector.core.config import get_settings
from src.inspector.core.security import (
    DUMMY_PASSWORD_HASH,
    create_access_token,
    decode_access_token,
    generate_refresh_token,
    generate_reset_token,
    hash_password,
    hash_token,
    verify_password,
)

pytestmark = pytest.mark.unit


class TestPasswordHashing:
    def test_hash_verifies(self):
        hashed = hash_password("Correct-Horse-Battery-Staple-9")

        assert hashed.startswith("$argon2id$")
        assert verify_password("Correct-Horse-Battery-Staple-9", hashed)

    def test_wrong_password_rejected(self):
        hashed = hash_password("Correct-Horse-Battery-Staple-9")

        assert not verify_password("correct-horse-battery-staple-9", hashed)

    def test_malformed_hash_is_false_not_error(self):
        assert not verify_password("anything", "not-an-argon2-hash")

    def test_hashes_are_salted(self):
        assert hash_password("same-Password-1!") != hash_password("same-Password-1!")

    def test_dummy_hash_never_matches_user_input(self):
        assert not verify_password("", DUMMY_PASSWORD_HASH)
        assert not verify_password("Correct-Horse-Battery-Staple-9", DUMMY_PASSWORD_HASH)


class TestOpaqueTokens:
    def test_refresh_token_is_base64_of_64_bytes(self):
        token = generate_refresh_token()

        assert len(base64.b64decode(token)) == 64

    def test_refresh_tokens_are_unique(self):
        assert len({generate_refresh_token() for _ in range(50)}) == 50

    def test_reset_token_is_url_safe(self):
        token = generate_reset_token()

        assert len(token) >= 32
        assert "+" not in token and "/" not in token

    def test_hash_token_is_stable_sha256_hex(self):
        digest = hash_token("abc")

        assert digest == hash_token("abc")
        assert digest == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"


class TestAccessTokens:
    def _token(self, **overrides):
        kwargs = {
            "subject": uuid4(),
            "name": "jdoe",
            "email": "jdoe@example.com",
            "role": "Engineer",
            "full_name": "Jane Doe",
        }
        kwargs.update(overrides)
        return create_access_token(**kwargs)

    def test_round_trip_carries_identity_claims(self):
        user_id = uuid4()
        token, expires_at = self._token(subject=user_id)

        claims = decode_access_token(token)

        assert claims is not None
        assert claims["sub"] == str(user_id)
        assert claims["role"] == "Engineer"
        assert claims["email"] == "jdoe@example.com"
        assert claims["name"] == "jdoe"
        assert claims["type"] == "access"
        assert claims["iss"] == claims["aud"] == "SiteInspector"
        assert claims["jti"]
        assert expires_at.tzinfo is None

    def test_default_lifetime(self):
        before = datetime.now(UTC).replace(tzinfo=None)
        _, expires_at = self._token()

        expected = timedelta(minutes=get_settings().access_token_expire_minutes)
        assert expected - timedelta(seconds=5) <= expires_at - before <= expected + timedelta(seconds=5)

    def test_expired_token_rejected(self):
        token, _ = self._token(expires_delta=timedelta(seconds=-1))

        assert decode_access_token(token) is None

    def test_tampered_token_rejected(self):
        token, _ = self._token()
        header, payload, signature = token.split(".")
        flipped = "A" if signature[0] != "A" else "B"

        assert decode_access_token(f"{header}.{payload}.{flipped}{signature[1:]}") is None

    @pytest.mark.parametrize(
        ("claim", "value"),
        [("aud", "SomeoneElse"), ("iss", "SomeoneElse"), ("type", "refresh")],
    )
    def test_foreign_claims_rejected(self, claim, value):
        settings = get_settings()
        now = datetime.now(UTC)
        payload = {
            "sub": str(uuid4()),
            "role": "Admin",
            "type": "access",
            "iss": settings.jwt_issuer,
            "aud": settings.jwt_audience,
            "iat": now,
            "exp": now + timedelta(minutes=5),
        }
        payload[claim] = value
        token = jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)

        assert decode_access_token(token) is None

    def test_garbage_rejected(self):
        assert decode_access_token("not.a.jwt") is None
