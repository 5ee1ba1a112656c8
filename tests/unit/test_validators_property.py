"""Property-based tests for request validators using hypothesis."""

import string

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from pydantic import ValidationError

from src.inspector.schemas.auth import RegisterRequest, validate_password_policy

pytestmark = pytest.mark.unit

STRONG_PASSWORD = "Correct-Horse-Battery-Staple-9"

valid_username = st.from_regex(r"[a-zA-Z][a-zA-Z0-9._-]{2,49}", fullmatch=True)


def _register(**overrides) -> RegisterRequest:
    data = {
        "email": "jdoe@example.com",
        "username": "jdoe",
        "password": STRONG_PASSWORD,
        "fullName": "Jane Doe",
    }
    data.update(overrides)
    return RegisterRequest(**data)


def _error_fields(exc: ValidationError) -> set:
    return {error["loc"][0] for error in exc.errors()}


@given(username=valid_username)
@settings(max_examples=100)
def test_valid_usernames_accepted(username: str):
    assert _register(username=username).username == username


@given(username=st.from_regex(r"[0-9._-][a-zA-Z0-9._-]{2,20}", fullmatch=True))
def test_username_must_start_with_letter(username: str):
    with pytest.raises(ValidationError) as exc_info:
        _register(username=username)
    assert "username" in _error_fields(exc_info.value)


@given(username=valid_username, bad=st.sampled_from(" @/\\;'\"\n"))
def test_username_rejects_other_characters(username: str, bad: str):
    with pytest.raises(ValidationError):
        _register(username=username[:49] + bad)


@given(password=st.text(alphabet=string.ascii_letters + "!@#$%^&*-_", min_size=8, max_size=64))
def test_password_without_digit_rejected(password: str):
    with pytest.raises(ValueError, match="digit|uppercase|lowercase"):
        validate_password_policy(password)


@given(password=st.text(alphabet=string.ascii_letters + string.digits, min_size=8, max_size=64))
def test_password_without_special_character_rejected(password: str):
    with pytest.raises(ValueError):
        validate_password_policy(password)


@pytest.mark.parametrize("password", ["Password1!", "Aaaaaaa1!", "Qwerty123!"])
def test_guessable_passwords_rejected(password: str):
    with pytest.raises(ValueError):
        validate_password_policy(password)


def test_strong_password_accepted():
    assert validate_password_policy(STRONG_PASSWORD) == STRONG_PASSWORD


def test_full_name_is_stripped():
    assert _register(fullName="  Jane O'Neil-Doe ").full_name == "Jane O'Neil-Doe"


def test_full_name_rejects_digits():
    with pytest.raises(ValidationError):
        _register(fullName="R2 D2")


def test_role_defaults_to_engineer():
    assert _register().role.value == "Engineer"
