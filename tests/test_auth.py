"""Tests for bearer token parsing and authentication."""

import pytest

from race_photos.errors import Unauthorized
from race_photos.services.auth import AuthService, parse_bearer_token
from tests.conftest import VALID_TOKEN, InMemoryIdentityProvider


@pytest.mark.parametrize(
    ("header", "expected"),
    [
        (None, None),
        ("", None),
        ("Bearer", None),
        ("Bearer    ", None),
        ("Basic dXNlcjpwYXNz", None),
        ("Token abc", None),
        ("Bearer abc.def", "abc.def"),
        ("bearer abc", "abc"),
        ("  Bearer   abc  ", "abc"),
    ],
)
def test_parse_bearer_token(header: str | None, expected: str | None) -> None:
    assert parse_bearer_token(header) == expected


def test_authenticate_returns_user_for_valid_token() -> None:
    service = AuthService(InMemoryIdentityProvider())

    user = service.authenticate(f"Bearer {VALID_TOKEN}")

    assert user.id == "u1"
    assert user.email == "runner@example.com"


def test_authenticate_rejects_unknown_token() -> None:
    provider = InMemoryIdentityProvider()
    service = AuthService(provider)

    with pytest.raises(Unauthorized):
        service.authenticate("Bearer garbled")

    assert provider.calls == ["garbled"]


def test_authenticate_skips_provider_without_token() -> None:
    provider = InMemoryIdentityProvider()
    service = AuthService(provider)

    with pytest.raises(Unauthorized):
        service.authenticate("Basic abc")

    assert provider.calls == []
