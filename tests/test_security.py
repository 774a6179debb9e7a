"""Tests for password hashing and bearer tokens."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import jwt
import pytest

from diet_tracker.domain.errors import NotAuthorized
from diet_tracker.services.security import (
    TokenService,
    hash_password,
    verify_password,
)


def test_password_hash_round_trip() -> None:
    encoded = hash_password("correct horse", iterations=1_000)

    assert encoded.startswith("pbkdf2_sha256$1000$")
    assert verify_password("correct horse", encoded)
    assert not verify_password("wrong horse", encoded)


def test_hashes_are_salted() -> None:
    assert hash_password("same", iterations=1_000) != hash_password(
        "same", iterations=1_000
    )


@pytest.mark.parametrize("encoded", ["", "plain-text", "md5$1$abc$def"])
def test_verify_rejects_unknown_formats(encoded: str) -> None:
    assert not verify_password("anything", encoded)


@pytest.mark.parametrize(
    "encoded",
    [
        "pbkdf2_sha256$many$c2FsdA==$ZGlnZXN0",
        "pbkdf2_sha256$1000$not base64!$ZGlnZXN0",
        "pbkdf2_sha256$1000$c2FsdA==$abc",
        "pbkdf2_sha256$0$c2FsdA==$ZGlnZXN0",
    ],
)
def test_verify_rejects_corrupted_hashes(encoded: str) -> None:
    assert not verify_password("anything", encoded)


def test_token_carries_user_id() -> None:
    service = TokenService(secret="secret")
    user_id = uuid4()

    assert service.verify(service.issue(user_id)) == user_id


def test_expired_token_is_rejected() -> None:
    now = datetime.now(tz=UTC)
    token = jwt.encode(
        {"sub": str(uuid4()), "iat": now - timedelta(days=2), "exp": now},
        "secret",
        algorithm="HS256",
    )

    with pytest.raises(NotAuthorized, match="expired"):
        TokenService(secret="secret").verify(token)


def test_token_from_other_secret_is_rejected() -> None:
    token = TokenService(secret="other").issue(uuid4())

    with pytest.raises(NotAuthorized, match="invalid"):
        TokenService(secret="secret").verify(token)


@pytest.mark.parametrize("token", ["", "not-a-jwt"])
def test_garbage_token_is_rejected(token: str) -> None:
    with pytest.raises(NotAuthorized):
        TokenService(secret="secret").verify(token)


def test_token_without_uuid_subject_is_rejected() -> None:
    token = jwt.encode({"sub": "42"}, "secret", algorithm="HS256")

    with pytest.raises(NotAuthorized):
        TokenService(secret="secret").verify(token)
