"""Tests for password hashing and bearer tokens."""

from datetime import timedelta

import pytest
from jose import jwt

from src.config import get_settings
from src.errors import InvalidToken
from src.services.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)


def test_hash_is_salted_and_verifiable():
    first = get_password_hash("secret1")
    second = get_password_hash("secret1")
    assert first != second
    assert "secret1" not in first
    assert verify_password("secret1", first)
    assert verify_password("secret1", second)
    assert not verify_password("secret2", first)


def test_token_round_trip():
    token = create_access_token("user-123")
    assert decode_access_token(token) == "user-123"


def test_token_expires_in_seven_days_by_default():
    settings = get_settings()
    token = create_access_token("user-123")
    claims = jwt.get_unverified_claims(token)
    assert claims["sub"] == "user-123"
    assert settings.jwt_expiration_minutes == 7 * 24 * 60
    assert "exp" in claims


def test_expired_token_rejected():
    token = create_access_token("user-123", expires_delta=timedelta(seconds=-10))
    with pytest.raises(InvalidToken):
        decode_access_token(token)


def test_token_signed_with_other_secret_rejected():
    settings = get_settings()
    forged = jwt.encode({"sub": "user-123"}, "another-secret", algorithm=settings.jwt_algorithm)
    with pytest.raises(InvalidToken):
        decode_access_token(forged)


def test_malformed_token_rejected():
    with pytest.raises(InvalidToken):
        decode_access_token("definitely.not.a-token")


def test_token_without_subject_rejected():
    settings = get_settings()
    token = jwt.encode({"foo": "bar"}, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    with pytest.raises(InvalidToken):
        decode_access_token(token)
