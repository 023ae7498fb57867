"""Tests for security-critical functionality."""

from datetime import timedelta
from uuid import uuid4

import pytest
from jose import jwt
from pydantic import ValidationError

from src.vitelis.core.security import (
    DUMMY_PASSWORD_HASH,
    create_access_token,
    decode_token,
    hash_password,
    secrets_match,
    verify_password,
)
from src.vitelis.schemas.auth import RegisterRequest

pytestmark = pytest.mark.unit


class TestPasswordHashing:
    def test_hash_and_verify(self):
        hashed = hash_password("a-long-and-unusual-passphrase")
        assert hashed != "a-long-and-unusual-passphrase"
        assert verify_password("a-long-and-unusual-passphrase", hashed)
        assert not verify_password("wrong", hashed)

    def test_invalid_hash_returns_false(self):
        assert not verify_password("anything", "not-a-hash")

    def test_dummy_hash_never_matches_user_input(self):
        assert not verify_password("password", DUMMY_PASSWORD_HASH)


class TestAccessToken:
    def test_round_trip_claims(self):
        user_id = uuid4()
        token = create_access_token(user_id, "ops@example.com", "admin")
        payload = decode_token(token)

        assert payload is not None
        assert payload["sub"] == str(user_id)
        assert payload["email"] == "ops@example.com"
        assert payload["role"] == "admin"
        assert payload["type"] == "access"

    def test_expired_token_is_rejected(self):
        token = create_access_token(uuid4(), "a@example.com", "user", timedelta(seconds=-1))
        assert decode_token(token) is None

    def test_token_signed_with_other_key_is_rejected(self):
        token = jwt.encode(
            {"sub": str(uuid4()), "type": "access"}, "x" * 64, algorithm="HS256"
        )
        assert decode_token(token) is None


class TestSecretsMatch:
    def test_match(self):
        assert secrets_match("s3cret", "s3cret")

    def test_mismatch_and_missing(self):
        assert not secrets_match("s3cret", "other")
        assert not secrets_match(None, "s3cret")


class TestRegisterPasswordStrength:
    def test_weak_password_rejected(self):
        with pytest.raises(ValidationError, match="Weak password|too weak"):
            RegisterRequest(email="a@example.com", password="password1", company_name="Acme")

    def test_strong_password_accepted(self):
        request = RegisterRequest(
            email="a@example.com",
            password="Xk9#mQ2$vL7pWz-orchid",
            company_name="  Acme  ",
        )
        assert request.company_name == "Acme"

    def test_blank_company_name_rejected(self):
        with pytest.raises(ValidationError):
            RegisterRequest(
                email="a@example.com",
                password="correct-horse-battery-staple-42",
                company_name="   ",
            )
