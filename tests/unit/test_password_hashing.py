"""Unit tests for bcrypt password helpers."""

import pytest
from fastapi import HTTPException

from src.pricehub.core.security import (
    ensure_password_strength,
    hash_password,
    verify_password,
)


class TestPasswordHashing:
    def test_hash_and_verify(self):
        hashed = hash_password("correct horse")
        assert hashed.startswith("$2b$")
        assert hashed != "correct horse"
        assert verify_password("correct horse", hashed)
        assert not verify_password("wrong horse", hashed)

    def test_hashes_are_salted(self):
        assert hash_password("same-password") != hash_password("same-password")

    def test_uses_configured_rounds(self):
        assert hash_password("password123").startswith("$2b$04$")

    def test_explicit_rounds(self):
        assert hash_password("password123", rounds=5).startswith("$2b$05$")

    def test_malformed_or_empty_hash(self):
        assert not verify_password("anything", "")
        assert not verify_password("anything", "not-a-bcrypt-hash")

    def test_long_passwords_are_truncated_consistently(self):
        long_password = "x" * 100
        hashed = hash_password(long_password)
        assert verify_password(long_password, hashed)
        assert verify_password("x" * 72, hashed)


class TestPasswordStrength:
    def test_accepts_minimum_length(self):
        ensure_password_strength("12345678")

    def test_rejects_short_password(self):
        with pytest.raises(HTTPException) as exc_info:
            ensure_password_strength("short")
        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "Password must be at least 8 characters long"
