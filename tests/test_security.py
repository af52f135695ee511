from datetime import timedelta

import jwt
import pytest

from app.core.config import settings
from app.core.exceptions import UnauthenticatedError
from app.core.security import (
    create_session_token,
    decode_session_token,
    hash_password,
    verify_password,
)
from conftest import NOW


def test_password_hashing():
    hashed = hash_password("s3cret-pass")
    assert hashed != "s3cret-pass"
    assert hashed.startswith("$2")
    assert verify_password("s3cret-pass", hashed)
    assert not verify_password("wrong", hashed)


def test_long_passwords_are_truncated_not_rejected():
    hashed = hash_password("x" * 100)
    assert verify_password("x" * 72, hashed)


def test_malformed_hash_is_a_mismatch():
    assert not verify_password("anything", "not-a-bcrypt-hash")
    assert not verify_password("anything", "")


def test_token_roundtrip_claims():
    token = create_session_token("u1", "+919876543210", issued_at=NOW)
    claims = decode_session_token(token, now=NOW + timedelta(days=6, hours=23))
    assert claims["sub"] == "u1"
    assert claims["phone"] == "+919876543210"
    assert claims["exp"] - claims["iat"] == settings.SESSION_TTL_DAYS * 86400


def test_token_expiry_boundary():
    token = create_session_token("u1", "+919876543210", issued_at=NOW, ttl_days=1)
    with pytest.raises(UnauthenticatedError):
        decode_session_token(token, now=NOW + timedelta(days=1))


@pytest.mark.parametrize("token", [None, "", "not-a-token"])
def test_bad_tokens(token):
    with pytest.raises(UnauthenticatedError):
        decode_session_token(token, now=NOW)


def test_token_without_subject():
    token = jwt.encode({"exp": int(NOW.timestamp()) + 60}, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    with pytest.raises(UnauthenticatedError):
        decode_session_token(token, now=NOW)
