from datetime import timedelta

import pytest
from jose import JWTError

from learnhub.core.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)


def test_password_hash_round_trip():
    hashed = get_password_hash("s3cret-pass")
    assert hashed != "s3cret-pass"
    assert verify_password("s3cret-pass", hashed)
    assert not verify_password("wrong-pass", hashed)


def test_verify_password_without_hash():
    assert verify_password("anything", None) is False


def test_tokens_carry_unique_jti():
    first = decode_access_token(create_access_token({"sub": "1", "role": "STUDENT"}))
    second = decode_access_token(create_access_token({"sub": "1", "role": "STUDENT"}))
    assert first["sub"] == "1"
    assert first["role"] == "STUDENT"
    assert first["jti"] != second["jti"]


def test_expired_token_is_rejected():
    token = create_access_token({"sub": "1"}, expires_delta=timedelta(seconds=-10))
    with pytest.raises(JWTError):
        decode_access_token(token)


def test_tampered_token_is_rejected():
    token = create_access_token({"sub": "1"})
    with pytest.raises(JWTError):
        decode_access_token(token[:-2] + ("AA" if not token.endswith("AA") else "BB"))
