import jwt
import pytest

from taskboard.auth.security import create_jwt_token, hash_password, verify_jwt_token, verify_password
from taskboard.errors import ExpiredToken, InvalidToken


def test_password_hash_roundtrip():
    password_hash = hash_password("password123", rounds=4)

    assert password_hash.startswith("$2")
    assert verify_password("password123", password_hash)
    assert not verify_password("wrong-password", password_hash)


def test_verify_password_against_garbage_hash():
    assert not verify_password("password123", "not-a-bcrypt-hash")


def test_token_carries_only_user_id(settings):
    token = create_jwt_token("user-1", settings)
    payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])

    assert payload["user_id"] == "user-1"
    assert payload["exp"] - payload["iat"] == settings.token_expiry
    assert "role" not in payload
    assert verify_jwt_token(token, settings) == "user-1"


def test_expired_token(settings):
    expired_settings = settings.model_copy(update={"token_expiry": -10})
    token = create_jwt_token("user-1", expired_settings)

    with pytest.raises(ExpiredToken):
        verify_jwt_token(token, settings)


def test_token_signed_with_other_key(settings):
    other = settings.model_copy(update={"secret_key": "another-secret-key-that-is-also-long-enough-for-hs256"})
    token = create_jwt_token("user-1", other)

    with pytest.raises(InvalidToken):
        verify_jwt_token(token, settings)


def test_token_without_user_id(settings):
    token = jwt.encode({"type": "access"}, settings.secret_key, algorithm=settings.algorithm)

    with pytest.raises(InvalidToken):
        verify_jwt_token(token, settings)


def test_garbage_token(settings):
    with pytest.raises(InvalidToken):
        verify_jwt_token("not.a.jwt", settings)
