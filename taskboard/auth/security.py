import bcrypt
import jwt
from datetime import datetime, timedelta, timezone

from taskboard.config import Settings
from taskboard.errors import ExpiredToken, InvalidToken

# bcrypt учитывает только первые 72 байта пароля
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = 10) -> str:
    """Хеширует пароль с новой солью"""
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        # В базе лежит не bcrypt-хеш
        return False


def create_jwt_token(user_id: str, settings: Settings) -> str:
    """Создание JWT токена; токен несет только идентификатор пользователя"""
    now = datetime.now(timezone.utc)
    payload = {
        "user_id": user_id,
        "exp": now + timedelta(seconds=settings.token_expiry),
        "iat": now,
        "type": "access"
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def verify_jwt_token(token: str, settings: Settings) -> str:
    """Верификация JWT токена, возвращает идентификатор пользователя"""
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm]
        )
    except jwt.ExpiredSignatureError:
        raise ExpiredToken()
    except jwt.InvalidTokenError:
        raise InvalidToken()

    user_id = payload.get("user_id")
    if not user_id or payload.get("type") != "access":
        raise InvalidToken("Invalid token payload")
    return user_id
