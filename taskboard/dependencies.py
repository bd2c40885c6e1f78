import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from taskboard.auth.models import UserRole
from taskboard.auth.security import verify_jwt_token
from taskboard.config import Settings
from taskboard.database import get_db
from taskboard.errors import InvalidToken
from taskboard.store import Stores

logger = logging.getLogger(__name__)

# 401 вместо 403 при отсутствии заголовка выдаем сами
security = HTTPBearer(auto_error=False)


class Actor:
    """Пользователь, от имени которого выполняется запрос"""

    def __init__(self, user_id: str, role: str = UserRole.MEMBER.value, username: Optional[str] = None):
        self.user_id = user_id
        self.role = role
        self.username = username

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    def __repr__(self) -> str:
        return f"<Actor {self.user_id} ({self.role})>"


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_stores(
        db: Session = Depends(get_db),
        settings: Settings = Depends(get_settings)
) -> Stores:
    return Stores(db, password_rounds=settings.password_rounds)


async def get_current_user(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
        stores: Stores = Depends(get_stores),
        settings: Settings = Depends(get_settings)
) -> Actor:
    """Получает текущего пользователя по JWT токену"""
    if credentials is None or not credentials.credentials:
        raise InvalidToken("Missing or invalid authorization header")

    user_id = verify_jwt_token(credentials.credentials, settings)

    # Роль всегда читаем из БД, токену доверяем только идентификатор
    user = stores.users.find_by_id(user_id)
    if user is None:
        logger.warning("Token for unknown user %s", user_id)
        raise InvalidToken("User not found")

    return Actor(user_id=user.id, role=user.role, username=user.username)
