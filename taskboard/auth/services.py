import logging
from typing import Any, Dict

from taskboard.auth.models import LoginRequest, RegisterRequest, UserRole
from taskboard.auth.security import create_jwt_token, verify_password
from taskboard.config import Settings
from taskboard.database import User
from taskboard.errors import InvalidCredentials, NotFound
from taskboard.store import Stores

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, stores: Stores, settings: Settings):
        self.stores = stores
        self.settings = settings

    def _session_payload(self, user: User) -> Dict[str, Any]:
        return {
            "id": user.id,
            "username": user.username,
            "email": user.email,
            "token": create_jwt_token(user.id, self.settings),
        }

    def register(self, data: RegisterRequest) -> Dict[str, Any]:
        """Регистрация; пароль хеширует хук хранилища"""
        user = self.stores.users.create({
            "username": data.username,
            "email": data.email,
            "password": data.password,
            "role": UserRole.MEMBER.value,
        })
        logger.info("Registered user %s (%s)", user.username, user.id)
        return self._session_payload(user)

    def authenticate(self, email: str, password: str) -> User:
        user = self.stores.users.find_by_email(email)
        if user is None or not verify_password(password, user.password):
            logger.warning("Failed login for %s", email)
            raise InvalidCredentials()
        return user

    def login(self, data: LoginRequest) -> Dict[str, Any]:
        user = self.authenticate(data.email, data.password)
        logger.info("User %s logged in", user.id)
        return self._session_payload(user)

    def get_user_info(self, user_id: str) -> Dict[str, Any]:
        """Получить информацию о пользователе"""
        user = self.stores.users.find_by_id(user_id)
        if user is None:
            raise NotFound("User not found")
        return user.to_dict()
