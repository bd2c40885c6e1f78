from fastapi import APIRouter, Depends, status

from taskboard.auth.models import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from taskboard.auth.services import AuthService
from taskboard.config import Settings
from taskboard.dependencies import Actor, get_current_user, get_settings, get_stores
from taskboard.store import Stores

router = APIRouter(prefix="/auth", tags=["authentication"])


def get_auth_service(
    stores: Stores = Depends(get_stores),
    settings: Settings = Depends(get_settings)
) -> AuthService:
    return AuthService(stores, settings)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    data: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """Регистрация нового пользователя"""
    return auth_service.register(data)


@router.post("/login", response_model=AuthResponse)
def login(
    data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """Вход по email и паролю"""
    return auth_service.login(data)


@router.get("/me", response_model=UserResponse)
def get_current_user_info(
    current_user: Actor = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service)
):
    return auth_service.get_user_info(current_user.user_id)
