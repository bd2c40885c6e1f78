"""Ошибки предметной области.

Все ошибки - наследники HTTPException: сервисы поднимают их напрямую,
FastAPI отдает клиенту {"detail": ...} с нужным статусом.
"""
from typing import Optional

from fastapi import HTTPException, status


class AppError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error"

    def __init__(self, detail=None, headers: Optional[dict] = None):
        super().__init__(
            status_code=self.status_code,
            detail=detail if detail is not None else self.default_detail,
            headers=headers,
        )


class ValidationError(AppError):
    """Некорректные данные: занятые уникальные поля, ссылки на несуществующие записи"""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Validation failed"

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        self.message = message
        if field is None:
            super().__init__(message)
        else:
            super().__init__([{"loc": ["body", field], "msg": message, "type": "value_error"}])


class InvalidCredentials(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid email or password"


class InvalidToken(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid token"

    def __init__(self, detail=None):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class ExpiredToken(InvalidToken):
    default_detail = "Token expired"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Access denied"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class AlreadyMember(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "User is already a team member"


class InvalidOperation(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Operation not allowed"
