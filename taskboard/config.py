from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_SECRET_KEY = "dev-secret-jwt-key-change-me-in-production-with-many-characters"


class Settings(BaseSettings):
    environment: str = "development"

    # Database
    database_url: str = "sqlite:///./taskboard.db"

    # Security
    secret_key: str = DEFAULT_SECRET_KEY
    algorithm: str = "HS256"
    token_expiry: int = 24 * 60 * 60  # 1 day
    password_rounds: int = 10

    # HTTP
    cors_origins: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Listings
    default_page_size: int = 10
    max_page_size: int = 100

    # Ограничение размера тела запроса, байты
    max_body_size: int = 10 * 1024

    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_prefix="TASKBOARD_")

    @property
    def is_development(self) -> bool:
        return self.environment == "development"
