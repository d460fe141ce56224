"""
Application configuration.
All values loaded from environment variables or a local .env file.
"""
from typing import List
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./fitledger.db"
    DATABASE_ECHO: bool = False

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:5000", "http://127.0.0.1:5000"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"  # json or console

    # Unit-of-work logging - logs start/finish of every orchestrated operation
    UNIT_OF_WORK_LOG: bool = False

    # Access layer - header carrying the authenticated user id
    AUTH_USER_HEADER: str = "X-User-Id"

    # Dashboard
    WEEKLY_WINDOW_DAYS: int = 7

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
