"""
Application configuration settings.
"""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Application
    app_name: str = "Repair Log API"
    app_version: str = "1.0.0"
    debug: bool = False
    ENVIRONMENT: str = "development"

    # Logging
    LOG_LEVEL: str = "INFO"
    log_format: str = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS
    cors_origins: List[str] = ["http://localhost:3000"]
    cors_allow_credentials: bool = True

    # Database
    DATABASE_URL: str = "postgresql://localhost:5432/repair_log"
    AUTO_CREATE_TABLES: bool = False

    # JWT
    JWT_SECRET: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRATION_HOURS: int = 24

    # Where clients are sent when no session exists
    LOGIN_PATH: str = "/login"

    # Time zone used for period boundaries (this month, last month, this year)
    TIMEZONE: str = "UTC"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
