"""
Environment configuration for the hotel back office.
Uses Pydantic's settings management; every field can be overridden by an
environment variable carrying the HOTEL_ prefix (e.g. HOTEL_DATABASE_URL).
"""
from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(env_prefix="HOTEL_", env_file=".env", extra="ignore")

    APP_NAME: str = "Hotel Back Office API"
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = Field(default=["*"])

    # Storage: "sqlalchemy" for the relational store, "memory" for tests/demos
    STORAGE_BACKEND: str = "sqlalchemy"
    DATABASE_URL: str = "sqlite+aiosqlite:///./hotel.db"
    DATABASE_ECHO: bool = False

    # Security
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Seeded singleton admin account
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = "admin123"

    # Billing
    BILLING_WINDOW_DAYS: int = 30


@lru_cache()
def get_settings() -> Settings:
    return Settings()
