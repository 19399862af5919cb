# backend/app/core/settings.py

import os

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # SQLAlchemy database URL
    db_url: str = "sqlite:///./tasktracker.db"

    # Debug mode: console logs instead of JSON, verbose SQL logging
    app_debug: bool = True

    environment: str = "dev"

    # Switched on automatically under pytest (or TESTING=1)
    testing: bool = False

    # JWT signing for the bearer-token identity
    secret_key: str = "dev-secret-key-change-me"
    access_token_expire_minutes: int = 30

    # Default page size for the recent comments feed
    recent_comments_limit: int = 10

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()

if os.getenv("PYTEST_CURRENT_TEST"):
    settings.testing = True
