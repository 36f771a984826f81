# storefront/core/config.py
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Everything has a local-development default, so the service starts
    with no .env at all (SQLite file + ./uploads).

    Supabase Storage (STORAGE_BACKEND=supabase) additionally needs:
      - SUPABASE_URL
      - SUPABASE_SERVICE_ROLE_KEY
    """

    PROJECT_NAME: str = "Storefront API"
    API_PREFIX: str = "/api"
    PORT: int = 5000
    LOG_LEVEL: str = "INFO"

    CORS_ORIGINS: list[str] = ["*"]

    # Datastore
    DATABASE_URL: str = "sqlite:///./storefront.db"
    DATABASE_REQUIRE_SSL: bool = False

    # Media
    STORAGE_BACKEND: Literal["local", "supabase"] = "local"
    UPLOAD_DIR: str = "uploads"
    UPLOAD_URL_PREFIX: str = "/uploads"
    MAX_UPLOAD_FILES: int = 5
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024  # 5MB per image

    SUPABASE_URL: str | None = None
    SUPABASE_SERVICE_ROLE_KEY: str | None = None
    SUPABASE_BUCKET: str = "assets"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
