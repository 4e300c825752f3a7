# storefront/core/config.py
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Everything has a local-development default, so the API starts with
    a SQLite file and a local uploads directory out of the box.

    Production (.env):
      - DATABASE_URL (Postgres connection string)
      - DATABASE_REQUIRE_SSL=true for hosted Postgres

    Optional:
      - FILE_STORE=supabase with SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY
        to keep uploaded STL files in a Supabase Storage bucket
    """

    PROJECT_NAME: str = "Figure Storefront API"
    API_PREFIX: str = "/api"

    # Storage backend: "database" (SQLModel) or "memory" (dev / tests)
    STORAGE_BACKEND: Literal["database", "memory"] = "database"
    DATABASE_URL: str = "sqlite:///./storefront.db"
    DATABASE_REQUIRE_SSL: bool = False
    DATABASE_ECHO: bool = False

    # Insert the default catalog when the store is empty
    SEED_DATA: bool = True

    # Uploaded STL files
    FILE_STORE: Literal["local", "supabase"] = "local"
    UPLOAD_DIR: str = "uploads"
    UPLOAD_URL_PREFIX: str = "/uploads"
    MAX_UPLOAD_BYTES: int = 50 * 1024 * 1024

    SUPABASE_URL: str | None = None
    SUPABASE_SERVICE_ROLE_KEY: str | None = None
    SUPABASE_BUCKET: str = "assets"

    CORS_ORIGINS: list[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
