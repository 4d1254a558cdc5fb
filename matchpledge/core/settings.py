from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
import os

def _coerce_asyncpg_url(url: str) -> str:
    """Convert common Postgres URLs to asyncpg DSN for SQLAlchemy."""
    if not url:
        return url
    # Heroku provides postgres:// or postgresql://
    if url.startswith("postgres://"):
        return "postgresql+asyncpg://" + url[len("postgres://"):]
    if url.startswith("postgresql://"):
        return "postgresql+asyncpg://" + url[len("postgresql://"):]
    return url


class Settings(BaseSettings):
    # ------------------------------------------------------------------
    # Environment
    # ------------------------------------------------------------------
    ENV: str = "local"
    LOG_LEVEL: str = "INFO"

    # ------------------------------------------------------------------
    # Auth / tokens
    # ------------------------------------------------------------------
    # No default: an unset signing secret must stop the process at import.
    JWT_SECRET: str
    BCRYPT_ROUNDS: int = 12

    # ------------------------------------------------------------------
    # Database
    # ------------------------------------------------------------------
    # Optional here to allow Heroku-style DATABASE_URL fallback.
    DB_URL: Optional[str] = None  # resolved at runtime if missing
    RUN_DDL_ON_START: bool = True  # run create_all on startup (disable in prod)

    # ------------------------------------------------------------------
    # Content store (local disk)
    # ------------------------------------------------------------------
    LOCAL_UPLOAD_DIR: str = "uploads"
    UPLOAD_URL_PREFIX: str = "/api/uploads"

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------
    CORS_ORIGINS: list[str] = ["*"]

    # ------------------------------------------------------------------
    # Model configuration
    # ------------------------------------------------------------------
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",  # ignore any unrecognized vars instead of erroring
    )

    @field_validator("JWT_SECRET")
    @classmethod
    def _secret_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("JWT_SECRET must be set to a non-empty value")
        return value

    @field_validator("BCRYPT_ROUNDS")
    @classmethod
    def _rounds_in_range(cls, value: int) -> int:
        # bcrypt accepts 4..31
        if value < 4 or value > 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")
        return value


# create global settings instance and normalize DB URL
settings = Settings()

# Fallback: allow DATABASE_URL and coerce to asyncpg
if not settings.DB_URL:
    fallback = os.getenv("DATABASE_URL", "")
    if fallback:
        settings.DB_URL = _coerce_asyncpg_url(fallback)

# Also coerce explicit DB_URL if it was provided in sync form
if settings.DB_URL:
    settings.DB_URL = _coerce_asyncpg_url(settings.DB_URL)
