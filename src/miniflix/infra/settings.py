"""
Application settings for MiniFlix.

This module defines all configuration settings for MiniFlix using Pydantic BaseSettings.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Main application settings using Pydantic BaseSettings."""

    # Database settings
    database_url: str = Field(default="sqlite:///data/app.db", alias="DATABASE_URL")
    echo_sql: bool = Field(default=False, alias="ECHO_SQL")
    db_busy_timeout: int = Field(default=30, alias="DB_BUSY_TIMEOUT")  # seconds

    # Media and catalog
    video_dir: Path = Field(default=Path("videos"), alias="VIDEO_DIR")
    catalog_file: Path = Field(default=Path("data/videos.json"), alias="CATALOG_FILE")
    thumbnail_dir: Path = Field(default=Path("thumbnails"), alias="THUMBNAIL_DIR")
    static_dir: Path = Field(default=Path("public"), alias="STATIC_DIR")
    stream_chunk_size: int = Field(default=64 * 1024, gt=0, alias="STREAM_CHUNK_SIZE")

    # Sessions and credentials
    session_secret: str = Field(default="dev-secret-replace-me", alias="SESSION_SECRET")
    session_https_only: bool = Field(default=False, alias="SESSION_HTTPS_ONLY")
    session_max_age: int = Field(default=14 * 24 * 3600, alias="SESSION_MAX_AGE")
    bcrypt_rounds: int = Field(default=10, ge=4, le=31, alias="BCRYPT_ROUNDS")

    # Server
    host: str = Field(default="127.0.0.1", alias="HOST")
    port: int = Field(default=3000, alias="PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    env: str = Field(default="dev", alias="ENV")  # dev|prod|test

    model_config: SettingsConfigDict = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )


def _resolve_env_file() -> str | None:
    # 1) Explicit override
    explicit = os.getenv("MINIFLIX_ENV_FILE")
    if explicit and Path(explicit).is_file():
        return explicit

    # 2) CWD .env
    cwd_env = Path.cwd() / ".env"
    if cwd_env.is_file():
        return str(cwd_env)

    # 3) Walk up from this file to find nearest .env
    here = Path(__file__).resolve()
    for parent in here.parents:
        candidate = parent / ".env"
        if candidate.is_file():
            return str(candidate)
    return None


# Global settings instance (load from best-effort .env discovery)
_env_file = _resolve_env_file()
settings = Settings(_env_file=_env_file) if _env_file else Settings()  # type: ignore[call-arg]
