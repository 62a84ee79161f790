"""
Configuration helpers for the marketplace.

Routers/services read settings through ``get_settings()`` so that tests can
override the environment and call ``get_settings.cache_clear()``.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

DEFAULT_DATA_FILE = Path(__file__).resolve().parents[1] / "data.json"


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    storage_backend: str
    data_file: str
    database_url: str
    admin_email: str
    admin_password: str
    min_password_length: int
    password_hashing: bool
    log_level: str
    log_file: str
    host: str
    port: int


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    return int(raw) if raw.lstrip("-").isdigit() else default


def _env_flag(name: str) -> bool:
    return (os.getenv(name) or "").strip().lower() in {"1", "true", "yes", "on"}


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        storage_backend=(os.getenv("STORAGE_BACKEND") or "json").strip().lower(),
        data_file=os.getenv("DATA_FILE", str(DEFAULT_DATA_FILE)),
        database_url=os.getenv("DATABASE_URL", ""),
        admin_email=os.getenv("ADMIN_EMAIL", "admin@guestpost.com"),
        admin_password=os.getenv("ADMIN_PASSWORD", "admin123"),
        min_password_length=_env_int("MIN_PASSWORD_LENGTH", 6),
        password_hashing=_env_flag("PASSWORD_HASHING"),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        log_file=os.getenv("LOG_FILE", ""),
        host=os.getenv("HOST", "127.0.0.1"),
        port=_env_int("PORT", 8000),
    )
