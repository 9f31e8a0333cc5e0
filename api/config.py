"""
LeeCMS configuration — all environment variables in one place.

Read from environment at runtime. Never hardcode secrets.
"""

from __future__ import annotations

import os


class Settings:
    """Application settings from environment variables."""

    # Database
    DATABASE_URL: str = os.environ.get("DATABASE_URL", "")
    DB_POOL_MIN_SIZE: int = int(os.environ.get("DB_POOL_MIN_SIZE", "2"))
    DB_POOL_MAX_SIZE: int = int(os.environ.get("DB_POOL_MAX_SIZE", "20"))

    # Application
    ENVIRONMENT: str = os.environ.get("ENVIRONMENT", "development")
    SITE_NAME: str = os.environ.get("SITE_NAME", "Gamava")
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")

    # Public page browser cache TTL (seconds); 0 sends no-cache
    PAGE_CACHE_SECONDS: int = int(os.environ.get("PAGE_CACHE_SECONDS", "300"))


# Singleton instance
settings = Settings()

# Validate required settings (skip in test mode)
_testing = os.environ.get("TESTING", "").lower() == "true"

if not _testing:
    if not settings.DATABASE_URL:
        raise RuntimeError("DATABASE_URL environment variable is required")
