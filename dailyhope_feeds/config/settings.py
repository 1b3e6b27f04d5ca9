"""Application settings with environment variable support."""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from pathlib import Path


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="DH_",  # DH_CACHE_TTL_SECONDS, DH_LOG_LEVEL, etc.
        extra="ignore",
    )

    # Feeds
    feeds_config_path: Optional[Path] = None  # None = packaged feeds.json
    default_language: str = "en"
    max_items_per_feed: int = 60

    # Cache
    cache_ttl_seconds: int = 300

    # Fetching
    fetch_timeout_seconds: int = 30
    fetch_max_attempts: int = 2  # transport errors only, non-2xx is final
    user_agent: str = "DailyHopeFeeds/1.0"

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"  # "console" or "json"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000


settings = Settings()
