"""Application configuration management using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from MAILINGLIST_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="MAILINGLIST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "mailinglist-api"
    app_version: str = "0.1.0"
    debug: bool = False
    database_url: str = "sqlite+aiosqlite:///./mailinglist.db"

    # Service endpoint, e.g. ":8081" or "0.0.0.0:8081"
    api_addr: str = ":8081"

    # Deadline applied to every RPC call
    request_timeout_seconds: float = 1.0


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
