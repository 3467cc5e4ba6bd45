"""Application settings using Pydantic Settings for environment-based configuration."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Central configuration for the hubox application.

    All settings can be overridden via environment variables.
    Prefix is not used to allow standard env var names (e.g., LOG_LEVEL).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False

    # Local persistence
    data_dir: Path = Field(default_factory=lambda: Path.home() / ".hubox")
    snapshot_filename: str = "github-notifications.json"
    cache_filename: str = "request-cache.json"

    # GitHub REST API
    github_api_url: str = "https://api.github.com"
    github_user_agent: str = "Hubox"
    request_timeout_seconds: float = Field(default=30.0, gt=0.0)

    # HTTP retry configuration
    max_http_retries: int = Field(default=2, ge=0, le=10)
    max_backoff_seconds: float = Field(default=30.0, ge=1.0, le=300.0)

    # Secure credential storage (OS keychain)
    keyring_service: str = "hubox"
    keyring_username: str = "github_token"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def snapshot_path(self) -> Path:
        """Location of the persisted notification snapshot."""
        return self.data_dir / self.snapshot_filename

    @property
    def cache_path(self) -> Path:
        """Location of the persisted response cache."""
        return self.data_dir / self.cache_filename


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once.
    Clear cache with get_settings.cache_clear() if needed.
    """
    return Settings()
