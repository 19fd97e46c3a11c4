"""
Application settings with Pydantic v2 validation.

Loads configuration from environment variables with sensible defaults.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ApiSettings(BaseSettings):
    """Remote backend configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    base_url: str = "http://localhost:3000/api"
    timeout: float = 30.0


class CacheSettings(BaseSettings):
    """Local cache configuration."""

    model_config = SettingsConfigDict(env_prefix="CACHE_")

    ttl_seconds: int = 180  # 3 minutes
    key_prefix: str = "cache_"

    backend: Literal["sqlite", "memory"] = "sqlite"
    data_dir: Path = Path("data")
    db_name: str = "quotewire.db"

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class AuthSettings(BaseSettings):
    """Session token lifetimes."""

    model_config = SettingsConfigDict(env_prefix="AUTH_")

    login_token_days: int = 30
    refresh_threshold_seconds: int = 60 * 60
    refreshed_token_hours: int = 24


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "QuoteWire"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Sub-settings
    api: ApiSettings = Field(default_factory=ApiSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
