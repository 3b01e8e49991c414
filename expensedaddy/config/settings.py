"""
Configuration Management for ExpenseDaddy

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Storage location, log bounds and the backup identity live in one
place so tests can override them without touching module globals.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Local key-value store configuration."""
    
    model_config = SettingsConfigDict(
        env_prefix="EXPENSEDADDY_STORAGE_",
        extra="ignore"
    )
    
    data_dir: Path = Field(
        default=Path.home() / ".expensedaddy",
        description="Directory holding one JSON file per collection"
    )
    key_prefix: str = Field(
        default="@budgetflow_",
        description="Prefix shared by every collection key"
    )
    indent: Optional[int] = Field(
        default=None,
        ge=0,
        le=8,
        description="JSON indent for stored files (None = compact)"
    )
    
    @field_validator('data_dir')
    @classmethod
    def expand_data_dir(cls, v: Path) -> Path:
        """Expand ~ so the path is usable as-is."""
        return v.expanduser()


class AuthSettings(BaseSettings):
    """Remote account service configuration."""
    
    model_config = SettingsConfigDict(
        env_prefix="EXPENSEDADDY_AUTH_",
        extra="ignore"
    )
    
    base_url: str = Field(
        default="http://localhost:5000",
        description="Base URL of the account service"
    )
    timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Per-request timeout"
    )
    max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts for requests that fail to connect"
    )
    retry_backoff: float = Field(
        default=1.0,
        ge=0.0,
        description="Exponential backoff multiplier between attempts"
    )
    
    @field_validator('base_url')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class AppSettings(BaseSettings):
    """
    Main application settings.
    
    Loads configuration from environment variables and .env file.
    """
    
    model_config = SettingsConfigDict(
        env_prefix="EXPENSEDADDY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for local structured logs"
    )
    
    # Activity log
    activity_log_limit: int = Field(
        default=200,
        ge=1,
        description="Maximum number of activity entries kept"
    )
    
    # Profile defaults
    default_profile_name: str = Field(
        default="User",
        description="Name given to the profile materialized on first read"
    )
    default_currency: str = Field(
        default="$",
        max_length=5,
        description="Currency symbol of the default profile"
    )
    
    # Backup identity
    backup_app_name: str = Field(
        default="ExpenseDaddy",
        description="appName a backup document must carry"
    )
    backup_version: int = Field(
        default=2,
        ge=1,
        description="Version written into exported documents"
    )
    
    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.
    
    Aggregates all sub-settings for easy access.
    """
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()
    
    @property
    def auth(self) -> AuthSettings:
        return AuthSettings()
    
    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).
    
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.
    
    Returns a dict of {setting_name: is_valid}, with an
    "<name>_error" entry for every section that fails to load.
    """
    results = {}
    
    settings = get_settings()
    
    for name in ("storage", "auth", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)
    
    return results
