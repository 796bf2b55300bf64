# python
# taskboard/core/config.py
"""Configuration settings for the Taskboard client.

Uses Pydantic BaseSettings for environment variable management.
"""
from enum import Enum
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentEnum(str, Enum):
    development = "development"
    testing = "testing"
    staging = "staging"
    production = "production"


class LogLevelEnum(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormatEnum(str, Enum):
    simple = "simple"
    json = "json"


TOKEN_STORAGE_KEY = "token"


class Settings(BaseSettings):
    # Pydantic v2 settings configuration
    model_config = SettingsConfigDict(
        env_prefix="TASKBOARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ===== Application Settings =====
    app_name: str = Field(default="Taskboard", description="Application name")
    environment: EnvironmentEnum = Field(
        default=EnvironmentEnum.development, description="Environment type"
    )
    debug: bool = Field(default=False, description="Debug mode")
    version: str = Field(default="1.0.0", description="Application version")

    # ===== Backend API =====
    api_base_url: str = Field(
        default="http://localhost:8000", description="Base URL of the task management API"
    )
    request_timeout: float | None = Field(
        default=None, description="Request timeout in seconds (transport default when unset)"
    )

    # ===== Persistent Storage =====
    storage_path: Path = Field(
        default_factory=lambda: Path.home() / ".taskboard" / "storage.json",
        description="Key/value file holding the session token",
    )
    token_storage_key: str = Field(
        default=TOKEN_STORAGE_KEY, description="Storage key of the bearer token"
    )

    # ===== Dashboard =====
    due_soon_days: int = Field(default=7, description="Width of the due-soon window in days")
    recent_projects_limit: int = Field(default=5, description="Projects shown on the dashboard")

    # ===== Monitoring & Logging =====
    log_level: LogLevelEnum = Field(default=LogLevelEnum.INFO, description="Logging level")
    log_format: LogFormatEnum = Field(default=LogFormatEnum.simple, description="Log format")

    # ===== Validation Methods =====
    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        if v and isinstance(v, str):
            lv = v.lower()
            if lv in ["dev", "develop"]:
                return "development"
            if lv in ["prod"]:
                return "production"
            return lv
        return v

    @field_validator("api_base_url")
    @classmethod
    def validate_api_base_url(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("API base URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("due_soon_days", "recent_projects_limit")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Value must be at least 1")
        return v


settings = Settings()


def get_config_summary(config: Settings | None = None) -> dict:
    """Settings worth reporting at start-up. Holds no secrets."""
    config = config or settings
    return {
        "app_name": config.app_name,
        "version": config.version,
        "environment": config.environment.value,
        "debug": config.debug,
        "api_base_url": config.api_base_url,
        "storage_path": str(config.storage_path),
        "log_level": config.log_level.value,
    }


__all__ = [
    "settings",
    "Settings",
    "get_config_summary",
    "EnvironmentEnum",
    "LogLevelEnum",
    "LogFormatEnum",
    "TOKEN_STORAGE_KEY",
]
