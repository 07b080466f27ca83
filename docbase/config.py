"""Configuration for docbase services.

Settings are loaded from environment variables with defaults that work
against a local MongoDB instance.
"""

from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DocbaseSettings(BaseSettings):
    """Settings shared by the persistence layer and the API.

    Environment variables take precedence over defaults.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ==========================================================================
    # MongoDB Configuration
    # ==========================================================================

    mongodb_uri: str = Field(
        default="mongodb://localhost:27017/docbase",
        description="MongoDB connection URI",
    )

    mongo_database: str = Field(default="docbase")

    # ==========================================================================
    # Application Settings
    # ==========================================================================

    debug: bool = Field(default=False, description="FastAPI debug tracebacks and uvicorn reload")
    log_level: str = Field(default="INFO")

    timezone: str = Field(
        default="UTC",
        description="IANA timezone used for human readable audit timestamps",
    )

    # ==========================================================================
    # Validators
    # ==========================================================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return upper

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        if v.upper() == "UTC":
            return "UTC"
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {v}")
        return v


@lru_cache
def get_settings() -> DocbaseSettings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once per process.
    Call get_settings.cache_clear() if you need to reload settings.
    """
    return DocbaseSettings()
