"""
Settings management for retry and logging behaviour using Pydantic.

This module provides type-safe configuration management with environment variable support.
Requires pydantic and pydantic-settings to be installed.
"""

from functools import lru_cache
from typing import Literal
from typing import TypeVar

try:
    from pydantic import Field, field_validator
    from pydantic_settings import BaseSettings
except ImportError as e:
    raise ImportError(
        "Configuration support requires 'pydantic' and 'pydantic-settings'. "
        "Install with: pip install aws-resilience[config]"
    ) from e

from ..retry.models import (
    DEFAULT_BASE_DELAY_MS,
    DEFAULT_MAX_DELAY_MS,
    DEFAULT_MAX_RETRIES,
    DEFAULT_RETRYABLE_ERRORS,
)

T = TypeVar("T", bound=BaseSettings)


class Settings(BaseSettings):
    """
    Base settings class.

    Extend this class to define your configuration schema with type hints.
    Settings are automatically loaded from environment variables.

    Example:
        class MySettings(Settings):
            TABLE_NAME: str
            DEBUG: bool = False

        settings = MySettings()
    """

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore",  # Allow extra .env fields
    }


class ResilienceSettings(Settings):
    """
    Retry and logging settings read from the environment.

    RETRY_RETRYABLE_ERRORS is parsed as a JSON list, e.g.
    RETRY_RETRYABLE_ERRORS='["ThrottlingException", "SlowDown"]'.
    """

    RETRY_MAX_RETRIES: int = Field(default=DEFAULT_MAX_RETRIES, ge=0)
    RETRY_BASE_DELAY_MS: float = Field(default=DEFAULT_BASE_DELAY_MS, ge=0)
    RETRY_MAX_DELAY_MS: float = Field(default=DEFAULT_MAX_DELAY_MS, ge=0)
    RETRY_JITTER_TYPE: Literal["none", "full", "equal"] = "full"
    RETRY_RETRYABLE_ERRORS: list[str] = Field(
        default_factory=lambda: list(DEFAULT_RETRYABLE_ERRORS)
    )
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    @field_validator("LOG_LEVEL")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.upper()


@lru_cache
def get_settings(settings_class: type[T] = ResilienceSettings) -> T:
    """
    Get cached settings instance.

    Settings are cached to avoid re-reading environment variables on every call.

    Args:
        settings_class: Settings class to instantiate (default: ResilienceSettings)

    Returns:
        Cached settings instance

    Example:
        settings = get_settings()
        config = RetryConfig.from_settings(settings)
    """
    return settings_class()
