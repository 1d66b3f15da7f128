"""
Shared configuration management for step filter evaluation.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="FILTERS_",
        env_file=".env",
        case_sensitive=False,
        extra="allow"
    )

    # Logging
    log_level: str = Field(default="info")


class FilterConfig(BaseConfig):
    """Settings for the filter engine and its webhook transport."""

    # Webhook transport
    webhook_timeout_seconds: float = Field(default=10.0, gt=0)
    webhook_max_attempts: int = Field(default=3, ge=1)
    webhook_retry_base_delay: float = Field(default=0.5, ge=0)
    webhook_retry_max_delay: float = Field(default=5.0, ge=0)
    webhook_retry_jitter: bool = Field(default=True)


def get_config(**overrides) -> FilterConfig:
    """Get filter configuration, applying explicit overrides over the environment."""
    return FilterConfig(**overrides)
