"""Configuration management with pydantic-settings.

Provides type-safe configuration with environment variable validation.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable validation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === BigCommerce API ===
    bigcommerce_store_hash: str = Field(..., description="BigCommerce store hash")
    bigcommerce_access_token: str = Field(..., description="BigCommerce API access token")
    bigcommerce_api_url: str | None = Field(
        None, description="Explicit API base URL (overrides the store hash URL)"
    )

    # === HTTP ===
    http_timeout_seconds: int = Field(30, description="Total timeout per external call (seconds)")
    http_max_retries: int = Field(1, description="Attempts per call (1 = no retry)")
    http_backoff_base: float = Field(0.75, description="HTTP retry backoff base delay")
    http_backoff_max: float = Field(8.0, description="HTTP retry backoff max delay")
    bigcommerce_rate_per_min: int = Field(450, description="BigCommerce API rate limit per minute")

    # === Order history paging ===
    orders_page_size: int = Field(250, description="Orders per page (BigCommerce max is 250)")
    orders_page_delay_ms: int = Field(200, description="Pause between order page requests")

    # === Line item batches ===
    line_items_batch_size: int = Field(10, description="Concurrent line-item requests per batch")
    line_items_batch_delay_ms: int = Field(100, description="Pause between line-item batches")

    # === Analysis ===
    default_lookback_days: int = Field(730, description="Default analysis window (days)")

    # === Logging ===
    log_level: str = Field("INFO", description="Root log level")
    log_file: str | None = Field(None, description="JSON log file path (None = stderr only)")

    @property
    def api_base_url(self) -> str:
        """Return BigCommerce REST base URL for the configured store."""
        if self.bigcommerce_api_url:
            return self.bigcommerce_api_url.rstrip("/")
        return f"https://api.bigcommerce.com/stores/{self.bigcommerce_store_hash}"

    @property
    def orders_page_delay(self) -> float:
        """Order page delay in seconds."""
        return self.orders_page_delay_ms / 1000.0

    @property
    def line_items_batch_delay(self) -> float:
        """Line-item batch delay in seconds."""
        return self.line_items_batch_delay_ms / 1000.0


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Raises:
        RuntimeError: If required environment variables are missing.

    """
    try:
        return Settings()
    except ValidationError as e:
        missing_fields = []
        for error in e.errors():
            if error["type"] == "missing":
                field_name = error["loc"][0]
                missing_fields.append(str(field_name).upper())

        error_msg = (
            f"Configuration error: Missing required environment variables: "
            f"{', '.join(missing_fields)}\n"
            f"Please set them in .env file or export as environment variables."
        )
        raise RuntimeError(error_msg) from e


__all__ = ["Settings", "get_settings"]
