"""
Runtime configuration.

Each group reads its own environment prefix (``BACKEND_``, ``PRICING_``,
``API_``); top-level values also come from ``.env``.
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BackendSettings(BaseSettings):
    """External backend (REST) configuration."""

    model_config = SettingsConfigDict(env_prefix="BACKEND_")

    base_url: str = "http://localhost:3001"
    timeout: float = 30.0

    # Retry settings
    max_retries: int = 3
    retry_delay: float = 0.5
    retry_multiplier: float = 2.0

    # Endpoint paths
    stocks_path: str = "/stocks"
    customer_bills_path: str = "/customer-bills"
    supplier_bills_path: str = "/supplier-bills"
    stock_transfers_path: str = "/stock-transfers"
    orders_path: str = "/orders"
    # HTTP method per order action, keyed by action name
    order_action_methods: dict[str, str] = Field(
        default_factory=lambda: {
            "move_to_processing": "PATCH",
            "move_to_checking": "PATCH",
            "move_to_delivered": "PATCH",
            "confirm_order": "POST",
            "cancel_order": "POST",
        }
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class PricingSettings(BaseSettings):
    """Line pricing configuration."""

    model_config = SettingsConfigDict(env_prefix="PRICING_")

    money_places: int = Field(default=2, ge=0, le=6)
    # ceiling for both line and invoice-level discount percentages
    max_discount_percent: float = Field(default=100.0, ge=0, le=100)


class APISettings(BaseSettings):
    """API server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["*"]


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "billdesk"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    # auto: console in development, JSON elsewhere
    log_format: Literal["auto", "console", "json"] = "auto"

    backend: BackendSettings = Field(default_factory=BackendSettings)
    pricing: PricingSettings = Field(default_factory=PricingSettings)
    api: APISettings = Field(default_factory=APISettings)


_settings: Settings | None = None


def get_settings() -> Settings:
    """Settings singleton, built from the environment on first use."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
