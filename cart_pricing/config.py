"""Application Configuration - environment-driven settings via pydantic-settings.

Invariants:
    - Money settings are Decimal (parsed from strings, never float)
    - get_settings() is cached (lru_cache): single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults mirror core/pricing_constants.py so the service works out-of-the-box
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cart_pricing.core.pricing_constants import (
    DEFAULT_CURRENCY_SYMBOL,
    FREE_SHIPPING_THRESHOLD,
    PRICE_VALIDATION_DEBOUNCE_MS,
    STANDARD_SHIPPING_COST,
    TAX_RATE,
)


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Pricing authority
    pricing_api_base_url: str = "http://localhost:8000"
    pricing_api_timeout_seconds: float = 10.0

    @field_validator("pricing_api_base_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Endpoint paths are joined with a leading slash."""
        if isinstance(v, str):
            return v.rstrip("/")
        return v

    # Pricing rules
    tax_rate: Decimal = TAX_RATE
    free_shipping_threshold: Decimal = FREE_SHIPPING_THRESHOLD
    standard_shipping_cost: Decimal = STANDARD_SHIPPING_COST
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL

    # Validation coordinator
    price_validation_debounce_ms: int = PRICE_VALIDATION_DEBOUNCE_MS

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
