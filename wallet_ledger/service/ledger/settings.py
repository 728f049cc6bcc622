"""
Ledger Settings.

Tunable parameters of the balance ledger and statistics engine. Values
can be overridden with environment variables using the LEDGER_ prefix:
    LEDGER_MAX_RETRIES=5
    LEDGER_RETRY_BACKOFF_SECONDS=0.01
    LEDGER_UNKNOWN_CATEGORY_COLOR=#6b7280

Usage:
    from wallet_ledger.service.ledger.settings import ledger_settings

    # Or custom settings for tests
    custom = LedgerSettings(max_retries=1)
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerSettings(BaseSettings):
    """Configurable parameters for the ledger and statistics."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Concurrency ===
    max_retries: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Attempts for one mutation before a concurrency conflict is reported",
    )
    retry_backoff_seconds: float = Field(
        default=0.01,
        ge=0.0,
        description="Base delay between attempts, doubled after every conflict",
    )

    # === Validation ===
    max_description_length: int = Field(
        default=255,
        gt=0,
        description="Maximum length of a transaction description",
    )
    max_amount: float = Field(
        default=999_999_999_999.99,
        gt=0,
        description="Largest amount a single transaction may carry",
    )

    # === Statistics ===
    unknown_category_name: str = Field(
        default="Unknown",
        description="Bucket name for transactions whose category has no name",
    )
    unknown_category_color: str = Field(
        default="#6b7280",
        description="Neutral color used for the unknown bucket",
    )


@lru_cache
def get_ledger_settings() -> LedgerSettings:
    return LedgerSettings()


ledger_settings = get_ledger_settings()
