"""
Configuration Management for the Budget Engine

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: Settings only choose defaults and presentation details.
Nothing here changes calculation semantics: callers can always pass the
view mode, distribution method or as-of date explicitly.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from budget_engine.models.budget import (
    AVERAGE_DAYS_PER_MONTH,
    DistributionMethod,
    ViewMode,
)


class EngineSettings(BaseSettings):
    """
    Budget engine settings.

    Loads configuration from BUDGET_* environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="BUDGET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Minimum level for structured logs"
    )

    # Presentation defaults
    default_view_mode: ViewMode = Field(
        default=ViewMode.MONTHLY,
        description="View mode used when the caller does not pick one"
    )
    default_distribution_method: DistributionMethod = Field(
        default=DistributionMethod.EVEN,
        description="Distribution method used when a budget has no settings"
    )
    days_per_month: float = Field(
        default=AVERAGE_DAYS_PER_MONTH,
        gt=27.0,
        le=31.0,
        description="Average month length for the daily view"
    )
    currency_fraction_digits: int = Field(
        default=2,
        ge=0,
        le=4,
        description="Decimal places of the budget currency"
    )

    # Expiring expenses
    ending_soon_days: int = Field(
        default=30,
        ge=0,
        le=366,
        description="Window for the 'ending soon' list"
    )
    exclude_ended_expenses: bool = Field(
        default=False,
        description="Leave ended recurring expenses out of totals (as of today)"
    )

    # Payoff calculator
    payoff_max_months: int = Field(
        default=1200,
        ge=1,
        description="Longest payoff schedule before reporting 'never repaid'"
    )

    # Memoization
    enable_summary_cache: bool = Field(
        default=False,
        description="Memoize summaries by a hash of their inputs"
    )
    summary_cache_size: int = Field(
        default=128,
        ge=1,
        le=10000,
        description="Maximum number of memoized summaries"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Only accept standard logging level names."""
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unsupported log level: {v}")
        return level


@lru_cache()
def get_settings() -> EngineSettings:
    """
    Get engine settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return EngineSettings()
