"""
Frequency Normalizer

Every amount is stored per its own recurrence period. Before anything
is added up it is converted to a canonical yearly figure; monthly and
daily figures are derived from the yearly one.

No rounding happens here. Rounding is a display concern.
"""

from typing import Any, Union

from budget_engine.models.budget import (
    AVERAGE_DAYS_PER_MONTH,
    Frequency,
    InvalidFrequencyError,
    InvalidViewModeError,
    ViewMode,
)


# Periods per year. A one-time amount counts once in the year it applies.
FREQUENCY_MULTIPLIERS: dict[Frequency, int] = {
    Frequency.DAILY: 365,
    Frequency.WEEKLY: 52,
    Frequency.BI_WEEKLY: 26,
    Frequency.MONTHLY: 12,
    Frequency.QUARTERLY: 4,
    Frequency.YEARLY: 1,
    Frequency.ONE_TIME: 1,
}

FrequencyLike = Union[Frequency, str]
ViewModeLike = Union[ViewMode, str]


def parse_frequency(value: Any) -> Frequency:
    """Parse a frequency, raising InvalidFrequencyError when unknown."""
    return Frequency.parse(value)


def multiplier(frequency: FrequencyLike) -> int:
    """Number of periods of this frequency in one year."""
    return FREQUENCY_MULTIPLIERS[parse_frequency(frequency)]


def annual_amount(amount: float, frequency: FrequencyLike) -> float:
    """Yearly total of an amount recorded at the given frequency."""
    return amount * multiplier(frequency)


def monthly_amount(amount: float, frequency: FrequencyLike) -> float:
    """Average monthly figure of an amount recorded at the given frequency."""
    return annual_amount(amount, frequency) / 12


def to_view(
    yearly_amount: float,
    view_mode: ViewModeLike,
    days_per_month: float = AVERAGE_DAYS_PER_MONTH,
) -> float:
    """Convert an already-yearly figure into a display unit."""
    return ViewMode.parse(view_mode).from_yearly(yearly_amount, days_per_month)


def normalize(
    amount: float,
    source_frequency: FrequencyLike,
    target_unit: ViewModeLike,
    days_per_month: float = AVERAGE_DAYS_PER_MONTH,
) -> float:
    """
    Convert an amount from its recurrence frequency to a target unit.

    Args:
        amount: Amount per source period
        source_frequency: How often the amount recurs
        target_unit: 'yearly', 'monthly' or 'daily'
        days_per_month: Average month length, only used for 'daily'

    Raises:
        InvalidFrequencyError: source_frequency is not recognized
        InvalidViewModeError: target_unit is not recognized
    """
    return to_view(annual_amount(amount, source_frequency), target_unit, days_per_month)


__all__ = [
    "FREQUENCY_MULTIPLIERS",
    "InvalidFrequencyError",
    "InvalidViewModeError",
    "annual_amount",
    "monthly_amount",
    "multiplier",
    "normalize",
    "parse_frequency",
    "to_view",
]
