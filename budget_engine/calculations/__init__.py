"""
Budget calculation package.

Pure functions only: no I/O, no shared state. Every result depends on
nothing but the arguments passed in.
"""

from budget_engine.calculations.aggregator import (
    compute_totals,
    household_expenses,
    person_income,
    personal_expenses,
    remaining,
    total_expenses,
    total_income,
)
from budget_engine.calculations.allocator import (
    AllocationFallback,
    allocate_household,
    detect_fallback,
    household_share,
)
from budget_engine.calculations.breakdown import all_breakdowns, person_breakdown
from budget_engine.calculations.categories import expense_breakdown
from budget_engine.calculations.expiring import (
    days_until_end,
    ended,
    ending_soon,
    is_expense_active,
)
from budget_engine.calculations.frequency import (
    FREQUENCY_MULTIPLIERS,
    InvalidFrequencyError,
    InvalidViewModeError,
    annual_amount,
    monthly_amount,
    multiplier,
    normalize,
    parse_frequency,
    to_view,
)
from budget_engine.calculations.payoff import (
    compute_credit_card_payoff,
    compute_interest_only_minimum,
    monthly_rate,
)

__all__ = [
    # Frequency normalizer
    "FREQUENCY_MULTIPLIERS",
    "InvalidFrequencyError",
    "InvalidViewModeError",
    "annual_amount",
    "monthly_amount",
    "multiplier",
    "normalize",
    "parse_frequency",
    "to_view",
    # Aggregator
    "compute_totals",
    "household_expenses",
    "person_income",
    "personal_expenses",
    "remaining",
    "total_expenses",
    "total_income",
    # Allocator
    "AllocationFallback",
    "allocate_household",
    "detect_fallback",
    "household_share",
    # Breakdowns
    "all_breakdowns",
    "expense_breakdown",
    "person_breakdown",
    # Expiry
    "days_until_end",
    "ended",
    "ending_soon",
    "is_expense_active",
    # Tools
    "compute_credit_card_payoff",
    "compute_interest_only_minimum",
    "monthly_rate",
]
