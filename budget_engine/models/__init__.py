"""
Data Models Package

This package contains all Pydantic models used by the budget engine.
Input entities live in budget.py, calculation outputs in results.py.
"""

from budget_engine.models.budget import (
    AVERAGE_DAYS_PER_MONTH,
    DEFAULT_CATEGORY_TAG,
    Budget,
    DistributionMethod,
    Expense,
    ExpenseCategory,
    Frequency,
    HouseholdSettings,
    Income,
    InvalidFrequencyError,
    InvalidViewModeError,
    Person,
    ViewMode,
)
from budget_engine.models.results import (
    BudgetSummary,
    BudgetTotals,
    CategoryBreakdown,
    CreditCardPaymentRow,
    CreditCardPayoffInputs,
    CreditCardPayoffResult,
    ExpenseBreakdown,
    IncomeShares,
    PersonBreakdown,
    TypeBreakdown,
)
from budget_engine.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from budget_engine.models.validation import ValidationIssue, ValidationResult

__all__ = [
    # Input models
    "AVERAGE_DAYS_PER_MONTH",
    "DEFAULT_CATEGORY_TAG",
    "Budget",
    "DistributionMethod",
    "Expense",
    "ExpenseCategory",
    "Frequency",
    "HouseholdSettings",
    "Income",
    "InvalidFrequencyError",
    "InvalidViewModeError",
    "Person",
    "ViewMode",
    # Result models
    "BudgetSummary",
    "BudgetTotals",
    "CategoryBreakdown",
    "CreditCardPaymentRow",
    "CreditCardPayoffInputs",
    "CreditCardPayoffResult",
    "ExpenseBreakdown",
    "IncomeShares",
    "PersonBreakdown",
    "TypeBreakdown",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
    # Validation models
    "ValidationIssue",
    "ValidationResult",
]
