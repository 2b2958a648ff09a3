"""Budget validation package."""

from budget_engine.validation.validator import BudgetValidator

__all__ = ["BudgetValidator"]
