"""
Expiring Recurring Expenses

Recurring expenses can carry an end date (a subscription that is
cancelled, a loan that is paid off). These helpers answer "is this
still running?" and "what ends soon?".

One-time expenses never expire.
"""

from datetime import date, timedelta
from typing import Iterable, Optional

from budget_engine.models.budget import Expense


def is_expense_active(expense: Expense, as_of: date) -> bool:
    """
    Whether an expense still applies on the given date.

    - One-time: always active
    - Recurring without end date: active
    - Recurring with end date: active through the end date itself
    """
    if not expense.is_recurring:
        return True
    if expense.end_date is None:
        return True
    return expense.end_date >= as_of


def days_until_end(expense: Expense, as_of: date) -> Optional[int]:
    """Days from as_of to the end date; negative once ended, None without one."""
    if not expense.is_recurring or expense.end_date is None:
        return None
    return (expense.end_date - as_of).days


def ending_soon(
    expenses: Iterable[Expense],
    days: int = 30,
    as_of: Optional[date] = None,
) -> list[Expense]:
    """
    Recurring expenses that already ended or end within `days` of as_of.

    Sorted by end date, earliest first. If the same expense ID appears
    more than once, the last occurrence wins.
    """
    as_of = as_of or date.today()
    limit = as_of + timedelta(days=days)

    matching = [
        e for e in expenses
        if e.is_recurring and e.end_date is not None and e.end_date <= limit
    ]
    matching.sort(key=lambda e: e.end_date)

    by_id: dict[str, Expense] = {}
    for expense in matching:
        by_id[expense.id] = expense
    return sorted(by_id.values(), key=lambda e: e.end_date)


def ended(
    expenses: Iterable[Expense],
    as_of: Optional[date] = None,
) -> list[Expense]:
    """Recurring expenses whose end date is already behind as_of."""
    as_of = as_of or date.today()
    return [e for e in ending_soon(expenses, days=0, as_of=as_of) if e.end_date < as_of]
