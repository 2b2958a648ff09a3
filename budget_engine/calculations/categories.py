"""
Expense Breakdown by Type and Category

Groups expenses into household vs personal, then by category tag
inside each type, with percentages for charts.
"""

from datetime import date
from math import fsum
from typing import Iterable, Optional

from budget_engine.calculations.expiring import is_expense_active
from budget_engine.calculations.frequency import annual_amount
from budget_engine.models.budget import (
    AVERAGE_DAYS_PER_MONTH,
    Expense,
    ExpenseCategory,
    ViewMode,
)
from budget_engine.models.results import (
    CategoryBreakdown,
    ExpenseBreakdown,
    TypeBreakdown,
)


def _percentage(part: float, whole: float) -> float:
    return part / whole * 100 if whole > 0 else 0.0


def _type_breakdown(
    expense_type: ExpenseCategory,
    priced: list[tuple[Expense, float]],
    total: float,
) -> Optional[TypeBreakdown]:
    typed = [(e, amount) for e, amount in priced if e.category is expense_type]
    if not typed:
        return None

    type_amount = fsum(amount for _, amount in typed)

    # tag -> list of amounts; dict keeps first-seen order for ties
    by_tag: dict[str, list[float]] = {}
    for expense, amount in typed:
        by_tag.setdefault(expense.category_tag, []).append(amount)

    categories = [
        CategoryBreakdown(
            category=tag,
            amount=fsum(tag_amounts),
            count=len(tag_amounts),
            percentage=_percentage(fsum(tag_amounts), type_amount),
        )
        for tag, tag_amounts in by_tag.items()
    ]
    categories.sort(key=lambda c: c.amount, reverse=True)

    return TypeBreakdown(
        type=expense_type,
        amount=type_amount,
        count=len(typed),
        percentage=_percentage(type_amount, total),
        categories=categories,
    )


def expense_breakdown(
    expenses: Iterable[Expense],
    view_mode: ViewMode = ViewMode.MONTHLY,
    as_of: Optional[date] = None,
    days_per_month: float = AVERAGE_DAYS_PER_MONTH,
) -> ExpenseBreakdown:
    """
    Break expenses down by type and category tag.

    Amounts are in the requested view unit. If there is nothing to
    break down (no expenses, or all of them zero) both types are None.
    """
    view_mode = ViewMode.parse(view_mode)
    active = [
        e for e in expenses
        if as_of is None or is_expense_active(e, as_of)
    ]

    priced = [
        (e, view_mode.from_yearly(annual_amount(e.amount, e.frequency), days_per_month))
        for e in active
    ]

    total = fsum(amount for _, amount in priced)
    if total == 0:
        return ExpenseBreakdown(view_mode=view_mode)

    return ExpenseBreakdown(
        view_mode=view_mode,
        total_amount=total,
        household=_type_breakdown(ExpenseCategory.HOUSEHOLD, priced, total),
        personal=_type_breakdown(ExpenseCategory.PERSONAL, priced, total),
    )
