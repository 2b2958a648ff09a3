"""
Aggregator

Sums income across people and expenses across categories.

DESIGN DECISION: Every amount is normalized to yearly BEFORE it is
summed, and sums use math.fsum. Adding raw amounts of mixed frequencies
would be meaningless, and fsum makes the result independent of the
order the records arrive in.

as_of is optional everywhere. Without it, every expense counts. With
it, recurring expenses that ended before that date are left out.
"""

from datetime import date
from math import fsum
from typing import Iterable, Optional

from budget_engine.calculations.expiring import is_expense_active
from budget_engine.calculations.frequency import annual_amount
from budget_engine.models.budget import Expense, ExpenseCategory, Person
from budget_engine.models.results import BudgetTotals


def person_income(person: Person) -> float:
    """Yearly income of one person across all their sources."""
    return fsum(annual_amount(income.amount, income.frequency) for income in person.income)


def total_income(people: Iterable[Person]) -> float:
    """Yearly income of everyone."""
    return fsum(
        annual_amount(income.amount, income.frequency)
        for person in people
        for income in person.income
    )


def _yearly_expenses(
    expenses: Iterable[Expense],
    as_of: Optional[date],
    category: Optional[ExpenseCategory] = None,
    person_id: Optional[str] = None,
) -> float:
    amounts = []
    for expense in expenses:
        if category is not None and expense.category is not category:
            continue
        if person_id is not None and expense.person_id != person_id:
            continue
        if as_of is not None and not is_expense_active(expense, as_of):
            continue
        amounts.append(annual_amount(expense.amount, expense.frequency))
    return fsum(amounts)


def total_expenses(expenses: Iterable[Expense], as_of: Optional[date] = None) -> float:
    """Yearly total of all expenses."""
    return _yearly_expenses(expenses, as_of)


def household_expenses(expenses: Iterable[Expense], as_of: Optional[date] = None) -> float:
    """Yearly total of shared household expenses."""
    return _yearly_expenses(expenses, as_of, category=ExpenseCategory.HOUSEHOLD)


def personal_expenses(
    expenses: Iterable[Expense],
    person_id: Optional[str] = None,
    as_of: Optional[date] = None,
) -> float:
    """
    Yearly total of personal expenses.

    With person_id, only that person's expenses count. An ID nobody
    owns simply totals to 0.
    """
    return _yearly_expenses(
        expenses,
        as_of,
        category=ExpenseCategory.PERSONAL,
        person_id=person_id,
    )


def remaining(income: float, expenses: float) -> float:
    return income - expenses


def compute_totals(
    people: Iterable[Person],
    expenses: Iterable[Expense],
    as_of: Optional[date] = None,
) -> BudgetTotals:
    """All budget-wide aggregates, in yearly figures."""
    expenses = list(expenses)
    income = total_income(people)
    spent = total_expenses(expenses, as_of)

    return BudgetTotals(
        total_income=income,
        total_expenses=spent,
        household_expenses=household_expenses(expenses, as_of),
        personal_expenses=personal_expenses(expenses, as_of=as_of),
        remaining=remaining(income, spent),
    )
