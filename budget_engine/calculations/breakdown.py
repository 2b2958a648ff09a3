"""
Per-Person Breakdown

Composes the aggregator and the allocator into one person's view of
the budget: what they earn, what they spend on their own, their share
of household costs, and what is left.

A negative remaining means the person is over budget. That is a normal
outcome to show, not an error.
"""

from datetime import date
from typing import Iterable, Optional

from budget_engine.calculations.aggregator import (
    household_expenses,
    person_income,
    personal_expenses,
)
from budget_engine.calculations.allocator import household_share
from budget_engine.models.budget import Expense, HouseholdSettings, Person
from budget_engine.models.results import PersonBreakdown


def person_breakdown(
    person: Person,
    people: Iterable[Person],
    expenses: Iterable[Expense],
    settings: Optional[HouseholdSettings] = None,
    as_of: Optional[date] = None,
) -> PersonBreakdown:
    """
    Yearly breakdown for one person.

    Args:
        person: The person to break down
        people: Everyone sharing household costs (normally includes person)
        expenses: The full expense collection
        settings: Household settings; None means an even split
        as_of: If given, ended recurring expenses are left out
    """
    people = list(people)
    expenses = list(expenses)
    settings = settings or HouseholdSettings()

    income = person_income(person)
    personal = personal_expenses(expenses, person.id, as_of)
    share = household_share(
        household_expenses(expenses, as_of),
        people,
        settings.distribution_method,
        person.id,
    )

    return PersonBreakdown(
        person_id=person.id,
        name=person.name,
        distribution_method=settings.distribution_method,
        income=income,
        personal_expenses=personal,
        household_share=share,
        remaining=income - personal - share,
    )


def all_breakdowns(
    people: Iterable[Person],
    expenses: Iterable[Expense],
    settings: Optional[HouseholdSettings] = None,
    as_of: Optional[date] = None,
) -> list[PersonBreakdown]:
    """Yearly breakdowns for everyone, in input order."""
    people = list(people)
    expenses = list(expenses)
    return [
        person_breakdown(person, people, expenses, settings, as_of)
        for person in people
    ]
