"""
Household Cost Allocator

Splits the household (shared) expense total across people.

Policies:
- EVEN: everyone pays total / number of people
- INCOME_BASED: everyone pays total * (their income / everyone's income)

INVARIANT: over a non-empty people set, the shares add up to the total
under both policies.

DESIGN DECISION: Awkward inputs resolve to documented fallbacks, never
to exceptions. The host app recomputes on every edit, so it routinely
sees half-edited data (a person just deleted, nobody's income entered
yet) and must keep rendering:

- EMPTY_PEOPLE_SET: nobody to share with, every share is 0
- UNMATCHED_PERSON_REFERENCE: person ID not in the set, share is 0
- ZERO_INCOME_DENOMINATOR: income-based split with no income at all
  falls back to the even split
"""

from enum import Enum
from typing import Iterable, Optional, Union

from budget_engine.calculations.aggregator import person_income, total_income
from budget_engine.models.budget import DistributionMethod, Person


class AllocationFallback(str, Enum):
    """Fallbacks the allocator applies instead of failing."""
    EMPTY_PEOPLE_SET = "empty_people_set"
    UNMATCHED_PERSON_REFERENCE = "unmatched_person_reference"
    ZERO_INCOME_DENOMINATOR = "zero_income_denominator"


MethodLike = Union[DistributionMethod, str]


def _find(people: list[Person], person_id: str) -> Optional[Person]:
    for person in people:
        if person.id == person_id:
            return person
    return None


def detect_fallback(
    people: Iterable[Person],
    method: MethodLike,
    person_id: str,
) -> Optional[AllocationFallback]:
    """Which fallback household_share applies for these inputs, if any."""
    people = list(people)
    method = DistributionMethod(method)

    if not people:
        return AllocationFallback.EMPTY_PEOPLE_SET
    if _find(people, person_id) is None:
        return AllocationFallback.UNMATCHED_PERSON_REFERENCE
    if method is DistributionMethod.INCOME_BASED and total_income(people) == 0:
        return AllocationFallback.ZERO_INCOME_DENOMINATOR
    return None


def household_share(
    total_household_expense: float,
    people: Iterable[Person],
    method: MethodLike,
    person_id: str,
) -> float:
    """
    One person's share of the household expense total.

    Args:
        total_household_expense: Household total to split (any unit)
        people: Everyone sharing the household costs
        method: 'even' or 'income-based'
        person_id: Whose share to compute

    Returns:
        The share, in the same unit as the total. See the module
        docstring for the fallbacks on empty or inconsistent input.
    """
    people = list(people)
    method = DistributionMethod(method)
    fallback = detect_fallback(people, method, person_id)

    if fallback in (
        AllocationFallback.EMPTY_PEOPLE_SET,
        AllocationFallback.UNMATCHED_PERSON_REFERENCE,
    ):
        return 0.0

    if method is DistributionMethod.EVEN or fallback is AllocationFallback.ZERO_INCOME_DENOMINATOR:
        return total_household_expense / len(people)

    person = _find(people, person_id)
    return total_household_expense * (person_income(person) / total_income(people))


def allocate_household(
    total_household_expense: float,
    people: Iterable[Person],
    method: MethodLike,
) -> dict[str, float]:
    """Everyone's share, keyed by person ID."""
    people = list(people)
    return {
        person.id: household_share(total_household_expense, people, method, person.id)
        for person in people
    }
