"""Shared fixtures for budget engine tests."""

from itertools import count

import pytest

from budget_engine.config import EngineSettings
from budget_engine.models import Expense, Income, Person


@pytest.fixture
def make_person():
    """Factory: make_person('alice', 30000) gives one yearly income source."""
    ids = count(1)

    def _make(person_id: str, *yearly_incomes: float, name: str = "") -> Person:
        return Person(
            id=person_id,
            name=name or person_id.capitalize(),
            income=[
                Income(
                    id=f"inc-{next(ids)}",
                    label="Salary",
                    amount=amount,
                    frequency="yearly",
                    person_id=person_id,
                )
                for amount in yearly_incomes
            ],
        )

    return _make


@pytest.fixture
def make_expense():
    """Factory for expenses; defaults to a yearly household expense."""
    ids = count(1)

    def _make(amount: float, **overrides) -> Expense:
        data = {
            "id": f"exp-{next(ids)}",
            "description": "Test expense",
            "amount": amount,
            "frequency": "yearly",
            "category": "household",
        }
        data.update(overrides)
        return Expense(**data)

    return _make


@pytest.fixture
def settings():
    """Engine settings that ignore the environment's .env file."""
    return EngineSettings(_env_file=None)
