"""
Result Models for the Budget Engine

Everything the engine hands back to the presentation layer.

All money figures are plain floats in the unit named by the model
(yearly unless a view mode says otherwise). Rounding and currency
formatting are display concerns and never happen here.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from budget_engine.models.budget import (
    AVERAGE_DAYS_PER_MONTH,
    DistributionMethod,
    ExpenseCategory,
    ViewMode,
)


class _ResultModel(BaseModel):
    model_config = ConfigDict(frozen=True)


# =============================================================================
# AGGREGATES
# =============================================================================

class BudgetTotals(_ResultModel):
    """Budget-wide aggregates."""

    view_mode: ViewMode = ViewMode.YEARLY
    total_income: float
    total_expenses: float
    household_expenses: float
    personal_expenses: float
    remaining: float = Field(
        ...,
        description="total_income - total_expenses"
    )

    def in_view(
        self,
        view_mode: ViewMode,
        days_per_month: float = AVERAGE_DAYS_PER_MONTH,
    ) -> "BudgetTotals":
        """Re-express yearly totals in another display unit."""
        if self.view_mode is not ViewMode.YEARLY:
            raise ValueError("Only yearly totals can be converted")

        def convert(amount: float) -> float:
            return view_mode.from_yearly(amount, days_per_month)

        return BudgetTotals(
            view_mode=view_mode,
            total_income=convert(self.total_income),
            total_expenses=convert(self.total_expenses),
            household_expenses=convert(self.household_expenses),
            personal_expenses=convert(self.personal_expenses),
            remaining=convert(self.remaining),
        )


class IncomeShares(_ResultModel):
    """
    How a person's income is used, in percent of that income.

    The raw percentages can exceed 100 when a person is over budget.
    The display_* values are clamped so the bar segments never add up
    to more than 100.
    """

    personal: float = 0.0
    household: float = 0.0
    remaining: float = 0.0
    over_budget: float = 0.0

    display_personal: float = 0.0
    display_household: float = 0.0
    display_remaining: float = 0.0


class PersonBreakdown(_ResultModel):
    """One person's slice of the budget."""

    person_id: str
    name: str = ""
    view_mode: ViewMode = ViewMode.YEARLY
    distribution_method: DistributionMethod = DistributionMethod.EVEN

    income: float
    personal_expenses: float
    household_share: float
    remaining: float = Field(
        ...,
        description="income - personal_expenses - household_share (negative = over budget)"
    )

    @property
    def is_over_budget(self) -> bool:
        return self.remaining < 0

    @property
    def total_expenses(self) -> float:
        return self.personal_expenses + self.household_share

    def in_view(
        self,
        view_mode: ViewMode,
        days_per_month: float = AVERAGE_DAYS_PER_MONTH,
    ) -> "PersonBreakdown":
        """Re-express a yearly breakdown in another display unit."""
        if self.view_mode is not ViewMode.YEARLY:
            raise ValueError("Only yearly breakdowns can be converted")

        def convert(amount: float) -> float:
            return view_mode.from_yearly(amount, days_per_month)

        return self.model_copy(update={
            "view_mode": view_mode,
            "income": convert(self.income),
            "personal_expenses": convert(self.personal_expenses),
            "household_share": convert(self.household_share),
            "remaining": convert(self.remaining),
        })

    def income_shares(self) -> IncomeShares:
        """Percentages of income going to each bucket (all 0 without income)."""
        if self.income <= 0:
            return IncomeShares()

        personal = self.personal_expenses / self.income * 100
        household = self.household_share / self.income * 100
        remaining = max(0.0, self.remaining / self.income * 100)
        over_budget = abs(self.remaining / self.income * 100) if self.remaining < 0 else 0.0

        display_personal = min(personal, 100.0)
        display_household = min(household, 100.0 - display_personal)
        display_remaining = max(0.0, 100.0 - display_personal - display_household)

        return IncomeShares(
            personal=personal,
            household=household,
            remaining=remaining,
            over_budget=over_budget,
            display_personal=display_personal,
            display_household=display_household,
            display_remaining=display_remaining,
        )


# =============================================================================
# CATEGORY BREAKDOWN
# =============================================================================

class CategoryBreakdown(_ResultModel):
    """Expenses sharing one category tag within a type."""

    category: str
    amount: float
    count: int = Field(ge=0)
    percentage: float = Field(
        ...,
        description="Share of the type's amount, in percent"
    )


class TypeBreakdown(_ResultModel):
    """All household or all personal expenses."""

    type: ExpenseCategory
    amount: float
    count: int = Field(ge=0)
    percentage: float = Field(
        ...,
        description="Share of all expenses, in percent"
    )
    categories: list[CategoryBreakdown] = Field(default_factory=list)


class ExpenseBreakdown(_ResultModel):
    """Expense totals by type and category tag."""

    view_mode: ViewMode = ViewMode.MONTHLY
    total_amount: float = 0.0
    household: Optional[TypeBreakdown] = None
    personal: Optional[TypeBreakdown] = None


# =============================================================================
# SUMMARY
# =============================================================================

class BudgetSummary(_ResultModel):
    """
    Everything an overview screen needs, in one view unit.

    fallbacks lists the allocation fallbacks that applied while
    computing the per-person shares (e.g. 'zero_income_denominator').
    """

    budget_id: str
    view_mode: ViewMode
    calculated_at: datetime = Field(default_factory=datetime.utcnow)
    totals: BudgetTotals
    people: list[PersonBreakdown] = Field(default_factory=list)
    fallbacks: list[str] = Field(default_factory=list)

    def for_person(self, person_id: str) -> Optional[PersonBreakdown]:
        for breakdown in self.people:
            if breakdown.person_id == person_id:
                return breakdown
        return None


# =============================================================================
# CREDIT CARD PAYOFF
# =============================================================================

class CreditCardPayoffInputs(_ResultModel):
    """Validated inputs to the payoff calculator."""

    balance: float = Field(..., gt=0, description="Current card balance")
    apr: float = Field(..., ge=0, description="Annual percentage rate, in percent")
    monthly_payment: float = Field(..., gt=0, description="Fixed monthly payment")


class CreditCardPaymentRow(_ResultModel):
    """One month of the payoff schedule."""

    month: int = Field(ge=1)
    payment: float
    interest: float
    principal: float
    remaining: float


class CreditCardPayoffResult(_ResultModel):
    """Outcome of paying a card down with a fixed monthly payment."""

    never_repaid: bool
    months: int = Field(ge=0)
    total_interest: float
    schedule: list[CreditCardPaymentRow] = Field(default_factory=list)
    inputs: CreditCardPayoffInputs
    monthly_rate: float
