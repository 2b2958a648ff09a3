"""
Budget Calculator Orchestrator

The entry point the host application calls. It composes the pure
calculation functions for a whole budget and one view mode:

1. Totals (normalize → aggregate)
2. Household shares (allocate)
3. Per-person breakdowns
4. Conversion to the requested view unit

DESIGN DECISION: The calculations themselves stay pure. Everything
with a side effect lives here:
- Allocation fallbacks and invalid frequencies are audited
- Optional memoization keyed by a hash of the inputs

Global app state (active budget, today's date, view mode) is passed
in explicitly; nothing here reads ambient state except the settings.
"""

import hashlib
import json
from collections import OrderedDict
from datetime import date
from typing import Optional, Union
from uuid import UUID

from budget_engine.audit import AuditLogger, configure_logging, create_correlation_id
from budget_engine.calculations import (
    AllocationFallback,
    all_breakdowns,
    compute_credit_card_payoff,
    compute_totals,
    detect_fallback,
    ending_soon,
    expense_breakdown,
    person_breakdown,
    total_income,
)
from budget_engine.config import EngineSettings, get_settings
from budget_engine.models.budget import (
    Budget,
    DistributionMethod,
    Expense,
    ExpenseCategory,
    HouseholdSettings,
    InvalidFrequencyError,
    ViewMode,
)
from budget_engine.models.results import (
    BudgetSummary,
    CreditCardPayoffResult,
    ExpenseBreakdown,
    PersonBreakdown,
)


class PersonNotFoundError(LookupError):
    """Requested person is not part of the budget."""

    def __init__(self, person_id: str):
        self.person_id = person_id
        super().__init__(f"Person not found in budget: {person_id!r}")


class BudgetCalculator:
    """
    Computes budget summaries and breakdowns for the presentation layer.

    The only mutable state is the optional memo cache.
    """

    def __init__(
        self,
        settings: Optional[EngineSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._settings = settings or get_settings()
        self._audit_logger = audit_logger
        self._cache: "OrderedDict[str, BudgetSummary]" = OrderedDict()

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _resolve_view_mode(self, view_mode: Union[ViewMode, str, None]) -> ViewMode:
        if view_mode is None:
            return self._settings.default_view_mode
        return ViewMode.parse(view_mode)

    def _resolve_as_of(self, as_of: Optional[date]) -> Optional[date]:
        if as_of is None and self._settings.exclude_ended_expenses:
            return date.today()
        return as_of

    def _household_settings(self, budget: Budget) -> HouseholdSettings:
        # Budgets built without explicit settings use the configured default
        if "household_settings" not in budget.model_fields_set:
            return HouseholdSettings(
                distribution_method=self._settings.default_distribution_method
            )
        return budget.household_settings

    def _budget_fallbacks(
        self,
        budget: Budget,
        settings: HouseholdSettings,
    ) -> list[AllocationFallback]:
        fallbacks: list[AllocationFallback] = []

        if not budget.people:
            fallbacks.append(AllocationFallback.EMPTY_PEOPLE_SET)
        elif (
            settings.distribution_method is DistributionMethod.INCOME_BASED
            and total_income(budget.people) == 0
        ):
            fallbacks.append(AllocationFallback.ZERO_INCOME_DENOMINATOR)

        known = {person.id for person in budget.people}
        if any(
            e.person_id not in known
            for e in budget.expenses
            if e.category is ExpenseCategory.PERSONAL
        ):
            fallbacks.append(AllocationFallback.UNMATCHED_PERSON_REFERENCE)

        return fallbacks

    def cache_key(
        self,
        budget: Budget,
        view_mode: ViewMode,
        as_of: Optional[date],
    ) -> str:
        """Content-derived key: same inputs, same key."""
        payload = {
            "budget": budget.model_dump(mode="json"),
            "view_mode": view_mode.value,
            "as_of": as_of.isoformat() if as_of else None,
            "default_method": self._settings.default_distribution_method.value,
            "days_per_month": self._settings.days_per_month,
        }
        encoded = json.dumps(payload, sort_keys=True).encode("utf-8")
        return hashlib.sha256(encoded).hexdigest()

    def clear_cache(self) -> None:
        self._cache.clear()

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def summarize(
        self,
        budget: Budget,
        view_mode: Union[ViewMode, str, None] = None,
        as_of: Optional[date] = None,
        correlation_id: Optional[UUID] = None,
    ) -> BudgetSummary:
        """
        Totals and per-person breakdowns for a budget, in one view unit.

        Raises:
            InvalidFrequencyError: An amount carries an unknown frequency
            InvalidViewModeError: view_mode is not daily, monthly or yearly
        """
        correlation_id = correlation_id or create_correlation_id()
        view_mode = self._resolve_view_mode(view_mode)
        as_of = self._resolve_as_of(as_of)

        key = None
        if self._settings.enable_summary_cache:
            key = self.cache_key(budget, view_mode, as_of)
            cached = self._cache.get(key)
            if cached is not None:
                self._cache.move_to_end(key)
                if self._audit_logger:
                    self._audit_logger.log_summary_cache_hit(
                        budget_id=budget.id,
                        cache_key=key,
                        correlation_id=correlation_id,
                    )
                return cached

        settings = self._household_settings(budget)
        days_per_month = self._settings.days_per_month

        try:
            totals = compute_totals(budget.people, budget.expenses, as_of)
            breakdowns = all_breakdowns(budget.people, budget.expenses, settings, as_of)
        except InvalidFrequencyError as e:
            if self._audit_logger:
                self._audit_logger.log_invalid_frequency(
                    value=e.value,
                    correlation_id=correlation_id,
                )
            raise

        fallbacks = self._budget_fallbacks(budget, settings)
        if self._audit_logger:
            for fallback in fallbacks:
                self._audit_logger.log_allocation_fallback(
                    fallback=fallback.value,
                    person_id=None,
                    distribution_method=settings.distribution_method.value,
                    correlation_id=correlation_id,
                )

        summary = BudgetSummary(
            budget_id=budget.id,
            view_mode=view_mode,
            totals=totals.in_view(view_mode, days_per_month),
            people=[b.in_view(view_mode, days_per_month) for b in breakdowns],
            fallbacks=[fallback.value for fallback in fallbacks],
        )

        if self._audit_logger:
            self._audit_logger.log_summary_calculated(
                budget_id=budget.id,
                view_mode=view_mode.value,
                people_count=len(budget.people),
                correlation_id=correlation_id,
            )

        if key is not None:
            self._cache[key] = summary
            while len(self._cache) > self._settings.summary_cache_size:
                self._cache.popitem(last=False)

        return summary

    def person_breakdown(
        self,
        budget: Budget,
        person_id: str,
        view_mode: Union[ViewMode, str, None] = None,
        as_of: Optional[date] = None,
        correlation_id: Optional[UUID] = None,
    ) -> PersonBreakdown:
        """
        Breakdown for a single person of the budget.

        Raises:
            PersonNotFoundError: person_id is not in the budget
        """
        correlation_id = correlation_id or create_correlation_id()
        view_mode = self._resolve_view_mode(view_mode)
        as_of = self._resolve_as_of(as_of)

        person = budget.find_person(person_id)
        if person is None:
            raise PersonNotFoundError(person_id)

        settings = self._household_settings(budget)
        fallback = detect_fallback(budget.people, settings.distribution_method, person_id)
        if fallback and self._audit_logger:
            self._audit_logger.log_allocation_fallback(
                fallback=fallback.value,
                person_id=person_id,
                distribution_method=settings.distribution_method.value,
                correlation_id=correlation_id,
            )

        breakdown = person_breakdown(person, budget.people, budget.expenses, settings, as_of)

        if self._audit_logger:
            self._audit_logger.log_breakdown_calculated(
                person_id=person_id,
                remaining=breakdown.remaining,
                correlation_id=correlation_id,
            )

        return breakdown.in_view(view_mode, self._settings.days_per_month)

    def expense_breakdown(
        self,
        budget: Budget,
        view_mode: Union[ViewMode, str, None] = None,
        as_of: Optional[date] = None,
    ) -> ExpenseBreakdown:
        """Expenses by type and category tag, in one view unit."""
        return expense_breakdown(
            budget.expenses,
            self._resolve_view_mode(view_mode),
            self._resolve_as_of(as_of),
            self._settings.days_per_month,
        )

    def ending_soon(
        self,
        budget: Budget,
        days: Optional[int] = None,
        as_of: Optional[date] = None,
    ) -> list[Expense]:
        """Recurring expenses already ended or ending within the window."""
        if days is None:
            days = self._settings.ending_soon_days
        return ending_soon(budget.expenses, days=days, as_of=as_of)

    def credit_card_payoff(
        self,
        balance: float,
        apr: float,
        monthly_payment: float,
        correlation_id: Optional[UUID] = None,
    ) -> CreditCardPayoffResult:
        """Payoff schedule using the configured currency precision."""
        result = compute_credit_card_payoff(
            balance,
            apr,
            monthly_payment,
            fraction_digits=self._settings.currency_fraction_digits,
            max_months=self._settings.payoff_max_months,
        )

        if self._audit_logger:
            self._audit_logger.log_payoff_calculated(
                months=result.months,
                total_interest=result.total_interest,
                never_repaid=result.never_repaid,
                correlation_id=correlation_id,
            )

        return result


def create_calculator(
    settings: Optional[EngineSettings] = None,
    with_audit: bool = True,
) -> BudgetCalculator:
    """
    Factory function to create a calculator.

    Args:
        settings: Engine settings (default: loaded from environment)
        with_audit: Whether to log fallbacks and errors
    """
    settings = settings or get_settings()
    audit_logger = None
    if with_audit:
        configure_logging(settings.log_level)
        audit_logger = AuditLogger()
    return BudgetCalculator(settings=settings, audit_logger=audit_logger)
