"""
Tests for the BudgetCalculator orchestrator and the audit logger.
"""

import logging
from datetime import date

import pytest

from budget_engine.audit import AuditLogger, create_correlation_id
from budget_engine.config import EngineSettings
from budget_engine.models import (
    AuditEventType,
    AuditSeverity,
    Budget,
    DistributionMethod,
    HouseholdSettings,
    InvalidViewModeError,
    ViewMode,
)
from budget_engine.orchestrator import (
    BudgetCalculator,
    PersonNotFoundError,
    create_calculator,
)


@pytest.fixture
def audit_logger():
    return AuditLogger(logger_name="budget_engine.test")


@pytest.fixture
def calculator(settings, audit_logger):
    return BudgetCalculator(settings=settings, audit_logger=audit_logger)


@pytest.fixture
def budget(make_person, make_expense):
    return Budget(
        id="home",
        people=[make_person("alice", 60000), make_person("bob", 20000)],
        expenses=[
            make_expense(1000, frequency="monthly"),
            make_expense(500, frequency="monthly", category="personal", person_id="alice"),
        ],
        household_settings=HouseholdSettings(
            distribution_method=DistributionMethod.INCOME_BASED
        ),
    )


def _event_types(audit_logger: AuditLogger) -> list[AuditEventType]:
    return [event.event_type for event in audit_logger.events]


class TestSummarize:
    """Tests for whole-budget summaries."""

    def test_monthly_summary(self, calculator, budget):
        """Test totals and breakdowns in the monthly view."""
        summary = calculator.summarize(budget, "monthly")
        assert summary.budget_id == "home"
        assert summary.view_mode is ViewMode.MONTHLY
        assert summary.totals.total_income == pytest.approx(80000 / 12)
        assert summary.totals.household_expenses == pytest.approx(1000)
        assert summary.totals.personal_expenses == pytest.approx(500)
        assert summary.totals.remaining == pytest.approx(80000 / 12 - 1500)
        assert summary.fallbacks == []

        alice = summary.for_person("alice")
        assert alice.view_mode is ViewMode.MONTHLY
        assert alice.household_share == pytest.approx(750)
        assert alice.remaining == pytest.approx(5000 - 500 - 750)
        assert summary.for_person("bob").household_share == pytest.approx(250)
        assert summary.for_person("carol") is None

    def test_default_view_mode_from_settings(self, budget):
        """Test the configured view mode is used when none is given."""
        calculator = BudgetCalculator(
            settings=EngineSettings(_env_file=None, default_view_mode="yearly")
        )
        summary = calculator.summarize(budget)
        assert summary.view_mode is ViewMode.YEARLY
        assert summary.totals.total_income == pytest.approx(80000)

    def test_daily_view(self, calculator, budget):
        """Test the daily view divides monthly figures by the average month."""
        summary = calculator.summarize(budget, ViewMode.DAILY)
        assert summary.totals.household_expenses == pytest.approx(1000 / 30.44)

    def test_unknown_view_mode(self, calculator, budget):
        """Test an unknown view mode fails."""
        with pytest.raises(InvalidViewModeError):
            calculator.summarize(budget, "weekly")

    def test_default_distribution_method(self, make_person, make_expense):
        """Test budgets without settings use the configured default method."""
        budget = Budget(
            people=[make_person("a", 30000), make_person("b", 10000)],
            expenses=[make_expense(4000)],
        )
        calculator = BudgetCalculator(
            settings=EngineSettings(
                _env_file=None, default_distribution_method="income-based"
            )
        )
        summary = calculator.summarize(budget, "yearly")
        assert summary.for_person("a").household_share == pytest.approx(3000)

    def test_explicit_settings_win_over_default(self, make_person, make_expense):
        """Test a budget's own settings are not overridden."""
        budget = Budget(
            people=[make_person("a", 30000), make_person("b", 10000)],
            expenses=[make_expense(4000)],
            household_settings=HouseholdSettings(distribution_method="even"),
        )
        calculator = BudgetCalculator(
            settings=EngineSettings(
                _env_file=None, default_distribution_method="income-based"
            )
        )
        summary = calculator.summarize(budget, "yearly")
        assert summary.for_person("a").household_share == pytest.approx(2000)

    def test_exclude_ended_expenses(self, make_person, make_expense):
        """Test ended expenses drop out as of the given date."""
        budget = Budget(
            people=[make_person("a", 10000)],
            expenses=[
                make_expense(100, frequency="monthly"),
                make_expense(50, frequency="monthly", end_date=date(2024, 1, 31)),
            ],
        )
        calculator = BudgetCalculator(settings=EngineSettings(_env_file=None))
        all_in = calculator.summarize(budget, "monthly")
        current = calculator.summarize(budget, "monthly", as_of=date(2024, 6, 1))
        assert all_in.totals.total_expenses == pytest.approx(150)
        assert current.totals.total_expenses == pytest.approx(100)

    def test_summary_logged(self, calculator, budget, audit_logger):
        """Test a summary leaves a correlated audit event."""
        correlation_id = create_correlation_id()
        calculator.summarize(budget, correlation_id=correlation_id)
        events = audit_logger.events
        assert events[-1].event_type is AuditEventType.SUMMARY_CALCULATED
        assert events[-1].correlation_id == correlation_id
        assert events[-1].entity_id == "home"


class TestFallbacks:
    """Tests that fallbacks are applied and audited."""

    def test_empty_people(self, calculator, audit_logger, make_expense):
        """Test a budget with nobody in it still renders."""
        budget = Budget(expenses=[make_expense(1200)])
        summary = calculator.summarize(budget, "yearly")
        assert summary.people == []
        assert summary.totals.household_expenses == pytest.approx(1200)
        assert summary.fallbacks == ["empty_people_set"]
        assert AuditEventType.EMPTY_PEOPLE_SET in _event_types(audit_logger)

    def test_zero_income(self, calculator, audit_logger, make_person, make_expense):
        """Test the income-based split without income falls back to even."""
        budget = Budget(
            people=[make_person("a"), make_person("b")],
            expenses=[make_expense(1000)],
            household_settings=HouseholdSettings(distribution_method="income-based"),
        )
        summary = calculator.summarize(budget, "yearly")
        assert [p.household_share for p in summary.people] == [
            pytest.approx(500), pytest.approx(500),
        ]
        assert summary.fallbacks == ["zero_income_denominator"]
        fallback_events = [
            e for e in audit_logger.events
            if e.event_type is AuditEventType.ZERO_INCOME_DENOMINATOR
        ]
        assert len(fallback_events) == 1
        assert fallback_events[0].severity is AuditSeverity.WARNING

    def test_unmatched_personal_expense(self, calculator, make_person, make_expense):
        """Test orphaned personal expenses count in totals but nobody's breakdown."""
        budget = Budget(
            people=[make_person("a", 1000)],
            expenses=[make_expense(300, category="personal", person_id="ghost")],
        )
        summary = calculator.summarize(budget, "yearly")
        assert summary.fallbacks == ["unmatched_person_reference"]
        assert summary.totals.personal_expenses == pytest.approx(300)
        assert summary.for_person("a").personal_expenses == 0


class TestPersonBreakdown:
    """Tests for single-person breakdowns."""

    def test_breakdown(self, calculator, budget, audit_logger):
        """Test one person's breakdown in the requested view."""
        breakdown = calculator.person_breakdown(budget, "bob", "yearly")
        assert breakdown.income == pytest.approx(20000)
        assert breakdown.household_share == pytest.approx(3000)
        assert breakdown.remaining == pytest.approx(17000)
        assert _event_types(audit_logger) == [AuditEventType.BREAKDOWN_CALCULATED]

    def test_unknown_person(self, calculator, budget):
        """Test asking for someone outside the budget fails."""
        with pytest.raises(PersonNotFoundError) as exc_info:
            calculator.person_breakdown(budget, "carol")
        assert exc_info.value.person_id == "carol"

    def test_fallback_logged_for_person(self, calculator, audit_logger, make_person):
        """Test the zero income fallback is logged against the person."""
        budget = Budget(
            people=[make_person("a")],
            household_settings=HouseholdSettings(distribution_method="income-based"),
        )
        calculator.person_breakdown(budget, "a")
        event = audit_logger.events[0]
        assert event.event_type is AuditEventType.ZERO_INCOME_DENOMINATOR
        assert event.entity_id == "a"


class TestSummaryCache:
    """Tests for memoized summaries."""

    @pytest.fixture
    def cached_calculator(self, audit_logger):
        settings = EngineSettings(_env_file=None, enable_summary_cache=True, summary_cache_size=2)
        return BudgetCalculator(settings=settings, audit_logger=audit_logger)

    def test_same_inputs_hit_cache(self, cached_calculator, budget, audit_logger):
        """Test identical inputs return the memoized summary."""
        first = cached_calculator.summarize(budget, "monthly")
        second = cached_calculator.summarize(budget, "monthly")
        assert second is first
        assert AuditEventType.SUMMARY_CACHE_HIT in _event_types(audit_logger)

    def test_different_inputs_miss_cache(self, cached_calculator, budget):
        """Test the key covers the view mode and the budget content."""
        monthly = cached_calculator.summarize(budget, "monthly")
        yearly = cached_calculator.summarize(budget, "yearly")
        assert yearly is not monthly
        edited = budget.model_copy(update={"name": "Renamed"})
        assert cached_calculator.summarize(edited, "monthly") is not monthly

    def test_cache_key_is_content_derived(self, cached_calculator, budget):
        """Test equal budgets share a key."""
        copy = Budget.model_validate(budget.model_dump())
        assert cached_calculator.cache_key(copy, ViewMode.MONTHLY, None) == \
            cached_calculator.cache_key(budget, ViewMode.MONTHLY, None)

    def test_cache_is_bounded(self, cached_calculator, budget):
        """Test the oldest entry is evicted past the size limit."""
        first = cached_calculator.summarize(budget, "monthly")
        cached_calculator.summarize(budget, "yearly")
        cached_calculator.summarize(budget, "daily")
        assert cached_calculator.summarize(budget, "monthly") is not first

    def test_clear_cache(self, cached_calculator, budget):
        """Test clearing forces a recalculation."""
        first = cached_calculator.summarize(budget, "monthly")
        cached_calculator.clear_cache()
        assert cached_calculator.summarize(budget, "monthly") is not first


class TestOtherOperations:
    """Tests for the category, expiry and payoff entry points."""

    def test_expense_breakdown(self, calculator, budget):
        """Test the category breakdown uses the requested view."""
        result = calculator.expense_breakdown(budget, "yearly")
        assert result.total_amount == pytest.approx(18000)

    def test_ending_soon_uses_configured_window(self, settings, make_expense):
        """Test the window defaults to the settings value."""
        budget = Budget(expenses=[
            make_expense(1, frequency="monthly", end_date=date(2024, 6, 20)),
            make_expense(1, frequency="monthly", end_date=date(2024, 8, 1)),
        ])
        calculator = BudgetCalculator(settings=settings)
        assert len(calculator.ending_soon(budget, as_of=date(2024, 6, 1))) == 1
        assert len(calculator.ending_soon(budget, days=90, as_of=date(2024, 6, 1))) == 2

    def test_credit_card_payoff_logged(self, calculator, audit_logger):
        """Test payoff results are audited."""
        result = calculator.credit_card_payoff(1000, 12, 10)
        assert result.never_repaid is True
        assert _event_types(audit_logger) == [AuditEventType.PAYOFF_NEVER_REPAID]

    def test_create_calculator(self, settings):
        """Test the factory wires an audit logger when asked."""
        assert create_calculator(settings)._audit_logger is not None
        assert create_calculator(settings, with_audit=False)._audit_logger is None


class TestAuditLogger:
    """Tests for the audit logger itself."""

    def test_events_are_bounded(self):
        """Test only the most recent events are kept."""
        audit_logger = AuditLogger(logger_name="budget_engine.test", max_events=2)
        for _ in range(3):
            audit_logger.log_invalid_frequency("hourly")
        assert len(audit_logger.events) == 2

    def test_warning_reaches_stdlib_logging(self, caplog):
        """Test events are written through the standard logging tree."""
        audit_logger = AuditLogger(logger_name="budget_engine.test")
        with caplog.at_level(logging.WARNING, logger="budget_engine.test"):
            audit_logger.log_allocation_fallback(
                fallback="empty_people_set",
                person_id=None,
                distribution_method="even",
                correlation_id=create_correlation_id(),
            )
        assert "empty_people_set" in caplog.text


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
