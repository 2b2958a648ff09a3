"""
Two-Stage Budget Validation

STAGE 1 - SCHEMA VALIDATION:
- Types and required fields
- Non-negative amounts
- Recognized frequencies
- Personal expenses have an owner, end dates follow start dates

STAGE 2 - SEMANTIC VALIDATION:
- Duplicate IDs
- Personal expenses pointing at people who no longer exist
- Household costs with nobody to share them
- Income-based split with no income entered
- Recurring expenses that have already ended or end soon

WHY SEPARATE FROM THE ENGINE:
The engine tolerates inconsistent data (it must keep rendering while
the user is mid-edit) and resolves it with fallbacks. The validator is
where those inconsistencies become visible to the user.

IMPORTANT: Validation NEVER silently fixes issues.
It reports them for the user to resolve.
"""

from datetime import date
from typing import Any, Optional, Union

from pydantic import ValidationError

from budget_engine.audit import AuditLogger
from budget_engine.calculations.aggregator import household_expenses, total_income
from budget_engine.calculations.expiring import days_until_end, is_expense_active
from budget_engine.config import EngineSettings, get_settings
from budget_engine.models.budget import (
    Budget,
    DistributionMethod,
    ExpenseCategory,
    InvalidFrequencyError,
)
from budget_engine.models.validation import ValidationIssue, ValidationResult


class BudgetValidator:
    """
    Validates budget data through a two-stage pipeline.

    Stage 1: Schema validation (raw dicts only)
    Stage 2: Semantic validation (parsed budgets)
    """

    def __init__(
        self,
        settings: Optional[EngineSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._settings = settings or get_settings()
        self._audit_logger = audit_logger

    def parse_budget(
        self,
        raw: dict[str, Any],
    ) -> tuple[Optional[Budget], list[ValidationIssue]]:
        """
        Stage 1: Schema validation.

        Returns: (budget_or_None, list_of_issues)
        """
        try:
            return Budget.model_validate(raw), []
        except ValidationError as e:
            return None, [self._issue_from_error(err) for err in e.errors()]

    def _issue_from_error(self, err: dict) -> ValidationIssue:
        location = ".".join(str(part) for part in err.get("loc", ()))
        cause = err.get("ctx", {}).get("error")

        if isinstance(cause, InvalidFrequencyError):
            return ValidationIssue(
                field=location,
                issue_type="invalid_frequency",
                message=str(cause),
                severity="error",
                suggested_fix="Choose daily, weekly, bi-weekly, monthly, quarterly, yearly or one-time",
            )

        return ValidationIssue(
            field=location or "budget",
            issue_type=err.get("type", "invalid"),
            message=err.get("msg", "Invalid value"),
            severity="error",
        )

    def _validate_semantic(
        self,
        budget: Budget,
        as_of: date,
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 2: Semantic validation.

        Returns: (is_valid, list_of_issues)
        """
        issues = []

        # Duplicate IDs
        person_ids = [p.id for p in budget.people]
        for person_id in sorted({pid for pid in person_ids if person_ids.count(pid) > 1}):
            issues.append(ValidationIssue(
                field="people",
                issue_type="duplicate_id",
                message=f"More than one person has the ID {person_id!r}",
                severity="error",
                suggested_fix="Give every person a unique ID",
            ))

        expense_ids = [e.id for e in budget.expenses]
        for expense_id in sorted({eid for eid in expense_ids if expense_ids.count(eid) > 1}):
            issues.append(ValidationIssue(
                field="expenses",
                issue_type="duplicate_id",
                message=f"More than one expense has the ID {expense_id!r}",
                severity="warning",
                suggested_fix="Remove the duplicated expense",
            ))

        # References between records
        known = set(person_ids)
        for index, expense in enumerate(budget.expenses):
            if expense.category is ExpenseCategory.PERSONAL and expense.person_id not in known:
                issues.append(ValidationIssue(
                    field=f"expenses.{index}.person_id",
                    issue_type="unmatched_person_reference",
                    message=(
                        f"Personal expense {expense.description or expense.id!r} "
                        f"belongs to a person who is not in this budget"
                    ),
                    severity="warning",
                    suggested_fix="Assign the expense to an existing person or delete it",
                ))
            elif expense.category is ExpenseCategory.HOUSEHOLD and expense.person_id:
                issues.append(ValidationIssue(
                    field=f"expenses.{index}.person_id",
                    issue_type="ignored_person_id",
                    message=(
                        f"Household expense {expense.description or expense.id!r} "
                        f"has an owner; it is shared by everyone regardless"
                    ),
                    severity="info",
                ))

            days_left = days_until_end(expense, as_of)
            if not is_expense_active(expense, as_of):
                issues.append(ValidationIssue(
                    field=f"expenses.{index}.end_date",
                    issue_type="ended_expense",
                    message=(
                        f"Recurring expense {expense.description or expense.id!r} "
                        f"ended on {expense.end_date.isoformat()}"
                    ),
                    severity="info",
                    suggested_fix="Extend the end date or delete the expense",
                ))
            elif days_left is not None and days_left <= self._settings.ending_soon_days:
                issues.append(ValidationIssue(
                    field=f"expenses.{index}.end_date",
                    issue_type="ending_soon",
                    message=(
                        f"Recurring expense {expense.description or expense.id!r} "
                        f"ends on {expense.end_date.isoformat()}"
                    ),
                    severity="info",
                ))

        # Allocation fallbacks the user should know about
        if not budget.people and household_expenses(budget.expenses) > 0:
            issues.append(ValidationIssue(
                field="people",
                issue_type="no_people",
                message="There are household expenses but nobody to share them",
                severity="warning",
                suggested_fix="Add the people in your household",
            ))

        if (
            budget.people
            and budget.household_settings.distribution_method is DistributionMethod.INCOME_BASED
            and total_income(budget.people) == 0
        ):
            issues.append(ValidationIssue(
                field="household_settings.distribution_method",
                issue_type="zero_income",
                message="Income-based split needs income; household costs are split evenly for now",
                severity="info",
                suggested_fix="Add income sources for each person",
            ))

        for index, person in enumerate(budget.people):
            if not person.income:
                issues.append(ValidationIssue(
                    field=f"people.{index}.income",
                    issue_type="no_income",
                    message=f"{person.name or person.id} has no income sources",
                    severity="info",
                ))

        is_valid = not any(issue.severity == "error" for issue in issues)

        return is_valid, issues

    def validate(
        self,
        budget: Union[Budget, dict[str, Any]],
        as_of: Optional[date] = None,
    ) -> ValidationResult:
        """
        Run full two-stage validation pipeline.

        Args:
            budget: A parsed Budget, or raw data to parse first
            as_of: Date used to spot ended expenses (default: today)

        Returns:
            ValidationResult with all issues found
        """
        as_of = as_of or date.today()
        all_issues = []

        # Stage 1: Schema validation (only raw input needs it)
        if isinstance(budget, Budget):
            parsed, schema_valid = budget, True
        else:
            parsed, schema_issues = self.parse_budget(budget)
            all_issues.extend(schema_issues)
            schema_valid = parsed is not None

        # Only run stage 2 if stage 1 passes
        semantic_valid = False
        if parsed is not None:
            semantic_valid, semantic_issues = self._validate_semantic(parsed, as_of)
            all_issues.extend(semantic_issues)

        warnings = [issue.message for issue in all_issues if issue.severity == "warning"]

        budget_id = parsed.id if parsed is not None else (
            budget.get("id") if isinstance(budget, dict) else None
        )

        if self._audit_logger and not (schema_valid and semantic_valid):
            self._audit_logger.log_validation_failed(
                budget_id=budget_id,
                stage="semantic" if schema_valid else "schema",
                issues=[
                    issue.model_dump() for issue in all_issues
                    if issue.severity == "error"
                ],
            )

        return ValidationResult(
            budget_id=budget_id,
            schema_valid=schema_valid,
            semantic_valid=semantic_valid,
            is_valid=schema_valid and semantic_valid,
            issues=all_issues,
            warnings=warnings,
        )

    def get_user_friendly_summary(
        self,
        result: ValidationResult,
    ) -> str:
        """
        Generate a user-friendly summary of validation results.

        This is what we show to non-technical users.
        """
        if result.is_valid and not result.warnings:
            return "✅ Your budget data looks good."

        lines = []

        if result.has_errors:
            lines.append("❌ Some budget entries need fixing:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   • {issue.message}")
                    if issue.suggested_fix:
                        lines.append(f"     💡 {issue.suggested_fix}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("⚠️ Please check the following:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        return "\n".join(lines)
