"""
Audit Models for the Budget Engine

The engine resolves several awkward inputs with documented fallbacks
instead of errors (nobody to share costs with, nobody earning, an
expense pointing at a deleted person). Those fallbacks are correct
behaviour, but they should never be invisible.

DESIGN DECISION: Every fallback and every rejected input produces an
audit event. Calculations stay pure; the orchestrator does the logging.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Calculations
    SUMMARY_CALCULATED = "summary_calculated"
    SUMMARY_CACHE_HIT = "summary_cache_hit"
    BREAKDOWN_CALCULATED = "breakdown_calculated"

    # Allocation fallbacks
    EMPTY_PEOPLE_SET = "empty_people_set"
    ZERO_INCOME_DENOMINATOR = "zero_income_denominator"
    UNMATCHED_PERSON_REFERENCE = "unmatched_person_reference"

    # Rejected input
    INVALID_FREQUENCY = "invalid_frequency"
    VALIDATION_FAILED = "validation_failed"

    # Tools
    PAYOFF_CALCULATED = "payoff_calculated"
    PAYOFF_NEVER_REPAID = "payoff_never_repaid"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """A single audit event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # What entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'budget', 'person', 'expense')"
    )
    entity_id: Optional[str] = None

    correlation_id: Optional[UUID] = Field(
        default=None,
        description="Ties together the events of one calculation"
    )

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)

    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.summary_calculated(budget_id, "monthly", 2, cid)
        event = AuditEventBuilder.allocation_fallback("zero_income_denominator", ...)
    """

    @staticmethod
    def summary_calculated(
        budget_id: str,
        view_mode: str,
        people_count: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SUMMARY_CALCULATED,
            severity=AuditSeverity.DEBUG,
            entity_type="budget",
            entity_id=budget_id,
            correlation_id=correlation_id,
            description=f"Budget summary calculated ({view_mode})",
            details={
                "view_mode": view_mode,
                "people_count": people_count,
            },
        )

    @staticmethod
    def summary_cache_hit(
        budget_id: str,
        cache_key: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SUMMARY_CACHE_HIT,
            severity=AuditSeverity.DEBUG,
            entity_type="budget",
            entity_id=budget_id,
            correlation_id=correlation_id,
            description="Budget summary served from cache",
            details={"cache_key": cache_key},
        )

    @staticmethod
    def breakdown_calculated(
        person_id: str,
        remaining: float,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BREAKDOWN_CALCULATED,
            severity=AuditSeverity.DEBUG,
            entity_type="person",
            entity_id=person_id,
            correlation_id=correlation_id,
            description="Per-person breakdown calculated",
            details={
                "remaining": remaining,
                "over_budget": remaining < 0,
            },
        )

    @staticmethod
    def allocation_fallback(
        fallback: str,
        person_id: Optional[str],
        distribution_method: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        descriptions = {
            "empty_people_set": "No people to share household costs; share is 0",
            "zero_income_denominator": "Nobody has income; income-based split fell back to even",
            "unmatched_person_reference": "Person not found in budget; share is 0",
        }
        return AuditEvent(
            event_type=AuditEventType(fallback),
            severity=AuditSeverity.WARNING,
            entity_type="person",
            entity_id=person_id,
            correlation_id=correlation_id,
            description=descriptions.get(fallback, f"Allocation fallback: {fallback}"),
            details={
                "fallback": fallback,
                "distribution_method": distribution_method,
            },
        )

    @staticmethod
    def invalid_frequency(
        value: Any,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INVALID_FREQUENCY,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            description="Calculation stopped: unrecognized frequency",
            error_message=f"Unrecognized frequency: {value!r}",
            details={"value": repr(value)},
        )

    @staticmethod
    def validation_failed(
        budget_id: Optional[str],
        stage: str,
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="budget",
            entity_id=budget_id,
            correlation_id=correlation_id,
            description=f"{stage.capitalize()} validation failed with {len(issues)} issues",
            details={
                "stage": stage,
                "issues": issues,
            },
        )

    @staticmethod
    def payoff_calculated(
        months: int,
        total_interest: float,
        never_repaid: bool,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        if never_repaid:
            return AuditEvent(
                event_type=AuditEventType.PAYOFF_NEVER_REPAID,
                severity=AuditSeverity.INFO,
                entity_type="payoff",
                correlation_id=correlation_id,
                description="Monthly payment only covers interest; balance never repaid",
            )
        return AuditEvent(
            event_type=AuditEventType.PAYOFF_CALCULATED,
            severity=AuditSeverity.DEBUG,
            entity_type="payoff",
            correlation_id=correlation_id,
            description=f"Card paid off in {months} months",
            details={
                "months": months,
                "total_interest": total_interest,
            },
        )
