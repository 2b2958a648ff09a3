"""
Audit Logger

Every fallback the engine applies and every input it rejects is
logged as a structured event, so "why is my share 0?" always has an
answer in the logs.

The audit logger:
- Is synchronous (the engine has no I/O to overlap with)
- Only writes to the local structured log; persistence is the host app's job
- Supports correlation IDs to trace the events of one calculation
"""

import logging
from collections import deque
from typing import Optional
from uuid import UUID, uuid4

import structlog

from budget_engine.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


def configure_logging(log_level: str = "INFO") -> None:
    """Configure structlog on top of stdlib logging with JSON output."""
    logging.getLogger("budget_engine").setLevel(log_level)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()


class AuditLogger:
    """Central audit logging service."""

    def __init__(
        self,
        logger_name: str = "budget_engine.audit",
        max_events: int = 1000,
    ):
        """
        Initialize audit logger.

        Args:
            logger_name: stdlib logger the events are written to
            max_events: How many recent events to keep in memory
        """
        self._logger = structlog.get_logger(logger_name)
        self._events: deque[AuditEvent] = deque(maxlen=max_events)

    @property
    def events(self) -> list[AuditEvent]:
        """Recent events logged through this instance, oldest first."""
        return list(self._events)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event at the level matching its severity."""
        self._events.append(event)
        log_dict = event.to_log_dict()

        if event.severity is AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity is AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity is AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    def log_summary_calculated(
        self,
        budget_id: str,
        view_mode: str,
        people_count: int,
        correlation_id: UUID,
    ) -> None:
        """Log a completed budget summary."""
        self.log(AuditEventBuilder.summary_calculated(
            budget_id=budget_id,
            view_mode=view_mode,
            people_count=people_count,
            correlation_id=correlation_id,
        ))

    def log_summary_cache_hit(
        self,
        budget_id: str,
        cache_key: str,
        correlation_id: UUID,
    ) -> None:
        """Log a summary served from the memo cache."""
        self.log(AuditEventBuilder.summary_cache_hit(
            budget_id=budget_id,
            cache_key=cache_key,
            correlation_id=correlation_id,
        ))

    def log_breakdown_calculated(
        self,
        person_id: str,
        remaining: float,
        correlation_id: UUID,
    ) -> None:
        """Log a single-person breakdown."""
        self.log(AuditEventBuilder.breakdown_calculated(
            person_id=person_id,
            remaining=remaining,
            correlation_id=correlation_id,
        ))

    def log_allocation_fallback(
        self,
        fallback: str,
        person_id: Optional[str],
        distribution_method: str,
        correlation_id: UUID,
    ) -> None:
        """Log an allocation fallback."""
        self.log(AuditEventBuilder.allocation_fallback(
            fallback=fallback,
            person_id=person_id,
            distribution_method=distribution_method,
            correlation_id=correlation_id,
        ))

    def log_invalid_frequency(
        self,
        value: object,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a calculation stopped by an unrecognized frequency."""
        self.log(AuditEventBuilder.invalid_frequency(
            value=value,
            correlation_id=correlation_id,
        ))

    def log_validation_failed(
        self,
        budget_id: Optional[str],
        stage: str,
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log validation failure."""
        self.log(AuditEventBuilder.validation_failed(
            budget_id=budget_id,
            stage=stage,
            issues=issues,
            correlation_id=correlation_id,
        ))

    def log_payoff_calculated(
        self,
        months: int,
        total_interest: float,
        never_repaid: bool,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a credit card payoff calculation."""
        self.log(AuditEventBuilder.payoff_calculated(
            months=months,
            total_interest=total_interest,
            never_repaid=never_repaid,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use one per summarize call and pass it to every event it causes.
    """
    return uuid4()
