"""
Audit Logger

DESIGN DECISION: Every user action in the app is logged as a structured
event. This provides:
1. Traceability of adds, deletes, currency changes and exports
2. Debugging capability when a storage call fails
3. Correlation IDs to tie one export flow together

Logging must never crash the app: a failure to log is swallowed after a
best-effort error line.
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from microspend.models.audit import AuditEvent, AuditEventBuilder, AuditEventType, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=False),
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


class AuditLogger:
    """
    Central audit logging service.

    Events are written to the structured local log. Recent events are
    kept in memory so the UI (and tests) can show what just happened.
    """

    def __init__(self, history_size: int = 100):
        if history_size < 1:
            raise ValueError(f"history_size must be at least 1, got {history_size}")
        self._logger = structlog.get_logger("microspend.audit")
        self._history: list[AuditEvent] = []
        self._history_size = history_size

    @property
    def recent_events(self) -> list[AuditEvent]:
        """Most recent events, newest first."""
        return list(reversed(self._history))

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True if the event was written.
        """
        self._history.append(event)
        del self._history[:-self._history_size]

        log_dict = event.to_log_dict()
        try:
            if event.severity == AuditSeverity.ERROR:
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # Never let logging break the main flow
            self._logger.error(
                "audit_log_failed",
                error=str(e),
                event_id=str(event.event_id),
            )
            return False
        return True

    def log_expense_added(
        self,
        expense_id: str,
        amount: str,
        currency: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.expense_added(expense_id, amount, currency, correlation_id))

    def log_expense_deleted(
        self,
        expense_id: str,
        existed: bool,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.expense_deleted(expense_id, existed, correlation_id))

    def log_expenses_refreshed(self, today_count: int, all_count: int) -> None:
        self.log(AuditEventBuilder.expenses_refreshed(today_count, all_count))

    def log_currency_changed(
        self,
        old: str,
        new: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.currency_changed(old, new, correlation_id))

    def log_validation_failed(
        self,
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.validation_failed(issues, correlation_id))

    def log_export_requested(self, row_count: int, correlation_id: UUID) -> None:
        self.log(AuditEventBuilder.export_requested(row_count, correlation_id))

    def log_ad_gate(self, event_type: AuditEventType, correlation_id: UUID) -> None:
        self.log(AuditEventBuilder.ad_gate_event(event_type, correlation_id))

    def log_export_completed(self, path: str, row_count: int, correlation_id: UUID) -> None:
        self.log(AuditEventBuilder.export_completed(path, row_count, correlation_id))

    def log_export_failed(self, error_message: str, correlation_id: UUID) -> None:
        self.log(AuditEventBuilder.export_failed(error_message, correlation_id))

    def log_persistence_failed(
        self,
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.persistence_failed(operation, error_message, correlation_id))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.system_error(error_type, error_message, details, correlation_id))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a user action (e.g. an export) and pass it
    through every step.
    """
    return uuid4()
