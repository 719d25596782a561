"""
Audit Models for MicroSpend

Every user-visible action (add, delete, currency switch, export) produces
an audit event. Events go to the structured log; they are not persisted.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Expenses
    EXPENSE_ADDED = "expense_added"
    EXPENSE_DELETED = "expense_deleted"
    EXPENSES_REFRESHED = "expenses_refreshed"

    # Settings
    CURRENCY_CHANGED = "currency_changed"

    # Input
    VALIDATION_FAILED = "validation_failed"

    # Export
    EXPORT_REQUESTED = "export_requested"
    AD_GATE_STARTED = "ad_gate_started"
    AD_GATE_CANCELLED = "ad_gate_cancelled"
    AD_GATE_COMPLETED = "ad_gate_completed"
    EXPORT_COMPLETED = "export_completed"
    EXPORT_FAILED = "export_failed"

    # System events
    PERSISTENCE_FAILED = "persistence_failed"
    SYSTEM_ERROR = "system_error"


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
        default_factory=datetime.now,
        description="When the event occurred (local time)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # What entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'expense', 'setting', 'export')"
    )
    entity_id: Optional[str] = None

    # For tracking related events (e.g. one export: requested -> gate -> written)
    correlation_id: Optional[UUID] = None

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    error_message: Optional[str] = None
    is_user_action: bool = False

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
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
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_added(expense_id, "12.50", "CAD")
    """

    @staticmethod
    def expense_added(
        expense_id: str,
        amount: str,
        currency: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            entity_type="expense",
            entity_id=expense_id,
            correlation_id=correlation_id,
            description=f"Expense of {amount} {currency} recorded",
            details={"amount": amount, "currency": currency},
            is_user_action=True,
        )

    @staticmethod
    def expense_deleted(
        expense_id: str,
        existed: bool,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            entity_type="expense",
            entity_id=expense_id,
            correlation_id=correlation_id,
            description="Expense deleted" if existed else "Delete requested for unknown expense",
            details={"existed": existed},
            is_user_action=True,
        )

    @staticmethod
    def expenses_refreshed(today_count: int, all_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSES_REFRESHED,
            severity=AuditSeverity.DEBUG,
            entity_type="expense",
            description="Expense lists reloaded from storage",
            details={"today_count": today_count, "all_count": all_count},
        )

    @staticmethod
    def currency_changed(
        old: str,
        new: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CURRENCY_CHANGED,
            entity_type="setting",
            entity_id="default_currency",
            correlation_id=correlation_id,
            description=f"Default currency changed from {old} to {new}",
            details={"old": old, "new": new},
            is_user_action=True,
        )

    @staticmethod
    def validation_failed(
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="expense",
            correlation_id=correlation_id,
            description=f"Expense input rejected ({len(issues)} issue(s))",
            details={"issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def export_requested(row_count: int, correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_REQUESTED,
            entity_type="export",
            correlation_id=correlation_id,
            description="CSV export requested",
            details={"row_count": row_count},
            is_user_action=True,
        )

    @staticmethod
    def ad_gate_event(
        event_type: AuditEventType,
        correlation_id: UUID,
    ) -> AuditEvent:
        descriptions = {
            AuditEventType.AD_GATE_STARTED: "Ad playback started",
            AuditEventType.AD_GATE_CANCELLED: "Ad dismissed before playback",
            AuditEventType.AD_GATE_COMPLETED: "Ad playback completed",
        }
        return AuditEvent(
            event_type=event_type,
            entity_type="export",
            correlation_id=correlation_id,
            description=descriptions.get(event_type, event_type.value),
            is_user_action=event_type == AuditEventType.AD_GATE_CANCELLED,
        )

    @staticmethod
    def export_completed(
        path: str,
        row_count: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_COMPLETED,
            entity_type="export",
            entity_id=path,
            correlation_id=correlation_id,
            description=f"Exported {row_count} expense(s) to CSV",
            details={"path": path, "row_count": row_count},
        )

    @staticmethod
    def export_failed(
        error_message: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="export",
            correlation_id=correlation_id,
            description="CSV export failed",
            error_message=error_message,
        )

    @staticmethod
    def persistence_failed(
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PERSISTENCE_FAILED,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            description=f"Storage operation '{operation}' failed",
            details={"operation": operation},
            error_message=error_message,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            description=f"System error: {error_type}",
            details=details or {},
            error_message=error_message,
        )
