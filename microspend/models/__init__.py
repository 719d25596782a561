"""
Data Models Package

All Pydantic models used in MicroSpend.
"""

from microspend.models.expense import (
    CURRENCY_LABELS,
    CURRENCY_SYMBOLS,
    DEFAULT_CURRENCY,
    Category,
    Currency,
    Expense,
    ExpenseGroup,
    ValidationIssue,
    ValidationResult,
)
from microspend.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Expense models
    "CURRENCY_LABELS",
    "CURRENCY_SYMBOLS",
    "DEFAULT_CURRENCY",
    "Category",
    "Currency",
    "Expense",
    "ExpenseGroup",
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
