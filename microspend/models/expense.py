"""
Core Data Models for MicroSpend

These models define the schemas for all data flowing through the system.
They are designed to:
1. Enforce type safety at runtime
2. Be immutable once created (expenses are never edited, only deleted)
3. Be serializable for storage, CSV export and logging

DESIGN DECISION: Currencies and categories are closed enums with
exhaustive lookup tables, not open string keys.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Currency(str, Enum):
    """Supported currencies. No conversion between them is ever done."""
    CAD = "CAD"
    USD = "USD"
    NPR = "NPR"
    GBP = "GBP"

    @property
    def symbol(self) -> str:
        return CURRENCY_SYMBOLS[self]

    @property
    def label(self) -> str:
        return CURRENCY_LABELS[self]

    @property
    def display_label(self) -> str:
        """e.g. 'CAD - Canadian Dollar' (disambiguates CAD/USD which share '$')."""
        return f"{self.value} - {self.label}"


class Category(str, Enum):
    """
    Expense categories.

    An expense may also have no category at all.
    """
    FOOD = "Food"
    TRANSPORT = "Transport"
    OTHER = "Other"


CURRENCY_SYMBOLS: dict[Currency, str] = {
    Currency.CAD: "$",
    Currency.USD: "$",
    Currency.NPR: "Rs",
    Currency.GBP: "£",
}

CURRENCY_LABELS: dict[Currency, str] = {
    Currency.CAD: "Canadian Dollar",
    Currency.USD: "US Dollar",
    Currency.NPR: "Nepalese Rupee",
    Currency.GBP: "British Pound",
}


def check_currency_tables(symbols: dict, labels: dict) -> None:
    """Every currency must have a symbol and a label."""
    for name, table in (("symbol", symbols), ("label", labels)):
        missing = set(Currency) - set(table)
        if missing:
            codes = ", ".join(sorted(c.value for c in missing))
            raise RuntimeError(f"Missing currency {name} for: {codes}")


check_currency_tables(CURRENCY_SYMBOLS, CURRENCY_LABELS)

DEFAULT_CURRENCY = Currency.CAD


# =============================================================================
# CORE EXPENSE MODEL
# =============================================================================

class Expense(BaseModel):
    """
    A single recorded expense.

    CRITICAL: Expenses are immutable. There is no update operation;
    a wrong entry is deleted and re-added.

    `created_at` is a LOCAL timestamp (YYYY-MM-DDTHH:mm:ss.sss, no offset).
    Its first 10 characters are the calendar day the expense belongs to.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Opaque unique identifier assigned at insert time"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Amount spent, full precision"
    )
    currency: Currency = Field(
        ...,
        description="Currency the amount was recorded in"
    )
    note: Optional[str] = Field(
        default=None,
        description="Free text note"
    )
    category: Optional[Category] = None
    created_at: str = Field(
        ...,
        description="Local timestamp stamped at insert time"
    )

    @field_validator('note')
    @classmethod
    def empty_note_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    @property
    def local_date(self) -> str:
        """Calendar day (YYYY-MM-DD) taken verbatim from created_at."""
        return self.created_at[:10]


class ExpenseGroup(BaseModel):
    """
    All expenses that share one local calendar day.

    Derived on demand from a snapshot of expenses; never persisted.
    """
    model_config = ConfigDict(frozen=True)

    date: str = Field(
        ...,
        description="Group key, YYYY-MM-DD"
    )
    label: str = Field(
        ...,
        description="'Today', 'Yesterday' or a formatted date"
    )
    total: Decimal = Field(
        ...,
        description="Sum of member amounts (no currency conversion)"
    )
    expenses: list[Expense] = Field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.expenses)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single problem with user input."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'not_a_number', 'not_positive')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """Result of validating the Add Expense form."""

    is_valid: bool
    amount: Optional[Decimal] = Field(
        default=None,
        description="Parsed amount when the amount field was valid"
    )
    note: Optional[str] = None
    category: Optional[Category] = None
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")
