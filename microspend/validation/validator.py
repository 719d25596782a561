"""
Add Expense Input Validation

DESIGN DECISION: Validation happens BEFORE anything reaches storage.
A non-numeric or non-positive amount is reported back to the user and
never persisted.

IMPORTANT: Validation NEVER silently fixes issues (beyond trimming
whitespace). It reports them.
"""

import re
from decimal import Decimal
from typing import Optional, Union

from microspend.config import get_settings
from microspend.models.expense import Category, ValidationIssue, ValidationResult


# Plain decimal notation only: no exponent, sign, digit grouping or underscores
AMOUNT_PATTERN = re.compile(r"\d+(\.\d*)?|\.\d+")


class AmountValidationError(ValueError):
    """The amount entered is not a positive number."""

    def __init__(self, raw: str, reason: str):
        self.raw = raw
        self.reason = reason
        super().__init__(f"Invalid amount {raw!r}: {reason}")


def parse_amount(raw: Union[str, int, float, Decimal, None]) -> Decimal:
    """
    Parse user-entered amount text.

    Raises:
        AmountValidationError: empty, not plain decimal notation, or <= 0
    """
    text = "" if raw is None else str(raw).strip()
    if not text:
        raise AmountValidationError(text, "amount is required")

    if text.startswith("-") and AMOUNT_PATTERN.fullmatch(text[1:]):
        raise AmountValidationError(text, "must be greater than zero")
    if not AMOUNT_PATTERN.fullmatch(text):
        raise AmountValidationError(text, "not a number")

    amount = Decimal(text)
    if amount <= 0:
        raise AmountValidationError(text, "must be greater than zero")
    return amount


class ExpenseValidator:
    """Validates the Add Expense form."""

    def __init__(self, max_note_length: Optional[int] = None):
        self._max_note_length = max_note_length or get_settings().app.max_note_length

    def validate(
        self,
        amount_text: Union[str, int, float, Decimal, None],
        note: Optional[str] = None,
        category: Union[Category, str, None] = None,
    ) -> ValidationResult:
        """
        Validate raw form input.

        Returns a ValidationResult; when valid, it carries the parsed
        amount, trimmed note and category ready for storage.
        """
        issues = []

        amount = None
        try:
            amount = parse_amount(amount_text)
        except AmountValidationError as e:
            issue_type = {
                "amount is required": "missing",
                "not a number": "not_a_number",
            }.get(e.reason, "not_positive")
            issues.append(ValidationIssue(
                field="amount",
                issue_type=issue_type,
                message=f"Please enter a valid amount ({e.reason})",
                severity="error",
            ))

        clean_note = note.strip() if note else None
        if clean_note and len(clean_note) > self._max_note_length:
            issues.append(ValidationIssue(
                field="note",
                issue_type="too_long",
                message=f"Note must be at most {self._max_note_length} characters",
                severity="error",
            ))

        clean_category = None
        if category:
            try:
                clean_category = Category(category)
            except ValueError:
                issues.append(ValidationIssue(
                    field="category",
                    issue_type="unknown",
                    message=f"Unknown category: {category}",
                    severity="error",
                ))

        is_valid = not any(issue.severity == "error" for issue in issues)
        return ValidationResult(
            is_valid=is_valid,
            amount=amount,
            note=clean_note or None,
            category=clean_category,
            issues=issues,
        )

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """One message suitable for an error banner."""
        if result.is_valid:
            return "Looks good."
        return " ".join(issue.message for issue in result.issues if issue.severity == "error")
