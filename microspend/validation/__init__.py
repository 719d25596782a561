"""Input validation package."""

from microspend.validation.validator import (
    AmountValidationError,
    ExpenseValidator,
    parse_amount,
)

__all__ = ["AmountValidationError", "ExpenseValidator", "parse_amount"]
