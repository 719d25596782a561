"""
Tests for Add Expense validation

These tests verify that:
1. Bad amounts are reported, never coerced
2. Valid input comes back cleaned and ready for storage
3. Optional fields behave
"""

from decimal import Decimal

import pytest

from microspend.models.expense import Category
from microspend.validation import (
    AmountValidationError,
    ExpenseValidator,
    parse_amount,
)


class TestParseAmount:
    """Tests for parsing the amount field."""

    @pytest.mark.parametrize("raw, expected", [
        ("12.50", Decimal("12.50")),
        ("  7 ", Decimal("7")),
        ("0.01", Decimal("0.01")),
        (".5", Decimal("0.5")),
        ("5.", Decimal("5")),
        (3, Decimal("3")),
        (Decimal("3.005"), Decimal("3.005")),
    ])
    def test_valid_amounts(self, raw, expected):
        """Test that plain decimal amounts parse to the same value."""
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize("raw, reason", [
        ("", "amount is required"),
        ("   ", "amount is required"),
        (None, "amount is required"),
        ("abc", "not a number"),
        ("12,50", "not a number"),
        ("NaN", "not a number"),
        ("Infinity", "not a number"),
        ("0", "must be greater than zero"),
        ("-4", "must be greater than zero"),
        ("-0.5", "must be greater than zero"),
    ])
    def test_invalid_amounts(self, raw, reason):
        """Test that each kind of bad amount gets its own reason."""
        with pytest.raises(AmountValidationError) as exc_info:
            parse_amount(raw)
        assert exc_info.value.reason == reason

    @pytest.mark.parametrize("raw", ["1e3", "1E+3", "2.5e-1", "1_000", "+5", "1 000", Decimal("1E+3")])
    def test_rejects_non_plain_notation(self, raw):
        """Test that exponents, signs and digit grouping are not accepted."""
        with pytest.raises(AmountValidationError) as exc_info:
            parse_amount(raw)
        assert exc_info.value.reason == "not a number"

    def test_parsed_amount_has_no_exponent(self):
        """Test that a parsed amount prints in plain notation."""
        assert str(parse_amount("1000")) == "1000"
        assert str(parse_amount("0.10")) == "0.10"

    def test_error_is_value_error(self):
        """Test that AmountValidationError can be caught as ValueError."""
        with pytest.raises(ValueError):
            parse_amount("abc")


class TestExpenseValidator:
    """Tests for validating the whole Add Expense form."""

    @pytest.fixture
    def validator(self):
        return ExpenseValidator(max_note_length=20)

    def test_valid_full_form(self, validator):
        """Test that a complete valid form comes back cleaned."""
        result = validator.validate("4.50", "  Coffee  ", "Food")

        assert result.is_valid
        assert result.amount == Decimal("4.50")
        assert result.note == "Coffee"
        assert result.category is Category.FOOD
        assert result.issues == []

    def test_optional_fields(self, validator):
        """Test that note and category may be left out."""
        result = validator.validate("10", "", None)

        assert result.is_valid
        assert result.note is None
        assert result.category is None

    def test_whitespace_note_becomes_none(self, validator):
        """Test that a blank note is stored as no note."""
        assert validator.validate("10", "    ").note is None

    @pytest.mark.parametrize("raw, issue_type", [
        ("", "missing"),
        ("ten", "not_a_number"),
        ("1e3", "not_a_number"),
        ("0", "not_positive"),
        ("-1", "not_positive"),
    ])
    def test_amount_issue_types(self, validator, raw, issue_type):
        """Test that amount problems map to the right issue type."""
        result = validator.validate(raw)

        assert not result.is_valid
        assert result.amount is None
        (issue,) = result.issues
        assert issue.field == "amount"
        assert issue.issue_type == issue_type

    def test_note_too_long(self, validator):
        """Test that a note over the limit is an error."""
        result = validator.validate("1", "x" * 21)

        assert not result.is_valid
        assert result.issues[0].field == "note"
        assert result.issues[0].issue_type == "too_long"

    def test_note_at_limit_is_fine(self, validator):
        """Test that a note exactly at the limit is accepted."""
        assert validator.validate("1", "x" * 20).is_valid

    def test_unknown_category(self, validator):
        """Test that a category outside the fixed set is an error."""
        result = validator.validate("1", None, "Rent")

        assert not result.is_valid
        assert result.issues[0].field == "category"

    def test_multiple_issues_reported(self, validator):
        """Test that every problem is reported, not just the first."""
        result = validator.validate("abc", "x" * 50, "Rent")
        assert result.error_count == 3

    def test_default_note_limit_from_settings(self):
        """Test that the note limit defaults to 200 characters."""
        validator = ExpenseValidator()
        assert validator.validate("1", "x" * 200).is_valid
        assert not validator.validate("1", "x" * 201).is_valid


class TestUserFriendlySummary:
    """Tests for the banner message."""

    def test_invalid_summary_mentions_amount(self):
        """Test that an invalid amount is explained to the user."""
        validator = ExpenseValidator()
        summary = validator.get_user_friendly_summary(validator.validate("abc"))
        assert "valid amount" in summary

    def test_valid_summary(self):
        """Test the message for valid input."""
        validator = ExpenseValidator()
        assert validator.get_user_friendly_summary(validator.validate("1")) == "Looks good."


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
