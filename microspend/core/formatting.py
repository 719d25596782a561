"""
Display Formatting

Everything here is total: a bad value degrades to its raw string
instead of raising, so one odd row can never break a screen render.
"""

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from microspend.models.expense import Currency, Expense


_TWO_PLACES = Decimal("0.01")

# Fixed English abbreviations; strftime("%b") would follow the process locale.
_MONTHS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def currency_symbol(currency: Union[Currency, str]) -> str:
    """Symbol for a currency, or the code itself if we don't know it."""
    if isinstance(currency, Currency):
        return currency.symbol
    try:
        return Currency(str(currency).upper()).symbol
    except ValueError:
        return str(currency)


def format_amount(amount: Union[Decimal, int, float, str], currency: Union[Currency, str]) -> str:
    """
    Render an amount with its currency symbol and exactly 2 decimals.

    Rounding is ROUND_HALF_UP on the decimal form of the number, so
    3.005 renders as 3.01 (not the 3.00 binary floats would give).

    >>> format_amount(3, "USD")
    '$3.00'
    >>> format_amount(5, "XYZ")
    'XYZ5.00'
    """
    symbol = currency_symbol(currency)
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
        rounded = value.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError):
        return f"{symbol}{amount}"
    return f"{symbol}{rounded:f}"


def format_time_of_day(timestamp: str) -> str:
    """
    12-hour clock time of a local timestamp, e.g. '2:34 PM'.

    Returns the input unchanged if it can't be parsed.
    """
    try:
        moment = datetime.fromisoformat(timestamp)
    except (TypeError, ValueError):
        return str(timestamp)

    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return f"{hour}:{moment.minute:02d} {suffix}"


def format_calendar_date(day: Union[str, date]) -> str:
    """
    'Mon D, YYYY', e.g. 'Feb 15, 2026'.

    Accepts a date or a YYYY-MM-DD string; anything unparseable is
    returned as-is.
    """
    if not isinstance(day, date):
        try:
            day = date.fromisoformat(str(day)[:10])
        except ValueError:
            return str(day)
    return f"{_MONTHS[day.month - 1]} {day.day}, {day.year}"


def format_expense_title(expense: Expense) -> str:
    """Main line of an expense row: note, else category, else 'Expense'."""
    if expense.note:
        return expense.note
    if expense.category:
        return expense.category.value
    return "Expense"


def format_expense_meta(expense: Expense) -> str:
    """Secondary line of an expense row: time, plus category if set."""
    meta = format_time_of_day(expense.created_at)
    if expense.category:
        meta += f"  ·  {expense.category.value}"
    return meta


def format_expense_count(count: int) -> str:
    return f"{count} expense{'' if count == 1 else 's'}"
