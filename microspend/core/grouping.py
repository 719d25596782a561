"""
History Grouping Engine

Buckets a flat list of expenses into one section per local calendar day,
newest day first, each with its own total.

GUARANTEES:
- Every expense lands in exactly one group
- Group key is created_at[:10], taken verbatim (no timezone re-derivation)
- Inside a group, expenses keep the order they were given in
- Groups are ordered by key, descending
- Empty input gives an empty list, never an error
"""

from decimal import Decimal
from typing import Iterable, Optional

from microspend.core.formatting import format_calendar_date
from microspend.core.local_time import current_local_date, previous_local_date
from microspend.models.expense import Expense, ExpenseGroup


TODAY_LABEL = "Today"
YESTERDAY_LABEL = "Yesterday"


def total_amount(expenses: Iterable[Expense]) -> Decimal:
    """
    Sum of amounts.

    NOTE: Currencies are not converted; a mixed-currency list is summed
    as plain numbers.
    """
    return sum((expense.amount for expense in expenses), Decimal(0))


def date_section_label(date_key: str, today: Optional[str] = None) -> str:
    """
    Section header for a YYYY-MM-DD key.

    Args:
        date_key: The group's calendar day
        today: Local date to compare against. Defaults to the system clock.
    """
    today = today or current_local_date()
    if date_key == today:
        return TODAY_LABEL
    if date_key == previous_local_date(today):
        return YESTERDAY_LABEL
    return format_calendar_date(date_key)


def group_expenses(
    expenses: Iterable[Expense],
    today: Optional[str] = None,
) -> list[ExpenseGroup]:
    """
    Group expenses by local calendar day, newest day first.

    Args:
        expenses: Any order; the relative order inside each day is kept
        today: Local date used for the Today/Yesterday labels. Computed
               once here so every group in one call agrees on it.
    """
    today = today or current_local_date()

    buckets: dict[str, list[Expense]] = {}
    for expense in expenses:
        buckets.setdefault(expense.local_date, []).append(expense)

    return [
        ExpenseGroup(
            date=key,
            label=date_section_label(key, today),
            total=total_amount(buckets[key]),
            expenses=buckets[key],
        )
        for key in sorted(buckets, reverse=True)
    ]
