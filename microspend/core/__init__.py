"""Pure helpers: local time, display formatting and history grouping."""

from microspend.core.formatting import (
    currency_symbol,
    format_amount,
    format_calendar_date,
    format_expense_count,
    format_expense_meta,
    format_expense_title,
    format_time_of_day,
)
from microspend.core.grouping import (
    TODAY_LABEL,
    YESTERDAY_LABEL,
    date_section_label,
    group_expenses,
    total_amount,
)
from microspend.core.local_time import (
    current_local_date,
    current_local_timestamp,
    previous_local_date,
)

__all__ = [
    # Formatting
    "currency_symbol",
    "format_amount",
    "format_calendar_date",
    "format_expense_count",
    "format_expense_meta",
    "format_expense_title",
    "format_time_of_day",
    # Grouping
    "TODAY_LABEL",
    "YESTERDAY_LABEL",
    "date_section_label",
    "group_expenses",
    "total_amount",
    # Local time
    "current_local_date",
    "current_local_timestamp",
    "previous_local_date",
]
