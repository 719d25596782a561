"""
CSV Serializer

Column layout (header row first, rows in the order given):

    id,amount,currency,note,category,createdAt

- note and category are ALWAYS double-quoted, embedded quotes doubled
- id, amount, currency and createdAt are written verbatim, unquoted
- amount uses its natural plain-notation form (10, 3.5, 3.50, never 1E+3),
  NOT two decimals, so re-importing gives back the exact stored value
- rows joined with "\n", no trailing newline

The output parses with any standard CSV reader, including the stdlib one.
"""

from typing import Iterable, Optional

from microspend.models.expense import Expense


CSV_COLUMNS = ["id", "amount", "currency", "note", "category", "createdAt"]
CSV_HEADER = ",".join(CSV_COLUMNS)
CSV_MIME_TYPE = "text/csv"


def quote_field(value: Optional[str]) -> str:
    """Wrap in double quotes, doubling any quote inside. None -> ""."""
    text = value or ""
    return '"' + text.replace('"', '""') + '"'


def expense_to_csv_row(expense: Expense) -> str:
    return ",".join([
        expense.id,
        f"{expense.amount:f}",
        expense.currency.value,
        quote_field(expense.note),
        quote_field(expense.category.value if expense.category else None),
        expense.created_at,
    ])


def to_csv(expenses: Iterable[Expense]) -> str:
    """Encode expenses as CSV text; an empty list gives just the header."""
    return "\n".join([CSV_HEADER, *(expense_to_csv_row(e) for e in expenses)])
