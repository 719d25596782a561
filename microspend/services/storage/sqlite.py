"""
SQLite Storage Implementation

DESIGN DECISION: A single local SQLite file is the whole backend:
1. No server, no account, works offline
2. One connection per storage object (the UI is single-threaded)
3. Amounts are stored as TEXT so Decimal precision survives a round trip

Schema:
    expenses(id, amount, currency, note, category, created_at)
    settings(key, value)
"""

import sqlite3
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Callable, Optional
from uuid import uuid4

import structlog
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from microspend.config import get_settings
from microspend.core.local_time import current_local_timestamp
from microspend.models.expense import Category, Currency, Expense
from microspend.services.storage.interface import (
    ExpenseStorageInterface,
    SchemaError,
    SettingsStorageInterface,
    StorageError,
)


SCHEMA = """
CREATE TABLE IF NOT EXISTS expenses (
    id TEXT PRIMARY KEY NOT NULL,
    amount TEXT NOT NULL,
    currency TEXT NOT NULL,
    note TEXT,
    category TEXT,
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_expenses_created_at ON expenses (created_at);
CREATE TABLE IF NOT EXISTS settings (
    key TEXT PRIMARY KEY NOT NULL,
    value TEXT NOT NULL
);
"""

EXPENSE_COLUMNS = "id, amount, currency, note, category, created_at"

# Newest first; rowid breaks ties between rows stamped in the same millisecond
NEWEST_FIRST = "ORDER BY created_at DESC, rowid DESC"


def _is_locked(error: BaseException) -> bool:
    return isinstance(error, sqlite3.OperationalError) and "locked" in str(error).lower()


_retry_when_locked = retry(
    retry=retry_if_exception(_is_locked),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
    reraise=True,
)


class SqliteStorage(ExpenseStorageInterface, SettingsStorageInterface):
    """
    SQLite implementation of expense and settings storage.

    Args:
        database_path: File path or ':memory:'. Defaults to StorageSettings.path.
        clock: Produces the created_at stamp. Tests inject a fixed clock.
    """

    def __init__(
        self,
        database_path: Optional[str] = None,
        clock: Callable[[], str] = current_local_timestamp,
    ):
        self._path = database_path or get_settings().storage.path
        self._clock = clock
        self._conn: Optional[sqlite3.Connection] = None
        self._logger = structlog.get_logger(__name__)

    @property
    def database_path(self) -> str:
        return self._path

    def _connect(self) -> sqlite3.Connection:
        if self._conn is None:
            try:
                if self._path != ":memory:":
                    Path(self._path).parent.mkdir(parents=True, exist_ok=True)
                self._conn = sqlite3.connect(self._path, check_same_thread=False)
                self._conn.row_factory = sqlite3.Row
            except (sqlite3.Error, OSError) as e:
                raise StorageError(f"Failed to open database {self._path}: {e}") from e
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    @_retry_when_locked
    def _write(self, sql: str, params: tuple = ()) -> int:
        conn = self._connect()
        with conn:
            cursor = conn.execute(sql, params)
        return cursor.rowcount

    def _read(self, sql: str, params: tuple = ()) -> list[sqlite3.Row]:
        return self._connect().execute(sql, params).fetchall()

    def _row_to_expense(self, row: sqlite3.Row) -> Expense:
        try:
            return Expense(
                id=row["id"],
                amount=Decimal(row["amount"]),
                currency=Currency(row["currency"]),
                note=row["note"],
                category=Category(row["category"]) if row["category"] else None,
                created_at=row["created_at"],
            )
        except (InvalidOperation, ValueError) as e:
            raise SchemaError(f"Malformed expense row {row['id']}: {e}") from e

    def _rows_to_expenses(self, rows: list[sqlite3.Row]) -> list[Expense]:
        expenses = []
        for row in rows:
            try:
                expenses.append(self._row_to_expense(row))
            except SchemaError as e:
                # Skip malformed rows rather than failing the whole screen
                self._logger.warning("malformed_expense_row", error=str(e))
        return expenses

    # ------------------------------------------------------------------
    # Expenses
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        try:
            conn = self._connect()
            with conn:
                conn.executescript(SCHEMA)
        except sqlite3.Error as e:
            raise StorageError(f"Failed to initialize database: {e}") from e

    async def insert_expense(
        self,
        amount: Decimal,
        currency: Currency,
        note: Optional[str],
        category: Optional[Category],
    ) -> Expense:
        """Insert a new expense and return it as stored."""
        try:
            expense = Expense(
                id=str(uuid4()),
                amount=amount,
                currency=currency,
                note=note,
                category=category,
                created_at=self._clock(),
            )
        except ValueError as e:
            raise StorageError(f"Refusing to store invalid expense: {e}") from e

        try:
            self._write(
                f"INSERT INTO expenses ({EXPENSE_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?)",
                (
                    expense.id,
                    f"{expense.amount:f}",
                    expense.currency.value,
                    expense.note,
                    expense.category.value if expense.category else None,
                    expense.created_at,
                ),
            )
        except sqlite3.Error as e:
            raise StorageError(f"Failed to save expense: {e}") from e

        return expense

    async def list_expenses_for_date(self, local_date: str) -> list[Expense]:
        try:
            rows = self._read(
                f"SELECT {EXPENSE_COLUMNS} FROM expenses "
                f"WHERE substr(created_at, 1, 10) = ? {NEWEST_FIRST}",
                (local_date,),
            )
        except sqlite3.Error as e:
            raise StorageError(f"Failed to list expenses for {local_date}: {e}") from e
        return self._rows_to_expenses(rows)

    async def list_all_expenses(self) -> list[Expense]:
        try:
            rows = self._read(f"SELECT {EXPENSE_COLUMNS} FROM expenses {NEWEST_FIRST}")
        except sqlite3.Error as e:
            raise StorageError(f"Failed to list expenses: {e}") from e
        return self._rows_to_expenses(rows)

    async def delete_expense(self, expense_id: str) -> bool:
        try:
            removed = self._write("DELETE FROM expenses WHERE id = ?", (expense_id,))
        except sqlite3.Error as e:
            raise StorageError(f"Failed to delete expense {expense_id}: {e}") from e
        return removed > 0

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    async def get_setting(self, key: str) -> Optional[str]:
        try:
            rows = self._read("SELECT value FROM settings WHERE key = ?", (key,))
        except sqlite3.Error as e:
            raise StorageError(f"Failed to read setting {key}: {e}") from e
        return rows[0]["value"] if rows else None

    async def set_setting(self, key: str, value: str) -> None:
        try:
            self._write(
                "INSERT OR REPLACE INTO settings (key, value) VALUES (?, ?)",
                (key, value),
            )
        except sqlite3.Error as e:
            raise StorageError(f"Failed to write setting {key}: {e}") from e

    async def delete_setting(self, key: str) -> None:
        try:
            self._write("DELETE FROM settings WHERE key = ?", (key,))
        except sqlite3.Error as e:
            raise StorageError(f"Failed to delete setting {key}: {e}") from e
