"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep SQLite today and swap it later without touching the app state
2. Use a throwaway in-memory database (or a fake) in tests
3. Keep business logic decoupled from storage implementation

The gateway owns id generation and the created_at stamp. Callers never
supply either.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional

from microspend.models.expense import Category, Currency, Expense


DEFAULT_CURRENCY_KEY = "default_currency"


class ExpenseStorageInterface(ABC):
    """
    Abstract interface for expense storage operations.

    Both list operations return expenses NEWEST-CREATED FIRST.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Create tables if they don't exist. Safe to call repeatedly."""
        pass

    @abstractmethod
    async def insert_expense(
        self,
        amount: Decimal,
        currency: Currency,
        note: Optional[str],
        category: Optional[Category],
    ) -> Expense:
        """
        Record a new expense.

        Assigns the id and stamps created_at with the current local time.

        Returns:
            The fully populated expense

        Raises:
            StorageError: If the insert fails
        """
        pass

    @abstractmethod
    async def list_expenses_for_date(self, local_date: str) -> list[Expense]:
        """
        All expenses whose created_at falls on `local_date` (YYYY-MM-DD).
        """
        pass

    @abstractmethod
    async def list_all_expenses(self) -> list[Expense]:
        """Every expense ever recorded."""
        pass

    @abstractmethod
    async def delete_expense(self, expense_id: str) -> bool:
        """
        Hard-delete an expense.

        Idempotent: deleting an unknown id is a no-op.

        Returns:
            True if a row was removed, False if the id didn't exist
        """
        pass


class SettingsStorageInterface(ABC):
    """Abstract key-value settings storage."""

    @abstractmethod
    async def get_setting(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    async def set_setting(self, key: str, value: str) -> None:
        """Insert or replace."""
        pass

    @abstractmethod
    async def delete_setting(self, key: str) -> None:
        pass

    async def get_default_currency(self, fallback: Currency = Currency.CAD) -> Currency:
        """
        Stored default currency, or `fallback` if absent or unrecognised.
        """
        value = await self.get_setting(DEFAULT_CURRENCY_KEY)
        if value is None:
            return fallback
        try:
            return Currency(value)
        except ValueError:
            return fallback

    async def set_default_currency(self, currency: Currency) -> None:
        await self.set_setting(DEFAULT_CURRENCY_KEY, Currency(currency).value)


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class SchemaError(StorageError):
    """A stored row could not be turned back into a model."""
    pass
