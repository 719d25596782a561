"""Shared fixtures for MicroSpend tests."""

from decimal import Decimal
from itertools import count

import pytest

from microspend.models.expense import Currency, Expense
from microspend.services.storage import SqliteStorage


_ids = count(1)


def make_expense(
    created_at: str,
    amount="10",
    currency=Currency.CAD,
    note=None,
    category=None,
    expense_id=None,
) -> Expense:
    """Build an Expense directly (bypassing storage)."""
    return Expense(
        id=expense_id or f"exp-{next(_ids)}",
        amount=Decimal(str(amount)),
        currency=currency,
        note=note,
        category=category,
        created_at=created_at,
    )


class FixedClock:
    """Clock that hands out the timestamps it was given, in order."""

    def __init__(self, *timestamps: str):
        self._timestamps = list(timestamps)

    def push(self, timestamp: str) -> None:
        self._timestamps.append(timestamp)

    def __call__(self) -> str:
        return self._timestamps.pop(0)


@pytest.fixture
def expense_factory():
    return make_expense


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def storage(clock):
    """Fresh in-memory SQLite storage with a controllable clock."""
    store = SqliteStorage(":memory:", clock=clock)
    yield store
    store.close()
