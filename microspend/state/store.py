"""
Application State Store

One explicit object holds what the screens show: today's expenses, all
expenses and the default currency. Data flows one way:

    storage --refresh()--> store --notify--> subscribers (screens)
    screen --mutation--> storage --confirmed--> store --notify--> ...

DESIGN DECISION: Mutations are NOT optimistic. The store only changes
after storage confirms. If storage raises, the snapshot is left exactly
as it was and the StorageError propagates to the caller.
"""

from decimal import Decimal
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict, Field

from microspend.core.grouping import group_expenses, total_amount
from microspend.core.local_time import current_local_date
from microspend.models.expense import (
    DEFAULT_CURRENCY,
    Category,
    Currency,
    Expense,
    ExpenseGroup,
)
from microspend.services.storage import ExpenseStorageInterface, SettingsStorageInterface


class AppStateSnapshot(BaseModel):
    """Immutable view of the app state at one moment."""
    model_config = ConfigDict(frozen=True)

    today_expenses: tuple[Expense, ...] = ()
    all_expenses: tuple[Expense, ...] = ()
    currency: Currency = DEFAULT_CURRENCY
    loading: bool = True
    today: str = Field(
        default_factory=current_local_date,
        description="Local date today_expenses was loaded for"
    )

    @property
    def today_total(self) -> Decimal:
        return total_amount(self.today_expenses)

    @property
    def today_count(self) -> int:
        return len(self.today_expenses)

    def history_groups(self, today: Optional[str] = None) -> list[ExpenseGroup]:
        """All expenses grouped by day, newest day first."""
        return group_expenses(self.all_expenses, today=today)


StateListener = Callable[[AppStateSnapshot], None]


class ExpenseStore:
    """
    Owns the app state and the storage it is loaded from.

    The storage object must implement both the expense and the settings
    interface (SqliteStorage does).
    """

    def __init__(
        self,
        storage: ExpenseStorageInterface,
        today: Callable[[], str] = current_local_date,
    ):
        if not isinstance(storage, SettingsStorageInterface):
            raise TypeError("storage must also implement SettingsStorageInterface")
        self._storage = storage
        self._today = today
        self._state = AppStateSnapshot(today=today())
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> AppStateSnapshot:
        return self._state

    @property
    def storage(self) -> ExpenseStorageInterface:
        return self._storage

    # ------------------------------------------------------------------
    # Subscription
    # ------------------------------------------------------------------

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Register a listener called with every new snapshot.

        Returns a function that unsubscribes it.
        """
        self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _commit(self, **changes) -> AppStateSnapshot:
        self._state = self._state.model_copy(update=changes)
        for listener in list(self._listeners):
            listener(self._state)
        return self._state

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def bootstrap(self, fallback_currency: Currency = DEFAULT_CURRENCY) -> AppStateSnapshot:
        """Create tables, load the saved currency and both lists."""
        await self._storage.initialize()
        currency = await self._storage.get_default_currency(fallback_currency)
        today = self._today()
        today_expenses = await self._storage.list_expenses_for_date(today)
        all_expenses = await self._storage.list_all_expenses()
        return self._commit(
            currency=currency,
            today=today,
            today_expenses=tuple(today_expenses),
            all_expenses=tuple(all_expenses),
            loading=False,
        )

    async def refresh_today(self) -> AppStateSnapshot:
        today = self._today()
        expenses = await self._storage.list_expenses_for_date(today)
        return self._commit(today=today, today_expenses=tuple(expenses))

    async def refresh_all(self) -> AppStateSnapshot:
        expenses = await self._storage.list_all_expenses()
        return self._commit(all_expenses=tuple(expenses))

    async def refresh(self) -> AppStateSnapshot:
        """Reload both lists (e.g. when a screen regains focus)."""
        await self.refresh_today()
        return await self.refresh_all()

    # ------------------------------------------------------------------
    # Mutations (persist first, then update)
    # ------------------------------------------------------------------

    async def add_expense(
        self,
        amount: Decimal,
        note: Optional[str] = None,
        category: Optional[Category] = None,
    ) -> Expense:
        """Record an expense in the current default currency."""
        expense = await self._storage.insert_expense(
            amount, self._state.currency, note, category
        )

        changes = {"all_expenses": (expense, *self._state.all_expenses)}
        if expense.local_date == self._state.today:
            changes["today_expenses"] = (expense, *self._state.today_expenses)
        self._commit(**changes)
        return expense

    async def delete_expense(self, expense_id: str) -> bool:
        """
        Delete an expense. Unknown ids are a no-op.

        Returns:
            True if storage removed a row
        """
        removed = await self._storage.delete_expense(expense_id)
        self._commit(
            today_expenses=tuple(e for e in self._state.today_expenses if e.id != expense_id),
            all_expenses=tuple(e for e in self._state.all_expenses if e.id != expense_id),
        )
        return removed

    async def set_currency(self, currency: Currency) -> AppStateSnapshot:
        currency = Currency(currency)
        await self._storage.set_default_currency(currency)
        return self._commit(currency=currency)
