"""
Main Orchestrator for MicroSpend

Ties the pieces together and defines the end-to-end flows:
1. Expense flow (form input -> validate -> persist -> state)
2. Export flow (check data -> ad gate -> CSV file)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Invalid input never reaches storage
- The UI only learns about an expense after storage confirmed it
- Every step is audited
"""

from decimal import Decimal
from typing import Optional, Union
from uuid import UUID

from microspend.audit import AuditLogger, create_correlation_id
from microspend.config import get_settings
from microspend.export import (
    AdGate,
    AdState,
    ExpenseExporter,
    ExportError,
    ExportResult,
    NothingToExportError,
)
from microspend.models.audit import AuditEventType
from microspend.models.expense import Category, Currency, Expense
from microspend.services.storage import SqliteStorage, StorageError
from microspend.state import ExpenseStore
from microspend.validation import ExpenseValidator


PERSISTENCE_FAILED_MESSAGE = "Couldn't save your change. Please try again."


class ExpenseFlow:
    """
    Orchestrates adding, deleting and currency changes.

    Storage failures are audited and re-raised as StorageError so the UI
    can show one generic, retryable notice.
    """

    def __init__(
        self,
        store: ExpenseStore,
        validator: Optional[ExpenseValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._validator = validator or ExpenseValidator()
        self._audit_logger = audit_logger or AuditLogger()

    @property
    def store(self) -> ExpenseStore:
        return self._store

    async def add_expense(
        self,
        amount_text: Union[str, Decimal, None],
        note: Optional[str] = None,
        category: Union[Category, str, None] = None,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[Optional[Expense], str]:
        """
        Validate and record an expense.

        Returns:
            (expense, message); expense is None when validation failed

        Raises:
            StorageError: If the insert failed (nothing changed in state)
        """
        correlation_id = correlation_id or create_correlation_id()

        result = self._validator.validate(amount_text, note, category)
        if not result.is_valid:
            self._audit_logger.log_validation_failed(
                issues=[
                    {"field": i.field, "type": i.issue_type, "message": i.message}
                    for i in result.issues
                ],
                correlation_id=correlation_id,
            )
            return None, self._validator.get_user_friendly_summary(result)

        try:
            expense = await self._store.add_expense(
                result.amount, result.note, result.category
            )
        except StorageError as e:
            self._audit_logger.log_persistence_failed("insert_expense", str(e), correlation_id)
            raise

        self._audit_logger.log_expense_added(
            expense_id=expense.id,
            amount=str(expense.amount),
            currency=expense.currency.value,
            correlation_id=correlation_id,
        )
        return expense, "Expense saved."

    async def delete_expense(
        self,
        expense_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        try:
            removed = await self._store.delete_expense(expense_id)
        except StorageError as e:
            self._audit_logger.log_persistence_failed("delete_expense", str(e), correlation_id)
            raise

        self._audit_logger.log_expense_deleted(expense_id, removed, correlation_id)
        return removed

    async def change_currency(
        self,
        currency: Union[Currency, str],
        correlation_id: Optional[UUID] = None,
    ) -> Currency:
        old = self._store.state.currency
        try:
            await self._store.set_currency(Currency(currency))
        except StorageError as e:
            self._audit_logger.log_persistence_failed("set_default_currency", str(e), correlation_id)
            raise

        new = self._store.state.currency
        if new != old:
            self._audit_logger.log_currency_changed(old.value, new.value, correlation_id)
        return new

    async def bootstrap(self) -> None:
        """Open storage and load the initial state."""
        fallback = Currency(get_settings().app.default_currency)
        try:
            state = await self._store.bootstrap(fallback_currency=fallback)
        except StorageError as e:
            self._audit_logger.log_persistence_failed("bootstrap", str(e))
            raise
        self._audit_logger.log_expenses_refreshed(state.today_count, len(state.all_expenses))

    async def refresh(self) -> None:
        """Reload both lists (screen focus)."""
        try:
            state = await self._store.refresh()
        except StorageError as e:
            self._audit_logger.log_persistence_failed("refresh", str(e))
            raise
        self._audit_logger.log_expenses_refreshed(state.today_count, len(state.all_expenses))


class ExportFlow:
    """
    Orchestrates the CSV export.

    Flow:
    1. Check there is something to export
    2. Ad gate (dismissable only before playback starts)
    3. Write the CSV file

    A failure at step 3 is reported, never fatal; the expense lists are
    not touched by any step.
    """

    def __init__(
        self,
        store: ExpenseStore,
        exporter: Optional[ExpenseExporter] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._exporter = exporter or ExpenseExporter()
        self._audit_logger = audit_logger or AuditLogger()

    def can_export(self) -> bool:
        return len(self._store.state.all_expenses) > 0

    def new_gate(self) -> AdGate:
        return AdGate()

    async def run(
        self,
        gate: Optional[AdGate] = None,
        correlation_id: Optional[UUID] = None,
    ) -> Optional[ExportResult]:
        """
        Run the gate and write the export.

        Returns:
            The export result, or None if the user dismissed the gate

        Raises:
            NothingToExportError: If there are no expenses
            ExportError: If the file could not be written
        """
        correlation_id = correlation_id or create_correlation_id()
        expenses = list(self._store.state.all_expenses)
        if not expenses:
            raise NothingToExportError()

        self._audit_logger.log_export_requested(len(expenses), correlation_id)

        gate = gate or self.new_gate()

        def on_gate_state(state: AdState) -> None:
            if state == AdState.PLAYING:
                self._audit_logger.log_ad_gate(AuditEventType.AD_GATE_STARTED, correlation_id)

        gate.add_listener(on_gate_state)
        try:
            completed = await gate.run()
        finally:
            gate.remove_listener(on_gate_state)

        if not completed:
            self._audit_logger.log_ad_gate(AuditEventType.AD_GATE_CANCELLED, correlation_id)
            return None
        self._audit_logger.log_ad_gate(AuditEventType.AD_GATE_COMPLETED, correlation_id)

        try:
            result = self._exporter.write(expenses)
        except ExportError as e:
            self._audit_logger.log_export_failed(str(e), correlation_id)
            raise

        self._audit_logger.log_export_completed(str(result.path), result.row_count, correlation_id)
        return result


def create_app_components(
    database_path: Optional[str] = None,
    audit_logger: Optional[AuditLogger] = None,
) -> tuple[ExpenseFlow, ExportFlow, ExpenseStore]:
    """
    Factory function to create all application components.

    Args:
        database_path: SQLite file (or ':memory:'); defaults to settings.

    Returns:
        (expense_flow, export_flow, store). Call `await expense_flow.bootstrap()`
        before first use.
    """
    audit_logger = audit_logger or AuditLogger()
    storage = SqliteStorage(database_path)
    store = ExpenseStore(storage)

    expense_flow = ExpenseFlow(store=store, audit_logger=audit_logger)
    export_flow = ExportFlow(store=store, audit_logger=audit_logger)

    return expense_flow, export_flow, store
