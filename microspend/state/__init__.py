"""Application state package."""

from microspend.state.store import AppStateSnapshot, ExpenseStore

__all__ = ["AppStateSnapshot", "ExpenseStore"]
