"""
Storage Services Package

Abstract interfaces plus the SQLite implementation used by the app.
"""

from microspend.services.storage.interface import (
    DEFAULT_CURRENCY_KEY,
    ExpenseStorageInterface,
    SchemaError,
    SettingsStorageInterface,
    StorageError,
)
from microspend.services.storage.sqlite import SqliteStorage

__all__ = [
    # Interfaces
    "DEFAULT_CURRENCY_KEY",
    "ExpenseStorageInterface",
    "SettingsStorageInterface",
    # Exceptions
    "SchemaError",
    "StorageError",
    # SQLite implementation
    "SqliteStorage",
]
