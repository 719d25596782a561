"""Services package."""

from microspend.services.storage import (
    DEFAULT_CURRENCY_KEY,
    ExpenseStorageInterface,
    SchemaError,
    SettingsStorageInterface,
    SqliteStorage,
    StorageError,
)

__all__ = [
    "DEFAULT_CURRENCY_KEY",
    "ExpenseStorageInterface",
    "SchemaError",
    "SettingsStorageInterface",
    "SqliteStorage",
    "StorageError",
]
