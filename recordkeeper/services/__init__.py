"""Services package."""

from recordkeeper.services.storage import (
    ExpenseStore,
    FlatFileRecordStore,
    InvalidPositionError,
    MalformedLineError,
    RecordStoreInterface,
    StorageError,
    StorageWriteError,
    TaskStore,
)

__all__ = [
    "ExpenseStore",
    "FlatFileRecordStore",
    "InvalidPositionError",
    "MalformedLineError",
    "RecordStoreInterface",
    "StorageError",
    "StorageWriteError",
    "TaskStore",
]
