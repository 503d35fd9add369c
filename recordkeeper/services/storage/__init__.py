"""
Storage Services Package

Provides the abstract store interface and the flat text file implementation.
"""

from recordkeeper.services.storage.interface import (
    InvalidPositionError,
    MalformedLineError,
    RecordStoreInterface,
    StorageError,
    StorageWriteError,
)
from recordkeeper.services.storage.flat_file import (
    ExpenseStore,
    FlatFileRecordStore,
    TaskStore,
    priority_rank,
)

__all__ = [
    # Interfaces
    "RecordStoreInterface",
    # Exceptions
    "InvalidPositionError",
    "MalformedLineError",
    "StorageError",
    "StorageWriteError",
    # Flat file implementation
    "ExpenseStore",
    "FlatFileRecordStore",
    "TaskStore",
    "priority_rank",
]
