"""
Abstract Storage Interface

DESIGN DECISION: Stores are defined by an abstract interface over an
ordered sequence of records. The flat-file store is the only backend today;
an in-memory or database-backed store can implement the same contract.

Positions are 1-based everywhere in this interface. They are not stable
identities: every structural change (append, remove, sort) can shift them,
so callers re-read the view after each mutation.

Every mutation is followed by a full persist. There is no batching and no
partial write.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, Optional, TypeVar

from recordkeeper.models.records import StoredRecord


R = TypeVar("R", bound=StoredRecord)

SortKey = Callable[[Any], Any]


class RecordStoreInterface(ABC, Generic[R]):
    """
    Abstract interface for an ordered, persisted record sequence.

    Any store implementation must implement these methods.
    """

    @abstractmethod
    def load(self) -> list[R]:
        """
        Replace the in-memory sequence with the stored one.

        Returns:
            The loaded records (empty if nothing is stored)

        Raises:
            MalformedLineError: Only if the store is configured to raise
        """
        pass

    @abstractmethod
    def append(self, record: R) -> int:
        """
        Append a record to the end of the sequence and persist.

        Returns:
            The 1-based position of the new record

        Raises:
            StorageWriteError: If persisting fails (the record stays in memory)
        """
        pass

    @abstractmethod
    def remove_at(self, position: int) -> R:
        """
        Remove the record at a 1-based position and persist.

        Returns:
            The removed record

        Raises:
            InvalidPositionError: If position is out of range (nothing changes)
            StorageWriteError: If persisting fails (the removal stands)
        """
        pass

    @abstractmethod
    def persist(self) -> None:
        """
        Rewrite durable storage from the in-memory sequence.

        Raises:
            StorageWriteError: If the write fails
        """
        pass

    @abstractmethod
    def view(
        self,
        sort_key: Optional[SortKey] = None,
        reverse: bool = False,
    ) -> list[R]:
        """
        Return a copy of the sequence, optionally sorted.

        Sorting is stable: records with equal keys keep their relative order.
        """
        pass

    @abstractmethod
    def sort(self, sort_key: SortKey, reverse: bool = False, persist: bool = True) -> None:
        """
        Reorder the stored sequence in place and, unless persist is False,
        write it back.

        Raises:
            StorageWriteError: If persisting fails (the new order stands)
        """
        pass

    @property
    @abstractmethod
    def size(self) -> int:
        """Number of records currently held."""
        pass

    def __len__(self) -> int:
        return self.size

    def check_position(self, position: int) -> int:
        """
        Validate a 1-based position and return the 0-based index.

        Raises:
            InvalidPositionError: If position is not in 1..size
        """
        if isinstance(position, bool) or not isinstance(position, int):
            raise InvalidPositionError(position, self.size)
        if position < 1 or position > self.size:
            raise InvalidPositionError(position, self.size)
        return position - 1


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageWriteError(StorageError):
    """Could not rewrite the backing file. In-memory state is unaffected."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write {path}: {reason}")


class MalformedLineError(StorageError):
    """A stored line could not be turned back into a record."""

    def __init__(self, line_number: int, line: str, reason: str):
        self.line_number = line_number
        self.line = line
        self.reason = reason
        super().__init__(f"Malformed line {line_number}: {line.rstrip()!r} ({reason})")


class InvalidPositionError(StorageError, IndexError):
    """Position is not a valid 1-based index into the sequence."""

    def __init__(self, position: Any, size: int):
        self.position = position
        self.size = size
        super().__init__(f"Invalid position {position!r}; valid range is 1..{size}")
