"""
Flat File Storage Implementation

Records are kept as plain text, one record per line, fields joined by
" | ". The whole file is rewritten after every mutation.

TRADEOFFS:
- A field containing " | " cannot be stored faithfully; the line splits into
  extra fields on the next load
- No locking; one interactive caller at a time
- Whole-file rewrite on every change (fine for personal-sized lists)

Writes go to a temporary file next to the target and are moved into place
with os.replace, so a failed write leaves the previous file intact.
"""

import os
import tempfile
from pathlib import Path
from typing import Generic, Optional, Union

import structlog

from recordkeeper.audit import AuditLogger
from recordkeeper.models.records import (
    FIELD_DELIMITER,
    ExpenseRecord,
    MalformedLinePolicy,
    TaskRecord,
)
from recordkeeper.services.storage.interface import (
    R,
    MalformedLineError,
    RecordStoreInterface,
    SortKey,
    StorageWriteError,
)


logger = structlog.get_logger(__name__)


def priority_rank(task: TaskRecord) -> int:
    """Sort key for tasks: Low < Medium < High."""
    return task.priority.rank


class FlatFileRecordStore(RecordStoreInterface[R], Generic[R]):
    """
    Pipe-delimited text file implementation of a record store.

    The store exclusively owns its sequence. view() hands out copies of the
    list; records themselves are frozen.
    """

    record_label = "record"

    def __init__(
        self,
        path: Union[str, Path],
        record_type: type[R],
        delimiter: str = FIELD_DELIMITER,
        encoding: str = "utf-8",
        malformed_line_policy: MalformedLinePolicy = MalformedLinePolicy.ABORT,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._path = Path(path)
        self._record_type = record_type
        self._delimiter = delimiter
        self._encoding = encoding
        self._policy = MalformedLinePolicy(malformed_line_policy)
        self._audit_logger = audit_logger
        self._records: list[R] = []

    @property
    def path(self) -> Path:
        return self._path

    @property
    def size(self) -> int:
        return len(self._records)

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def load(self) -> list[R]:
        """Load the backing file, honouring the malformed line policy."""
        try:
            records = self._read_records()
        except FileNotFoundError:
            logger.debug("backing_file_missing", path=str(self._path))
            self._records = []
            return []
        except MalformedLineError as e:
            if self._policy == MalformedLinePolicy.RAISE:
                self._records = []
                raise
            self._records = []
            if self._audit_logger:
                self._audit_logger.log_load_failed(
                    record_type=self.record_label,
                    path=str(self._path),
                    error_message=str(e),
                    line_number=e.line_number,
                )
            else:
                logger.warning("load_aborted", path=str(self._path), error=str(e))
            return []
        except (OSError, UnicodeDecodeError) as e:
            self._records = []
            if self._audit_logger:
                self._audit_logger.log_load_failed(
                    record_type=self.record_label,
                    path=str(self._path),
                    error_message=str(e),
                )
            else:
                logger.warning("load_failed", path=str(self._path), error=str(e))
            return []

        self._records = records
        if self._audit_logger:
            self._audit_logger.log_records_loaded(
                self.record_label, str(self._path), len(records)
            )
        return self.view()

    def _read_records(self) -> list[R]:
        records: list[R] = []
        with self._path.open("r", encoding=self._encoding, newline="") as handle:
            for line_number, line in enumerate(handle, start=1):
                try:
                    records.append(self._record_type.from_line(line, self._delimiter))
                except ValueError as e:
                    error = MalformedLineError(line_number, line, str(e))
                    if self._policy != MalformedLinePolicy.SKIP:
                        raise error from e
                    if self._audit_logger:
                        self._audit_logger.log_line_skipped(
                            record_type=self.record_label,
                            path=str(self._path),
                            line_number=line_number,
                            error_message=str(e),
                        )
                    else:
                        logger.warning("line_skipped", path=str(self._path), line_number=line_number)
        return records

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def append(self, record: R) -> int:
        if not isinstance(record, self._record_type):
            raise TypeError(
                f"Expected {self._record_type.__name__}, got {type(record).__name__}"
            )
        self._records.append(record)
        position = len(self._records)
        if self._audit_logger:
            self._audit_logger.log_record_added(
                self.record_label, position, record.to_line(self._delimiter)
            )
        self.persist()
        return position

    def remove_at(self, position: int) -> R:
        index = self._checked_index(position)
        removed = self._records.pop(index)
        if self._audit_logger:
            self._audit_logger.log_record_removed(
                self.record_label, position, removed.to_line(self._delimiter)
            )
        self.persist()
        return removed

    def sort(self, sort_key: SortKey, reverse: bool = False, persist: bool = True) -> None:
        self._records.sort(key=sort_key, reverse=reverse)
        if self._audit_logger:
            self._audit_logger.log_records_sorted(
                self.record_label,
                getattr(sort_key, "__name__", repr(sort_key)),
                len(self._records),
            )
        if persist:
            self.persist()

    def _checked_index(self, position: int) -> int:
        try:
            return self.check_position(position)
        except IndexError:
            if self._audit_logger:
                self._audit_logger.log_invalid_position(
                    self.record_label, position, self.size
                )
            raise

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def persist(self) -> None:
        """Rewrite the backing file in full from the in-memory sequence."""
        content = "".join(
            record.to_line(self._delimiter) + "\n" for record in self._records
        )
        try:
            self._write_atomic(content)
        except OSError as e:
            if self._audit_logger:
                self._audit_logger.log_save_failed(
                    self.record_label, str(self._path), str(e)
                )
            else:
                logger.error("save_failed", path=str(self._path), error=str(e))
            raise StorageWriteError(str(self._path), str(e)) from e

        logger.debug("records_persisted", path=str(self._path), count=len(self._records))

    def _write_atomic(self, content: str) -> None:
        directory = self._path.parent
        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{self._path.name}.",
            suffix=".tmp",
            dir=directory,
        )
        try:
            with os.fdopen(fd, "w", encoding=self._encoding, newline="") as handle:
                handle.write(content)
            os.replace(tmp_path, self._path)
        except OSError:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def view(
        self,
        sort_key: Optional[SortKey] = None,
        reverse: bool = False,
    ) -> list[R]:
        if sort_key is None:
            return list(self._records)
        return sorted(self._records, key=sort_key, reverse=reverse)


class ExpenseStore(FlatFileRecordStore[ExpenseRecord]):
    """Expense records; viewed in insertion order."""

    record_label = "expense"

    def __init__(self, path: Union[str, Path] = "expenses.txt", **kwargs):
        super().__init__(path, ExpenseRecord, **kwargs)


class TaskStore(FlatFileRecordStore[TaskRecord]):
    """
    Task records.

    Adds mark_complete_at() and the priority view. The priority view lists
    High, then Medium, then Low; tasks of equal priority keep their order.
    """

    record_label = "task"

    def __init__(self, path: Union[str, Path] = "tasks.txt", **kwargs):
        super().__init__(path, TaskRecord, **kwargs)

    def mark_complete_at(self, position: int) -> TaskRecord:
        """
        Mark the task at a 1-based position complete and persist.

        Marking a completed task again changes nothing but still persists.

        Raises:
            InvalidPositionError: If position is out of range
            StorageWriteError: If persisting fails (the change stands)
        """
        index = self._checked_index(position)
        completed = self._records[index].mark_complete()
        self._records[index] = completed
        if self._audit_logger:
            self._audit_logger.log_record_completed(
                self.record_label, position, completed.to_line(self._delimiter)
            )
        self.persist()
        return completed

    def view_by_priority(self) -> list[TaskRecord]:
        return self.view(sort_key=priority_rank, reverse=True)

    def sort_by_priority(self, persist: bool = True) -> None:
        self.sort(priority_rank, reverse=True, persist=persist)
