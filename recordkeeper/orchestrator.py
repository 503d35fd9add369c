"""
Main Orchestrator for recordkeeper

This module ties the validator, the stores and the audit logger together
into the commands a front end issues:

1. Expense tracker: add, remove, view
2. To-do list: add, remove, complete, view

Every command returns an OperationResult naming one outcome category
(success, missing field, invalid amount, invalid position, save failure)
and a message the front end can show as-is. Commands never raise for
user error or storage failure.

DESIGN DECISION: The flows hold their store by reference; nothing here is
a module-level singleton. create_app_components() is the one place that
builds stores from settings.
"""

from typing import Optional, Union

from recordkeeper.audit import AuditLogger, configure_logging
from recordkeeper.config import Settings, get_settings
from recordkeeper.models.records import (
    OperationOutcome,
    OperationResult,
    TaskPriority,
    ValidationResult,
)
from recordkeeper.services.storage import (
    ExpenseStore,
    InvalidPositionError,
    StorageWriteError,
    TaskStore,
)
from recordkeeper.validation import RecordValidationError, RecordValidator


def _outcome_for(result: ValidationResult) -> OperationOutcome:
    first = result.first_error
    if first is not None and first.issue_type == "invalid_number":
        return OperationOutcome.INVALID_NUMERIC_AMOUNT
    return OperationOutcome.MISSING_REQUIRED_FIELD


def _issues_for_log(result: ValidationResult) -> list[dict]:
    return [
        {"field": i.field, "type": i.issue_type, "message": i.message}
        for i in result.issues
    ]


class ExpenseTrackerFlow:
    """
    Commands for the expense tracker.

    Expenses are listed in the order they were added.
    """

    def __init__(
        self,
        store: ExpenseStore,
        validator: Optional[RecordValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._validator = validator or RecordValidator()
        self._audit_logger = audit_logger

    @property
    def store(self) -> ExpenseStore:
        return self._store

    def add_expense(
        self,
        category: Optional[str],
        amount: Union[str, int, float, None],
        date: Optional[str],
    ) -> OperationResult:
        try:
            expense = self._validator.build_expense(category, amount, date)
        except RecordValidationError as e:
            outcome = _outcome_for(e.result)
            if self._audit_logger:
                self._audit_logger.log_validation_failed("expense", _issues_for_log(e.result))
            if outcome == OperationOutcome.INVALID_NUMERIC_AMOUNT:
                message = "Please enter a valid amount."
            else:
                message = "Please fill all fields."
            return OperationResult(outcome=outcome, message=message)

        try:
            position = self._store.append(expense)
        except StorageWriteError:
            return OperationResult(
                outcome=OperationOutcome.STORAGE_WRITE_FAILURE,
                message="Error saving expenses.",
                record=expense,
                position=self._store.size,
            )

        return OperationResult(
            outcome=OperationOutcome.SUCCESS,
            message="Expense added!",
            record=expense,
            position=position,
        )

    def remove_expense(self, position: Union[int, str, None]) -> OperationResult:
        try:
            index = self._validator.parse_position(position)
        except ValueError:
            if self._audit_logger:
                self._audit_logger.log_invalid_position("expense", position, self._store.size)
            return OperationResult(
                outcome=OperationOutcome.INVALID_POSITION,
                message="Please enter a valid number.",
            )

        try:
            removed = self._store.remove_at(index)
        except InvalidPositionError:
            return OperationResult(
                outcome=OperationOutcome.INVALID_POSITION,
                message="Invalid expense number.",
                position=index,
            )
        except StorageWriteError:
            return OperationResult(
                outcome=OperationOutcome.STORAGE_WRITE_FAILURE,
                message="Error saving expenses.",
                position=index,
            )

        return OperationResult(
            outcome=OperationOutcome.SUCCESS,
            message="Expense removed!",
            record=removed,
            position=index,
        )

    def view_expenses(self) -> OperationResult:
        records = self._store.view()
        return OperationResult(
            outcome=OperationOutcome.SUCCESS,
            message=f"{len(records)} expenses",
            records=records,
        )

    def render_expenses(self) -> str:
        """Listing text, one expense per line."""
        return "".join(f"{expense}\n" for expense in self._store.view())


class TodoListFlow:
    """
    Commands for the to-do list.

    The numbers render_tasks() shows are the positions remove_task() and
    complete_task() accept. With sort_on_refresh, the stored list is sorted
    by priority when the flow is created (pass a loaded store) and re-sorted
    after every change. Without it, the listing follows store order.
    """

    def __init__(
        self,
        store: TaskStore,
        validator: Optional[RecordValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        sort_on_refresh: bool = True,
    ):
        self._store = store
        self._validator = validator or RecordValidator()
        self._audit_logger = audit_logger
        self._sort_on_refresh = sort_on_refresh
        if sort_on_refresh:
            self._store.sort_by_priority(persist=False)

    @property
    def store(self) -> TaskStore:
        return self._store

    def add_task(
        self,
        description: Optional[str],
        due_date: Optional[str],
        priority: Union[TaskPriority, str, None] = TaskPriority.LOW,
    ) -> OperationResult:
        try:
            task = self._validator.build_task(description, due_date, priority)
        except RecordValidationError as e:
            if self._audit_logger:
                self._audit_logger.log_validation_failed("task", _issues_for_log(e.result))
            first = e.result.first_error
            if first is not None and first.field == "priority":
                message = first.message
            else:
                message = "Please enter a task and due date."
            return OperationResult(
                outcome=OperationOutcome.MISSING_REQUIRED_FIELD,
                message=message,
            )

        try:
            self._store.append(task)
            self._refresh()
        except StorageWriteError:
            return OperationResult(
                outcome=OperationOutcome.STORAGE_WRITE_FAILURE,
                message="Error saving tasks.",
                record=task,
            )

        return OperationResult(
            outcome=OperationOutcome.SUCCESS,
            message="Task added!",
            record=task,
        )

    def remove_task(self, position: Union[int, str, None]) -> OperationResult:
        return self._at_position(position, remove=True)

    def complete_task(self, position: Union[int, str, None]) -> OperationResult:
        return self._at_position(position, remove=False)

    def _at_position(self, position: Union[int, str, None], remove: bool) -> OperationResult:
        try:
            index = self._validator.parse_position(position)
        except ValueError:
            if self._audit_logger:
                self._audit_logger.log_invalid_position("task", position, self._store.size)
            return OperationResult(
                outcome=OperationOutcome.INVALID_POSITION,
                message="Please enter a valid number.",
            )

        try:
            if remove:
                record = self._store.remove_at(index)
            else:
                record = self._store.mark_complete_at(index)
            self._refresh()
        except InvalidPositionError:
            return OperationResult(
                outcome=OperationOutcome.INVALID_POSITION,
                message="Invalid task number.",
                position=index,
            )
        except StorageWriteError:
            return OperationResult(
                outcome=OperationOutcome.STORAGE_WRITE_FAILURE,
                message="Error saving tasks.",
                position=index,
            )

        return OperationResult(
            outcome=OperationOutcome.SUCCESS,
            message="Task removed!" if remove else "Task marked as complete!",
            record=record,
            position=index,
        )

    def _refresh(self) -> None:
        if self._sort_on_refresh:
            self._store.sort_by_priority()

    def view_tasks(self) -> OperationResult:
        """Tasks ordered High, Medium, Low."""
        records = self._store.view_by_priority()
        return OperationResult(
            outcome=OperationOutcome.SUCCESS,
            message=f"{len(records)} tasks",
            records=records,
        )

    def render_tasks(self) -> str:
        """Numbered listing text, one task per line, numbered by position."""
        return "".join(
            f"{number}. {task}\n"
            for number, task in enumerate(self._store.view(), start=1)
        )


def create_app_components(
    settings: Optional[Settings] = None,
    audit_logger: Optional[AuditLogger] = None,
) -> tuple[ExpenseTrackerFlow, TodoListFlow]:
    """
    Factory function to create all application components.

    Builds both stores from settings, loads them, and wires them into
    their flows with a shared validator and audit logger.

    Returns:
        (expense_tracker_flow, todo_list_flow)
    """
    settings = settings or get_settings()
    storage_settings = settings.storage

    configure_logging(settings.logging.log_level)
    audit_logger = audit_logger or AuditLogger()
    validator = RecordValidator()

    store_options = dict(
        delimiter=storage_settings.delimiter,
        encoding=storage_settings.encoding,
        malformed_line_policy=storage_settings.malformed_line_policy,
        audit_logger=audit_logger,
    )
    expense_store = ExpenseStore(storage_settings.expenses_file, **store_options)
    task_store = TaskStore(storage_settings.tasks_file, **store_options)
    expense_store.load()
    task_store.load()

    expense_flow = ExpenseTrackerFlow(
        store=expense_store,
        validator=validator,
        audit_logger=audit_logger,
    )
    todo_flow = TodoListFlow(
        store=task_store,
        validator=validator,
        audit_logger=audit_logger,
        sort_on_refresh=storage_settings.sort_tasks_on_refresh,
    )

    return expense_flow, todo_flow
