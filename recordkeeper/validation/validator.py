"""
Input Validation Boundary

Raw text from the front end is checked here before any record is built or
any store is touched. A command that fails validation never mutates a store.

Checks, in the order they are reported:

EXPENSES:
- Amount must parse as a finite number (checked first)
- Category and date must be non-empty

TASKS:
- Description and due date must be non-empty
- Priority must be one of Low, Medium, High

IMPORTANT: Validation never silently fixes input beyond trimming
surrounding whitespace. It reports issues for the front end to show.
"""

from typing import Optional, Union

from pydantic import ValidationError

from recordkeeper.models.records import (
    ExpenseRecord,
    TaskPriority,
    TaskRecord,
    ValidationIssue,
    ValidationResult,
    parse_amount,
)


class RecordValidationError(ValueError):
    """Raised by the build_* helpers when input does not validate."""

    def __init__(self, result: ValidationResult):
        self.result = result
        first = result.first_error
        super().__init__(first.message if first else "Invalid input")


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


class RecordValidator:
    """Validates raw form input for expense and task records."""

    # -------------------------------------------------------------------------
    # Expenses
    # -------------------------------------------------------------------------

    def validate_expense(
        self,
        category: Optional[str],
        amount: Union[str, int, float, None],
        date: Optional[str],
    ) -> ValidationResult:
        issues = []

        try:
            parse_amount("" if amount is None else str(amount))
        except ValueError:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_number",
                message="Please enter a valid amount.",
            ))

        if _is_blank(category):
            issues.append(ValidationIssue(
                field="category",
                issue_type="missing",
                message="Category is required.",
            ))

        if _is_blank(date):
            issues.append(ValidationIssue(
                field="date",
                issue_type="missing",
                message="Date is required.",
            ))

        return ValidationResult(record_type="expense", issues=issues)

    def build_expense(
        self,
        category: Optional[str],
        amount: Union[str, int, float, None],
        date: Optional[str],
    ) -> ExpenseRecord:
        """
        Validate and construct an expense.

        Raises:
            RecordValidationError: If any check fails
        """
        result = self.validate_expense(category, amount, date)
        if result.has_errors:
            raise RecordValidationError(result)
        return self._construct(
            result,
            ExpenseRecord,
            category=category,
            amount=parse_amount(str(amount)),
            date=date,
        )

    # -------------------------------------------------------------------------
    # Tasks
    # -------------------------------------------------------------------------

    def validate_task(
        self,
        description: Optional[str],
        due_date: Optional[str],
        priority: Union[TaskPriority, str, None],
    ) -> ValidationResult:
        issues = []

        if _is_blank(description):
            issues.append(ValidationIssue(
                field="description",
                issue_type="missing",
                message="Task description is required.",
            ))

        if _is_blank(due_date):
            issues.append(ValidationIssue(
                field="due_date",
                issue_type="missing",
                message="Due date is required.",
            ))

        if self.match_priority(priority) is None:
            issues.append(ValidationIssue(
                field="priority",
                issue_type="invalid_choice",
                message=f"Priority must be one of: {', '.join(p.value for p in TaskPriority)}.",
            ))

        return ValidationResult(record_type="task", issues=issues)

    def build_task(
        self,
        description: Optional[str],
        due_date: Optional[str],
        priority: Union[TaskPriority, str, None],
    ) -> TaskRecord:
        """
        Validate and construct a new (incomplete) task.

        Raises:
            RecordValidationError: If any check fails
        """
        result = self.validate_task(description, due_date, priority)
        if result.has_errors:
            raise RecordValidationError(result)
        return self._construct(
            result,
            TaskRecord,
            description=description,
            due_date=due_date,
            priority=self.match_priority(priority),
        )

    @staticmethod
    def match_priority(priority: Union[TaskPriority, str, None]) -> Optional[TaskPriority]:
        """Match a priority label case-insensitively. None if it matches nothing."""
        if isinstance(priority, TaskPriority):
            return priority
        if priority is None:
            return None
        label = str(priority).strip().lower()
        for candidate in TaskPriority:
            if candidate.value.lower() == label:
                return candidate
        return None

    # -------------------------------------------------------------------------
    # Positions
    # -------------------------------------------------------------------------

    @staticmethod
    def parse_position(value: Union[int, str, None]) -> int:
        """
        Parse a user-supplied 1-based position.

        Range is checked by the store, not here.

        Raises:
            ValueError: If value is not an integer
        """
        if isinstance(value, bool):
            raise ValueError(f"Not a number: {value!r}")
        if isinstance(value, int):
            return value
        if value is None:
            raise ValueError("No number given")
        return int(str(value).strip())

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _construct(result: ValidationResult, model: type, **fields):
        # Model constraints mirror the checks above; a failure here means
        # the two have drifted apart.
        try:
            return model(**fields)
        except ValidationError as e:
            result.issues.append(ValidationIssue(
                field=result.record_type,
                issue_type="invalid",
                message=str(e),
            ))
            raise RecordValidationError(result) from e

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """Summary of validation results for showing to the user."""
        if result.is_valid:
            return "All fields look good."

        lines = ["Please fix the following:"]
        for issue in result.issues:
            if issue.severity == "error":
                lines.append(f"   • {issue.message}")
        return "\n".join(lines)
