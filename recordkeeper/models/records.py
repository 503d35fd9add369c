"""
Core Data Models for recordkeeper

These models define the records kept in the flat backing files and the
results handed back to whatever front end drives the stores.

Each record is stored as one line of text, fields joined by " | ":

    expenses.txt   <category> | <amount> | <date>
    tasks.txt      <description> | <due_date> | <priority> | <1|0>

Field order in a line matches constructor field order. Every record model
knows how to produce that ordered list of fields and how to rebuild itself
from it.

DESIGN DECISION: Records are frozen pydantic models. The only field that
ever changes after creation is TaskRecord.complete, and that change is made
by replacing the stored record with a completed copy.
"""

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import ClassVar, Optional

from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny, field_validator


FIELD_DELIMITER = " | "


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TaskPriority(str, Enum):
    """
    Task priority levels.

    The value is the label shown to the user and written to disk.
    Ordering uses rank, not the label text: alphabetically "High" sorts
    before "Low", which is not a severity order.
    """
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANKS[self]


_PRIORITY_RANKS = {
    TaskPriority.LOW: 1,
    TaskPriority.MEDIUM: 2,
    TaskPriority.HIGH: 3,
}


class MalformedLinePolicy(str, Enum):
    """What a store does with a stored line it cannot parse."""
    ABORT = "abort"  # Discard the whole load, start empty
    SKIP = "skip"    # Drop the bad line, keep the rest
    RAISE = "raise"  # Propagate MalformedLineError to the caller


class OperationOutcome(str, Enum):
    """
    Outcome categories reported to the front end.

    The front end decides how to show each one; the core only says which
    one happened.
    """
    SUCCESS = "success"
    MISSING_REQUIRED_FIELD = "missing_required_field"
    INVALID_NUMERIC_AMOUNT = "invalid_numeric_amount"
    INVALID_POSITION = "invalid_position"
    STORAGE_WRITE_FAILURE = "storage_write_failure"


def parse_amount(text: str) -> Decimal:
    """
    Parse amount text into a finite Decimal.

    Raises:
        ValueError: If the text is not a number, or is NaN/Infinity
    """
    if "_" in text:
        raise ValueError(f"Not a valid amount: {text!r}")
    try:
        amount = Decimal(text.strip())
    except InvalidOperation:
        raise ValueError(f"Not a valid amount: {text!r}")
    if not amount.is_finite():
        raise ValueError(f"Amount must be a finite number: {text!r}")
    return amount


# =============================================================================
# RECORD MODELS
# =============================================================================

class StoredRecord(BaseModel):
    """
    Base for records persisted one per line in a delimited text file.

    Subclasses set FIELD_COUNT and implement to_fields()/from_fields().
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    FIELD_COUNT: ClassVar[int] = 0

    def to_fields(self) -> list[str]:
        raise NotImplementedError

    @classmethod
    def from_fields(cls, fields: list[str]) -> "StoredRecord":
        raise NotImplementedError

    def to_line(self, delimiter: str = FIELD_DELIMITER) -> str:
        """Render as a single stored line (without the newline)."""
        return delimiter.join(self.to_fields())

    @classmethod
    def from_line(cls, line: str, delimiter: str = FIELD_DELIMITER) -> "StoredRecord":
        """
        Parse a single stored line.

        Fields beyond FIELD_COUNT are ignored.

        Raises:
            ValueError: If the line has too few fields or a field is invalid
        """
        fields = line.rstrip("\r\n").split(delimiter)
        if len(fields) < cls.FIELD_COUNT:
            raise ValueError(
                f"Expected {cls.FIELD_COUNT} fields, found {len(fields)}"
            )
        return cls.from_fields(fields[:cls.FIELD_COUNT])


class ExpenseRecord(StoredRecord):
    """A single expense entry."""

    FIELD_COUNT: ClassVar[int] = 3

    category: str = Field(
        ...,
        min_length=1,
        description="Expense category (free text)"
    )
    amount: Decimal = Field(
        ...,
        description="Amount spent"
    )
    date: str = Field(
        ...,
        min_length=1,
        description="Date as entered by the user (YYYY-MM-DD expected, not enforced)"
    )

    @field_validator('amount')
    @classmethod
    def validate_amount_is_finite(cls, v: Decimal) -> Decimal:
        if not v.is_finite():
            raise ValueError("Amount must be a finite number")
        return v

    def to_fields(self) -> list[str]:
        return [self.category, str(self.amount), self.date]

    @classmethod
    def from_fields(cls, fields: list[str]) -> "ExpenseRecord":
        category, amount, date = fields[:cls.FIELD_COUNT]
        return cls(category=category, amount=parse_amount(amount), date=date)

    def __str__(self) -> str:
        return f"{self.date} - {self.category}: ${self.amount}"


class TaskRecord(StoredRecord):
    """
    A single to-do task.

    complete starts False and, once set, is never reset.
    """

    FIELD_COUNT: ClassVar[int] = 4

    description: str = Field(
        ...,
        min_length=1,
        description="What needs doing"
    )
    due_date: str = Field(
        ...,
        min_length=1,
        description="Due date as entered by the user"
    )
    priority: TaskPriority = Field(
        ...,
        description="Priority label"
    )
    complete: bool = Field(
        default=False,
        description="Has the task been marked complete?"
    )

    def to_fields(self) -> list[str]:
        return [
            self.description,
            self.due_date,
            self.priority.value,
            "1" if self.complete else "0",
        ]

    @classmethod
    def from_fields(cls, fields: list[str]) -> "TaskRecord":
        description, due_date, priority, flag = fields[:cls.FIELD_COUNT]
        return cls(
            description=description,
            due_date=due_date,
            priority=TaskPriority(priority.strip()),
            complete=flag.strip() == "1",
        )

    def mark_complete(self) -> "TaskRecord":
        """Return a completed copy (or self if already complete)."""
        if self.complete:
            return self
        return self.model_copy(update={"complete": True})

    def __str__(self) -> str:
        box = "[✓] " if self.complete else "[ ] "
        return f"{box}{self.description} (Due: {self.due_date}, Priority: {self.priority.value})"


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found in user input."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_number', 'invalid_choice')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """Result of validating raw form input for one record."""

    record_type: str = Field(
        ...,
        description="Record type being validated ('expense' or 'task')"
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def first_error(self) -> Optional[ValidationIssue]:
        for issue in self.issues:
            if issue.severity == "error":
                return issue
        return None


# =============================================================================
# OPERATION RESULTS
# =============================================================================

class OperationResult(BaseModel):
    """
    Result of one command issued by the front end.

    records is filled by view commands; record by commands that touched a
    single record.
    """

    outcome: OperationOutcome
    message: str = Field(
        ...,
        description="Message suitable for showing to the user"
    )
    record: Optional[SerializeAsAny[StoredRecord]] = None
    records: list[SerializeAsAny[StoredRecord]] = Field(default_factory=list)
    position: Optional[int] = Field(
        default=None,
        description="1-based position the command addressed, if any"
    )

    @property
    def success(self) -> bool:
        return self.outcome == OperationOutcome.SUCCESS
