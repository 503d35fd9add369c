"""Tests for the input validation boundary."""

import pytest
from decimal import Decimal

from recordkeeper.models.records import ExpenseRecord, TaskPriority, TaskRecord
from recordkeeper.validation import RecordValidationError, RecordValidator


@pytest.fixture
def validator():
    return RecordValidator()


class TestExpenseValidation:
    """Tests for expense input."""

    def test_valid_expense(self, validator):
        result = validator.validate_expense("Food", "12.5", "2024-01-01")
        assert result.is_valid
        assert result.issues == []

    def test_build_expense_parses_amount(self, validator):
        """Amount text '12.5' becomes the number 12.5."""
        expense = validator.build_expense("Food", "12.5", "2024-01-01")
        assert isinstance(expense, ExpenseRecord)
        assert expense.amount == Decimal("12.5")
        assert expense.amount == 12.5

    def test_build_expense_accepts_numbers(self, validator):
        expense = validator.build_expense("Food", 3, "2024-01-01")
        assert expense.amount == 3

    def test_invalid_amount(self, validator):
        result = validator.validate_expense("Food", "abc", "2024-01-01")
        assert result.first_error.issue_type == "invalid_number"
        assert result.first_error.field == "amount"

    def test_empty_amount_is_invalid_number(self, validator):
        result = validator.validate_expense("Food", "", "2024-01-01")
        assert result.first_error.issue_type == "invalid_number"

    @pytest.mark.parametrize("category,date,field", [
        ("", "2024-01-01", "category"),
        ("   ", "2024-01-01", "category"),
        ("Food", "", "date"),
        ("Food", None, "date"),
    ])
    def test_missing_fields(self, validator, category, date, field):
        result = validator.validate_expense(category, "1", date)
        assert result.has_errors
        assert result.first_error.issue_type == "missing"
        assert result.first_error.field == field

    def test_amount_reported_before_missing_fields(self, validator):
        """A bad amount is reported first even when fields are also missing."""
        result = validator.validate_expense("", "abc", "")
        assert result.error_count == 3
        assert result.first_error.issue_type == "invalid_number"

    def test_build_expense_raises_with_result(self, validator):
        with pytest.raises(RecordValidationError) as exc_info:
            validator.build_expense("Food", "abc", "2024-01-01")
        assert exc_info.value.result.first_error.field == "amount"
        assert str(exc_info.value) == "Please enter a valid amount."


class TestTaskValidation:
    """Tests for task input."""

    def test_build_task(self, validator):
        created = validator.build_task("Call mum", "2024-02-01", "High")
        assert isinstance(created, TaskRecord)
        assert created.priority == TaskPriority.HIGH
        assert created.complete is False

    def test_priority_matching_is_case_insensitive(self, validator):
        assert validator.match_priority("medium") == TaskPriority.MEDIUM
        assert validator.match_priority(TaskPriority.LOW) == TaskPriority.LOW
        assert validator.match_priority("Urgent") is None
        assert validator.match_priority(None) is None

    def test_missing_description(self, validator):
        result = validator.validate_task("", "2024-02-01", "Low")
        assert result.first_error.field == "description"

    def test_missing_due_date(self, validator):
        result = validator.validate_task("Call mum", "  ", "Low")
        assert result.first_error.field == "due_date"

    def test_unknown_priority(self, validator):
        result = validator.validate_task("Call mum", "2024-02-01", "Urgent")
        assert result.first_error.issue_type == "invalid_choice"

    def test_build_task_raises(self, validator):
        with pytest.raises(RecordValidationError):
            validator.build_task("Call mum", "", "Low")


class TestPositionParsing:
    """Tests for user-supplied positions."""

    @pytest.mark.parametrize("value,expected", [(1, 1), ("2", 2), (" 3 ", 3), (0, 0)])
    def test_parse_position(self, validator, value, expected):
        assert validator.parse_position(value) == expected

    @pytest.mark.parametrize("value", ["abc", "", "1.5", None, True])
    def test_parse_position_rejects(self, validator, value):
        with pytest.raises(ValueError):
            validator.parse_position(value)


class TestSummary:
    """Tests for the user-facing summary."""

    def test_summary_for_valid_input(self, validator):
        result = validator.validate_task("Call mum", "2024-02-01", "Low")
        assert validator.get_user_friendly_summary(result) == "All fields look good."

    def test_summary_lists_errors(self, validator):
        result = validator.validate_expense("", "abc", "2024-01-01")
        summary = validator.get_user_friendly_summary(result)
        assert "Please enter a valid amount." in summary
        assert "Category is required." in summary
