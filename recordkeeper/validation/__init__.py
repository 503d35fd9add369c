"""Input validation package."""

from recordkeeper.validation.validator import RecordValidationError, RecordValidator

__all__ = ["RecordValidationError", "RecordValidator"]
