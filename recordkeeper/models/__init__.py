"""
Data Models Package

This package contains all Pydantic models used in recordkeeper.
All data flowing between the stores and the front end conforms to these schemas.
"""

from recordkeeper.models.records import (
    FIELD_DELIMITER,
    ExpenseRecord,
    MalformedLinePolicy,
    OperationOutcome,
    OperationResult,
    StoredRecord,
    TaskPriority,
    TaskRecord,
    ValidationIssue,
    ValidationResult,
    parse_amount,
)
from recordkeeper.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Record models
    "FIELD_DELIMITER",
    "ExpenseRecord",
    "MalformedLinePolicy",
    "OperationOutcome",
    "OperationResult",
    "StoredRecord",
    "TaskPriority",
    "TaskRecord",
    "ValidationIssue",
    "ValidationResult",
    "parse_amount",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
