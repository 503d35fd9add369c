"""
Audit Models for recordkeeper

Every command issued against a store, and every storage failure, produces
an audit event. Events are rendered through structlog and kept for the
session so a front end (or a test) can see what happened.

DESIGN DECISION: Audit events are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Loading
    RECORDS_LOADED = "records_loaded"
    LOAD_FAILED = "load_failed"
    LINE_SKIPPED = "line_skipped"

    # Mutations
    RECORD_ADDED = "record_added"
    RECORD_REMOVED = "record_removed"
    RECORD_COMPLETED = "record_completed"
    RECORDS_SORTED = "records_sorted"

    # Rejected commands
    VALIDATION_FAILED = "validation_failed"
    INVALID_POSITION = "invalid_position"

    # Persistence
    SAVE_FAILED = "save_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - which store and which record?
    record_type: Optional[str] = Field(
        default=None,
        description="Record type ('expense' or 'task')"
    )
    position: Optional[int] = Field(
        default=None,
        description="1-based position the event relates to"
    )

    # Correlation - all events of one session share an ID
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "record_type": self.record_type,
            "position": self.position,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.record_added("expense", 3, "Food | 12.5 | 2024-01-01")
        event = AuditEventBuilder.save_failed("task", "tasks.txt", "Permission denied")
    """

    @staticmethod
    def records_loaded(
        record_type: str,
        path: str,
        count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORDS_LOADED,
            record_type=record_type,
            correlation_id=correlation_id,
            description=f"Loaded {count} {record_type} records from {path}",
            details={"path": path, "count": count},
        )

    @staticmethod
    def load_failed(
        record_type: str,
        path: str,
        line_number: Optional[int],
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOAD_FAILED,
            severity=AuditSeverity.WARNING,
            record_type=record_type,
            correlation_id=correlation_id,
            description=f"Could not load {record_type} records from {path}; starting empty",
            details={"path": path, "line_number": line_number},
            error_message=error_message,
        )

    @staticmethod
    def line_skipped(
        record_type: str,
        path: str,
        line_number: int,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LINE_SKIPPED,
            severity=AuditSeverity.WARNING,
            record_type=record_type,
            correlation_id=correlation_id,
            description=f"Skipped malformed line {line_number} in {path}",
            details={"path": path, "line_number": line_number},
            error_message=error_message,
        )

    @staticmethod
    def record_added(
        record_type: str,
        position: int,
        line: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_ADDED,
            record_type=record_type,
            position=position,
            correlation_id=correlation_id,
            description=f"{record_type.capitalize()} added at position {position}",
            details={"line": line},
            is_user_action=True,
        )

    @staticmethod
    def record_removed(
        record_type: str,
        position: int,
        line: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_REMOVED,
            record_type=record_type,
            position=position,
            correlation_id=correlation_id,
            description=f"{record_type.capitalize()} removed from position {position}",
            details={"line": line},
            is_user_action=True,
        )

    @staticmethod
    def record_completed(
        record_type: str,
        position: int,
        line: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_COMPLETED,
            record_type=record_type,
            position=position,
            correlation_id=correlation_id,
            description=f"{record_type.capitalize()} at position {position} marked complete",
            details={"line": line},
            is_user_action=True,
        )

    @staticmethod
    def records_sorted(
        record_type: str,
        sort_key: str,
        count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORDS_SORTED,
            severity=AuditSeverity.DEBUG,
            record_type=record_type,
            correlation_id=correlation_id,
            description=f"{count} {record_type} records sorted by {sort_key}",
            details={"sort_key": sort_key, "count": count},
        )

    @staticmethod
    def validation_failed(
        record_type: str,
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            record_type=record_type,
            correlation_id=correlation_id,
            description=f"{record_type.capitalize()} input rejected with {len(issues)} issues",
            details={"issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def invalid_position(
        record_type: str,
        position: Any,
        size: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INVALID_POSITION,
            severity=AuditSeverity.WARNING,
            record_type=record_type,
            correlation_id=correlation_id,
            description=f"Invalid {record_type} number: {position!r} (have {size})",
            details={"requested": str(position), "size": size},
            is_user_action=True,
        )

    @staticmethod
    def save_failed(
        record_type: str,
        path: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            record_type=record_type,
            correlation_id=correlation_id,
            description=f"Failed to save {record_type} records to {path}",
            details={"path": path},
            error_message=error_message,
        )
