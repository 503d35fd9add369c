"""Tests for the audit logger."""

from uuid import uuid4

from recordkeeper.audit import AuditLogger, create_correlation_id
from recordkeeper.models.audit import AuditEvent, AuditEventType, AuditSeverity


class TestAuditLogger:
    """Tests for AuditLogger."""

    def test_log_stamps_correlation_id(self):
        """Events without a correlation ID get the session's."""
        audit = AuditLogger()
        event = audit.log(AuditEvent(event_type=AuditEventType.RECORD_ADDED, description="added"))
        assert event.correlation_id == audit.correlation_id

    def test_log_keeps_existing_correlation_id(self):
        audit = AuditLogger()
        other = uuid4()
        event = audit.log(AuditEvent(
            event_type=AuditEventType.RECORD_ADDED,
            description="added",
            correlation_id=other,
        ))
        assert event.correlation_id == other

    def test_explicit_session_id(self):
        session = create_correlation_id()
        assert AuditLogger(correlation_id=session).correlation_id == session

    def test_events_are_kept_in_order(self):
        audit = AuditLogger()
        audit.log_record_added("expense", 1, "Food | 1 | 2024-01-01")
        audit.log_record_removed("expense", 1, "Food | 1 | 2024-01-01")
        audit.log_save_failed("expense", "expenses.txt", "read-only file system")

        assert [e.event_type for e in audit.events] == [
            AuditEventType.RECORD_ADDED,
            AuditEventType.RECORD_REMOVED,
            AuditEventType.SAVE_FAILED,
        ]
        assert audit.events[-1].severity == AuditSeverity.ERROR

    def test_events_returns_a_copy(self):
        audit = AuditLogger()
        audit.log_records_loaded("task", "tasks.txt", 3)
        audit.events.clear()
        assert len(audit.events) == 1

    def test_validation_failure_details(self):
        audit = AuditLogger()
        issues = [{"field": "amount", "type": "invalid_number", "message": "Bad"}]
        audit.log_validation_failed("expense", issues)

        event = audit.events[0]
        assert event.severity == AuditSeverity.WARNING
        assert event.details["issues"] == issues
        assert event.is_user_action is True
