"""
Audit Logger

Every command issued against a store is logged, together with every
storage failure. This gives:
1. A trace of what the user did during the session
2. Visibility of load and save failures that the UI may not surface
3. An event history a front end or test can inspect

The audit logger:
- Is synchronous (the stores are)
- Never raises; logging must not break a command
- Stamps every event with the session's correlation ID
"""

import logging
from typing import Any, Optional
from uuid import UUID, uuid4

import structlog

from recordkeeper.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(log_level: str = "INFO") -> None:
    """
    Route structlog output through the stdlib root logger at log_level.

    structlog renders JSON; stdlib only decides level and destination.
    """
    logging.basicConfig(format="%(message)s", level=log_level.upper())
    logging.getLogger().setLevel(log_level.upper())


class AuditLogger:
    """
    Central audit logging service.

    Logs events to the structured local log and keeps them in memory
    for the lifetime of the session.
    """

    def __init__(self, correlation_id: Optional[UUID] = None):
        """
        Initialize audit logger.

        Args:
            correlation_id: Session ID stamped on every event.
                            A new one is created if not given.
        """
        self.correlation_id = correlation_id or create_correlation_id()
        self._events: list[AuditEvent] = []
        self._logger = structlog.get_logger("recordkeeper.audit")

    @property
    def events(self) -> list[AuditEvent]:
        """Events logged so far, oldest first."""
        return list(self._events)

    def log(self, event: AuditEvent) -> AuditEvent:
        """
        Log an audit event.

        Returns the event as recorded (with correlation ID filled in).
        """
        if event.correlation_id is None:
            event = event.model_copy(update={"correlation_id": self.correlation_id})

        self._events.append(event)

        log_dict = event.to_log_dict()
        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        return event

    def log_records_loaded(self, record_type: str, path: str, count: int) -> None:
        self.log(AuditEventBuilder.records_loaded(record_type, path, count))

    def log_load_failed(
        self,
        record_type: str,
        path: str,
        error_message: str,
        line_number: Optional[int] = None,
    ) -> None:
        self.log(AuditEventBuilder.load_failed(
            record_type=record_type,
            path=path,
            line_number=line_number,
            error_message=error_message,
        ))

    def log_line_skipped(
        self,
        record_type: str,
        path: str,
        line_number: int,
        error_message: str,
    ) -> None:
        self.log(AuditEventBuilder.line_skipped(
            record_type=record_type,
            path=path,
            line_number=line_number,
            error_message=error_message,
        ))

    def log_record_added(self, record_type: str, position: int, line: str) -> None:
        self.log(AuditEventBuilder.record_added(record_type, position, line))

    def log_record_removed(self, record_type: str, position: int, line: str) -> None:
        self.log(AuditEventBuilder.record_removed(record_type, position, line))

    def log_record_completed(self, record_type: str, position: int, line: str) -> None:
        self.log(AuditEventBuilder.record_completed(record_type, position, line))

    def log_records_sorted(self, record_type: str, sort_key: str, count: int) -> None:
        self.log(AuditEventBuilder.records_sorted(record_type, sort_key, count))

    def log_validation_failed(self, record_type: str, issues: list[dict]) -> None:
        """Log rejected user input."""
        self.log(AuditEventBuilder.validation_failed(record_type, issues))

    def log_invalid_position(self, record_type: str, position: Any, size: int) -> None:
        self.log(AuditEventBuilder.invalid_position(record_type, position, size))

    def log_save_failed(self, record_type: str, path: str, error_message: str) -> None:
        """Log a failed rewrite of the backing file."""
        self.log(AuditEventBuilder.save_failed(record_type, path, error_message))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    One is created per session; every flow sharing an AuditLogger shares it.
    """
    return uuid4()
