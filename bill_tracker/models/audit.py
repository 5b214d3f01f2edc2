"""
Audit Models for Bill Tracker

Every significant action in the system is logged for audit purposes.
This provides:
1. Traceability of every import (which file, which rows were skipped and why)
2. Debugging information when an import produces fewer bills than expected
3. A history of manual changes (bills added, paid, deleted)

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.
    """
    # File import
    IMPORT_STARTED = "import_started"
    FILE_REJECTED = "file_rejected"
    ROW_SKIPPED = "row_skipped"
    IMPORT_COMPLETED = "import_completed"
    IMPORT_FAILED = "import_failed"

    # Manual entry
    SCHEDULE_CREATED = "schedule_created"

    # Persistence
    BILL_SAVED = "bill_saved"
    BILL_PAID = "bill_paid"
    BILL_UPDATED = "bill_updated"
    BILL_DELETED = "bill_deleted"

    # System events
    STORAGE_ERROR = "storage_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
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

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'bill', 'import')"
    )
    entity_id: Optional[UUID] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., all events of one import)"
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

    # Error information (if applicable)
    error_code: Optional[str] = None
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
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.import_started(import_id, filename, correlation_id)
        event = AuditEventBuilder.bill_paid(bill_id, correlation_id)
    """

    @staticmethod
    def import_started(
        import_id: UUID,
        filename: Optional[str],
        size_bytes: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_STARTED,
            entity_type="import",
            entity_id=import_id,
            correlation_id=correlation_id,
            description=f"Import started: {filename or '<unnamed>'}",
            details={
                "filename": filename,
                "size_bytes": size_bytes,
            },
            is_user_action=True,
        )

    @staticmethod
    def file_rejected(
        import_id: UUID,
        filename: Optional[str],
        reason: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FILE_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="import",
            entity_id=import_id,
            correlation_id=correlation_id,
            description=f"File rejected before parsing: {filename or '<unnamed>'}",
            error_code="unsupported_file_type",
            error_message=reason,
            details={
                "filename": filename,
            },
        )

    @staticmethod
    def row_skipped(
        import_id: UUID,
        line_number: int,
        reason: str,
        detail: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ROW_SKIPPED,
            severity=AuditSeverity.DEBUG,
            entity_type="import",
            entity_id=import_id,
            correlation_id=correlation_id,
            description=f"Line {line_number} skipped: {reason}",
            details={
                "line_number": line_number,
                "reason": reason,
                "detail": detail,
            },
        )

    @staticmethod
    def import_completed(
        import_id: UUID,
        imported: int,
        processed: int,
        skipped: dict[str, int],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_COMPLETED,
            entity_type="import",
            entity_id=import_id,
            correlation_id=correlation_id,
            description=f"Import completed: {imported} of {processed} lines imported",
            details={
                "imported_count": imported,
                "processed_count": processed,
                "skipped": skipped,
            },
        )

    @staticmethod
    def import_failed(
        import_id: UUID,
        reason: str,
        processed: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="import",
            entity_id=import_id,
            correlation_id=correlation_id,
            description="Import failed",
            error_message=reason,
            details={
                "processed_count": processed,
            },
        )

    @staticmethod
    def schedule_created(
        title: str,
        count: int,
        bill_ids: list[UUID],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SCHEDULE_CREATED,
            entity_type="bill",
            entity_id=bill_ids[0] if bill_ids else None,
            correlation_id=correlation_id,
            description=f"{count} bill(s) created for: {title}",
            details={
                "count": count,
                "bill_ids": [str(bill_id) for bill_id in bill_ids],
            },
            is_user_action=True,
        )

    @staticmethod
    def bill_saved(
        bill_id: UUID,
        title: str,
        amount: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BILL_SAVED,
            entity_type="bill",
            entity_id=bill_id,
            correlation_id=correlation_id,
            description=f"Bill saved: {title} - {amount}",
            details={
                "title": title,
                "amount": amount,
            },
        )

    @staticmethod
    def bill_paid(
        bill_id: UUID,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BILL_PAID,
            entity_type="bill",
            entity_id=bill_id,
            correlation_id=correlation_id,
            description="Bill marked as paid",
            is_user_action=True,
        )

    @staticmethod
    def bill_updated(
        bill_id: UUID,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BILL_UPDATED,
            entity_type="bill",
            entity_id=bill_id,
            correlation_id=correlation_id,
            description="Bill updated",
            is_user_action=True,
        )

    @staticmethod
    def bill_deleted(
        bill_id: UUID,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BILL_DELETED,
            entity_type="bill",
            entity_id=bill_id,
            correlation_id=correlation_id,
            description="Bill deleted",
            is_user_action=True,
        )

    @staticmethod
    def storage_error(
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"Storage error during {operation}",
            error_message=error_message,
            details={
                "operation": operation,
            },
            correlation_id=correlation_id,
        )
