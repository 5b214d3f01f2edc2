"""
Audit Logger

DESIGN DECISION: Every significant action in the system is logged.
This provides:
1. An explanation for every line an import skipped
2. Debugging capability
3. A history of what the user added, paid and deleted

The audit logger:
- Is async so it fits the storage-backed flows
- Gracefully handles failures (doesn't crash the app if logging fails)
- Supports correlation IDs to trace related events
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from bill_tracker.models.audit import AuditEvent, AuditEventBuilder
from bill_tracker.services.storage import AuditStorageInterface


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


def configure_log_level(level: str) -> None:
    """Set the stdlib level structlog filters against (e.g. "INFO")."""
    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger().setLevel(level)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage, if one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("bill_tracker.audit")

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        elif event.severity.value == "debug":
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_import_started(
        self,
        import_id: UUID,
        filename: Optional[str],
        size_bytes: int,
        correlation_id: UUID,
    ) -> None:
        """Log the start of a file import."""
        await self.log(AuditEventBuilder.import_started(
            import_id=import_id,
            filename=filename,
            size_bytes=size_bytes,
            correlation_id=correlation_id,
        ))

    async def log_file_rejected(
        self,
        import_id: UUID,
        filename: Optional[str],
        reason: str,
        correlation_id: UUID,
    ) -> None:
        """Log a file refused before parsing."""
        await self.log(AuditEventBuilder.file_rejected(
            import_id=import_id,
            filename=filename,
            reason=reason,
            correlation_id=correlation_id,
        ))

    async def log_row_skipped(
        self,
        import_id: UUID,
        line_number: int,
        reason: str,
        detail: str,
        correlation_id: UUID,
    ) -> None:
        """Log one rejected data line."""
        await self.log(AuditEventBuilder.row_skipped(
            import_id=import_id,
            line_number=line_number,
            reason=reason,
            detail=detail,
            correlation_id=correlation_id,
        ))

    async def log_import_completed(
        self,
        import_id: UUID,
        imported: int,
        processed: int,
        skipped: dict[str, int],
        correlation_id: UUID,
    ) -> None:
        """Log a successful import."""
        await self.log(AuditEventBuilder.import_completed(
            import_id=import_id,
            imported=imported,
            processed=processed,
            skipped=skipped,
            correlation_id=correlation_id,
        ))

    async def log_import_failed(
        self,
        import_id: UUID,
        reason: str,
        processed: int,
        correlation_id: UUID,
    ) -> None:
        """Log an import that ended without bills."""
        await self.log(AuditEventBuilder.import_failed(
            import_id=import_id,
            reason=reason,
            processed=processed,
            correlation_id=correlation_id,
        ))

    async def log_schedule_created(
        self,
        title: str,
        count: int,
        bill_ids: list[UUID],
        correlation_id: UUID,
    ) -> None:
        """Log a manual entry (single bill or installment series)."""
        await self.log(AuditEventBuilder.schedule_created(
            title=title,
            count=count,
            bill_ids=bill_ids,
            correlation_id=correlation_id,
        ))

    async def log_bill_saved(
        self,
        bill_id: UUID,
        title: str,
        amount: str,
        correlation_id: UUID,
    ) -> None:
        """Log bill save."""
        await self.log(AuditEventBuilder.bill_saved(
            bill_id=bill_id,
            title=title,
            amount=amount,
            correlation_id=correlation_id,
        ))

    async def log_bill_paid(self, bill_id: UUID, correlation_id: UUID) -> None:
        await self.log(AuditEventBuilder.bill_paid(
            bill_id=bill_id,
            correlation_id=correlation_id,
        ))

    async def log_bill_updated(self, bill_id: UUID, correlation_id: UUID) -> None:
        await self.log(AuditEventBuilder.bill_updated(
            bill_id=bill_id,
            correlation_id=correlation_id,
        ))

    async def log_bill_deleted(self, bill_id: UUID, correlation_id: UUID) -> None:
        await self.log(AuditEventBuilder.bill_deleted(
            bill_id=bill_id,
            correlation_id=correlation_id,
        ))

    async def log_storage_error(
        self,
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a storage failure."""
        await self.log(AuditEventBuilder.storage_error(
            operation=operation,
            error_message=error_message,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., a file import).
    Pass it through all subsequent operations.
    """
    return uuid4()
