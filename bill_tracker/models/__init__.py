"""
Data Models Package

This package contains all Pydantic models used in Bill Tracker.
All data flowing through the system must conform to these schemas.
"""

from bill_tracker.models.bill import (
    BillDraft,
    BillStatus,
    BillStub,
    ColumnMapping,
    DashboardStats,
    ImportSummary,
    RowAccepted,
    RowOutcome,
    RowSkipped,
    SkipReason,
)
from bill_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Bill models
    "BillDraft",
    "BillStatus",
    "BillStub",
    "ColumnMapping",
    "DashboardStats",
    "ImportSummary",
    "RowAccepted",
    "RowOutcome",
    "RowSkipped",
    "SkipReason",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
