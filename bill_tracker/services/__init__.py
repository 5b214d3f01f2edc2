"""Services package."""

from bill_tracker.services.reporting import (
    CollectingReporter,
    ImportReporterInterface,
    LogReporter,
)
from bill_tracker.services.storage import (
    AuditStorageInterface,
    BillStorageInterface,
    DuplicateError,
    InMemoryAuditStorage,
    InMemoryBillStorage,
    JsonFileBillStorage,
    NotFoundError,
    StorageError,
)

__all__ = [
    # Reporting
    "CollectingReporter",
    "ImportReporterInterface",
    "LogReporter",
    # Storage
    "AuditStorageInterface",
    "BillStorageInterface",
    "DuplicateError",
    "InMemoryAuditStorage",
    "InMemoryBillStorage",
    "JsonFileBillStorage",
    "NotFoundError",
    "StorageError",
]
