"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Bills live in memory or in a local JSON file; both are swappable.
"""

from bill_tracker.services.storage.interface import (
    AuditStorageInterface,
    BillStorageInterface,
    DuplicateError,
    NotFoundError,
    StorageError,
)
from bill_tracker.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryBillStorage,
)
from bill_tracker.services.storage.json_file import JsonFileBillStorage

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "BillStorageInterface",
    # Exceptions
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    # Implementations
    "InMemoryAuditStorage",
    "InMemoryBillStorage",
    "JsonFileBillStorage",
]
