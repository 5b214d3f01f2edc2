"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep the importer and flows unaware of where bills end up
2. Use in-memory storage for testing
3. Swap the local JSON file for a real database later

The interface is intentionally simple - we're not building a full ORM.
Just the operations the bill list needs.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional
from uuid import UUID

from bill_tracker.models.bill import BillDraft, BillStatus
from bill_tracker.models.audit import AuditEvent


class BillStorageInterface(ABC):
    """
    Abstract interface for bill storage operations.

    save_bill() is the "add bill" sink the importer and the manual entry
    flow write to.
    """

    @abstractmethod
    async def save_bill(self, bill: BillDraft) -> bool:
        """
        Save a new bill.

        Args:
            bill: The validated bill to save

        Returns:
            True if saved successfully

        Raises:
            DuplicateError: If a bill with the same id already exists
            StorageError: If save fails
        """
        pass

    @abstractmethod
    async def get_bill_by_id(self, bill_id: UUID) -> Optional[BillDraft]:
        """
        Retrieve a bill by its ID.

        Returns:
            The bill if found, None otherwise
        """
        pass

    @abstractmethod
    async def update_bill(self, bill: BillDraft) -> bool:
        """
        Replace an existing bill (matched by id).

        Raises:
            NotFoundError: If bill doesn't exist
            StorageError: If update fails
        """
        pass

    @abstractmethod
    async def delete_bill(self, bill_id: UUID) -> bool:
        """
        Delete a bill by ID.

        Raises:
            NotFoundError: If bill doesn't exist
        """
        pass

    @abstractmethod
    async def list_bills(
        self,
        status: Optional[BillStatus] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        title: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[BillDraft]:
        """
        List bills with optional filters, ordered by due date.

        Args:
            status: Filter by payment status
            date_from: Bills due on or after this date
            date_to: Bills due on or before this date
            title: Case-insensitive partial title match
            limit: Maximum number of results
            offset: Number of results to skip

        Returns:
            List of matching bills
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g., one file import).

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass
