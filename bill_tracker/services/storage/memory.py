"""
In-Memory Storage Implementation

Default backend and the one the tests use. Nothing survives the process.
"""

from datetime import date
from typing import Optional
from uuid import UUID

from bill_tracker.models.bill import BillDraft, BillStatus
from bill_tracker.models.audit import AuditEvent
from bill_tracker.services.storage.interface import (
    AuditStorageInterface,
    BillStorageInterface,
    DuplicateError,
    NotFoundError,
)


def filter_bills(
    bills: list[BillDraft],
    status: Optional[BillStatus] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    title: Optional[str] = None,
    limit: int = 100,
    offset: int = 0,
) -> list[BillDraft]:
    """Apply list_bills() filters to a list of bills (we filter in Python)."""
    results = []

    for bill in bills:
        if status and bill.status != status:
            continue
        if date_from and bill.due_date < date_from:
            continue
        if date_to and bill.due_date > date_to:
            continue
        if title and title.lower() not in bill.title.lower():
            continue
        results.append(bill)

    results.sort(key=lambda b: b.due_date)
    return results[offset:offset + limit]


class InMemoryBillStorage(BillStorageInterface):
    """Bill storage backed by a dict keyed by bill id."""

    def __init__(self):
        self._bills: dict[UUID, BillDraft] = {}

    def __len__(self) -> int:
        return len(self._bills)

    async def save_bill(self, bill: BillDraft) -> bool:
        if bill.id in self._bills:
            raise DuplicateError(f"Bill {bill.id} already exists")
        self._bills[bill.id] = bill
        return True

    async def get_bill_by_id(self, bill_id: UUID) -> Optional[BillDraft]:
        return self._bills.get(bill_id)

    async def update_bill(self, bill: BillDraft) -> bool:
        if bill.id not in self._bills:
            raise NotFoundError(f"Bill {bill.id} not found")
        self._bills[bill.id] = bill
        return True

    async def delete_bill(self, bill_id: UUID) -> bool:
        if bill_id not in self._bills:
            raise NotFoundError(f"Bill {bill_id} not found")
        del self._bills[bill_id]
        return True

    async def list_bills(
        self,
        status: Optional[BillStatus] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        title: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[BillDraft]:
        return filter_bills(
            list(self._bills.values()),
            status=status,
            date_from=date_from,
            date_to=date_to,
            title=title,
            limit=limit,
            offset=offset,
        )


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only audit log kept in a list."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        events = [e for e in self._events if e.correlation_id == correlation_id]
        return sorted(events, key=lambda e: e.timestamp)

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]
