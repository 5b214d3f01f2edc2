"""
Local JSON File Storage Implementation

DESIGN DECISION: A single JSON file holding the list of bills is enough
for a personal bill list, and the user can open it in any editor.

TRADEOFFS:
- The whole file is read and rewritten on every change
- No locking; one process at a time
- Filtering happens in Python

Follows the abstract interface, so it can be swapped for a database
without touching the flows.
"""

import json
from datetime import date
from pathlib import Path
from typing import Optional, Union
from uuid import UUID

from pydantic import ValidationError

from bill_tracker.models.bill import BillDraft, BillStatus
from bill_tracker.services.storage.interface import (
    BillStorageInterface,
    DuplicateError,
    NotFoundError,
    StorageError,
)
from bill_tracker.services.storage.memory import filter_bills


class JsonFileBillStorage(BillStorageInterface):
    """
    Bills stored as a JSON array of objects, one per bill.

    Amounts are written as strings so Decimal values round-trip exactly.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    def _load(self) -> dict[UUID, BillDraft]:
        """Read every bill from disk (missing file = no bills)."""
        if not self._path.exists():
            return {}
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8") or "[]")
            bills = [BillDraft.model_validate(item) for item in raw]
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise StorageError(f"Failed to read bills from {self._path}: {e}")
        return {bill.id: bill for bill in bills}

    def _dump(self, bills: dict[UUID, BillDraft]) -> None:
        """Write every bill back to disk."""
        payload = [bill.model_dump(mode="json") for bill in bills.values()]
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(
                json.dumps(payload, indent=2, ensure_ascii=False),
                encoding="utf-8",
            )
        except OSError as e:
            raise StorageError(f"Failed to write bills to {self._path}: {e}")

    async def save_bill(self, bill: BillDraft) -> bool:
        bills = self._load()
        if bill.id in bills:
            raise DuplicateError(f"Bill {bill.id} already exists")
        bills[bill.id] = bill
        self._dump(bills)
        return True

    async def get_bill_by_id(self, bill_id: UUID) -> Optional[BillDraft]:
        return self._load().get(bill_id)

    async def update_bill(self, bill: BillDraft) -> bool:
        bills = self._load()
        if bill.id not in bills:
            raise NotFoundError(f"Bill {bill.id} not found")
        bills[bill.id] = bill
        self._dump(bills)
        return True

    async def delete_bill(self, bill_id: UUID) -> bool:
        bills = self._load()
        if bill_id not in bills:
            raise NotFoundError(f"Bill {bill_id} not found")
        del bills[bill_id]
        self._dump(bills)
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
            list(self._load().values()),
            status=status,
            date_from=date_from,
            date_to=date_to,
            title=title,
            limit=limit,
            offset=offset,
        )
