"""
Dashboard Queries

DESIGN DECISION: Totals are computed from stored bills only, with
Decimal arithmetic so cents never drift.
"""

import calendar
from datetime import date
from decimal import Decimal

from bill_tracker.models.bill import BillDraft, BillStatus, DashboardStats
from bill_tracker.services.storage import BillStorageInterface

# list_bills() page size when we need every bill
ALL_BILLS = 100_000


def compute_stats(
    bills: list[BillDraft],
    monthly_income: Decimal = Decimal("0"),
    extra_income: Decimal = Decimal("0"),
) -> DashboardStats:
    """
    Dashboard totals for a list of bills.

    percent_complete is the paid share of the total value (0 when there
    is nothing to pay); leftover is income minus everything owed.
    """
    paid_total = sum(
        (b.value for b in bills if b.status == BillStatus.PAID), Decimal("0")
    )
    remaining = sum(
        (b.value for b in bills if b.status == BillStatus.PENDING), Decimal("0")
    )
    total_value = paid_total + remaining

    percent = float(paid_total / total_value * 100) if total_value > 0 else 0.0

    return DashboardStats(
        pending_count=sum(1 for b in bills if b.status == BillStatus.PENDING),
        paid_total=paid_total,
        total_value=total_value,
        remaining_value=remaining,
        percent_complete=percent,
        leftover=monthly_income + extra_income - total_value,
    )


class DashboardQuery:
    """
    Read-only views over bill storage for the dashboard and calendar.
    """

    def __init__(self, storage: BillStorageInterface):
        self._storage = storage

    async def stats(
        self,
        monthly_income: Decimal = Decimal("0"),
        extra_income: Decimal = Decimal("0"),
    ) -> DashboardStats:
        """Totals across every stored bill."""
        bills = await self._storage.list_bills(limit=ALL_BILLS)
        return compute_stats(bills, monthly_income, extra_income)

    async def bills_for_month(self, year: int, month: int) -> list[BillDraft]:
        """Bills due in the given month, earliest first."""
        last_day = calendar.monthrange(year, month)[1]
        return await self._storage.list_bills(
            date_from=date(year, month, 1),
            date_to=date(year, month, last_day),
            limit=ALL_BILLS,
        )

    async def bills_due_on(self, day: date) -> list[BillDraft]:
        """Bills due on one calendar day."""
        return await self._storage.list_bills(
            date_from=day,
            date_to=day,
            limit=ALL_BILLS,
        )
