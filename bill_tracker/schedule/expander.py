"""
Recurring Bill Schedule

Expands one manually entered bill into N monthly installments.

DESIGN DECISION: Month arithmetic works on (year, month, day) only.
A due date on the 31st becomes the last day of shorter months
(Jan 31 -> Feb 29 -> Mar 31 ...); it never spills into the next month.

The generated bills share nothing but a title prefix. There is no series
id, so a whole series cannot be edited or deleted in one operation.
"""

from datetime import MAXYEAR, MINYEAR, date

from bill_tracker.dates import last_day_of_month
from bill_tracker.models.bill import BillDraft, BillStatus, BillStub

MAX_REPEAT_COUNT = 360


class RecurrenceCountError(ValueError):
    """Repeat count outside the supported range."""

    def __init__(self, count: int, max_count: int):
        self.count = count
        self.max_count = max_count
        super().__init__(
            f"Repeat count must be between 1 and {max_count}, got {count}"
        )


def add_months(base: date, months: int) -> date:
    """
    Move a date forward by whole months, clamping the day.

    add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)

    Raises:
        ValueError: If the result falls outside years 1..9999
    """
    month_index = base.month - 1 + months
    year = base.year + month_index // 12
    if not MINYEAR <= year <= MAXYEAR:
        raise ValueError(
            f"{base.isoformat()} plus {months} months is outside years {MINYEAR}..{MAXYEAR}"
        )
    month = month_index % 12 + 1
    day = min(base.day, last_day_of_month(year, month))
    return date(year, month, day)


def installment_title(title: str, index: int, count: int) -> str:
    """Title of installment `index` (0-based) out of `count`."""
    if count == 1:
        return title
    return f"{title} ({index + 1}/{count})"


def expand_schedule(
    stub: BillStub,
    count: int = 1,
    max_count: int = MAX_REPEAT_COUNT,
) -> list[BillDraft]:
    """
    Build `count` monthly bills starting at the stub's due date.

    count == 1 gives exactly the bill a single manual entry would create
    (same title, no suffix).

    Raises:
        RecurrenceCountError: If count is not in 1..max_count
        ValueError: If the series would run past year 9999
    """
    if count < 1 or count > max_count:
        raise RecurrenceCountError(count, max_count)

    return [
        BillDraft(
            title=installment_title(stub.title, i, count),
            value=stub.value,
            due_date=add_months(stub.due_date, i),
            status=BillStatus.PENDING,
        )
        for i in range(count)
    ]
