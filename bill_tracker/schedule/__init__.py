"""Recurring bill schedule package."""

from bill_tracker.schedule.expander import (
    MAX_REPEAT_COUNT,
    RecurrenceCountError,
    add_months,
    expand_schedule,
    installment_title,
)

__all__ = [
    "MAX_REPEAT_COUNT",
    "RecurrenceCountError",
    "add_months",
    "expand_schedule",
    "installment_title",
]
