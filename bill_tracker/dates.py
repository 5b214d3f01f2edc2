"""
Calendar date primitives.

Shared by the row parser (imported due dates) and the schedule
expander (manually entered due dates). Everything here works on plain
(year, month, day) values; no timestamps are involved, so no timezone or
DST offset can move a due date.
"""

import calendar
from datetime import date

# Shortest string that can still be a YYYY-M-D date
MIN_DATE_LENGTH = 8


def normalize_date_string(raw: str) -> str:
    """
    Rewrite a raw date cell into YYYY-MM-DD order.

    - "YYYY/MM/DD" -> "YYYY-MM-DD"
    - "DD/MM/YYYY" -> "YYYY-MM-DD"
    - anything without "/" is assumed to already be ISO and returned as is

    A slash date that does not have exactly three parts yields "".
    No calendar validation happens here; see parse_calendar_date().
    """
    raw = raw.strip()
    if "/" not in raw:
        return raw

    parts = [part.strip() for part in raw.split("/")]
    if len(parts) != 3:
        return ""

    if len(parts[0]) == 4:
        return f"{parts[0]}-{parts[1]}-{parts[2]}"
    return f"{parts[2]}-{parts[1]}-{parts[0]}"


def parse_calendar_date(value: str) -> date:
    """
    Turn a YYYY-MM-DD string into a date.

    Month and day may have one or two digits; the year must have four.

    Raises:
        ValueError: If the string is not a real calendar date
    """
    parts = value.strip().split("-")
    if len(parts) != 3 or not all(part.isdigit() for part in parts):
        raise ValueError(f"Not a YYYY-MM-DD date: {value!r}")

    year, month, day = parts
    if len(year) != 4:
        raise ValueError(f"Year must have four digits: {value!r}")
    if len(month) > 2 or len(day) > 2:
        raise ValueError(f"Month and day must have one or two digits: {value!r}")

    # date() raises ValueError for month 13, Feb 30, ...
    return date(int(year), int(month), int(day))


def last_day_of_month(year: int, month: int) -> int:
    """Number of days in the given month."""
    return calendar.monthrange(year, month)[1]
