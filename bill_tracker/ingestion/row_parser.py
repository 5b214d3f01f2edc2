"""
Row Parser

Turns one data line into a RowAccepted (with a BillDraft) or a
RowSkipped (with the reason).

IMPORTANT: parse() never raises. A bad line is a skipped line; it must
not abort the rest of the file.
"""

from bill_tracker.dates import (
    MIN_DATE_LENGTH,
    normalize_date_string,
    parse_calendar_date,
)
from bill_tracker.ingestion.normalize import (
    DecimalSeparator,
    normalize_value,
    split_fields,
)
from bill_tracker.models.bill import (
    BillDraft,
    BillStatus,
    ColumnMapping,
    RowAccepted,
    RowOutcome,
    RowSkipped,
    SkipReason,
)


class RowParser:
    """
    Parses data lines with a fixed delimiter and column mapping.

    One instance is built per import, after the delimiter and header
    have been detected.
    """

    def __init__(
        self,
        delimiter: str,
        mapping: ColumnMapping,
        decimal_separator: DecimalSeparator = "auto",
    ):
        self._delimiter = delimiter
        self._mapping = mapping
        self._decimal_separator = decimal_separator

    @staticmethod
    def _cell(fields: list[str], index: int) -> str:
        return fields[index] if index < len(fields) else ""

    def parse(self, line: str, line_number: int) -> RowOutcome:
        """
        Parse one line.

        Args:
            line: The raw line (no newline)
            line_number: 1-based position in the file, for reporting

        Returns:
            RowAccepted or RowSkipped
        """
        def skip(reason: SkipReason, detail: str) -> RowSkipped:
            return RowSkipped(line_number=line_number, reason=reason, detail=detail)

        fields = split_fields(line, self._delimiter)
        if len(fields) < 2:
            return skip(SkipReason.MALFORMED_ROW, "Line has fewer than 2 fields")

        title = self._cell(fields, self._mapping.title)
        raw_value = self._cell(fields, self._mapping.value)
        raw_date = self._cell(fields, self._mapping.due_date)
        barcode = self._cell(fields, self._mapping.barcode)

        missing = [
            name
            for name, cell in (("title", title), ("value", raw_value), ("due date", raw_date))
            if not cell
        ]
        if missing:
            return skip(SkipReason.MISSING_FIELD, f"Empty {', '.join(missing)}")

        try:
            value = normalize_value(raw_value, self._decimal_separator)
        except ValueError as e:
            return skip(SkipReason.VALUE_PARSE_FAILURE, str(e))
        if value < 0:
            return skip(SkipReason.VALUE_PARSE_FAILURE, f"Negative amount: {raw_value!r}")

        date_text = normalize_date_string(raw_date)
        if len(date_text) < MIN_DATE_LENGTH:
            return skip(SkipReason.DATE_TOO_SHORT, f"Unusable date: {raw_date!r}")

        try:
            due_date = parse_calendar_date(date_text)
        except ValueError as e:
            return skip(SkipReason.INVALID_DATE, str(e))

        bill = BillDraft(
            title=title,
            value=value,
            due_date=due_date,
            status=BillStatus.PENDING,
            barcode=barcode or None,
        )
        return RowAccepted(line_number=line_number, bill=bill)
