"""
Bill File Import Pipeline

Drives delimiter detection -> header classification -> row parsing over
the whole text of a file and collects the outcome of every line.

This module is pure: it never touches storage or the user. The
ImportFlow in bill_tracker.orchestrator hands accepted bills to the
storage sink and the summary to the reporter.

Parsing is synchronous. Once the text is in memory nothing here waits
on I/O, so an import runs start to finish without yielding.
"""

from collections import Counter
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Optional

import structlog

from bill_tracker.config import ImportSettings
from bill_tracker.ingestion.delimiter import detect_delimiter
from bill_tracker.ingestion.header import classify_header
from bill_tracker.ingestion.row_parser import RowParser
from bill_tracker.models.bill import (
    BillDraft,
    ColumnMapping,
    RowAccepted,
    RowOutcome,
    RowSkipped,
    SkipReason,
)

logger = structlog.get_logger(__name__)

EMPTY_IMPORT_MESSAGE = (
    "No bills could be imported. Check the file format "
    "(expected: Description; Value; Due date)."
)
UNSUPPORTED_FILE_MESSAGE = (
    "Spreadsheet files are not supported. "
    "Please save your spreadsheet as a CSV file before importing."
)


class BillImportError(Exception):
    """Base exception for fatal import failures."""
    pass


class UnsupportedFileTypeError(BillImportError):
    """The file is a binary spreadsheet; nothing was parsed."""

    def __init__(self, filename: str, extension: str):
        self.filename = filename
        self.extension = extension
        super().__init__(UNSUPPORTED_FILE_MESSAGE)


class EmptyImportResultError(BillImportError):
    """Every line of the file was rejected."""

    def __init__(self, processed_count: int):
        self.processed_count = processed_count
        super().__init__(EMPTY_IMPORT_MESSAGE)


def check_file_type(
    filename: Optional[str],
    settings: Optional[ImportSettings] = None,
) -> None:
    """
    Refuse spreadsheet-binary files by extension.

    Runs before any byte of the file is decoded or parsed.

    Raises:
        UnsupportedFileTypeError: If the extension is on the rejected list
    """
    if not filename:
        return

    settings = settings or ImportSettings()
    extension = PurePath(filename).suffix.lower().lstrip(".")
    if extension and extension in settings.rejected_extensions_list:
        raise UnsupportedFileTypeError(filename, extension)


@dataclass
class ImportResult:
    """Everything the pipeline learned about one file."""
    delimiter: str
    mapping: ColumnMapping
    header_index: Optional[int]
    outcomes: list[RowOutcome] = field(default_factory=list)

    @property
    def bills(self) -> list[BillDraft]:
        return [o.bill for o in self.outcomes if isinstance(o, RowAccepted)]

    @property
    def skipped(self) -> list[RowSkipped]:
        return [o for o in self.outcomes if isinstance(o, RowSkipped)]

    @property
    def processed_count(self) -> int:
        return len(self.outcomes)

    @property
    def accepted_count(self) -> int:
        return len(self.bills)

    def skip_counts(self) -> dict[SkipReason, int]:
        return dict(Counter(o.reason for o in self.skipped))

    def raise_if_empty(self) -> None:
        """
        Raises:
            EmptyImportResultError: If no line produced a bill
        """
        if self.accepted_count == 0:
            raise EmptyImportResultError(self.processed_count)


def parse_bills(text: str, settings: Optional[ImportSettings] = None) -> ImportResult:
    """
    Parse the full text of a bill file.

    Blank lines are ignored; every other line after the header (or every
    other line, when there is no header) yields exactly one outcome.
    Individual bad lines never stop the parse.
    """
    settings = settings or ImportSettings()

    lines = text.splitlines()
    delimiter = detect_delimiter(text)
    scan = classify_header(lines, delimiter, settings.header_scan_lines)

    logger.debug(
        "bill_file_layout_detected",
        delimiter=delimiter,
        header_index=scan.header_index,
        mapping=scan.mapping.model_dump(),
    )

    parser = RowParser(delimiter, scan.mapping, settings.decimal_separator)
    result = ImportResult(
        delimiter=delimiter,
        mapping=scan.mapping,
        header_index=scan.header_index,
    )

    for index in range(scan.data_start, len(lines)):
        line = lines[index]
        if not line.strip():
            continue
        result.outcomes.append(parser.parse(line.strip(), line_number=index + 1))

    return result
