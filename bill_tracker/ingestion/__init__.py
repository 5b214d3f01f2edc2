"""
Bill File Ingestion Package

Heuristic importer for loosely formatted delimited text files.
"""

from bill_tracker.ingestion.delimiter import detect_delimiter
from bill_tracker.ingestion.header import (
    HEADER_SYNONYMS,
    HeaderScan,
    classify_header,
    find_column,
    matches_synonym,
)
from bill_tracker.ingestion.importer import (
    EMPTY_IMPORT_MESSAGE,
    UNSUPPORTED_FILE_MESSAGE,
    BillImportError,
    EmptyImportResultError,
    ImportResult,
    UnsupportedFileTypeError,
    check_file_type,
    parse_bills,
)
from bill_tracker.ingestion.normalize import normalize_value, split_fields
from bill_tracker.ingestion.row_parser import RowParser

__all__ = [
    "EMPTY_IMPORT_MESSAGE",
    "UNSUPPORTED_FILE_MESSAGE",
    "HEADER_SYNONYMS",
    "BillImportError",
    "EmptyImportResultError",
    "HeaderScan",
    "ImportResult",
    "RowParser",
    "UnsupportedFileTypeError",
    "check_file_type",
    "classify_header",
    "detect_delimiter",
    "find_column",
    "matches_synonym",
    "normalize_value",
    "parse_bills",
    "split_fields",
]
