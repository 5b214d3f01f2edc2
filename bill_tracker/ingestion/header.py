"""
Header Row Classification

Bill files may or may not start with a header row, and the header may
sit below a few lines of bank boilerplate. We look at the first few
non-blank lines for cells that name one of our fields and, if we find
one, use that line to map fields to columns.

DESIGN DECISION: The recognized column names live in one table
(HEADER_SYNONYMS) instead of being spread over comparisons, so adding a
language or a bank's wording is a data change.
"""

import re
import unicodedata
from dataclasses import dataclass
from typing import Collection, Optional

from bill_tracker.ingestion.normalize import split_fields
from bill_tracker.models.bill import ColumnMapping


# Canonical field -> lowercase, accent-free synonyms.
# English first, then the Portuguese vocabulary of our own template.
HEADER_SYNONYMS: dict[str, frozenset[str]] = {
    "title": frozenset({
        "description", "title", "name", "store", "merchant", "history",
        "descricao", "titulo", "nome", "loja", "estabelecimento", "historico",
    }),
    "value": frozenset({
        "value", "price", "total", "amount", "debit",
        "valor", "preco", "quantia", "debito",
    }),
    "due_date": frozenset({
        "due date", "date", "day", "due",
        "vencimento", "data", "dia", "dt_venc", "venc",
    }),
    "barcode": frozenset({
        "code", "barcode", "line", "bill-line",
        "codigo", "barras", "linha", "boleto",
    }),
}

# A line is a header only if one of these matched; barcode alone is not enough
HEADER_DEFINING_FIELDS = ("title", "value", "due_date")


@dataclass(frozen=True)
class HeaderScan:
    """Result of the header search."""
    mapping: ColumnMapping
    header_index: Optional[int]  # 0-based index into the line list

    @property
    def data_start(self) -> int:
        """Index of the first line that may hold data."""
        return 0 if self.header_index is None else self.header_index + 1




def fold(text: str) -> str:
    """Lowercase and drop accents ("Descrição" -> "descricao")."""
    decomposed = unicodedata.normalize("NFKD", text.lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def _word_pattern(synonyms: frozenset[str]) -> re.Pattern:
    alternatives = "|".join(re.escape(s) for s in sorted(synonyms, key=len, reverse=True))
    return re.compile(rf"(?<![a-z0-9])(?:{alternatives})(?![a-z0-9])")


# Synonyms only count as whole words: "Due Date (dd/mm)" names the due
# date, "Holiday Inn" does not
_SYNONYM_PATTERNS: dict[str, re.Pattern] = {
    field: _word_pattern(synonyms) for field, synonyms in HEADER_SYNONYMS.items()
}


def matches_synonym(cell: str, field: str) -> bool:
    """
    Does a header cell name the given field?

    The cell matches if, once folded, it equals one of the field's
    synonyms or contains one as a whole word ("Data de Vencimento").
    """
    folded = fold(cell.strip())
    if not folded:
        return False
    return _SYNONYM_PATTERNS[field].search(folded) is not None


def _exact_column(folded: list[str], field: str, claimed: Collection[int]) -> Optional[int]:
    for index, cell in enumerate(folded):
        if index not in claimed and cell in HEADER_SYNONYMS[field]:
            return index
    return None


def _containing_column(cells: list[str], field: str, claimed: Collection[int]) -> Optional[int]:
    for index, cell in enumerate(cells):
        if index not in claimed and matches_synonym(cell, field):
            return index
    return None


def find_column(
    cells: list[str],
    field: str,
    claimed: Collection[int] = (),
) -> Optional[int]:
    """
    Index of the column naming the field, or None.

    Exact matches win over containment, so in "Title;Amount Due;Date"
    the due date is column 2, not column 1. Columns in `claimed` are
    never returned.
    """
    folded = [fold(cell.strip()) for cell in cells]
    index = _exact_column(folded, field, claimed)
    if index is None:
        index = _containing_column(cells, field, claimed)
    return index


def match_columns(cells: list[str]) -> dict[str, int]:
    """
    Field -> column for one candidate header line.

    Every field gets its exact match first; containment only fills the
    fields still unmatched, on columns nobody claimed. No two fields
    share a column.
    """
    folded = [fold(cell.strip()) for cell in cells]
    found: dict[str, int] = {}

    for field in HEADER_SYNONYMS:
        index = _exact_column(folded, field, set(found.values()))
        if index is not None:
            found[field] = index

    for field in HEADER_SYNONYMS:
        if field in found:
            continue
        index = _containing_column(cells, field, set(found.values()))
        if index is not None:
            found[field] = index

    return found


def _build_mapping(found: dict[str, int]) -> ColumnMapping:
    """
    Overlay matched columns on the default positions.

    A barcode match sitting on the default column of an unmatched field
    is dropped; the bill fields keep their column.
    """
    defaults = ColumnMapping().model_dump()
    overrides = dict(found)

    barcode = overrides.get("barcode")
    if barcode is not None:
        taken = {
            overrides.get(field, defaults[field]) for field in HEADER_DEFINING_FIELDS
        }
        if barcode in taken:
            del overrides["barcode"]

    return ColumnMapping(**overrides)


def classify_header(
    lines: list[str],
    delimiter: str,
    scan_limit: int = 10,
) -> HeaderScan:
    """
    Find the header row among the first `scan_limit` non-blank lines.

    The first line where a title, value or due date column is found is the
    header. Its matched columns replace the default positions
    (title=0, value=1, due_date=2, barcode=3); barcode moves only if a
    barcode column is named. With no header, the defaults are used and
    every line is data.
    """
    scanned = 0

    for index, line in enumerate(lines):
        if scanned >= scan_limit:
            break
        if not line.strip():
            continue
        scanned += 1

        found = match_columns(split_fields(line, delimiter))

        if any(field in found for field in HEADER_DEFINING_FIELDS):
            return HeaderScan(mapping=_build_mapping(found), header_index=index)

    return HeaderScan(mapping=ColumnMapping(), header_index=None)
