"""
Field splitting and amount normalization.

Bill files come from banks, spreadsheets saved as CSV, and hand-edited
text. The same amount may be written "1.234,56" (Brazilian/European),
"1,234.56" (US) or "R$ 1234,56". These helpers turn such cells into
Decimal values.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Literal

DecimalSeparator = Literal["auto", ",", "."]

# Currency symbols/codes and any whitespace (incl. non-breaking space)
_CURRENCY_MARKERS = re.compile(r"R\$|BRL|USD|EUR|[$€£₹\s]", re.IGNORECASE)

_QUOTES = ("'", '"')


def strip_quotes(field: str) -> str:
    """Remove one layer of matching surrounding quotes."""
    if len(field) >= 2 and field[0] in _QUOTES and field[-1] == field[0]:
        return field[1:-1].strip()
    return field


def split_fields(line: str, delimiter: str) -> list[str]:
    """
    Split a line on the delimiter, trim every field and strip one
    layer of quotes.

    Used identically by the header classifier and the row parser.
    """
    return [strip_quotes(field.strip()) for field in line.split(delimiter)]


def normalize_value(raw: str, decimal_separator: DecimalSeparator = "auto") -> Decimal:
    """
    Parse an amount cell into a Decimal.

    With decimal_separator="auto" the convention is guessed per value:
    if the last comma comes after the last dot (or there is a comma and no
    dot) the comma is the decimal point and dots group thousands;
    otherwise commas group thousands. "1,234" is therefore read as 1.234.

    Raises:
        ValueError: If the cleaned text is not a finite number
    """
    cleaned = _CURRENCY_MARKERS.sub("", raw)
    if not cleaned:
        raise ValueError(f"No number in {raw!r}")

    if decimal_separator == "auto":
        comma_is_decimal = cleaned.rfind(",") > cleaned.rfind(".")
    else:
        comma_is_decimal = decimal_separator == ","

    if comma_is_decimal:
        cleaned = cleaned.replace(".", "").replace(",", ".")
    else:
        cleaned = cleaned.replace(",", "")

    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"Not a number: {raw!r}") from None

    if not value.is_finite():
        raise ValueError(f"Not a finite number: {raw!r}")

    return value
