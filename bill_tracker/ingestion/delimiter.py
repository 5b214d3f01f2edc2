"""Field delimiter detection."""

SEMICOLON = ";"
COMMA = ","


def detect_delimiter(text: str) -> str:
    """
    Pick the field separator from the first line that has content.

    Counts ";" and "," on that line only. Ties go to ";": in the
    comma-decimal locales these files usually come from, "," is far more
    likely to appear inside amounts than to separate fields.
    """
    first_line = next(
        (line for line in text.splitlines() if line.strip()),
        "",
    )

    if first_line.count(SEMICOLON) >= first_line.count(COMMA):
        return SEMICOLON
    return COMMA
