"""
Import template.

A ready-made file users can download, fill in and import. Its header
names are the canonical ones the header classifier recognizes.
"""

from pathlib import Path
from typing import Union

TEMPLATE_FILENAME = "bill_import_template.csv"

TEMPLATE_CSV = (
    "Description;Value;Due Date;Barcode\n"
    "Electricity;150,50;10/12/2024;\n"
    "Internet;99,90;15/12/2024;\n"
)


def write_template(path: Union[str, Path]) -> Path:
    """
    Write the template to `path`.

    If `path` is a directory the file is created inside it under
    TEMPLATE_FILENAME. Returns the file written.
    """
    target = Path(path)
    if target.is_dir():
        target = target / TEMPLATE_FILENAME
    target.write_text(TEMPLATE_CSV, encoding="utf-8")
    return target
