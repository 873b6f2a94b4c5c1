"""Bulk product import from spreadsheet files.

Only Office Open XML workbooks (.xlsx) are supported; legacy .xls files
are rejected as unreadable. The first worksheet is read. Its first row is a
header and is skipped; columns 1-4 of every following row are code, name,
name2 and size code.
Rows that do not satisfy the product precondition are dropped.
"""

from io import BytesIO
from typing import Any
from zipfile import BadZipFile

import openpyxl
import structlog
from openpyxl.utils.exceptions import InvalidFileException

from ordersheet.catalog.models import ProductDraft
from ordersheet.domain.exceptions import CatalogImportError

logger = structlog.get_logger()

IMPORT_COLUMNS = ("code", "name", "name2", "size_code")


def parse_product_workbook(data: bytes, filename: str | None = None) -> list[ProductDraft]:
    """Parse an ``.xlsx`` file into product drafts.

    Args:
        data: Raw file contents.
        filename: Original file name, for error reporting.

    Returns:
        Valid drafts in row order.

    Raises:
        CatalogImportError: If the file cannot be read or has no valid rows.
    """
    try:
        workbook = openpyxl.load_workbook(BytesIO(data), read_only=True, data_only=True)
    except (InvalidFileException, BadZipFile, KeyError, ValueError, OSError) as e:
        logger.warning("Unreadable import file", filename=filename, error=str(e))
        raise CatalogImportError(
            "the file is not a readable .xlsx workbook (.xls is not supported)",
            filename,
        ) from e

    try:
        worksheet = workbook.worksheets[0]
        rows = list(worksheet.iter_rows(min_row=2, values_only=True))
    finally:
        workbook.close()

    drafts = [draft for draft in (_row_to_draft(row) for row in rows) if draft.is_valid()]

    logger.info(
        "Parsed import file",
        filename=filename,
        rows=len(rows),
        valid=len(drafts),
    )

    if not drafts:
        raise CatalogImportError(
            "no valid product rows (need code and name, or name and name2)",
            filename,
        )
    return drafts


def _row_to_draft(row: tuple[Any, ...]) -> ProductDraft:
    values = [_cell_text(row[i]) if i < len(row) else "" for i in range(len(IMPORT_COLUMNS))]
    return ProductDraft(**dict(zip(IMPORT_COLUMNS, values)))


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()
