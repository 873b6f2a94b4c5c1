"""Order sheet export.

Writes a selection plus customer details to an ``.xlsx`` workbook with a
fixed header block followed by the product table:

    A1   title (merged A1:E1)
    A3   section heading (merged A3:E3)
    A4-9 customer label/value pairs
    A11  table header: code, name, name2, size code, quantity
    A12+ one row per selected product
"""

from dataclasses import dataclass, field
from datetime import date
from io import BytesIO

import structlog
from openpyxl import Workbook

from ordersheet.domain.exceptions import CustomerInfoError, EmptySelectionError
from ordersheet.domain.selection import SelectedProduct, natural_size_key
from ordersheet.infrastructure.config import settings

logger = structlog.get_logger()

SHEET_NAME = "注文シート"
SECTION_HEADING = "ご注文情報"
TABLE_HEADER = ("商品コード", "商品名", "商品名２", "サイズコード", "数量")
COLUMN_WIDTHS = {"A": 25, "B": 30, "C": 20, "D": 15, "E": 10}

CUSTOMER_ROW = 4
TABLE_HEADER_ROW = 11


@dataclass
class CustomerInfo:
    """Customer details printed in the order sheet header.

    Attributes:
        company: Company name (required).
        contact: Contact person (required).
        phone: Phone number.
        email: Email address.
        order_date: Order date, ISO format. Defaults to today.
        delivery_date: Requested delivery date.
    """

    company: str
    contact: str
    phone: str = ""
    email: str = ""
    order_date: str = field(default_factory=lambda: date.today().isoformat())
    delivery_date: str = ""

    def missing_fields(self) -> list[str]:
        """Required fields that are blank after trimming."""
        missing = []
        if not (self.company or "").strip():
            missing.append("company")
        if not (self.contact or "").strip():
            missing.append("contact")
        return missing

    def validate(self) -> None:
        """Raise CustomerInfoError if a required field is blank."""
        missing = self.missing_fields()
        if missing:
            raise CustomerInfoError(missing)

    def header_rows(self) -> list[tuple[str, str]]:
        return [
            ("社名", self.company),
            ("担当者名", self.contact),
            ("連絡先", self.phone),
            ("メールアドレス", self.email),
            ("発注日", self.order_date),
            ("納品希望日", self.delivery_date),
        ]


def order_rows(items: list[SelectedProduct], sort_by_size: bool = False) -> list[tuple]:
    """Shape selection entries into table rows.

    Args:
        items: Selected products in selection order.
        sort_by_size: Order rows by size code, naturally, empties last.

    Returns:
        Tuples of (code, name, name2, size code, quantity).
    """
    if sort_by_size:
        items = sorted(items, key=lambda item: natural_size_key(item.product.size_code))
    return [
        (
            item.product.code,
            item.product.name,
            item.product.name2 or "",
            item.product.size_code or "",
            item.quantity,
        )
        for item in items
    ]


def build_order_sheet(
    items: list[SelectedProduct],
    customer: CustomerInfo,
    sort_by_size: bool = False,
    title: str | None = None,
) -> bytes:
    """Build the order sheet workbook.

    Args:
        items: Selected products.
        customer: Customer details.
        sort_by_size: Order product rows by size code.
        title: Sheet title. Defaults to ``settings.order_sheet_title``.

    Returns:
        The ``.xlsx`` file contents.

    Raises:
        CustomerInfoError: If company or contact is blank.
        EmptySelectionError: If there is nothing to export.
    """
    customer.validate()
    if not items:
        raise EmptySelectionError()

    workbook = Workbook()
    sheet = workbook.active
    sheet.title = SHEET_NAME

    sheet["A1"] = title or settings.order_sheet_title
    sheet.merge_cells("A1:E1")
    sheet["A3"] = SECTION_HEADING
    sheet.merge_cells("A3:E3")

    for offset, (label, value) in enumerate(customer.header_rows()):
        row = CUSTOMER_ROW + offset
        sheet.cell(row=row, column=1, value=label)
        sheet.cell(row=row, column=2, value=value)

    for column, heading in enumerate(TABLE_HEADER, start=1):
        sheet.cell(row=TABLE_HEADER_ROW, column=column, value=heading)

    rows = order_rows(items, sort_by_size=sort_by_size)
    for row_offset, values in enumerate(rows, start=1):
        for column, value in enumerate(values, start=1):
            sheet.cell(row=TABLE_HEADER_ROW + row_offset, column=column, value=value)

    for letter, width in COLUMN_WIDTHS.items():
        sheet.column_dimensions[letter].width = width

    buffer = BytesIO()
    workbook.save(buffer)

    logger.info(
        "Order sheet built",
        company=customer.company,
        rows=len(rows),
        sorted_by_size=sort_by_size,
    )
    return buffer.getvalue()


def order_sheet_filename(customer: CustomerInfo) -> str:
    """File name for a customer's order sheet."""
    company = (customer.company or "").strip() or "御中"
    return f"{SHEET_NAME}_{company}.xlsx"
