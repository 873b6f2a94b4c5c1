"""Order sheet export."""

from ordersheet.export.order_sheet import (
    CustomerInfo,
    build_order_sheet,
    order_rows,
    order_sheet_filename,
)

__all__ = [
    "CustomerInfo",
    "build_order_sheet",
    "order_rows",
    "order_sheet_filename",
]
