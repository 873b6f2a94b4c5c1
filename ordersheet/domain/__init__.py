"""Domain layer module.

Selection working set, size ordering, and domain exceptions.
"""

from ordersheet.domain.exceptions import (
    CatalogImportError,
    CustomerInfoError,
    EmptySelectionError,
    InvalidQuantityError,
    OrderExportError,
    OrderSheetError,
    ProductNotFoundError,
    SelectionError,
)
from ordersheet.domain.selection import (
    SelectedProduct,
    SelectionWorkingSet,
    compare_size_codes,
    natural_size_key,
    sort_size_codes,
)

__all__ = [
    # Selection
    "SelectedProduct",
    "SelectionWorkingSet",
    "compare_size_codes",
    "natural_size_key",
    "sort_size_codes",
    # Exceptions
    "CatalogImportError",
    "CustomerInfoError",
    "EmptySelectionError",
    "InvalidQuantityError",
    "OrderExportError",
    "OrderSheetError",
    "ProductNotFoundError",
    "SelectionError",
]
