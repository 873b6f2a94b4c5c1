"""Domain exceptions.

Errors raised where an operation cannot produce a result at all. Ordinary
validation rejections (duplicate codes, missing names) are reported as
boolean or structured results instead and never reach this module.
"""

from typing import Any


class OrderSheetError(Exception):
    """Base class for all order desk exceptions.

    All domain errors should inherit from this class to allow
    catching them at the application and API layers.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize order desk error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Catalog Errors
# ============================================================================


class CatalogImportError(OrderSheetError):
    """Raised when a bulk-import file cannot be turned into drafts.

    Nothing from the file is added to the catalog when this is raised.
    """

    def __init__(self, reason: str, filename: str | None = None) -> None:
        """Initialize catalog import error.

        Args:
            reason: Explanation of why the file was rejected.
            filename: Name of the uploaded file, if known.
        """
        super().__init__(
            f"Could not import products: {reason}",
            details={"reason": reason, "filename": filename},
        )


# ============================================================================
# Selection Errors
# ============================================================================


class SelectionError(OrderSheetError):
    """Base class for selection-related errors."""

    pass


class InvalidQuantityError(SelectionError):
    """Raised when an invalid quantity is provided."""

    def __init__(self, quantity: int, reason: str = "Quantity must be at least 1") -> None:
        """Initialize invalid quantity error.

        Args:
            quantity: The invalid quantity value.
            reason: Explanation of why the quantity is invalid.
        """
        super().__init__(
            f"Invalid quantity {quantity}: {reason}",
            details={"quantity": quantity, "reason": reason},
        )


class ProductNotFoundError(SelectionError):
    """Raised when a selection refers to a product missing from the catalog."""

    def __init__(self, product_id: int) -> None:
        """Initialize product not found error.

        Args:
            product_id: ID of the missing product.
        """
        super().__init__(
            f"Product {product_id} not found in catalog",
            details={"product_id": product_id},
        )


# ============================================================================
# Export Errors
# ============================================================================


class OrderExportError(OrderSheetError):
    """Base class for order sheet export errors."""

    pass


class CustomerInfoError(OrderExportError):
    """Raised when required customer fields are blank."""

    def __init__(self, missing_fields: list[str]) -> None:
        """Initialize customer info error.

        Args:
            missing_fields: Names of the required fields that were blank.
        """
        super().__init__(
            f"Required customer fields are blank: {', '.join(missing_fields)}",
            details={"missing_fields": missing_fields},
        )


class EmptySelectionError(OrderExportError):
    """Raised when exporting a selection with no products."""

    def __init__(self, session_id: str | None = None) -> None:
        """Initialize empty selection error.

        Args:
            session_id: Session whose selection was empty.
        """
        super().__init__(
            "Cannot export an empty selection",
            details={"session_id": session_id},
        )
