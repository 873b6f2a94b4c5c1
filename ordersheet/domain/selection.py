"""Selection working set.

The session-local, quantity-annotated list of products an order-taker is
building. Entries hold denormalized copies of catalog products; the catalog
stays the source of truth for every field except ``quantity``, which is
restored by ``reconcile`` after each catalog change.
"""

import re
from dataclasses import dataclass, replace
from functools import cmp_to_key
from typing import Iterator

import structlog

from ordersheet.catalog.models import Product
from ordersheet.domain.exceptions import InvalidQuantityError

logger = structlog.get_logger()

_DIGITS = re.compile(r"(\d+)")


# ============================================================================
# Size Ordering
# ============================================================================


def natural_size_key(size_code: str | None) -> tuple[bool, list[str | int]]:
    """Sort key for size codes.

    Digit runs compare numerically and text compares case-insensitively,
    so "S2" sorts before "S10". Empty size codes sort after everything.
    """
    size_code = size_code or ""
    # re.split keeps text at even and digit runs at odd positions
    parts: list[str | int] = [
        int(part) if index % 2 else part.casefold()
        for index, part in enumerate(_DIGITS.split(size_code))
    ]
    return (size_code == "", parts)


def compare_size_codes(a: str | None, b: str | None) -> int:
    """Three-way comparison of two size codes, empties last."""
    key_a, key_b = natural_size_key(a), natural_size_key(b)
    if key_a < key_b:
        return -1
    if key_a > key_b:
        return 1
    return 0


def sort_size_codes(size_codes: list[str]) -> list[str]:
    """Sort size codes naturally, empties last."""
    return sorted(size_codes, key=cmp_to_key(compare_size_codes))


# ============================================================================
# Selected Product
# ============================================================================


@dataclass
class SelectedProduct:
    """A catalog product with an order quantity.

    Attributes:
        product: Snapshot of the catalog product.
        quantity: Units ordered, at least 1.
    """

    product: Product
    quantity: int = 1

    @property
    def id(self) -> int:
        return self.product.id


# ============================================================================
# Working Set
# ============================================================================


class SelectionWorkingSet:
    """Ordered set of selected products, one entry per product id.

    Example usage:
        selection = SelectionWorkingSet("session-1")
        selection.add(product, quantity=2)
        selection.add(product, quantity=3)   # one entry, quantity 5
        selection.reconcile(catalog)         # refresh fields, drop deleted
    """

    def __init__(self, session_id: str = "default") -> None:
        """Initialize an empty selection.

        Args:
            session_id: Session that owns this selection.
        """
        self.session_id = session_id
        self._items: list[SelectedProduct] = []

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[SelectedProduct]:
        return iter(list(self._items))

    @property
    def items(self) -> list[SelectedProduct]:
        """Entries in selection order."""
        return list(self._items)

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self._items)

    def get(self, product_id: int) -> SelectedProduct | None:
        """Get the entry for a product, if selected."""
        for item in self._items:
            if item.id == product_id:
                return item
        return None

    def add(self, product: Product, quantity: int = 1) -> SelectedProduct:
        """Add a product, or add to its quantity if already selected.

        Args:
            product: Catalog product.
            quantity: Units to add.

        Returns:
            The created or updated entry.

        Raises:
            InvalidQuantityError: If quantity is below 1.
        """
        if quantity < 1:
            raise InvalidQuantityError(quantity)

        existing = self.get(product.id)
        if existing is not None:
            existing.quantity += quantity
            return existing

        item = SelectedProduct(product=replace(product), quantity=quantity)
        self._items.append(item)
        return item

    def remove(self, product_id: int) -> bool:
        """Remove a product outright. Returns False if it was not selected."""
        remaining = [item for item in self._items if item.id != product_id]
        removed = len(remaining) != len(self._items)
        self._items = remaining
        return removed

    def set_quantity(self, product_id: int, quantity: int) -> bool:
        """Replace the quantity for a selected product.

        Values below 1 are rejected and the prior quantity is kept.

        Returns:
            True if the quantity was replaced.
        """
        item = self.get(product_id)
        if item is None:
            return False
        if quantity < 1:
            logger.info(
                "Ignored quantity edit below 1",
                session_id=self.session_id,
                product_id=product_id,
                quantity=quantity,
                kept=item.quantity,
            )
            return False
        item.quantity = quantity
        return True

    def clear(self) -> None:
        self._items = []

    def reconcile(self, catalog: list[Product]) -> int:
        """Re-derive entries from a fresh catalog snapshot.

        Entries whose product still exists take every field from the catalog
        except ``quantity``. Entries whose product is gone are dropped. The
        remaining entries keep their order.

        Args:
            catalog: Current catalog snapshot.

        Returns:
            Number of entries dropped.
        """
        by_id = {product.id: product for product in catalog}
        reconciled: list[SelectedProduct] = []

        for item in self._items:
            current = by_id.get(item.id)
            if current is None:
                continue
            reconciled.append(SelectedProduct(product=replace(current), quantity=item.quantity))

        dropped = len(self._items) - len(reconciled)
        self._items = reconciled
        return dropped

    def sorted_by_size(self) -> list[SelectedProduct]:
        """Entries ordered by size code, naturally, empties last."""
        return sorted(self._items, key=lambda item: natural_size_key(item.product.size_code))
