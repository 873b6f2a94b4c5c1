"""Order desk application service.

Composes the catalog service with per-session selections. Every catalog
mutation runs as one ordered step: await the store, re-read the catalog,
then reconcile every live selection against the fresh snapshot before
returning to the caller.
"""

import asyncio

import structlog

from ordersheet.catalog.importer import parse_product_workbook
from ordersheet.catalog.models import Product, ProductDraft, ProductPatch
from ordersheet.catalog.search import search_products
from ordersheet.catalog.seed import sample_products
from ordersheet.catalog.service import BulkAddResult, CatalogService
from ordersheet.catalog.store import CatalogStore, create_catalog_store
from ordersheet.domain.exceptions import EmptySelectionError, ProductNotFoundError
from ordersheet.domain.selection import SelectedProduct, SelectionWorkingSet
from ordersheet.export.order_sheet import CustomerInfo, build_order_sheet
from ordersheet.infrastructure.config import settings

logger = structlog.get_logger()


# ============================================================================
# In-Memory Selection Repository
# ============================================================================


class SelectionRepository:
    """In-memory repository for selections, keyed by session id."""

    def __init__(self) -> None:
        self._selections: dict[str, SelectionWorkingSet] = {}

    def save(self, selection: SelectionWorkingSet) -> SelectionWorkingSet:
        """Store a selection under its session id."""
        self._selections[selection.session_id] = selection
        return selection

    def get(self, session_id: str) -> SelectionWorkingSet | None:
        """Get a session's selection, if any."""
        return self._selections.get(session_id)

    def delete(self, session_id: str) -> bool:
        """Forget a session's selection."""
        return self._selections.pop(session_id, None) is not None

    def list_all(self) -> list[SelectionWorkingSet]:
        """All live selections."""
        return list(self._selections.values())


# ============================================================================
# Order Desk Service
# ============================================================================


class OrderDeskService:
    """Application service behind the order desk API.

    Catalog mutations are serialized and followed by reconciliation of
    every selection. Reads and search work on fresh snapshots.
    """

    def __init__(
        self,
        store: CatalogStore,
        selection_repo: SelectionRepository | None = None,
    ) -> None:
        """Initialize service.

        Args:
            store: Catalog storage backend.
            selection_repo: Selection repository.
        """
        self.catalog = CatalogService(store)
        self.selection_repo = selection_repo or SelectionRepository()
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Catalog reads
    # ------------------------------------------------------------------

    async def list_products(self) -> list[Product]:
        """Get the full catalog."""
        return await self.catalog.list_products()

    async def get_product(self, product_id: int) -> Product | None:
        """Get a product by id."""
        return await self.catalog.get_product(product_id)

    async def search(self, query: str | None, catalog: list[Product] | None = None) -> list[Product]:
        """Search a catalog snapshot, reading a fresh one if not given."""
        if catalog is None:
            catalog = await self.catalog.list_products()
        return search_products(query, catalog)

    # ------------------------------------------------------------------
    # Catalog mutations
    # ------------------------------------------------------------------

    async def create_product(self, draft: ProductDraft) -> bool:
        """Create a product. False if its code is already taken."""
        async with self._lock:
            created = await self.catalog.add_one(draft)
            if created:
                await self._reconcile_selections()
            return created

    async def create_products(self, drafts: list[ProductDraft]) -> BulkAddResult:
        """Create a batch of products, skipping duplicate codes."""
        async with self._lock:
            result = await self.catalog.add_many(drafts)
            if result.added_count:
                await self._reconcile_selections()
            return result

    async def import_products(self, data: bytes, filename: str | None = None) -> BulkAddResult:
        """Import products from an ``.xlsx`` file.

        Raises:
            CatalogImportError: If the file is unreadable or has no valid
                rows. Nothing is added in that case.
        """
        drafts = parse_product_workbook(data, filename=filename)
        return await self.create_products(drafts)

    async def update_product(self, product_id: int, patch: ProductPatch) -> bool:
        """Update a product. False if missing or the code collides."""
        async with self._lock:
            updated = await self.catalog.update(product_id, patch)
            if updated:
                await self._reconcile_selections()
            return updated

    async def update_product_image(self, product_id: int, image_url: str) -> bool:
        """Replace a product image. False if the product is missing."""
        async with self._lock:
            updated = await self.catalog.update_image(product_id, image_url)
            if updated:
                await self._reconcile_selections()
            return updated

    async def delete_product(self, product_id: int) -> bool:
        """Delete a product. False if nothing matched."""
        return await self.delete_products([product_id])

    async def delete_products(self, product_ids: list[int]) -> bool:
        """Delete products. False if nothing matched."""
        async with self._lock:
            deleted = await self.catalog.delete_many(product_ids)
            if deleted:
                await self._reconcile_selections()
            return deleted

    async def delete_all_products(self) -> bool:
        """Clear the catalog."""
        async with self._lock:
            await self.catalog.delete_all()
            await self._reconcile_selections()
            return True

    async def reconcile_selections(self) -> int:
        """Reconcile every selection against the current catalog."""
        async with self._lock:
            return await self._reconcile_selections()

    async def _reconcile_selections(self) -> int:
        catalog = await self.catalog.list_products()
        dropped = 0
        for selection in self.selection_repo.list_all():
            dropped += selection.reconcile(catalog)
            if not len(selection):
                self.selection_repo.delete(selection.session_id)

        if dropped:
            logger.info("Dropped deleted products from selections", count=dropped)
        return dropped

    # ------------------------------------------------------------------
    # Selections
    # ------------------------------------------------------------------

    def get_selection(self, session_id: str) -> SelectionWorkingSet:
        """Get a session's selection.

        Sessions without a selection get an empty one that is not stored;
        a selection is only kept once something is added to it.
        """
        selection = self.selection_repo.get(session_id)
        if selection is None:
            return SelectionWorkingSet(session_id)
        return selection

    async def add_to_selection(
        self,
        session_id: str,
        product_id: int,
        quantity: int = 1,
    ) -> SelectedProduct:
        """Add a catalog product to a session's selection.

        Raises:
            ProductNotFoundError: If the product is not in the catalog.
            InvalidQuantityError: If quantity is below 1.
        """
        product = await self.catalog.get_product(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        selection = self.get_selection(session_id)
        item = selection.add(product, quantity)
        self.selection_repo.save(selection)

        logger.info(
            "Product selected",
            session_id=session_id,
            product_id=product_id,
            quantity=item.quantity,
        )
        return item

    def remove_from_selection(self, session_id: str, product_id: int) -> bool:
        """Remove a product from a session's selection.

        A selection left empty is forgotten.
        """
        selection = self.selection_repo.get(session_id)
        if selection is None or not selection.remove(product_id):
            return False
        if not len(selection):
            self.selection_repo.delete(session_id)
        return True

    def set_selection_quantity(self, session_id: str, product_id: int, quantity: int) -> bool:
        """Replace a selected product's quantity. False if rejected."""
        selection = self.selection_repo.get(session_id)
        if selection is None:
            return False
        return selection.set_quantity(product_id, quantity)

    def clear_selection(self, session_id: str) -> None:
        """Forget a session's selection."""
        if self.selection_repo.delete(session_id):
            logger.info("Selection cleared", session_id=session_id)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export_order(
        self,
        session_id: str,
        customer: CustomerInfo,
        sort_by_size: bool = False,
    ) -> bytes:
        """Export a session's selection as an order sheet.

        Raises:
            CustomerInfoError: If company or contact is blank.
            EmptySelectionError: If the selection is empty.
        """
        customer.validate()
        selection = self.selection_repo.get(session_id)
        if selection is None or not len(selection):
            raise EmptySelectionError(session_id)

        return build_order_sheet(selection.items, customer, sort_by_size=sort_by_size)


# ============================================================================
# Service Factory
# ============================================================================


_order_desk: OrderDeskService | None = None


def get_order_desk_service() -> OrderDeskService:
    """Get order desk service singleton."""
    global _order_desk
    if _order_desk is None:
        initial = sample_products() if settings.seed_sample_catalog else None
        _order_desk = OrderDeskService(store=create_catalog_store(initial_products=initial))
    return _order_desk


def reset_order_desk_service(store: CatalogStore | None = None) -> OrderDeskService | None:
    """Reset the singleton (for testing).

    Args:
        store: Store for a fresh service. When omitted the next call to
            ``get_order_desk_service`` builds one from settings.
    """
    global _order_desk
    _order_desk = OrderDeskService(store=store) if store is not None else None
    return _order_desk
