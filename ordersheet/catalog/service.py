"""Catalog service for product operations.

Sole writer of the catalog store. Enforces the one invariant that matters:
product codes are unique, case-insensitively and ignoring surrounding
whitespace, among products that have a non-empty code.

Rejections are reported as ``False`` or as a structured result, never
raised.
"""

from dataclasses import dataclass, field

import structlog

from ordersheet.catalog.models import (
    Product,
    ProductDraft,
    ProductPatch,
    normalize_code,
)
from ordersheet.catalog.store import CatalogStore

logger = structlog.get_logger()


@dataclass
class BulkAddResult:
    """Result of adding a batch of drafts.

    Attributes:
        added_count: Number of drafts accepted.
        duplicate_codes: Codes rejected as duplicates, in input order.
        added_products: The products created, in input order.
    """

    added_count: int = 0
    duplicate_codes: list[str] = field(default_factory=list)
    added_products: list[Product] = field(default_factory=list)


class CatalogService:
    """Service for catalog mutations and reads.

    Example usage:
        service = CatalogService(InMemoryCatalogStore())

        created = await service.add_one(ProductDraft(code="SKU-1", name="Shirt"))
        result = await service.add_many(drafts)
        await service.update(1, ProductPatch(size_code="L"))
    """

    def __init__(self, store: CatalogStore) -> None:
        """Initialize service with a catalog store.

        Args:
            store: Storage backend.
        """
        self.store = store

    async def list_products(self) -> list[Product]:
        """Get all products in catalog order."""
        return await self.store.list_all()

    async def get_product(self, product_id: int) -> Product | None:
        """Get product by ID.

        Args:
            product_id: Product ID.

        Returns:
            Product if found, None otherwise.
        """
        for product in await self.store.list_all():
            if product.id == product_id:
                return product
        return None

    async def add_one(self, draft: ProductDraft) -> bool:
        """Add a single product.

        Args:
            draft: Product payload.

        Returns:
            True if added, False if its code is already taken.
        """
        state = await self.store.load()
        key = draft.code_key

        if key and any(p.code_key == key for p in state.products):
            logger.info("Rejected duplicate product code", code=draft.code)
            return False

        product = draft.to_product(state.allocate_id())
        state.products.append(product)
        await self.store.save(state)

        logger.info("Product added", product_id=product.id, code=product.code)
        return True

    async def add_many(self, drafts: list[ProductDraft]) -> BulkAddResult:
        """Add a batch of products, skipping duplicates.

        Drafts are checked in order against the existing codes and the codes
        accepted earlier in the same batch. A duplicate is recorded and
        skipped; the rest of the batch still goes through.

        Args:
            drafts: Product payloads in input order.

        Returns:
            BulkAddResult with counts, skipped codes and created products.
        """
        state = await self.store.load()
        seen_codes = {p.code_key for p in state.products if p.code_key}
        result = BulkAddResult()

        for draft in drafts:
            key = draft.code_key
            if key and key in seen_codes:
                result.duplicate_codes.append(draft.code)
                continue

            product = draft.to_product(state.allocate_id())
            result.added_products.append(product)
            if key:
                seen_codes.add(key)

        result.added_count = len(result.added_products)

        if result.added_products:
            state.products.extend(result.added_products)
            await self.store.save(state)

        logger.info(
            "Bulk add complete",
            submitted=len(drafts),
            added=result.added_count,
            duplicates=len(result.duplicate_codes),
        )
        return result

    async def update(self, product_id: int, patch: ProductPatch) -> bool:
        """Merge a patch into an existing product.

        Args:
            product_id: Product to update.
            patch: Fields to overwrite.

        Returns:
            True if updated. False if the product does not exist or the
            patched code collides with another product.
        """
        state = await self.store.load()
        index = _find_index(state.products, product_id)
        if index is None:
            logger.info("Update skipped, product not found", product_id=product_id)
            return False

        key = normalize_code(patch.code)
        if key and any(p.id != product_id and p.code_key == key for p in state.products):
            logger.info(
                "Rejected duplicate product code",
                product_id=product_id,
                code=patch.code,
            )
            return False

        state.products[index] = patch.apply(state.products[index])
        await self.store.save(state)

        logger.info(
            "Product updated",
            product_id=product_id,
            fields=sorted(patch.changes()),
        )
        return True

    async def update_image(self, product_id: int, image_url: str) -> bool:
        """Replace a product's image. No duplicate check applies.

        Returns:
            True if updated, False if the product does not exist.
        """
        state = await self.store.load()
        index = _find_index(state.products, product_id)
        if index is None:
            return False

        state.products[index] = ProductPatch(image_url=image_url).apply(state.products[index])
        await self.store.save(state)

        logger.info("Product image updated", product_id=product_id)
        return True

    async def delete_one(self, product_id: int) -> bool:
        """Delete a product. Returns False if nothing matched."""
        return await self.delete_many([product_id])

    async def delete_many(self, product_ids: list[int]) -> bool:
        """Delete products by id.

        Args:
            product_ids: Ids to remove; unknown ids are ignored.

        Returns:
            True if at least one product was removed.
        """
        state = await self.store.load()
        ids = set(product_ids)
        remaining = [p for p in state.products if p.id not in ids]

        if len(remaining) == len(state.products):
            return False

        removed = len(state.products) - len(remaining)
        state.products = remaining
        await self.store.save(state)

        logger.info("Products deleted", count=removed)
        return True

    async def delete_all(self) -> bool:
        """Remove every product. The id generator is kept."""
        state = await self.store.load()
        removed = len(state.products)
        state.products = []
        await self.store.save(state)

        logger.info("Catalog cleared", count=removed)
        return True


def _find_index(products: list[Product], product_id: int) -> int | None:
    for index, product in enumerate(products):
        if product.id == product_id:
            return index
    return None
