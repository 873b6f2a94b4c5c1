"""Catalog store.

Durable mapping from product id to product record plus a monotonic id
generator. The whole catalog lives in one serialized record:

    {"products": [...], "nextId": 7}

The store never interprets business rules. Reads never fail: an unreadable
or corrupt medium degrades to an empty catalog, and failed writes are logged
and reported as ``False``.
"""

import json
from abc import ABC, abstractmethod

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ordersheet.catalog.models import CatalogState, Product
from ordersheet.infrastructure.config import settings

logger = structlog.get_logger()


class CatalogStore(ABC):
    """Base class for catalog storage backends.

    Subclasses only move raw text in and out of their medium; decoding,
    seeding, and failure handling live here.

    Example usage:
        store = InMemoryCatalogStore(initial_products=sample_products())
        products = await store.list_all()
        product_id = await store.next_id()
    """

    def __init__(self, initial_products: list[Product] | None = None) -> None:
        """Initialize store.

        Args:
            initial_products: Products written to the medium the first time
                it is read and found empty.
        """
        self._initial_products = list(initial_products or [])
        self._issued_high_water = 0

    @abstractmethod
    async def _read(self) -> str | None:
        """Return the raw record, or None when nothing has been stored."""

    @abstractmethod
    async def _write(self, raw: str) -> None:
        """Replace the raw record."""

    async def load(self) -> CatalogState:
        """Load the catalog record.

        Returns:
            Current state, the seeded initial state when nothing is stored
            yet, or an empty state when the medium cannot be read.
        """
        try:
            raw = await self._read()
        except Exception as e:
            logger.error("Failed to read catalog storage", error=str(e))
            return self._guard(CatalogState())

        if raw is None:
            state = CatalogState.initial(self._initial_products)
            logger.info("Initializing catalog storage", product_count=len(state.products))
            await self.save(state)
            return self._guard(state)

        try:
            state = CatalogState.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error("Catalog storage is corrupt", error=str(e))
            return self._guard(CatalogState())

        return self._guard(state)

    async def save(self, state: CatalogState) -> bool:
        """Persist the catalog record.

        Args:
            state: Record to write.

        Returns:
            True if written, False if the medium rejected the write.
        """
        self._issued_high_water = max(self._issued_high_water, state.next_id - 1)
        try:
            await self._write(json.dumps(state.to_dict(), ensure_ascii=False))
        except Exception as e:
            logger.error("Failed to write catalog storage", error=str(e))
            return False
        return True

    async def list_all(self) -> list[Product]:
        """Return all products in catalog order."""
        state = await self.load()
        return state.products

    async def next_id(self) -> int:
        """Issue a fresh id, strictly greater than any previously issued."""
        state = await self.load()
        product_id = state.allocate_id()
        await self.save(state)
        return product_id

    async def replace_all(self, products: list[Product]) -> bool:
        """Replace every product, keeping the id generator."""
        state = await self.load()
        state.products = list(products)
        return await self.save(state)

    def _guard(self, state: CatalogState) -> CatalogState:
        # Ids issued by this process stay issued even if the medium forgot them
        state.next_id = max(state.next_id, self._issued_high_water + 1)
        return state


class InMemoryCatalogStore(CatalogStore):
    """Process-local store.

    Keeps the serialized record so callers never share objects with it.
    """

    def __init__(self, initial_products: list[Product] | None = None) -> None:
        super().__init__(initial_products)
        self._raw: str | None = None

    async def _read(self) -> str | None:
        return self._raw

    async def _write(self, raw: str) -> None:
        self._raw = raw


class SqlCatalogStore(CatalogStore):
    """Store backed by a single row of the ``kv_store`` table."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        key: str | None = None,
        initial_products: list[Product] | None = None,
    ) -> None:
        """Initialize store.

        Args:
            session_factory: Async SQLAlchemy session factory.
            key: Row key holding the catalog record.
            initial_products: Products used to seed an empty table.
        """
        super().__init__(initial_products)
        self.session_factory = session_factory
        self.key = key or settings.catalog_storage_key

    async def _read(self) -> str | None:
        from ordersheet.infrastructure.models import KeyValueEntry

        async with self.session_factory() as session:
            entry = await session.get(KeyValueEntry, self.key)
            return entry.value if entry is not None else None

    async def _write(self, raw: str) -> None:
        from ordersheet.infrastructure.models import KeyValueEntry

        async with self.session_factory() as session:
            entry = await session.get(KeyValueEntry, self.key)
            if entry is None:
                session.add(KeyValueEntry(key=self.key, value=raw))
            else:
                entry.value = raw
            await session.commit()


def create_catalog_store(initial_products: list[Product] | None = None) -> CatalogStore:
    """Build the store selected by ``settings.storage_backend``.

    Args:
        initial_products: Products used to seed an empty medium.

    Returns:
        Configured catalog store.
    """
    if settings.storage_backend == "memory":
        return InMemoryCatalogStore(initial_products=initial_products)

    from ordersheet.infrastructure.database import async_session_factory

    return SqlCatalogStore(
        session_factory=async_session_factory,
        key=settings.catalog_storage_key,
        initial_products=initial_products,
    )
