"""Product catalog.

Product model, storage, the deduplicating catalog service, search,
and bulk import.
"""

from ordersheet.catalog.importer import parse_product_workbook
from ordersheet.catalog.models import (
    CatalogState,
    Product,
    ProductDraft,
    ProductPatch,
    has_required_fields,
    normalize_code,
)
from ordersheet.catalog.search import search_products
from ordersheet.catalog.seed import SAMPLE_PRODUCTS, sample_products
from ordersheet.catalog.service import BulkAddResult, CatalogService
from ordersheet.catalog.store import (
    CatalogStore,
    InMemoryCatalogStore,
    SqlCatalogStore,
    create_catalog_store,
)

__all__ = [
    # Models
    "CatalogState",
    "Product",
    "ProductDraft",
    "ProductPatch",
    "has_required_fields",
    "normalize_code",
    # Store
    "CatalogStore",
    "InMemoryCatalogStore",
    "SqlCatalogStore",
    "create_catalog_store",
    # Service
    "BulkAddResult",
    "CatalogService",
    # Search / import
    "search_products",
    "parse_product_workbook",
    # Seed data
    "SAMPLE_PRODUCTS",
    "sample_products",
]
