"""Free-text product search."""

from ordersheet.catalog.models import Product


def search_products(query: str | None, products: list[Product]) -> list[Product]:
    """Filter a catalog snapshot by keywords.

    The query is split on whitespace. Every keyword must appear,
    case-insensitively, in at least one of code, name, name2 or size code;
    different keywords may match different fields. Catalog order is kept.

    Args:
        query: Raw query string.
        products: Catalog snapshot.

    Returns:
        Matching products, or the whole snapshot for a blank query.
    """
    keywords = (query or "").strip().lower().split()
    if not keywords:
        return products

    return [
        product
        for product in products
        if all(_matches(product, keyword) for keyword in keywords)
    ]


def _matches(product: Product, keyword: str) -> bool:
    fields = (product.code, product.name, product.name2, product.size_code)
    return any(keyword in (value or "").lower() for value in fields)
