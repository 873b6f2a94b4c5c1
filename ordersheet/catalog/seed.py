"""Sample catalog used to seed an empty store."""

from ordersheet.catalog.models import Product

SAMPLE_PRODUCTS: list[Product] = [
    Product(id=1, code="SKU-001", name="オーガニックコットンTシャツ", name2="半袖", size_code="M"),
    Product(id=2, code="SKU-002", name="リネンブレンドパンツ", name2="アンクル丈", size_code="L"),
    Product(id=3, code="SKU-003", name="シルクカシミヤセーター", name2="", size_code="S"),
    Product(id=4, code="ACC-001", name="レザーベルト", name2="バックル", size_code="FREE"),
    Product(id=5, code="ACC-002", name="ウールマフラー", name2="", size_code=""),
    Product(id=6, code="BG-010", name="BAG ROMBO", name2="BLK XS", size_code="XS"),
]


def sample_products() -> list[Product]:
    """Fresh copies of the sample catalog."""
    return [Product(**vars(p)) for p in SAMPLE_PRODUCTS]
