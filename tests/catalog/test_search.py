"""Tests for catalog search."""

from ordersheet.catalog.search import search_products


class TestSearchProducts:
    """Tests for keyword search."""

    def test_keywords_may_match_different_fields(self, make_product) -> None:
        """Every keyword must match, each in any field."""
        bag = make_product(product_id=1, code="BG-010", name="BAG ROMBO", name2="BLK XS", size_code="XS")
        belt = make_product(product_id=2, code="ACC-001", name="Belt", size_code="FREE")

        assert search_products("rombo xs", [bag, belt]) == [bag]
        assert search_products("rombo free", [bag, belt]) == []

    def test_keyword_order_does_not_matter(self, make_product) -> None:
        """Keywords are ANDed regardless of the order they are typed in."""
        shirt = make_product(product_id=1, code="SKU-1", name="Red Shirt")
        pants = make_product(product_id=2, code="SKU-2", name="Blue Pants")

        assert search_products("shirt red", [shirt, pants]) == [shirt]

    def test_blank_query_returns_everything(self, make_product) -> None:
        """A blank query does not filter."""
        products = [make_product(product_id=1), make_product(product_id=2, code="SKU-002")]

        assert search_products("", products) == products
        assert search_products("   ", products) == products
        assert search_products(None, products) == products

    def test_case_insensitive(self, make_product) -> None:
        """Matching ignores case on both sides."""
        shirt = make_product(name="Organic Cotton Tee")

        assert search_products("COTTON", [shirt]) == [shirt]

    def test_whitespace_runs_separate_keywords(self, make_product) -> None:
        """Several spaces or tabs act as one separator."""
        shirt = make_product(code="SKU-001", name="Shirt", size_code="M")

        assert search_products("  sku-001 \t  shirt ", [shirt]) == [shirt]

    def test_matches_secondary_name_and_size(self, make_product) -> None:
        """name2 and size code are searched too."""
        scarf = make_product(name="Scarf", name2="Wool", size_code="S10")

        assert search_products("wool", [scarf]) == [scarf]
        assert search_products("s10", [scarf]) == [scarf]

    def test_keeps_catalog_order(self, make_product) -> None:
        """Matches are returned in catalog order."""
        products = [
            make_product(product_id=3, code="C", name="Tee"),
            make_product(product_id=1, code="A", name="Tee"),
            make_product(product_id=2, code="B", name="Pants"),
        ]

        assert [p.id for p in search_products("tee", products)] == [3, 1]
