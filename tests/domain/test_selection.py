"""Tests for the selection working set."""

import pytest

from ordersheet.domain.exceptions import InvalidQuantityError
from ordersheet.domain.selection import (
    SelectionWorkingSet,
    compare_size_codes,
    sort_size_codes,
)


class TestSizeOrdering:
    """Tests for natural size code ordering."""

    def test_numeric_runs_and_empties_last(self) -> None:
        """Digit runs compare as numbers and empty sizes go last."""
        assert sort_size_codes(["S10", "S2", "", "S1"]) == ["S1", "S2", "S10", ""]

    def test_text_ignores_case(self) -> None:
        """Letter case does not affect ordering."""
        assert compare_size_codes("m", "M") == 0
        assert compare_size_codes("L", "m") < 0

    def test_compare_is_three_way(self) -> None:
        """Comparison returns negative, zero, or positive."""
        assert compare_size_codes("S2", "S10") < 0
        assert compare_size_codes("S10", "S2") > 0
        assert compare_size_codes("", "XS") > 0


class TestSelectionWorkingSet:
    """Tests for adding, editing and reconciling selections."""

    def test_add_twice_sums_quantity(self, make_product) -> None:
        """Re-adding a product adds to its quantity instead of duplicating."""
        selection = SelectionWorkingSet()
        product = make_product()

        selection.add(product, quantity=2)
        selection.add(product, quantity=3)

        assert len(selection) == 1
        assert selection.get(product.id).quantity == 5

    def test_add_rejects_quantity_below_one(self, make_product) -> None:
        """Adding zero units is an error."""
        selection = SelectionWorkingSet()

        with pytest.raises(InvalidQuantityError):
            selection.add(make_product(), quantity=0)

        assert len(selection) == 0

    def test_entries_are_copies(self, make_product) -> None:
        """Mutating the source product does not change the selection."""
        selection = SelectionWorkingSet()
        product = make_product(name="Shirt")
        selection.add(product)

        product.name = "Changed"

        assert selection.get(product.id).product.name == "Shirt"

    def test_set_quantity(self, make_product) -> None:
        """Quantities can be replaced with positive values."""
        selection = SelectionWorkingSet()
        selection.add(make_product(product_id=7), quantity=2)

        assert selection.set_quantity(7, 10) is True
        assert selection.get(7).quantity == 10

    def test_set_quantity_below_one_is_ignored(self, make_product) -> None:
        """Values below 1 leave the prior quantity in place."""
        selection = SelectionWorkingSet()
        selection.add(make_product(product_id=7), quantity=4)

        assert selection.set_quantity(7, 0) is False
        assert selection.set_quantity(7, -3) is False
        assert selection.get(7).quantity == 4

    def test_set_quantity_unknown_product(self) -> None:
        """Editing a product that is not selected reports False."""
        assert SelectionWorkingSet().set_quantity(1, 3) is False

    def test_remove_and_clear(self, make_product) -> None:
        """Products can be removed one at a time or all at once."""
        selection = SelectionWorkingSet()
        selection.add(make_product(product_id=1))
        selection.add(make_product(product_id=2, code="SKU-002"))

        assert selection.remove(1) is True
        assert selection.remove(1) is False
        assert [item.id for item in selection] == [2]

        selection.clear()
        assert len(selection) == 0

    def test_reconcile_refreshes_fields_and_keeps_quantity(self, make_product) -> None:
        """Catalog edits flow into the selection; quantities stay."""
        selection = SelectionWorkingSet()
        selection.add(make_product(product_id=1, name="Old name", size_code="M"), quantity=3)

        dropped = selection.reconcile(
            [make_product(product_id=1, name="New name", size_code="L")]
        )

        assert dropped == 0
        item = selection.get(1)
        assert item.product.name == "New name"
        assert item.product.size_code == "L"
        assert item.quantity == 3

    def test_reconcile_drops_deleted_and_keeps_order(self, make_product) -> None:
        """Entries for deleted products vanish; the rest keep their order."""
        selection = SelectionWorkingSet()
        for product_id in (3, 1, 2):
            selection.add(make_product(product_id=product_id, code=f"C{product_id}"))

        dropped = selection.reconcile(
            [make_product(product_id=1, code="C1"), make_product(product_id=2, code="C2")]
        )

        assert dropped == 1
        assert [item.id for item in selection] == [1, 2]

    def test_sorted_by_size(self, make_product) -> None:
        """Sorting by size does not reorder the selection itself."""
        selection = SelectionWorkingSet()
        for product_id, size in enumerate(["S10", "S2", "", "S1"], start=1):
            selection.add(make_product(product_id=product_id, code=f"C{product_id}", size_code=size))

        ordered = [item.product.size_code for item in selection.sorted_by_size()]

        assert ordered == ["S1", "S2", "S10", ""]
        assert [item.id for item in selection] == [1, 2, 3, 4]

    def test_total_quantity(self, make_product) -> None:
        selection = SelectionWorkingSet()
        selection.add(make_product(product_id=1), quantity=2)
        selection.add(make_product(product_id=2, code="SKU-002"), quantity=5)

        assert selection.total_quantity == 7
