"""Tests for spreadsheet import."""

import pytest

from ordersheet.catalog.importer import parse_product_workbook
from ordersheet.domain.exceptions import CatalogImportError

HEADER = ["商品コード", "商品名", "商品名２", "サイズコード"]


class TestParseProductWorkbook:
    """Tests for turning .xlsx rows into drafts."""

    def test_skips_header_row(self, make_workbook) -> None:
        """The first row is never imported."""
        data = make_workbook([HEADER, ["SKU-1", "Shirt", "Short sleeve", "M"]])

        drafts = parse_product_workbook(data)

        assert len(drafts) == 1
        assert drafts[0].code == "SKU-1"
        assert drafts[0].name2 == "Short sleeve"
        assert drafts[0].size_code == "M"

    def test_drops_rows_failing_precondition(self, make_workbook) -> None:
        """Rows need code and name, or name and name2."""
        data = make_workbook(
            [
                HEADER,
                ["SKU-1", "Shirt", None, None],
                ["SKU-2", None, "Orphan", "L"],
                [None, "Belt", "Black", None],
                [None, "Scarf", None, None],
                [None, None, None, None],
            ]
        )

        drafts = parse_product_workbook(data)

        assert [(d.code, d.name) for d in drafts] == [("SKU-1", "Shirt"), ("", "Belt")]

    def test_numeric_cells_become_text(self, make_workbook) -> None:
        """Numbers are stringified without a trailing .0."""
        data = make_workbook([HEADER, [1001, "Shirt", None, 10.0]])

        draft = parse_product_workbook(data)[0]

        assert draft.code == "1001"
        assert draft.size_code == "10"

    def test_trims_cell_text(self, make_workbook) -> None:
        """Surrounding whitespace is removed."""
        data = make_workbook([HEADER, ["  SKU-1 ", " Shirt ", "", ""]])

        draft = parse_product_workbook(data)[0]

        assert draft.code == "SKU-1"
        assert draft.name == "Shirt"

    def test_short_rows_are_padded(self, make_workbook) -> None:
        """Rows with fewer than four cells still import."""
        data = make_workbook([HEADER, ["SKU-1", "Shirt"]])

        draft = parse_product_workbook(data)[0]

        assert draft.name2 == ""
        assert draft.size_code == ""

    def test_unreadable_file(self) -> None:
        """Bytes that are not a workbook raise CatalogImportError."""
        with pytest.raises(CatalogImportError) as exc_info:
            parse_product_workbook(b"not a spreadsheet", filename="broken.xlsx")

        assert exc_info.value.details["filename"] == "broken.xlsx"

    def test_legacy_xls_rejected(self) -> None:
        """Binary .xls workbooks are reported as unsupported."""
        ole_header = bytes.fromhex("d0cf11e0a1b11ae1") + b"\x00" * 504

        with pytest.raises(CatalogImportError) as exc_info:
            parse_product_workbook(ole_header, filename="products.xls")

        assert ".xls is not supported" in exc_info.value.details["reason"]

    def test_no_valid_rows(self, make_workbook) -> None:
        """A workbook with only a header is rejected."""
        data = make_workbook([HEADER])

        with pytest.raises(CatalogImportError) as exc_info:
            parse_product_workbook(data)

        assert "no valid product rows" in exc_info.value.details["reason"]
