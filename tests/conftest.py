"""Shared fixtures for order desk tests."""

import os

# Settings are read at import time
os.environ["ORDERSHEET_STORAGE_BACKEND"] = "memory"
os.environ["ORDERSHEET_SEED_SAMPLE_CATALOG"] = "false"

from io import BytesIO
from typing import Any, Callable

import pytest
from openpyxl import Workbook

from ordersheet.application.order_desk_service import reset_order_desk_service
from ordersheet.catalog.models import Product
from ordersheet.catalog.service import CatalogService
from ordersheet.catalog.store import InMemoryCatalogStore


@pytest.fixture(autouse=True)
def reset_order_desk():
    """Give every test a fresh, empty order desk."""
    reset_order_desk_service(InMemoryCatalogStore())
    yield
    reset_order_desk_service()


@pytest.fixture
def store() -> InMemoryCatalogStore:
    """Create an empty in-memory catalog store."""
    return InMemoryCatalogStore()


@pytest.fixture
def catalog_service(store: InMemoryCatalogStore) -> CatalogService:
    """Create a catalog service over the empty store."""
    return CatalogService(store)


@pytest.fixture
def make_product() -> Callable[..., Product]:
    """Factory for product records."""

    def _make(
        product_id: int = 1,
        code: str = "SKU-001",
        name: str = "Test Shirt",
        name2: str = "",
        size_code: str = "",
    ) -> Product:
        return Product(id=product_id, code=code, name=name, name2=name2, size_code=size_code)

    return _make


@pytest.fixture
def make_workbook() -> Callable[[list[list[Any]]], bytes]:
    """Factory for .xlsx file contents from rows (first row is the header)."""

    def _make(rows: list[list[Any]]) -> bytes:
        workbook = Workbook()
        sheet = workbook.active
        for row in rows:
            sheet.append(row)
        buffer = BytesIO()
        workbook.save(buffer)
        return buffer.getvalue()

    return _make
