"""Fixtures for API tests."""

import pytest
from fastapi.testclient import TestClient

from ordersheet.infrastructure.config import settings
from ordersheet.main import app


@pytest.fixture
def client() -> TestClient:
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def admin_headers() -> dict[str, str]:
    """Headers carrying the admin passphrase."""
    return {"X-Admin-Passphrase": settings.admin_passphrase}


@pytest.fixture
def seeded(client: TestClient, admin_headers: dict[str, str]) -> list[dict]:
    """Create three products and return them as listed."""
    response = client.post(
        "/products/bulk",
        json={
            "products": [
                {"code": "SKU-001", "name": "Cotton Tee", "name2": "Short", "size_code": "S10"},
                {"code": "SKU-002", "name": "Linen Pants", "size_code": "S2"},
                {"code": "", "name": "Wool Scarf", "name2": "Grey"},
            ]
        },
        headers=admin_headers,
    )
    assert response.status_code == 200
    return client.get("/products").json()["items"]
