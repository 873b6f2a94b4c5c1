"""Tests for product API endpoints."""

from fastapi.testclient import TestClient

from ordersheet.application.order_desk_service import get_order_desk_service


class TestPassphraseGate:
    """Tests for the admin passphrase on catalog mutations."""

    def test_reads_are_public(self, client: TestClient) -> None:
        """Listing needs no passphrase."""
        response = client.get("/products")

        assert response.status_code == 200
        assert response.json() == {"items": [], "total": 0}

    def test_missing_passphrase(self, client: TestClient) -> None:
        """Mutations without the header are rejected."""
        response = client.post("/products", json={"code": "A", "name": "Alpha"})

        assert response.status_code == 401
        assert response.json()["error_code"] == "ADMIN_REQUIRED"

    def test_wrong_passphrase(self, client: TestClient) -> None:
        response = client.delete("/products", headers={"X-Admin-Passphrase": "nope"})

        assert response.status_code == 401
        assert response.json()["error_code"] == "INVALID_PASSPHRASE"

    def test_rejected_mutation_changes_nothing(self, client: TestClient, seeded) -> None:
        client.delete("/products", headers={"X-Admin-Passphrase": "nope"})

        assert client.get("/products").json()["total"] == 3


class TestCreateProducts:
    """Tests for creating products."""

    def test_create_product(self, client: TestClient, admin_headers) -> None:
        """Create returns 201 and the product appears with an id."""
        response = client.post(
            "/products",
            json={"code": "SKU-1", "name": "Shirt", "size_code": "M"},
            headers=admin_headers,
        )

        assert response.status_code == 201
        assert response.json() == {"created": True}

        items = client.get("/products").json()["items"]
        assert len(items) == 1
        assert items[0]["code"] == "SKU-1"
        assert items[0]["image_url"] == ""

    def test_duplicate_code_conflict(self, client: TestClient, admin_headers) -> None:
        """Codes differing only by case conflict."""
        client.post("/products", json={"code": "ABC", "name": "A"}, headers=admin_headers)

        response = client.post(
            "/products", json={"code": "abc", "name": "B"}, headers=admin_headers
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "DUPLICATE_CODE"

    def test_missing_required_fields(self, client: TestClient, admin_headers) -> None:
        """Without a code, name and name2 are both required."""
        response = client.post(
            "/products", json={"code": "", "name": "Scarf"}, headers=admin_headers
        )

        assert response.status_code == 422

    def test_bulk_create_reports_duplicates(self, client: TestClient, admin_headers) -> None:
        response = client.post(
            "/products/bulk",
            json={
                "products": [
                    {"code": "X", "name": "A"},
                    {"code": "x", "name": "B"},
                    {"code": "Y", "name": "C"},
                ]
            },
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["added_count"] == 2
        assert data["duplicate_codes"] == ["x"]
        assert [p["code"] for p in data["products"]] == ["X", "Y"]

    def test_import_workbook(self, client: TestClient, admin_headers, make_workbook) -> None:
        """An uploaded .xlsx adds its valid rows."""
        data = make_workbook(
            [
                ["code", "name", "name2", "size"],
                ["SKU-1", "Shirt", "", "M"],
                ["", "Orphan", "", ""],
            ]
        )

        response = client.post(
            "/products/import",
            params={"filename": "products.xlsx"},
            content=data,
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["added_count"] == 1

    def test_import_unreadable_file(self, client: TestClient, admin_headers) -> None:
        response = client.post(
            "/products/import", content=b"not a workbook", headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "IMPORT_FAILED"
        assert client.get("/products").json()["total"] == 0


class TestReadProducts:
    """Tests for listing and fetching."""

    def test_get_product(self, client: TestClient, seeded) -> None:
        product_id = seeded[0]["id"]

        response = client.get(f"/products/{product_id}")

        assert response.status_code == 200
        assert response.json()["name"] == "Cotton Tee"

    def test_get_missing_product(self, client: TestClient) -> None:
        response = client.get("/products/999")

        assert response.status_code == 404
        assert response.json()["error_code"] == "PRODUCT_NOT_FOUND"

    def test_list_with_query(self, client: TestClient, seeded) -> None:
        response = client.get("/products", params={"q": "tee s10"})

        assert [p["code"] for p in response.json()["items"]] == ["SKU-001"]

    def test_search_endpoint(self, client: TestClient, seeded) -> None:
        """Keywords may match different fields."""
        response = client.get("/search", params={"q": "wool grey"})

        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["name"] == "Wool Scarf"

    def test_blank_search_returns_all(self, client: TestClient, seeded) -> None:
        assert client.get("/search", params={"q": "   "}).json()["total"] == 3


class TestUpdateProducts:
    """Tests for editing products."""

    def test_partial_update(self, client: TestClient, admin_headers, seeded) -> None:
        product_id = seeded[0]["id"]

        response = client.patch(
            f"/products/{product_id}", json={"size_code": "L"}, headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["size_code"] == "L"
        assert response.json()["name"] == "Cotton Tee"

    def test_update_to_taken_code(self, client: TestClient, admin_headers, seeded) -> None:
        response = client.patch(
            f"/products/{seeded[1]['id']}", json={"code": "sku-001"}, headers=admin_headers
        )

        assert response.status_code == 409

    def test_update_removing_name(self, client: TestClient, admin_headers, seeded) -> None:
        """Patches must leave a valid product."""
        response = client.patch(
            f"/products/{seeded[0]['id']}", json={"name": ""}, headers=admin_headers
        )

        assert response.status_code == 422
        assert response.json()["error_code"] == "INVALID_PRODUCT"

    def test_update_missing_product(self, client: TestClient, admin_headers) -> None:
        response = client.patch("/products/999", json={"name": "X"}, headers=admin_headers)

        assert response.status_code == 404

    def test_update_of_product_deleted_meanwhile(
        self, client: TestClient, admin_headers, seeded, monkeypatch
    ) -> None:
        """A product removed between lookup and update reports 404, not a conflict."""
        service = get_order_desk_service()
        original_update = service.update_product

        async def delete_then_update(product_id, patch):
            await service.delete_product(product_id)
            return await original_update(product_id, patch)

        monkeypatch.setattr(service, "update_product", delete_then_update)

        response = client.patch(
            f"/products/{seeded[0]['id']}", json={"name": "Renamed"}, headers=admin_headers
        )

        assert response.status_code == 404
        assert response.json()["error_code"] == "PRODUCT_NOT_FOUND"

    def test_replace_image(self, client: TestClient, admin_headers, seeded) -> None:
        response = client.put(
            f"/products/{seeded[0]['id']}/image",
            json={"image_url": "data:image/png;base64,AAAA"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["image_url"] == "data:image/png;base64,AAAA"


class TestDeleteProducts:
    """Tests for deleting products."""

    def test_delete_one(self, client: TestClient, admin_headers, seeded) -> None:
        response = client.delete(f"/products/{seeded[0]['id']}", headers=admin_headers)

        assert response.json() == {"deleted": True}
        assert client.get("/products").json()["total"] == 2

    def test_delete_missing(self, client: TestClient, admin_headers) -> None:
        response = client.delete("/products/999", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"deleted": False}

    def test_delete_several(self, client: TestClient, admin_headers, seeded) -> None:
        ids = [seeded[0]["id"], seeded[2]["id"]]

        response = client.post("/products/delete", json={"ids": ids}, headers=admin_headers)

        assert response.json() == {"deleted": True}
        assert [p["code"] for p in client.get("/products").json()["items"]] == ["SKU-002"]

    def test_delete_all_keeps_ids_fresh(self, client: TestClient, admin_headers, seeded) -> None:
        """Ids are not reused after the catalog is cleared."""
        client.delete("/products", headers=admin_headers)
        client.post("/products", json={"code": "NEW", "name": "New"}, headers=admin_headers)

        items = client.get("/products").json()["items"]
        assert items[0]["id"] > max(p["id"] for p in seeded)
