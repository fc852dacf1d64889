"""Integration tests for the storefront catalog routes."""

from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from src.api.middleware.error_handler import NetworkFailureError


class TestProductRoutes:
    """Tests for /api/v1/catalog/products."""

    def test_list_loads_catalog_on_first_use(
        self, client: TestClient, mock_catalog_client: MagicMock
    ) -> None:
        response = client.get("/api/v1/catalog/products")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 5
        assert data["items"][0]["imageUrl"] == "https://cdn.example.com/p1-1.jpg"
        mock_catalog_client.list_products.assert_awaited_once()

    def test_list_shares_admin_snapshot(self, client: TestClient, catalog_store) -> None:
        """Test that storefront and admin views read the same cache."""
        client.post("/api/v1/admin/products/refresh")
        catalog_store.products = catalog_store.products[:2]

        assert client.get("/api/v1/catalog/products").json()["total"] == 5

        client.post("/api/v1/admin/products/refresh")
        assert client.get("/api/v1/catalog/products").json()["total"] == 2

    def test_list_unreachable_store(
        self, client: TestClient, mock_catalog_client: MagicMock
    ) -> None:
        mock_catalog_client.list_products.side_effect = NetworkFailureError("down")

        response = client.get("/api/v1/catalog/products")

        assert response.status_code == 502

    def test_detail(self, client: TestClient) -> None:
        response = client.get("/api/v1/catalog/products/p2")

        assert response.status_code == 200
        data = response.json()
        assert data["product"]["id"] == "p2"
        assert data["imageUrls"] == ["https://cdn.example.com/p2-1.jpg"]
        assert len(data["related"]) == 4

    def test_detail_not_found(self, client: TestClient) -> None:
        response = client.get("/api/v1/catalog/products/missing")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    def test_featured(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/catalog/products/featured",
            json={"views": {"p5": 9, "p3": 4}, "limit": 2},
        )

        assert response.status_code == 200
        assert [item["product"]["id"] for item in response.json()["items"]] == ["p5", "p3"]

    def test_carousel_wraps(self, client: TestClient) -> None:
        response = client.get(
            "/api/v1/catalog/products/p1/carousel",
            params={"index": 0, "step": -1},
        )

        assert response.status_code == 200
        assert response.json() == {
            "index": 0,
            "count": 1,
            "imageUrl": "https://cdn.example.com/p1-1.jpg",
        }

    def test_summary(self, client: TestClient) -> None:
        response = client.post("/api/v1/catalog/summary", json={"views": {"p1": 3, "p2": 4}})

        data = response.json()
        assert data["productCount"] == 5
        assert data["categoryCount"] == 2
        assert data["totalViews"] == 7


class TestReferenceRoutes:
    """Tests for /api/v1/categories and /api/v1/colors."""

    def test_categories(self, client: TestClient) -> None:
        response = client.get("/api/v1/categories")

        assert response.status_code == 200
        assert [c["name"] for c in response.json()] == ["Bras", "Panties"]

    def test_colors(self, client: TestClient) -> None:
        response = client.get("/api/v1/colors")

        assert response.status_code == 200
        assert [c["id"] for c in response.json()] == ["c1", "c2"]
