"""Pytest configuration and fixtures."""

import os
from collections.abc import Generator
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

# Set test environment variables before importing application modules
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("CATALOG_API_URL", "http://catalog.test")
os.environ.setdefault("CATALOG_REFRESH_ON_STARTUP", "false")

from src.api.middleware.error_handler import NotFoundError  # noqa: E402
from src.schemas.product import Category, Color, ProductRecord  # noqa: E402


def make_product(index: int, **overrides: Any) -> dict[str, Any]:
    """Build a remote-store product payload."""
    product = {
        "_id": f"p{index}",
        "name": f"Bra {index}",
        "description": f"Description {index}",
        "price": "19.90",
        "sizes": ["S", "M"],
        "colors": [{"_id": "c1", "name": "Black"}],
        "categories": [{"_id": "cat1", "name": "Bras"}],
        "images": [f"https://cdn.example.com/p{index}-1.jpg"],
    }
    product.update(overrides)
    return product


class CatalogStore:
    """In-memory stand-in for the remote catalog store."""

    def __init__(self, products: list[dict[str, Any]] | None = None) -> None:
        self.products = [ProductRecord.model_validate(p) for p in products or []]
        self.categories = [
            Category.model_validate({"_id": "cat1", "name": "Bras"}),
            Category.model_validate({"_id": "cat2", "name": "Panties"}),
        ]
        self.colors = [
            Color.model_validate({"_id": "c1", "name": "Black"}),
            Color.model_validate({"_id": "c2", "name": "Red"}),
        ]
        self._next_id = 1000

    @staticmethod
    def _record_from_parts(product_id: str, parts: list, images: list[str]) -> ProductRecord:
        fields: dict[str, Any] = {"sizes": [], "colors": [], "categories": []}
        uploaded = []
        for name, value in parts:
            if name == "images":
                uploaded.append(f"https://cdn.example.com/uploads/{value[0]}")
            elif name in fields:
                fields[name].append(value[1])
            else:
                fields[name] = value[1]
        return ProductRecord.model_validate(
            {"_id": product_id, **fields, "images": images + uploaded}
        )

    async def list_products(self) -> list[ProductRecord]:
        return list(self.products)

    async def create_product(self, parts: list) -> ProductRecord:
        self._next_id += 1
        record = self._record_from_parts(f"p{self._next_id}", parts, [])
        self.products.append(record)
        return record

    async def update_product(self, product_id: str, parts: list) -> ProductRecord:
        for i, existing in enumerate(self.products):
            if existing.id == product_id:
                record = self._record_from_parts(product_id, parts, list(existing.images))
                self.products[i] = record
                return record
        raise NotFoundError(f"Remote catalog resource not found: /api/products/{product_id}")

    async def delete_product(self, product_id: str) -> None:
        before = len(self.products)
        self.products = [p for p in self.products if p.id != product_id]
        if len(self.products) == before:
            raise NotFoundError(f"Remote catalog resource not found: /api/products/{product_id}")

    async def list_categories(self) -> list[Category]:
        return list(self.categories)

    async def list_colors(self) -> list[Color]:
        return list(self.colors)


@pytest.fixture
def test_settings() -> Generator[Any, None, None]:
    """Provide test settings with cleared cache.

    Yields:
        Settings: Test configuration settings.
    """
    from src.core.config import get_settings

    get_settings.cache_clear()
    settings = get_settings()
    yield settings
    get_settings.cache_clear()


@pytest.fixture
def catalog_store() -> CatalogStore:
    """Remote store seeded with five products."""
    return CatalogStore([make_product(i) for i in range(1, 6)])


@pytest.fixture
def mock_catalog_client(catalog_store: CatalogStore) -> MagicMock:
    """Mocked remote client backed by the in-memory store.

    Set ``side_effect`` on any method to simulate failures.
    """
    client = MagicMock()
    client.list_products = AsyncMock(side_effect=catalog_store.list_products)
    client.create_product = AsyncMock(side_effect=catalog_store.create_product)
    client.update_product = AsyncMock(side_effect=catalog_store.update_product)
    client.delete_product = AsyncMock(side_effect=catalog_store.delete_product)
    client.list_categories = AsyncMock(side_effect=catalog_store.list_categories)
    client.list_colors = AsyncMock(side_effect=catalog_store.list_colors)
    client.check_connection = AsyncMock(return_value={"healthy": True})
    return client


@pytest.fixture
def admin_service(mock_catalog_client: MagicMock, test_settings: Any) -> Any:
    """Admin product service wired to the mocked client."""
    from src.services.admin_product_service import AdminProductService

    return AdminProductService(mock_catalog_client, settings=test_settings)


@pytest.fixture
def client(admin_service: Any) -> Generator[TestClient, None, None]:
    """Provide a test client with the admin service overridden.

    Yields:
        TestClient: FastAPI test client.
    """
    from src.main import app
    from src.services.admin_product_service import get_admin_product_service

    app.dependency_overrides[get_admin_product_service] = lambda: admin_service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def product_factory() -> Any:
    """Factory for remote-store product payloads."""
    return make_product
