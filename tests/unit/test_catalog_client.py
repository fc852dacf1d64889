"""Unit tests for CatalogAPIClient against a mocked transport."""

from collections.abc import Callable

import httpx
import pytest

from src.api.middleware.error_handler import NetworkFailureError, NotFoundError
from src.core.catalog_client import CatalogAPIClient


def make_client(handler: Callable[[httpx.Request], httpx.Response]) -> CatalogAPIClient:
    http_client = httpx.AsyncClient(
        base_url="http://catalog.test",
        transport=httpx.MockTransport(handler),
    )
    return CatalogAPIClient("http://catalog.test", timeout=2.0, http_client=http_client)


class TestListProducts:
    """Tests for list_products."""

    @pytest.mark.asyncio
    async def test_decodes_records_in_order(self, product_factory) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "GET"
            assert request.url.path == "/api/products"
            return httpx.Response(200, json=[product_factory(2), product_factory(1)])

        client = make_client(handler)

        products = await client.list_products()

        assert [p.id for p in products] == ["p2", "p1"]
        assert products[0].color_ids == ["c1"]

    @pytest.mark.asyncio
    async def test_empty_list_is_success(self) -> None:
        client = make_client(lambda request: httpx.Response(200, json=[]))

        assert await client.list_products() == []

    @pytest.mark.asyncio
    async def test_server_error_is_network_failure(self) -> None:
        client = make_client(lambda request: httpx.Response(500, text="boom"))

        with pytest.raises(NetworkFailureError) as exc_info:
            await client.list_products()

        assert exc_info.value.upstream_status == 500

    @pytest.mark.asyncio
    async def test_timeout_is_network_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        client = make_client(handler)

        with pytest.raises(NetworkFailureError):
            await client.list_products()

    @pytest.mark.asyncio
    async def test_connection_error_is_network_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        client = make_client(handler)

        with pytest.raises(NetworkFailureError):
            await client.list_products()

    @pytest.mark.asyncio
    async def test_non_list_body_is_network_failure(self) -> None:
        client = make_client(lambda request: httpx.Response(200, json={"error": "nope"}))

        with pytest.raises(NetworkFailureError):
            await client.list_products()

    @pytest.mark.asyncio
    async def test_invalid_records_are_skipped(self, product_factory) -> None:
        """Test that one malformed record does not hide the rest of the catalog."""
        body = [
            product_factory(1),
            {"name": "no id"},
            product_factory(2, sizes=["XXL"]),
            product_factory(3, name=""),
            product_factory(4),
        ]
        client = make_client(lambda request: httpx.Response(200, json=body))

        products = await client.list_products()

        assert [p.id for p in products] == ["p1", "p4"]


class TestMutations:
    """Tests for create, update and delete."""

    @pytest.mark.asyncio
    async def test_create_sends_multipart_body(self, product_factory) -> None:
        """Test that a draft with no files still goes out as multipart."""
        captured: dict[str, httpx.Request] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["request"] = request
            return httpx.Response(201, json=product_factory(7))

        client = make_client(handler)

        product = await client.create_product(
            [("name", (None, "Bra 7")), ("sizes", (None, "S")), ("sizes", (None, "M"))]
        )

        request = captured["request"]
        assert request.method == "POST"
        assert request.url.path == "/api/products"
        assert request.headers["content-type"].startswith("multipart/form-data")
        assert request.content.count(b'name="sizes"') == 2
        assert product.id == "p7"

    @pytest.mark.asyncio
    async def test_update_unwraps_product_envelope(self, product_factory) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "PUT"
            assert request.url.path == "/api/products/p3"
            return httpx.Response(200, json={"product": product_factory(3, name="Renamed")})

        client = make_client(handler)

        product = await client.update_product("p3", [("name", (None, "Renamed"))])

        assert product.name == "Renamed"

    @pytest.mark.asyncio
    async def test_update_missing_record_is_not_found(self) -> None:
        client = make_client(lambda request: httpx.Response(404, json={"error": "missing"}))

        with pytest.raises(NotFoundError):
            await client.update_product("gone", [("name", (None, "x"))])

    @pytest.mark.asyncio
    async def test_delete_accepts_empty_body(self) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(f"{request.method} {request.url.path}")
            return httpx.Response(204)

        client = make_client(handler)

        await client.delete_product("p1")

        assert seen == ["DELETE /api/products/p1"]


class TestReferences:
    """Tests for categories, colors and the connection check."""

    @pytest.mark.asyncio
    async def test_lists_categories_and_colors(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/api/categories":
                return httpx.Response(200, json=[{"_id": "cat1", "name": "Bras"}])
            return httpx.Response(200, json=[{"_id": "c1", "name": "Black", "hex": "#000000"}])

        client = make_client(handler)

        categories = await client.list_categories()
        colors = await client.list_colors()

        assert categories[0].id == "cat1"
        assert colors[0].hex == "#000000"

    @pytest.mark.asyncio
    async def test_check_connection_healthy(self) -> None:
        client = make_client(lambda request: httpx.Response(200, json=[]))

        assert await client.check_connection() == {"healthy": True}

    @pytest.mark.asyncio
    async def test_check_connection_unhealthy(self) -> None:
        client = make_client(lambda request: httpx.Response(503, text="down"))

        result = await client.check_connection()

        assert result["healthy"] is False
        assert "503" in result["error"]
