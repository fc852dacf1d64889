"""Unit tests for CatalogCache and ReferenceCache."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.api.middleware.error_handler import NetworkFailureError
from src.schemas.product import ProductRecord
from src.services.catalog_cache import CatalogCache, ReferenceCache


def records_for(product_factory, *indexes: int) -> list[ProductRecord]:
    return [ProductRecord.model_validate(product_factory(i)) for i in indexes]


class TestCatalogCacheRefresh:
    """Tests for CatalogCache.refresh."""

    @pytest.mark.asyncio
    async def test_replaces_contents_in_remote_order(self, product_factory) -> None:
        source = MagicMock()
        source.list_products = AsyncMock(return_value=records_for(product_factory, 3, 1, 2))
        cache = CatalogCache(source)

        await cache.refresh()

        assert [r.id for r in cache.records] == ["p3", "p1", "p2"]
        assert len(cache) == 3
        assert cache.loaded is True

    @pytest.mark.asyncio
    async def test_full_replace_drops_missing_records(self, product_factory) -> None:
        source = MagicMock()
        source.list_products = AsyncMock(
            side_effect=[records_for(product_factory, 1, 2, 3), records_for(product_factory, 2)]
        )
        cache = CatalogCache(source)

        await cache.refresh()
        await cache.refresh()

        assert [r.id for r in cache.records] == ["p2"]
        assert cache.get("p1") is None

    @pytest.mark.asyncio
    async def test_failure_keeps_previous_contents(self, product_factory) -> None:
        """Test that a failed fetch leaves the cache stale but valid."""
        source = MagicMock()
        source.list_products = AsyncMock(
            side_effect=[records_for(product_factory, 1, 2), NetworkFailureError("down")]
        )
        cache = CatalogCache(source)
        listener = MagicMock()
        await cache.refresh()
        cache.subscribe(listener)

        with pytest.raises(NetworkFailureError):
            await cache.refresh()

        assert [r.id for r in cache.records] == ["p1", "p2"]
        listener.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_result_is_not_a_failure(self) -> None:
        source = MagicMock()
        source.list_products = AsyncMock(return_value=[])
        cache = CatalogCache(source)

        await cache.refresh()

        assert cache.records == []
        assert cache.loaded is True

    @pytest.mark.asyncio
    async def test_listeners_receive_new_snapshot(self, product_factory) -> None:
        source = MagicMock()
        source.list_products = AsyncMock(return_value=records_for(product_factory, 1))
        cache = CatalogCache(source)
        listener = MagicMock()
        cache.subscribe(listener)

        await cache.refresh()

        listener.assert_called_once()
        assert [r.id for r in listener.call_args.args[0]] == ["p1"]

    @pytest.mark.asyncio
    async def test_last_refresh_to_resolve_wins(self, product_factory) -> None:
        """Test that overlapping refreshes are not coalesced."""
        slow_started = asyncio.Event()
        release_slow = asyncio.Event()

        async def list_products() -> list[ProductRecord]:
            if not slow_started.is_set():
                slow_started.set()
                await release_slow.wait()
                return records_for(product_factory, 1)
            return records_for(product_factory, 2)

        source = MagicMock()
        source.list_products = AsyncMock(side_effect=list_products)
        cache = CatalogCache(source)

        slow = asyncio.create_task(cache.refresh())
        await slow_started.wait()
        await cache.refresh()
        release_slow.set()
        await slow

        assert [r.id for r in cache.records] == ["p1"]


class TestCatalogCacheLookup:
    """Tests for CatalogCache lookups."""

    def test_get_and_contains(self, product_factory) -> None:
        cache = CatalogCache(MagicMock())
        cache.replace(records_for(product_factory, 1, 2))

        assert cache.get("p2").name == "Bra 2"
        assert cache.get("missing") is None
        assert "p1" in cache
        assert "missing" not in cache

    def test_records_is_a_copy(self, product_factory) -> None:
        cache = CatalogCache(MagicMock())
        cache.replace(records_for(product_factory, 1))

        cache.records.clear()

        assert len(cache) == 1


class TestReferenceCache:
    """Tests for ReferenceCache."""

    @pytest.mark.asyncio
    async def test_refresh_loads_both_lists(self, mock_catalog_client: MagicMock) -> None:
        references = ReferenceCache(mock_catalog_client)

        await references.refresh()

        assert [c.name for c in references.categories] == ["Bras", "Panties"]
        assert [c.name for c in references.colors] == ["Black", "Red"]

    @pytest.mark.asyncio
    async def test_failed_colors_keep_previous_colors(self, mock_catalog_client: MagicMock) -> None:
        references = ReferenceCache(mock_catalog_client)
        await references.refresh()
        mock_catalog_client.list_colors.side_effect = NetworkFailureError("down")

        with pytest.raises(NetworkFailureError):
            await references.refresh()

        assert len(references.colors) == 2
