"""Local projection of the remote catalog."""

import logging
from collections.abc import Callable
from typing import Protocol

from src.schemas.product import Category, Color, ProductRecord

logger = logging.getLogger(__name__)

RefreshListener = Callable[[list[ProductRecord]], None]


class ProductSource(Protocol):
    """The remote calls the caches depend on."""

    async def list_products(self) -> list[ProductRecord]: ...

    async def list_categories(self) -> list[Category]: ...

    async def list_colors(self) -> list[Color]: ...


class CatalogCache:
    """Ordered copy of every product record fetched from the remote store.

    The contents are only ever replaced wholesale by ``refresh()``. When two
    refreshes overlap, whichever resolves last wins. A failed fetch leaves
    the previous contents in place and propagates the error.
    """

    def __init__(self, source: ProductSource) -> None:
        self._source = source
        self._records: tuple[ProductRecord, ...] = ()
        self._by_id: dict[str, ProductRecord] = {}
        self._listeners: list[RefreshListener] = []
        self.loaded = False

    def subscribe(self, listener: RefreshListener) -> None:
        """Register a callback run with the new snapshot after every successful refresh."""
        self._listeners.append(listener)

    async def refresh(self) -> list[ProductRecord]:
        """Fetch the full product set and replace the cache contents."""
        records = await self._source.list_products()
        self.replace(records)
        return list(records)

    def replace(self, records: list[ProductRecord]) -> None:
        """Atomically swap in a new snapshot and notify listeners."""
        self._records = tuple(records)
        self._by_id = {record.id: record for record in self._records}
        self.loaded = True
        logger.info("Catalog cache refreshed with %d products", len(self._records))
        for listener in self._listeners:
            listener(list(self._records))

    def get(self, product_id: str) -> ProductRecord | None:
        """Return the cached record with this id, or None."""
        return self._by_id.get(product_id)

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._by_id

    def __len__(self) -> int:
        return len(self._records)

    @property
    def records(self) -> list[ProductRecord]:
        """Snapshot of the cached records in remote order."""
        return list(self._records)


class ReferenceCache:
    """Selectable categories and colors for the product form."""

    def __init__(self, source: ProductSource) -> None:
        self._source = source
        self.categories: list[Category] = []
        self.colors: list[Color] = []
        self.loaded = False

    async def refresh_categories(self) -> list[Category]:
        categories = await self._source.list_categories()
        self.categories = list(categories)
        logger.info("Loaded %d categories", len(self.categories))
        return self.categories

    async def refresh_colors(self) -> list[Color]:
        colors = await self._source.list_colors()
        self.colors = list(colors)
        logger.info("Loaded %d colors", len(self.colors))
        return self.colors

    async def refresh(self) -> None:
        """Reload both lists. Each list is only replaced when its own fetch succeeds."""
        await self.refresh_categories()
        await self.refresh_colors()
        self.loaded = True
