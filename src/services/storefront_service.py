"""Read-only storefront views over the catalog cache."""

import logging
from collections.abc import Mapping, Sequence

from src.api.middleware.error_handler import NotFoundError
from src.core.config import Settings, get_settings
from src.schemas.catalog import (
    CarouselResponse,
    CatalogSummaryResponse,
    FeaturedProductsResponse,
    ProductCardResponse,
    ProductDetailResponse,
    ProductListResponse,
)
from src.schemas.product import ProductRecord, reference_label
from src.services.catalog_cache import CatalogCache, ReferenceCache

logger = logging.getLogger(__name__)


def resolve_image_url(
    path: str | None,
    api_base_url: str,
    assets_prefix: str = "/assets",
    placeholder: str = "/assets/product-placeholder.jpg",
) -> str:
    """Turn a stored image reference into a displayable URL.

    Absolute URLs (e.g. a CDN) pass through, ``uploads/`` paths are served by
    the catalog API, anything else is a bundled asset.
    """
    if not path:
        return placeholder
    if path.startswith(("http://", "https://")):
        return path
    if path.startswith(("/uploads/", "uploads/")):
        return f"{api_base_url.rstrip('/')}/{path.lstrip('/')}"
    return f"{assets_prefix.rstrip('/')}/{path}"


def featured_products(
    records: Sequence[ProductRecord],
    views: Mapping[str, int],
    limit: int = 4,
) -> list[ProductRecord]:
    """Most viewed products first; ties keep cache order."""
    ranked = sorted(records, key=lambda r: views.get(r.id, 0), reverse=True)
    return ranked[:limit]


def related_products(
    product: ProductRecord,
    records: Sequence[ProductRecord],
    limit: int = 4,
) -> list[ProductRecord]:
    """Other products sharing at least one category with ``product``."""
    labels = {reference_label(c) for c in product.categories}
    if not labels:
        return []
    related = [
        r for r in records
        if r.id != product.id and any(reference_label(c) in labels for c in r.categories)
    ]
    return related[:limit]


def carousel_index(current: int, count: int, step: int) -> int:
    """Next carousel position, wrapping at both ends."""
    if count <= 0:
        return 0
    return (current + step) % count


class StorefrontService:
    """Service for the public catalog pages."""

    def __init__(
        self,
        cache: CatalogCache,
        references: ReferenceCache,
        settings: Settings | None = None,
    ) -> None:
        """Initialize storefront service.

        Args:
            cache: Shared catalog cache.
            references: Shared category/color cache.
            settings: Optional settings for testing.
        """
        self.cache = cache
        self.references = references
        self.settings = settings or get_settings()

    async def ensure_loaded(self) -> None:
        """Fetch the catalog and reference lists on first use."""
        if not self.cache.loaded:
            await self.cache.refresh()
        if not self.references.loaded:
            await self.references.refresh()

    def resolve_image_url(self, path: str | None) -> str:
        return resolve_image_url(
            path,
            api_base_url=self.settings.catalog_api_url,
            assets_prefix=self.settings.public_assets_prefix,
            placeholder=self.settings.product_placeholder_image,
        )

    def _card(self, record: ProductRecord) -> ProductCardResponse:
        images = record.display_images
        return ProductCardResponse(
            product=record,
            image_url=self.resolve_image_url(images[0] if images else None),
        )

    def list_products(self) -> ProductListResponse:
        records = self.cache.records
        return ProductListResponse(items=[self._card(r) for r in records], total=len(records))

    def featured(self, views: Mapping[str, int], limit: int | None = None) -> FeaturedProductsResponse:
        top = featured_products(
            self.cache.records,
            views,
            limit or self.settings.featured_products_limit,
        )
        return FeaturedProductsResponse(items=[self._card(r) for r in top])

    def product_detail(self, product_id: str) -> ProductDetailResponse:
        """Detail page payload for one product.

        Raises:
            NotFoundError: If the product is not in the catalog.
        """
        product = self.cache.get(product_id)
        if product is None:
            raise NotFoundError(f"Product {product_id} not found")
        related = related_products(
            product,
            self.cache.records,
            self.settings.related_products_limit,
        )
        return ProductDetailResponse(
            product=product,
            image_urls=[self.resolve_image_url(path) for path in product.display_images],
            related=[self._card(r) for r in related],
        )

    def summary(self, views: Mapping[str, int]) -> CatalogSummaryResponse:
        return CatalogSummaryResponse(
            product_count=len(self.cache),
            category_count=len(self.references.categories),
            total_views=sum(views.values()),
            featured=self.featured(views).items,
        )

    def carousel(self, product_id: str, index: int, step: int) -> CarouselResponse:
        """Move the detail page carousel ``step`` images from ``index``."""
        product = self.cache.get(product_id)
        if product is None:
            raise NotFoundError(f"Product {product_id} not found")
        images = product.display_images
        position = carousel_index(index, len(images), step)
        return CarouselResponse(
            index=position,
            count=len(images),
            image_url=self.resolve_image_url(images[position] if images else None),
        )
