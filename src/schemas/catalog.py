"""Storefront (public catalog) response schemas."""

from pydantic import Field

from src.schemas.common import CamelModel
from src.schemas.product import ProductRecord


class ProductCardResponse(CamelModel):
    """A product with its primary image resolved for display."""

    product: ProductRecord = Field(description="Product record")
    image_url: str = Field(description="Resolved URL of the first image or the placeholder")


class ProductListResponse(CamelModel):
    """All products in cache order."""

    items: list[ProductCardResponse] = Field(default_factory=list, description="Products")
    total: int = Field(description="Number of products")


class ProductDetailResponse(CamelModel):
    """Detail page payload."""

    product: ProductRecord = Field(description="Product record")
    image_urls: list[str] = Field(default_factory=list, description="Resolved carousel image URLs")
    related: list[ProductCardResponse] = Field(default_factory=list, description="Products sharing a category")


class FeaturedProductsRequest(CamelModel):
    """View counts used to rank featured products."""

    views: dict[str, int] = Field(default_factory=dict, description="View count per product id")
    limit: int | None = Field(default=None, ge=1, le=50, description="Override the number of products returned")


class FeaturedProductsResponse(CamelModel):
    """Most viewed products."""

    items: list[ProductCardResponse] = Field(default_factory=list, description="Featured products")


class CatalogSummaryResponse(CamelModel):
    """Home page metrics."""

    product_count: int = Field(description="Products available")
    category_count: int = Field(description="Categories available")
    total_views: int = Field(description="Sum of the supplied view counts")
    featured: list[ProductCardResponse] = Field(default_factory=list, description="Featured products")


class CarouselResponse(CamelModel):
    """Detail page image carousel position."""

    index: int = Field(description="Image position after the step")
    count: int = Field(description="Number of images")
    image_url: str = Field(description="Resolved URL at this position, or the placeholder")
