"""Storefront catalog API routes."""

from typing import Annotated

from fastapi import APIRouter, Query

from src.api.deps import AdminService, Storefront
from src.schemas.catalog import (
    CarouselResponse,
    CatalogSummaryResponse,
    FeaturedProductsRequest,
    FeaturedProductsResponse,
    ProductDetailResponse,
    ProductListResponse,
)
from src.schemas.product import Category, Color

router = APIRouter(prefix="/catalog", tags=["catalog"])
reference_router = APIRouter(tags=["catalog"])


@router.get(
    "/products",
    response_model=ProductListResponse,
    summary="List catalog products",
    description="Returns every product in the store's order with its primary image resolved.",
)
async def list_products(storefront: Storefront) -> ProductListResponse:
    await storefront.ensure_loaded()
    return storefront.list_products()


@router.post(
    "/products/featured",
    response_model=FeaturedProductsResponse,
    summary="Rank featured products by views",
    description="View counts are supplied by the caller; products without a count rank last.",
)
async def featured_products(
    payload: FeaturedProductsRequest,
    storefront: Storefront,
) -> FeaturedProductsResponse:
    await storefront.ensure_loaded()
    return storefront.featured(payload.views, payload.limit)


@router.get(
    "/products/{product_id}",
    response_model=ProductDetailResponse,
    summary="Get a product detail page",
    responses={404: {"description": "Product not found"}},
)
async def get_product(product_id: str, storefront: Storefront) -> ProductDetailResponse:
    """Return the product, its carousel images and related products."""
    await storefront.ensure_loaded()
    return storefront.product_detail(product_id)


@router.get(
    "/products/{product_id}/carousel",
    response_model=CarouselResponse,
    summary="Step through a product's images",
    responses={404: {"description": "Product not found"}},
)
async def carousel(
    product_id: str,
    storefront: Storefront,
    index: Annotated[int, Query(ge=0, description="Current image position")] = 0,
    step: Annotated[int, Query(ge=-1, le=1, description="-1 previous, 1 next")] = 1,
) -> CarouselResponse:
    """Wrap-around navigation: next from the last image returns to the first."""
    await storefront.ensure_loaded()
    return storefront.carousel(product_id, index, step)


@router.post(
    "/summary",
    response_model=CatalogSummaryResponse,
    summary="Home page metrics",
)
async def summary(payload: FeaturedProductsRequest, storefront: Storefront) -> CatalogSummaryResponse:
    await storefront.ensure_loaded()
    return storefront.summary(payload.views)


@reference_router.get(
    "/categories",
    response_model=list[Category],
    summary="List categories",
)
async def list_categories(service: AdminService) -> list[Category]:
    """Reload and return the selectable categories."""
    return await service.references.refresh_categories()


@reference_router.get(
    "/colors",
    response_model=list[Color],
    summary="List colors",
)
async def list_colors(service: AdminService) -> list[Color]:
    """Reload and return the selectable colors."""
    return await service.references.refresh_colors()
