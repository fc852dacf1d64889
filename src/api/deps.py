"""FastAPI dependency injection functions."""

from typing import Annotated

from fastapi import Depends

from src.services.admin_product_service import AdminProductService, get_admin_product_service
from src.services.storefront_service import StorefrontService

AdminService = Annotated[AdminProductService, Depends(get_admin_product_service)]


def get_storefront_service(admin: AdminService) -> StorefrontService:
    """Storefront views share the admin manager's catalog snapshot."""
    return StorefrontService(admin.cache, admin.references)


Storefront = Annotated[StorefrontService, Depends(get_storefront_service)]
