"""HTTP client for the remote product/category/color store."""

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from src.api.middleware.error_handler import NetworkFailureError, NotFoundError
from src.core.config import get_settings
from src.schemas.product import Category, Color, ProductRecord

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# One multipart part: (field name, (filename or None, content[, content type]))
MultipartPart = tuple[str, tuple[Any, ...]]

PRODUCTS_PATH = "/api/products"
CATEGORIES_PATH = "/api/categories"
COLORS_PATH = "/api/colors"


class CatalogAPIClient:
    """Async client for the remote catalog store.

    Every call either returns decoded data or raises ``NetworkFailureError``
    (transport failure, non-2xx answer, undecodable body) or ``NotFoundError``
    (upstream 404). An empty list is a successful result. Individual list
    items that fail validation are logged and skipped.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize catalog client.

        Args:
            base_url: Base URL of the remote store.
            timeout: Request timeout in seconds.
            http_client: Optional preconfigured httpx client for testing.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = http_client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            follow_redirects=True,
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            logger.warning("Catalog %s %s timed out: %s", method, path, e)
            raise NetworkFailureError(f"Remote catalog request timed out after {self.timeout}s") from e
        except httpx.RequestError as e:
            logger.warning("Catalog %s %s failed: %s", method, path, e)
            raise NetworkFailureError(f"Remote catalog request failed: {e}") from e

        logger.debug("Catalog %s %s -> %d", method, path, response.status_code)

        if response.status_code == httpx.codes.NOT_FOUND:
            raise NotFoundError(f"Remote catalog resource not found: {path}")
        if not response.is_success:
            raise NetworkFailureError(
                f"Remote catalog answered HTTP {response.status_code}: {response.text[:200]}",
                upstream_status=response.status_code,
            )
        return response

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise NetworkFailureError("Remote catalog returned a non-JSON body") from e

    def _validate_list(self, data: Any, model: type[ModelT], path: str) -> list[ModelT]:
        if not isinstance(data, list):
            raise NetworkFailureError(f"Remote catalog returned a non-list body for {path}")
        records = []
        for item in data:
            try:
                records.append(model.model_validate(item))
            except PydanticValidationError as e:
                # One malformed record must not block the rest of the catalog
                logger.error("Skipping invalid %s record from %s: %s", model.__name__, path, e)
        return records

    def _validate_product(self, data: Any) -> ProductRecord:
        # Some deployments wrap the saved record as {"product": {...}}
        if isinstance(data, dict) and isinstance(data.get("product"), dict):
            data = data["product"]
        try:
            return ProductRecord.model_validate(data)
        except PydanticValidationError as e:
            logger.error("Invalid product returned by remote catalog: %s", e)
            raise NetworkFailureError("Remote catalog returned an invalid product record") from e

    async def list_products(self) -> list[ProductRecord]:
        """Fetch every product record, in the store's order."""
        response = await self._request("GET", PRODUCTS_PATH)
        products = self._validate_list(self._decode(response), ProductRecord, PRODUCTS_PATH)
        logger.info("Fetched %d products from remote catalog", len(products))
        return products

    async def create_product(self, parts: list[MultipartPart]) -> ProductRecord:
        """Create a product from a multipart payload."""
        response = await self._request("POST", PRODUCTS_PATH, files=parts)
        product = self._validate_product(self._decode(response))
        logger.info("Created product %s", product.id)
        return product

    async def update_product(self, product_id: str, parts: list[MultipartPart]) -> ProductRecord:
        """Replace a product from a multipart payload."""
        response = await self._request("PUT", f"{PRODUCTS_PATH}/{product_id}", files=parts)
        product = self._validate_product(self._decode(response))
        logger.info("Updated product %s", product.id)
        return product

    async def delete_product(self, product_id: str) -> None:
        """Delete a product."""
        await self._request("DELETE", f"{PRODUCTS_PATH}/{product_id}")
        logger.info("Deleted product %s", product_id)

    async def list_categories(self) -> list[Category]:
        """Fetch every category."""
        response = await self._request("GET", CATEGORIES_PATH)
        return self._validate_list(self._decode(response), Category, CATEGORIES_PATH)

    async def list_colors(self) -> list[Color]:
        """Fetch every color."""
        response = await self._request("GET", COLORS_PATH)
        return self._validate_list(self._decode(response), Color, COLORS_PATH)

    async def check_connection(self) -> dict[str, Any]:
        """Check if the remote store is reachable.

        Returns:
            dict: Connection status with 'healthy' boolean and optional 'error' message.
        """
        try:
            await self._request("GET", CATEGORIES_PATH)
            return {"healthy": True}
        except (NetworkFailureError, NotFoundError) as e:
            return {"healthy": False, "error": e.message}


# Global singleton instance
_catalog_client: CatalogAPIClient | None = None


def get_catalog_client() -> CatalogAPIClient:
    """Get or create the global catalog client."""
    global _catalog_client
    if _catalog_client is None:
        settings = get_settings()
        _catalog_client = CatalogAPIClient(
            base_url=settings.catalog_api_url,
            timeout=settings.catalog_api_timeout,
        )
    return _catalog_client


async def close_catalog_client() -> None:
    """Close the global catalog client. Call at app shutdown."""
    global _catalog_client
    if _catalog_client is not None:
        await _catalog_client.aclose()
        _catalog_client = None
