"""Admin product manager: one owned state driven by the view-layer actions."""

import logging
from collections.abc import Iterable
from typing import Any

from src.api.middleware.error_handler import NetworkFailureError, NotFoundError, ValidationError
from src.core.catalog_client import CatalogAPIClient, get_catalog_client
from src.core.config import Settings, get_settings
from src.models.admin import AdminState, PaginationState, PendingFile
from src.schemas.admin import (
    AdminViewResponse,
    DraftResponse,
    PageSlot,
    PendingImageResponse,
)
from src.schemas.product import ProductRecord
from src.services.catalog_cache import CatalogCache, ReferenceCache
from src.services.form_reconciler import FormReconciler, PreviewStore
from src.services.mutation_orchestrator import MutationOrchestrator
from src.services.pagination import PageProjection, clamp_page, count_pages, page_window, project

logger = logging.getLogger(__name__)


class AdminProductService:
    """Service behind the admin product manager view."""

    def __init__(
        self,
        client: Any,
        settings: Settings | None = None,
        previews: PreviewStore | None = None,
    ) -> None:
        """Initialize the admin product service.

        Args:
            client: Remote store client (list/create/update/delete calls).
            settings: Optional settings for testing.
            previews: Optional preview store for testing.
        """
        settings = settings or get_settings()
        self.client = client
        self.max_page_links = settings.max_page_links
        self.max_upload_size = settings.max_upload_size_bytes
        self.max_upload_files = settings.max_upload_files

        self.state = AdminState(pagination=PaginationState(items_per_page=settings.items_per_page))
        self.cache = CatalogCache(client)
        self.references = ReferenceCache(client)
        self.reconciler = FormReconciler(previews)
        self.orchestrator = MutationOrchestrator(client, self.cache, self.reconciler)
        self.cache.subscribe(self._on_catalog_refresh)

    def _on_catalog_refresh(self, records: list[ProductRecord]) -> None:
        pagination = self.state.pagination
        total_pages = count_pages(len(records), pagination.items_per_page)
        pagination.current_page = clamp_page(pagination.current_page, total_pages)
        self.reconciler.drop_stale_edit(self.state, records)

    # Loading

    async def refresh(self) -> AdminViewResponse:
        """Reload the products from the remote store."""
        await self.cache.refresh()
        return self.view()

    async def load(self) -> None:
        """Load products and reference data, tolerating an unreachable store."""
        try:
            await self.cache.refresh()
            await self.references.refresh()
        except NetworkFailureError as e:
            logger.warning("Initial catalog load failed: %s", e.message)

    # Projection

    def projection(self) -> PageProjection:
        pagination = self.state.pagination
        return project(self.cache.records, pagination.current_page, pagination.items_per_page)

    def view(self) -> AdminViewResponse:
        """Build the full admin view from the current state."""
        projection = self.projection()
        draft = self.state.draft
        return AdminViewResponse(
            visible_slice=[
                PageSlot(placeholder=slot is None, product=slot)
                for slot in projection.visible_slice
            ],
            total_pages=projection.total_pages,
            current_page=projection.current_page,
            page_number_window=page_window(
                projection.current_page, projection.total_pages, self.max_page_links
            ),
            total_products=len(self.cache),
            draft=DraftResponse(
                name=draft.name,
                description=draft.description,
                price=draft.price,
                sizes=list(draft.sizes),
                colors=list(draft.colors),
                categories=list(draft.categories),
                images=[
                    PendingImageResponse(
                        filename=file.filename,
                        content_type=file.content_type,
                        size=file.size,
                    )
                    for file in draft.images
                ],
            ),
            preview=list(draft.preview),
            editing_id=self.state.editing_id,
            mode="edit" if self.state.is_editing else "create",
            is_busy=self.state.is_busy,
            categories=list(self.references.categories),
            colors=list(self.references.colors),
        )

    # Form actions

    def start_create(self) -> AdminViewResponse:
        self.orchestrator.ensure_idle(self.state, "reset the form")
        self.reconciler.start_create(self.state)
        return self.view()

    def start_edit(self, product_id: str) -> AdminViewResponse:
        self.orchestrator.ensure_idle(self.state, "edit a product")
        record = self.cache.get(product_id)
        if record is None:
            raise NotFoundError(f"Product {product_id} not found")
        self.reconciler.start_edit(self.state, record)
        return self.view()

    def update_draft(self, **fields: str | None) -> AdminViewResponse:
        """Overwrite the given scalar draft fields; None values are skipped."""
        self.orchestrator.ensure_idle(self.state, "edit the draft")
        for name, value in fields.items():
            if value is not None:
                self.reconciler.set_field(self.state, name, value)
        return self.view()

    def toggle(self, field_name: str, value: str) -> AdminViewResponse:
        self.orchestrator.ensure_idle(self.state, "edit the draft")
        self.reconciler.toggle(self.state, field_name, value)
        return self.view()

    def add_files(self, files: Iterable[PendingFile]) -> AdminViewResponse:
        """Attach image files to the draft after checking type and size."""
        self.orchestrator.ensure_idle(self.state, "edit the draft")
        files = list(files)
        self.check_upload_count(len(files))
        for file in files:
            self._validate_file(file)
        self.reconciler.add_files(self.state, files)
        return self.view()

    def check_upload_count(self, count: int) -> None:
        if count > self.max_upload_files:
            raise ValidationError(
                f"At most {self.max_upload_files} images can be uploaded at once",
                details=[{"loc": ["images"], "msg": "Too many files", "type": "value_error"}],
            )

    def _validate_file(self, file: PendingFile) -> None:
        if not file.content_type.startswith("image/"):
            raise ValidationError(
                f"File '{file.filename}' is not an image",
                details=[{"loc": ["images"], "msg": "Only image files are accepted", "type": "value_error"}],
            )
        if file.size == 0:
            raise ValidationError(
                f"File '{file.filename}' is empty",
                details=[{"loc": ["images"], "msg": "Empty file", "type": "value_error"}],
            )
        if file.size > self.max_upload_size:
            raise ValidationError(
                f"File '{file.filename}' exceeds {self.max_upload_size} bytes",
                details=[{"loc": ["images"], "msg": "File too large", "type": "value_error"}],
            )

    def get_preview(self, token: str) -> PendingFile:
        file = self.reconciler.previews.get(token)
        if file is None:
            raise NotFoundError("Preview not found")
        return file

    # Mutations

    async def submit(self) -> ProductRecord:
        return await self.orchestrator.submit(self.state)

    async def delete(self, product_id: str) -> AdminViewResponse:
        await self.orchestrator.delete(self.state, product_id)
        return self.view()

    # Navigation

    def go_to_page(self, page: int) -> AdminViewResponse:
        pagination = self.state.pagination
        total_pages = count_pages(len(self.cache), pagination.items_per_page)
        pagination.current_page = clamp_page(page, total_pages)
        return self.view()

    def next_page(self) -> AdminViewResponse:
        pagination = self.state.pagination
        total_pages = count_pages(len(self.cache), pagination.items_per_page)
        if pagination.current_page < total_pages:
            pagination.current_page += 1
        return self.view()

    def prev_page(self) -> AdminViewResponse:
        pagination = self.state.pagination
        if pagination.current_page > 1:
            pagination.current_page -= 1
        return self.view()

    # Teardown

    def close(self) -> int:
        """Release every preview locator and discard the draft."""
        return self.reconciler.close(self.state)


# Global singleton instance
_admin_product_service: AdminProductService | None = None


def get_admin_product_service() -> AdminProductService:
    """Get or create the global admin product service."""
    global _admin_product_service
    if _admin_product_service is None:
        client: CatalogAPIClient = get_catalog_client()
        _admin_product_service = AdminProductService(client)
    return _admin_product_service


async def init_admin_product_service() -> AdminProductService:
    """Create the service and optionally load the catalog. Call at app startup."""
    service = get_admin_product_service()
    if get_settings().catalog_refresh_on_startup:
        await service.load()
    return service


def shutdown_admin_product_service() -> None:
    """Release preview resources. Call at app shutdown."""
    global _admin_product_service
    if _admin_product_service is not None:
        _admin_product_service.close()
        _admin_product_service = None
