"""Sequences create/update/delete calls against the remote store."""

import logging
from decimal import Decimal
from typing import Protocol

from src.api.middleware.error_handler import BusyError, NotFoundError
from src.core.catalog_client import MultipartPart
from src.models.admin import AdminState, DraftRecord, MutationState
from src.schemas.product import ProductRecord
from src.services.catalog_cache import CatalogCache
from src.services.form_reconciler import FormReconciler, validate_draft
from src.services.pagination import clamp_page, count_pages, page_after_delete, project

logger = logging.getLogger(__name__)


class ProductWriter(Protocol):
    """The remote mutation calls the orchestrator depends on."""

    async def create_product(self, parts: list[MultipartPart]) -> ProductRecord: ...

    async def update_product(self, product_id: str, parts: list[MultipartPart]) -> ProductRecord: ...

    async def delete_product(self, product_id: str) -> None: ...


def build_multipart(draft: DraftRecord, price: Decimal | None = None) -> list[MultipartPart]:
    """Build the multipart parts for a create/update request.

    ``price`` is the value parsed at validation; when given it is sent in
    plain positional notation instead of the text typed into the draft.

    Scalars first, then one part per selected size, color and category, then
    one ``images`` file part per pending file. No ``images`` part is emitted
    when nothing is pending.
    """
    parts: list[MultipartPart] = [
        ("name", (None, draft.name.strip())),
        ("description", (None, draft.description.strip())),
        ("price", (None, format(price, "f") if price is not None else str(draft.price).strip())),
    ]
    parts.extend(("sizes", (None, size)) for size in draft.sizes)
    parts.extend(("colors", (None, color_id)) for color_id in draft.colors)
    parts.extend(("categories", (None, category_id)) for category_id in draft.categories)
    parts.extend(
        ("images", (file.filename, file.content, file.content_type))
        for file in draft.images
    )
    return parts


class MutationOrchestrator:
    """Idle/Submitting/Deleting state machine around remote mutations.

    Only one mutation runs at a time; a request issued while another is in
    flight raises ``BusyError`` without touching any state.
    """

    def __init__(
        self,
        writer: ProductWriter,
        cache: CatalogCache,
        reconciler: FormReconciler,
    ) -> None:
        self.writer = writer
        self.cache = cache
        self.reconciler = reconciler

    @staticmethod
    def ensure_idle(state: AdminState, action: str) -> None:
        """Raise BusyError unless no mutation is in flight."""
        if state.is_busy:
            logger.warning("Rejected %s while %s", action, state.mutation_state.value)
            raise BusyError(f"Cannot {action} while another operation is in progress")

    async def submit(self, state: AdminState) -> ProductRecord:
        """Create or update the product held in the draft.

        On success the cache is refreshed and the form returns to create
        mode. On failure the draft and editing id are left as they were.
        """
        self.ensure_idle(state, "submit")
        price = validate_draft(state.draft)

        editing_id = state.editing_id
        if editing_id is not None and editing_id not in self.cache:
            raise NotFoundError(f"Product {editing_id} no longer exists")

        parts = build_multipart(state.draft, price)
        state.mutation_state = MutationState.SUBMITTING
        try:
            if editing_id is None:
                saved = await self.writer.create_product(parts)
                logger.info("Product %s created", saved.id)
            else:
                saved = await self.writer.update_product(editing_id, parts)
                logger.info("Product %s updated", editing_id)

            await self.cache.refresh()
            self.reconciler.start_create(state)
            return saved
        except Exception:
            logger.warning("Submit failed, draft preserved (editing_id=%s)", editing_id)
            raise
        finally:
            state.mutation_state = MutationState.IDLE

    async def delete(self, state: AdminState, product_id: str) -> None:
        """Delete a product, refresh the cache and re-clamp the page.

        Confirmation is the caller's job and must happen before this call.
        """
        self.ensure_idle(state, "delete")
        if product_id not in self.cache:
            raise NotFoundError(f"Product {product_id} not found")

        pagination = state.pagination
        page_before = pagination.current_page
        on_page = project(self.cache.records, page_before, pagination.items_per_page).items
        items_on_page = len(on_page) if any(r.id == product_id for r in on_page) else 0

        state.mutation_state = MutationState.DELETING
        try:
            await self.writer.delete_product(product_id)
            logger.info("Product %s deleted", product_id)

            if state.editing_id == product_id:
                self.reconciler.start_create(state)

            await self.cache.refresh()
            total_pages = count_pages(len(self.cache), pagination.items_per_page)
            pagination.current_page = clamp_page(
                page_after_delete(page_before, items_on_page),
                total_pages,
            )
        finally:
            state.mutation_state = MutationState.IDLE
