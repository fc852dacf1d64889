"""Admin product manager API routes."""

import logging

from fastapi import APIRouter, File, Response, UploadFile, status

from src.api.deps import AdminService
from src.models.admin import PendingFile
from src.schemas.admin import (
    AdminViewResponse,
    DraftUpdateRequest,
    SubmitResponse,
    ToggleRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/products", tags=["admin"])


@router.get(
    "",
    response_model=AdminViewResponse,
    summary="Get the admin product manager view",
)
async def get_view(service: AdminService) -> AdminViewResponse:
    """Return the current page, draft and form mode."""
    return service.view()


@router.post(
    "/refresh",
    response_model=AdminViewResponse,
    summary="Reload products from the remote store",
    responses={502: {"description": "Remote store unavailable"}},
)
async def refresh(service: AdminService) -> AdminViewResponse:
    """Replace the catalog cache with a fresh copy of the remote store."""
    return await service.refresh()


@router.post(
    "/create",
    response_model=AdminViewResponse,
    summary="Reset the form to create mode",
)
async def start_create(service: AdminService) -> AdminViewResponse:
    return service.start_create()


@router.patch(
    "/draft",
    response_model=AdminViewResponse,
    summary="Update scalar draft fields",
)
async def update_draft(payload: DraftUpdateRequest, service: AdminService) -> AdminViewResponse:
    """Overwrite name, description and/or price on the draft."""
    return service.update_draft(
        name=payload.name,
        description=payload.description,
        price=payload.price,
    )


@router.post(
    "/draft/toggle",
    response_model=AdminViewResponse,
    summary="Toggle a size, color or category on the draft",
)
async def toggle(payload: ToggleRequest, service: AdminService) -> AdminViewResponse:
    return service.toggle(payload.field, payload.value)


@router.post(
    "/draft/files",
    response_model=AdminViewResponse,
    summary="Attach image files to the draft",
    responses={
        413: {"description": "Request body larger than a full upload batch"},
        422: {"description": "Not an image, empty, too large, or too many files"},
    },
)
async def add_files(
    service: AdminService,
    files: list[UploadFile] = File(..., description="Image files (image/*)"),
) -> AdminViewResponse:
    """Add pending images; each one gets a preview locator."""
    service.check_upload_count(len(files))
    pending = []
    for upload in files:
        # One byte past the limit is enough for the size check to reject it
        content = await upload.read(service.max_upload_size + 1)
        pending.append(
            PendingFile(
                filename=upload.filename or "image",
                content=content,
                content_type=upload.content_type or "application/octet-stream",
            )
        )
    return service.add_files(pending)


@router.get(
    "/previews/{token}",
    summary="Serve a pending image preview",
    responses={404: {"description": "Preview released or unknown"}},
)
async def get_preview(token: str, service: AdminService) -> Response:
    file = service.get_preview(token)
    return Response(content=file.content, media_type=file.content_type)


@router.post(
    "/submit",
    response_model=SubmitResponse,
    summary="Create or update the product in the draft",
    responses={
        409: {"description": "Another operation is in progress"},
        422: {"description": "Draft is incomplete or invalid"},
        502: {"description": "Remote store unavailable"},
    },
)
async def submit(service: AdminService) -> SubmitResponse:
    """Send the draft to the remote store, then refresh and reset the form."""
    product = await service.submit()
    return SubmitResponse(product=product, view=service.view())


@router.post(
    "/page/next",
    response_model=AdminViewResponse,
    summary="Go to the next page",
)
async def next_page(service: AdminService) -> AdminViewResponse:
    return service.next_page()


@router.post(
    "/page/prev",
    response_model=AdminViewResponse,
    summary="Go to the previous page",
)
async def prev_page(service: AdminService) -> AdminViewResponse:
    return service.prev_page()


@router.post(
    "/page/{page}",
    response_model=AdminViewResponse,
    summary="Go to a page",
)
async def go_to_page(page: int, service: AdminService) -> AdminViewResponse:
    """Jump to a page; out of range numbers are clamped."""
    return service.go_to_page(page)


@router.post(
    "/close",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Release draft preview resources",
)
async def close(service: AdminService) -> None:
    """Discard the draft and release every preview locator."""
    service.close()


@router.post(
    "/{product_id}/edit",
    response_model=AdminViewResponse,
    summary="Load a product into the form",
    responses={404: {"description": "Product not in the catalog"}},
)
async def start_edit(product_id: str, service: AdminService) -> AdminViewResponse:
    return service.start_edit(product_id)


@router.delete(
    "/{product_id}",
    response_model=AdminViewResponse,
    summary="Delete a product",
    responses={
        404: {"description": "Product not in the catalog"},
        409: {"description": "Another operation is in progress"},
        502: {"description": "Remote store unavailable"},
    },
)
async def delete_product(product_id: str, service: AdminService) -> AdminViewResponse:
    """Delete a product. The caller confirms with the user first."""
    return await service.delete(product_id)
