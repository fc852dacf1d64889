"""Admin product manager request/response schemas."""

from typing import Literal

from pydantic import Field

from src.schemas.common import CamelModel
from src.schemas.product import Category, Color, ProductRecord


class PendingImageResponse(CamelModel):
    """A pending image file attached to the draft."""

    filename: str = Field(description="Original file name")
    content_type: str = Field(description="MIME type")
    size: int = Field(description="Size in bytes")


class DraftResponse(CamelModel):
    """The product form draft."""

    name: str = Field(description="Product name")
    description: str = Field(description="Product description")
    price: str = Field(description="Price as typed; parsed at submit")
    sizes: list[str] = Field(default_factory=list, description="Selected size tags")
    colors: list[str] = Field(default_factory=list, description="Selected color ids")
    categories: list[str] = Field(default_factory=list, description="Selected category ids")
    images: list[PendingImageResponse] = Field(default_factory=list, description="Pending image uploads")


class PageSlot(CamelModel):
    """One grid slot on the admin page; placeholders carry no product."""

    placeholder: bool = Field(description="True for an empty filler slot")
    product: ProductRecord | None = Field(default=None, description="Product shown in this slot")


class AdminViewResponse(CamelModel):
    """Everything the admin product manager view renders."""

    visible_slice: list[PageSlot] = Field(description="Fixed-size page of products")
    total_pages: int = Field(description="Number of pages, 0 when the catalog is empty")
    current_page: int = Field(description="1-indexed current page")
    page_number_window: list[int] = Field(description="Page numbers to link")
    total_products: int = Field(description="Products in the catalog cache")
    draft: DraftResponse = Field(description="Form draft")
    preview: list[str] = Field(description="Displayable image locators for the draft")
    editing_id: str | None = Field(default=None, description="Product being edited, null in create mode")
    mode: Literal["create", "edit"] = Field(description="Form mode")
    is_busy: bool = Field(description="True while a submit or delete is in flight")
    categories: list[Category] = Field(default_factory=list, description="Selectable categories")
    colors: list[Color] = Field(default_factory=list, description="Selectable colors")


class DraftUpdateRequest(CamelModel):
    """Scalar draft fields to overwrite; omitted fields are left as they are."""

    name: str | None = Field(default=None, description="Product name")
    description: str | None = Field(default=None, description="Product description")
    price: str | None = Field(default=None, description="Price as typed")


class ToggleRequest(CamelModel):
    """Toggle one value of a multi-select field."""

    field: str = Field(description="sizes, colors or categories")
    value: str = Field(description="Size tag or color/category id")


class SubmitResponse(CamelModel):
    """Result of a successful submit."""

    product: ProductRecord = Field(description="Record returned by the remote store")
    view: AdminViewResponse = Field(description="Admin view after the refresh")
