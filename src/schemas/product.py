"""Product Pydantic schemas for the remote catalog store records."""

from collections.abc import Mapping
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class Size(str, Enum):
    """Size tags a product can be offered in."""

    S = "S"
    M = "M"
    G = "G"
    XG = "XG"


class CatalogEntity(BaseModel):
    """A named entity from the remote store (color or category)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(
        validation_alias=AliasChoices("_id", "id"),
        description="Identifier assigned by the remote store",
    )
    name: str = Field(default="", description="Display name")


class Color(CatalogEntity):
    """Color entity."""

    hex: str | None = Field(default=None, description="Optional swatch color")


class Category(CatalogEntity):
    """Category entity."""

    description: str | None = Field(default=None, description="Category description")


# A reference is either a bare id or the embedded entity the store populated.
ColorReference = Color | str
CategoryReference = Category | str


def reference_id(reference: Any) -> str:
    """Normalize a color/category reference to its bare id.

    Accepts an embedded entity model, a raw mapping carrying ``_id`` or
    ``id``, or a bare id.
    """
    if isinstance(reference, CatalogEntity):
        return reference.id
    if isinstance(reference, Mapping):
        ref_id = reference.get("_id", reference.get("id"))
        if ref_id is None:
            raise ValueError(f"Reference has no id: {reference!r}")
        return str(ref_id)
    return str(reference)


def reference_label(reference: Any) -> str:
    """Human label for a reference: the entity name when embedded, else the id."""
    if isinstance(reference, CatalogEntity) and reference.name:
        return reference.name
    if isinstance(reference, Mapping) and reference.get("name"):
        return str(reference["name"])
    return reference_id(reference)


class ProductRecord(BaseModel):
    """A product as persisted by the remote store."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(
        validation_alias=AliasChoices("_id", "id"),
        description="Identifier assigned by the remote store",
    )
    name: str = Field(..., min_length=1, description="Product name")
    description: str = Field(default="", description="Product description")
    price: Decimal = Field(default=Decimal("0"), ge=0, description="Unit price")
    sizes: list[Size] = Field(default_factory=list, description="Available sizes")
    colors: list[ColorReference] = Field(default_factory=list, description="Color references")
    categories: list[CategoryReference] = Field(default_factory=list, description="Category references")
    images: list[str] = Field(default_factory=list, description="Persisted image URLs")
    image: str | None = Field(default=None, description="Legacy single image field")

    @property
    def color_ids(self) -> list[str]:
        """Color references normalized to ids."""
        return [reference_id(c) for c in self.colors]

    @property
    def category_ids(self) -> list[str]:
        """Category references normalized to ids."""
        return [reference_id(c) for c in self.categories]

    @property
    def display_images(self) -> list[str]:
        """Persisted images, falling back to the legacy single image."""
        if self.images:
            return list(self.images)
        if self.image:
            return [self.image]
        return []
