"""Admin product manager state definitions."""

from dataclasses import dataclass, field
from enum import Enum

from src.schemas.product import Size

MULTI_SELECT_FIELDS = ("sizes", "colors", "categories")
SCALAR_FIELDS = ("name", "description", "price")
SIZE_OPTIONS = tuple(size.value for size in Size)


@dataclass(frozen=True)
class PendingFile:
    """An image selected for upload that the remote store has not seen yet."""

    filename: str
    content: bytes = field(repr=False)
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass
class DraftRecord:
    """Editable working copy of a product.

    Colors and categories hold bare ids. ``images`` holds only pending files;
    ``preview`` holds every displayable locator, remote URLs first, then one
    locator per pending file in the same order.
    """

    name: str = ""
    description: str = ""
    price: str = ""
    sizes: list[str] = field(default_factory=list)
    colors: list[str] = field(default_factory=list)
    categories: list[str] = field(default_factory=list)
    images: list[PendingFile] = field(default_factory=list)
    preview: list[str] = field(default_factory=list)

    @property
    def pending_previews(self) -> list[str]:
        """Preview locators backed by pending files (the tail of ``preview``)."""
        if not self.images:
            return []
        return self.preview[-len(self.images):]


@dataclass
class PaginationState:
    """1-indexed page cursor over the catalog cache."""

    current_page: int = 1
    items_per_page: int = 4


class MutationState(str, Enum):
    """Mutation orchestrator states."""

    IDLE = "idle"
    SUBMITTING = "submitting"
    DELETING = "deleting"


@dataclass
class AdminState:
    """The single owned state of the admin product manager."""

    draft: DraftRecord = field(default_factory=DraftRecord)
    editing_id: str | None = None
    pagination: PaginationState = field(default_factory=PaginationState)
    mutation_state: MutationState = MutationState.IDLE

    @property
    def is_busy(self) -> bool:
        return self.mutation_state != MutationState.IDLE

    @property
    def is_editing(self) -> bool:
        return self.editing_id is not None
