"""Draft product form state: create/edit switching, selections and pending images."""

import logging
from collections.abc import Iterable
from dataclasses import replace
from decimal import Decimal, InvalidOperation
from uuid import uuid4

from src.api.middleware.error_handler import ValidationError
from src.models.admin import (
    MULTI_SELECT_FIELDS,
    SCALAR_FIELDS,
    SIZE_OPTIONS,
    AdminState,
    DraftRecord,
    PendingFile,
)
from src.schemas.product import ProductRecord, reference_id

logger = logging.getLogger(__name__)

PREVIEW_URL_PREFIX = "/api/v1/admin/products/previews"


class PreviewStore:
    """Transient preview locators for pending image files.

    Every locator handed out must be released once its draft is superseded
    or the manager is torn down.
    """

    def __init__(self, url_prefix: str = PREVIEW_URL_PREFIX) -> None:
        self.url_prefix = url_prefix.rstrip("/")
        self._files: dict[str, PendingFile] = {}

    def create(self, file: PendingFile) -> str:
        """Register a pending file and return its preview locator."""
        token = uuid4().hex
        self._files[token] = file
        return f"{self.url_prefix}/{token}"

    def get(self, token: str) -> PendingFile | None:
        return self._files.get(token)

    def _token(self, locator: str) -> str | None:
        prefix = f"{self.url_prefix}/"
        if not locator.startswith(prefix):
            return None
        return locator[len(prefix):]

    def release(self, locator: str) -> bool:
        """Release one locator. Locators this store did not create are ignored."""
        token = self._token(locator)
        if token is None:
            return False
        return self._files.pop(token, None) is not None

    def release_many(self, locators: Iterable[str]) -> int:
        return sum(1 for locator in list(locators) if self.release(locator))

    def release_all(self) -> int:
        count = len(self._files)
        self._files.clear()
        return count

    def __len__(self) -> int:
        return len(self._files)


def draft_from_record(record: ProductRecord) -> DraftRecord:
    """Build an edit draft from a persisted record.

    Scalars are copied verbatim, references are reduced to bare ids, no
    pending files are carried and the preview shows the persisted images.
    """
    return DraftRecord(
        name=record.name,
        description=record.description,
        price=str(record.price),
        sizes=[size.value for size in record.sizes],
        colors=[reference_id(c) for c in record.colors],
        categories=[reference_id(c) for c in record.categories],
        images=[],
        preview=record.display_images,
    )


def toggle(draft: DraftRecord, field_name: str, value: str) -> DraftRecord:
    """Add ``value`` to a multi-select field if absent, remove it if present.

    Returns a new draft; two identical toggles cancel out.
    """
    if field_name not in MULTI_SELECT_FIELDS:
        raise ValidationError(
            f"Field '{field_name}' is not a multi-select field",
            details=[{"loc": [field_name], "msg": "Unknown multi-select field", "type": "value_error"}],
        )
    if field_name == "sizes" and value not in SIZE_OPTIONS:
        raise ValidationError(
            f"Unknown size '{value}'",
            details=[{"loc": ["sizes"], "msg": f"Size must be one of {', '.join(SIZE_OPTIONS)}", "type": "value_error"}],
        )
    if not value:
        raise ValidationError(
            "Selection value cannot be empty",
            details=[{"loc": [field_name], "msg": "Value is required", "type": "missing"}],
        )

    current: list[str] = getattr(draft, field_name)
    if value in current:
        updated = [item for item in current if item != value]
    else:
        updated = [*current, value]
    return replace(draft, **{field_name: updated})


def parse_price(raw: str) -> Decimal:
    """Parse a draft price, raising ValidationError unless it is a non-negative number."""
    try:
        price = Decimal(str(raw).strip())
    except InvalidOperation as e:
        raise ValidationError(
            "Price must be a number",
            details=[{"loc": ["price"], "msg": "Price must be a number", "type": "decimal_parsing"}],
        ) from e
    if not price.is_finite() or price < 0:
        raise ValidationError(
            "Price must be a non-negative number",
            details=[{"loc": ["price"], "msg": "Price must be greater than or equal to 0", "type": "greater_than_equal"}],
        )
    return price


def validate_draft(draft: DraftRecord) -> Decimal:
    """Check the mandatory fields before anything is sent to the remote store.

    Returns:
        Decimal: The parsed price.

    Raises:
        ValidationError: With one detail entry per failing field.
    """
    details = []
    if not draft.name.strip():
        details.append({"loc": ["name"], "msg": "Name is required", "type": "missing"})
    if not draft.description.strip():
        details.append({"loc": ["description"], "msg": "Description is required", "type": "missing"})
    if not str(draft.price).strip():
        details.append({"loc": ["price"], "msg": "Price is required", "type": "missing"})
    if details:
        raise ValidationError("Product draft is incomplete", details=details)
    return parse_price(draft.price)


class FormReconciler:
    """Owns transitions of the draft and the editing id on an AdminState."""

    def __init__(self, previews: PreviewStore | None = None) -> None:
        self.previews = previews or PreviewStore()

    def _release_pending(self, draft: DraftRecord) -> None:
        released = self.previews.release_many(draft.pending_previews)
        if released:
            logger.debug("Released %d preview locators", released)

    def start_create(self, state: AdminState) -> AdminState:
        """Reset to an empty draft in create mode."""
        self._release_pending(state.draft)
        state.draft = DraftRecord()
        state.editing_id = None
        return state

    def start_edit(self, state: AdminState, record: ProductRecord) -> AdminState:
        """Load a persisted record into the draft and switch to edit mode."""
        self._release_pending(state.draft)
        state.draft = draft_from_record(record)
        state.editing_id = record.id
        logger.info("Editing product %s", record.id)
        return state

    def set_field(self, state: AdminState, field_name: str, value: str) -> AdminState:
        """Update one scalar draft field."""
        if field_name not in SCALAR_FIELDS:
            raise ValidationError(
                f"Field '{field_name}' cannot be edited directly",
                details=[{"loc": [field_name], "msg": "Unknown draft field", "type": "value_error"}],
            )
        state.draft = replace(state.draft, **{field_name: value})
        return state

    def toggle(self, state: AdminState, field_name: str, value: str) -> AdminState:
        state.draft = toggle(state.draft, field_name, value)
        return state

    def add_files(self, state: AdminState, files: Iterable[PendingFile]) -> AdminState:
        """Append pending files and one preview locator per file, in order."""
        files = list(files)
        if not files:
            return state
        locators = [self.previews.create(file) for file in files]
        state.draft = replace(
            state.draft,
            images=[*state.draft.images, *files],
            preview=[*state.draft.preview, *locators],
        )
        logger.debug("Added %d pending images to draft", len(files))
        return state

    def drop_stale_edit(self, state: AdminState, records: list[ProductRecord]) -> bool:
        """Return to create mode if the record being edited no longer exists."""
        if state.editing_id is None:
            return False
        if any(record.id == state.editing_id for record in records):
            return False
        logger.info("Product %s disappeared from catalog, leaving edit mode", state.editing_id)
        self.start_create(state)
        return True

    def close(self, state: AdminState) -> int:
        """Release every preview locator and discard the draft (teardown)."""
        released = self.previews.release_all()
        state.draft = DraftRecord()
        state.editing_id = None
        logger.info("Released %d preview locators on teardown", released)
        return released
