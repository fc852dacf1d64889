"""Fixed-size page projection over the catalog cache.

Pure functions only: they take the cache snapshot and the page cursor and
return derived values, never mutating either.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass, field

from src.schemas.product import ProductRecord

DEFAULT_ITEMS_PER_PAGE = 4
DEFAULT_MAX_PAGE_LINKS = 5


@dataclass(frozen=True)
class PageProjection:
    """One rendered page.

    ``visible_slice`` always holds exactly ``items_per_page`` slots; ``None``
    marks an empty placeholder slot with no identity.
    """

    visible_slice: list[ProductRecord | None] = field(default_factory=list)
    total_pages: int = 0
    current_page: int = 1

    @property
    def items(self) -> list[ProductRecord]:
        """Only the real records on this page."""
        return [slot for slot in self.visible_slice if slot is not None]


def count_pages(count: int, items_per_page: int = DEFAULT_ITEMS_PER_PAGE) -> int:
    """Number of pages needed for ``count`` records, 0 when there are none."""
    if items_per_page < 1:
        raise ValueError("items_per_page must be at least 1")
    if count <= 0:
        return 0
    return max(1, math.ceil(count / items_per_page))


def clamp_page(page: int, total_pages: int) -> int:
    """Clamp a page number into ``[1, total_pages]`` (1 when there are no pages)."""
    if total_pages <= 0:
        return 1
    return min(max(page, 1), total_pages)


def project(
    records: Sequence[ProductRecord],
    current_page: int,
    items_per_page: int = DEFAULT_ITEMS_PER_PAGE,
) -> PageProjection:
    """Slice the page to display and pad it to a fixed grid size."""
    total_pages = count_pages(len(records), items_per_page)
    page = clamp_page(current_page, total_pages)
    start = (page - 1) * items_per_page
    visible: list[ProductRecord | None] = list(records[start : start + items_per_page])
    visible.extend([None] * (items_per_page - len(visible)))
    return PageProjection(visible_slice=visible, total_pages=total_pages, current_page=page)


def page_window(
    current_page: int,
    total_pages: int,
    max_links: int = DEFAULT_MAX_PAGE_LINKS,
) -> list[int]:
    """Page numbers to link, centered on the current page and clamped at both ends.

    >>> page_window(8, 12)
    [6, 7, 8, 9, 10]
    >>> page_window(1, 12)
    [1, 2, 3, 4, 5]
    """
    start = max(1, current_page - max_links // 2)
    end = min(total_pages, start + max_links - 1)
    if end - start + 1 < max_links:
        start = max(1, end - max_links + 1)
    return list(range(start, end + 1))


def page_after_delete(current_page: int, items_on_page: int) -> int:
    """Page to show once the deleted record's page may have emptied.

    Steps back one page when the record was the only one on a page past
    the first.
    """
    if items_on_page == 1 and current_page > 1:
        return current_page - 1
    return current_page
