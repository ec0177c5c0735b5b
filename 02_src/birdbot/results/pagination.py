"""Page slicing over cached result sets."""

import math
from typing import Sequence

from ..config import ITEMS_PER_PAGE
from ..errors import InvalidPageError
from ..models import Observation, Page


def count_pages(item_count: int, page_size: int = ITEMS_PER_PAGE) -> int:
    return math.ceil(item_count / page_size) if item_count > 0 else 0


def paginate(
    items: Sequence[Observation],
    page_size: int = ITEMS_PER_PAGE,
    page_index: int = 0,
) -> Page:
    """Return the zero-based ``page_index`` slice of ``items``.

    Raises:
        InvalidPageError: when the index is outside [0, total_pages).
    """
    if page_size <= 0:
        raise ValueError("page_size must be positive")

    total_pages = count_pages(len(items), page_size)
    if page_index < 0 or page_index >= total_pages:
        raise InvalidPageError(page=page_index + 1, total_pages=total_pages)

    start = page_index * page_size
    end = min(start + page_size, len(items))
    return Page(
        items=list(items[start:end]),
        start_index=start,
        end_index=end,
        total_pages=total_pages,
        page_index=page_index,
        total_items=len(items),
    )


def page_index_from_user(text: str, total_pages: int) -> int:
    """Validate a one-based page number typed by the user; return the zero-based index."""
    try:
        page_number = int(str(text).strip())
    except ValueError:
        raise InvalidPageError(page=0, total_pages=total_pages)

    if page_number < 1 or page_number > total_pages:
        raise InvalidPageError(page=page_number, total_pages=total_pages)
    return page_number - 1
