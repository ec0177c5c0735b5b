"""Result caching, pagination and rendering."""

from .cache import ResultCache
from .pagination import count_pages, page_index_from_user, paginate
from .render import (
    OutboundMessage,
    build_title,
    esc,
    format_observation,
    render_full_list,
    render_page,
    render_share,
    render_summary,
)

__all__ = [
    "ResultCache",
    "count_pages",
    "paginate",
    "page_index_from_user",
    "OutboundMessage",
    "build_title",
    "esc",
    "format_observation",
    "render_page",
    "render_summary",
    "render_full_list",
    "render_share",
]
