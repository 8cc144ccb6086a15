"""Slice ordered collections into pages and describe page navigation.

Example
-------
>>> from sitefold.pagination import paginate
>>> page = paginate(25, 1, 10, "/")
>>> (page.total_pages, page.next_page, page.prev_page)
(3, 2, None)
"""

from __future__ import annotations

import math
import typing as typ

from .models import PaginationData

if typ.TYPE_CHECKING:
    import collections.abc as cabc

T = typ.TypeVar("T")


def _check_page_size(page_size: int) -> None:
    if page_size < 1:
        msg = f"page_size must be a positive integer, got {page_size}"
        raise ValueError(msg)


def total_pages(total_items: int, page_size: int) -> int:
    """Return the number of pages needed; zero items means zero pages."""
    _check_page_size(page_size)
    return math.ceil(total_items / page_size) if total_items > 0 else 0


def paginate(
    total_items: int, page: int, page_size: int, page_path: str
) -> PaginationData:
    """Return navigation metadata for ``page`` (1-indexed) of a collection."""
    pages = total_pages(total_items, page_size)
    has_next = page < pages
    has_prev = page > 1
    return PaginationData(
        current_page=page,
        total_pages=pages,
        has_next_page=has_next,
        has_prev_page=has_prev,
        next_page=page + 1 if has_next else None,
        prev_page=page - 1 if has_prev else None,
        page_size=page_size,
        total_items=total_items,
        page_path=page_path,
    )


def slice_page(items: cabc.Sequence[T], page: int, page_size: int) -> list[T]:
    """Return the items on ``page``; out-of-range pages are empty."""
    _check_page_size(page_size)
    if page < 1:
        return []
    start = (page - 1) * page_size
    return list(items[start : start + page_size])


def page_url(page_path: str, page: int) -> str:
    """Return the URL of ``page`` under ``page_path``.

    The first page lives at ``page_path`` itself; later pages at
    ``{page_path}page/{n}/``.
    """
    base = page_path if page_path.endswith("/") else f"{page_path}/"
    return base if page <= 1 else f"{base}page/{page}/"


def iter_pages(
    items: cabc.Sequence[T], page_size: int, page_path: str
) -> cabc.Iterator[tuple[list[T], PaginationData]]:
    """Yield each page's items alongside its navigation metadata."""
    for page in range(1, total_pages(len(items), page_size) + 1):
        yield (
            slice_page(items, page, page_size),
            paginate(len(items), page, page_size, page_path),
        )


__all__ = ["iter_pages", "page_url", "paginate", "slice_page", "total_pages"]
