"""
NoteShelf Backend — Pagination Normalizer
==========================================

What:  Turns the optional `page` / `limit` query parameters into a `(limit, offset)`
       pair for NoteStore.list_notes().
How:   Missing values fall back to page 1 and the default page size;
       offset = (page - 1) * limit.

Values are not range-checked: zero or negative inputs pass through the
arithmetic unchanged and the storage backend decides what they mean.
"""

from typing import Optional, Tuple

DEFAULT_LIMIT = 10


def normalize_pagination(
    page: Optional[int] = None,
    limit: Optional[int] = None,
    default_limit: int = DEFAULT_LIMIT,
) -> Tuple[int, int]:
    """
    Compute the scan window for a 1-based page.

    Examples:
        normalize_pagination()           -> (10, 0)
        normalize_pagination(3, 20)      -> (20, 40)
        normalize_pagination(limit=5)    -> (5, 0)
    """
    if limit is None:
        limit = default_limit
    if page is None:
        page = 1
    offset = (page - 1) * limit
    return limit, offset
