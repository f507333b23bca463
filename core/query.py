"""
core/query.py -- Filter and pagination engine for list endpoints.

Precedence is fixed: filters first, then the page window. query() is the only
entry point the services use, so a caller cannot paginate before filtering.

Filtering:
  Each keyword filter is a case-insensitive substring test against the record
  attribute of the same name. Filters AND together. None or blank values are
  no-ops. Comparison uses str.casefold().

Pagination:
  Applied only when both page and page_size are given. page is 1-based:
  skip (page - 1) * page_size, take page_size. The arithmetic is passed
  through -- a non-positive skip skips nothing and a non-positive take returns
  nothing, mirroring skip/take semantics rather than Python's negative slice
  indices. clamp=True raises both values to at least 1 first (CLAMP_PAGINATION).

Ordering is whatever the input sequence provides. The stores always enumerate
in ascending id order so page windows are stable across calls.

Usage:
    page = query(vehicles, page=2, page_size=5, name="uno", brand=None)
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Optional, TypeVar

T = TypeVar("T")

# Window size used by every HTTP listing endpoint.
DEFAULT_PAGE_SIZE = 5


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def filter_records(records: Iterable[T], **filters: Optional[str]) -> list[T]:
    """Keep records whose named attributes contain every non-blank filter value.

    Raises AttributeError if a filter names an attribute the records lack --
    a typo in a filter name should fail loudly, not match everything.
    """
    active = {field: value.casefold() for field, value in filters.items() if not _is_blank(value)}
    if not active:
        return list(records)
    return [
        r
        for r in records
        if all(needle in str(getattr(r, field)).casefold() for field, needle in active.items())
    ]


def paginate(
    records: Sequence[T],
    page: Optional[int],
    page_size: Optional[int],
    clamp: bool = False,
) -> list[T]:
    """Return the 1-based page window, or everything if page or page_size is None."""
    if page is None or page_size is None:
        return list(records)
    if clamp:
        page = max(page, 1)
        page_size = max(page_size, 1)
    skip = max((page - 1) * page_size, 0)
    if page_size <= 0:
        return []
    return list(records[skip : skip + page_size])


def query(
    records: Iterable[T],
    page: Optional[int] = None,
    page_size: Optional[int] = None,
    clamp: bool = False,
    **filters: Optional[str],
) -> list[T]:
    """Filter, then paginate."""
    return paginate(filter_records(records, **filters), page, page_size, clamp=clamp)
