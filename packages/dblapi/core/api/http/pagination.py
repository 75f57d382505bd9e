from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from typing import Any, Protocol

from dblapi.core.api.http.pending import PendingResult


class OffsetPage(Protocol):
    """Page of results for offset/limit pagination."""

    @property
    def results(self) -> Sequence[Any]: ...

    @property
    def total(self) -> int | None: ...


def iterate_offset(
    fetch_page: Callable[[int, int], PendingResult[Any]],
    *,
    page_size: int,
    start_offset: int = 0,
    max_pages: int | None = None,
    timeout: float | None = None,
) -> Iterator[Any]:
    """Iterate through offset-paginated results.

    Pages are requested one at a time; the caller's thread blocks on each
    page's PendingResult, so use this from a worker, not a callback.

    Args:
        fetch_page: Function issuing a page request given (offset, limit)
        page_size: Items requested per page
        start_offset: Offset of the first page
        max_pages: Maximum number of pages to fetch (None for all)
        timeout: Seconds to wait for each page (None waits indefinitely)

    Yields:
        Individual items from each page

    Raises:
        ApiError: The failure of the first page that could not be fetched
    """
    if page_size < 1:
        raise ValueError("page_size must be >= 1")

    offset = start_offset
    pages = 0
    while True:
        page = fetch_page(offset, page_size).result(timeout)
        yield from page.results
        pages += 1
        offset += len(page.results)
        if len(page.results) < page_size:
            return
        if page.total is not None and offset >= page.total:
            return
        if max_pages is not None and pages >= max_pages:
            return
