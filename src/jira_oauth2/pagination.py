"""Offset-based pagination over Jira search endpoints.

collect_pages() repeatedly calls a page fetcher with (startAt, maxResults) and
concatenates the returned items in fetch order. Without a limit it stops at the
first short page; with a limit it also stops once the limit is reached.

The loop is strictly sequential: each request's offset depends on the previous
page, and a failing fetch propagates without returning partial results.

Example:
    >>> async def fetch(start_at, max_results):
    ...     page = await client.search_issues(jql, start_at=start_at, max_results=max_results)
    ...     return page["issues"]
    >>> issues = await collect_pages(fetch, limit=250)
"""

from typing import Awaitable, Callable, Sequence, TypeVar

from .logger import Logger, silent_logger

T = TypeVar("T")

# Jira Cloud caps search pages at 100 issues
SEARCH_PAGE_SIZE = 100

PageFetcher = Callable[[int, int], Awaitable[Sequence[T]]]


async def collect_pages(
    fetch_page: PageFetcher[T],
    *,
    page_size: int = SEARCH_PAGE_SIZE,
    start_at: int = 0,
    limit: int | None = None,
    logger: Logger | None = None,
) -> list[T]:
    """Fetch pages until the server runs out or ``limit`` items are collected.

    Args:
        fetch_page: Async callable ``(start_at, max_results) -> items``
        page_size: Items requested per page (must be > 0)
        start_at: Offset of the first item (must be >= 0)
        limit: Maximum total items, None for everything
        logger: Optional diagnostic logger

    Returns:
        Items from all fetched pages, in page order

    Raises:
        ValueError: On a non-positive page_size or negative start_at/limit
        Exception: Whatever fetch_page raises, unchanged
    """
    if page_size <= 0:
        raise ValueError("page_size must be greater than 0")
    if start_at < 0:
        raise ValueError("start_at must be >= 0")
    if limit is not None and limit < 0:
        raise ValueError("limit must be >= 0")

    log = logger or silent_logger
    results: list[T] = []
    offset = start_at
    remaining = limit

    if remaining == 0:
        return results

    while True:
        requested = page_size if remaining is None else min(page_size, remaining)
        items = list(await fetch_page(offset, requested))

        if remaining is not None:
            items = items[:requested]
            remaining -= len(items)
        results.extend(items)

        log.debug(
            "jira_page_fetched",
            start_at=offset,
            requested=requested,
            page_items=len(items),
            total_so_far=len(results),
        )

        if len(items) < requested or remaining == 0:
            break
        offset += requested

    return results
