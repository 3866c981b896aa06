"""Pagination for GitHub list operations.

Both API styles are walked by the same loop:
- GraphQL connections continue with `pageInfo.endCursor` while `pageInfo.hasNextPage` is set
- REST listings continue with the next page number while a full page is returned

Traversal state is an immutable `Cursor` handed to the page fetcher and replaced with the
`next_cursor` of each returned `Page`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from pr_resource.libs.exceptions import PaginationError

T = TypeVar("T")


@dataclass(frozen=True)
class Cursor:
    """Position of the next page to fetch.

    `after` is the GraphQL end cursor (None for the first page), `page` the zero based
    REST page index.
    """

    after: str | None = None
    page: int = 0


START_CURSOR = Cursor()


@dataclass(frozen=True)
class Page(Generic[T]):
    """One fetched page and where to continue from. `next_cursor` is None on the last page."""

    items: list[T] = field(default_factory=list)
    next_cursor: Cursor | None = None

    @classmethod
    def from_connection(cls, items: list[T], page_info: dict[str, Any]) -> Page[T]:
        """Build a page from a GraphQL connection's `pageInfo`."""
        if not page_info.get("hasNextPage"):
            return cls(items=items)
        return cls(items=items, next_cursor=Cursor(after=page_info.get("endCursor")))

    @classmethod
    def from_listing(cls, items: list[T], cursor: Cursor, per_page: int) -> Page[T]:
        """Build a page from a REST listing; a short page is the last one."""
        if len(items) < per_page:
            return cls(items=items)
        return cls(items=items, next_cursor=Cursor(page=cursor.page + 1))


def paginate(
    fetch_page: Callable[[Cursor], Page[T]],
    start: Cursor = START_CURSOR,
    logger: logging.Logger | None = None,
) -> list[T]:
    """
    Fetch pages until the continuation signal runs out.

    Args:
        fetch_page: Fetches the page at the given cursor
        start: Cursor of the first page
        logger: Optional logger for page tracing

    Returns:
        Items of all pages in fetch order

    Raises:
        PaginationError: If a page points back at a cursor that was already fetched
    """
    results: list[T] = []
    seen: set[Cursor] = set()
    cursor = start

    while True:
        seen.add(cursor)
        page = fetch_page(cursor)
        results.extend(page.items)

        if logger:
            logger.debug(f"Fetched page {len(seen)} with {len(page.items)} items (total {len(results)})")

        if page.next_cursor is None:
            return results

        if page.next_cursor in seen:
            raise PaginationError(f"Pagination did not advance past {page.next_cursor}")

        cursor = page.next_cursor
