"""Cursor pagination over Notion list endpoints.

Every Notion list endpoint (database queries, block children) answers with
``results``, ``has_more`` and ``next_cursor``. fetch_all_pages walks those
cursors to completion and returns one ordered list.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Set

from .errors import APIAccessError

logger = logging.getLogger(__name__)

PAGE_SIZE = 100


@dataclass
class PageResult:
    """One page of a paginated listing.

    Attributes:
        items: Raw result objects in API order
        next_cursor: Cursor for the following page, None on the last page
    """
    items: List[Dict[str, Any]] = field(default_factory=list)
    next_cursor: Optional[str] = None

    @classmethod
    def from_response(cls, response: Dict[str, Any]) -> 'PageResult':
        """Build a PageResult from a Notion list response body."""
        items = response.get('results') or []
        next_cursor = response.get('next_cursor') if response.get('has_more') else None
        return cls(items=list(items), next_cursor=next_cursor or None)


def fetch_all_pages(
    fetch_page: Callable[[Optional[str]], PageResult],
    description: str = "listing",
) -> List[Dict[str, Any]]:
    """Collect every item of a cursor-paginated listing.

    Args:
        fetch_page: Called with None for the first page, then with each
                    next_cursor. Each call is expected to go through the
                    resilient client.
        description: Label used in logs and errors

    Returns:
        All items across all pages, in order

    Raises:
        APIAccessError: If the API hands back a cursor it already returned
    """
    items: List[Dict[str, Any]] = []
    seen_cursors: Set[str] = set()
    cursor: Optional[str] = None
    page_count = 0

    while True:
        page = fetch_page(cursor)
        page_count += 1
        items.extend(page.items)

        if page.next_cursor is None:
            break
        if page.next_cursor in seen_cursors:
            raise APIAccessError(
                f"Pagination for {description} returned a repeated cursor after {page_count} pages"
            )
        seen_cursors.add(page.next_cursor)
        cursor = page.next_cursor

    logger.debug(f"Fetched {len(items)} items for {description} in {page_count} pages")
    return items
