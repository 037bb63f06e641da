"""
Sequential page walker for TMDB list endpoints (/movie/popular, /tv/popular).

Pages are requested one at a time starting at 1. The walk ends at the first of:
- the configured page cap,
- the source-reported `total_pages`,
- a failed page (no retry; whatever was accumulated so far is returned).
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from catalog_seeder.client.results import FetchResult

logger = logging.getLogger(__name__)


def walk_pages(
    fetch_page: Callable[[int], FetchResult],
    max_pages: int,
    *,
    label: str = "items",
) -> list[dict[str, Any]]:
    """
    Accumulate the `results` lists of consecutive pages.

    Args:
        fetch_page: Page-fetch operation, e.g. TmdbClient.fetch_popular_movies.
        max_pages: Upper bound on pages requested.
        label: Used in log lines only.

    Returns:
        All results collected before the walk stopped. A failure part-way
        through yields a partial list, never an exception.
    """
    items: list[dict[str, Any]] = []

    for page in range(1, max_pages + 1):
        result = fetch_page(page)
        if not result.ok:
            logger.warning(
                "PAGINATION_ABORTED label=%s page=%d collected=%d reason=%s",
                label,
                page,
                len(items),
                result.error,
            )
            break

        payload = result.payload
        page_items = payload.get("results") or []
        items.extend(page_items)

        total_pages = payload.get("total_pages")
        logger.info(
            "PAGINATION_PAGE_OK label=%s page=%d/%d items=%d total_pages=%s",
            label,
            page,
            max_pages,
            len(page_items),
            total_pages,
        )

        if total_pages is not None and page >= total_pages:
            break

    return items
