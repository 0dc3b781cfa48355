"""
Paged fetch loop shared by the holder, trader and interval aggregations.

iter_pages() advances the offset by each page's record count and stops on an
empty page, on reaching the reported total (or a short page when no total is
reported), or once max_records records have been yielded. The cap is checked
before each fetch, so the last page is always processed whole. A short page
before a reported total is logged and paging resumes right after it.

fold_pages() feeds pages into a PageAccumulator until the accumulator says
stop; closing the generator means no further upstream calls are made.
Upstream errors propagate untouched: a failure on any page aborts the fold
and discards what was accumulated.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from typing import Protocol, TypeVar

from holderscope.holderscope_logging import get_logger
from holderscope.solscan.models import Page

logger = get_logger(__name__)

R = TypeVar("R")
R_contra = TypeVar("R_contra", contravariant=True)
T_co = TypeVar("T_co", covariant=True)

FetchPage = Callable[[int, int], Page[R]]


class PageAccumulator(Protocol[R_contra, T_co]):
    """Per-request fold state. add_page() returns False once no more pages are wanted."""

    def add_page(self, page: Page[R_contra]) -> bool: ...

    def result(self) -> T_co: ...


def iter_pages(
    fetch_page: FetchPage[R],
    *,
    page_size: int,
    max_records: int | None = None,
) -> Iterator[Page[R]]:
    """
    Yield pages from fetch_page(offset, size) until the feed or the cap is exhausted.

    Args:
        fetch_page: Callable returning one Page for (offset, size).
        page_size: Records requested per call (upstream ceiling is configuration).
        max_records: Stop fetching once this many records have been yielded.
    """
    if page_size <= 0:
        raise ValueError("page_size must be positive")

    offset = 0
    scanned = 0
    while max_records is None or scanned < max_records:
        page = fetch_page(offset, page_size)
        if not page.records:
            logger.debug("paging_empty_page", offset=offset)
            return
        yield page
        returned = len(page.records)
        scanned += returned
        offset += returned

        if page.total is not None:
            if offset >= page.total:
                logger.debug("paging_total_reached", offset=offset, total=page.total)
                return
            if returned < page_size:
                # Upstream served fewer rows than asked; resume right after them
                logger.warning(
                    "paging_short_page_before_total",
                    offset=offset - returned,
                    records=returned,
                    page_size=page_size,
                    total=page.total,
                )
        elif returned < page_size:
            logger.debug("paging_short_page", offset=offset - returned, records=returned)
            return

    logger.debug("paging_cap_reached", scanned=scanned, max_records=max_records)


def fold_pages(pages: Iterable[Page[R]], accumulator: PageAccumulator[R, T_co]) -> T_co:
    """Feed pages into accumulator until it stops or pages run out; return its result."""
    iterator = iter(pages)
    try:
        for page in iterator:
            if not accumulator.add_page(page):
                break
    finally:
        close = getattr(iterator, "close", None)
        if close is not None:
            close()
    return accumulator.result()
