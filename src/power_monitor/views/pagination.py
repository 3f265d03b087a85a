"""Table pagination state."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from typing import TypeVar

from power_monitor.config.schema import PAGE_SIZES

logger = logging.getLogger(__name__)

T = TypeVar("T")

ELLIPSIS = "..."
PAGE_WINDOW = 2  # pages shown on each side of the current one


class TablePaginator:
    """Current page and page size of the history table.

    Page counts are derived from the live window length on every call so
    they can never go stale.
    """

    def __init__(self, items_per_page: int = PAGE_SIZES[0]) -> None:
        self._check_size(items_per_page)
        self._current_page = 1
        self._items_per_page = items_per_page

    @property
    def current_page(self) -> int:
        return self._current_page

    @property
    def items_per_page(self) -> int:
        return self._items_per_page

    def total_pages(self, buffer_length: int) -> int:
        return math.ceil(buffer_length / self._items_per_page)

    def paginate(self, rows: Sequence[T]) -> list[T]:
        start = (self._current_page - 1) * self._items_per_page
        return list(rows[start:start + self._items_per_page])

    def change_page(self, page: int, buffer_length: int) -> bool:
        """Move to ``page``; out-of-range requests are ignored."""
        if 1 <= page <= self.total_pages(buffer_length):
            self._current_page = page
            return True
        logger.debug("Ignoring page %d (total %d)", page, self.total_pages(buffer_length))
        return False

    def change_page_size(self, size: int) -> None:
        self._check_size(size)
        self._items_per_page = size
        self._current_page = 1

    def reset(self) -> None:
        """Back to the first page, e.g. after the window was replaced."""
        self._current_page = 1

    def page_numbers(self, buffer_length: int) -> list[int | str]:
        """First page, current +/- 2, last page, with gap markers.

        Ten pages with page 5 current give ``[1, '...', 3, 4, 5, 6, 7, '...', 10]``.
        """
        total = self.total_pages(buffer_length)
        current = self._current_page

        pages: list[int | str] = list(
            range(max(2, current - PAGE_WINDOW), min(total - 1, current + PAGE_WINDOW) + 1)
        )
        if current - PAGE_WINDOW > 2:
            pages.insert(0, ELLIPSIS)
        if current + PAGE_WINDOW < total - 1:
            pages.append(ELLIPSIS)

        pages.insert(0, 1)
        if total > 1:
            pages.append(total)
        return pages

    @staticmethod
    def _check_size(size: int) -> None:
        if size not in PAGE_SIZES:
            raise ValueError(f"page size must be one of {PAGE_SIZES}, got {size}")
