"""Fixed-size paging over an already classified player list."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, TypeVar

PAGE_SIZE = 10

T = TypeVar("T")


def total_pages(count: int, page_size: int = PAGE_SIZE) -> int:
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    if count <= 0:
        return 0
    return -(-count // page_size)


def page(items: Sequence[T], page_number: int, page_size: int = PAGE_SIZE) -> list[T]:
    """Return the 1-based ``page_number`` slice of ``items``.

    Out-of-range page numbers produce an empty list rather than an error.
    """

    if page_size <= 0:
        raise ValueError("page_size must be positive")
    if page_number < 1:
        return []
    start = (page_number - 1) * page_size
    return list(items[start : start + page_size])


@dataclass(frozen=True)
class PageState:
    """Current page position for a result of ``count`` items."""

    count: int
    current_page: int = 1
    page_size: int = PAGE_SIZE

    @property
    def total_pages(self) -> int:
        return total_pages(self.count, self.page_size)

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    def goto(self, page_number: int) -> "PageState":
        """Move to ``page_number``, clamped to the pages that exist (at least 1)."""

        clamped = max(1, min(page_number, self.total_pages or 1))
        return PageState(count=self.count, current_page=clamped, page_size=self.page_size)

    def next(self) -> "PageState":
        if not self.has_next:
            return self
        return self.goto(self.current_page + 1)

    def previous(self) -> "PageState":
        if not self.has_previous:
            return self
        return self.goto(self.current_page - 1)

    def slice(self, items: Sequence[T]) -> list[T]:
        return page(items, self.current_page, self.page_size)


__all__ = ["PAGE_SIZE", "PageState", "page", "total_pages"]
