"""Page arithmetic for the inventory list view."""
from __future__ import annotations

import math
from dataclasses import dataclass

PER_PAGE_OPTIONS = (5, 10, 25, 50, 100)
DEFAULT_PER_PAGE = 10


def normalize_per_page(value) -> int:
    try:
        per_page = int(value)
    except (TypeError, ValueError):
        return DEFAULT_PER_PAGE
    return per_page if per_page in PER_PAGE_OPTIONS else DEFAULT_PER_PAGE


@dataclass(frozen=True)
class PageState:
    current_page: int
    per_page: int
    total: int

    @classmethod
    def build(cls, requested_page, per_page, total: int) -> "PageState":
        """Clamp the requested page into the valid range for ``total`` items."""
        per_page = normalize_per_page(per_page)
        try:
            page = int(requested_page)
        except (TypeError, ValueError):
            page = 1
        pages = math.ceil(total / per_page) if total > 0 else 0
        page = max(1, min(page, max(pages, 1)))
        return cls(current_page=page, per_page=per_page, total=max(total, 0))

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.per_page) if self.total > 0 else 0

    @property
    def offset(self) -> int:
        return (self.current_page - 1) * self.per_page

    @property
    def show_controls(self) -> bool:
        # All items fit on one page: hide prev/next and the page label.
        return self.total > self.per_page

    @property
    def has_prev(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def label(self) -> str:
        return f"Page {self.current_page} of {self.total_pages} ({self.total} items)"
