from __future__ import annotations

from dataclasses import dataclass

from clients.pharmadist_sdk.query_params import PAGE_SIZE_OPTIONS


@dataclass(frozen=True)
class PaginationView:
    current_page: int
    page_size: int
    total_items: int
    total_pages: int

    @property
    def range_start(self) -> int:
        if self.total_items == 0:
            return 0
        return self.current_page * self.page_size + 1

    @property
    def range_end(self) -> int:
        return min((self.current_page + 1) * self.page_size, self.total_items)

    @property
    def range_text(self) -> str:
        return f"Showing {self.range_start} to {self.range_end} of {self.total_items} entries"

    @property
    def has_prev(self) -> bool:
        return self.current_page > 0

    @property
    def has_next(self) -> bool:
        return self.current_page + 1 < self.total_pages


def range_text(current_page: int, page_size: int, total_items: int) -> str:
    return PaginationView(current_page, page_size, total_items, total_pages=0).range_text


def clamp_page(page: int, total_pages: int) -> int:
    """Keep a requested 0-based page inside `[0, total_pages - 1]`.

    With no known pages yet (`total_pages == 0`) only the lower bound applies.
    """
    page = max(0, page)
    if total_pages > 0:
        page = min(page, total_pages - 1)
    return page


def page_count(total_items: int, page_size: int, total_pages: int = 0) -> int:
    """Pages in the result set, derived from `total_items` when `totalPages` is missing."""
    derived = -(-total_items // page_size) if page_size > 0 else 0
    return max(total_pages, derived)


def is_out_of_range(page: int, total_pages: int, total_items: int = 0, page_size: int = 0) -> bool:
    # page 0 is always valid, even for an empty result set
    return page > 0 and page >= page_count(total_items, page_size, total_pages)


def validate_page_size(page_size: int) -> int:
    if page_size not in PAGE_SIZE_OPTIONS:
        raise ValueError(f"page_size must be one of {PAGE_SIZE_OPTIONS}, got {page_size}")
    return page_size


def next_page(view: PaginationView) -> int:
    return clamp_page(view.current_page + 1, view.total_pages)


def prev_page(view: PaginationView) -> int:
    return max(0, view.current_page - 1)


def last_page(view: PaginationView) -> int:
    return max(0, view.total_pages - 1)
