"""Client-side filtering, pagination and list windowing."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Generic, Literal, TypeVar

from qayd.constants import DEFAULT_PAGE_SIZE, PAGE_SIZE_OPTIONS

T = TypeVar("T")

DEFAULT_ITEM_HEIGHT = 50.0
DEFAULT_OVERSCAN = 3


def _field_value(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def filter_records(
    records: Iterable[T], search: str | None, fields: Sequence[str]
) -> list[T]:
    """Keep records where any field contains the search text (case-insensitive)."""
    items = list(records)
    needle = (search or "").strip().lower()
    if not needle:
        return items
    return [
        record
        for record in items
        if any(
            needle in str(value).lower()
            for value in (_field_value(record, name) for name in fields)
            if value is not None
        )
    ]


@dataclass(frozen=True)
class Page(Generic[T]):
    items: list[T]
    page: int
    page_size: int
    total_items: int
    total_pages: int

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def start_index(self) -> int:
        """1-based index of the first item on the page (0 when empty)."""
        return (self.page - 1) * self.page_size + 1 if self.items else 0

    @property
    def end_index(self) -> int:
        return self.start_index + len(self.items) - 1 if self.items else 0


def paginate(items: Sequence[T], page: int = 1, page_size: int = DEFAULT_PAGE_SIZE) -> Page[T]:
    """Slice items into a page; out-of-range pages are clamped."""
    if page_size not in PAGE_SIZE_OPTIONS:
        raise ValueError(f"page_size must be one of {PAGE_SIZE_OPTIONS}, got {page_size}")
    total_items = len(items)
    total_pages = max(1, math.ceil(total_items / page_size))
    current = min(max(1, page), total_pages)
    start = (current - 1) * page_size
    return Page(
        items=list(items[start : start + page_size]),
        page=current,
        page_size=page_size,
        total_items=total_items,
        total_pages=total_pages,
    )


class VirtualWindow:
    """Works out which rows of a long list need rendering.

    With `item_height` every row has the same height. Otherwise rows start
    at `estimated_item_height` and are corrected with `measure`.
    """

    def __init__(
        self,
        item_count: int,
        item_height: float | None = None,
        estimated_item_height: float = DEFAULT_ITEM_HEIGHT,
        overscan: int = DEFAULT_OVERSCAN,
    ):
        if item_count < 0:
            raise ValueError("item_count must not be negative")
        if item_height is not None and item_height <= 0:
            raise ValueError("item_height must be positive")
        if estimated_item_height <= 0:
            raise ValueError("estimated_item_height must be positive")
        self.item_count = item_count
        self.item_height = item_height
        self.estimated_item_height = estimated_item_height
        self.overscan = max(0, overscan)
        self._measured: dict[int, float] = {}

    def height_of(self, index: int) -> float:
        if self.item_height is not None:
            return self.item_height
        return self._measured.get(index, self.estimated_item_height)

    def measure(self, index: int, height: float) -> None:
        """Record the rendered height of a row (ignored in fixed-height mode)."""
        if self.item_height is None and 0 <= index < self.item_count and height > 0:
            self._measured[index] = height

    def resize(self, item_count: int) -> None:
        if item_count < 0:
            raise ValueError("item_count must not be negative")
        self.item_count = item_count
        self._measured = {i: h for i, h in self._measured.items() if i < item_count}

    def offset_of(self, index: int) -> float:
        """Distance from the top of the list to the top of row index."""
        index = min(max(0, index), self.item_count)
        if self.item_height is not None:
            return index * self.item_height
        return sum(self.height_of(i) for i in range(index))

    @property
    def total_height(self) -> float:
        return self.offset_of(self.item_count)

    def _index_at(self, offset: float) -> int:
        if self.item_count == 0:
            return 0
        if self.item_height is not None:
            return min(self.item_count - 1, max(0, int(offset // self.item_height)))
        position = 0.0
        for index in range(self.item_count):
            position += self.height_of(index)
            if position > offset:
                return index
        return self.item_count - 1

    def visible_range(self, scroll_top: float, viewport_height: float) -> tuple[int, int]:
        """Inclusive (start, end) row indexes to render, overscan included.

        Returns (0, -1) for an empty list.
        """
        if self.item_count == 0:
            return 0, -1
        scroll_top = max(0.0, scroll_top)
        first = self._index_at(scroll_top)
        last = self._index_at(scroll_top + max(0.0, viewport_height) - 1e-9)
        start = max(0, first - self.overscan)
        end = min(self.item_count - 1, last + self.overscan)
        return start, end

    def scroll_offset_for(
        self,
        index: int,
        viewport_height: float,
        align: Literal["start", "center", "end"] = "start",
    ) -> float:
        """Scroll position that brings row index into view."""
        top = self.offset_of(index)
        height = self.height_of(index)
        if align == "center":
            target = top - (viewport_height - height) / 2
        elif align == "end":
            target = top + height - viewport_height
        else:
            target = top
        max_scroll = max(0.0, self.total_height - viewport_height)
        return min(max(0.0, target), max_scroll)
