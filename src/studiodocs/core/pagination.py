"""Split ordered item sequences into pages under a capacity limit.

Two capacity models exist: a card grid (columns × rows that fit the
content area) and a list/table with a fixed row budget. Pages preserve
item order and never mix two groups.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, Optional, Sequence, TypeVar

from .aggregator import CategoryGroup

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page/slide worth of items."""

    items: tuple[T, ...]
    number: int          # 1-based
    total: int
    overflow: int = 0    # items hidden by an upstream cap, last page only

    @property
    def is_first(self) -> bool:
        return self.number == 1

    @property
    def is_last(self) -> bool:
        return self.number == self.total

    @property
    def indicator(self) -> str:
        """``"(2/3)"`` when the group spans several pages, else ``""``."""
        return f"({self.number}/{self.total})" if self.total > 1 else ""


def grid_capacity(
    columns: int,
    area_height: float,
    card_height: float,
    gap: float = 0.1,
) -> int:
    """Cards that fit a content area: ``columns × rows``, at least one row."""
    if columns < 1 or card_height <= 0:
        raise ValueError("columns and card_height must be positive")
    rows = math.floor((area_height + gap) / (card_height + gap))
    return columns * max(rows, 1)


def list_capacity(rows: int) -> int:
    """Fixed row budget of a list/table page."""
    if rows < 1:
        raise ValueError("a list page needs at least one row")
    return rows


def paginate(
    items: Sequence[T],
    capacity: int,
    limit: Optional[int] = None,
) -> list[Page[T]]:
    """Split *items* into ``ceil(n / capacity)`` pages.

    When *limit* is given only the first *limit* items are paginated and
    the last page records how many were left out.
    """
    if capacity < 1:
        raise ValueError("capacity must be at least 1")
    shown = list(items)
    overflow = 0
    if limit is not None and len(shown) > limit:
        overflow = len(shown) - limit
        shown = shown[:limit]
    if not shown:
        return []

    total = math.ceil(len(shown) / capacity)
    pages = []
    for index in range(total):
        chunk = tuple(shown[index * capacity:(index + 1) * capacity])
        pages.append(Page(
            items=chunk,
            number=index + 1,
            total=total,
            overflow=overflow if index == total - 1 else 0,
        ))
    return pages


def paginate_groups(
    groups: Sequence[CategoryGroup[T]],
    capacity: int,
    limit: Optional[int] = None,
) -> list[tuple[CategoryGroup[T], list[Page[T]]]]:
    """Paginate each group on its own; empty groups are dropped."""
    planned = []
    for group in groups:
        pages = paginate(group.items, capacity, limit)
        if pages:
            planned.append((group, pages))
    return planned


def image_grid(count: int) -> tuple[int, int]:
    """``(columns, rows)`` for a grid of *count* images."""
    if count <= 1:
        return 1, 1
    if count == 2:
        return 2, 1
    if count <= 4:
        return 2, 2
    if count <= 6:
        return 3, 2
    if count <= 9:
        return 3, 3
    return 4, math.ceil(count / 4)
