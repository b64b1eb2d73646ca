"""Group a flat item collection into ordered, totalled groups.

Every item lands in exactly one group. Percentages are relative to the
grand total of the items passed in, so a filtered view still sums to
100%. Nothing computed here is stored back on the items.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Iterable, Optional, Sequence, TypeVar

from .categories import CATEGORY_ORDER, Category
from .defaults import UNSPECIFIED_ROOM, category_color, category_label, line_total_of, room_of
from .models import GroupBy, ItemBase

ItemT = TypeVar("ItemT", bound=ItemBase)


class GroupOrder(str, Enum):
    """How groups are sorted."""
    SUBTOTAL = "subtotal"   # descending subtotal, ties by first appearance
    DISPLAY = "display"     # category display table; rooms by first appearance


@dataclass
class CategoryGroup(Generic[ItemT]):
    """A derived group of items sharing a category or room."""

    key: str
    label: str
    color: str
    category: Optional[Category] = None
    items: list[ItemT] = field(default_factory=list)
    subtotal: float = 0.0
    percentage: float = 0.0

    @property
    def item_count(self) -> int:
        return len(self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items


def grand_total(items: Iterable[ItemBase]) -> float:
    return sum(line_total_of(item) for item in items)


def aggregate(
    items: Sequence[ItemT],
    group_by: GroupBy = GroupBy.CATEGORY,
    order: GroupOrder = GroupOrder.SUBTOTAL,
    *,
    unspecified_room: str = UNSPECIFIED_ROOM,
    room_color: Optional[str] = None,
) -> list[CategoryGroup[ItemT]]:
    """Group *items* and compute subtotal, count and percentage per group.

    Items without a room go to the *unspecified_room* bucket when
    grouping by room. Room groups take *room_color* (or the neutral
    default) since rooms have no color of their own.
    """
    groups: dict[str, CategoryGroup[ItemT]] = {}
    for item in items:
        if group_by is GroupBy.CATEGORY:
            key = item.category.value
            group = groups.get(key)
            if group is None:
                group = groups[key] = CategoryGroup(
                    key=key,
                    label=category_label(item.category),
                    color=category_color(item.category),
                    category=item.category,
                )
        else:
            key = room_of(item, unspecified_room)
            group = groups.get(key)
            if group is None:
                group = groups[key] = CategoryGroup(
                    key=key,
                    label=key,
                    color=room_color or category_color(None),
                )
        group.items.append(item)
        group.subtotal += line_total_of(item)

    total = sum(g.subtotal for g in groups.values())
    for group in groups.values():
        group.percentage = (group.subtotal / total * 100.0) if total > 0 else 0.0

    result = list(groups.values())
    if order is GroupOrder.SUBTOTAL:
        # sort() is stable: equal subtotals keep first-seen order
        result.sort(key=lambda g: g.subtotal, reverse=True)
    elif group_by is GroupBy.CATEGORY:
        result.sort(key=lambda g: CATEGORY_ORDER.get(g.category, len(CATEGORY_ORDER)))
    return result


def include_empty(
    groups: list[CategoryGroup[ItemT]],
    categories: Iterable[Category],
) -> list[CategoryGroup[ItemT]]:
    """Append an empty group for each declared category with no items.

    The budget keeps declared-but-empty categories visible as zero
    subtotal rows.
    """
    present = {g.category for g in groups}
    extended = list(groups)
    for category in categories:
        if category in present:
            continue
        present.add(category)
        extended.append(CategoryGroup(
            key=category.value,
            label=category_label(category),
            color=category_color(category),
            category=category,
        ))
    return extended
