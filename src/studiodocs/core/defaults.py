"""Default policy for every optional item field.

Renderers read optional values only through these functions so that
each fallback is stated once and can be tested on its own.
"""

from __future__ import annotations

from typing import Optional

from .categories import Category, color_for, label_for
from .models import Dimensions, ItemBase

DASH = "-"
DEFAULT_UNIT = "un"
UNSPECIFIED_ROOM = "Sem Ambiente"
GENERAL_ROOM = "Geral"


def quantity_of(item: ItemBase) -> float:
    """Quantity, defaulting to 1 when absent."""
    return 1.0 if item.quantity is None else float(item.quantity)


def unit_price_of(item: ItemBase) -> float:
    """Unit price, defaulting to 0 when absent."""
    return 0.0 if item.unit_price is None else float(item.unit_price)


def line_total_of(item: ItemBase) -> float:
    """``unit_price × quantity``; never stored on the item."""
    return unit_price_of(item) * quantity_of(item)


def has_price(item: ItemBase) -> bool:
    return item.unit_price is not None and item.unit_price > 0


def unit_of(item: ItemBase) -> str:
    unit = getattr(item, "unit", None)
    return unit or DEFAULT_UNIT


def room_of(item: ItemBase, unspecified: str = UNSPECIFIED_ROOM) -> str:
    """Room/zone label, or the *unspecified* bucket name."""
    room = (item.room or "").strip()
    return room or unspecified


def text_or_dash(value: Optional[str]) -> str:
    if value is None:
        return DASH
    value = str(value).strip()
    return value or DASH


def _number(value: float) -> str:
    return f"{value:g}".replace(".", ",")


def dimensions_text(dimensions: Optional[Dimensions]) -> str:
    """``L: 120cm x A: 75cm x P: 60cm``, skipping absent sides."""
    if dimensions is None:
        return DASH
    parts = []
    if dimensions.width:
        parts.append(f"L: {_number(dimensions.width)}cm")
    if dimensions.height:
        parts.append(f"A: {_number(dimensions.height)}cm")
    if dimensions.depth:
        parts.append(f"P: {_number(dimensions.depth)}cm")
    return " x ".join(parts) if parts else DASH


def quantity_text(item: ItemBase) -> str:
    return _number(quantity_of(item))


def category_color(category: Optional[Category]) -> str:
    return color_for(category)


def category_label(category: Optional[Category]) -> str:
    return label_for(category)
