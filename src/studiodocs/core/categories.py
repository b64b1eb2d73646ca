"""Enum-keyed lookup tables for item categories.

Every :class:`Category` member has an explicit color and label. Lookups
go through :func:`color_for` / :func:`label_for`, which fall back to the
neutral default when handed ``None``.
"""

from __future__ import annotations

from enum import Enum


class Category(str, Enum):
    """Closed set of item categories, declared in display order."""
    MOBILIARIO = "mobiliario"
    MARCENARIA = "marcenaria"
    MARMORARIA = "marmoraria"
    ILUMINACAO = "iluminacao"
    DECORACAO = "decoracao"
    CORTINAS = "cortinas"
    MATERIAIS = "materiais"
    ELETRICA = "eletrica"
    HIDRAULICA = "hidraulica"
    MAO_DE_OBRA = "maoDeObra"
    ACABAMENTOS = "acabamentos"
    OUTROS = "outros"

    @classmethod
    def _missing_(cls, value: object) -> "Category | None":
        # Accept "MaoDeObra", "ILUMINACAO" and friends
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value.lower() == lowered:
                    return member
        return None


DEFAULT_CATEGORY_COLOR = "6B7280"

CATEGORY_COLORS: dict[Category, str] = {
    Category.MOBILIARIO: "1E3A5F",
    Category.MARCENARIA: "F59E0B",
    Category.MARMORARIA: "8B4513",
    Category.ILUMINACAO: "FBBF24",
    Category.DECORACAO: "EC4899",
    Category.CORTINAS: "8B5CF6",
    Category.MATERIAIS: "6B7280",
    Category.ELETRICA: "3B82F6",
    Category.HIDRAULICA: "06B6D4",
    Category.MAO_DE_OBRA: "10B981",
    Category.ACABAMENTOS: "F97316",
    Category.OUTROS: "9CA3AF",
}

CATEGORY_LABELS: dict[Category, str] = {
    Category.MOBILIARIO: "Mobiliário",
    Category.MARCENARIA: "Marcenaria",
    Category.MARMORARIA: "Marmoraria",
    Category.ILUMINACAO: "Iluminação",
    Category.DECORACAO: "Decoração",
    Category.CORTINAS: "Cortinas",
    Category.MATERIAIS: "Materiais",
    Category.ELETRICA: "Elétrica",
    Category.HIDRAULICA: "Hidráulica",
    Category.MAO_DE_OBRA: "Mão de Obra",
    Category.ACABAMENTOS: "Acabamentos",
    Category.OUTROS: "Outros",
}

#: Position of each category in detail views (technical deck, workbook tabs).
CATEGORY_ORDER: dict[Category, int] = {c: i for i, c in enumerate(Category)}


def color_for(category: Category | None) -> str:
    """Hex color (no leading ``#``) for *category*."""
    if category is None:
        return DEFAULT_CATEGORY_COLOR
    return CATEGORY_COLORS.get(category, DEFAULT_CATEGORY_COLOR)


def label_for(category: Category | None) -> str:
    """Human-readable pt-BR label for *category*."""
    if category is None:
        return CATEGORY_LABELS[Category.OUTROS]
    return CATEGORY_LABELS.get(category, category.value)


def hex_to_rgb(value: str) -> tuple[int, int, int]:
    """``"1E3A5F"`` → ``(30, 58, 95)``."""
    value = value.lstrip("#")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)
