"""Tests for optional-field defaults and category tables."""

from __future__ import annotations

import pytest

from studiodocs.core.categories import (
    CATEGORY_COLORS,
    CATEGORY_LABELS,
    DEFAULT_CATEGORY_COLOR,
    Category,
    color_for,
    hex_to_rgb,
    label_for,
)
from studiodocs.core.defaults import (
    DASH,
    dimensions_text,
    has_price,
    line_total_of,
    quantity_of,
    quantity_text,
    room_of,
    text_or_dash,
    unit_of,
    unit_price_of,
)
from studiodocs.core.models import BudgetItem, Dimensions, TechnicalItem


class TestDefaults:
    def test_missing_numbers(self):
        item = BudgetItem(number=1, name="x")
        assert quantity_of(item) == 1
        assert unit_price_of(item) == 0
        assert line_total_of(item) == 0
        assert not has_price(item)

    def test_line_total(self):
        item = BudgetItem(number=1, name="x", unit_price=12.5, quantity=4)
        assert line_total_of(item) == 50
        assert has_price(item)

    def test_unit(self):
        assert unit_of(BudgetItem(number=1, name="x")) == "un"
        assert unit_of(BudgetItem(number=1, name="x", unit="m²")) == "m²"
        assert unit_of(TechnicalItem(number=1, name="x")) == "un"

    def test_room(self):
        assert room_of(BudgetItem(number=1, name="x")) == "Sem Ambiente"
        assert room_of(BudgetItem(number=1, name="x"), "Geral") == "Geral"
        assert room_of(BudgetItem(number=1, name="x", room="Sala")) == "Sala"

    def test_text_or_dash(self):
        assert text_or_dash(None) == DASH
        assert text_or_dash("   ") == DASH
        assert text_or_dash("Etna") == "Etna"

    def test_dimensions(self):
        assert dimensions_text(None) == DASH
        assert dimensions_text(Dimensions()) == DASH
        assert dimensions_text(Dimensions(width=120, height=75, depth=60)) == "L: 120cm x A: 75cm x P: 60cm"
        assert dimensions_text(Dimensions(width=80.5, depth=40)) == "L: 80,5cm x P: 40cm"

    def test_quantity_text(self):
        assert quantity_text(BudgetItem(number=1, name="x", quantity=2.5)) == "2,5"
        assert quantity_text(BudgetItem(number=1, name="x")) == "1"


class TestCategories:
    @pytest.mark.parametrize("category", list(Category))
    def test_every_member_has_color_and_label(self, category):
        assert len(CATEGORY_COLORS[category]) == 6
        assert CATEGORY_LABELS[category]

    def test_case_insensitive_lookup(self):
        assert Category("MaoDeObra") is Category.MAO_DE_OBRA
        assert Category("ILUMINACAO") is Category.ILUMINACAO

    def test_none_fallbacks(self):
        assert color_for(None) == DEFAULT_CATEGORY_COLOR
        assert label_for(None) == "Outros"
        assert label_for(Category.MAO_DE_OBRA) == "Mão de Obra"

    def test_hex_to_rgb(self):
        assert hex_to_rgb("#1E3A5F") == (30, 58, 95)
