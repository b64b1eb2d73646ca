"""Tests for the slide-deck generators."""

from __future__ import annotations

from datetime import date
from io import BytesIO

import pytest
from pptx import Presentation

from studiodocs.core.images import ImageSet, ResolvedImage
from studiodocs.core.models import (
    BudgetItem,
    BudgetRequest,
    GroupBy,
    PresentationRequest,
    ScheduleRequest,
    ShoppingItem,
    ShoppingListRequest,
    TechnicalRequest,
)
from studiodocs.generators.budget_deck import BudgetDeckGenerator
from studiodocs.generators.presentation_deck import PresentationDeckGenerator
from studiodocs.generators.schedule_deck import ScheduleDeckGenerator, schedule_caption
from studiodocs.generators.shopping_deck import ShoppingListDeckGenerator
from studiodocs.generators.slides import DeckBuilder
from studiodocs.generators.technical_deck import TechnicalDeckGenerator
from studiodocs.generators.themes import get_theme


def _open(data: bytes):
    return Presentation(BytesIO(data))


def _texts(slide) -> str:
    parts = []
    for shape in slide.shapes:
        if shape.has_text_frame:
            parts.append(shape.text_frame.text)
        if getattr(shape, "has_table", False) and shape.has_table:
            for row in shape.table.rows:
                parts.extend(cell.text for cell in row.cells)
    return "\n".join(parts)


@pytest.fixture
def images(png_bytes):
    def build(*urls):
        return ImageSet({url: ResolvedImage(url=url, data=png_bytes, width=40, height=20) for url in urls})
    return build


# ---------------------------------------------------------------------------
# Budget
# ---------------------------------------------------------------------------

class TestBudgetDeck:
    def test_slide_sequence(self, budget_request):
        prs = _open(BudgetDeckGenerator().render(budget_request))
        # cover, summary, 3 x (section + table), total, closing
        assert len(prs.slides) == 10
        assert "Orçamento" in _texts(prs.slides[0])
        assert "TOTAL GERAL" in _texts(prs.slides[1])
        assert "Mobiliário" in _texts(prs.slides[2])
        assert "Obrigado!" in _texts(prs.slides[-1])

    def test_subtotal_row_on_last_page(self):
        items = [BudgetItem(number=i, name=f"Item {i}", category="decoracao", unit_price=10) for i in range(1, 14)]
        request = BudgetRequest(client="Ana", items=items, include_category_summary=False)
        prs = _open(BudgetDeckGenerator().render(request))
        # cover, section, two table pages, total, closing
        assert len(prs.slides) == 8
        assert "Decoração (1/2)" in _texts(prs.slides[2])
        assert "Subtotal" not in _texts(prs.slides[2])
        assert "Subtotal" in _texts(prs.slides[3])
        assert "R$ 130,00" in _texts(prs.slides[3])

    def test_empty_budget_still_renders(self):
        prs = _open(BudgetDeckGenerator().render(BudgetRequest(client="Ana")))
        assert len(prs.slides) == 3

    def test_unpriced_item_totals_zero(self, budget_request):
        prs = _open(BudgetDeckGenerator().render(budget_request))
        eletrica = [s for s in prs.slides if "Instalação elétrica" in _texts(s)]
        assert eletrica
        assert "R$ 0,00" in _texts(eletrica[0])


# ---------------------------------------------------------------------------
# Shopping list
# ---------------------------------------------------------------------------

class TestShoppingDeck:
    def test_cards_when_images_resolve(self, shopping_request, images):
        gen = ShoppingListDeckGenerator(images=images(*shopping_request.image_references()))
        prs = _open(gen.render(shopping_request))
        # cover, summary, 2 x (section + 1 card page), closing
        assert len(prs.slides) == 7
        assert "Boas Compras!" in _texts(prs.slides[-1])

    def test_card_capacity_from_geometry(self):
        gen = ShoppingListDeckGenerator()
        assert gen.card_capacity(DeckBuilder(get_theme("studio"))) == 4

    def test_list_pages_when_no_images(self):
        items = [ShoppingItem(number=i, name=f"Item {i}", category="decoracao") for i in range(1, 21)]
        prs = _open(ShoppingListDeckGenerator().render(ShoppingListRequest(client="Ana", items=items)))
        # cover, summary, section, two list pages, closing
        assert len(prs.slides) == 6
        assert "Item 15" in _texts(prs.slides[3])
        assert "Item 16" in _texts(prs.slides[4])

    def test_prices_shown_when_requested(self, shopping_request):
        shopping_request.include_prices = True
        prs = _open(ShoppingListDeckGenerator().render(shopping_request))
        texts = [_texts(slide) for slide in prs.slides]
        # cover, summary, 2 x (section + list page), closing
        assert len(texts) == 7
        assert "Valor Total" in texts[1]
        assert "R$ 2.100,00" in texts[1]
        sections = [t for t in texts if "R$ 900,00" in t and "Decoração" in t]
        assert sections
        lists = [t for t in texts if "Valor" in t and "Item 5" in t]
        assert lists
        assert "R$ 500,00" in lists[0]

    def test_prices_hidden_by_default(self, shopping_request):
        shopping_request.include_images = False
        prs = _open(ShoppingListDeckGenerator().render(shopping_request))
        assert not any("R$" in _texts(s) for s in prs.slides)

    def test_group_by_room(self, shopping_request):
        shopping_request.group_by = GroupBy.ROOM
        shopping_request.include_images = False
        prs = _open(ShoppingListDeckGenerator().render(shopping_request))
        titles = "\n".join(_texts(s) for s in prs.slides)
        assert "Sala" in titles
        assert "Sem Ambiente" in titles


# ---------------------------------------------------------------------------
# Technical
# ---------------------------------------------------------------------------

class TestTechnicalDeck:
    def test_slide_sequence(self, technical_request, images):
        gen = TechnicalDeckGenerator(images=images("https://img.test/ok/armario.png"))
        prs = _open(gen.render(technical_request))
        # cover, summary, Cozinha (section, table, 2 details), Geral (section, table, 1 detail), closing
        assert len(prs.slides) == 10
        assert "L: 240cm x A: 90cm x P: 60cm" in "\n".join(_texts(s) for s in prs.slides)
        assert "Detalhamento Completo" in _texts(prs.slides[-1])

    def test_group_by_category(self, technical_request):
        technical_request.group_by_room = False
        prs = _open(TechnicalDeckGenerator().render(technical_request))
        assert "Marcenaria" in _texts(prs.slides[2])

    def test_table_overflow_row(self):
        items = [{"number": i, "name": f"Peça {i}", "category": "marcenaria"} for i in range(1, 16)]
        prs = _open(TechnicalDeckGenerator().render(TechnicalRequest(client="Ana", items=items)))
        assert "+3 itens" in _texts(prs.slides[3])


# ---------------------------------------------------------------------------
# Presentation
# ---------------------------------------------------------------------------

class TestPresentationDeck:
    def _request(self, **kwargs):
        return PresentationRequest(
            client={"name": "Ana", "address": "Rua A, 1"},
            sections=[
                {"section": "photos_before", "images": [{"url": f"https://img.test/ok/p{i}.png"} for i in range(8)]},
                {"section": "moodboard", "images": [{"url": "https://img.test/ok/m.png"}]},
                {"section": "renders", "images": [{"url": "https://img.test/ok/r1.png"},
                                                  {"url": "https://img.test/ok/r2.png"}]},
                {"section": "floor_plan", "images": [{"url": "https://img.test/missing/plan.png"}]},
            ],
            **kwargs,
        )

    def test_sections_with_images(self, images):
        request = self._request()
        resolved = [r for r in request.image_references() if "/ok/" in r]
        prs = _open(PresentationDeckGenerator(images=images(*resolved)).render(request))
        # cover, client, intro + photos x2, intro + moodboard, intro + renders x2, closing
        # (floor plan failed, so it gets no intro either)
        assert len(prs.slides) == 11
        assert "Fotos Antes" in _texts(prs.slides[2])
        assert "Estado atual do ambiente" in _texts(prs.slides[2])
        assert "Visualização do projeto" in _texts(prs.slides[7])
        assert "Projeto 3D (1/2)" in _texts(prs.slides[8])

    def test_excluded_section_skipped(self, images):
        request = self._request(include_photos_before=False)
        resolved = [r for r in request.image_references() if "/ok/" in r]
        prs = _open(PresentationDeckGenerator(images=images(*resolved)).render(request))
        assert len(prs.slides) == 8

    def test_no_images_gives_cover_and_closing(self):
        request = self._request()
        request.client.address = None
        prs = _open(PresentationDeckGenerator().render(request))
        assert len(prs.slides) == 2

    def test_single_section_gets_intro_slide(self, images):
        urls = [f"https://img.test/ok/a{i}.png" for i in range(3)]
        request = PresentationRequest(
            client={"name": "Ana"},
            sections=[{"section": "photos_before", "images": [{"url": u} for u in urls]}],
        )
        prs = _open(PresentationDeckGenerator(images=images(*urls)).render(request))
        # cover, intro, grid, closing
        assert len(prs.slides) == 4
        assert "Estado atual do ambiente" in _texts(prs.slides[1])
        assert "Fotos Antes" in _texts(prs.slides[2])


# ---------------------------------------------------------------------------
# Schedule
# ---------------------------------------------------------------------------

class TestScheduleDeck:
    def test_slide_sequence(self):
        request = ScheduleRequest(client="Ana Souza", service_type="decorexpress", modality="presencial",
                                  rooms=3, start_date=date(2026, 10, 19))
        prs = _open(ScheduleDeckGenerator().render(request))
        # cover, two timeline slides (8 milestones), totals, closing
        assert len(prs.slides) == 5
        assert "ANA SOUZA" in _texts(prs.slides[0])
        assert "ARQUITETURA, SEM COMPLICAR." in _texts(prs.slides[-1])

    def test_caption(self):
        request = ScheduleRequest(client="Ana", service_type="produzexpress", modality="presencial",
                                  rooms=3, start_date=date(2026, 10, 19))
        assert schedule_caption(request) == "3 ambientes • PRESENCIAL"
