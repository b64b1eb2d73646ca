"""Technical detailing deck: one detail slide per item, grouped by room."""

from __future__ import annotations

from datetime import date

from ..core.aggregator import CategoryGroup, GroupOrder, aggregate
from ..core.categories import hex_to_rgb
from ..core.defaults import (
    GENERAL_ROOM,
    category_color,
    category_label,
    dimensions_text,
    quantity_text,
    room_of,
    text_or_dash,
)
from ..core.formatting import format_date_long, truncate_text
from ..core.models import DocumentKind, GroupBy, TechnicalItem, TechnicalRequest
from ..core.pagination import paginate
from .base import BaseGenerator
from .slides import DeckBuilder
from .themes import to_hex

SUMMARY_ROWS = 12
SUMMARY_GROUPS = 8


class TechnicalDeckGenerator(BaseGenerator[TechnicalRequest]):
    """Cover → summary → per group: intro, item table, item details → closing."""

    kind = DocumentKind.TECHNICAL_DECK
    request_model = TechnicalRequest

    def render(self, request: TechnicalRequest) -> bytes:
        deck = DeckBuilder(self.theme, self.image(request.logo_url))
        group_by = GroupBy.ROOM if request.group_by_room else GroupBy.CATEGORY
        groups = aggregate(
            request.items,
            group_by,
            GroupOrder.DISPLAY,
            unspecified_room=GENERAL_ROOM,
            room_color=to_hex(self.theme.colors.primary),
        )

        deck.cover_slide(
            "Detalhamento Técnico",
            request.client.name,
            " | ".join(filter(None, [request.project_name, format_date_long(date.today())])),
        )
        if groups:
            self._summary_slide(deck, request, groups)
        for group in groups:
            noun = "item" if group.item_count == 1 else "itens"
            deck.section_slide(group.label, f"{group.item_count} {noun}", hex_to_rgb(group.color))
            self._group_table(deck, group)
            for item in group.items:
                self._detail_slide(deck, request, item)
        deck.closing_slide("Detalhamento Completo", request.client.name, self.config.company_name)
        return deck.to_bytes()

    def _summary_slide(self, deck: DeckBuilder, request: TechnicalRequest, groups: list[CategoryGroup]) -> None:
        colors, fonts = self.theme.colors, self.theme.fonts
        slide = deck.content_slide("Resumo do Detalhamento")
        rooms = {room_of(item, GENERAL_ROOM) for item in request.items}
        categories = {item.category for item in request.items}
        stats = [
            ("Itens", str(len(request.items))),
            ("Ambientes", str(len(rooms))),
            ("Categorias", str(len(categories))),
        ]
        box_w = (deck.content_width - 0.4) / 3
        for index, (label, value) in enumerate(stats):
            x = deck.margin + index * (box_w + 0.2)
            deck.add_rect(slide, x, deck.body_top, box_w, 1.1, colors.bg_light, line=colors.border, rounded=True)
            deck.add_text(slide, x, deck.body_top + 0.1, box_w, 0.55, value,
                          size=fonts.title_size_pt, color=colors.primary, bold=True, align="center")
            deck.add_text(slide, x, deck.body_top + 0.65, box_w, 0.35, label,
                          size=fonts.small_size_pt + 1, color=colors.muted, align="center")

        y = deck.body_top + 1.4
        for group in groups[:SUMMARY_GROUPS]:
            deck.add_text(slide, deck.margin, y, deck.content_width, 0.38,
                          f"•  {group.label}: {group.item_count} itens", size=fonts.body_size_pt)
            y += 0.4
        hidden = len(groups) - SUMMARY_GROUPS
        if hidden > 0:
            deck.add_text(slide, deck.margin, y, 4.0, 0.35, f"+ {hidden} grupos",
                          size=fonts.small_size_pt + 1, color=colors.muted, italic=True)

    def _group_table(self, deck: DeckBuilder, group: CategoryGroup) -> None:
        # A single capped page: the detail slides that follow list every item
        page = paginate(group.items, SUMMARY_ROWS, limit=SUMMARY_ROWS)[0]
        rows = [
            [
                str(item.number),
                truncate_text(item.name, 40),
                category_label(item.category),
                dimensions_text(item.dimensions),
                truncate_text(text_or_dash(item.material), 24),
            ]
            for item in page.items
        ]
        emphasis = []
        if page.overflow:
            rows.append(["", f"+{page.overflow} itens", "", "", ""])
            emphasis.append(len(rows) - 1)
        slide = deck.content_slide(f"{group.label}: itens", accent=hex_to_rgb(group.color))
        deck.table(
            slide,
            ["#", "Item", "Categoria", "Dimensões", "Material"],
            rows,
            [0.5, 3.0, 1.6, 2.4, 1.7],
            header_color=hex_to_rgb(group.color),
            align=["center", "left", "left", "left", "left"],
            row_height=0.3,
            emphasis_rows=emphasis,
        )

    def _detail_slide(self, deck: DeckBuilder, request: TechnicalRequest, item: TechnicalItem) -> None:
        colors, fonts = self.theme.colors, self.theme.fonts
        color = hex_to_rgb(category_color(item.category))
        slide = deck.new_slide(colors.white)

        deck.add_rect(slide, 0, 0, deck.width, 0.75, color)
        deck.add_text(slide, deck.margin, 0.1, deck.content_width - 2.0, 0.55,
                      truncate_text(f"#{item.number}  {item.name}", 70),
                      size=fonts.subtitle_size_pt + 4, color=colors.white, bold=True, anchor="middle")
        deck.add_logo(slide)

        # Left column: photo, then technical drawing
        left_w = 4.4
        top = 0.95
        drawing = self.image(item.drawing_url) if request.include_drawings else None
        photo_h = deck.height - top - deck.margin
        if drawing is not None:
            photo_h = (photo_h - 0.1) / 2
        if deck.add_picture(slide, self.image(item.image_url), deck.margin, top, left_w, photo_h) is None:
            deck.add_placeholder(slide, deck.margin, top, left_w, photo_h)
        if drawing is not None:
            deck.add_picture(slide, drawing, deck.margin, top + photo_h + 0.1, left_w, photo_h)

        # Right column
        x = deck.margin + left_w + 0.3
        w = deck.width - x - deck.margin
        badges = [category_label(item.category), room_of(item, GENERAL_ROOM)]
        bx = x
        for text in badges:
            bw = 0.25 + 0.09 * len(text)
            deck.add_rect(slide, bx, top, bw, 0.32, colors.bg_section, rounded=True)
            deck.add_text(slide, bx, top, bw, 0.32, text, size=fonts.small_size_pt,
                          color=colors.primary, bold=True, align="center", anchor="middle")
            bx += bw + 0.1

        y = top + 0.55
        specs = [
            ("Dimensões", dimensions_text(item.dimensions)),
            ("Material", text_or_dash(item.material)),
            ("Acabamento", text_or_dash(item.finish)),
            ("Quantidade", quantity_text(item)),
        ]
        for label, value in specs:
            deck.add_text(slide, x, y, w, 0.25, label.upper(), size=fonts.small_size_pt - 1,
                          color=colors.light, bold=True)
            deck.add_text(slide, x, y + 0.22, w, 0.4, value, size=fonts.body_size_pt + 1, color=colors.text)
            y += 0.7

        if item.notes:
            h = min(deck.height - y - deck.margin, 1.6)
            deck.add_rect(slide, x, y, w, h, colors.note_bg, line=colors.note_border, rounded=True)
            deck.add_text(slide, x + 0.1, y + 0.05, w - 0.2, 0.3, "Observações",
                          size=fonts.small_size_pt, color=colors.muted, bold=True)
            deck.add_text(slide, x + 0.1, y + 0.35, w - 0.2, h - 0.4, truncate_text(item.notes, 400),
                          size=fonts.small_size_pt + 1, color=colors.text)
