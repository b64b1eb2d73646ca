"""Shopping list slide deck, grouped by category or by room.

Groups whose items have embeddable images are laid out as image cards;
the rest fall back to a 15-row list. Capacity therefore depends on
which images actually resolved.
"""

from __future__ import annotations

from datetime import date

from ..core.aggregator import CategoryGroup, GroupOrder, aggregate
from ..core.categories import hex_to_rgb
from ..core.defaults import (
    UNSPECIFIED_ROOM,
    category_label,
    has_price,
    line_total_of,
    quantity_text,
    text_or_dash,
    unit_of,
)
from ..core.formatting import format_currency, format_date_long, truncate_text
from ..core.models import DocumentKind, GroupBy, ShoppingItem, ShoppingListRequest
from ..core.pagination import Page, grid_capacity, list_capacity, paginate
from .base import BaseGenerator
from .slides import DeckBuilder
from .themes import to_hex

LIST_ROWS = 15
CARD_COLUMNS = 2
CARD_HEIGHT = 2.2
CARD_GAP = 0.1
SUMMARY_GROUPS = 8


class ShoppingListDeckGenerator(BaseGenerator[ShoppingListRequest]):
    """Cover → summary → per group: intro + card or list pages → closing."""

    kind = DocumentKind.SHOPPING_LIST
    request_model = ShoppingListRequest

    def render(self, request: ShoppingListRequest) -> bytes:
        deck = DeckBuilder(self.theme, self.image(request.logo_url))
        groups = aggregate(
            request.items,
            request.group_by,
            GroupOrder.DISPLAY,
            unspecified_room=UNSPECIFIED_ROOM,
            room_color=to_hex(self.theme.colors.primary),
        )

        deck.cover_slide(
            "Lista de Compras",
            request.client.name,
            " | ".join(filter(None, [request.project_name, format_date_long(date.today())])),
        )
        if groups:
            self._summary_slide(deck, request, groups)
        for group in groups:
            self._group_slides(deck, request, group)
        deck.closing_slide("Boas Compras!", self.config.company_name, self.config.tagline)
        return deck.to_bytes()

    # ------------------------------------------------------------------
    # Planning
    # ------------------------------------------------------------------

    def card_capacity(self, deck: DeckBuilder) -> int:
        return grid_capacity(CARD_COLUMNS, deck.body_height, CARD_HEIGHT, CARD_GAP)

    def uses_cards(self, request: ShoppingListRequest, group: CategoryGroup) -> bool:
        if not request.include_images:
            return False
        return any(self.image(item.image_url) is not None for item in group.items)

    # ------------------------------------------------------------------
    # Slides
    # ------------------------------------------------------------------

    def _summary_slide(self, deck: DeckBuilder, request: ShoppingListRequest, groups: list[CategoryGroup]) -> None:
        colors, fonts = self.theme.colors, self.theme.fonts
        slide = deck.content_slide("Resumo")

        stats = [("Itens", str(len(request.items))), ("Grupos", str(len(groups)))]
        if request.include_prices:
            stats.append(("Valor Total", format_currency(sum(g.subtotal for g in groups))))
        box_w = (deck.content_width - 0.2 * (len(stats) - 1)) / len(stats)
        for index, (label, value) in enumerate(stats):
            x = deck.margin + index * (box_w + 0.2)
            deck.add_rect(slide, x, deck.body_top, box_w, 1.1, colors.bg_light, line=colors.border, rounded=True)
            deck.add_text(slide, x, deck.body_top + 0.1, box_w, 0.55, value,
                          size=fonts.title_size_pt, color=colors.primary, bold=True, align="center")
            deck.add_text(slide, x, deck.body_top + 0.65, box_w, 0.35, label,
                          size=fonts.small_size_pt + 1, color=colors.muted, align="center")

        y = deck.body_top + 1.4
        for group in groups[:SUMMARY_GROUPS]:
            deck.add_rect(slide, deck.margin, y + 0.1, 0.18, 0.18, hex_to_rgb(group.color))
            line = f"{group.label}: {group.item_count} itens"
            if request.include_prices:
                line += f"  ·  {format_currency(group.subtotal)}"
            deck.add_text(slide, deck.margin + 0.3, y, deck.content_width - 0.3, 0.38, line,
                          size=fonts.body_size_pt, anchor="middle")
            y += 0.42
        hidden = len(groups) - SUMMARY_GROUPS
        if hidden > 0:
            deck.add_text(slide, deck.margin + 0.3, y, 4.0, 0.35, f"+ {hidden} grupos",
                          size=fonts.small_size_pt + 1, color=colors.muted, italic=True)

    def _group_slides(self, deck: DeckBuilder, request: ShoppingListRequest, group: CategoryGroup) -> None:
        color = hex_to_rgb(group.color)
        noun = "item" if group.item_count == 1 else "itens"
        subtitle = f"{group.item_count} {noun}"
        if request.include_prices:
            subtitle += f" | {format_currency(group.subtotal)}"
        deck.section_slide(group.label, subtitle, color)

        if self.uses_cards(request, group):
            for page in paginate(group.items, self.card_capacity(deck)):
                self._card_slide(deck, request, group, page)
        else:
            for page in paginate(group.items, list_capacity(LIST_ROWS)):
                self._list_slide(deck, request, group, page)

    def _card_slide(self, deck: DeckBuilder, request: ShoppingListRequest, group: CategoryGroup, page: Page) -> None:
        colors, fonts = self.theme.colors, self.theme.fonts
        color = hex_to_rgb(group.color)
        slide = deck.content_slide(f"{group.label} {page.indicator}".strip(), accent=color)
        card_w = (deck.content_width - CARD_GAP * (CARD_COLUMNS - 1)) / CARD_COLUMNS
        image_w = 1.9

        for index, item in enumerate(page.items):
            row, col = divmod(index, CARD_COLUMNS)
            x = deck.margin + col * (card_w + CARD_GAP)
            y = deck.body_top + row * (CARD_HEIGHT + CARD_GAP)
            deck.add_rect(slide, x, y, card_w, CARD_HEIGHT, colors.white, line=colors.border, rounded=True)

            box = (x + 0.1, y + 0.1, image_w, CARD_HEIGHT - 0.2)
            if deck.add_picture(slide, self.image(item.image_url), *box) is None:
                deck.add_placeholder(slide, *box)

            tx = x + image_w + 0.2
            tw = card_w - image_w - 0.3
            deck.add_rect(slide, tx, y + 0.15, 0.45, 0.3, color, rounded=True)
            deck.add_text(slide, tx, y + 0.15, 0.45, 0.3, str(item.number),
                          size=fonts.small_size_pt, color=colors.white, bold=True,
                          align="center", anchor="middle")
            deck.add_text(slide, tx, y + 0.5, tw, 0.6, truncate_text(item.name, 60),
                          size=fonts.body_size_pt, color=colors.primary, bold=True)
            details = [f"Qtd: {quantity_text(item)} {unit_of(item)}"]
            if request.group_by is GroupBy.ROOM:
                details.append(category_label(item.category))
            if item.supplier:
                details.append(truncate_text(item.supplier, 30))
            if request.include_prices and has_price(item):
                details.append(format_currency(line_total_of(item)))
            deck.add_text(slide, tx, y + 1.1, tw, 1.0, "\n".join(details),
                          size=fonts.small_size_pt, color=colors.muted)

    def _list_slide(self, deck: DeckBuilder, request: ShoppingListRequest, group: CategoryGroup, page: Page) -> None:
        color = hex_to_rgb(group.color)
        slide = deck.content_slide(f"{group.label} {page.indicator}".strip(), accent=color)
        headers = ["#", "Item", "Qtd", "Fornecedor"]
        widths = [0.5, 4.6, 1.0, 3.1]
        align = ["center", "left", "center", "left"]
        if request.include_prices:
            headers.append("Valor")
            widths = [0.5, 3.9, 0.9, 2.4, 1.5]
            align.append("right")
        rows = [self._row(item, request.include_prices) for item in page.items]
        deck.table(slide, headers, rows, widths, header_color=color, align=align, row_height=0.3)

    @staticmethod
    def _row(item: ShoppingItem, prices: bool) -> list[str]:
        row = [
            str(item.number),
            truncate_text(item.name, 60),
            f"{quantity_text(item)} {unit_of(item)}",
            truncate_text(text_or_dash(item.supplier), 36),
        ]
        if prices:
            row.append(format_currency(line_total_of(item)) if has_price(item) else "-")
        return row
