"""Budget slide deck: category summary, itemized tables and totals."""

from __future__ import annotations

from datetime import date

from ..core.aggregator import CategoryGroup, GroupOrder, aggregate
from ..core.categories import hex_to_rgb
from ..core.defaults import (
    has_price,
    line_total_of,
    quantity_text,
    text_or_dash,
    unit_of,
    unit_price_of,
)
from ..core.formatting import format_currency, format_date_long, format_percent, truncate_text
from ..core.models import BudgetItem, BudgetRequest, DocumentKind, GroupBy
from ..core.pagination import Page, list_capacity, paginate_groups
from .base import BaseGenerator
from .slides import DeckBuilder

ROWS_PER_SLIDE = 12
SUMMARY_BOXES = 4

_COLUMNS_WITH_SUPPLIER = (
    ("Item", "Qtd", "Un.", "Valor Unit.", "Fornecedor", "Total"),
    (3.2, 0.7, 0.7, 1.2, 1.8, 1.4),
    ("left", "center", "center", "right", "left", "right"),
)
_COLUMNS = (
    ("Item", "Qtd", "Un.", "Valor Unit.", "Total"),
    (4.2, 0.9, 1.0, 1.5, 1.6),
    ("left", "center", "center", "right", "right"),
)


class BudgetDeckGenerator(BaseGenerator[BudgetRequest]):
    """Cover → category summary → per-category tables → total → closing."""

    kind = DocumentKind.BUDGET_DECK
    request_model = BudgetRequest

    def render(self, request: BudgetRequest) -> bytes:
        deck = DeckBuilder(self.theme, self.image(request.logo_url))
        groups = aggregate(request.items, GroupBy.CATEGORY, GroupOrder.SUBTOTAL)
        total = sum(g.subtotal for g in groups)

        deck.cover_slide(
            "Orçamento",
            request.client.name,
            " | ".join(filter(None, [request.project_name, format_date_long(date.today())])),
        )
        if request.include_category_summary and groups:
            self._summary_slide(deck, groups, total)
        for group, pages in paginate_groups(groups, list_capacity(ROWS_PER_SLIDE)):
            self._category_slides(deck, group, pages, request.include_suppliers)
        self._total_slide(deck, groups, total, len(request.items))
        deck.closing_slide("Obrigado!", self.config.company_name, self.config.tagline)
        return deck.to_bytes()

    # ------------------------------------------------------------------
    # Slides
    # ------------------------------------------------------------------

    def _summary_slide(self, deck: DeckBuilder, groups: list[CategoryGroup], total: float) -> None:
        colors, fonts = self.theme.colors, self.theme.fonts
        slide = deck.content_slide("Resumo por Categoria", f"{len(groups)} categorias")

        label_w, value_w, pct_w = 2.2, 1.6, 0.8
        bar_x = deck.margin + label_w
        bar_max = deck.content_width - label_w - value_w - pct_w - 0.2
        row_h = min(0.42, (deck.body_height - 0.6) / len(groups))
        top_value = max(g.subtotal for g in groups) or 1.0

        y = deck.body_top
        for group in groups:
            color = hex_to_rgb(group.color)
            deck.add_text(slide, deck.margin, y, label_w, row_h, group.label,
                          size=fonts.small_size_pt + 1, anchor="middle")
            bar_w = max(bar_max * group.subtotal / top_value, 0.05)
            deck.add_rect(slide, bar_x, y + row_h * 0.2, bar_w, row_h * 0.6, color)
            deck.add_text(slide, bar_x + bar_max + 0.1, y, value_w, row_h, format_currency(group.subtotal),
                          size=fonts.small_size_pt + 1, align="right", anchor="middle")
            deck.add_text(slide, bar_x + bar_max + 0.1 + value_w, y, pct_w, row_h,
                          format_percent(group.percentage, 1),
                          size=fonts.small_size_pt, color=colors.muted, align="right", anchor="middle")
            y += row_h

        y += 0.1
        deck.add_rect(slide, deck.margin, y, deck.content_width, 0.45, colors.primary)
        deck.add_text(slide, deck.margin + 0.1, y, 3.0, 0.45, "TOTAL GERAL",
                      size=fonts.body_size_pt, color=colors.white, bold=True, anchor="middle")
        deck.add_text(slide, deck.width - deck.margin - 3.1, y, 3.0, 0.45, format_currency(total),
                      size=fonts.body_size_pt + 2, color=colors.white, bold=True,
                      align="right", anchor="middle")

    def _category_slides(
        self, deck: DeckBuilder, group: CategoryGroup, pages: list[Page], suppliers: bool
    ) -> None:
        color = hex_to_rgb(group.color)
        noun = "item" if group.item_count == 1 else "itens"
        deck.section_slide(
            group.label,
            f"{group.item_count} {noun} | {format_currency(group.subtotal)}",
            color,
        )
        headers, widths, align = _COLUMNS_WITH_SUPPLIER if suppliers else _COLUMNS
        for page in pages:
            rows = [self._row(item, suppliers) for item in page.items]
            emphasis = []
            if page.is_last:
                subtotal_row = ["Subtotal"] + [""] * (len(headers) - 2) + [format_currency(group.subtotal)]
                rows.append(subtotal_row)
                emphasis.append(len(rows) - 1)
            title = f"{group.label} {page.indicator}".strip()
            slide = deck.content_slide(title, accent=color)
            deck.table(slide, headers, rows, widths, header_color=color, align=align, emphasis_rows=emphasis)

    @staticmethod
    def _row(item: BudgetItem, suppliers: bool) -> list[str]:
        price = format_currency(unit_price_of(item)) if has_price(item) else "-"
        row = [
            truncate_text(f"{item.number}. {item.name}", 48),
            quantity_text(item),
            unit_of(item),
            price,
        ]
        if suppliers:
            row.append(truncate_text(text_or_dash(item.supplier), 24))
        row.append(format_currency(line_total_of(item)))
        return row

    def _total_slide(self, deck: DeckBuilder, groups: list[CategoryGroup], total: float, item_count: int) -> None:
        colors, fonts = self.theme.colors, self.theme.fonts
        slide = deck.content_slide("Investimento Total")
        deck.add_text(slide, deck.margin, deck.body_top + 0.3, deck.content_width, 0.9, format_currency(total),
                      size=fonts.cover_size_pt + 4, color=colors.success, bold=True, align="center",
                      anchor="middle")
        noun = "categoria" if len(groups) == 1 else "categorias"
        deck.add_text(slide, deck.margin, deck.body_top + 1.25, deck.content_width, 0.4,
                      f"{item_count} itens em {len(groups)} {noun}",
                      size=fonts.subtitle_size_pt, color=colors.muted, align="center")

        shown = groups[:SUMMARY_BOXES]
        if not shown:
            return
        box_w = (deck.content_width - 0.2 * (len(shown) - 1)) / len(shown)
        y = deck.body_top + 2.1
        for index, group in enumerate(shown):
            x = deck.margin + index * (box_w + 0.2)
            deck.add_rect(slide, x, y, box_w, 1.6, colors.bg_light, line=colors.border, rounded=True)
            deck.add_rect(slide, x, y, box_w, 0.08, hex_to_rgb(group.color))
            deck.add_text(slide, x, y + 0.2, box_w, 0.4, group.label,
                          size=fonts.small_size_pt + 1, color=colors.muted, align="center")
            deck.add_text(slide, x, y + 0.6, box_w, 0.45, format_currency(group.subtotal),
                          size=fonts.subtitle_size_pt, color=colors.primary, bold=True, align="center")
            deck.add_text(slide, x, y + 1.05, box_w, 0.35, format_percent(group.percentage, 0),
                          size=fonts.small_size_pt + 1, color=colors.muted, align="center")
