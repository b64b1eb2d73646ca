"""Budget and item-list workbooks (openpyxl).

In formula mode every total is a live cell reference: line totals are
``=Qtd*Unit``, each category subtotal sums its own contiguous item rows
and the grand total adds the subtotal cells only. In literal mode the
same cells hold pre-computed numbers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from io import BytesIO
from typing import Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from ..core.aggregator import CategoryGroup, GroupOrder, aggregate, include_empty
from ..core.defaults import (
    category_label,
    line_total_of,
    quantity_of,
    room_of,
    text_or_dash,
    unit_of,
    unit_price_of,
)
from ..core.formatting import format_date
from ..core.models import BudgetItem, BudgetRequest, DocumentKind, GroupBy
from .base import BaseGenerator
from .themes import Theme, to_hex

logger = logging.getLogger(__name__)

SHEET_NAME_LIMIT = 31
BUDGET_SHEET = "Orçamento"
SUMMARY_SHEET = "Resumo"
ITEMS_SHEET = "Lista de Itens"

CURRENCY_FORMAT = '"R$" #,##0.00'
PERCENT_FORMAT = "0.0%"

BUDGET_HEADERS = ["Nº", "Item", "Categoria", "Ambiente", "Qtd", "Unidade", "Valor Unit.", "Fornecedor", "Total"]
BUDGET_WIDTHS = [5, 40, 15, 15, 8, 10, 15, 20, 15]
ITEMS_HEADERS = ["Nº", "Item", "Categoria", "Ambiente", "Quantidade", "Unidade", "Fornecedor"]
ITEMS_WIDTHS = [5, 40, 15, 15, 12, 10, 20]

# Budget sheet columns (1-based)
COL_QTY = 5
COL_UNIT_PRICE = 7
COL_LABEL = 8
COL_TOTAL = 9

_THIN = Side(style="thin", color="E5E7EB")
_BORDER = Border(left=_THIN, right=_THIN, top=_THIN, bottom=_THIN)


def sheet_title(name: str) -> str:
    """Worksheet titles are limited to 31 characters."""
    return name[:SHEET_NAME_LIMIT]


@dataclass
class CategoryRows:
    """Where one category landed on the budget sheet."""
    group: CategoryGroup
    first: Optional[int] = None     # first item row, None when empty
    last: Optional[int] = None
    subtotal_row: int = 0


@dataclass
class BudgetLayout:
    """Row bookkeeping for the budget sheet."""
    header_row: int = 0
    categories: list[CategoryRows] = field(default_factory=list)
    total_row: int = 0

    @property
    def subtotal_cells(self) -> list[str]:
        col = get_column_letter(COL_TOTAL)
        return [f"{col}{c.subtotal_row}" for c in self.categories]


class _Styles:
    """openpyxl style objects derived from a theme."""

    def __init__(self, theme: Theme) -> None:
        c, f = theme.colors, theme.fonts
        self.title = Font(name=f.heading, bold=True, size=16, color=to_hex(c.primary))
        self.meta = Font(name=f.body, size=10, color=to_hex(c.muted))
        self.header = Font(name=f.body, bold=True, size=10, color="FFFFFF")
        self.header_fill = PatternFill(start_color=to_hex(c.primary), end_color=to_hex(c.primary), fill_type="solid")
        self.body = Font(name=f.body, size=10, color=to_hex(c.text))
        self.bold = Font(name=f.body, size=10, bold=True, color=to_hex(c.primary))
        self.section_fill = PatternFill(start_color=to_hex(c.bg_section), end_color=to_hex(c.bg_section),
                                        fill_type="solid")
        self.total_font = Font(name=f.body, size=12, bold=True, color="FFFFFF")

    @staticmethod
    def fill(hex_color: str) -> PatternFill:
        return PatternFill(start_color=hex_color, end_color=hex_color, fill_type="solid")


def _set_widths(ws: Worksheet, widths: list[int]) -> None:
    for index, width in enumerate(widths, start=1):
        ws.column_dimensions[get_column_letter(index)].width = width


def _write_header(ws: Worksheet, row: int, headers: list[str], styles: _Styles) -> None:
    for col, text in enumerate(headers, start=1):
        cell = ws.cell(row=row, column=col, value=text)
        cell.font = styles.header
        cell.fill = styles.header_fill
        cell.alignment = Alignment(horizontal="center", vertical="center")
        cell.border = _BORDER


def _write_title(ws: Worksheet, title: str, lines: list[str], styles: _Styles) -> int:
    """Title block; returns the next free row (after one blank row)."""
    ws.cell(row=1, column=1, value=title).font = styles.title
    row = 2
    for line in lines:
        ws.cell(row=row, column=1, value=line).font = styles.meta
        row += 1
    return row + 1


def _to_bytes(wb: Workbook) -> bytes:
    buf = BytesIO()
    wb.save(buf)
    return buf.getvalue()


# ---------------------------------------------------------------------------
# Budget workbook
# ---------------------------------------------------------------------------

class BudgetWorkbookGenerator(BaseGenerator[BudgetRequest]):
    """Sheets: Orçamento (full budget), Resumo, one per category."""

    kind = DocumentKind.BUDGET_WORKBOOK
    request_model = BudgetRequest

    def render(self, request: BudgetRequest) -> bytes:
        styles = _Styles(self.theme)
        groups = aggregate(request.items, GroupBy.CATEGORY, GroupOrder.DISPLAY)
        groups = include_empty(groups, request.categories)
        formulas = request.include_formulas

        wb = Workbook()
        ws = wb.active
        ws.title = BUDGET_SHEET
        layout = self._budget_sheet(ws, request, groups, formulas, styles)
        self._summary_sheet(wb.create_sheet(SUMMARY_SHEET), layout, formulas, styles)
        for group in groups:
            if group.items:
                self._category_sheet(wb.create_sheet(sheet_title(group.label)), group, formulas, styles)
        logger.debug("Budget workbook: %d categories, formulas=%s", len(groups), formulas)
        return _to_bytes(wb)

    # -- Orçamento --------------------------------------------------------

    def _budget_sheet(
        self,
        ws: Worksheet,
        request: BudgetRequest,
        groups: list[CategoryGroup],
        formulas: bool,
        styles: _Styles,
    ) -> BudgetLayout:
        lines = [f"Cliente: {request.client.name}"]
        if request.project_name:
            lines.append(f"Projeto: {request.project_name}")
        lines.append(f"Data: {format_date(date.today())}")
        row = _write_title(ws, "ORÇAMENTO", lines, styles)

        layout = BudgetLayout(header_row=row)
        _write_header(ws, row, BUDGET_HEADERS, styles)
        _set_widths(ws, BUDGET_WIDTHS)
        ws.freeze_panes = ws.cell(row=row + 1, column=1)
        row += 1

        total_col = get_column_letter(COL_TOTAL)
        for group in groups:
            # Category banner
            ws.cell(row=row, column=1, value=group.label.upper())
            for col in range(1, len(BUDGET_HEADERS) + 1):
                cell = ws.cell(row=row, column=col)
                cell.fill = styles.fill(group.color)
                cell.font = styles.header
            row += 1

            placed = CategoryRows(group=group)
            for item in group.items:
                self._item_row(ws, row, item, formulas, styles)
                placed.first = placed.first or row
                placed.last = row
                row += 1

            ws.cell(row=row, column=COL_LABEL, value="Subtotal").font = styles.bold
            cell = ws.cell(row=row, column=COL_TOTAL)
            if formulas and placed.first is not None:
                cell.value = f"=SUM({total_col}{placed.first}:{total_col}{placed.last})"
            else:
                cell.value = round(group.subtotal, 2)
            cell.number_format = CURRENCY_FORMAT
            cell.font = styles.bold
            for col in range(1, len(BUDGET_HEADERS) + 1):
                ws.cell(row=row, column=col).fill = styles.section_fill
            placed.subtotal_row = row
            layout.categories.append(placed)
            row += 2

        ws.cell(row=row, column=COL_LABEL, value="TOTAL GERAL")
        cell = ws.cell(row=row, column=COL_TOTAL)
        if formulas and layout.categories:
            cell.value = "=" + "+".join(layout.subtotal_cells)
        else:
            cell.value = round(sum(g.subtotal for g in groups), 2)
        cell.number_format = CURRENCY_FORMAT
        for col in (COL_LABEL, COL_TOTAL):
            ws.cell(row=row, column=col).font = styles.total_font
            ws.cell(row=row, column=col).fill = styles.header_fill
        layout.total_row = row
        return layout

    @staticmethod
    def _item_row(ws: Worksheet, row: int, item: BudgetItem, formulas: bool, styles: _Styles) -> None:
        values = [
            item.number,
            item.name,
            category_label(item.category),
            room_of(item),
            quantity_of(item),
            unit_of(item),
            unit_price_of(item),
            text_or_dash(item.supplier),
        ]
        for col, value in enumerate(values, start=1):
            cell = ws.cell(row=row, column=col, value=value)
            cell.font = styles.body
            cell.border = _BORDER
        ws.cell(row=row, column=COL_UNIT_PRICE).number_format = CURRENCY_FORMAT

        qty = get_column_letter(COL_QTY)
        price = get_column_letter(COL_UNIT_PRICE)
        total = ws.cell(row=row, column=COL_TOTAL)
        total.value = f"={qty}{row}*{price}{row}" if formulas else round(line_total_of(item), 2)
        total.number_format = CURRENCY_FORMAT
        total.font = styles.body
        total.border = _BORDER

    # -- Resumo -----------------------------------------------------------

    @staticmethod
    def _summary_sheet(ws: Worksheet, layout: BudgetLayout, formulas: bool, styles: _Styles) -> None:
        _write_header(ws, 1, ["Categoria", "Qtd Itens", "Subtotal", "% do Total"], styles)
        _set_widths(ws, [25, 12, 18, 12])
        first = 2
        total_row = first + len(layout.categories)
        grand = sum(c.group.subtotal for c in layout.categories)

        for offset, placed in enumerate(layout.categories):
            row = first + offset
            group = placed.group
            ws.cell(row=row, column=1, value=group.label).font = styles.body
            ws.cell(row=row, column=2, value=group.item_count).font = styles.body
            subtotal = ws.cell(row=row, column=3)
            share = ws.cell(row=row, column=4)
            if formulas:
                subtotal.value = f"='{BUDGET_SHEET}'!{get_column_letter(COL_TOTAL)}{placed.subtotal_row}"
                share.value = f"=IF($C${total_row}=0,0,C{row}/$C${total_row})"
            else:
                subtotal.value = round(group.subtotal, 2)
                share.value = round(group.subtotal / grand, 4) if grand > 0 else 0
            subtotal.number_format = CURRENCY_FORMAT
            share.number_format = PERCENT_FORMAT

        ws.cell(row=total_row, column=1, value="TOTAL").font = styles.bold
        ws.cell(row=total_row, column=2, value=sum(c.group.item_count for c in layout.categories)).font = styles.bold
        total = ws.cell(row=total_row, column=3)
        if formulas and layout.categories:
            total.value = f"=SUM(C{first}:C{total_row - 1})"
        else:
            total.value = round(grand, 2)
        total.number_format = CURRENCY_FORMAT
        total.font = styles.bold

    # -- One sheet per category -------------------------------------------

    @staticmethod
    def _category_sheet(ws: Worksheet, group: CategoryGroup, formulas: bool, styles: _Styles) -> None:
        headers = ["Nº", "Item", "Ambiente", "Qtd", "Unidade", "Valor Unit.", "Fornecedor", "Total"]
        _write_header(ws, 1, headers, styles)
        _set_widths(ws, [5, 40, 15, 8, 10, 15, 20, 15])
        row = 2
        for item in group.items:
            values = [
                item.number,
                item.name,
                room_of(item),
                quantity_of(item),
                unit_of(item),
                unit_price_of(item),
                text_or_dash(item.supplier),
            ]
            for col, value in enumerate(values, start=1):
                ws.cell(row=row, column=col, value=value).font = styles.body
            ws.cell(row=row, column=6).number_format = CURRENCY_FORMAT
            total = ws.cell(row=row, column=8)
            total.value = f"=D{row}*F{row}" if formulas else round(line_total_of(item), 2)
            total.number_format = CURRENCY_FORMAT
            row += 1

        ws.cell(row=row, column=7, value="Subtotal").font = styles.bold
        subtotal = ws.cell(row=row, column=8)
        subtotal.value = f"=SUM(H2:H{row - 1})" if formulas else round(group.subtotal, 2)
        subtotal.number_format = CURRENCY_FORMAT
        subtotal.font = styles.bold


# ---------------------------------------------------------------------------
# Item list workbook
# ---------------------------------------------------------------------------

class ItemsWorkbookGenerator(BaseGenerator[BudgetRequest]):
    """A single flat sheet listing every item without prices."""

    kind = DocumentKind.ITEMS_WORKBOOK
    request_model = BudgetRequest

    def render(self, request: BudgetRequest) -> bytes:
        styles = _Styles(self.theme)
        wb = Workbook()
        ws = wb.active
        ws.title = ITEMS_SHEET
        lines = [f"Cliente: {request.client.name}", f"Data: {format_date(date.today())}"]
        row = _write_title(ws, "LISTA DE ITENS", lines, styles)
        _write_header(ws, row, ITEMS_HEADERS, styles)
        _set_widths(ws, ITEMS_WIDTHS)
        row += 1
        for item in request.items:
            values = [
                item.number,
                item.name,
                category_label(item.category),
                room_of(item),
                quantity_of(item),
                unit_of(item),
                text_or_dash(item.supplier),
            ]
            for col, value in enumerate(values, start=1):
                cell = ws.cell(row=row, column=col, value=value)
                cell.font = styles.body
                cell.border = _BORDER
            row += 1
        return _to_bytes(wb)
