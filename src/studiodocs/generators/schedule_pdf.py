"""Delivery schedule as a fixed-page PDF."""

from __future__ import annotations

from ..core.models import DocumentKind, ScheduleRequest
from ..core.timeline import RULE_TABLE, RuleTable, Timeline, build_timeline
from .base import BaseGenerator
from .pdf_canvas import PageWriter
from .schedule_deck import schedule_caption

ROW_HEIGHT = 16.0
HEADER_HEIGHT = 32.0


class SchedulePdfGenerator(BaseGenerator[ScheduleRequest]):
    """Header band → client → one row per milestone → summary box → tagline."""

    kind = DocumentKind.SCHEDULE_PDF
    request_model = ScheduleRequest

    def __init__(self, *args, rules: RuleTable = RULE_TABLE, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.rules = rules

    def render(self, request: ScheduleRequest) -> bytes:
        timeline = build_timeline(request, self.rules)
        pdf = PageWriter(
            self.theme,
            header=lambda w: self._header(w, timeline),
            footer=self._footer,
            top=HEADER_HEIGHT + 12,
            bottom_reserve=20,
            title=f"Cronograma - {request.client.name}",
            author=self.config.company_name,
        )
        colors = self.theme.colors

        pdf.text(pdf.margin, pdf.y, request.client.name.upper(), size=16, bold=True, color=colors.primary_dark)
        pdf.advance(7)
        pdf.text(pdf.margin, pdf.y, schedule_caption(request), size=10, color=colors.muted)
        pdf.advance(10)

        for milestone in timeline.milestones:
            pdf.ensure(ROW_HEIGHT)
            y = pdf.y
            if milestone.milestone:
                pdf.rect(pdf.margin, y, pdf.content_width, ROW_HEIGHT - 2, fill=colors.bg_section)
            date_fill = colors.primary_dark if milestone.milestone else colors.muted
            pdf.rect(pdf.margin, y, 24, ROW_HEIGHT - 2, fill=date_fill)
            pdf.text(pdf.margin + 12, y + 6, milestone.day_month, size=11, bold=True,
                     color=colors.white, align="center")
            pdf.text(pdf.margin + 12, y + 11, milestone.weekday, size=7, color=colors.white, align="center")
            pdf.text(pdf.margin + 29, y + 6, milestone.title, size=10, bold=milestone.milestone,
                     color=colors.primary_dark)
            pdf.text(pdf.margin + 29, y + 11, milestone.description, size=8.5, color=colors.muted)
            pdf.advance(ROW_HEIGHT)

        self._summary(pdf, timeline)
        return pdf.finish()

    def _header(self, pdf: PageWriter, timeline: Timeline) -> None:
        colors = self.theme.colors
        pdf.rect(0, 0, pdf.page_width, HEADER_HEIGHT, fill=colors.primary_dark)
        pdf.text(pdf.margin, 13, self.config.company_name.upper(), size=9, bold=True, color=colors.light)
        pdf.text(pdf.margin, 23, "CRONOGRAMA DE ENTREGAS", size=16, bold=True, color=colors.white)
        pdf.text(pdf.page_width - pdf.margin, 23, timeline.label, size=11, bold=True,
                 color=colors.white, align="right")

    def _footer(self, pdf: PageWriter, number: int, total: int) -> None:
        if total > 1:
            pdf.text(pdf.page_width / 2, pdf.page_height - 8, f"Página {number} de {total}",
                     size=8, color=self.theme.colors.muted, align="center")

    def _summary(self, pdf: PageWriter, timeline: Timeline) -> None:
        colors = self.theme.colors
        pdf.ensure(48)
        pdf.advance(6)
        box_w = (pdf.content_width - 10) / 3
        stats = (
            ("DIAS TOTAIS", str(timeline.total_days)),
            ("REUNIÕES", timeline.meetings),
            ("ENTREGA", timeline.final_delivery),
        )
        for index, (label, value) in enumerate(stats):
            x = pdf.margin + index * (box_w + 5)
            pdf.rect(x, pdf.y, box_w, 24, fill=colors.primary_dark, radius=2)
            pdf.text(x + box_w / 2, pdf.y + 12, value, size=18, bold=True, color=colors.white, align="center")
            pdf.text(x + box_w / 2, pdf.y + 19, label, size=8, color=colors.light, align="center")
        pdf.advance(36)
        pdf.text(pdf.page_width / 2, pdf.y, self.config.schedule_tagline, size=11, bold=True,
                 color=colors.primary_dark, align="center")
