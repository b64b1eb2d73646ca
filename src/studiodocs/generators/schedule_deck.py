"""Delivery schedule as a slide deck (timeline variant)."""

from __future__ import annotations

from ..core.formatting import format_date
from ..core.models import DocumentKind, ScheduleRequest
from ..core.pagination import list_capacity, paginate
from ..core.timeline import RULE_TABLE, RuleTable, Timeline, build_timeline
from .base import BaseGenerator
from .slides import DeckBuilder

MILESTONES_PER_SLIDE = 6


def schedule_caption(request: ScheduleRequest) -> str:
    """``"3 ambientes • PRESENCIAL"``."""
    noun = "ambiente" if request.rooms == 1 else "ambientes"
    return f"{request.rooms} {noun} • {request.modality.value.upper()}"


class ScheduleDeckGenerator(BaseGenerator[ScheduleRequest]):
    """Cover → timeline slides → totals → closing."""

    kind = DocumentKind.SCHEDULE_DECK
    request_model = ScheduleRequest

    def __init__(self, *args, rules: RuleTable = RULE_TABLE, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.rules = rules

    def render(self, request: ScheduleRequest) -> bytes:
        timeline = build_timeline(request, self.rules)
        deck = DeckBuilder(self.theme, self.image(request.logo_url))

        deck.cover_slide(
            "Cronograma de Entregas",
            request.client.name.upper(),
            f"{timeline.label} • {schedule_caption(request)}",
            background=self.theme.colors.primary_dark,
        )
        for page in paginate(timeline.milestones, list_capacity(MILESTONES_PER_SLIDE)):
            self._timeline_slide(deck, timeline, page.items, page.indicator)
        self._totals_slide(deck, timeline, request)
        deck.closing_slide(self.config.schedule_tagline, self.config.company_name)
        return deck.to_bytes()

    def _timeline_slide(self, deck: DeckBuilder, timeline: Timeline, milestones, indicator: str) -> None:
        colors, fonts = self.theme.colors, self.theme.fonts
        slide = deck.content_slide(f"{timeline.label} {indicator}".strip(), "Cronograma de entregas")
        row_h = deck.body_height / MILESTONES_PER_SLIDE
        y = deck.body_top
        for milestone in milestones:
            if milestone.milestone:
                deck.add_rect(slide, deck.margin, y, deck.content_width, row_h - 0.08, colors.bg_section)
            date_fill = colors.primary if milestone.milestone else colors.muted
            deck.add_rect(slide, deck.margin, y, 1.3, row_h - 0.08, date_fill)
            deck.add_text(slide, deck.margin, y, 1.3, row_h - 0.08,
                          f"{milestone.day_month}\n{milestone.weekday}",
                          size=fonts.small_size_pt, color=colors.white, bold=True,
                          align="center", anchor="middle")
            deck.add_text(slide, deck.margin + 1.45, y + 0.02, deck.content_width - 1.5, 0.4,
                          milestone.title, size=fonts.body_size_pt + 1, color=colors.primary,
                          bold=milestone.milestone)
            deck.add_text(slide, deck.margin + 1.45, y + 0.38, deck.content_width - 1.5, 0.35,
                          milestone.description, size=fonts.small_size_pt + 1, color=colors.muted)
            y += row_h

    def _totals_slide(self, deck: DeckBuilder, timeline: Timeline, request: ScheduleRequest) -> None:
        colors, fonts = self.theme.colors, self.theme.fonts
        slide = deck.content_slide("Resumo", schedule_caption(request))
        stats = [
            ("DIAS TOTAIS", str(timeline.total_days)),
            ("REUNIÕES", timeline.meetings),
            ("ENTREGA", timeline.final_delivery),
        ]
        box_w = (deck.content_width - 0.4) / 3
        y = deck.body_top + 0.8
        for index, (label, value) in enumerate(stats):
            x = deck.margin + index * (box_w + 0.2)
            deck.add_rect(slide, x, y, box_w, 1.8, colors.primary, rounded=True)
            deck.add_text(slide, x, y + 0.25, box_w, 0.8, value, size=fonts.cover_size_pt,
                          color=colors.white, bold=True, align="center", anchor="middle")
            deck.add_text(slide, x, y + 1.15, box_w, 0.4, label, size=fonts.small_size_pt + 1,
                          color=colors.border, align="center")
        if timeline.final_date is not None:
            deck.add_text(slide, deck.margin, y + 2.2, deck.content_width, 0.4,
                          f"Início em {format_date(request.start_date)} · entrega final em "
                          f"{format_date(timeline.final_date)}",
                          size=fonts.body_size_pt, color=colors.muted, align="center")
