"""Client presentation deck built from named image sections."""

from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.formatting import format_date_long
from ..core.images import ResolvedImage
from ..core.models import DocumentKind, ImageSection, PresentationRequest
from ..core.pagination import paginate
from .base import BaseGenerator
from .slides import DeckBuilder

GRID_IMAGES = 6

SECTION_TITLES = {
    ImageSection.PHOTOS_BEFORE: "Fotos Antes",
    ImageSection.MOODBOARD: "Moodboard",
    ImageSection.REFERENCES: "Referências",
    ImageSection.FLOOR_PLAN: "Planta Baixa",
    ImageSection.RENDERS: "Projeto 3D",
}

SECTION_SUBTITLES = {
    ImageSection.PHOTOS_BEFORE: "Estado atual do ambiente",
    ImageSection.MOODBOARD: "Conceito e inspirações",
    ImageSection.REFERENCES: "Inspirações visuais",
    ImageSection.FLOOR_PLAN: "Layout do projeto",
    ImageSection.RENDERS: "Visualização do projeto",
}


class PresentationDeckGenerator(BaseGenerator[PresentationRequest]):
    """Cover → client info → per section: intro + image slides → closing.

    A section is skipped when it is switched off or none of its images
    could be resolved.
    """

    kind = DocumentKind.PRESENTATION
    request_model = PresentationRequest

    def render(self, request: PresentationRequest) -> bytes:
        deck = DeckBuilder(self.theme, self.image(request.logo_url))
        sections = {section: self._resolved(request, section) for section in ImageSection}

        client = request.client
        renders = sections[ImageSection.RENDERS]
        deck.cover_slide(
            client.name,
            client.project_type or request.project_name or "Apresentação do Projeto",
            format_date_long(date.today()),
            image=renders[0] if renders else None,
        )
        if client.address:
            self._client_slide(deck, request)

        for section in ImageSection:
            images = sections[section]
            if not images:
                continue
            title = SECTION_TITLES[section]
            deck.section_slide(title, SECTION_SUBTITLES[section])
            if section in (ImageSection.MOODBOARD, ImageSection.FLOOR_PLAN):
                deck.full_image_slide(title, images[0])
            elif section is ImageSection.RENDERS:
                for index, image in enumerate(images, start=1):
                    suffix = f" ({index}/{len(images)})" if len(images) > 1 else ""
                    deck.full_image_slide(title + suffix, image)
            else:
                for page in paginate(images, GRID_IMAGES):
                    deck.image_grid_slide(f"{title} {page.indicator}".strip(), page.items)

        deck.closing_slide("Obrigado!", self.config.company_name, self.config.tagline)
        return deck.to_bytes()

    def _resolved(self, request: PresentationRequest, section: ImageSection) -> list[ResolvedImage]:
        if not request.is_included(section):
            return []
        found: list[Optional[ResolvedImage]] = [self.image(img.url) for img in request.images_for(section)]
        return [img for img in found if img is not None]

    def _client_slide(self, deck: DeckBuilder, request: PresentationRequest) -> None:
        colors, fonts = self.theme.colors, self.theme.fonts
        client = request.client
        slide = deck.content_slide("Dados do Cliente")
        fields = [
            ("Cliente", client.name),
            ("Endereço", client.address),
            ("Tipo de Projeto", client.project_type),
            ("Ambiente", client.room),
            ("Projeto", request.project_name),
            ("Data", format_date_long(date.today())),
        ]
        y = deck.body_top + 0.2
        for label, value in fields:
            if not value:
                continue
            deck.add_text(slide, deck.margin, y, 2.2, 0.45, label, size=fonts.body_size_pt,
                          color=colors.muted, bold=True, anchor="middle")
            deck.add_text(slide, deck.margin + 2.3, y, deck.content_width - 2.3, 0.45, value,
                          size=fonts.subtitle_size_pt, color=colors.text, anchor="middle")
            deck.add_rect(slide, deck.margin, y + 0.5, deck.content_width, 0.01, colors.border)
            y += 0.65
