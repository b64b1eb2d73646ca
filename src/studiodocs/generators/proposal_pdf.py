"""Commercial proposal as a fixed-page PDF."""

from __future__ import annotations

from datetime import timedelta

from ..config import EngineConfig
from ..core.defaults import text_or_dash
from ..core.formatting import format_currency, format_date
from ..core.images import ResolvedImage
from ..core.models import DocumentKind, ProposalRequest
from .base import BaseGenerator
from .pdf_canvas import PageWriter


def standard_terms(config: EngineConfig) -> list[str]:
    """Terms printed on every proposal (PDF and Word)."""
    return [
        f"Esta proposta tem validade de {config.proposal_validity_days} dias a partir da data de emissão.",
        "Os valores apresentados estão sujeitos a alteração mediante análise técnica detalhada.",
        "O início dos trabalhos está condicionado à aprovação formal desta proposta e pagamento inicial.",
        "Alterações no escopo poderão impactar prazos e valores acordados.",
        "Imagens e materiais de referência são ilustrativos e podem sofrer variações.",
        f"Os direitos autorais do projeto pertencem à {config.company_name} até quitação total.",
    ]


def valid_until(request: ProposalRequest, config: EngineConfig):
    return request.valid_until or request.issue_date + timedelta(days=config.proposal_validity_days)


class ProposalPdfGenerator(BaseGenerator[ProposalRequest]):
    """Header → title → client → project → sections → investment → terms → signatures."""

    kind = DocumentKind.PROPOSAL_PDF
    request_model = ProposalRequest

    def render(self, request: ProposalRequest) -> bytes:
        logo = self.image(request.logo_url)
        pdf = PageWriter(
            self.theme,
            header=lambda w: self._header(w, logo),
            footer=self._footer,
            title=f"Proposta Comercial - {request.client.name}",
            author=self.config.company_name,
        )
        colors = self.theme.colors

        pdf.text(pdf.page_width / 2, pdf.y, "PROPOSTA COMERCIAL", size=22, bold=True,
                 color=colors.primary, align="center")
        pdf.advance(10)
        pdf.text(pdf.margin, pdf.y, f"Data: {format_date(request.issue_date)}", size=10, color=colors.muted)
        pdf.text(pdf.page_width - pdf.margin, pdf.y,
                 f"Válido até: {format_date(valid_until(request, self.config))}",
                 size=10, color=colors.muted, align="right")
        pdf.advance(10)

        self._client_box(pdf, request)
        self._project(pdf, request)
        for section in request.sections:
            self._heading(pdf, section.title)
            if section.content:
                pdf.paragraph(section.content, size=10)
            for line in section.items:
                pdf.paragraph(f"•  {line.label}: {line.value}", x=pdf.margin + 3, size=10, spacing=1)
            pdf.advance(4)

        self._investment(pdf, request)
        if request.payment_terms:
            self._heading(pdf, "Condições de Pagamento")
            pdf.paragraph(request.payment_terms, size=10)
            pdf.advance(4)
        if request.include_terms:
            self._heading(pdf, "Termos e Condições", rule=True)
            for number, term in enumerate(standard_terms(self.config), start=1):
                pdf.paragraph(f"{number}. {term}", size=9, color=colors.muted, spacing=3)
        if request.include_signature:
            self._signatures(pdf, request)
        return pdf.finish()

    # ------------------------------------------------------------------
    # Page furniture
    # ------------------------------------------------------------------

    def _header(self, pdf: PageWriter, logo: ResolvedImage | None) -> None:
        colors = self.theme.colors
        if not pdf.image(logo, pdf.margin, 10, 50, 15):
            pdf.text(pdf.margin, 20, self.config.company_name, size=18, bold=True, color=colors.primary)
        pdf.text(pdf.page_width - pdf.margin, 20, self.config.tagline, size=9,
                 color=colors.muted, align="right")
        pdf.line(pdf.margin, 30, pdf.page_width - pdf.margin, 30, color=colors.primary, width=1)

    def _footer(self, pdf: PageWriter, number: int, total: int) -> None:
        colors = self.theme.colors
        y = pdf.page_height - 12
        pdf.line(pdf.margin, y - 5, pdf.page_width - pdf.margin, y - 5)
        pdf.text(pdf.margin, y, self.config.company_name, size=8, color=colors.light)
        pdf.text(pdf.page_width / 2, y, f"Página {number} de {total}", size=8,
                 color=colors.muted, align="center")

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def _heading(self, pdf: PageWriter, title: str, rule: bool = False) -> None:
        pdf.ensure(16)
        pdf.advance(4)
        pdf.text(pdf.margin, pdf.y, title, size=13, bold=True, color=self.theme.colors.primary)
        if rule:
            pdf.line(pdf.margin, pdf.y + 2.5, pdf.page_width - pdf.margin, pdf.y + 2.5)
        pdf.advance(7)

    def _client_box(self, pdf: PageWriter, request: ProposalRequest) -> None:
        colors = self.theme.colors
        client = request.client
        rows = [("Cliente", client.name)]
        rows += [(label, value) for label, value in (
            ("E-mail", client.email),
            ("Telefone", client.phone),
            ("Endereço", client.address),
        ) if value]
        value_width = pdf.content_width - 37
        wrapped = [(label, pdf.wrap(value, value_width, size=10)) for label, value in rows]
        step = pdf.line_height(10)
        height = 10 + sum(6 + step * (len(lines) - 1) for _, lines in wrapped)
        pdf.ensure(height)
        pdf.rect(pdf.margin, pdf.y, pdf.content_width, height, fill=colors.bg_light, stroke=colors.border, radius=2)
        y = pdf.y + 7
        pdf.text(pdf.margin + 5, y, "DADOS DO CLIENTE", size=9, bold=True, color=colors.muted)
        for label, lines in wrapped:
            y += 6
            pdf.text(pdf.margin + 5, y, f"{label}:", size=10, bold=True)
            for index, line in enumerate(lines):
                if index:
                    y += step
                pdf.text(pdf.margin + 32, y, line, size=10)
        pdf.advance(height + 6)

    def _project(self, pdf: PageWriter, request: ProposalRequest) -> None:
        self._heading(pdf, "Sobre o Projeto")
        for label, value in (("Tipo de Projeto", request.project_type), ("Serviço", request.service_type)):
            pdf.ensure(6)
            pdf.text(pdf.margin, pdf.y, f"{label}:", size=10, bold=True)
            pdf.text(pdf.margin + 35, pdf.y, text_or_dash(value), size=10)
            pdf.advance(6)
        if request.description:
            pdf.ensure(6)
            pdf.text(pdf.margin, pdf.y, "Descrição:", size=10, bold=True)
            pdf.advance(3)
            pdf.paragraph(request.description, size=10)
        pdf.advance(4)

    def _investment(self, pdf: PageWriter, request: ProposalRequest) -> None:
        colors = self.theme.colors
        pdf.ensure(34)
        pdf.advance(4)
        pdf.rect(pdf.margin, pdf.y, pdf.content_width, 26, fill=colors.primary, radius=3)
        pdf.text(pdf.page_width / 2, pdf.y + 9, "INVESTIMENTO", size=11, bold=True,
                 color=colors.white, align="center")
        pdf.text(pdf.page_width / 2, pdf.y + 20, format_currency(request.total_value), size=20, bold=True,
                 color=colors.white, align="center")
        pdf.advance(32)

    def _signatures(self, pdf: PageWriter, request: ProposalRequest) -> None:
        colors = self.theme.colors
        pdf.ensure(60)
        pdf.advance(15)
        pdf.text(pdf.margin, pdf.y, "Aceito os termos desta proposta:", size=11)
        pdf.advance(22)
        right = pdf.page_width - pdf.margin - 70
        for x, name, role in (
            (pdf.margin, request.client.name, "Cliente"),
            (right, self.config.company_name, "Contratada"),
        ):
            pdf.line(x, pdf.y, x + 70, pdf.y)
            pdf.text(x, pdf.y + 5, name, size=10)
            pdf.text(x, pdf.y + 10, role, size=10, color=colors.muted)
        pdf.advance(22)
        pdf.text(pdf.margin, pdf.y, "Local e Data: __________________________________, ___/___/______", size=10)
