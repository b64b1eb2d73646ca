"""Commercial proposal as a Word (.docx) document.

Word paginates on its own, so this generator only composes styled
blocks: headings, shaded label/value tables, the investment callout
and a two-column signature block.
"""

from __future__ import annotations

from io import BytesIO

from docx import Document as DocxDocument
from docx.enum.table import WD_TABLE_ALIGNMENT
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Cm, Pt, RGBColor

from ..core.defaults import text_or_dash
from ..core.formatting import format_currency, format_date
from ..core.models import DocumentKind, ProposalRequest
from .base import BaseGenerator
from .proposal_pdf import standard_terms, valid_until
from .themes import RGB, to_hex


# Children that must follow w:tcBorders / w:shd inside w:tcPr, and w:pBdr inside w:pPr
_TC_PR_AFTER_BORDERS = (
    "w:shd", "w:noWrap", "w:tcMar", "w:textDirection", "w:tcFitText", "w:vAlign",
    "w:hideMark", "w:headers", "w:cellIns", "w:cellDel", "w:cellMerge", "w:tcPrChange",
)
_TC_PR_AFTER_SHADING = _TC_PR_AFTER_BORDERS[1:]
_P_PR_AFTER_BORDER = (
    "w:shd", "w:tabs", "w:suppressAutoHyphens", "w:kinsoku", "w:wordWrap", "w:overflowPunct",
    "w:topLinePunct", "w:autoSpaceDE", "w:autoSpaceDN", "w:bidi", "w:adjustRightInd",
    "w:snapToGrid", "w:spacing", "w:ind", "w:contextualSpacing", "w:mirrorIndents",
    "w:suppressOverlap", "w:jc", "w:textDirection", "w:textAlignment", "w:textboxTightWrap",
    "w:outlineLvl", "w:divId", "w:cnfStyle", "w:rPr", "w:sectPr", "w:pPrChange",
)


def _replace_child(parent, element, successors: tuple[str, ...]) -> None:
    """Put *element* at its schema position, dropping any previous one of the same tag."""
    for old in parent.findall(element.tag):
        parent.remove(old)
    parent.insert_element_before(element, *successors)


def _set_cell_shading(cell, color: RGB) -> None:
    """Apply background shading to a table cell."""
    tc_pr = cell._element.get_or_add_tcPr()
    shading = OxmlElement("w:shd")
    shading.set(qn("w:fill"), to_hex(color))
    shading.set(qn("w:val"), "clear")
    _replace_child(tc_pr, shading, _TC_PR_AFTER_SHADING)


def _set_cell_borders(cell, color: RGB | None, size: int = 8) -> None:
    """Border every side of a cell; ``None`` removes them."""
    tc_pr = cell._element.get_or_add_tcPr()
    borders = OxmlElement("w:tcBorders")
    for side in ("top", "left", "bottom", "right"):
        el = OxmlElement(f"w:{side}")
        if color is None:
            el.set(qn("w:val"), "nil")
        else:
            el.set(qn("w:val"), "single")
            el.set(qn("w:sz"), str(size))
            el.set(qn("w:color"), to_hex(color))
        borders.append(el)
    _replace_child(tc_pr, borders, _TC_PR_AFTER_BORDERS)


def _add_bottom_border(paragraph, color: RGB, size: int = 6) -> None:
    """Add a colored bottom border to a paragraph."""
    p_pr = paragraph._element.get_or_add_pPr()
    p_bdr = OxmlElement("w:pBdr")
    bottom = OxmlElement("w:bottom")
    bottom.set(qn("w:val"), "single")
    bottom.set(qn("w:sz"), str(size))
    bottom.set(qn("w:space"), "4")
    bottom.set(qn("w:color"), to_hex(color))
    p_bdr.append(bottom)
    _replace_child(p_pr, p_bdr, _P_PR_AFTER_BORDER)


def _add_field(paragraph, instruction: str) -> None:
    """Insert a Word field (``PAGE``, ``NUMPAGES``) as a run."""
    run = paragraph.add_run()
    begin = OxmlElement("w:fldChar")
    begin.set(qn("w:fldCharType"), "begin")
    instr = OxmlElement("w:instrText")
    instr.set(qn("xml:space"), "preserve")
    instr.text = instruction
    end = OxmlElement("w:fldChar")
    end.set(qn("w:fldCharType"), "end")
    run._r.append(begin)
    run._r.append(instr)
    run._r.append(end)


class ProposalWordGenerator(BaseGenerator[ProposalRequest]):
    """Header/footer → title → client → project → sections → investment → terms → signatures."""

    kind = DocumentKind.PROPOSAL_WORD
    request_model = ProposalRequest

    def render(self, request: ProposalRequest) -> bytes:
        docx = self._build(request)
        buf = BytesIO()
        docx.save(buf)
        return buf.getvalue()

    # ------------------------------------------------------------------
    # Builder
    # ------------------------------------------------------------------

    def _build(self, request: ProposalRequest) -> DocxDocument:
        docx = DocxDocument()
        colors, fonts = self.theme.colors, self.theme.fonts

        for section in docx.sections:
            section.top_margin = Cm(2.5)
            section.bottom_margin = Cm(2)
            section.left_margin = Cm(2)
            section.right_margin = Cm(2)

        style = docx.styles["Normal"]
        style.font.name = fonts.body
        style.font.size = Pt(fonts.body_size_pt)
        style.font.color.rgb = RGBColor(*colors.text)
        style.paragraph_format.space_after = Pt(6)

        self._setup_heading_styles(docx)
        self._add_header_footer(docx)

        self._add_title(docx, request)
        self._add_client_table(docx, request)
        self._add_project(docx, request)
        for block in request.sections:
            docx.add_heading(block.title, level=2)
            if block.content:
                docx.add_paragraph(block.content)
            for line in block.items:
                p = docx.add_paragraph(style="List Bullet")
                p.add_run(f"{line.label}: ").bold = True
                p.add_run(line.value)
        self._add_investment(docx, request)
        if request.payment_terms:
            docx.add_heading("Condições de Pagamento", level=1)
            docx.add_paragraph(request.payment_terms)
        if request.include_terms:
            docx.add_heading("Termos e Condições", level=1)
            for number, term in enumerate(standard_terms(self.config), start=1):
                p = docx.add_paragraph(f"{number}. {term}")
                p.runs[0].font.size = Pt(fonts.small_size_pt + 1)
                p.runs[0].font.color.rgb = RGBColor(*colors.muted)
        if request.include_signature:
            self._add_signatures(docx, request)
        return docx

    def _setup_heading_styles(self, docx: DocxDocument) -> None:
        colors, fonts = self.theme.colors, self.theme.fonts
        heading_config = [
            ("Heading 1", fonts.subtitle_size_pt + 2, colors.primary, 18, 8),
            ("Heading 2", fonts.subtitle_size_pt, colors.primary_dark, 12, 6),
        ]
        for name, size, color, space_before, space_after in heading_config:
            style = docx.styles[name]
            style.font.name = fonts.heading
            style.font.size = Pt(size)
            style.font.color.rgb = RGBColor(*color)
            style.font.bold = True
            style.paragraph_format.space_before = Pt(space_before)
            style.paragraph_format.space_after = Pt(space_after)
            style.paragraph_format.keep_with_next = True

    def _add_header_footer(self, docx: DocxDocument) -> None:
        colors, fonts = self.theme.colors, self.theme.fonts
        for section in docx.sections:
            header = section.header
            p = header.paragraphs[0]
            run = p.add_run(self.config.company_name)
            run.bold = True
            run.font.size = Pt(fonts.body_size_pt)
            run.font.color.rgb = RGBColor(*colors.primary)
            run = p.add_run(f" | {self.config.tagline}")
            run.font.size = Pt(fonts.small_size_pt)
            run.font.color.rgb = RGBColor(*colors.muted)
            _add_bottom_border(p, colors.primary)

            footer = section.footer
            p = footer.paragraphs[0]
            p.alignment = WD_ALIGN_PARAGRAPH.CENTER
            p.add_run("Página ")
            _add_field(p, "PAGE")
            p.add_run(" de ")
            _add_field(p, "NUMPAGES")
            for run in p.runs:
                run.font.size = Pt(fonts.small_size_pt - 1)
                run.font.color.rgb = RGBColor(*colors.muted)

    def _add_title(self, docx: DocxDocument, request: ProposalRequest) -> None:
        colors = self.theme.colors
        p = docx.add_paragraph()
        p.alignment = WD_ALIGN_PARAGRAPH.CENTER
        p.paragraph_format.space_before = Pt(24)
        run = p.add_run("PROPOSTA COMERCIAL")
        run.bold = True
        run.font.size = Pt(24)
        run.font.color.rgb = RGBColor(*colors.primary)

        p = docx.add_paragraph()
        p.alignment = WD_ALIGN_PARAGRAPH.CENTER
        run = p.add_run(
            f"Data: {format_date(request.issue_date)}    "
            f"Válido até: {format_date(valid_until(request, self.config))}"
        )
        run.font.color.rgb = RGBColor(*colors.muted)

    def _add_client_table(self, docx: DocxDocument, request: ProposalRequest) -> None:
        colors = self.theme.colors
        client = request.client
        rows = [("Cliente", client.name)] + [(label, value) for label, value in (
            ("E-mail", client.email),
            ("Telefone", client.phone),
            ("Endereço", client.address),
        ) if value]

        docx.add_heading("Dados do Cliente", level=1)
        table = docx.add_table(rows=len(rows), cols=2)
        table.alignment = WD_TABLE_ALIGNMENT.CENTER
        for index, (label, value) in enumerate(rows):
            label_cell, value_cell = table.rows[index].cells
            label_cell.width = Cm(4.5)
            value_cell.width = Cm(12.5)
            label_cell.text = ""
            run = label_cell.paragraphs[0].add_run(label)
            run.bold = True
            run.font.color.rgb = RGBColor(*colors.primary)
            _set_cell_shading(label_cell, colors.bg_section)
            value_cell.text = value
            for cell in (label_cell, value_cell):
                _set_cell_borders(cell, colors.border, size=4)

    def _add_project(self, docx: DocxDocument, request: ProposalRequest) -> None:
        docx.add_heading("Sobre o Projeto", level=1)
        for label, value in (
            ("Tipo de Projeto", request.project_type),
            ("Serviço", request.service_type),
            ("Descrição", request.description),
        ):
            if label == "Descrição" and not value:
                continue
            p = docx.add_paragraph()
            p.add_run(f"{label}: ").bold = True
            p.add_run(text_or_dash(value))

    def _add_investment(self, docx: DocxDocument, request: ProposalRequest) -> None:
        colors = self.theme.colors
        docx.add_paragraph()
        table = docx.add_table(rows=1, cols=1)
        table.alignment = WD_TABLE_ALIGNMENT.CENTER
        cell = table.cell(0, 0)
        _set_cell_shading(cell, colors.primary)
        _set_cell_borders(cell, colors.primary_dark, size=12)

        p = cell.paragraphs[0]
        p.alignment = WD_ALIGN_PARAGRAPH.CENTER
        run = p.add_run("INVESTIMENTO")
        run.bold = True
        run.font.size = Pt(12)
        run.font.color.rgb = RGBColor(*colors.white)

        p = cell.add_paragraph()
        p.alignment = WD_ALIGN_PARAGRAPH.CENTER
        run = p.add_run(format_currency(request.total_value))
        run.bold = True
        run.font.size = Pt(22)
        run.font.color.rgb = RGBColor(*colors.white)

    def _add_signatures(self, docx: DocxDocument, request: ProposalRequest) -> None:
        colors = self.theme.colors
        p = docx.add_paragraph()
        p.paragraph_format.space_before = Pt(24)
        p.add_run("Aceito os termos desta proposta:")

        table = docx.add_table(rows=1, cols=3)
        table.autofit = False
        widths = (Cm(7.65), Cm(1.7), Cm(7.65))      # 45% / 10% / 45%
        for cell, width in zip(table.rows[0].cells, widths):
            cell.width = width
            _set_cell_borders(cell, None)

        left, _, right = table.rows[0].cells
        for cell, name, role in (
            (left, request.client.name, "Cliente"),
            (right, self.config.company_name, "Contratada"),
        ):
            rule = cell.paragraphs[0]
            rule.paragraph_format.space_before = Pt(36)
            _add_bottom_border(rule, colors.text)
            cell.add_paragraph(name)
            muted = cell.add_paragraph().add_run(role)
            muted.font.color.rgb = RGBColor(*colors.muted)

        p = docx.add_paragraph()
        p.paragraph_format.space_before = Pt(24)
        p.add_run("Local e Data: __________________________________, ___/___/______")
