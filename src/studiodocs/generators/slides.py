"""python-pptx building blocks shared by the slide-deck generators.

``DeckBuilder`` owns one ``Presentation`` and knows how to lay out the
recurring slide types (cover, section intro, titled content, image
grid, table, closing) in the active theme. Positions are in inches.
"""

from __future__ import annotations

import logging
from io import BytesIO
from typing import Optional, Sequence

from pptx import Presentation
from pptx.dml.color import RGBColor
from pptx.enum.shapes import MSO_AUTO_SHAPE_TYPE
from pptx.enum.text import MSO_ANCHOR, PP_ALIGN
from pptx.oxml.ns import qn
from pptx.oxml.xmlchemy import OxmlElement
from pptx.util import Inches, Pt

from ..core.images import ResolvedImage
from ..core.pagination import image_grid
from .themes import RGB, Theme

logger = logging.getLogger(__name__)

_BLANK_LAYOUT = 6
_HEADER_HEIGHT = 0.8
_GAP = 0.1

_ALIGN = {
    "left": PP_ALIGN.LEFT,
    "center": PP_ALIGN.CENTER,
    "right": PP_ALIGN.RIGHT,
}
_ANCHOR = {
    "top": MSO_ANCHOR.TOP,
    "middle": MSO_ANCHOR.MIDDLE,
    "bottom": MSO_ANCHOR.BOTTOM,
}


def _rgb(color: RGB) -> RGBColor:
    return RGBColor(*color)


def _set_alpha(shape, opacity: float) -> None:
    """Make a solid shape fill semi-transparent (0.0-1.0)."""
    srgb = shape.fill._xPr.find(qn("a:solidFill")).find(qn("a:srgbClr"))
    alpha = OxmlElement("a:alpha")
    alpha.set("val", str(int(opacity * 100000)))
    srgb.append(alpha)


class DeckBuilder:
    """Accumulates slides into one presentation.

    *logo* is placed on every content slide (not on covers) at the
    corner the theme asks for.
    """

    def __init__(self, theme: Theme, logo: Optional[ResolvedImage] = None) -> None:
        self.theme = theme
        self.logo = logo
        self.prs = Presentation()
        lay = theme.layout
        self.prs.slide_width = Inches(lay.slide_width_inches)
        self.prs.slide_height = Inches(lay.slide_height_inches)
        self.width = lay.slide_width_inches
        self.height = lay.slide_height_inches
        self.margin = lay.slide_margin_inches

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------

    @property
    def content_width(self) -> float:
        return self.width - 2 * self.margin

    @property
    def slide_count(self) -> int:
        return len(self.prs.slides)

    def new_slide(self, background: RGB | None = None):
        slide = self.prs.slides.add_slide(self.prs.slide_layouts[_BLANK_LAYOUT])
        if background is not None:
            fill = slide.background.fill
            fill.solid()
            fill.fore_color.rgb = _rgb(background)
        return slide

    def add_text(
        self,
        slide,
        x: float,
        y: float,
        w: float,
        h: float,
        text: str,
        *,
        size: int | None = None,
        color: RGB | None = None,
        bold: bool = False,
        italic: bool = False,
        align: str = "left",
        anchor: str = "top",
        font: str | None = None,
    ):
        """Add a word-wrapped text box; ``\\n`` starts a new paragraph."""
        fonts = self.theme.fonts
        box = slide.shapes.add_textbox(Inches(x), Inches(y), Inches(w), Inches(h))
        tf = box.text_frame
        tf.word_wrap = True
        tf.vertical_anchor = _ANCHOR[anchor]
        for margin in ("margin_left", "margin_right", "margin_top", "margin_bottom"):
            setattr(tf, margin, Inches(0.05))
        for index, line in enumerate(text.split("\n")):
            p = tf.paragraphs[0] if index == 0 else tf.add_paragraph()
            p.alignment = _ALIGN[align]
            run = p.add_run()
            run.text = line
            run.font.name = font or fonts.body
            run.font.size = Pt(size or fonts.body_size_pt)
            run.font.bold = bold
            run.font.italic = italic
            run.font.color.rgb = _rgb(color or self.theme.colors.text)
        return box

    def add_rect(
        self,
        slide,
        x: float,
        y: float,
        w: float,
        h: float,
        fill: RGB,
        *,
        line: RGB | None = None,
        rounded: bool = False,
        opacity: float | None = None,
    ):
        shape_type = MSO_AUTO_SHAPE_TYPE.ROUNDED_RECTANGLE if rounded else MSO_AUTO_SHAPE_TYPE.RECTANGLE
        shape = slide.shapes.add_shape(shape_type, Inches(x), Inches(y), Inches(w), Inches(h))
        shape.fill.solid()
        shape.fill.fore_color.rgb = _rgb(fill)
        if opacity is not None:
            _set_alpha(shape, opacity)
        if line is None:
            shape.line.fill.background()
        else:
            shape.line.color.rgb = _rgb(line)
            shape.line.width = Pt(0.75)
        shape.shadow.inherit = False
        return shape

    def add_picture(
        self,
        slide,
        image: Optional[ResolvedImage],
        x: float,
        y: float,
        w: float,
        h: float,
        *,
        fit: bool = True,
    ):
        """Place *image* inside the box; ``None`` draws nothing."""
        if image is None:
            return None
        if fit:
            dx, dy, fw, fh = image.fit(w, h)
            x, y, w, h = x + dx, y + dy, fw, fh
        try:
            return slide.shapes.add_picture(image.stream(), Inches(x), Inches(y), Inches(w), Inches(h))
        except Exception as exc:
            # python-pptx rejects some formats Pillow can read
            logger.warning("Could not embed image %s: %s", image.url, exc)
            return None

    def add_placeholder(self, slide, x: float, y: float, w: float, h: float, label: str = "Sem imagem"):
        colors = self.theme.colors
        self.add_rect(slide, x, y, w, h, colors.bg_section, line=colors.border)
        self.add_text(
            slide, x, y, w, h, label,
            size=self.theme.fonts.small_size_pt, color=colors.light,
            align="center", anchor="middle",
        )

    def add_logo(self, slide) -> None:
        if self.logo is None:
            return
        lay = self.theme.layout
        w, h = lay.logo_width_inches, lay.logo_height_inches
        vertical, horizontal = lay.logo_position.split("-")
        x = self.margin if horizontal == "left" else self.width - self.margin - w
        y = 0.2 if vertical == "top" else self.height - h - 0.2
        self.add_picture(slide, self.logo, x, y, w, h)

    # ------------------------------------------------------------------
    # Slide types
    # ------------------------------------------------------------------

    def cover_slide(
        self,
        title: str,
        subtitle: str = "",
        detail: str = "",
        *,
        background: RGB | None = None,
        image: Optional[ResolvedImage] = None,
    ):
        """Full-bleed cover; with *image* the photo sits under a dark veil."""
        colors, fonts = self.theme.colors, self.theme.fonts
        slide = self.new_slide(background or colors.primary)
        if image is not None:
            self.add_picture(slide, image, 0, 0, self.width, self.height, fit=False)
            self.add_rect(slide, 0, 0, self.width, self.height, colors.primary_dark, opacity=0.55)
        if self.logo is not None:
            self.add_picture(slide, self.logo, self.margin, self.margin, 2.0, 0.5)
        mid = self.height / 2
        self.add_text(
            slide, self.margin, mid - 1.1, self.content_width, 1.0, title,
            size=fonts.cover_size_pt, color=colors.white, bold=True,
            align="center", anchor="bottom", font=fonts.heading,
        )
        if subtitle:
            self.add_text(
                slide, self.margin, mid, self.content_width, 0.6, subtitle,
                size=fonts.title_size_pt, color=colors.white, align="center",
            )
        if detail:
            self.add_text(
                slide, self.margin, mid + 0.7, self.content_width, 0.5, detail,
                size=fonts.subtitle_size_pt, color=colors.border, align="center",
            )
        return slide

    def section_slide(self, title: str, subtitle: str = "", color: RGB | None = None):
        colors, fonts = self.theme.colors, self.theme.fonts
        slide = self.new_slide(color or colors.primary)
        self.add_rect(slide, self.margin, self.height / 2 + 0.05, 1.2, 0.06, colors.white)
        self.add_text(
            slide, self.margin, self.height / 2 - 1.0, self.content_width, 1.0, title,
            size=fonts.cover_size_pt - 8, color=colors.white, bold=True,
            anchor="bottom", font=fonts.heading,
        )
        if subtitle:
            self.add_text(
                slide, self.margin, self.height / 2 + 0.2, self.content_width, 0.5, subtitle,
                size=fonts.subtitle_size_pt, color=colors.white,
            )
        self.add_logo(slide)
        return slide

    def content_slide(self, title: str, subtitle: str = "", accent: RGB | None = None):
        """White slide with a title, an accent rule and the logo.

        Content starts at ``self.body_top``.
        """
        colors, fonts = self.theme.colors, self.theme.fonts
        slide = self.new_slide(colors.white)
        self.add_rect(slide, 0, 0, 0.12, self.height, accent or colors.primary)
        self.add_text(
            slide, self.margin, 0.2, self.content_width - 2.0, 0.5, title,
            size=fonts.title_size_pt, color=colors.primary, bold=True, font=fonts.heading,
        )
        if subtitle:
            self.add_text(
                slide, self.margin, 0.62, self.content_width - 2.0, 0.3, subtitle,
                size=fonts.small_size_pt + 1, color=colors.muted,
            )
        self.add_logo(slide)
        return slide

    @property
    def body_top(self) -> float:
        return _HEADER_HEIGHT + 0.1

    @property
    def body_height(self) -> float:
        return self.height - self.body_top - self.margin

    def full_image_slide(self, title: str, image: Optional[ResolvedImage]):
        slide = self.content_slide(title)
        x, y = self.margin, self.body_top
        w, h = self.content_width, self.body_height
        if self.add_picture(slide, image, x, y, w, h) is None:
            self.add_placeholder(slide, x, y, w, h)
        return slide

    def image_grid_slide(self, title: str, images: Sequence[Optional[ResolvedImage]], subtitle: str = ""):
        """Grid sized by the number of images; unresolved ones are skipped."""
        present = [img for img in images if img is not None]
        slide = self.content_slide(title, subtitle)
        if not present:
            self.add_placeholder(slide, self.margin, self.body_top, self.content_width, self.body_height)
            return slide
        cols, rows = image_grid(len(present))
        cell_w = (self.content_width - _GAP * (cols - 1)) / cols
        cell_h = (self.body_height - _GAP * (rows - 1)) / rows
        for index, image in enumerate(present):
            row, col = divmod(index, cols)
            x = self.margin + col * (cell_w + _GAP)
            y = self.body_top + row * (cell_h + _GAP)
            self.add_picture(slide, image, x, y, cell_w, cell_h)
        return slide

    def table(
        self,
        slide,
        headers: Sequence[str],
        rows: Sequence[Sequence[str]],
        col_widths: Sequence[float],
        *,
        y: float | None = None,
        header_color: RGB | None = None,
        row_height: float = 0.32,
        align: Sequence[str] | None = None,
        emphasis_rows: Sequence[int] = (),
        emphasis_color: RGB | None = None,
    ):
        """Styled table: colored header, zebra rows, optional emphasis rows.

        *emphasis_rows* index into *rows* (subtotal / total lines).
        """
        colors, fonts = self.theme.colors, self.theme.fonts
        top = self.body_top if y is None else y
        n_rows = len(rows) + 1
        frame = slide.shapes.add_table(
            n_rows, len(headers),
            Inches(self.margin), Inches(top),
            Inches(sum(col_widths)), Inches(row_height * n_rows),
        )
        tbl = frame.table
        for index, width in enumerate(col_widths):
            tbl.columns[index].width = Inches(width)
        for index in range(n_rows):
            tbl.rows[index].height = Inches(row_height)

        alignment = list(align or ["left"] * len(headers))
        emphasis = set(emphasis_rows)
        for c, text in enumerate(headers):
            self._cell(tbl.cell(0, c), text, header_color or colors.primary, colors.white,
                       bold=True, align=alignment[c], size=fonts.small_size_pt + 1)
        for r, row in enumerate(rows):
            is_emphasis = r in emphasis
            if is_emphasis:
                fill, fg = emphasis_color or colors.bg_section, colors.primary
            else:
                fill, fg = (colors.bg_light if r % 2 else colors.white), colors.text
            for c, text in enumerate(row):
                self._cell(tbl.cell(r + 1, c), text, fill, fg, bold=is_emphasis,
                           align=alignment[c], size=fonts.small_size_pt + 1)
        return tbl

    def _cell(self, cell, text: str, fill: RGB, color: RGB, *, bold: bool, align: str, size: int) -> None:
        cell.fill.solid()
        cell.fill.fore_color.rgb = _rgb(fill)
        cell.vertical_anchor = MSO_ANCHOR.MIDDLE
        cell.margin_left = cell.margin_right = Inches(0.06)
        cell.margin_top = cell.margin_bottom = Inches(0.02)
        tf = cell.text_frame
        tf.word_wrap = True
        p = tf.paragraphs[0]
        p.alignment = _ALIGN[align]
        run = p.add_run()
        run.text = text
        run.font.name = self.theme.fonts.body
        run.font.size = Pt(size)
        run.font.bold = bold
        run.font.color.rgb = _rgb(color)

    def closing_slide(self, title: str, subtitle: str = "", detail: str = ""):
        return self.cover_slide(title, subtitle, detail)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def to_bytes(self) -> bytes:
        buf = BytesIO()
        self.prs.save(buf)
        return buf.getvalue()
