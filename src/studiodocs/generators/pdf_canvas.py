"""Fixed-page PDF writing with an explicit vertical cursor (reportlab).

Content is placed top-down in millimetres. Before any block taller than
one line is drawn, :meth:`PageWriter.ensure` checks whether it still
fits above the bottom reserve and otherwise starts a new page, which
re-draws the running header. Footers are drawn at save time so they can
show the final page count.
"""

from __future__ import annotations

import logging
from io import BytesIO
from typing import Callable, Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen import canvas

from ..core.images import ResolvedImage
from .themes import RGB, Theme

logger = logging.getLogger(__name__)

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
LINE_FACTOR = 0.45      # mm of line height per point of font size


def _rgb(t: RGB) -> colors.Color:
    return colors.Color(t[0] / 255, t[1] / 255, t[2] / 255)


class NumberedCanvas(canvas.Canvas):
    """Canvas that keeps every page until ``save`` to stamp ``i de N`` footers."""

    def __init__(self, *args, footer: Callable[["NumberedCanvas", int, int], None] | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self._saved_page_states: list[dict] = []
        self._footer = footer

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        total = len(self._saved_page_states)
        for number, state in enumerate(self._saved_page_states, start=1):
            self.__dict__.update(state)
            if self._footer is not None:
                self._footer(self, number, total)
            super().showPage()
        super().save()


class PageWriter:
    """Cursor-tracking writer over a :class:`NumberedCanvas`.

    *header* runs on every new page; *top* is where the cursor restarts
    underneath it. *bottom_reserve* keeps room for the footer.
    """

    def __init__(
        self,
        theme: Theme,
        *,
        header: Callable[["PageWriter"], None] | None = None,
        footer: Callable[["PageWriter", int, int], None] | None = None,
        top: float = 45.0,
        bottom_reserve: float = 30.0,
        pagesize: tuple[float, float] = A4,
        title: str = "",
        author: str = "",
    ) -> None:
        self.theme = theme
        self.margin = theme.layout.page_margin_mm
        self.page_width = pagesize[0] / mm
        self.page_height = pagesize[1] / mm
        self.top = top
        self.bottom_reserve = bottom_reserve
        self._header = header
        self._footer = footer
        self._buf = BytesIO()
        self.canvas = NumberedCanvas(
            self._buf,
            pagesize=pagesize,
            footer=self._draw_footer if footer else None,
        )
        if title:
            self.canvas.setTitle(title)
        if author:
            self.canvas.setAuthor(author)
        self.page_number = 1
        self.y = top
        if header:
            header(self)

    # ------------------------------------------------------------------
    # Cursor
    # ------------------------------------------------------------------

    @property
    def content_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def limit(self) -> float:
        return self.page_height - self.bottom_reserve

    def ensure(self, height: float) -> bool:
        """Start a new page unless *height* mm still fit. True if it broke."""
        if self.y + height <= self.limit:
            return False
        self.new_page()
        return True

    def new_page(self) -> None:
        self.canvas.showPage()
        self.page_number += 1
        self.y = self.top
        if self._header:
            self._header(self)

    def advance(self, height: float) -> None:
        self.y += height

    def _pt_y(self, y_mm: float) -> float:
        return (self.page_height - y_mm) * mm

    # ------------------------------------------------------------------
    # Drawing (positions in mm from top-left)
    # ------------------------------------------------------------------

    def text(
        self,
        x: float,
        y: float,
        value: str,
        *,
        size: float = 10,
        bold: bool = False,
        color: RGB | None = None,
        align: str = "left",
    ) -> None:
        c = self.canvas
        c.setFont(FONT_BOLD if bold else FONT, size)
        c.setFillColor(_rgb(color or self.theme.colors.text))
        if align == "center":
            c.drawCentredString(x * mm, self._pt_y(y), value)
        elif align == "right":
            c.drawRightString(x * mm, self._pt_y(y), value)
        else:
            c.drawString(x * mm, self._pt_y(y), value)

    def line(self, x1: float, y1: float, x2: float, y2: float, *, color: RGB | None = None, width: float = 0.5):
        c = self.canvas
        c.setStrokeColor(_rgb(color or self.theme.colors.border))
        c.setLineWidth(width)
        c.line(x1 * mm, self._pt_y(y1), x2 * mm, self._pt_y(y2))

    def rect(
        self,
        x: float,
        y: float,
        w: float,
        h: float,
        *,
        fill: RGB | None = None,
        stroke: RGB | None = None,
        radius: float = 0,
    ) -> None:
        c = self.canvas
        if fill is not None:
            c.setFillColor(_rgb(fill))
        if stroke is not None:
            c.setStrokeColor(_rgb(stroke))
            c.setLineWidth(0.5)
        args = (x * mm, self._pt_y(y + h), w * mm, h * mm)
        if radius:
            c.roundRect(*args, radius * mm, fill=int(fill is not None), stroke=int(stroke is not None))
        else:
            c.rect(*args, fill=int(fill is not None), stroke=int(stroke is not None))

    def image(self, image: Optional[ResolvedImage], x: float, y: float, w: float, h: float) -> bool:
        """Draw *image* fitted into the box; False when nothing was drawn."""
        if image is None:
            return False
        dx, dy, fw, fh = image.fit(w, h)
        try:
            self.canvas.drawImage(
                ImageReader(image.stream()),
                (x + dx) * mm, self._pt_y(y + dy + fh), fw * mm, fh * mm,
                mask="auto",
            )
        except Exception as exc:
            logger.warning("Could not draw image %s: %s", image.url, exc)
            return False
        return True

    # ------------------------------------------------------------------
    # Flowing blocks
    # ------------------------------------------------------------------

    @staticmethod
    def line_height(size: float) -> float:
        return size * LINE_FACTOR

    def wrap(self, value: str, width: float, size: float = 10, bold: bool = False) -> list[str]:
        lines: list[str] = []
        for paragraph in value.splitlines() or [""]:
            lines.extend(simpleSplit(paragraph, FONT_BOLD if bold else FONT, size, width * mm) or [""])
        return lines

    def paragraph(
        self,
        value: str,
        *,
        x: float | None = None,
        width: float | None = None,
        size: float = 10,
        bold: bool = False,
        color: RGB | None = None,
        spacing: float = 2.0,
    ) -> None:
        """Wrapped text at the cursor, breaking pages between lines if needed."""
        x = self.margin if x is None else x
        width = self.content_width - (x - self.margin) if width is None else width
        lh = self.line_height(size)
        lines = self.wrap(value, width, size, bold)
        # Keep short paragraphs together; long ones may split across pages
        self.ensure(min(len(lines) * lh, self.limit - self.top))
        for line in lines:
            self.ensure(lh)
            self.text(x, self.y + lh * 0.75, line, size=size, bold=bold, color=color)
            self.y += lh
        self.y += spacing

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def _draw_footer(self, c: NumberedCanvas, number: int, total: int) -> None:
        if self._footer is not None:
            self._footer(self, number, total)

    def finish(self) -> bytes:
        self.canvas.showPage()
        self.canvas.save()
        return self._buf.getvalue()
