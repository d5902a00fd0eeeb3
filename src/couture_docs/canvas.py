"""Drawing surface for one fixed-size PDF page."""

import io
from typing import Optional, Sequence, Tuple

from reportlab.lib.colors import Color
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

from .layout import PageLayout
from .styles import FontSet, TextStyle

Point = Tuple[float, float]


class PageCanvas:
    """
    Absolute-positioned drawing on a single page.

    Coordinates have their origin at the bottom-left corner with y growing
    upward. Text must already be sanitized. Nothing here checks whether a
    shape falls outside the page.
    """

    def __init__(self, layout: PageLayout, fonts: Optional[FontSet] = None, invariant: bool = False):
        self.layout = layout
        self.fonts = fonts or FontSet()
        self._buffer = io.BytesIO()
        self._canvas = canvas.Canvas(
            self._buffer,
            pagesize=layout.pagesize,
            invariant=1 if invariant else 0,
        )

    @property
    def width(self) -> float:
        return self.layout.page_width

    @property
    def height(self) -> float:
        return self.layout.page_height

    def font_name(self, style: TextStyle) -> str:
        return self.fonts.name_for(style.role)

    def draw_text(self, text: str, x: float, y: float, style: TextStyle, angle: float = 0.0) -> None:
        """Draw text with its baseline starting at (x, y)."""
        if not text:
            return
        c = self._canvas
        c.setFont(self.font_name(style), style.size)
        c.setFillColor(style.color)
        if angle:
            c.saveState()
            c.translate(x, y)
            c.rotate(angle)
            c.drawString(0, 0, text)
            c.restoreState()
        else:
            c.drawString(x, y, text)

    def draw_line(
        self,
        start: Point,
        end: Point,
        thickness: float,
        color: Color,
        dash: Optional[Sequence[float]] = None,
    ) -> None:
        c = self._canvas
        c.saveState()
        c.setStrokeColor(color)
        c.setLineWidth(thickness)
        if dash:
            c.setDash(list(dash))
        c.line(start[0], start[1], end[0], end[1])
        c.restoreState()

    def draw_rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        border_color: Optional[Color] = None,
        border_width: float = 1.0,
        fill_color: Optional[Color] = None,
    ) -> None:
        """Draw a rectangle whose bottom-left corner is (x, y)."""
        if border_color is None and fill_color is None:
            return
        c = self._canvas
        c.saveState()
        if fill_color is not None:
            c.setFillColor(fill_color)
        if border_color is not None:
            c.setStrokeColor(border_color)
            c.setLineWidth(border_width)
        c.rect(
            x, y, width, height,
            stroke=1 if border_color is not None else 0,
            fill=1 if fill_color is not None else 0,
        )
        c.restoreState()

    def draw_image(self, image: ImageReader, x: float, y: float, width: float, height: float) -> None:
        """Draw an already decoded image scaled into the given box."""
        self._canvas.drawImage(image, x, y, width=width, height=height, mask="auto")

    def measure_text_width(self, text: str, style: TextStyle) -> float:
        """Exact advance width of text in the style's font."""
        return pdfmetrics.stringWidth(text, self.font_name(style), style.size)

    def save(self) -> bytes:
        """Close the page and return the encoded PDF."""
        self._canvas.showPage()
        self._canvas.save()
        return self._buffer.getvalue()
