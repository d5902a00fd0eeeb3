"""Compose the non-table sections of a sheet: banners, boxes, notes and footer."""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from reportlab.lib.colors import Color

from .assets import AssetResolver
from .canvas import PageCanvas
from .config import RenderConfig
from .layout import Cursor
from .logger import get_logger
from .sanitize import sanitize, wrap_text
from .styles import PALETTE, Palette, TextStyle, bold, oblique, regular

LOGGER = get_logger(__name__)

FOOTER_Y = 25
DOTTED = (2, 2)


@dataclass
class InfoField:
    """A label/value pair inside an info box or panel."""
    label: str
    value: str
    color: Optional[Color] = None


@dataclass
class DateCard:
    """One bordered date card."""
    label: str
    value: str
    color: Optional[Color] = None


@dataclass
class SummaryLine:
    """One line of the financial summary box."""
    label: str
    value: str
    emphasized: bool = False
    color: Optional[Color] = None
    rule_above: bool = False


@dataclass
class Fallback:
    """An asset that could not be drawn and what replaced it."""
    slot: str  # "logo" or "photo"
    ref: str
    reason: str


class SectionComposer:
    """
    Draws the fixed visual structure of a sheet.

    Every method that occupies vertical space takes the cursor at the top of
    its block and returns the cursor just below it. Text passed in is
    sanitized here before it reaches the canvas.
    """

    def __init__(
        self,
        canvas_obj: PageCanvas,
        config: RenderConfig,
        resolver: AssetResolver,
        palette: Palette = PALETTE,
    ):
        self.canvas = canvas_obj
        self.config = config
        self.resolver = resolver
        self.palette = palette
        self.fallbacks: List[Fallback] = []

    @property
    def layout(self):
        return self.canvas.layout

    def _text(self, text, x: float, y: float, style: TextStyle, angle: float = 0.0) -> str:
        clean = sanitize(text)
        self.canvas.draw_text(clean, x, y, style, angle)
        return clean

    def _text_right(self, text, right_x: float, y: float, style: TextStyle) -> str:
        clean = sanitize(text)
        self.canvas.draw_text(clean, right_x - self.canvas.measure_text_width(clean, style), y, style)
        return clean

    def _text_centered(self, text, y: float, style: TextStyle) -> str:
        clean = sanitize(text)
        width = self.canvas.measure_text_width(clean, style)
        self.canvas.draw_text(clean, (self.canvas.width - width) / 2, y, style)
        return clean

    # Page furniture

    def draw_watermark(self, size: float = 70) -> None:
        """Faint diagonal brand name; drawn first so everything covers it."""
        style = bold(size, self.palette.watermark)
        text = sanitize(self.config.brand_name)
        text_width = self.canvas.measure_text_width(text, style)
        x = (self.canvas.width - text_width) / 2 - 50
        y = self.canvas.height / 2 - 50
        self.canvas.draw_text(text, x, y, style, angle=45)

    def draw_title_banner(
        self,
        cursor: Cursor,
        title: str,
        font_size: float = 14,
        height: float = 22,
    ) -> Cursor:
        """Centred title in a brand-bordered box sized to the text."""
        style = bold(font_size, self.palette.brand)
        title = sanitize(title)
        box_width = self.canvas.measure_text_width(title, style) + 30
        box_x = (self.canvas.width - box_width) / 2
        box_y = cursor.y - height

        self.canvas.draw_rect(
            box_x, box_y, box_width, height,
            border_color=self.palette.brand, border_width=1.5,
            fill_color=self.palette.header_text,
        )
        self.canvas.draw_text(title, box_x + 15, box_y + (height - font_size) / 2 + 2, style)
        return cursor.down(height)

    def draw_logo(self, cursor: Cursor, size: float = 45) -> Cursor:
        """Logo at the left margin, or the brand name in bold if it cannot load."""
        x = self.layout.content_start_x
        result = self.resolver.resolve(self.config.logo_path)
        if result.ok:
            self.canvas.draw_image(result.image, x, cursor.y - size, size, size)
        else:
            self.fallbacks.append(Fallback("logo", result.ref, result.error or ""))
            self._text(self.config.brand_name, x, cursor.y - 20, bold(14, self.palette.brand))
        return cursor.down(size)

    def draw_photo_frame(self, cursor: Cursor, ref: Optional[str], photo_size: float = 55) -> Cursor:
        """Right-anchored photo frame; a centred PHOTO label replaces a missing image."""
        frame = photo_size + 4
        x = self.layout.content_end_x - frame
        y = cursor.y - frame
        self.canvas.draw_rect(
            x, y, frame, frame,
            border_color=self.palette.border, border_width=1,
            fill_color=self.palette.total_fill,
        )

        result = self.resolver.resolve(ref)
        if result.ok:
            self.canvas.draw_image(result.image, x + 2, y + 2, photo_size, photo_size)
        else:
            if ref:
                self.fallbacks.append(Fallback("photo", result.ref, result.error or ""))
            style = regular(10, self.palette.muted)
            label_width = self.canvas.measure_text_width("PHOTO", style)
            self.canvas.draw_text("PHOTO", x + (frame - label_width) / 2, y + frame / 2 - 3, style)
        return cursor.down(frame)

    def draw_info_panel(
        self,
        cursor: Cursor,
        fields: Sequence[InfoField],
        width: float = 200,
        height: float = 55,
        value_offset: float = 80,
    ) -> Cursor:
        """Right-anchored panel of label/value lines (order number, status, priority)."""
        x = self.layout.content_end_x - width
        y = cursor.y - height
        self.canvas.draw_rect(
            x, y, width, height,
            border_color=self.palette.border, border_width=1, fill_color=self.palette.panel,
        )

        line_y = cursor.y - 15
        for i, field in enumerate(fields):
            self._text(field.label, x + 8, line_y, regular(9, self.palette.muted))
            # First line is the headline value
            value_style = bold(11 if i == 0 else 9, field.color or self.palette.text)
            self._text(field.value, x + value_offset, line_y, value_style)
            line_y -= 15
        return cursor.down(height)

    # Info boxes

    def draw_underlined_field(self, cursor: Cursor, label: str, value: str, step: float = 14) -> Cursor:
        """'LABEL:' in bold followed by the value on an underline rule to the right margin."""
        x = self.layout.content_start_x
        label_style = bold(9)
        label_text = f"{sanitize(label)}:"
        self.canvas.draw_text(label_text, x, cursor.y, label_style)

        line_start = x + self.canvas.measure_text_width(label_text, label_style) + 5
        if value:
            self._text(value, line_start + 5, cursor.y, regular(9))
        self.canvas.draw_line(
            (line_start, cursor.y - 3), (self.layout.content_end_x, cursor.y - 3),
            0.5, self.palette.divider,
        )
        return cursor.down(step)

    def draw_section_heading(self, cursor: Cursor, text: str, size: float = 10, gap: float = 5) -> Cursor:
        """Brand-coloured heading whose baseline sits on the cursor."""
        self._text(text, self.layout.content_start_x, cursor.y, bold(size, self.palette.brand))
        return cursor.down(gap)

    def draw_label(self, cursor: Cursor, text: str, size: float = 9, gap: float = 10) -> Cursor:
        """Bold body-coloured label, e.g. above a notes box."""
        self._text(text, self.layout.content_start_x, cursor.y, bold(size))
        return cursor.down(gap)

    def draw_centered_heading(self, cursor: Cursor, text: str, size: float = 11, gap: float = 8) -> Cursor:
        self._text_centered(text, cursor.y, oblique(size))
        return cursor.down(gap)

    def draw_field_grid(
        self,
        cursor: Cursor,
        rows: Sequence[Sequence[InfoField]],
        height: float,
        heading: Optional[str] = None,
        bold_labels: bool = False,
        column_divider: bool = False,
        line_step: float = 12,
    ) -> Cursor:
        """
        Bordered, filled box of label/value fields laid out in columns.

        Each row lists one field per column; columns split the content width
        evenly. Empty fields are skipped so optional data leaves a gap.
        """
        x = self.layout.content_start_x
        width = self.layout.content_width
        top = cursor.y
        self.canvas.draw_rect(
            x, top - height, width, height,
            border_color=self.palette.border, border_width=1, fill_color=self.palette.panel,
        )

        columns = max((len(row) for row in rows), default=1)
        column_width = width / columns
        if column_divider:
            for i in range(1, columns):
                rule_x = x + i * column_width
                self.canvas.draw_line((rule_x, top), (rule_x, top - height), 0.5, self.palette.divider)

        line_y = top - 14
        if heading:
            self._text(heading, x + 10, line_y, bold(10, self.palette.brand))
            line_y -= 15

        label_style = bold(9) if bold_labels else regular(9)
        for row in rows:
            for col, field in enumerate(row):
                if field is None or not field.value:
                    continue
                field_x = x + col * column_width + 10
                label = f"{sanitize(field.label)}:"
                self.canvas.draw_text(label, field_x, line_y, label_style)
                value_x = field_x + self.canvas.measure_text_width(label, label_style) + 4
                value_style = regular(9, field.color or self.palette.text)
                self._text(field.value, value_x, line_y, value_style)
            line_y -= line_step
        return cursor.down(height)

    def draw_date_cards(
        self,
        cursor: Cursor,
        cards: Sequence[DateCard],
        columns: int = 3,
        height: float = 35,
        gap: float = 5,
    ) -> Cursor:
        """Bordered date cards, each (content width / columns) - gap wide."""
        x0 = self.layout.content_start_x
        slot = self.layout.content_width / columns
        bottom = cursor.y - height
        for i, card in enumerate(cards[:columns]):
            x = x0 + i * slot
            self.canvas.draw_rect(x, bottom, slot - gap, height, border_color=self.palette.border, border_width=1)
            self._text(card.label, x + 8, bottom + 22, regular(8, self.palette.muted))
            self._text(card.value, x + 8, bottom + 8, bold(10, card.color or self.palette.text))
        return cursor.down(height)

    def draw_summary_box(
        self,
        cursor: Cursor,
        lines: Sequence[SummaryLine],
        width: float = 200,
        height: float = 100,
    ) -> Cursor:
        """Right-anchored box of label/amount lines with right-aligned amounts."""
        x = self.layout.content_end_x - width
        self.canvas.draw_rect(
            x, cursor.y - height, width, height,
            border_color=self.palette.border, border_width=1, fill_color=self.palette.panel,
        )

        label_x = x + 10
        value_x = x + width - 10
        line_y = cursor.y - 15
        for line in lines:
            if line.rule_above:
                self.canvas.draw_line((label_x, line_y + 10), (value_x, line_y + 10), 0.5, self.palette.divider)
            if line.emphasized:
                label_style = bold(10, line.color or self.palette.text)
                value_style = label_style
            else:
                label_style = regular(9, line.color or self.palette.muted)
                value_style = regular(9, line.color or self.palette.text)
            self._text(line.label, label_x, line_y, label_style)
            self._text_right(line.value, value_x, line_y, value_style)
            line_y -= 14
        return cursor.down(height)

    def draw_notes_box(
        self,
        cursor: Cursor,
        text: Optional[str],
        max_chars: int,
        height: float,
        max_lines: Optional[int] = None,
    ) -> Tuple[List[str], Cursor]:
        """
        Fixed-height bordered box holding the first wrapped lines of text.

        Lines beyond max_lines (config notes_max_lines by default) are dropped.
        Returns the lines actually drawn.
        """
        if max_lines is None:
            max_lines = self.config.notes_max_lines
        x = self.layout.content_start_x
        self.canvas.draw_rect(
            x, cursor.y - height, self.layout.content_width, height,
            border_color=self.palette.border, border_width=1,
        )

        lines = wrap_text(sanitize(text), max_chars)
        shown = lines[:max_lines]
        if len(lines) > len(shown):
            LOGGER.debug("Notes truncated to %d of %d lines", len(shown), len(lines))

        line_y = cursor.y - 10
        for line in shown:
            self.canvas.draw_text(line, x + 8, line_y, regular(8))
            line_y -= 10
        return shown, cursor.down(height)

    # Production-tracking primitives

    def draw_marker_heading(self, cursor: Cursor, text: str, gap: float = 16) -> Cursor:
        """'>' bullet in the brand colour followed by a bold line."""
        x = self.layout.content_start_x
        self.canvas.draw_text(">", x, cursor.y, bold(9, self.palette.brand))
        self._text(text, x + 12, cursor.y, bold(9))
        return cursor.down(gap)

    def draw_day_field(self, cursor: Cursor, value: str, gap: float = 20) -> Cursor:
        """'Jour :' followed by a value, or a dotted placeholder to fill in by hand."""
        x = self.layout.content_start_x + 10
        self.canvas.draw_text("Jour :", x, cursor.y, regular(9))
        if value:
            self._text(value, x + 35, cursor.y, bold(9))
        else:
            self.canvas.draw_text(
                "....../....../..........   a  ..........", x + 35, cursor.y, regular(9, self.palette.divider)
            )
        return cursor.down(gap)

    def draw_checkbox_row(
        self,
        cursor: Cursor,
        label: str,
        options: Sequence[Tuple[str, float]],
        option_size: float = 9,
        gap: float = 25,
        box_size: float = 12,
    ) -> Cursor:
        """Bold label followed by empty checkboxes at the given x offsets from the margin."""
        x = self.layout.content_start_x
        self._text(label, x, cursor.y, bold(10))
        for option, offset in options:
            box_x = x + offset
            self.canvas.draw_rect(box_x, cursor.y - 2, box_size, box_size, border_color=self.palette.text)
            self._text(option, box_x + box_size + 5, cursor.y, regular(option_size))
        return cursor.down(gap)

    def draw_comment_lines(
        self,
        cursor: Cursor,
        text: Optional[str],
        max_chars: int = 90,
        count: int = 3,
        step: float = 18,
    ) -> Tuple[List[str], Cursor]:
        """Dotted writing lines, pre-filled with the first wrapped lines of text."""
        x0 = self.layout.content_start_x
        x1 = self.layout.content_end_x
        lines = wrap_text(sanitize(text), max_chars)[:count]
        y = cursor.y
        for i in range(count):
            if i < len(lines):
                self.canvas.draw_text(lines[i], x0, y, regular(8))
            self.canvas.draw_line((x0, y - 5), (x1, y - 5), 0.5, self.palette.divider, dash=DOTTED)
            y -= step
        return lines, cursor.to(y)

    def draw_signature_lines(
        self,
        cursor: Cursor,
        left_label: str,
        right_label: str,
        line_width: float = 180,
        gap: float = 20,
    ) -> Cursor:
        """Two signature rules with captions, at the left and right margins."""
        left = self.layout.content_start_x
        right = self.layout.content_end_x - line_width
        for x, label, caption_x in ((left, left_label, left), (right, right_label, right + 30)):
            self.canvas.draw_line((x, cursor.y + 5), (x + line_width, cursor.y + 5), 1, self.palette.text)
            self._text(label, caption_x, cursor.y - 8, bold(10))
        return cursor.down(gap)

    # Footer

    def draw_footer(
        self,
        lines: Sequence[str],
        attribution: Optional[str] = None,
        generated_on: Optional[str] = None,
        size: float = 7,
        footer_y: float = FOOTER_Y,
    ) -> None:
        """
        Brand divider, centred contact lines, then the attribution on the left
        and the generation date on the right.

        The footer sits at a fixed height from the page bottom and ignores the
        cursor.
        """
        self.canvas.draw_line(
            (self.layout.content_start_x, footer_y + 22),
            (self.layout.content_end_x, footer_y + 22),
            0.5, self.palette.brand,
        )

        line_y = footer_y + 8 + 2 * len(lines)
        last_y = line_y
        for line in lines:
            self._text_centered(line, line_y, regular(size, self.palette.muted))
            last_y = line_y
            line_y -= 9

        small = regular(6, self.palette.muted)
        meta_y = min(footer_y, last_y - 9)
        if attribution:
            self._text(attribution, self.layout.content_start_x, meta_y, small)
        if generated_on:
            self._text_right(f"Genere le: {generated_on}", self.layout.content_end_x, meta_y, small)
