"""Render bordered, zebra-striped tables onto a page canvas."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from .canvas import PageCanvas
from .layout import SUB_LINE_HEIGHT, Cursor, char_budget, expanded_row_height
from .logger import get_logger
from .styles import PALETTE, FontRole, Palette, TextStyle
from .tables import Cell, ExpandedRow, Row, RowKind, StandardRow, TableSpec, TotalRow

LOGGER = get_logger(__name__)


class CellTruncation(Enum):
    """How cell text is cut to fit its column."""
    CHARACTERS = "characters"  # Average-glyph character budget
    MEASURED = "measured"      # Longest prefix whose measured width fits


@dataclass
class RenderedRow:
    """Where a row landed and what it shows."""
    index: int  # 1-based running index; 0 for header and total rows
    kind: RowKind
    bbox: Tuple[float, float, float, float]  # x0, y0, x1, y1
    texts: List[str]


@dataclass
class RenderedTable:
    """Metadata for a rendered table."""
    bbox: Tuple[float, float, float, float]
    column_widths: List[float]
    headers: List[str]
    rows: List[RenderedRow] = field(default_factory=list)
    dropped_rows: int = 0

    @property
    def data_rows(self) -> List[RenderedRow]:
        return [r for r in self.rows if r.kind in (RowKind.STANDARD, RowKind.EXPANDED)]

    @property
    def total_rows(self) -> List[RenderedRow]:
        return [r for r in self.rows if r.kind == RowKind.TOTAL]

    @property
    def height(self) -> float:
        return self.bbox[3] - self.bbox[1]


def truncate_text(
    text: str,
    width: float,
    style: TextStyle,
    canvas_obj: PageCanvas,
    mode: CellTruncation = CellTruncation.CHARACTERS,
    inset: float = 0.0,
) -> str:
    """Cut text to fit a cell, without an ellipsis."""
    if not text:
        return text

    if mode == CellTruncation.CHARACTERS:
        return text[:char_budget(width, style.size, inset)]

    available = width - 2 * inset
    if canvas_obj.measure_text_width(text, style) <= available:
        return text
    for i in range(len(text) - 1, 0, -1):
        if canvas_obj.measure_text_width(text[:i], style) <= available:
            return text[:i]
    return ""


class TableRenderer:
    """Draws header, rows, dividers and border for one table at a time."""

    def __init__(
        self,
        canvas_obj: PageCanvas,
        palette: Palette = PALETTE,
        truncation: CellTruncation = CellTruncation.CHARACTERS,
    ):
        self.canvas = canvas_obj
        self.palette = palette
        self.truncation = truncation

    def render_table(
        self,
        origin: Cursor,
        spec: TableSpec,
        rows: Sequence[Row],
        floor: Optional[float] = None,
        x: Optional[float] = None,
        width: Optional[float] = None,
    ) -> Tuple[RenderedTable, Cursor]:
        """
        Render a table whose top edge sits at origin.

        Rows that would cross floor are dropped (single-page truncation).
        Returns the table metadata and the cursor just below its border.
        """
        layout = self.canvas.layout
        x = layout.content_start_x if x is None else x
        width = layout.content_width if width is None else width
        col_widths = spec.column_widths(width)
        col_starts = [x + sum(col_widths[:i]) for i in range(len(col_widths))]

        top = origin.y
        y = self._draw_header(spec, x, top, width, col_widths, col_starts)

        rendered = RenderedTable(
            bbox=(x, y, x + width, top),
            column_widths=col_widths,
            headers=spec.headers,
        )
        rendered.rows.append(RenderedRow(0, RowKind.HEADER, (x, y, x + width, top), spec.headers))

        running_index = 0
        for position, row in enumerate(rows):
            height = self._row_height(spec, row)
            if floor is not None and y - height < floor:
                rendered.dropped_rows = len(rows) - position
                LOGGER.warning(
                    "Table overflows the page: dropped %d of %d rows",
                    rendered.dropped_rows, len(rows),
                )
                break

            if isinstance(row, TotalRow):
                texts = self._draw_total_row(spec, row, x, y, width, height, col_starts)
                index, kind = 0, RowKind.TOTAL
            else:
                running_index += 1
                index = running_index
                if self._is_shaded(spec, running_index):
                    self.canvas.draw_rect(x, y - height, width, height, fill_color=self.palette.stripe)
                if isinstance(row, ExpandedRow):
                    texts = self._draw_expanded_row(spec, row, y, height, col_widths, col_starts)
                    kind = RowKind.EXPANDED
                else:
                    texts = self._draw_standard_row(spec, row, y, height, col_widths, col_starts)
                    kind = RowKind.STANDARD

            # Row bottom border
            self.canvas.draw_line((x, y - height), (x + width, y - height), 0.5, self.palette.divider)
            rendered.rows.append(RenderedRow(index, kind, (x, y - height, x + width, y), texts))
            y -= height

        for boundary in spec.vertical_rules:
            rule_x = col_starts[boundary]
            self.canvas.draw_line((rule_x, top - spec.header_height), (rule_x, y), 0.5, self.palette.border)

        # Table outer border
        self.canvas.draw_rect(x, y, width, top - y, border_color=self.palette.border, border_width=1)

        rendered.bbox = (x, y, x + width, top)
        return rendered, origin.to(y)

    def _row_height(self, spec: TableSpec, row: Row) -> float:
        if isinstance(row, ExpandedRow):
            return expanded_row_height(len(row.sub_fields))
        if isinstance(row, TotalRow):
            return spec.row_height + 2
        return spec.row_height

    def _is_shaded(self, spec: TableSpec, running_index: int) -> bool:
        return (running_index % 2 == 1) == spec.shade_odd_rows

    def _baseline(self, y_top: float, height: float, font_size: float) -> float:
        """Baseline that vertically centres a line of text in a band."""
        return y_top - height / 2 - font_size * 0.35

    def _draw_header(
        self,
        spec: TableSpec,
        x: float,
        top: float,
        width: float,
        col_widths: List[float],
        col_starts: List[float],
    ) -> float:
        """Draw header row with background; returns the y below it."""
        bottom = top - spec.header_height
        self.canvas.draw_rect(x, bottom, width, spec.header_height, fill_color=self.palette.table_header)

        style = TextStyle(FontRole.BOLD, spec.header_font_size, self.palette.header_text)
        text_y = self._baseline(top, spec.header_height, spec.header_font_size)
        for name, col_x, col_w in zip(spec.headers, col_starts, col_widths):
            label = truncate_text(name, col_w, style, self.canvas, self.truncation, spec.text_inset)
            self.canvas.draw_text(label, col_x + spec.text_inset, text_y, style)

        if spec.header_rules:
            for boundary in spec.vertical_rules:
                rule_x = col_starts[boundary]
                self.canvas.draw_line((rule_x, top), (rule_x, bottom), 1, self.palette.header_text)
        return bottom

    def _cell_style(self, spec: TableSpec, cell: Cell) -> TextStyle:
        return TextStyle(
            FontRole.BOLD if cell.bold else FontRole.REGULAR,
            cell.size or spec.font_size,
            cell.color or self.palette.text,
        )

    def _draw_standard_row(
        self,
        spec: TableSpec,
        row: StandardRow,
        y_top: float,
        height: float,
        col_widths: List[float],
        col_starts: List[float],
    ) -> List[str]:
        texts = []
        for cell, col_x, col_w in zip(row.cells, col_starts, col_widths):
            style = self._cell_style(spec, cell)
            text = truncate_text(cell.text, col_w, style, self.canvas, self.truncation, spec.text_inset)
            text_y = self._baseline(y_top, height, style.size)
            self.canvas.draw_text(text, col_x + spec.text_inset, text_y, style)
            texts.append(text)
        return texts

    def _draw_expanded_row(
        self,
        spec: TableSpec,
        row: ExpandedRow,
        y_top: float,
        height: float,
        col_widths: List[float],
        col_starts: List[float],
    ) -> List[str]:
        style = TextStyle(FontRole.REGULAR, spec.font_size, self.palette.text)
        text_y = self._baseline(y_top, height, spec.font_size)
        self.canvas.draw_text(row.number, col_starts[0] + spec.text_inset, text_y, style)
        label = truncate_text(row.label, col_widths[1], style, self.canvas, self.truncation, spec.text_inset)
        self.canvas.draw_text(label, col_starts[1] + spec.text_inset, text_y, style)

        # Sub-fields two per line across the value columns
        sub_style = TextStyle(FontRole.REGULAR, spec.sub_font_size, self.palette.text)
        value_start = col_starts[2] + spec.text_inset
        half_width = sum(col_widths[2:]) / 2
        sub_y = y_top - SUB_LINE_HEIGHT

        texts = [row.number, label]
        for i in range(0, len(row.sub_fields), 2):
            for offset, (sub_label, sub_value) in enumerate(row.sub_fields[i:i + 2]):
                sub_text = truncate_text(
                    f"{sub_label}: {sub_value}", half_width - spec.text_inset, sub_style,
                    self.canvas, self.truncation,
                )
                self.canvas.draw_text(sub_text, value_start + offset * half_width, sub_y, sub_style)
                texts.append(sub_text)
            sub_y -= SUB_LINE_HEIGHT
        return texts

    def _draw_total_row(
        self,
        spec: TableSpec,
        row: TotalRow,
        x: float,
        y_top: float,
        width: float,
        height: float,
        col_starts: List[float],
    ) -> List[str]:
        self.canvas.draw_rect(x, y_top - height, width, height, fill_color=self.palette.total_fill)
        size = spec.font_size + 1
        text_y = self._baseline(y_top, height, size)
        self.canvas.draw_text(
            row.label, col_starts[row.label_column] + spec.text_inset, text_y,
            TextStyle(FontRole.BOLD, size, row.label_color or self.palette.text),
        )
        self.canvas.draw_text(
            row.value, col_starts[row.value_column] + spec.text_inset, text_y,
            TextStyle(FontRole.BOLD, size, row.value_color or self.palette.text),
        )
        return [row.label, row.value]
