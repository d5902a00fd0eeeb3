"""Page geometry, the vertical cursor and table sizing rules."""

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

# Page dimensions (A4 in points)
A4_SIZE = (595.28, 841.89)
DEFAULT_MARGIN = 40
TITLE_TOP_OFFSET = 25

# Expanded table rows: sub-fields laid out two per line
SUB_LINE_HEIGHT = 10
EXPANDED_ROW_PADDING = 10

# Average Helvetica glyph width as a fraction of the font size
AVERAGE_GLYPH_RATIO = 0.5


@dataclass
class PageLayout:
    """Defines the layout parameters for a page."""
    page_width: float = A4_SIZE[0]
    page_height: float = A4_SIZE[1]
    margin: float = DEFAULT_MARGIN
    top_offset: float = TITLE_TOP_OFFSET

    @classmethod
    def a4(cls) -> "PageLayout":
        """Create the portrait A4 layout used by every sheet."""
        return cls(page_width=A4_SIZE[0], page_height=A4_SIZE[1])

    @property
    def pagesize(self):
        return (self.page_width, self.page_height)

    @property
    def content_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def content_start_x(self) -> float:
        return self.margin

    @property
    def content_end_x(self) -> float:
        return self.page_width - self.margin

    @property
    def top_y(self) -> float:
        """Top of the title band (PDF coordinates start at bottom)."""
        return self.page_height - self.top_offset


@dataclass(frozen=True)
class Cursor:
    """Vertical drawing position. Only ever moves down the page."""
    y: float

    def down(self, dy: float) -> "Cursor":
        if dy < 0:
            raise ValueError(f"cursor cannot move up (dy={dy})")
        return Cursor(self.y - dy)

    def to(self, y: float) -> "Cursor":
        """Jump to an absolute position at or below the current one."""
        return self.down(self.y - y)


def expanded_row_height(
    sub_field_count: int,
    sub_line_height: float = SUB_LINE_HEIGHT,
    base_padding: float = EXPANDED_ROW_PADDING,
) -> float:
    """Height of a row holding sub_field_count sub-fields, two per line."""
    lines = math.ceil(sub_field_count / 2)
    return lines * sub_line_height + base_padding


def fit_column_widths(widths: Sequence[Optional[float]], total_width: float) -> List[float]:
    """
    Resolve column widths against the table width.

    At most one width may be None; it takes whatever the fixed columns leave.
    Without a fill column the fixed widths must already add up to total_width.
    """
    fill_indexes = [i for i, w in enumerate(widths) if w is None]
    if len(fill_indexes) > 1:
        raise ValueError("only one column can fill the remaining width")

    fixed = sum(w for w in widths if w is not None)
    if fill_indexes:
        remainder = total_width - fixed
        if remainder <= 0:
            raise ValueError(
                f"fixed columns ({fixed}pt) leave no room in a {total_width}pt table"
            )
        resolved = [remainder if w is None else float(w) for w in widths]
    else:
        if not math.isclose(fixed, total_width, abs_tol=0.01):
            raise ValueError(f"column widths sum to {fixed}pt, table is {total_width}pt")
        resolved = [float(w) for w in widths]
    return resolved


def char_budget(width: float, font_size: float, inset: float = 0.0) -> int:
    """Characters that fit in a cell, assuming an average glyph width."""
    usable = max(0.0, width - 2 * inset)
    return int(usable // (font_size * AVERAGE_GLYPH_RATIO))
