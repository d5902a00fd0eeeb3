"""Table columns, row variants and the table templates used by each sheet."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple, Union

from reportlab.lib.colors import Color

from .layout import fit_column_widths


class RowKind(Enum):
    """Row variants a table can hold."""
    HEADER = "HEADER"
    STANDARD = "STANDARD"
    EXPANDED = "EXPANDED"
    TOTAL = "TOTAL"


@dataclass
class TableColumn:
    """A column label and its width in points (None fills the remainder)."""
    name: str
    width: Optional[float] = None


@dataclass
class Cell:
    """Cell text plus optional emphasis."""
    text: str
    bold: bool = False
    color: Optional[Color] = None
    size: Optional[float] = None


@dataclass
class StandardRow:
    """One line of cells, one per column."""
    cells: List[Cell]


@dataclass
class ExpandedRow:
    """
    Number and label cells plus label/value sub-fields.

    Sub-fields are drawn two per line across the columns after the label.
    """
    number: str
    label: str
    sub_fields: List[Tuple[str, str]]


@dataclass
class TotalRow:
    """Closing row for ledgers; drawn with its own fill, not counted as data."""
    label: str
    value: str
    label_column: int = 1
    value_column: int = 2
    label_color: Optional[Color] = None
    value_color: Optional[Color] = None


Row = Union[StandardRow, ExpandedRow, TotalRow]


@dataclass
class TableSpec:
    """Geometry and typography for one table."""
    columns: List[TableColumn]
    header_height: float = 20.0
    row_height: float = 16.0
    font_size: float = 8.0
    header_font_size: float = 8.0
    sub_font_size: float = 7.0
    text_inset: float = 5.0
    # Shade rows whose 1-based running index is odd (True) or even (False)
    shade_odd_rows: bool = False
    # Indexes of column boundaries that get a vertical rule
    vertical_rules: List[int] = field(default_factory=list)
    header_rules: bool = False

    @property
    def headers(self) -> List[str]:
        return [col.name for col in self.columns]

    def column_widths(self, total_width: float) -> List[float]:
        return fit_column_widths([col.width for col in self.columns], total_width)


def text_cells(values: Sequence[str], **emphasis) -> List[Cell]:
    return [Cell(value, **emphasis) for value in values]


def get_measurement_table() -> TableSpec:
    """N / PARTIES CONCERNEES / MESURES."""
    return TableSpec(
        columns=[
            TableColumn("N", 30),
            TableColumn("PARTIES CONCERNEES", 200),
            TableColumn("MESURES", None),
        ],
        header_height=20,
        row_height=16,
        font_size=8,
        header_font_size=9,
        shade_odd_rows=False,
        vertical_rules=[1, 2],
        header_rules=True,
    )


def get_items_table() -> TableSpec:
    """Garment line items of a custom order."""
    return TableSpec(
        columns=[
            TableColumn("N", 25),
            TableColumn("TYPE", 150),
            TableColumn("QTE", 40),
            TableColumn("PRIX", 80),
            TableColumn("STATUT", 80),
            TableColumn("COUTURIER", None),
        ],
        header_height=20,
        row_height=18,
        font_size=8,
        header_font_size=8,
        shade_odd_rows=True,
    )


def get_payments_table() -> TableSpec:
    """Payment ledger of a custom order."""
    return TableSpec(
        columns=[
            TableColumn("N", 25),
            TableColumn("DATE", 80),
            TableColumn("MONTANT", 100),
            TableColumn("MODE", 100),
            TableColumn("TYPE", 80),
            TableColumn("NOTES", None),
        ],
        header_height=18,
        row_height=14,
        font_size=7,
        header_font_size=7,
        shade_odd_rows=True,
    )


def get_materials_table() -> TableSpec:
    """Material needs of a production-tracking sheet."""
    return TableSpec(
        columns=[
            TableColumn("N", 30),
            TableColumn("Nom du materiel", 160),
            TableColumn("Quantite", 65),
            TableColumn("Prix unitaire", 80),
            TableColumn("Prix total", 80),
            TableColumn("Observation", None),
        ],
        header_height=20,
        row_height=18,
        font_size=8,
        header_font_size=8,
        shade_odd_rows=True,
        vertical_rules=[1, 2, 3, 4, 5],
    )
