"""Customer measurement sheet (FICHE D'IDENTIFICATION CLIENT)."""

from typing import Dict, List, Optional, Tuple

from .formatting import format_date, format_measurement
from .layout import Cursor
from .models import STANDARD_MEASUREMENTS, Customer, MeasurementRecord
from .sanitize import safe_text
from .sections import SectionComposer
from .table_renderer import RenderedTable, TableRenderer
from .tables import Cell, ExpandedRow, Row, StandardRow, get_measurement_table

TITLE = "FICHE D'IDENTIFICATION CLIENT"
NOTES_HEADING = "AUTRES MESURES OU OBSERVATIONS:"
NOTES_MAX_CHARS = 90
NOTES_BOX_HEIGHT = 40
FOOTER_Y = 20
TABLE_FLOOR = 50

# Numbered slots of the measurement table: a standard measurement name, or
# one of the expanded sub-field groups
ROW_LAYOUT = [name for name, _ in STANDARD_MEASUREMENTS[:9]] + ["sleeves"] \
    + [name for name, _ in STANDARD_MEASUREMENTS[9:13]] + ["dress"] \
    + [name for name, _ in STANDARD_MEASUREMENTS[13:]] + ["skirt"]

GROUP_LABELS = {
    "sleeves": "LONGUEUR DES MANCHES",
    "dress": "LONGUEUR DES ROBES",
    "skirt": "LONGUEUR JUPE",
}

_STANDARD_LABELS = dict(STANDARD_MEASUREMENTS)


def measurement_rows(record: MeasurementRecord) -> List[Row]:
    """
    The 22 numbered rows of the sheet.

    Rows are always emitted, whether or not their values are filled in, so
    the paper form keeps the same shape for every customer.
    """
    unit = record.unit.value
    rows: List[Row] = []
    for number, name in enumerate(ROW_LAYOUT, start=1):
        if name in GROUP_LABELS:
            group = getattr(record, name)
            sub_fields: List[Tuple[str, str]] = [
                (label, safe_text(value)) for label, value in group.sub_fields()
            ]
            rows.append(ExpandedRow(str(number), GROUP_LABELS[name], sub_fields))
        else:
            rows.append(StandardRow([
                Cell(str(number)),
                Cell(_STANDARD_LABELS[name]),
                Cell(format_measurement(record.value_of(name), unit), bold=True),
            ]))
    return rows


def customer_lines(customer: Customer, record: MeasurementRecord) -> List[Tuple[str, str]]:
    return [
        ("DATE", format_date(record.measured_on)),
        ("NOM ET PRENOMS DU CLIENT", safe_text(customer.name)),
        ("DATE D'ANNIVERSAIRE", format_date(customer.date_of_birth)),
        ("EMAIL", safe_text(customer.email)),
        ("CONTACT(S)", safe_text(customer.phone)),
        ("NUMERO WHATSAPP", safe_text(customer.whatsapp or customer.phone)),
        ("PAR QUEL MOYEN AVEZ-VOUS CONNU CECHEMOI", safe_text(customer.referral_source)),
    ]


class MeasurementSheet:
    """Section sequence for one customer's measurements."""

    name = "measurements"

    def __init__(self, customer: Customer, record: MeasurementRecord):
        self.customer = customer
        self.record = record
        self.notes_lines: List[str] = []

    def compose(
        self,
        composer: SectionComposer,
        tables: TableRenderer,
        generated_on: Optional[str] = None,
    ) -> Dict[str, RenderedTable]:
        composer.draw_watermark(size=80)
        cursor = composer.draw_title_banner(Cursor(composer.layout.top_y), TITLE)

        # Logo and photo share the header band
        header = cursor.down(8)
        composer.draw_logo(header)
        cursor = composer.draw_photo_frame(header, self.customer.photo).down(8)

        lines = customer_lines(self.customer, self.record)
        for i, (label, value) in enumerate(lines):
            step = 19 if i == len(lines) - 1 else 14
            cursor = composer.draw_underlined_field(cursor, label, value, step=step)

        table, cursor = tables.render_table(
            cursor, get_measurement_table(), measurement_rows(self.record), floor=TABLE_FLOOR,
        )

        cursor = composer.draw_label(cursor.down(15), NOTES_HEADING)
        self.notes_lines, cursor = composer.draw_notes_box(
            cursor, self.record.notes, NOTES_MAX_CHARS, NOTES_BOX_HEIGHT,
        )

        attribution = None
        if self.record.taken_by:
            attribution = f"Mesures prises par: {self.record.taken_by}"
        composer.draw_footer(
            composer.config.contact_lines, attribution, generated_on, footer_y=FOOTER_Y,
        )
        return {"measurements": table}
