"""Production-tracking sheet handed to the tailor (FICHE DE SUIVI CONFECTION)."""

from typing import Dict, List, Optional

from .formatting import format_currency, format_date, format_datetime
from .layout import Cursor
from .models import ProductionSheetRecord
from .sanitize import safe_text
from .sections import InfoField, SectionComposer
from .table_renderer import RenderedTable, TableRenderer
from .tables import Cell, Row, StandardRow, TotalRow, get_materials_table, text_cells

MIN_MATERIAL_ROWS = 8
# Keeps the hand-off, quality-control and visa blocks on the page
MATERIALS_FLOOR = 250
GARMENT_SUMMARY_CHARS = 40
APPOINTMENT_PLACEHOLDER = "......................................"

HANDOFF_HEADING = "Date et heure de la remise du materiel au couturier pour confection"
RETURN_HEADING = "Date et heure de la fin de la confection et depot de l'article par le couturier a l'assistante"


def material_rows(record: ProductionSheetRecord, currency: str, palette) -> List[Row]:
    """
    Material rows padded with blank numbered lines, then TOTAL GENERAL.

    The paper form always shows at least MIN_MATERIAL_ROWS lines to write on.
    """
    movements = record.material_movements
    rows: List[Row] = []
    for i in range(max(MIN_MATERIAL_ROWS, len(movements))):
        number = f"{i + 1:02d}"
        if i < len(movements):
            mov = movements[i]
            rows.append(StandardRow([
                Cell(number),
                Cell(safe_text(mov.material_name)),
                Cell(f"{mov.quantity:g} {safe_text(mov.unit)}".strip()),
                Cell(format_currency(mov.unit_price, currency), size=7),
                Cell(format_currency(mov.total_cost, currency), bold=True, size=7),
                Cell(safe_text(mov.notes), size=7, color=palette.muted),
            ]))
        else:
            rows.append(StandardRow(text_cells([number], color=palette.muted)))

    total = record.materials_total
    rows.append(TotalRow(
        "TOTAL GENERAL",
        format_currency(total, currency) if total > 0 else "",
        label_column=1,
        value_column=4,
        label_color=palette.table_header,
    ))
    return rows


class ProductionSheet:
    """Section sequence for one order's production follow-up."""

    name = "production"

    def __init__(self, record: ProductionSheetRecord):
        self.record = record
        self.comment_lines: List[str] = []

    def info_rows(self, palette) -> List[List[InfoField]]:
        record = self.record
        tailors = ", ".join(safe_text(t) for t in record.tailors)
        return [
            [
                InfoField("Fiche N", safe_text(record.order_number)),
                InfoField("Date du jour", format_date(record.order_date)),
            ],
            [
                InfoField("Type d'article", safe_text(record.garment_summary)[:GARMENT_SUMMARY_CHARS]),
                InfoField("Nom du client", safe_text(record.customer.display_name)),
            ],
            [
                InfoField("Date du rdv client", APPOINTMENT_PLACEHOLDER, palette.divider),
                InfoField("Couturier", tailors or "Non assigne", None if tailors else palette.muted),
            ],
        ]

    def compose(
        self,
        composer: SectionComposer,
        tables: TableRenderer,
        generated_on: Optional[str] = None,
    ) -> Dict[str, RenderedTable]:
        record = self.record
        palette = composer.palette
        top = Cursor(composer.layout.top_y)

        composer.draw_watermark()
        composer.draw_logo(top, size=50)
        cursor = composer.draw_title_banner(top.down(10), "FICHE DE SUIVI CONFECTION CECHEMOI",
                                            font_size=13, height=24)

        cursor = composer.draw_field_grid(
            cursor.down(25), self.info_rows(palette), height=55,
            bold_labels=True, column_divider=True, line_step=14,
        )

        cursor = composer.draw_centered_heading(cursor.down(20), "Besoin en materiels")
        table, cursor = tables.render_table(
            cursor, get_materials_table(),
            material_rows(record, composer.config.currency, palette),
            floor=MATERIALS_FLOOR,
        )

        cursor = composer.draw_marker_heading(cursor.down(20), HANDOFF_HEADING)
        cursor = composer.draw_day_field(cursor, format_datetime(record.first_handoff))
        cursor = composer.draw_marker_heading(cursor, RETURN_HEADING)
        cursor = composer.draw_day_field(cursor, "", gap=25)

        cursor = composer.draw_centered_heading(cursor, "Controle qualite", gap=20)
        cursor = composer.draw_checkbox_row(
            cursor, "TENUE REUSSIE :",
            [("OUI", 120), ("NON", composer.layout.content_width - 80)],
            option_size=10,
        )
        cursor = composer.draw_checkbox_row(
            cursor, "FINITIONS:",
            [("PARFAITES", 85), ("ACCEPTABLES", 195), ("A CORRIGER", 315)],
            gap=30,
        )

        cursor = composer.draw_centered_heading(cursor, "Commentaires ou observations", gap=18)
        self.comment_lines, cursor = composer.draw_comment_lines(
            cursor, record.notes, count=composer.config.notes_max_lines,
        )

        composer.draw_signature_lines(cursor.down(10), "VISA ASSISTANTE", "VISA COUTURIER")

        attribution = f"Fiche creee par: {record.created_by}" if record.created_by else None
        composer.draw_footer(composer.config.legal_lines, attribution, generated_on, size=6)
        return {"materials": table}
