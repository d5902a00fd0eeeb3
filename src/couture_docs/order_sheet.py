"""Custom-order sheet (FICHE DE COMMANDE SUR-MESURE)."""

from typing import Dict, List, Optional

from .formatting import format_currency, format_date, group_thousands
from .layout import Cursor
from .logger import get_logger
from .models import CustomOrderRecord
from .sanitize import safe_text
from .sections import DateCard, InfoField, SectionComposer, SummaryLine
from .table_renderer import RenderedTable, TableRenderer
from .tables import Cell, Row, StandardRow, TableSpec, TotalRow, get_items_table, get_payments_table

LOGGER = get_logger(__name__)

TITLE = "FICHE DE COMMANDE SUR-MESURE"
NOTES_MAX_CHARS = 100
NOTES_BOX_HEIGHT = 45
CONTENT_FLOOR = 55

SUMMARY_BOX_HEIGHT = 100
# Gap above the summary heading, heading gap, then the box
SUMMARY_BLOCK_HEIGHT = 10 + 5 + SUMMARY_BOX_HEIGHT

STATUS_LABELS = {
    "PENDING": "En attente",
    "IN_PRODUCTION": "En production",
    "FITTING": "Essayage",
    "ALTERATIONS": "Retouches",
    "READY": "Pret",
    "DELIVERED": "Livre",
    "CANCELLED": "Annule",
}

ITEM_STATUS_LABELS = {
    "PENDING": "En attente",
    "CUTTING": "Coupe",
    "SEWING": "Couture",
    "FITTING": "Essayage",
    "ALTERATIONS": "Retouches",
    "FINISHING": "Finitions",
    "COMPLETED": "Termine",
    "DELIVERED": "Livre",
}

PRIORITY_LABELS = {
    "NORMAL": "Normal",
    "URGENT": "Urgent",
    "VIP": "VIP",
}

PAYMENT_TYPE_LABELS = {
    "DEPOSIT": "Avance",
    "INSTALLMENT": "Acompte",
    "FINAL": "Solde",
}


def item_rows(order: CustomOrderRecord, muted=None) -> List[Row]:
    rows: List[Row] = []
    for index, item in enumerate(order.items, start=1):
        rows.append(StandardRow([
            Cell(str(index)),
            Cell(safe_text(item.display_type)),
            Cell(str(item.quantity)),
            Cell(f"{group_thousands(item.line_total)} F"),
            Cell(ITEM_STATUS_LABELS.get(item.status, safe_text(item.status))),
            Cell(safe_text(item.tailor, "Non assigne"), color=None if item.tailor else muted),
        ]))
    return rows


def payment_rows(order: CustomOrderRecord, currency: str, success=None, muted=None) -> List[Row]:
    """Payment ledger rows followed by the TOTAL PAYE row."""
    rows: List[Row] = []
    for index, payment in enumerate(order.payments, start=1):
        rows.append(StandardRow([
            Cell(str(index)),
            Cell(format_date(payment.paid_at)),
            Cell(format_currency(payment.amount, currency), bold=True, color=success),
            Cell(safe_text(payment.payment_method, "-")),
            Cell(PAYMENT_TYPE_LABELS.get(payment.payment_type, safe_text(payment.payment_type))),
            Cell(safe_text(payment.notes, "-"), color=muted),
        ]))
    rows.append(TotalRow(
        "TOTAL PAYE:", format_currency(order.total_paid, currency),
        label_column=1, value_column=2, value_color=success,
    ))
    return rows


def fit_payment_rows(rows: List[Row], spec: TableSpec, available: float) -> List[Row]:
    """
    Keep the payments that fit in available height, always ending with the
    total row. Returns no rows when not even the header and total fit.
    """
    room = available - spec.header_height - (spec.row_height + 2)
    if room < 0:
        return []
    payments, total = rows[:-1], rows[-1]
    return payments[:int(room // spec.row_height)] + [total]


class CustomOrderSheet:
    """Section sequence for one custom order."""

    name = "order"

    def __init__(self, order: CustomOrderRecord):
        self.order = order
        self.notes_lines: List[str] = []

    def _status_color(self, palette):
        return {"DELIVERED": palette.success, "CANCELLED": palette.danger}.get(self.order.status)

    def _priority_color(self, palette):
        return {"VIP": palette.danger, "URGENT": palette.warning}.get(self.order.priority)

    def summary_lines(self, palette, currency: str) -> List[SummaryLine]:
        order = self.order
        balance_color = palette.warning if order.balance > 0 else palette.success
        return [
            SummaryLine("Cout tenues:", format_currency(order.total_cost, currency)),
            SummaryLine("Cout materiel:", format_currency(order.material_cost, currency)),
            SummaryLine("TOTAL:", format_currency(order.grand_total, currency), emphasized=True, rule_above=True),
            SummaryLine("Paye:", format_currency(order.total_paid, currency), color=palette.success),
            SummaryLine("RELIQUAT:", format_currency(order.balance, currency), emphasized=True, color=balance_color),
        ]

    def compose(
        self,
        composer: SectionComposer,
        tables: TableRenderer,
        generated_on: Optional[str] = None,
    ) -> Dict[str, RenderedTable]:
        order = self.order
        customer = order.customer
        palette = composer.palette
        currency = composer.config.currency
        rendered: Dict[str, RenderedTable] = {}

        composer.draw_watermark()
        cursor = composer.draw_title_banner(Cursor(composer.layout.top_y), TITLE)

        header = cursor.down(10)
        composer.draw_logo(header)
        composer.draw_info_panel(header, [
            InfoField("N Commande:", safe_text(order.order_number)),
            InfoField("Statut:", STATUS_LABELS.get(order.status, safe_text(order.status)),
                      self._status_color(palette)),
            InfoField("Priorite:", PRIORITY_LABELS.get(order.priority, safe_text(order.priority)),
                      self._priority_color(palette)),
        ])

        cursor = composer.draw_field_grid(
            header.down(55),
            [
                [InfoField("Nom", safe_text(customer.name, "-")), InfoField("Tel", safe_text(customer.phone))],
                [InfoField("Email", safe_text(customer.email)), InfoField("WhatsApp", safe_text(customer.whatsapp))],
                [InfoField("Ville", safe_text(customer.location))],
            ],
            height=70,
            heading="INFORMATIONS CLIENT",
        )

        cursor = composer.draw_section_heading(cursor.down(20), "DATES IMPORTANTES")
        cards = [
            DateCard("Date commande", format_date(order.order_date)),
            DateCard("Date de retrait", format_date(order.pickup_date), palette.warning),
        ]
        if order.customer_deadline:
            cards.append(DateCard("Deadline client", format_date(order.customer_deadline), palette.danger))
        cursor = composer.draw_date_cards(cursor, cards)

        cursor = composer.draw_section_heading(cursor.down(25), "ARTICLES")
        # The financial summary must stay on the page below the items
        rendered["items"], cursor = tables.render_table(
            cursor, get_items_table(), item_rows(order, palette.muted),
            floor=CONTENT_FLOOR + SUMMARY_BLOCK_HEIGHT,
        )

        cursor = composer.draw_section_heading(cursor.down(10), "RESUME FINANCIER")
        cursor = composer.draw_summary_box(
            cursor, self.summary_lines(palette, currency), height=SUMMARY_BOX_HEIGHT,
        )

        cursor = cursor.down(20)
        if order.payments:
            spec = get_payments_table()
            rows = fit_payment_rows(
                payment_rows(order, currency, palette.success, palette.muted),
                spec, cursor.y - 5 - CONTENT_FLOOR,
            )
            if not rows:
                LOGGER.warning("No room left for the payments of order %s", order.order_number)
            else:
                if len(rows) - 1 < len(order.payments):
                    LOGGER.warning(
                        "Order %s: showing %d of %d payments",
                        order.order_number, len(rows) - 1, len(order.payments),
                    )
                cursor = composer.draw_section_heading(cursor, "HISTORIQUE DES PAIEMENTS")
                rendered["payments"], cursor = tables.render_table(cursor, spec, rows, floor=CONTENT_FLOOR)
                cursor = cursor.down(15)

        if order.notes:
            if cursor.y - 5 - NOTES_BOX_HEIGHT < CONTENT_FLOOR:
                LOGGER.warning("No room left for the notes of order %s", order.order_number)
            else:
                cursor = composer.draw_label(cursor, "NOTES:", gap=5)
                self.notes_lines, cursor = composer.draw_notes_box(
                    cursor, order.notes, NOTES_MAX_CHARS, NOTES_BOX_HEIGHT,
                )

        attribution = f"Fiche creee par: {order.created_by}" if order.created_by else None
        composer.draw_footer(composer.config.contact_lines, attribution, generated_on)
        return rendered
