"""End-to-end test cases: each sheet rendered through the document builder."""

import io
import tempfile
import unittest
from datetime import date, datetime
from pathlib import Path
from unittest import mock

import numpy as np
import requests
from PIL import Image

from couture_docs.builder import (
    BuilderState, BuilderStateError, DocumentBuilder, FontEmbeddingError, render_custom_order_sheet,
)
from couture_docs.config import RenderConfig
from couture_docs.measurement_sheet import ROW_LAYOUT, MeasurementSheet
from couture_docs.models import (
    Customer, CustomOrderRecord, MaterialMovement, MeasurementRecord, OrderItem, Payment,
    ProductionSheetRecord, SleeveLengths,
)
from couture_docs.order_sheet import CONTENT_FLOOR, CustomOrderSheet, fit_payment_rows, payment_rows
from couture_docs.production_sheet import MIN_MATERIAL_ROWS, ProductionSheet
from couture_docs.samples import generate_measurement_record, make_faker
from couture_docs.styles import PALETTE
from couture_docs.tables import RowKind, get_payments_table

LONG_SENTENCE = "La cliente souhaite une robe longue en wax avec une ceinture assortie et des manches bouffantes."


def fixed_clock():
    return datetime(2024, 3, 20, 15, 0)


def write_logo(root: Path) -> None:
    buffer = io.BytesIO()
    Image.new("RGB", (32, 32), (230, 82, 0)).save(buffer, format="PNG")
    (root / "apple-touch-icon.png").write_bytes(buffer.getvalue())


def sample_customer(photo=None) -> Customer:
    return Customer(
        name="Awa Kone",
        phone="0759000000",
        email="awa@example.com",
        city="Abidjan",
        country="Cote d'Ivoire",
        date_of_birth=date(1990, 6, 1),
        referral_source="Instagram",
        photo=photo,
    )


def sample_order(**overrides) -> CustomOrderRecord:
    values = dict(
        order_number="CMD-202403-0042",
        customer=sample_customer(),
        status="IN_PRODUCTION",
        priority="URGENT",
        order_date=date(2024, 3, 1),
        pickup_date=date(2024, 3, 20),
        items=[
            OrderItem("Robe", 1, 25000, "SEWING", custom_type="Wax", tailor="Moussa"),
            OrderItem("Chemise", 2, 5000, "CUTTING"),
            OrderItem("Jupe", 1, 10000, "PENDING", tailor="Fatou"),
        ],
        payments=[
            Payment(20000, "DEPOSIT", "Wave", date(2024, 3, 1)),
            Payment(10000, "INSTALLMENT", "Especes", date(2024, 3, 10)),
        ],
        total_cost=45000,
        material_cost=5000,
        created_by="Mariam",
    )
    values.update(overrides)
    return CustomOrderRecord(**values)


class BuilderTestCase(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.root = Path(self.tmp.name)
        write_logo(self.root)
        self.config = RenderConfig(asset_root=self.root, invariant=True)

    def tearDown(self):
        self.tmp.cleanup()

    def builder(self, config=None) -> DocumentBuilder:
        builder = DocumentBuilder(config or self.config, clock=fixed_clock)
        builder.canvas.draw_text = mock.Mock(wraps=builder.canvas.draw_text)
        return builder

    def drawn(self, builder):
        return [c.args[0] for c in builder.canvas.draw_text.call_args_list]

    def assertSinglePagePdf(self, data: bytes):
        self.assertTrue(data.startswith(b"%PDF"))
        self.assertIn(b"/Count 1", data)


class MeasurementSheetTest(BuilderTestCase):

    def test_empty_record_keeps_all_rows(self):
        builder = self.builder()
        data = builder.build(MeasurementSheet(Customer(name="Awa Kone"), MeasurementRecord()))

        self.assertSinglePagePdf(data)
        table = builder.rendered_tables["measurements"]
        self.assertEqual(len(table.data_rows), 22)
        self.assertEqual(table.dropped_rows, 0)
        self.assertEqual([r.texts[0] for r in table.data_rows], [str(n) for n in range(1, 23)])

        expanded = [r.index for r in table.data_rows if r.kind == RowKind.EXPANDED]
        self.assertEqual(expanded, [10, 15, 22])
        self.assertEqual(len(ROW_LAYOUT), 22)

    def test_full_record_has_same_row_count(self):
        rng = np.random.default_rng(11)
        record = generate_measurement_record(rng, make_faker(rng))
        builder = self.builder()
        builder.build(MeasurementSheet(sample_customer(), record))

        table = builder.rendered_tables["measurements"]
        self.assertEqual(len(table.data_rows), 22)
        self.assertEqual(table.dropped_rows, 0)
        self.assertTrue(all(r.texts[2].endswith("cm") for r in table.data_rows if r.kind == RowKind.STANDARD))

    def test_values_and_sub_fields_printed(self):
        record = MeasurementRecord(
            measured_on=date(2024, 3, 5),
            back="38",
            waist="50 - 45",
            sleeves=SleeveLengths(short_sleeve="22", long_sleeve="60"),
            taken_by="Mariam",
        )
        builder = self.builder()
        builder.build(MeasurementSheet(sample_customer(), record))

        rows = builder.rendered_tables["measurements"].data_rows
        self.assertEqual(rows[0].texts, ["1", "DOS", "38 cm"])
        self.assertEqual(rows[6].texts[2], "50 - 45 cm")
        self.assertIn("Manches courtes: 22", rows[9].texts)
        self.assertIn("Manches longues: 60", rows[9].texts)

        drawn = self.drawn(builder)
        self.assertIn("05/03/2024", drawn)
        self.assertIn("Mesures prises par: Mariam", drawn)
        self.assertIn("Genere le: 20/03/2024", drawn)

    def test_notes_capped_at_three_lines(self):
        record = MeasurementRecord(notes=" ".join([LONG_SENTENCE] * 10))
        sheet = MeasurementSheet(sample_customer(), record)
        data = self.builder().build(sheet)

        self.assertSinglePagePdf(data)
        self.assertEqual(len(sheet.notes_lines), 3)
        for line in sheet.notes_lines:
            self.assertLessEqual(len(line), 90)

    @mock.patch("couture_docs.assets.requests.get")
    def test_unreachable_photo_falls_back(self, get):
        get.side_effect = requests.ConnectionError("refused")
        builder = self.builder()
        customer = sample_customer(photo="https://cdn.example.com/awa.jpg")

        with self.assertLogs("couture_docs.assets", level="WARNING"):
            data = builder.build(MeasurementSheet(customer, MeasurementRecord()))

        self.assertSinglePagePdf(data)
        self.assertEqual([f.slot for f in builder.fallbacks], ["photo"])
        self.assertIn("PHOTO", self.drawn(builder))
        get.assert_called_once_with("https://cdn.example.com/awa.jpg", timeout=self.config.fetch_timeout)

    @mock.patch("couture_docs.assets.requests.get")
    def test_corrupt_photo_falls_back(self, get):
        buffer = io.BytesIO()
        Image.new("RGB", (20, 20), (40, 90, 160)).save(buffer, format="PNG")
        data = bytearray(buffer.getvalue())
        # Zero the IDAT chunk length so the pixel data is misread
        data[data.index(b"IDAT") - 1] = 0
        get.return_value = mock.Mock(content=bytes(data), status_code=200)

        builder = self.builder()
        customer = sample_customer(photo="https://cdn.example.com/p.png")
        with self.assertLogs("couture_docs.assets", level="WARNING"):
            pdf = builder.build(MeasurementSheet(customer, MeasurementRecord()))

        self.assertSinglePagePdf(pdf)
        self.assertEqual([f.slot for f in builder.fallbacks], ["photo"])
        self.assertIn("PHOTO", self.drawn(builder))

    def test_missing_logo_falls_back_to_brand_name(self):
        config = RenderConfig(asset_root=self.root / "empty", invariant=True)
        builder = self.builder(config)
        with self.assertLogs("couture_docs.assets", level="WARNING"):
            data = builder.build(MeasurementSheet(sample_customer(), MeasurementRecord()))

        self.assertSinglePagePdf(data)
        self.assertEqual([f.slot for f in builder.fallbacks], ["logo"])
        self.assertIn("CECHEMOI", self.drawn(builder))

    def test_accented_input_is_folded(self):
        builder = self.builder()
        customer = Customer(name="Ad" + chr(0x00e8) + "le Yao", referral_source="Bouche " + chr(0x00e0) + " oreille")
        builder.build(MeasurementSheet(customer, MeasurementRecord()))
        drawn = self.drawn(builder)
        self.assertIn("Adele Yao", drawn)
        self.assertIn("Bouche a oreille", drawn)


class CustomOrderSheetTest(BuilderTestCase):

    def test_items_payments_and_balance(self):
        builder = self.builder()
        data = builder.build(CustomOrderSheet(sample_order()))
        self.assertSinglePagePdf(data)

        items = builder.rendered_tables["items"]
        self.assertEqual(len(items.data_rows), 3)
        self.assertEqual(items.data_rows[0].texts[:4], ["1", "Robe (Wax)", "1", "25 000 F"])
        self.assertEqual(items.data_rows[1].texts[3], "10 000 F")
        self.assertEqual(items.data_rows[1].texts[5], "Non assigne")

        payments = builder.rendered_tables["payments"]
        self.assertEqual(len(payments.data_rows), 2)
        self.assertEqual(len(payments.total_rows), 1)
        self.assertEqual(payments.total_rows[0].texts, ["TOTAL PAYE:", "30 000 FCFA"])

        balance = next(
            c for c in builder.canvas.draw_text.call_args_list if c.args[0] == "20 000 FCFA"
        )
        self.assertIs(balance.args[3].color, PALETTE.warning)
        self.assertIn("RELIQUAT:", self.drawn(builder))
        self.assertIn("50 000 FCFA", self.drawn(builder))

    def test_settled_balance_is_success_coloured(self):
        order = sample_order(payments=[Payment(50000, "FINAL", "Wave", date(2024, 3, 18))])
        builder = self.builder()
        builder.build(CustomOrderSheet(order))

        zero = [c for c in builder.canvas.draw_text.call_args_list if c.args[0] == "0 FCFA"]
        self.assertEqual(len(zero), 1)
        self.assertIs(zero[0].args[3].color, PALETTE.success)

    def test_no_payments_skips_ledger(self):
        builder = self.builder()
        builder.build(CustomOrderSheet(sample_order(payments=[])))
        self.assertNotIn("payments", builder.rendered_tables)
        self.assertNotIn("HISTORIQUE DES PAIEMENTS", self.drawn(builder))

    def test_many_items_keep_summary_above_footer(self):
        items = [OrderItem("Robe", 1, 1000, "PENDING") for _ in range(30)]
        builder = self.builder()
        builder.canvas.draw_rect = mock.Mock(wraps=builder.canvas.draw_rect)
        with self.assertLogs("couture_docs", level="WARNING") as logs:
            data = builder.build(CustomOrderSheet(sample_order(items=items)))
        self.assertSinglePagePdf(data)

        self.assertGreater(builder.rendered_tables["items"].dropped_rows, 0)
        summary_box = next(
            c for c in builder.canvas.draw_rect.call_args_list if c.args[2:4] == (200, 100)
        )
        self.assertGreaterEqual(summary_box.args[1], CONTENT_FLOOR)
        self.assertIn("RELIQUAT:", self.drawn(builder))
        self.assertNotIn("payments", builder.rendered_tables)
        self.assertTrue(any("No room left for the payments" in line for line in logs.output))

    def test_long_payment_history_is_cut_before_footer(self):
        payments = [Payment(1000, "INSTALLMENT", "Wave", date(2024, 3, 1)) for _ in range(20)]
        builder = self.builder()
        with self.assertLogs("couture_docs.order_sheet", level="WARNING"):
            builder.build(CustomOrderSheet(sample_order(payments=payments)))

        table = builder.rendered_tables["payments"]
        self.assertLess(len(table.data_rows), 20)
        self.assertEqual(table.dropped_rows, 0)
        self.assertEqual(table.total_rows[0].texts, ["TOTAL PAYE:", "20 000 FCFA"])
        self.assertGreaterEqual(table.rows[-1].bbox[1], CONTENT_FLOOR)

    def test_fit_payment_rows(self):
        spec = get_payments_table()
        rows = payment_rows(sample_order(), "FCFA")
        self.assertEqual(fit_payment_rows(rows, spec, 500), rows)
        self.assertEqual(fit_payment_rows(rows, spec, spec.header_height), [])

        kept = fit_payment_rows(rows, spec, spec.header_height + spec.row_height + 2 + spec.row_height)
        self.assertEqual(len(kept), 2)
        self.assertIs(kept[-1], rows[-1])

    def test_deadline_card_only_when_set(self):
        builder = self.builder()
        builder.build(CustomOrderSheet(sample_order()))
        self.assertNotIn("Deadline client", self.drawn(builder))

        builder = self.builder()
        builder.build(CustomOrderSheet(sample_order(customer_deadline=date(2024, 4, 1))))
        self.assertIn("Deadline client", self.drawn(builder))
        self.assertIn("01/04/2024", self.drawn(builder))

    def test_status_labels(self):
        builder = self.builder()
        builder.build(CustomOrderSheet(sample_order()))
        drawn = self.drawn(builder)
        self.assertIn("En production", drawn)
        self.assertIn("Urgent", drawn)
        self.assertIn("Fiche creee par: Mariam", drawn)

    def test_convenience_function(self):
        data = render_custom_order_sheet(sample_order(), self.config)
        self.assertSinglePagePdf(data)


class ProductionSheetTest(BuilderTestCase):

    def record(self, movements) -> ProductionSheetRecord:
        return ProductionSheetRecord(
            order_number="CMD-202403-0042",
            customer=sample_customer(),
            order_date=date(2024, 3, 1),
            items=[OrderItem("Robe", tailor="Moussa"), OrderItem("Jupe", tailor="Moussa")],
            material_movements=movements,
            notes="Doublure en soie.",
            created_by="Mariam",
        )

    def test_blank_lines_pad_material_table(self):
        movements = [
            MaterialMovement("Tissu wax", "m", 3, 4000, 12000, created_at=datetime(2024, 3, 2, 9, 30)),
            MaterialMovement("Boutons", "pce", 12, 100, 1200, created_at=datetime(2024, 3, 1, 16, 0)),
        ]
        builder = self.builder()
        data = builder.build(ProductionSheet(self.record(movements)))
        self.assertSinglePagePdf(data)

        table = builder.rendered_tables["materials"]
        self.assertEqual(len(table.data_rows), MIN_MATERIAL_ROWS)
        self.assertEqual(table.data_rows[0].texts[:3], ["01", "Tissu wax", "3 m"])
        self.assertEqual(table.data_rows[7].texts, ["08"])
        blank_number = next(c for c in builder.canvas.draw_text.call_args_list if c.args[0] == "08")
        self.assertIs(blank_number.args[3].color, PALETTE.muted)
        self.assertEqual(table.total_rows[0].texts, ["TOTAL GENERAL", "13 200 FCFA"])

        drawn = self.drawn(builder)
        self.assertIn("01/03/2024 a 16:00", drawn)
        self.assertIn("Moussa", drawn)
        self.assertIn("Doublure en soie.", drawn)

    def test_more_materials_than_blank_lines(self):
        movements = [MaterialMovement(f"Perles {i}", "sachet", 1, 1000, 1000) for i in range(10)]
        builder = self.builder()
        builder.build(ProductionSheet(self.record(movements)))

        table = builder.rendered_tables["materials"]
        self.assertEqual(len(table.data_rows) + table.dropped_rows, 10)
        self.assertEqual(table.data_rows[-1].texts[0], f"{len(table.data_rows):02d}")

    def test_empty_total_when_no_material(self):
        builder = self.builder()
        builder.build(ProductionSheet(self.record([])))
        table = builder.rendered_tables["materials"]
        self.assertEqual(table.total_rows[0].texts, ["TOTAL GENERAL", ""])


class BuilderLifecycleTest(BuilderTestCase):

    def test_states(self):
        builder = self.builder()
        self.assertEqual(builder.state, BuilderState.INITIALIZED)
        builder.compose(CustomOrderSheet(sample_order()))
        self.assertEqual(builder.state, BuilderState.COMPOSING)
        builder.finalize()
        self.assertEqual(builder.state, BuilderState.FINALIZED)

    def test_finalized_builder_cannot_be_reused(self):
        builder = self.builder()
        builder.build(CustomOrderSheet(sample_order()))
        with self.assertRaises(BuilderStateError):
            builder.compose(CustomOrderSheet(sample_order()))
        with self.assertRaises(BuilderStateError):
            builder.finalize()

    def test_finalize_requires_compose(self):
        with self.assertRaises(BuilderStateError):
            self.builder().finalize()

    def test_failed_compose_abandons_document(self):
        sheet = mock.Mock()
        sheet.name = "broken"
        sheet.compose.side_effect = RuntimeError("boom")

        builder = self.builder()
        with self.assertRaises(RuntimeError):
            builder.compose(sheet)
        self.assertEqual(builder.state, BuilderState.FINALIZED)
        with self.assertRaises(BuilderStateError):
            builder.finalize()

    def test_missing_font_file(self):
        config = RenderConfig(asset_root=self.root, regular_font_path=self.root / "missing.ttf")
        with self.assertRaises(FontEmbeddingError):
            DocumentBuilder(config)

    def test_invalid_font_file(self):
        bad_font = self.root / "bad.ttf"
        bad_font.write_bytes(b"not a font file " * 16)
        config = RenderConfig(asset_root=self.root, bold_font_path=bad_font)
        with self.assertRaises(FontEmbeddingError):
            DocumentBuilder(config)

    def test_invariant_output_is_reproducible(self):
        config = RenderConfig(asset_root=self.root / "empty", invariant=True)
        with self.assertLogs("couture_docs.assets", level="WARNING"):
            first = self.builder(config).build(CustomOrderSheet(sample_order()))
            second = self.builder(config).build(CustomOrderSheet(sample_order()))
        self.assertEqual(first, second)


if __name__ == "__main__":
    unittest.main()
