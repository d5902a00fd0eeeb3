"""Test cases for currency, date and measurement formatting."""

import unittest
from datetime import date, datetime

from couture_docs.formatting import (
    format_currency, format_date, format_datetime, format_measurement, group_thousands, to_date,
)


class CurrencyTest(unittest.TestCase):

    def test_grouping(self):
        self.assertEqual(format_currency(1234567), "1 234 567 FCFA")
        self.assertEqual(format_currency(0), "0 FCFA")
        self.assertEqual(format_currency(999), "999 FCFA")
        self.assertEqual(format_currency(1000), "1 000 FCFA")

    def test_negative_amount(self):
        self.assertEqual(format_currency(-25000), "-25 000 FCFA")

    def test_no_decimals(self):
        self.assertEqual(format_currency(1500.4), "1 500 FCFA")

    def test_custom_suffix(self):
        self.assertEqual(format_currency(45000, "F"), "45 000 F")
        self.assertEqual(group_thousands(45000), "45 000")


class DateFormattingTest(unittest.TestCase):

    def test_format_date(self):
        self.assertEqual(format_date(date(2024, 3, 5)), "05/03/2024")
        self.assertEqual(format_date(datetime(2024, 12, 31, 18, 30)), "31/12/2024")
        self.assertEqual(format_date("2024-03-05"), "05/03/2024")
        self.assertEqual(format_date(None), "")
        self.assertEqual(format_date(""), "")

    def test_iso_with_zulu_suffix(self):
        self.assertEqual(to_date("2024-03-05T10:00:00Z"), date(2024, 3, 5))

    def test_format_datetime(self):
        self.assertEqual(format_datetime(datetime(2024, 3, 5, 9, 7)), "05/03/2024 a 09:07")
        self.assertEqual(format_datetime(None), "")


class MeasurementFormattingTest(unittest.TestCase):

    def test_unit_appended_to_plain_numbers(self):
        self.assertEqual(format_measurement("87", "cm"), "87 cm")
        self.assertEqual(format_measurement(42, "inches"), "42 inches")
        self.assertEqual(format_measurement("87.5", "cm"), "87.5 cm")

    def test_compound_values_keep_their_text(self):
        self.assertEqual(format_measurement("50 - 45", "cm"), "50 - 45 cm")
        self.assertEqual(format_measurement("87-2", "cm"), "87-2 cm")

    def test_existing_unit_not_repeated(self):
        self.assertEqual(format_measurement("90 cm", "cm"), "90 cm")
        self.assertEqual(format_measurement("35 inches", "cm"), "35 inches")

    def test_non_numeric_values_unchanged(self):
        self.assertEqual(format_measurement("ample", "cm"), "ample")

    def test_missing_value(self):
        self.assertEqual(format_measurement(None, "cm"), "")
        self.assertEqual(format_measurement("", "cm"), "")


if __name__ == "__main__":
    unittest.main()
