"""Test cases for RenderConfig validation and YAML loading."""

import tempfile
import unittest
from pathlib import Path

import yaml

from couture_docs.config import RenderConfig, load_config


class RenderConfigTest(unittest.TestCase):

    def test_defaults(self):
        config = RenderConfig()
        self.assertEqual(config.currency, "FCFA")
        self.assertEqual(config.notes_max_lines, 3)
        self.assertEqual(config.cell_truncation, "characters")
        self.assertEqual(config.overflow_policy, "truncate")
        self.assertEqual(config.asset_root, Path("public"))
        self.assertIsNone(config.regular_font_path)

    def test_invalid_values(self):
        with self.assertRaises(ValueError):
            RenderConfig(cell_truncation="ellipsis")
        with self.assertRaises(ValueError):
            RenderConfig(overflow_policy="paginate")
        with self.assertRaises(ValueError):
            RenderConfig(notes_max_lines=-1)
        with self.assertRaises(ValueError):
            RenderConfig(fetch_timeout=0)

    def test_load_default_without_path(self):
        self.assertEqual(load_config(None), RenderConfig())


class YamlConfigTest(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()

    def test_round_trip(self):
        config = RenderConfig(
            asset_root=Path("/srv/cechemoi/public"),
            regular_font_path=Path("/fonts/DejaVuSans.ttf"),
            cell_truncation="measured",
            notes_max_lines=5,
            invariant=True,
        )
        path = self.dir / "config.yaml"
        config.to_yaml(path)

        loaded = RenderConfig.from_yaml(path)
        self.assertEqual(loaded, config)
        self.assertIsInstance(loaded.asset_root, Path)
        self.assertIsNone(loaded.bold_font_path)

    def test_partial_file(self):
        path = self.dir / "config.yaml"
        path.write_text(yaml.safe_dump({"currency": "XOF", "asset_root": "static"}))

        config = load_config(path)
        self.assertEqual(config.currency, "XOF")
        self.assertEqual(config.asset_root, Path("static"))
        self.assertEqual(config.brand_name, "CECHEMOI")

    def test_empty_file(self):
        path = self.dir / "config.yaml"
        path.write_text("")
        self.assertEqual(load_config(path), RenderConfig())

    def test_invalid_value_in_file(self):
        path = self.dir / "config.yaml"
        path.write_text(yaml.safe_dump({"cell_truncation": "words"}))
        with self.assertRaises(ValueError):
            load_config(path)


if __name__ == "__main__":
    unittest.main()
