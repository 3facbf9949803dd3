from __future__ import annotations

import os
from pathlib import Path
import tempfile
import unittest
from unittest import mock

from vispaint.colors import Color
from vispaint.config import FONT_FAMILY_ENV_VAR, default_font_family, load_style_presets
from vispaint.styles import ArrowStyle, BoundingBox2DStyle, LineCap, LineStyle, MarkerStyle, TextStyle

PRESETS = """
[highlight]
kind = "line"
width = 4
color = "crimson!80"
dash_pattern = [10, 5]
cap = "round"

[pointer]
kind = "arrow"
tip_length = 0.25
double_headed = true
line = { width = 3, color = "navy-blue" }

[caption]
kind = "text"
size = 12
family = "sans-serif"
bold = true

[dots]
kind = "marker"
marker = "d"
filled = true

[detection]
kind = "bbox"
box_fill_color = "same!30"
label_position = "bottom"
line_style = { width = 1, color = "#00ff00" }
text_style = { size = 10 }
"""


class StylePresetTests(unittest.TestCase):
    def _write(self, root: str, text: str) -> Path:
        path = Path(root) / "styles.toml"
        path.write_text(text, encoding="utf-8")
        return path

    def test_load_all_kinds(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            presets = load_style_presets(self._write(tmp, PRESETS))
        self.assertEqual(set(presets), {"highlight", "pointer", "caption", "dots", "detection"})

        line = presets["highlight"]
        self.assertIsInstance(line, LineStyle)
        self.assertEqual(line.color, Color.from_string("crimson", 0.8))
        self.assertEqual(line.dash_pattern, (10.0, 5.0))
        self.assertEqual(line.cap, LineCap.ROUND)

        arrow = presets["pointer"]
        self.assertIsInstance(arrow, ArrowStyle)
        self.assertTrue(arrow.double_headed)
        self.assertEqual(arrow.line.width, 3.0)

        self.assertIsInstance(presets["caption"], TextStyle)
        self.assertTrue(presets["caption"].bold)
        self.assertTrue(presets["dots"].is_filled())
        self.assertIsInstance(presets["dots"], MarkerStyle)

        bbox = presets["detection"]
        self.assertIsInstance(bbox, BoundingBox2DStyle)
        self.assertEqual(bbox.resolved_box_fill_color(), Color(0.0, 1.0, 0.0, 0.3))
        self.assertEqual(bbox.text_style.size, 10)

    def test_missing_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(FileNotFoundError):
                load_style_presets(Path(tmp) / "missing.toml")

    def test_unknown_kind_is_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = self._write(tmp, '[odd]\nkind = "sparkle"\n')
            with self.assertRaises(ValueError):
                load_style_presets(path)

    def test_unknown_field_is_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = self._write(tmp, '[odd]\nkind = "line"\nthickness = 3\n')
            with self.assertRaises(ValueError):
                load_style_presets(path)


class FontFamilyTests(unittest.TestCase):
    def test_env_override(self) -> None:
        with mock.patch.dict(os.environ, {FONT_FAMILY_ENV_VAR: "DejaVu Sans"}):
            self.assertEqual(default_font_family(), "DejaVu Sans")

    def test_blank_env_falls_back(self) -> None:
        with mock.patch.dict(os.environ, {FONT_FAMILY_ENV_VAR: "  "}):
            self.assertEqual(default_font_family(), "monospace")


if __name__ == "__main__":
    unittest.main()
