from __future__ import annotations

import unittest

from vispaint.positioning import Anchor, HorizontalAlignment, VerticalAlignment
from vispaint.primitives import Rect, Vec2d
from vispaint.raster.draw_text import MultiLineText, SingleLineText, TextExtent


def _line(text: str, width: float, height: float = 10.0, bearing_x: float = 0.0, bearing_y: float = -8.0) -> SingleLineText:
    return SingleLineText(text, TextExtent(width, height, bearing_x, bearing_y))


class SingleLineTextTests(unittest.TestCase):
    def test_center_alignment(self) -> None:
        line = _line("abc", 30.0, bearing_x=1.0)
        reference = line.align(Vec2d(50.0, 50.0), Anchor.CENTER)
        self.assertEqual(reference, Vec2d(34.0, 53.0))
        self.assertEqual(line.bounding_box(), Rect(50.0, 50.0, 30.0, 10.0))

    def test_corner_alignments(self) -> None:
        line = _line("abc", 30.0)
        self.assertEqual(line.align((0.0, 0.0), "top-left"), Vec2d(0.0, 8.0))
        self.assertEqual(line.align((0.0, 0.0), "bottom-right"), Vec2d(-30.0, -2.0))

    def test_padded_bounding_box(self) -> None:
        line = _line("abc", 30.0)
        line.align((0.0, 0.0), Anchor.TOP_LEFT)
        box = line.bounding_box(Vec2d(2.0, 3.0))
        self.assertEqual(box.size, Vec2d(34.0, 16.0))


class MultiLineTextTests(unittest.TestCase):
    def test_block_height_uses_line_spacing(self) -> None:
        block = MultiLineText([_line("first", 30.0), _line("second", 20.0)], line_spacing=1.5)
        self.assertEqual(block.height, 25.0)
        self.assertEqual(block.width, 30.0)

    def test_empty_block(self) -> None:
        block = MultiLineText([])
        self.assertEqual((block.width, block.height), (0.0, 0.0))

    def test_left_aligned_lines_inside_padding(self) -> None:
        block = MultiLineText([_line("first", 30.0), _line("second", 20.0)], line_spacing=1.5)
        block.align(Vec2d(100.0, 100.0), Anchor.TOP_LEFT, padding=Vec2d(5.0, 5.0))
        self.assertEqual(block.size, Vec2d(40.0, 35.0))
        self.assertEqual(block.top_left, Vec2d(100.0, 100.0))
        self.assertEqual(block.lines[0].reference_point, Vec2d(105.0, 113.0))
        self.assertEqual(block.lines[1].reference_point, Vec2d(105.0, 128.0))
        self.assertEqual(block.bounding_box(), Rect(120.0, 117.5, 40.0, 35.0))

    def test_right_aligned_lines_and_fixed_size(self) -> None:
        block = MultiLineText(
            [_line("first", 30.0), _line("second", 20.0)],
            line_spacing=1.0,
            halign=HorizontalAlignment.RIGHT,
        )
        block.align(Vec2d(0.0, 0.0), Anchor.BOTTOM_RIGHT, padding=Vec2d(4.0, 0.0), fixed_size=Vec2d(100.0, 60.0))
        self.assertEqual(block.size, Vec2d(100.0, 60.0))
        self.assertEqual(block.top_left, Vec2d(-100.0, -60.0))
        self.assertEqual(block.lines[0].reference_point.x, -4.0 - 30.0)
        self.assertEqual(block.lines[1].reference_point.x, -4.0 - 20.0)
        self.assertEqual(block.lines[0].reference_point.y, -60.0 + 20.0 + 10.0 - 10.0 + 8.0)

    def test_vertical_alignment_inside_fixed_size(self) -> None:
        tops = {}
        for valign in VerticalAlignment:
            block = MultiLineText([_line("first", 30.0), _line("second", 20.0)], line_spacing=1.0, valign=valign)
            block.align(Vec2d(0.0, 0.0), Anchor.TOP_LEFT, padding=Vec2d(4.0, 6.0), fixed_size=Vec2d(100.0, 60.0))
            tops[valign] = block.lines[0].reference_point.y
        self.assertEqual(tops[VerticalAlignment.TOP], 6.0 + 10.0 - 2.0)
        self.assertEqual(tops[VerticalAlignment.CENTER], 20.0 + 10.0 - 2.0)
        self.assertEqual(tops[VerticalAlignment.BOTTOM], 34.0 + 10.0 - 2.0)


if __name__ == "__main__":
    unittest.main()
