from __future__ import annotations

import math
import unittest

from vispaint.positioning import Anchor, HorizontalAlignment, LabelPosition, VerticalAlignment
from vispaint.primitives import (
    Ellipse,
    Rect,
    Vec2d,
    Vec2i,
    Vec3d,
    as_ellipse,
    as_rect,
    as_vec2d,
    project_point_onto_line,
)


class VectorTests(unittest.TestCase):
    def test_vec2d_arithmetic(self) -> None:
        a = Vec2d(1.0, 2.0)
        b = Vec2d(3.0, -1.0)
        self.assertEqual(a + b, Vec2d(4.0, 1.0))
        self.assertEqual(a - 1.0, Vec2d(0.0, 1.0))
        self.assertEqual(2.0 * a, Vec2d(2.0, 4.0))
        self.assertEqual(b / 2.0, Vec2d(1.5, -0.5))
        self.assertEqual(-a, (-1.0, -2.0))
        self.assertEqual(a.dot(b), 1.0)
        self.assertEqual(a.cross(b), -7.0)

    def test_vec2d_lengths(self) -> None:
        self.assertEqual(Vec2d(3.0, 4.0).length(), 5.0)
        self.assertEqual(Vec2d(1.0, 1.0).distance((4.0, 5.0)), 5.0)
        self.assertEqual(Vec2d(0.0, 2.0).unit_vector(), Vec2d(0.0, 1.0))
        with self.assertRaises(ValueError):
            Vec2d().unit_vector()

    def test_vec2i_truncates_and_exposes_size(self) -> None:
        size = Vec2i(640.7, 480.2)
        self.assertEqual((size.width, size.height), (640, 480))
        self.assertEqual(size + (1, 2), Vec2i(641, 482))
        self.assertEqual(size.to_vec2d(), Vec2d(640.0, 480.0))

    def test_vec3d_cross_and_unit(self) -> None:
        x = Vec3d(1.0, 0.0, 0.0)
        y = Vec3d(0.0, 1.0, 0.0)
        self.assertEqual(x.cross(y), Vec3d(0.0, 0.0, 1.0))
        self.assertEqual(Vec3d(0.0, 0.0, 3.0).unit_vector(), (0.0, 0.0, 1.0))
        self.assertEqual((x * 2.0).length(), 2.0)

    def test_as_vec2d_rejects_wrong_length(self) -> None:
        self.assertEqual(as_vec2d([1, 2]), Vec2d(1.0, 2.0))
        with self.assertRaises(ValueError):
            as_vec2d((1.0, 2.0, 3.0))

    def test_project_point_onto_line(self) -> None:
        projected = project_point_onto_line(Vec2d(3.0, 5.0), Vec2d(0.0, 0.0), Vec2d(10.0, 0.0))
        self.assertEqual(projected, Vec2d(3.0, 0.0))
        degenerate = project_point_onto_line(Vec2d(3.0, 5.0), Vec2d(1.0, 1.0), Vec2d(1.0, 1.0))
        self.assertEqual(degenerate, Vec2d(1.0, 1.0))


class RectTests(unittest.TestCase):
    def test_factories_agree(self) -> None:
        a = Rect.from_ltwh(10.0, 20.0, 30.0, 40.0)
        b = Rect.from_lrtb(10.0, 40.0, 20.0, 60.0)
        c = Rect.from_cwh(25.0, 40.0, 30.0, 40.0)
        self.assertEqual(a, b)
        self.assertEqual(a, c)
        self.assertEqual((a.left, a.right, a.top, a.bottom), (10.0, 40.0, 20.0, 60.0))
        self.assertEqual(a.top_left, Vec2d(10.0, 20.0))

    def test_validity_rules(self) -> None:
        self.assertTrue(Rect(0.0, 0.0, 10.0, 10.0).is_valid())
        self.assertFalse(Rect(0.0, 0.0, 0.0, 10.0).is_valid())
        self.assertTrue(Rect(0.0, 0.0, 10.0, 10.0, radius=0.5).is_valid())
        self.assertFalse(Rect(0.0, 0.0, 10.0, 10.0, radius=0.7).is_valid())
        self.assertTrue(Rect(0.0, 0.0, 10.0, 10.0, radius=5.0).is_valid())
        self.assertFalse(Rect(0.0, 0.0, 10.0, 10.0, radius=6.0).is_valid())

    def test_offset_keeps_shape(self) -> None:
        rect = Rect(5.0, 5.0, 4.0, 2.0, 30.0, 1.0) + Vec2d(1.0, -1.0)
        self.assertEqual(rect, Rect(6.0, 4.0, 4.0, 2.0, 30.0, 1.0))
        self.assertEqual(rect - 0.5, Rect(5.5, 3.5, 4.0, 2.0, 30.0, 1.0))

    def test_as_rect_from_sequence(self) -> None:
        self.assertEqual(as_rect((1, 2, 3, 4)), Rect(1.0, 2.0, 3.0, 4.0))
        with self.assertRaises(ValueError):
            as_rect((1, 2, 3))


class EllipseTests(unittest.TestCase):
    def test_from_endpoints(self) -> None:
        ellipse = Ellipse.from_endpoints(Vec2d(0.0, 0.0), Vec2d(0.0, 10.0), 4.0)
        self.assertEqual(ellipse.center, Vec2d(0.0, 5.0))
        self.assertEqual(ellipse.axes, Vec2d(10.0, 4.0))
        self.assertTrue(math.isclose(ellipse.rotation, 90.0))

    def test_validity_rules(self) -> None:
        self.assertTrue(Ellipse(0.0, 0.0, 10.0, 5.0).is_valid())
        self.assertFalse(Ellipse(0.0, 0.0, 5.0, 10.0).is_valid())
        self.assertFalse(Ellipse(0.0, 0.0, 10.0, 5.0, angle_from=45.0, angle_to=45.0).is_valid())
        self.assertEqual(as_ellipse((1, 2, 10, 5)) + 1.0, Ellipse(2.0, 3.0, 10.0, 5.0))


class PositioningTests(unittest.TestCase):
    def test_anchor_parsing_and_parts(self) -> None:
        self.assertEqual(Anchor.from_string("Top Left"), Anchor.TOP_LEFT)
        self.assertEqual(Anchor.TOP_LEFT.horizontal, HorizontalAlignment.LEFT)
        self.assertEqual(Anchor.BOTTOM.vertical, VerticalAlignment.BOTTOM)
        self.assertEqual(
            Anchor.from_alignment(HorizontalAlignment.RIGHT, VerticalAlignment.CENTER), Anchor.RIGHT
        )
        with self.assertRaises(ValueError):
            Anchor.from_string("upwards")

    def test_label_positions_are_distinct(self) -> None:
        self.assertEqual(len(set(LabelPosition)), 6)


if __name__ == "__main__":
    unittest.main()
