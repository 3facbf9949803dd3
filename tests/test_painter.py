from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

import numpy as np

from vispaint.colors import Color
from vispaint.errors import CanvasNotInitializedError
from vispaint.imagebuffer import OwnedImageBuffer, save_image
from vispaint.painter import Painter, create_painter
from vispaint.primitives import Ellipse, Rect, Vec2d, Vec2i, Vec3d
from vispaint.styles import ArrowStyle, BoundingBox2DStyle, LineStyle, MarkerStyle

BLACK_LINE = LineStyle(width=2.0, color=Color(0.0, 0.0, 0.0))


def _white_painter(width: int = 100, height: int = 100) -> Painter:
    painter = create_painter()
    painter.set_canvas(width, height, Color(1.0, 1.0, 1.0))
    return painter


def _rgb(painter: Painter, row: int, col: int) -> list[int]:
    return painter.get_canvas().array[row, col, :3].tolist()


class PainterCanvasTests(unittest.TestCase):
    def test_drawing_requires_a_canvas(self) -> None:
        painter = Painter()
        self.assertFalse(painter.is_valid())
        with self.assertRaises(CanvasNotInitializedError):
            painter.draw_line(Vec2d(0.0, 0.0), Vec2d(10.0, 10.0))
        with self.assertRaises(CanvasNotInitializedError):
            painter.get_canvas()

    def test_set_canvas_fills_with_color(self) -> None:
        painter = Painter()
        painter.set_canvas(40, 30, "red")
        self.assertTrue(painter.is_valid())
        self.assertEqual(painter.canvas_size, Vec2i(40, 30))
        self.assertEqual((painter.width, painter.height), (40, 30))
        canvas = painter.get_canvas()
        self.assertEqual(canvas.shape, (30, 40, 4))
        self.assertEqual(canvas.array[0, 0].tolist(), [255, 0, 0, 255])
        with self.assertRaises(ValueError):
            painter.set_canvas(10, 10, None)

    def test_get_canvas_copy_vs_shared(self) -> None:
        painter = _white_painter(20, 20)
        shared = painter.get_canvas(copy=False)
        copied = painter.get_canvas(copy=True)
        self.assertFalse(shared.owns_data)
        self.assertTrue(copied.owns_data)
        painter.draw_rect(Rect.from_ltwh(0.0, 0.0, 20.0, 20.0), None, Color(0.0, 0.0, 0.0))
        self.assertEqual(shared.array[10, 10, :3].tolist(), [0, 0, 0])
        self.assertEqual(copied.array[10, 10, :3].tolist(), [255, 255, 255])

    def test_set_canvas_from_image_and_file(self) -> None:
        data = np.zeros((6, 8, 3), dtype=np.uint8)
        data[:, :, 1] = 200
        painter = Painter()
        painter.set_canvas_image(OwnedImageBuffer(data))
        self.assertEqual(painter.canvas_size, Vec2i(8, 6))
        self.assertEqual(painter.get_canvas().array[0, 0].tolist(), [0, 200, 0, 255])
        data[0, 0, 1] = 0
        self.assertEqual(painter.get_canvas().array[0, 0, 1], 200)

        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "canvas.png"
            save_image(path, OwnedImageBuffer(data))
            painter.set_canvas_filename(path)
        self.assertEqual(painter.get_canvas().array[0, 0].tolist(), [0, 0, 0, 255])


class PainterShapeTests(unittest.TestCase):
    def test_line_changes_pixels(self) -> None:
        painter = _white_painter()
        painter.draw_line(Vec2d(5.0, 10.0), Vec2d(95.0, 10.0), BLACK_LINE)
        self.assertEqual(_rgb(painter, 10, 50), [0, 0, 0])
        self.assertEqual(_rgb(painter, 20, 50), [255, 255, 255])

    def test_filled_shapes(self) -> None:
        painter = _white_painter()
        painter.draw_circle(Vec2d(20.0, 20.0), 8.0, None, Color(0.0, 0.0, 1.0))
        painter.draw_ellipse(Ellipse(70.0, 20.0, 30.0, 10.0), None, "lime-green")
        painter.draw_polygon([Vec2d(10.0, 60.0), Vec2d(40.0, 60.0), Vec2d(25.0, 90.0)], None, Color(1.0, 0.0, 0.0))
        self.assertEqual(_rgb(painter, 20, 20), [0, 0, 255])
        self.assertEqual(_rgb(painter, 20, 70), [51, 204, 51])
        self.assertEqual(_rgb(painter, 70, 25), [255, 0, 0])
        self.assertEqual(_rgb(painter, 95, 95), [255, 255, 255])

    def test_invalid_shapes_raise(self) -> None:
        painter = _white_painter()
        with self.assertRaises(ValueError):
            painter.draw_circle(Vec2d(10.0, 10.0), 0.0)
        with self.assertRaises(ValueError):
            painter.draw_polygon([Vec2d(0.0, 0.0), Vec2d(1.0, 1.0)])
        with self.assertRaises(ValueError):
            painter.draw_rect(Rect(10.0, 10.0, 5.0, 5.0), None, None)

    def test_rotated_rect_and_grid(self) -> None:
        painter = _white_painter()
        painter.draw_rect(Rect(50.0, 50.0, 40.0, 10.0, 90.0), None, Color(0.0, 0.0, 0.0))
        self.assertEqual(_rgb(painter, 35, 50), [0, 0, 0])
        self.assertEqual(_rgb(painter, 50, 35), [255, 255, 255])

        grid = _white_painter(40, 40)
        grid.draw_grid(spacing_x=10.0, spacing_y=10.0, line_style=BLACK_LINE)
        self.assertEqual(_rgb(grid, 5, 10), [0, 0, 0])
        self.assertEqual(_rgb(grid, 5, 5), [255, 255, 255])


class PainterArrowTests(unittest.TestCase):
    def test_arrow_tip_ends_at_target(self) -> None:
        painter = _white_painter()
        style = ArrowStyle(line=BLACK_LINE, tip_length=0.1, tip_angle=20.0, tip_closed=True)
        painter.draw_arrow(Vec2d(10.0, 50.0), Vec2d(90.0, 50.0), style)
        self.assertEqual(_rgb(painter, 50, 50), [0, 0, 0])
        self.assertEqual(_rgb(painter, 50, 86), [0, 0, 0])
        self.assertEqual(_rgb(painter, 50, 93), [255, 255, 255])
        self.assertEqual(_rgb(painter, 45, 50), [255, 255, 255])

    def test_invalid_arrows_raise(self) -> None:
        painter = _white_painter()
        with self.assertRaises(ValueError):
            painter.draw_arrow(Vec2d(10.0, 10.0), Vec2d(10.0, 10.0))
        with self.assertRaises(ValueError):
            painter.draw_arrow(Vec2d(0.0, 0.0), Vec2d(10.0, 10.0), ArrowStyle(tip_angle=0.0))


class PainterOverlayTests(unittest.TestCase):
    def test_markers(self) -> None:
        painter = _white_painter()
        painter.draw_marker(Vec2d(20.0, 20.0), MarkerStyle(marker="s", filled=True, color=Color(1.0, 0.0, 0.0)))
        painter.draw_markers(
            [(Vec2d(60.0, 60.0), Color(0.0, 0.0, 1.0)), (Vec2d(80.0, 80.0), None)],
            MarkerStyle(marker=".", size=8.0),
        )
        self.assertEqual(_rgb(painter, 20, 20), [255, 0, 0])
        self.assertEqual(_rgb(painter, 60, 60), [0, 0, 255])
        with self.assertRaises(ValueError):
            painter.draw_marker(Vec2d(5.0, 5.0), MarkerStyle(size=0.0))

    def test_trajectory_needs_two_points(self) -> None:
        painter = _white_painter()
        with self.assertLogs("vispaint.raster.draw_lines", level="WARNING"):
            self.assertFalse(painter.draw_trajectory([Vec2d(1.0, 1.0)]))
        points = [Vec2d(10.0, 50.0), Vec2d(50.0, 50.0), Vec2d(90.0, 50.0)]
        self.assertTrue(painter.draw_trajectory(points, BLACK_LINE, fade_out_color=None))
        self.assertEqual(_rgb(painter, 50, 30), [0, 0, 0])

    def test_faded_trajectories(self) -> None:
        painter = _white_painter()
        trajectories = [
            ([Vec2d(10.0, 20.0), Vec2d(90.0, 20.0)], Color(1.0, 0.0, 0.0)),
            ([Vec2d(10.0, 80.0), Vec2d(90.0, 80.0)], None),
        ]
        self.assertTrue(painter.draw_trajectories(trajectories, BLACK_LINE))
        newest = _rgb(painter, 20, 12)
        oldest = _rgb(painter, 20, 88)
        self.assertEqual(newest[0], 255)
        self.assertLess(newest[1], oldest[1])
        self.assertTrue(all(value < 40 for value in _rgb(painter, 80, 12)))

    def test_image_with_alpha(self) -> None:
        painter = _white_painter(20, 20)
        image = OwnedImageBuffer(np.zeros((10, 10, 3), dtype=np.uint8))
        painter.draw_image(image, Vec2d(0.0, 0.0), alpha=0.5)
        gray = _rgb(painter, 5, 5)
        self.assertTrue(all(126 <= value <= 129 for value in gray))
        self.assertEqual(_rgb(painter, 15, 15), [255, 255, 255])
        with self.assertRaises(ValueError):
            painter.draw_image(image, Vec2d(0.0, 0.0), scale_x=0.0)

    def test_text_box_with_fixed_size(self) -> None:
        painter = _white_painter()
        box = painter.draw_text_box(
            "label", Vec2d(10.0, 10.0), "top-left", fixed_box_size=Vec2d(40.0, 20.0), box_corner_radius=0.0
        )
        self.assertEqual(box, Rect(30.5, 20.5, 40.0, 20.0))
        empty = painter.draw_text("", Vec2d(5.0, 5.0))
        self.assertEqual((empty.width, empty.height), (0.0, 0.0))

    def test_bounding_box(self) -> None:
        painter = _white_painter()
        style = BoundingBox2DStyle(line_style=LineStyle(width=2.0, color=Color(0.0, 0.0, 1.0)))
        self.assertTrue(painter.draw_bounding_box_2d(Rect(50.0, 50.0, 60.0, 40.0), style, label="car"))
        self.assertEqual(_rgb(painter, 50, 20), [0, 0, 255])
        inside = _rgb(painter, 62, 50)
        self.assertLess(inside[0], 255)
        self.assertEqual(inside[2], 255)
        with self.assertLogs("vispaint.raster.draw_bbox", level="WARNING"):
            self.assertFalse(painter.draw_bounding_box_2d(Rect(50.0, 50.0, 0.0, 40.0), style))

    def test_xyz_axes_visibility(self) -> None:
        painter = _white_painter()
        K = [[100.0, 0.0, 50.0], [0.0, 100.0, 50.0], [0.0, 0.0, 1.0]]
        R = np.eye(3)
        visible = painter.draw_xyz_axes(K, R, Vec3d(0.0, 0.0, 5.0), origin=Vec3d(0.5, 0.5, 0.0))
        self.assertTrue(visible)
        self.assertNotEqual(_rgb(painter, 60, 65), [255, 255, 255])
        off_screen = painter.draw_xyz_axes(K, R, Vec3d(1000.0, 0.0, 5.0))
        self.assertFalse(off_screen)
        with self.assertRaises(ValueError):
            painter.draw_xyz_axes(np.eye(2), R, Vec3d(0.0, 0.0, 5.0))

    def test_xyz_axes_origin_on_camera_plane_is_skipped(self) -> None:
        painter = _white_painter()
        K = [[100.0, 0.0, 50.0], [0.0, 100.0, 50.0], [0.0, 0.0, 1.0]]
        self.assertFalse(painter.draw_xyz_axes(K, np.eye(3), Vec3d(0.0, 0.0, 0.0)))
        self.assertTrue(np.all(painter.get_canvas().array[:, :, :3] == 255))


if __name__ == "__main__":
    unittest.main()
