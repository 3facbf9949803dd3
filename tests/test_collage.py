from __future__ import annotations

import unittest

import numpy as np

from vispaint.collage import collage
from vispaint.colors import Color
from vispaint.imagebuffer import ImageBuffer, OwnedImageBuffer


def _solid(height: int, width: int, rgb: tuple[int, int, int]) -> OwnedImageBuffer:
    data = np.empty((height, width, 3), dtype=np.uint8)
    data[:, :] = rgb
    return OwnedImageBuffer(data)


class CollageTests(unittest.TestCase):
    def test_rows_stack_and_columns_take_the_widest_image(self) -> None:
        result = collage([[_solid(50, 100, (255, 0, 0))], [_solid(20, 30, (0, 0, 255))]])
        self.assertEqual((result.width, result.height, result.channels), (100, 70, 3))
        self.assertEqual(result.array[10, 50].tolist(), [255, 0, 0])
        self.assertEqual(result.array[60, 10].tolist(), [0, 0, 255])
        self.assertEqual(result.array[60, 80].tolist(), [255, 255, 255])

    def test_spacing_margin_and_empty_cells(self) -> None:
        images = [
            [_solid(10, 10, (0, 0, 0)), None, _solid(10, 20, (0, 0, 0))],
            [None],
        ]
        result = collage(images, spacing=(5, 3), margin=(2, 4), output_channels=4)
        self.assertEqual(result.channels, 4)
        self.assertEqual(result.width, 2 + 10 + 5 + 20 + 2)
        self.assertEqual(result.height, 4 + 10 + 4)

    def test_fixed_width_keeps_aspect_ratio(self) -> None:
        result = collage([[_solid(10, 20, (0, 255, 0)), _solid(30, 30, (0, 255, 0))]], size=(40, -1))
        self.assertEqual(result.width, 80)
        self.assertEqual(result.height, 40)

    def test_empty_grid_yields_invalid_buffer(self) -> None:
        with self.assertLogs("vispaint.collage", level="WARNING"):
            result = collage([[None, ImageBuffer.empty()], []])
        self.assertFalse(result.is_valid())
        with self.assertLogs("vispaint.collage", level="WARNING"):
            self.assertFalse(collage([]).is_valid())

    def test_invalid_arguments(self) -> None:
        with self.assertRaises(ValueError):
            collage([[_solid(2, 2, (0, 0, 0))]], output_channels=2)
        with self.assertRaises(ValueError):
            collage([[_solid(2, 2, (0, 0, 0))]], fill_color=None)

    def test_fill_color_shows_in_uncovered_cells(self) -> None:
        result = collage(
            [[_solid(10, 10, (0, 0, 0)), _solid(20, 10, (0, 0, 0))]],
            fill_color=Color(0.0, 1.0, 0.0),
        )
        self.assertEqual(result.array[15, 5].tolist(), [0, 255, 0])


if __name__ == "__main__":
    unittest.main()
