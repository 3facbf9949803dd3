from __future__ import annotations

import unittest

import numpy as np

from vispaint.colormaps import (
    ColorMap,
    Colorizer,
    LimitsMode,
    category_color,
    colorize,
    colormap_table,
    is_cyclic,
    list_colormaps,
    peaks,
    relief_shading,
)
from vispaint.imagebuffer import OwnedImageBuffer


class ColorMapTests(unittest.TestCase):
    def test_every_colormap_has_a_table(self) -> None:
        for colormap in list_colormaps():
            table = colormap_table(colormap)
            self.assertEqual(table.shape, (256, 3))
            self.assertEqual(table.dtype, np.uint8)
            self.assertFalse(table.flags.writeable)

    def test_parsing_aliases(self) -> None:
        self.assertEqual(ColorMap.from_string("Black Body"), ColorMap.BLACK_BODY)
        self.assertEqual(ColorMap.from_string("grey"), ColorMap.GRAY)
        self.assertEqual(ColorMap.from_string("-gray"), ColorMap.YARG)
        with self.assertRaises(ValueError):
            ColorMap.from_string("plasma-ish")

    def test_cyclic_maps(self) -> None:
        self.assertTrue(is_cyclic(ColorMap.ORIENTATION_6))
        self.assertFalse(is_cyclic("viridis"))

    def test_gray_endpoints(self) -> None:
        table = colormap_table(ColorMap.GRAY)
        self.assertEqual(table[0].tolist(), [0, 0, 0])
        self.assertEqual(table[-1].tolist(), [255, 255, 255])


class ColorizeTests(unittest.TestCase):
    def test_two_bins_map_to_table_ends(self) -> None:
        data = np.array([[0.0, 0.4, 0.6, 1.0]])
        colored = colorize(data, ColorMap.GRAY, low=0.0, high=1.0, bins=2)
        self.assertEqual(colored.array[0, :, 0].tolist(), [0, 0, 0, 255])

    def test_values_are_clamped_and_nan_maps_to_low(self) -> None:
        data = np.array([[-5.0, np.nan, 7.0]])
        colored = colorize(data, ColorMap.GRAY, low=0.0, high=1.0, output_channels=4)
        self.assertEqual(colored.channels, 4)
        self.assertEqual(colored.array[0, :, 0].tolist(), [0, 0, 255])
        self.assertEqual(colored.array[0, :, 3].tolist(), [255, 255, 255])

    def test_limits_default_to_data_range(self) -> None:
        data = np.array([[2.0, 3.0, 4.0]])
        colored = colorize(data, ColorMap.GRAY)
        self.assertEqual(colored.array[0, 0, 0], 0)
        self.assertEqual(colored.array[0, 2, 0], 255)

    def test_one_non_finite_limit_uses_the_data_range(self) -> None:
        data = np.array([[2.0, 3.0, 4.0]])
        colored = colorize(data, ColorMap.GRAY, low=0.0, high=float("nan"))
        self.assertEqual(colored.array[0, :, 0].tolist(), [0, 127, 255])
        colored = colorize(data, ColorMap.GRAY, low=float("-inf"), high=10.0)
        self.assertEqual(colored.array[0, :, 0].tolist(), [0, 127, 255])

    def test_all_nan_data_raises_value_error(self) -> None:
        with self.assertRaises(ValueError):
            colorize(np.full((2, 2), np.nan), ColorMap.GRAY)

    def test_invalid_arguments(self) -> None:
        with self.assertRaises(ValueError):
            colorize(np.zeros((2, 2, 3)), ColorMap.GRAY)
        with self.assertRaises(ValueError):
            colorize(np.zeros((2, 2)), ColorMap.GRAY, low=1.0, high=1.0)
        with self.assertRaises(ValueError):
            colorize(np.arange(4.0).reshape(2, 2), ColorMap.GRAY, bins=1)


class ColorizerTests(unittest.TestCase):
    def test_fixed_limits(self) -> None:
        colorizer = Colorizer("gray", LimitsMode.FIXED, low=0.0, high=10.0)
        out = colorizer(np.array([[5.0, 20.0]]))
        self.assertEqual(out.array[0, 1, 0], 255)
        with self.assertRaises(ValueError):
            Colorizer("gray", "fixed")

    def test_once_takes_limits_from_first_input_then_fixes_them(self) -> None:
        colorizer = Colorizer("gray", "once", low=0.0, high=100.0)
        out = colorizer(np.array([[2.0, 3.0, 4.0]]))
        self.assertEqual(out.array[0, :, 0].tolist(), [0, 127, 255])
        self.assertEqual((colorizer.low, colorizer.high), (2.0, 4.0))
        self.assertEqual(colorizer.limits_mode, LimitsMode.FIXED)
        out = colorizer(np.array([[20.0, 30.0]]))
        self.assertEqual(out.array[0, :, 0].tolist(), [255, 255])

    def test_continuous_recomputes_limits(self) -> None:
        colorizer = Colorizer("gray", "continuous")
        out = colorizer(np.array([[20.0, 30.0]]))
        self.assertEqual(out.array[0, :, 0].tolist(), [0, 255])

    def test_setting_a_limit_fixes_the_mode(self) -> None:
        colorizer = Colorizer("gray", low=-2.0, high=2.0)
        colorizer.low = -1.0
        colorizer.high = 1.0
        self.assertEqual(colorizer.limits_mode, LimitsMode.FIXED)
        self.assertEqual((colorizer.low, colorizer.high), (-1.0, 1.0))

    def test_limit_setters_validate_immediately(self) -> None:
        colorizer = Colorizer("gray")
        with self.assertRaises(ValueError):
            colorizer.low = 5.0
        self.assertEqual(colorizer.limits_mode, LimitsMode.CONTINUOUS)
        fixed = Colorizer("gray", "fixed", low=0.0, high=1.0)
        with self.assertRaises(ValueError):
            fixed.high = -1.0
        self.assertEqual((fixed.low, fixed.high), (0.0, 1.0))


class ReliefTests(unittest.TestCase):
    def test_peaks_and_relief_shading(self) -> None:
        surface = peaks(20, 30)
        self.assertEqual(surface.shape, (20, 30, 1))
        colored = colorize(surface, ColorMap.EARTH)
        shade = OwnedImageBuffer(np.full((20, 30), 0.5))
        shaded = relief_shading(shade, colored)
        self.assertEqual(shaded.array[0, 0, 0], colored.array[0, 0, 0] // 2)
        with self.assertRaises(ValueError):
            relief_shading(OwnedImageBuffer(np.full((20, 30), 1, dtype=np.uint8)), colored)

    def test_category_colors_cycle(self) -> None:
        self.assertEqual(category_color(3), category_color(3 + 256))
        self.assertNotEqual(category_color(0), category_color(1))


if __name__ == "__main__":
    unittest.main()
