from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

import numpy as np

from vispaint.imagebuffer import (
    ImageBuffer,
    ImageBufferType,
    OwnedImageBuffer,
    SharedImageBuffer,
    color_pop,
    convert_hsv2rgb,
    convert_rgb2gray,
    convert_rgb2hsv,
    load_image,
    mask_hsv_range,
    save_image,
)
from vispaint.primitives import Vec2i


def _ramp(height: int = 4, width: int = 5, channels: int = 3) -> np.ndarray:
    return np.arange(height * width * channels, dtype=np.uint8).reshape(height, width, channels)


class ImageBufferTests(unittest.TestCase):
    def test_empty_and_allocate(self) -> None:
        empty = ImageBuffer.empty()
        self.assertFalse(empty.is_valid())
        self.assertFalse(empty.owns_data)
        buf = ImageBuffer.allocate(3, 4, 2, "float32")
        self.assertEqual(buf.shape, (3, 4, 2))
        self.assertEqual(buf.buffer_type, ImageBufferType.FLOAT)
        with self.assertRaises(ValueError):
            ImageBuffer.allocate(0, 4, 1)

    def test_two_dimensional_input_gets_a_channel_axis(self) -> None:
        buf = ImageBuffer.from_array(np.zeros((2, 3), dtype=np.uint8))
        self.assertEqual(buf.shape, (2, 3, 1))

    def test_owned_copy_does_not_alias(self) -> None:
        data = _ramp()
        owned = ImageBuffer.from_array(data, copy=True)
        self.assertIsInstance(owned, OwnedImageBuffer)
        owned.array[0, 0, 0] = 200
        self.assertEqual(data[0, 0, 0], 0)

    def test_roi_shares_memory(self) -> None:
        buf = OwnedImageBuffer(_ramp())
        roi = buf.roi(1, 2, 3, 2)
        self.assertIsInstance(roi, SharedImageBuffer)
        self.assertFalse(roi.owns_data)
        self.assertEqual(roi.shape, (2, 3, 3))
        roi.array[0, 0, :] = 255
        self.assertEqual(buf.at(2, 1, 0), 255)
        with self.assertRaises(IndexError):
            buf.roi(3, 0, 3, 1)

    def test_wrap_memory_with_padded_rows(self) -> None:
        raw = bytearray(range(2 * 8))
        view = ImageBuffer.wrap_memory(raw, height=2, width=3, channels=2, row_stride=8)
        self.assertEqual(view.at(1, 0, 1), 9)
        self.assertFalse(view.is_contiguous)
        with self.assertRaises(ValueError):
            ImageBuffer.wrap_memory(raw, height=2, width=3, channels=2, row_stride=4)

    def test_swap_channels_in_place(self) -> None:
        buf = OwnedImageBuffer(np.array([[[1, 2, 3]]], dtype=np.uint8))
        buf.swap_channels(0, 2)
        self.assertEqual(buf.array[0, 0].tolist(), [3, 2, 1])
        with self.assertRaises(IndexError):
            buf.swap_channels(0, 3)

    def test_to_channels(self) -> None:
        gray = OwnedImageBuffer(np.full((2, 2, 1), 7, dtype=np.uint8))
        rgba = gray.to_channels(4)
        self.assertEqual(rgba.array[0, 0].tolist(), [7, 7, 7, 255])
        self.assertEqual(rgba.to_channels(3).channels, 3)
        with self.assertRaises(ValueError):
            rgba.to_channels(2)

    def test_float_and_uint8_conversions(self) -> None:
        buf = OwnedImageBuffer(np.array([[[0.0], [0.5], [1.5]]], dtype=np.float32))
        converted = buf.to_uint8(3)
        self.assertEqual(converted.array[0, :, 0].tolist(), [0, 127, 255])
        self.assertEqual(converted.array[0, 1].tolist(), [127, 127, 127])
        back = OwnedImageBuffer(np.array([[[255]]], dtype=np.uint8)).to_float()
        self.assertEqual(back.buffer_type, ImageBufferType.FLOAT)
        self.assertAlmostEqual(back.at(0, 0), 1.0)

    def test_blend_scalar_and_per_pixel(self) -> None:
        a = OwnedImageBuffer(np.zeros((1, 2, 3), dtype=np.uint8))
        b = OwnedImageBuffer(np.full((1, 2, 4), 200, dtype=np.uint8))
        blended = a.blend(b, 0.5)
        self.assertEqual(blended.channels, 4)
        self.assertEqual(blended.array[0, 0].tolist(), [100, 100, 100, 200])

        weights = OwnedImageBuffer(np.array([[[0.0], [1.0]]]))
        per_pixel = a.blend(b, weights)
        self.assertEqual(per_pixel.array[0, 0, 0], 0)
        self.assertEqual(per_pixel.array[0, 1, 0], 200)

        with self.assertRaises(ValueError):
            a.blend(OwnedImageBuffer(np.zeros((2, 2, 3), dtype=np.uint8)), 0.5)

    def test_pixelate_uses_block_centers(self) -> None:
        data = np.arange(16, dtype=np.uint8).reshape(4, 4, 1)
        buf = OwnedImageBuffer(data)
        buf.pixelate(2, 2)
        self.assertEqual(buf.array[:2, :2, 0].tolist(), [[5, 5], [5, 5]])
        self.assertEqual(buf.array[2:, 2:, 0].tolist(), [[15, 15], [15, 15]])

    def test_flow_magnitude_and_orientation(self) -> None:
        flow = OwnedImageBuffer(np.array([[[3.0, 4.0], [0.0, 0.0]]], dtype=np.float32))
        self.assertAlmostEqual(flow.magnitude().at(0, 0), 5.0, places=5)
        orientation = flow.orientation(invalid=-1.0)
        self.assertEqual(orientation.at(0, 1), -1.0)
        with self.assertRaises(ValueError):
            OwnedImageBuffer(_ramp()).magnitude()

    def test_min_max_location(self) -> None:
        buf = OwnedImageBuffer(np.array([[3, 9], [-2, 9]], dtype=np.int32))
        low, high, low_loc, high_loc = buf.min_max_location()
        self.assertEqual((low, high), (-2, 9))
        self.assertEqual(low_loc, Vec2i(0, 1))
        self.assertEqual(high_loc, Vec2i(1, 0))
        with self.assertRaises(ValueError):
            OwnedImageBuffer(_ramp()).min_max_location()


class ColorConversionTests(unittest.TestCase):
    def test_gray_conversion_keeps_alpha(self) -> None:
        rgba = OwnedImageBuffer(np.array([[[255, 255, 255, 10]]], dtype=np.uint8))
        gray = convert_rgb2gray(rgba, output_channels=4)
        self.assertEqual(gray.array[0, 0, 3], 10)
        self.assertGreaterEqual(gray.array[0, 0, 0], 254)

    def test_hsv_round_trip_for_primaries(self) -> None:
        rgb = OwnedImageBuffer(np.array([[[255, 0, 0], [0, 255, 0], [0, 0, 255]]], dtype=np.uint8))
        hsv = convert_rgb2hsv(rgb)
        self.assertEqual(hsv.array[0, :, 0].tolist(), [0, 60, 120])
        self.assertEqual(hsv.array[0, :, 1].tolist(), [255, 255, 255])
        self.assertEqual(convert_hsv2rgb(hsv), rgb)

    def test_hue_mask_wraps_around(self) -> None:
        rgb = OwnedImageBuffer(np.array([[[255, 0, 0], [0, 0, 255]]], dtype=np.uint8))
        mask = mask_hsv_range(convert_rgb2hsv(rgb), (340.0, 20.0), (0.5, 1.0), (0.5, 1.0))
        self.assertEqual(mask.array[0, :, 0].tolist(), [255, 0])

    def test_color_pop_grays_out_other_hues(self) -> None:
        rgb = OwnedImageBuffer(np.array([[[255, 0, 0], [0, 0, 255]]], dtype=np.uint8))
        popped = color_pop(rgb, (200.0, 260.0))
        self.assertEqual(popped.array[0, 1].tolist(), [0, 0, 255])
        red_gray = popped.array[0, 0].tolist()
        self.assertEqual(red_gray[0], red_gray[1])
        self.assertEqual(red_gray[1], red_gray[2])


class ImageFileTests(unittest.TestCase):
    def test_png_save_and_load(self) -> None:
        image = OwnedImageBuffer(_ramp(6, 4, 4))
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "ramp.png"
            save_image(path, image)
            self.assertEqual(load_image(path), image)
            self.assertEqual(load_image(path, channels=3).channels, 3)

    def test_unsupported_inputs(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(ValueError):
                save_image(Path(tmp) / "image.bmp", OwnedImageBuffer(_ramp()))
            with self.assertRaises(ValueError):
                save_image(Path(tmp) / "image.jpg", OwnedImageBuffer(_ramp(channels=4)))
            with self.assertRaises(FileNotFoundError):
                load_image(Path(tmp) / "missing.png")


if __name__ == "__main__":
    unittest.main()
