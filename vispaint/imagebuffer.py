from __future__ import annotations

from enum import Enum
import logging
from pathlib import Path
from typing import Any

import numpy as np
from PIL import Image

from vispaint.primitives import Vec2i

LOGGER = logging.getLogger(__name__)


class ImageBufferType(str, Enum):
    UINT8 = "uint8"
    INT16 = "int16"
    UINT16 = "uint16"
    INT32 = "int32"
    UINT32 = "uint32"
    INT64 = "int64"
    UINT64 = "uint64"
    FLOAT = "float"
    DOUBLE = "double"

    @classmethod
    def from_string(cls, text: str) -> ImageBufferType:
        slug = text.strip().lower()
        slug = _TYPE_ALIASES.get(slug, slug)
        for buffer_type in cls:
            if buffer_type.value == slug:
                return buffer_type
        raise ValueError(f"cannot parse image buffer type from `{text}`")

    @classmethod
    def from_dtype(cls, dtype: Any) -> ImageBufferType:
        dt = np.dtype(dtype)
        for buffer_type, candidate in _DTYPES.items():
            if candidate == dt:
                return buffer_type
        raise ValueError(f"unsupported image buffer dtype `{dt}`")

    @property
    def dtype(self) -> np.dtype:
        return _DTYPES[self]

    @property
    def element_size(self) -> int:
        return _DTYPES[self].itemsize

    @property
    def is_floating(self) -> bool:
        return self in (ImageBufferType.FLOAT, ImageBufferType.DOUBLE)

    def to_string(self) -> str:
        return self.value


_TYPE_ALIASES = {
    "short": "int16",
    "int": "int32",
    "float32": "float",
    "float64": "double",
}

_DTYPES: dict[ImageBufferType, np.dtype] = {
    ImageBufferType.UINT8: np.dtype(np.uint8),
    ImageBufferType.INT16: np.dtype(np.int16),
    ImageBufferType.UINT16: np.dtype(np.uint16),
    ImageBufferType.INT32: np.dtype(np.int32),
    ImageBufferType.UINT32: np.dtype(np.uint32),
    ImageBufferType.INT64: np.dtype(np.int64),
    ImageBufferType.UINT64: np.dtype(np.uint64),
    ImageBufferType.FLOAT: np.dtype(np.float32),
    ImageBufferType.DOUBLE: np.dtype(np.float64),
}


def as_buffer_type(value: ImageBufferType | str | Any) -> ImageBufferType:
    if isinstance(value, ImageBufferType):
        return value
    if isinstance(value, str):
        return ImageBufferType.from_string(value)
    return ImageBufferType.from_dtype(value)


def _as_hwc(array: np.ndarray) -> np.ndarray:
    if array.ndim == 2:
        return array[:, :, np.newaxis]
    if array.ndim != 3:
        raise ValueError(f"image data must be 2D or 3D, got shape {array.shape}")
    return array


def _cast(values: np.ndarray, dtype: np.dtype) -> np.ndarray:
    """Saturating cast; fractional values are truncated for integer targets."""
    if np.issubdtype(dtype, np.integer):
        info = np.iinfo(dtype)
        return np.clip(values, info.min, info.max).astype(dtype)
    return values.astype(dtype)


class ImageBuffer:
    """A (height, width, channels) raster backed by a numpy array.

    Use the factories (`allocate`, `from_array`, `wrap`, `wrap_memory`,
    `empty`) rather than the constructor. `OwnedImageBuffer` holds a private,
    C-contiguous copy; `SharedImageBuffer` aliases memory owned elsewhere and
    in-place operations on it are visible to the owner.
    """

    def __init__(self, data: np.ndarray | None) -> None:
        if data is not None:
            data = _as_hwc(data)
            ImageBufferType.from_dtype(data.dtype)
        self._data = data

    @staticmethod
    def empty() -> OwnedImageBuffer:
        return OwnedImageBuffer(None)

    @staticmethod
    def allocate(
        height: int,
        width: int,
        channels: int,
        buffer_type: ImageBufferType | str = ImageBufferType.UINT8,
    ) -> OwnedImageBuffer:
        if height <= 0 or width <= 0 or channels <= 0:
            raise ValueError(
                f"`height`, `width` and `channels` must be > 0, got {height}x{width}x{channels}"
            )
        dtype = as_buffer_type(buffer_type).dtype
        return OwnedImageBuffer(np.zeros((height, width, channels), dtype=dtype))

    @staticmethod
    def from_array(array: Any, copy: bool = True) -> ImageBuffer:
        arr = np.asarray(array)
        if copy:
            return OwnedImageBuffer(arr)
        return SharedImageBuffer(arr)

    @staticmethod
    def wrap(array: np.ndarray) -> SharedImageBuffer:
        if not isinstance(array, np.ndarray):
            raise TypeError("`wrap` needs a numpy array to alias")
        return SharedImageBuffer(array)

    @staticmethod
    def wrap_memory(
        buffer: Any,
        height: int,
        width: int,
        channels: int,
        row_stride: int,
        pixel_stride: int | None = None,
        buffer_type: ImageBufferType | str = ImageBufferType.UINT8,
    ) -> SharedImageBuffer:
        """Alias external memory with explicit (byte) strides."""
        btype = as_buffer_type(buffer_type)
        if pixel_stride is None:
            pixel_stride = channels * btype.element_size
        if height <= 0 or width <= 0 or channels <= 0:
            raise ValueError("`height`, `width` and `channels` must be > 0")
        if pixel_stride < channels * btype.element_size:
            raise ValueError(f"`pixel_stride` {pixel_stride} is too small for {channels}x{btype.value}")
        if row_stride < width * pixel_stride:
            raise ValueError(f"`row_stride` {row_stride} must be >= width * pixel_stride")
        arr = np.ndarray(
            shape=(height, width, channels),
            dtype=btype.dtype,
            buffer=buffer,
            strides=(row_stride, pixel_stride, btype.element_size),
        )
        return SharedImageBuffer(arr)

    @property
    def array(self) -> np.ndarray:
        return self._require_data()

    @property
    def height(self) -> int:
        return 0 if self._data is None else int(self._data.shape[0])

    @property
    def width(self) -> int:
        return 0 if self._data is None else int(self._data.shape[1])

    @property
    def channels(self) -> int:
        return 0 if self._data is None else int(self._data.shape[2])

    @property
    def shape(self) -> tuple[int, int, int]:
        return (self.height, self.width, self.channels)

    @property
    def buffer_type(self) -> ImageBufferType:
        return ImageBufferType.from_dtype(self._require_data().dtype)

    @property
    def dtype(self) -> np.dtype:
        return self._require_data().dtype

    @property
    def element_size(self) -> int:
        return 0 if self._data is None else int(self._data.dtype.itemsize)

    @property
    def row_stride(self) -> int:
        return 0 if self._data is None else int(self._data.strides[0])

    @property
    def pixel_stride(self) -> int:
        return 0 if self._data is None else int(self._data.strides[1])

    @property
    def is_contiguous(self) -> bool:
        return self._data is not None and bool(self._data.flags.c_contiguous)

    @property
    def owns_data(self) -> bool:
        return False

    def is_valid(self) -> bool:
        return self._data is not None and self._data.size > 0

    def __bool__(self) -> bool:
        return self.is_valid()

    def __array__(self, dtype: Any = None, copy: Any = None) -> np.ndarray:
        data = self._require_data()
        return data if dtype is None else data.astype(dtype)

    def _require_data(self) -> np.ndarray:
        if self._data is None:
            raise ValueError("image buffer is invalid (no data)")
        return self._data

    def at(self, row: int, col: int, channel: int = 0) -> Any:
        data = self._require_data()
        if not (0 <= row < self.height and 0 <= col < self.width and 0 <= channel < self.channels):
            raise IndexError(f"pixel ({row}, {col}, {channel}) is out of bounds for {self.shape}")
        return data[row, col, channel].item()

    def copy(self) -> OwnedImageBuffer:
        if self._data is None:
            return ImageBuffer.empty()
        return OwnedImageBuffer(self._data)

    def roi(self, left: int, top: int, width: int, height: int) -> SharedImageBuffer:
        """Returns a shared view onto the given region."""
        data = self._require_data()
        if width <= 0 or height <= 0:
            raise ValueError(f"ROI size must be > 0, got {width}x{height}")
        if left < 0 or top < 0 or left + width > self.width or top + height > self.height:
            raise IndexError(
                f"ROI (l={left}, t={top}, w={width}, h={height}) exceeds buffer {self.width}x{self.height}"
            )
        return SharedImageBuffer(data[top : top + height, left : left + width, :])

    def swap_channels(self, ch1: int, ch2: int) -> None:
        """Swaps two channels in place (this also mutates aliased memory)."""
        data = self._require_data()
        if not (0 <= ch1 < self.channels and 0 <= ch2 < self.channels):
            raise IndexError(f"channels ({ch1}, {ch2}) are out of range for {self.channels} channels")
        if ch1 == ch2:
            return
        tmp = data[:, :, ch1].copy()
        data[:, :, ch1] = data[:, :, ch2]
        data[:, :, ch2] = tmp

    def channel(self, index: int) -> OwnedImageBuffer:
        data = self._require_data()
        if not 0 <= index < self.channels:
            raise IndexError(f"channel {index} is out of range for {self.channels} channels")
        return OwnedImageBuffer(data[:, :, index : index + 1])

    def to_channels(self, channels_out: int) -> OwnedImageBuffer:
        data = self._require_data()
        channels_in = self.channels
        if channels_in == channels_out:
            return self.copy()
        if channels_in == 1 and channels_out in (3, 4):
            out = np.repeat(data, channels_out, axis=2)
            if channels_out == 4:
                out[:, :, 3] = 255
            return OwnedImageBuffer(out)
        if channels_in == 3 and channels_out == 4:
            alpha = np.full(data.shape[:2] + (1,), 255, dtype=data.dtype)
            return OwnedImageBuffer(np.concatenate((data, alpha), axis=2))
        if channels_in == 4 and channels_out == 3:
            return OwnedImageBuffer(data[:, :, :3])
        raise ValueError(f"cannot convert a {channels_in}-channel buffer to {channels_out} channels")

    def to_uint8(self, channels_out: int | None = None) -> OwnedImageBuffer:
        """Converts to uint8; floating point data is treated as normalized to [0, 1]."""
        data = self._require_data()
        if channels_out is None:
            channels_out = self.channels
        if channels_out not in (1, 3, 4) or channels_out < self.channels:
            raise ValueError(
                f"`channels_out` must be 1, 3 or 4 and >= {self.channels}, got {channels_out}"
            )
        scale = 255.0 if self.buffer_type.is_floating else 1.0
        values = data.astype(np.float64) * scale
        out = np.empty((self.height, self.width, channels_out), dtype=np.uint8)
        out[:, :, : self.channels] = _cast(values, np.dtype(np.uint8))
        for ch in range(self.channels, channels_out):
            out[:, :, ch] = 255 if ch == 3 else out[:, :, 0]
        return OwnedImageBuffer(out)

    def to_float(self) -> OwnedImageBuffer:
        """Converts to float32; integral data is scaled by 1/255."""
        data = self._require_data()
        if self.buffer_type.is_floating:
            return OwnedImageBuffer(data.astype(np.float32))
        return OwnedImageBuffer((data.astype(np.float64) / 255.0).astype(np.float32))

    def as_type(self, buffer_type: ImageBufferType | str, scale: float = 1.0) -> OwnedImageBuffer:
        data = self._require_data()
        dtype = as_buffer_type(buffer_type).dtype
        return OwnedImageBuffer(_cast(data.astype(np.float64) * scale, dtype))

    def _require_flow_field(self, operation: str) -> np.ndarray:
        data = self._require_data()
        if self.channels != 2 or not self.buffer_type.is_floating:
            raise ValueError(f"`{operation}` needs a 2-channel float or double buffer, got {self!r}")
        return data

    def magnitude(self) -> OwnedImageBuffer:
        data = self._require_flow_field("magnitude")
        mag = np.hypot(data[:, :, 0], data[:, :, 1]).astype(data.dtype)
        return OwnedImageBuffer(mag)

    def orientation(self, invalid: float = float("nan")) -> OwnedImageBuffer:
        """Angle (radians) of each 2D vector; ``invalid`` where both components are ~0."""
        data = self._require_flow_field("orientation")
        u = data[:, :, 0]
        v = data[:, :, 1]
        angle = np.arctan2(v, u)
        zero = (np.abs(u) < 1e-9) & (np.abs(v) < 1e-9)
        angle = np.where(zero, invalid, angle).astype(data.dtype)
        return OwnedImageBuffer(angle)

    def pixelate(
        self,
        block_width: int,
        block_height: int,
        left: int = -1,
        top: int = -1,
        width: int = -1,
        height: int = -1,
    ) -> None:
        """Pixelates (a region of) the buffer in place.

        Each block is filled with its center pixel. If the region is not a
        multiple of the block size, the remainder is split between the first
        and last block column (row).
        """
        if block_width <= 0 or block_height <= 0:
            raise ValueError(f"block size must be > 0, got {block_width}x{block_height}")
        if left < 0 or top < 0 or width <= 0 or height <= 0:
            left, top, width, height = 0, 0, self.width, self.height
        region = self.roi(left, top, width, height).array
        col_edges = _block_edges(width, block_width)
        row_edges = _block_edges(height, block_height)
        for r0, r1 in zip(row_edges[:-1], row_edges[1:]):
            cy = (r0 + r1) // 2
            for c0, c1 in zip(col_edges[:-1], col_edges[1:]):
                cx = (c0 + c1) // 2
                region[r0:r1, c0:c1, :] = region[cy, cx, :]

    def blend(self, other: ImageBuffer, alpha: float | ImageBuffer) -> OwnedImageBuffer:
        """Linear interpolation ``(1 - alpha) * self + alpha * other``.

        ``alpha`` is either a scalar or a per-pixel weight buffer (one channel
        or one weight per blended channel). Channels present in only one of
        the inputs are copied from the buffer that has them.
        """
        data = self._require_data()
        other_data = other._require_data()
        if data.shape[:2] != other_data.shape[:2] or data.dtype != other_data.dtype:
            raise ValueError(
                f"blending needs buffers of the same size and type, got {self!r} vs. {other!r}"
            )
        common = min(self.channels, other.channels)
        if isinstance(alpha, ImageBuffer):
            weights = alpha._require_data().astype(np.float64)
            if weights.shape[:2] != data.shape[:2] or weights.shape[2] not in (1, common):
                raise ValueError(f"blend weights {alpha!r} do not match {self!r}")
        else:
            weights = float(alpha)
        remainder = data if self.channels >= other.channels else other_data
        out = remainder.copy()
        blended = (1.0 - weights) * data[:, :, :common].astype(np.float64) + weights * other_data[
            :, :, :common
        ].astype(np.float64)
        out[:, :, :common] = _cast(blended, data.dtype)
        return OwnedImageBuffer(out)

    def dim(self, alpha: float) -> OwnedImageBuffer:
        data = self._require_data()
        return OwnedImageBuffer(_cast(data.astype(np.float64) * alpha, data.dtype))

    def min_max_location(self, channel: int = -1) -> tuple[float, float, Vec2i, Vec2i]:
        """Returns ``(min, max, min_location, max_location)``; locations are (x, y).

        With ``channel == -1`` the buffer must be single-channel. Ties resolve
        to the first occurrence in row-major order.
        """
        data = self._require_data()
        if channel < 0:
            if self.channels != 1:
                raise ValueError(f"`channel` must be given for a {self.channels}-channel buffer")
            channel = 0
        if channel >= self.channels:
            raise IndexError(f"channel {channel} is out of range for {self.channels} channels")
        plane = data[:, :, channel]
        min_idx = int(np.argmin(plane))
        max_idx = int(np.argmax(plane))
        min_row, min_col = divmod(min_idx, self.width)
        max_row, max_col = divmod(max_idx, self.width)
        return (
            plane[min_row, min_col].item(),
            plane[max_row, max_col].item(),
            Vec2i(min_col, min_row),
            Vec2i(max_col, max_row),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ImageBuffer):
            return NotImplemented
        if self._data is None or other._data is None:
            return self._data is None and other._data is None
        return self._data.dtype == other._data.dtype and np.array_equal(self._data, other._data)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self._data is None:
            return "ImageBuffer(invalid)"
        memory = "copied memory" if self.owns_data else "shared memory"
        return f"ImageBuffer({self.width}x{self.height}x{self.channels}, {self.buffer_type.value}, {memory})"

    __str__ = __repr__


class OwnedImageBuffer(ImageBuffer):
    """Exclusively owned, C-contiguous pixel storage."""

    def __init__(self, data: np.ndarray | None) -> None:
        if data is not None:
            data = np.array(_as_hwc(np.asarray(data)), order="C", copy=True)
        super().__init__(data)

    @property
    def owns_data(self) -> bool:
        return self._data is not None


class SharedImageBuffer(ImageBuffer):
    """A view onto memory owned by someone else."""

    def __init__(self, data: np.ndarray) -> None:
        if data is None:
            raise ValueError("a shared image buffer needs data to alias")
        super().__init__(data)


def _block_edges(length: int, block: int) -> list[int]:
    num_blocks = max(1, length // block)
    missed = length - num_blocks * block
    if num_blocks == 1:
        return [0, length]
    first = block + (missed + 1) // 2
    edges = [0, first]
    for _ in range(num_blocks - 2):
        edges.append(edges[-1] + block)
    edges.append(length)
    return edges


def _require_uint8_rgb(image: ImageBuffer, operation: str) -> np.ndarray:
    data = image._require_data()
    if image.buffer_type != ImageBufferType.UINT8 or image.channels not in (3, 4):
        raise ValueError(f"`{operation}` needs a 3- or 4-channel uint8 buffer, got {image!r}")
    return data


def _rgb_planes(data: np.ndarray, is_bgr: bool) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    ch_r, ch_b = (2, 0) if is_bgr else (0, 2)
    return data[:, :, ch_r], data[:, :, 1], data[:, :, ch_b]


def convert_rgb2gray(image: ImageBuffer, output_channels: int = 1, is_bgr: bool = False) -> OwnedImageBuffer:
    data = image._require_data()
    if image.channels == 1:
        return image.to_channels(output_channels)
    if image.channels not in (3, 4):
        raise ValueError(f"grayscale conversion supports 1, 3 or 4 channels, got {image.channels}")
    if output_channels not in (1, 3, 4):
        raise ValueError(f"`output_channels` must be 1, 3 or 4, got {output_channels}")
    r, g, b = (p.astype(np.float64) for p in _rgb_planes(data, is_bgr))
    luminance = _cast(0.2989 * r + 0.5870 * g + 0.1141 * b, data.dtype)
    out = np.empty((image.height, image.width, output_channels), dtype=data.dtype)
    out[:, :, : min(output_channels, 3)] = luminance[:, :, np.newaxis]
    if output_channels == 4:
        out[:, :, 3] = data[:, :, 3] if image.channels == 4 else 255
    return OwnedImageBuffer(out)


def convert_rgb2hsv(image: ImageBuffer, is_bgr: bool = False) -> OwnedImageBuffer:
    """RGB(A) uint8 to HSV uint8 with hue/2 in [0, 180) and saturation, value in [0, 255]."""
    data = _require_uint8_rgb(image, "convert_rgb2hsv")
    r, g, b = (p.astype(np.float32) / 255.0 for p in _rgb_planes(data, is_bgr))
    stacked = np.stack((r, g, b), axis=2)
    max_val = stacked.max(axis=2)
    max_idx = stacked.argmax(axis=2)
    delta = max_val - stacked.min(axis=2)
    chromatic = (max_val > 1e-6) & (delta > 1e-6)
    safe_delta = np.where(chromatic, delta, 1.0)
    hue = np.select(
        [max_idx == 0, max_idx == 1],
        [60.0 * (g - b) / safe_delta, 60.0 * (b - r) / safe_delta + 120.0],
        60.0 * (r - g) / safe_delta + 240.0,
    )
    hue = np.where(chromatic, hue, 0.0)
    hue = np.where(hue < 0.0, hue + 360.0, hue)
    sat = np.where(chromatic, delta / np.where(max_val > 0, max_val, 1.0), 0.0)
    out = np.stack((hue / 2.0, 255.0 * sat, 255.0 * max_val), axis=2)
    return OwnedImageBuffer(out.astype(np.uint8))


def convert_hsv2rgb(image: ImageBuffer, output_channels: int = 3, output_bgr: bool = False) -> OwnedImageBuffer:
    data = image._require_data()
    if image.buffer_type != ImageBufferType.UINT8 or image.channels != 3:
        raise ValueError(f"`convert_hsv2rgb` needs a 3-channel uint8 HSV buffer, got {image!r}")
    if output_channels not in (3, 4):
        raise ValueError(f"`output_channels` must be 3 or 4, got {output_channels}")
    hue = data[:, :, 0].astype(np.float32) * 2.0
    sat = data[:, :, 1].astype(np.float32) / 255.0
    val = data[:, :, 2].astype(np.float32) / 255.0
    sector = (hue / 60.0).astype(np.int32) % 6
    rem = hue / 60.0 - sector
    p = val * (1.0 - sat)
    q = val * (1.0 - sat * rem)
    t = val * (1.0 - sat * (1.0 - rem))
    choices = [sector == k for k in range(6)]
    r = np.select(choices, [val, q, p, p, t, val])
    g = np.select(choices, [t, val, val, q, p, p])
    b = np.select(choices, [p, p, t, val, val, q])
    out = np.empty((image.height, image.width, output_channels), dtype=np.uint8)
    ch_r, ch_b = (2, 0) if output_bgr else (0, 2)
    out[:, :, ch_r] = (255.0 * r).astype(np.uint8)
    out[:, :, 1] = (255.0 * g).astype(np.uint8)
    out[:, :, ch_b] = (255.0 * b).astype(np.uint8)
    if output_channels == 4:
        out[:, :, 3] = 255
    return OwnedImageBuffer(out)


def mask_hsv_range(
    hsv: ImageBuffer,
    hue_range: tuple[float, float],
    saturation_range: tuple[float, float],
    value_range: tuple[float, float],
) -> OwnedImageBuffer:
    """Single-channel mask (255 inside, 0 outside) of an HSV buffer.

    ``hue_range`` is given in degrees [0, 360] and wraps around if its lower
    bound exceeds the upper one; saturation and value ranges are in [0, 1].
    """
    data = hsv._require_data()
    if hsv.buffer_type != ImageBufferType.UINT8 or hsv.channels != 3:
        raise ValueError(f"`mask_hsv_range` needs a 3-channel uint8 HSV buffer, got {hsv!r}")
    h_lo, h_hi = (int(h / 2.0) for h in hue_range)
    s_lo, s_hi = (int(255.0 * s) for s in saturation_range)
    v_lo, v_hi = (int(255.0 * v) for v in value_range)
    hue = data[:, :, 0]
    if h_lo <= h_hi:
        hue_ok = (hue >= h_lo) & (hue <= h_hi)
    else:
        hue_ok = (hue >= h_lo) | (hue <= h_hi)
    sat_ok = (data[:, :, 1] >= s_lo) & (data[:, :, 1] <= s_hi)
    val_ok = (data[:, :, 2] >= v_lo) & (data[:, :, 2] <= v_hi)
    mask = np.where(hue_ok & sat_ok & val_ok, 255, 0).astype(np.uint8)
    return OwnedImageBuffer(mask)


def color_pop(
    image: ImageBuffer,
    hue_range: tuple[float, float],
    saturation_range: tuple[float, float] = (0.3, 1.0),
    value_range: tuple[float, float] = (0.3, 1.0),
    is_bgr: bool = False,
) -> OwnedImageBuffer:
    """Keeps colors within the HSV range and turns everything else gray."""
    _require_uint8_rgb(image, "color_pop")
    hsv = convert_rgb2hsv(image, is_bgr)
    mask = mask_hsv_range(hsv, hue_range, saturation_range, value_range).array[:, :, 0]
    gray = convert_rgb2gray(image, 1, is_bgr).array[:, :, 0]
    pop = image.copy()
    outside = mask == 0
    for ch in range(3):
        pop.array[:, :, ch][outside] = gray[outside]
    return pop


_PIL_MODES = {1: "L", 2: "LA", 3: "RGB", 4: "RGBA"}


def load_image(path: str | Path, channels: int = 0) -> OwnedImageBuffer:
    """Loads an 8-bit image; ``channels=0`` keeps the file's channel layout."""
    if channels not in (0, 1, 2, 3, 4):
        raise ValueError(f"`channels` must be in [0, 4], got {channels}")
    image_path = Path(path)
    if not image_path.exists():
        raise FileNotFoundError(f"image file not found: {image_path}")
    with Image.open(image_path) as img:
        if channels == 0:
            if img.mode in ("L", "LA", "RGB", "RGBA"):
                mode = img.mode
            elif img.mode == "P" and "transparency" in img.info:
                mode = "RGBA"
            else:
                mode = "RGB"
        else:
            mode = _PIL_MODES[channels]
        data = np.asarray(img.convert(mode), dtype=np.uint8)
    LOGGER.debug("loaded %s as %s", image_path, data.shape)
    return OwnedImageBuffer(data)


def save_image(path: str | Path, image: ImageBuffer) -> None:
    image_path = Path(path)
    suffix = image_path.suffix.lower()
    if suffix not in (".png", ".jpg", ".jpeg"):
        raise ValueError(f"only .png and .jpg/.jpeg files are supported, got `{image_path.name}`")
    data = image._require_data()
    if image.buffer_type != ImageBufferType.UINT8:
        raise ValueError(f"only uint8 buffers can be saved, got {image!r}")
    if image.channels not in _PIL_MODES:
        raise ValueError(f"cannot save a {image.channels}-channel buffer")
    if suffix != ".png" and image.channels in (2, 4):
        raise ValueError("JPEG files cannot store an alpha channel")
    pixels = np.ascontiguousarray(data)
    if image.channels == 1:
        pixels = pixels[:, :, 0]
    Image.fromarray(pixels).save(image_path)
