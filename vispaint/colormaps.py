from __future__ import annotations

from enum import Enum
import logging
import math
from typing import Any, Sequence

import numpy as np

from vispaint.colors import Color, rgba255
from vispaint.imagebuffer import (
    ImageBuffer,
    ImageBufferType,
    OwnedImageBuffer,
    convert_hsv2rgb,
)

LOGGER = logging.getLogger(__name__)

TABLE_SIZE = 256


class ColorMap(str, Enum):
    BLACK_BODY = "black-body"
    CIVIDIS = "cividis"
    COLD = "cold"
    COLOR_BLIND = "color-blind"
    DISPARITY = "disparity"
    EARTH = "earth"
    GLASBEY_DARK = "glasbey-dark"
    GLASBEY_LIGHT = "glasbey-light"
    GOULDIAN = "gouldian"
    GRAY = "gray"
    HELL = "hell"
    HOT = "hot"
    HSV = "hsv"
    INFERNO = "inferno"
    OCEAN = "ocean"
    OPTICAL_FLOW = "optical-flow"
    ORIENTATION = "orientation"
    ORIENTATION_4 = "orientation-4"
    ORIENTATION_6 = "orientation-6"
    ORIENTATION_COLOR_BLIND = "orientation-color-blind"
    RAINBOW = "rainbow"
    RELIEF = "relief"
    RELIEF_LOW_CONTRAST = "relief-low-contrast"
    TEMPERATURE = "temperature"
    TEMPERATURE_DARK = "temperature-dark"
    TERRAIN = "terrain"
    THERMAL = "thermal"
    TURBO = "turbo"
    VIRIDIS = "viridis"
    WATER = "water"
    YARG = "yarg"

    @classmethod
    def from_string(cls, text: str) -> ColorMap:
        raw = text.strip().lower()
        if raw in ("-gray", "!gray", "-grey", "!grey"):
            return cls.YARG
        slug = "".join(ch for ch in raw if not ch.isspace() and ch not in "-_")
        try:
            return _SLUGS[slug]
        except KeyError:
            raise ValueError(f"unknown colormap `{text}`") from None

    def to_string(self) -> str:
        return self.value


_SLUGS: dict[str, ColorMap] = {cm.value.replace("-", ""): cm for cm in ColorMap}
_SLUGS.update(
    {
        "grey": ColorMap.GRAY,
        "yerg": ColorMap.YARG,
        "reliefisoluminant": ColorMap.RELIEF_LOW_CONTRAST,
        "blackbody": ColorMap.BLACK_BODY,
    }
)


def as_colormap(value: ColorMap | str) -> ColorMap:
    return value if isinstance(value, ColorMap) else ColorMap.from_string(value)


def list_colormaps() -> list[ColorMap]:
    return list(ColorMap)


# Control points: (position in [0, 1], (r, g, b) in [0, 255]).
_ControlPoints = Sequence[tuple[float, tuple[int, int, int]]]

_LINEAR: dict[ColorMap, _ControlPoints] = {
    ColorMap.BLACK_BODY: [
        (0.0, (0, 0, 0)),
        (0.39, (178, 34, 34)),
        (0.58, (227, 105, 5)),
        (0.84, (238, 210, 20)),
        (1.0, (255, 255, 255)),
    ],
    ColorMap.CIVIDIS: [
        (0.0, (0, 34, 78)),
        (0.25, (61, 78, 108)),
        (0.5, (124, 123, 120)),
        (0.75, (188, 175, 111)),
        (1.0, (254, 232, 56)),
    ],
    ColorMap.COLD: [
        (0.0, (0, 0, 0)),
        (0.33, (0, 0, 130)),
        (0.66, (0, 150, 255)),
        (1.0, (230, 255, 255)),
    ],
    ColorMap.COLOR_BLIND: [
        (0.0, (17, 17, 17)),
        (0.3, (36, 74, 158)),
        (0.55, (122, 128, 140)),
        (0.8, (206, 178, 80)),
        (1.0, (255, 236, 126)),
    ],
    ColorMap.DISPARITY: [
        (0.0, (0, 0, 0)),
        (0.114, (0, 0, 255)),
        (0.299, (255, 0, 0)),
        (0.413, (255, 0, 255)),
        (0.587, (0, 255, 0)),
        (0.701, (0, 255, 255)),
        (0.886, (255, 255, 0)),
        (1.0, (255, 255, 255)),
    ],
    ColorMap.EARTH: [
        (0.0, (0, 0, 60)),
        (0.25, (0, 90, 170)),
        (0.45, (40, 140, 90)),
        (0.65, (150, 160, 80)),
        (0.85, (150, 110, 70)),
        (1.0, (255, 255, 255)),
    ],
    ColorMap.GOULDIAN: [
        (0.0, (46, 46, 46)),
        (0.25, (53, 72, 150)),
        (0.5, (52, 140, 120)),
        (0.75, (145, 190, 50)),
        (1.0, (253, 238, 51)),
    ],
    ColorMap.GRAY: [(0.0, (0, 0, 0)), (1.0, (255, 255, 255))],
    ColorMap.HELL: [
        (0.0, (0, 0, 0)),
        (0.25, (76, 14, 96)),
        (0.5, (182, 43, 75)),
        (0.75, (245, 138, 44)),
        (1.0, (255, 250, 200)),
    ],
    ColorMap.HOT: [
        (0.0, (10, 0, 0)),
        (0.375, (255, 0, 0)),
        (0.75, (255, 255, 0)),
        (1.0, (255, 255, 255)),
    ],
    ColorMap.INFERNO: [
        (0.0, (0, 0, 4)),
        (0.125, (40, 11, 84)),
        (0.25, (87, 16, 110)),
        (0.375, (136, 34, 106)),
        (0.5, (188, 55, 84)),
        (0.625, (228, 90, 49)),
        (0.75, (249, 142, 9)),
        (0.875, (245, 219, 76)),
        (1.0, (252, 255, 164)),
    ],
    ColorMap.OCEAN: [
        (0.0, (0, 80, 0)),
        (0.33, (0, 20, 85)),
        (0.66, (0, 125, 200)),
        (1.0, (255, 255, 255)),
    ],
    ColorMap.RAINBOW: [
        (0.0, (0, 0, 255)),
        (0.25, (0, 255, 255)),
        (0.5, (0, 255, 0)),
        (0.75, (255, 255, 0)),
        (1.0, (255, 0, 0)),
    ],
    ColorMap.RELIEF: [
        (0.0, (0, 0, 70)),
        (0.2, (0, 80, 170)),
        (0.4, (120, 200, 230)),
        (0.5, (40, 120, 50)),
        (0.7, (200, 190, 100)),
        (0.85, (140, 90, 50)),
        (1.0, (250, 250, 250)),
    ],
    ColorMap.RELIEF_LOW_CONTRAST: [
        (0.0, (60, 120, 180)),
        (0.3, (90, 160, 190)),
        (0.5, (110, 170, 120)),
        (0.75, (170, 160, 110)),
        (1.0, (200, 170, 150)),
    ],
    ColorMap.TEMPERATURE: [
        (0.0, (5, 48, 97)),
        (0.25, (67, 147, 195)),
        (0.5, (247, 247, 247)),
        (0.75, (214, 96, 77)),
        (1.0, (103, 0, 31)),
    ],
    ColorMap.TEMPERATURE_DARK: [
        (0.0, (57, 170, 250)),
        (0.25, (30, 80, 140)),
        (0.5, (20, 20, 20)),
        (0.75, (150, 40, 40)),
        (1.0, (255, 100, 80)),
    ],
    ColorMap.TERRAIN: [
        (0.0, (51, 51, 153)),
        (0.15, (0, 153, 255)),
        (0.25, (0, 204, 102)),
        (0.5, (255, 255, 153)),
        (0.75, (128, 92, 84)),
        (1.0, (255, 255, 255)),
    ],
    ColorMap.THERMAL: [
        (0.0, (0, 0, 0)),
        (0.2, (60, 0, 110)),
        (0.45, (190, 30, 90)),
        (0.7, (250, 120, 0)),
        (0.9, (255, 230, 60)),
        (1.0, (255, 255, 255)),
    ],
    ColorMap.TURBO: [
        (0.0, (48, 18, 59)),
        (0.1, (69, 91, 205)),
        (0.2, (57, 162, 252)),
        (0.3, (27, 229, 181)),
        (0.4, (100, 253, 106)),
        (0.5, (164, 252, 60)),
        (0.6, (225, 221, 55)),
        (0.7, (254, 164, 49)),
        (0.8, (239, 90, 17)),
        (0.9, (194, 36, 3)),
        (1.0, (122, 4, 3)),
    ],
    ColorMap.VIRIDIS: [
        (0.0, (68, 1, 84)),
        (0.125, (71, 44, 122)),
        (0.25, (59, 82, 139)),
        (0.375, (44, 114, 142)),
        (0.5, (33, 145, 140)),
        (0.625, (39, 173, 129)),
        (0.75, (94, 201, 98)),
        (0.875, (170, 220, 50)),
        (1.0, (253, 231, 37)),
    ],
    ColorMap.WATER: [
        (0.0, (255, 255, 255)),
        (0.4, (150, 200, 230)),
        (0.75, (40, 100, 180)),
        (1.0, (5, 20, 80)),
    ],
    ColorMap.YARG: [(0.0, (255, 255, 255)), (1.0, (0, 0, 0))],
}

# Cyclic maps wrap around: the last control point equals the first.
_CYCLIC: dict[ColorMap, _ControlPoints] = {
    ColorMap.HSV: [
        (0.0, (255, 0, 0)),
        (1 / 6, (255, 255, 0)),
        (2 / 6, (0, 255, 0)),
        (3 / 6, (0, 255, 255)),
        (4 / 6, (0, 0, 255)),
        (5 / 6, (255, 0, 255)),
        (1.0, (255, 0, 0)),
    ],
    # Middlebury color wheel (15 red-yellow, 6 yellow-green, 4 green-cyan,
    # 11 cyan-blue, 13 blue-magenta, 6 magenta-red segments).
    ColorMap.OPTICAL_FLOW: [
        (0.0, (255, 0, 0)),
        (15 / 55, (255, 255, 0)),
        (21 / 55, (0, 255, 0)),
        (25 / 55, (0, 255, 255)),
        (36 / 55, (0, 0, 255)),
        (49 / 55, (255, 0, 255)),
        (1.0, (255, 0, 0)),
    ],
    ColorMap.ORIENTATION: [
        (0.0, (239, 85, 241)),
        (0.25, (252, 206, 50)),
        (0.5, (75, 199, 56)),
        (0.75, (50, 126, 243)),
        (1.0, (239, 85, 241)),
    ],
    ColorMap.ORIENTATION_4: [
        (0.0, (239, 85, 241)),
        (0.125, (239, 85, 241)),
        (0.25, (252, 206, 50)),
        (0.375, (252, 206, 50)),
        (0.5, (75, 199, 56)),
        (0.625, (75, 199, 56)),
        (0.75, (50, 126, 243)),
        (0.875, (50, 126, 243)),
        (1.0, (239, 85, 241)),
    ],
    ColorMap.ORIENTATION_6: [
        (0.0, (230, 60, 60)),
        (1 / 6, (240, 200, 40)),
        (2 / 6, (100, 200, 60)),
        (3 / 6, (40, 190, 200)),
        (4 / 6, (60, 90, 230)),
        (5 / 6, (200, 70, 210)),
        (1.0, (230, 60, 60)),
    ],
    ColorMap.ORIENTATION_COLOR_BLIND: [
        (0.0, (44, 110, 220)),
        (0.25, (170, 170, 170)),
        (0.5, (230, 190, 40)),
        (0.75, (70, 70, 70)),
        (1.0, (44, 110, 220)),
    ],
}


def _interpolate(points: _ControlPoints, positions: np.ndarray) -> np.ndarray:
    xs = np.array([p for p, _ in points], dtype=np.float64)
    rgb = np.array([c for _, c in points], dtype=np.float64)
    table = np.stack([np.interp(positions, xs, rgb[:, ch]) for ch in range(3)], axis=1)
    return np.clip(np.rint(table), 0, 255).astype(np.uint8)


def _glasbey(light: bool) -> np.ndarray:
    """Categorical table: golden-ratio hue steps with alternating saturation/value."""
    idx = np.arange(TABLE_SIZE, dtype=np.float64)
    hue = np.mod(idx * 0.618033988749895, 1.0) * 180.0
    if light:
        sat = 0.35 + 0.35 * np.mod(idx * 0.381966, 1.0)
        val = 0.85 + 0.15 * np.mod(idx, 3) / 2.0
    else:
        sat = 0.65 + 0.35 * np.mod(idx * 0.381966, 1.0)
        val = 0.45 + 0.3 * np.mod(idx, 3) / 2.0
    hsv = np.stack((hue, 255.0 * sat, 255.0 * val), axis=1).astype(np.uint8)
    rgb = convert_hsv2rgb(ImageBuffer.from_array(hsv[np.newaxis, :, :]))
    return rgb.array[0]


def _build_tables() -> dict[ColorMap, np.ndarray]:
    tables: dict[ColorMap, np.ndarray] = {}
    linear_positions = np.linspace(0.0, 1.0, TABLE_SIZE)
    cyclic_positions = np.arange(TABLE_SIZE, dtype=np.float64) / TABLE_SIZE
    for cmap, points in _LINEAR.items():
        tables[cmap] = _interpolate(points, linear_positions)
    for cmap, points in _CYCLIC.items():
        tables[cmap] = _interpolate(points, cyclic_positions)
    tables[ColorMap.GLASBEY_DARK] = _glasbey(light=False)
    tables[ColorMap.GLASBEY_LIGHT] = _glasbey(light=True)
    for table in tables.values():
        table.setflags(write=False)
    return tables


_TABLES = _build_tables()


def colormap_table(colormap: ColorMap | str) -> np.ndarray:
    """The read-only (256, 3) uint8 lookup table of a colormap."""
    cmap = as_colormap(colormap)
    if cmap not in _TABLES:
        raise RuntimeError(f"colormap `{cmap.value}` has no lookup table")
    return _TABLES[cmap]


def is_cyclic(colormap: ColorMap | str) -> bool:
    return as_colormap(colormap) in _CYCLIC


def _single_channel(data: ImageBuffer | Any, operation: str) -> np.ndarray:
    buffer = data if isinstance(data, ImageBuffer) else ImageBuffer.from_array(data, copy=False)
    if not buffer.is_valid():
        raise ValueError(f"`{operation}` needs a valid buffer")
    if buffer.channels != 1:
        raise ValueError(f"`{operation}` needs a single-channel buffer, got {buffer.channels} channels")
    return buffer.array[:, :, 0]


def _data_limits(values: np.ndarray) -> tuple[float, float]:
    finite = values[np.isfinite(values)]
    if finite.size == 0:
        return float("nan"), float("nan")
    return float(finite.min()), float(finite.max())


def _validate_colorization(bins: int, output_channels: int) -> None:
    if not 2 <= bins <= 256:
        raise ValueError(f"`bins` must be in [2, 256], got {bins}")
    if output_channels not in (3, 4):
        raise ValueError(f"`output_channels` must be 3 or 4, got {output_channels}")


def colorize(
    data: ImageBuffer | Any,
    colormap: ColorMap | str,
    low: float = float("nan"),
    high: float = float("nan"),
    output_channels: int = 3,
    bins: int = 256,
) -> OwnedImageBuffer:
    """Maps a single-channel buffer to colors.

    Values are clamped to ``[low, high]`` and quantized into ``bins`` equally
    sized bins, which are spread evenly over the colormap's table. If either
    limit is non-finite, both are taken from the data minimum/maximum.
    """
    values = _single_channel(data, "colorize").astype(np.float64)
    _validate_colorization(bins, output_channels)
    if not (math.isfinite(low) and math.isfinite(high)):
        low, high = _data_limits(values)
    if not high > low:
        raise ValueError(f"`high` must be > `low`, got [{low}, {high}]")
    table = colormap_table(colormap)
    num_bins = bins - 1
    factor = 255.0 / num_bins
    interval = (high - low) / num_bins
    clamped = np.clip(np.nan_to_num(values, nan=low), low, high)
    bin_idx = factor * np.floor((clamped - low) / interval)
    lookup = np.clip(bin_idx, 0, 255).astype(np.intp)
    out = np.empty(values.shape + (output_channels,), dtype=np.uint8)
    out[:, :, :3] = table[lookup]
    if output_channels == 4:
        out[:, :, 3] = 255
    return OwnedImageBuffer(out)


class LimitsMode(str, Enum):
    FIXED = "fixed"
    CONTINUOUS = "continuous"
    ONCE = "once"

    @classmethod
    def from_string(cls, text: str) -> LimitsMode:
        slug = text.strip().lower()
        if slug.startswith("fix"):
            return cls.FIXED
        if slug.startswith("cont"):
            return cls.CONTINUOUS
        if slug == "once":
            return cls.ONCE
        raise ValueError(f"cannot parse limits mode from `{text}`")


class Colorizer:
    """Applies a colormap with a fixed configuration to a stream of inputs.

    Limits are either fixed, recomputed from every input (``continuous``) or
    computed from the first input, after which the mode becomes fixed
    (``once``). Assigning `low` or `high` switches to fixed limits and is
    validated immediately.
    """

    def __init__(
        self,
        colormap: ColorMap | str,
        limits_mode: LimitsMode | str = LimitsMode.CONTINUOUS,
        bins: int = 256,
        output_channels: int = 3,
        low: float = float("nan"),
        high: float = float("nan"),
    ) -> None:
        self.colormap = as_colormap(colormap)
        self.limits_mode = limits_mode if isinstance(limits_mode, LimitsMode) else LimitsMode.from_string(limits_mode)
        self.bins = int(bins)
        self.output_channels = int(output_channels)
        self._low = float(low)
        self._high = float(high)
        self.validate()

    def validate(self) -> None:
        _validate_colorization(self.bins, self.output_channels)
        if self.limits_mode == LimitsMode.FIXED:
            if not (math.isfinite(self._low) and math.isfinite(self._high)):
                raise ValueError("fixed limits must be finite")
            if self._low >= self._high:
                raise ValueError(f"`low` must be < `high`, got [{self._low}, {self._high}]")

    @property
    def low(self) -> float:
        return self._low

    @low.setter
    def low(self, value: float) -> None:
        self._fix_limits(float(value), self._high)

    @property
    def high(self) -> float:
        return self._high

    @high.setter
    def high(self, value: float) -> None:
        self._fix_limits(self._low, float(value))

    def _fix_limits(self, low: float, high: float) -> None:
        previous = (self.limits_mode, self._low, self._high)
        self.limits_mode, self._low, self._high = LimitsMode.FIXED, low, high
        try:
            self.validate()
        except ValueError:
            self.limits_mode, self._low, self._high = previous
            raise

    def __call__(self, data: ImageBuffer | Any) -> OwnedImageBuffer:
        if self.limits_mode != LimitsMode.FIXED:
            values = _single_channel(data, "Colorizer").astype(np.float64)
            self._low, self._high = _data_limits(values)
            if self.limits_mode == LimitsMode.ONCE:
                LOGGER.debug("Colorizer limits computed once: [%s, %s]", self._low, self._high)
                self.limits_mode = LimitsMode.FIXED
        return colorize(data, self.colormap, self._low, self._high, self.output_channels, self.bins)

    def __repr__(self) -> str:
        return (
            f"Colorizer({self.colormap.value}, {self.limits_mode.value}, bins={self.bins}, "
            f"channels={self.output_channels}, low={self._low}, high={self._high})"
        )


def peaks(height: int, width: int) -> OwnedImageBuffer:
    """MATLAB's ``peaks`` surface sampled on [-3, 3) as a double buffer."""
    if height <= 0 or width <= 0:
        raise ValueError(f"`height` and `width` must be > 0, got {height}x{width}")
    x = -3.0 + np.arange(width, dtype=np.float64) * (6.0 / width)
    y = -3.0 + np.arange(height, dtype=np.float64) * (6.0 / height)
    xx, yy = np.meshgrid(x, y)
    z = (
        3.0 * (1.0 - xx) ** 2 * np.exp(-(xx**2) - (yy + 1.0) ** 2)
        - 10.0 * (xx / 5.0 - xx**3 - yy**5) * np.exp(-(xx**2) - yy**2)
        - np.exp(-((xx + 1.0) ** 2) - yy**2) / 3.0
    )
    return OwnedImageBuffer(z)


def relief_shading(relief: ImageBuffer, colorized: ImageBuffer) -> OwnedImageBuffer:
    """Multiplies the colors of a colorized (uint8) image by a float relief."""
    shade = _single_channel(relief, "relief_shading")
    if not relief.buffer_type.is_floating:
        raise ValueError(f"relief must be float or double, got {relief.buffer_type.value}")
    if colorized.buffer_type != ImageBufferType.UINT8 or colorized.channels not in (3, 4):
        raise ValueError(f"colorized image must be 3- or 4-channel uint8, got {colorized!r}")
    if shade.shape != colorized.array.shape[:2]:
        raise ValueError(f"relief {relief!r} and colorized image {colorized!r} differ in size")
    out = colorized.array.copy()
    out[:, :, :3] = np.clip(out[:, :, :3].astype(np.float64) * shade[:, :, np.newaxis], 0, 255).astype(np.uint8)
    return OwnedImageBuffer(out)


def category_color(category_id: int, colormap: ColorMap | str = ColorMap.GLASBEY_DARK) -> Color:
    table = colormap_table(colormap)
    r, g, b = (int(c) for c in table[int(category_id) % len(table)])
    return rgba255(r, g, b)
