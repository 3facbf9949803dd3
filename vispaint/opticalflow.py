"""Middlebury ``.flo`` file I/O and color wheel visualization of optical flow."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import numpy as np

from vispaint.colormaps import ColorMap, colormap_table
from vispaint.colors import Color
from vispaint.errors import OpticalFlowFileError
from vispaint.imagebuffer import ImageBuffer, OwnedImageBuffer
from vispaint.positioning import Anchor
from vispaint.raster.canvas import Canvas
from vispaint.raster.draw_image import draw_image
from vispaint.raster.draw_lines import draw_line
from vispaint.raster.draw_shapes import draw_circle
from vispaint.styles import LineStyle

LOGGER = logging.getLogger(__name__)

FLO_MAGIC = 202021.25
FLO_TAG = b"PIEH"
_HEADER_BYTES = 12


def load_optical_flow(path: str | Path) -> OwnedImageBuffer:
    """Loads a ``.flo`` file into a 2-channel float32 buffer."""
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"optical flow file not found: {file_path}")
    raw = file_path.read_bytes()
    if len(raw) < 4:
        raise OpticalFlowFileError(f"optical flow file is truncated: {file_path}")
    magic = float(np.frombuffer(raw, dtype="<f4", count=1)[0])
    if magic != FLO_MAGIC:
        raise OpticalFlowFileError(
            f"invalid magic number {magic:.2f} instead of {FLO_MAGIC:.2f} in `{file_path}`"
        )
    if len(raw) < _HEADER_BYTES:
        raise OpticalFlowFileError(f"cannot read the flow dimensions from `{file_path}`")
    width, height = (int(v) for v in np.frombuffer(raw, dtype="<i4", count=2, offset=4))
    if width <= 0 or height <= 0:
        raise OpticalFlowFileError(f"invalid flow dimensions {width}x{height} in `{file_path}`")
    expected = width * height * 2
    if (len(raw) - _HEADER_BYTES) // 4 < expected:
        raise OpticalFlowFileError(
            f"`{file_path}` holds less than the {expected} flow values its header announces"
        )
    values = np.frombuffer(raw, dtype="<f4", count=expected, offset=_HEADER_BYTES)
    LOGGER.debug("loaded %dx%d optical flow from %s", width, height, file_path)
    return OwnedImageBuffer(values.astype(np.float32).reshape(height, width, 2))


def save_optical_flow(path: str | Path, flow: ImageBuffer) -> None:
    if not str(path):
        raise ValueError("`path` must not be empty")
    data = flow.array if isinstance(flow, ImageBuffer) else np.asarray(flow)
    if data is None or data.ndim != 3 or data.shape[2] != 2:
        raise ValueError(f"optical flow must be a 2-channel buffer, got {flow!r}")
    height, width = data.shape[:2]
    header = FLO_TAG + np.array([width, height], dtype="<i4").tobytes()
    payload = np.ascontiguousarray(data.astype("<f4")).tobytes()
    with open(path, "wb") as handle:
        handle.write(header)
        handle.write(payload)


def _require_flow(flow: ImageBuffer | Any) -> np.ndarray:
    buffer = flow if isinstance(flow, ImageBuffer) else ImageBuffer.from_array(flow, copy=False)
    if not buffer.is_valid() or buffer.channels != 2:
        raise ValueError(f"optical flow must be a valid 2-channel buffer, got {buffer!r}")
    if not buffer.buffer_type.is_floating:
        raise ValueError(f"optical flow must be float or double, got `{buffer.buffer_type.value}`")
    return buffer.array


def _check_output_channels(output_channels: int) -> None:
    if output_channels not in (3, 4):
        raise ValueError(f"`output_channels` must be 3 or 4, got {output_channels}")


def _wheel_colors(u: np.ndarray, v: np.ndarray, max_radius: float, colormap: ColorMap | str) -> np.ndarray:
    wheel = colormap_table(colormap).astype(np.float64)
    wheel_size = wheel.shape[0]
    unknown = ~(np.isfinite(u) & np.isfinite(v))
    u = np.where(unknown, 0.0, u)
    v = np.where(unknown, 0.0, v)
    radius = np.sqrt(u * u + v * v) / max_radius
    angle = np.arctan2(-v, -u) / np.pi
    fk = (angle + 1.0) / 2.0 * (wheel_size - 1)
    k0 = fk.astype(np.int64)
    k1 = (k0 + 1) % wheel_size
    f = (fk - k0)[..., np.newaxis]
    color = (1.0 - f) * wheel[k0] + f * wheel[k1]

    radius = radius[..., np.newaxis]
    saturated = 255.0 - radius * (255.0 - color)
    color = np.where(radius <= 1.0, saturated, color * 0.75)
    return np.clip(color, 0.0, 255.0).astype(np.uint8)


def _with_alpha(rgb: np.ndarray, output_channels: int) -> OwnedImageBuffer:
    if output_channels == 4:
        alpha = np.full(rgb.shape[:2] + (1,), 255, dtype=np.uint8)
        rgb = np.concatenate((rgb, alpha), axis=2)
    return OwnedImageBuffer(rgb)


def colorize_optical_flow(
    flow: ImageBuffer | Any,
    colormap: ColorMap | str = ColorMap.ORIENTATION_6,
    motion_normalizer: float = 1.0,
    output_channels: int = 3,
) -> OwnedImageBuffer:
    """Maps flow direction to a color wheel hue and flow magnitude to saturation.

    Vectors longer than ``motion_normalizer`` are dimmed instead. Non-finite
    vectors are shown as zero motion (white).
    """
    _check_output_channels(output_channels)
    if motion_normalizer <= 0.0:
        raise ValueError(f"`motion_normalizer` must be > 0, got {motion_normalizer}")
    data = _require_flow(flow).astype(np.float64)
    rgb = _wheel_colors(data[:, :, 0], data[:, :, 1], motion_normalizer, colormap)
    return _with_alpha(rgb, output_channels)


def optical_flow_legend(
    size: int,
    colormap: ColorMap | str = ColorMap.ORIENTATION_6,
    line_style: LineStyle | None = None,
    draw_circle_outline: bool = False,
    clip_circle: bool = False,
    output_channels: int = 3,
) -> OwnedImageBuffer:
    """Renders the color wheel for flow vectors in [-1, 1] x [-1, 1].

    Circular clipping needs an alpha channel and is ignored for RGB output.
    """
    _check_output_channels(output_channels)
    if size < 2:
        raise ValueError(f"`size` must be >= 2, got {size}")
    steps = np.linspace(-1.0, 1.0, size)
    u, v = np.meshgrid(steps, steps)
    legend = _with_alpha(_wheel_colors(u, v, 1.0, colormap), 4)

    half = size / 2.0
    if line_style is not None and line_style.is_valid():
        canvas = Canvas(legend)
        if draw_circle_outline:
            draw_circle(canvas.context, (half, half), half - line_style.width / 2.0, line_style)
        offset = line_style.width if draw_circle_outline else 0.0
        draw_line(canvas.context, (half, offset), (half, size - offset), line_style)
        draw_line(canvas.context, (offset, half), (size - offset, half), line_style)
        legend = canvas.pixels(copy=True)
        canvas.finish()

    if clip_circle and output_channels == 4:
        clipped = OwnedImageBuffer(np.zeros((size, size, 4), dtype=np.uint8))
        canvas = Canvas(clipped)
        canvas.fill(Color(1.0, 1.0, 1.0, 0.0))
        draw_image(canvas.context, legend, (half, half), Anchor.CENTER, clip_factor=1.0)
        legend = canvas.pixels(copy=True)
        canvas.finish()
        return legend
    return legend.to_channels(output_channels)
