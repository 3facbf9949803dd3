from __future__ import annotations

import logging
import math

import cairo
import numpy as np

from vispaint.colors import WHITE, Color, as_color
from vispaint.imagebuffer import OwnedImageBuffer
from vispaint.primitives import Rect, Vec2d, as_vec2d
from vispaint.raster.canvas import Canvas, cairo_rgba, saved_state
from vispaint.raster.draw_shapes import rect_path

LOGGER = logging.getLogger(__name__)


class ColorGradient:
    """Ordered color stops along a gradient; subclasses define the geometry."""

    def __init__(self) -> None:
        self._stops: list[tuple[float, Color]] = []

    @property
    def color_stops(self) -> list[tuple[float, Color]]:
        return list(self._stops)

    def add_color_stop(self, offset: float, color: Color | str) -> bool:
        if not 0.0 <= offset <= 1.0:
            LOGGER.warning("%s", f"ignoring color stop at offset {offset}, only values in [0, 1] are accepted")
            return False
        color = as_color(color)
        if color is None:
            raise ValueError("a color stop needs a color")
        self._stops.append((float(offset), color))
        return True

    def add_intensity_stop(self, offset: float, intensity: float, alpha: float = 1.0) -> bool:
        return self.add_color_stop(offset, Color(intensity, intensity, intensity, alpha))

    def is_valid(self) -> bool:
        return len(self._stops) >= 2

    def _create_pattern(self) -> cairo.Gradient:
        raise NotImplementedError

    def pattern(self) -> cairo.Gradient:
        if not self.is_valid():
            raise ValueError(f"a gradient needs at least 2 color stops, got {len(self._stops)}")
        pattern = self._create_pattern()
        for offset, color in self._stops:
            pattern.add_color_stop_rgba(offset, *cairo_rgba(color))
        return pattern


class LinearColorGradient(ColorGradient):
    def __init__(self, start: Vec2d, end: Vec2d) -> None:
        super().__init__()
        self.start = as_vec2d(start)
        self.end = as_vec2d(end)

    def _create_pattern(self) -> cairo.Gradient:
        return cairo.LinearGradient(self.start.x, self.start.y, self.end.x, self.end.y)

    def __repr__(self) -> str:
        return f"LinearColorGradient({self.start} -> {self.end}, {len(self._stops)} stops)"


class RadialColorGradient(ColorGradient):
    """Blends between two circles (``center_start``/``radius_start`` to ``center_end``/``radius_end``)."""

    def __init__(self, center_start: Vec2d, radius_start: float, center_end: Vec2d, radius_end: float) -> None:
        super().__init__()
        self.center_start = as_vec2d(center_start)
        self.radius_start = float(radius_start)
        self.center_end = as_vec2d(center_end)
        self.radius_end = float(radius_end)

    def _create_pattern(self) -> cairo.Gradient:
        return cairo.RadialGradient(
            self.center_start.x, self.center_start.y, self.radius_start,
            self.center_end.x, self.center_end.y, self.radius_end,
        )

    def __repr__(self) -> str:
        return (
            f"RadialColorGradient({self.center_start}, r={self.radius_start} -> "
            f"{self.center_end}, r={self.radius_end}, {len(self._stops)} stops)"
        )


def paint_gradient(context: cairo.Context, gradient: ColorGradient, clip_rect: Rect | None = None) -> None:
    """Paints the gradient onto the whole surface, or only inside ``clip_rect``."""
    pattern = gradient.pattern()
    with saved_state(context):
        context.new_path()
        if clip_rect is not None:
            if not clip_rect.is_valid():
                raise ValueError(f"cannot clip to an invalid rectangle: {clip_rect!r}")
            with saved_state(context):
                context.translate(clip_rect.cx, clip_rect.cy)
                context.rotate(math.radians(clip_rect.rotation))
                rect_path(context, clip_rect)
            context.clip()
        context.set_source(pattern)
        context.paint()


def draw_color_gradient(
    gradient: ColorGradient,
    width: int,
    height: int,
    channels: int = 3,
    fill_color: Color = WHITE,
) -> OwnedImageBuffer:
    """Renders a gradient on top of ``fill_color``.

    With ``channels == 1`` the result is a float64 mask in [0, 1] taken from
    the red channel, e.g. to use as per-pixel weights for `ImageBuffer.blend`.
    """
    if channels not in (1, 3, 4):
        raise ValueError(f"`channels` must be 1, 3 or 4, got {channels}")
    pixels = OwnedImageBuffer.allocate(height, width, 4)
    canvas = Canvas(pixels)
    canvas.fill(as_color(fill_color))
    paint_gradient(canvas.context, gradient)
    rendered = canvas.pixels(copy=True)
    canvas.finish()
    if channels == 1:
        return OwnedImageBuffer(rendered.array[:, :, 0:1].astype(np.float64) / 255.0)
    return rendered.to_channels(channels)
