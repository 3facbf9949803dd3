from __future__ import annotations

from contextlib import contextmanager
import logging
from typing import Iterator

import cairo
import numpy as np

from vispaint.colors import Color
from vispaint.config import DEFAULT_MITER_LIMIT
from vispaint.errors import CanvasNotInitializedError
from vispaint.imagebuffer import ImageBuffer, ImageBufferType, OwnedImageBuffer, SharedImageBuffer
from vispaint.primitives import Vec2d, as_vec2d
from vispaint.styles import LineCap, LineJoin, LineStyle

LOGGER = logging.getLogger(__name__)

_CAIRO_CAPS = {
    LineCap.BUTT: cairo.LINE_CAP_BUTT,
    LineCap.ROUND: cairo.LINE_CAP_ROUND,
    LineCap.SQUARE: cairo.LINE_CAP_SQUARE,
}

_CAIRO_JOINS = {
    LineJoin.MITER: cairo.LINE_JOIN_MITER,
    LineJoin.ROUND: cairo.LINE_JOIN_ROUND,
    LineJoin.BEVEL: cairo.LINE_JOIN_BEVEL,
}


class Canvas:
    """A 4-channel uint8 pixel buffer bound to a cairo surface and context.

    Cairo's ARGB32 format stores pixels as B, G, R, A bytes on little-endian
    hosts. Colors are therefore passed to cairo with red and blue swapped, so
    the buffer reads as RGBA.
    """

    def __init__(self, pixels: OwnedImageBuffer) -> None:
        if pixels.buffer_type != ImageBufferType.UINT8 or pixels.channels != 4:
            raise ValueError(f"canvas memory must be 4-channel uint8, got {pixels!r}")
        self._pixels = pixels
        height, width = pixels.height, pixels.width
        stride = cairo.ImageSurface.format_stride_for_width(cairo.FORMAT_ARGB32, width)
        if stride != pixels.row_stride:
            raise RuntimeError(f"cairo needs a row stride of {stride} bytes, buffer has {pixels.row_stride}")
        self.surface = cairo.ImageSurface.create_for_data(
            pixels.array, cairo.FORMAT_ARGB32, width, height, stride
        )
        self.context = cairo.Context(self.surface)
        self.context.set_miter_limit(DEFAULT_MITER_LIMIT)
        LOGGER.debug("bound cairo surface to %dx%d canvas", width, height)

    @property
    def width(self) -> int:
        return self._pixels.width

    @property
    def height(self) -> int:
        return self._pixels.height

    def fill(self, color: Color) -> None:
        with saved_state(self.context) as ctx:
            ctx.set_operator(cairo.OPERATOR_SOURCE)
            apply_color(ctx, color)
            ctx.paint()

    def pixels(self, copy: bool) -> ImageBuffer:
        self.surface.flush()
        if copy:
            return self._pixels.copy()
        return SharedImageBuffer(self._pixels.array)

    def finish(self) -> None:
        self.surface.finish()


def require_canvas(canvas: Canvas | None) -> Canvas:
    if canvas is None:
        raise CanvasNotInitializedError("canvas has not been set up, call `set_canvas` first")
    return canvas


@contextmanager
def saved_state(context: cairo.Context) -> Iterator[cairo.Context]:
    context.save()
    try:
        yield context
    finally:
        context.restore()


def cairo_rgba(color: Color) -> tuple[float, float, float, float]:
    return (color.blue, color.green, color.red, color.alpha)


def apply_color(context: cairo.Context, color: Color) -> None:
    context.set_source_rgba(*cairo_rgba(color))


def apply_line_style(context: cairo.Context, style: LineStyle, ignore_dash: bool = False) -> None:
    if style.color is None:
        raise ValueError("cannot stroke with a line style without color")
    context.set_line_width(style.width)
    context.set_line_cap(_CAIRO_CAPS[style.cap])
    context.set_line_join(_CAIRO_JOINS[style.join])
    apply_color(context, style.color)
    if style.is_dashed() and not ignore_dash:
        context.set_dash(list(style.dash_pattern), style.dash_offset)
    else:
        context.set_dash([])


def fill_and_stroke(context: cairo.Context, line_style: LineStyle | None, fill_color: Color | None) -> None:
    """Fills the current path (if a fill color is set), then strokes it."""
    if fill_color is not None:
        apply_color(context, fill_color)
        context.fill_preserve()
    if line_style is not None and line_style.is_valid():
        apply_line_style(context, line_style)
        context.stroke()
    else:
        context.new_path()


def check_line_style_and_fill(line_style: LineStyle | None, fill_color: Color | None) -> None:
    if (line_style is None or not line_style.is_valid()) and fill_color is None:
        raise ValueError("need a valid line style or a fill color to draw anything")


def check_line_style(line_style: LineStyle) -> None:
    if line_style is None or not line_style.is_valid():
        raise ValueError(f"cannot draw with invalid line style {line_style!r}")


def pixel_center(point: Vec2d | tuple[float, float]) -> Vec2d:
    return as_vec2d(point) + 0.5


def image_surface(image: ImageBuffer) -> tuple[cairo.ImageSurface, np.ndarray]:
    """Creates a cairo surface from an image.

    The image is converted to premultiplied RGBA uint8. Returns the surface
    together with its backing array, which must outlive the surface.
    """
    if image.channels == 4 and image.buffer_type == ImageBufferType.UINT8:
        rgba = image.array
    else:
        if image.channels == 2:
            raise ValueError("cannot paint a 2-channel image")
        rgba = image.to_uint8(4).array
    alpha = rgba[:, :, 3:4].astype(np.uint16)
    data = np.empty(rgba.shape, dtype=np.uint8)
    data[:, :, :3] = (rgba[:, :, :3].astype(np.uint16) * alpha // 255).astype(np.uint8)
    data[:, :, 3] = rgba[:, :, 3]
    height, width = data.shape[:2]
    surface = cairo.ImageSurface.create_for_data(data, cairo.FORMAT_ARGB32, width, height, width * 4)
    return surface, data
