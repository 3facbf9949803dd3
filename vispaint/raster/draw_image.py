from __future__ import annotations

import math

import cairo

from vispaint.imagebuffer import ImageBuffer
from vispaint.positioning import Anchor, HorizontalAlignment, VerticalAlignment, as_anchor
from vispaint.primitives import Rect, Vec2d, as_vec2d
from vispaint.raster.canvas import apply_line_style, image_surface, saved_state
from vispaint.raster.draw_shapes import rect_path
from vispaint.styles import LineStyle


def anchor_offset(anchor: Anchor, width: float, height: float) -> Vec2d:
    """Offset of the image's top-left corner relative to the anchor point."""
    dx = 0.0
    if anchor.horizontal == HorizontalAlignment.CENTER:
        dx = -width / 2.0
    elif anchor.horizontal == HorizontalAlignment.RIGHT:
        dx = -width
    dy = 0.0
    if anchor.vertical == VerticalAlignment.CENTER:
        dy = -height / 2.0
    elif anchor.vertical == VerticalAlignment.BOTTOM:
        dy = -height
    return Vec2d(dx, dy)


def _clip_path(context: cairo.Context, offset: Vec2d, width: int, height: int, clip_factor: float) -> None:
    center = offset + Vec2d(width / 2.0, height / 2.0)
    with saved_state(context):
        context.translate(center.x, center.y)
        if clip_factor > 0.5:
            context.scale(width / 2.0, height / 2.0)
            context.arc(0.0, 0.0, 1.0, 0.0, 2.0 * math.pi)
        else:
            rect_path(context, Rect(0.0, 0.0, float(width), float(height), 0.0, clip_factor))


def draw_image(
    context: cairo.Context,
    image: ImageBuffer,
    anchor_position: Vec2d,
    anchor: Anchor | str = Anchor.TOP_LEFT,
    alpha: float = 1.0,
    scale_x: float = 1.0,
    scale_y: float = 1.0,
    rotation: float = 0.0,
    clip_factor: float = 0.0,
    line_style: LineStyle | None = None,
) -> None:
    """Pastes ``image`` onto the canvas.

    ``clip_factor`` > 0.5 clips the image to an ellipse, values in (0, 0.5]
    to a rectangle with that relative corner radius. The optional contour is
    drawn along the clip path.
    """
    if not image.is_valid():
        raise ValueError("cannot draw an invalid image")
    if scale_x <= 0.0 or scale_y <= 0.0:
        raise ValueError(f"image scale must be > 0, got ({scale_x}, {scale_y})")
    if not 0.0 <= alpha <= 1.0:
        raise ValueError(f"`alpha` must be in [0, 1], got {alpha}")
    anchor = as_anchor(anchor)
    position = as_vec2d(anchor_position)
    surface, _backing = image_surface(image)
    width, height = image.width, image.height
    offset = anchor_offset(anchor, width, height)

    with saved_state(context):
        context.new_path()
        context.translate(position.x, position.y)
        context.rotate(math.radians(rotation))
        context.scale(scale_x, scale_y)

        with saved_state(context):
            if clip_factor > 0.0:
                _clip_path(context, offset, width, height, clip_factor)
                context.clip()
            context.set_source_surface(surface, offset.x, offset.y)
            context.paint_with_alpha(alpha)

        if line_style is not None and line_style.is_valid():
            if clip_factor > 0.0:
                _clip_path(context, offset, width, height, clip_factor)
            else:
                context.rectangle(offset.x, offset.y, width, height)
            # The contour is stroked in the scaled frame.
            apply_line_style(context, line_style.with_width(line_style.width / max(scale_x, scale_y)))
            context.stroke()
    surface.finish()
