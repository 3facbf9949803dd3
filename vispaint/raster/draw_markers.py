from __future__ import annotations

import math
from typing import Sequence

import cairo

from vispaint.colors import ColorSpec, color_from_spec, resolve_color
from vispaint.primitives import Vec2d
from vispaint.raster.canvas import apply_color, apply_line_style, pixel_center, saved_state
from vispaint.styles import LineStyle, Marker, MarkerStyle

# (rotation steps, rotation per step, interior angle) for markers drawn as a
# single closed path around the origin.
_NGON_STEPS: dict[Marker, tuple[int, float, float]] = {
    Marker.PENTAGON: (4, 72.0, 108.0),
    Marker.PENTAGRAM: (4, 144.0, 36.0),
    Marker.HEXAGON: (5, 60.0, 120.0),
    Marker.HEPTAGON: (6, 360.0 / 7.0, 128.57),
    Marker.HEPTAGRAM: (6, 720.0 / 7.0, 77.14),
    Marker.OCTAGON: (7, 45.0, 135.0),
    Marker.OCTAGRAM: (7, 135.0, 45.0),
    Marker.ENNEAGON: (8, 40.0, 140.0),
    Marker.ENNEAGRAM: (8, 160.0, 20.0),
}

_TRIANGLE_ROTATION = {
    Marker.TRIANGLE_UP: 0.0,
    Marker.TRIANGLE_RIGHT: 90.0,
    Marker.TRIANGLE_DOWN: 180.0,
    Marker.TRIANGLE_LEFT: 270.0,
}


def _outline_style(style: MarkerStyle) -> LineStyle:
    return LineStyle(width=style.thickness, color=style.color, cap=style.cap, join=style.join)


def _background(context: cairo.Context, style: MarkerStyle, half_size: float) -> None:
    apply_color(context, style.background_color)
    border = style.background_border
    if style.marker == Marker.SQUARE:
        side = style.size + 2.0 * border
        context.rectangle(-half_size - border, -half_size - border, side, side)
    else:
        context.arc(0.0, 0.0, half_size + border, 0.0, 2.0 * math.pi)
    context.fill()


def _marker_path(context: cairo.Context, style: MarkerStyle, outline: LineStyle, miter_limit: float) -> None:
    marker = style.marker
    filled = style.is_filled()
    half_size = style.size / 2.0

    if marker in (Marker.CIRCLE, Marker.POINT):
        if not filled:
            half_size -= style.thickness / 2.0
        context.arc(0.0, 0.0, half_size, 0.0, 2.0 * math.pi)

    elif marker in (Marker.PLUS, Marker.CROSS):
        half_size -= outline.cap_offset()
        if marker == Marker.CROSS:
            context.rotate(math.radians(45.0))
        context.move_to(-half_size, 0.0)
        context.line_to(half_size, 0.0)
        context.move_to(0.0, -half_size)
        context.line_to(0.0, half_size)

    elif marker == Marker.DIAMOND:
        if not filled:
            half_size -= outline.join_offset(45.0, miter_limit)
        half_diamond = 0.5 * half_size
        context.move_to(0.0, -half_size)
        context.line_to(half_diamond, 0.0)
        context.line_to(0.0, half_size)
        context.line_to(-half_diamond, 0.0)
        context.close_path()

    elif marker in (Marker.SQUARE, Marker.ROTATED_SQUARE):
        side = style.size
        if not filled:
            side -= 2.0 * outline.join_offset(90.0, miter_limit)
        if marker == Marker.ROTATED_SQUARE:
            # Same height as the other markers.
            context.rotate(math.radians(45.0))
            side /= math.sqrt(2.0)
        context.rectangle(-side / 2.0, -side / 2.0, side, side)

    elif marker in _TRIANGLE_ROTATION:
        context.rotate(math.radians(_TRIANGLE_ROTATION[marker]))
        if not filled:
            half_size -= outline.join_offset(60.0, miter_limit)
        context.move_to(0.0, -half_size)
        for _ in range(2):
            context.rotate(math.radians(120.0))
            context.line_to(0.0, -half_size)
        context.close_path()

    elif marker == Marker.STAR:
        half_size -= outline.cap_offset()
        context.move_to(0.0, -half_size)
        for _ in range(5):
            context.rotate(math.radians(72.0))
            context.move_to(0.0, 0.0)
            context.line_to(0.0, -half_size)

    elif marker in _NGON_STEPS:
        steps, rotation, interior_angle = _NGON_STEPS[marker]
        if not filled:
            half_size -= outline.join_offset(interior_angle, miter_limit)
        context.move_to(0.0, -half_size)
        for _ in range(steps):
            context.rotate(math.radians(rotation))
            context.line_to(0.0, -half_size)
        context.close_path()

    elif marker == Marker.HEXAGRAM:
        if not filled:
            half_size -= outline.join_offset(60.0, miter_limit)
        for idx in range(2):
            if idx == 1:
                context.rotate(math.radians(60.0))
            context.move_to(0.0, -half_size)
            for _ in range(2):
                context.rotate(math.radians(120.0))
                context.line_to(0.0, -half_size)
            context.close_path()

    else:
        raise RuntimeError(f"marker `{marker.value}` has no drawing routine")


def draw_marker(context: cairo.Context, position: Vec2d, style: MarkerStyle) -> None:
    """Draws a single marker centered at ``position``.

    A marker is either filled or stroked, never both.
    """
    if not style.is_valid():
        raise ValueError(f"cannot draw with invalid marker style {style!r}")
    center = pixel_center(position)
    outline = _outline_style(style)
    with saved_state(context):
        context.new_path()
        context.translate(center.x, center.y)
        if style.background_color is not None:
            _background(context, style, style.size / 2.0)
        if style.thickness > 0.0:
            apply_line_style(context, outline)
        else:
            apply_color(context, style.color)
        context.new_path()
        _marker_path(context, style, outline, context.get_miter_limit())
        if style.is_filled():
            context.fill()
        else:
            context.stroke()


def draw_markers(
    context: cairo.Context,
    markers: Sequence[tuple[Vec2d, ColorSpec]],
    style: MarkerStyle,
) -> None:
    """Draws the same marker at several positions.

    Each entry may override the style's color, ``None`` keeps it.
    """
    for position, color in markers:
        color = color_from_spec(color)
        marker_style = style if color is None else style.with_color(resolve_color(color, style.color))
        draw_marker(context, position, marker_style)
