from __future__ import annotations

import math
from typing import Sequence

import cairo

from vispaint.colors import Color
from vispaint.primitives import Ellipse, Rect, Vec2d, as_vec2d
from vispaint.raster.canvas import (
    apply_line_style,
    check_line_style,
    check_line_style_and_fill,
    fill_and_stroke,
    pixel_center,
    saved_state,
)
from vispaint.styles import LineStyle


def rounded_rect_path(context: cairo.Context, rect: Rect) -> None:
    """Adds a rounded rectangle centered at the origin to the current path."""
    radius = rect.radius
    if radius <= 0.5:
        radius *= min(rect.width, rect.height)
    half_w = rect.half_width - radius
    half_h = rect.half_height - radius
    context.move_to(-rect.half_width, -half_h)
    context.arc(-half_w, -half_h, radius, math.radians(180.0), math.radians(270.0))
    context.arc(half_w, -half_h, radius, math.radians(-90.0), 0.0)
    context.arc(half_w, half_h, radius, 0.0, math.radians(90.0))
    context.arc(-half_w, half_h, radius, math.radians(90.0), math.radians(180.0))
    context.close_path()


def rect_path(context: cairo.Context, rect: Rect) -> None:
    """Adds the (local, origin-centered) outline of ``rect`` to the current path."""
    if rect.radius > 0.0:
        rounded_rect_path(context, rect)
    else:
        context.rectangle(-rect.half_width, -rect.half_height, rect.width, rect.height)


def draw_arc(
    context: cairo.Context,
    center: Vec2d,
    radius: float,
    angle_from: float,
    angle_to: float,
    line_style: LineStyle | None,
    include_center: bool = True,
    fill_color: Color | None = None,
) -> None:
    check_line_style_and_fill(line_style, fill_color)
    if radius <= 0.0:
        raise ValueError(f"`radius` must be > 0, got {radius}")
    center = pixel_center(center)
    with saved_state(context):
        context.new_path()
        context.arc(center.x, center.y, radius, math.radians(angle_from), math.radians(angle_to))
        if include_center:
            context.line_to(center.x, center.y)
            context.close_path()
        fill_and_stroke(context, line_style, fill_color)


def draw_circle(
    context: cairo.Context,
    center: Vec2d,
    radius: float,
    line_style: LineStyle | None,
    fill_color: Color | None = None,
) -> None:
    draw_arc(context, center, radius, 0.0, 360.0, line_style, False, fill_color)


def adjust_ellipse_angle(degrees: float, scale_x: float, scale_y: float) -> float:
    """Angle to pass to `arc` in a context scaled by (scale_x, scale_y).

    Drawing in the scaled context would otherwise distort the user's angles.
    """
    rad = math.radians(degrees)
    dx = math.cos(rad) / scale_x
    dy = math.sin(rad) / scale_y
    return math.degrees(math.atan2(dy, dx))


def draw_ellipse(
    context: cairo.Context,
    ellipse: Ellipse,
    line_style: LineStyle | None,
    fill_color: Color | None = None,
) -> None:
    check_line_style_and_fill(line_style, fill_color)
    if not ellipse.is_valid():
        raise ValueError(f"cannot draw an invalid ellipse: {ellipse!r}")
    ellipse = ellipse + 0.5
    scale_x = ellipse.major_axis / 2.0
    scale_y = ellipse.minor_axis / 2.0
    angle_from = ellipse.angle_from
    angle_to = ellipse.angle_to
    partial = False
    if not math.isclose(angle_from, 0.0, abs_tol=1e-9):
        angle_from = adjust_ellipse_angle(angle_from, scale_x, scale_y)
        partial = True
    if not math.isclose(angle_to, 360.0, abs_tol=1e-9):
        angle_to = adjust_ellipse_angle(angle_to, scale_x, scale_y)
        partial = True

    with saved_state(context):
        # The path is built in the scaled frame, the stroke uses the outer
        # frame so the line width is not distorted.
        with saved_state(context):
            context.new_path()
            context.translate(ellipse.cx, ellipse.cy)
            context.rotate(math.radians(ellipse.rotation))
            context.scale(scale_x, scale_y)
            context.arc(0.0, 0.0, 1.0, math.radians(angle_from), math.radians(angle_to))
            if partial and ellipse.include_center:
                context.line_to(0.0, 0.0)
                context.close_path()
        fill_and_stroke(context, line_style, fill_color)


def draw_rect(
    context: cairo.Context,
    rect: Rect,
    line_style: LineStyle | None,
    fill_color: Color | None = None,
) -> None:
    check_line_style_and_fill(line_style, fill_color)
    if not rect.is_valid():
        raise ValueError(f"cannot draw an invalid rectangle: {rect!r}")
    rect = rect + 0.5
    with saved_state(context):
        context.new_path()
        context.translate(rect.cx, rect.cy)
        context.rotate(math.radians(rect.rotation))
        rect_path(context, rect)
        fill_and_stroke(context, line_style, fill_color)


def draw_polygon(
    context: cairo.Context,
    points: Sequence[Vec2d],
    line_style: LineStyle | None,
    fill_color: Color | None = None,
) -> None:
    check_line_style_and_fill(line_style, fill_color)
    if len(points) < 3:
        raise ValueError(f"a polygon needs at least 3 points, got {len(points)}")
    with saved_state(context):
        context.new_path()
        first = pixel_center(points[0])
        context.move_to(first.x, first.y)
        for point in points[1:]:
            pt = pixel_center(point)
            context.line_to(pt.x, pt.y)
        context.close_path()
        fill_and_stroke(context, line_style, fill_color)


def draw_grid(
    context: cairo.Context,
    top_left: Vec2d,
    bottom_right: Vec2d,
    spacing_x: float,
    spacing_y: float,
    line_style: LineStyle,
) -> None:
    """Draws grid lines; identical corners span the whole canvas."""
    check_line_style(line_style)
    if spacing_x <= 0.0 or spacing_y <= 0.0:
        raise ValueError(f"grid spacing must be > 0, got ({spacing_x}, {spacing_y})")
    top_left = as_vec2d(top_left)
    bottom_right = as_vec2d(bottom_right)
    left, right = sorted((top_left.x, bottom_right.x))
    top, bottom = sorted((top_left.y, bottom_right.y))
    if top_left == bottom_right:
        surface = context.get_target()
        right = float(surface.get_width())
        bottom = float(surface.get_height())

    with saved_state(context):
        context.new_path()
        apply_line_style(context, line_style)
        steps = int(math.floor((right - left) / spacing_x))
        for step in range(steps + 1):
            x = left + 0.5 + step * spacing_x
            context.move_to(x, top)
            context.line_to(x, bottom)
        steps = int(math.floor((bottom - top) / spacing_y))
        for step in range(steps + 1):
            y = top + 0.5 + step * spacing_y
            context.move_to(left, y)
            context.line_to(right, y)
        context.stroke()
