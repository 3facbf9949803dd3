from __future__ import annotations

import logging
import math
from typing import Callable, Sequence

import cairo

from vispaint.colors import Color, ColorSpec, color_from_spec, resolve_color
from vispaint.primitives import Vec2d, as_vec2d, project_point_onto_line
from vispaint.raster.canvas import (
    apply_line_style,
    cairo_rgba,
    check_line_style,
    pixel_center,
    saved_state,
)
from vispaint.styles import ArrowStyle, LineStyle

LOGGER = logging.getLogger(__name__)


def draw_line(context: cairo.Context, pt1: Vec2d, pt2: Vec2d, line_style: LineStyle) -> None:
    check_line_style(line_style)
    start = pixel_center(pt1)
    end = pixel_center(pt2)
    with saved_state(context):
        context.new_path()
        apply_line_style(context, line_style)
        context.move_to(start.x, start.y)
        context.line_to(end.x, end.y)
        context.stroke()


def _open_head(context: cairo.Context, pointy_end: Vec2d, tip_a: Vec2d, tip_b: Vec2d) -> None:
    context.move_to(tip_a.x, tip_a.y)
    context.line_to(pointy_end.x, pointy_end.y)
    context.line_to(tip_b.x, tip_b.y)


def _closed_head(
    context: cairo.Context,
    pointy_end: Vec2d,
    tip_a: Vec2d,
    tip_b: Vec2d,
    shaft_from: Vec2d,
    shaft_to: Vec2d,
) -> Vec2d:
    """Adds a closed head to the current path and returns where it meets the shaft.

    The path passes through the pointy end as a line joint, so the tip is
    rendered with the style's join.
    """
    shaft_point = project_point_onto_line(tip_a, shaft_from, shaft_to)
    context.line_to(shaft_point.x, shaft_point.y)
    context.line_to(tip_a.x, tip_a.y)
    context.line_to(pointy_end.x, pointy_end.y)
    context.line_to(tip_b.x, tip_b.y)
    context.line_to(shaft_point.x, shaft_point.y)
    return shaft_point


def draw_arrow(context: cairo.Context, pt1: Vec2d, pt2: Vec2d, arrow_style: ArrowStyle) -> None:
    """Draws an arrow whose tip apex lands exactly on ``pt2``.

    The end points are pulled inwards by the tip's join offset. Tips are
    always stroked solid, only the shaft uses the dash pattern.
    """
    if not arrow_style.is_valid():
        raise ValueError(f"cannot draw with invalid arrow style {arrow_style!r}")
    start = pixel_center(pt1)
    end = pixel_center(pt2)
    if start == end:
        raise ValueError("cannot draw an arrow of zero length")

    tip_offset = arrow_style.tip_offset(context.get_miter_limit())
    end = end + tip_offset * end.direction_vector(start).unit_vector()
    if arrow_style.double_headed:
        start = start + tip_offset * start.direction_vector(end).unit_vector()

    diff = start - end
    shaft_angle = math.atan2(diff.y, diff.x)
    tip_length = arrow_style.tip_length_for_shaft((start, end))
    tip_angle = math.radians(arrow_style.tip_angle)
    dir_a = tip_length * Vec2d(math.cos(shaft_angle + tip_angle), math.sin(shaft_angle + tip_angle))
    dir_b = tip_length * Vec2d(math.cos(shaft_angle - tip_angle), math.sin(shaft_angle - tip_angle))
    tip_a = end + dir_a
    tip_b = end + dir_b
    line = arrow_style.line

    with saved_state(context):
        context.new_path()
        apply_line_style(context, line, ignore_dash=True)
        if arrow_style.tip_closed:
            shaft_from = start
            if arrow_style.double_headed:
                shaft_from = _closed_head(context, start, start - dir_a, start - dir_b, start, end)
                context.fill_preserve()
                context.stroke()
            shaft_to = _closed_head(context, end, tip_a, tip_b, start, end)
            context.fill_preserve()
            context.stroke()
        else:
            _open_head(context, end, tip_a, tip_b)
            if arrow_style.double_headed:
                _open_head(context, start, start - dir_a, start - dir_b)
            context.stroke()
            shaft_from, shaft_to = start, end

        if line.is_dashed():
            apply_line_style(context, line)
        context.move_to(shaft_from.x, shaft_from.y)
        context.line_to(shaft_to.x, shaft_to.y)
        context.stroke()


def color_fade_out_linear(value: float) -> float:
    return value


def color_fade_out_quadratic(value: float) -> float:
    return value * value


def color_fade_out_logarithmic(value: float) -> float:
    return math.log10(value * 9.0 + 1.0)


def path_length(points: Sequence[Vec2d]) -> float:
    return sum(points[idx - 1].distance(points[idx]) for idx in range(1, len(points)))


def smooth_trajectory(points: Sequence[Vec2d], window: int) -> list[Vec2d]:
    """Centered moving average; the window shrinks at both ends."""
    pts = [as_vec2d(p) for p in points]
    if window <= 1 or len(pts) < 3:
        return pts
    half = window // 2
    smoothed = []
    for idx in range(len(pts)):
        lo = max(0, idx - half)
        hi = min(len(pts), idx + half + 1)
        chunk = pts[lo:hi]
        smoothed.append(Vec2d(sum(p.x for p in chunk) / len(chunk), sum(p.y for p in chunk) / len(chunk)))
    return smoothed


def draw_trajectory(
    context: cairo.Context,
    points: Sequence[Vec2d],
    line_style: LineStyle,
    fade_out_color: ColorSpec = Color(1.0, 1.0, 1.0, 0.4),
    oldest_position_first: bool = False,
    smoothing_window: int = 0,
    mix_factor: Callable[[float], float] = color_fade_out_quadratic,
) -> bool:
    """Draws a polyline which fades from the line color towards ``fade_out_color``.

    The newest position is drawn in the line style's color; with
    ``fade_out_color`` set to ``None`` (or the line color) the whole
    trajectory is drawn in a single color.
    """
    if line_style is None or not line_style.is_valid():
        LOGGER.warning("%s", f"cannot draw a trajectory with invalid line style {line_style!r}")
        return False
    if len(points) < 2:
        LOGGER.warning("%s", "a trajectory needs at least 2 points")
        return False

    pts = [pixel_center(p) for p in smooth_trajectory(points, smoothing_window)]
    fade_out_color = resolve_color(color_from_spec(fade_out_color), line_style.color)
    fade_out = fade_out_color is not None and fade_out_color != line_style.color

    with saved_state(context):
        context.new_path()
        apply_line_style(context, line_style)
        if not fade_out:
            context.move_to(pts[0].x, pts[0].y)
            for pt in pts[1:]:
                context.line_to(pt.x, pt.y)
            context.stroke()
            return True

        head_color = line_style.color
        total_length = path_length(pts)
        processed = 0.0

        def color_at(length: float) -> Color:
            proportion = mix_factor(length / total_length) if total_length > 0.0 else 1.0
            if oldest_position_first:
                return fade_out_color.mix(head_color, proportion)
            return head_color.mix(fade_out_color, proportion)

        color_from = color_at(0.0)
        for prev, curr in zip(pts[:-1], pts[1:]):
            processed += prev.distance(curr)
            color_to = color_at(processed)
            pattern = cairo.LinearGradient(prev.x, prev.y, curr.x, curr.y)
            pattern.add_color_stop_rgba(0.0, *cairo_rgba(color_from))
            pattern.add_color_stop_rgba(1.0, *cairo_rgba(color_to))
            context.move_to(prev.x, prev.y)
            context.line_to(curr.x, curr.y)
            context.set_source(pattern)
            context.stroke()
            color_from = color_to
    return True


def draw_trajectories(
    context: cairo.Context,
    trajectories: Sequence[tuple[Sequence[Vec2d], ColorSpec]],
    line_style: LineStyle,
    fade_out_color: ColorSpec = Color(1.0, 1.0, 1.0, 0.4),
    oldest_position_first: bool = False,
    smoothing_window: int = 0,
    mix_factor: Callable[[float], float] = color_fade_out_quadratic,
) -> bool:
    """Draws several trajectories sharing one style; a ``None`` color keeps the style's color."""
    success = True
    for points, color in trajectories:
        style = line_style
        color = color_from_spec(color)
        if color is not None:
            style = line_style.with_color(resolve_color(color, line_style.color))
        success = draw_trajectory(
            context, points, style, fade_out_color, oldest_position_first, smoothing_window, mix_factor
        ) and success
    return success
