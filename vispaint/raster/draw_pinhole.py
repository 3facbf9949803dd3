from __future__ import annotations

from dataclasses import replace
import logging
import math
from typing import Any, Sequence

import cairo
import numpy as np

from vispaint.colors import Color
from vispaint.primitives import Vec2d, Vec2i, Vec3d, as_vec3d
from vispaint.raster.draw_lines import draw_arrow
from vispaint.styles import ArrowStyle

LOGGER = logging.getLogger(__name__)

_DEPTH_EPS = 1e-6


def _as_matrix(values: Any, rows: int, cols: int, name: str) -> np.ndarray:
    matrix = np.asarray(values, dtype=np.float64)
    if matrix.shape != (rows, cols):
        raise ValueError(f"`{name}` must be a {rows}x{cols} matrix, got shape {matrix.shape}")
    return matrix


def projection_matrix(K: Any, R: Any, t: Any) -> np.ndarray:
    """Returns the 3x4 matrix ``K [R | t]``."""
    K = _as_matrix(K, 3, 3, "K")
    R = _as_matrix(R, 3, 3, "R")
    t = np.asarray(tuple(as_vec3d(t)), dtype=np.float64).reshape(3, 1)
    return K @ np.hstack((R, t))


def camera_depth(R: Any, t: Any, point: Vec3d) -> float:
    """Depth of a world point along the camera's optical axis."""
    R = _as_matrix(R, 3, 3, "R")
    t = np.asarray(tuple(t), dtype=np.float64).reshape(3)
    return float((R @ np.asarray(tuple(point), dtype=np.float64) + t)[2])


def project_points(P: np.ndarray, points: Sequence[Vec3d]) -> list[Vec2d]:
    """Projects world points to pixels; points on the camera plane map to ``(nan, nan)``."""
    homogeneous = np.array([[p.x, p.y, p.z, 1.0] for p in points], dtype=np.float64)
    projected = homogeneous @ P.T
    nan = float("nan")
    return [
        Vec2d(nan, nan) if abs(row[2]) < _DEPTH_EPS else Vec2d(float(row[0] / row[2]), float(row[1] / row[2]))
        for row in projected
    ]


def _is_finite(point: Vec2d) -> bool:
    return math.isfinite(point.x) and math.isfinite(point.y)


def is_point_inside_image(point: Vec2d, image_size: Vec2i) -> bool:
    return 0.0 <= point.x < image_size.width and 0.0 <= point.y < image_size.height


def _clip_to_front(origin: Vec3d, tip: Vec3d, depth_origin: float, depth_tip: float) -> Vec3d:
    """Pulls an axis tip which lies behind the camera halfway towards the image plane."""
    fraction = (depth_origin - _DEPTH_EPS) / (depth_origin - depth_tip)
    return origin + (tip - origin) * (0.5 * fraction)


def draw_xyz_axes(
    context: cairo.Context,
    K: Any,
    R: Any,
    t: Any,
    origin: Vec3d,
    lengths: Vec3d,
    arrow_style: ArrowStyle,
    color_x: Color | None,
    color_y: Color | None,
    color_z: Color | None,
    image_size: Vec2i,
) -> tuple[bool, list[Vec2d]]:
    """Projects and draws the world coordinate axes.

    Returns whether anything is visible (and every requested axis could be
    drawn), plus the projected origin and the x, y and z tips.
    """
    if not arrow_style.is_valid():
        raise ValueError(f"cannot draw x/y/z axes with invalid arrow style {arrow_style!r}")
    origin = as_vec3d(origin)
    lengths = as_vec3d(lengths)
    t = as_vec3d(t)
    image_size = image_size if isinstance(image_size, Vec2i) else Vec2i(*image_size)
    P = projection_matrix(K, R, t)

    tips = [
        origin + Vec3d(lengths.x, 0.0, 0.0),
        origin + Vec3d(0.0, lengths.y, 0.0),
        origin + Vec3d(0.0, 0.0, lengths.z),
    ]
    depth_origin = camera_depth(R, t, origin)
    origin_in_front = depth_origin > _DEPTH_EPS
    if origin_in_front:
        for idx, tip in enumerate(tips):
            depth_tip = camera_depth(R, t, tip)
            if depth_tip <= _DEPTH_EPS:
                LOGGER.debug("axis %d projects behind the image plane, shortening it", idx)
                tips[idx] = _clip_to_front(origin, tip, depth_origin, depth_tip)

    img_origin, *img_tips = project_points(P, [origin, *tips])
    visible = origin_in_front and is_point_inside_image(img_origin, image_size)
    visible = visible or any(is_point_inside_image(tip, image_size) for tip in img_tips)

    success = True
    for img_tip, color in zip(img_tips, (color_x, color_y, color_z)):
        if color is None:
            continue
        if not (_is_finite(img_origin) and _is_finite(img_tip)) or img_tip == img_origin:
            success = False
            continue
        style = replace(arrow_style, line=arrow_style.line.with_color(color))
        draw_arrow(context, img_origin, img_tip, style)
    return visible and success, [img_origin, *img_tips]
