from __future__ import annotations

import logging
from typing import Sequence

from vispaint.colors import WHITE, Color, ColorSpec, as_color
from vispaint.imagebuffer import ImageBuffer
from vispaint.painter import Painter
from vispaint.positioning import Anchor, HorizontalAlignment, VerticalAlignment, as_anchor
from vispaint.primitives import Vec2d, Vec2i

LOGGER = logging.getLogger(__name__)


def _as_vec2i(value: Vec2i | Sequence[int]) -> Vec2i:
    return value if isinstance(value, Vec2i) else Vec2i(int(value[0]), int(value[1]))


def _image_scale(image: ImageBuffer, size: Vec2i) -> tuple[float, float]:
    """Scale factors to fit an image to the requested (width, height), -1 meaning "free"."""
    if size.x > 0 and size.y > 0:
        return size.x / image.width, size.y / image.height
    if size.x > 0:
        scale = size.x / image.width
        return scale, scale
    if size.y > 0:
        scale = size.y / image.height
        return scale, scale
    return 1.0, 1.0


def _offsets(extents: list[float], spacing: int, margin: int) -> tuple[list[float], float]:
    """Start of each row/column and the total length; empty rows/columns get no spacing."""
    starts = []
    position = float(margin)
    placed = 0
    for extent in extents:
        if extent > 0.0 and placed > 0:
            position += spacing
        starts.append(position)
        if extent > 0.0:
            position += extent
            placed += 1
    return starts, position + margin


def _cell_anchor(left: float, top: float, width: float, height: float, anchor: Anchor) -> Vec2d:
    x = left
    if anchor.horizontal == HorizontalAlignment.CENTER:
        x += width / 2.0
    elif anchor.horizontal == HorizontalAlignment.RIGHT:
        x += width
    y = top
    if anchor.vertical == VerticalAlignment.CENTER:
        y += height / 2.0
    elif anchor.vertical == VerticalAlignment.BOTTOM:
        y += height
    return Vec2d(x, y)


def collage(
    images: Sequence[Sequence[ImageBuffer | None]],
    size: Vec2i | Sequence[int] = (-1, -1),
    anchor: Anchor | str = Anchor.TOP_LEFT,
    fill_color: ColorSpec = WHITE,
    output_channels: int = 3,
    spacing: Vec2i | Sequence[int] = (0, 0),
    margin: Vec2i | Sequence[int] = (0, 0),
    clip_factor: float = 0.0,
) -> ImageBuffer:
    """Arranges a jagged grid of images (``None`` leaves a cell empty).

    Each row is as tall as its tallest image, each column as wide as its
    widest one. ``size`` fixes the width and/or height of every image; if
    only one dimension is fixed, the aspect ratio is kept. ``anchor`` places
    each image within its cell. Returns an invalid buffer if the grid holds
    no image.
    """
    if output_channels not in (3, 4):
        raise ValueError(f"`output_channels` must be 3 or 4, got {output_channels}")
    size = _as_vec2i(size)
    spacing = _as_vec2i(spacing)
    margin = _as_vec2i(margin)
    anchor = as_anchor(anchor)
    background: Color | None = as_color(fill_color)
    if background is None:
        raise ValueError("the collage `fill_color` must be a valid color")

    num_cols = max((len(row) for row in images), default=0)
    row_heights = [0.0] * len(images)
    col_widths = [0.0] * num_cols
    cells = []
    for row_idx, row in enumerate(images):
        for col_idx, image in enumerate(row):
            if image is None or not image.is_valid():
                continue
            scale_x, scale_y = _image_scale(image, size)
            width = image.width * scale_x
            height = image.height * scale_y
            row_heights[row_idx] = max(row_heights[row_idx], height)
            col_widths[col_idx] = max(col_widths[col_idx], width)
            cells.append((row_idx, col_idx, image, scale_x, scale_y))

    col_starts, total_width = _offsets(col_widths, spacing.x, margin.x)
    row_starts, total_height = _offsets(row_heights, spacing.y, margin.y)
    canvas_width = int(round(total_width))
    canvas_height = int(round(total_height))
    if not cells or canvas_width <= 0 or canvas_height <= 0:
        LOGGER.warning("%s", f"collage would be empty ({canvas_width}x{canvas_height}), returning an invalid buffer")
        return ImageBuffer.empty()

    painter = Painter()
    painter.set_canvas(canvas_width, canvas_height, background)
    for row_idx, col_idx, image, scale_x, scale_y in cells:
        position = _cell_anchor(
            col_starts[col_idx], row_starts[row_idx], col_widths[col_idx], row_heights[row_idx], anchor
        )
        painter.draw_image(image, position, anchor, 1.0, scale_x, scale_y, 0.0, clip_factor)
    return painter.get_canvas(copy=True).to_channels(output_channels)
