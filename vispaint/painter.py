from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Sequence

from vispaint.colors import BLUE, GREEN, RED, Color, ColorSpec, as_color
from vispaint.config import DEFAULT_CANVAS_COLOR
from vispaint.gradients import ColorGradient, paint_gradient
from vispaint.imagebuffer import ImageBuffer, ImageBufferType, OwnedImageBuffer, load_image
from vispaint.positioning import Anchor
from vispaint.primitives import Ellipse, Rect, Vec2d, Vec2i, Vec3d, as_ellipse, as_rect
from vispaint.raster.canvas import Canvas, require_canvas
from vispaint.raster.draw_bbox import draw_bounding_box_2d, labels_for_position
from vispaint.raster.draw_image import draw_image
from vispaint.raster.draw_lines import (
    color_fade_out_quadratic,
    draw_arrow,
    draw_line,
    draw_trajectories,
    draw_trajectory,
)
from vispaint.raster.draw_markers import draw_marker, draw_markers
from vispaint.raster.draw_pinhole import draw_xyz_axes
from vispaint.raster.draw_shapes import draw_arc, draw_circle, draw_ellipse, draw_grid, draw_polygon, draw_rect
from vispaint.raster.draw_text import draw_text, draw_text_box
from vispaint.styles import (
    DEFAULT_ARROW_STYLE,
    DEFAULT_BOUNDING_BOX_2D_STYLE,
    DEFAULT_LINE_STYLE,
    DEFAULT_MARKER_STYLE,
    DEFAULT_TEXT_STYLE,
    ArrowStyle,
    BoundingBox2DStyle,
    LineStyle,
    MarkerStyle,
    TextStyle,
)

LOGGER = logging.getLogger(__name__)


class Painter:
    """Draws onto an in-memory RGBA canvas.

    A painter starts without a canvas; every ``draw_*`` call before one of
    the ``set_canvas*`` methods raises `CanvasNotInitializedError`. Setting a
    new canvas discards the previous one.
    """

    def __init__(self) -> None:
        self._canvas: Canvas | None = None

    def __repr__(self) -> str:
        if self._canvas is None:
            return "Painter(no canvas)"
        return f"Painter({self._canvas.width}x{self._canvas.height})"

    def _bind(self, pixels: OwnedImageBuffer) -> None:
        if self._canvas is not None:
            self._canvas.finish()
        self._canvas = Canvas(pixels)
        LOGGER.debug("canvas set to %dx%d", pixels.width, pixels.height)

    @property
    def _context(self) -> Any:
        return require_canvas(self._canvas).context

    def set_canvas(self, width: int, height: int, color: ColorSpec = DEFAULT_CANVAS_COLOR) -> None:
        fill = as_color(color)
        if fill is None:
            raise ValueError("the canvas color must be a valid color")
        self._bind(OwnedImageBuffer.allocate(height, width, 4, ImageBufferType.UINT8))
        self._canvas.fill(fill)

    def set_canvas_filename(self, path: str | Path) -> None:
        self.set_canvas_image(load_image(path, channels=4))

    def set_canvas_image(self, image: ImageBuffer) -> None:
        """Copies ``image`` (converted to 4-channel uint8) into a new canvas."""
        if not image.is_valid():
            raise ValueError("cannot set the canvas from an invalid image")
        self._bind(OwnedImageBuffer(image.to_uint8(4).array))

    def get_canvas(self, copy: bool = False) -> ImageBuffer:
        """Returns the canvas as an owned copy, or as a view sharing the canvas memory."""
        return require_canvas(self._canvas).pixels(copy)

    @property
    def canvas_size(self) -> Vec2i:
        canvas = require_canvas(self._canvas)
        return Vec2i(canvas.width, canvas.height)

    @property
    def width(self) -> int:
        return require_canvas(self._canvas).width

    @property
    def height(self) -> int:
        return require_canvas(self._canvas).height

    def is_valid(self) -> bool:
        return self._canvas is not None

    def draw_arc(
        self,
        center: Vec2d,
        radius: float,
        angle_from: float,
        angle_to: float,
        line_style: LineStyle | None = DEFAULT_LINE_STYLE,
        include_center: bool = True,
        fill_color: ColorSpec = None,
    ) -> None:
        draw_arc(
            self._context, center, radius, angle_from, angle_to, line_style, include_center, as_color(fill_color)
        )

    def draw_arrow(self, pt1: Vec2d, pt2: Vec2d, arrow_style: ArrowStyle = DEFAULT_ARROW_STYLE) -> None:
        draw_arrow(self._context, pt1, pt2, arrow_style)

    def draw_bounding_box_2d(
        self,
        rect: Rect,
        style: BoundingBox2DStyle = DEFAULT_BOUNDING_BOX_2D_STYLE,
        label: Sequence[str] | str | None = None,
        label_top: Sequence[str] = (),
        label_bottom: Sequence[str] = (),
        label_left: Sequence[str] = (),
        left_top_to_bottom: bool = False,
        label_right: Sequence[str] = (),
        right_top_to_bottom: bool = False,
    ) -> bool:
        """Draws a labelled box; ``label`` is placed at ``style.label_position``.

        Returns False (after logging a warning) for an invalid box or style.
        """
        context = self._context
        labels: dict[str, Any] = {
            "label_top": label_top,
            "label_bottom": label_bottom,
            "label_left": label_left,
            "left_top_to_bottom": left_top_to_bottom,
            "label_right": label_right,
            "right_top_to_bottom": right_top_to_bottom,
        }
        labels.update(labels_for_position(label, style.label_position))
        return draw_bounding_box_2d(context, as_rect(rect), style, **labels)

    def draw_circle(
        self,
        center: Vec2d,
        radius: float,
        line_style: LineStyle | None = DEFAULT_LINE_STYLE,
        fill_color: ColorSpec = None,
    ) -> None:
        draw_circle(self._context, center, radius, line_style, as_color(fill_color))

    def draw_ellipse(
        self,
        ellipse: Ellipse,
        line_style: LineStyle | None = DEFAULT_LINE_STYLE,
        fill_color: ColorSpec = None,
    ) -> None:
        draw_ellipse(self._context, as_ellipse(ellipse), line_style, as_color(fill_color))

    def draw_gradient(self, gradient: ColorGradient, clip_rect: Rect | None = None) -> None:
        paint_gradient(self._context, gradient, None if clip_rect is None else as_rect(clip_rect))

    def draw_grid(
        self,
        top_left: Vec2d = Vec2d(0.0, 0.0),
        bottom_right: Vec2d = Vec2d(0.0, 0.0),
        spacing_x: float = 20.0,
        spacing_y: float = 20.0,
        line_style: LineStyle = DEFAULT_LINE_STYLE,
    ) -> None:
        draw_grid(self._context, top_left, bottom_right, spacing_x, spacing_y, line_style)

    def draw_image(
        self,
        image: ImageBuffer,
        position: Vec2d,
        anchor: Anchor | str = Anchor.TOP_LEFT,
        alpha: float = 1.0,
        scale_x: float = 1.0,
        scale_y: float = 1.0,
        rotation: float = 0.0,
        clip_factor: float = 0.0,
        line_style: LineStyle | None = None,
    ) -> None:
        draw_image(
            self._context, image, position, anchor, alpha, scale_x, scale_y, rotation, clip_factor, line_style
        )

    def draw_line(self, pt1: Vec2d, pt2: Vec2d, line_style: LineStyle = DEFAULT_LINE_STYLE) -> None:
        draw_line(self._context, pt1, pt2, line_style)

    def draw_marker(self, position: Vec2d, style: MarkerStyle = DEFAULT_MARKER_STYLE) -> None:
        draw_marker(self._context, position, style)

    def draw_markers(
        self,
        markers: Sequence[tuple[Vec2d, ColorSpec]],
        style: MarkerStyle = DEFAULT_MARKER_STYLE,
    ) -> None:
        draw_markers(self._context, markers, style)

    def draw_polygon(
        self,
        points: Sequence[Vec2d],
        line_style: LineStyle | None = DEFAULT_LINE_STYLE,
        fill_color: ColorSpec = None,
    ) -> None:
        draw_polygon(self._context, points, line_style, as_color(fill_color))

    def draw_rect(
        self,
        rect: Rect,
        line_style: LineStyle | None = DEFAULT_LINE_STYLE,
        fill_color: ColorSpec = None,
    ) -> None:
        draw_rect(self._context, as_rect(rect), line_style, as_color(fill_color))

    def draw_text(
        self,
        text: str | Sequence[str],
        anchor_position: Vec2d,
        anchor: Anchor | str = Anchor.BOTTOM_LEFT,
        text_style: TextStyle = DEFAULT_TEXT_STYLE,
        padding: Vec2d = Vec2d(0.0, 0.0),
        rotation: float = 0.0,
    ) -> Rect:
        return draw_text(self._context, text, anchor_position, anchor, text_style, padding, rotation)

    def draw_text_box(
        self,
        text: str | Sequence[str],
        anchor_position: Vec2d,
        anchor: Anchor | str = Anchor.BOTTOM_LEFT,
        text_style: TextStyle = DEFAULT_TEXT_STYLE,
        padding: Vec2d = Vec2d(6.0, 6.0),
        rotation: float = 0.0,
        box_line_style: LineStyle | None = None,
        box_fill_color: ColorSpec = Color(1.0, 1.0, 1.0, 0.6),
        box_corner_radius: float = 0.2,
        fixed_box_size: Vec2d = Vec2d(-1.0, -1.0),
    ) -> Rect:
        return draw_text_box(
            self._context,
            text,
            anchor_position,
            anchor,
            text_style,
            padding,
            rotation,
            box_line_style,
            as_color(box_fill_color),
            box_corner_radius,
            fixed_box_size,
        )

    def draw_trajectory(
        self,
        points: Sequence[Vec2d],
        line_style: LineStyle = DEFAULT_LINE_STYLE,
        fade_out_color: ColorSpec = Color(1.0, 1.0, 1.0, 0.4),
        oldest_position_first: bool = False,
        smoothing_window: int = 0,
        mix_factor: Callable[[float], float] = color_fade_out_quadratic,
    ) -> bool:
        return draw_trajectory(
            self._context, points, line_style, fade_out_color, oldest_position_first, smoothing_window, mix_factor
        )

    def draw_trajectories(
        self,
        trajectories: Sequence[tuple[Sequence[Vec2d], ColorSpec]],
        line_style: LineStyle = DEFAULT_LINE_STYLE,
        fade_out_color: ColorSpec = Color(1.0, 1.0, 1.0, 0.4),
        oldest_position_first: bool = False,
        smoothing_window: int = 0,
        mix_factor: Callable[[float], float] = color_fade_out_quadratic,
    ) -> bool:
        return draw_trajectories(
            self._context,
            trajectories,
            line_style,
            fade_out_color,
            oldest_position_first,
            smoothing_window,
            mix_factor,
        )

    def draw_xyz_axes(
        self,
        K: Any,
        R: Any,
        t: Any,
        origin: Vec3d = Vec3d(0.0, 0.0, 0.0),
        lengths: Vec3d = Vec3d(1.0, 1.0, 1.0),
        arrow_style: ArrowStyle = DEFAULT_ARROW_STYLE,
        color_x: ColorSpec = RED,
        color_y: ColorSpec = GREEN,
        color_z: ColorSpec = BLUE,
    ) -> bool:
        """Draws the projected world axes; returns True if any of them is visible."""
        visible, _ = draw_xyz_axes(
            self._context,
            K,
            R,
            t,
            origin,
            lengths,
            arrow_style,
            as_color(color_x),
            as_color(color_y),
            as_color(color_z),
            self.canvas_size,
        )
        return visible


def create_painter() -> Painter:
    return Painter()
