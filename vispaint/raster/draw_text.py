from __future__ import annotations

from dataclasses import dataclass, field
import math
from typing import Sequence

import cairo

from vispaint.colors import Color
from vispaint.positioning import Anchor, HorizontalAlignment, VerticalAlignment, as_anchor
from vispaint.primitives import Rect, Vec2d, as_vec2d
from vispaint.raster.canvas import apply_color, pixel_center, saved_state
from vispaint.raster.draw_shapes import draw_rect
from vispaint.styles import LineStyle, TextStyle


def apply_text_style(context: cairo.Context, text_style: TextStyle) -> None:
    slant = cairo.FONT_SLANT_ITALIC if text_style.italic else cairo.FONT_SLANT_NORMAL
    weight = cairo.FONT_WEIGHT_BOLD if text_style.bold else cairo.FONT_WEIGHT_NORMAL
    context.select_font_face(text_style.family, slant, weight)
    context.set_font_size(text_style.size)
    apply_color(context, text_style.color)


@dataclass(frozen=True)
class TextExtent:
    """Rendered size of a single line of text, in whole pixels.

    ``bearing_x``/``bearing_y`` are the offsets from cairo's reference point
    (the left end of the baseline) to the top-left corner of the text.
    """

    width: float = 0.0
    height: float = 0.0
    bearing_x: float = 0.0
    bearing_y: float = 0.0

    @classmethod
    def from_context(cls, context: cairo.Context, line: str, use_font_metrics: bool = True) -> TextExtent:
        extents = context.text_extents(line)
        width = round(extents.width)
        bearing_x = round(extents.x_bearing)
        if use_font_metrics:
            ascent, descent, _, _, _ = context.font_extents()
            return cls(width, round(ascent + descent), bearing_x, -round(ascent))
        return cls(width, round(extents.height), bearing_x, round(extents.y_bearing))

    @property
    def size(self) -> Vec2d:
        return Vec2d(self.width, self.height)


@dataclass
class SingleLineText:
    text: str
    extent: TextExtent
    reference_point: Vec2d = field(default_factory=Vec2d)

    @property
    def width(self) -> float:
        return self.extent.width

    @property
    def height(self) -> float:
        return self.extent.height

    def align(self, anchor_point: Vec2d, anchor: Anchor | str) -> Vec2d:
        """Computes (and stores) the cairo reference point for the requested anchor."""
        anchor = as_anchor(anchor)
        point = as_vec2d(anchor_point)
        extent = self.extent
        x, y = point.x, point.y

        if anchor.horizontal == HorizontalAlignment.CENTER:
            x -= extent.width / 2.0 + extent.bearing_x
        elif anchor.horizontal == HorizontalAlignment.RIGHT:
            x -= extent.width + extent.bearing_x
        else:
            x -= extent.bearing_x

        if anchor.vertical == VerticalAlignment.CENTER:
            y -= extent.height / 2.0 + extent.bearing_y
        elif anchor.vertical == VerticalAlignment.TOP:
            y -= extent.bearing_y
        else:
            y -= extent.height + extent.bearing_y

        self.reference_point = Vec2d(x, y)
        return self.reference_point

    def bounding_box(self, padding: Vec2d = Vec2d(0.0, 0.0)) -> Rect:
        padding = as_vec2d(padding)
        top_left = self.reference_point + Vec2d(self.extent.bearing_x, self.extent.bearing_y)
        size = self.extent.size + 2.0 * padding
        return Rect(
            top_left.x + self.extent.width / 2.0,
            top_left.y + self.extent.height / 2.0,
            size.x,
            size.y,
        )


class MultiLineText:
    """A block of lines laid out top-to-bottom.

    The block height is the first line's height plus ``line_spacing`` times
    the height of every following line. Lines are placed inside the
    (padded or fixed-size) box according to ``halign``, and the block is
    placed vertically inside the padding according to ``valign``.
    """

    def __init__(
        self,
        lines: Sequence[SingleLineText],
        line_spacing: float = 1.2,
        halign: HorizontalAlignment = HorizontalAlignment.LEFT,
        valign: VerticalAlignment = VerticalAlignment.CENTER,
    ) -> None:
        self.lines = list(lines)
        self.line_spacing = line_spacing
        self.halign = halign
        self.valign = valign
        self.top_left = Vec2d()
        self.size = Vec2d()
        self.padding = Vec2d()

        self.width = max((line.width for line in self.lines), default=0.0)
        self.height = 0.0
        for idx, line in enumerate(self.lines):
            self.height += line.height if idx == 0 else self.line_spacing * line.height

    @classmethod
    def from_context(
        cls, context: cairo.Context, lines: Sequence[str], text_style: TextStyle
    ) -> MultiLineText:
        """Measures each line with the font currently selected on ``context``."""
        singles = [SingleLineText(line, TextExtent.from_context(context, line)) for line in lines]
        return cls(singles, text_style.line_spacing, text_style.halign, text_style.valign)

    def align(
        self,
        anchor_point: Vec2d,
        anchor: Anchor | str,
        padding: Vec2d = Vec2d(0.0, 0.0),
        fixed_size: Vec2d = Vec2d(-1.0, -1.0),
    ) -> None:
        anchor = as_anchor(anchor)
        point = as_vec2d(anchor_point)
        self.padding = as_vec2d(padding)
        fixed_size = as_vec2d(fixed_size)

        width = fixed_size.x if fixed_size.x > 0.0 else self.width + 2.0 * self.padding.x
        height = fixed_size.y if fixed_size.y > 0.0 else self.height + 2.0 * self.padding.y
        self.size = Vec2d(width, height)

        left = point.x
        if anchor.horizontal == HorizontalAlignment.CENTER:
            left -= width / 2.0
        elif anchor.horizontal == HorizontalAlignment.RIGHT:
            left -= width
        top = point.y
        if anchor.vertical == VerticalAlignment.CENTER:
            top -= height / 2.0
        elif anchor.vertical == VerticalAlignment.BOTTOM:
            top -= height
        self.top_left = Vec2d(left, top)

        if self.halign == HorizontalAlignment.CENTER:
            line_x = left + width / 2.0
        elif self.halign == HorizontalAlignment.RIGHT:
            line_x = left + width - self.padding.x
        else:
            line_x = left + self.padding.x

        line_anchor = Anchor.from_alignment(self.halign, VerticalAlignment.BOTTOM)
        if self.valign == VerticalAlignment.TOP:
            cursor_y = top + self.padding.y
        elif self.valign == VerticalAlignment.BOTTOM:
            cursor_y = top + height - self.padding.y - self.height
        else:
            cursor_y = top + (height - self.height) / 2.0
        for idx, line in enumerate(self.lines):
            cursor_y += line.height if idx == 0 else self.line_spacing * line.height
            line.align(Vec2d(line_x, cursor_y), line_anchor)

    def bounding_box(self, corner_radius: float = 0.0) -> Rect:
        center = self.top_left + self.size / 2.0
        return Rect(center.x, center.y, self.size.x, self.size.y, 0.0, corner_radius)

    def place_text(self, context: cairo.Context) -> None:
        for line in self.lines:
            context.move_to(line.reference_point.x, line.reference_point.y)
            context.show_text(line.text)


def _as_lines(text: str | Sequence[str]) -> list[str]:
    if isinstance(text, str):
        return text.split("\n")
    return [str(line) for line in text]


def draw_text(
    context: cairo.Context,
    text: str | Sequence[str],
    anchor_position: Vec2d,
    anchor: Anchor | str,
    text_style: TextStyle,
    padding: Vec2d = Vec2d(0.0, 0.0),
    rotation: float = 0.0,
    box_line_style: LineStyle | None = None,
    box_fill_color: Color | None = None,
    box_corner_radius: float = 0.0,
    fixed_box_size: Vec2d = Vec2d(-1.0, -1.0),
) -> Rect:
    """Renders (multi-line) text and returns its box in canvas coordinates.

    The returned rectangle includes the padding and carries ``rotation``.
    A string is split at newlines; empty input draws nothing and returns a
    zero-size rectangle at the anchor position.
    """
    if not text_style.is_valid():
        raise ValueError(f"cannot draw text with invalid style {text_style!r}")
    lines = _as_lines(text)
    origin = pixel_center(anchor_position)
    if not lines or all(not line for line in lines):
        return Rect(origin.x, origin.y, 0.0, 0.0, rotation)

    with saved_state(context):
        context.new_path()
        apply_text_style(context, text_style)
        context.translate(origin.x, origin.y)
        context.rotate(math.radians(rotation))

        block = MultiLineText.from_context(context, lines, text_style)
        block.align(Vec2d(0.0, 0.0), anchor, padding, fixed_box_size)
        box = block.bounding_box(box_corner_radius)

        has_line = box_line_style is not None and box_line_style.is_valid()
        if has_line or box_fill_color is not None:
            # draw_rect adds the pixel offset itself
            draw_rect(context, box - 0.5, box_line_style if has_line else None, box_fill_color)

        apply_color(context, text_style.color)
        block.place_text(context)
        context.new_path()

    angle = math.radians(rotation)
    center_x = origin.x + box.cx * math.cos(angle) - box.cy * math.sin(angle)
    center_y = origin.y + box.cx * math.sin(angle) + box.cy * math.cos(angle)
    return Rect(center_x, center_y, box.width, box.height, rotation, box_corner_radius)


def draw_text_box(
    context: cairo.Context,
    text: str | Sequence[str],
    anchor_position: Vec2d,
    anchor: Anchor | str,
    text_style: TextStyle,
    padding: Vec2d = Vec2d(6.0, 6.0),
    rotation: float = 0.0,
    box_line_style: LineStyle | None = None,
    box_fill_color: Color | None = Color(1.0, 1.0, 1.0, 0.6),
    box_corner_radius: float = 0.2,
    fixed_box_size: Vec2d = Vec2d(-1.0, -1.0),
) -> Rect:
    return draw_text(
        context,
        text,
        anchor_position,
        anchor,
        text_style,
        padding,
        rotation,
        box_line_style,
        box_fill_color,
        box_corner_radius,
        fixed_box_size,
    )
