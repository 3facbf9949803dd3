from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Sequence

import cairo

from vispaint.positioning import Anchor, HorizontalAlignment, LabelPosition, VerticalAlignment
from vispaint.primitives import Rect, Vec2d
from vispaint.raster.canvas import apply_color, apply_line_style, saved_state
from vispaint.raster.draw_shapes import rect_path
from vispaint.raster.draw_text import MultiLineText, apply_text_style
from vispaint.styles import BoundingBox2DStyle

LOGGER = logging.getLogger(__name__)

# Canvas rotation (degrees) and vertical text alignment per label position.
_LABEL_FRAMES: dict[LabelPosition, tuple[float, VerticalAlignment]] = {
    LabelPosition.TOP: (0.0, VerticalAlignment.TOP),
    LabelPosition.BOTTOM: (0.0, VerticalAlignment.BOTTOM),
    LabelPosition.LEFT_B2T: (-90.0, VerticalAlignment.TOP),
    LabelPosition.LEFT_T2B: (90.0, VerticalAlignment.BOTTOM),
    LabelPosition.RIGHT_B2T: (-90.0, VerticalAlignment.BOTTOM),
    LabelPosition.RIGHT_T2B: (90.0, VerticalAlignment.TOP),
}


@dataclass
class AlignedLabel:
    text_box: Rect
    text: MultiLineText
    rotation: float


def _by_halign(halign: HorizontalAlignment, left: float, center: float, right: float) -> float:
    if halign == HorizontalAlignment.LEFT:
        return left
    if halign == HorizontalAlignment.CENTER:
        return center
    return right


def _rotated_anchor(box: Rect, position: LabelPosition, halign: HorizontalAlignment, valign: VerticalAlignment) -> Vec2d:
    """Anchor point of the label in the frame rotated about the box center."""
    top = valign == VerticalAlignment.TOP
    if position in (LabelPosition.TOP, LabelPosition.BOTTOM):
        return Vec2d(_by_halign(halign, box.left, box.cx, box.right), box.top if top else box.bottom)
    if position in (LabelPosition.LEFT_B2T, LabelPosition.RIGHT_B2T):
        return Vec2d(-_by_halign(halign, box.bottom, box.cy, box.top), box.left if top else box.right)
    return Vec2d(_by_halign(halign, box.top, box.cy, box.bottom), -(box.right if top else box.left))


def prepare_label(
    context: cairo.Context,
    box: Rect,
    style: BoundingBox2DStyle,
    label: Sequence[str],
    position: LabelPosition,
) -> AlignedLabel | None:
    if not label:
        return None
    rotation, valign = _LABEL_FRAMES[position]
    halign = style.text_style.halign
    anchor_point = _rotated_anchor(box, position, halign, valign)

    with saved_state(context):
        context.rotate(math.radians(rotation))
        apply_text_style(context, style.text_style)
        text = MultiLineText.from_context(context, label, style.text_style)
        text.align(anchor_point, Anchor.from_alignment(halign, valign), style.label_padding)

    text_height = text.size.y
    if position == LabelPosition.TOP:
        text_box = Rect.from_ltwh(box.left, box.top, box.width, text_height)
    elif position == LabelPosition.BOTTOM:
        text_box = Rect.from_ltwh(box.left, box.bottom - text_height, box.width, text_height)
    elif position in (LabelPosition.LEFT_B2T, LabelPosition.LEFT_T2B):
        text_box = Rect.from_ltwh(box.left, box.top, text_height, box.height)
    else:
        text_box = Rect.from_ltwh(box.right - text_height, box.top, text_height, box.height)
    return AlignedLabel(text_box, text, rotation)


def align_labels(
    context: cairo.Context,
    box: Rect,
    style: BoundingBox2DStyle,
    label_top: Sequence[str],
    label_bottom: Sequence[str],
    label_left: Sequence[str],
    left_top_to_bottom: bool,
    label_right: Sequence[str],
    right_top_to_bottom: bool,
) -> tuple[Rect, list[AlignedLabel]]:
    """Places all labels and returns the box area they leave uncovered.

    Top and bottom labels are placed first; side labels may only use the
    remaining height.
    """
    labels = []
    free = box

    top = prepare_label(context, box, style, label_top, LabelPosition.TOP)
    if top is not None:
        labels.append(top)
        free = Rect(free.cx, free.cy + top.text_box.height / 2.0, free.width, free.height - top.text_box.height)
    bottom = prepare_label(context, box, style, label_bottom, LabelPosition.BOTTOM)
    if bottom is not None:
        labels.append(bottom)
        free = Rect(free.cx, free.cy - bottom.text_box.height / 2.0, free.width, free.height - bottom.text_box.height)

    available = free
    left_position = LabelPosition.LEFT_T2B if left_top_to_bottom else LabelPosition.LEFT_B2T
    left = prepare_label(context, available, style, label_left, left_position)
    if left is not None:
        labels.append(left)
        free = Rect(free.cx + left.text_box.width / 2.0, free.cy, free.width - left.text_box.width, free.height)
    right_position = LabelPosition.RIGHT_T2B if right_top_to_bottom else LabelPosition.RIGHT_B2T
    right = prepare_label(context, available, style, label_right, right_position)
    if right is not None:
        labels.append(right)
        free = Rect(free.cx - right.text_box.width / 2.0, free.cy, free.width - right.text_box.width, free.height)

    if style.resolved_text_fill_color() is None:
        free = box
    return free, labels


def labels_for_position(
    label: Sequence[str] | str | None, position: LabelPosition
) -> dict[str, Sequence[str] | bool]:
    """Maps a single label onto the keyword arguments of `draw_bounding_box_2d`."""
    if not label:
        return {}
    lines = label.split("\n") if isinstance(label, str) else list(label)
    if position == LabelPosition.TOP:
        return {"label_top": lines}
    if position == LabelPosition.BOTTOM:
        return {"label_bottom": lines}
    if position in (LabelPosition.LEFT_B2T, LabelPosition.LEFT_T2B):
        return {"label_left": lines, "left_top_to_bottom": position == LabelPosition.LEFT_T2B}
    return {"label_right": lines, "right_top_to_bottom": position == LabelPosition.RIGHT_T2B}


def draw_bounding_box_2d(
    context: cairo.Context,
    rect: Rect,
    style: BoundingBox2DStyle,
    label_top: Sequence[str] = (),
    label_bottom: Sequence[str] = (),
    label_left: Sequence[str] = (),
    left_top_to_bottom: bool = False,
    label_right: Sequence[str] = (),
    right_top_to_bottom: bool = False,
) -> bool:
    """Draws a (rotated, rounded) box with optional labels along its edges.

    Drawing order: box fill, label backgrounds, contour, labels. Label
    backgrounds are always clipped by the box; the labels themselves only if
    ``style.clip_label`` is set.
    """
    if style is None or not style.is_valid():
        LOGGER.warning("%s", f"cannot draw a bounding box with invalid style {style!r}")
        return False
    if rect is None or not rect.is_valid():
        LOGGER.warning("%s", f"cannot draw an invalid bounding box {rect!r}")
        return False

    rect = rect + 0.5
    box = Rect(0.0, 0.0, rect.width, rect.height, 0.0, rect.radius)
    has_labels = style.text_style.is_valid()

    with saved_state(context):
        context.new_path()
        context.translate(rect.cx, rect.cy)
        context.rotate(math.radians(rect.rotation))
        rect_path(context, box)
        box_path = context.copy_path()

        with saved_state(context):
            if has_labels:
                background, labels = align_labels(
                    context, box, style, label_top, label_bottom,
                    label_left, left_top_to_bottom, label_right, right_top_to_bottom,
                )
            else:
                background, labels = box, []
            context.clip()
            box_fill = style.resolved_box_fill_color()
            if box_fill is not None:
                apply_color(context, box_fill)
                context.rectangle(background.left, background.top, background.width, background.height)
                context.fill()
            text_fill = style.resolved_text_fill_color()
            if labels and text_fill is not None:
                apply_color(context, text_fill)
                for aligned in labels:
                    tb = aligned.text_box
                    context.rectangle(tb.left, tb.top, tb.width, tb.height)
                    context.fill()
            context.reset_clip()

        context.new_path()
        context.append_path(box_path)
        if style.line_style.is_valid():
            apply_line_style(context, style.line_style)
            if style.clip_label:
                context.stroke_preserve()
                context.clip()
            else:
                context.stroke()
        elif style.clip_label:
            context.clip()
        else:
            context.new_path()

        if labels:
            apply_text_style(context, style.text_style)
            for aligned in labels:
                with saved_state(context):
                    context.rotate(math.radians(aligned.rotation))
                    aligned.text.place_text(context)
    return True
