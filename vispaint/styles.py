from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
import math
from typing import Any, Sequence

from vispaint.colors import (
    BLACK,
    Color,
    ColorSpec,
    NamedColor,
    SameColor,
    as_color,
    color_from_spec,
    resolve_color,
)
from vispaint.config import DEFAULT_FONT_FAMILY, DEFAULT_MITER_LIMIT
from vispaint.positioning import (
    HorizontalAlignment,
    LabelPosition,
    VerticalAlignment,
    as_halign,
    as_label_position,
    as_valign,
)
from vispaint.primitives import Vec2d, as_vec2d

_EPS = 1e-6


def _is_close(a: float, b: float) -> bool:
    return math.isclose(a, b, rel_tol=0.0, abs_tol=_EPS)


def _colors_equal(a: ColorSpec, b: ColorSpec) -> bool:
    if a is None or b is None:
        return a is b
    return a == b


class LineCap(str, Enum):
    BUTT = "butt"
    ROUND = "round"
    SQUARE = "square"

    @classmethod
    def from_string(cls, text: str) -> LineCap:
        slug = text.strip().lower()
        for cap in cls:
            if cap.value == slug:
                return cap
        raise ValueError(f"cannot parse line cap from `{text}`")

    def to_string(self) -> str:
        if self not in _CAP_NAMES:
            raise RuntimeError(f"line cap {self!r} is not mapped to a string")
        return _CAP_NAMES[self]


class LineJoin(str, Enum):
    MITER = "miter"
    ROUND = "round"
    BEVEL = "bevel"

    @classmethod
    def from_string(cls, text: str) -> LineJoin:
        slug = text.strip().lower()
        for join in cls:
            if join.value == slug:
                return join
        raise ValueError(f"cannot parse line join from `{text}`")

    def to_string(self) -> str:
        if self not in _JOIN_NAMES:
            raise RuntimeError(f"line join {self!r} is not mapped to a string")
        return _JOIN_NAMES[self]


_CAP_NAMES = {LineCap.BUTT: "butt", LineCap.ROUND: "round", LineCap.SQUARE: "square"}
_JOIN_NAMES = {LineJoin.MITER: "miter", LineJoin.ROUND: "round", LineJoin.BEVEL: "bevel"}


def _as_cap(value: LineCap | str) -> LineCap:
    return value if isinstance(value, LineCap) else LineCap.from_string(value)


def _as_join(value: LineJoin | str) -> LineJoin:
    return value if isinstance(value, LineJoin) else LineJoin.from_string(value)


DEFAULT_LINE_COLOR = Color.from_named(NamedColor.AZURE)


@dataclass(frozen=True, eq=False)
class LineStyle:
    """How to render a line or a shape's contour.

    A ``color`` of ``None`` makes the style invalid, which drawing helpers
    treat as "do not stroke".
    """

    width: float = 2.0
    color: Color | None = DEFAULT_LINE_COLOR
    dash_pattern: tuple[float, ...] = ()
    dash_offset: float = 0.0
    cap: LineCap = LineCap.BUTT
    join: LineJoin = LineJoin.MITER

    def __post_init__(self) -> None:
        object.__setattr__(self, "width", float(self.width))
        object.__setattr__(self, "color", as_color(self.color))
        object.__setattr__(self, "dash_pattern", tuple(float(d) for d in self.dash_pattern))
        object.__setattr__(self, "dash_offset", float(self.dash_offset))
        object.__setattr__(self, "cap", _as_cap(self.cap))
        object.__setattr__(self, "join", _as_join(self.join))

    def is_valid(self) -> bool:
        return self.width > 0.0 and self.color is not None

    def is_dashed(self) -> bool:
        return len(self.dash_pattern) > 0

    def cap_offset(self) -> float:
        """Distance a cap extends the line beyond its logical end point."""
        if self.cap == LineCap.BUTT:
            return 0.0
        return self.width / 2.0

    def join_offset(self, interior_angle: float, miter_limit: float = DEFAULT_MITER_LIMIT) -> float:
        """Distance a join at the given interior angle (in degrees) extends past the joint.

        Mirrors cairo's switch from a miter to a bevel join once the miter
        ratio exceeds ``miter_limit``.
        """
        miter_length = self.width / max(1e-6, math.sin(math.radians(interior_angle / 2.0)))
        if miter_length / self.width > miter_limit or self.join in (LineJoin.ROUND, LineJoin.BEVEL):
            return self.width / 2.0
        return miter_length / 2.0

    def with_color(self, color: Color | None) -> LineStyle:
        return replace(self, color=color)

    def with_width(self, width: float) -> LineStyle:
        return replace(self, width=width)

    def solid(self) -> LineStyle:
        return replace(self, dash_pattern=(), dash_offset=0.0)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LineStyle):
            return NotImplemented
        if len(self.dash_pattern) != len(other.dash_pattern):
            return False
        return (
            _is_close(self.width, other.width)
            and _colors_equal(self.color, other.color)
            and all(_is_close(a, b) for a, b in zip(self.dash_pattern, other.dash_pattern))
            and _is_close(self.dash_offset, other.dash_offset)
            and self.cap == other.cap
            and self.join == other.join
        )

    def __hash__(self) -> int:
        return hash((round(self.width, 6), self.color, self.dash_pattern, self.cap, self.join))


def _default_arrow_line() -> LineStyle:
    return LineStyle(cap=LineCap.ROUND)


@dataclass(frozen=True, eq=False)
class ArrowStyle:
    """Line style plus arrow head geometry.

    ``tip_length`` is an absolute length in pixels if it is > 1, otherwise a
    fraction of the shaft length. ``tip_angle`` is the angle in degrees
    between the shaft and each tip flank.
    """

    line: LineStyle = field(default_factory=_default_arrow_line)
    tip_length: float = 0.1
    tip_angle: float = 20.0
    tip_closed: bool = False
    double_headed: bool = False

    def is_valid(self) -> bool:
        return (
            self.tip_length > 0.0
            and 0.0 < self.tip_angle < 180.0
            and self.line.is_valid()
        )

    def tip_length_for_shaft(self, shaft: float | tuple[Any, Any]) -> float:
        if isinstance(shaft, (int, float)):
            length = float(shaft)
        else:
            start, end = shaft
            length = as_vec2d(start).distance(as_vec2d(end))
        if self.tip_length > 1.0:
            return self.tip_length
        return self.tip_length * length

    def tip_offset(self, miter_limit: float = DEFAULT_MITER_LIMIT) -> float:
        """Distance the (mitered) tip extends beyond the requested end point."""
        return self.line.join_offset(2.0 * self.tip_angle, miter_limit)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ArrowStyle):
            return NotImplemented
        return (
            self.line == other.line
            and _is_close(self.tip_length, other.tip_length)
            and _is_close(self.tip_angle, other.tip_angle)
            and self.tip_closed == other.tip_closed
            and self.double_headed == other.double_headed
        )

    def __hash__(self) -> int:
        return hash((self.line, round(self.tip_length, 6), round(self.tip_angle, 6)))


@dataclass(frozen=True, eq=False)
class TextStyle:
    size: int = 16
    family: str = DEFAULT_FONT_FAMILY
    color: Color | None = BLACK
    bold: bool = False
    italic: bool = False
    line_spacing: float = 1.2
    halign: HorizontalAlignment = HorizontalAlignment.LEFT
    valign: VerticalAlignment = VerticalAlignment.TOP

    def __post_init__(self) -> None:
        object.__setattr__(self, "size", int(self.size))
        object.__setattr__(self, "color", as_color(self.color))
        object.__setattr__(self, "halign", as_halign(self.halign))
        object.__setattr__(self, "valign", as_valign(self.valign))

    def is_valid(self) -> bool:
        return self.size > 0 and bool(self.family.strip()) and self.color is not None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TextStyle):
            return NotImplemented
        return (
            self.size == other.size
            and self.family == other.family
            and _colors_equal(self.color, other.color)
            and self.bold == other.bold
            and self.italic == other.italic
            and _is_close(self.line_spacing, other.line_spacing)
            and self.halign == other.halign
            and self.valign == other.valign
        )

    def __hash__(self) -> int:
        return hash((self.size, self.family, self.color, self.bold, self.italic))


class Marker(str, Enum):
    POINT = "."
    CIRCLE = "o"
    PLUS = "+"
    CROSS = "x"
    SQUARE = "s"
    ROTATED_SQUARE = "r"
    DIAMOND = "d"
    TRIANGLE_UP = "^"
    TRIANGLE_DOWN = "v"
    TRIANGLE_LEFT = "<"
    TRIANGLE_RIGHT = ">"
    STAR = "*"
    PENTAGRAM = "5"
    PENTAGON = "p"
    HEXAGRAM = "6"
    HEXAGON = "h"
    HEPTAGRAM = "7"
    HEPTAGON = "H"
    OCTAGRAM = "8"
    OCTAGON = "0"
    ENNEAGRAM = "9"
    ENNEAGON = "n"

    @classmethod
    def from_char(cls, char: str) -> Marker:
        for marker in cls:
            if marker.value == char:
                return marker
        raise ValueError(f"no marker is represented by `{char}`")

    def to_char(self) -> str:
        return self.value


_ALWAYS_FILLED = frozenset({Marker.POINT})
_NEVER_FILLED = frozenset({Marker.CIRCLE, Marker.PLUS, Marker.CROSS, Marker.STAR})


def list_markers() -> list[Marker]:
    return list(Marker)


def _as_marker(value: Marker | str) -> Marker:
    return value if isinstance(value, Marker) else Marker.from_char(value)


@dataclass(frozen=True, eq=False)
class MarkerStyle:
    marker: Marker = Marker.CIRCLE
    size: float = 10.0
    thickness: float = 3.0
    color: Color | None = DEFAULT_LINE_COLOR
    filled: bool = False
    background_border: float = 3.0
    background_color: Color | None = None
    cap: LineCap = LineCap.ROUND
    join: LineJoin = LineJoin.MITER

    def __post_init__(self) -> None:
        object.__setattr__(self, "marker", _as_marker(self.marker))
        object.__setattr__(self, "color", as_color(self.color))
        object.__setattr__(self, "background_color", as_color(self.background_color))
        object.__setattr__(self, "cap", _as_cap(self.cap))
        object.__setattr__(self, "join", _as_join(self.join))

    def is_filled(self) -> bool:
        if self.marker in _ALWAYS_FILLED:
            return True
        if self.marker in _NEVER_FILLED:
            return False
        return self.filled

    def is_valid(self) -> bool:
        if self.size <= 0.0 or self.color is None:
            return False
        return self.is_filled() or self.thickness > 0.0

    def with_color(self, color: Color | None) -> MarkerStyle:
        return replace(self, color=color)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MarkerStyle):
            return NotImplemented
        return (
            self.marker == other.marker
            and _is_close(self.size, other.size)
            and _is_close(self.thickness, other.thickness)
            and _colors_equal(self.color, other.color)
            and self.is_filled() == other.is_filled()
            and _is_close(self.background_border, other.background_border)
            and _colors_equal(self.background_color, other.background_color)
            and self.cap == other.cap
            and self.join == other.join
        )

    def __hash__(self) -> int:
        return hash((self.marker, round(self.size, 6), self.color))


def _default_bbox_line() -> LineStyle:
    return LineStyle()


def _default_bbox_text() -> TextStyle:
    return TextStyle()


@dataclass(frozen=True, eq=False)
class BoundingBox2DStyle:
    """How to render a labelled 2D bounding box.

    The fill colors may be ``SameColor`` placeholders, which resolve to the
    contour color (e.g. ``"same!20"`` is the contour color at 20% opacity).
    """

    line_style: LineStyle = field(default_factory=_default_bbox_line)
    text_style: TextStyle = field(default_factory=_default_bbox_text)
    box_fill_color: ColorSpec = SameColor(0.1)
    text_fill_color: ColorSpec = SameColor(0.5)
    label_position: LabelPosition = LabelPosition.TOP
    label_padding: Vec2d = Vec2d(5.0, 5.0)
    clip_label: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "box_fill_color", color_from_spec(self.box_fill_color))
        object.__setattr__(self, "text_fill_color", color_from_spec(self.text_fill_color))
        object.__setattr__(self, "label_position", as_label_position(self.label_position))
        object.__setattr__(self, "label_padding", as_vec2d(self.label_padding))

    def is_valid(self) -> bool:
        return self.line_style.is_valid() or self.text_style.is_valid()

    def resolved_box_fill_color(self) -> Color | None:
        return resolve_color(self.box_fill_color, self.line_style.color)

    def resolved_text_fill_color(self) -> Color | None:
        return resolve_color(self.text_fill_color, self.line_style.color)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BoundingBox2DStyle):
            return NotImplemented
        return (
            self.line_style == other.line_style
            and self.text_style == other.text_style
            and _colors_equal(self.box_fill_color, other.box_fill_color)
            and _colors_equal(self.text_fill_color, other.text_fill_color)
            and self.label_position == other.label_position
            and self.label_padding == other.label_padding
            and self.clip_label == other.clip_label
        )

    def __hash__(self) -> int:
        return hash((self.line_style, self.text_style, self.label_position))


def dash_pattern(values: Sequence[float] | None) -> tuple[float, ...]:
    if not values:
        return ()
    pattern = tuple(float(v) for v in values)
    if any(v < 0.0 for v in pattern) or all(v == 0.0 for v in pattern):
        raise ValueError("`dash_pattern` entries must be >= 0 and not all zero")
    return pattern


DEFAULT_LINE_STYLE = LineStyle()
DEFAULT_ARROW_STYLE = ArrowStyle()
DEFAULT_TEXT_STYLE = TextStyle()
DEFAULT_MARKER_STYLE = MarkerStyle()
DEFAULT_BOUNDING_BOX_2D_STYLE = BoundingBox2DStyle()
