from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Any, Iterator, Sequence

_EPS = 1e-9


def _is_close(a: float, b: float) -> bool:
    return math.isclose(a, b, rel_tol=1e-9, abs_tol=_EPS)


@dataclass(frozen=True, eq=False)
class Vec2d:
    x: float = 0.0
    y: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __len__(self) -> int:
        return 2

    def __getitem__(self, idx: int) -> float:
        return (self.x, self.y)[idx]

    def __add__(self, other: Any) -> Vec2d:
        if isinstance(other, (int, float)):
            return Vec2d(self.x + other, self.y + other)
        ox, oy = other
        return Vec2d(self.x + ox, self.y + oy)

    __radd__ = __add__

    def __sub__(self, other: Any) -> Vec2d:
        if isinstance(other, (int, float)):
            return Vec2d(self.x - other, self.y - other)
        ox, oy = other
        return Vec2d(self.x - ox, self.y - oy)

    def __rsub__(self, other: Any) -> Vec2d:
        return -(self - other)

    def __mul__(self, scale: float) -> Vec2d:
        return Vec2d(self.x * scale, self.y * scale)

    __rmul__ = __mul__

    def __truediv__(self, divisor: float) -> Vec2d:
        return Vec2d(self.x / divisor, self.y / divisor)

    def __neg__(self) -> Vec2d:
        return Vec2d(-self.x, -self.y)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (Vec2d, Vec2i, tuple, list)) and len(other) == 2:
            return _is_close(self.x, other[0]) and _is_close(self.y, other[1])
        return NotImplemented

    def __hash__(self) -> int:
        return hash((round(self.x, 6), round(self.y, 6)))

    @property
    def width(self) -> float:
        return self.x

    @property
    def height(self) -> float:
        return self.y

    def dot(self, other: Vec2d) -> float:
        return self.x * other[0] + self.y * other[1]

    def cross(self, other: Vec2d) -> float:
        return self.x * other[1] - self.y * other[0]

    def length_squared(self) -> float:
        return self.x * self.x + self.y * self.y

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def distance(self, other: Vec2d) -> float:
        return (as_vec2d(other) - self).length()

    def direction_vector(self, to: Vec2d) -> Vec2d:
        return as_vec2d(to) - self

    def unit_vector(self) -> Vec2d:
        length = self.length()
        if length <= 0.0:
            raise ValueError("cannot normalize a zero-length vector")
        return self / length

    def to_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class Vec2i:
    x: int = 0
    y: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", int(self.x))
        object.__setattr__(self, "y", int(self.y))

    def __iter__(self) -> Iterator[int]:
        yield self.x
        yield self.y

    def __len__(self) -> int:
        return 2

    def __getitem__(self, idx: int) -> int:
        return (self.x, self.y)[idx]

    def __add__(self, other: Any) -> Vec2i:
        ox, oy = other
        return Vec2i(self.x + ox, self.y + oy)

    def __sub__(self, other: Any) -> Vec2i:
        ox, oy = other
        return Vec2i(self.x - ox, self.y - oy)

    @property
    def width(self) -> int:
        return self.x

    @property
    def height(self) -> int:
        return self.y

    def to_vec2d(self) -> Vec2d:
        return Vec2d(float(self.x), float(self.y))


@dataclass(frozen=True, eq=False)
class Vec3d:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __len__(self) -> int:
        return 3

    def __getitem__(self, idx: int) -> float:
        return (self.x, self.y, self.z)[idx]

    def __add__(self, other: Any) -> Vec3d:
        ox, oy, oz = other
        return Vec3d(self.x + ox, self.y + oy, self.z + oz)

    def __sub__(self, other: Any) -> Vec3d:
        ox, oy, oz = other
        return Vec3d(self.x - ox, self.y - oy, self.z - oz)

    def __mul__(self, scale: float) -> Vec3d:
        return Vec3d(self.x * scale, self.y * scale, self.z * scale)

    __rmul__ = __mul__

    def __truediv__(self, divisor: float) -> Vec3d:
        return Vec3d(self.x / divisor, self.y / divisor, self.z / divisor)

    def __neg__(self) -> Vec3d:
        return Vec3d(-self.x, -self.y, -self.z)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (Vec3d, tuple, list)) and len(other) == 3:
            return all(_is_close(a, b) for a, b in zip(self, other))
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(round(v, 6) for v in self))

    def dot(self, other: Vec3d) -> float:
        ox, oy, oz = other
        return self.x * ox + self.y * oy + self.z * oz

    def cross(self, other: Vec3d) -> Vec3d:
        ox, oy, oz = other
        return Vec3d(
            self.y * oz - self.z * oy,
            self.z * ox - self.x * oz,
            self.x * oy - self.y * ox,
        )

    def length_squared(self) -> float:
        return self.dot(self)

    def length(self) -> float:
        return math.sqrt(self.length_squared())

    def distance(self, other: Vec3d) -> float:
        return (as_vec3d(other) - self).length()

    def unit_vector(self) -> Vec3d:
        length = self.length()
        if length <= 0.0:
            raise ValueError("cannot normalize a zero-length vector")
        return self / length


def as_vec2d(value: Any) -> Vec2d:
    if isinstance(value, Vec2d):
        return value
    if isinstance(value, Sequence) or hasattr(value, "__len__"):
        if len(value) != 2:
            raise ValueError(f"expected 2 coordinates, got {len(value)}")
        return Vec2d(float(value[0]), float(value[1]))
    raise ValueError(f"cannot interpret {value!r} as a 2D vector")


def as_vec3d(value: Any) -> Vec3d:
    if isinstance(value, Vec3d):
        return value
    if len(value) != 3:
        raise ValueError(f"expected 3 coordinates, got {len(value)}")
    return Vec3d(float(value[0]), float(value[1]), float(value[2]))


def project_point_onto_line(pt: Vec2d, line_from: Vec2d, line_to: Vec2d) -> Vec2d:
    pt = as_vec2d(pt)
    start = as_vec2d(line_from)
    direction = start.direction_vector(line_to)
    denom = direction.length_squared()
    if denom <= 0.0:
        return start
    t = (pt - start).dot(direction) / denom
    return start + t * direction


@dataclass(frozen=True, eq=False)
class Rect:
    """A (possibly rotated, possibly rounded) rectangle given by its center.

    ``radius`` is an absolute corner radius in pixels if it is > 1, and a
    fraction of ``min(width, height)`` if it is <= 0.5.
    """

    cx: float
    cy: float
    width: float
    height: float
    rotation: float = 0.0
    radius: float = 0.0

    @classmethod
    def from_ltwh(cls, left: float, top: float, width: float, height: float, radius: float = 0.0) -> Rect:
        return cls(left + width / 2.0, top + height / 2.0, width, height, 0.0, radius)

    @classmethod
    def from_lrtb(cls, left: float, right: float, top: float, bottom: float, radius: float = 0.0) -> Rect:
        w = right - left
        h = bottom - top
        return cls(left + w / 2.0, top + h / 2.0, w, h, 0.0, radius)

    @classmethod
    def from_cwh(
        cls, cx: float, cy: float, width: float, height: float, rotation: float = 0.0, radius: float = 0.0
    ) -> Rect:
        return cls(cx, cy, width, height, rotation, radius)

    @property
    def half_width(self) -> float:
        return self.width / 2.0

    @property
    def half_height(self) -> float:
        return self.height / 2.0

    @property
    def left(self) -> float:
        return self.cx - self.half_width

    @property
    def right(self) -> float:
        return self.cx + self.half_width

    @property
    def top(self) -> float:
        return self.cy - self.half_height

    @property
    def bottom(self) -> float:
        return self.cy + self.half_height

    @property
    def center(self) -> Vec2d:
        return Vec2d(self.cx, self.cy)

    @property
    def size(self) -> Vec2d:
        return Vec2d(self.width, self.height)

    @property
    def top_left(self) -> Vec2d:
        return Vec2d(self.left, self.top)

    def is_valid(self) -> bool:
        if 0.5 < self.radius < 1.0:
            return False
        return (
            self.width > 0.0
            and self.height > 0.0
            and self.radius >= 0.0
            and self.radius <= min(self.half_width, self.half_height)
        )

    def with_radius(self, radius: float) -> Rect:
        return Rect(self.cx, self.cy, self.width, self.height, self.rotation, radius)

    def __add__(self, offset: Any) -> Rect:
        off = as_vec2d(offset) if not isinstance(offset, (int, float)) else Vec2d(offset, offset)
        return Rect(self.cx + off.x, self.cy + off.y, self.width, self.height, self.rotation, self.radius)

    def __sub__(self, offset: Any) -> Rect:
        off = as_vec2d(offset) if not isinstance(offset, (int, float)) else Vec2d(offset, offset)
        return Rect(self.cx - off.x, self.cy - off.y, self.width, self.height, self.rotation, self.radius)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Rect):
            return NotImplemented
        return all(
            _is_close(a, b)
            for a, b in zip(
                (self.cx, self.cy, self.width, self.height, self.rotation, self.radius),
                (other.cx, other.cy, other.width, other.height, other.rotation, other.radius),
            )
        )

    def __hash__(self) -> int:
        return hash((round(self.cx, 6), round(self.cy, 6), round(self.width, 6), round(self.height, 6)))


@dataclass(frozen=True, eq=False)
class Ellipse:
    cx: float
    cy: float
    major_axis: float
    minor_axis: float
    rotation: float = 0.0
    angle_from: float = 0.0
    angle_to: float = 360.0
    include_center: bool = True

    @classmethod
    def from_endpoints(
        cls,
        pt1: Vec2d,
        pt2: Vec2d,
        width: float,
        angle_from: float = 0.0,
        angle_to: float = 360.0,
        include_center: bool = True,
    ) -> Ellipse:
        start = as_vec2d(pt1)
        direction = start.direction_vector(pt2)
        major = direction.length()
        center = start + direction / 2.0
        rotation = math.degrees(math.atan2(direction.y, direction.x))
        return cls(center.x, center.y, major, width, rotation, angle_from, angle_to, include_center)

    @property
    def center(self) -> Vec2d:
        return Vec2d(self.cx, self.cy)

    @property
    def axes(self) -> Vec2d:
        return Vec2d(self.major_axis, self.minor_axis)

    def is_valid(self) -> bool:
        return (
            self.major_axis > 0.0
            and self.minor_axis > 0.0
            and self.major_axis >= self.minor_axis
            and not _is_close(self.angle_from, self.angle_to)
        )

    def __add__(self, offset: Any) -> Ellipse:
        off = as_vec2d(offset) if not isinstance(offset, (int, float)) else Vec2d(offset, offset)
        return Ellipse(
            self.cx + off.x, self.cy + off.y, self.major_axis, self.minor_axis,
            self.rotation, self.angle_from, self.angle_to, self.include_center,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ellipse):
            return NotImplemented
        return self.include_center == other.include_center and all(
            _is_close(a, b)
            for a, b in zip(
                (self.cx, self.cy, self.major_axis, self.minor_axis, self.rotation, self.angle_from, self.angle_to),
                (other.cx, other.cy, other.major_axis, other.minor_axis, other.rotation, other.angle_from, other.angle_to),
            )
        )

    def __hash__(self) -> int:
        return hash((round(self.cx, 6), round(self.cy, 6), round(self.major_axis, 6), round(self.minor_axis, 6)))


def as_rect(value: Any) -> Rect:
    if isinstance(value, Rect):
        return value
    values = [float(v) for v in value]
    if len(values) < 4 or len(values) > 6:
        raise ValueError(f"a rect requires 4 to 6 values (cx, cy, w, h[, rotation[, radius]]), got {len(values)}")
    return Rect(*values)


def as_ellipse(value: Any) -> Ellipse:
    if isinstance(value, Ellipse):
        return value
    values = list(value)
    if len(values) < 4 or len(values) > 8:
        raise ValueError(f"an ellipse requires 4 to 8 values, got {len(values)}")
    return Ellipse(*values)
