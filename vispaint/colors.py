from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import re
from typing import Any, Sequence

from vispaint.errors import ColorSpecError

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")
_EPS = 1e-6
_GRAY_EPS = 0.02


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


class NamedColor(str, Enum):
    BLACK = "black"
    WHITE = "white"
    GRAY = "gray"
    RED = "red"
    GREEN = "green"
    BLUE = "blue"
    AZURE = "azure"
    BRONZE = "bronze"
    BROWN = "brown"
    CARROT = "carrot"
    COPPER = "copper"
    CRIMSON = "crimson"
    CYAN = "cyan"
    FOREST_GREEN = "forest-green"
    FREESIA = "freesia"
    GOLD = "gold"
    INDIGO = "indigo"
    IVORY = "ivory"
    LAVENDER = "lavender"
    LIGHT_BLUE = "light-blue"
    LIME_GREEN = "lime-green"
    MAROON = "maroon"
    MAGENTA = "magenta"
    MIDNIGHT_BLUE = "midnight-blue"
    NAVY_BLUE = "navy-blue"
    OLIVE = "olive"
    ORANGE = "orange"
    ORCHID = "orchid"
    PURPLE = "purple"
    ROSE_RED = "rose-red"
    SALMON = "salmon"
    SILVER = "silver"
    SPEARMINT = "spearmint"
    TANGERINE = "tangerine"
    TAUPE = "taupe"
    TEAL_GREEN = "teal-green"
    TURQUOISE = "turquoise"
    YELLOW = "yellow"


_NAMED_RGB: dict[NamedColor, tuple[float, float, float]] = {
    NamedColor.BLACK: (0.0, 0.0, 0.0),
    NamedColor.WHITE: (1.0, 1.0, 1.0),
    NamedColor.GRAY: (0.5, 0.5, 0.5),
    NamedColor.RED: (1.0, 0.0, 0.0),
    NamedColor.GREEN: (0.0, 1.0, 0.0),
    NamedColor.BLUE: (0.0, 0.0, 1.0),
    NamedColor.AZURE: (0.0, 0.5, 1.0),
    NamedColor.BRONZE: (0.8, 0.5, 0.2),
    NamedColor.BROWN: (0.53, 0.33, 0.04),
    NamedColor.CARROT: (0.93, 0.57, 0.13),
    NamedColor.COPPER: (0.72, 0.45, 0.2),
    NamedColor.CRIMSON: (0.6, 0.0, 0.0),
    NamedColor.CYAN: (0.0, 1.0, 1.0),
    NamedColor.FOREST_GREEN: (0.13, 0.55, 0.13),
    NamedColor.FREESIA: (0.97, 0.77, 0.14),
    NamedColor.GOLD: (1.0, 0.84, 0.0),
    NamedColor.INDIGO: (0.3, 0.0, 0.51),
    NamedColor.IVORY: (1.0, 1.0, 0.94),
    NamedColor.LAVENDER: (0.9, 0.9, 0.98),
    NamedColor.LIGHT_BLUE: (0.68, 0.85, 0.9),
    NamedColor.LIME_GREEN: (0.2, 0.8, 0.2),
    NamedColor.MAROON: (0.5, 0.0, 0.0),
    NamedColor.MAGENTA: (1.0, 0.0, 1.0),
    NamedColor.MIDNIGHT_BLUE: (0.1, 0.1, 0.44),
    NamedColor.NAVY_BLUE: (0.0, 0.0, 0.5),
    NamedColor.OLIVE: (0.5, 0.5, 0.0),
    NamedColor.ORANGE: (1.0, 0.65, 0.0),
    NamedColor.ORCHID: (0.86, 0.44, 0.84),
    NamedColor.PURPLE: (0.63, 0.13, 0.94),
    NamedColor.ROSE_RED: (1.0, 0.01, 0.24),
    NamedColor.SALMON: (0.98, 0.5, 0.45),
    NamedColor.SILVER: (0.75, 0.75, 0.75),
    NamedColor.SPEARMINT: (0.27, 0.69, 0.55),
    NamedColor.TANGERINE: (0.95, 0.52, 0.0),
    NamedColor.TAUPE: (0.28, 0.24, 0.20),
    NamedColor.TEAL_GREEN: (0.0, 0.43, 0.36),
    NamedColor.TURQUOISE: (0.19, 0.84, 0.78),
    NamedColor.YELLOW: (1.0, 1.0, 0.0),
}

_NAME_LOOKUP: dict[str, NamedColor] = {
    named.value.replace("-", ""): named for named in NamedColor
}
_NAME_LOOKUP["grey"] = NamedColor.GRAY


def _normalize_name(name: str) -> str:
    return "".join(ch for ch in name.lower() if not ch.isspace() and ch not in "-_")


def named_color_from_string(name: str) -> NamedColor:
    """Looks up a named color, ignoring case, whitespace, `-`, `_` and any `!alpha` suffix."""
    key = _normalize_name(name.split("!", 1)[0])
    try:
        return _NAME_LOOKUP[key]
    except KeyError:
        raise ColorSpecError(f"unknown color name: `{name}`") from None


def named_color_to_string(named: NamedColor) -> str:
    if not isinstance(named, NamedColor) or named not in _NAMED_RGB:
        raise RuntimeError(f"named color {named!r} is not mapped to a string")
    return named.value


def list_named_colors() -> list[NamedColor]:
    return list(NamedColor)


@dataclass(frozen=True, eq=False)
class Color:
    """An rgba color with components in [0, 1].

    Out-of-range inputs are clamped, so a constructed color is always valid.
    "No color" is expressed as ``None`` and "reuse the sibling's color" as
    ``SameColor`` instead of magic component values.
    """

    red: float = 0.0
    green: float = 0.0
    blue: float = 0.0
    alpha: float = 1.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "red", _clamp01(self.red))
        object.__setattr__(self, "green", _clamp01(self.green))
        object.__setattr__(self, "blue", _clamp01(self.blue))
        object.__setattr__(self, "alpha", _clamp01(self.alpha))

    @classmethod
    def from_named(cls, named: NamedColor | str, alpha: float = 1.0) -> Color:
        if not isinstance(named, NamedColor):
            named = named_color_from_string(named)
        r, g, b = _NAMED_RGB[named]
        return cls(r, g, b, alpha)

    @classmethod
    def from_hex(cls, webcode: str, alpha: float = 1.0) -> Color:
        code = webcode.strip()
        if not _HEX_COLOR.match(code):
            raise ColorSpecError(
                f"hex color `{webcode}` must be #RRGGBB or #RRGGBBAA"
            )
        r = int(code[1:3], 16) / 255.0
        g = int(code[3:5], 16) / 255.0
        b = int(code[5:7], 16) / 255.0
        if len(code) == 9:
            alpha = int(code[7:9], 16) / 255.0
        return cls(r, g, b, alpha)

    @classmethod
    def from_string(cls, spec: str, alpha: float = 1.0) -> Color:
        """Parses a color specification.

        Supported forms are web codes (``#00ff00``, ``#00ff00cc``), color
        names with an optional ``!NN`` alpha suffix (``"navy-blue!40"``) and
        an optional ``!``/``-`` prefix that selects the inverse color
        (``"!blue"`` is yellow).
        """
        if not isinstance(spec, str):
            raise ColorSpecError(f"color specification must be a string, got {type(spec)!r}")
        text = spec.strip()
        if not text:
            raise ColorSpecError("color specification must not be empty")
        if text.startswith("#"):
            return cls.from_hex(text, alpha)

        invert = len(text) > 1 and text[0] in "!-"
        if invert:
            text = text[1:]

        pos = text.find("!")
        if pos >= 0:
            suffix = text[pos + 1:]
            if not suffix.isdigit():
                raise ColorSpecError(
                    f"alpha suffix in `{spec}` must be an integer in [0, 100]"
                )
            percent = int(suffix)
            if percent < 0 or percent > 100:
                raise ColorSpecError(f"alpha suffix in `{spec}` must be in [0, 100]")
            alpha = percent / 100.0
            text = text[:pos]

        color = cls.from_named(named_color_from_string(text), alpha)
        return color.inverse() if invert else color

    def with_alpha(self, alpha: float) -> Color:
        return Color(self.red, self.green, self.blue, alpha)

    def is_shade_of_gray(self, eps: float = _GRAY_EPS) -> bool:
        return (
            abs(self.red - self.green) < eps
            and abs(self.red - self.blue) < eps
            and abs(self.green - self.blue) < eps
        )

    def inverse(self) -> Color:
        if self.is_shade_of_gray():
            if self.red < 0.5:
                return Color(1.0, 1.0, 1.0, self.alpha)
            return Color(0.0, 0.0, 0.0, self.alpha)
        return Color(1.0 - self.red, 1.0 - self.green, 1.0 - self.blue, self.alpha)

    def grayscale(self) -> Color:
        luma = 0.2989 * self.red + 0.5870 * self.green + 0.1141 * self.blue
        return Color(luma, luma, luma, self.alpha)

    def mix(self, other: Color, factor: float) -> Color:
        """Returns ``(1 - factor) * self + factor * other``."""
        f = _clamp01(factor)
        return Color(
            (1.0 - f) * self.red + f * other.red,
            (1.0 - f) * self.green + f * other.green,
            (1.0 - f) * self.blue + f * other.blue,
            (1.0 - f) * self.alpha + f * other.alpha,
        )

    def to_rgba(self) -> tuple[float, float, float, float]:
        return (self.red, self.green, self.blue, self.alpha)

    def to_rgba255(self) -> tuple[int, int, int, int]:
        return (
            int(self.red * 255),
            int(self.green * 255),
            int(self.blue * 255),
            int(self.alpha * 255),
        )

    def to_hex(self) -> str:
        return "#" + "".join(f"{c:02x}" for c in self.to_rgba255())

    def __mul__(self, scale: float) -> Color:
        return Color(self.red * scale, self.green * scale, self.blue * scale, self.alpha)

    __rmul__ = __mul__

    def __truediv__(self, divisor: float) -> Color:
        return self * (1.0 / divisor)

    def __add__(self, other: Color) -> Color:
        return Color(
            self.red + other.red, self.green + other.green, self.blue + other.blue, self.alpha
        )

    def __sub__(self, other: Color) -> Color:
        return Color(
            self.red - other.red, self.green - other.green, self.blue - other.blue, self.alpha
        )

    def __eq__(self, other: object) -> bool:
        if isinstance(other, str):
            try:
                other = Color.from_string(other)
            except ValueError:
                return False
        if not isinstance(other, Color):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def _key(self) -> tuple[int, int, int, int]:
        # Components quantized to `_EPS` steps.
        return tuple(round(c / _EPS) for c in self.to_rgba())

    def __str__(self) -> str:
        return f"Color({self.red:.2f}, {self.green:.2f}, {self.blue:.2f}, a={self.alpha:.2f})"


@dataclass(frozen=True)
class SameColor:
    """Placeholder for "use the sibling color", optionally with a new alpha."""

    alpha: float | None = None

    def resolve(self, reference: Color | None) -> Color | None:
        if reference is None:
            return None
        if self.alpha is None:
            return reference
        return reference.with_alpha(self.alpha)


SAME = SameColor()

ColorSpec = Color | SameColor | None


def rgba(red: float, green: float, blue: float, alpha: float = 1.0) -> Color:
    return Color(red, green, blue, alpha)


def rgba255(red: float, green: float, blue: float, alpha: float = 1.0) -> Color:
    """Creates a color from [0, 255] rgb components and a [0, 1] alpha."""
    return Color(red / 255.0, green / 255.0, blue / 255.0, alpha)


def _parse_same(text: str) -> SameColor | None:
    lowered = text.strip().lower()
    if lowered == "same":
        return SAME
    if lowered.startswith("same!"):
        suffix = lowered[5:]
        if not suffix.isdigit() or int(suffix) > 100:
            raise ColorSpecError(f"alpha suffix in `{text}` must be in [0, 100]")
        return SameColor(int(suffix) / 100.0)
    return None


def color_from_spec(value: Any, alpha: float | None = None) -> ColorSpec:
    """Coerces user input into a `Color`, a `SameColor` or ``None``.

    Accepts colors, color strings (including ``"same"``/``"same!NN"`` and
    ``"none"``), named colors and rgb(a) sequences with components in [0, 1].
    """
    if value is None or isinstance(value, SameColor):
        return value
    if isinstance(value, Color):
        return value if alpha is None else value.with_alpha(alpha)
    if isinstance(value, NamedColor):
        return Color.from_named(value, 1.0 if alpha is None else alpha)
    if isinstance(value, str):
        if value.strip().lower() in ("none", "invalid"):
            return None
        same = _parse_same(value)
        if same is not None:
            return same
        return Color.from_string(value, 1.0 if alpha is None else alpha)
    if isinstance(value, Sequence) and len(value) in (3, 4):
        components = [float(c) for c in value]
        if len(components) == 3:
            components.append(1.0 if alpha is None else alpha)
        elif alpha is not None:
            components[3] = alpha
        return Color(*components)
    raise ColorSpecError(f"cannot interpret {value!r} as a color")


def as_color(value: Any) -> Color | None:
    """Like `color_from_spec`, but rejects the ``same`` placeholder."""
    spec = color_from_spec(value)
    if isinstance(spec, SameColor):
        raise ValueError("`same` is not allowed for this color")
    return spec


def resolve_color(spec: ColorSpec, reference: Color | None) -> Color | None:
    if isinstance(spec, SameColor):
        return spec.resolve(reference)
    return spec


BLACK = Color.from_named(NamedColor.BLACK)
WHITE = Color.from_named(NamedColor.WHITE)
GRAY = Color.from_named(NamedColor.GRAY)
RED = Color.from_named(NamedColor.RED)
GREEN = Color.from_named(NamedColor.GREEN)
BLUE = Color.from_named(NamedColor.BLUE)
CYAN = Color.from_named(NamedColor.CYAN)
MAGENTA = Color.from_named(NamedColor.MAGENTA)
YELLOW = Color.from_named(NamedColor.YELLOW)
AZURE = Color.from_named(NamedColor.AZURE)
NAVY_BLUE = Color.from_named(NamedColor.NAVY_BLUE)
