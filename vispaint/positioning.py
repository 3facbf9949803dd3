from __future__ import annotations

from enum import Enum


def _slug(text: str) -> str:
    return "".join(ch for ch in text.lower() if not ch.isspace() and ch not in "-_")


class HorizontalAlignment(str, Enum):
    LEFT = "left"
    CENTER = "hcenter"
    RIGHT = "right"

    @classmethod
    def from_string(cls, text: str) -> HorizontalAlignment:
        slug = _slug(text)
        if slug in ("left", "west"):
            return cls.LEFT
        if slug in ("center", "middle", "hcenter"):
            return cls.CENTER
        if slug in ("right", "east"):
            return cls.RIGHT
        raise ValueError(f"cannot parse horizontal alignment from `{text}`")


class VerticalAlignment(str, Enum):
    TOP = "top"
    CENTER = "vcenter"
    BOTTOM = "bottom"

    @classmethod
    def from_string(cls, text: str) -> VerticalAlignment:
        slug = _slug(text)
        if slug in ("top", "north"):
            return cls.TOP
        if slug in ("center", "middle", "vcenter"):
            return cls.CENTER
        if slug in ("bottom", "south"):
            return cls.BOTTOM
        raise ValueError(f"cannot parse vertical alignment from `{text}`")


class Anchor(str, Enum):
    CENTER = "center"
    TOP = "top"
    TOP_RIGHT = "top-right"
    RIGHT = "right"
    BOTTOM_RIGHT = "bottom-right"
    BOTTOM = "bottom"
    BOTTOM_LEFT = "bottom-left"
    LEFT = "left"
    TOP_LEFT = "top-left"

    @classmethod
    def from_string(cls, text: str) -> Anchor:
        try:
            return _ANCHOR_SLUGS[_slug(text)]
        except KeyError:
            raise ValueError(f"cannot parse anchor from `{text}`") from None

    @classmethod
    def from_alignment(cls, halign: HorizontalAlignment, valign: VerticalAlignment) -> Anchor:
        for anchor, parts in _ANCHOR_PARTS.items():
            if parts == (halign, valign):
                return anchor
        raise RuntimeError(f"alignment ({halign}, {valign}) is not mapped to an anchor")

    @property
    def horizontal(self) -> HorizontalAlignment:
        return _ANCHOR_PARTS[self][0]

    @property
    def vertical(self) -> VerticalAlignment:
        return _ANCHOR_PARTS[self][1]


_ANCHOR_PARTS: dict[Anchor, tuple[HorizontalAlignment, VerticalAlignment]] = {
    Anchor.CENTER: (HorizontalAlignment.CENTER, VerticalAlignment.CENTER),
    Anchor.TOP: (HorizontalAlignment.CENTER, VerticalAlignment.TOP),
    Anchor.TOP_RIGHT: (HorizontalAlignment.RIGHT, VerticalAlignment.TOP),
    Anchor.RIGHT: (HorizontalAlignment.RIGHT, VerticalAlignment.CENTER),
    Anchor.BOTTOM_RIGHT: (HorizontalAlignment.RIGHT, VerticalAlignment.BOTTOM),
    Anchor.BOTTOM: (HorizontalAlignment.CENTER, VerticalAlignment.BOTTOM),
    Anchor.BOTTOM_LEFT: (HorizontalAlignment.LEFT, VerticalAlignment.BOTTOM),
    Anchor.LEFT: (HorizontalAlignment.LEFT, VerticalAlignment.CENTER),
    Anchor.TOP_LEFT: (HorizontalAlignment.LEFT, VerticalAlignment.TOP),
}

_ANCHOR_SLUGS: dict[str, Anchor] = {
    "center": Anchor.CENTER,
    "middle": Anchor.CENTER,
    "top": Anchor.TOP,
    "north": Anchor.TOP,
    "topright": Anchor.TOP_RIGHT,
    "northeast": Anchor.TOP_RIGHT,
    "right": Anchor.RIGHT,
    "east": Anchor.RIGHT,
    "bottomright": Anchor.BOTTOM_RIGHT,
    "southeast": Anchor.BOTTOM_RIGHT,
    "bottom": Anchor.BOTTOM,
    "south": Anchor.BOTTOM,
    "bottomleft": Anchor.BOTTOM_LEFT,
    "southwest": Anchor.BOTTOM_LEFT,
    "left": Anchor.LEFT,
    "west": Anchor.LEFT,
    "topleft": Anchor.TOP_LEFT,
    "northwest": Anchor.TOP_LEFT,
}


class LabelPosition(str, Enum):
    TOP = "top"
    BOTTOM = "bottom"
    LEFT_B2T = "left-b2t"
    LEFT_T2B = "left-t2b"
    RIGHT_B2T = "right-b2t"
    RIGHT_T2B = "right-t2b"

    @classmethod
    def from_string(cls, text: str) -> LabelPosition:
        slug = _slug(text)
        if slug == "top":
            return cls.TOP
        if slug == "bottom":
            return cls.BOTTOM
        if slug in ("left", "leftb2t"):
            return cls.LEFT_B2T
        if slug == "leftt2b":
            return cls.LEFT_T2B
        if slug in ("right", "rightt2b"):
            return cls.RIGHT_T2B
        if slug == "rightb2t":
            return cls.RIGHT_B2T
        raise ValueError(f"cannot parse label position from `{text}`")


def as_anchor(value: Anchor | str) -> Anchor:
    return value if isinstance(value, Anchor) else Anchor.from_string(value)


def as_label_position(value: LabelPosition | str) -> LabelPosition:
    return value if isinstance(value, LabelPosition) else LabelPosition.from_string(value)


def as_halign(value: HorizontalAlignment | str) -> HorizontalAlignment:
    return value if isinstance(value, HorizontalAlignment) else HorizontalAlignment.from_string(value)


def as_valign(value: VerticalAlignment | str) -> VerticalAlignment:
    return value if isinstance(value, VerticalAlignment) else VerticalAlignment.from_string(value)
