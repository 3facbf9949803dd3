from __future__ import annotations

import os
from pathlib import Path
import tomllib
from typing import Any

FONT_FAMILY_ENV_VAR = "VISPAINT_FONT_FAMILY"

DEFAULT_MITER_LIMIT = 10.0
DEFAULT_CANVAS_COLOR = (1.0, 1.0, 1.0, 1.0)
DEFAULT_LINE_WIDTH = 2.0
DEFAULT_FONT_SIZE = 16
DEFAULT_LINE_SPACING = 1.2
DEFAULT_MOTION_NORMALIZER = 1.0
DEFAULT_COLORMAP_BINS = 256


def default_font_family() -> str:
    raw = os.getenv(FONT_FAMILY_ENV_VAR, "").strip()
    return raw or "monospace"


DEFAULT_FONT_FAMILY = default_font_family()

_PRESET_KINDS = ("line", "arrow", "text", "marker", "bbox")


def load_style_presets(path: str | Path) -> dict[str, Any]:
    """Load named style presets from a TOML file.

    Each top-level table is a preset and must carry a ``kind`` field
    (one of ``line``, ``arrow``, ``text``, ``marker``, ``bbox``); the
    remaining fields are passed to the matching style constructor::

        [highlight]
        kind = "line"
        width = 4
        color = "crimson!80"
    """
    from vispaint import styles

    preset_path = Path(path)
    if not preset_path.exists():
        raise FileNotFoundError(f"style preset file not found: {preset_path}")
    with preset_path.open("rb") as f:
        raw = tomllib.load(f)
    presets: dict[str, Any] = {}
    for name, table in raw.items():
        if not isinstance(table, dict):
            raise ValueError(f"preset `{name}` must be a table")
        fields = dict(table)
        kind = fields.pop("kind", None)
        if kind not in _PRESET_KINDS:
            raise ValueError(f"preset `{name}` has unknown kind: {kind!r}")
        try:
            presets[name] = _build_preset(styles, kind, fields)
        except TypeError as exc:
            raise ValueError(f"preset `{name}` has invalid fields: {exc}") from exc
    return presets


def _build_preset(styles: Any, kind: str, fields: dict[str, Any]) -> Any:
    if kind == "line":
        return _line_style(styles, fields)
    if kind == "arrow":
        line_fields = fields.pop("line", {})
        return styles.ArrowStyle(line=_line_style(styles, dict(line_fields)), **fields)
    if kind == "text":
        return styles.TextStyle(**fields)
    if kind == "marker":
        return styles.MarkerStyle(**fields)
    line_style = _line_style(styles, dict(fields.pop("line_style", {})))
    text_style = styles.TextStyle(**dict(fields.pop("text_style", {})))
    return styles.BoundingBox2DStyle(line_style=line_style, text_style=text_style, **fields)


def _line_style(styles: Any, fields: dict[str, Any]) -> Any:
    if "dash_pattern" in fields:
        fields["dash_pattern"] = styles.dash_pattern(fields["dash_pattern"])
    return styles.LineStyle(**fields)

