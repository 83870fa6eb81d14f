"""Style value parsing for cross-domain attribute comparison.

Design tools report numeric font sizes and weights with fills as 0-1
RGB floats; browsers report computed CSS strings. This module turns
both into comparable forms: pixel floats, numeric weights and lowercase
``#rrggbb`` hex. Parsers return ``None`` for values they cannot read so
the differ can report them instead of silently passing.
"""

import math
import re
from dataclasses import dataclass
from typing import Any

# CSS keyword weights
FONT_WEIGHT_NAMES = {
    "thin": 100,
    "hairline": 100,
    "extralight": 200,
    "ultralight": 200,
    "light": 300,
    "normal": 400,
    "regular": 400,
    "book": 400,
    "medium": 500,
    "semibold": 600,
    "demibold": 600,
    "bold": 700,
    "extrabold": 800,
    "ultrabold": 800,
    "black": 900,
    "heavy": 900,
}

NAMED_COLORS = {
    "black": "#000000",
    "white": "#ffffff",
    "red": "#ff0000",
    "green": "#008000",
    "lime": "#00ff00",
    "blue": "#0000ff",
    "yellow": "#ffff00",
    "cyan": "#00ffff",
    "aqua": "#00ffff",
    "magenta": "#ff00ff",
    "fuchsia": "#ff00ff",
    "gray": "#808080",
    "grey": "#808080",
    "silver": "#c0c0c0",
    "maroon": "#800000",
    "navy": "#000080",
    "olive": "#808000",
    "purple": "#800080",
    "teal": "#008080",
    "orange": "#ffa500",
}

PT_TO_PX = 4 / 3

_LENGTH = re.compile(r"^(-?\d+(?:\.\d+)?|-?\.\d+)\s*(px|rem|em|pt)?$")
_HEX = re.compile(r"^#([0-9a-f]{3,4}|[0-9a-f]{6}|[0-9a-f]{8})$")
_RGB = re.compile(
    r"^rgba?\(\s*([\d.]+%?)\s*[,\s]\s*([\d.]+%?)\s*[,\s]\s*([\d.]+%?)"
    r"(?:\s*[,/]\s*[\d.]+%?)?\s*\)$"
)
_HSL = re.compile(
    r"^hsla?\(\s*([\d.]+)(?:deg)?\s*[,\s]\s*([\d.]+)%\s*[,\s]\s*([\d.]+)%"
    r"(?:\s*[,/]\s*[\d.]+%?)?\s*\)$"
)


def _clamp_channel(value: float) -> int:
    return max(0, min(255, int(round(value))))


def _hex(r: float, g: float, b: float) -> str:
    return f"#{_clamp_channel(r):02x}{_clamp_channel(g):02x}{_clamp_channel(b):02x}"


def rgb_to_hex(color: dict[str, Any]) -> str:
    """Convert a design-tool color with 0-1 float channels to ``#rrggbb``.

    Alpha is ignored. Missing channels count as 0.
    """
    return _hex(
        float(color.get("r", 0)) * 255,
        float(color.get("g", 0)) * 255,
        float(color.get("b", 0)) * 255,
    )


def _parse_channel(token: str) -> float:
    if token.endswith("%"):
        return float(token[:-1]) * 255 / 100
    return float(token)


def _hsl_to_rgb(hue: float, sat: float, light: float) -> tuple[float, float, float]:
    hue = hue % 360
    c = (1 - abs(2 * light - 1)) * sat
    x = c * (1 - abs((hue / 60) % 2 - 1))
    m = light - c / 2

    if hue < 60:
        r1, g1, b1 = c, x, 0.0
    elif hue < 120:
        r1, g1, b1 = x, c, 0.0
    elif hue < 180:
        r1, g1, b1 = 0.0, c, x
    elif hue < 240:
        r1, g1, b1 = 0.0, x, c
    elif hue < 300:
        r1, g1, b1 = x, 0.0, c
    else:
        r1, g1, b1 = c, 0.0, x

    return (r1 + m) * 255, (g1 + m) * 255, (b1 + m) * 255


def css_color_to_hex(value: str | None) -> str | None:
    """Normalize a CSS color to lowercase ``#rrggbb``.

    Supports #rgb, #rgba, #rrggbb, #rrggbbaa, rgb(), rgba(), hsl(),
    hsla() and common named colors. Alpha is dropped. Returns ``None``
    if the value cannot be parsed.
    """
    if not value or not isinstance(value, str):
        return None
    value = value.strip().lower()

    if value in NAMED_COLORS:
        return NAMED_COLORS[value]

    hex_match = _HEX.match(value)
    if hex_match:
        digits = hex_match.group(1)
        if len(digits) in (3, 4):
            digits = "".join(ch * 2 for ch in digits[:3])
        return f"#{digits[:6]}"

    rgb_match = _RGB.match(value)
    if rgb_match:
        try:
            r, g, b = (_parse_channel(rgb_match.group(i)) for i in (1, 2, 3))
        except ValueError:
            return None
        return _hex(r, g, b)

    hsl_match = _HSL.match(value)
    if hsl_match:
        try:
            hue = float(hsl_match.group(1))
            sat = float(hsl_match.group(2)) / 100
            light = float(hsl_match.group(3)) / 100
        except ValueError:
            return None
        return _hex(*_hsl_to_rgb(hue, min(sat, 1.0), min(light, 1.0)))

    return None


def parse_px(value: float | int | str | None, base_font_size: float = 16.0) -> float | None:
    """Convert a font size to pixels.

    Numbers are taken as pixels. Strings may use px, rem, em or pt;
    a bare numeric string is pixels. Returns ``None`` if unparsable.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)

    match = _LENGTH.match(value.strip().lower())
    if not match:
        return None

    number = float(match.group(1))
    unit = match.group(2) or "px"
    if unit in ("rem", "em"):
        return number * base_font_size
    if unit == "pt":
        return number * PT_TO_PX
    return number


def parse_font_weight(value: int | float | str | None) -> int | None:
    """Convert a font weight to its numeric form (``"bold"`` -> 700).

    Returns ``None`` if the value is neither a finite number nor a known
    keyword.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value) if math.isfinite(value) else None

    cleaned = value.strip().lower().replace("-", "").replace(" ", "")
    if cleaned in FONT_WEIGHT_NAMES:
        return FONT_WEIGHT_NAMES[cleaned]
    try:
        return int(float(cleaned))
    except (ValueError, OverflowError):
        return None


def clean_font_family(value: str | None) -> str:
    """First family of a CSS font stack, without quotes."""
    if not value:
        return ""
    first = value.split(",")[0]
    return first.strip().strip("\"'").strip()


def font_families_match(expected: str | None, actual: str | None) -> bool:
    """True if either family name contains the other (case-insensitive).

    An empty value never matches.
    """
    exp = clean_font_family(expected).lower()
    act = clean_font_family(actual).lower()
    if not exp or not act:
        return False
    return exp in act or act in exp


@dataclass(frozen=True)
class NormalizedStyle:
    """Style attributes parsed into comparable forms.

    Fields are ``None`` when the source value was absent or unparsable;
    ``raw`` keeps the original values for reporting.
    """

    font_family: str | None
    font_size_px: float | None
    font_weight: int | None
    color_hex: str | None
    raw: dict[str, Any]


class StyleNormalizer:
    """Parses element style attributes for comparison."""

    def __init__(self, base_font_size: float = 16.0):
        self.base_font_size = base_font_size

    def normalize(self, style: Any) -> NormalizedStyle:
        """Normalize a ``StyleAttributes`` instance."""
        color = style.color
        color_hex = css_color_to_hex(color) if isinstance(color, str) else None
        family = clean_font_family(style.font_family) or None
        return NormalizedStyle(
            font_family=family,
            font_size_px=parse_px(style.font_size, self.base_font_size),
            font_weight=parse_font_weight(style.font_weight),
            color_hex=color_hex,
            raw=style.to_dict(),
        )
