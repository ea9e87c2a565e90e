"""RGB colors for tags: parsing, formatting and random defaults."""

from __future__ import annotations

import random
import re
from dataclasses import dataclass

_HEX_RE = re.compile(r"#([0-9a-fA-F]{6})")


@dataclass(frozen=True)
class Color:
    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        for channel in (self.r, self.g, self.b):
            if not 0 <= channel <= 255:
                raise ValueError(f"Color channel out of range: {channel}")

    def __str__(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"

    @classmethod
    def from_str(cls, text: str) -> Color:
        """Parse ``#rrggbb`` or a named color such as ``"light blue"``.

        Raises:
            ValueError: The text is neither a hex triplet nor a known name.
        """
        value = text.strip()
        match = _HEX_RE.fullmatch(value)
        if match:
            digits = match.group(1)
            return cls(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))

        name = re.sub(r"[\s_-]+", "", value.lower()).replace("grey", "gray")
        named = NAMED_COLORS.get(name)
        if named is None:
            raise ValueError(f"Unknown color: {text!r}")
        return named


# ANSI palette as rendered by xterm; names follow the terminal color names.
NAMED_COLORS: dict[str, Color] = {
    "black": Color(0x00, 0x00, 0x00),
    "red": Color(0xcd, 0x00, 0x00),
    "green": Color(0x00, 0xcd, 0x00),
    "yellow": Color(0xcd, 0xcd, 0x00),
    "blue": Color(0x00, 0x00, 0xee),
    "magenta": Color(0xcd, 0x00, 0xcd),
    "cyan": Color(0x00, 0xcd, 0xcd),
    "gray": Color(0xe5, 0xe5, 0xe5),
    "darkgray": Color(0x7f, 0x7f, 0x7f),
    "lightred": Color(0xff, 0x00, 0x00),
    "lightgreen": Color(0x00, 0xff, 0x00),
    "lightyellow": Color(0xff, 0xff, 0x00),
    "lightblue": Color(0x5c, 0x5c, 0xff),
    "lightmagenta": Color(0xff, 0x00, 0xff),
    "lightcyan": Color(0x00, 0xff, 0xff),
    "white": Color(0xff, 0xff, 0xff),
}

WHITE = NAMED_COLORS["white"]


def hsv_to_rgb(h: float, s: float, v: float) -> Color:
    """Convert hue in degrees ``[0, 360)`` and saturation/value in ``[0, 1]``."""
    c = v * s
    h = (h % 360.0) / 60.0
    x = c * (1.0 - abs((h % 2.0) - 1.0))
    m = v - c

    if h < 1.0:
        r, g, b = c, x, 0.0
    elif h < 2.0:
        r, g, b = x, c, 0.0
    elif h < 3.0:
        r, g, b = 0.0, c, x
    elif h < 4.0:
        r, g, b = 0.0, x, c
    elif h < 5.0:
        r, g, b = x, 0.0, c
    else:
        r, g, b = c, 0.0, x

    return Color(int((r + m) * 255.0), int((g + m) * 255.0), int((b + m) * 255.0))


def random_color(rng: random.Random | None = None) -> Color:
    """A saturated, bright color with a uniformly random hue."""
    rng = rng or random.Random()
    h = rng.uniform(0.0, 360.0) % 360.0
    s = 0.7 + rng.random() * 0.3
    v = 0.7 + rng.random() * 0.3
    return hsv_to_rgb(h, s, v)
