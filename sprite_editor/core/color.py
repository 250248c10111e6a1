"""
Colour handling shared by the grid, the project file and the exporters.

A colour is an RGBA tuple of four ints in 0..255. ``None`` stands for a
transparent (empty) cell everywhere in the editor.
"""
from typing import Optional, Sequence, Union

Color = tuple[int, int, int, int]

# Default swatches offered by the palette widget, 4 per row.
DEFAULT_PALETTE: list[Color] = [
    (0, 0, 0, 255), (255, 255, 255, 255), (102, 102, 102, 255), (204, 204, 204, 255),
    (255, 0, 0, 255), (255, 102, 0, 255), (255, 204, 0, 255), (255, 255, 102, 255),
    (0, 153, 0, 255), (51, 204, 51, 255), (102, 255, 102, 255), (153, 217, 115, 255),
    (0, 51, 102, 255), (0, 102, 255, 255), (0, 178, 217, 255), (143, 224, 240, 255),
    (153, 51, 255, 255), (255, 102, 204, 255), (84, 51, 128, 255), (204, 153, 255, 255),
    (153, 102, 51, 255), (230, 191, 128, 255), (102, 64, 33, 255), (255, 209, 102, 255),
]

DEFAULT_COLOR: Color = (0, 255, 255, 255)


def _channel(v) -> int:
    if isinstance(v, float):
        v = round(v * 255)
    v = int(v)
    return max(0, min(255, v))


def coerce_color(value: Union[str, Sequence, None]) -> Optional[Color]:
    """
    Accepts a hex string, an RGB/RGBA tuple of ints (0..255) or floats (0..1),
    or None. Returns a normalized RGBA int tuple or None.
    """
    if value is None:
        return None
    if isinstance(value, str):
        return parse_hex(value)
    items = tuple(value)
    if len(items) not in (3, 4):
        raise ValueError(f"Expected 3 or 4 channels, got {len(items)}")
    if len(items) == 3:
        alpha = 1.0 if isinstance(items[0], float) else 255
        items = items + (alpha,)
    return tuple(_channel(c) for c in items)  # type: ignore[return-value]


def parse_hex(text: str) -> Color:
    """Parse ``#RRGGBB`` (alpha 255) or ``#RRGGBBAA``; the '#' is optional."""
    if not isinstance(text, str):
        raise ValueError(f"Hex colour must be a string, got {type(text).__name__}")
    digits = text.strip().lstrip("#")
    if len(digits) not in (6, 8):
        raise ValueError(f"Invalid hex colour: {text!r}")
    try:
        value = int(digits, 16)
    except ValueError:
        raise ValueError(f"Invalid hex colour: {text!r}") from None
    if len(digits) == 6:
        return ((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF, 255)
    return ((value >> 24) & 0xFF, (value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)


def to_hex(color: Color) -> str:
    r, g, b, a = color
    return "#%02X%02X%02X%02X" % (r, g, b, a)


def hex_or_none(color: Optional[Color]) -> Optional[str]:
    return None if color is None else to_hex(color)
