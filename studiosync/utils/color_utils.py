"""
Colour helpers for studio branding.
"""

import math
import re
from typing import Any

_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{6})$")


def is_hex_color(value: Any) -> bool:
    """Check for a six-digit hex colour, with or without the leading '#'."""
    # Studio documents are untyped; anything but a string falls back to a default
    return isinstance(value, str) and bool(_HEX_COLOR.match(value.strip()))


def adjust_color(color: str, percent: float) -> str:
    """
    Lighten (positive) or darken (negative) a hex colour.

    Every RGB channel is shifted by 2.55 * percent, rounded half up, and clamped to
    [0, 255]. Returns a lowercase "#rrggbb" string.

    Raises:
        ValueError: If color is not a six-digit hex colour
    """
    match = _HEX_COLOR.match(color.strip()) if color else None
    if not match:
        raise ValueError(f"Invalid hex colour: {color!r}")

    num = int(match.group(1), 16)
    amount = math.floor(2.55 * percent + 0.5)

    channels = (
        (num >> 16) + amount,
        ((num >> 8) & 0xFF) + amount,
        (num & 0xFF) + amount,
    )
    r, g, b = (max(0, min(255, channel)) for channel in channels)
    return f"#{r:02x}{g:02x}{b:02x}"


__all__ = ["adjust_color", "is_hex_color"]
