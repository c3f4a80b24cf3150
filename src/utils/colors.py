"""
Color conversion utilities

Pure functions for hex parsing/formatting and color distance calculations.
"""

import re
from typing import Tuple

from models.errors import InvalidColorError

_HEX_PATTERN = re.compile(r'^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$')


def parse_hex(text: str) -> Tuple[int, int, int]:
    """
    Parse hex color text to RGB (0-255)

    Accepts "#rrggbb", "#rgb", with or without the leading '#',
    in any letter case. Surrounding whitespace is ignored.

    Args:
        text: Hex color text

    Returns:
        (r, g, b) tuple with values 0-255

    Raises:
        InvalidColorError: If text is not a hex color

    Example:
        parse_hex("#FFD1DC")  # (255, 209, 220)
        parse_hex("fff")      # (255, 255, 255)
    """
    if not isinstance(text, str):
        raise InvalidColorError(text)

    match = _HEX_PATTERN.match(text.strip())
    if not match:
        raise InvalidColorError(text)

    digits = match.group(1)
    if len(digits) == 3:
        digits = ''.join(c * 2 for c in digits)

    return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def is_hex_color(text: str) -> bool:
    """Check whether text parses as a hex color"""
    try:
        parse_hex(text)
    except InvalidColorError:
        return False
    return True


def to_hex(rgb: Tuple[int, int, int]) -> str:
    """
    Format RGB as lowercase "#rrggbb"

    Channels are clamped to 0-255 first.
    """
    r, g, b = (max(0, min(255, int(v))) for v in rgb)
    return f"#{r:02x}{g:02x}{b:02x}"


def rgb_distance(rgb1: Tuple[int, int, int], rgb2: Tuple[int, int, int]) -> float:
    """
    Calculate Euclidean distance between two RGB colors

    Args:
        rgb1, rgb2: RGB tuples (0-255 each)

    Returns:
        Distance (0.0 - ~441.67 for max distance)

    Example:
        dist = rgb_distance((255, 0, 0), (255, 128, 0))
        # 128.0
    """
    r1, g1, b1 = rgb1
    r2, g2, b2 = rgb2
    return ((r1-r2)**2 + (g1-g2)**2 + (b1-b2)**2) ** 0.5
