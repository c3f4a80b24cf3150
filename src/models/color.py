"""
Color model - Immutable RGB color value

Blobs, backgrounds and palettes all carry Color values. Hex text only
exists at the edges (config, UI fields, proposal responses).
"""

from dataclasses import dataclass
from typing import Tuple

from utils.colors import parse_hex, to_hex


@dataclass(frozen=True)
class Color:
    """
    RGB color (0-255 per channel)

    Examples:
        color = Color.from_hex("#FFD1DC")
        r, g, b = color.to_rgb()
        color.to_hex()   # "#ffd1dc"
    """

    r: int
    g: int
    b: int

    def __post_init__(self):
        for channel in (self.r, self.g, self.b):
            if not 0 <= channel <= 255:
                raise ValueError(f"Color channel out of range: {channel}")

    # === CONSTRUCTORS ===

    @classmethod
    def from_hex(cls, text: str) -> 'Color':
        """
        Create from hex text ("#rrggbb" or "#rgb")

        Raises:
            InvalidColorError: If text is not a hex color
        """
        return cls(*parse_hex(text))

    @classmethod
    def from_rgb(cls, r: int, g: int, b: int) -> 'Color':
        return cls(int(r), int(g), int(b))

    @classmethod
    def white(cls) -> 'Color':
        return cls(255, 255, 255)

    @classmethod
    def black(cls) -> 'Color':
        return cls(0, 0, 0)

    # === CONVERSIONS ===

    def to_rgb(self) -> Tuple[int, int, int]:
        return (self.r, self.g, self.b)

    def to_hex(self) -> str:
        return to_hex(self.to_rgb())

    def __str__(self) -> str:
        return self.to_hex()
