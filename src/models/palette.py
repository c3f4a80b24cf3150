"""
Palette model - Ordered, user-editable color list

Each slot keeps the text the user typed next to the last color that
parsed. Invalid text stays visible for editing while the scene keeps
rendering with the last good color.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from models.color import Color
from models.errors import InvalidColorError

MIN_COLORS = 2


@dataclass
class PaletteSlot:
    text: str
    color: Color


class Palette:
    """
    Example:
        palette = Palette.from_hex(["#FFD1DC", "#E0BBE4"])
        palette.set_color(0, "#12")      # False, slot 0 still renders #ffd1dc
        palette.texts                    # ['#12', '#E0BBE4']
    """

    def __init__(self, colors: Sequence[Color]):
        self.slots: List[PaletteSlot] = [PaletteSlot(c.to_hex(), c) for c in colors]

    @classmethod
    def from_hex(cls, values: Sequence[str]) -> 'Palette':
        return cls([Color.from_hex(v) for v in values])

    def __len__(self) -> int:
        return len(self.slots)

    @property
    def colors(self) -> List[Color]:
        """Last good color of every slot"""
        return [slot.color for slot in self.slots]

    @property
    def texts(self) -> List[str]:
        return [slot.text for slot in self.slots]

    def set_color(self, index: int, text: str) -> bool:
        """
        Store text for a slot; returns True when it parsed and the color changed

        Raises:
            IndexError: If index is out of range
        """
        slot = self.slots[index]
        slot.text = text
        try:
            color = Color.from_hex(text)
        except InvalidColorError:
            return False
        changed = color != slot.color
        slot.color = color
        return changed

    def add_color(self, color: Optional[Color] = None) -> None:
        color = color or Color.white()
        self.slots.append(PaletteSlot(color.to_hex(), color))

    def remove_color(self, index: int) -> bool:
        """Remove a slot unless the palette is already at its minimum size"""
        if len(self.slots) <= MIN_COLORS:
            return False
        del self.slots[index]
        return True

    def replace(self, colors: Sequence[Color]) -> None:
        self.slots = [PaletteSlot(c.to_hex(), c) for c in colors]
