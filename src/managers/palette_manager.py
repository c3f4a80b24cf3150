"""
Palette Manager - Processes palette preset definitions

Processes palette data from ConfigManager (does NOT load files).
Single responsibility: Parse and provide access to palette presets.
"""

from typing import Dict, List, Tuple

from models.color import Color
from models.enums import LogCategory
from models.errors import InvalidColorError
from utils.logger import get_category_logger

log = get_category_logger(LogCategory.PALETTE)


class PaletteManager:
    """
    Palette preset manager (data processor only)

    Does NOT load files - receives data from ConfigManager.

    Example:
        palette_mgr = PaletteManager({
            'presets': {'Candy': ['#FFD1DC', '#E0BBE4']},
            'preset_order': ['Candy'],
            'default_palette': 'Candy',
        })

        colors = palette_mgr.get_palette("Candy")
        name, colors = palette_mgr.get_palette_by_index(3)
    """

    def __init__(self, data: dict):
        """
        Args:
            data: Config dict with 'presets', optional 'preset_order' and
                  'default_palette' keys
        """
        self.data = data
        self._palettes: Dict[str, List[Color]] = {}
        self._process_data()

    def _process_data(self):
        """Parse hex lists, skipping presets that contain invalid colors"""
        for name, hex_list in (self.data.get('presets') or {}).items():
            try:
                self._palettes[name] = [Color.from_hex(h) for h in hex_list]
            except InvalidColorError as ex:
                log.warn(f"Skipping palette preset '{name}'", error=ex.message)

    @property
    def preset_order(self) -> List[str]:
        """Preset cycling order (config order when not given explicitly)"""
        order = self.data.get('preset_order') or list(self._palettes.keys())
        return [name for name in order if name in self._palettes]

    @property
    def default_name(self) -> str:
        name = self.data.get('default_palette')
        if name in self._palettes:
            return name
        order = self.preset_order
        return order[0] if order else ""

    def get_palette(self, name: str) -> List[Color]:
        """
        Get colors for a preset name

        Raises:
            KeyError: If preset doesn't exist
        """
        return list(self._palettes[name])

    def get_palette_by_index(self, index: int) -> Tuple[str, List[Color]]:
        """Get preset by index in preset_order (wraps around)"""
        order = self.preset_order
        name = order[index % len(order)]
        return name, list(self._palettes[name])

    def default_palette(self) -> List[Color]:
        name = self.default_name
        return self.get_palette(name) if name else [Color.white()]

    def all_palettes(self) -> Dict[str, List[Color]]:
        return {name: list(self._palettes[name]) for name in self.preset_order}
