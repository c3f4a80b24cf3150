"""
Managers for configuration
"""

from .config_manager import ConfigManager
from .palette_manager import PaletteManager

__all__ = ['ConfigManager', 'PaletteManager']
