"""
Utility functions for the gradient loop generator
"""

from .colors import (
    parse_hex,
    is_hex_color,
    to_hex,
    rgb_distance,
)

__all__ = [
    'parse_hex',
    'is_hex_color',
    'to_hex',
    'rgb_distance',
]
