"""
Animation model for looping gradients

- motion: pure blob position/radius function of loop time
- generator: randomized blob construction
"""

from .motion import BlobPosition, blob_position, TWO_PI, PULSE_DEPTH
from .generator import BlobGenerator, new_blob_id

__all__ = [
    "BlobPosition",
    "blob_position",
    "TWO_PI",
    "PULSE_DEPTH",
    "BlobGenerator",
    "new_blob_id",
]
