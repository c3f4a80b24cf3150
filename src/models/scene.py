"""
Scene models

AnimationConfig holds the global scene parameters, Scene bundles it with
the ordered blob list. Both are immutable: a scene is replaced wholesale,
never edited in place.
"""

import math
from dataclasses import dataclass, field, replace
from typing import Tuple

from models.blob import BlobConfig
from models.color import Color

# Control ranges exposed to the user
DURATION_RANGE = (1, 10)      # seconds
FPS_RANGE = (12, 30)
BLUR_RANGE = (0, 200)         # pixels
MOVEMENT_SCALE_RANGE = (0.0, 2.0)
QUALITY_RANGE = (1, 50)       # lower = higher fidelity


def _clamp(value, bounds):
    low, high = bounds
    return max(low, min(high, value))


@dataclass(frozen=True)
class AnimationConfig:
    """Global scene parameters"""
    duration: float = 5
    fps: int = 24
    blur: float = 80
    width: int = 960
    height: int = 540
    movement_scale: float = 1.0
    background_color: Color = field(default_factory=Color.white)
    quality: int = 20

    @property
    def total_frames(self) -> int:
        """Frames in one loop (duration x fps, rounded to an integer)"""
        return int(math.floor(self.duration * self.fps + 0.5))

    @property
    def frame_delay_ms(self) -> int:
        """Per-frame display delay in whole milliseconds"""
        return int(math.floor(1000 / self.fps + 0.5))

    @property
    def min_dimension(self) -> int:
        return min(self.width, self.height)

    def clamped(self) -> 'AnimationConfig':
        """Return a copy with every control pulled into its allowed range"""
        return replace(
            self,
            duration=_clamp(self.duration, DURATION_RANGE),
            fps=int(_clamp(self.fps, FPS_RANGE)),
            blur=_clamp(self.blur, BLUR_RANGE),
            width=max(1, int(self.width)),
            height=max(1, int(self.height)),
            movement_scale=_clamp(self.movement_scale, MOVEMENT_SCALE_RANGE),
            quality=int(_clamp(self.quality, QUALITY_RANGE)),
        )

    def with_changes(self, **changes) -> 'AnimationConfig':
        return replace(self, **changes).clamped()


@dataclass(frozen=True)
class Scene:
    """
    Ordered blobs + global parameters

    List order is paint order: later blobs occlude earlier ones.
    """
    blobs: Tuple[BlobConfig, ...]
    config: AnimationConfig

    def with_blobs(self, blobs) -> 'Scene':
        return replace(self, blobs=tuple(blobs))

    def with_config(self, config: AnimationConfig) -> 'Scene':
        return replace(self, config=config)
