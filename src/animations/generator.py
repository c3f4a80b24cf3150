"""
Blob generator - Randomized scene construction

Draws fresh blobs from the configured parameter ranges. Frequency fields
are always drawn from integer choice sets so generated scenes loop
perfectly.
"""

import math
import random
import string
from typing import List, Optional, Sequence, TYPE_CHECKING

from models.blob import BlobConfig
from models.color import Color
from models.enums import LogCategory
from utils.logger import get_category_logger

if TYPE_CHECKING:
    from managers.settings import GeneratorSettings

log = get_category_logger(LogCategory.ANIMATION)

_ID_ALPHABET = string.digits + string.ascii_lowercase
ID_LENGTH = 9


def new_blob_id(rng: Optional[random.Random] = None) -> str:
    """Random 9-character base36 identifier"""
    rng = rng or random
    return "".join(rng.choice(_ID_ALPHABET) for _ in range(ID_LENGTH))


class BlobGenerator:
    """
    Creates randomized BlobConfig sets

    Pass a seeded random.Random for reproducible scenes:
        gen = BlobGenerator(GeneratorSettings(), rng=random.Random(7))
        blobs = gen.generate(palette)
    """

    def __init__(self, settings: Optional["GeneratorSettings"] = None, rng: Optional[random.Random] = None):
        if settings is None:
            from managers.settings import GeneratorSettings
            settings = GeneratorSettings()
        self.settings = settings
        self.rng = rng or random.Random()

    # === Primitive draws ===

    def uniform(self, bounds: Sequence[float]) -> float:
        low, high = bounds
        return self.rng.uniform(low, high)

    def phase(self) -> float:
        return self.rng.uniform(0, 2 * math.pi)

    def choice(self, options: Sequence[int]) -> int:
        return int(self.rng.choice(list(options)))

    def blob_id(self) -> str:
        return new_blob_id(self.rng)

    # === Blobs ===

    def create_blob(self, color: Color) -> BlobConfig:
        s = self.settings
        return BlobConfig(
            id=self.blob_id(),
            color=color,
            radius=self.uniform(s.radius_range),
            center_x=self.uniform(s.center_range),
            center_y=self.uniform(s.center_range),
            orbit_x=self.uniform(s.orbit_range),
            orbit_y=self.uniform(s.orbit_range),
            x_phase=self.phase(),
            y_phase=self.phase(),
            x_speed=self.choice(s.speed_choices),
            y_speed=self.choice(s.speed_choices),
            x_harmonic_speed=self.choice(s.harmonic_speed_choices),
            y_harmonic_speed=self.choice(s.harmonic_speed_choices),
            harmonic_amount=self.uniform(s.harmonic_amount_range),
            pulse_speed=self.choice(s.pulse_speed_choices),
            pulse_phase=self.phase(),
        )

    def generate(self, palette: Sequence[Color], count: Optional[int] = None) -> List[BlobConfig]:
        """
        Generate a fresh blob list

        Colors cycle through the palette; an empty palette paints every
        blob white.
        """
        count = self.settings.blob_count if count is None else count
        colors = list(palette) or [Color.white()]
        blobs = [self.create_blob(colors[i % len(colors)]) for i in range(count)]
        log.debug("Blobs generated", count=len(blobs), palette=len(colors))
        return blobs

    @staticmethod
    def recolor(blobs: Sequence[BlobConfig], palette: Sequence[Color]) -> List[BlobConfig]:
        """Assign palette colors in order, leaving motion untouched"""
        colors = list(palette)
        if not colors:
            return list(blobs)
        return [blob.with_color(colors[i % len(colors)]) for i, blob in enumerate(blobs)]
