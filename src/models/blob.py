"""
Blob model - One procedurally animated soft disc

All spatial fields are fractions of the scene (0-1); the motion model turns
them into pixels. Frequency fields count whole cycles per loop, which is
what makes the animation close perfectly at the loop seam.
"""

from dataclasses import dataclass, replace
from typing import Tuple

from models.color import Color
from models.errors import InvalidBlobError

# Every periodic term must complete a whole number of cycles per loop
SPEED_FIELDS: Tuple[str, ...] = (
    "x_speed",
    "y_speed",
    "x_harmonic_speed",
    "y_harmonic_speed",
    "pulse_speed",
)


@dataclass(frozen=True)
class BlobConfig:
    """
    Immutable blob parameters

    - radius: base radius as fraction of min(width, height)
    - center_x/center_y: rest position as fraction of width/height
    - orbit_x/orbit_y: max orbit displacement as fraction of width/height
    - x_phase/y_phase: starting angles of the primary orbit (radians)
    - x_speed/y_speed: primary orbit cycles per loop (positive int)
    - x_harmonic_speed/y_harmonic_speed: harmonic cycles per loop (positive int)
    - harmonic_amount: share of orbit amplitude used by the harmonic (0-1)
    - pulse_speed: radius pulse cycles per loop (positive int)
    - pulse_phase: starting angle of the pulse (radians)
    """

    id: str
    color: Color
    radius: float
    center_x: float
    center_y: float
    orbit_x: float
    orbit_y: float
    x_phase: float
    y_phase: float
    x_speed: int
    y_speed: int
    x_harmonic_speed: int
    y_harmonic_speed: int
    harmonic_amount: float
    pulse_speed: int
    pulse_phase: float

    def __post_init__(self):
        for name in SPEED_FIELDS:
            value = getattr(self, name)
            # bool is an int subclass but never a cycle count
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise InvalidBlobError(name, value)

    def with_color(self, color: Color) -> 'BlobConfig':
        """Return a copy with a new color; motion parameters are untouched"""
        return replace(self, color=color)
