"""
Motion model - Blob position and radius as a pure function of loop time

Every periodic term is driven by 2π·t·speed with an integer speed, so all
terms complete whole cycles over t ∈ [0, 1) and the scene at t=1 is the
scene at t=0.
"""

import math
from dataclasses import dataclass

from models.blob import BlobConfig
from models.scene import AnimationConfig

TWO_PI = 2 * math.pi

# Radius swings ±15% around the base radius
PULSE_DEPTH = 0.15


@dataclass(frozen=True)
class BlobPosition:
    """Blob placement in scene pixels"""
    x: float
    y: float
    r: float


def blob_position(blob: BlobConfig, t: float, config: AnimationConfig) -> BlobPosition:
    """
    Compute blob center and radius at normalized time t

    Args:
        blob: Blob parameters
        t: Normalized loop time (0 = loop start, 1 = loop end)
        config: Scene dimensions and movement scale

    Returns:
        BlobPosition in pixels
    """
    angle_x = TWO_PI * t * blob.x_speed + blob.x_phase
    angle_y = TWO_PI * t * blob.y_speed + blob.y_phase

    # Harmonic reuses the primary phase seed at a higher frequency
    angle_x2 = TWO_PI * t * blob.x_harmonic_speed + blob.x_phase
    angle_y2 = TWO_PI * t * blob.y_harmonic_speed + blob.y_phase

    orbit_x = blob.orbit_x * config.movement_scale
    orbit_y = blob.orbit_y * config.movement_scale

    nx = (
        blob.center_x
        + orbit_x * math.cos(angle_x)
        + orbit_x * blob.harmonic_amount * math.cos(angle_x2)
    )
    ny = (
        blob.center_y
        + orbit_y * math.sin(angle_y)
        + orbit_y * blob.harmonic_amount * math.sin(angle_y2)
    )

    pulse = 1 + PULSE_DEPTH * math.sin(TWO_PI * t * blob.pulse_speed + blob.pulse_phase)

    return BlobPosition(
        x=nx * config.width,
        y=ny * config.height,
        r=blob.radius * config.min_dimension * pulse,
    )
