"""
Settings schemas - Pydantic models for the loaded YAML configuration

Each config section maps onto one model. Unknown keys are ignored so older
config files keep loading; missing keys take the defaults below.
"""

from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.color import Color
from models.scene import AnimationConfig
from utils.colors import is_hex_color


class _Section(BaseModel):
    model_config = ConfigDict(extra="ignore")


class AnimationSettings(_Section):
    """Default AnimationConfig for new scenes"""
    duration: float = Field(5, description="Loop duration in seconds")
    fps: int = Field(24, description="Export frames per second")
    blur: float = Field(80, ge=0, description="Blur radius in pixels")
    width: int = Field(960, ge=1)
    height: int = Field(540, ge=1)
    movement_scale: float = Field(1.0, ge=0, description="Orbit amplitude multiplier")
    background_color: str = Field("#ffffff", description="Background hex color")
    quality: int = Field(20, description="Encoder quality 1-50, lower = better")

    @field_validator("background_color")
    @classmethod
    def validate_background(cls, value: str) -> str:
        if not is_hex_color(value):
            raise ValueError(f"background_color must be a hex color, got {value!r}")
        return value

    def to_config(self) -> AnimationConfig:
        return AnimationConfig(
            duration=self.duration,
            fps=self.fps,
            blur=self.blur,
            width=self.width,
            height=self.height,
            movement_scale=self.movement_scale,
            background_color=Color.from_hex(self.background_color),
            quality=self.quality,
        ).clamped()


class GeneratorSettings(_Section):
    """Randomized blob parameter ranges"""
    blob_count: int = Field(6, ge=1)
    radius_range: Tuple[float, float] = (0.3, 0.6)
    center_range: Tuple[float, float] = (0.2, 0.8)
    orbit_range: Tuple[float, float] = (0.1, 0.3)
    harmonic_amount_range: Tuple[float, float] = (0.2, 0.5)
    speed_choices: List[int] = Field(default_factory=lambda: [1, 2])
    pulse_speed_choices: List[int] = Field(default_factory=lambda: [1, 2, 3])
    harmonic_speed_choices: List[int] = Field(default_factory=lambda: [2, 3, 4])

    @field_validator("speed_choices", "pulse_speed_choices", "harmonic_speed_choices")
    @classmethod
    def validate_choices(cls, value: List[int]) -> List[int]:
        # Cycle counts must be whole and positive or loops stop closing
        if not value or any(v < 1 for v in value):
            raise ValueError("speed choices must be a non-empty list of positive integers")
        return value


class ExtractionSettings(_Section):
    """Palette extraction parameters"""
    sample_size: int = Field(100, ge=1, description="Working resolution (square)")
    bucket_size: int = Field(10, ge=1, description="Channel quantization step")
    min_distance: float = Field(50, ge=0, description="Minimum RGB distance between picks")
    max_colors: int = Field(5, ge=1)
    min_distinct: int = Field(3, ge=0, description="Backfill when fewer distinct colors found")
    alpha_threshold: int = Field(128, ge=0, le=255, description="Minimum alpha for a pixel to count")


class ExportSettings(_Section):
    workers: int = Field(2, ge=1, description="Encoder worker threads")
    yield_every: int = Field(5, ge=1, description="Frames rendered between cooperative yields")
    filename: str = "gradient-loop.gif"


class ProposalSettings(_Section):
    model_name: str = "gemini-2.5-flash"
    api_key_env: str = "GEMINI_API_KEY"


class PreviewSettings(_Section):
    fps: float = Field(60, gt=0, description="Preview tick rate")


class ResolutionPreset(_Section):
    name: str
    width: int = Field(ge=1)
    height: int = Field(ge=1)
