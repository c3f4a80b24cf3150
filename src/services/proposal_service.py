"""
Proposal Service - Palette/motion suggestions from a text request

A language model receives the current palette and the user's request and
answers with JSON:

    {"colors": ["#hex", ...], "blobs": [{"color": "#hex", "radius": 0.4, ...}]}

Both keys are optional. The answer is loosely typed, so it passes through
one normalization step (ProposalResponse/BlobProposal + backfill) that
turns whatever arrived into complete BlobConfig objects or drops it.
"""

from __future__ import annotations

import json
import math
import os
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Protocol, Sequence

import google.generativeai as genai
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from animations.generator import BlobGenerator
from managers.settings import ProposalSettings
from models.blob import BlobConfig
from models.color import Color
from models.enums import LogCategory
from models.errors import ProposalError
from utils.colors import is_hex_color
from utils.logger import get_category_logger

log = get_category_logger(LogCategory.PROPOSAL)

# Defaults for natural-motion fields the model leaves out
BACKFILL_HARMONIC_AMOUNT = 0.3
BACKFILL_PULSE_SPEEDS = (1, 3)

PROMPT_TEMPLATE = """
You are a creative assistant for a gradient animation tool.
The user wants to modify the animation based on this request: "{request}"

Current colors: {colors}

Generate a JSON response with:
1. "colors": Array of hex color strings (optional, if colors should change).
2. "blobs": Array of BlobConfig objects (optional, if movement/shapes should change).

BlobConfig schema:
{{
  color: string (hex),
  radius: number (0.1 to 0.8, relative to screen size),
  xPhase: number (0 to 2*PI),
  yPhase: number (0 to 2*PI),
  xSpeed: number (integer 1-3),
  ySpeed: number (integer 1-3),
  centerX: number (0.0 to 1.0, position on screen),
  centerY: number (0.0 to 1.0, position on screen),
  orbitX: number (0.0 to 0.5, orbit radius),
  orbitY: number (0.0 to 0.5, orbit radius),
  xHarmonicSpeed, yHarmonicSpeed, pulseSpeed: optional integers 1-4,
  harmonicAmount: optional number 0.0 to 1.0,
  pulsePhase: optional number 0 to 2*PI
}}

Guidelines:
- "Safe area for text" means keeping blobs away from the center or a specific side (reduce orbit, move centers).
- "Calm" means lower speeds, similar colors.
- "Energetic" means higher speeds, contrasting colors.
- Return ONLY valid JSON.
"""


def build_prompt(request: str, palette: Sequence[Color]) -> str:
    return PROMPT_TEMPLATE.format(
        request=request.strip(),
        colors=json.dumps([c.to_hex() for c in palette]),
    )


# ============================================================================
# Response schemas
# ============================================================================

class _Lenient(BaseModel):
    """Fields that fail validation become None instead of failing the model"""
    model_config = ConfigDict(extra="ignore", populate_by_name=True, allow_inf_nan=False)

    @field_validator("*", mode="wrap")
    @classmethod
    def drop_invalid(cls, value, handler):
        try:
            return handler(value)
        except ValidationError:
            return None


class BlobProposal(_Lenient):
    color: Optional[str] = None
    radius: Optional[float] = None
    center_x: Optional[float] = Field(None, alias="centerX")
    center_y: Optional[float] = Field(None, alias="centerY")
    orbit_x: Optional[float] = Field(None, alias="orbitX")
    orbit_y: Optional[float] = Field(None, alias="orbitY")
    x_phase: Optional[float] = Field(None, alias="xPhase")
    y_phase: Optional[float] = Field(None, alias="yPhase")
    x_speed: Optional[float] = Field(None, alias="xSpeed")
    y_speed: Optional[float] = Field(None, alias="ySpeed")
    x_harmonic_speed: Optional[float] = Field(None, alias="xHarmonicSpeed")
    y_harmonic_speed: Optional[float] = Field(None, alias="yHarmonicSpeed")
    harmonic_amount: Optional[float] = Field(None, alias="harmonicAmount")
    pulse_speed: Optional[float] = Field(None, alias="pulseSpeed")
    pulse_phase: Optional[float] = Field(None, alias="pulsePhase")


class ProposalResponse(_Lenient):
    colors: Optional[List[Any]] = None
    blobs: Optional[List[Any]] = None


@dataclass(frozen=True)
class Proposal:
    """Normalized proposal; None means "keep what you have" """
    colors: Optional[List[Color]] = None
    blobs: Optional[List[BlobConfig]] = None

    @property
    def is_empty(self) -> bool:
        return self.colors is None and self.blobs is None


# ============================================================================
# Normalization
# ============================================================================

def strip_code_fences(text: str) -> str:
    """Remove a ```json ... ``` wrapper if the model added one"""
    text = text.strip()
    if text.startswith("```json"):
        text = text[7:]
    if text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def _speed(value: Optional[float]) -> Optional[int]:
    """Nearest whole cycle count, or None when it would not be positive"""
    if value is None:
        return None
    speed = int(math.floor(value + 0.5))
    return speed if speed >= 1 else None


def _non_negative(value: Optional[float]) -> Optional[float]:
    return value if value is not None and value >= 0 else None


def _or_draw(value: Optional[float], draw: Callable[[], float]) -> float:
    return value if value is not None else draw()


def backfill_blob(
    item: BlobProposal,
    index: int,
    palette: Sequence[Color],
    generator: BlobGenerator,
) -> BlobConfig:
    """Build a complete BlobConfig, drawing defaults for everything missing"""
    s = generator.settings

    color = Color.from_hex(item.color) if item.color and is_hex_color(item.color) else None
    if color is None:
        color = palette[index % len(palette)] if palette else Color.white()

    radius = item.radius if item.radius is not None and item.radius > 0 else generator.uniform(s.radius_range)
    x_speed = _speed(item.x_speed) or generator.choice(s.speed_choices)
    y_speed = _speed(item.y_speed) or generator.choice(s.speed_choices)

    harmonic_amount = item.harmonic_amount
    if harmonic_amount is None or harmonic_amount <= 0:
        harmonic_amount = BACKFILL_HARMONIC_AMOUNT

    return BlobConfig(
        id=generator.blob_id(),
        color=color,
        radius=radius,
        center_x=_or_draw(item.center_x, lambda: generator.uniform(s.center_range)),
        center_y=_or_draw(item.center_y, lambda: generator.uniform(s.center_range)),
        orbit_x=_or_draw(_non_negative(item.orbit_x), lambda: generator.uniform(s.orbit_range)),
        orbit_y=_or_draw(_non_negative(item.orbit_y), lambda: generator.uniform(s.orbit_range)),
        x_phase=_or_draw(item.x_phase, generator.phase),
        y_phase=_or_draw(item.y_phase, generator.phase),
        x_speed=x_speed,
        y_speed=y_speed,
        x_harmonic_speed=_speed(item.x_harmonic_speed) or x_speed + 1,
        y_harmonic_speed=_speed(item.y_harmonic_speed) or y_speed + 1,
        harmonic_amount=min(1.0, harmonic_amount),
        pulse_speed=_speed(item.pulse_speed) or generator.rng.randint(*BACKFILL_PULSE_SPEEDS),
        pulse_phase=_or_draw(item.pulse_phase, generator.phase),
    )


def parse_proposal(text: str, palette: Sequence[Color], generator: BlobGenerator) -> Proposal:
    """
    Turn raw model output into a Proposal

    Never raises for bad content: unparseable text yields an empty
    proposal, invalid colors and non-object blob entries are dropped.
    """
    try:
        raw = json.loads(strip_code_fences(text or ""))
    except json.JSONDecodeError as ex:
        log.warn("Proposal response is not valid JSON, ignoring", error=str(ex))
        return Proposal()

    if not isinstance(raw, dict):
        log.warn("Proposal response is not an object, ignoring", type=type(raw).__name__)
        return Proposal()

    response = ProposalResponse.model_validate(raw)

    colors = None
    if response.colors is not None:
        parsed = [Color.from_hex(c) for c in response.colors if isinstance(c, str) and is_hex_color(c)]
        dropped = len(response.colors) - len(parsed)
        if dropped:
            log.warn("Dropped invalid proposal colors", dropped=dropped)
        colors = parsed or None

    blobs = None
    if response.blobs is not None:
        items = [BlobProposal.model_validate(b) for b in response.blobs if isinstance(b, dict)]
        blob_palette = colors or list(palette)
        blobs = [backfill_blob(item, i, blob_palette, generator) for i, item in enumerate(items)] or None

    return Proposal(colors=colors, blobs=blobs)


# ============================================================================
# Clients
# ============================================================================

class ProposalClient(Protocol):
    async def complete(self, prompt: str) -> str:
        ...


class GeminiProposalClient:
    """Gemini text model answering in JSON"""

    def __init__(self, model_name: str = "gemini-2.5-flash", api_key: Optional[str] = None):
        if api_key:
            genai.configure(api_key=api_key)
        self.model_name = model_name
        self.model = genai.GenerativeModel(model_name)

    @classmethod
    def from_settings(cls, settings: ProposalSettings) -> 'GeminiProposalClient':
        api_key = os.environ.get(settings.api_key_env)
        if not api_key:
            raise ProposalError(
                f"Environment variable {settings.api_key_env} is not set",
                details={"env": settings.api_key_env},
            )
        return cls(settings.model_name, api_key)

    async def complete(self, prompt: str) -> str:
        try:
            response = await self.model.generate_content_async(
                prompt,
                generation_config={"response_mime_type": "application/json"},
            )
            return response.text
        except Exception as ex:
            raise ProposalError(
                f"Proposal request failed: {ex}",
                details={"model": self.model_name, "error_type": type(ex).__name__},
            ) from ex


# ============================================================================
# Service
# ============================================================================

class ProposalService:
    """
    Example:
        service = ProposalService(GeminiProposalClient.from_settings(settings), generator)
        proposal = await service.propose("calm ocean, keep the left side clear", palette)
    """

    def __init__(self, client: ProposalClient, generator: BlobGenerator):
        self.client = client
        self.generator = generator

    async def propose(self, request: str, palette: Sequence[Color]) -> Proposal:
        """
        Raises:
            ProposalError: The model could not be reached
        """
        if not request or not request.strip():
            return Proposal()

        log.info("Requesting proposal", request=request.strip()[:80], colors=len(palette))
        text = await self.client.complete(build_prompt(request, palette))
        proposal = parse_proposal(text, palette, self.generator)
        log.info(
            "Proposal received",
            colors=len(proposal.colors) if proposal.colors else 0,
            blobs=len(proposal.blobs) if proposal.blobs else 0,
        )
        return proposal
