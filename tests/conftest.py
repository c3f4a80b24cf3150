import io
import random

import pytest

from animations.generator import BlobGenerator
from managers.settings import GeneratorSettings
from models.blob import BlobConfig
from models.color import Color
from models.enums import LogLevel
from models.events import EventType
from models.scene import AnimationConfig, Scene
from services.event_bus import EventBus
from services.middleware import log_middleware
from utils.logger import configure_logger

CANDY = ["#FFD1DC", "#E0BBE4", "#957DAD", "#D291BC", "#FEC8D8"]


@pytest.fixture(autouse=True)
def quiet_logger():
    """Keep test output readable; tests that inspect logs reconfigure it"""
    configure_logger(LogLevel.ERROR, use_colors=False, stream=io.StringIO())
    yield
    configure_logger(LogLevel.INFO, use_colors=True, stream=None)


@pytest.fixture
def palette():
    return [Color.from_hex(h) for h in CANDY]


@pytest.fixture
def generator():
    return BlobGenerator(GeneratorSettings(), rng=random.Random(1234))


@pytest.fixture
def small_config():
    """Tiny, unblurred scene so rendering stays fast"""
    return AnimationConfig(duration=1, fps=12, blur=0, width=64, height=36)


@pytest.fixture
def scene(generator, palette, small_config):
    return Scene(tuple(generator.generate(palette)), small_config)


@pytest.fixture
def scenario_blob():
    return BlobConfig(
        id="scenario1",
        color=Color.from_hex("#957DAD"),
        radius=0.3,
        center_x=0.5,
        center_y=0.5,
        orbit_x=0.2,
        orbit_y=0.2,
        x_phase=0.0,
        y_phase=0.0,
        x_speed=2,
        y_speed=1,
        x_harmonic_speed=3,
        y_harmonic_speed=2,
        harmonic_amount=0.3,
        pulse_speed=1,
        pulse_phase=0.0,
    )


@pytest.fixture
def event_bus():
    """Bus wired the way the host wires it (logging middleware installed)"""
    bus = EventBus()
    bus.add_middleware(log_middleware)
    return bus


@pytest.fixture
def recorded_events(event_bus):
    """Every event published on event_bus, in order"""
    events = []
    for event_type in EventType:
        event_bus.subscribe(event_type, events.append)
    return events
