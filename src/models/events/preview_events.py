from dataclasses import dataclass

from models.events.base import Event
from models.events.types import EventType
from models.events.sources import EventSource


@dataclass(init=False)
class PreviewStartedEvent(Event):
    loop_start: float

    def __init__(self, loop_start: float):
        super().__init__(
            type=EventType.PREVIEW_STARTED,
            source=EventSource.PREVIEW_LOOP,
        )
        self.loop_start = loop_start


@dataclass(init=False)
class PreviewStoppedEvent(Event):
    frames_rendered: int

    def __init__(self, frames_rendered: int):
        super().__init__(
            type=EventType.PREVIEW_STOPPED,
            source=EventSource.PREVIEW_LOOP,
        )
        self.frames_rendered = frames_rendered
