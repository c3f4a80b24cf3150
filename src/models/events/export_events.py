from dataclasses import dataclass

from models.events.base import Event
from models.events.types import EventType
from models.events.sources import EventSource
from models.enums import ExportPhase


@dataclass(init=False)
class ExportStartedEvent(Event):
    total_frames: int

    def __init__(self, total_frames: int):
        super().__init__(
            type=EventType.EXPORT_STARTED,
            source=EventSource.EXPORT_SERVICE,
        )
        self.total_frames = total_frames


@dataclass(init=False)
class ExportProgressEvent(Event):
    value: int
    phase: ExportPhase

    def __init__(self, value: int, phase: ExportPhase):
        super().__init__(
            type=EventType.EXPORT_PROGRESS,
            source=EventSource.EXPORT_SERVICE,
        )
        self.value = value
        self.phase = phase


@dataclass(init=False)
class ExportFinishedEvent(Event):
    frame_count: int
    size_bytes: int

    def __init__(self, frame_count: int, size_bytes: int):
        super().__init__(
            type=EventType.EXPORT_FINISHED,
            source=EventSource.EXPORT_SERVICE,
        )
        self.frame_count = frame_count
        self.size_bytes = size_bytes


@dataclass(init=False)
class ExportFailedEvent(Event):
    error: Exception

    def __init__(self, error: Exception):
        super().__init__(
            type=EventType.EXPORT_FAILED,
            source=EventSource.EXPORT_SERVICE,
        )
        self.error = error
