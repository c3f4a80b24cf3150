from dataclasses import dataclass
from typing import TYPE_CHECKING

from models.events.base import Event
from models.events.types import EventType
from models.events.sources import EventSource
from models.enums import SceneChangeReason

if TYPE_CHECKING:
    from models.scene import Scene


@dataclass(init=False)
class SceneChangedEvent(Event):
    scene: "Scene"
    reason: SceneChangeReason

    def __init__(self, scene: "Scene", reason: SceneChangeReason):
        super().__init__(
            type=EventType.SCENE_CHANGED,
            source=EventSource.SCENE_SERVICE,
        )
        self.scene = scene
        self.reason = reason
