from dataclasses import dataclass

from models.events.base import Event
from models.events.types import EventType
from models.events.sources import EventSource
from models.enums import NotificationLevel


@dataclass(init=False)
class UserNotificationEvent(Event):
    """Single user-visible message raised at a pipeline boundary"""
    message: str
    level: NotificationLevel

    def __init__(
        self,
        message: str,
        level: NotificationLevel = NotificationLevel.ERROR,
        source: EventSource = EventSource.APPLICATION,
    ):
        super().__init__(type=EventType.USER_NOTIFICATION, source=source)
        self.message = message
        self.level = level
