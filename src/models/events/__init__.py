"""
Event system for the gradient loop generator

Scene, preview, export and notification events routed through the EventBus.
"""

# Event type, base class, and sources
from models.events.types import EventType
from models.events.base import Event
from models.events.sources import EventSource

# Scene events
from models.events.scene_events import SceneChangedEvent

# Preview loop events
from models.events.preview_events import PreviewStartedEvent, PreviewStoppedEvent

# Export pipeline events
from models.events.export_events import (
    ExportStartedEvent,
    ExportProgressEvent,
    ExportFinishedEvent,
    ExportFailedEvent,
)

# User-visible notifications
from models.events.notification_events import UserNotificationEvent

__all__ = [
    # Type, base, and sources
    "EventType",
    "Event",
    "EventSource",

    # Scene
    "SceneChangedEvent",

    # Preview
    "PreviewStartedEvent",
    "PreviewStoppedEvent",

    # Export
    "ExportStartedEvent",
    "ExportProgressEvent",
    "ExportFinishedEvent",
    "ExportFailedEvent",

    # Notifications
    "UserNotificationEvent",
]
