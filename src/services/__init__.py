"""
Services layer

Import services from their modules (services.export_service,
services.scene_service, ...); the engine imports the event bus from here
while those modules import the engine, so only the bus is re-exported.
"""

from .event_bus import EventBus

__all__ = [
    "EventBus",
]
