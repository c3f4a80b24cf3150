"""
Middleware for EventBus

Middleware = pipeline functions that process events before handlers.
Can modify events, block events, or log/validate events.
"""

from models.events import Event, EventType
from models.enums import LogCategory
from utils.logger import get_category_logger

log = get_category_logger(LogCategory.EVENT)

# High-frequency events that would flood the console at INFO
_QUIET_EVENTS = {EventType.EXPORT_PROGRESS}

# Keyword names taken by Logger.log()
_RESERVED_KEYS = {"message", "level", "category", "details", "exc_info"}


def log_middleware(event: Event) -> Event:
    """
    Log all events for debugging

    Usage:
        event_bus.add_middleware(log_middleware)
    """
    source_str = event.source.name.lower() if event.source else "unknown"
    data = event.to_data()

    if event.type in _QUIET_EVENTS:
        log.debug(f"Event: {event.type.name} from {source_str}", **_compact(data))
    else:
        log.info(f"Event: {event.type.name} from {source_str}", **_compact(data))
    return event


def _compact(data: dict) -> dict:
    """Shorten bulky payloads (scenes, exceptions) to one-line summaries"""
    out = {}
    for key, value in data.items():
        if key == "scene":
            out["blobs"] = len(value.blobs)
            out["frames"] = value.config.total_frames
            continue
        if hasattr(value, "name") and hasattr(value, "value"):
            value = value.name
        # Event fields must not shadow the logger's own parameters
        out[f"event_{key}" if key in _RESERVED_KEYS else key] = value
    return out
