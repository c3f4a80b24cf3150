from enum import Enum, auto


class EventType(Enum):
    # Scene
    SCENE_CHANGED = auto()

    # Live preview
    PREVIEW_STARTED = auto()
    PREVIEW_STOPPED = auto()

    # Export pipeline
    EXPORT_STARTED = auto()
    EXPORT_PROGRESS = auto()
    EXPORT_FINISHED = auto()
    EXPORT_FAILED = auto()

    # Host / UI
    USER_NOTIFICATION = auto()
