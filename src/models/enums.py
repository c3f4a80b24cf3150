"""
Enums for the gradient loop generator
"""

from enum import Enum, auto


class PreviewState(Enum):
    """Live preview loop states"""
    STOPPED = auto()   # No frames produced, surface keeps the last frame
    RUNNING = auto()   # Frames produced at the display cadence


class ExportPhase(Enum):
    """
    Export pipeline phases

    Progress is split in two halves:
    RENDERING covers 0-50, ENCODING covers 50-100.
    """
    IDLE = auto()
    RENDERING = auto()
    ENCODING = auto()
    FINISHED = auto()
    FAILED = auto()


class SceneChangeReason(Enum):
    """Why the current scene was replaced"""
    GENERATED = auto()      # Fresh random blobs
    PALETTE = auto()        # Palette change (colors only)
    CONFIG = auto()         # AnimationConfig change
    PROPOSAL = auto()       # AI proposal applied
    REPLACED = auto()       # Blob list replaced by caller


class NotificationLevel(Enum):
    """Severity of user-visible notifications"""
    INFO = auto()
    WARNING = auto()
    ERROR = auto()


class LogLevel(Enum):
    """Log severity levels"""
    DEBUG = auto()
    INFO = auto()
    WARN = auto()
    ERROR = auto()


class LogCategory(Enum):
    """Log categories for grouping related events"""
    CONFIG = auto()         # Configuration loading, validation
    ANIMATION = auto()      # Blob generation, motion parameters
    RENDER_ENGINE = auto()  # Surface + frame renderer
    PREVIEW = auto()        # Live preview loop
    EXPORT = auto()         # Export pipeline + encoder
    PALETTE = auto()        # Palette presets, extraction, editing
    PROPOSAL = auto()       # AI palette/motion proposals
    SCENE = auto()          # Scene replacement
    EVENT = auto()          # Event bus events and handling
    SYSTEM = auto()         # Startup, shutdown, errors
    TASK = auto()           # asyncio task tracking

    GENERAL = auto()    # Default general category
