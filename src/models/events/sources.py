from enum import Enum, auto


class EventSource(Enum):
    """Event source identifiers for application events"""
    SCENE_SERVICE = auto()      # Scene replacement, palette edits
    PREVIEW_LOOP = auto()       # Live preview scheduling
    EXPORT_SERVICE = auto()     # Export pipeline
    PROPOSAL_SERVICE = auto()   # AI palette/motion proposals
    APPLICATION = auto()        # Host wiring, generic events
