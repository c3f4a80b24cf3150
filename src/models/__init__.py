"""
Models package - Data models for the gradient loop generator

Domain types live in submodules (models.color, models.blob, models.scene);
only dependency-free enums and errors are re-exported here.
"""

from .enums import PreviewState, ExportPhase, SceneChangeReason, NotificationLevel, LogLevel, LogCategory
from .errors import (
    DomainError,
    SurfaceUnavailableError,
    InvalidColorError,
    InvalidBlobError,
    EncoderError,
    ExportError,
    ExportInProgressError,
    ProposalError,
)

__all__ = [
    'PreviewState',
    'ExportPhase',
    'SceneChangeReason',
    'NotificationLevel',
    'LogLevel',
    'LogCategory',
    'DomainError',
    'SurfaceUnavailableError',
    'InvalidColorError',
    'InvalidBlobError',
    'EncoderError',
    'ExportError',
    'ExportInProgressError',
    'ProposalError',
]
