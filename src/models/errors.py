"""
Domain errors

Every failure that crosses a pipeline boundary is a DomainError carrying a
machine-readable code, a human-readable message and optional details.
Pipeline boundaries (export, proposals, preview) catch these, log them and
turn them into a single user-visible notification.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base class for domain-specific errors"""
    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class SurfaceUnavailableError(DomainError):
    """Rendering surface is gone (closed, never created)"""
    def __init__(self, message: str = "Rendering surface is not available"):
        super().__init__(code="SURFACE_UNAVAILABLE", message=message)


class InvalidColorError(DomainError):
    """Color text could not be parsed"""
    def __init__(self, value: Any):
        super().__init__(
            code="INVALID_COLOR",
            message=f"'{value}' is not a valid hex color",
            details={"value": value}
        )


class InvalidBlobError(DomainError):
    """Blob parameter breaks the perfect-loop invariant"""
    def __init__(self, field_name: str, value: Any):
        super().__init__(
            code="INVALID_BLOB",
            message=f"Blob field '{field_name}' must be a positive integer, got {value!r}",
            details={"field": field_name, "value": value}
        )


class EncoderError(DomainError):
    """Animated image encoder failed or was misused"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(code="ENCODER_ERROR", message=message, details=details)


class ExportError(DomainError):
    """Export aborted; no partial output is offered"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(code="EXPORT_FAILED", message=message, details=details)


class ExportInProgressError(DomainError):
    """A second export was requested while one is running"""
    def __init__(self):
        super().__init__(code="EXPORT_IN_PROGRESS", message="An export is already running")


class ProposalError(DomainError):
    """Palette/motion proposal service could not be reached or failed"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(code="PROPOSAL_FAILED", message=message, details=details)
