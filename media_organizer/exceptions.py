"""
Custom exception hierarchy for the media organizer application.

This module defines specific exception types to improve error handling
and debugging throughout the application.
"""


class MediaOrganizerError(Exception):
    """Base exception for all media organizer errors."""
    pass


class ArgumentError(MediaOrganizerError):
    """Raised when the command line arguments or paths are invalid."""
    pass


class MetadataExtractionError(MediaOrganizerError):
    """Raised when metadata cannot be extracted from a file."""

    def __init__(self, path, reason):
        super().__init__(f"Cannot read metadata from {path}: {reason}")
        self.path = path
        self.reason = reason


class ProviderUnavailableError(MediaOrganizerError):
    """Raised when an external metadata tool is not installed."""
    pass


class GpsPolicyAbort(MediaOrganizerError):
    """Raised when the GPS gate decides the run must not proceed."""
    pass


class FileOperationError(MediaOrganizerError):
    """Raised when a copy or directory creation fails. `path` is the target."""

    def __init__(self, path, reason, src=None):
        if src is not None:
            message = f"Failed to copy {src} -> {path}: {reason}"
        else:
            message = f"Failed to create {path}: {reason}"
        super().__init__(message)
        self.path = path
        self.src = src
        self.reason = reason
