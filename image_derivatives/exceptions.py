# image_derivatives/exceptions.py
"""
Custom exceptions for the image derivative pipeline.

Centralized location for all custom exception classes to avoid
duplicating exception definitions across modules.
"""

from pathlib import Path
from typing import Iterable, List, Optional


class DerivativesError(Exception):
    """Base exception for all derivative pipeline errors."""

    pass


class ConfigurationError(DerivativesError):
    """Custom exception for configuration and validation errors."""

    pass


class InvalidFieldSpecError(ConfigurationError):
    """Missing or malformed image field / thumbnail specification."""

    pass


class InvalidFilenameError(DerivativesError):
    """Upload filename cannot be turned into a safe storage name."""

    pass


class UnknownThumbnailTypeError(DerivativesError, LookupError):
    """Lookup of a thumbnail variant that is not declared for the field."""

    def __init__(self, field_name: str, thumbnail_name: str):
        self.field_name = field_name
        self.thumbnail_name = thumbnail_name
        super().__init__(
            f"Thumbnail '{thumbnail_name}' is not defined for field '{field_name}'"
        )


class UploadConsumedError(DerivativesError):
    """Upload handle was already stored once."""

    pass


class DerivativeBuildError(DerivativesError):
    """
    Failure while building a derivative set.

    ``written_paths`` lists the files the failed invocation had already
    written. They are orphaned and left for the caller to clean up.
    """

    def __init__(self, message: str, written_paths: Optional[Iterable[Path]] = None):
        super().__init__(message)
        self.written_paths: List[Path] = list(written_paths or [])


class UnsupportedImageFormatError(DerivativeBuildError):
    """Upload could not be decoded as a supported image."""

    pass


class StorageWriteError(DerivativeBuildError):
    """Disk or permission failure while moving, copying or saving a derivative."""

    pass
