"""
Image derivatives.

Generates thumbnail and retina derivatives for uploaded images and synthesizes
the upload constraints those derivatives imply.
"""

from .config import Settings, settings
from .enums import DerivativeVariant, ResizePolicy
from .exceptions import (
    ConfigurationError,
    DerivativeBuildError,
    DerivativesError,
    InvalidFieldSpecError,
    InvalidFilenameError,
    StorageWriteError,
    UnknownThumbnailTypeError,
    UnsupportedImageFormatError,
    UploadConsumedError,
)
from .models import (
    ConstraintSet,
    DerivativeDescriptor,
    DerivativeSet,
    FieldSpecification,
    ImageRecord,
    ModelIdentity,
    ThumbnailSpec,
    UploadHandle,
)
from .services.derivative_pipeline import (
    DerivativePipeline,
    FieldRegistry,
    HasImageFields,
    create_derivative_pipeline,
)

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "settings",
    "ResizePolicy",
    "DerivativeVariant",
    "DerivativesError",
    "ConfigurationError",
    "InvalidFieldSpecError",
    "InvalidFilenameError",
    "UnknownThumbnailTypeError",
    "UploadConsumedError",
    "DerivativeBuildError",
    "UnsupportedImageFormatError",
    "StorageWriteError",
    "ThumbnailSpec",
    "FieldSpecification",
    "UploadHandle",
    "ModelIdentity",
    "DerivativeDescriptor",
    "DerivativeSet",
    "ImageRecord",
    "ConstraintSet",
    "DerivativePipeline",
    "FieldRegistry",
    "HasImageFields",
    "create_derivative_pipeline",
]
