"""
Pydantic Models Package

Models are organized by domain:

    - image_field_model: field and thumbnail specifications (configuration)
    - derivative_model: upload handle, model identity and build results
    - constraint_model: upload constraints synthesized per field
"""

from .constraint_model import ConstraintSet
from .derivative_model import (
    DerivativeDescriptor,
    DerivativeSet,
    ImageRecord,
    ModelIdentity,
    UploadHandle,
)
from .image_field_model import FieldSpecification, ThumbnailSpec

__all__ = [
    "ConstraintSet",
    "DerivativeDescriptor",
    "DerivativeSet",
    "FieldSpecification",
    "ImageRecord",
    "ModelIdentity",
    "ThumbnailSpec",
    "UploadHandle",
]
