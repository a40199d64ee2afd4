# image_derivatives/models/derivative_model.py
"""
Derivative pipeline input and output models.

- UploadHandle: the raw upload consumed once by a build
- ModelIdentity: type name + primary key that scope the storage directory
- DerivativeDescriptor / DerivativeSet: what a build produced
- ImageRecord: the single row a caller persists per uploaded image
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator

from ..constants import ORIGINAL_SOURCE_ROLE
from ..enums import ResizePolicy
from ..exceptions import UploadConsumedError
from ..utils.file_helpers import move_file, write_bytes, write_stream

_MODEL_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


@dataclass
class UploadHandle:
    """
    Raw upload: the client filename plus exactly one byte source.

    The handle is consumed by the first store() call. A temp file given as
    ``path`` is moved, not copied.
    """

    filename: str
    path: Optional[Path] = None
    data: Optional[bytes] = None
    stream: Optional[BinaryIO] = None
    _consumed: bool = field(default=False, init=False, repr=False)

    def __post_init__(self):
        provided = [s for s in (self.path, self.data, self.stream) if s is not None]
        if len(provided) != 1:
            raise ValueError("UploadHandle needs exactly one of path, data or stream")
        if self.path is not None:
            self.path = Path(self.path)

    @classmethod
    def from_path(
        cls, path: Union[str, Path], filename: Optional[str] = None
    ) -> "UploadHandle":
        path = Path(path)
        return cls(filename=filename or path.name, path=path)

    @classmethod
    def from_bytes(cls, filename: str, data: bytes) -> "UploadHandle":
        return cls(filename=filename, data=data)

    @property
    def consumed(self) -> bool:
        return self._consumed

    def store(self, destination: Union[str, Path]) -> Path:
        """
        Write the upload bytes to destination.

        Raises:
            UploadConsumedError: If the handle was already stored
            StorageWriteError: If the move/write fails
        """
        if self._consumed:
            raise UploadConsumedError(f"Upload '{self.filename}' was already stored")
        self._consumed = True

        if self.path is not None:
            return move_file(self.path, destination)
        if self.data is not None:
            return write_bytes(self.data, destination)
        return write_stream(self.stream, destination)


class ModelIdentity(BaseModel):
    """Identity of the model instance that owns uploaded images"""

    type_name: str = Field(
        ..., min_length=1, description="Model type, e.g. 'app.models.blog.Post'"
    )
    key: Union[int, str] = Field(..., description="Primary key of the instance")
    identifier: Optional[str] = Field(
        default=None, description="Field registry key (defaults to the model directory)"
    )
    retina_factor: Optional[Union[Literal[False], PositiveInt]] = Field(
        default=None,
        description="Retina override: None inherits the default, False disables",
    )

    model_config = ConfigDict(frozen=True)

    @field_validator("key")
    @classmethod
    def validate_key(cls, v: Union[int, str]) -> Union[int, str]:
        if not _MODEL_KEY_PATTERN.match(str(v)):
            raise ValueError(f"Model key '{v}' is not usable as a directory name")
        return v


class DerivativeDescriptor(BaseModel):
    """One file produced by a derivative build"""

    role: str = Field(..., description="e.g. 'original.source', 'thumbnails.small.retina'")
    path: Path
    width: int = Field(..., ge=1)
    height: int = Field(..., ge=1)
    file_size: Optional[int] = None
    policy: Optional[ResizePolicy] = None

    model_config = ConfigDict(frozen=True)

    @property
    def filename(self) -> str:
        return self.path.name

    @property
    def size(self):
        return (self.width, self.height)


class ImageRecord(BaseModel):
    """Row persisted by the caller for one uploaded image"""

    original_image: str
    retina_factor: Optional[int] = None
    image_type: str

    model_config = ConfigDict(from_attributes=True)


class DerivativeSet(BaseModel):
    """Complete derivative set for one uploaded image, keyed by role"""

    field_name: str
    filename: str = Field(..., description="Sanitized base filename, e.g. 'cafe-photo.jpg'")
    retina_factor: Optional[int] = None
    descriptors: Dict[str, DerivativeDescriptor] = Field(default_factory=dict)

    def get(self, role: str) -> Optional[DerivativeDescriptor]:
        return self.descriptors.get(role)

    def __contains__(self, role: str) -> bool:
        return role in self.descriptors

    def __len__(self) -> int:
        return len(self.descriptors)

    @property
    def roles(self) -> List[str]:
        return list(self.descriptors.keys())

    @property
    def paths(self) -> List[Path]:
        return [d.path for d in self.descriptors.values()]

    @property
    def source(self) -> DerivativeDescriptor:
        return self.descriptors[ORIGINAL_SOURCE_ROLE]

    def to_image_record(self) -> ImageRecord:
        """Only the source file is persisted; every other path derives from it."""
        return ImageRecord(
            original_image=self.source.filename,
            retina_factor=self.retina_factor,
            image_type=self.field_name,
        )
