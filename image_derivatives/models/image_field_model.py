# image_derivatives/models/image_field_model.py
"""
Image field specification models.

A FieldSpecification describes one logical image field of a model: its name
and the ordered set of thumbnail variants every upload to it must produce.
"""

import re
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_serializer,
    field_validator,
    model_validator,
)

from ..constants import ORIGINAL_VARIANT_DIRECTORY
from ..enums import ResizePolicy
from ..exceptions import InvalidFieldSpecError, UnknownThumbnailTypeError

# Thumbnail names double as directory names
_THUMBNAIL_NAME_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*$")


class ThumbnailSpec(BaseModel):
    """
    Target size and resize policy for one thumbnail variant.

    Direct construction raises pydantic's ValidationError; use from_config to
    get InvalidFieldSpecError instead.
    """

    width: Optional[int] = Field(
        default=None, ge=0, description="Target width in pixels (None = unconstrained)"
    )
    height: Optional[int] = Field(
        default=None, ge=0, description="Target height in pixels (None = unconstrained)"
    )
    policy: ResizePolicy = Field(
        default=ResizePolicy.CROP,
        validation_alias=AliasChoices("policy", "type"),
        description="Resize policy (crop or resize)",
    )
    upsize: bool = Field(
        default=False,
        description="Allow the resize policy to scale beyond the source resolution",
    )

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("width", "height")
    @classmethod
    def zero_is_unconstrained(cls, v: Optional[int]) -> Optional[int]:
        return v or None

    @model_validator(mode="after")
    def validate_policy_dimensions(self) -> "ThumbnailSpec":
        if self.policy == ResizePolicy.CROP and not (self.width and self.height):
            raise ValueError("crop policy requires both width and height")
        if self.policy == ResizePolicy.RESIZE and not (self.width or self.height):
            raise ValueError("resize policy requires width or height")
        return self

    @classmethod
    def from_config(cls, name: str, options: Any) -> "ThumbnailSpec":
        """
        Build a thumbnail specification from {"width", "height", "type"}.

        Raises:
            InvalidFieldSpecError: If the options are missing or malformed
        """
        if isinstance(options, ThumbnailSpec):
            return options
        if not isinstance(options, Mapping):
            raise InvalidFieldSpecError(f"Thumbnail '{name}' must be a mapping")

        try:
            return cls.model_validate(dict(options))
        except ValidationError as e:
            raise InvalidFieldSpecError(f"Invalid thumbnail '{name}': {e}") from e

    def scaled(self, factor: int = 1) -> Tuple[Optional[int], Optional[int]]:
        """Target (width, height) multiplied by a retina factor"""
        width = self.width * factor if self.width else None
        height = self.height * factor if self.height else None
        return (width, height)


class FieldSpecification(BaseModel):
    """
    One image field and its ordered thumbnail variants.

    Immutable once loaded: the model is frozen and ``thumbnails`` is a
    read-only mapping.
    """

    name: str = Field(..., min_length=1, description="Image field name")
    thumbnails: Mapping[str, ThumbnailSpec] = Field(
        default_factory=dict,
        validate_default=True,
        description="Thumbnail name -> specification",
    )

    model_config = ConfigDict(frozen=True)

    @field_validator("thumbnails")
    @classmethod
    def validate_thumbnail_names(
        cls, v: Mapping[str, ThumbnailSpec]
    ) -> Mapping[str, ThumbnailSpec]:
        for thumbnail_name in v:
            if not _THUMBNAIL_NAME_PATTERN.match(thumbnail_name):
                raise ValueError(f"Invalid thumbnail name '{thumbnail_name}'")
            if thumbnail_name == ORIGINAL_VARIANT_DIRECTORY:
                raise ValueError(
                    f"Thumbnail name '{thumbnail_name}' is reserved for original images"
                )
        return MappingProxyType(dict(v))

    @field_serializer("thumbnails")
    def serialize_thumbnails(
        self, v: Mapping[str, ThumbnailSpec]
    ) -> Dict[str, ThumbnailSpec]:
        return dict(v)

    @classmethod
    def from_config(cls, name: str, options: Any) -> "FieldSpecification":
        """
        Build a field specification from its configuration shape.

        Args:
            name: Image field name
            options: Mapping with a "thumbnails" mapping of
                {thumbnail_name: {"width", "height", "type"}}

        Returns:
            Validated FieldSpecification

        Raises:
            InvalidFieldSpecError: If the configuration is missing or malformed
        """
        if not isinstance(options, Mapping) or not isinstance(
            options.get("thumbnails"), Mapping
        ):
            raise InvalidFieldSpecError(
                f"Image field '{name}' must define a 'thumbnails' mapping"
            )

        try:
            thumbnails = {
                thumbnail_name: ThumbnailSpec.from_config(thumbnail_name, thumbnail)
                for thumbnail_name, thumbnail in options["thumbnails"].items()
            }
        except InvalidFieldSpecError as e:
            raise InvalidFieldSpecError(f"Image field '{name}': {e}") from e

        try:
            return cls(name=name, thumbnails=thumbnails)
        except ValidationError as e:
            raise InvalidFieldSpecError(
                f"Invalid thumbnail configuration for image field '{name}': {e}"
            ) from e

    @property
    def thumbnail_names(self) -> List[str]:
        return list(self.thumbnails.keys())

    def has_thumbnail(self, thumbnail_name: str) -> bool:
        return thumbnail_name in self.thumbnails

    def get_thumbnail(self, thumbnail_name: str) -> ThumbnailSpec:
        """
        Get a thumbnail specification by name.

        Raises:
            UnknownThumbnailTypeError: If the field declares no such thumbnail
        """
        try:
            return self.thumbnails[thumbnail_name]
        except KeyError:
            raise UnknownThumbnailTypeError(self.name, thumbnail_name) from None
