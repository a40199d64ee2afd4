# image_derivatives/services/derivative_pipeline/derivative_pipeline.py
"""
Main Derivative Pipeline Class

Provides the caller-facing interface of the derivative pipeline with explicit
dependency injection:

- register_image_field / register_model: synthesize validation rules once
  during model setup
- build / save_images: turn uploads into complete derivative sets
- get_image_thumbnail_path: read-path lookup of stored derivatives
- discard_derivative_set: remove the files of an outdated set

Every build runs in its own invocation context (a fresh PathResolver), so no
directory cache outlives the call that filled it.
"""

from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple, Union

from ...config import Settings, settings
from ...constants import ORIGINAL_VARIANT_DIRECTORY
from ...enums import LogEmoji, LoggerName, LogSource
from ...exceptions import (
    DerivativeBuildError,
    DerivativesError,
    InvalidFieldSpecError,
    UnknownThumbnailTypeError,
)
from ...models.constraint_model import ConstraintSet
from ...models.derivative_model import DerivativeSet, ModelIdentity, UploadHandle
from ...models.image_field_model import FieldSpecification
from ...services.logger import get_service_logger
from ...utils.file_helpers import delete_files_safe
from .generators import DerivativeSetBuilder, ResizeEngine
from .services import (
    FieldRegistry,
    HasImageFields,
    PathResolver,
    build_constraints,
    minimum_size,
    registry_key,
    synthesize_rule,
)
from .utils.filename_utils import generate_retina_name

logger = get_service_logger(LoggerName.DERIVATIVE_PIPELINE, LogSource.PIPELINE)

RetinaOverride = Union[bool, int, None]
Owner = Union[ModelIdentity, HasImageFields]


def resolve_retina_factor(override: RetinaOverride, default: int) -> Optional[int]:
    """
    Effective retina factor.

    Args:
        override: None inherits the default, False disables, an int >= 1 wins
        default: Process-wide factor (0 means disabled)

    Returns:
        The factor, or None when retina derivatives are disabled
    """
    if override is False:
        return None
    if override is None or override is True:
        return default or None
    if override < 1:
        raise InvalidFieldSpecError(f"Invalid retina factor {override}")
    return int(override)


class DerivativePipeline:
    """
    Derivative generation pipeline providing unified access to sanitization,
    path resolution, resizing and constraint synthesis.
    """

    def __init__(
        self,
        settings_obj: Optional[Settings] = None,
        registry: Optional[FieldRegistry] = None,
        engine: Optional[ResizeEngine] = None,
    ):
        """
        Initialize derivative pipeline.

        Args:
            settings_obj: Settings (defaults to the global settings instance)
            registry: Image field registry (defaults to an empty registry)
            engine: Resize engine (defaults to one using settings.image_quality)
        """
        self.settings = settings_obj or settings
        self.registry = registry if registry is not None else FieldRegistry()
        self.engine = engine or ResizeEngine(quality=self.settings.image_quality)

    # ------------------------------------------------------------------
    # Model identity helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _identity(owner: Owner) -> ModelIdentity:
        if isinstance(owner, ModelIdentity):
            return owner
        if isinstance(owner, HasImageFields):
            return owner.image_identity()
        raise TypeError(
            f"{type(owner).__name__} does not implement HasImageFields"
        )

    def retina_factor_for(self, owner: Owner) -> Optional[int]:
        identity = self._identity(owner)
        return resolve_retina_factor(identity.retina_factor, self.settings.retina_factor)

    def get_image_fields(self, owner: Owner) -> Dict[str, FieldSpecification]:
        """
        Image fields of a model.

        Raises:
            InvalidFieldSpecError: If the model type has no registered fields
        """
        return self.registry.require(registry_key(self._identity(owner)))

    def get_image_types(self, owner: Owner) -> List[str]:
        return list(self.get_image_fields(owner).keys())

    def ensure_image_type(self, owner: Owner, field_name: str) -> FieldSpecification:
        """
        Field specification of one image field.

        Raises:
            InvalidFieldSpecError: If the model has no such image field
        """
        fields = self.get_image_fields(owner)
        if field_name not in fields:
            raise InvalidFieldSpecError(
                f"Image field '{field_name}' not found for '{registry_key(self._identity(owner))}'"
            )
        return fields[field_name]

    def create_resolver(self, owner: Owner) -> PathResolver:
        """New invocation-scoped resolver for a model instance."""
        return PathResolver.for_identity(self._identity(owner), self.settings.upload_path)

    # ------------------------------------------------------------------
    # Constraint synthesis
    # ------------------------------------------------------------------

    def get_constraints(
        self, field_spec: FieldSpecification, retina_factor: RetinaOverride = None
    ) -> ConstraintSet:
        factor = resolve_retina_factor(retina_factor, self.settings.retina_factor)
        return build_constraints(field_spec, factor, self.settings.max_upload_size)

    def get_min_allowed_image_size(
        self, owner: Owner, field: Union[str, FieldSpecification]
    ) -> Tuple[int, int]:
        """
        Minimum (width, height) a source image must have for a field.

        Raises:
            InvalidFieldSpecError: If a field name is given that doesn't exist
        """
        if isinstance(field, str):
            field = self.ensure_image_type(owner, field)
        return minimum_size(field, self.retina_factor_for(owner))

    def register_image_field(
        self,
        field_spec: FieldSpecification,
        existing_rule: Optional[str] = None,
        retina_factor: RetinaOverride = None,
    ) -> str:
        """
        Validation rule for an image field, merged into its existing rule.

        Call once during model/schema setup and store the returned rule.
        """
        constraints = self.get_constraints(field_spec, retina_factor)
        return synthesize_rule(existing_rule, constraints)

    def register_model(
        self, owner: Owner, rules: Optional[Mapping[str, str]] = None
    ) -> Dict[str, str]:
        """
        Validation rules of a model with every image field's constraints merged in.

        Args:
            owner: Model identity or HasImageFields implementor
            rules: Current rules keyed by field name (not mutated)

        Returns:
            New rules mapping

        Raises:
            InvalidFieldSpecError: If the model has no image fields
        """
        identity = self._identity(owner)
        new_rules = dict(rules or {})

        for field_name, field_spec in self.get_image_fields(identity).items():
            new_rules[field_name] = self.register_image_field(
                field_spec,
                existing_rule=new_rules.get(field_name),
                retina_factor=identity.retina_factor,
            )

        logger.debug(
            f"Registered validation rules for '{registry_key(identity)}'",
            emoji=LogEmoji.RULE,
            extra_context={"fields": list(new_rules)},
        )
        return new_rules

    # ------------------------------------------------------------------
    # Derivative generation
    # ------------------------------------------------------------------

    def _create_builder(
        self, owner: Owner, resolver: Optional[PathResolver] = None
    ) -> DerivativeSetBuilder:
        return DerivativeSetBuilder(
            resolver=resolver or self.create_resolver(owner),
            engine=self.engine,
            retina_factor=self.retina_factor_for(owner),
            unique_filenames=self.settings.unique_filenames,
        )

    def build_field(
        self, owner: Owner, field_spec: FieldSpecification, upload: UploadHandle
    ) -> DerivativeSet:
        """Build a derivative set for an explicitly given field specification."""
        return self._create_builder(owner).build(upload, field_spec)

    def build(
        self, owner: Owner, field_name: str, upload: UploadHandle
    ) -> DerivativeSet:
        """
        Build the derivative set of one uploaded image.

        Raises:
            InvalidFieldSpecError: Unknown field or malformed specification
            InvalidFilenameError / UnsupportedImageFormatError / StorageWriteError
        """
        field_spec = self.ensure_image_type(owner, field_name)
        return self.build_field(owner, field_spec, upload)

    def save_images(
        self, owner: Owner, uploads: Mapping[str, UploadHandle]
    ) -> Dict[str, DerivativeSet]:
        """
        Build derivative sets for every uploaded image field of a model.

        Uploads for names that are not image fields are ignored. All fields
        share one invocation context.

        Returns:
            {field name: DerivativeSet}

        Raises:
            DerivativesError: From the failing field. When it is a
                DerivativeBuildError, written_paths also lists the files of
                every field completed before the failure.
        """
        fields = self.get_image_fields(owner)
        resolver = self.create_resolver(owner)
        builder = self._create_builder(owner, resolver)

        derivative_sets: Dict[str, DerivativeSet] = {}
        for field_name, field_spec in fields.items():
            upload = uploads.get(field_name)
            if upload is None:
                continue
            try:
                derivative_sets[field_name] = builder.build(upload, field_spec)
            except DerivativesError as e:
                completed_paths = [
                    path
                    for derivative_set in derivative_sets.values()
                    for path in derivative_set.paths
                ]
                if isinstance(e, DerivativeBuildError):
                    e.written_paths = completed_paths + [
                        p for p in e.written_paths if p not in completed_paths
                    ]
                logger.error(
                    f"Failed to save images for field '{field_name}'",
                    exception=e,
                    error_context={
                        "field_name": field_name,
                        "completed_fields": list(derivative_sets),
                    },
                )
                raise

        return derivative_sets

    def discard_derivative_set(self, derivative_set: DerivativeSet) -> List[Path]:
        """Delete every file of a derivative set, returning the removed paths."""
        removed = delete_files_safe(derivative_set.paths)
        logger.info(
            f"Discarded {len(removed)} derivative file(s) of field '{derivative_set.field_name}'",
            emoji=LogEmoji.CLEANUP,
            extra_context={"field_name": derivative_set.field_name},
        )
        return removed

    # ------------------------------------------------------------------
    # Read path
    # ------------------------------------------------------------------

    def get_image_thumbnail_path(
        self,
        owner: Owner,
        field_name: str,
        filename: str,
        thumbnail_type: str = ORIGINAL_VARIANT_DIRECTORY,
        retina: bool = False,
        fallback_to_original: bool = True,
    ) -> Optional[Path]:
        """
        Path of a stored derivative.

        Args:
            owner: Model identity or HasImageFields implementor
            field_name: Image field name
            filename: Stored base filename (DerivativeSet.filename)
            thumbnail_type: Thumbnail name or "original"
            retina: Return the @2x variant
            fallback_to_original: Use the original directory for unknown thumbnails

        Returns:
            Path, or None when the field (or, without fallback, the thumbnail)
            is not defined
        """
        identity = self._identity(owner)
        field_spec = self.registry.get_field(registry_key(identity), field_name)
        if field_spec is None:
            return None

        variant = thumbnail_type
        if thumbnail_type != ORIGINAL_VARIANT_DIRECTORY:
            try:
                field_spec.get_thumbnail(thumbnail_type)
            except UnknownThumbnailTypeError as e:
                if not fallback_to_original:
                    return None
                logger.debug(f"{e}, falling back to original")
                variant = ORIGINAL_VARIANT_DIRECTORY

        resolver = self.create_resolver(identity)
        name = generate_retina_name(filename) if retina else filename
        return resolver.peek_directory(variant) / name


def create_derivative_pipeline(
    settings_obj: Optional[Settings] = None,
    registry: Optional[FieldRegistry] = None,
) -> DerivativePipeline:
    """
    Factory function to create a pipeline from settings.

    When no registry is given and settings.image_fields_file is set, the
    registry is loaded from that JSON file.
    """
    settings_obj = settings_obj or settings
    if registry is None and settings_obj.image_fields_file:
        registry = FieldRegistry.load(settings_obj.image_fields_file)

    settings_obj.ensure_directories()
    return DerivativePipeline(settings_obj=settings_obj, registry=registry)
