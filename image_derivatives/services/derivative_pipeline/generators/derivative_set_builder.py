# image_derivatives/services/derivative_pipeline/generators/derivative_set_builder.py
"""
Derivative Set Builder Component

Builds the complete derivative set for one uploaded image:

    original/<name>_source.<ext>     original.source   (stored verbatim)
    original/<name>@2x.<ext>         original.retina   (retina only, verbatim copy)
    original/<name>.<ext>            original.file     (downscaled by 1/factor, or copy)
    <thumb>/<name>@2x.<ext>          thumbnails.<thumb>.retina  (retina only)
    <thumb>/<name>.<ext>             thumbnails.<thumb>.original

A build either returns every descriptor or raises; files written before a
failure are reported on the exception and never returned as a set.
"""

from pathlib import Path
from typing import Dict, List, Optional, Tuple

from PIL import Image

from ....constants import (
    ORIGINAL_FILE_ROLE,
    ORIGINAL_RETINA_ROLE,
    ORIGINAL_SOURCE_ROLE,
    ORIGINAL_VARIANT_DIRECTORY,
)
from ....enums import DerivativeVariant, LogEmoji, LoggerName, LogSource, ResizePolicy
from ....exceptions import DerivativeBuildError, InvalidFieldSpecError
from ....models.derivative_model import (
    DerivativeDescriptor,
    DerivativeSet,
    UploadHandle,
)
from ....models.image_field_model import FieldSpecification, ThumbnailSpec
from ....services.logger import get_service_logger
from ....utils.file_helpers import copy_file, get_file_size
from ..services.path_resolver import PathResolver
from ..utils.derivative_utils import thumbnail_role
from ..utils.filename_utils import (
    generate_retina_name,
    generate_source_name,
    generate_unique_filename,
    sanitize_filename,
)
from .resize_generator import ResizeEngine

logger = get_service_logger(LoggerName.DERIVATIVE_PIPELINE, LogSource.PIPELINE)


class DerivativeSetBuilder:
    """
    Component responsible for turning one upload into a full derivative set.

    Each builder works inside the directories of one PathResolver, so a
    builder belongs to a single model instance and invocation.
    """

    def __init__(
        self,
        resolver: PathResolver,
        engine: Optional[ResizeEngine] = None,
        retina_factor: Optional[int] = None,
        unique_filenames: bool = True,
    ):
        """
        Initialize derivative set builder.

        Args:
            resolver: Path resolver scoped to the owning model instance
            engine: Resize engine (a default one is created if omitted)
            retina_factor: Retina factor, or None to disable retina derivatives
            unique_filenames: Avoid overwriting an existing set with the same name
        """
        if retina_factor is not None and retina_factor < 1:
            raise InvalidFieldSpecError(f"Invalid retina factor {retina_factor}")

        self.resolver = resolver
        self.engine = engine or ResizeEngine()
        self.retina_factor = retina_factor
        self.unique_filenames = unique_filenames
        self._written: List[Path] = []

    @property
    def retina_enabled(self) -> bool:
        return self.retina_factor is not None

    def build(
        self, upload: UploadHandle, field_spec: FieldSpecification
    ) -> DerivativeSet:
        """
        Build every derivative declared by the field specification.

        Args:
            upload: Raw upload (consumed by this call)
            field_spec: Image field specification

        Returns:
            DerivativeSet keyed by role

        Raises:
            InvalidFieldSpecError: Before any I/O, for unusable thumbnail specs
            InvalidFilenameError: If the upload filename has no extension
            UnsupportedImageFormatError: If the upload cannot be decoded
            StorageWriteError: If any move/copy/save fails
        """
        self._validate_field_spec(field_spec)
        filename = sanitize_filename(upload.filename)

        self._written = []
        try:
            descriptors = self._build_descriptors(upload, field_spec, filename)
        except DerivativeBuildError as e:
            e.written_paths = list(self._written) + [
                p for p in e.written_paths if p not in self._written
            ]
            logger.error(
                f"Derivative build failed for field '{field_spec.name}'",
                exception=e,
                error_context={
                    "field_name": field_spec.name,
                    "orphaned_files": len(e.written_paths),
                },
            )
            raise

        derivative_set = DerivativeSet(
            field_name=field_spec.name,
            filename=descriptors[ORIGINAL_FILE_ROLE].filename,
            retina_factor=self.retina_factor,
            descriptors=descriptors,
        )

        logger.info(
            f"Built {len(derivative_set)} derivatives for field '{field_spec.name}'",
            emoji=LogEmoji.IMAGE,
            extra_context={
                "field_name": field_spec.name,
                "filename": derivative_set.filename,
                "retina_factor": self.retina_factor,
            },
        )
        return derivative_set

    def _validate_field_spec(self, field_spec: FieldSpecification) -> None:
        for thumbnail_name, thumbnail in field_spec.thumbnails.items():
            if not isinstance(thumbnail, ThumbnailSpec):
                raise InvalidFieldSpecError(
                    f"Thumbnail '{thumbnail_name}' of field '{field_spec.name}' is not a ThumbnailSpec"
                )
            if thumbnail.policy == ResizePolicy.CROP and not (
                thumbnail.width and thumbnail.height
            ):
                raise InvalidFieldSpecError(
                    f"Crop thumbnail '{thumbnail_name}' of field '{field_spec.name}' needs width and height"
                )
            if not (thumbnail.width or thumbnail.height):
                raise InvalidFieldSpecError(
                    f"Thumbnail '{thumbnail_name}' of field '{field_spec.name}' has no target size"
                )

    def _build_descriptors(
        self, upload: UploadHandle, field_spec: FieldSpecification, filename: str
    ) -> Dict[str, DerivativeDescriptor]:
        original_directory = self.resolver.resolve_directory(ORIGINAL_VARIANT_DIRECTORY)
        if self.unique_filenames:
            filename = generate_unique_filename(original_directory, filename)

        descriptors: Dict[str, DerivativeDescriptor] = {}

        # Move the upload into place as the verbatim source file
        source_path = upload.store(original_directory / generate_source_name(filename))
        self._written.append(source_path)

        source_image = self.engine.open_image(source_path)
        try:
            source_size = source_image.size
            descriptors[ORIGINAL_SOURCE_ROLE] = self._describe(
                ORIGINAL_SOURCE_ROLE, source_path, source_size
            )

            if self.retina_enabled:
                retina_path = self._copy(
                    source_path, original_directory / generate_retina_name(filename)
                )
                descriptors[ORIGINAL_RETINA_ROLE] = self._describe(
                    ORIGINAL_RETINA_ROLE, retina_path, source_size
                )

                original_file = self.engine.scale_down(source_image, self.retina_factor)
                try:
                    original_path = self._save(original_file, original_directory / filename)
                    original_size = original_file.size
                finally:
                    original_file.close()
            else:
                original_path = self._copy(source_path, original_directory / filename)
                original_size = source_size

            descriptors[ORIGINAL_FILE_ROLE] = self._describe(
                ORIGINAL_FILE_ROLE, original_path, original_size
            )

            for thumbnail_name, thumbnail in field_spec.thumbnails.items():
                descriptors.update(
                    self._build_thumbnail(source_image, thumbnail_name, thumbnail, filename)
                )
        finally:
            source_image.close()

        return descriptors

    def _build_thumbnail(
        self,
        source_image: Image.Image,
        thumbnail_name: str,
        thumbnail: ThumbnailSpec,
        filename: str,
    ) -> Dict[str, DerivativeDescriptor]:
        directory = self.resolver.resolve_directory(thumbnail_name)
        descriptors = {}

        variants: List[Tuple[DerivativeVariant, int, str]] = []
        if self.retina_enabled:
            variants.append(
                (DerivativeVariant.RETINA, self.retina_factor, generate_retina_name(filename))
            )
        variants.append((DerivativeVariant.ORIGINAL, 1, filename))

        for variant, factor, variant_filename in variants:
            role = thumbnail_role(thumbnail_name, variant)
            width, height = thumbnail.scaled(factor)
            output_path = directory / variant_filename

            size = self.engine.generate(
                source_image,
                output_path,
                width,
                height,
                thumbnail.policy,
                upsize=thumbnail.upsize,
            )
            self._written.append(output_path)
            descriptors[role] = self._describe(
                role, output_path, size, policy=thumbnail.policy
            )

        return descriptors

    def _copy(self, source: Path, destination: Path) -> Path:
        path = copy_file(source, destination)
        self._written.append(path)
        return path

    def _save(self, image: Image.Image, destination: Path) -> Path:
        path = self.engine.save_image(image, destination)
        self._written.append(path)
        return path

    def _describe(self, role, path: Path, size: Tuple[int, int], policy=None):
        return DerivativeDescriptor(
            role=role,
            path=path,
            width=size[0],
            height=size[1],
            file_size=get_file_size(path),
            policy=policy,
        )
