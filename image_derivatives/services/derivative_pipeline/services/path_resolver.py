# image_derivatives/services/derivative_pipeline/services/path_resolver.py
"""
Path Resolver

Derives the storage directory of every derivative variant from the identity
of the owning model:

    <upload_root>/<model subtype>/<model key>/<variant>/

where variant is "original" or a thumbnail name.
"""

import re
from pathlib import Path
from typing import Dict, Union

from ....constants import ORIGINAL_VARIANT_DIRECTORY
from ....enums import LogEmoji, LoggerName, LogSource
from ....models.derivative_model import ModelIdentity
from ....services.logger import get_service_logger
from ....utils.file_helpers import ensure_directory

logger = get_service_logger(LoggerName.PATH_RESOLVER, LogSource.STORAGE)

_TYPE_NAME_SEPARATORS = re.compile(r"[./\\]+")
_VARIANT_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*$")

# Namespace segment after which the model subtype starts
MODELS_NAMESPACE = "models"


def model_directory_name(model_type_name: str) -> str:
    """
    Directory name for a model type.

    Segments after the last "models" namespace segment are joined with
    underscores and lower-cased; without such a segment only the final
    segment (the class name) is used.

        "app.models.blog.Post"  -> "blog_post"
        "App\\Models\\Page"     -> "page"
        "shop/Product"          -> "product"
    """
    segments = [s for s in _TYPE_NAME_SEPARATORS.split(model_type_name) if s]
    if not segments:
        raise ValueError(f"Invalid model type name '{model_type_name}'")

    lowered = [s.lower() for s in segments]
    if MODELS_NAMESPACE in lowered[:-1]:
        last_index = len(lowered) - 1 - lowered[::-1].index(MODELS_NAMESPACE)
        segments = segments[last_index + 1 :]
    else:
        segments = segments[-1:]

    return "_".join(segments).lower()


def _validate_variant(variant: str) -> str:
    if not _VARIANT_PATTERN.match(variant):
        raise ValueError(f"Invalid variant directory name '{variant}'")
    return variant


def resolve_directory(
    model_type_name: str,
    model_key: Union[int, str],
    variant: str = ORIGINAL_VARIANT_DIRECTORY,
    upload_root: Union[str, Path] = "uploads",
) -> Path:
    """
    Compute and create the directory for one variant of a model's images.

    Calling it again for the same arguments is a no-op.

    Raises:
        StorageWriteError: If the directory cannot be created
    """
    directory = (
        Path(upload_root)
        / model_directory_name(model_type_name)
        / str(model_key)
        / _validate_variant(variant)
    )
    return ensure_directory(directory)


class PathResolver:
    """
    Per-invocation directory resolver.

    Resolved directories are cached by variant name for the lifetime of the
    resolver; create a new resolver for every build.
    """

    def __init__(
        self,
        upload_root: Union[str, Path],
        model_type_name: str,
        model_key: Union[int, str],
    ):
        self.upload_root = Path(upload_root)
        self.model_directory = model_directory_name(model_type_name)
        self.model_key = str(model_key)
        self._directory_cache: Dict[str, Path] = {}

    @classmethod
    def for_identity(
        cls, identity: ModelIdentity, upload_root: Union[str, Path]
    ) -> "PathResolver":
        return cls(upload_root, identity.type_name, identity.key)

    @property
    def base_directory(self) -> Path:
        """<upload_root>/<model subtype>/<model key>"""
        return self.upload_root / self.model_directory / self.model_key

    def peek_directory(self, variant: str = ORIGINAL_VARIANT_DIRECTORY) -> Path:
        """Directory of a variant, without creating it (read path)."""
        return self.base_directory / _validate_variant(variant)

    def resolve_directory(self, variant: str = ORIGINAL_VARIANT_DIRECTORY) -> Path:
        """
        Directory of a variant, created on first use and cached afterwards.

        Raises:
            StorageWriteError: If the directory cannot be created
        """
        cached = self._directory_cache.get(variant)
        if cached is not None:
            return cached

        directory = ensure_directory(self.peek_directory(variant))
        self._directory_cache[variant] = directory

        logger.debug(
            f"Resolved {variant} directory: {directory}",
            emoji=LogEmoji.FOLDER,
            extra_context={"operation": "resolve_directory", "path": str(directory)},
        )
        return directory

    @property
    def cached_variants(self):
        return list(self._directory_cache.keys())

    def clear_cache(self) -> None:
        self._directory_cache.clear()
