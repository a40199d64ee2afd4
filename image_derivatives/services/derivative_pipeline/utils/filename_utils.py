# image_derivatives/services/derivative_pipeline/utils/filename_utils.py
"""
Filename Utility Functions

Turns arbitrary client filenames into safe ``slug.ext`` storage names and
derives the source/retina names every derivative set uses.
"""

import re
import unicodedata
from pathlib import Path
from typing import Tuple, Union

from ....constants import (
    ALLOWED_IMAGE_EXTENSIONS,
    RETINA_FILENAME_SUFFIX,
    SOURCE_FILENAME_SUFFIX,
)
from ....exceptions import InvalidFilenameError, UnsupportedImageFormatError
from .constants import (
    EMPTY_SLUG_PLACEHOLDER,
    MAX_SLUG_LENGTH,
    MAX_UNIQUE_NAME_ATTEMPTS,
    SLUG_SEPARATOR,
)

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_PATH_SEPARATORS = re.compile(r"[\\/]")


def slugify(value: str) -> str:
    """
    ASCII, lower-case, URL-safe slug of a string.

    Accented characters are transliterated to their base letter; every run
    of other characters becomes a single separator.
    """
    normalized = unicodedata.normalize("NFKD", value)
    ascii_value = normalized.encode("ascii", "ignore").decode("ascii").lower()
    slug = _NON_ALNUM.sub(SLUG_SEPARATOR, ascii_value).strip(SLUG_SEPARATOR)

    if len(slug) > MAX_SLUG_LENGTH:
        slug = slug[:MAX_SLUG_LENGTH].rstrip(SLUG_SEPARATOR)
    return slug


def split_filename(filename: str) -> Tuple[str, str]:
    """
    Split a client filename into (base name, extension).

    Directory components are dropped so no traversal segment survives.

    Raises:
        InvalidFilenameError: If the name has no extension
    """
    basename = _PATH_SEPARATORS.split(filename.strip())[-1]
    stem, dot, extension = basename.rpartition(".")
    if not dot or not stem.strip(".") or not extension:
        raise InvalidFilenameError(f"Filename '{filename}' has no extension")
    return stem, extension


def sanitize_filename(filename: str) -> str:
    """
    Normalize a client-supplied filename into ``slug.ext``.

    Args:
        filename: Original client filename (any Unicode, spaces, separators)

    Returns:
        Safe filename with an ASCII slug and a lower-cased extension

    Raises:
        InvalidFilenameError: If the name has no extension
        UnsupportedImageFormatError: If the extension is not an allowed image type
    """
    stem, extension = split_filename(filename)

    extension = extension.lower()
    if extension not in ALLOWED_IMAGE_EXTENSIONS:
        raise UnsupportedImageFormatError(
            f"Unsupported image extension '.{extension}' in '{filename}'"
        )

    slug = slugify(stem) or EMPTY_SLUG_PLACEHOLDER
    return f"{slug}.{extension}"


def _with_suffix(filename: str, suffix: str) -> str:
    path = Path(filename)
    return f"{path.stem}{suffix}{path.suffix}"


def generate_retina_name(filename: str) -> str:
    """cafe.jpg -> cafe@2x.jpg"""
    return _with_suffix(filename, RETINA_FILENAME_SUFFIX)


def generate_source_name(filename: str) -> str:
    """cafe.jpg -> cafe_source.jpg"""
    return _with_suffix(filename, SOURCE_FILENAME_SUFFIX)


def generate_unique_filename(directory: Union[str, Path], filename: str) -> str:
    """
    Return a sanitized filename whose source file does not exist yet.

    The slug is suffixed with -1, -2, ... so the whole derivative set of a
    new upload never overwrites files of an earlier one.

    Args:
        directory: Directory holding the source files ("original" variant)
        filename: Sanitized ``slug.ext`` filename
    """
    directory = Path(directory)
    path = Path(filename)

    candidate = filename
    counter = 0
    while (directory / generate_source_name(candidate)).exists():
        counter += 1
        if counter > MAX_UNIQUE_NAME_ATTEMPTS:
            raise InvalidFilenameError(
                f"Could not find a free name for '{filename}' in {directory}"
            )
        candidate = f"{path.stem}{SLUG_SEPARATOR}{counter}{path.suffix}"

    return candidate


def get_extension(filename: str) -> str:
    return Path(filename).suffix.lstrip(".").lower()
