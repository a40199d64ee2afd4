# image_derivatives/services/derivative_pipeline/utils/derivative_utils.py
"""
Derivative Utility Functions

Integer scaling arithmetic and role naming shared by the resize engine and
the derivative set builder.
"""

import math
from fractions import Fraction
from typing import Optional, Tuple, Union

from ....constants import THUMBNAIL_ROLE_PREFIX
from ....enums import DerivativeVariant
from ....exceptions import InvalidFieldSpecError


def round_half_away(value: Union[Fraction, int]) -> int:
    """Round a non-negative rational to the nearest integer, halves away from zero."""
    value = Fraction(value)
    if value < 0:
        return -round_half_away(-value)
    return math.floor(value + Fraction(1, 2))


def divide_rounded(numerator: int, denominator: int) -> int:
    """
    Integer division rounded half away from zero.

    Args:
        numerator: Non-negative dividend (e.g. a pixel dimension)
        denominator: Positive divisor (e.g. a retina factor)
    """
    if denominator <= 0:
        raise ValueError("denominator must be positive")
    return round_half_away(Fraction(numerator, denominator))


def calculate_scaled_down_size(
    source_size: Tuple[int, int], factor: int
) -> Tuple[int, int]:
    """
    Size of the non-retina image derived from a retina source.

    Args:
        source_size: (width, height) of the source image
        factor: Retina factor

    Returns:
        (round(width / factor), round(height / factor)), never below 1px
    """
    source_width, source_height = source_size
    return (
        max(1, divide_rounded(source_width, factor)),
        max(1, divide_rounded(source_height, factor)),
    )


def calculate_fit_dimensions(
    source_size: Tuple[int, int],
    target_size: Tuple[Optional[int], Optional[int]],
    upsize: bool = False,
) -> Tuple[int, int]:
    """
    Calculate dimensions that fit within target size while preserving aspect ratio.

    A None target side leaves that axis unconstrained. Without ``upsize`` the
    result never exceeds the source resolution.

    Args:
        source_size: (width, height) of source image
        target_size: (width, height) bounds, either may be None
        upsize: Whether the image may be scaled beyond its source size

    Returns:
        (width, height) of the fitted image
    """
    source_width, source_height = source_size
    target_width, target_height = target_size

    scales = []
    if target_width:
        scales.append(Fraction(target_width, source_width))
    if target_height:
        scales.append(Fraction(target_height, source_height))
    if not scales:
        raise InvalidFieldSpecError("Resize requires a target width or height")

    scale = min(scales)
    if not upsize:
        scale = min(scale, Fraction(1))

    new_width = max(1, round_half_away(source_width * scale))
    new_height = max(1, round_half_away(source_height * scale))
    return (new_width, new_height)


def thumbnail_role(thumbnail_name: str, variant: DerivativeVariant) -> str:
    """thumbnails.<name>.original / thumbnails.<name>.retina"""
    return f"{THUMBNAIL_ROLE_PREFIX}.{thumbnail_name}.{variant.value}"
