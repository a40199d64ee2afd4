"""
Derivative Utility Functions and Constants

Shared utilities for the derivative pipeline:
- Filename sanitization and derived names
- Integer scaling arithmetic
- Role naming and image validation
"""

from .derivative_utils import (
    calculate_fit_dimensions,
    calculate_scaled_down_size,
    divide_rounded,
    round_half_away,
    thumbnail_role,
)
from .filename_utils import (
    generate_retina_name,
    generate_source_name,
    generate_unique_filename,
    get_extension,
    sanitize_filename,
    slugify,
    split_filename,
)

__all__ = [
    "sanitize_filename",
    "slugify",
    "split_filename",
    "generate_retina_name",
    "generate_source_name",
    "generate_unique_filename",
    "get_extension",
    "round_half_away",
    "divide_rounded",
    "calculate_scaled_down_size",
    "calculate_fit_dimensions",
    "thumbnail_role",
]
