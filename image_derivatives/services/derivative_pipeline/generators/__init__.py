"""
Derivative Generation Components

- ResizeEngine: decode, crop/fit resize and encode single derivatives
- DerivativeSetBuilder: full derivative set for one upload
"""

from .derivative_set_builder import DerivativeSetBuilder
from .resize_generator import ResizeEngine

__all__ = [
    "ResizeEngine",
    "DerivativeSetBuilder",
]
