# image_derivatives/services/derivative_pipeline/__init__.py
"""
Derivative Pipeline Module

Thumbnail and retina derivative generation plus upload constraint synthesis.
"""

from .derivative_pipeline import (
    DerivativePipeline,
    create_derivative_pipeline,
    resolve_retina_factor,
)
from .generators import DerivativeSetBuilder, ResizeEngine
from .services import (
    FieldRegistry,
    HasImageFields,
    PathResolver,
    build_constraints,
    minimum_size,
    model_directory_name,
    registry_key,
    resolve_directory,
    synthesize_rule,
)
from .utils import (
    calculate_fit_dimensions,
    calculate_scaled_down_size,
    divide_rounded,
    generate_retina_name,
    generate_source_name,
    sanitize_filename,
)

__all__ = [
    # Main pipeline
    "DerivativePipeline",
    "create_derivative_pipeline",
    "resolve_retina_factor",
    # Generators
    "ResizeEngine",
    "DerivativeSetBuilder",
    # Services
    "PathResolver",
    "resolve_directory",
    "model_directory_name",
    "FieldRegistry",
    "HasImageFields",
    "registry_key",
    "minimum_size",
    "build_constraints",
    "synthesize_rule",
    # Utils
    "sanitize_filename",
    "generate_retina_name",
    "generate_source_name",
    "divide_rounded",
    "calculate_scaled_down_size",
    "calculate_fit_dimensions",
]
