"""
Derivative Pipeline Services

- Path resolution for the storage layout
- Upload constraint synthesis
- Image field registry
"""

from .constraint_service import (
    build_constraints,
    format_dimensions_clause,
    minimum_size,
    synthesize_rule,
)
from .field_registry import FieldRegistry, HasImageFields, registry_key
from .path_resolver import PathResolver, model_directory_name, resolve_directory

__all__ = [
    "PathResolver",
    "resolve_directory",
    "model_directory_name",
    "minimum_size",
    "build_constraints",
    "synthesize_rule",
    "format_dimensions_clause",
    "FieldRegistry",
    "HasImageFields",
    "registry_key",
]
