# image_derivatives/services/derivative_pipeline/services/field_registry.py
"""
Field Registry

Typed registry of image field specifications keyed by model-type identifier.
Populated once at startup (from code or a JSON configuration file) and only
read afterwards.

Configuration shape:

    {
        "blog_post": {
            "image_fields": {
                "image": {
                    "thumbnails": {
                        "admin": {"width": 150, "height": 100, "type": "crop"},
                        "wide": {"width": 1200, "height": null, "type": "resize"}
                    }
                }
            }
        }
    }
"""

import json
from pathlib import Path
from typing import (
    Any,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Protocol,
    Union,
    runtime_checkable,
)

from ....enums import LogEmoji, LoggerName, LogSource
from ....exceptions import ConfigurationError, InvalidFieldSpecError
from ....models.derivative_model import ModelIdentity
from ....models.image_field_model import FieldSpecification
from ....services.logger import get_service_logger
from .path_resolver import model_directory_name

logger = get_service_logger(LoggerName.FIELD_REGISTRY, LogSource.SYSTEM)

IMAGE_FIELDS_KEY = "image_fields"


@runtime_checkable
class HasImageFields(Protocol):
    """Capability of any entity type that owns uploaded images."""

    def image_identity(self) -> ModelIdentity: ...


def registry_key(identity: ModelIdentity) -> str:
    """Explicit identifier, or the model's directory name."""
    return identity.identifier or model_directory_name(identity.type_name)


class FieldRegistry:
    """Mapping of model-type identifier -> {field name -> FieldSpecification}"""

    def __init__(self):
        self._fields: Dict[str, Dict[str, FieldSpecification]] = {}

    def register(
        self,
        identifier: str,
        fields: Union[Iterable[FieldSpecification], Mapping[str, FieldSpecification]],
    ) -> Dict[str, FieldSpecification]:
        """
        Register the image fields of a model type.

        Raises:
            InvalidFieldSpecError: If no fields are given or names collide
        """
        if isinstance(fields, Mapping):
            fields = list(fields.values())

        registered: Dict[str, FieldSpecification] = {}
        for field_spec in fields:
            if not isinstance(field_spec, FieldSpecification):
                raise InvalidFieldSpecError(
                    f"Image fields of '{identifier}' must be FieldSpecification instances"
                )
            if field_spec.name in registered:
                raise InvalidFieldSpecError(
                    f"Duplicate image field '{field_spec.name}' for '{identifier}'"
                )
            registered[field_spec.name] = field_spec

        if not registered:
            raise InvalidFieldSpecError(f"No image fields defined for '{identifier}'")

        self._fields[identifier] = registered
        logger.debug(
            f"Registered {len(registered)} image field(s) for '{identifier}'",
            emoji=LogEmoji.CREATE,
            extra_context={"identifier": identifier, "fields": list(registered)},
        )
        return registered

    def register_config(
        self, identifier: str, image_fields: Any
    ) -> Dict[str, FieldSpecification]:
        """Register fields from the raw {field: {"thumbnails": {...}}} shape."""
        if not isinstance(image_fields, Mapping):
            raise InvalidFieldSpecError(
                f"No image fields defined in config for '{identifier}'"
            )
        return self.register(
            identifier,
            [
                FieldSpecification.from_config(name, options)
                for name, options in image_fields.items()
            ],
        )

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "FieldRegistry":
        """Build a registry from {identifier: {"image_fields": {...}}}."""
        registry = cls()
        for identifier, model_config in config.items():
            if not isinstance(model_config, Mapping):
                raise InvalidFieldSpecError(
                    f"Configuration for '{identifier}' must be a mapping"
                )
            registry.register_config(identifier, model_config.get(IMAGE_FIELDS_KEY))
        return registry

    @classmethod
    def load(cls, path: Union[str, Path]) -> "FieldRegistry":
        """
        Load a registry from a JSON configuration file.

        Raises:
            ConfigurationError: If the file is missing or not valid JSON
            InvalidFieldSpecError: If a field specification is malformed
        """
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except OSError as e:
            raise ConfigurationError(f"Cannot read image field config {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in image field config {path}: {e}") from e

        if not isinstance(config, Mapping):
            raise ConfigurationError(f"Image field config {path} must be a JSON object")

        registry = cls.from_config(config)
        logger.info(
            f"Loaded image fields for {len(registry)} model type(s) from {path.name}",
            emoji=LogEmoji.SYSTEM,
        )
        return registry

    def lookup(self, identifier: str) -> Optional[Dict[str, FieldSpecification]]:
        """Fields of a model type, or None when it has none registered."""
        fields = self._fields.get(identifier)
        return dict(fields) if fields is not None else None

    def require(self, identifier: str) -> Dict[str, FieldSpecification]:
        """
        Fields of a model type.

        Raises:
            InvalidFieldSpecError: If the model type has no registered fields
        """
        fields = self.lookup(identifier)
        if fields is None:
            raise InvalidFieldSpecError(f"No image fields defined for '{identifier}'")
        return fields

    def get_field(
        self, identifier: str, field_name: str
    ) -> Optional[FieldSpecification]:
        return (self._fields.get(identifier) or {}).get(field_name)

    @property
    def identifiers(self) -> List[str]:
        return list(self._fields.keys())

    def __contains__(self, identifier: str) -> bool:
        return identifier in self._fields

    def __len__(self) -> int:
        return len(self._fields)
