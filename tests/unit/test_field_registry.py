#!/usr/bin/env python3
"""
Unit tests for FieldRegistry.
"""

import json

import pytest

from image_derivatives.exceptions import ConfigurationError, InvalidFieldSpecError
from image_derivatives.models import ModelIdentity
from image_derivatives.services.derivative_pipeline.services.field_registry import (
    FieldRegistry,
    HasImageFields,
    registry_key,
)

FIELD_CONFIG = {
    "blog_post": {
        "image_fields": {
            "image": {
                "thumbnails": {
                    "admin": {"width": 150, "height": 100, "type": "crop"},
                    "wide": {"width": 1200, "height": None, "type": "resize"},
                }
            }
        }
    },
    "page": {
        "image_fields": {
            "hero": {"thumbnails": {"small": {"width": 320, "height": 180}}}
        }
    },
}


class Post:
    """Minimal entity implementing the image field capability."""

    def __init__(self, pk):
        self.pk = pk

    def image_identity(self):
        return ModelIdentity(type_name="app.models.blog.Post", key=self.pk)


@pytest.mark.unit
@pytest.mark.derivatives
class TestFieldRegistry:
    """Test suite for FieldRegistry."""

    # ============================================================================
    # REGISTRATION TESTS
    # ============================================================================

    def test_register_and_lookup(self, thumb_field):
        registry = FieldRegistry()
        registry.register("blog_post", [thumb_field])

        assert "blog_post" in registry
        assert registry.lookup("blog_post") == {"image": thumb_field}
        assert registry.get_field("blog_post", "image") is thumb_field

    def test_register_mapping(self, thumb_field):
        registry = FieldRegistry()
        registry.register("blog_post", {"image": thumb_field})
        assert registry.identifiers == ["blog_post"]

    def test_register_empty_raises(self):
        with pytest.raises(InvalidFieldSpecError):
            FieldRegistry().register("blog_post", [])

    def test_register_duplicate_field_raises(self, thumb_field):
        with pytest.raises(InvalidFieldSpecError):
            FieldRegistry().register("blog_post", [thumb_field, thumb_field])

    def test_register_rejects_raw_dicts(self):
        with pytest.raises(InvalidFieldSpecError):
            FieldRegistry().register("blog_post", [{"name": "image"}])

    def test_lookup_returns_copy(self, thumb_field):
        registry = FieldRegistry()
        registry.register("blog_post", [thumb_field])

        registry.lookup("blog_post").clear()
        assert len(registry.lookup("blog_post")) == 1

    # ============================================================================
    # LOOKUP TESTS
    # ============================================================================

    def test_unknown_identifier(self):
        registry = FieldRegistry()
        assert registry.lookup("missing") is None
        assert registry.get_field("missing", "image") is None
        with pytest.raises(InvalidFieldSpecError):
            registry.require("missing")

    # ============================================================================
    # CONFIGURATION TESTS
    # ============================================================================

    def test_from_config(self):
        registry = FieldRegistry.from_config(FIELD_CONFIG)

        assert len(registry) == 2
        hero = registry.get_field("page", "hero")
        assert hero.get_thumbnail("small").width == 320
        assert registry.get_field("blog_post", "image").thumbnail_names == ["admin", "wide"]

    def test_from_config_missing_image_fields(self):
        with pytest.raises(InvalidFieldSpecError):
            FieldRegistry.from_config({"blog_post": {}})

    def test_load_json(self, temp_dir):
        config_path = temp_dir / "image_fields.json"
        config_path.write_text(json.dumps(FIELD_CONFIG), encoding="utf-8")

        registry = FieldRegistry.load(config_path)
        assert set(registry.identifiers) == {"blog_post", "page"}

    def test_load_missing_file(self, temp_dir):
        with pytest.raises(ConfigurationError):
            FieldRegistry.load(temp_dir / "missing.json")

    def test_load_invalid_json(self, temp_dir):
        config_path = temp_dir / "broken.json"
        config_path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            FieldRegistry.load(config_path)

    def test_load_non_object(self, temp_dir):
        config_path = temp_dir / "list.json"
        config_path.write_text("[]", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            FieldRegistry.load(config_path)


@pytest.mark.unit
@pytest.mark.derivatives
class TestRegistryKey:
    """Test suite for model identity -> registry key mapping."""

    def test_registry_key_from_type_name(self):
        identity = ModelIdentity(type_name="app.models.blog.Post", key=1)
        assert registry_key(identity) == "blog_post"

    def test_registry_key_explicit_identifier(self):
        identity = ModelIdentity(type_name="app.models.blog.Post", key=1, identifier="news")
        assert registry_key(identity) == "news"

    def test_has_image_fields_protocol(self):
        assert isinstance(Post(1), HasImageFields)
        assert not isinstance(object(), HasImageFields)

