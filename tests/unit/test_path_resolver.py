#!/usr/bin/env python3
"""
Unit tests for the storage layout path resolver.
"""

from unittest.mock import patch

import pytest

from image_derivatives.exceptions import StorageWriteError
from image_derivatives.models import ModelIdentity
from image_derivatives.services.derivative_pipeline.services.path_resolver import (
    PathResolver,
    model_directory_name,
    resolve_directory,
)


@pytest.mark.unit
@pytest.mark.derivatives
class TestModelDirectoryName:
    """Test suite for model type -> directory mapping."""

    @pytest.mark.parametrize(
        "type_name,expected",
        [
            ("app.models.blog.Post", "blog_post"),
            ("app.models.Page", "page"),
            ("App\\Models\\Blog\\Post", "blog_post"),
            ("shop/Product", "product"),
            ("Gallery", "gallery"),
            ("app.models.nested.models.Photo", "photo"),
        ],
    )
    def test_model_directory_name(self, type_name, expected):
        assert model_directory_name(type_name) == expected

    def test_model_directory_name_empty_raises(self):
        with pytest.raises(ValueError):
            model_directory_name("...")


@pytest.mark.unit
@pytest.mark.derivatives
class TestPathResolver:
    """Test suite for PathResolver component."""

    @pytest.fixture
    def resolver(self, upload_root):
        return PathResolver(upload_root, "app.models.blog.Post", 42)

    def test_base_directory(self, resolver, upload_root):
        assert resolver.base_directory == upload_root / "blog_post" / "42"

    def test_resolve_directory_creates_variant(self, resolver, upload_root):
        directory = resolver.resolve_directory("original")

        assert directory == upload_root / "blog_post" / "42" / "original"
        assert directory.is_dir()

    def test_resolve_directory_is_idempotent(self, resolver):
        first = resolver.resolve_directory("thumb")
        resolver.clear_cache()
        second = resolver.resolve_directory("thumb")

        assert first == second
        assert second.is_dir()

    def test_resolve_directory_cached_per_variant(self, resolver):
        resolver.resolve_directory("original")
        resolver.resolve_directory("thumb")

        with patch(
            "image_derivatives.services.derivative_pipeline.services.path_resolver.ensure_directory"
        ) as mock_ensure:
            resolver.resolve_directory("original")
            resolver.resolve_directory("thumb")
            mock_ensure.assert_not_called()

        assert resolver.cached_variants == ["original", "thumb"]

    def test_new_resolver_has_empty_cache(self, upload_root):
        first = PathResolver(upload_root, "app.models.blog.Post", 42)
        first.resolve_directory("original")

        second = PathResolver(upload_root, "app.models.blog.Post", 42)
        assert second.cached_variants == []

    def test_peek_directory_does_not_create(self, resolver):
        directory = resolver.peek_directory("thumb")
        assert not directory.exists()

    def test_invalid_variant_rejected(self, resolver):
        with pytest.raises(ValueError):
            resolver.resolve_directory("../escape")

    def test_for_identity(self, upload_root):
        identity = ModelIdentity(type_name="app.models.Page", key="home")
        resolver = PathResolver.for_identity(identity, upload_root)
        assert resolver.base_directory == upload_root / "page" / "home"

    def test_resolve_directory_function(self, upload_root):
        directory = resolve_directory("app.models.Page", 7, "small", upload_root)
        assert directory == upload_root / "page" / "7" / "small"
        assert directory.is_dir()

    def test_unwritable_root_raises_storage_error(self, temp_dir):
        blocker = temp_dir / "blocker"
        blocker.write_text("a file where a directory should be")

        resolver = PathResolver(blocker, "app.models.Page", 1)
        with pytest.raises(StorageWriteError):
            resolver.resolve_directory("original")
