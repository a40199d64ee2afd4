#!/usr/bin/env python3
"""
Unit tests for pydantic-settings configuration.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from image_derivatives.config import Settings
from image_derivatives.constants import DEFAULT_MAX_UPLOAD_SIZE, DEFAULT_RETINA_FACTOR
from image_derivatives.enums import LogLevel


@pytest.mark.unit
class TestSettings:
    """Test suite for Settings."""

    @pytest.fixture(autouse=True)
    def clean_environment(self, monkeypatch, temp_dir):
        # Keep a developer's .env or exported variables out of the assertions
        monkeypatch.chdir(temp_dir)
        for name in (
            "IMAGE_DERIVATIVES_RETINA_FACTOR",
            "IMAGE_DERIVATIVES_UPLOAD_DIRECTORY",
            "IMAGE_DERIVATIVES_LOG_LEVEL",
            "IMAGE_DERIVATIVES_ENVIRONMENT",
        ):
            monkeypatch.delenv(name, raising=False)

    def test_defaults(self):
        settings = Settings()

        assert settings.retina_factor == DEFAULT_RETINA_FACTOR
        assert settings.max_upload_size == DEFAULT_MAX_UPLOAD_SIZE
        assert settings.upload_path == Path("uploads")
        assert settings.retina_enabled
        assert settings.unique_filenames is True

    def test_environment_variable_override(self, monkeypatch):
        monkeypatch.setenv("IMAGE_DERIVATIVES_RETINA_FACTOR", "3")
        monkeypatch.setenv("IMAGE_DERIVATIVES_UPLOAD_DIRECTORY", "media/uploads")

        settings = Settings()
        assert settings.retina_factor == 3
        assert settings.upload_path == Path("media/uploads")

    def test_retina_disabled(self):
        assert not Settings(retina_factor=0).retina_enabled

    def test_retina_factor_bounds(self):
        with pytest.raises(ValidationError):
            Settings(retina_factor=-1)
        with pytest.raises(ValidationError):
            Settings(retina_factor=9)

    def test_image_quality_bounds(self):
        with pytest.raises(ValidationError):
            Settings(image_quality=100)

    def test_log_level_case_insensitive(self):
        assert Settings(log_level="debug").log_level == LogLevel.DEBUG

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(log_level="verbose")

    def test_environment_normalized(self):
        assert Settings(environment="PRODUCTION").environment == "production"
        with pytest.raises(ValidationError):
            Settings(environment="qa")

    def test_ensure_directories(self, temp_dir):
        settings = Settings(upload_directory=str(temp_dir / "nested" / "uploads"))
        settings.ensure_directories()
        assert settings.upload_path.is_dir()

    def test_get_relative_path(self):
        settings = Settings(upload_directory="uploads")
        assert settings.get_relative_path("uploads/post/1/original/a.jpg") == str(
            Path("post/1/original/a.jpg")
        )
        assert settings.get_relative_path("/elsewhere/a.jpg") == str(
            Path("/elsewhere/a.jpg")
        )
