#!/usr/bin/env python3
"""
Pytest configuration and shared fixtures for image derivative tests.
"""

import shutil
import tempfile
from pathlib import Path

import pytest
from PIL import Image, ImageDraw

from image_derivatives.config import Settings
from image_derivatives.models import FieldSpecification, ModelIdentity, ThumbnailSpec
from image_derivatives.services.derivative_pipeline import (
    DerivativePipeline,
    FieldRegistry,
)


def create_test_image(path, size=(800, 600), color="red", image_format=None):
    """Write a test image with a contrasting rectangle and return its path."""
    path = Path(path)
    img = Image.new("RGB", size, color=color)
    draw = ImageDraw.Draw(img)
    width, height = size
    draw.rectangle(
        [width // 8, height // 8, width - width // 8, height - height // 8],
        fill="blue",
    )
    img.save(path, image_format)
    return path


def image_size(path):
    with Image.open(path) as img:
        return img.size


@pytest.fixture
def temp_dir():
    """Create temporary directory for test files."""
    temp_dir = tempfile.mkdtemp()
    yield Path(temp_dir)
    shutil.rmtree(temp_dir)


@pytest.fixture
def upload_root(temp_dir):
    return temp_dir / "uploads"


@pytest.fixture
def test_settings(upload_root):
    """Settings isolated from the environment's upload directory."""
    return Settings(upload_directory=str(upload_root), retina_factor=2)


@pytest.fixture
def thumb_field():
    """Single crop thumbnail field (200x100)."""
    return FieldSpecification(
        name="image",
        thumbnails={"thumb": ThumbnailSpec(width=200, height=100, policy="crop")},
    )


@pytest.fixture
def post_identity():
    return ModelIdentity(type_name="app.models.blog.Post", key=42)


@pytest.fixture
def field_registry(thumb_field):
    registry = FieldRegistry()
    registry.register(
        "blog_post",
        [
            thumb_field,
            FieldSpecification(
                name="cover",
                thumbnails={
                    "wide": ThumbnailSpec(width=600, height=None, policy="resize"),
                    "square": ThumbnailSpec(width=100, height=100, policy="crop"),
                },
            ),
        ],
    )
    return registry


@pytest.fixture
def pipeline(test_settings, field_registry):
    return DerivativePipeline(settings_obj=test_settings, registry=field_registry)


@pytest.fixture
def landscape_image(temp_dir):
    """2000x1000 JPEG upload named like a real client file."""
    return create_test_image(temp_dir / "Café Photo.JPG", size=(2000, 1000), image_format="JPEG")


@pytest.fixture
def make_image():
    """Factory fixture wrapping create_test_image."""
    return create_test_image


@pytest.fixture
def read_size():
    """Return (width, height) of an image file."""
    return image_size
