# image_derivatives/constants.py
"""
Application-wide constants.
"""

from typing import Set

# ====================================================================
# FILE TYPE CONSTANTS
# ====================================================================

# Allowed image file extensions (lower-case, without the dot)
ALLOWED_IMAGE_EXTENSIONS: Set[str] = {
    "jpg",
    "jpeg",
    "png",
    "gif",
    "webp",
    "bmp",
    "tif",
    "tiff",
}

# Extensions saved through the JPEG encoder (no alpha channel)
JPEG_EXTENSIONS: Set[str] = {"jpg", "jpeg"}

# ====================================================================
# SIZE CONSTANTS
# ====================================================================

DEFAULT_RETINA_FACTOR = 2
DEFAULT_MAX_UPLOAD_SIZE = 5 * 1024 * 1024  # 5MB
DEFAULT_IMAGE_QUALITY = 90

# ====================================================================
# STORAGE LAYOUT CONSTANTS
# ====================================================================

DEFAULT_UPLOAD_DIRECTORY = "uploads"
ORIGINAL_VARIANT_DIRECTORY = "original"

# ====================================================================
# LOG FILE CONSTANTS
# ====================================================================

LOG_FILE_ROTATION = "10 MB"
LOG_FILE_RETENTION = "14 days"
LOG_FILE_COMPRESSION = "gz"

# ====================================================================
# DERIVATIVE ROLE CONSTANTS
# ====================================================================

ORIGINAL_SOURCE_ROLE = "original.source"
ORIGINAL_RETINA_ROLE = "original.retina"
ORIGINAL_FILE_ROLE = "original.file"
THUMBNAIL_ROLE_PREFIX = "thumbnails"

# File name suffixes
SOURCE_FILENAME_SUFFIX = "_source"
RETINA_FILENAME_SUFFIX = "@2x"
