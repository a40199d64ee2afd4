# image_derivatives/services/derivative_pipeline/utils/constants.py
"""
Derivative Pipeline Constants
"""

from PIL import Image

# Filename sanitization
SLUG_SEPARATOR = "-"
EMPTY_SLUG_PLACEHOLDER = "image"
MAX_SLUG_LENGTH = 120
MAX_UNIQUE_NAME_ATTEMPTS = 1000

# Resampling filter for every resize
RESAMPLING_FILTER = Image.Resampling.LANCZOS

# Crop anchor (horizontal, vertical): center
CROP_CENTERING = (0.5, 0.5)

# Modes the JPEG encoder accepts without conversion
JPEG_COMPATIBLE_MODES = ("RGB", "L", "CMYK")
