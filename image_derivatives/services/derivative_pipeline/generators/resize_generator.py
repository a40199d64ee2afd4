# image_derivatives/services/derivative_pipeline/generators/resize_generator.py
"""
Resize Engine Component

Produces single derivative images from a decoded source image using one of
two policies:
- crop: scale and trim around the center to exactly width x height
- resize: scale uniformly to fit within width x height (no upsizing by default)
"""

from pathlib import Path
from typing import Optional, Tuple, Union

from PIL import Image, ImageOps, UnidentifiedImageError

from ....constants import DEFAULT_IMAGE_QUALITY, JPEG_EXTENSIONS
from ....enums import LoggerName, LogSource, ResizePolicy
from ....exceptions import (
    InvalidFieldSpecError,
    StorageWriteError,
    UnsupportedImageFormatError,
)
from ....services.logger import get_service_logger
from ..utils.constants import (
    CROP_CENTERING,
    JPEG_COMPATIBLE_MODES,
    RESAMPLING_FILTER,
)
from ..utils.derivative_utils import (
    calculate_fit_dimensions,
    calculate_scaled_down_size,
)
from ..utils.filename_utils import get_extension

logger = get_service_logger(LoggerName.RESIZE_ENGINE, LogSource.PIPELINE)


class ResizeEngine:
    """
    Component responsible for decoding, resizing and encoding derivative images.

    A single decoded source image is reused for every derivative of a build;
    resize() never mutates its input.
    """

    def __init__(self, quality: int = DEFAULT_IMAGE_QUALITY):
        """
        Initialize resize engine.

        Args:
            quality: JPEG/WebP compression quality (clamped to 1-95)
        """
        self.quality = max(1, min(95, quality))

        logger.debug(f"ResizeEngine initialized (quality={self.quality})")

    def open_image(self, source_path: Union[str, Path]) -> Image.Image:
        """
        Decode an image fully into memory.

        Raises:
            UnsupportedImageFormatError: If the file is not a decodable image
            StorageWriteError: If the file cannot be read
        """
        try:
            image = Image.open(source_path)
            image.load()
        except (FileNotFoundError, PermissionError) as e:
            raise StorageWriteError(f"Cannot read image {source_path}: {e}") from e
        except (
            UnidentifiedImageError,
            Image.DecompressionBombError,
            SyntaxError,
            ValueError,
            OSError,
        ) as e:
            raise UnsupportedImageFormatError(
                f"Cannot decode image {source_path}: {e}"
            ) from e
        return image

    def resize(
        self,
        image: Image.Image,
        width: Optional[int],
        height: Optional[int],
        policy: ResizePolicy,
        upsize: bool = False,
    ) -> Image.Image:
        """
        Apply a resize policy to an image.

        Args:
            image: Decoded source image
            width: Target width (None = unconstrained)
            height: Target height (None = unconstrained)
            policy: crop or resize
            upsize: Allow the resize policy to exceed the source resolution

        Returns:
            New image

        Raises:
            InvalidFieldSpecError: If the dimensions don't suit the policy
        """
        if policy == ResizePolicy.CROP:
            if not width or not height:
                raise InvalidFieldSpecError(
                    f"Crop policy requires width and height (got {width}x{height})"
                )
            return ImageOps.fit(
                image,
                (width, height),
                method=RESAMPLING_FILTER,
                centering=CROP_CENTERING,
            )

        if policy == ResizePolicy.RESIZE:
            target_size = calculate_fit_dimensions(image.size, (width, height), upsize)
            if target_size == image.size:
                return image.copy()
            return image.resize(target_size, RESAMPLING_FILTER)

        raise InvalidFieldSpecError(f"Unknown resize policy '{policy}'")

    def scale_down(self, image: Image.Image, factor: int) -> Image.Image:
        """Scale an image by 1/factor, each side rounded half away from zero."""
        target_size = calculate_scaled_down_size(image.size, factor)
        return image.resize(target_size, RESAMPLING_FILTER)

    def save_image(self, image: Image.Image, output_path: Union[str, Path]) -> Path:
        """
        Encode an image to the format implied by the output extension.

        Raises:
            UnsupportedImageFormatError: If Pillow has no encoder for the extension
            StorageWriteError: If the file cannot be written
        """
        output_path = Path(output_path)
        extension = get_extension(output_path.name)

        save_kwargs = {}
        if extension in JPEG_EXTENSIONS:
            if image.mode not in JPEG_COMPATIBLE_MODES:
                image = image.convert("RGB")
            save_kwargs = {"quality": self.quality, "optimize": True}
        elif extension == "webp":
            save_kwargs = {"quality": self.quality}
        elif extension == "png":
            save_kwargs = {"optimize": True}

        try:
            image.save(output_path, **save_kwargs)
        except (KeyError, ValueError) as e:
            raise UnsupportedImageFormatError(
                f"No encoder for '.{extension}' ({output_path.name})"
            ) from e
        except OSError as e:
            raise StorageWriteError(f"Failed to save {output_path}: {e}") from e

        return output_path

    def generate(
        self,
        image: Image.Image,
        output_path: Union[str, Path],
        width: Optional[int],
        height: Optional[int],
        policy: ResizePolicy,
        upsize: bool = False,
    ) -> Tuple[int, int]:
        """
        Resize an image and save it.

        Returns:
            (width, height) of the saved derivative
        """
        derivative = self.resize(image, width, height, policy, upsize)
        try:
            self.save_image(derivative, output_path)
            size = derivative.size
        finally:
            derivative.close()

        logger.debug(
            f"Generated {policy.value} derivative {Path(output_path).name} {size[0]}x{size[1]}",
            extra_context={"path": str(output_path), "policy": policy.value},
        )
        return size
