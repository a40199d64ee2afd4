# image_derivatives/models/constraint_model.py
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field


class ConstraintSet(BaseModel):
    """Upload constraints derived from an image field's thumbnails"""

    min_width: int = Field(default=0, ge=0, description="Minimum source width in pixels")
    min_height: int = Field(
        default=0, ge=0, description="Minimum source height in pixels"
    )
    max_bytes: int = Field(..., ge=1, description="Maximum upload size in bytes")

    model_config = ConfigDict(frozen=True)

    @property
    def min_size(self) -> Tuple[int, int]:
        return (self.min_width, self.min_height)
