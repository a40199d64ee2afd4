# image_derivatives/config.py
from pathlib import Path
from typing import Optional, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    DEFAULT_IMAGE_QUALITY,
    DEFAULT_MAX_UPLOAD_SIZE,
    DEFAULT_RETINA_FACTOR,
    DEFAULT_UPLOAD_DIRECTORY,
)
from .enums import LogLevel


class Settings(BaseSettings):
    environment: str = "development"

    # ============= PATH CONFIGURATION =============

    # Root of the derivative storage layout, relative to the working directory
    upload_directory: str = DEFAULT_UPLOAD_DIRECTORY

    @property
    def upload_path(self) -> Path:
        """Get upload directory as Path object"""
        return Path(self.upload_directory)

    def ensure_directories(self):
        """Create the upload root if it doesn't exist"""
        self.upload_path.mkdir(parents=True, exist_ok=True)

    def get_relative_path(self, full_path: Union[str, Path]) -> str:
        """Convert full path to path relative to upload_directory"""
        full_path = Path(full_path)
        try:
            return str(full_path.relative_to(self.upload_path))
        except ValueError:
            # If path is not under upload_directory, return as-is
            return str(full_path)

    # ============= IMAGE CONFIGURATION =============

    retina_factor: int = Field(
        default=DEFAULT_RETINA_FACTOR,
        ge=0,
        le=8,
        description="Retina multiplier for high resolution derivatives (0 disables retina)",
    )
    max_upload_size: int = Field(
        default=DEFAULT_MAX_UPLOAD_SIZE,
        ge=1,
        description="Maximum accepted upload size in bytes",
    )
    image_quality: int = Field(
        default=DEFAULT_IMAGE_QUALITY,
        ge=1,
        le=95,
        description="JPEG/WebP encoder quality for generated derivatives",
    )
    unique_filenames: bool = Field(
        default=True,
        description="Suffix the sanitized name when a source file with that name already exists",
    )
    image_fields_file: Optional[str] = Field(
        default=None,
        description="JSON file with per-model image field definitions (optional)",
    )

    @property
    def retina_enabled(self) -> bool:
        return self.retina_factor > 0

    # Logging
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_file: Optional[str] = Field(
        default=None, description="Log file path (optional)"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: Union[str, LogLevel]) -> LogLevel:
        """Validate log level is one of the allowed values"""
        if isinstance(v, LogLevel):
            return v
        allowed_levels = LogLevel.__members__.keys()
        v_upper = str(v).upper()
        if v_upper not in allowed_levels:
            raise ValueError(
                f"Invalid log level '{v}'. Must be one of: {', '.join(allowed_levels)}"
            )
        return LogLevel[v_upper]

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment is one of the allowed values"""
        allowed_envs = ["development", "testing", "staging", "production"]
        v_lower = v.lower()
        if v_lower not in allowed_envs:
            raise ValueError(
                f"Invalid environment '{v}'. Must be one of: {', '.join(allowed_envs)}"
            )
        return v_lower

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="IMAGE_DERIVATIVES_",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance (read-only after process start)
settings = Settings()
