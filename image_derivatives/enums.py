# image_derivatives/enums.py
"""
Application Enums - Centralized enum definitions.

All enum definitions live here so that constants, models and services can
import them without creating circular dependencies.
"""

from enum import Enum


# =============================================================================
# DERIVATIVE PIPELINE
# =============================================================================


class ResizePolicy(str, Enum):
    """Resize strategy for a thumbnail variant. Must be: crop, resize."""

    CROP = "crop"  # Scale and trim to the exact target size
    RESIZE = "resize"  # Scale uniformly to fit within the target bounds


class DerivativeVariant(str, Enum):
    """Resolution variant of a derivative file."""

    ORIGINAL = "original"
    RETINA = "retina"


# =============================================================================
# LOGGING SYSTEM
# =============================================================================


class LogLevel(str, Enum):
    """Log level constants for centralized logging system."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogSource(str, Enum):
    """Log source constants for identifying log origins."""

    SYSTEM = "system"
    PIPELINE = "pipeline"
    STORAGE = "storage"
    CLI = "cli"


class LogEmoji(str, Enum):
    """Type-safe emoji constants for log messages."""

    # Status emojis
    SUCCESS = "✅"
    ERROR = "❌"
    WARNING = "⚠️"
    INFO = "ℹ️"
    DEBUG = "🐞"
    CRITICAL = "☠️"

    # Work emojis
    PROCESSING = "🔄"
    IMAGE = "🖼️"
    RETINA = "🔍"

    # System emojis
    SYSTEM = "⚙️"
    STARTUP = "🚀"
    CLEANUP = "🧹"
    SECURITY = "🔒"
    STORAGE = "💾"
    FOLDER = "📁"

    # Action emojis
    CREATE = "➕"
    COPY = "📋"
    MOVE = "📦"
    DELETE = "🗑️"
    RULE = "📏"


class LoggerName(str, Enum):
    """Logger name constants for categorizing log entries."""

    # Pipeline loggers
    DERIVATIVE_PIPELINE = "derivative_pipeline"
    RESIZE_ENGINE = "resize_engine"
    PATH_RESOLVER = "path_resolver"
    CONSTRAINT_SERVICE = "constraint_service"

    # Service loggers
    FIELD_REGISTRY = "field_registry"

    # System loggers
    SYSTEM = "system"
    UTILITY = "utility"
    CLI = "cli"
