"""
Centralized Logger Service Module.

Usage:
    from image_derivatives.services.logger import get_service_logger
    from image_derivatives.enums import LogSource, LoggerName

    logger = get_service_logger(LoggerName.DERIVATIVE_PIPELINE, LogSource.PIPELINE)
    logger.info("Derivative set built", extra_context={"field_name": "image"})
"""

# Re-export commonly used enums for convenience
from ...enums import LogEmoji, LoggerName, LogLevel, LogSource
from .logger_service import (
    LoggerService,
    get_service_logger,
    initialize_global_logger,
    log,
)
from .utils import LogMessageFormatter

__all__ = [
    "LoggerService",
    "log",
    "get_service_logger",
    "initialize_global_logger",
    "LogMessageFormatter",
    # Enums
    "LogLevel",
    "LogSource",
    "LoggerName",
    "LogEmoji",
]
