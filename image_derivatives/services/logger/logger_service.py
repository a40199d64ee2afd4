# image_derivatives/services/logger/logger_service.py
"""
Centralized Logger Service.

Thin structured layer over loguru that provides:
- Type-safe enum-based logging methods (source, logger name, emoji)
- Console output and optional rotating file output
- Per-service loggers with a three-tier emoji priority system
"""

import sys
from typing import Any, Dict, Optional

from loguru import logger

from ...constants import LOG_FILE_COMPRESSION, LOG_FILE_RETENTION, LOG_FILE_ROTATION
from ...enums import LogEmoji, LoggerName, LogLevel, LogSource
from .constants import CONSOLE_LOG_FORMAT, DEFAULT_EXTRA, FILE_LOG_FORMAT
from .utils.formatters import LogMessageFormatter


class LoggerService:
    """
    Centralized logging service used by every pipeline component.

    Usage:
        log().info(
            message="Built derivative set",
            extra_context={"field_name": "image"},
            source=LogSource.PIPELINE,
            logger_name=LoggerName.DERIVATIVE_PIPELINE,
        )
    """

    def __init__(self, formatter: Optional[LogMessageFormatter] = None):
        self.formatter = formatter or LogMessageFormatter()
        self._sink_ids = []

    def configure_sinks(
        self,
        level: LogLevel = LogLevel.INFO,
        log_file: Optional[str] = None,
        enable_console: bool = True,
    ) -> None:
        """
        Replace loguru sinks with the console and optional file sink.

        Also installs default extras so records logged through plain loguru
        still render with the sink formats.

        Args:
            level: Minimum level written by every sink
            log_file: Optional path of a rotating log file
            enable_console: Whether to write to stderr
        """
        logger.remove()
        logger.configure(extra=DEFAULT_EXTRA)
        self._sink_ids = []

        if enable_console:
            self._sink_ids.append(
                logger.add(
                    sys.stderr,
                    level=level.value,
                    format=CONSOLE_LOG_FORMAT,
                    colorize=sys.stderr.isatty(),
                )
            )

        if log_file:
            self._sink_ids.append(
                logger.add(
                    log_file,
                    level=level.value,
                    format=FILE_LOG_FORMAT,
                    rotation=LOG_FILE_ROTATION,
                    retention=LOG_FILE_RETENTION,
                    compression=LOG_FILE_COMPRESSION,
                    enqueue=True,
                )
            )

    def _emit(
        self,
        level: LogLevel,
        message: str,
        source: LogSource,
        logger_name: LoggerName,
        emoji: Optional[LogEmoji] = None,
        context: Optional[Dict[str, Any]] = None,
        exception: Optional[BaseException] = None,
    ) -> None:
        text = self.formatter.format_message(message, emoji=emoji, context=context)
        logger.bind(
            source=source.value,
            logger_name=logger_name.value,
            context=context or {},
        ).opt(exception=exception, depth=2).log(level.value, text)

    def error(
        self,
        message: str,
        exception: Optional[BaseException] = None,
        error_context: Optional[Dict[str, Any]] = None,
        source: LogSource = LogSource.SYSTEM,
        logger_name: LoggerName = LoggerName.SYSTEM,
        emoji: Optional[LogEmoji] = LogEmoji.ERROR,
    ) -> None:
        context = dict(error_context or {})
        if exception is not None:
            context.setdefault("error", str(exception))
        self._emit(
            LogLevel.ERROR, message, source, logger_name, emoji, context, exception
        )

    def warning(
        self,
        message: str,
        extra_context: Optional[Dict[str, Any]] = None,
        source: LogSource = LogSource.SYSTEM,
        logger_name: LoggerName = LoggerName.SYSTEM,
        emoji: Optional[LogEmoji] = LogEmoji.WARNING,
    ) -> None:
        self._emit(LogLevel.WARNING, message, source, logger_name, emoji, extra_context)

    def info(
        self,
        message: str,
        extra_context: Optional[Dict[str, Any]] = None,
        source: LogSource = LogSource.SYSTEM,
        logger_name: LoggerName = LoggerName.SYSTEM,
        emoji: Optional[LogEmoji] = LogEmoji.INFO,
    ) -> None:
        self._emit(LogLevel.INFO, message, source, logger_name, emoji, extra_context)

    def debug(
        self,
        message: str,
        extra_context: Optional[Dict[str, Any]] = None,
        source: LogSource = LogSource.SYSTEM,
        logger_name: LoggerName = LoggerName.SYSTEM,
        emoji: Optional[LogEmoji] = LogEmoji.DEBUG,
    ) -> None:
        self._emit(LogLevel.DEBUG, message, source, logger_name, emoji, extra_context)


# Global logger instance
_global_logger_instance: Optional[LoggerService] = None


def initialize_global_logger(
    level: LogLevel = LogLevel.INFO,
    log_file: Optional[str] = None,
    enable_console: bool = True,
) -> LoggerService:
    """
    Initialize the global logger instance and its sinks.

    This should be called once during application startup.

    Args:
        level: Minimum log level
        log_file: Optional rotating log file path
        enable_console: Enable console output

    Returns:
        Initialized LoggerService instance
    """
    global _global_logger_instance

    _global_logger_instance = LoggerService()
    _global_logger_instance.configure_sinks(
        level=level, log_file=log_file, enable_console=enable_console
    )
    return _global_logger_instance


def log() -> LoggerService:
    """
    Get the global logger instance.

    Library callers that never run initialize_global_logger() get a service
    writing through loguru's default sink.
    """
    global _global_logger_instance

    if _global_logger_instance is None:
        _global_logger_instance = LoggerService()

    return _global_logger_instance


def get_service_logger(
    logger_name: LoggerName,
    source: LogSource = LogSource.SYSTEM,
    default_emoji: Optional[LogEmoji] = None,
):
    """
    Factory function to create a pre-configured logger for a specific service.

    Emoji priority system (highest to lowest):
    1. Direct: Emoji passed directly to log method call
    2. Instance-set: Default emoji set when creating the service logger
    3. Fallback: Default emoji based on log level (ERROR, WARNING, INFO, DEBUG)

    Args:
        logger_name: The logger name enum to use for all calls
        source: The log source enum to use for all calls (defaults to SYSTEM)
        default_emoji: Instance-level default emoji that overrides level-based fallbacks

    Returns:
        ServiceLogger instance with error, warning, info, debug methods

    Example:
        logger = get_service_logger(LoggerName.DERIVATIVE_PIPELINE, LogSource.PIPELINE)
        logger.error("Something went wrong", exception=e)
        logger.info("Stored source file", emoji=LogEmoji.STORAGE)
    """

    def _resolve_emoji(
        method_emoji: Optional[LogEmoji], fallback_emoji: LogEmoji
    ) -> LogEmoji:
        if method_emoji is not None:
            return method_emoji
        if default_emoji is not None:
            return default_emoji
        return fallback_emoji

    class ServiceLogger:
        @staticmethod
        def error(
            message: str,
            exception: Optional[BaseException] = None,
            error_context: Optional[Dict[str, Any]] = None,
            emoji: Optional[LogEmoji] = None,
            **kwargs,
        ):
            """Log an error with emoji priority system."""
            return log().error(
                message=message,
                exception=exception,
                error_context=error_context or kwargs.get("extra_context"),
                source=source,
                logger_name=logger_name,
                emoji=_resolve_emoji(emoji, LogEmoji.ERROR),
            )

        @staticmethod
        def warning(
            message: str,
            extra_context: Optional[Dict[str, Any]] = None,
            emoji: Optional[LogEmoji] = None,
            **kwargs,
        ):
            """Log a warning with emoji priority system."""
            return log().warning(
                message=message,
                extra_context=extra_context,
                source=source,
                logger_name=logger_name,
                emoji=_resolve_emoji(emoji, LogEmoji.WARNING),
            )

        @staticmethod
        def info(
            message: str,
            extra_context: Optional[Dict[str, Any]] = None,
            emoji: Optional[LogEmoji] = None,
            **kwargs,
        ):
            """Log an info message with emoji priority system."""
            return log().info(
                message=message,
                extra_context=extra_context,
                source=source,
                logger_name=logger_name,
                emoji=_resolve_emoji(emoji, LogEmoji.INFO),
            )

        @staticmethod
        def debug(
            message: str,
            extra_context: Optional[Dict[str, Any]] = None,
            emoji: Optional[LogEmoji] = None,
            **kwargs,
        ):
            """Log a debug message with emoji priority system."""
            return log().debug(
                message=message,
                extra_context=extra_context,
                source=source,
                logger_name=logger_name,
                emoji=_resolve_emoji(emoji, LogEmoji.DEBUG),
            )

    return ServiceLogger()
