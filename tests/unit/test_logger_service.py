#!/usr/bin/env python3
"""
Unit tests for the loguru-backed logger service.

Tests:
- Message formatting and context previews
- Emoji priority system of service loggers
- Structured extra fields bound on every record
"""

import importlib

import pytest
from loguru import logger

from image_derivatives.enums import LogEmoji, LoggerName, LogLevel, LogSource
from image_derivatives.services.logger import (
    LoggerService,
    LogMessageFormatter,
    get_service_logger,
)
from image_derivatives.services.logger import logger_service
from image_derivatives.services.logger.constants import CONTEXT_VALUE_MAX_LENGTH


@pytest.fixture
def captured_records():
    """Collect loguru records emitted during a test."""
    records = []
    sink_id = logger.add(
        lambda message: records.append(message.record), level="TRACE", format="{message}"
    )
    yield records
    logger.remove(sink_id)


@pytest.mark.unit
class TestLogMessageFormatter:
    """Test suite for LogMessageFormatter."""

    def test_plain_message(self):
        assert LogMessageFormatter.format_message("hello") == "hello"

    def test_emoji_prefix(self):
        assert LogMessageFormatter.format_message("hello", LogEmoji.IMAGE) == "🖼️ hello"

    def test_context_preview_priority_order(self):
        preview = LogMessageFormatter.format_context_preview(
            {"extra": 1, "path": "/tmp/a.jpg", "operation": "file_copy"}
        )
        assert preview == "operation=file_copy, path=/tmp/a.jpg, extra=1"

    def test_context_values_truncated(self):
        preview = LogMessageFormatter.format_context_preview({"path": "x" * 500})
        value = preview.split("=", 1)[1]
        assert len(value) == CONTEXT_VALUE_MAX_LENGTH
        assert value.endswith("...")

    def test_empty_context(self):
        assert LogMessageFormatter.format_context_preview({}) == ""
        assert LogMessageFormatter.format_message("hi", context={}) == "hi"


@pytest.mark.unit
class TestServiceLogger:
    """Test suite for get_service_logger."""

    def test_binds_source_and_logger_name(self, captured_records):
        service_logger = get_service_logger(LoggerName.PATH_RESOLVER, LogSource.STORAGE)
        service_logger.info("Resolved directory", extra_context={"path": "uploads/a"})

        record = captured_records[-1]
        assert record["level"].name == "INFO"
        assert record["extra"]["source"] == "storage"
        assert record["extra"]["logger_name"] == "path_resolver"
        assert record["extra"]["context"] == {"path": "uploads/a"}
        assert record["message"] == "ℹ️ Resolved directory [path=uploads/a]"

    # ============================================================================
    # EMOJI PRIORITY TESTS
    # ============================================================================

    def test_level_fallback_emoji(self, captured_records):
        get_service_logger(LoggerName.UTILITY).warning("careful")
        assert captured_records[-1]["message"] == "⚠️ careful"

    def test_instance_default_emoji(self, captured_records):
        service_logger = get_service_logger(
            LoggerName.UTILITY, LogSource.STORAGE, default_emoji=LogEmoji.STORAGE
        )
        service_logger.info("stored")
        assert captured_records[-1]["message"] == "💾 stored"

    def test_direct_emoji_wins(self, captured_records):
        service_logger = get_service_logger(
            LoggerName.UTILITY, LogSource.STORAGE, default_emoji=LogEmoji.STORAGE
        )
        service_logger.debug("moved", emoji=LogEmoji.MOVE)
        assert captured_records[-1]["message"] == "📦 moved"

    # ============================================================================
    # ERROR TESTS
    # ============================================================================

    def test_error_with_exception(self, captured_records):
        service_logger = get_service_logger(LoggerName.DERIVATIVE_PIPELINE, LogSource.PIPELINE)
        try:
            raise RuntimeError("boom")
        except RuntimeError as e:
            service_logger.error(
                "Build failed", exception=e, error_context={"field_name": "image"}
            )

        record = captured_records[-1]
        assert record["level"].name == "ERROR"
        assert record["exception"] is not None
        assert record["exception"].type is RuntimeError
        assert record["message"] == "❌ Build failed [error=boom, field_name=image]"

    def test_error_accepts_extra_context(self, captured_records):
        get_service_logger(LoggerName.UTILITY).error(
            "Failed", extra_context={"operation": "file_delete"}
        )
        assert "operation=file_delete" in captured_records[-1]["message"]


@pytest.mark.unit
class TestLoggerServiceSinks:
    """Test suite for loguru global state handling."""

    @pytest.fixture(autouse=True)
    def reset_extras(self):
        yield
        logger.configure(extra={})

    def test_import_leaves_loguru_extras_untouched(self, captured_records):
        logger.configure(extra={})
        importlib.reload(logger_service)

        logger.info("host application message")
        assert "source" not in captured_records[-1]["extra"]

    def test_configure_sinks_installs_default_extras(self, temp_dir):
        records = []
        service = LoggerService()
        try:
            service.configure_sinks(
                level=LogLevel.DEBUG,
                log_file=str(temp_dir / "derivatives.log"),
                enable_console=False,
            )
            logger.add(lambda message: records.append(message.record), format="{message}")
            logger.info("host application message")
        finally:
            logger.remove()

        assert records[-1]["extra"]["source"] == "system"
        assert records[-1]["extra"]["logger_name"] == "system"
        assert "host application message" in (temp_dir / "derivatives.log").read_text(
            encoding="utf-8"
        )


@pytest.mark.unit
class TestLogEmoji:
    """Test suite for the LogEmoji catalogue."""

    def test_no_aliased_members(self):
        # Members sharing a value would silently collapse into aliases
        assert len(LogEmoji.__members__) == len(list(LogEmoji))
