# image_derivatives/services/logger/utils/formatters.py
"""
Message formatting helpers for the logger service.
"""

from typing import Any, Dict, Optional

from ....enums import LogEmoji
from ..constants import CONSOLE_MAX_CONTEXT_ITEMS, CONTEXT_VALUE_MAX_LENGTH


class LogMessageFormatter:
    """Builds the single-line text handed to loguru."""

    # Keys shown first in context previews
    PRIORITY_KEYS = (
        "error",
        "operation",
        "field_name",
        "thumbnail",
        "role",
        "path",
    )

    @staticmethod
    def format_message(
        message: str,
        emoji: Optional[LogEmoji] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Prefix the message with its emoji and append a short context preview.

        Args:
            message: Raw log message
            emoji: Optional emoji prefix
            context: Optional context dictionary

        Returns:
            Formatted message string
        """
        parts = []
        if emoji is not None:
            parts.append(emoji.value)
        parts.append(message)

        preview = LogMessageFormatter.format_context_preview(context)
        if preview:
            parts.append(f"[{preview}]")

        return " ".join(parts)

    @staticmethod
    def format_context_preview(context: Optional[Dict[str, Any]]) -> str:
        if not context:
            return ""

        ordered_keys = [k for k in LogMessageFormatter.PRIORITY_KEYS if k in context]
        ordered_keys += [k for k in context if k not in ordered_keys]

        items = []
        for key in ordered_keys[:CONSOLE_MAX_CONTEXT_ITEMS]:
            value = str(context[key])
            if len(value) > CONTEXT_VALUE_MAX_LENGTH:
                value = value[: CONTEXT_VALUE_MAX_LENGTH - 3] + "..."
            items.append(f"{key}={value}")

        return ", ".join(items)
