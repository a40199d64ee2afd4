"""
Logger utilities.
"""

from .formatters import LogMessageFormatter

__all__ = ["LogMessageFormatter"]
