"""
Shared utilities.
"""

from .file_helpers import (
    copy_file,
    delete_file_safe,
    delete_files_safe,
    ensure_directory,
    get_file_size,
    move_file,
    write_bytes,
    write_stream,
)

__all__ = [
    "ensure_directory",
    "move_file",
    "copy_file",
    "write_bytes",
    "write_stream",
    "delete_file_safe",
    "delete_files_safe",
    "get_file_size",
]
