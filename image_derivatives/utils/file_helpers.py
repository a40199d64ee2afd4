# image_derivatives/utils/file_helpers.py
"""
File Helper Functions

Common functions for moving, copying and deleting derivative files. Every
write failure is raised as StorageWriteError chained to the OS error.
"""

import shutil
from pathlib import Path
from typing import BinaryIO, Iterable, List, Union

from ..enums import LogEmoji, LoggerName, LogSource
from ..exceptions import StorageWriteError
from ..services.logger import get_service_logger

logger = get_service_logger(LoggerName.UTILITY, LogSource.STORAGE)

PathLike = Union[str, Path]


def ensure_directory(directory: PathLike) -> Path:
    """
    Create a directory (and parents) if it doesn't exist.

    An "already exists" outcome, including one caused by a concurrent
    invocation creating the same directory, counts as success.

    Args:
        directory: Directory to create

    Returns:
        Path to the directory

    Raises:
        StorageWriteError: If the directory cannot be created
    """
    path = Path(directory)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StorageWriteError(f"Failed to create directory {path}: {e}") from e
    return path


def move_file(source: PathLike, destination: PathLike) -> Path:
    """Move a file, replacing any existing destination file."""
    destination_path = Path(destination)
    try:
        shutil.move(str(source), str(destination_path))
    except OSError as e:
        raise StorageWriteError(
            f"Failed to move {source} to {destination_path}: {e}"
        ) from e

    logger.debug(
        f"Moved file to {destination_path}",
        emoji=LogEmoji.MOVE,
        extra_context={"operation": "file_move", "path": str(destination_path)},
    )
    return destination_path


def copy_file(source: PathLike, destination: PathLike) -> Path:
    """Copy a file byte-for-byte."""
    destination_path = Path(destination)
    try:
        shutil.copyfile(str(source), str(destination_path))
    except OSError as e:
        raise StorageWriteError(
            f"Failed to copy {source} to {destination_path}: {e}"
        ) from e

    logger.debug(
        f"Copied file to {destination_path}",
        emoji=LogEmoji.COPY,
        extra_context={"operation": "file_copy", "path": str(destination_path)},
    )
    return destination_path


def write_bytes(data: bytes, destination: PathLike) -> Path:
    destination_path = Path(destination)
    try:
        destination_path.write_bytes(data)
    except OSError as e:
        raise StorageWriteError(f"Failed to write {destination_path}: {e}") from e
    return destination_path


def write_stream(stream: BinaryIO, destination: PathLike) -> Path:
    destination_path = Path(destination)
    try:
        with open(destination_path, "wb") as target:
            shutil.copyfileobj(stream, target)
    except OSError as e:
        raise StorageWriteError(f"Failed to write {destination_path}: {e}") from e
    return destination_path


# Utility to safely delete a file with logging
def delete_file_safe(file_path: PathLike) -> bool:
    """
    Safely delete a file, logging any errors. Returns True if deleted, False otherwise.

    Args:
        file_path: Path to the file to delete
    """
    path = Path(file_path)
    try:
        if path.exists():
            path.unlink()
            logger.info(
                f"Deleted file: {path}",
                emoji=LogEmoji.DELETE,
                extra_context={"operation": "file_delete", "path": str(path)},
            )
            return True

        logger.warning(
            f"File not found for deletion: {path}",
            extra_context={
                "operation": "file_delete",
                "path": str(path),
                "status": "not_found",
            },
        )
        return False
    except OSError as e:
        logger.error(
            f"Failed to delete file {path}",
            exception=e,
            error_context={"operation": "file_delete", "path": str(path)},
        )
        return False


def delete_files_safe(file_paths: Iterable[PathLike]) -> List[Path]:
    """Delete several files, returning the ones actually removed."""
    return [Path(p) for p in file_paths if delete_file_safe(p)]


def get_file_size(file_path: PathLike) -> int:
    try:
        return Path(file_path).stat().st_size
    except OSError as e:
        raise StorageWriteError(f"Failed to stat {file_path}: {e}") from e
