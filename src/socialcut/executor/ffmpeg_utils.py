"""Shared helpers for engine outputs: validation, sizes and safe moves."""

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


def validate_output(output_path: Path) -> tuple[bool, str | None]:
    """Validate an FFmpeg output file.

    Checks that the output file exists and is non-empty.

    Args:
        output_path: Path to output file.

    Returns:
        Tuple of (is_valid, error_message).
        error_message is None if valid.
    """
    if not output_path.exists():
        return False, f"Output file does not exist: {output_path}"

    try:
        output_size = output_path.stat().st_size
    except OSError as e:
        return False, f"Could not stat output file: {e}"

    if output_size == 0:
        return False, f"Output file is empty: {output_path}"

    return True, None


def file_size(path: Path) -> int:
    """Size of a file in bytes (0 if it does not exist)."""
    try:
        return path.stat().st_size
    except FileNotFoundError:
        return 0


def move_into_place(source: Path, destination: Path) -> Path:
    """Move a finished artifact to its destination, creating parents.

    Uses an atomic rename when both paths share a filesystem and falls back
    to copy-and-delete otherwise.

    Returns:
        The destination path.
    """
    destination.parent.mkdir(parents=True, exist_ok=True)
    try:
        source.replace(destination)
    except OSError:
        shutil.move(str(source), str(destination))
    logger.debug("Moved %s -> %s", source, destination)
    return destination


def cleanup_temp_file(path: Path) -> None:
    """Remove a temporary file, logging any errors.

    Args:
        path: Path to temp file to remove.
    """
    if path.exists():
        try:
            path.unlink()
            logger.debug("Cleaned up temp file: %s", path)
        except OSError as e:
            logger.warning("Could not clean up temp file %s: %s", path, e)
