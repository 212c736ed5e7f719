"""Filename helpers for generated outputs."""

import re
from pathlib import Path

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9\-_.]")
_REPEATED_UNDERSCORES = re.compile(r"_+")


def sanitize_filename(name: str) -> str:
    """Replace characters outside [A-Za-z0-9-_.] with underscores.

    Runs of underscores collapse to one and leading/trailing underscores
    are stripped. An empty result becomes "video".

    Args:
        name: Raw file stem.

    Returns:
        Filesystem-safe stem.
    """
    cleaned = _UNSAFE_CHARS.sub("_", name)
    cleaned = _REPEATED_UNDERSCORES.sub("_", cleaned).strip("_")
    return cleaned or "video"


def chunk_filename(source: Path, index: int, extension: str) -> str:
    """Name of the index-th chunk split from source (1-based index)."""
    return f"{sanitize_filename(source.stem)}_chunk_{index:03d}.{extension}"


def ensure_extension(path: Path, extension: str) -> Path:
    """Return path with the given extension if it does not already have it."""
    suffix = f".{extension.lstrip('.')}"
    if path.suffix.casefold() == suffix.casefold():
        return path
    return path.with_suffix(suffix)
