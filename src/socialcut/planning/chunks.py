"""Chunk planning for the splitter."""

from __future__ import annotations

import math

from socialcut.domain.models import ChunkSpec
from socialcut.errors import InvalidMetadataError, InvalidSkipError


def plan_chunks(
    source_duration: float,
    chunk_duration: float,
    skip: float = 0.0,
) -> list[ChunkSpec]:
    """Divide [skip, source_duration) into fixed-length chunks.

    The remaining duration is truncated to whole seconds before dividing,
    so a fraction of a second never produces its own chunk. Every chunk
    but the last has an explicit duration; the last runs to the end of
    the source.

    Args:
        source_duration: Source duration in seconds.
        chunk_duration: Chunk length in seconds.
        skip: Seconds to skip at the start.

    Returns:
        Chunk specs with 1-based indices.

    Raises:
        InvalidMetadataError: If the source duration is not positive.
        InvalidSkipError: If skip is negative or not shorter than the source.
        ValueError: If chunk_duration is not positive.
    """
    if source_duration <= 0:
        raise InvalidMetadataError(f"Invalid source duration: {source_duration}")
    if chunk_duration <= 0:
        raise ValueError(f"Chunk duration must be positive, got {chunk_duration}")
    if skip < 0:
        raise InvalidSkipError(f"Skip duration must not be negative, got {skip}")
    if skip >= source_duration:
        raise InvalidSkipError(
            f"Skip duration ({skip:g}s) exceeds video duration "
            f"({source_duration:g}s)"
        )

    remaining = int(source_duration - skip)
    count = max(1, math.ceil(remaining / chunk_duration))

    chunks: list[ChunkSpec] = []
    for i in range(count):
        is_last = i == count - 1
        chunks.append(
            ChunkSpec(
                index=i + 1,
                start=skip + i * chunk_duration,
                duration=None if is_last else chunk_duration,
            )
        )
    return chunks
