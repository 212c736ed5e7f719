"""Obscurify effect: subtle visual and audio changes applied before encoding.

The zoom crops 2.5% from the frame edges and scales back to the original
size, then color, sharpness and vignette are adjusted. Audio is pitched up
slightly while its tempo is slowed to roughly compensate.
"""

from __future__ import annotations

from dataclasses import dataclass

from socialcut.domain.models import MediaMetadata
from socialcut.planning.dimensions import even_floor

ZOOM_FACTOR = 1.025
EQ_FILTER = "eq=gamma=1.05:saturation=1.2:contrast=1.1"
UNSHARP_FILTER = "unsharp=3:3:1.5:3:3:0.5"
VIGNETTE_FILTER = "vignette=a=0.628319:x0=w/2:y0=h/2"

AUDIO_SAMPLE_RATE = 48000
PITCH_FACTOR = 1.05
TEMPO_FACTOR = 0.95


@dataclass(frozen=True)
class EffectFilters:
    """Video and audio filter chains for one effect pass."""

    video: str
    audio: str | None


def obscurify_filters(metadata: MediaMetadata) -> EffectFilters:
    """Build the obscurify filters for a probed source.

    Args:
        metadata: Source metadata (dimensions and audio presence).

    Returns:
        EffectFilters; audio is None when the source has no audio.
    """
    width = even_floor(metadata.width)
    height = even_floor(metadata.height)
    zoomed_w = even_floor(round(width * ZOOM_FACTOR))
    zoomed_h = even_floor(round(height * ZOOM_FACTOR))
    crop_x = (zoomed_w - width) // 2
    crop_y = (zoomed_h - height) // 2

    video = ",".join(
        [
            f"scale={zoomed_w}:{zoomed_h}",
            f"crop={width}:{height}:{crop_x}:{crop_y}",
            EQ_FILTER,
            UNSHARP_FILTER,
            VIGNETTE_FILTER,
        ]
    )
    audio = None
    if metadata.has_audio:
        audio = (
            f"aresample={AUDIO_SAMPLE_RATE},"
            f"asetrate={AUDIO_SAMPLE_RATE}*{PITCH_FACTOR},"
            f"aresample={AUDIO_SAMPLE_RATE},"
            f"atempo={TEMPO_FACTOR}"
        )
    return EffectFilters(video=video, audio=audio)
