"""Per-container codec defaults and per-encoder tuning options."""

from __future__ import annotations

import os
from dataclasses import dataclass

from socialcut.domain.enums import OutputFormat
from socialcut.domain.models import PlatformProfile

PIXEL_FORMAT = "yuv420p"

# Share of CPU cores handed to the encoder
THREAD_SHARE = 0.75


@dataclass(frozen=True)
class ContainerDefaults:
    """Encoders and muxer options used when no platform dictates them."""

    video_codec: str
    audio_codec: str
    muxer_options: tuple[str, ...] = ()


CONTAINER_DEFAULTS: dict[OutputFormat, ContainerDefaults] = {
    OutputFormat.MP4: ContainerDefaults(
        video_codec="libx264",
        audio_codec="aac",
        muxer_options=("-movflags", "+faststart"),
    ),
    OutputFormat.WEBM: ContainerDefaults(
        video_codec="libvpx-vp9",
        audio_codec="libopus",
    ),
}

# Quality-oriented tuning per video encoder
VIDEO_CODEC_OPTIONS: dict[str, tuple[str, ...]] = {
    "libx264": (
        "-preset", "slower",
        "-profile:v", "high",
        "-level", "4.0",
        "-x264opts", "no-scenecut",
        "-g", "60",
        "-keyint_min", "30",
    ),
    "libx265": (
        "-preset", "slow",
        "-tag:v", "hvc1",
        "-g", "60",
    ),
    "libvpx-vp9": (
        "-deadline", "good",
        "-cpu-used", "2",
        "-row-mt", "1",
        "-tile-columns", "2",
        "-frame-parallel", "1",
        "-auto-alt-ref", "1",
        "-lag-in-frames", "25",
        "-g", "240",
        "-keyint_min", "120",
    ),
}  # fmt: skip

# Faster settings for the split re-encode fallback, where speed matters more
FAST_VIDEO_CODEC_OPTIONS: dict[str, tuple[str, ...]] = {
    "libx264": ("-preset", "fast"),
    "libvpx-vp9": ("-deadline", "good", "-cpu-used", "4", "-row-mt", "1"),
}

# Encoders that take a target bitrate rather than a VBV ceiling alongside CRF
CONSTRAINED_QUALITY_CODECS = frozenset({"libvpx-vp9"})


def codec_options(video_codec: str, fast: bool = False) -> tuple[str, ...]:
    """Tuning options for a video encoder (empty for unknown encoders)."""
    table = FAST_VIDEO_CODEC_OPTIONS if fast else VIDEO_CODEC_OPTIONS
    return table.get(video_codec, ())


def default_thread_count(cpu_count: int | None = None) -> int:
    """Encoder thread count: 75% of available cores, at least 1.

    Args:
        cpu_count: Core count override (None reads os.cpu_count()).
    """
    cores = cpu_count if cpu_count is not None else (os.cpu_count() or 1)
    return max(1, int(cores * THREAD_SHARE))


DEFAULT_AUDIO_BITRATE = "128k"


@dataclass(frozen=True)
class OutputSettings:
    """Container, encoders and muxer options for a job's outputs."""

    format: OutputFormat
    video_codec: str
    audio_codec: str
    audio_bitrate: str
    muxer_options: tuple[str, ...] = ()

    @property
    def extension(self) -> str:
        return self.format.value


def resolve_output_settings(
    output_format: OutputFormat | None,
    platform: PlatformProfile | None = None,
    default_format: OutputFormat = OutputFormat.MP4,
) -> OutputSettings:
    """Pick the container and encoders for a job.

    An explicit format wins, then the platform's preferred container, then
    default_format. The platform's encoders are used when its container is
    the one chosen; otherwise the container defaults apply.
    """
    if output_format is None:
        output_format = platform.output_format if platform else default_format
    defaults = CONTAINER_DEFAULTS[output_format]

    if platform is not None and platform.output_format is output_format:
        video_codec = platform.video_codec
        audio_codec = platform.audio_codec
        audio_bitrate = platform.audio_bitrate
    else:
        video_codec = defaults.video_codec
        audio_codec = defaults.audio_codec
        audio_bitrate = platform.audio_bitrate if platform else DEFAULT_AUDIO_BITRATE

    return OutputSettings(
        format=output_format,
        video_codec=video_codec,
        audio_codec=audio_codec,
        audio_bitrate=audio_bitrate,
        muxer_options=defaults.muxer_options,
    )
