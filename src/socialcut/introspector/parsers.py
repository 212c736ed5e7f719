"""Pure parsing functions for ffprobe JSON output.

These functions transform ffprobe JSON data into MediaMetadata.
All functions are pure (no I/O, no side effects) for easy testing.
"""

import logging
from pathlib import Path

from socialcut.domain.models import MediaMetadata
from socialcut.errors import InvalidMetadataError, MetadataUnavailableError

logger = logging.getLogger(__name__)


def parse_duration(value: str | float | None) -> float | None:
    """Parse duration string from ffprobe into seconds.

    Args:
        value: Duration string from ffprobe (e.g., "3600.000") or None.

    Returns:
        Duration in seconds as float, or None if parsing fails or is not positive.
    """
    if value is None:
        return None
    try:
        duration = float(value)
    except (ValueError, TypeError):
        return None
    return duration if duration > 0 else None


def parse_int(value: str | int | None) -> int | None:
    """Parse an integer field that ffprobe may report as a string."""
    if value is None:
        return None
    try:
        parsed = int(value)
    except (ValueError, TypeError):
        return None
    return parsed if parsed > 0 else None


def parse_frame_rate(value: str | None) -> float | None:
    """Parse an ffprobe rational frame rate such as "30000/1001".

    Returns:
        Frames per second, or None for missing, malformed or zero rates.
    """
    if not value:
        return None
    numerator, _, denominator = value.partition("/")
    try:
        num = float(numerator)
        den = float(denominator) if denominator else 1.0
    except ValueError:
        return None
    if num <= 0 or den <= 0:
        return None
    return num / den


def _first_stream(streams: list[dict], codec_type: str) -> dict | None:
    for stream in streams:
        if stream.get("codec_type") != codec_type:
            continue
        # Cover art is reported as a video stream
        if stream.get("disposition", {}).get("attached_pic"):
            continue
        return stream
    return None


def resolve_duration(stream: dict, format_info: dict) -> float | None:
    """Duration from the stream, then the container, then frame count / rate."""
    duration = parse_duration(stream.get("duration"))
    if duration is not None:
        return duration
    duration = parse_duration(format_info.get("duration"))
    if duration is not None:
        return duration
    frames = parse_int(stream.get("nb_frames"))
    rate = parse_frame_rate(stream.get("r_frame_rate")) or parse_frame_rate(
        stream.get("avg_frame_rate")
    )
    if frames is not None and rate is not None:
        return frames / rate
    return None


def resolve_bitrate(stream: dict, format_info: dict, duration: float) -> int | None:
    """Bitrate from the container, then the video stream, then size / duration."""
    bitrate = parse_int(format_info.get("bit_rate"))
    if bitrate is not None:
        return bitrate
    bitrate = parse_int(stream.get("bit_rate"))
    if bitrate is not None:
        return bitrate
    size = parse_int(format_info.get("size"))
    if size is not None and duration > 0:
        return int(size * 8 / duration)
    return None


def parse_ffprobe_output(path: Path, data: dict) -> MediaMetadata:
    """Build MediaMetadata from ffprobe JSON.

    Args:
        path: Probed file, for messages.
        data: Parsed ffprobe output with "streams" and "format".

    Returns:
        MediaMetadata for the first video stream and first audio stream.

    Raises:
        MetadataUnavailableError: If the file has no video stream.
        InvalidMetadataError: If dimensions or duration are missing or not positive.
    """
    streams = data.get("streams", [])
    format_info = data.get("format", {})

    video = _first_stream(streams, "video")
    if video is None:
        raise MetadataUnavailableError(f"No video stream found in {path}")

    width = parse_int(video.get("width"))
    height = parse_int(video.get("height"))
    if width is None or height is None:
        raise InvalidMetadataError(
            f"Invalid video dimensions in {path}: "
            f"{video.get('width')}x{video.get('height')}"
        )

    duration = resolve_duration(video, format_info)
    if duration is None:
        raise InvalidMetadataError(f"Could not determine duration of {path}")

    frame_rate = parse_frame_rate(video.get("r_frame_rate")) or parse_frame_rate(
        video.get("avg_frame_rate")
    )
    bitrate = resolve_bitrate(video, format_info, duration)
    if bitrate is None:
        logger.debug("No bitrate information for %s", path)

    audio = _first_stream(streams, "audio")
    return MediaMetadata(
        duration=duration,
        width=width,
        height=height,
        codec=video.get("codec_name", "unknown"),
        bitrate=bitrate,
        frame_rate=frame_rate,
        frame_count=parse_int(video.get("nb_frames")),
        has_audio=audio is not None,
        audio_codec=audio.get("codec_name") if audio else None,
        sample_rate=parse_int(audio.get("sample_rate")) if audio else None,
        channels=parse_int(audio.get("channels")) if audio else None,
    )
