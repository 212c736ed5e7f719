"""FFmpeg command building.

An EncodeRequest describes one engine invocation independently of the
binary; build_ffmpeg_command() renders it to an argument list. Keeping the
builder pure lets the planning layer be tested without running ffmpeg.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path

from socialcut.planning.bitrate import format_bitrate, parse_bitrate
from socialcut.planning.codecs import CONSTRAINED_QUALITY_CODECS


@dataclass(frozen=True)
class InputSpec:
    """One -i input with its seek window and demuxer options."""

    path: Path | str
    start: float | None = None
    duration: float | None = None
    format: str | None = None  # e.g. "lavfi", "concat"
    options: tuple[str, ...] = ()  # placed before -i, e.g. ("-safe", "0")


@dataclass(frozen=True)
class EncodeRequest:
    """A single engine invocation.

    video_codec/audio_codec may be "copy" for stream copy. With crf set
    and a maxrate given, the encode runs in constrained-quality mode.
    """

    inputs: tuple[InputSpec, ...]
    output: Path
    description: str = "encode"
    video_codec: str | None = None
    audio_codec: str | None = None
    crf: int | None = None
    video_bitrate: str | None = None
    maxrate: str | None = None
    bufsize: str | None = None
    audio_bitrate: str | None = None
    video_filter: str | None = None
    audio_filter: str | None = None
    filter_complex: str | None = None
    maps: tuple[str, ...] = ()
    codec_options: tuple[str, ...] = ()
    pix_fmt: str | None = "yuv420p"
    threads: int | None = None
    no_audio: bool = False
    shortest: bool = False
    output_options: tuple[str, ...] = ()

    def with_crf(self, crf: int) -> EncodeRequest:
        return replace(self, crf=crf)

    @property
    def copies_video(self) -> bool:
        return self.video_codec == "copy"


def _format_seconds(value: float) -> str:
    return f"{value:.3f}".rstrip("0").rstrip(".") or "0"


def build_ffmpeg_command(request: EncodeRequest, ffmpeg_path: Path | str) -> list[str]:
    """Render an EncodeRequest as an ffmpeg argument list.

    Args:
        request: The invocation to render.
        ffmpeg_path: Path to the ffmpeg binary.

    Returns:
        Argument list suitable for subprocess (no shell).
    """
    cmd: list[str] = [str(ffmpeg_path), "-hide_banner", "-nostdin", "-y"]

    for spec in request.inputs:
        if spec.start is not None and spec.start > 0:
            cmd.extend(["-ss", _format_seconds(spec.start)])
        if spec.duration is not None:
            cmd.extend(["-t", _format_seconds(spec.duration)])
        if spec.format:
            cmd.extend(["-f", spec.format])
        cmd.extend(spec.options)
        cmd.extend(["-i", str(spec.path)])

    if request.filter_complex:
        cmd.extend(["-filter_complex", request.filter_complex])
    if request.video_filter:
        cmd.extend(["-vf", request.video_filter])
    if request.audio_filter and not request.no_audio:
        cmd.extend(["-af", request.audio_filter])
    for label in request.maps:
        cmd.extend(["-map", label])

    if request.video_codec:
        cmd.extend(["-c:v", request.video_codec])
    if not request.copies_video:
        if request.crf is not None:
            cmd.extend(["-crf", str(request.crf)])
        if request.video_bitrate:
            cmd.extend(["-b:v", request.video_bitrate])
        if request.maxrate:
            if request.video_codec in CONSTRAINED_QUALITY_CODECS:
                if not request.video_bitrate:
                    cmd.extend(["-b:v", request.maxrate])
            else:
                cmd.extend(["-maxrate", request.maxrate])
                if request.bufsize:
                    cmd.extend(["-bufsize", request.bufsize])
        elif (
            request.crf is not None
            and request.video_codec in CONSTRAINED_QUALITY_CODECS
        ):
            # Pure constant-quality mode for VP9
            cmd.extend(["-b:v", "0"])
        cmd.extend(request.codec_options)
        if request.pix_fmt:
            cmd.extend(["-pix_fmt", request.pix_fmt])

    if request.no_audio:
        cmd.append("-an")
    else:
        if request.audio_codec:
            cmd.extend(["-c:a", request.audio_codec])
        if request.audio_bitrate and request.audio_codec != "copy":
            cmd.extend(["-b:a", request.audio_bitrate])

    if request.threads:
        cmd.extend(["-threads", str(request.threads)])
    if request.shortest:
        cmd.append("-shortest")
    cmd.extend(request.output_options)
    cmd.append(str(request.output))
    return cmd


def double_bitrate(bitrate: str) -> str:
    """Buffer size for a VBV ceiling: twice the rate, same suffix."""
    bps = parse_bitrate(bitrate)
    if bps is None:
        return bitrate
    unit = bitrate.strip()[-1:]
    return format_bitrate(bps * 2, unit if unit.casefold() in ("m", "k") else "")
