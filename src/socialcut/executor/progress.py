"""FFmpeg stderr progress parsing.

FFmpeg reports progress on stderr as lines like:
    frame= 1234 fps= 30 q=28.0 size=  2048kB time=00:01:23.45 speed=2.0x
"""

import re
from dataclasses import dataclass


@dataclass
class FFmpegProgress:
    """Parsed FFmpeg progress line."""

    frame: int | None = None
    fps: float | None = None
    size_kb: int | None = None
    out_time_us: int | None = None  # Output time in microseconds
    speed: str | None = None

    @property
    def out_time_seconds(self) -> float | None:
        """Get output time in seconds."""
        if self.out_time_us is not None:
            return self.out_time_us / 1_000_000
        return None


_FRAME = re.compile(r"frame=\s*(\d+)")
_FPS = re.compile(r"fps=\s*([\d.]+)")
_SIZE = re.compile(r"size=\s*(\d+)\s*[kK]i?B")
_SPEED = re.compile(r"speed=\s*([^\s]+)")
_TIME = re.compile(r"time=(\d+):(\d+):(\d+)\.(\d+)")


def parse_stderr_progress(line: str) -> FFmpegProgress | None:
    """Parse FFmpeg stderr progress line.

    Args:
        line: A line from FFmpeg stderr.

    Returns:
        Parsed FFmpegProgress or None if not a progress line.
    """
    if "frame=" not in line and "time=" not in line:
        return None

    result = FFmpegProgress()
    if match := _FRAME.search(line):
        result.frame = int(match.group(1))
    if match := _FPS.search(line):
        try:
            result.fps = float(match.group(1))
        except ValueError:
            result.fps = None
    if match := _SIZE.search(line):
        result.size_kb = int(match.group(1))
    if match := _SPEED.search(line):
        speed = match.group(1)
        result.speed = speed if speed != "N/A" else None

    time_match = _TIME.search(line)
    if time_match:
        hours = int(time_match.group(1))
        minutes = int(time_match.group(2))
        seconds = int(time_match.group(3))
        centiseconds = int(time_match.group(4)[:2].ljust(2, "0"))
        result.out_time_us = (
            hours * 3600 + minutes * 60 + seconds
        ) * 1_000_000 + centiseconds * 10_000

    if result.frame is None and result.out_time_us is None:
        return None
    return result
