"""Domain models for platform profiles, media metadata and encode plans.

All types here are frozen dataclasses: plans are computed once, consumed by a
single engine invocation and discarded.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from socialcut.domain.enums import Anchor, BitrateMode, OutputFormat, TemplateType


@dataclass(frozen=True)
class PlatformProfile:
    """Encoding constraints for one publishing destination."""

    name: str
    max_width: int
    max_height: int
    max_duration: float  # seconds
    max_file_size: int  # bytes
    video_codec: str
    audio_codec: str
    video_bitrate: str
    audio_bitrate: str
    output_format: OutputFormat = OutputFormat.MP4
    force_portrait: bool = False

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Platform name must not be empty")
        if self.max_width <= 0 or self.max_height <= 0:
            raise ValueError(
                f"Platform {self.name}: max dimensions must be positive, "
                f"got {self.max_width}x{self.max_height}"
            )
        if self.max_duration <= 0:
            raise ValueError(f"Platform {self.name}: max_duration must be positive")
        if self.max_file_size <= 0:
            raise ValueError(f"Platform {self.name}: max_file_size must be positive")


@dataclass(frozen=True)
class MediaMetadata:
    """Snapshot of a probed media file.

    Re-probe whenever a derived file is produced; never reuse a snapshot
    across pipeline stages.
    """

    duration: float
    width: int
    height: int
    codec: str
    bitrate: int | None = None
    frame_rate: float | None = None
    frame_count: int | None = None
    has_audio: bool = False
    audio_codec: str | None = None
    sample_rate: int | None = None
    channels: int | None = None

    @property
    def is_portrait(self) -> bool:
        return self.height > self.width

    @property
    def is_landscape(self) -> bool:
        return self.width > self.height


@dataclass(frozen=True)
class PadSpec:
    """Offsets of scaled content inside the output frame."""

    left: int
    top: int
    right: int
    bottom: int
    color: str = "black"


@dataclass(frozen=True)
class CropSpec:
    """Region of the source kept before the final scale."""

    x: int
    y: int
    width: int
    height: int


@dataclass(frozen=True)
class FitPlan:
    """Dimension fit of one source into one target box.

    Output dimensions are always even and at least 2px. A plan pads or
    crops, never both.
    """

    width: int
    height: int
    scaled_width: int
    scaled_height: int
    pad: PadSpec | None = None
    crop: CropSpec | None = None

    def __post_init__(self) -> None:
        if self.pad is not None and self.crop is not None:
            raise ValueError("A fit plan cannot both pad and crop")

    def to_filter(self) -> str:
        """Render the plan as an engine video filter chain."""
        if self.crop is not None:
            c = self.crop
            return (
                f"crop={c.width}:{c.height}:{c.x}:{c.y},"
                f"scale={self.width}:{self.height},setsar=1"
            )
        if self.pad is not None:
            p = self.pad
            return (
                f"scale={self.scaled_width}:{self.scaled_height},"
                f"pad={self.width}:{self.height}:{p.left}:{p.top}:color={p.color},"
                "setsar=1"
            )
        return f"scale={self.width}:{self.height},setsar=1"


@dataclass(frozen=True)
class BitratePlan:
    """Target and capped bitrate for one encode."""

    target_bps: int
    capped_bps: int
    bitrate: str  # engine-ready string, e.g. "2M" or "1680k"
    mode: BitrateMode


@dataclass(frozen=True)
class EncodeAttempt:
    """One invocation of the size-constrained encode loop."""

    crf: int
    size_bytes: int
    accepted: bool


@dataclass(frozen=True)
class ChunkSpec:
    """Time window of one split chunk; duration None means open-ended."""

    index: int
    start: float
    duration: float | None


@dataclass(frozen=True)
class OverlaySpec:
    """Corner-anchored text box drawn over the composed video."""

    text: str
    anchor: Anchor = Anchor.BOTTOM_RIGHT
    color: str = "white"
    font_size: int = 36
    margin: int = 20


@dataclass(frozen=True)
class OutroSpec:
    """Trailing title card appended after the main composition."""

    lines: tuple[str, ...]
    duration: float = 3.0
    fade_in: float = 0.5
    background: str = "black"
    font_color: str = "white"
    font_size: int = 48


@dataclass(frozen=True)
class OutroParameters:
    """Encoding parameters an outro must share with the main segment to be
    concatenated by stream copy."""

    width: int
    height: int
    frame_rate: float
    has_audio: bool
    sample_rate: int = 48000
    channels: int = 2


@dataclass(frozen=True)
class CellSpec:
    """One source's slot in a grid composition."""

    index: int
    source: Path
    width: int
    height: int
    fit: FitPlan
    max_size: int  # bytes


@dataclass(frozen=True)
class CompositionPlan:
    """Complete layout of a templated composition."""

    template: TemplateType
    width: int
    height: int
    cells: tuple[CellSpec, ...]
    rows: tuple[tuple[int, ...], ...]
    max_total_size: int
    overlay: OverlaySpec | None = None
    outro: OutroSpec | None = None
    sources_dropped: tuple[Path, ...] = field(default=())
