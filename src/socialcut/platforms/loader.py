"""Custom platform profiles loaded from YAML.

File format::

    platforms:
      - name: youtube-shorts
        max_width: 1080
        max_height: 1920
        max_duration: 60
        max_file_size: 268435456
        video_bitrate: 3M
        audio_bitrate: 128k
        force_portrait: true
      - name: reddit
        replace: true
        ...
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from socialcut.domain.enums import OutputFormat
from socialcut.domain.models import PlatformProfile
from socialcut.errors import PlatformProfileError
from socialcut.planning.bitrate import parse_bitrate

VALID_VIDEO_CODECS = frozenset({"libx264", "libx265", "libvpx-vp9"})
VALID_AUDIO_CODECS = frozenset({"aac", "libopus", "libmp3lame"})


class PlatformProfileModel(BaseModel):
    """Pydantic model for one custom platform entry."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(min_length=1, pattern=r"^[a-z0-9][a-z0-9\-_]*$")
    max_width: int = Field(gt=0, le=7680)
    max_height: int = Field(gt=0, le=7680)
    max_duration: float = Field(gt=0)
    max_file_size: int = Field(gt=0)
    video_codec: str = "libx264"
    audio_codec: str = "aac"
    video_bitrate: str = "2M"
    audio_bitrate: str = "128k"
    output_format: Literal["mp4", "webm"] = "mp4"
    force_portrait: bool = False
    replace: bool = False

    @field_validator("video_codec")
    @classmethod
    def validate_video_codec(cls, v: str) -> str:
        """Validate video encoder name."""
        if v not in VALID_VIDEO_CODECS:
            raise ValueError(
                f"Invalid video_codec '{v}'. "
                f"Must be one of: {', '.join(sorted(VALID_VIDEO_CODECS))}"
            )
        return v

    @field_validator("audio_codec")
    @classmethod
    def validate_audio_codec(cls, v: str) -> str:
        """Validate audio encoder name."""
        if v not in VALID_AUDIO_CODECS:
            raise ValueError(
                f"Invalid audio_codec '{v}'. "
                f"Must be one of: {', '.join(sorted(VALID_AUDIO_CODECS))}"
            )
        return v

    @field_validator("video_bitrate", "audio_bitrate")
    @classmethod
    def validate_bitrate(cls, v: str) -> str:
        """Validate bitrate format."""
        if parse_bitrate(v) is None:
            raise ValueError(
                f"Invalid bitrate '{v}'. "
                "Must be a number followed by M or k (e.g., '2M', '128k')."
            )
        return v

    def to_profile(self) -> PlatformProfile:
        return PlatformProfile(
            name=self.name,
            max_width=self.max_width,
            max_height=self.max_height,
            max_duration=self.max_duration,
            max_file_size=self.max_file_size,
            video_codec=self.video_codec,
            audio_codec=self.audio_codec,
            video_bitrate=self.video_bitrate,
            audio_bitrate=self.audio_bitrate,
            output_format=OutputFormat(self.output_format),
            force_portrait=self.force_portrait,
        )


class PlatformFileModel(BaseModel):
    """Top-level structure of a custom platform file."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    platforms: list[PlatformProfileModel] = Field(default_factory=list)


def parse_platform_data(
    data: object, source: str = "<data>"
) -> list[tuple[PlatformProfile, bool]]:
    """Validate parsed YAML data into profiles.

    Args:
        data: Result of yaml.safe_load.
        source: Description of where the data came from, for messages.

    Returns:
        List of (profile, replace) pairs in file order.

    Raises:
        PlatformProfileError: If the data does not validate.
    """
    if data is None:
        return []
    if not isinstance(data, dict):
        raise PlatformProfileError(
            f"Platform file {source} must contain a mapping with a 'platforms' list"
        )
    try:
        model = PlatformFileModel.model_validate(data)
    except ValidationError as e:
        raise PlatformProfileError(f"Invalid platform file {source}: {e}") from e

    names = [entry.name for entry in model.platforms]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise PlatformProfileError(
            f"Platform file {source} defines duplicate names: {', '.join(duplicates)}"
        )
    return [(entry.to_profile(), entry.replace) for entry in model.platforms]


def load_platform_file(path: Path) -> list[tuple[PlatformProfile, bool]]:
    """Load and validate a custom platform YAML file.

    Raises:
        PlatformProfileError: If the file is missing, unreadable or invalid.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise PlatformProfileError(f"Cannot read platform file {path}: {e}") from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise PlatformProfileError(f"Invalid YAML in platform file {path}: {e}") from e

    return parse_platform_data(data, str(path))
