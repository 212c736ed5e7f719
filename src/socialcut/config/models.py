"""Configuration data models for socialcut."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path

from socialcut.executor.encode_loop import EncodeLoopSettings
from socialcut.planning.codecs import default_thread_count

MIB = 1024 * 1024


@dataclass
class ToolPathsConfig:
    """Configuration for external tool paths."""

    ffmpeg: Path | None = None
    ffprobe: Path | None = None


@dataclass
class EncodingConfig:
    """Encoder settings shared by every job."""

    # Encoder threads (None = 75% of CPU cores)
    threads: int | None = None

    # Per engine invocation
    timeout_seconds: int = 1800

    # Size-constrained CRF escalation
    min_crf: int = 18
    max_crf: int = 28
    crf_step: int = 5
    max_attempts: int = 3

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.threads is not None and self.threads < 1:
            raise ValueError(f"threads must be >= 1, got {self.threads}")
        if self.timeout_seconds < 1:
            raise ValueError(
                f"timeout_seconds must be >= 1, got {self.timeout_seconds}"
            )
        # Raises ValueError on inconsistent CRF bounds
        self.loop_settings()

    def loop_settings(self) -> EncodeLoopSettings:
        return EncodeLoopSettings(
            min_crf=self.min_crf,
            max_crf=self.max_crf,
            crf_step=self.crf_step,
            max_attempts=self.max_attempts,
        )

    def effective_threads(self) -> int:
        return self.threads if self.threads is not None else default_thread_count()


@dataclass
class TemplateConfig:
    """Composition defaults for templated outputs."""

    canonical_width: int = 1280
    canonical_height: int = 720

    # Absolute ceiling for a composed artifact
    max_total_size: int = 50 * MIB

    # Parent directory for job workspaces (None = system temp)
    temp_directory: Path | None = None

    def __post_init__(self) -> None:
        """Validate configuration."""
        for name in ("canonical_width", "canonical_height"):
            value = getattr(self, name)
            if value < 2 or value % 2:
                raise ValueError(f"{name} must be an even number >= 2, got {value}")
        if self.max_total_size <= 0:
            raise ValueError(
                f"max_total_size must be positive, got {self.max_total_size}"
            )


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        valid_levels = {"debug", "info", "warning", "error"}
        if self.level.lower() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got {self.level}")
        valid_formats = {"text", "json"}
        if self.format.lower() not in valid_formats:
            raise ValueError(
                f"format must be one of {valid_formats}, got {self.format}"
            )

    def with_overrides(
        self,
        *,
        level: str | None = None,
        file: Path | None = None,
        format: str | None = None,
    ) -> LoggingConfig:
        """Copy with the CLI flags that were given applied on top."""
        given = {"level": level, "file": file, "format": format}
        return replace(self, **{k: v for k, v in given.items() if v is not None})


@dataclass
class SocialcutConfig:
    """Main configuration container."""

    tools: ToolPathsConfig = field(default_factory=ToolPathsConfig)
    encoding: EncodingConfig = field(default_factory=EncodingConfig)
    template: TemplateConfig = field(default_factory=TemplateConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # YAML file with additional platform profiles
    platforms_file: Path | None = None
