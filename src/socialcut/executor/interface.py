"""Engine protocol and tool availability utilities.

This module defines the interface the jobs use to talk to the media engine
and the helpers that locate the external ffmpeg/ffprobe binaries.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Protocol

from socialcut.domain.models import MediaMetadata
from socialcut.errors import ToolNotAvailableError
from socialcut.executor.command import EncodeRequest


class MediaEngine(Protocol):
    """Protocol for media engine adapters.

    An engine probes media files and executes encode requests. Every
    failure surfaces as a SocialcutError subclass.
    """

    def probe(self, path: Path) -> MediaMetadata:
        """Probe a media file.

        Args:
            path: File to inspect.

        Returns:
            Fresh metadata snapshot.

        Raises:
            MetadataUnavailableError: If the file cannot be probed.
        """
        ...

    def encode(self, request: EncodeRequest) -> None:
        """Execute one engine invocation, writing request.output.

        Raises:
            EncodeFailedError: On non-zero exit, timeout or missing output.
        """
        ...


def get_tool_path(tool_name: str) -> Path | None:
    """Get path to an external tool.

    Configured paths ([tools] section or SOCIALCUT_<TOOL>_PATH) take
    precedence over the system PATH.

    Args:
        tool_name: Name of the tool (ffmpeg, ffprobe).

    Returns:
        Path to the tool, or None if not available.
    """
    from socialcut.config import get_config

    configured = getattr(get_config().tools, tool_name, None)
    if configured is not None:
        configured_path = Path(configured).expanduser()
        if configured_path.exists():
            return configured_path
        found = shutil.which(str(configured))
        if found:
            return Path(found)
        return None

    found = shutil.which(tool_name)
    return Path(found) if found else None


def require_tool(tool_name: str) -> Path:
    """Get path to an external tool, raising if not available.

    Args:
        tool_name: Name of the tool (ffmpeg, ffprobe).

    Returns:
        Path to the tool.

    Raises:
        ToolNotAvailableError: If the tool is not available.
    """
    path = get_tool_path(tool_name)
    if path is None:
        raise ToolNotAvailableError(
            f"Required tool '{tool_name}' is not available. "
            f"Install ffmpeg or configure the path via "
            f"SOCIALCUT_{tool_name.upper()}_PATH or ~/.socialcut/config.toml"
        )
    return path
