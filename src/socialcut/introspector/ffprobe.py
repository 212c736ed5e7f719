"""FFprobe-based implementation of the MediaIntrospector protocol."""

import json
import logging
import subprocess  # nosec B404 - subprocess is required for ffprobe invocation
from pathlib import Path

from socialcut.domain.models import MediaMetadata
from socialcut.errors import MetadataUnavailableError, ToolNotAvailableError
from socialcut.introspector.parsers import parse_ffprobe_output

logger = logging.getLogger(__name__)


class FFprobeIntrospector:
    """ffprobe-based implementation of MediaIntrospector protocol.

    Supports configured ffprobe paths via the socialcut configuration.
    """

    PROBE_TIMEOUT = 60

    def __init__(self, ffprobe_path: Path | None = None) -> None:
        """Initialize the introspector.

        Args:
            ffprobe_path: Optional explicit path to ffprobe. If not provided,
                uses the configured path or the system PATH.

        Raises:
            ToolNotAvailableError: If ffprobe is not available.
        """
        self._ffprobe_path = ffprobe_path or self._get_configured_path()

        if self._ffprobe_path is None:
            raise ToolNotAvailableError(
                "ffprobe is not installed or not in PATH. "
                "Install ffmpeg, or configure a custom path via the "
                "SOCIALCUT_FFPROBE_PATH environment variable or "
                "~/.socialcut/config.toml"
            )

    @staticmethod
    def _get_configured_path() -> Path | None:
        from socialcut.executor.interface import get_tool_path

        return get_tool_path("ffprobe")

    def get_metadata(self, path: Path) -> MediaMetadata:
        """Probe a media file.

        Args:
            path: Path to the media file.

        Returns:
            MediaMetadata for the file.

        Raises:
            MetadataUnavailableError: If the file cannot be probed.
            InvalidMetadataError: If the probed values are degenerate.
        """
        if not path.exists():
            raise MetadataUnavailableError(f"File not found: {path}")

        try:
            ffprobe_output = self._run_ffprobe(path)
        except subprocess.TimeoutExpired as e:
            raise MetadataUnavailableError(
                f"ffprobe timed out for {path} after {e.timeout}s"
            ) from e
        except subprocess.CalledProcessError as e:
            raise MetadataUnavailableError(
                f"ffprobe failed for {path}: {(e.stderr or str(e)).strip()}"
            ) from e
        except json.JSONDecodeError as e:
            raise MetadataUnavailableError(
                f"Invalid ffprobe output for {path}: {e}"
            ) from e
        except OSError as e:
            raise MetadataUnavailableError(f"Could not run ffprobe: {e}") from e

        metadata = parse_ffprobe_output(path, ffprobe_output)
        logger.debug(
            "Probed %s: %dx%d %.2fs codec=%s bitrate=%s",
            path.name,
            metadata.width,
            metadata.height,
            metadata.duration,
            metadata.codec,
            metadata.bitrate,
        )
        return metadata

    def _run_ffprobe(self, path: Path) -> dict:
        """Run ffprobe and return parsed JSON output.

        Raises:
            subprocess.CalledProcessError: If ffprobe returns non-zero.
            json.JSONDecodeError: If output is not valid JSON.
            MetadataUnavailableError: If output is missing required keys.
        """
        result = subprocess.run(  # nosec B603 - ffprobe path is validated
            [
                str(self._ffprobe_path),
                "-v",
                "error",
                "-print_format",
                "json",
                "-show_streams",
                "-show_format",
                str(path),
            ],
            capture_output=True,
            text=True,
            errors="replace",  # Handle non-UTF8 characters by replacing them
            check=True,
            timeout=self.PROBE_TIMEOUT,
        )
        data = json.loads(result.stdout)

        if "streams" not in data or "format" not in data:
            raise MetadataUnavailableError(
                f"Incomplete ffprobe output for {path}. "
                "File may be corrupted or not a valid media file."
            )

        return data
