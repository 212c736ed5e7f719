"""FFmpeg-backed implementation of the MediaEngine protocol.

Runs one ffmpeg process at a time. stderr is read line by line for progress
and error context while a timer enforces the per-invocation timeout.
"""

import logging
import subprocess  # nosec B404 - subprocess is required for FFmpeg invocation
import threading
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from socialcut.domain.models import MediaMetadata
from socialcut.errors import EncodeFailedError
from socialcut.executor import ffmpeg_utils
from socialcut.executor.command import EncodeRequest, build_ffmpeg_command
from socialcut.executor.interface import require_tool
from socialcut.executor.progress import FFmpegProgress, parse_stderr_progress
from socialcut.introspector.ffprobe import FFprobeIntrospector

logger = logging.getLogger(__name__)

# Lines of engine stderr kept for error messages
STDERR_TAIL_LINES = 20


@dataclass(frozen=True)
class ProcessRun:
    """Exit status and stderr tail of one ffmpeg invocation."""

    returncode: int
    stderr: str
    timed_out: bool = False

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0 and not self.timed_out


class FFmpegEngine:
    """Media engine driving ffmpeg and ffprobe subprocesses."""

    DEFAULT_TIMEOUT: int = 1800  # 30 minutes
    PROGRESS_LOG_INTERVAL: float = 10.0

    def __init__(
        self,
        ffmpeg_path: Path | None = None,
        introspector: FFprobeIntrospector | None = None,
        timeout: int | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            ffmpeg_path: Explicit ffmpeg path; None resolves it lazily.
            introspector: Probe implementation; None creates an
                FFprobeIntrospector on first use.
            timeout: Per-invocation timeout in seconds. None uses DEFAULT_TIMEOUT.
        """
        self._tool_path = ffmpeg_path
        self._introspector = introspector
        self._timeout = timeout if timeout is not None else self.DEFAULT_TIMEOUT

    @property
    def tool_path(self) -> Path:
        """Get path to ffmpeg, verifying availability.

        Raises:
            ToolNotAvailableError: If ffmpeg is not available.
        """
        if self._tool_path is None:
            self._tool_path = require_tool("ffmpeg")
        return self._tool_path

    @property
    def introspector(self) -> FFprobeIntrospector:
        if self._introspector is None:
            self._introspector = FFprobeIntrospector()
        return self._introspector

    def probe(self, path: Path) -> MediaMetadata:
        return self.introspector.get_metadata(path)

    def encode(self, request: EncodeRequest) -> None:
        """Run one encode request to completion.

        Raises:
            EncodeFailedError: On non-zero exit, timeout or invalid output.
        """
        cmd = build_ffmpeg_command(request, self.tool_path)
        logger.debug("Running %s: %s", request.description, " ".join(cmd))

        next_report = time.monotonic() + self.PROGRESS_LOG_INTERVAL

        def log_progress(progress: FFmpegProgress) -> None:
            nonlocal next_report
            if time.monotonic() < next_report:
                return
            next_report += self.PROGRESS_LOG_INTERVAL
            logger.debug(
                "%s: frame=%s time=%.1fs speed=%s",
                request.description,
                progress.frame,
                progress.out_time_seconds or 0.0,
                progress.speed,
            )

        request.output.parent.mkdir(parents=True, exist_ok=True)
        run = self._run(cmd, request.description, log_progress)
        if not run.succeeded:
            raise EncodeFailedError(request.description, run.returncode, run.stderr)

        valid, error = ffmpeg_utils.validate_output(request.output)
        if not valid:
            raise EncodeFailedError(request.description, run.returncode, error or "")

    def _run(
        self,
        cmd: list[str],
        description: str,
        on_progress: Callable[[FFmpegProgress], None] | None = None,
    ) -> ProcessRun:
        """Run ffmpeg, feeding stderr progress lines to on_progress.

        A timer kills the process once the timeout expires, which closes
        stderr and ends the read loop. Progress lines are not kept in the
        stderr tail.

        Raises:
            EncodeFailedError: If the process cannot be started.
        """
        try:
            process = subprocess.Popen(  # nosec B603
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
            )
        except OSError as e:
            raise EncodeFailedError(description, None, str(e)) from e

        expired = threading.Event()

        def kill() -> None:
            expired.set()
            process.kill()

        watchdog = threading.Timer(self._timeout, kill)
        watchdog.daemon = True
        tail: deque[str] = deque(maxlen=STDERR_TAIL_LINES)
        watchdog.start()
        try:
            with process:
                for raw in process.stderr:
                    line = raw.rstrip()
                    if not line:
                        continue
                    progress = parse_stderr_progress(line)
                    if progress is None:
                        tail.append(line)
                    elif on_progress is not None:
                        on_progress(progress)
        finally:
            watchdog.cancel()

        if expired.is_set():
            logger.warning("%s timed out after %ss", description, self._timeout)
            tail.append(f"Timed out after {self._timeout} seconds")
        return ProcessRun(
            returncode=process.returncode,
            stderr="\n".join(tail),
            timed_out=expired.is_set(),
        )
