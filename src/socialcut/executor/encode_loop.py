"""Size-constrained encoding.

SizeConstrainedEncoder escalates CRF until an output fits a byte ceiling or
the attempts run out, and always finishes with an output. enforce_size_ceiling
is the one-shot global tightening pass applied to a finished artifact.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from socialcut.core.formatting import format_file_size
from socialcut.domain.models import EncodeAttempt
from socialcut.errors import (
    EncodeFailedError,
    FallbackExhaustedError,
    OutputTooLargeError,
)
from socialcut.executor.command import EncodeRequest, InputSpec, double_bitrate
from socialcut.executor.fallback import Strategy, run_fallback_chain
from socialcut.executor.ffmpeg_utils import (
    cleanup_temp_file,
    file_size,
    move_into_place,
)
from socialcut.executor.interface import MediaEngine
from socialcut.planning.bitrate import plan_budget_bitrate

logger = logging.getLogger(__name__)

# Highest CRF libx264 accepts; libvpx-vp9 goes to 63
MAX_TIGHTEN_CRF = 51


@dataclass(frozen=True)
class EncodeLoopSettings:
    """CRF escalation bounds."""

    min_crf: int = 18
    max_crf: int = 28
    crf_step: int = 5
    max_attempts: int = 3

    def __post_init__(self) -> None:
        if not 0 <= self.min_crf <= self.max_crf <= 63:
            raise ValueError(
                f"CRF bounds must satisfy 0 <= min <= max <= 63, "
                f"got {self.min_crf}..{self.max_crf}"
            )
        if self.crf_step <= 0:
            raise ValueError(f"crf_step must be positive, got {self.crf_step}")
        if self.max_attempts <= 0:
            raise ValueError(f"max_attempts must be positive, got {self.max_attempts}")

    def tighten_crf(self, last_crf: int | None = None) -> int:
        """CRF for the global tightening pass.

        Always one step above the CRF the artifact was last encoded at, and
        never below min_crf + crf_step.
        """
        crf = self.min_crf + self.crf_step
        if last_crf is not None:
            crf = max(crf, last_crf + self.crf_step)
        return min(crf, MAX_TIGHTEN_CRF)


@dataclass(frozen=True)
class EncodeOutcome:
    """Result of a size-constrained encode."""

    output: Path
    attempts: tuple[EncodeAttempt, ...]
    max_size: int

    @property
    def final(self) -> EncodeAttempt:
        return self.attempts[-1]

    @property
    def within_limit(self) -> bool:
        return self.final.size_bytes <= self.max_size


class SizeConstrainedEncoder:
    """Re-encode with rising CRF until the output fits a size ceiling."""

    def __init__(
        self, engine: MediaEngine, settings: EncodeLoopSettings | None = None
    ) -> None:
        self._engine = engine
        self._settings = settings or EncodeLoopSettings()

    @property
    def settings(self) -> EncodeLoopSettings:
        return self._settings

    def encode(self, request: EncodeRequest, max_size: int) -> EncodeOutcome:
        """Encode request.output, escalating CRF while it is too large.

        Stops at the first attempt that fits, after max_attempts, or once
        max_crf has been tried; the last output is accepted in every case.

        Args:
            request: Encode request; its crf is overridden per attempt.
            max_size: Size ceiling in bytes.

        Returns:
            EncodeOutcome with the attempt history.

        Raises:
            EncodeFailedError: If the engine fails. Failures are never retried.
        """
        settings = self._settings
        crf = settings.min_crf
        attempts: list[EncodeAttempt] = []

        for attempt_number in range(1, settings.max_attempts + 1):
            self._engine.encode(request.with_crf(crf))
            size = file_size(request.output)
            fits = size <= max_size
            exhausted = (
                crf >= settings.max_crf or attempt_number == settings.max_attempts
            )

            if fits or exhausted:
                attempts.append(
                    EncodeAttempt(crf=crf, size_bytes=size, accepted=True)
                )
                if not fits:
                    logger.warning(
                        "%s: %s still exceeds %s at CRF %d, accepting",
                        request.description,
                        format_file_size(size),
                        format_file_size(max_size),
                        crf,
                    )
                else:
                    logger.debug(
                        "%s: %s at CRF %d fits %s",
                        request.description,
                        format_file_size(size),
                        crf,
                        format_file_size(max_size),
                    )
                break

            attempts.append(EncodeAttempt(crf=crf, size_bytes=size, accepted=False))
            next_crf = min(crf + settings.crf_step, settings.max_crf)
            logger.info(
                "%s: %s exceeds %s at CRF %d, retrying with CRF %d",
                request.description,
                format_file_size(size),
                format_file_size(max_size),
                crf,
                next_crf,
            )
            crf = next_crf

        return EncodeOutcome(
            output=request.output, attempts=tuple(attempts), max_size=max_size
        )


def enforce_size_ceiling(
    engine: MediaEngine,
    path: Path,
    ceiling: int,
    video_codec: str,
    settings: EncodeLoopSettings | None = None,
    codec_options: tuple[str, ...] = (),
    threads: int | None = None,
    last_crf: int | None = None,
) -> int:
    """Ensure a finished artifact fits the absolute size ceiling.

    Keeps the file as-is when it fits; otherwise re-encodes the video once,
    one CRF step above last_crf and capped at the bitrate that fits the
    ceiling, with audio copied, replacing the file in place.

    Args:
        engine: Media engine.
        path: Finished artifact.
        ceiling: Absolute size ceiling in bytes.
        video_codec: Encoder for the re-encode.
        settings: CRF bounds.
        codec_options: Encoder tuning options.
        threads: Encoder thread count.
        last_crf: CRF the artifact's video was last encoded at.

    Returns:
        Final size in bytes.

    Raises:
        OutputTooLargeError: If the artifact still exceeds the ceiling.
        EncodeFailedError: If the re-encode itself fails.
    """
    settings = settings or EncodeLoopSettings()
    crf = settings.tighten_crf(last_crf)
    tightened = path.with_name(f"{path.stem}.tightened{path.suffix}")

    def tighten() -> int:
        budget = plan_budget_bitrate(ceiling, engine.probe(path).duration)
        request = EncodeRequest(
            inputs=(InputSpec(path),),
            output=tightened,
            description="size tightening pass",
            video_codec=video_codec,
            audio_codec="copy",
            crf=crf,
            maxrate=budget.bitrate,
            bufsize=double_bitrate(budget.bitrate),
            codec_options=codec_options,
            threads=threads,
        )
        try:
            engine.encode(request)
            move_into_place(tightened, path)
        finally:
            cleanup_temp_file(tightened)
        return file_size(path)

    def fits(size: int) -> bool:
        return size <= ceiling

    def describe(size: int) -> str:
        return f"{format_file_size(size)} exceeds {format_file_size(ceiling)}"

    try:
        result = run_fallback_chain(
            [
                Strategy("as-is", lambda: file_size(path), fits, describe),
                Strategy(f"re-encode at CRF {crf}", tighten, fits, describe),
            ],
            description=f"size ceiling for {path.name}",
        )
    except FallbackExhaustedError as e:
        if isinstance(e.__cause__, EncodeFailedError):
            raise e.__cause__ from None
        raise OutputTooLargeError(file_size(path), ceiling) from e
    return result.value
