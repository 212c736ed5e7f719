"""Splitter job: cut a source video into fixed-length chunks.

Without a platform each chunk is cut with a fallback chain (stream copy,
then a fast re-encode). With a platform each chunk window is encoded
straight from the source to the platform's dimensions, codecs and capped
bitrate, so chunks start on the requested frame. Chunks are built
inside a job workspace and moved to the output directory only once every
chunk has succeeded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from socialcut.core.filenames import chunk_filename
from socialcut.core.formatting import format_duration, format_file_size
from socialcut.domain.enums import OutputFormat
from socialcut.domain.models import ChunkSpec, MediaMetadata, PlatformProfile
from socialcut.errors import (
    ChunkTooLongError,
    EncodeFailedError,
    FallbackExhaustedError,
)
from socialcut.executor.command import EncodeRequest, InputSpec, double_bitrate
from socialcut.executor.fallback import Strategy, run_fallback_chain
from socialcut.executor.ffmpeg_utils import file_size, move_into_place
from socialcut.executor.interface import MediaEngine
from socialcut.jobs.workspace import JobWorkspace
from socialcut.logging import job_context, stage_context
from socialcut.planning.bitrate import plan_platform_bitrate
from socialcut.planning.chunks import plan_chunks
from socialcut.planning.codecs import (
    OutputSettings,
    codec_options,
    default_thread_count,
    resolve_output_settings,
)
from socialcut.planning.dimensions import fit_dimensions

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_DURATION = 15.0

# CRF of the re-encode used when a stream copy cut fails
REENCODE_CRF = 23

PLATFORM_STRATEGY = "platform encode"


@dataclass(frozen=True)
class SplitOptions:
    """Parameters of one split job."""

    input_path: Path
    output_dir: Path
    chunk_duration: float = DEFAULT_CHUNK_DURATION
    skip: float = 0.0
    platform: PlatformProfile | None = None
    output_format: OutputFormat | None = None


@dataclass(frozen=True)
class ChunkOutput:
    """A finished chunk in the output directory."""

    chunk: ChunkSpec
    path: Path
    size_bytes: int
    strategy: str


@dataclass
class SplitResult:
    """Outcome of a split job."""

    outputs: list[ChunkOutput] = field(default_factory=list)

    @property
    def paths(self) -> list[Path]:
        return [output.path for output in self.outputs]


class Splitter:
    """Split a video into chunks, optionally conforming each to a platform."""

    def __init__(
        self,
        engine: MediaEngine,
        *,
        threads: int | None = None,
        temp_root: Path | None = None,
    ) -> None:
        """Initialize the splitter.

        Args:
            engine: Media engine used for probing and encoding.
            threads: Encoder thread count (None = 75% of CPU cores).
            temp_root: Parent directory for the job workspace.
        """
        self._engine = engine
        self._threads = threads if threads is not None else default_thread_count()
        self._temp_root = temp_root

    def run(self, options: SplitOptions) -> SplitResult:
        """Split options.input_path into chunks in options.output_dir.

        Returns:
            SplitResult listing the chunks in order.

        Raises:
            ChunkTooLongError: If the chunk duration exceeds the platform's
                maximum duration.
            InvalidSkipError: If the skip offset is not shorter than the source.
            MetadataUnavailableError: If the source or a chunk cannot be probed.
            EncodeFailedError: If a chunk cannot be produced.
        """
        platform = options.platform
        if platform is not None and options.chunk_duration > platform.max_duration:
            raise ChunkTooLongError(
                f"Chunk duration {options.chunk_duration:g}s exceeds the "
                f"{platform.name} maximum of {platform.max_duration:g}s"
            )
        settings = resolve_output_settings(options.output_format, platform)

        source = self._engine.probe(options.input_path)
        chunks = plan_chunks(source.duration, options.chunk_duration, options.skip)
        logger.info(
            "Splitting %s (%s) into %d chunk(s) of %s",
            options.input_path.name,
            format_duration(source.duration),
            len(chunks),
            format_duration(options.chunk_duration),
        )

        with job_context("split"), JobWorkspace(self._temp_root) as workspace:
            built: list[tuple[ChunkSpec, Path, str]] = []
            for chunk in chunks:
                with stage_context(f"chunk-{chunk.index:03d}"):
                    name = chunk_filename(
                        options.input_path, chunk.index, settings.extension
                    )
                    path, strategy = self._build_chunk(
                        options.input_path,
                        source,
                        chunk,
                        name,
                        settings,
                        platform,
                        workspace,
                    )
                    built.append((chunk, path, strategy))

            result = SplitResult()
            for chunk, path, strategy in built:
                destination = move_into_place(path, options.output_dir / path.name)
                result.outputs.append(
                    ChunkOutput(
                        chunk=chunk,
                        path=destination,
                        size_bytes=file_size(destination),
                        strategy=strategy,
                    )
                )

        logger.info(
            "Wrote %d chunk(s) to %s", len(result.outputs), options.output_dir
        )
        return result

    def _build_chunk(
        self,
        source: Path,
        metadata: MediaMetadata,
        chunk: ChunkSpec,
        name: str,
        settings: OutputSettings,
        platform: PlatformProfile | None,
        workspace: JobWorkspace,
    ) -> tuple[Path, str]:
        """Produce one chunk inside the workspace.

        Returns:
            (path of the finished chunk, name of the cutting strategy).
        """
        output = workspace.path(name)
        if platform is None:
            strategy = self._cut(source, chunk, output, settings)
            return output, strategy

        window = InputSpec(source, start=chunk.start, duration=chunk.duration)
        self._conform(window, metadata, output, settings, platform)

        size = file_size(output)
        if size > platform.max_file_size:
            logger.warning(
                "Chunk %d is %s, above the %s limit of %s",
                chunk.index,
                format_file_size(size),
                platform.name,
                format_file_size(platform.max_file_size),
            )
        return output, PLATFORM_STRATEGY

    def _cut(
        self,
        source: Path,
        chunk: ChunkSpec,
        output: Path,
        settings: OutputSettings,
    ) -> str:
        """Cut a chunk window, stream copying when possible.

        Raises:
            EncodeFailedError: If both the copy and the re-encode fail.
        """
        window = InputSpec(source, start=chunk.start, duration=chunk.duration)

        def copy() -> Path:
            self._engine.encode(
                EncodeRequest(
                    inputs=(window,),
                    output=output,
                    description=f"copy chunk {chunk.index}",
                    video_codec="copy",
                    audio_codec="copy",
                    pix_fmt=None,
                    output_options=("-avoid_negative_ts", "make_zero")
                    + settings.muxer_options,
                )
            )
            return output

        def reencode() -> Path:
            self._engine.encode(
                EncodeRequest(
                    inputs=(window,),
                    output=output,
                    description=f"re-encode chunk {chunk.index}",
                    video_codec=settings.video_codec,
                    audio_codec=settings.audio_codec,
                    audio_bitrate=settings.audio_bitrate,
                    crf=REENCODE_CRF,
                    codec_options=codec_options(settings.video_codec, fast=True),
                    threads=self._threads,
                    output_options=settings.muxer_options,
                )
            )
            return output

        try:
            result = run_fallback_chain(
                [Strategy("stream copy", copy), Strategy("re-encode", reencode)],
                description=f"chunk {chunk.index}",
            )
        except FallbackExhaustedError as e:
            raise EncodeFailedError(
                f"Cutting chunk {chunk.index}",
                stderr=str(e),
            ) from e
        return result.strategy

    def _conform(
        self,
        window: InputSpec,
        metadata: MediaMetadata,
        output: Path,
        settings: OutputSettings,
        platform: PlatformProfile,
    ) -> None:
        """Encode a source window to the platform's constraints."""
        fit = fit_dimensions(
            metadata.width,
            metadata.height,
            platform.max_width,
            platform.max_height,
            force_portrait=platform.force_portrait,
        )
        plan = plan_platform_bitrate(platform.video_bitrate, metadata.bitrate)
        logger.debug(
            "Conforming to %s: %dx%d at %s",
            platform.name,
            fit.width,
            fit.height,
            plan.bitrate,
        )
        self._engine.encode(
            EncodeRequest(
                inputs=(window,),
                output=output,
                description=f"encode {output.name} for {platform.name}",
                video_codec=settings.video_codec,
                audio_codec=settings.audio_codec,
                video_bitrate=plan.bitrate,
                maxrate=plan.bitrate,
                bufsize=double_bitrate(plan.bitrate),
                audio_bitrate=settings.audio_bitrate,
                video_filter=fit.to_filter(),
                codec_options=codec_options(settings.video_codec),
                threads=self._threads,
                no_audio=not metadata.has_audio,
                output_options=settings.muxer_options,
            )
        )
