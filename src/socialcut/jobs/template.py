"""Templater job: compose several videos into a grid layout.

Pipeline:
    1. validate the input count and resolve the output container
    2. probe each input (optionally obscurify it and re-probe)
    3. plan the composition
    4. encode each cell under its size budget
    5. stack the cells, with the overlay, under the total size ceiling
    6. optionally render an outro card and concatenate it by stream copy
    7. enforce the absolute size ceiling and move the result into place
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from pathlib import Path

from socialcut.core.filenames import ensure_extension
from socialcut.core.formatting import format_file_size
from socialcut.domain.enums import Anchor, OutputFormat, TemplateType
from socialcut.domain.models import (
    CompositionPlan,
    MediaMetadata,
    OutroSpec,
    PlatformProfile,
)
from socialcut.errors import UnsupportedFormatError
from socialcut.executor.command import EncodeRequest, InputSpec, double_bitrate
from socialcut.executor.encode_loop import (
    EncodeOutcome,
    SizeConstrainedEncoder,
    enforce_size_ceiling,
)
from socialcut.executor.ffmpeg_utils import file_size, move_into_place
from socialcut.executor.interface import MediaEngine
from socialcut.jobs.workspace import JobWorkspace
from socialcut.logging import job_context, stage_context
from socialcut.planning.bitrate import plan_budget_bitrate
from socialcut.planning.codecs import (
    OutputSettings,
    codec_options,
    default_thread_count,
    resolve_output_settings,
)
from socialcut.planning.composition import (
    CANONICAL_HEIGHT,
    CANONICAL_WIDTH,
    MAX_TOTAL_SIZE,
    build_overlay,
    canonical_size,
    derive_outro_parameters,
    plan_composition,
    select_inputs,
    stack_filter_graph,
)
from socialcut.planning.effects import obscurify_filters
from socialcut.planning.text import (
    outro_color_source,
    outro_silence_source,
    outro_video_filter,
)

logger = logging.getLogger(__name__)

DEFAULT_OUTRO_DURATION = 3.0


@dataclass(frozen=True)
class TemplateOptions:
    """Parameters of one template job."""

    output_path: Path
    template: TemplateType
    inputs: tuple[Path, ...]
    output_format: OutputFormat | None = None
    platform: PlatformProfile | None = None
    obscurify: bool = False
    overlay_text: str | None = None
    overlay_anchor: Anchor = Anchor.BOTTOM_RIGHT
    overlay_color: str | None = None
    outro_lines: tuple[str, ...] = ()
    outro_duration: float = DEFAULT_OUTRO_DURATION


@dataclass(frozen=True)
class TemplateResult:
    """Outcome of a template job."""

    output: Path
    size_bytes: int
    plan: CompositionPlan
    cells: tuple[EncodeOutcome, ...]
    main: EncodeOutcome


def _infer_format(options: TemplateOptions) -> OutputFormat | None:
    """Explicit format, else the output path's extension when it is known."""
    if options.output_format is not None:
        return options.output_format
    if options.platform is not None or not options.output_path.suffix:
        return None
    try:
        return OutputFormat.from_string(options.output_path.suffix)
    except UnsupportedFormatError:
        return None


def _concat_entry(path: Path) -> str:
    """One concat demuxer list line for path."""
    quoted = str(path.resolve()).replace("'", "'\\''")
    return f"file '{quoted}'"


class Templater:
    """Compose input videos into a 1x1, 2x2 or 3x1 layout."""

    def __init__(
        self,
        engine: MediaEngine,
        *,
        encoder: SizeConstrainedEncoder | None = None,
        threads: int | None = None,
        temp_root: Path | None = None,
        canonical: tuple[int, int] = (CANONICAL_WIDTH, CANONICAL_HEIGHT),
        max_total_size: int = MAX_TOTAL_SIZE,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the templater.

        Args:
            engine: Media engine used for probing and encoding.
            encoder: Size-constrained encoder (default settings if None).
            threads: Encoder thread count (None = 75% of CPU cores).
            temp_root: Parent directory for the job workspace.
            canonical: Landscape canonical frame size.
            max_total_size: Absolute ceiling for the composed artifact.
            rng: Random source for the overlay color.
        """
        self._engine = engine
        self._encoder = encoder or SizeConstrainedEncoder(engine)
        self._threads = threads if threads is not None else default_thread_count()
        self._temp_root = temp_root
        self._canonical = canonical
        self._max_total_size = max_total_size
        self._rng = rng or random.Random()

    def run(self, options: TemplateOptions) -> TemplateResult:
        """Compose options.inputs into options.output_path.

        Returns:
            TemplateResult with the final path, size and encode history.

        Raises:
            InvalidInputCountError: If the input count does not suit the
                template (raised before any engine work).
            MetadataUnavailableError: If an input cannot be probed.
            EncodeFailedError: If any engine invocation fails.
            OutputTooLargeError: If the result exceeds the size ceiling
                after the tightening pass.
        """
        kept, dropped = select_inputs(options.template, options.inputs)
        settings = resolve_output_settings(_infer_format(options), options.platform)
        output_path = ensure_extension(options.output_path, settings.extension)

        with job_context("template"), JobWorkspace(self._temp_root) as workspace:
            sources: list[Path] = []
            metadata: list[MediaMetadata] = []
            for index, path in enumerate(kept):
                with stage_context(f"input-{index}"):
                    source, meta = self._prepare_input(
                        index, path, options.obscurify, settings, workspace
                    )
                sources.append(source)
                metadata.append(meta)

            plan = self._plan(options, sources, metadata)
            plan = replace(plan, sources_dropped=tuple(dropped))

            cell_outcomes: list[EncodeOutcome] = []
            cell_metadata: list[MediaMetadata] = []
            for cell in plan.cells:
                with stage_context(f"cell-{cell.index}"):
                    outcome = self._encode_cell(
                        plan, cell.index, metadata[cell.index], settings, workspace
                    )
                    cell_outcomes.append(outcome)
                    cell_metadata.append(self._engine.probe(outcome.output))

            with stage_context("compose"):
                main = self._compose(plan, cell_outcomes, cell_metadata, settings)

            final = main.output
            if plan.outro is not None:
                with stage_context("outro"):
                    final = self._append_outro(
                        plan.outro, main.output, settings, workspace
                    )

            with stage_context("finalize"):
                size = enforce_size_ceiling(
                    self._engine,
                    final,
                    plan.max_total_size,
                    settings.video_codec,
                    settings=self._encoder.settings,
                    codec_options=codec_options(settings.video_codec),
                    threads=self._threads,
                    last_crf=main.final.crf,
                )
                destination = move_into_place(final, output_path)

        logger.info(
            "Wrote %s template to %s (%s)",
            plan.template.value,
            destination,
            format_file_size(size),
        )
        return TemplateResult(
            output=destination,
            size_bytes=size,
            plan=plan,
            cells=tuple(cell_outcomes),
            main=main,
        )

    def _prepare_input(
        self,
        index: int,
        path: Path,
        obscurify: bool,
        settings: OutputSettings,
        workspace: JobWorkspace,
    ) -> tuple[Path, MediaMetadata]:
        """Probe an input, applying the obscurify pass when requested."""
        metadata = self._engine.probe(path)
        if not obscurify:
            return path, metadata

        filters = obscurify_filters(metadata)
        output = workspace.path(f"obscured_{index}.{settings.extension}")
        self._engine.encode(
            EncodeRequest(
                inputs=(InputSpec(path),),
                output=output,
                description=f"obscurify input {index}",
                video_codec=settings.video_codec,
                audio_codec=settings.audio_codec,
                audio_bitrate=settings.audio_bitrate,
                crf=self._encoder.settings.min_crf,
                video_filter=filters.video,
                audio_filter=filters.audio,
                codec_options=codec_options(settings.video_codec),
                threads=self._threads,
                no_audio=filters.audio is None,
                output_options=settings.muxer_options,
            )
        )
        return output, self._engine.probe(output)

    def _plan(
        self,
        options: TemplateOptions,
        sources: list[Path],
        metadata: list[MediaMetadata],
    ) -> CompositionPlan:
        width, height = canonical_size(options.platform, *self._canonical)
        overlay = None
        if options.overlay_text:
            overlay = build_overlay(
                options.overlay_text,
                portrait=height > width,
                anchor=options.overlay_anchor,
                color=options.overlay_color,
                rng=self._rng,
            )
        outro = None
        if options.outro_lines:
            outro = OutroSpec(
                lines=tuple(options.outro_lines), duration=options.outro_duration
            )
        return plan_composition(
            options.template,
            sources,
            metadata,
            platform=options.platform,
            canonical=self._canonical,
            overlay=overlay,
            outro=outro,
            max_total_size=self._max_total_size,
        )

    def _encode_cell(
        self,
        plan: CompositionPlan,
        index: int,
        metadata: MediaMetadata,
        settings: OutputSettings,
        workspace: JobWorkspace,
    ) -> EncodeOutcome:
        """Scale one source into its cell under the cell's size budget."""
        cell = plan.cells[index]
        budget = plan_budget_bitrate(cell.max_size, metadata.duration)
        request = EncodeRequest(
            inputs=(InputSpec(cell.source),),
            output=workspace.path(f"cell_{index}.{settings.extension}"),
            description=f"encode cell {index}",
            video_codec=settings.video_codec,
            audio_codec=settings.audio_codec,
            audio_bitrate=settings.audio_bitrate,
            maxrate=budget.bitrate,
            bufsize=double_bitrate(budget.bitrate),
            video_filter=cell.fit.to_filter(),
            codec_options=codec_options(settings.video_codec),
            threads=self._threads,
            no_audio=not metadata.has_audio,
            output_options=settings.muxer_options,
        )
        return self._encoder.encode(request, cell.max_size)

    def _compose(
        self,
        plan: CompositionPlan,
        cells: list[EncodeOutcome],
        cell_metadata: list[MediaMetadata],
        settings: OutputSettings,
    ) -> EncodeOutcome:
        """Stack the encoded cells (and overlay) into the main segment.

        Audio is taken from the first cell that has any.
        """
        audio_index = next(
            (i for i, meta in enumerate(cell_metadata) if meta.has_audio), None
        )
        maps: tuple[str, ...] = ("[vout]",)
        if audio_index is not None:
            maps += (f"{audio_index}:a",)

        duration = min(meta.duration for meta in cell_metadata)
        budget = plan_budget_bitrate(plan.max_total_size, duration)
        output = cells[0].output.with_name(f"main.{settings.extension}")
        request = EncodeRequest(
            inputs=tuple(InputSpec(outcome.output) for outcome in cells),
            output=output,
            description=f"compose {plan.template.value}",
            video_codec=settings.video_codec,
            audio_codec="copy",
            maxrate=budget.bitrate,
            bufsize=double_bitrate(budget.bitrate),
            filter_complex=stack_filter_graph(plan),
            maps=maps,
            codec_options=codec_options(settings.video_codec),
            threads=self._threads,
            no_audio=audio_index is None,
            shortest=audio_index is not None,
            output_options=settings.muxer_options,
        )
        return self._encoder.encode(request, plan.max_total_size)

    def _append_outro(
        self,
        spec: OutroSpec,
        main: Path,
        settings: OutputSettings,
        workspace: JobWorkspace,
    ) -> Path:
        """Render the outro card to match main and concatenate it after main.

        Returns:
            Path of the concatenated artifact.
        """
        params = derive_outro_parameters(self._engine.probe(main))

        inputs = [InputSpec(outro_color_source(spec, params), format="lavfi")]
        maps: tuple[str, ...] = ("0:v",)
        output_options: tuple[str, ...] = ("-r", f"{params.frame_rate:g}")
        if params.has_audio:
            inputs.append(
                InputSpec(
                    outro_silence_source(params),
                    duration=spec.duration,
                    format="lavfi",
                )
            )
            maps += ("1:a",)
            output_options += (
                "-ar",
                str(params.sample_rate),
                "-ac",
                str(params.channels),
            )

        outro = workspace.path(f"outro.{settings.extension}")
        self._engine.encode(
            EncodeRequest(
                inputs=tuple(inputs),
                output=outro,
                description="render outro",
                video_codec=settings.video_codec,
                audio_codec=settings.audio_codec,
                audio_bitrate=settings.audio_bitrate,
                crf=self._encoder.settings.min_crf,
                video_filter=outro_video_filter(spec, params),
                maps=maps,
                codec_options=codec_options(settings.video_codec),
                threads=self._threads,
                no_audio=not params.has_audio,
                shortest=params.has_audio,
                output_options=output_options + settings.muxer_options,
            )
        )

        concat_list = workspace.path("concat.txt")
        concat_list.write_text(
            "\n".join(_concat_entry(p) for p in (main, outro)) + "\n",
            encoding="utf-8",
        )
        combined = workspace.path(f"combined.{settings.extension}")
        self._engine.encode(
            EncodeRequest(
                inputs=(
                    InputSpec(concat_list, format="concat", options=("-safe", "0")),
                ),
                output=combined,
                description="concatenate outro",
                video_codec="copy",
                audio_codec="copy",
                pix_fmt=None,
                no_audio=not params.has_audio,
                output_options=settings.muxer_options,
            )
        )
        logger.debug("Appended %gs outro", spec.duration)
        return combined
