"""Composition planning for grid templates.

A CompositionPlan fixes the canonical frame, one cell per source with its
dimension fit and byte budget, the stack topology, and the optional text
overlay and outro. The planner never touches the engine; callers probe the
sources and pass the metadata in.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from pathlib import Path

from socialcut.domain.enums import Anchor, TemplateType
from socialcut.domain.models import (
    CellSpec,
    CompositionPlan,
    MediaMetadata,
    OutroParameters,
    OutroSpec,
    OverlaySpec,
    PlatformProfile,
)
from socialcut.errors import InvalidInputCountError, MetadataUnavailableError
from socialcut.planning.dimensions import even_floor, fit_dimensions
from socialcut.planning.text import overlay_filter

logger = logging.getLogger(__name__)

MIB = 1024 * 1024

CANONICAL_WIDTH = 1280
CANONICAL_HEIGHT = 720

CELL_SIZE_LIMITS: dict[TemplateType, int] = {
    TemplateType.SINGLE: 30 * MIB,
    TemplateType.QUAD: 8 * MIB,
    TemplateType.TRIPTYCH: 10 * MIB,
}
MAX_TOTAL_SIZE = 50 * MIB

OVERLAY_PALETTE: tuple[str, ...] = (
    "white",
    "yellow",
    "cyan",
    "lime",
    "magenta",
    "orange",
)
LANDSCAPE_FONT_SIZE = 36
PORTRAIT_FONT_SIZE = 24
OVERLAY_MARGIN = 20

DEFAULT_FRAME_RATE = 30.0
DEFAULT_SAMPLE_RATE = 48000


def select_inputs(
    template: TemplateType, inputs: Sequence[Path]
) -> tuple[list[Path], list[Path]]:
    """Validate the input count for a template.

    A 1x1 template keeps the first input and drops the rest with a warning.
    Grid templates need exactly their input count.

    Returns:
        (kept, dropped) input paths.

    Raises:
        InvalidInputCountError: If there are too few inputs, or a grid
            template gets the wrong number.
    """
    required = template.required_inputs
    count = len(inputs)
    exact = template is not TemplateType.SINGLE
    if count < required or (exact and count != required):
        raise InvalidInputCountError(template.value, required, count)

    kept = list(inputs[:required])
    dropped = list(inputs[required:])
    if dropped:
        logger.warning(
            "Template %s uses %d input(s); ignoring %d extra: %s",
            template.value,
            required,
            len(dropped),
            ", ".join(str(p) for p in dropped),
        )
    return kept, dropped


def canonical_size(
    platform: PlatformProfile | None,
    width: int = CANONICAL_WIDTH,
    height: int = CANONICAL_HEIGHT,
) -> tuple[int, int]:
    """Canonical output frame; portrait when the platform forces it."""
    if platform is not None and platform.force_portrait:
        return min(width, height), max(width, height)
    return width, height


def cell_layout(
    template: TemplateType, width: int, height: int
) -> tuple[list[tuple[int, int]], tuple[tuple[int, ...], ...]]:
    """Cell sizes and stack rows for a template inside a canonical frame.

    Returns:
        (cell sizes in input order, rows of cell indices top to bottom).
    """
    if template is TemplateType.QUAD:
        cell = (even_floor(width // 2), even_floor(height // 2))
        return [cell] * 4, ((0, 1), (2, 3))
    if template is TemplateType.TRIPTYCH:
        cell = (even_floor(width // 3), even_floor(height))
        return [cell] * 3, ((0, 1, 2),)
    return [(even_floor(width), even_floor(height))], ((0,),)


def build_overlay(
    text: str,
    *,
    portrait: bool,
    anchor: Anchor = Anchor.BOTTOM_RIGHT,
    color: str | None = None,
    rng: random.Random | None = None,
) -> OverlaySpec:
    """OverlaySpec with a palette color unless one is forced.

    Args:
        text: Overlay text.
        portrait: Output is portrait (uses the smaller font).
        anchor: Corner to anchor the text box to.
        color: Forced color; None picks from OVERLAY_PALETTE.
        rng: Random source for the palette pick (seed it for reproducibility).
    """
    if color is None:
        color = (rng or random.Random()).choice(OVERLAY_PALETTE)
    return OverlaySpec(
        text=text,
        anchor=anchor,
        color=color,
        font_size=PORTRAIT_FONT_SIZE if portrait else LANDSCAPE_FONT_SIZE,
        margin=OVERLAY_MARGIN,
    )


def plan_composition(
    template: TemplateType,
    inputs: Sequence[Path],
    metadata: Sequence[MediaMetadata],
    *,
    platform: PlatformProfile | None = None,
    canonical: tuple[int, int] = (CANONICAL_WIDTH, CANONICAL_HEIGHT),
    overlay: OverlaySpec | None = None,
    outro: OutroSpec | None = None,
    max_total_size: int = MAX_TOTAL_SIZE,
) -> CompositionPlan:
    """Plan a templated composition.

    Args:
        template: Grid layout.
        inputs: Source paths (validated with select_inputs).
        metadata: Probed metadata for each kept input, in order.
        platform: Optional target platform; forces a portrait frame and
            lowers the total size ceiling to its max file size.
        canonical: Landscape canonical frame size.
        overlay: Optional text overlay.
        outro: Optional outro title card.
        max_total_size: Absolute ceiling for the composed artifact.

    Returns:
        Immutable CompositionPlan.

    Raises:
        InvalidInputCountError: If the input count does not suit the template.
        MetadataUnavailableError: If metadata is missing for a kept input.
        InvalidMetadataError: If a source has degenerate dimensions.
    """
    kept, dropped = select_inputs(template, inputs)
    if len(metadata) < len(kept):
        raise MetadataUnavailableError(
            f"Metadata for {len(kept)} input(s) required, got {len(metadata)}"
        )

    width, height = canonical_size(platform, *canonical)
    sizes, rows = cell_layout(template, width, height)
    cell_budget = CELL_SIZE_LIMITS[template]

    cells: list[CellSpec] = []
    for index, (source, meta, (cell_w, cell_h)) in enumerate(
        zip(kept, metadata, sizes)
    ):
        fit = fit_dimensions(
            meta.width, meta.height, cell_w, cell_h, match_orientation=False
        )
        cells.append(
            CellSpec(
                index=index,
                source=source,
                width=fit.width,
                height=fit.height,
                fit=fit,
                max_size=cell_budget,
            )
        )

    ceiling = max_total_size
    if platform is not None:
        ceiling = min(ceiling, platform.max_file_size)

    out_width = max(sum(cells[i].width for i in row) for row in rows)
    out_height = sum(cells[row[0]].height for row in rows)
    return CompositionPlan(
        template=template,
        width=out_width,
        height=out_height,
        cells=tuple(cells),
        rows=rows,
        max_total_size=ceiling,
        overlay=overlay,
        outro=outro,
        sources_dropped=tuple(dropped),
    )


def stack_filter_graph(plan: CompositionPlan) -> str:
    """filter_complex stacking the cell inputs into [vout].

    Input i of the graph is cell i. 2x2 hstacks each pair then vstacks the
    rows; 3x1 hstacks all three; 1x1 passes through. The overlay, if any,
    is drawn on the stacked frame.
    """
    parts: list[str] = []
    row_labels: list[str] = []
    for row_index, row in enumerate(plan.rows):
        inputs = "".join(f"[{i}:v]" for i in row)
        if len(row) == 1:
            label = f"[{row[0]}:v]"
        else:
            label = f"[row{row_index}]"
            parts.append(f"{inputs}hstack=inputs={len(row)}:shortest=1{label}")
        row_labels.append(label)

    if len(row_labels) > 1:
        rows_in = "".join(row_labels)
        parts.append(f"{rows_in}vstack=inputs={len(row_labels)}:shortest=1[stacked]")
        stacked = "[stacked]"
    else:
        stacked = row_labels[0]

    tail = overlay_filter(plan.overlay) if plan.overlay else "null"
    parts.append(f"{stacked}{tail}[vout]")
    return ";".join(parts)


def derive_outro_parameters(metadata: MediaMetadata) -> OutroParameters:
    """Outro parameters matching a probed main segment for stream-copy concat."""
    return OutroParameters(
        width=metadata.width,
        height=metadata.height,
        frame_rate=metadata.frame_rate or DEFAULT_FRAME_RATE,
        has_audio=metadata.has_audio,
        sample_rate=metadata.sample_rate or DEFAULT_SAMPLE_RATE,
        channels=metadata.channels or 2,
    )
