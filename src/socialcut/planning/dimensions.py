"""Dimension fitting of a source frame into a target box.

Decides between a crop plan (forced-portrait output from a landscape
source), a pad plan (letterbox/pillarbox) and a plain scale. All arithmetic
is integer so equal aspect ratios never lose a pixel to float rounding.
"""

from __future__ import annotations

import logging

from socialcut.domain.models import CropSpec, FitPlan, PadSpec
from socialcut.errors import InvalidMetadataError

logger = logging.getLogger(__name__)

MIN_DIMENSION = 2

# Forced-portrait crop keeps a 9:16 window of the source height
PORTRAIT_RATIO_W = 9
PORTRAIT_RATIO_H = 16


def even_floor(value: int) -> int:
    """Round down to an even number, never below MIN_DIMENSION."""
    return max(MIN_DIMENSION, value - (value % 2))


def _orient_box(
    source_width: int,
    source_height: int,
    box_width: int,
    box_height: int,
    force_portrait: bool,
) -> tuple[int, int]:
    """Orient the target box to match the source (or portrait when forced)."""
    if force_portrait:
        return min(box_width, box_height), max(box_width, box_height)

    source_portrait = source_height > source_width
    box_portrait = box_height > box_width
    if source_portrait != box_portrait and box_width != box_height:
        return box_height, box_width
    return box_width, box_height


def fit_dimensions(
    source_width: int,
    source_height: int,
    box_width: int,
    box_height: int,
    *,
    force_portrait: bool = False,
    match_orientation: bool = True,
    fill_color: str = "black",
) -> FitPlan:
    """Compute the fit of a source frame into a target box.

    Args:
        source_width: Source width in pixels.
        source_height: Source height in pixels.
        box_width: Maximum output width.
        box_height: Maximum output height.
        force_portrait: Output must be portrait; landscape sources are
            center-cropped to 9:16 instead of padded.
        match_orientation: Swap the box to match the source orientation.
            Grid cells pass False so every cell keeps its slot size.
        fill_color: Pad color when the scaled content does not fill the box.

    Returns:
        FitPlan with even output dimensions of at least 2px.

    Raises:
        InvalidMetadataError: If source or box dimensions are not positive.
    """
    if source_width <= 0 or source_height <= 0:
        raise InvalidMetadataError(
            f"Invalid source dimensions: {source_width}x{source_height}"
        )
    if box_width <= 0 or box_height <= 0:
        raise InvalidMetadataError(f"Invalid target box: {box_width}x{box_height}")

    if match_orientation:
        target_w, target_h = _orient_box(
            source_width, source_height, box_width, box_height, force_portrait
        )
    else:
        target_w, target_h = box_width, box_height
    target_w = even_floor(target_w)
    target_h = even_floor(target_h)

    if force_portrait and source_width > source_height:
        crop_width = source_height * PORTRAIT_RATIO_W // PORTRAIT_RATIO_H
        if crop_width < 2:
            raise InvalidMetadataError(
                f"Source {source_width}x{source_height} is too short to crop "
                "to portrait"
            )
        crop = CropSpec(
            x=(source_width - crop_width) // 2,
            y=0,
            width=crop_width,
            height=source_height,
        )
        logger.debug(
            "Cropping %dx%d to %dx%d at x=%d, scaling to %dx%d",
            source_width,
            source_height,
            crop.width,
            crop.height,
            crop.x,
            target_w,
            target_h,
        )
        return FitPlan(
            width=target_w,
            height=target_h,
            scaled_width=target_w,
            scaled_height=target_h,
            crop=crop,
        )

    # Width-limited when source is relatively wider than the box
    if source_width * target_h >= source_height * target_w:
        scaled_w = target_w
        scaled_h = target_w * source_height // source_width
    else:
        scaled_h = target_h
        scaled_w = target_h * source_width // source_height
    scaled_w = min(even_floor(scaled_w), target_w)
    scaled_h = min(even_floor(scaled_h), target_h)

    if scaled_w == target_w and scaled_h == target_h:
        return FitPlan(
            width=target_w,
            height=target_h,
            scaled_width=scaled_w,
            scaled_height=scaled_h,
        )

    left = (target_w - scaled_w) // 2
    top = (target_h - scaled_h) // 2
    pad = PadSpec(
        left=left,
        top=top,
        right=target_w - scaled_w - left,
        bottom=target_h - scaled_h - top,
        color=fill_color,
    )
    return FitPlan(
        width=target_w,
        height=target_h,
        scaled_width=scaled_w,
        scaled_height=scaled_h,
        pad=pad,
    )
