"""Domain types for socialcut."""

from socialcut.domain.enums import Anchor, BitrateMode, OutputFormat, TemplateType
from socialcut.domain.models import (
    BitratePlan,
    CellSpec,
    ChunkSpec,
    CompositionPlan,
    CropSpec,
    EncodeAttempt,
    FitPlan,
    MediaMetadata,
    OutroParameters,
    OutroSpec,
    OverlaySpec,
    PadSpec,
    PlatformProfile,
)

__all__ = [
    "Anchor",
    "BitrateMode",
    "BitratePlan",
    "CellSpec",
    "ChunkSpec",
    "CompositionPlan",
    "CropSpec",
    "EncodeAttempt",
    "FitPlan",
    "MediaMetadata",
    "OutputFormat",
    "OutroParameters",
    "OutroSpec",
    "OverlaySpec",
    "PadSpec",
    "PlatformProfile",
    "TemplateType",
]
