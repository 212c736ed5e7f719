"""Encoding-parameter and composition planning (pure, no engine access)."""

from socialcut.planning.bitrate import (
    format_bitrate,
    parse_bitrate,
    plan_budget_bitrate,
    plan_platform_bitrate,
)
from socialcut.planning.chunks import plan_chunks
from socialcut.planning.dimensions import even_floor, fit_dimensions

__all__ = [
    "even_floor",
    "fit_dimensions",
    "format_bitrate",
    "parse_bitrate",
    "plan_budget_bitrate",
    "plan_chunks",
    "plan_platform_bitrate",
]
