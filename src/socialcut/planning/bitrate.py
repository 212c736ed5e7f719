"""Bitrate planning for platform-driven and budget-driven encodes."""

from __future__ import annotations

import logging

from socialcut.domain.enums import BitrateMode
from socialcut.domain.models import BitratePlan
from socialcut.errors import InvalidMetadataError

logger = logging.getLogger(__name__)

DEFAULT_VIDEO_BITRATE = 2_000_000

# Never ask the encoder for more than the source carries, plus headroom
SOURCE_HEADROOM = 1.05


def parse_bitrate(bitrate_str: str) -> int | None:
    """Parse a bitrate string like '10M' or '5000k' to bits per second.

    Args:
        bitrate_str: Bitrate string with M/m (megabits) or K/k (kilobits) suffix.

    Returns:
        Bitrate in bits per second, or None if parsing fails.

    Examples:
        parse_bitrate("10M") -> 10_000_000
        parse_bitrate("5000k") -> 5_000_000
        parse_bitrate("900000") -> 900_000
    """
    if not bitrate_str:
        return None

    bitrate_str = bitrate_str.strip()
    try:
        if bitrate_str[-1].casefold() == "m":
            value = int(float(bitrate_str[:-1]) * 1_000_000)
        elif bitrate_str[-1].casefold() == "k":
            value = int(float(bitrate_str[:-1]) * 1_000)
        else:
            # Assume bits per second
            value = int(bitrate_str)
    except (ValueError, IndexError):
        return None
    return value if value > 0 else None


def format_bitrate(bps: int, unit: str = "k") -> str:
    """Format bits per second for the engine.

    Args:
        bps: Bits per second.
        unit: Preferred suffix: "M", "k" or "" for plain bps. "M" falls back
            to "k" when bps is not a whole number of megabits so the string
            never rounds up past the value.

    Returns:
        Engine bitrate string such as "2M", "1680k" or "900000".
    """
    if unit.casefold() == "m" and bps % 1_000_000 == 0:
        return f"{bps // 1_000_000}M"
    if unit == "" or bps < 1_000:
        return str(bps)
    return f"{bps // 1_000}k"


def _unit_of(bitrate_str: str) -> str:
    suffix = bitrate_str.strip()[-1:] if bitrate_str else ""
    if suffix.casefold() == "m":
        return "M"
    if suffix.casefold() == "k":
        return "k"
    return ""


def plan_platform_bitrate(
    preferred: str,
    source_bitrate: int | None = None,
) -> BitratePlan:
    """Plan a bitrate from a platform's preferred value.

    The preferred bitrate is capped at 105% of the source bitrate when the
    source bitrate is known, so re-encoding never inflates the stream.

    Args:
        preferred: Platform bitrate string, e.g. "2M".
        source_bitrate: Probed source bitrate in bps, if available.

    Returns:
        BitratePlan in PLATFORM mode.
    """
    target = parse_bitrate(preferred)
    unit = _unit_of(preferred)
    if target is None:
        logger.warning(
            "Could not parse bitrate %r, using default %d bps",
            preferred,
            DEFAULT_VIDEO_BITRATE,
        )
        target = DEFAULT_VIDEO_BITRATE
        unit = "M"

    capped = target
    if source_bitrate is not None and source_bitrate > 0:
        ceiling = int(source_bitrate * SOURCE_HEADROOM)
        if ceiling < capped:
            logger.debug(
                "Capping bitrate %d to %d (source %d bps)",
                target,
                ceiling,
                source_bitrate,
            )
            capped = ceiling

    return BitratePlan(
        target_bps=target,
        capped_bps=capped,
        bitrate=format_bitrate(capped, unit),
        mode=BitrateMode.PLATFORM,
    )


def plan_budget_bitrate(size_budget_bytes: int, duration: float) -> BitratePlan:
    """Plan the bitrate that fits a duration into a byte budget.

    Args:
        size_budget_bytes: Output size budget in bytes.
        duration: Content duration in seconds.

    Returns:
        BitratePlan in BUDGET mode; no source cap is applied.

    Raises:
        InvalidMetadataError: If the duration or budget is not positive.
    """
    if duration <= 0:
        raise InvalidMetadataError(f"Cannot plan bitrate for duration {duration}")
    if size_budget_bytes <= 0:
        raise InvalidMetadataError(
            f"Cannot plan bitrate for size budget {size_budget_bytes}"
        )
    target = int(size_budget_bytes * 8 // duration)
    return BitratePlan(
        target_bps=target,
        capped_bps=target,
        bitrate=format_bitrate(target, "k"),
        mode=BitrateMode.BUDGET,
    )
