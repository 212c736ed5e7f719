"""drawtext filter builders for corner overlays and outro title cards."""

from __future__ import annotations

from socialcut.domain.enums import Anchor
from socialcut.domain.models import OutroParameters, OutroSpec, OverlaySpec

BORDER_COLOR = "black"
BORDER_WIDTH = 2
SHADOW_OFFSET = 2
BOX_STYLE = "box=1:boxcolor=black@0.5:boxborderw=5"

# Line spacing of outro text relative to font size
OUTRO_LINE_SPACING = 1.5


def _backslash_escape(text: str, special: str) -> str:
    return "".join(f"\\{char}" if char in special else char for char in text)


def escape_drawtext_text(text: str) -> str:
    """Escape text for use inside a single-quoted drawtext text option.

    ffmpeg unescapes the value three times. The filtergraph parser strips
    the quotes, so inside them only a quote has to close the run, be emitted
    escaped and reopen it. The option parser then takes backslash, quote and
    colon escapes, and drawtext's own expansion takes backslash and percent
    escapes. Commas, semicolons and brackets are protected by the quotes.
    Newlines become spaces; use separate outro lines for line breaks.
    """
    text = text.replace("\r", " ").replace("\n", " ")
    expanded = _backslash_escape(text, "\\%")
    option = _backslash_escape(expanded, "\\':")
    return option.replace("'", "'\\''")


def anchor_position(anchor: Anchor, margin: int) -> tuple[str, str]:
    """drawtext x/y expressions placing text in a corner."""
    right = f"w-tw-{margin}"
    bottom = f"h-th-{margin}"
    return {
        Anchor.TOP_LEFT: (str(margin), str(margin)),
        Anchor.TOP_RIGHT: (right, str(margin)),
        Anchor.BOTTOM_LEFT: (str(margin), bottom),
        Anchor.BOTTOM_RIGHT: (right, bottom),
    }[anchor]


def overlay_filter(spec: OverlaySpec) -> str:
    """drawtext filter for a corner-anchored overlay box."""
    x, y = anchor_position(spec.anchor, spec.margin)
    return (
        f"drawtext=text='{escape_drawtext_text(spec.text)}':"
        f"fontsize={spec.font_size}:fontcolor={spec.color}:"
        f"bordercolor={BORDER_COLOR}:borderw={BORDER_WIDTH}:"
        f"x={x}:y={y}:"
        f"shadowcolor=black:shadowx={SHADOW_OFFSET}:shadowy={SHADOW_OFFSET}:"
        f"{BOX_STYLE}"
    )


def outro_video_filter(spec: OutroSpec, params: OutroParameters) -> str:
    """Filter chain drawing centered outro lines with a fade-in.

    Lines are stacked around the vertical center; font size shrinks for
    narrow (portrait) frames so lines stay inside the card.
    """
    font_size = spec.font_size
    if params.width < params.height:
        font_size = max(12, font_size * 2 // 3)
    line_height = int(font_size * OUTRO_LINE_SPACING)
    block_height = line_height * len(spec.lines)

    filters: list[str] = []
    for index, line in enumerate(spec.lines):
        offset = index * line_height
        filters.append(
            f"drawtext=text='{escape_drawtext_text(line)}':"
            f"fontsize={font_size}:fontcolor={spec.font_color}:"
            f"x=(w-tw)/2:y=(h-{block_height})/2+{offset}"
        )
    if spec.fade_in > 0:
        filters.append(f"fade=t=in:st=0:d={spec.fade_in:g}")
    filters.append("format=yuv420p")
    return ",".join(filters)


def outro_color_source(spec: OutroSpec, params: OutroParameters) -> str:
    """lavfi color source for the outro background."""
    return (
        f"color=c={spec.background}:s={params.width}x{params.height}:"
        f"r={params.frame_rate:g}:d={spec.duration:g}"
    )


def outro_silence_source(params: OutroParameters) -> str:
    """lavfi silent audio matching the main segment's layout."""
    layout = "mono" if params.channels == 1 else "stereo"
    return f"anullsrc=r={params.sample_rate}:cl={layout}"
