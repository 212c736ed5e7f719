"""Tests for drawtext filter builders."""

from socialcut.domain.enums import Anchor
from socialcut.domain.models import OutroParameters, OutroSpec, OverlaySpec
from socialcut.planning.text import (
    anchor_position,
    escape_drawtext_text,
    outro_color_source,
    outro_silence_source,
    outro_video_filter,
    overlay_filter,
)


class TestEscapeDrawtextText:
    """Tests for escape_drawtext_text."""

    def test_plain_text_unchanged(self):
        assert escape_drawtext_text("Follow @me") == "Follow @me"

    def test_quote_closes_and_reopens(self):
        assert escape_drawtext_text("it's") == "it\\'\\''s"

    def test_backslash_and_percent(self):
        assert escape_drawtext_text("50% \\ off") == "50\\\\% \\\\\\\\ off"

    def test_colon_escaped_for_option_parser(self):
        assert escape_drawtext_text("Follow: @me") == "Follow\\: @me"

    def test_graph_separators_left_to_quotes(self):
        assert escape_drawtext_text("a, b; [c]") == "a, b; [c]"

    def test_overlay_text_with_colon_and_comma(self):
        result = overlay_filter(OverlaySpec(text="Follow: @me, now"))

        assert result.startswith("drawtext=text='Follow\\: @me, now':fontsize=")

    def test_newlines_become_spaces(self):
        assert escape_drawtext_text("a\nb\r\nc") == "a b  c"


class TestAnchorPosition:
    """Tests for anchor_position."""

    def test_corners(self):
        assert anchor_position(Anchor.TOP_LEFT, 20) == ("20", "20")
        assert anchor_position(Anchor.TOP_RIGHT, 20) == ("w-tw-20", "20")
        assert anchor_position(Anchor.BOTTOM_LEFT, 20) == ("20", "h-th-20")
        assert anchor_position(Anchor.BOTTOM_RIGHT, 20) == ("w-tw-20", "h-th-20")


class TestOverlayFilter:
    """Tests for overlay_filter."""

    def test_contains_style_and_position(self):
        spec = OverlaySpec(text="hello", color="cyan", font_size=24)

        result = overlay_filter(spec)

        assert result.startswith("drawtext=text='hello':")
        assert "fontsize=24" in result
        assert "fontcolor=cyan" in result
        assert "x=w-tw-20:y=h-th-20" in result
        assert "borderw=2" in result
        assert "shadowx=2" in result
        assert "box=1:boxcolor=black@0.5" in result


class TestOutroFilters:
    """Tests for the outro card builders."""

    def _params(self, **overrides) -> OutroParameters:
        values = dict(width=1280, height=720, frame_rate=30.0, has_audio=True)
        values.update(overrides)
        return OutroParameters(**values)

    def test_color_source(self):
        spec = OutroSpec(lines=("Thanks",), duration=3.0, background="navy")

        assert outro_color_source(spec, self._params()) == (
            "color=c=navy:s=1280x720:r=30:d=3"
        )

    def test_silence_source_layout(self):
        assert outro_silence_source(self._params()) == "anullsrc=r=48000:cl=stereo"
        assert outro_silence_source(self._params(channels=1, sample_rate=44100)) == (
            "anullsrc=r=44100:cl=mono"
        )

    def test_video_filter_centers_each_line(self):
        spec = OutroSpec(lines=("Thanks", "for watching"))

        result = outro_video_filter(spec, self._params())

        assert result.count("drawtext=") == 2
        assert "x=(w-tw)/2:y=(h-144)/2+0" in result
        assert "x=(w-tw)/2:y=(h-144)/2+72" in result
        assert "fade=t=in:st=0:d=0.5" in result
        assert result.endswith("format=yuv420p")

    def test_portrait_shrinks_font(self):
        spec = OutroSpec(lines=("Thanks",), font_size=48)

        result = outro_video_filter(spec, self._params(width=720, height=1280))

        assert "fontsize=32" in result

    def test_no_fade(self):
        spec = OutroSpec(lines=("Thanks",), fade_in=0)

        assert "fade=" not in outro_video_filter(spec, self._params())
