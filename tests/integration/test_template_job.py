"""Integration tests for the Templater job against a scripted engine."""

import random

import pytest

from socialcut.domain.enums import Anchor, OutputFormat, TemplateType
from socialcut.errors import (
    EncodeFailedError,
    InvalidInputCountError,
    OutputTooLargeError,
)
from socialcut.jobs import TemplateOptions, Templater
from socialcut.platforms import get_default_registry

pytestmark = pytest.mark.integration

MIB = 1024 * 1024


@pytest.fixture
def templater(fake_engine, temp_dir):
    return Templater(
        fake_engine,
        threads=2,
        temp_root=temp_dir / "work",
        rng=random.Random(7),
    )


@pytest.fixture
def sources(make_source):
    return tuple(make_source(f"clip{i}.mp4") for i in range(4))


def _quad(temp_dir, sources, **kwargs):
    return TemplateOptions(temp_dir / "grid.mp4", TemplateType.QUAD, sources, **kwargs)


class TestQuadTemplate:
    """2x2 composition."""

    def test_request_flow(self, templater, fake_engine, sources, temp_dir):
        output = temp_dir / "grid.mp4"

        result = templater.run(TemplateOptions(output, TemplateType.QUAD, sources))

        assert fake_engine.descriptions() == [
            "encode cell 0",
            "encode cell 1",
            "encode cell 2",
            "encode cell 3",
            "compose 2x2",
        ]
        assert result.output == output
        assert output.exists()
        assert result.size_bytes == 1024
        assert (result.plan.width, result.plan.height) == (1280, 720)
        assert list((temp_dir / "work").iterdir()) == []

    def test_cell_requests(self, templater, fake_engine, sources, temp_dir):
        templater.run(_quad(temp_dir, sources))

        cell = fake_engine.requests[0]
        assert cell.inputs[0].path == sources[0]
        assert cell.crf == 18
        assert cell.video_filter.endswith("setsar=1")
        assert "scale=640:360" in cell.video_filter
        # 8 MiB over 30 seconds
        assert cell.maxrate == "2236k"
        assert cell.bufsize == "4472k"
        assert cell.output.name == "cell_0.mp4"

    def test_compose_request(self, templater, fake_engine, sources, temp_dir):
        templater.run(_quad(temp_dir, sources))

        compose = fake_engine.requests[-1]
        assert [spec.path.name for spec in compose.inputs] == [
            "cell_0.mp4",
            "cell_1.mp4",
            "cell_2.mp4",
            "cell_3.mp4",
        ]
        assert compose.filter_complex == (
            "[0:v][1:v]hstack=inputs=2:shortest=1[row0];"
            "[2:v][3:v]hstack=inputs=2:shortest=1[row1];"
            "[row0][row1]vstack=inputs=2:shortest=1[stacked];"
            "[stacked]null[vout]"
        )
        assert compose.maps == ("[vout]", "0:a")
        assert compose.audio_codec == "copy"
        assert compose.shortest is True

    def test_audio_from_first_cell_with_audio(
        self, templater, fake_engine, sources, temp_dir, make_metadata
    ):
        silent = make_metadata(has_audio=False, audio_codec=None)
        fake_engine.metadata["cell_0.mp4"] = silent
        fake_engine.metadata["cell_1.mp4"] = silent

        templater.run(_quad(temp_dir, sources))

        assert fake_engine.requests[-1].maps == ("[vout]", "2:a")

    def test_silent_cells(
        self, templater, fake_engine, sources, temp_dir, make_metadata
    ):
        fake_engine.default_metadata = make_metadata(has_audio=False, audio_codec=None)

        templater.run(_quad(temp_dir, sources))

        compose = fake_engine.requests[-1]
        assert compose.maps == ("[vout]",)
        assert compose.no_audio is True
        assert compose.shortest is False
        assert all(r.no_audio for r in fake_engine.requests[:4])

    def test_overlay(self, templater, fake_engine, sources, temp_dir):
        result = templater.run(
            TemplateOptions(
                temp_dir / "grid.mp4",
                TemplateType.QUAD,
                sources,
                overlay_text="@socialcut",
                overlay_anchor=Anchor.TOP_LEFT,
                overlay_color="yellow",
            )
        )

        assert result.plan.overlay.color == "yellow"
        assert result.plan.overlay.font_size == 36
        graph = fake_engine.requests[-1].filter_complex
        assert "drawtext=" in graph
        assert "@socialcut" in graph
        assert graph.endswith("[vout]")

    def test_wrong_input_count(self, templater, fake_engine, sources, temp_dir):
        with pytest.raises(InvalidInputCountError):
            templater.run(
                TemplateOptions(temp_dir / "grid.mp4", TemplateType.QUAD, sources[:3])
            )

        assert fake_engine.requests == []
        assert fake_engine.probed == []


class TestSingleAndTriptych:
    """1x1 and 3x1 layouts."""

    def test_single_drops_extra_inputs(self, templater, fake_engine, sources, temp_dir):
        result = templater.run(
            TemplateOptions(temp_dir / "one.mp4", TemplateType.SINGLE, sources[:2])
        )

        assert result.plan.sources_dropped == (sources[1],)
        assert len(result.plan.cells) == 1
        assert fake_engine.requests[-1].filter_complex == "[0:v]null[vout]"

    def test_triptych(self, templater, fake_engine, sources, temp_dir):
        result = templater.run(
            TemplateOptions(temp_dir / "tri.mp4", TemplateType.TRIPTYCH, sources[:3])
        )

        assert len(result.plan.cells) == 3
        assert result.plan.cells[0].max_size == 10 * MIB
        assert fake_engine.requests[-1].filter_complex.startswith(
            "[0:v][1:v][2:v]hstack=inputs=3:shortest=1"
        )


class TestOutputSettings:
    """Container and platform resolution."""

    def test_format_from_extension(self, templater, fake_engine, sources, temp_dir):
        result = templater.run(
            TemplateOptions(temp_dir / "one.webm", TemplateType.SINGLE, sources[:1])
        )

        assert result.output.suffix == ".webm"
        assert fake_engine.requests[0].output.suffix == ".webm"
        assert fake_engine.requests[0].video_codec == "libvpx-vp9"

    def test_explicit_format_fixes_extension(
        self, templater, fake_engine, sources, temp_dir
    ):
        result = templater.run(
            TemplateOptions(
                temp_dir / "one.mp4",
                TemplateType.SINGLE,
                sources[:1],
                output_format=OutputFormat.WEBM,
            )
        )

        assert result.output == temp_dir / "one.webm"

    def test_portrait_platform(self, templater, fake_engine, sources, temp_dir):
        tiktok = get_default_registry().get("tiktok")

        result = templater.run(
            TemplateOptions(
                temp_dir / "grid.mp4", TemplateType.QUAD, sources, platform=tiktok
            )
        )

        assert (result.plan.width, result.plan.height) == (720, 1280)
        assert result.plan.max_total_size == 50 * MIB

    def test_platform_lowers_ceiling(self, templater, fake_engine, sources, temp_dir):
        twitter = get_default_registry().get("x-twitter")

        result = templater.run(
            TemplateOptions(
                temp_dir / "one.mp4", TemplateType.SINGLE, sources[:1], platform=twitter
            )
        )

        assert result.plan.max_total_size == 5 * MIB
        assert result.main.max_size == 5 * MIB


class TestObscurify:
    """Per-input obscurify pass."""

    def test_inputs_reencoded_and_reprobed(
        self, templater, fake_engine, sources, temp_dir
    ):
        templater.run(
            TemplateOptions(
                temp_dir / "grid.mp4", TemplateType.QUAD, sources, obscurify=True
            )
        )

        descriptions = fake_engine.descriptions()
        assert descriptions[:4] == [f"obscurify input {i}" for i in range(4)]
        obscure = fake_engine.requests[0]
        assert "crop=1920:1080:" in obscure.video_filter
        assert obscure.audio_filter is not None
        assert obscure.crf == 18
        probed = [p.name for p in fake_engine.probed]
        assert "obscured_0.mp4" in probed
        cell = fake_engine.requests[4]
        assert cell.inputs[0].path.name == "obscured_0.mp4"


class TestOutro:
    """Outro card rendering and concatenation."""

    def test_outro_rendered_and_concatenated(
        self, templater, fake_engine, sources, temp_dir
    ):
        lists: list[str] = []
        encode = fake_engine.encode

        def recording_encode(request):
            if request.inputs[0].format == "concat":
                lists.append(request.inputs[0].path.read_text())
            encode(request)

        fake_engine.encode = recording_encode

        result = templater.run(
            TemplateOptions(
                temp_dir / "one.mp4",
                TemplateType.SINGLE,
                sources[:1],
                outro_lines=("Thanks for watching", "@socialcut"),
                outro_duration=2.5,
            )
        )

        assert fake_engine.descriptions()[-2:] == [
            "render outro",
            "concatenate outro",
        ]
        outro = fake_engine.requests[-2]
        assert [spec.format for spec in outro.inputs] == ["lavfi", "lavfi"]
        assert outro.inputs[1].duration == 2.5
        assert outro.maps == ("0:v", "1:a")
        assert "-ar" in outro.output_options
        concat = fake_engine.requests[-1]
        assert concat.video_codec == "copy"
        assert concat.audio_codec == "copy"
        assert concat.inputs[0].options == ("-safe", "0")
        [listing] = lists
        assert listing.splitlines()[0].startswith("file '")
        assert listing.splitlines()[0].endswith("main.mp4'")
        assert listing.splitlines()[1].endswith("outro.mp4'")
        assert result.output.exists()

    def test_silent_outro(
        self, templater, fake_engine, sources, temp_dir, make_metadata
    ):
        fake_engine.default_metadata = make_metadata(has_audio=False, audio_codec=None)

        templater.run(
            TemplateOptions(
                temp_dir / "one.mp4",
                TemplateType.SINGLE,
                sources[:1],
                outro_lines=("Bye",),
            )
        )

        outro = fake_engine.requests[-2]
        assert len(outro.inputs) == 1
        assert outro.maps == ("0:v",)
        assert outro.no_audio is True


class TestSizeCeiling:
    """Final size enforcement."""

    def test_tightening_pass(self, fake_engine, sources, temp_dir):
        templater = Templater(fake_engine, threads=2, max_total_size=4096)
        # cell, three compose attempts, then the tightening pass
        fake_engine.output_sizes = [1024, 8192, 8192, 8192, 2048]

        result = templater.run(
            TemplateOptions(temp_dir / "one.mp4", TemplateType.SINGLE, sources[:1])
        )

        assert fake_engine.descriptions()[-1] == "size tightening pass"
        assert [a.crf for a in result.main.attempts] == [18, 23, 28]
        tighten = fake_engine.requests[-1]
        assert tighten.crf > result.main.final.crf
        assert tighten.crf == 33
        assert tighten.maxrate == "1k"
        assert result.size_bytes == 2048

    def test_output_too_large(self, fake_engine, sources, temp_dir):
        templater = Templater(fake_engine, threads=2, max_total_size=4096)
        fake_engine.default_size = 8192
        output = temp_dir / "one.mp4"

        with pytest.raises(OutputTooLargeError):
            templater.run(TemplateOptions(output, TemplateType.SINGLE, sources[:1]))

        assert not output.exists()

    def test_engine_failure_propagates(self, templater, fake_engine, sources, temp_dir):
        fake_engine.fail = lambda request: request.description == "encode cell 2"

        with pytest.raises(EncodeFailedError):
            templater.run(
                TemplateOptions(temp_dir / "grid.mp4", TemplateType.QUAD, sources)
            )

        assert "compose 2x2" not in fake_engine.descriptions()
