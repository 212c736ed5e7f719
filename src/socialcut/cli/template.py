"""CLI apply-template command."""

import logging
import random
from pathlib import Path

import click

from socialcut.cli.common import (
    apply_verbose,
    build_engine,
    lookup_platform,
    parse_format,
    report_errors,
    verbose_option,
)
from socialcut.core.formatting import format_file_size
from socialcut.domain.enums import Anchor, TemplateType

logger = logging.getLogger(__name__)


@click.command("apply-template")
@click.argument(
    "inputs",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--output",
    "-o",
    "output_path",
    required=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file.",
)
@click.option(
    "--video-template",
    "template",
    required=True,
    type=click.Choice([t.value for t in TemplateType]),
    help="Layout: 1x1 (1 input), 2x2 (4 inputs) or 3x1 (3 inputs).",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    default=None,
    help="Output container: mp4 or webm (default: from platform or extension).",
)
@click.option(
    "--obscurify",
    is_flag=True,
    default=False,
    help="Apply a subtle zoom, color, sharpen and audio pitch change to inputs.",
)
@click.option("--text", "overlay_text", default=None, help="Overlay text.")
@click.option(
    "--text-anchor",
    type=click.Choice([a.value for a in Anchor]),
    default=Anchor.BOTTOM_RIGHT.value,
    show_default=True,
    help="Corner the overlay text is anchored to.",
)
@click.option(
    "--text-color",
    default=None,
    help="Overlay text color (default: random palette color).",
)
@click.option(
    "--platform",
    "-t",
    default=None,
    help="Target platform profile (see 'socialcut platforms').",
)
@click.option(
    "--outro-text",
    "outro_lines",
    multiple=True,
    help="Outro line; repeat for several lines.",
)
@click.option(
    "--outro-duration",
    type=click.FloatRange(min=0, min_open=True),
    default=3.0,
    show_default=True,
    help="Outro length in seconds.",
)
@click.option(
    "--seed",
    type=int,
    default=None,
    help="Seed for the overlay color choice.",
)
@verbose_option
def apply_template_command(
    inputs: tuple[Path, ...],
    output_path: Path,
    template: str,
    output_format: str | None,
    obscurify: bool,
    overlay_text: str | None,
    text_anchor: str,
    text_color: str | None,
    platform: str | None,
    outro_lines: tuple[str, ...],
    outro_duration: float,
    seed: int | None,
    verbose: bool,
) -> None:
    """Compose INPUTS into a grid layout.

    Examples:

        socialcut apply-template -o out.mp4 --video-template 1x1 clip.mp4

        socialcut apply-template -o grid.mp4 --video-template 2x2 \\
            a.mp4 b.mp4 c.mp4 d.mp4 --text "@channel" -t instagram-reel
    """
    apply_verbose(verbose)

    from socialcut.config import get_config
    from socialcut.executor.encode_loop import SizeConstrainedEncoder
    from socialcut.jobs import TemplateOptions, Templater

    with report_errors():
        options = TemplateOptions(
            output_path=output_path,
            template=TemplateType.from_string(template),
            inputs=inputs,
            output_format=parse_format(output_format),
            platform=lookup_platform(platform),
            obscurify=obscurify,
            overlay_text=overlay_text,
            overlay_anchor=Anchor(text_anchor),
            overlay_color=text_color,
            outro_lines=outro_lines,
            outro_duration=outro_duration,
        )
        config = get_config()
        engine = build_engine()
        templater = Templater(
            engine,
            encoder=SizeConstrainedEncoder(engine, config.encoding.loop_settings()),
            threads=config.encoding.effective_threads(),
            temp_root=config.template.temp_directory,
            canonical=(
                config.template.canonical_width,
                config.template.canonical_height,
            ),
            max_total_size=config.template.max_total_size,
            rng=random.Random(seed),
        )
        result = templater.run(options)

    for dropped in result.plan.sources_dropped:
        click.echo(f"Ignored extra input: {dropped}", err=True)
    click.echo(f"Created {result.output} ({format_file_size(result.size_bytes)})")
