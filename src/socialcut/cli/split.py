"""CLI split command."""

import logging
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
from socialcut.core.durations import parse_duration_string
from socialcut.core.formatting import format_file_size
from socialcut.errors import InvalidSkipError

logger = logging.getLogger(__name__)


def _parse_skip(value: str | None) -> float:
    if not value:
        return 0.0
    try:
        return parse_duration_string(value)
    except ValueError as e:
        raise InvalidSkipError(f"Invalid skip duration {value!r}: {e}") from e


@click.command("split")
@click.option(
    "--input",
    "-i",
    "input_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Source video.",
)
@click.option(
    "--output",
    "-o",
    "output_dir",
    required=True,
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory for the chunks (created if missing).",
)
@click.option(
    "--duration",
    "-d",
    "chunk_duration",
    type=click.FloatRange(min=0, min_open=True),
    default=15.0,
    show_default=True,
    help="Chunk length in seconds.",
)
@click.option(
    "--skip",
    "-s",
    default=None,
    help="Skip this much of the start, e.g. 10s, 1m30s, 1.5h.",
)
@click.option(
    "--platform",
    "-t",
    default=None,
    help="Conform chunks to a platform profile (see 'socialcut platforms').",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    default=None,
    help="Output container: mp4 or webm (default: platform's, else mp4).",
)
@verbose_option
def split_command(
    input_path: Path,
    output_dir: Path,
    chunk_duration: float,
    skip: str | None,
    platform: str | None,
    output_format: str | None,
    verbose: bool,
) -> None:
    """Split a video into fixed-length chunks.

    Without a platform, chunks are cut by stream copy when possible.
    With a platform, every chunk is scaled, bitrate capped and encoded
    with the platform's codecs.

    Examples:

        socialcut split -i talk.mp4 -o chunks/

        socialcut split -i talk.mp4 -o chunks/ -d 60 -s 1m30s -t tiktok
    """
    apply_verbose(verbose)

    from socialcut.config import get_config
    from socialcut.jobs import SplitOptions, Splitter

    with report_errors():
        options = SplitOptions(
            input_path=input_path,
            output_dir=output_dir,
            chunk_duration=chunk_duration,
            skip=_parse_skip(skip),
            platform=lookup_platform(platform),
            output_format=parse_format(output_format),
        )
        config = get_config()
        splitter = Splitter(
            build_engine(),
            threads=config.encoding.effective_threads(),
            temp_root=config.template.temp_directory,
        )
        result = splitter.run(options)

    for output in result.outputs:
        click.echo(f"{output.path}  {format_file_size(output.size_bytes)}")
    click.echo(f"Created {len(result.outputs)} chunk(s) in {output_dir}")
