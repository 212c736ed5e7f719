"""CLI platforms command."""

import json

import click

from socialcut.cli.common import report_errors
from socialcut.core.formatting import (
    format_bitrate_human,
    format_duration,
    format_file_size,
)
from socialcut.domain.models import PlatformProfile
from socialcut.planning.bitrate import parse_bitrate


def _profile_to_dict(profile: PlatformProfile) -> dict:
    return {
        "name": profile.name,
        "max_width": profile.max_width,
        "max_height": profile.max_height,
        "max_duration": profile.max_duration,
        "max_file_size": profile.max_file_size,
        "video_codec": profile.video_codec,
        "audio_codec": profile.audio_codec,
        "video_bitrate": profile.video_bitrate,
        "audio_bitrate": profile.audio_bitrate,
        "output_format": profile.output_format.value,
        "force_portrait": profile.force_portrait,
    }


@click.command("platforms")
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Output in JSON format.",
)
def platforms_command(json_output: bool) -> None:
    """List registered platform profiles.

    Custom profiles are read from the YAML file named by platforms_file
    in ~/.socialcut/config.toml or SOCIALCUT_PLATFORMS_FILE.
    """
    from socialcut.platforms import get_default_registry

    with report_errors():
        profiles = get_default_registry().profiles()

    if json_output:
        click.echo(json.dumps([_profile_to_dict(p) for p in profiles], indent=2))
        return

    click.echo(
        f"{'NAME':<16} {'MAX SIZE':<11} {'DURATION':<10} {'FILE LIMIT':<11} "
        f"{'BITRATE':<10} {'CODECS':<20} {'FORMAT':<7}"
    )
    click.echo("-" * 91)
    for p in profiles:
        size = f"{p.max_width}x{p.max_height}"
        codecs = f"{p.video_codec}/{p.audio_codec}"
        bps = parse_bitrate(p.video_bitrate)
        bitrate = format_bitrate_human(bps) if bps else p.video_bitrate
        portrait = " (portrait)" if p.force_portrait else ""
        click.echo(
            f"{p.name:<16} {size:<11} {format_duration(p.max_duration):<10} "
            f"{format_file_size(p.max_file_size):<11} {bitrate:<10} "
            f"{codecs:<20} "
            f"{p.output_format.value:<7}{portrait}"
        )
