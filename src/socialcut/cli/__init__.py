"""CLI module for socialcut."""

import logging
import sys
from pathlib import Path

import click

from socialcut.cli.exit_codes import ExitCode
from socialcut.errors import SocialcutError

logger = logging.getLogger(__name__)


def _load_configuration(config_path: Path | None) -> None:
    """Load the config file and environment into the process-wide config."""
    from socialcut.config import load_config, set_config

    set_config(load_config(config_path, strict=True))


def _configure_logging(
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Configure logging from CLI options.

    Args:
        log_level: Override log level (debug, info, warning, error).
        log_file: Override log file path.
        log_json: Use JSON log format.
    """
    from socialcut.config import get_config
    from socialcut.logging import configure_logging

    configure_logging(
        get_config().logging.with_overrides(
            level=log_level,
            file=log_file,
            format="json" if log_json else None,
        )
    )


@click.group()
@click.version_option(package_name="socialcut")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Config file (default: ~/.socialcut/config.toml).",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """socialcut - Split and compose videos for social platforms."""
    ctx.ensure_object(dict)
    try:
        _load_configuration(config_path)
    except SocialcutError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.GENERAL_ERROR)

    _configure_logging(log_level, log_file, log_json)


# Defer import to avoid circular dependency
def _register_commands():
    from socialcut.cli.platforms import platforms_command
    from socialcut.cli.split import split_command
    from socialcut.cli.template import apply_template_command

    main.add_command(split_command)
    main.add_command(apply_template_command)
    main.add_command(platforms_command)


_register_commands()
