"""Helpers shared by socialcut CLI commands."""

import logging
import sys
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TypeVar

import click

from socialcut.cli.exit_codes import ExitCode
from socialcut.domain.enums import OutputFormat
from socialcut.domain.models import PlatformProfile
from socialcut.errors import SocialcutError

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., object])


def verbose_option(func: F) -> F:
    """Add a -v/--verbose flag that switches logging to debug level."""
    return click.option(
        "--verbose",
        "-v",
        is_flag=True,
        default=False,
        help="Enable debug logging.",
    )(func)


def apply_verbose(verbose: bool) -> None:
    if verbose:
        from socialcut.logging import set_log_level

        set_log_level("debug")


@contextmanager
def report_errors() -> Iterator[None]:
    """Print SocialcutError messages and exit with a non-zero status."""
    try:
        yield
    except SocialcutError as e:
        logger.debug("Command failed", exc_info=True)
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.GENERAL_ERROR)
    except KeyboardInterrupt:
        click.echo("Interrupted", err=True)
        sys.exit(ExitCode.INTERRUPTED)


def lookup_platform(name: str | None) -> PlatformProfile | None:
    """Resolve a platform name against the registry.

    Raises:
        UnsupportedPlatformError: If the name is not registered.
    """
    if not name:
        return None
    from socialcut.platforms import get_default_registry

    return get_default_registry().get(name.strip().casefold())


def parse_format(value: str | None) -> OutputFormat | None:
    """Resolve a container name, or None when not given.

    Raises:
        UnsupportedFormatError: If the container is not supported.
    """
    if not value:
        return None
    return OutputFormat.from_string(value)


def build_engine():
    """Create the ffmpeg-backed engine from the active configuration."""
    from socialcut.config import get_config
    from socialcut.executor.ffmpeg_engine import FFmpegEngine

    config = get_config()
    return FFmpegEngine(timeout=config.encoding.timeout_seconds)
