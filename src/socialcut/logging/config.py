"""Root logger setup for the socialcut CLI.

Records go to a rotating log file, to stderr, or both. Every handler runs the
JobContextFilter so text lines carry a "[job:stage] " tag and JSON lines the
job and stage keys.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from socialcut.logging.context import JobContextFilter
from socialcut.logging.handlers import JSONFormatter

if TYPE_CHECKING:
    from socialcut.config.models import LoggingConfig

logger = logging.getLogger(__name__)

TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(job_tag)s%(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def _level(name: str) -> int:
    return logging.getLevelNamesMapping().get(name.upper(), logging.INFO)


def _formatter(log_format: str) -> logging.Formatter:
    if log_format.casefold() == "json":
        return JSONFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT)


def _file_handler(config: LoggingConfig) -> RotatingFileHandler:
    path = Path(config.file).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return RotatingFileHandler(
        path,
        maxBytes=config.max_bytes,
        backupCount=config.backup_count,
        encoding="utf-8",
    )


def configure_logging(config: LoggingConfig) -> None:
    """Replace the root logger's handlers according to config.

    stderr is used when no file is configured, when include_stderr is set,
    or when the log file cannot be opened; the last case is logged as a
    warning once the handlers are in place.
    """
    handlers: list[logging.Handler] = []
    file_error: OSError | None = None
    if config.file:
        try:
            handlers.append(_file_handler(config))
        except OSError as e:
            file_error = e
    if config.include_stderr or not handlers:
        handlers.append(logging.StreamHandler(sys.stderr))

    level = _level(config.level)
    formatter = _formatter(config.format)
    context_filter = JobContextFilter()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)

    root = logging.getLogger()
    root.handlers[:] = handlers
    root.setLevel(level)

    if file_error is not None:
        logger.warning(
            "Cannot open log file %s, logging to stderr: %s", config.file, file_error
        )


def set_log_level(level: str) -> None:
    """Change verbosity after configure_logging, e.g. for --verbose."""
    resolved = _level(level)
    root = logging.getLogger()
    for target in (root, *root.handlers):
        target.setLevel(resolved)
