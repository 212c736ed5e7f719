"""SOCIALCUT_* environment variables.

Each variable overrides one field of one config section. EnvReader takes an
optional mapping in place of os.environ so tests never touch the real
environment.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, NamedTuple

logger = logging.getLogger(__name__)

ENV_PREFIX = "SOCIALCUT_"

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off"})


class EnvField(NamedTuple):
    """Binding of one environment variable to a config field."""

    section: str
    field: str
    suffix: str
    kind: type


ENV_FIELDS: tuple[EnvField, ...] = (
    EnvField("tools", "ffmpeg", "FFMPEG_PATH", Path),
    EnvField("tools", "ffprobe", "FFPROBE_PATH", Path),
    EnvField("encoding", "threads", "THREADS", int),
    EnvField("encoding", "timeout_seconds", "TIMEOUT", int),
    EnvField("template", "temp_directory", "TEMP_DIR", Path),
    EnvField("logging", "level", "LOG_LEVEL", str),
    EnvField("logging", "file", "LOG_FILE", Path),
    EnvField("logging", "include_stderr", "LOG_STDERR", bool),
)


class EnvReader:
    """Typed access to SOCIALCUT_* variables.

    Unset and empty variables read as None. A value that cannot be converted
    is logged and also reads as None, so the config file or default applies.
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        self._env: Mapping[str, str] = env if env is not None else os.environ

    def raw(self, suffix: str) -> str | None:
        value = self._env.get(ENV_PREFIX + suffix, "").strip()
        return value or None

    def read(self, suffix: str, kind: type = str) -> Any:
        """Read SOCIALCUT_<suffix> converted to kind (str, int, bool or Path)."""
        value = self.raw(suffix)
        if value is None or kind is str:
            return value
        if kind is Path:
            return Path(value).expanduser()
        if kind is bool:
            lowered = value.casefold()
            if lowered in _TRUE or lowered in _FALSE:
                return lowered in _TRUE
        elif kind is int:
            try:
                return int(value)
            except ValueError:
                pass
        logger.warning(
            "Ignoring %s%s=%r: expected %s", ENV_PREFIX, suffix, value, kind.__name__
        )
        return None

    def section_overrides(self, section: str) -> dict[str, Any]:
        """Values set in the environment for one config section."""
        overrides = {}
        for binding in ENV_FIELDS:
            if binding.section != section:
                continue
            value = self.read(binding.suffix, binding.kind)
            if value is not None:
                overrides[binding.field] = value
        return overrides
