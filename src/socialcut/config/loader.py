"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (applied by the CLI on top of the loaded config)
2. Environment variables (SOCIALCUT_*)
3. Config file (~/.socialcut/config.toml)
4. Default values

Environment variables:
- SOCIALCUT_CONFIG_PATH: Path to config file (overrides default location)
- SOCIALCUT_FFMPEG_PATH: Path to ffmpeg executable
- SOCIALCUT_FFPROBE_PATH: Path to ffprobe executable
- SOCIALCUT_THREADS: Encoder thread count
- SOCIALCUT_TIMEOUT: Per-invocation engine timeout in seconds
- SOCIALCUT_TEMP_DIR: Parent directory for job workspaces
- SOCIALCUT_LOG_LEVEL: Log level (debug, info, warning, error)
- SOCIALCUT_LOG_FILE: Log file path
- SOCIALCUT_LOG_STDERR: Also log to stderr when a log file is set
- SOCIALCUT_PLATFORMS_FILE: YAML file with custom platform profiles
"""

from __future__ import annotations

import logging
import threading
import tomllib
from pathlib import Path
from typing import Any

from socialcut.config.env import EnvReader
from socialcut.config.models import (
    EncodingConfig,
    LoggingConfig,
    SocialcutConfig,
    TemplateConfig,
    ToolPathsConfig,
)
from socialcut.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".socialcut"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"

_config: SocialcutConfig | None = None
_config_lock = threading.Lock()


def get_default_config_path(env_reader: EnvReader | None = None) -> Path:
    """Get the default config file path.

    Can be overridden by SOCIALCUT_CONFIG_PATH environment variable.
    """
    reader = env_reader or EnvReader()
    return reader.read("CONFIG_PATH", Path) or DEFAULT_CONFIG_FILE


def load_config_file(path: Path, *, strict: bool = False) -> dict[str, Any]:
    """Load configuration from a TOML file.

    Args:
        path: Path to config file.
        strict: If True, raise ConfigError on parse failures.
                If False (default), log a warning and return an empty dict.

    Returns:
        Parsed configuration dict. Empty dict if file doesn't exist.

    Raises:
        ConfigError: When strict=True and the file cannot be read or parsed.
    """
    if not path.exists():
        if strict:
            raise ConfigError(f"Config file not found: {path}")
        return {}

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        if strict:
            raise ConfigError(f"Cannot parse config file {path}: {e}") from e
        logger.warning("Ignoring unparseable config file %s: %s", path, e)
        return {}


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    value = data.get(name, {})
    if not isinstance(value, dict):
        raise ConfigError(f"Config section [{name}] must be a table")
    return value


def _optional_path(value: Any) -> Path | None:
    if value is None or value == "":
        return None
    return Path(str(value)).expanduser()


def build_config(
    file_data: dict[str, Any], env_reader: EnvReader | None = None
) -> SocialcutConfig:
    """Build a SocialcutConfig from parsed file data and the environment.

    Args:
        file_data: Parsed TOML (may be empty).
        env_reader: Environment source; None reads os.environ.

    Returns:
        Validated configuration.

    Raises:
        ConfigError: If a section has unknown keys or invalid values.
    """
    reader = env_reader or EnvReader()

    tools, encoding, template, logging_data = (
        {**_section(file_data, name), **reader.section_overrides(name)}
        for name in ("tools", "encoding", "template", "logging")
    )
    platforms_file = reader.read("PLATFORMS_FILE", Path) or file_data.get(
        "platforms_file"
    )

    try:
        return SocialcutConfig(
            tools=ToolPathsConfig(
                ffmpeg=_optional_path(tools.pop("ffmpeg", None)),
                ffprobe=_optional_path(tools.pop("ffprobe", None)),
                **tools,
            ),
            encoding=EncodingConfig(**encoding),
            template=TemplateConfig(
                temp_directory=_optional_path(template.pop("temp_directory", None)),
                **template,
            ),
            logging=LoggingConfig(
                file=_optional_path(logging_data.pop("file", None)),
                **logging_data,
            ),
            platforms_file=_optional_path(platforms_file),
        )
    except TypeError as e:
        # Unknown keys surface as unexpected keyword arguments
        raise ConfigError(f"Invalid configuration: {e}") from e
    except ValueError as e:
        raise ConfigError(f"Invalid configuration value: {e}") from e


def load_config(
    config_path: Path | None = None,
    env_reader: EnvReader | None = None,
    *,
    strict: bool = False,
) -> SocialcutConfig:
    """Load configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides SOCIALCUT_CONFIG_PATH).
        env_reader: Optional EnvReader for testing (uses os.environ if None).
        strict: If True, a missing or unparseable explicit file is an error.

    Returns:
        SocialcutConfig with merged configuration.
    """
    reader = env_reader or EnvReader()
    path = config_path or get_default_config_path(reader)
    file_data = load_config_file(path, strict=strict and config_path is not None)
    return build_config(file_data, reader)


def get_config() -> SocialcutConfig:
    """Get the process-wide configuration, loading it on first use."""
    global _config

    if _config is not None:
        return _config

    with _config_lock:
        if _config is None:
            _config = load_config()
    return _config


def set_config(config: SocialcutConfig) -> None:
    """Install the process-wide configuration (used by the CLI)."""
    global _config
    with _config_lock:
        _config = config


def clear_config() -> None:
    """Drop the cached configuration. Primarily useful for testing."""
    global _config
    with _config_lock:
        _config = None
