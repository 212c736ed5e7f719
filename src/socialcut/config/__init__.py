"""Configuration for socialcut."""

from socialcut.config.env import EnvReader
from socialcut.config.loader import (
    build_config,
    clear_config,
    get_config,
    load_config,
    set_config,
)
from socialcut.config.models import (
    EncodingConfig,
    LoggingConfig,
    SocialcutConfig,
    TemplateConfig,
    ToolPathsConfig,
)

__all__ = [
    "EncodingConfig",
    "EnvReader",
    "LoggingConfig",
    "SocialcutConfig",
    "TemplateConfig",
    "ToolPathsConfig",
    "build_config",
    "clear_config",
    "get_config",
    "load_config",
    "set_config",
]
