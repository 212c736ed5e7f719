"""Platform profiles and their registry."""

from socialcut.platforms.builtin import BUILTIN_PROFILES
from socialcut.platforms.registry import (
    PlatformRegistry,
    build_registry,
    get_default_registry,
    reset_default_registry,
)

__all__ = [
    "BUILTIN_PROFILES",
    "PlatformRegistry",
    "build_registry",
    "get_default_registry",
    "reset_default_registry",
]
