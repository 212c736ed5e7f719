"""Process-wide registry of platform profiles.

The registry is populated once at startup (built-ins plus any custom profile
file) and then frozen; lookups after that are read-only.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from socialcut.domain.models import PlatformProfile
from socialcut.errors import DuplicatePlatformError, UnsupportedPlatformError

logger = logging.getLogger(__name__)


class PlatformRegistry:
    """Name-keyed collection of PlatformProfile instances."""

    def __init__(self) -> None:
        self._profiles: dict[str, PlatformProfile] = {}
        self._frozen = False
        self._lock = threading.Lock()

    def register(self, profile: PlatformProfile, *, replace: bool = False) -> None:
        """Add a profile to the registry.

        Args:
            profile: Profile to register.
            replace: Allow overwriting an existing profile of the same name.

        Raises:
            DuplicatePlatformError: If the name is taken and replace is False.
            RuntimeError: If the registry has been frozen.
        """
        with self._lock:
            if self._frozen:
                raise RuntimeError(
                    f"Cannot register platform {profile.name}: registry is frozen"
                )
            if profile.name in self._profiles and not replace:
                raise DuplicatePlatformError(
                    f"Platform already registered: {profile.name}"
                )
            if profile.name in self._profiles:
                logger.info("Replacing platform profile %s", profile.name)
            self._profiles[profile.name] = profile

    def get(self, name: str) -> PlatformProfile:
        """Look up a profile by name.

        Raises:
            UnsupportedPlatformError: If no profile has that name.
        """
        try:
            return self._profiles[name]
        except KeyError:
            raise UnsupportedPlatformError(name, sorted(self._profiles)) from None

    def names(self) -> frozenset[str]:
        return frozenset(self._profiles)

    def profiles(self) -> list[PlatformProfile]:
        """All profiles sorted by name."""
        return [self._profiles[name] for name in sorted(self._profiles)]

    def freeze(self) -> None:
        """Reject any further registration."""
        with self._lock:
            self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __contains__(self, name: object) -> bool:
        return name in self._profiles

    def __len__(self) -> int:
        return len(self._profiles)


def build_registry(platforms_file: Path | None = None) -> PlatformRegistry:
    """Create a frozen registry of the built-in and custom profiles.

    Args:
        platforms_file: Optional YAML file with additional profiles.

    Returns:
        Frozen PlatformRegistry.

    Raises:
        PlatformProfileError: If the custom profile file is invalid.
        DuplicatePlatformError: If a custom profile collides without replace.
    """
    from socialcut.platforms.builtin import BUILTIN_PROFILES
    from socialcut.platforms.loader import load_platform_file

    registry = PlatformRegistry()
    for profile in BUILTIN_PROFILES:
        registry.register(profile)

    if platforms_file is not None:
        for profile, replace in load_platform_file(platforms_file):
            registry.register(profile, replace=replace)
        logger.debug("Loaded custom platform profiles from %s", platforms_file)

    registry.freeze()
    return registry


# Thread-safe module-level registry cache (lazy-loaded)
_default_registry: PlatformRegistry | None = None
_registry_lock = threading.Lock()


def get_default_registry() -> PlatformRegistry:
    """Get or create the process-wide registry (thread-safe lazy initialization).

    Custom profiles are read from the configured platforms_file.
    """
    global _default_registry

    # Fast path: if already initialized, return without lock
    if _default_registry is not None:
        return _default_registry

    with _registry_lock:
        if _default_registry is not None:
            return _default_registry

        from socialcut.config import get_config

        _default_registry = build_registry(get_config().platforms_file)

    return _default_registry


def reset_default_registry() -> None:
    """Drop the cached registry so the next lookup rebuilds it."""
    global _default_registry
    with _registry_lock:
        _default_registry = None
