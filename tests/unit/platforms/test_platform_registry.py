"""Tests for the platform registry."""

import pytest

from socialcut.config import SocialcutConfig, set_config
from socialcut.domain.enums import OutputFormat
from socialcut.errors import (
    DuplicatePlatformError,
    PlatformProfileError,
    UnsupportedPlatformError,
)
from socialcut.platforms import (
    BUILTIN_PROFILES,
    PlatformRegistry,
    build_registry,
    get_default_registry,
    reset_default_registry,
)

MIB = 1024 * 1024


class TestBuiltinProfiles:
    """The shipped platform profiles."""

    def test_names(self):
        names = {profile.name for profile in BUILTIN_PROFILES}

        assert names == {
            "tiktok",
            "instagram-reel",
            "x-twitter",
            "reddit",
            "tryonhaulcentral",
            "tryonhaulcentral-portrait",
            "tryonhaulcentral-landscape",
        }

    def test_tiktok(self):
        tiktok = build_registry().get("tiktok")

        assert (tiktok.max_width, tiktok.max_height) == (1080, 1920)
        assert tiktok.max_duration == 180
        assert tiktok.max_file_size == 287 * MIB
        assert tiktok.video_bitrate == "2M"
        assert tiktok.force_portrait is True
        assert tiktok.output_format is OutputFormat.MP4

    def test_x_twitter_is_landscape(self):
        profile = build_registry().get("x-twitter")

        assert profile.force_portrait is False
        assert profile.max_file_size == 5 * MIB


class TestPlatformRegistry:
    """Tests for PlatformRegistry."""

    def test_register_and_get(self):
        registry = PlatformRegistry()
        registry.register(BUILTIN_PROFILES[0])

        assert registry.get("tiktok") is BUILTIN_PROFILES[0]
        assert "tiktok" in registry
        assert len(registry) == 1

    def test_unknown_name_lists_available(self):
        registry = PlatformRegistry()
        registry.register(BUILTIN_PROFILES[0])

        with pytest.raises(UnsupportedPlatformError) as exc_info:
            registry.get("myspace")

        assert exc_info.value.name == "myspace"
        assert "tiktok" in str(exc_info.value)

    def test_duplicate_rejected(self):
        registry = PlatformRegistry()
        registry.register(BUILTIN_PROFILES[0])

        with pytest.raises(DuplicatePlatformError):
            registry.register(BUILTIN_PROFILES[0])

    def test_replace_allowed(self):
        registry = PlatformRegistry()
        registry.register(BUILTIN_PROFILES[0])

        registry.register(BUILTIN_PROFILES[0], replace=True)

        assert len(registry) == 1

    def test_frozen_registry_rejects_registration(self):
        registry = PlatformRegistry()
        registry.freeze()

        assert registry.frozen
        with pytest.raises(RuntimeError, match="frozen"):
            registry.register(BUILTIN_PROFILES[0])

    def test_profiles_sorted_by_name(self):
        registry = build_registry()

        names = [profile.name for profile in registry.profiles()]

        assert names == sorted(names)
        assert len(names) == len(BUILTIN_PROFILES)


class TestBuildRegistry:
    """Tests for build_registry with custom profile files."""

    def test_adds_custom_profiles(self, temp_dir):
        path = temp_dir / "platforms.yaml"
        path.write_text(
            "platforms:\n"
            "  - name: youtube-shorts\n"
            "    max_width: 1080\n"
            "    max_height: 1920\n"
            "    max_duration: 60\n"
            "    max_file_size: 268435456\n"
            "    force_portrait: true\n"
        )

        registry = build_registry(path)

        assert registry.frozen
        assert registry.get("youtube-shorts").force_portrait is True
        assert "tiktok" in registry

    def test_override_requires_replace(self, temp_dir):
        path = temp_dir / "platforms.yaml"
        entry = (
            "platforms:\n"
            "  - name: reddit\n"
            "    max_width: 1280\n"
            "    max_height: 720\n"
            "    max_duration: 60\n"
            "    max_file_size: 1000000\n"
        )
        path.write_text(entry)

        with pytest.raises(DuplicatePlatformError):
            build_registry(path)

        path.write_text(entry + "    replace: true\n")
        assert build_registry(path).get("reddit").max_width == 1280

    def test_invalid_file(self, temp_dir):
        path = temp_dir / "platforms.yaml"
        path.write_text("platforms: [")

        with pytest.raises(PlatformProfileError):
            build_registry(path)


class TestDefaultRegistry:
    """Tests for the cached process-wide registry."""

    def test_cached(self):
        assert get_default_registry() is get_default_registry()

    def test_reads_configured_platforms_file(self, temp_dir):
        path = temp_dir / "platforms.yaml"
        path.write_text(
            "platforms:\n"
            "  - name: mastodon\n"
            "    max_width: 1920\n"
            "    max_height: 1080\n"
            "    max_duration: 600\n"
            "    max_file_size: 41943040\n"
        )
        set_config(SocialcutConfig(platforms_file=path))
        reset_default_registry()

        assert "mastodon" in get_default_registry()
