"""Tests for custom platform profile loading."""

import pytest

from socialcut.domain.enums import OutputFormat
from socialcut.errors import PlatformProfileError
from socialcut.platforms.loader import load_platform_file, parse_platform_data


def _entry(**overrides) -> dict:
    entry = {
        "name": "youtube-shorts",
        "max_width": 1080,
        "max_height": 1920,
        "max_duration": 60,
        "max_file_size": 256 * 1024 * 1024,
    }
    entry.update(overrides)
    return entry


class TestParsePlatformData:
    """Tests for parse_platform_data."""

    def test_defaults(self):
        [(profile, replace)] = parse_platform_data({"platforms": [_entry()]})

        assert profile.name == "youtube-shorts"
        assert profile.video_codec == "libx264"
        assert profile.audio_codec == "aac"
        assert profile.video_bitrate == "2M"
        assert profile.output_format is OutputFormat.MP4
        assert profile.force_portrait is False
        assert replace is False

    def test_webm_profile(self):
        data = {
            "platforms": [
                _entry(
                    output_format="webm",
                    video_codec="libvpx-vp9",
                    audio_codec="libopus",
                    video_bitrate="1500k",
                    replace=True,
                )
            ]
        }

        [(profile, replace)] = parse_platform_data(data)

        assert profile.output_format is OutputFormat.WEBM
        assert profile.video_codec == "libvpx-vp9"
        assert replace is True

    def test_empty_document(self):
        assert parse_platform_data(None) == []
        assert parse_platform_data({"platforms": []}) == []

    def test_not_a_mapping(self):
        with pytest.raises(PlatformProfileError, match="mapping"):
            parse_platform_data(["tiktok"])

    @pytest.mark.parametrize(
        "overrides",
        [
            {"max_width": 0},
            {"max_duration": -1},
            {"video_codec": "mpeg2video"},
            {"audio_codec": "flac"},
            {"video_bitrate": "fast"},
            {"output_format": "avi"},
            {"name": "Has Spaces"},
            {"colour": "red"},
        ],
    )
    def test_invalid_entries(self, overrides):
        with pytest.raises(PlatformProfileError, match="Invalid platform file"):
            parse_platform_data({"platforms": [_entry(**overrides)]})

    def test_duplicate_names(self):
        data = {"platforms": [_entry(), _entry(max_duration=30)]}

        with pytest.raises(PlatformProfileError, match="duplicate names"):
            parse_platform_data(data)


class TestLoadPlatformFile:
    """Tests for load_platform_file."""

    def test_missing_file(self, temp_dir):
        with pytest.raises(PlatformProfileError, match="Cannot read"):
            load_platform_file(temp_dir / "nope.yaml")

    def test_bad_yaml(self, temp_dir):
        path = temp_dir / "platforms.yaml"
        path.write_text("platforms:\n  - name: [unterminated\n")

        with pytest.raises(PlatformProfileError, match="Invalid YAML"):
            load_platform_file(path)

    def test_loads_file(self, temp_dir):
        path = temp_dir / "platforms.yaml"
        path.write_text(
            "platforms:\n"
            "  - name: bluesky\n"
            "    max_width: 1920\n"
            "    max_height: 1080\n"
            "    max_duration: 60\n"
            "    max_file_size: 52428800\n"
            "    audio_bitrate: 96k\n"
        )

        [(profile, _)] = load_platform_file(path)

        assert profile.name == "bluesky"
        assert profile.audio_bitrate == "96k"
