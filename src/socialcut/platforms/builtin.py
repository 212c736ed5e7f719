"""Built-in platform profiles."""

from socialcut.domain.enums import OutputFormat
from socialcut.domain.models import PlatformProfile

MIB = 1024 * 1024
GIB = 1024 * MIB

BUILTIN_PROFILES: tuple[PlatformProfile, ...] = (
    PlatformProfile(
        name="tiktok",
        max_width=1080,
        max_height=1920,
        max_duration=180,
        max_file_size=287 * MIB,
        video_codec="libx264",
        audio_codec="aac",
        video_bitrate="2M",
        audio_bitrate="128k",
        output_format=OutputFormat.MP4,
        force_portrait=True,
    ),
    PlatformProfile(
        name="instagram-reel",
        max_width=1080,
        max_height=1920,
        max_duration=90,
        max_file_size=250 * MIB,
        video_codec="libx264",
        audio_codec="aac",
        video_bitrate="2M",
        audio_bitrate="128k",
        output_format=OutputFormat.MP4,
        force_portrait=True,
    ),
    PlatformProfile(
        name="x-twitter",
        max_width=1920,
        max_height=1200,
        max_duration=140,
        max_file_size=5 * MIB,
        video_codec="libx264",
        audio_codec="aac",
        video_bitrate="2M",
        audio_bitrate="128k",
        output_format=OutputFormat.MP4,
    ),
    PlatformProfile(
        name="reddit",
        max_width=1920,
        max_height=1080,
        max_duration=300,
        max_file_size=1 * GIB,
        video_codec="libx264",
        audio_codec="aac",
        video_bitrate="4M",
        audio_bitrate="192k",
        output_format=OutputFormat.MP4,
    ),
    PlatformProfile(
        name="tryonhaulcentral",
        max_width=1920,
        max_height=1080,
        max_duration=300,
        max_file_size=1 * GIB,
        video_codec="libx264",
        audio_codec="aac",
        video_bitrate="4M",
        audio_bitrate="192k",
        output_format=OutputFormat.MP4,
        force_portrait=True,
    ),
    PlatformProfile(
        name="tryonhaulcentral-portrait",
        max_width=1080,
        max_height=1920,
        max_duration=300,
        max_file_size=1 * GIB,
        video_codec="libx264",
        audio_codec="aac",
        video_bitrate="4M",
        audio_bitrate="192k",
        output_format=OutputFormat.MP4,
        force_portrait=True,
    ),
    PlatformProfile(
        name="tryonhaulcentral-landscape",
        max_width=1920,
        max_height=1080,
        max_duration=300,
        max_file_size=1 * GIB,
        video_codec="libx264",
        audio_codec="aac",
        video_bitrate="4M",
        audio_bitrate="192k",
        output_format=OutputFormat.MP4,
    ),
)
