"""Shared test fixtures for socialcut."""

import os
import shutil
import tempfile
from collections.abc import Callable
from dataclasses import replace
from pathlib import Path
from unittest.mock import patch

import pytest

from socialcut.config import SocialcutConfig, clear_config, set_config
from socialcut.domain.models import MediaMetadata
from socialcut.errors import EncodeFailedError
from socialcut.executor.command import EncodeRequest
from socialcut.platforms import reset_default_registry

MIB = 1024 * 1024

DEFAULT_METADATA = MediaMetadata(
    duration=30.0,
    width=1920,
    height=1080,
    codec="h264",
    bitrate=4_000_000,
    frame_rate=30.0,
    frame_count=900,
    has_audio=True,
    audio_codec="aac",
    sample_rate=48000,
    channels=2,
)


class FakeEngine:
    """Scripted MediaEngine that records requests instead of running ffmpeg.

    Outputs are written as sparse files so size checks see the scripted
    sizes without allocating real data.

    Attributes:
        metadata: Probe results keyed by file name; others get default_metadata.
        output_sizes: Sizes consumed by successive encodes (then default_size).
        fail: Predicate selecting requests that raise EncodeFailedError.
        requests: Every request passed to encode(), in order.
        probed: Every path passed to probe(), in order.
    """

    def __init__(self, default_metadata: MediaMetadata = DEFAULT_METADATA) -> None:
        self.default_metadata = default_metadata
        self.metadata: dict[str, MediaMetadata] = {}
        self.output_sizes: list[int] = []
        self.default_size = 1024
        self.fail: Callable[[EncodeRequest], bool] | None = None
        self.requests: list[EncodeRequest] = []
        self.probed: list[Path] = []

    def probe(self, path: Path) -> MediaMetadata:
        self.probed.append(path)
        return self.metadata.get(path.name, self.default_metadata)

    def encode(self, request: EncodeRequest) -> None:
        self.requests.append(request)
        if self.fail is not None and self.fail(request):
            raise EncodeFailedError(request.description, 1, "scripted failure")
        size = self.output_sizes.pop(0) if self.output_sizes else self.default_size
        request.output.parent.mkdir(parents=True, exist_ok=True)
        with open(request.output, "wb") as f:
            f.truncate(size)

    def descriptions(self) -> list[str]:
        return [request.description for request in self.requests]


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test isolation."""
    dir_path = tempfile.mkdtemp()
    yield Path(dir_path)
    shutil.rmtree(dir_path, ignore_errors=True)


@pytest.fixture
def fake_engine() -> FakeEngine:
    """Scripted engine with 1920x1080, 30s, 4 Mbps default metadata."""
    return FakeEngine()


@pytest.fixture
def make_metadata() -> Callable[..., MediaMetadata]:
    """Factory for MediaMetadata overriding DEFAULT_METADATA fields."""

    def factory(**overrides) -> MediaMetadata:
        return replace(DEFAULT_METADATA, **overrides)

    return factory


@pytest.fixture
def make_source(temp_dir: Path) -> Callable[[str], Path]:
    """Factory creating placeholder source files in temp_dir."""

    def factory(name: str) -> Path:
        path = temp_dir / "sources" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"\x00" * 16)
        return path

    return factory


@pytest.fixture(autouse=True)
def isolated_config(temp_dir: Path):
    """Run every test against default configuration.

    Points SOCIALCUT_CONFIG_PATH at a file that does not exist, clears all
    other SOCIALCUT_* variables, and resets the cached config and platform
    registry around the test.
    """
    env = {k: v for k, v in os.environ.items() if not k.startswith("SOCIALCUT_")}
    env["SOCIALCUT_CONFIG_PATH"] = str(temp_dir / "missing-config.toml")
    with patch.dict(os.environ, env, clear=True):
        clear_config()
        set_config(SocialcutConfig())
        reset_default_registry()
        yield
        clear_config()
        reset_default_registry()
