"""Engine adapters, command building and encode control loops."""

from socialcut.executor.command import EncodeRequest, InputSpec, build_ffmpeg_command
from socialcut.executor.encode_loop import (
    EncodeLoopSettings,
    EncodeOutcome,
    SizeConstrainedEncoder,
    enforce_size_ceiling,
)
from socialcut.executor.fallback import FallbackResult, Strategy, run_fallback_chain
from socialcut.executor.interface import MediaEngine, get_tool_path, require_tool

__all__ = [
    "EncodeLoopSettings",
    "EncodeOutcome",
    "EncodeRequest",
    "FallbackResult",
    "InputSpec",
    "MediaEngine",
    "SizeConstrainedEncoder",
    "Strategy",
    "build_ffmpeg_command",
    "enforce_size_ceiling",
    "get_tool_path",
    "require_tool",
    "run_fallback_chain",
]
