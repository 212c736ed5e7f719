"""Exception hierarchy for socialcut.

Every error raised by the planning layer, the engine adapters and the jobs
derives from SocialcutError so the CLI can report failures uniformly.
"""

from __future__ import annotations


class SocialcutError(Exception):
    """Base class for all socialcut errors."""

    pass


class ConfigError(SocialcutError):
    """Configuration file or value is invalid."""

    pass


class InvalidMetadataError(SocialcutError):
    """Probed or supplied media metadata is degenerate (zero or negative)."""

    pass


class MetadataUnavailableError(SocialcutError):
    """Media metadata could not be obtained from the engine."""

    pass


class InvalidInputCountError(SocialcutError):
    """A template received the wrong number of input videos."""

    def __init__(self, template: str, required: int, received: int) -> None:
        self.template = template
        self.required = required
        self.received = received
        super().__init__(
            f"Template {template} requires {required} input video(s), "
            f"got {received}"
        )


class UnsupportedTemplateError(SocialcutError):
    """Template type is not one of the known layouts."""

    pass


class EncodeFailedError(SocialcutError):
    """The media engine exited with an error or timed out.

    Attributes:
        description: What the engine was asked to do.
        returncode: Process exit status (-1 on timeout).
        stderr: Tail of the engine's diagnostic output.
    """

    def __init__(
        self,
        description: str,
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        self.description = description
        self.returncode = returncode
        self.stderr = stderr
        message = f"{description} failed"
        if returncode is not None:
            message += f" (exit code {returncode})"
        if stderr:
            message += f": {stderr}"
        super().__init__(message)


class OutputTooLargeError(SocialcutError):
    """Final artifact still exceeds the size ceiling after tightening."""

    def __init__(self, size_bytes: int, limit_bytes: int) -> None:
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes
        super().__init__(
            f"Output is {size_bytes} bytes, exceeding the limit of "
            f"{limit_bytes} bytes"
        )


class UnsupportedPlatformError(SocialcutError):
    """Requested platform is not registered."""

    def __init__(self, name: str, available: list[str] | None = None) -> None:
        self.name = name
        message = f"Unsupported platform: {name}"
        if available:
            message += f". Available platforms: {', '.join(available)}"
        super().__init__(message)


class UnsupportedFormatError(SocialcutError):
    """Requested output container is not supported."""

    pass


class DuplicatePlatformError(SocialcutError):
    """A platform with the same name is already registered."""

    pass


class PlatformProfileError(SocialcutError):
    """A custom platform profile file could not be loaded or validated."""

    pass


class InvalidSkipError(SocialcutError):
    """Skip offset is malformed or not shorter than the source duration."""

    pass


class ChunkTooLongError(SocialcutError):
    """Chunk duration exceeds the platform's maximum duration."""

    pass


class ToolNotAvailableError(SocialcutError):
    """A required external tool (ffmpeg, ffprobe) was not found."""

    pass


class FallbackExhaustedError(SocialcutError):
    """Every strategy in a fallback chain failed.

    Attributes:
        failures: (strategy name, reason) pairs in attempt order.
    """

    def __init__(self, description: str, failures: list[tuple[str, str]]) -> None:
        self.description = description
        self.failures = failures
        detail = "; ".join(f"{name}: {reason}" for name, reason in failures)
        super().__init__(f"All strategies failed for {description}: {detail}")
