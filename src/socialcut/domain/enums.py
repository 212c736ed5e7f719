"""Enumerations shared across planning, execution and the CLI."""

from enum import Enum

from socialcut.errors import UnsupportedFormatError, UnsupportedTemplateError


class OutputFormat(Enum):
    """Supported output containers."""

    MP4 = "mp4"
    WEBM = "webm"

    @classmethod
    def from_string(cls, value: str) -> "OutputFormat":
        """Resolve a container name, case-insensitively.

        Raises:
            UnsupportedFormatError: If the container is not mp4 or webm.
        """
        normalized = value.strip().lstrip(".").casefold()
        for member in cls:
            if member.value == normalized:
                return member
        raise UnsupportedFormatError(
            f"Unsupported output format: {value}. "
            f"Supported formats: {', '.join(m.value for m in cls)}"
        )


class TemplateType(Enum):
    """Grid layouts for multi-input composition."""

    SINGLE = "1x1"
    QUAD = "2x2"
    TRIPTYCH = "3x1"

    @property
    def required_inputs(self) -> int:
        """Number of source videos the layout consumes."""
        return {"1x1": 1, "2x2": 4, "3x1": 3}[self.value]

    @classmethod
    def from_string(cls, value: str) -> "TemplateType":
        for member in cls:
            if member.value == value.strip().casefold():
                return member
        raise UnsupportedTemplateError(
            f"Unsupported template type: {value}. "
            f"Supported templates: {', '.join(m.value for m in cls)}"
        )


class Anchor(Enum):
    """Corner a text overlay is anchored to."""

    TOP_LEFT = "top-left"
    TOP_RIGHT = "top-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_RIGHT = "bottom-right"


class BitrateMode(Enum):
    """How a bitrate plan was derived."""

    PLATFORM = "platform"
    BUDGET = "budget"
