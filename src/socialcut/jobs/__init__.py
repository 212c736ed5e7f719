"""Split and template jobs run against a media engine."""

from socialcut.jobs.split import ChunkOutput, SplitOptions, SplitResult, Splitter
from socialcut.jobs.template import TemplateOptions, TemplateResult, Templater
from socialcut.jobs.workspace import JobWorkspace

__all__ = [
    "ChunkOutput",
    "JobWorkspace",
    "SplitOptions",
    "SplitResult",
    "Splitter",
    "TemplateOptions",
    "TemplateResult",
    "Templater",
]
