"""Logging setup and job context for socialcut."""

from socialcut.logging.config import configure_logging, set_log_level
from socialcut.logging.context import (
    JobContextFilter,
    get_job_context,
    job_context,
    stage_context,
)
from socialcut.logging.handlers import JSONFormatter

__all__ = [
    "JSONFormatter",
    "JobContextFilter",
    "configure_logging",
    "get_job_context",
    "job_context",
    "set_log_level",
    "stage_context",
]
