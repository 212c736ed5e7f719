"""Job context for structured logging.

Propagates the current job and pipeline stage through contextvars so every
log record emitted while a job runs carries them automatically.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_job_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "job_id", default=None
)
_stage: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "stage", default=None
)


@contextmanager
def job_context(job_id: str) -> Generator[None, None, None]:
    """Context manager marking records as belonging to a job.

    Example:
        with job_context("split"):
            logger.info("Splitting")  # [split] Splitting
    """
    token = _job_id.set(job_id)
    try:
        yield
    finally:
        _job_id.reset(token)


@contextmanager
def stage_context(stage: str) -> Generator[None, None, None]:
    """Context manager naming the current pipeline stage within a job."""
    token = _stage.set(stage)
    try:
        yield
    finally:
        _stage.reset(token)


def get_job_context() -> tuple[str | None, str | None]:
    """Get current (job_id, stage), either may be None."""
    return _job_id.get(), _stage.get()


class JobContextFilter(logging.Filter):
    """Logging filter that injects job context into log records.

    Adds job_id and stage attributes for JSON output and a compact job_tag
    such as "[template:cell-2] " for text output.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        job_id, stage = get_job_context()

        record.job_id = job_id
        record.stage = stage

        if job_id:
            record.job_tag = f"[{job_id}:{stage}] " if stage else f"[{job_id}] "
        else:
            record.job_tag = ""

        return True  # Never filter out records
