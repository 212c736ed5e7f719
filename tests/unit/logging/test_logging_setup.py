"""Tests for logging configuration, job context and JSON output."""

import json
import logging
import sys

import pytest

from socialcut.config.models import LoggingConfig
from socialcut.logging import (
    JobContextFilter,
    JSONFormatter,
    configure_logging,
    get_job_context,
    job_context,
    set_log_level,
    stage_context,
)


@pytest.fixture
def restore_root_logger():
    """Restore root logger handlers and level after configure_logging."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def _record(msg: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="socialcut.jobs.split",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJobContext:
    """Tests for job_context and stage_context."""

    def test_nesting(self):
        assert get_job_context() == (None, None)

        with job_context("split"):
            assert get_job_context() == ("split", None)
            with stage_context("chunk-001"):
                assert get_job_context() == ("split", "chunk-001")
            assert get_job_context() == ("split", None)

        assert get_job_context() == (None, None)

    def test_filter_tags(self):
        context_filter = JobContextFilter()

        record = _record()
        context_filter.filter(record)
        assert record.job_tag == ""

        with job_context("split"), stage_context("chunk-001"):
            record = _record()
            assert context_filter.filter(record) is True

        assert record.job_tag == "[split:chunk-001] "
        assert record.job_id == "split"
        assert record.stage == "chunk-001"

    def test_filter_job_only(self):
        with job_context("template"):
            record = _record()
            JobContextFilter().filter(record)

        assert record.job_tag == "[template] "


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_basic_fields(self):
        entry = json.loads(JSONFormatter().format(_record("encoded a.mp4")))

        assert entry["level"] == "info"
        assert entry["message"] == "encoded a.mp4"
        assert entry["logger"] == "socialcut.jobs.split"
        assert entry["time"].endswith("+00:00")
        assert "job" not in entry
        assert "extra" not in entry

    def test_job_and_extras(self):
        record = _record(job_id="split", stage="chunk-002", job_tag="x", crf=23)

        entry = json.loads(JSONFormatter().format(record))

        assert (entry["job"], entry["stage"]) == ("split", "chunk-002")
        assert entry["extra"] == {"crf": 23}

    def test_exception(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = _record()
            record.exc_info = sys.exc_info()

        entry = json.loads(JSONFormatter().format(record))

        assert "RuntimeError: boom" in entry["exception"]


class TestConfigureLogging:
    """Tests for configure_logging and set_log_level."""

    def test_stderr_only(self, restore_root_logger):
        configure_logging(LoggingConfig(level="warning"))

        root = restore_root_logger
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], logging.StreamHandler)

    def test_file_handler(self, restore_root_logger, temp_dir):
        log_file = temp_dir / "logs" / "socialcut.log"
        configure_logging(LoggingConfig(level="info", file=log_file, format="json"))

        with job_context("split"):
            logging.getLogger("socialcut.test").info("written")
        for handler in restore_root_logger.handlers:
            handler.flush()

        entry = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert entry["message"] == "written"
        assert entry["job"] == "split"
        assert len(restore_root_logger.handlers) == 1

    def test_file_and_stderr(self, restore_root_logger, temp_dir):
        configure_logging(
            LoggingConfig(file=temp_dir / "a.log", include_stderr=True)
        )

        assert len(restore_root_logger.handlers) == 2

    def test_set_log_level(self, restore_root_logger):
        configure_logging(LoggingConfig(level="warning"))

        set_log_level("debug")

        assert restore_root_logger.level == logging.DEBUG
        assert all(h.level == logging.DEBUG for h in restore_root_logger.handlers)

    def test_unwritable_log_file_falls_back_to_stderr(
        self, restore_root_logger, temp_dir
    ):
        blocker = temp_dir / "not-a-dir"
        blocker.write_text("")

        configure_logging(LoggingConfig(file=blocker / "socialcut.log"))

        handlers = restore_root_logger.handlers
        assert len(handlers) == 1
        assert handlers[0].stream is sys.stderr
