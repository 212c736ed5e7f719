"""JSON log output for socialcut."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Attributes present on every record; anything else arrived via extra=
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}
# Set by JobContextFilter; job_id and stage are emitted as top-level keys
_JOB_ATTRS = frozenset({"job_id", "stage", "job_tag"})


class JSONFormatter(logging.Formatter):
    """Render each record as one JSON object per line.

    Keys are time (UTC, millisecond ISO-8601), level, logger and message,
    then job and stage while a job is running, extra= fields under "extra"
    and the formatted traceback under "exception".
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            "time": created.isoformat(timespec="milliseconds"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        for attr, key in (("job_id", "job"), ("stage", "stage")):
            value = getattr(record, attr, None)
            if value:
                entry[key] = value

        extra = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS
            and key not in _JOB_ATTRS
            and not key.startswith("_")
        }
        if extra:
            entry["extra"] = extra
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)
