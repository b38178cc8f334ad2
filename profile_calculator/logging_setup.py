"""
JSONL log sink for calculator runs.

Every command appends one JSON object per log record to the file named by the
``log.path`` setting, so a sequence of shell commands can be traced afterwards.
"""

import json
import logging
from datetime import UTC
from datetime import datetime
from pathlib import Path

LOG_SCHEMA = {"name": "profile-calculator.log", "ver": "1.0.0"}

# Attributes every LogRecord carries; anything else on a record came in through ``extra``
_STANDARD_ATTRS = frozenset(vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))) | {
    "message",
    "asctime",
}


class JsonLineFormatter(logging.Formatter):
    """Renders a record as a single JSON line.

    A dict passed as the log message is merged into the line, as are ``extra``
    fields such as ``event``.
    """

    def format(self, record: logging.LogRecord) -> str:
        line = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(timespec="milliseconds"),
            "lvl": record.levelname,
            "schema": LOG_SCHEMA,
            "logger": record.name,
            "event": getattr(record, "event", None),
            "message": record.getMessage(),
        }
        if isinstance(record.msg, dict):
            line.update(record.msg)
        if record.exc_info:
            line["exception"] = self.formatException(record.exc_info)

        extras = {k: v for k, v in vars(record).items() if k not in _STANDARD_ATTRS}
        for key, value in extras.items():
            line.setdefault(key, value)
        return json.dumps(line, ensure_ascii=False, default=str)


class JsonlHandler(logging.FileHandler):
    """Appends JSON lines to the calculator log, creating its directory on demand."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        super().__init__(self.path, mode="a", encoding="utf-8", delay=True)
        self.setFormatter(JsonLineFormatter())


def init_json_logging(path: str | Path, level: str = "INFO") -> JsonlHandler:
    """Route root logging to a JSONL file, replacing any sink installed earlier.

    Raises:
        OSError: If the log directory cannot be created
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for existing in [h for h in root.handlers if isinstance(h, JsonlHandler)]:
        root.removeHandler(existing)
        existing.close()

    handler = JsonlHandler(path)
    root.addHandler(handler)
    return handler
