"""
App-layer JSONL logging bootstrap.
Initializes a single canonical JSONL sink early in CLI startup.
"""

import json
import logging
import os
from datetime import UTC
from datetime import datetime
from pathlib import Path


def default_log_path() -> str:
    return os.environ.get("CONTEXT_COST_LOG_PATH") or str(Path.home() / ".context-cost" / "context-cost.log.jsonl")


def default_log_level() -> str:
    return os.environ.get("CONTEXT_COST_LOG_LEVEL", "INFO").upper()


# LogRecord attributes that are not user-supplied extras
_RECORD_FIELDS = frozenset(
    {
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "name",
        "message",
    }
)


class JsonlHandler(logging.Handler):
    def __init__(self, path: str | Path):
        super().__init__()
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def format_record(self, record: logging.LogRecord) -> dict:
        base = {
            "ts": datetime.now(UTC).isoformat(timespec="milliseconds"),
            "lvl": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            base["exc"] = logging.Formatter().formatException(record.exc_info)
        for k, v in record.__dict__.items():
            if k in _RECORD_FIELDS:
                continue
            base.setdefault(k, v)
        return base

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = json.dumps(self.format_record(record), ensure_ascii=False, default=str)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")
        except Exception:
            self.handleError(record)


def init_json_logging(path: str | None = None, level: str | None = None) -> JsonlHandler:
    path = path or default_log_path()
    level = (level or default_log_level()).upper()
    root = logging.getLogger()
    root.setLevel(getattr(logging, level, logging.INFO))
    # Remove existing handlers of the same kind to avoid duplicates
    for h in list(root.handlers):
        if isinstance(h, JsonlHandler):
            root.removeHandler(h)
            h.close()
    handler = JsonlHandler(path)
    root.addHandler(handler)
    return handler
