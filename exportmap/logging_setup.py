"""
CLI logging bootstrap.
Initializes a single canonical JSONL sink early in CLI startup, and an optional
Rich console handler for --verbose runs.
"""

import json
import logging
import os
from datetime import UTC
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

DEFAULT_PATH = os.environ.get("EXPORTMAP_LOG_PATH", "./exportmap.log.jsonl")
DEFAULT_LEVEL = os.environ.get("EXPORTMAP_LOG_LEVEL", "INFO").upper()

# LogRecord attributes that are not user-supplied extras
_RECORD_FIELDS = frozenset(
    (
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
        "asctime",
    )
)


class JsonlHandler(logging.Handler):
    def __init__(self, path: str):
        super().__init__()
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            base = {
                "ts": datetime.now(UTC).isoformat(timespec="milliseconds"),
                "lvl": record.levelname,
                "schema": {"name": "exportmap.log", "ver": "1.0.0"},
                "logger": record.name,
                "event": getattr(record, "event", None),
                "message": record.getMessage(),
            }
            # Fields passed through `extra=` (specifier, package, key, url, ...)
            for k, v in record.__dict__.items():
                if k not in _RECORD_FIELDS:
                    base.setdefault(k, v)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(base, ensure_ascii=False, default=str) + "\n")
        except Exception:
            self.handleError(record)


def init_json_logging(path: str | None = None, level: str | None = None) -> None:
    path = path or DEFAULT_PATH
    level = (level or DEFAULT_LEVEL).upper()
    root = logging.getLogger()
    root.setLevel(getattr(logging, level, logging.INFO))
    # Remove existing handlers of the same kind to avoid duplicates
    for h in list(root.handlers):
        if isinstance(h, JsonlHandler):
            root.removeHandler(h)
    root.addHandler(JsonlHandler(path))


def init_console_logging(level: str = "DEBUG") -> None:
    """Mirror log records to stderr through Rich."""
    root = logging.getLogger()
    for h in list(root.handlers):
        if isinstance(h, RichHandler):
            root.removeHandler(h)
    handler = RichHandler(console=Console(stderr=True), show_path=False, markup=False)
    handler.setLevel(getattr(logging, level.upper(), logging.DEBUG))
    root.addHandler(handler)
    root.setLevel(min(root.level or logging.WARNING, handler.level))
