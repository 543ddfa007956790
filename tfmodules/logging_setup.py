"""
Logging bootstrap for the tfmodules CLI.
Console output goes through Rich on stderr; an optional JSONL sink records
everything at or above the configured file level.
"""

import json
import logging
import os
from datetime import UTC
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

DEFAULT_PATH = os.environ.get("TFMODULES_LOG_PATH")
DEFAULT_LEVEL = os.environ.get("TFMODULES_LOG_LEVEL", "DEBUG").upper()

_RESERVED_RECORD_FIELDS = frozenset(
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
        "name",
        "taskName",
    )
)


class JsonlHandler(logging.Handler):
    def __init__(self, path: str | Path):
        super().__init__()
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            base = {
                "ts": datetime.now(UTC).isoformat(timespec="milliseconds"),
                "lvl": record.levelname,
                "schema": {"name": "tfmodules.log", "ver": "1.0.0"},
                "logger": record.name,
                "message": record.getMessage(),
            }
            # Attach any extra fields on the record
            for k, v in record.__dict__.items():
                if k in _RESERVED_RECORD_FIELDS:
                    continue
                base.setdefault(k, v)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(base, ensure_ascii=False, default=str) + "\n")
        except Exception:
            self.handleError(record)


def init_json_logging(path: str | Path | None = None, level: str | None = None) -> None:
    """Attach a JSONL file sink to the package logger (no-op without a path)."""
    path = path or DEFAULT_PATH
    if not path:
        return
    level = (level or DEFAULT_LEVEL).upper()
    package_logger = logging.getLogger("tfmodules")
    package_logger.setLevel(logging.DEBUG)
    # Remove existing handlers of the same kind to avoid duplicates
    for h in list(package_logger.handlers):
        if isinstance(h, JsonlHandler):
            package_logger.removeHandler(h)
    handler = JsonlHandler(path)
    handler.setLevel(getattr(logging, level, logging.DEBUG))
    package_logger.addHandler(handler)


def init_console_logging(level: str = "WARNING") -> None:
    """Route package log records to stderr through Rich."""
    package_logger = logging.getLogger("tfmodules")
    package_logger.setLevel(logging.DEBUG)
    for h in list(package_logger.handlers):
        if isinstance(h, RichHandler):
            package_logger.removeHandler(h)
    handler = RichHandler(console=Console(stderr=True), show_time=False, show_path=False, markup=False)
    handler.setLevel(getattr(logging, level.upper(), logging.WARNING))
    package_logger.addHandler(handler)
