"""
Custom logging formatters.

  - JsonFormatter: one JSON object per record, for log collectors. Carries the
    service name, environment, package version and correlation id, plus every
    `extra={...}` attribute passed at the call site (repository logs rely on this
    for `model`, `operation`, `id` and `duration_ms`).

  - ColorFormatter: compact ANSI-colored lines for a developer terminal.

builder.py picks one of them per handler based on settings.LOG_FORMAT.
"""

import json
import logging
from typing import Any
from logging import LogRecord

from qa_dao.utils.metadata import get_project_version

PROJECT_VERSION = get_project_version()

# LogRecord attributes that are either emitted under another name or are noise.
_RESERVED_ATTRS = frozenset({
    "args", "msg", "levelname", "levelno", "name", "pathname", "lineno", "exc_info",
    "exc_text", "stack_info", "created", "msecs", "relativeCreated", "thread",
    "threadName", "processName", "process", "filename", "module", "funcName", "taskName",
})


class JsonFormatter(logging.Formatter):
    """
    Structured JSON formatter.

    Construction:
      - env: environment name ("development", "production", ...).
      - service: logical service name included in every record.
      - datefmt: passed through to logging.Formatter.formatTime.

    Non-serializable extras are converted with str(); format() never raises on them.
    """

    def __init__(self, *, env: str | None = None, service: str = "qa-dao", datefmt: str | None = None):
        super().__init__(datefmt=datefmt)
        self.env = env
        self.service = service

    def format(self, record: LogRecord) -> str:
        log_record: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "pathname": record.pathname,
            "lineno": record.lineno,
            "correlation_id": getattr(record, "correlation_id", "-"),
            "service": self.service,
            "env": self.env,
            "version": PROJECT_VERSION,
        }

        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            log_record["stack_info"] = self.formatStack(record.stack_info)

        for key, value in record.__dict__.items():
            if key in log_record or key in _RESERVED_ATTRS or key.startswith("_"):
                continue
            try:
                json.dumps(value)
                log_record[key] = value
            except (TypeError, ValueError):
                log_record[key] = str(value)

        return json.dumps(log_record, ensure_ascii=False, default=str)


class ColorFormatter(logging.Formatter):
    """
    Development formatter: TIMESTAMP | LEVEL | LOGGER | CORRELATION_ID | MESSAGE,
    with the level name colored. Tracebacks are appended on the following lines.
    """

    COLOR_CODES = {
        "DEBUG": "\033[1;36;47m",   # bold cyan on white
        "INFO": "\033[32m",         # green
        "WARNING": "\033[33m",      # yellow
        "ERROR": "\033[31m",        # red
        "CRITICAL": "\033[1;41m",   # bold on red background
        "RESET": "\033[0m",
    }

    def format(self, record: LogRecord) -> str:
        color = self.COLOR_CODES.get(record.levelname, "")
        reset = self.COLOR_CODES["RESET"]
        timestamp = self.formatTime(record, self.datefmt)

        line = (
            f"{timestamp} | {color}{record.levelname:<10}{reset} | "
            f"{record.name:<30} | "
            f"{getattr(record, 'correlation_id', '-'):<10} | "
            f"{record.getMessage()}"
        )

        if record.exc_info:
            line = line + "\n" + self.formatException(record.exc_info)

        return line
