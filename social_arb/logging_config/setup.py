"""Logging Setup.

Formatters that carry cycle tracing through every line: JSON for
scheduled runs and a compact one-line console format for the CLI.
"""

import json
import logging
import os
import sys
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Optional, TextIO

from social_arb.logging_config.config import DEFAULT_LOGGING_CONFIG, LogFormat, LoggingConfig, LogLevel
from social_arb.logging_config.context import get_context_dict

ENV_LEVEL = "SOCIAL_ARB_LOG_LEVEL"
ENV_FORMAT = "SOCIAL_ARB_LOG_FORMAT"

# Fields the engine attaches through logger.*(..., extra={...})
RECORD_FIELDS = ("keyword", "topic", "reason", "duration_ms")

# Capped at WARNING; tweepy logs every rate-limit sleep at INFO
QUIET_LOGGERS = ("urllib3", "asyncio", "httpx", "httpcore", "tweepy")


def record_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Cycle context merged with the engine fields on a record.

    Record fields win, so a keyword logged inside a research cycle
    keeps its own value next to the cycle's topic.
    """
    fields = get_context_dict()
    for key in RECORD_FIELDS:
        value = getattr(record, key, None)
        if value is not None:
            fields[key] = value
    return fields


def _timestamp(record: logging.LogRecord) -> datetime:
    return datetime.fromtimestamp(record.created, timezone.utc)


class StructuredFormatter(logging.Formatter):
    """One JSON object per line, for cron runs and log shipping.

    Example output:
        {"ts": "2026-03-02T12:00:00.123+00:00", "level": "INFO",
         "service": "social-arb", "logger": "social_arb.runner",
         "msg": "Cycle complete", "cycle_id": "3f9c0a1b2d4e",
         "kind": "batch"}
    """

    def __init__(self, service_name: str = "social-arb", include_caller: bool = True):
        super().__init__()
        self.service_name = service_name
        self.include_caller = include_caller

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": _timestamp(record).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "service": self.service_name,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        entry.update(record_fields(record))

        if self.include_caller:
            entry["caller"] = f"{record.module}.{record.funcName}:{record.lineno}"

        if record.exc_info and record.exc_info[0] is not None:
            entry["error"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
            }
            entry["traceback"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Compact single-line output for interactive CLI use.

    Lines read ``12:00:00 INFO    batch:3f9c0a1b policy | celsius | msg``:
    the cycle kind with a short cycle id, the emitting module, then the
    keyword (or topic) the line is about. Leftover fields trail the
    message in parentheses.
    """

    LEVEL_COLORS = {
        "DEBUG": "\033[2m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[1;31m",
    }
    RESET = "\033[0m"

    def __init__(self, use_color: bool = False):
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        fields = record_fields(record)
        parts = [_timestamp(record).strftime("%H:%M:%S"), f"{record.levelname:<7}"]

        cycle_id = fields.pop("cycle_id", "")
        if cycle_id:
            parts.append(f"{fields.pop('kind', 'cycle')}:{cycle_id[:8]}")
        parts.append(record.name.rsplit(".", 1)[-1])

        line = " ".join(parts)
        subject = fields.pop("keyword", None) or fields.pop("topic", None)
        if subject:
            line += f" | {subject}"
        line += f" | {record.getMessage()}"
        if fields:
            line += " (" + ", ".join(f"{k}={v}" for k, v in fields.items()) + ")"

        if self.use_color and record.levelname in self.LEVEL_COLORS:
            line = f"{self.LEVEL_COLORS[record.levelname]}{line}{self.RESET}"

        if record.exc_info and record.exc_info[0] is not None:
            line += "\n" + self.formatException(record.exc_info)
        return line


def _apply_env(config: LoggingConfig) -> LoggingConfig:
    level = os.environ.get(ENV_LEVEL, "").upper()
    if level in LogLevel.__members__:
        config = replace(config, level=LogLevel[level])

    fmt = os.environ.get(ENV_FORMAT, "").lower()
    if fmt in {f.value for f in LogFormat}:
        config = replace(config, format=LogFormat(fmt))
    return config


def configure_logging(
    config: Optional[LoggingConfig] = None,
    stream: Optional[TextIO] = None,
) -> logging.Handler:
    """Install one handler on the root logger, replacing any others.

    The CLI calls this once per invocation. SOCIAL_ARB_LOG_LEVEL and
    SOCIAL_ARB_LOG_FORMAT take precedence over ``config`` so a cron job
    can switch to JSON without code changes. Console output is colored
    only when the stream is a terminal.

    Returns:
        The installed handler (writes to stderr unless ``stream`` is given).
    """
    config = _apply_env(config or DEFAULT_LOGGING_CONFIG)
    stream = stream or sys.stderr

    if config.format == LogFormat.JSON:
        formatter: logging.Formatter = StructuredFormatter(
            service_name=config.service_name,
            include_caller=config.include_caller,
        )
    else:
        formatter = ConsoleFormatter(use_color=hasattr(stream, "isatty") and stream.isatty())

    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, config.level.value))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return handler
