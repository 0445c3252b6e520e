"""Logging setup: console plus optional JSON-lines file stream."""

from __future__ import annotations

import logging
import os
import queue
from dataclasses import dataclass
from datetime import UTC, datetime
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path

import orjson

_QUEUE_LISTENER: QueueListener | None = None

_STANDARD_RECORD_FIELDS = frozenset(
    {
        "name",
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
        "message",
    }
)


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Logging pipeline configuration."""

    level_name: str = "INFO"
    console_format: str = "text"  # text|json
    file_path: str | None = None
    file_format: str = "json"  # text|json


class JsonFormatter(logging.Formatter):
    """JSON formatter with extra-field preservation."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "ts": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        extras = {k: v for k, v in record.__dict__.items() if k not in _STANDARD_RECORD_FIELDS}
        if extras:
            payload["fields"] = extras
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return orjson.dumps(payload, default=str).decode("utf-8")


def configure_logging(config: LoggingConfig) -> None:
    """Install console and optional file output on the root logger.

    With a file configured, the root logger only enqueues records and a
    listener thread feeds both sinks. Calling again replaces the previous
    setup and closes its file.
    """
    global _QUEUE_LISTENER

    _stop_listener()
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.getLevelNamesMapping().get(config.level_name.upper(), logging.INFO))

    console = logging.StreamHandler()
    console.setFormatter(_resolve_formatter(config.console_format))
    if not config.file_path:
        root.addHandler(console)
        return

    log_queue: queue.SimpleQueue[logging.LogRecord] = queue.SimpleQueue()
    root.addHandler(QueueHandler(log_queue))
    _QUEUE_LISTENER = QueueListener(
        log_queue,
        console,
        _file_handler(Path(config.file_path), config.file_format),
        respect_handler_level=True,
    )
    _QUEUE_LISTENER.start()


def build_logging_config() -> LoggingConfig:
    """Resolve logging configuration from env vars."""
    level_name = os.getenv("SHIPWRECKER_LOG_LEVEL", os.getenv("LOG_LEVEL", "INFO")).upper()
    console_format = os.getenv("LOG_FORMAT", "text").lower()
    log_dir = os.getenv("SHIPWRECKER_LOG_DIR", "").strip()
    file_path = _run_log_file_path(Path(log_dir)) if log_dir else None
    return LoggingConfig(
        level_name=level_name,
        console_format=console_format,
        file_path=file_path,
        file_format="json",
    )


def setup_logging() -> None:
    """Configure application logging from the environment."""
    config = build_logging_config()
    configure_logging(config)
    if config.file_path:
        logging.getLogger(__name__).info("logging_file=%s", config.file_path)


def _run_log_file_path(base_dir: Path) -> str:
    stamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S")
    return str(base_dir / f"shipwrecker_run_{stamp}.jsonl")


def _resolve_formatter(kind: str) -> logging.Formatter:
    if kind.strip().lower() == "json":
        return JsonFormatter()
    return logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")


def _stop_listener() -> None:
    global _QUEUE_LISTENER

    if _QUEUE_LISTENER is None:
        return
    _QUEUE_LISTENER.stop()
    for handler in _QUEUE_LISTENER.handlers:
        handler.close()
    _QUEUE_LISTENER = None


def _file_handler(path: Path, kind: str) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, mode="a", encoding="utf-8", delay=True)
    handler.setFormatter(_resolve_formatter(kind))
    return handler
