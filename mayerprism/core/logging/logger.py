"""JSON-lines logging for pipeline runs.

Every entry carries the run's ``trace_id`` and, when known, the pipeline
``stage`` and ``error_code``. Any other bound or contextual field lands in
``context``.
"""

from __future__ import annotations

import json
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import IO, Any, Iterator
from uuid import uuid4

from loguru import logger

from mayerprism.core.logging.config import LogConfig

_TOP_LEVEL_FIELDS = ("trace_id", "stage", "error_code")

_run_trace: ContextVar[str | None] = ContextVar("mayerprism_run_trace", default=None)
_run_fields: ContextVar[dict[str, Any]] = ContextVar("mayerprism_run_fields", default={})


def current_trace_id() -> str:
    """Return the trace id of the current run, starting one if none is active."""

    trace_id = _run_trace.get()
    if trace_id is None:
        trace_id = uuid4().hex
        _run_trace.set(trace_id)
    return trace_id


@contextmanager
def log_context(*, trace_id: str | None = None, **fields: Any) -> Iterator[str]:
    """Start a trace (a fresh one unless ``trace_id`` is given) and attach
    ``fields`` to every entry logged inside the block."""

    trace_token = _run_trace.set(trace_id or uuid4().hex)
    fields_token = _run_fields.set({**_run_fields.get(), **fields})
    try:
        yield _run_trace.get()
    finally:
        _run_fields.reset(fields_token)
        _run_trace.reset(trace_token)


def _enrich(record: dict[str, Any]) -> None:
    extra = record["extra"]
    if not extra.get("trace_id"):
        extra["trace_id"] = current_trace_id()
    for name, value in _run_fields.get().items():
        extra.setdefault(name, value)
    for name in _TOP_LEVEL_FIELDS:
        extra.setdefault(name, None)


def _entry(record: dict[str, Any]) -> dict[str, Any]:
    extra = record["extra"]
    entry: dict[str, Any] = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        **{name: extra.get(name) for name in _TOP_LEVEL_FIELDS},
    }
    context = {name: value for name, value in extra.items() if name not in _TOP_LEVEL_FIELDS}
    if context:
        entry["context"] = context
    if record["exception"] is not None:
        error = record["exception"].value
        entry["exception"] = f"{type(error).__name__}: {error}" if error is not None else "unknown"
    return entry


class JsonLineSink:
    """Write one JSON object per entry to a stream or append it to a file.

    With neither target it writes to whatever ``sys.stderr`` is at write time.
    """

    def __init__(self, stream: IO[str] | None = None, path: str | None = None) -> None:
        self.stream = stream
        self.path = Path(path) if path else None
        if self.path is not None:
            self.path.parent.mkdir(parents=True, exist_ok=True)

    def __call__(self, message: Any) -> None:
        line = json.dumps(_entry(message.record), default=str, ensure_ascii=False) + "\n"
        if self.path is not None:
            with self.path.open("a", encoding="utf-8") as file:
                file.write(line)
            return
        target = self.stream or sys.stderr
        target.write(line)
        target.flush()


def _sinks(config: LogConfig) -> list[JsonLineSink]:
    sinks = []
    if config.console_output:
        sinks.append(JsonLineSink(stream=config.console_stream))
    if config.file_output and config.file_path:
        sinks.append(JsonLineSink(path=config.file_path))
    return sinks


def configure_logging(level: str = "INFO", **options: Any) -> None:
    """Replace all loguru handlers with JSON-lines sinks built from ``options``.

    ``options`` are :class:`LogConfig` fields, e.g. ``console_stream``,
    ``console_output``, ``file_output`` and ``file_path``.
    """

    config = LogConfig(level=level, **options)
    handlers = [{"sink": sink, "level": config.level.upper()} for sink in _sinks(config)]
    logger.configure(handlers=handlers, patcher=_enrich, extra=config.extra or {})


__all__ = [
    "JsonLineSink",
    "configure_logging",
    "current_trace_id",
    "log_context",
    "logger",
]
