import json
import logging
import os
import sys
import time
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

LOGGER_NAME = "interview_copilot"

_ctx_run_id: ContextVar[str | None] = ContextVar("run_id", default=None)
_ctx_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)
_ctx_span_id: ContextVar[str | None] = ContextVar("span_id", default=None)
_ctx_mask: ContextVar[bool] = ContextVar("mask", default=False)

# Attributes every LogRecord carries; anything else on the record is a structured extra
_RECORD_ATTRS = frozenset(
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
    }
)

_TRUTHY = {"1", "true", "yes", "on"}


class ContextFilter(logging.Filter):
    """Copies the correlation ids held in context variables onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = _ctx_run_id.get()
        record.request_id = _ctx_request_id.get()
        record.span_id = _ctx_span_id.get()
        if not hasattr(record, "event"):
            record.event = record.name
        if not hasattr(record, "component"):
            record.component = None
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname.lower(),
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRS or key in payload or value is None:
                continue
            payload[key] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _coerce_level(level: str | int | None) -> int:
    if isinstance(level, int):
        return level
    if not level:
        return logging.INFO
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def _env_flag(name: str) -> bool | None:
    raw = os.getenv(name)
    if raw is None:
        return None
    return raw.strip().lower() in _TRUTHY


def init_logging(
    level: str | int | None = None,
    fmt: str | None = None,
    file_path: str | None = None,
    mask: bool | None = None,
    use_stderr: bool | None = None,
) -> logging.Logger:
    """Configure the root logger for the process.

    Explicit arguments win over the environment:

    - level: `COPILOT_LOG_LEVEL` (default INFO)
    - fmt: 'json' or 'text', `COPILOT_LOG_FORMAT` (default 'json')
    - file_path: `COPILOT_LOG_FILE` (default: stream output)
    - mask: mask question text in logs, `COPILOT_LOG_MASK` (default off)
    - use_stderr: stream to stderr instead of stdout, `COPILOT_LOG_STDERR` (default off)
    """
    resolved_level = _coerce_level(level or os.getenv("COPILOT_LOG_LEVEL"))
    resolved_format = (fmt or os.getenv("COPILOT_LOG_FORMAT") or "json").lower()
    resolved_file = file_path or os.getenv("COPILOT_LOG_FILE")
    resolved_mask = mask if mask is not None else bool(_env_flag("COPILOT_LOG_MASK"))
    resolved_stderr = use_stderr if use_stderr is not None else bool(_env_flag("COPILOT_LOG_STDERR"))

    root = logging.getLogger()
    root.setLevel(resolved_level)
    for existing in list(root.handlers):
        root.removeHandler(existing)

    handler: logging.Handler
    if resolved_file:
        try:
            handler = logging.FileHandler(resolved_file)
        except OSError as e:
            print(f"Warning: could not open log file '{resolved_file}': {e}; logging to stderr.", file=sys.stderr)
            handler = logging.StreamHandler(sys.stderr)
            resolved_file = None
    else:
        handler = logging.StreamHandler(sys.stderr if resolved_stderr else sys.stdout)

    if resolved_format == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s %(levelname)s %(event)s %(message)s [run=%(run_id)s req=%(request_id)s]",
                datefmt="%Y-%m-%dT%H:%M:%S",
            )
        )
    handler.addFilter(ContextFilter())
    root.addHandler(handler)

    if not _ctx_run_id.get():
        set_run_id(short_uuid())
    set_masking(resolved_mask)

    logger = logging.getLogger(LOGGER_NAME)
    logger.debug(
        "logging initialized",
        extra={
            "event": "logging.init",
            "component": "logging",
            "format": resolved_format,
            "file": resolved_file or ("stderr" if resolved_stderr else "stdout"),
            "mask": resolved_mask,
        },
    )
    return logger


def short_uuid() -> str:
    return uuid.uuid4().hex[:12]


def set_run_id(run_id: str | None) -> None:
    _ctx_run_id.set(run_id)


def get_run_id() -> str | None:
    return _ctx_run_id.get()


def set_request_id(request_id: str | None) -> None:
    _ctx_request_id.set(request_id)


def get_request_id() -> str | None:
    return _ctx_request_id.get()


def set_masking(mask: bool) -> None:
    _ctx_mask.set(mask)


def is_masking() -> bool:
    return _ctx_mask.get()


def mask_text(text: str) -> str:
    if not is_masking():
        return text
    return f"[masked len={len(text)}]"


@contextmanager
def span(event: str, **fields: Any) -> Iterator[None]:
    """Time a block and emit one structured record when it ends.

    Usage:
        with span("llm.generate", component="provider", provider="groq", model=model):
            ...
    """
    logger = logging.getLogger(LOGGER_NAME)
    token = _ctx_span_id.set(short_uuid())
    start = time.perf_counter()
    status = "ok"
    error_type: str | None = None
    try:
        yield
    except Exception as e:
        status = "error"
        error_type = type(e).__name__
        raise
    finally:
        extra: dict[str, Any] = {
            "event": event,
            "duration_ms": round((time.perf_counter() - start) * 1000.0, 3),
            "status": status,
        }
        if error_type:
            extra["error_type"] = error_type
        extra.update(fields)
        logger.info("span", extra=extra)
        _ctx_span_id.reset(token)


def log_event(event: str, level: int = logging.INFO, **fields: Any) -> None:
    extra: dict[str, Any] = {"event": event}
    extra.update(fields)
    logging.getLogger(LOGGER_NAME).log(level, event, extra=extra)
