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

LOGGER_NAME = "interview_prep"
TRUTHY = {"1", "true", "yes", "on"}

_ctx_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)
_ctx_span_id: ContextVar[str | None] = ContextVar("span_id", default=None)
_ctx_mask: ContextVar[bool] = ContextVar("mask", default=False)

# LogRecord attributes that are never copied into the JSON payload as extras
_RESERVED_ATTRS = frozenset(
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


class ContextFilter(logging.Filter):
    """Attach correlation ids from the current context to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _ctx_request_id.get()
        record.span_id = _ctx_span_id.get()
        record.component = getattr(record, "component", None)
        record.operation = getattr(record, "operation", None)
        if not hasattr(record, "event"):
            record.event = record.name
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname.lower(),
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key in payload or value is None:
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


def init_logging(
    level: str | int | None = None,
    fmt: str | None = None,
    file_path: str | None = None,
    mask: bool | None = None,
    use_stderr: bool = True,
) -> logging.Logger:
    """Configure the root logger for the API process.

    Explicit arguments win over the ``INTERVIEW_PREP_LOG_*`` environment
    variables. Repeated calls replace the previously installed handler.
    """
    resolved_level = _coerce_level(level or os.getenv("INTERVIEW_PREP_LOG_LEVEL"))
    resolved_format = (fmt or os.getenv("INTERVIEW_PREP_LOG_FORMAT") or "json").lower()
    resolved_file = file_path or os.getenv("INTERVIEW_PREP_LOG_FILE")
    if mask is None:
        mask = (os.getenv("INTERVIEW_PREP_LOG_MASK") or "").lower() in TRUTHY

    root = logging.getLogger()
    root.setLevel(resolved_level)
    for existing in list(root.handlers):
        root.removeHandler(existing)

    handler: logging.Handler
    if resolved_file:
        try:
            handler = logging.FileHandler(resolved_file)
        except OSError as e:
            print(f"Warning: could not open log file '{resolved_file}': {e}", file=sys.stderr)
            handler = logging.StreamHandler(sys.stderr)
            resolved_file = None
    else:
        handler = logging.StreamHandler(sys.stderr if use_stderr else sys.stdout)

    if resolved_format == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s %(levelname)s %(event)s %(message)s [request=%(request_id)s span=%(span_id)s]",
                datefmt="%Y-%m-%dT%H:%M:%S",
            )
        )
    handler.addFilter(ContextFilter())
    root.addHandler(handler)

    set_masking(mask)

    logger = logging.getLogger(LOGGER_NAME)
    logger.debug(
        "logging initialized",
        extra={
            "event": "logging.init",
            "component": "logging",
            "format": resolved_format,
            "file": resolved_file or "stream",
            "mask": mask,
        },
    )
    return logger


def short_uuid() -> str:
    return uuid.uuid4().hex[:12]


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
    """Time a block and emit one structured record when it exits.

    Usage:
        with span("llm.generate_questions", component="provider", provider="google"):
            ...
    """
    logger = logging.getLogger(LOGGER_NAME)
    parent = _ctx_span_id.get()
    _ctx_span_id.set(short_uuid())
    start = time.perf_counter()
    payload: dict[str, Any] = {
        "event": event,
        "component": fields.pop("component", None),
        "operation": fields.pop("operation", None),
    }
    try:
        yield
        payload["status"] = "ok"
    except Exception as e:  # noqa: BLE001 : recorded and re-raised
        payload["status"] = "error"
        payload["error_type"] = type(e).__name__
        payload["error_msg"] = str(e)
        raise
    finally:
        payload["duration_ms"] = round((time.perf_counter() - start) * 1000.0, 3)
        payload["parent_span_id"] = parent
        payload.update(fields)
        logger.info("span", extra=payload)
        _ctx_span_id.set(parent)


def log_event(event: str, level: int = logging.INFO, **fields: Any) -> None:
    extra = {"event": event}
    extra.update(fields)
    logging.getLogger(LOGGER_NAME).log(level, event, extra=extra)


def audit_log(event_type: str, user_id: str | None, client_ip: str | None = None, **details: Any) -> None:
    """Record a security-relevant event.

    Audit records are always emitted at WARNING so they survive production
    log levels and can be filtered on the ``audit`` flag.
    """
    extra = {
        "event": f"audit.{event_type}",
        "audit": True,
        "user_id": user_id,
        "client_ip": client_ip,
    }
    extra.update(details)
    logging.getLogger(LOGGER_NAME).warning(f"AUDIT: {event_type}", extra=extra)
