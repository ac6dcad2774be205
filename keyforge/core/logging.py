"""Structured logging for keyforge.

Every log call accepts keyword fields which end up on the record as
``extra_fields``. Two formatters render them: one JSON object per line for
log shipping and a compact single line for a terminal. Field names that look
like key material are masked before either formatter sees them.

Usage:
    from keyforge.core.logging import get_logger

    logger = get_logger(__name__)
    logger.info("transfer key", from_format="Pkcs1Pem", to_format="Pkcs8Der")
"""

import inspect
import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from functools import wraps
from typing import Any, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)

# A field is masked when its lowercased name contains one of these
SENSITIVE_FIELDS = (
    "password", "secret", "token", "credential", "authorization",
    "private_key", "public_key", "plaintext", "ciphertext", "input", "seed",
)

# JWK members holding key material; matched on the whole name only
SENSITIVE_JWK_MEMBERS = frozenset({"d", "k", "p", "q", "dp", "dq", "qi"})

REDACTED = "[REDACTED]"


def _is_sensitive(name: str) -> bool:
    name = name.lower()
    return name in SENSITIVE_JWK_MEMBERS or any(s in name for s in SENSITIVE_FIELDS)


def _redact(value: Any) -> str:
    # Long strings keep their edges so two log lines can still be told apart
    if isinstance(value, str) and len(value) > 8:
        return f"{value[:4]}...{value[-4:]}"
    return REDACTED


def mask_sensitive(data: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``data`` with key material redacted, recursing into dicts."""
    return {
        name: _redact(value) if _is_sensitive(name)
        else mask_sensitive(value) if isinstance(value, dict)
        else value
        for name, value in data.items()
    }


def _record_fields(record: logging.LogRecord) -> dict[str, Any]:
    return mask_sensitive(getattr(record, "extra_fields", None) or {})


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if request_id := request_id_var.get():
            entry["request_id"] = request_id
        entry.update(_record_fields(record))

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        if record.levelno >= logging.WARNING:
            entry["source"] = f"{record.module}:{record.funcName}:{record.lineno}"

        return json.dumps(entry, default=str)


class HumanFormatter(logging.Formatter):
    """Single-line output for local development.

    ``12:04:31.207 INFO  keyforge.core.jws [3f2a9c1e] sign jws algorithm=HS256``
    """

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, color: bool = False):
        super().__init__()
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        clock = datetime.fromtimestamp(record.created).strftime("%H:%M:%S.%f")[:-3]
        level = f"{record.levelname:<5}"
        if self.color:
            level = f"{self.LEVEL_COLORS.get(record.levelno, '')}{level}{self.RESET}"

        parts = [clock, level, record.name]
        if request_id := request_id_var.get():
            parts.append(f"[{request_id[:8]}]")
        parts.append(record.getMessage())
        parts.extend(f"{name}={value}" for name, value in _record_fields(record).items())

        line = " ".join(parts)
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class StructuredLogger(logging.Logger):
    """Logger whose level methods take arbitrary keyword fields."""

    def _log(
        self,
        level: int,
        msg: object,
        args,
        exc_info: Any = None,
        extra: dict[str, Any] | None = None,
        stack_info: bool = False,
        stacklevel: int = 1,
        **fields: Any,
    ) -> None:
        if fields:
            extra = {**(extra or {}), "extra_fields": fields}
        super()._log(
            level, msg, args,
            exc_info=exc_info, extra=extra, stack_info=stack_info, stacklevel=stacklevel + 1,
        )


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger for a module."""
    logging.setLoggerClass(StructuredLogger)
    try:
        return logging.getLogger(name)
    finally:
        logging.setLoggerClass(logging.Logger)


def setup_logging(json_output: bool = False, level: str = "INFO") -> None:
    """Install a single stdout handler on the root logger.

    Args:
        json_output: Emit JSON lines instead of human-readable text
        level: Root log level name
    """
    handler = logging.StreamHandler(sys.stdout)
    if json_output:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(HumanFormatter(color=sys.stdout.isatty()))

    logging.basicConfig(level=level.upper(), handlers=[handler], force=True)

    for noisy in ("uvicorn.access", "httpx"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tag each request with an ID and log its outcome."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        token = request_id_var.set(request_id)
        logger = get_logger("keyforge.http")
        started = time.perf_counter()

        try:
            response = await call_next(request)
            logger.info(
                "request handled",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=_elapsed_ms(started),
            )
        except Exception:
            logger.error(
                "request failed",
                method=request.method,
                path=request.url.path,
                duration_ms=_elapsed_ms(started),
                exc_info=True,
            )
            raise
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


def log_operation(operation: str):
    """Log completion or failure of a key operation along with its duration.

    Failures are logged with the exception type only; the exception message
    may quote caller input and is left to the error handler.
    """
    def decorator(func: Callable):
        logger = get_logger(func.__module__)

        def finished(started: float, error: BaseException | None = None) -> None:
            if error is None:
                logger.info(f"{operation} completed", operation=operation, duration_ms=_elapsed_ms(started))
            else:
                logger.warning(
                    f"{operation} failed",
                    operation=operation,
                    error_type=type(error).__name__,
                    duration_ms=_elapsed_ms(started),
                )

        if inspect.iscoroutinefunction(func):
            @wraps(func)
            async def async_wrapper(*args, **kwargs):
                started = time.perf_counter()
                try:
                    result = await func(*args, **kwargs)
                except Exception as exc:
                    finished(started, exc)
                    raise
                finished(started)
                return result

            return async_wrapper

        @wraps(func)
        def wrapper(*args, **kwargs):
            started = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                finished(started, exc)
                raise
            finished(started)
            return result

        return wrapper

    return decorator
