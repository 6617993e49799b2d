"""Structured Logging — JSON formatter, setup, and per-request access logging.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (company_id, user_id, error_code, path, ...) surfaced when present
    - JSON format in production, human-readable in development
    - Every request logged once with method, path, status and duration

Design Decisions:
    - setup_logging called once on startup via lifespan; repeated calls do not
      stack handlers
    - Access logging as BaseHTTPMiddleware so handlers stay free of log noise
"""

import logging
import json
import time
from datetime import datetime, timezone
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

_EXTRA_KEYS = (
    "company_id", "user_id", "error_code", "path", "method",
    "status_code", "duration_ms",
)
_HANDLER_NAME = "trialengage"

access_logger = logging.getLogger("trialengage.access")


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_KEYS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure logging for the application."""
    for existing in list(logging.root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            logging.root.removeHandler(existing)
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request and stamps X-Process-Time on the response."""

    def __init__(self, app, slow_request_ms: int = 1000):
        super().__init__(app)
        self.slow_request_ms = slow_request_ms

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - start) * 1000, 2)

        extra = {
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        }
        if duration_ms > self.slow_request_ms:
            access_logger.warning(
                f"Slow request: {request.method} {request.url.path} took {duration_ms}ms",
                extra=extra,
            )
        else:
            access_logger.info(
                f"{request.method} {request.url.path} {response.status_code}",
                extra=extra,
            )
        response.headers["X-Process-Time"] = str(duration_ms)
        return response
