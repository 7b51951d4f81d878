"""Structured logging for the product Lambda.

Every line is a JSON object carrying the Lambda request id, so a single
invocation can be followed in CloudWatch Logs Insights.
"""

from __future__ import annotations

import json
import logging
import os
import sys
import traceback
from contextvars import ContextVar
from datetime import datetime
from datetime import timezone
from typing import Any
from typing import Mapping
from typing import MutableMapping
from typing import Optional

request_id: ContextVar[str] = ContextVar("request_id", default="")

# Attributes every LogRecord carries; anything else came from ``extra``.
_RESERVED_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime", "taskName"}


class StructuredLogFormatter(logging.Formatter):
    """Render log records as single-line JSON documents."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        req_id = request_id.get()
        if req_id:
            entry["request_id"] = req_id

        if record.levelno >= logging.WARNING:
            entry["source"] = {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": traceback.format_exception(*record.exc_info),
            }

        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_RECORD_ATTRS
        }
        if extra:
            entry["extra"] = extra

        return json.dumps(entry, default=repr)


class ContextLogger(logging.LoggerAdapter):
    """Logger adapter merging its bound fields into each call's ``extra``."""

    def process(
        self,
        msg: str,
        kwargs: MutableMapping[str, Any],
    ) -> tuple[str, MutableMapping[str, Any]]:
        kwargs["extra"] = {**(self.extra or {}), **kwargs.get("extra", {})}
        return msg, kwargs


def configure_logging(level: Optional[str] = None) -> None:
    """Send JSON logs to stdout at ``level`` (default ``LOG_LEVEL`` or INFO).

    The handlers installed by the Lambda runtime are replaced.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel((level or os.getenv("LOG_LEVEL") or "INFO").upper())

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredLogFormatter())
    root_logger.addHandler(handler)

    for noisy in ("boto3", "botocore", "urllib3"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str, **extra: Any) -> ContextLogger:
    """Get a logger that adds ``extra`` to every message."""
    return ContextLogger(logging.getLogger(name), extra)


def resolve_request_id(event: Mapping[str, Any], context: Any) -> str:
    """Return the invocation's request id.

    Prefers the Lambda context's ``aws_request_id`` and falls back to the
    API Gateway ``requestContext.requestId``.
    """
    return getattr(context, "aws_request_id", None) or (
        event.get("requestContext") or {}
    ).get("requestId", "")


def set_request_context(req_id: Optional[str] = None) -> None:
    """Tag subsequent log lines with ``req_id``."""
    if req_id:
        request_id.set(req_id)


def clear_request_context() -> None:
    """Clear request context after Lambda invocation."""
    request_id.set("")


def log_lambda_event(logger: ContextLogger, event: Mapping[str, Any]) -> None:
    """Log the raw inbound event at INFO level."""
    logger.info(
        f"Received event: {json.dumps(event, indent=2, default=str)}",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
        },
    )


def log_response(
    logger: ContextLogger,
    status_code: int,
    duration_ms: float,
) -> None:
    """Log the outgoing status code and invocation time.

    Failures are logged at WARNING so they stand out from normal traffic.
    """
    level = logging.INFO if status_code < 400 else logging.WARNING
    logger.log(
        level,
        f"Responded {status_code} in {duration_ms:.2f} ms",
        extra={"status_code": status_code, "duration_ms": round(duration_ms, 2)},
    )
