"""Structured JSON logging, request ids and a one-line access log per request."""

import json
import logging
import os
import sys
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import uuid4

from flask import Flask, g, has_request_context, request

try:
    from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter
    from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
    from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
    from opentelemetry.sdk.resources import Resource
except Exception:  # pragma: no cover - optional dependency
    LoggerProvider = None  # type: ignore

access_logger = logging.getLogger("musiclib.access")

OTLP_HANDLER_NAME = "musiclib-otlp"

# Keys every LogRecord already has; anything else came in through ``extra=``
_RESERVED = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}
_CONTEXT_FIELDS = ("request_id", "method", "path", "remote_addr")


class RequestContextFilter(logging.Filter):
    """Stamp records with the current request id, method, path and caller address."""

    def filter(self, record: logging.LogRecord) -> bool:
        in_request = has_request_context()
        record.request_id = getattr(g, "request_id", None) if in_request else None
        record.method = request.method if in_request else None
        record.path = request.path if in_request else None
        record.remote_addr = (
            request.headers.get("X-Forwarded-For", request.remote_addr) if in_request else None
        )
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line; ``extra=`` fields are carried through."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in _CONTEXT_FIELDS:
            payload[field] = getattr(record, field, None)
        for key, value in vars(record).items():
            if key not in _RESERVED and key not in payload:
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _otlp_log_handler(app: Flask) -> Optional[logging.Handler]:
    if LoggerProvider is None:
        return None
    endpoint = app.config.get("OTEL_EXPORTER_OTLP_ENDPOINT") or os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    if not endpoint:
        return None

    provider = LoggerProvider(
        resource=Resource.create({"service.name": app.config.get("OTEL_SERVICE_NAME", "musiclib-api")})
    )
    provider.add_log_record_processor(
        BatchLogRecordProcessor(
            OTLPLogExporter(
                endpoint=endpoint,
                insecure=app.config.get("OTEL_EXPORTER_OTLP_INSECURE", True),
            )
        )
    )
    return LoggingHandler(level=logging.INFO, logger_provider=provider)


def configure_structured_logging(app: Flask) -> None:
    """Send root logging to stdout as JSON, plus OTLP when an endpoint is configured.

    Safe to call once per app: each handler is only attached the first time.
    """
    root = logging.getLogger()
    root.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    if not any(
        isinstance(h, logging.StreamHandler) and isinstance(h.formatter, JsonFormatter)
        for h in root.handlers
    ):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JsonFormatter())
        handler.addFilter(RequestContextFilter())
        root.addHandler(handler)

    if any(h.get_name() == OTLP_HANDLER_NAME for h in root.handlers):
        return

    otlp_handler = _otlp_log_handler(app)
    if otlp_handler is not None:
        otlp_handler.set_name(OTLP_HANDLER_NAME)
        otlp_handler.setFormatter(JsonFormatter())
        otlp_handler.addFilter(RequestContextFilter())
        root.addHandler(otlp_handler)


def init_request_context(app: Flask) -> None:
    """Give every request an id (honouring ``X-Request-ID``), echo it and log the outcome."""

    @app.before_request
    def _assign_request_id():
        g.request_id = request.headers.get("X-Request-ID") or uuid4().hex
        g.request_logged_at = time.perf_counter()

    @app.after_request
    def _log_and_tag(response):
        request_id = getattr(g, "request_id", None)
        if request_id:
            response.headers.setdefault("X-Request-ID", request_id)
        started = getattr(g, "request_logged_at", None)
        elapsed_ms = round((time.perf_counter() - started) * 1000, 1) if started else None
        access_logger.info(
            "%s %s %s",
            request.method,
            request.full_path.rstrip("?"),
            response.status_code,
            extra={"status": response.status_code, "duration_ms": elapsed_ms},
        )
        return response
