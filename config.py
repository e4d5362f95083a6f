#!/usr/bin/env python
# config.py
import os
from typing import List

# This assumes config.py is at the root of your project
basedir = os.path.abspath(os.path.dirname(__file__))


def _get_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def _get_csv_list(name: str, default: str) -> List[str]:
    raw = os.getenv(name)
    source = raw if raw is not None else default
    return [token.strip() for token in source.split(",") if token and token.strip()]


class Config:
    # HTTP server
    PORT = _get_int('PORT', 3001)
    ALLOWED_ORIGINS = _get_csv_list('ALLOWED_ORIGINS', 'http://localhost:3000')

    # Database
    # Postgres in deployments; a local SQLite file when DATABASE_URL is unset.
    DATABASE_URL = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'instance', 'musiclib.db')
    DB_POOL_SIZE = max(1, _get_int('DB_POOL_SIZE', 10))
    DB_ECHO = _get_bool('DB_ECHO', False)

    # External AI service
    AI_API_URL = (os.environ.get('AI_API_URL') or 'http://localhost:8000').rstrip('/')
    AI_API_TIMEOUT_SECONDS = max(1, _get_int('AI_API_TIMEOUT_SECONDS', 30))

    # Runtime behavior
    # Turn Flask debug on/off from env; default off to avoid noisy console
    DEBUG = _get_bool('DEBUG', False)
    # Control console logging; when disabled, logs go only to file
    ENABLE_CONSOLE_LOGS = _get_bool('ENABLE_CONSOLE_LOGS', False)
    LOG_LEVEL = (os.getenv('LOG_LEVEL') or 'INFO').upper()

    # Observability
    OTEL_EXPORTER_OTLP_ENDPOINT = os.getenv('OTEL_EXPORTER_OTLP_ENDPOINT')
    OTEL_EXPORTER_OTLP_HEADERS = os.getenv('OTEL_EXPORTER_OTLP_HEADERS')
    OTEL_EXPORTER_OTLP_INSECURE = _get_bool('OTEL_EXPORTER_OTLP_INSECURE', True)
    OTEL_SERVICE_NAME = os.getenv('OTEL_SERVICE_NAME', 'musiclib-api')
