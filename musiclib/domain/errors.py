"""Typed service errors.

Every failure a service reports carries an ``ErrorKind``; the HTTP layer
maps kinds to status codes in one table (see ``interfaces.http.errors``).
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    VALIDATION = 'validation'
    NOT_FOUND = 'not_found'
    CONFLICT = 'conflict'
    UPSTREAM_CLIENT = 'upstream_client'
    BAD_GATEWAY = 'bad_gateway'
    SERVICE_UNAVAILABLE = 'service_unavailable'
    GATEWAY_TIMEOUT = 'gateway_timeout'
    INTERNAL = 'internal'


class AppError(Exception):
    """Base class for errors that are safe to show to API callers."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str, *, kind: Optional[ErrorKind] = None) -> None:
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind


class ValidationError(AppError):
    kind = ErrorKind.VALIDATION


class NotFoundError(AppError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, resource: str) -> None:
        super().__init__(f"{resource} not found")
        self.resource = resource


class ConflictError(AppError):
    kind = ErrorKind.CONFLICT


class UpstreamError(AppError):
    """Failure talking to the AI service.

    ``status_code`` is only meaningful for ``UPSTREAM_CLIENT``, where the
    upstream's own 4xx status is passed through to the caller.
    """

    def __init__(self, message: str, *, kind: ErrorKind, status_code: Optional[int] = None) -> None:
        super().__init__(message, kind=kind)
        self.status_code = status_code


__all__ = [
    'ErrorKind',
    'AppError',
    'ValidationError',
    'NotFoundError',
    'ConflictError',
    'UpstreamError',
]
