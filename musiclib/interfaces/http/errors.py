"""Error envelope and request validation helpers shared by every blueprint."""

from __future__ import annotations

import logging
from typing import Any, Dict, Type, TypeVar

from flask import Flask, jsonify
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from werkzeug.exceptions import HTTPException

from musiclib.domain.errors import AppError, ErrorKind, NotFoundError, ValidationError
from musiclib.utils.helpers import normalize_uuid

logger = logging.getLogger(__name__)

ModelT = TypeVar('ModelT', bound=BaseModel)

# Every ErrorKind must appear here; UPSTREAM_CLIENT falls back to 400 when the
# upstream status is missing.
STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.UPSTREAM_CLIENT: 400,
    ErrorKind.BAD_GATEWAY: 502,
    ErrorKind.SERVICE_UNAVAILABLE: 503,
    ErrorKind.GATEWAY_TIMEOUT: 504,
    ErrorKind.INTERNAL: 500,
}


def error_response(message: str, status: int):
    return jsonify({'success': False, 'error': message}), status


def status_for(error: AppError) -> int:
    if error.kind is ErrorKind.UPSTREAM_CLIENT:
        status_code = getattr(error, 'status_code', None)
        if status_code:
            return status_code
    return STATUS_BY_KIND[error.kind]


def format_validation_errors(exc: PydanticValidationError) -> str:
    messages = []
    for detail in exc.errors():
        loc = '.'.join(str(part) for part in detail.get('loc', ())) or 'root'
        messages.append(f"{loc}: {detail.get('msg', 'Invalid value')}")
    return ', '.join(messages)


def validate_payload(model: Type[ModelT], payload: Any) -> ModelT:
    """Validate ``payload`` against ``model`` or raise a ``ValidationError``."""
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(format_validation_errors(exc)) from exc


def require_uuid(value: str) -> str:
    """Canonical form of a path id; ids that aren't UUIDs can never match a row."""
    try:
        return normalize_uuid(value)
    except (TypeError, ValueError):
        raise NotFoundError('Resource')


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(AppError)
    def _handle_app_error(error: AppError):
        status = status_for(error)
        if status >= 500:
            logger.error("Request failed (%s): %s", error.kind.value, error.message)
        return error_response(error.message, status)

    @app.errorhandler(HTTPException)
    def _handle_http_exception(error: HTTPException):
        if error.code == 404:
            return error_response('Not found', 404)
        return error_response(error.description or error.name, error.code or 500)

    @app.errorhandler(Exception)
    def _handle_unexpected(error: Exception):
        logger.exception("Unhandled error: %s", error)
        return error_response('Internal server error', 500)
