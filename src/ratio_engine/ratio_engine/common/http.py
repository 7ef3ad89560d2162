from __future__ import annotations

import logging

from flask import jsonify, request

from ..core.exceptions import (
    ConflictError,
    DomainError,
    NotFoundError,
    PreconditionFailedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (NotFoundError, 404),
    (ConflictError, 409),
    (PreconditionFailedError, 400),
    (ValidationError, 400),
)


def status_for(error: DomainError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status
    return 400


def error_response(error: DomainError):
    return jsonify({"success": False, "code": error.code, "message": str(error)}), status_for(error)


def system_error_response(action: str):
    logger.exception("unexpected failure while trying to %s", action)
    return jsonify({"success": False, "code": "SYSTEM_ERROR", "message": f"System error while trying to {action}"}), 500


def json_body() -> dict:
    """Request JSON object, or an empty dict for a missing/non-object body."""

    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
