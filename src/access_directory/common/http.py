from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import BadRequest

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    StoreError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: tuple[tuple[type[DomainError], int], ...] = (
    (ValidationError, 400),
    (ConflictError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def status_for(exc: DomainError) -> int:
    for error_type, status in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status
    return 500


def json_body() -> dict:
    data = request.get_json(silent=False)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            raise AuthenticationError("Login required")
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            raise AuthenticationError("Login required")
        if session.get("role") != Role.ADMIN.value:
            raise AuthorizationError("You do not have permission to access this resource")
        return view(*args, **kwargs)

    return wrapper


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(BadRequest)
    def bad_request(e: BadRequest):
        logger.warning("Malformed request body: %s", e.description)
        return jsonify({"error": "Malformed JSON in request body"}), 400

    @app.errorhandler(StoreError)
    def store_error(e: StoreError):
        logger.error("Store failure (%s): %s", e.kind, e.message)
        return jsonify({"error": INTERNAL_ERROR_MESSAGE}), 500

    @app.errorhandler(DomainError)
    def domain_error(e: DomainError):
        body = {"error": e.message}
        if isinstance(e, ValidationError) and e.fields:
            body["fields"] = list(e.fields)
        return jsonify(body), status_for(e)
