from __future__ import annotations

import logging
from datetime import datetime
from functools import wraps
from typing import Any, Optional

from flask import Flask, g, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.constants import ADMIN_EMAIL_HEADER
from ..core.exceptions import DomainError, ValidationError

logger = logging.getLogger(__name__)


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def fmt_dt(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def admin_email_from_request() -> Optional[str]:
    """Acting admin: JSON ``adminEmail`` first, then the header."""
    data = request.get_json(silent=True)
    if isinstance(data, dict) and data.get("adminEmail"):
        return str(data["adminEmail"])
    return request.headers.get(ADMIN_EMAIL_HEADER)


def admin_required(container):
    """Decorator factory: resolve the acting admin into ``g.admin`` or 403."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.admin = container.admin_service.require_admin(admin_email_from_request())
            return view(*args, **kwargs)

        return wrapper

    return decorator


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return jsonify({"error": str(e)}), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify({"error": e.description or e.name}), e.code or 500

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        message = f"Internal Server Error: {e}" if app.config.get("DEBUG") else "Internal Server Error"
        return jsonify({"error": message}), 500


def ok(payload: Any, status: int = 200):
    return jsonify(payload), status
