"""Centralized JSON error handlers.

Every error leaving the app is a JSON payload built by
``build_error_payload``; stack traces are attached only in debug.
"""
from __future__ import annotations

import traceback
import uuid
from typing import Any, Dict

from flask import Blueprint, current_app, g, jsonify, make_response
from werkzeug.exceptions import HTTPException

from uigen.utils.errors import AppError, build_error_payload, map_service_exception

error_bp = Blueprint("errors", __name__)

ERROR_TITLES = {
    400: "Bad Request",
    404: "Not Found",
    405: "Method Not Allowed",
    415: "Unsupported Media Type",
    500: "Internal Server Error",
    502: "Bad Gateway",
    503: "Service Unavailable",
}


def debug_enabled() -> bool:
    return bool(current_app.debug or current_app.config.get("UIGEN_DEBUG", False))


def render_error(status_code: int, error: Exception | None = None):
    title = ERROR_TITLES.get(status_code, "Error")
    extra: Dict[str, Any] = {"error_id": getattr(g, "request_id", None)}

    if isinstance(error, AppError):
        status_code = error.http_status or status_code
        message = error.message or title
        extra.update(code=error.code, details=error.details)
    elif isinstance(error, HTTPException):
        message = error.description or title
    else:
        if error is not None:
            status_code = map_service_exception(error)
        message = ERROR_TITLES.get(status_code, title)

    if debug_enabled() and error is not None and not isinstance(error, HTTPException):
        extra["debug"] = {
            "exception_type": type(error).__name__,
            "stacktrace": traceback.format_exc(),
        }

    payload = build_error_payload(message, status=status_code, **extra)
    return make_response(jsonify(payload), status_code)


@error_bp.app_errorhandler(AppError)  # type: ignore[misc]
def handle_app_error(exc: AppError):
    return render_error(exc.http_status, exc)


@error_bp.app_errorhandler(HTTPException)  # type: ignore[misc]
def handle_http_exception(exc: HTTPException):
    return render_error(getattr(exc, "code", 500) or 500, exc)


@error_bp.app_errorhandler(Exception)  # type: ignore[misc]
def handle_uncaught_exception(exc: Exception):
    current_app.logger.exception("Unhandled exception: %s", exc)
    return render_error(500, exc)


def register_error_handlers(app):
    """Register handlers & attach request id generation."""
    @app.before_request  # type: ignore[misc]
    def _assign_request_id():
        g.request_id = uuid.uuid4().hex

    app.register_blueprint(error_bp)
    return app
