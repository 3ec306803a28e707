"""Unified error response utilities and exception hierarchy for HTTP layer.

This builds atop service_base exceptions but adds HTTP semantics.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from flask import has_request_context, request

HTTP_DEFAULT_STATUS = 500


@dataclass(eq=False)
class AppError(Exception):
    message: str
    http_status: int = 400
    code: Optional[str] = None  # machine readable stable code
    details: Optional[Dict[str, Any]] = None

    def __str__(self):  # pragma: no cover - trivial
        return self.message


@dataclass(eq=False)
class BadRequestError(AppError):
    http_status: int = 400


# Translate service_base exceptions by name to avoid import cycle
SERVICE_EXCEPTION_HTTP_MAP = {
    'ValidationError': 400,
    'ParseError': 400,
    'ConfigurationError': 503,
    'UpstreamError': 502,
    'GenerationError': 500,
}


def build_error_payload(message: str, *, status: int, error: str | None = None, **extra: Any) -> Dict[str, Any]:
    payload = {
        'status': 'error',
        'status_code': status,
        'message': message,
        'error': error or message,
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'path': request.path if has_request_context() else None,
    }
    payload.update({k: v for k, v in extra.items() if v is not None})
    return payload


def map_service_exception(exc: Exception) -> int:
    name = type(exc).__name__
    return SERVICE_EXCEPTION_HTTP_MAP.get(name, HTTP_DEFAULT_STATUS)
