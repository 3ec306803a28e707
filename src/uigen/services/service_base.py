"""Service Base Utilities
=========================

Shared exception hierarchy for the generation service layer.

Usage Pattern:
    from uigen.services.service_base import ConfigurationError, UpstreamError

Service modules raise these exceptions so the route layer can map them
uniformly to HTTP responses. Only ``GenerationError`` is expected to reach
the HTTP layer; the others are handled inside the pipeline's fallback chain.
"""
from __future__ import annotations


__all__ = [
    'ServiceError', 'ValidationError', 'OperationError',
    'ConfigurationError', 'UpstreamError', 'ParseError', 'FormatError',
    'GenerationError',
]


class ServiceError(Exception):
    """Base class for all service layer errors."""


class ValidationError(ServiceError):
    """Invalid input or failed validation rules."""


class OperationError(ServiceError):
    """Generic failure performing an operation (e.g., external dependency)."""


class ConfigurationError(OperationError):
    """Generation service is not credentialed or not reachable by configuration."""


class UpstreamError(OperationError):
    """Transport or service failure while calling the generation service.

    ``status`` carries the HTTP status when one was received.
    """

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class ParseError(ValidationError):
    """A builder could not produce a document from the prompt."""


class FormatError(OperationError):
    """The optional source formatter failed or is unavailable."""


class GenerationError(ServiceError):
    """Every generation strategy failed; surfaced to the caller."""
