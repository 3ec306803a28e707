"""Application error handlers."""

from .handlers import error_bp, register_error_handlers, render_error

__all__ = ['error_bp', 'register_error_handlers', 'render_error']
