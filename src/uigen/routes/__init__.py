"""
Routes Package
Handles all application routes organized by type.
"""

from .api import gen_bp

__all__ = [
    'gen_bp',
    'register_blueprints',
]


def register_blueprints(app):
    """Register every blueprint on ``app``."""
    app.register_blueprint(gen_bp)
