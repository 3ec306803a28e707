"""
API Routes Package
==================

- generation: prompt-to-UI generation and service health
"""

from .generation import gen_bp

__all__ = ['gen_bp']
