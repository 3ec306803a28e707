"""Centralized path constants for template directories.

All code should import from here instead of hardcoding paths.
"""
from __future__ import annotations
from pathlib import Path

PACKAGE_DIR = Path(__file__).resolve().parent  # .../src/uigen
PROJECT_ROOT = PACKAGE_DIR.parents[1]

TEMPLATES_DIR = PACKAGE_DIR / 'templates'
# Jinja2 templates for synthesized UI source
CODE_TEMPLATES_DIR = TEMPLATES_DIR / 'code'
# System instruction for the external generation service
PROMPT_TEMPLATES_DIR = TEMPLATES_DIR / 'prompts'

LOGS_DIR = PROJECT_ROOT / 'logs'
