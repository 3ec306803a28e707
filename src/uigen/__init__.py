"""uigen - prompt-to-UI component generation service."""

__version__ = "0.1.0"
