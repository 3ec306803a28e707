"""
Utility Helper Functions
========================

Common utility functions used throughout the application: response
envelopes, name slugs and document identifiers.
"""

import re
import time
from datetime import datetime
from typing import Any, Dict, Optional


_WHITESPACE_RE = re.compile(r'\s+')
_NON_SLUG_RE = re.compile(r'[^a-z0-9-]')


def slugify_name(name: Optional[str], default: str = "demo") -> str:
    """Turn a display name into a document slug.

    Lowercases, replaces whitespace runs with ``-`` and strips anything
    outside ``[a-z0-9-]``. Empty results fall back to ``default``.

    Examples:
        >>> slugify_name("My Signup Form")
        'my-signup-form'
        >>> slugify_name(None)
        'demo'
    """
    if not name or not isinstance(name, str):
        return default
    slug = _WHITESPACE_RE.sub('-', name.strip().lower())
    slug = _NON_SLUG_RE.sub('', slug)
    return slug or default


def make_document_id(name: Optional[str] = None, now_ms: Optional[int] = None) -> str:
    """Build a document identifier from a name slug plus a millisecond timestamp."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{slugify_name(name)}-{now_ms}"


def create_success_response(data: Any = None, message: str = "Success") -> Dict[str, Any]:
    """Create standardized success response."""
    response = {
        'success': True,
        'message': message,
        'timestamp': datetime.now().isoformat()
    }

    if data is not None:
        response['data'] = data

    return response


def truncate_text(text: str, max_length: int = 100) -> str:
    """Truncate text for log lines."""
    if not text:
        return ""
    text = text.replace('\n', ' ')
    if len(text) <= max_length:
        return text
    return text[:max_length - 3] + "..."
