"""Field extraction
================

Pulls an explicit field list out of free-text form prompts, e.g.
``"signup form with fields: email, password and phone"`` or the Polish
``"formularz z polami: email, hasło i numer telefonu"``, and infers each
field's type, placeholder, helper text and validation rules.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional, Tuple

from .documents import FormField

logger = logging.getLogger(__name__)

_LETTERS = "a-ząćęłńóśźż"

# "with fields: a, b and c" / "z polami: a, b i c"
FIELD_LIST_RE = re.compile(
    r"(?:z\s+polami|with\s+fields?|fields?|pola)\s*:?\s*([^\.]+?)(?:\.|$)",
    re.IGNORECASE,
)

# Bare three-item list: "email, password and phone"
THREE_ITEM_RE = re.compile(
    rf"(?:,\s*)?([{_LETTERS}\s]+?)\s+(?:,|i\s+|and\s+|or\s+)([{_LETTERS}\s]+?)"
    rf"\s+(?:i\s+|and\s+|or\s+)([{_LETTERS}\s]+?)(?:\s|$|\.)",
    re.IGNORECASE,
)

FORM_TITLE_RE = re.compile(rf"(?:formularz|form)\s+([{_LETTERS}\s]+)", re.IGNORECASE)
# Connector words that start a field clause rather than a title
_TITLE_STOP_RE = re.compile(r"\b(?:with|z|containing|that|having)\b.*$", re.IGNORECASE)

_AND_OR_RE = re.compile(r"\s+(?:and|or)\s+", re.IGNORECASE)
_POLISH_AND_RE = re.compile(r"\s+i\s+", re.IGNORECASE)
_WS_RE = re.compile(r"\s+")
_NAME_STRIP_RE = re.compile(r"[^a-z0-9_]")

# (keywords, type, placeholder, helper text, validation); first match wins
FIELD_TYPE_TABLE: Tuple[Tuple[Tuple[str, ...], str, str, Optional[str], Dict[str, object]], ...] = (
    (("email", "e-mail"), "email", "your.email@example.com",
     "We'll never share your email with anyone else.", {"pattern": "email"}),
    (("password", "hasło", "haslo"), "password", "Create a strong password",
     "Must be at least 8 characters with uppercase, lowercase, and numbers.",
     {"minLength": 8, "pattern": "password"}),
    (("phone", "telefon"), "tel", "+1 (555) 123-4567",
     "Optional. We'll use this for important account updates.", {"pattern": "phone"}),
    (("name", "imię", "imie", "nazwa"), "text", "John Doe", None, {"minLength": 2, "maxLength": 50}),
    (("message", "wiadomość", "wiadomosc"), "textarea", "Enter your message...", None,
     {"minLength": 10, "maxLength": 1000}),
)


def find_field_text(prompt: str) -> Optional[str]:
    """Return the raw field-list substring, or None when the prompt has none."""
    match = FIELD_LIST_RE.search(prompt)
    if match and match.group(1):
        text = match.group(1).strip()
    else:
        listed = THREE_ITEM_RE.search(prompt)
        text = ", ".join(g for g in listed.groups() if g) if listed else ""
    if len(text) < 3:
        return None
    return text


def split_field_names(text: str) -> List[str]:
    """Split on commas, " and ", " or " and the Polish " i "."""
    normalized = _AND_OR_RE.sub(", ", text)
    names: List[str] = []
    for part in _POLISH_AND_RE.split(normalized):
        names.extend(p.strip() for p in part.split(","))
    return [n for n in names if n]


def _label_for(raw: str) -> str:
    return " ".join(w[:1].upper() + w[1:].lower() for w in raw.split())


def _name_for(raw: str) -> str:
    name = _NAME_STRIP_RE.sub("", _WS_RE.sub("_", raw.strip().lower()))
    # Must stay a valid JS identifier
    if name[:1].isdigit():
        name = f"field_{name}"
    return name


def infer_field(raw: str) -> FormField:
    """Build a field from a name phrase using the keyword type table."""
    lowered = raw.strip().lower()
    label = _label_for(raw)
    field_type, placeholder, helper, validation = "text", "", None, {}
    for keywords, ftype, fplaceholder, fhelper, fvalidation in FIELD_TYPE_TABLE:
        if any(k in lowered for k in keywords):
            field_type, placeholder, helper, validation = ftype, fplaceholder, fhelper, dict(fvalidation)
            break
    return FormField(
        name=_name_for(raw),
        type=field_type,
        label=label,
        placeholder=placeholder or f"Enter {label.lower()}",
        required=True,
        validation=validation,
        helper_text=helper,
    )


def _dedupe_names(fields: List[FormField]) -> List[FormField]:
    seen: Dict[str, int] = {}
    for index, f in enumerate(fields, start=1):
        base = f.name or f"field_{index}"
        count = seen.get(base, 0) + 1
        seen[base] = count
        f.name = base if count == 1 else f"{base}_{count}"
    return fields


def extract_fields(prompt: str) -> Optional[List[FormField]]:
    """Extract form fields from the prompt text.

    Returns None when no field list is present, so callers can fall back to
    a canned template.
    """
    text = find_field_text(prompt)
    if text is None:
        return None
    names = split_field_names(text)
    if not names:
        return None
    fields = _dedupe_names([infer_field(n) for n in names])
    logger.debug(f"Extracted {len(fields)} fields: {[f.name for f in fields]}")
    return fields


def extract_form_title(prompt: str) -> Optional[str]:
    """Title from "form <words>" / "formularz <words>", first letter capitalized."""
    match = FORM_TITLE_RE.search(prompt)
    if not match:
        return None
    title = _TITLE_STOP_RE.sub("", match.group(1)).strip()
    if not title:
        return None
    return title[0].upper() + title[1:]
