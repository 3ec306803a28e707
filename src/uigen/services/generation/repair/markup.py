"""JSX markup repairs: wrong component names, tags corrupted by injected
``data-ui-id`` attributes, invalid HTML tags and missing ui ids."""

from __future__ import annotations

import re
from typing import Dict, List, Tuple

from ..catalog import COMPONENT_RENAMES, HTML_REPLACEMENTS, INVALID_HTML_TAGS, UI_ID_COMPONENTS, kebab_case
from .base import (
    NAMED_IMPORT_RE,
    RepairRule,
    imported_name,
    iter_open_tags,
    split_import_names,
    triggered_by,
)

# ---------------------------------------------------------------------------
# Component names
# ---------------------------------------------------------------------------

_RENAME_TAG_RE = re.compile(r"(</?)(" + "|".join(sorted(COMPONENT_RENAMES, key=len, reverse=True)) + r")\b")
_REPLACE_TAG_RE = re.compile(r"(</?)(" + "|".join(HTML_REPLACEMENTS) + r")\b")


def _fix_import_names(match: re.Match) -> str:
    entries = split_import_names(match.group(1))
    fixed = []
    for entry in entries:
        name = imported_name(entry)
        if name in HTML_REPLACEMENTS:
            continue
        if name in COMPONENT_RENAMES:
            entry = entry.replace(name, COMPONENT_RENAMES[name], 1)
        fixed.append(entry)
    if fixed == entries:
        return match.group(0)
    if not fixed:
        return ""
    body = ",\n  ".join(dict.fromkeys(fixed))
    return f'import {{\n  {body}\n}} from "{match.group(2)}";'


def fix_incorrect_component_names(source: str) -> str:
    """``Dropdown*`` -> ``DropdownMenu*``; ``CardImage`` -> ``<img>``."""
    source = NAMED_IMPORT_RE.sub(_fix_import_names, source)
    source = _RENAME_TAG_RE.sub(lambda m: m.group(1) + COMPONENT_RENAMES[m.group(2)], source)
    return _REPLACE_TAG_RE.sub(lambda m: m.group(1) + HTML_REPLACEMENTS[m.group(2)], source)


# ---------------------------------------------------------------------------
# Broken tags
# ---------------------------------------------------------------------------

_BROKEN_TAG_RE = re.compile(
    r"<(Dialog|Select|Card|Table|Tabs|DropdownMenu|FormField|Form)((?:\s+[^>]*?)?)\s*"
    r"(data-ui-id=\"[^\"]*\")"
    r"(Trigger|Content|Header|Title|Description|Footer|Value|Item|List)\b([^>]*?)(/?>)"
)
_INVALID_TAG_RE = re.compile(r"(</?)(" + "|".join(INVALID_HTML_TAGS) + r")(?=[\s>/])")


def fix_broken_ui_id_tags(source: str) -> str:
    """``<Dialog data-ui-id="x"Trigger>`` -> ``<DialogTrigger data-ui-id="x">``."""
    def replace(match: re.Match) -> str:
        base, before, ui_id, suffix, after, close = match.groups()
        attrs = f"{before}{after}".rstrip()
        self_closing = close == "/>"
        return f"<{base}{suffix}{attrs} {ui_id}{' />' if self_closing else '>'}"
    return _BROKEN_TAG_RE.sub(replace, source)


def fix_invalid_html_tags(source: str) -> str:
    """``<navigation>`` -> ``<nav>``, ``<grid>`` -> ``<div>``, ``<card>`` -> ``<Card>``."""
    return _INVALID_TAG_RE.sub(lambda m: m.group(1) + INVALID_HTML_TAGS[m.group(2)], source)


# ---------------------------------------------------------------------------
# onClick corruption
# ---------------------------------------------------------------------------

_CORRUPTED_ONCLICK_RE = re.compile(
    r"onClick\s*=\s*\{\s*\(\)\s*=\s*data-ui-id\s*=\s*[\"'][^\"']*[\"']\s*>\s*([^}]+)\}"
)


def fix_corrupted_onclick(source: str) -> str:
    """``onClick={() = data-ui-id="x"> body}`` -> ``onClick={() => body}``."""
    return _CORRUPTED_ONCLICK_RE.sub(lambda m: f"onClick={{() => {m.group(1).strip()}}}", source)


# ---------------------------------------------------------------------------
# ui ids
# ---------------------------------------------------------------------------

_UI_ID_ATTR_RE = re.compile(r"\bdata-ui-id\s*=")
_EXISTING_ID_RE = re.compile(r"data-ui-id=[\"']([^\"']+)[\"']")
_CONTAINER_TAGS = ("div", "form", "section")
_COMPONENT_NAMES = frozenset(UI_ID_COMPONENTS)


def _counters(source: str) -> Dict[str, int]:
    """Highest numeric suffix already used per id prefix."""
    counters: Dict[str, int] = {}
    for ui_id in _EXISTING_ID_RE.findall(source):
        prefix, _, suffix = ui_id.rpartition("-")
        if prefix and suffix.isdigit():
            counters[prefix] = max(counters.get(prefix, 0), int(suffix))
    return counters


def add_missing_ui_ids(source: str) -> str:
    """Give every toolkit component, and any div/form/section directly
    wrapping one, a ``data-ui-id`` of the form ``<kebab-name>-<n>``."""
    tags = list(iter_open_tags(source))
    insertions: List[Tuple[int, str]] = []
    counters = _counters(source)

    for position, (name, start, name_end, end) in enumerate(tags):
        attrs = source[name_end:end]
        if _UI_ID_ATTR_RE.search(attrs):
            continue
        if name in _COMPONENT_NAMES:
            prefix = kebab_case(name)
        elif name in _CONTAINER_TAGS and position + 1 < len(tags) and tags[position + 1][0] in _COMPONENT_NAMES:
            # Only when nothing but whitespace separates the container from the component
            if source[end + 1:tags[position + 1][1]].strip():
                continue
            prefix = "container"
        else:
            continue
        counters[prefix] = counters.get(prefix, 0) + 1
        insertions.append((name_end, f' data-ui-id="{prefix}-{counters[prefix]}"'))

    for index, text in reversed(insertions):
        source = source[:index] + text + source[index:]
    return source


RULES = (
    RepairRule("fix_broken_ui_id_tags", triggered_by(_BROKEN_TAG_RE), fix_broken_ui_id_tags),
    RepairRule("fix_invalid_html_tags", triggered_by(_INVALID_TAG_RE), fix_invalid_html_tags),
)

NAME_RULES = (
    RepairRule("fix_incorrect_component_names",
               triggered_by(*COMPONENT_RENAMES, *HTML_REPLACEMENTS), fix_incorrect_component_names),
)

LATE_RULES = (
    RepairRule("fix_corrupted_onclick", triggered_by(_CORRUPTED_ONCLICK_RE), fix_corrupted_onclick),
    RepairRule("add_missing_ui_ids", triggered_by("<"), add_missing_ui_ids),
)
