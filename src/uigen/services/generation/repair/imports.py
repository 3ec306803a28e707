"""Import completion for toolkit identifiers.

Referenced-but-unimported primitives and blocks are added to their group,
identifiers imported from the wrong toolkit module are moved, and each
group is emitted as one sorted statement.
"""

from __future__ import annotations

import re
from typing import Dict, List, Set

from uigen.constants import BLOCKS_MODULE, UI_MODULE
from ..catalog import FUNCTION_IMPORTS, module_for, render_import_statement
from .base import (
    ANY_IMPORT_RE,
    NAMED_IMPORT_RE,
    RepairRule,
    imported_name,
    local_name,
    split_import_names,
)

_JSX_REF_RE = re.compile(r"<([A-Z]\w*)(?=[\s>/]|$)", re.MULTILINE)
_FUNCTION_REF_RE = re.compile(r"\b(" + "|".join(FUNCTION_IMPORTS) + r")\.")
_RULES_REF_RE = re.compile(r"\bValidationRules\b")
_LOCAL_DEFINITION_RE = re.compile(r"\b(?:function|class|const|let|var)\s+([A-Z]\w*)\b")
_USE_CLIENT_RE = re.compile(r"^[\"']use client[\"'];?[ \t]*\n?", re.MULTILINE)

# Legacy specifiers are treated as the toolkit modules they meant
TOOLKIT_MODULES: Dict[str, str] = {
    UI_MODULE: "ui",
    BLOCKS_MODULE: "blocks",
    "@fragment/ui": "ui",
    "@fragment/blocks": "blocks",
}
_CANONICAL = {"ui": UI_MODULE, "blocks": BLOCKS_MODULE}


def referenced_identifiers(source: str) -> List[str]:
    """Toolkit identifiers the code uses, in first-use order."""
    body = ANY_IMPORT_RE.sub("", source)
    found = _JSX_REF_RE.findall(body) + _FUNCTION_REF_RE.findall(body)
    if _RULES_REF_RE.search(body):
        found.append("ValidationRules")
    local = set(_LOCAL_DEFINITION_RE.findall(body))
    return [name for name in dict.fromkeys(found) if module_for(name) and name not in local]


def add_missing_imports(source: str) -> str:
    toolkit_statements = [m for m in NAMED_IMPORT_RE.finditer(source) if m.group(2) in TOOLKIT_MODULES]
    groups: Dict[str, List[str]] = {"ui": [], "blocks": []}
    for statement in toolkit_statements:
        groups[TOOLKIT_MODULES[statement.group(2)]].extend(split_import_names(statement.group(1)))

    # Names already bound by some other import
    other_bound: Set[str] = set()
    for statement in NAMED_IMPORT_RE.finditer(source):
        if statement.group(2) not in TOOLKIT_MODULES:
            other_bound.update(local_name(e) for e in split_import_names(statement.group(1)))

    wanted: Dict[str, List[str]] = {"ui": [], "blocks": []}
    for group, entries in groups.items():
        for entry in entries:
            target = module_for(imported_name(entry)) or group
            if entry not in wanted[target]:
                wanted[target].append(entry)
    present = {imported_name(e) for entries in wanted.values() for e in entries}
    for name in referenced_identifiers(source):
        if name not in present and name not in other_bound:
            wanted[module_for(name)].append(name)

    unchanged = (
        len(toolkit_statements) == sum(1 for g in groups.values() if g)
        and all(s.group(2) in _CANONICAL.values() for s in toolkit_statements)
        and all(sorted(wanted[g]) == groups[g] for g in groups)
    )
    if unchanged:
        return source

    block = "\n".join(
        render_import_statement(wanted[g], _CANONICAL[g]) for g in ("ui", "blocks") if wanted[g]
    )
    if toolkit_statements:
        first = toolkit_statements[0]
        pieces = []
        cursor = 0
        for statement in toolkit_statements:
            pieces.append(source[cursor:statement.start()])
            if statement is first:
                pieces.append(block)
            cursor = statement.end()
            # Drop the newline left by a removed statement
            if statement is not first and source[cursor:cursor + 1] == "\n":
                cursor += 1
        pieces.append(source[cursor:])
        return "".join(pieces)

    imports = list(ANY_IMPORT_RE.finditer(source))
    if imports:
        anchor = imports[-1].end()
    else:
        use_client = _USE_CLIENT_RE.search(source)
        if use_client and not source[:use_client.start()].strip():
            anchor = use_client.end()
            if source[anchor - 1:anchor] != "\n":
                block = "\n" + block
            return source[:anchor] + "\n" + block + "\n" + source[anchor:]
        return block + "\n\n" + source
    return source[:anchor] + "\n" + block + source[anchor:]


RULES = (
    RepairRule("add_missing_imports", lambda source: "<" in source or "toast." in source, add_missing_imports),
)
