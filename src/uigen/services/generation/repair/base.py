"""Repair rule primitives and small JS/JSX text scanners shared by the rules."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Pattern, Tuple, Union

_QUOTES = "\"'`"
_OPENERS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = {v: k for k, v in _OPENERS.items()}


@dataclass(frozen=True)
class RepairRule:
    """A named text rewrite guarded by a cheap trigger check.

    ``rewrite`` must be idempotent: applying it to its own output changes
    nothing.
    """
    name: str
    predicate: Callable[[str], bool]
    rewrite: Callable[[str], str]

    def apply(self, source: str) -> str:
        if not self.predicate(source):
            return source
        return self.rewrite(source)


def triggered_by(*triggers: Union[str, Pattern[str]]) -> Callable[[str], bool]:
    """Predicate that is true when any substring or compiled regex matches."""
    def predicate(source: str) -> bool:
        for trigger in triggers:
            if isinstance(trigger, str):
                if trigger in source:
                    return True
            elif trigger.search(source):
                return True
        return False
    return predicate


def always(source: str) -> bool:
    return True


# ---------------------------------------------------------------------------
# Scanners
# ---------------------------------------------------------------------------

def skip_string(source: str, index: int) -> int:
    """Return the index just past the string literal starting at ``index``."""
    quote = source[index]
    i = index + 1
    while i < len(source):
        ch = source[i]
        if ch == "\\":
            i += 2
            continue
        if ch == quote:
            return i + 1
        if ch == "\n" and quote != "`":
            return i
        i += 1
    return len(source)


def count_braces(text: str) -> Tuple[int, int]:
    """Count ``{`` and ``}`` outside string literals."""
    opens = closes = 0
    i = 0
    while i < len(text):
        ch = text[i]
        if ch in _QUOTES:
            i = skip_string(text, i)
            continue
        if ch == "{":
            opens += 1
        elif ch == "}":
            closes += 1
        i += 1
    return opens, closes


def matching_brace(source: str, open_index: int) -> Optional[int]:
    """Index of the ``}`` closing the ``{`` at ``open_index``, or None."""
    depth = 0
    i = open_index
    while i < len(source):
        ch = source[i]
        if ch in _QUOTES:
            i = skip_string(source, i)
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return None


def enclosing_bracket(source: str, index: int) -> Optional[str]:
    """The innermost unclosed bracket before ``index``: '(', '[' or '{'."""
    stack: List[str] = []
    i = 0
    while i < index:
        ch = source[i]
        if ch in _QUOTES:
            i = skip_string(source, i)
            continue
        if ch in _OPENERS:
            stack.append(ch)
        elif ch in _CLOSERS and stack and stack[-1] == _CLOSERS[ch]:
            stack.pop()
        i += 1
    return stack[-1] if stack else None


def in_destructuring(source: str, index: int) -> bool:
    """True when ``index`` sits in ``const { ... } =`` or a parameter pattern."""
    brace = source.rfind("{", 0, index)
    if brace == -1:
        return False
    before = source[:brace].rstrip()
    return before.endswith(("const", "let", "var", "(", ","))


def tag_end(source: str, start: int) -> Optional[int]:
    """Index of the ``>`` ending the JSX opening tag that starts at ``start``.

    Braces and quoted strings are skipped, so ``onChange={(e) => ...}``
    does not end the tag early.
    """
    depth = 0
    i = start + 1
    while i < len(source):
        ch = source[i]
        if ch in "\"'" or (ch == "`" and depth):
            i = skip_string(source, i)
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth = max(0, depth - 1)
        elif ch == ">" and depth == 0:
            return i
        elif ch == "<" and depth == 0:
            return None
        i += 1
    return None


_OPEN_TAG_RE = re.compile(r"<([A-Za-z][\w.]*)")


def iter_open_tags(source: str) -> Iterator[Tuple[str, int, int, int]]:
    """Yield ``(name, start, name_end, end)`` for each JSX opening tag."""
    for match in _OPEN_TAG_RE.finditer(source):
        end = tag_end(source, match.start())
        if end is None:
            continue
        yield match.group(1), match.start(), match.end(), end


# ---------------------------------------------------------------------------
# Imports
# ---------------------------------------------------------------------------

NAMED_IMPORT_RE = re.compile(r"import\s*\{([^}]*)\}\s*from\s*[\"']([^\"']+)[\"'];?")
ANY_IMPORT_RE = re.compile(r"^import\s[^;]*?from\s*[\"'][^\"']+[\"'];?|^import\s*[\"'][^\"']+[\"'];?",
                           re.MULTILINE)


def split_import_names(body: str) -> List[str]:
    return [part.strip() for part in body.split(",") if part.strip()]


def imported_name(entry: str) -> str:
    """``Button as Btn`` -> ``Button``."""
    return entry.split(" as ")[0].strip()


def local_name(entry: str) -> str:
    """``Button as Btn`` -> ``Btn``."""
    return entry.split(" as ")[-1].strip()
