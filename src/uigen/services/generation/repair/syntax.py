"""Script-level repairs: TypeScript residue, blocking dialogs, broken object
literals and React idioms that commonly show up in generated source."""

from __future__ import annotations

import re

from .base import RepairRule, always, enclosing_bracket, in_destructuring, matching_brace, triggered_by

# ---------------------------------------------------------------------------
# Type annotations
# ---------------------------------------------------------------------------

_PRIMITIVE_TYPES = r"(?:string|number|boolean|any|unknown|void|never|null|undefined|object)"
_GENERIC = r"(?:<(?:[^<>()]|<[^<>()]*>)*>)"
# A single type term: primitive, dotted/capitalized name with optional generic, or inline object type
_TYPE_TERM = rf"(?:{_PRIMITIVE_TYPES}|[A-Z][\w]*(?:\.[A-Z][\w]*)*{_GENERIC}?|\{{[^{{}}]*\}})(?:\[\])*"
_TYPE = rf"{_TYPE_TERM}(?:\s*\|\s*{_TYPE_TERM})*"

_DECLARATION_START_RE = re.compile(r"^[ \t]*(?:export\s+)?(interface|type)\s+[A-Z]\w*", re.MULTILINE)
_HOOK_GENERIC_RE = re.compile(
    rf"\b(useState|useRef|useMemo|useCallback|useReducer|useContext|createContext|forwardRef){_GENERIC}\("
)
_VARIABLE_ANNOTATION_RE = re.compile(
    r"\b(const|let|var)\s+([\w$]+|\{[^{}=]*\}|\[[^\[\]=]*\])\s*:\s*[^=;\n]+?\s*=(?![=>])"
)
_PARAM_ANNOTATION_RE = re.compile(
    rf"([(,]\s*)(\.\.\.)?([\w$]+|\{{[^{{}}]*\}})\??\s*:\s*{_TYPE}(?=\s*[,)=])"
)
_RETURN_ANNOTATION_RE = re.compile(
    rf"\)\s*:\s*(?:{_PRIMITIVE_TYPES}|JSX\.Element|React\.\w+{_GENERIC}?|Promise{_GENERIC}|ReactNode|ReactElement)"
    r"(?:\s*\|\s*(?:null|undefined))?\s*(?=\{|=>)"
)
_CAST_RE = re.compile(
    rf"(?<=[\w)\]\"'`])\s+as\s+(?:const|{_PRIMITIVE_TYPES}|Date|HTML\w*Element|React\.\w+{_GENERIC}?|Record{_GENERIC}"
    rf"|keyof\s+typeof\s+\w+)(?:\[\])?(?:\s*\|\s*(?:{_PRIMITIVE_TYPES}|Date))*(?=\s*[;,)\]}}\n])"
)
_NON_NULL_RE = re.compile(r"([\w)\]])!(?=\.)")
_IMPORT_TYPE_RE = re.compile(r"^import\s+type\s[^;]*;?\n?", re.MULTILINE)

_TYPE_TRIGGER_RE = re.compile(
    r"\b(?:interface|type)\s+[A-Z]|:\s*(?:string|number|boolean|any|React\.|JSX\.)|"
    r"\b(?:useState|useRef)<|\bas\s+(?:const|string|number|any|Date|HTML)|[\w)]!\.|^import\s+type\s",
    re.MULTILINE,
)


def _declaration_end(source: str, start: int) -> int:
    """End of an interface/type declaration starting at ``start``."""
    i = start
    while i < len(source):
        ch = source[i]
        if ch == "{":
            close = matching_brace(source, i)
            if close is None:
                return len(source)
            i = close + 1
            continue
        if ch == ";":
            i += 1
            break
        if ch == "\n":
            # Unions and generics may continue on the next line
            tail = source[start:i].rstrip()
            following = source[i + 1:].lstrip(" \t")
            if tail.endswith(("=", "|", "&", ",", "<")) or following.startswith(("|", "&")):
                i += 1
                continue
            break
        i += 1
    while i < len(source) and source[i] in " \t":
        i += 1
    if i < len(source) and source[i] == "\n":
        i += 1
    return i


def _strip_declarations(source: str) -> str:
    while True:
        match = _DECLARATION_START_RE.search(source)
        if not match:
            return source
        end = _declaration_end(source, match.end())
        source = source[:match.start()] + source[end:]


def _strip_params(source: str) -> str:
    def replace(match: re.Match) -> str:
        if enclosing_bracket(source, match.start(3)) != "(":
            return match.group(0)
        return f"{match.group(1)}{match.group(2) or ''}{match.group(3)}"
    return _PARAM_ANNOTATION_RE.sub(replace, source)


def strip_type_annotations(source: str) -> str:
    """Remove TypeScript-only syntax so the output is plain JSX."""
    source = _IMPORT_TYPE_RE.sub("", source)
    source = _strip_declarations(source)
    source = _HOOK_GENERIC_RE.sub(r"\1(", source)
    source = _VARIABLE_ANNOTATION_RE.sub(r"\1 \2 =", source)
    source = _strip_params(source)
    source = _RETURN_ANNOTATION_RE.sub(") ", source)
    source = _CAST_RE.sub("", source)
    return _NON_NULL_RE.sub(r"\1", source)


# ---------------------------------------------------------------------------
# Blocking dialogs
# ---------------------------------------------------------------------------

_DIALOG_RE = re.compile(r"(?<![\w$.])(?:window\.)?(alert|confirm|prompt)\(")
_FUNCTION_DEF_RE = re.compile(r"function\s*$")


def replace_blocking_dialogs(source: str) -> str:
    """``alert(...)`` -> ``toast.success(...)``; ``confirm``/``prompt`` -> ``toast.info``."""
    def replace(match: re.Match) -> str:
        if _FUNCTION_DEF_RE.search(source[max(0, match.start() - 12):match.start()]):
            return match.group(0)
        return "toast.success(" if match.group(1) == "alert" else "toast.info("
    return _DIALOG_RE.sub(replace, source)


# ---------------------------------------------------------------------------
# Object literals
# ---------------------------------------------------------------------------

_DANGLING_EMPTY_OBJECT_RE = re.compile(r"(\b(?:const|let|var)\s+[\w$]+\s*=\s*)\{\}[ \t]*\n([ \t]*[\w$\"']+\s*:)")
_DOUBLED_UNDEFINED_RE = re.compile(r"(\b[\w$]+\s*:\s*[\w$.\"'\[\]]+)\s*:\s*undefined\b")
_SPREAD_UNDEFINED_RE = re.compile(r"\{\s*\.\.\.([\w$]+)\s*:\s*undefined\s*,")
_SET_ERRORS_RE = re.compile(r"setErrors\(\{\s*([\w$]+)\s*\)")
_COMPUTED_SPREAD_RE = re.compile(r"\(\{\s*\.\.\.prev,\s*\[([\w$]+)\]\s*\)")
_BOOLEAN_SHORTHAND_RE = re.compile(r"([{,]\s*)(included|popular|required|disabled)(\s*[,}])")


def fix_dangling_empty_object(source: str) -> str:
    """``const x = {}`` followed by ``prop:`` lines becomes one literal."""
    return _DANGLING_EMPTY_OBJECT_RE.sub(r"\1{\n\2", source)


def fix_doubled_undefined_values(source: str) -> str:
    """``key: value: undefined`` -> ``key: value``."""
    return _DOUBLED_UNDEFINED_RE.sub(r"\1", source)


def fix_incomplete_spreads(source: str) -> str:
    source = _SPREAD_UNDEFINED_RE.sub(r"{ ...\1,", source)
    source = _SET_ERRORS_RE.sub(r"setErrors({ \1: error })", source)
    return _COMPUTED_SPREAD_RE.sub(r"({ ...prev, [\1]: value })", source)


def _shorthand_to_true(pattern: re.Pattern, source: str) -> str:
    def replace(match: re.Match) -> str:
        # ``disabled={disabled}`` is a JSX expression, not a literal
        if source[match.start() - 1:match.start()] == "=" or in_destructuring(source, match.start(2)):
            return match.group(0)
        return f"{match.group(1)}{match.group(2)}: true{match.group(3)}"
    # Adjacent shorthands share a separator, so repeat until stable
    while True:
        updated = pattern.sub(replace, source)
        if updated == source:
            return updated
        source = updated


def fix_boolean_shorthand_props(source: str) -> str:
    """``{ name, popular }`` in data literals -> ``popular: true``."""
    return _shorthand_to_true(_BOOLEAN_SHORTHAND_RE, source)


# ---------------------------------------------------------------------------
# React idioms
# ---------------------------------------------------------------------------

_EMPTY_USE_STATE_RE = re.compile(r"\buseState\(\s*\)")
_CHART_REGISTER_RE = re.compile(r"(?<![\w$.])Chart\.register\(")
_DEFAULT_EXPORT_RE = re.compile(r"^\s*export\s+default\b", re.MULTILINE)
_COMPONENT_FUNCTION_RE = re.compile(r"^(?:export\s+)?function\s+[A-Z]\w*\s*\(", re.MULTILINE)
_COMPONENT_CONST_RE = re.compile(r"^(?:export\s+)?const\s+([A-Z]\w*)\s*=", re.MULTILINE)
_NAMED_EXPORT_RE = re.compile(r"^export\s+")


def normalize_react_idioms(source: str) -> str:
    source = source.replace("<React.Fragment>", "<>").replace("</React.Fragment>", "</>")
    source = _CHART_REGISTER_RE.sub("ChartJS.register(", source)
    return _EMPTY_USE_STATE_RE.sub("useState(null)", source)


def ensure_default_export(source: str) -> str:
    """Export the last top-level component when nothing is exported by default."""
    if _DEFAULT_EXPORT_RE.search(source):
        return source
    functions = list(_COMPONENT_FUNCTION_RE.finditer(source))
    if functions:
        last = functions[-1]
        declaration = _NAMED_EXPORT_RE.sub("", last.group(0))
        return source[:last.start()] + "export default " + declaration + source[last.end():]
    constants = list(_COMPONENT_CONST_RE.finditer(source))
    if constants:
        return source.rstrip("\n") + f"\n\nexport default {constants[-1].group(1)};\n"
    return source


RULES = (
    RepairRule("strip_type_annotations", _TYPE_TRIGGER_RE.search, strip_type_annotations),
    RepairRule("replace_blocking_dialogs", triggered_by(_DIALOG_RE), replace_blocking_dialogs),
    RepairRule("fix_dangling_empty_object", triggered_by(_DANGLING_EMPTY_OBJECT_RE), fix_dangling_empty_object),
    RepairRule("fix_doubled_undefined_values", triggered_by(_DOUBLED_UNDEFINED_RE), fix_doubled_undefined_values),
    RepairRule("fix_incomplete_spreads",
               triggered_by(_SPREAD_UNDEFINED_RE, _SET_ERRORS_RE, _COMPUTED_SPREAD_RE), fix_incomplete_spreads),
)

LATE_RULES = (
    RepairRule("fix_boolean_shorthand_props", triggered_by(_BOOLEAN_SHORTHAND_RE), fix_boolean_shorthand_props),
    RepairRule("normalize_react_idioms",
               triggered_by("React.Fragment", _CHART_REGISTER_RE, _EMPTY_USE_STATE_RE), normalize_react_idioms),
    RepairRule("ensure_default_export", always, ensure_default_export),
)
