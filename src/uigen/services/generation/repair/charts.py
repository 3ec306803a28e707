"""Chart repairs: option values, legend/tooltip nesting, unbalanced option
literals and missing chart data."""

from __future__ import annotations

import re
from typing import Optional, Tuple

from .base import RepairRule, count_braces, in_destructuring, matching_brace, skip_string, triggered_by

# ---------------------------------------------------------------------------
# Option values
# ---------------------------------------------------------------------------

_OPTION_SHORTHAND_RE = re.compile(r"([{,]\s*)(responsive|maintainAspectRatio|enabled|display)(\s*[,}])")
_ASPECT_UNDEFINED_RE = re.compile(r"\bmaintainAspectRatio\s*:\s*undefined\b")
_DISPLAY_UNDEFINED_RE = re.compile(r"\bdisplay\s*:\s*undefined\b")
_FILL_LINE_RE = re.compile(r"^[ \t]*fill[ \t]*:[ \t]*undefined[ \t]*,?[ \t]*\n", re.MULTILINE)
_FILL_UNDEFINED_RE = re.compile(r"\bfill[ \t]*:[ \t]*undefined[ \t]*,?[ \t]*")


def fix_chart_option_values(source: str) -> str:
    def replace(match: re.Match) -> str:
        if source[match.start() - 1:match.start()] == "=" or in_destructuring(source, match.start(2)):
            return match.group(0)
        return f"{match.group(1)}{match.group(2)}: true{match.group(3)}"

    while True:
        updated = _OPTION_SHORTHAND_RE.sub(replace, source)
        if updated == source:
            break
        source = updated
    source = _ASPECT_UNDEFINED_RE.sub("maintainAspectRatio: false", source)
    source = _DISPLAY_UNDEFINED_RE.sub("display: true", source)
    source = _FILL_LINE_RE.sub("", source)
    return _FILL_UNDEFINED_RE.sub("", source)


# ---------------------------------------------------------------------------
# Legend / tooltip nesting
# ---------------------------------------------------------------------------

_LEGEND_RE = re.compile(r"\blegend\s*:\s*\{")
_TOOLTIP_RE = re.compile(r"\btooltip\s*:\s*\{")


def _direct_child(body: str, pattern: re.Pattern) -> Optional[re.Match]:
    """First match of ``pattern`` at nesting depth zero inside ``body``."""
    for match in pattern.finditer(body):
        opens, closes = count_braces(body[:match.start()])
        if opens == closes:
            return match
    return None


def _line_indent(source: str, index: int) -> str:
    line_start = source.rfind("\n", 0, index) + 1
    line = source[line_start:index]
    return line[:len(line) - len(line.lstrip(" \t"))]


def fix_legend_tooltip_nesting(source: str) -> str:
    """Hoist a ``tooltip`` object nested in ``legend`` to a sibling of it."""
    search_from = 0
    while True:
        legend = _LEGEND_RE.search(source, search_from)
        if not legend:
            return source
        open_index = legend.end() - 1
        close_index = matching_brace(source, open_index)
        if close_index is None:
            return source
        body = source[open_index + 1:close_index]
        tooltip = _direct_child(body, _TOOLTIP_RE)
        if tooltip is None:
            search_from = legend.end()
            continue

        tip_start = open_index + 1 + tooltip.start()
        tip_close = matching_brace(source, open_index + 1 + tooltip.end() - 1)
        if tip_close is None or tip_close > close_index:
            return source
        tooltip_text = source[tip_start:tip_close + 1]

        # Drop the tooltip and its separating comma from the legend body
        before = source[open_index + 1:tip_start].rstrip()
        after = source[tip_close + 1:close_index]
        if after.lstrip().startswith(","):
            after = after.lstrip()[1:]
        elif before.endswith(","):
            before = before[:-1]
        inner = (before + after).rstrip()
        indent = _line_indent(source, legend.start())
        legend_text = source[legend.start():open_index + 1] + inner
        legend_text += f"\n{indent}}}" if inner.strip() else "}"

        rest = source[close_index + 1:]
        hoisted = f",\n{indent}{tooltip_text}"
        if rest.lstrip(" \t").startswith(","):
            comma = rest.index(",")
            rest = rest[comma + 1:]
            hoisted += ","
        source = source[:legend.start()] + legend_text + hoisted + rest
        search_from = legend.start() + len(legend_text)


# ---------------------------------------------------------------------------
# Brace balance
# ---------------------------------------------------------------------------

_JSX_OPTIONS_RE = re.compile(r"\b(?:options|plugins)=\{\{")
_PLUGINS_RE = re.compile(r"\bplugins\s*:\s*\{")
_OBJECT_DECLARATION_RE = re.compile(
    r"^([ \t]*)(?:export\s+)?(?:const|let|var)\s+([\w$]+)\s*=\s*\{", re.MULTILINE
)
_OPTIONS_DECLARATION_RE = re.compile(
    r"^[ \t]*(?:export\s+)?(?:const|let|var)\s+[\w$]*(?:[Oo]ptions|[Cc]onfig)[\w$]*\s*=\s*\{", re.MULTILINE
)
_OPTIONS_NAME_RE = re.compile(r"options|config", re.IGNORECASE)
_STATEMENT_LINE_RE = re.compile(r"([ \t]*)(?:const|let|var|function|export|return|import)\b")
_STATEMENT_END_RE = re.compile(r"[ \t]*;")


def _closers(missing: int, indent: str, deepest: int) -> str:
    """``missing`` closing braces, one per line, each one level shallower."""
    return "".join(f"\n{indent}{'  ' * level}}}" for level in range(deepest, deepest - missing, -1))


def _jsx_expression_end(source: str, open_index: int) -> Tuple[int, int]:
    """Walk a JSX attribute expression from its opening brace.

    Returns ``(index, 0)`` for the brace that closes it, or ``(index, depth)``
    for the ``/>`` or ``>`` that ends the tag while ``depth`` braces are
    still open. ``=>`` and ``>=`` do not end the tag.
    """
    depth = 0
    i = open_index
    while i < len(source):
        ch = source[i]
        if ch in "\"'`":
            i = skip_string(source, i)
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i, 0
        elif ch == "/" and source.startswith("/>", i):
            return i, depth
        elif ch == ">" and source[i - 1] != "=" and not source.startswith(">=", i):
            return i, depth
        i += 1
    return len(source), depth


def _balance_jsx_options(source: str) -> str:
    """``options={{ ...`` props missing closing braces before the tag end."""
    search_from = 0
    while True:
        match = _JSX_OPTIONS_RE.search(source, search_from)
        if not match:
            return source
        end, missing = _jsx_expression_end(source, match.end() - 2)
        if missing > 0 and end < len(source):
            head = source[:end].rstrip()
            if "\n" in source[match.start():len(head)]:
                closers = _closers(missing, _line_indent(source, match.start()), missing - 1)
            else:
                closers = " " + "}" * missing
            source = head + closers + source[len(head):]
            end += len(closers)
        search_from = end


def _declaration_end(source: str, open_index: int, indent: str) -> Tuple[int, int, bool]:
    """Walk an object declaration from its opening brace.

    Returns ``(index, missing, terminated)``:

    - the closing brace, 0 missing, when the literal is balanced
    - the ``}`` of the first ``};`` when braces are still open there; that
      brace is taken to close the declaration itself
    - otherwise the start of the next statement line at the declaration's
      indent or shallower (or the end of the source), not terminated
    """
    depth = 0
    i = open_index
    while i < len(source):
        ch = source[i]
        if ch in "\"'`":
            i = skip_string(source, i)
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i, 0, True
            if _STATEMENT_END_RE.match(source, i + 1):
                return i, depth, True
        elif ch == "\n":
            line = _STATEMENT_LINE_RE.match(source, i + 1)
            if line and len(line.group(1)) <= len(indent):
                return i + 1, depth, False
        i += 1
    return len(source), depth, False


def _balance_declarations(source: str) -> str:
    """Close ``options``/``config`` declarations and any holding ``plugins: {``."""
    search_from = 0
    while True:
        match = _OBJECT_DECLARATION_RE.search(source, search_from)
        if not match:
            return source
        search_from = match.end()
        indent = match.group(1)
        end, missing, terminated = _declaration_end(source, match.end() - 1, indent)
        if missing <= 0:
            continue
        if not (_OPTIONS_NAME_RE.search(match.group(2)) or _PLUGINS_RE.search(source, match.end(), end)):
            continue
        head = source[:end].rstrip()
        if terminated:
            closers = _closers(missing, indent, missing)
        else:
            closers = _closers(missing, indent, missing - 1) + ";"
        source = head + closers + source[len(head):]


def balance_option_braces(source: str) -> str:
    """Append missing ``}`` to ``options={{`` props and option declarations.

    Every ``{`` opened inside the construct gets its ``}`` before the tag end
    or the statement end.
    """
    return _balance_declarations(_balance_jsx_options(source))


# ---------------------------------------------------------------------------
# Chart data
# ---------------------------------------------------------------------------

CHART_COMPONENTS = ("Line", "Bar", "Pie", "Doughnut", "Radar", "PolarArea", "Scatter", "Bubble")
_CHART_DATA_RE = re.compile(r"<(?:" + "|".join(CHART_COMPONENTS) + r")\b[^>]*?\bdata=\{([A-Za-z_$][\w$]*)\}")
_RETURN_RE = re.compile(r"^([ \t]*)return\s*\(", re.MULTILINE)

DEFAULT_LABELS = '["January", "February", "March", "April", "May", "June"]'
DEFAULT_DATASETS = (
    "[\n"
    "  {\n"
    '    label: "Data",\n'
    "    data: [65, 59, 80, 81, 56, 55],\n"
    "    fill: false,\n"
    '    borderColor: "rgba(75,192,192,1)",\n'
    '    backgroundColor: "rgba(75,192,192,0.2)",\n'
    "  },\n"
    "]"
)


def _indented(text: str, indent: str) -> str:
    return text.replace("\n", "\n" + indent)


def default_chart_data(name: str, indent: str) -> str:
    inner = indent + "  "
    return (
        f"{indent}const {name} = {{\n"
        f"{inner}labels: {DEFAULT_LABELS},\n"
        f"{inner}datasets: {_indented(DEFAULT_DATASETS, inner)},\n"
        f"{indent}}};\n\n"
    )


def _complete_declaration(source: str, name: str) -> Optional[str]:
    """Add ``labels``/``datasets`` to an existing declaration missing them."""
    declaration = re.search(rf"\b(?:const|let|var)\s+{re.escape(name)}\s*=\s*\{{", source)
    if not declaration:
        return None
    open_index = declaration.end() - 1
    close_index = matching_brace(source, open_index)
    if close_index is None:
        return source
    body = source[open_index + 1:close_index]
    additions = []
    if not re.search(r"\blabels\s*:", body):
        additions.append(f"labels: {DEFAULT_LABELS},")
    if not re.search(r"\bdatasets\s*:", body):
        additions.append("datasets: " + DEFAULT_DATASETS + ",")
    if not additions:
        return source
    indent = _line_indent(source, declaration.start()) + "  "
    inserted = "".join(f"\n{indent}{_indented(text, indent)}" for text in additions)
    return source[:open_index + 1] + inserted + source[open_index + 1:]


def _is_bound(source: str, name: str) -> bool:
    """True when ``name`` is declared or referenced outside ``data={name}``."""
    stripped = re.sub(rf"\bdata=\{{{re.escape(name)}\}}", "", source)
    return re.search(rf"(?<![\w$.\-]){re.escape(name)}(?![\w$=\-])(?!\s*:)", stripped) is not None


def repair_chart_data(source: str) -> str:
    """Give every chart a ``{labels, datasets}`` data object."""
    for name in dict.fromkeys(m.group(1) for m in _CHART_DATA_RE.finditer(source)):
        completed = _complete_declaration(source, name)
        if completed is not None:
            source = completed
            continue
        if _is_bound(source, name):
            continue
        chart = re.search(rf"\bdata=\{{{re.escape(name)}\}}", source)
        returns = [r for r in _RETURN_RE.finditer(source) if chart and r.start() < chart.start()]
        if not returns:
            continue
        anchor = returns[-1]
        source = source[:anchor.start()] + default_chart_data(name, anchor.group(1)) + source[anchor.start():]
    return source


RULES = (
    RepairRule("fix_chart_option_values",
               triggered_by(_OPTION_SHORTHAND_RE, _ASPECT_UNDEFINED_RE, _DISPLAY_UNDEFINED_RE, _FILL_UNDEFINED_RE),
               fix_chart_option_values),
    # The hoist needs a closed legend object, so it runs after balancing
    RepairRule("balance_option_braces", triggered_by(_JSX_OPTIONS_RE, _PLUGINS_RE, _OPTIONS_DECLARATION_RE),
               balance_option_braces),
    RepairRule("fix_legend_tooltip_nesting", triggered_by(_LEGEND_RE), fix_legend_tooltip_nesting),
)

DATA_RULES = (
    RepairRule("repair_chart_data", triggered_by(_CHART_DATA_RE), repair_chart_data),
)
