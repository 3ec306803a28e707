"""Code Synthesizer
================

Renders a ``Document`` into a single React/TSX source file targeting the
``@fragment_ui`` toolkit. Rendering goes through the Jinja2 templates in
``templates/code``; this module prepares the template context, dispatches
on ``document.kind`` and assembles the import block.

Output is deterministic: the same document always yields the same text.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from jinja2 import Environment, FileSystemLoader, select_autoescape

from uigen.constants import BLOCKS_MODULE, UI_MODULE, DecisionPattern, DocumentKind
from uigen.paths import CODE_TEMPLATES_DIR
from uigen.services.service_base import ValidationError
from .catalog import FUNCTION_IMPORTS, kebab_case, module_for, render_import_statement
from .documents import (
    AppDocument,
    DashboardDocument,
    DecisionDocument,
    Document,
    FormDocument,
    FormField,
    PageDocument,
)
from .patterns import COMPOSITION_RULES, CompositionRules

logger = logging.getLogger(__name__)

_IMPORTS_MARKER = "/*__UIGEN_IMPORTS__*/"
_JSX_TAG_RE = re.compile(r"<([A-Z][A-Za-z0-9]*)")
_FUNCTION_REF_RE = re.compile(r"\b(" + "|".join(FUNCTION_IMPORTS) + r")\.")
_BLANK_INDENT_RE = re.compile(r"^[ \t]+\n", re.MULTILINE)
_WORD_RE = re.compile(r"[A-Za-z0-9]+")

INPUT_TYPES = ("text", "email", "password", "tel", "number", "url", "search")

# Components each field type renders besides the form scaffolding
FIELD_COMPONENTS: Dict[str, Tuple[str, ...]] = {
    "checkbox": ("Checkbox",),
    "textarea": ("Textarea",),
    "select": ("Select",),
    "datepicker": ("DatePicker",),
    "date": ("DatePicker",),
    "radio": ("RadioGroup", "Radio"),
    "switch": ("Switch",),
    "slider": ("Slider",),
    "range": ("Slider",),
}
FORM_COMPONENTS = ("Card", "Button", "Input", "Toaster", "toast")

DECISION_BLOCKS = {
    DecisionPattern.COMPARE_3.value: "Compare3",
    DecisionPattern.RECOMMENDATION.value: "Recommendation",
    DecisionPattern.TRADEOFFS.value: "Tradeoffs",
    DecisionPattern.REVIEW_CONFIRM.value: "ReviewConfirm",
}

# (regex literal, message) for the named validation patterns
NAMED_PATTERNS: Dict[str, Tuple[str, str]] = {
    "email": (r"/^[^\s@]+@[^\s@]+\.[^\s@]+$/", "Please enter a valid email address"),
    "password": (r"/(?=.*[a-z])(?=.*[A-Z])(?=.*\d)/", "Password must contain uppercase, lowercase, and numbers"),
    "phone": (r"/^[\+]?[(]?[0-9]{3}[)]?[-\s\.]?[0-9]{3}[-\s\.]?[0-9]{4,6}$/", "Please enter a valid phone number"),
}

TEMPLATE_GLOBALS = {
    "HELPER_CLASS": "text-xs text-[color:var(--color-fg-muted)] mt-1",
    "ERROR_CLASS": "text-xs text-[color:var(--color-status-error-base)] mt-1",
    "ERROR_BORDER": "border-[color:var(--color-status-error-border)]",
    "DEFAULT_OPTIONS": [{"label": f"Option {i}", "value": f"option{i}"} for i in (1, 2, 3)],
    "INPUT_TYPES": INPUT_TYPES,
}


# ===========================
# TEMPLATE FILTERS
# ===========================

def to_js(value: Any) -> str:
    """Serialize a value as a JS literal (JSON is valid JS)."""
    return json.dumps(value, ensure_ascii=False, indent=2)


def jsx_text(value: Any) -> str:
    """Escape text placed between JSX tags."""
    text = "" if value is None else str(value)
    return (text.replace("{", "&#123;").replace("}", "&#125;")
            .replace("<", "&lt;").replace(">", "&gt;"))


def jsx_attr(value: Any) -> str:
    """Escape a double-quoted JSX attribute value."""
    text = "" if value is None else str(value)
    return text.replace('"', "&quot;")


def jsx_prop(name: str, value: Any) -> str:
    """``name="text"`` for strings, ``name={<json>}`` for everything else."""
    if isinstance(value, str):
        return f'{name}="{jsx_attr(value)}"'
    return f"{name}={{{to_js(value)}}}"


def pascal_case(text: Optional[str], fallback: str) -> str:
    """``"Choose your plan"`` -> ``ChooseYourPlan``; falls back when empty."""
    words = _WORD_RE.findall(text or "")
    name = "".join(w[:1].upper() + w[1:] for w in words)
    if not name or name[0].isdigit():
        return fallback
    return name


# ===========================
# FORM HELPERS
# ===========================

def initial_value(field: FormField) -> str:
    if field.type in ("datepicker", "date"):
        return "undefined"
    if field.type in ("slider", "range"):
        return '"0"'
    return '""'


def validator_name(field_name: str) -> str:
    return "validate" + field_name[:1].upper() + field_name[1:]


def validation_checks(field: FormField) -> List[Dict[str, Any]]:
    """Ordered checks for one field: lengths, pattern, then custom rule."""
    rules = field.validation or {}
    checks: List[Dict[str, Any]] = []

    if rules.get("minLength") is not None:
        n = int(rules["minLength"])
        checks.append({"kind": "minLength", "condition": f"value.length < {n}",
                       "message": f"Must be at least {n} characters"})
    if rules.get("maxLength") is not None:
        n = int(rules["maxLength"])
        checks.append({"kind": "maxLength", "condition": f"value.length > {n}",
                       "message": f"Must be no more than {n} characters"})

    pattern = rules.get("pattern")
    if pattern in NAMED_PATTERNS:
        regex, message = NAMED_PATTERNS[pattern]
        checks.append({"kind": "pattern", "condition": f"!{regex}.test(value)", "message": message})
    elif pattern:
        checks.append({"kind": "pattern", "condition": f"!new RegExp({to_js(str(pattern))}).test(value)",
                       "message": f"Please enter a valid {(field.label or field.name).lower()}"})

    custom = rules.get("custom")
    if custom == "matchPassword":
        checks.append({"kind": "matchPassword", "condition": 'value !== String(data.password || "")',
                       "message": "Passwords do not match"})
    elif custom == "age18":
        checks.append({"kind": "age18"})
    return checks


def form_validators(fields: Iterable[FormField]) -> List[Dict[str, Any]]:
    validators = []
    for f in fields:
        checks = validation_checks(f)
        if not checks:
            continue
        validators.append({
            "field": f.name,
            "fn": validator_name(f.name),
            "checks": checks,
            "needs_data": any(c["kind"] == "matchPassword" for c in checks),
        })
    return validators


# ===========================
# SYNTHESIZER
# ===========================

class CodeSynthesizer:
    """Turns Documents into TSX source via Jinja2 templates."""

    def __init__(self, composition: CompositionRules = COMPOSITION_RULES,
                 templates_dir: Path = CODE_TEMPLATES_DIR):
        self.composition = composition
        self.jinja_env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(['html', 'xml']),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self.jinja_env.filters.update({
            'js': to_js,
            'jsx_text': jsx_text,
            'jsx_attr': jsx_attr,
            'jsx_prop': jsx_prop,
        })
        self.jinja_env.globals.update(TEMPLATE_GLOBALS)
        self._handlers = {
            DocumentKind.FORM: self._form,
            DocumentKind.APP: self._app,
            DocumentKind.DECISION: self._decision,
            DocumentKind.DASHBOARD: self._dashboard,
            DocumentKind.PAGE: self._page,
        }

    def synthesize(self, document: Document) -> str:
        """Render the document; raises ValidationError for an unknown kind."""
        handler = self._handlers.get(getattr(document, 'kind', None))
        if handler is None:
            raise ValidationError(f"Cannot synthesize document of kind {getattr(document, 'kind', None)!r}")
        template_name, context, declared = handler(document)
        source = self._render(template_name, context, declared)
        logger.debug(f"Synthesized {document.kind} document into {len(source)} characters")
        return source

    # -- imports ------------------------------------------------------------

    def import_block(self, declared: Iterable[str], body: str) -> str:
        """Import statements for the closure of declared components plus every
        toolkit identifier referenced in the rendered body."""
        names = set(self.composition.closure(declared))
        names.update(_JSX_TAG_RE.findall(body))
        names.update(_FUNCTION_REF_RE.findall(body))
        ui = [n for n in names if module_for(n) == "ui"]
        blocks = [n for n in names if module_for(n) == "blocks"]
        statements = []
        if ui:
            statements.append(render_import_statement(ui, UI_MODULE))
        if blocks:
            statements.append(render_import_statement(blocks, BLOCKS_MODULE))
        return "\n".join(statements)

    def _render(self, template_name: str, context: Dict[str, Any], declared: Iterable[str]) -> str:
        template = self.jinja_env.get_template(template_name)
        body = template.render(imports=_IMPORTS_MARKER, **context)
        body = _BLANK_INDENT_RE.sub("", body)
        imports = self.import_block(declared, body.replace(_IMPORTS_MARKER, ""))
        return body.replace(_IMPORTS_MARKER, imports)

    # -- per-kind context ---------------------------------------------------

    def _form(self, document: FormDocument):
        declared: List[str] = list(FORM_COMPONENTS)
        for f in document.fields:
            declared.extend(FIELD_COMPONENTS.get(f.type, ("Input",)))
        context = {
            'document': document,
            'component_name': "GeneratedForm",
            'field_meta': [
                {'name': f.name, 'label': f.label or f.name, 'type': f.type, 'required': bool(f.required)}
                for f in document.fields
            ],
            'initial_values': {f.name: initial_value(f) for f in document.fields},
            'validators': form_validators(document.fields),
        }
        return "form.tsx.jinja2", context, declared

    def _app(self, document: AppDocument):
        declared: List[str] = ["Button"]
        screens = []
        for index, screen in enumerate(document.screens, start=1):
            regions: Dict[str, List[Tuple[Any, str]]] = {'header': [], 'sidebar': [], 'body': [], 'footer': []}
            for position, component in enumerate(screen.components, start=1):
                region = component.position if component.position in regions else 'body'
                uid = f"{screen.id}-{kebab_case(component.component)}-{position}"
                regions[region].append((component, uid))
                declared.append(component.component)
            screens.append({
                'id': screen.id,
                'fn': f"Screen{index}",
                'name': screen.name,
                'max_width': self.composition.max_width(screen.layout),
                'regions': regions,
                'edges': [e for e in document.navigation if e.from_screen == screen.id],
            })

        handlers = []
        for screen in document.screens:
            edges = [e for e in document.navigation if e.from_screen == screen.id]
            if edges:
                handlers.append((screen.id, edges))

        context = {
            'screens': screens,
            'handlers': handlers,
            'first_screen': document.screens[0].id if document.screens else "screen-1",
        }
        return "app.tsx.jinja2", context, declared

    def _decision(self, document: DecisionDocument):
        block = DECISION_BLOCKS.get(document.pattern)
        if block is None:
            raise ValidationError(f"Unknown decision pattern: {document.pattern!r}")
        props: List[Tuple[str, Any]] = [('title', document.title)]
        if document.description:
            props.append(('description', document.description))
        if document.pattern == DecisionPattern.REVIEW_CONFIRM.value:
            props.extend([
                ('items', document.items),
                ('confirmText', document.confirm_text or "Confirm"),
                ('cancelText', document.cancel_text or "Cancel"),
                ('actionContractId', document.action_contract_id or "action-confirm"),
            ])
        else:
            props.append(('options', document.options))
        context = {
            'component_name': pascal_case(document.title, "GeneratedDecision"),
            'block': block,
            'props': props,
            'container_id': "decision-container",
            'block_id': f"decision-{document.pattern}",
        }
        return "decision.tsx.jinja2", context, [block]

    def _dashboard(self, document: DashboardDocument):
        metrics = [w for w in document.widgets if w.type == 'metric']
        charts = [w for w in document.widgets if w.type == 'chart']
        tables = [w for w in document.widgets if w.type == 'table']
        declared = ["Card"]
        if metrics:
            declared.append("Badge")
        if tables:
            declared.append("Table")
        context = {
            'document': document,
            'component_name': pascal_case(document.title, "GeneratedDashboard"),
            'metrics': metrics,
            'charts': charts,
            'tables': tables,
        }
        return "dashboard.tsx.jinja2", context, declared

    def _page(self, document: PageDocument):
        regions = {name: list(document.regions.get(name, [])) for name in
                   ('header', 'sidebar', 'content', 'footer', 'main')}
        module_types = {m.type for modules in regions.values() for m in modules}
        declared: List[str] = []
        if 'navigation' in module_types:
            declared.append("NavigationMenu")
        if module_types & {'hero', 'pricing'}:
            declared.append("Button")
        if module_types & {'pricing', 'faq'}:
            declared.append("Card")
        context = {
            'document': document,
            'component_name': pascal_case(document.title, "GeneratedPage"),
            'regions': regions,
        }
        return "page.tsx.jinja2", context, declared


_synthesizer: Optional[CodeSynthesizer] = None


def get_synthesizer() -> CodeSynthesizer:
    """Get singleton synthesizer instance."""
    global _synthesizer
    if _synthesizer is None:
        _synthesizer = CodeSynthesizer()
    return _synthesizer


def synthesize(document: Document) -> str:
    return get_synthesizer().synthesize(document)
