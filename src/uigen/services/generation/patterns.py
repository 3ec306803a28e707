"""Pattern Library
===============

Static keyword/regex tables that map prompt phrases to screen types,
application flows and suggested toolkit components, plus the canned screen
templates and multi-screen flows instantiated by the builders.

Everything here is built once at import time and is read-only: tuples for
sequences and ``MappingProxyType`` for mappings.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Pattern, Tuple

from .form_templates import FORM_TEMPLATES, FORM_TYPE_KEYWORDS, FormTemplate

_EMPTY: Mapping[str, Any] = MappingProxyType({})


def _frozen(mapping: Optional[Dict[str, Any]] = None) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class ComponentRule:
    """Keyword rule suggesting a toolkit component.

    A prompt matching ``k`` of the rule's ``n`` patterns scores
    ``k / n * priority``.
    """
    patterns: Tuple[str, ...]
    component: str
    context: Tuple[str, ...] = ()
    priority: int = 0

    def score(self, lowered_prompt: str) -> float:
        matches = sum(1 for p in self.patterns if p in lowered_prompt)
        if not matches:
            return 0.0
        return matches / len(self.patterns) * self.priority


@dataclass(frozen=True)
class TemplateComponent:
    component: str
    props: Mapping[str, Any] = field(default_factory=lambda: _EMPTY)
    position: Optional[str] = None
    required: bool = False


@dataclass(frozen=True)
class ScreenTemplate:
    type: str
    name: str
    description: str
    components: Tuple[TemplateComponent, ...]
    layout: str

    def renamed(self, name: str) -> "ScreenTemplate":
        return replace(self, name=name)


@dataclass(frozen=True)
class FlowScreen:
    """A screen template registered under a flow-local key."""
    key: str
    template: ScreenTemplate


@dataclass(frozen=True)
class FlowEdge:
    from_key: str
    to_key: str
    trigger: str


@dataclass(frozen=True)
class AppFlow:
    name: str
    screens: Tuple[FlowScreen, ...]
    navigation: Tuple[FlowEdge, ...]


@dataclass(frozen=True)
class LayoutRule:
    structure: Tuple[Any, ...]
    max_width: str


@dataclass(frozen=True)
class CompositionRules:
    """How toolkit components compose.

    Attributes:
        layouts: Layout name to structure and max-width class
        required: Component to sub-components it cannot render without
        rendered: Extra sub-parts the synthesizer emits for a component
    """
    layouts: Mapping[str, LayoutRule]
    required: Mapping[str, Tuple[str, ...]]
    rendered: Mapping[str, Tuple[str, ...]]

    def max_width(self, layout: str) -> str:
        rule = self.layouts.get(layout) or self.layouts["single-column"]
        return rule.max_width

    def closure(self, components) -> List[str]:
        """Return the components plus every required and rendered sub-part."""
        seen: List[str] = []
        pending = list(components)
        while pending:
            name = pending.pop(0)
            if name in seen:
                continue
            seen.append(name)
            pending.extend(self.required.get(name, ()))
            pending.extend(self.rendered.get(name, ()))
        return seen


# ===========================
# COMPONENT RULES
# ===========================

COMPONENT_RULES: Tuple[ComponentRule, ...] = (
    # Navigation
    ComponentRule(("navigation", "menu", "nav", "nawigacja"), "NavigationMenu", ("header", "sidebar"), 10),
    ComponentRule(("breadcrumb", "breadcrumbs", "ścieżka"), "Breadcrumbs", ("header",), 8),
    # Data display
    ComponentRule(("table", "tabela", "data table", "grid"), "Table", ("body",), 10),
    ComponentRule(("list", "lista", "items"), "VirtualList", ("body",), 9),
    ComponentRule(("card", "karta", "panel"), "Card", ("body",), 7),
    # Forms
    ComponentRule(("form", "formularz", "input", "field"), "Input", ("form", "body"), 10),
    ComponentRule(("select", "dropdown", "wybierz"), "Select", ("form",), 9),
    ComponentRule(("date", "data", "calendar"), "DatePicker", ("form",), 9),
    # Feedback
    ComponentRule(("alert", "notification", "message", "powiadomienie"), "Alert", ("body", "header"), 8),
    ComponentRule(("toast", "snackbar", "popup"), "Toast", ("global",), 7),
    ComponentRule(("dialog", "modal", "popup", "okno"), "Dialog", ("global",), 9),
    # Layout
    ComponentRule(("sidebar", "boczny", "panel"), "Sidebar", ("layout",), 10),
    ComponentRule(("tabs", "zakładki", "sections"), "Tabs", ("body",), 8),
    ComponentRule(("accordion", "rozwijane", "collapse"), "Accordion", ("body",), 7),
)


# ===========================
# SCREEN TYPE RULES
# ===========================

# Declaration order is the detection order
SCREEN_TYPE_RULES: Tuple[Tuple[str, Tuple[Pattern[str], ...]], ...] = tuple(
    (screen_type, tuple(re.compile(p, re.IGNORECASE) for p in patterns))
    for screen_type, patterns in (
        ("dashboard", (
            r"dashboard|panel|pulpit|overview|przegląd",
            r"statistics|stats|statystyki",
            r"metrics|metryki",
        )),
        ("landing", (
            r"landing|strona główna|homepage|hero",
            r"welcome|witamy|intro",
        )),
        ("list", (
            r"list|lista|items|elementy",
            r"table|tabela|grid",
            r"products|produkty|users|użytkownicy",
        )),
        ("detail", (
            r"detail|szczegóły|view|widok",
            r"profile|profil|settings|ustawienia",
        )),
        ("form", (
            r"form|formularz|create|utwórz|edit|edytuj",
            r"register|rejestracja|login|logowanie",
        )),
        ("search", (
            r"search|wyszukaj|find|znajdź",
            r"filter|filtruj|sort|sortuj",
        )),
    )
)


# ===========================
# SCREEN TEMPLATES
# ===========================

def _c(component: str, position: Optional[str] = "body", required: bool = False, **props: Any) -> TemplateComponent:
    return TemplateComponent(component, _frozen(props), position, required)


SCREEN_TEMPLATES: Mapping[str, ScreenTemplate] = MappingProxyType({
    "dashboard": ScreenTemplate(
        "dashboard", "Dashboard", "Overview dashboard with metrics and charts",
        (
            _c("NavigationMenu", "header", True),
            _c("Card", variant="metric"),
            _c("Table"),
            _c("Progress"),
        ),
        "dashboard",
    ),
    "landing": ScreenTemplate(
        "landing", "Landing Page", "Marketing landing page with hero section",
        (
            _c("NavigationMenu", "header", True),
            _c("Card", variant="hero"),
            _c("Button", variant="solid", size="lg"),
            _c("Tabs"),
        ),
        "single-column",
    ),
    "list": ScreenTemplate(
        "list", "List View", "List or table view with filters",
        (
            _c("NavigationMenu", "header", True),
            _c("Input", type="search", placeholder="Search..."),
            _c("Select", placeholder="Filter"),
            _c("Table", required=True),
            _c("Pagination", "footer"),
        ),
        "two-column",
    ),
    "detail": ScreenTemplate(
        "detail", "Detail View", "Detail page with information cards",
        (
            _c("Breadcrumbs", "header"),
            _c("Card", required=True),
            _c("Tabs"),
            _c("Button", variant="outline"),
        ),
        "single-column",
    ),
    "form": ScreenTemplate(
        "form", "Form", "Form page with inputs and validation",
        (
            _c("Card", required=True),
            _c("Input", required=True),
            _c("Button", type="submit"),
        ),
        "single-column",
    ),
    "settings": ScreenTemplate(
        "settings", "Settings Page", "Settings page with grouped options",
        (
            _c("NavigationMenu", "header", True),
            _c("Card", required=True),
            _c("Tabs"),
            _c("Switch"),
            _c("Select"),
            _c("Button", variant="primary"),
        ),
        "two-column",
    ),
    "profile": ScreenTemplate(
        "profile", "Profile Page", "User profile page with avatar and information",
        (
            _c("NavigationMenu", "header", True),
            _c("Card", required=True),
            _c("Input"),
            _c("Textarea"),
            _c("Button", variant="primary"),
        ),
        "single-column",
    ),
    "search": ScreenTemplate(
        "search", "Search Results", "Search results page with filters and results",
        (
            _c("NavigationMenu", "header", True),
            _c("Input", type="search", placeholder="Search..."),
            _c("Select", placeholder="Filter"),
            _c("Card"),
            _c("Pagination", "footer"),
        ),
        "two-column",
    ),
    "cart": ScreenTemplate(
        "cart", "Shopping Cart", "Shopping cart with items and checkout",
        (
            _c("NavigationMenu", "header", True),
            _c("Table", required=True),
            _c("Card", variant="summary"),
            _c("Button", variant="primary", size="lg"),
        ),
        "two-column",
    ),
})


# ===========================
# APP FLOWS
# ===========================

APP_FLOWS: Mapping[str, AppFlow] = MappingProxyType({
    "e-commerce": AppFlow(
        "E-commerce Application",
        (
            FlowScreen("landing", SCREEN_TEMPLATES["landing"]),
            FlowScreen("list", SCREEN_TEMPLATES["list"]),
            FlowScreen("detail", SCREEN_TEMPLATES["detail"]),
            FlowScreen("checkout", SCREEN_TEMPLATES["form"].renamed("Checkout")),
        ),
        (
            FlowEdge("landing", "list", "Browse Products"),
            FlowEdge("list", "detail", "View Product"),
            FlowEdge("detail", "checkout", "Add to Cart"),
        ),
    ),
    "admin-panel": AppFlow(
        "Admin Panel",
        (
            FlowScreen("dashboard", SCREEN_TEMPLATES["dashboard"]),
            FlowScreen("list", SCREEN_TEMPLATES["list"]),
            FlowScreen("detail", SCREEN_TEMPLATES["detail"]),
            FlowScreen("form", SCREEN_TEMPLATES["form"]),
        ),
        (
            FlowEdge("dashboard", "list", "View Items"),
            FlowEdge("list", "detail", "Edit"),
            FlowEdge("detail", "form", "Save Changes"),
        ),
    ),
    "onboarding": AppFlow(
        "User Onboarding",
        (
            FlowScreen("welcome", SCREEN_TEMPLATES["landing"].renamed("Welcome")),
            FlowScreen("registration", SCREEN_TEMPLATES["form"].renamed("Registration")),
            FlowScreen("profile-setup", SCREEN_TEMPLATES["form"].renamed("Profile Setup")),
            FlowScreen("dashboard", SCREEN_TEMPLATES["dashboard"].renamed("Dashboard")),
        ),
        (
            FlowEdge("welcome", "registration", "Get Started"),
            FlowEdge("registration", "profile-setup", "Continue"),
            FlowEdge("profile-setup", "dashboard", "Complete"),
        ),
    ),
})

# Keyword triggers per flow, checked in declaration order
APP_FLOW_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("e-commerce", ("e-commerce", "shop", "sklep")),
    ("admin-panel", ("admin", "panel")),
    ("onboarding", ("onboarding", "rejestracja", "welcome")),
)


# ===========================
# COMPOSITION RULES
# ===========================

COMPOSITION_RULES = CompositionRules(
    layouts=MappingProxyType({
        "single-column": LayoutRule(("header", "body", "footer"), "max-w-4xl"),
        "two-column": LayoutRule(("header", ("sidebar", "body"), "footer"), "max-w-7xl"),
        "dashboard": LayoutRule(("header", ("sidebar", ("body-grid",)), "footer"), "max-w-full"),
    }),
    required=MappingProxyType({
        "Table": ("TableHeader", "TableBody", "TableRow"),
        "Select": ("SelectTrigger", "SelectContent", "SelectItem"),
        "Dialog": ("DialogTrigger", "DialogContent"),
        "Tabs": ("TabsList", "TabsTrigger", "TabsContent"),
    }),
    rendered=MappingProxyType({
        "Card": ("CardHeader", "CardTitle", "CardDescription", "CardContent"),
        "NavigationMenu": ("NavigationMenuList", "NavigationMenuItem", "NavigationMenuTrigger"),
        "Select": ("SelectValue",),
        "Table": ("TableHead", "TableCell"),
    }),
)


@dataclass(frozen=True)
class PatternLibrary:
    """Bundle of the read-only tables injected into classifier and builders."""
    component_rules: Tuple[ComponentRule, ...] = COMPONENT_RULES
    screen_type_rules: Tuple[Tuple[str, Tuple[Pattern[str], ...]], ...] = SCREEN_TYPE_RULES
    screen_templates: Mapping[str, ScreenTemplate] = field(default_factory=lambda: SCREEN_TEMPLATES)
    app_flows: Mapping[str, AppFlow] = field(default_factory=lambda: APP_FLOWS)
    app_flow_keywords: Tuple[Tuple[str, Tuple[str, ...]], ...] = APP_FLOW_KEYWORDS
    form_templates: Mapping[str, FormTemplate] = field(default_factory=lambda: FORM_TEMPLATES)
    form_type_keywords: Tuple[Tuple[str, Tuple[str, ...]], ...] = FORM_TYPE_KEYWORDS
    composition: CompositionRules = field(default=COMPOSITION_RULES)


DEFAULT_LIBRARY = PatternLibrary()


# ===========================
# DETECTION HELPERS
# ===========================

def detect_screen_type(prompt: str, library: PatternLibrary = DEFAULT_LIBRARY) -> Optional[str]:
    """Return the first screen type whose rules match the prompt."""
    lowered = prompt.lower()
    for screen_type, patterns in library.screen_type_rules:
        if any(p.search(lowered) for p in patterns):
            return screen_type
    return None


def detect_app_flow(prompt: str, library: PatternLibrary = DEFAULT_LIBRARY) -> Optional[str]:
    lowered = prompt.lower()
    for flow, keywords in library.app_flow_keywords:
        if any(k in lowered for k in keywords):
            return flow
    return None


def detect_form_type(prompt: str, library: PatternLibrary = DEFAULT_LIBRARY) -> Optional[str]:
    """Return the first form template type whose keywords appear in the prompt."""
    lowered = prompt.lower()
    for form_type, keywords in library.form_type_keywords:
        if any(k in lowered for k in keywords):
            return form_type
    return None


def get_components_for_screen(screen_type: str, library: PatternLibrary = DEFAULT_LIBRARY) -> List[str]:
    template = library.screen_templates.get(screen_type)
    if template is None:
        return []
    return [c.component for c in template.components]


def suggest_components(prompt: str, library: PatternLibrary = DEFAULT_LIBRARY) -> List[Dict[str, Any]]:
    """Score every component rule against the prompt.

    Returns ``[{"component", "confidence"}]`` sorted by confidence; ties keep
    rule-declaration order.
    """
    lowered = prompt.lower()
    suggestions = []
    for rule in library.component_rules:
        confidence = rule.score(lowered)
        if confidence > 0:
            suggestions.append({"component": rule.component, "confidence": confidence})
    return sorted(suggestions, key=lambda s: s["confidence"], reverse=True)
