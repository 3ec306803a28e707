"""DSL Builders
============

Turn a classified prompt into a ``Document``. Specialized builders exist
for decision blocks, landing pages, dashboards and multi-screen app flows;
everything else (and every specialized builder that raises ``ParseError``)
ends up in the form builder, which always succeeds.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from uigen.constants import DecisionPattern, GenerationMethod, Position, Subtype
from uigen.services.service_base import ParseError, ValidationError
from .classifier import Classification
from .documents import (
    AppDocument,
    DashboardDocument,
    DecisionDocument,
    Document,
    FormDocument,
    FormField,
    NavigationEdge,
    PageDocument,
    PageModule,
    Screen,
    ScreenComponent,
    Widget,
)
from .field_extraction import extract_fields, extract_form_title
from .patterns import DEFAULT_LIBRARY, PatternLibrary, ScreenTemplate, detect_form_type

logger = logging.getLogger(__name__)

DEFAULT_FORM_DESCRIPTION = "Please fill out all required fields."
DEFAULT_SUBMIT_TEXT = "Submit"
DEFAULT_SUCCESS_MESSAGE = "Form submitted successfully!"

DECISION_TITLES = {
    DecisionPattern.COMPARE_3.value: "Choose Your Plan",
    DecisionPattern.RECOMMENDATION.value: "Recommended for You",
    DecisionPattern.TRADEOFFS.value: "Compare Tradeoffs",
    DecisionPattern.REVIEW_CONFIRM.value: "Review & Confirm",
}

_METHOD_BY_SUBTYPE = {
    Subtype.FORM: GenerationMethod.UI_DSL,
    Subtype.DECISION: GenerationMethod.UI_DSL_DECISION,
    Subtype.LANDING: GenerationMethod.UI_DSL_SCREEN,
    Subtype.DASHBOARD: GenerationMethod.UI_DSL_DASHBOARD,
    Subtype.APP_FLOW: GenerationMethod.UI_DSL_APP,
}

# ---------------------------------------------------------------------------
# Title extraction
# ---------------------------------------------------------------------------

_QUOTED_TITLE_RE = re.compile(r"(?:title|tytuł):\s*[\"']([^\"']+)[\"']", re.IGNORECASE)
_CAPITALIZED_RE = re.compile(r"\b([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*)\b")
_DECISION_TITLE_RE = re.compile(
    r"(?:create|build|make)\s+(?:a\s+)?(?:pricing\s+)?(?:page|screen|component)\s+"
    r"(?:with|for|called)\s+([^,\.]+)",
    re.IGNORECASE,
)


def extract_title(prompt: str) -> Optional[str]:
    """``title: "..."`` wins, otherwise the first Capitalized phrase."""
    quoted = _QUOTED_TITLE_RE.search(prompt)
    if quoted:
        return quoted.group(1)
    capitalized = _CAPITALIZED_RE.search(prompt)
    if capitalized:
        return capitalized.group(1)
    return None


# ---------------------------------------------------------------------------
# Decision extraction
# ---------------------------------------------------------------------------

_PLAN_PATTERNS = (
    # "Starter ($9/month)"
    re.compile(r"(\w+)\s*\(?\$(\d+)/?(\w+)?\)?", re.IGNORECASE),
    # "Starter: $9/month"
    re.compile(r"(\w+):\s*\$(\d+)/?(\w+)?", re.IGNORECASE),
    # "Starter plan $9 per month"
    re.compile(r"(\w+)\s+(?:plan|option|tier)?\s*\$(\d+)\s*(?:per|/)?\s*(\w+)?", re.IGNORECASE),
)
_PLAN_STOPWORDS = frozenset({"plan", "option", "tier", "per", "for", "at", "only"})

_PLAN_FEATURES = (
    ("10GB", "Email"),
    ("100GB", "Priority"),
    ("1TB", "24/7"),
)

_RANK_FIRST_RE = re.compile(
    r"(?:rank|#)\s*(\d+)[:\.]\s*([A-Za-z]\w*(?:\s+[A-Za-z]\w*)*?)\s*(?:\((\d+)%?\s*match\))?(?=[,;\.]|\s*$|\s*\()",
    re.IGNORECASE,
)
_NAME_FIRST_RE = re.compile(r"([A-Za-z]\w*(?:\s+[A-Za-z]\w*)*?)\s*\([^)]*?rank\s*(\d+)[^)]*?(\d+)%", re.IGNORECASE)
_NUMBERED_RE = re.compile(r"(\d+)\.\s*([A-Za-z]\w*(?:\s+[A-Za-z]\w*)*?)\s*[-–]\s*(\d+)%?", re.IGNORECASE)

_REVIEW_ITEM_RE = re.compile(
    r"(?:^|[,;:]\s*|\bwith\s+|\band\s+)([A-Za-z]\w*(?:\s+[A-Za-z]\w*)?):\s*([^,\.]+)",
    re.IGNORECASE,
)
_CONFIRM_TEXT_RE = re.compile(
    r"(?:confirm|submit|order|checkout)\s+(?:text|button)\s*:?\s*[\"']?([^\"',\.]+)[\"']?"
    r"|(?:confirm|submit|order|checkout)\s*:?\s*[\"']([^\"']+)[\"']",
    re.IGNORECASE,
)
_CANCEL_TEXT_RE = re.compile(
    r"(?:cancel|back)\s+(?:text|button)\s*:?\s*[\"']?([^\"',\.]+)[\"']?"
    r"|(?:cancel|back)\s*:?\s*[\"']([^\"']+)[\"']",
    re.IGNORECASE,
)


def _first_group(match: Optional[re.Match]) -> Optional[str]:
    if not match:
        return None
    for group in match.groups():
        if group:
            return group.strip()
    return None


def extract_plans(prompt: str) -> List[Dict[str, str]]:
    """Collect ``{name, price, period}`` plan mentions, first mention wins."""
    plans: List[Dict[str, str]] = []
    seen = set()
    for pattern in _PLAN_PATTERNS:
        for match in pattern.finditer(prompt):
            name = match.group(1)
            if name.lower() in _PLAN_STOPWORDS or name.lower() in seen:
                continue
            seen.add(name.lower())
            plans.append({
                'name': name,
                'price': f"${match.group(2)}",
                'period': match.group(3) or 'month',
            })
    return plans


def compare3_options(prompt: str) -> List[Dict[str, Any]]:
    plans = extract_plans(prompt)
    if len(plans) < 2:
        plans = [
            {'name': 'Starter', 'price': '$9', 'period': 'month'},
            {'name': 'Pro', 'price': '$29', 'period': 'month'},
            {'name': 'Enterprise', 'price': '$99', 'period': 'month'},
        ]
    options = []
    for index, plan in enumerate(plans[:3]):
        storage, support = _PLAN_FEATURES[index]
        options.append({
            'id': f"option-{index + 1}",
            'name': plan['name'],
            'price': plan['price'],
            'pricePeriod': plan['period'],
            'features': [
                {'key': 'storage', 'label': 'Storage', 'value': storage},
                {'key': 'support', 'label': 'Support', 'value': support},
            ],
            'ctaText': 'Contact Sales' if index == 2 else 'Get Started',
            'popular': index == 1,
            'actionContractId': f"action-option-{index + 1}",
        })
    return options


def extract_ranks(prompt: str) -> List[Dict[str, Any]]:
    ranks: List[Dict[str, Any]] = []
    seen = set()

    def _add(rank: str, name: str, score: Optional[str]) -> None:
        value = int(rank)
        if value and value not in seen and name:
            seen.add(value)
            ranks.append({'rank': value, 'name': name.strip(), 'score': int(score) if score else None})

    for m in _RANK_FIRST_RE.finditer(prompt):
        _add(m.group(1), m.group(2), m.group(3))
    for m in _NAME_FIRST_RE.finditer(prompt):
        _add(m.group(2), m.group(1), m.group(3))
    for m in _NUMBERED_RE.finditer(prompt):
        _add(m.group(1), m.group(2), m.group(3))
    return sorted(ranks, key=lambda r: r['rank'])


def recommendation_options(prompt: str) -> List[Dict[str, Any]]:
    ranks = extract_ranks(prompt)
    if len(ranks) >= 2:
        return [
            {
                'id': f"option-{i}",
                'name': r['name'],
                'rank': r['rank'],
                'reasoning': 'Best balance of features and price',
                'score': r['score'],
                'ctaText': 'Get Started',
                'actionContractId': f"action-option-{i}",
            }
            for i, r in enumerate(ranks, start=1)
        ]
    defaults = (
        ('Pro Plan', 95, 'Best balance of features and price', 'Get Started'),
        ('Enterprise Plan', 85, 'Great for teams', 'Contact Sales'),
        ('Starter Plan', 70, 'Good starting point', 'Get Started'),
    )
    return [
        {
            'id': f"option-{i}",
            'name': name,
            'rank': i,
            'reasoning': reasoning,
            'score': score,
            'ctaText': cta,
            'actionContractId': f"action-option-{i}",
        }
        for i, (name, score, reasoning, cta) in enumerate(defaults, start=1)
    ]


def tradeoff_options() -> List[Dict[str, Any]]:
    rows = (
        ('Quick Solution', 'Fast implementation, higher cost',
         ((80, 'High'), (30, 'Low'), (20, 'Fast'))),
        ('Balanced Approach', 'Moderate cost, risk, and time',
         ((50, 'Medium'), (50, 'Medium'), (50, 'Medium'))),
        ('Cost-Effective', 'Lower cost, longer time',
         ((20, 'Low'), (60, 'Medium-High'), (80, 'Slow'))),
    )
    options = []
    for i, (name, description, dims) in enumerate(rows, start=1):
        options.append({
            'id': f"option-{i}",
            'name': name,
            'description': description,
            'dimensions': [
                {'name': dim, 'value': value, 'label': label}
                for dim, (value, label) in zip(('Cost', 'Risk', 'Time'), dims)
            ],
            'ctaText': 'Choose This',
            'actionContractId': f"action-option-{i}",
        })
    return options


def review_items(prompt: str) -> List[Dict[str, str]]:
    items = []
    for m in _REVIEW_ITEM_RE.finditer(prompt):
        label, value = m.group(1).strip(), m.group(2).strip()
        if label and value:
            items.append({'key': re.sub(r"\s+", "-", label.lower()), 'label': label, 'value': value})
    if not items:
        items = [
            {'key': 'plan', 'label': 'Plan', 'value': 'Pro Plan'},
            {'key': 'price', 'label': 'Price', 'value': '$29/month'},
            {'key': 'billing', 'label': 'Billing', 'value': 'Monthly'},
        ]
    return items


# ---------------------------------------------------------------------------
# Dashboard widgets
# ---------------------------------------------------------------------------

_HAS_METRICS_RE = re.compile(
    r"metric|metryk|kpi|stat|revenue|przychód|users|użytkownik|growth|wzrost|churn|utrata|"
    r"conversion|aktywn|total|suma|count|liczba",
    re.IGNORECASE,
)
_HAS_TABLE_RE = re.compile(
    r"table|tabela|data table|list|lista|rows|wiersz|columns|kolumn|klient|customer|client",
    re.IGNORECASE,
)
_HAS_CHARTS_RE = re.compile(
    r"chart|wykres|graph|graf|visualization|wizualizacja|trend|analytics|analityk",
    re.IGNORECASE,
)
_CHART_WORD_RE = re.compile(r"chart|wykres|graph", re.IGNORECASE)
_LINE_CHART_RE = re.compile(r"line|linia|trend|time|czas", re.IGNORECASE)
_BAR_CHART_RE = re.compile(r"bar|słupkowy|column", re.IGNORECASE)
_CRM_RE = re.compile(r"crm|saas|business|enterprise", re.IGNORECASE)

_METRICS = {
    'Revenue': {'value': '$0', 'label': 'Total Revenue', 'trend': '+12.5%', 'trendValue': 12.5, 'trendDirection': 'up'},
    'Users': {'value': '0', 'label': 'Total Users', 'trend': '+5.2%', 'trendValue': 5.2, 'trendDirection': 'up'},
    'Growth': {'value': '0%', 'label': 'Growth Rate', 'trend': '+8.1%', 'trendValue': 8.1, 'trendDirection': 'up'},
    'Churn': {'value': '0%', 'label': 'Churn Rate', 'trend': '-2.3%', 'trendValue': -2.3, 'trendDirection': 'down'},
}
_METRIC_TRIGGERS = (
    ('Revenue', re.compile(r"revenue|przychód|income", re.IGNORECASE)),
    ('Users', re.compile(r"user|klient|customer|client", re.IGNORECASE)),
    ('Growth', re.compile(r"growth|wzrost", re.IGNORECASE)),
    ('Churn', re.compile(r"churn|utrata", re.IGNORECASE)),
)


def _metric(title: str) -> Widget:
    return Widget('metric', title, dict(_METRICS[title]))


def _chart(title: str, kind: str) -> Widget:
    return Widget('chart', title, {'type': kind, 'showDateRange': True, 'showViewToggle': True})


def dashboard_widgets(prompt: str) -> List[Widget]:
    widgets: List[Widget] = []

    if _HAS_METRICS_RE.search(prompt):
        widgets.extend(_metric(title) for title, trigger in _METRIC_TRIGGERS if trigger.search(prompt))
        if not widgets:
            widgets.extend(_metric(t) for t in ('Revenue', 'Users', 'Growth', 'Churn'))
        # CRM/SaaS dashboards get at least a few KPI cards
        if _CRM_RE.search(prompt) and len(widgets) < 2:
            present = {w.title for w in widgets}
            widgets.extend(_metric(t) for t in ('Revenue', 'Users', 'Growth') if t not in present)

    if _HAS_TABLE_RE.search(prompt):
        lowered = prompt.lower()
        if re.search(r"klient|customer|client", lowered):
            title = 'Customers'
        elif 'user' in lowered:
            title = 'Users'
        elif re.search(r"order|zamówienie", lowered):
            title = 'Orders'
        else:
            title = 'Data Table'
        widgets.append(Widget('table', title, {
            'columns': [
                {'key': 'id', 'label': 'ID', 'kind': 'text', 'sortable': True},
                {'key': 'name', 'label': 'Name', 'kind': 'text', 'sortable': True, 'filterable': True},
                {'key': 'status', 'label': 'Status', 'kind': 'badge', 'filterable': True},
                {'key': 'date', 'label': 'Date', 'kind': 'date', 'sortable': True},
            ],
            'rows': [
                {'id': '1', 'name': 'John Doe', 'status': 'Active', 'date': '2023-01-15'},
                {'id': '2', 'name': 'Jane Smith', 'status': 'Inactive', 'date': '2023-02-20'},
                {'id': '3', 'name': 'Bob Johnson', 'status': 'Active', 'date': '2023-03-10'},
            ],
        }))

    if _HAS_CHARTS_RE.search(prompt):
        chart_count = len(_CHART_WORD_RE.findall(prompt))
        has_line = bool(_LINE_CHART_RE.search(prompt))
        has_bar = bool(_BAR_CHART_RE.search(prompt))
        if has_line or chart_count > 1:
            widgets.append(_chart('Sales Trend', 'line'))
        if has_bar or chart_count > 1:
            widgets.append(_chart('Revenue by Category', 'bar'))
        if not has_line and not has_bar and chart_count <= 1:
            widgets.append(_chart('Analytics Chart', 'line'))

    if not widgets:
        widgets = [_metric('Revenue'), _metric('Users'), _chart('Sales Chart', 'line')]
    return widgets


# ---------------------------------------------------------------------------
# Landing page modules
# ---------------------------------------------------------------------------

_TIER_COUNT_RE = re.compile(r"(\d+)\s*(?:tier|plan|option)", re.IGNORECASE)
_TIER_NAMES = ('Basic', 'Pro', 'Enterprise')

FAQ_QUESTIONS = (
    ('What is this service?', 'This is a comprehensive solution for your needs.'),
    ('How do I get started?', 'Simply sign up and follow the onboarding process.'),
    ('What are the pricing options?', 'We offer flexible pricing plans to suit your needs.'),
)


def pricing_tiers(prompt: str) -> List[Dict[str, Any]]:
    match = _TIER_COUNT_RE.search(prompt)
    count = int(match.group(1)) if match else 3
    count = max(1, min(count, 6))
    return [
        {
            'name': _TIER_NAMES[i] if i < len(_TIER_NAMES) else f"Tier {i + 1}",
            'price': f"${(i + 1) * 10}",
            'features': [{'name': f"Feature {j + 1}", 'included': True} for j in range(3 + i)],
            'ctaText': 'Get Started',
            'popular': i == 1,
        }
        for i in range(count)
    ]


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------

@dataclass
class BuildOutcome:
    document: Document
    method: GenerationMethod
    fallback: bool = False


class DocumentBuilder:
    """Builds Documents from prompts using the injected pattern library."""

    def __init__(self, library: PatternLibrary = DEFAULT_LIBRARY):
        self.library = library

    def build(self, prompt: str, classification: Classification) -> Document:
        return self.build_outcome(prompt, classification).document

    def build_outcome(self, prompt: str, classification: Classification) -> BuildOutcome:
        """Build the document and report which builder produced it."""
        subtype = classification.subtype
        try:
            if subtype == Subtype.DECISION:
                document: Document = self.build_decision(prompt, classification.decision_pattern)
            elif subtype == Subtype.LANDING:
                document = self.build_landing(prompt)
            elif subtype == Subtype.DASHBOARD:
                document = self.build_dashboard(prompt)
            elif subtype == Subtype.APP_FLOW:
                document = self.build_app(classification.flow)
            else:
                return BuildOutcome(self.build_form(prompt), GenerationMethod.UI_DSL)
        except ParseError as e:
            logger.warning(f"{subtype} builder failed ({e}); falling back to form builder")
            return BuildOutcome(self.build_form(prompt), GenerationMethod.UI_DSL_FALLBACK, fallback=True)
        return BuildOutcome(document, _METHOD_BY_SUBTYPE[subtype])

    # -- forms --------------------------------------------------------------

    def build_form(self, prompt: str) -> FormDocument:
        """Extracted fields, then a detected template, then placeholder fields."""
        form_type = detect_form_type(prompt, self.library)
        template = self.library.form_templates.get(form_type) if form_type else None

        fields = extract_fields(prompt)
        if fields:
            return FormDocument(
                title=extract_form_title(prompt) or (template.title if template else "Form"),
                description=template.description if template else DEFAULT_FORM_DESCRIPTION,
                fields=fields,
                submit_text=template.submit_text if template else DEFAULT_SUBMIT_TEXT,
                success_message=template.success_message if template else DEFAULT_SUCCESS_MESSAGE,
                form_type=form_type,
            )

        if template is not None:
            return FormDocument(
                title=template.title,
                description=template.description,
                fields=template.clone_fields(),
                submit_text=template.submit_text,
                success_message=template.success_message,
                form_type=form_type,
            )

        return FormDocument(
            title=extract_form_title(prompt) or "Form",
            description=DEFAULT_FORM_DESCRIPTION,
            fields=[
                FormField(name=f"field_{c}", type="text", label=f"Field {c.upper()}",
                          placeholder=f"Enter field {c.upper()}")
                for c in "abc"
            ],
        )

    # -- decision blocks ----------------------------------------------------

    def build_decision(self, prompt: str, pattern: Optional[str]) -> DecisionDocument:
        if pattern not in DECISION_TITLES:
            raise ParseError(f"Unknown decision pattern: {pattern!r}")
        title_match = _DECISION_TITLE_RE.search(prompt)
        document = DecisionDocument(
            pattern=pattern,
            title=title_match.group(1).strip() if title_match else DECISION_TITLES[pattern],
        )
        if pattern == DecisionPattern.COMPARE_3.value:
            document.options = compare3_options(prompt)
        elif pattern == DecisionPattern.RECOMMENDATION.value:
            document.options = recommendation_options(prompt)
        elif pattern == DecisionPattern.TRADEOFFS.value:
            document.options = tradeoff_options()
        else:
            document.items = review_items(prompt)
            document.confirm_text = _first_group(_CONFIRM_TEXT_RE.search(prompt)) or "Confirm Order"
            document.cancel_text = _first_group(_CANCEL_TEXT_RE.search(prompt)) or "Cancel"
            document.action_contract_id = "action-confirm"
        return document

    # -- landing page -------------------------------------------------------

    def build_landing(self, prompt: str) -> PageDocument:
        lowered = prompt.lower()
        wanted = {name for name in ('hero', 'pricing', 'faq') if name in lowered}
        if not wanted:
            wanted = {'hero', 'pricing', 'faq'}

        content: List[PageModule] = []
        if 'hero' in wanted:
            content.append(PageModule('hero', {
                'title': 'Welcome to Our Service',
                'description': 'Get started with our amazing product today',
            }))
        if 'pricing' in wanted:
            content.append(PageModule('pricing', {'title': 'Pricing', 'tiers': pricing_tiers(prompt)}))
        if 'faq' in wanted:
            content.append(PageModule('faq', {
                'title': 'Frequently Asked Questions',
                'questions': [{'q': q, 'a': a} for q, a in FAQ_QUESTIONS],
            }))

        return PageDocument(
            title=extract_title(prompt) or "Landing Page",
            regions={
                'header': [PageModule('navigation', {'title': 'Navigation'})],
                'sidebar': [],
                'content': content,
                'footer': [PageModule('footer', {'title': 'Footer'})],
                'main': [],
            },
        )

    # -- dashboard ----------------------------------------------------------

    def build_dashboard(self, prompt: str) -> DashboardDocument:
        return DashboardDocument(title=extract_title(prompt) or "Dashboard", widgets=dashboard_widgets(prompt))

    # -- app flows ----------------------------------------------------------

    def instantiate_screen(self, template: ScreenTemplate, index: int) -> Screen:
        return Screen(
            id=f"screen-{index}",
            name=template.name,
            type=template.type,
            components=[
                ScreenComponent(
                    component=c.component,
                    props=dict(c.props),
                    position=c.position or Position.BODY.value,
                    required=c.required,
                )
                for c in template.components
            ],
            layout=template.layout,
        )

    def build_app(self, flow_key: Optional[str]) -> AppDocument:
        flow = self.library.app_flows.get(flow_key) if flow_key else None
        if flow is None:
            raise ParseError(f"Unknown app flow: {flow_key!r}")

        ids: Dict[str, str] = {}
        screens = []
        for index, flow_screen in enumerate(flow.screens, start=1):
            screen = self.instantiate_screen(flow_screen.template, index)
            ids[flow_screen.key] = screen.id
            screens.append(screen)

        navigation = [
            NavigationEdge(ids.get(edge.from_key, edge.from_key), ids.get(edge.to_key, edge.to_key), edge.trigger)
            for edge in flow.navigation
        ]
        document = AppDocument(name=flow.name, screens=screens, navigation=navigation)
        try:
            return document.validate()
        except ValidationError as e:
            raise ParseError(str(e)) from e
