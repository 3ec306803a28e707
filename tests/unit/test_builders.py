"""DSL builder tests.

Run from project root:
    python -m pytest tests/unit/test_builders.py -v
"""

import pytest

from uigen.constants import DecisionPattern, DocumentKind, GenerationMethod, Route, Subtype
from uigen.services.generation.builders import (
    DocumentBuilder,
    dashboard_widgets,
    extract_plans,
    extract_ranks,
    pricing_tiers,
)
from uigen.services.generation.classifier import Classification, RequestClassifier
from uigen.services.service_base import ParseError


def build(prompt):
    classification = RequestClassifier().classify(prompt)
    return DocumentBuilder().build_outcome(prompt, classification)


# =============================================================================
# Forms
# =============================================================================

@pytest.mark.unit
class TestFormBuilder:
    """Extracted fields, then template, then placeholders."""

    def test_extracted_fields_with_template_metadata(self) -> None:
        outcome = build("registration form with fields: email, password")
        document = outcome.document
        assert outcome.method == GenerationMethod.UI_DSL
        assert outcome.fallback is False
        assert document.kind == DocumentKind.FORM
        assert document.title == "Create Your Account"
        assert document.submit_text == "Create Account"
        assert [f.name for f in document.fields] == ["email", "password"]

    def test_template_only(self) -> None:
        document = DocumentBuilder().build_form("login form")
        assert document.title == "Welcome Back"
        assert document.form_type == "login"
        assert [f.name for f in document.fields] == ["email", "password", "remember"]

    def test_template_fields_are_copies(self) -> None:
        first = DocumentBuilder().build_form("login form")
        first.fields[0].label = "Changed"
        second = DocumentBuilder().build_form("login form")
        assert second.fields[0].label == "Email Address"

    def test_placeholder_fields(self) -> None:
        document = DocumentBuilder().build_form("Build a form")
        assert document.title == "Form"
        assert [f.name for f in document.fields] == ["field_a", "field_b", "field_c"]
        assert document.fields[0].label == "Field A"

    def test_field_names_unique(self) -> None:
        document = DocumentBuilder().build_form("form with fields: name, name, email")
        names = [f.name for f in document.fields]
        assert len(names) == len(set(names))


# =============================================================================
# Decision blocks
# =============================================================================

@pytest.mark.unit
class TestDecisionBuilder:
    """Compare-3, recommendation, tradeoffs and review-confirm documents."""

    def test_compare3_defaults(self) -> None:
        outcome = build("pricing page with three plans")
        document = outcome.document
        assert outcome.method == GenerationMethod.UI_DSL_DECISION
        assert document.pattern == DecisionPattern.COMPARE_3.value
        assert document.title == "Choose Your Plan"
        assert [o['name'] for o in document.options] == ["Starter", "Pro", "Enterprise"]
        assert [o['price'] for o in document.options] == ["$9", "$29", "$99"]
        assert [o['popular'] for o in document.options] == [False, True, False]
        assert [o['id'] for o in document.options] == ["option-1", "option-2", "option-3"]
        assert document.options[2]['ctaText'] == "Contact Sales"

    def test_compare3_extracted_plans(self) -> None:
        prompt = "compare 3 plans: Basic ($5/month), Plus ($15/month), Max ($45/month)"
        document = build(prompt).document
        assert [o['name'] for o in document.options] == ["Basic", "Plus", "Max"]
        assert [o['price'] for o in document.options] == ["$5", "$15", "$45"]
        assert document.options[0]['actionContractId'] == "action-option-1"

    def test_extract_plans_skips_stopwords(self) -> None:
        plans = extract_plans("Starter plan $9 per month, Team: $19/month")
        assert [p['name'] for p in plans] == ["Team", "Starter"]
        assert plans[1] == {'name': 'Starter', 'price': '$9', 'period': 'month'}

    def test_recommendation_defaults(self) -> None:
        document = build("show a ranked list of tools").document
        assert document.pattern == DecisionPattern.RECOMMENDATION.value
        assert [o['name'] for o in document.options] == ["Pro Plan", "Enterprise Plan", "Starter Plan"]
        assert [o['rank'] for o in document.options] == [1, 2, 3]

    def test_extract_numbered_ranks(self) -> None:
        ranks = extract_ranks("recommended tools: 1. Alpha - 90%, 2. Beta - 80%")
        assert ranks == [
            {'rank': 1, 'name': 'Alpha', 'score': 90},
            {'rank': 2, 'name': 'Beta', 'score': 80},
        ]

    def test_tradeoffs(self) -> None:
        document = build("tradeoff table for cost vs risk").document
        assert len(document.options) == 3
        assert [d['name'] for d in document.options[0]['dimensions']] == ["Cost", "Risk", "Time"]

    def test_review_confirm_defaults(self) -> None:
        document = build("review and confirm checkout").document
        assert document.pattern == DecisionPattern.REVIEW_CONFIRM.value
        assert [i['label'] for i in document.items] == ["Plan", "Price", "Billing"]
        assert document.confirm_text == "Confirm Order"
        assert document.cancel_text == "Cancel"
        assert document.action_contract_id == "action-confirm"
        assert document.options == []

    def test_unknown_pattern_raises(self) -> None:
        with pytest.raises(ParseError):
            DocumentBuilder().build_decision("anything", "nope")


# =============================================================================
# Landing pages
# =============================================================================

@pytest.mark.unit
class TestLandingBuilder:
    """Page regions and module selection."""

    def test_bare_landing_page_gets_all_modules(self) -> None:
        outcome = build("landing page")
        document = outcome.document
        assert outcome.method == GenerationMethod.UI_DSL_SCREEN
        assert document.title == "Landing Page"
        assert [m.type for m in document.regions['content']] == ["hero", "pricing", "faq"]
        assert [m.type for m in document.regions['header']] == ["navigation"]
        assert [m.type for m in document.regions['footer']] == ["footer"]
        tiers = document.regions['content'][1].props['tiers']
        assert [t['name'] for t in tiers] == ["Basic", "Pro", "Enterprise"]
        assert [t['price'] for t in tiers] == ["$10", "$20", "$30"]

    def test_only_requested_modules(self) -> None:
        document = build("landing page with hero and faq").document
        assert [m.type for m in document.regions['content']] == ["hero", "faq"]

    def test_tier_count(self) -> None:
        tiers = pricing_tiers("5 tier pricing")
        assert [t['name'] for t in tiers] == ["Basic", "Pro", "Enterprise", "Tier 4", "Tier 5"]
        assert len(tiers[4]['features']) == 7

    def test_tier_count_is_clamped(self) -> None:
        assert len(pricing_tiers("40 tiers")) == 6
        assert len(pricing_tiers("0 plans")) == 1


# =============================================================================
# Dashboards
# =============================================================================

@pytest.mark.unit
class TestDashboardBuilder:
    """Metric, table and chart widgets."""

    def test_crm_dashboard(self) -> None:
        outcome = build("CRM dashboard with revenue and churn metrics, customer table and line chart")
        document = outcome.document
        assert outcome.method == GenerationMethod.UI_DSL_DASHBOARD
        assert document.title == "Dashboard"
        assert [(w.type, w.title) for w in document.widgets] == [
            ("metric", "Revenue"),
            ("metric", "Users"),
            ("metric", "Churn"),
            ("table", "Customers"),
            ("chart", "Sales Trend"),
        ]
        assert document.widgets[-1].data['type'] == "line"
        assert len(document.widgets[3].data['rows']) == 3

    def test_default_widgets(self) -> None:
        widgets = dashboard_widgets("dashboard")
        assert [w.title for w in widgets] == ["Revenue", "Users", "Sales Chart"]

    def test_two_charts(self) -> None:
        widgets = dashboard_widgets("dashboard with a chart and a graph")
        assert [w.title for w in widgets if w.type == "chart"] == ["Sales Trend", "Revenue by Category"]


# =============================================================================
# App flows
# =============================================================================

@pytest.mark.unit
class TestAppBuilder:
    """Flow instantiation and fallback."""

    def test_ecommerce_flow(self) -> None:
        outcome = build("e-commerce app for selling shoes")
        document = outcome.document
        assert outcome.method == GenerationMethod.UI_DSL_APP
        assert document.screen_ids() == ["screen-1", "screen-2", "screen-3", "screen-4"]
        assert document.screens[3].name == "Checkout"
        assert [e.trigger for e in document.navigation] == ["Browse Products", "View Product", "Add to Cart"]
        assert (document.navigation[0].from_screen, document.navigation[0].to_screen) == ("screen-1", "screen-2")

    def test_edges_reference_known_screens(self) -> None:
        document = build("internal admin tool").document
        ids = set(document.screen_ids())
        for edge in document.navigation:
            assert edge.from_screen in ids
            assert edge.to_screen in ids

    def test_unknown_flow_falls_back_to_form(self) -> None:
        classification = Classification(
            route=Route.RULE_BASED,
            subtype=Subtype.APP_FLOW,
            confidence=0.8,
            flow="unknown",
        )
        outcome = DocumentBuilder().build_outcome("contact form", classification)
        assert outcome.method == GenerationMethod.UI_DSL_FALLBACK
        assert outcome.fallback is True
        assert outcome.document.kind == DocumentKind.FORM
        assert outcome.document.title == "Get in Touch"
