"""Tests for the request classifier and pattern library helpers.

Run from project root:
    python -m pytest tests/unit/test_classifier.py -v
"""

import importlib

import pytest

from uigen.constants import DecisionPattern, Route, Subtype
from uigen.services.generation.classifier import (
    RequestClassifier,
    detect_decision_pattern,
    is_landing_page,
    split_existing_code,
)
from uigen.services.generation.patterns import (
    DEFAULT_LIBRARY,
    PatternLibrary,
    TemplateComponent,
    detect_app_flow,
    detect_form_type,
    detect_screen_type,
    get_components_for_screen,
    suggest_components,
)


# =============================================================================
# Rule-based precedence
# =============================================================================

@pytest.mark.unit
class TestRuleBasedPrecedence:
    """Landing > decision > dashboard > app flow > form."""

    def test_landing_page_phrase(self) -> None:
        result = RequestClassifier().classify("Create a landing page for my startup")
        assert result.subtype == Subtype.LANDING
        assert result.route == Route.RULE_BASED

    def test_hero_pricing_faq_is_landing(self) -> None:
        assert is_landing_page("page with hero, pricing and faq sections") is True
        assert is_landing_page("page with hero and faq") is False

    def test_landing_wins_over_pricing_decision(self) -> None:
        result = RequestClassifier().classify("landing page with pricing for 3 plans")
        assert result.subtype == Subtype.LANDING

    @pytest.mark.parametrize("prompt, pattern", [
        ("pricing page with three plans", DecisionPattern.COMPARE_3),
        ("compare 3 options side by side", DecisionPattern.COMPARE_3),
        ("show a ranked list of tools", DecisionPattern.RECOMMENDATION),
        ("tradeoff table for cost vs risk", DecisionPattern.TRADEOFFS),
        ("review and confirm the order", DecisionPattern.REVIEW_CONFIRM),
    ])
    def test_decision_patterns(self, prompt, pattern) -> None:
        assert detect_decision_pattern(prompt) == pattern
        result = RequestClassifier().classify(prompt)
        assert result.subtype == Subtype.DECISION
        assert result.decision_pattern == pattern.value

    def test_dashboard(self) -> None:
        result = RequestClassifier().classify("sales dashboard with revenue chart")
        assert result.subtype == Subtype.DASHBOARD

    @pytest.mark.parametrize("prompt, flow", [
        ("e-commerce app for selling shoes", "e-commerce"),
        ("internal admin tool", "admin-panel"),
        ("user onboarding wizard", "onboarding"),
    ])
    def test_app_flows(self, prompt, flow) -> None:
        result = RequestClassifier().classify(prompt)
        assert result.subtype == Subtype.APP_FLOW
        assert result.flow == flow

    def test_nothing_matched_is_form(self) -> None:
        result = RequestClassifier().classify("something nice")
        assert result.subtype == Subtype.FORM
        assert result.route == Route.RULE_BASED


# =============================================================================
# Route selection
# =============================================================================

@pytest.mark.unit
class TestRouteSelection:
    """Free-form only when the adapter is configured."""

    def test_simple_form_stays_rule_based(self) -> None:
        classifier = RequestClassifier(free_form_enabled=True)
        result = classifier.classify("contact form with fields: name, email")
        assert result.route == Route.RULE_BASED
        assert result.is_free_form is False

    def test_complex_prompt_goes_free_form(self) -> None:
        classifier = RequestClassifier(free_form_enabled=True)
        result = classifier.classify("Build a kanban board with drag and drop columns")
        assert result.subtype == Subtype.FORM
        assert result.route == Route.FREE_FORM

    def test_complex_prompt_without_adapter(self) -> None:
        result = RequestClassifier().classify("Build a kanban board with drag and drop columns")
        assert result.route == Route.RULE_BASED

    def test_long_form_prompt_is_not_simple(self) -> None:
        prompt = "form " + " ".join(["word"] * 30)
        classifier = RequestClassifier(free_form_enabled=True)
        assert classifier.is_simple(prompt) is False
        assert classifier.classify(prompt).route == Route.FREE_FORM

    def test_word_limit_is_configurable(self) -> None:
        classifier = RequestClassifier(free_form_enabled=True, simple_word_limit=3)
        assert classifier.is_simple("a simple signup form") is False

    def test_existing_code_prefers_free_form(self) -> None:
        classifier = RequestClassifier(free_form_enabled=True)
        result = classifier.classify("make it blue", has_existing_code=True)
        assert result.route == Route.FREE_FORM
        assert result.has_existing_code is True

    def test_decision_prompt_stays_rule_based_with_adapter(self) -> None:
        classifier = RequestClassifier(free_form_enabled=True)
        result = classifier.classify("pricing page with three plans")
        assert result.route == Route.RULE_BASED

    def test_classification_is_deterministic(self) -> None:
        classifier = RequestClassifier(free_form_enabled=True)
        prompt = "dashboard with users table and revenue metrics"
        assert classifier.classify(prompt).to_dict() == classifier.classify(prompt).to_dict()

    def test_confidence_is_capped(self) -> None:
        result = RequestClassifier().classify("landing page with navigation menu and nav")
        assert 0.9 <= result.confidence <= 1.0

    def test_to_dict_uses_plain_values(self) -> None:
        data = RequestClassifier().classify("sales dashboard").to_dict()
        assert data['route'] == "rule-based"
        assert data['subtype'] == "dashboard"


# =============================================================================
# Existing code
# =============================================================================

@pytest.mark.unit
class TestSplitExistingCode:
    """Embedded fenced source is separated from the request."""

    def test_split_with_modify_prefix(self) -> None:
        prompt = (
            "Modify this component: make the button blue\n"
            "```tsx\nexport default function A() {}\n```"
        )
        clean, existing = split_existing_code(prompt)
        assert clean == "make the button blue"
        assert existing == "export default function A() {}"

    def test_split_with_current_code_prefix(self) -> None:
        prompt = "add a footer. Current code below:\n```\nconst x = 1;\n```"
        clean, existing = split_existing_code(prompt)
        assert clean == "add a footer."
        assert existing == "const x = 1;"

    def test_no_fence(self) -> None:
        assert split_existing_code("plain prompt") == ("plain prompt", None)


# =============================================================================
# Pattern helpers
# =============================================================================

@pytest.mark.unit
class TestPatternHelpers:
    """Screen type, flow, form type detection and suggestions."""

    def test_detect_screen_type_order(self) -> None:
        assert detect_screen_type("stats overview") == "dashboard"
        assert detect_screen_type("product list") == "list"
        assert detect_screen_type("nothing here") is None

    def test_detect_app_flow(self) -> None:
        assert detect_app_flow("sklep internetowy") == "e-commerce"
        assert detect_app_flow("hello") is None

    def test_detect_form_type(self) -> None:
        assert detect_form_type("a sign up page") == "registration"
        assert detect_form_type("forgot password screen") == "password-reset"
        assert detect_form_type("zaloguj się") == "login"

    def test_components_for_screen(self) -> None:
        assert get_components_for_screen("form") == ["Card", "Input", "Button"]
        assert get_components_for_screen("unknown") == []

    def test_suggestions_sorted_by_score(self) -> None:
        suggestions = suggest_components("table with dropdown select")
        assert [s['component'] for s in suggestions] == ["Select", "Table"]
        assert suggestions[0]['confidence'] == pytest.approx(6.0)
        assert suggestions[1]['confidence'] == pytest.approx(2.5)


@pytest.mark.unit
class TestPatternLibraryDefaults:
    """Read-only tables load as dataclass defaults."""

    def test_package_imports(self) -> None:
        module = importlib.import_module("uigen.services.generation.patterns")
        assert module.DEFAULT_LIBRARY.screen_templates is module.SCREEN_TEMPLATES
        assert importlib.import_module("uigen").__version__

    def test_fresh_library_shares_tables(self) -> None:
        library = PatternLibrary()
        assert library.app_flows is DEFAULT_LIBRARY.app_flows
        assert library.form_templates is DEFAULT_LIBRARY.form_templates
        assert "dashboard" in library.screen_templates

    def test_template_component_props_default_empty(self) -> None:
        component = TemplateComponent("Button")
        assert dict(component.props) == {}
        with pytest.raises(TypeError):
            component.props["variant"] = "outline"
