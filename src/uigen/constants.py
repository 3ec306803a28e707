"""
Constants and Enums for the UI Generator
========================================

Centralized enums shared by the classifier, builders, synthesizer and the
HTTP layer.
"""

from enum import Enum


class BaseEnum(str, Enum):
    """Base enum class with string values for consistent behavior."""

    def __str__(self):
        return self.value


# ===========================
# CLASSIFICATION ENUMS
# ===========================

class Route(BaseEnum):
    """Generation route chosen by the classifier."""
    RULE_BASED = "rule-based"
    FREE_FORM = "free-form"


class Subtype(BaseEnum):
    """Subtype of the rule-based route."""
    DECISION = "decision"
    LANDING = "landing"
    DASHBOARD = "dashboard"
    APP_FLOW = "app-flow"
    FORM = "form"


class DecisionPattern(BaseEnum):
    """Comparison/decision block patterns."""
    COMPARE_3 = "compare-3"
    RECOMMENDATION = "recommendation"
    TRADEOFFS = "tradeoffs"
    REVIEW_CONFIRM = "review-confirm"


# ===========================
# DOCUMENT ENUMS
# ===========================

class DocumentKind(BaseEnum):
    """Discriminator of the Document tagged union."""
    FORM = "form"
    PAGE = "page"
    DASHBOARD = "dashboard"
    DECISION = "decision"
    APP = "app"


class Position(BaseEnum):
    """Placement of a component inside a screen layout."""
    HEADER = "header"
    BODY = "body"
    FOOTER = "footer"
    SIDEBAR = "sidebar"


class Layout(BaseEnum):
    SINGLE_COLUMN = "single-column"
    TWO_COLUMN = "two-column"
    DASHBOARD = "dashboard"


# ===========================
# RESPONSE ENUMS
# ===========================

class GenerationMethod(BaseEnum):
    """Value of ``metadata.method`` in generation responses."""
    OPENAI = "openai"
    UI_DSL = "ui-dsl"
    UI_DSL_DECISION = "ui-dsl-decision"
    UI_DSL_SCREEN = "ui-dsl-screen"
    UI_DSL_DASHBOARD = "ui-dsl-dashboard"
    UI_DSL_APP = "ui-dsl-app"
    UI_DSL_FALLBACK = "ui-dsl-fallback"


# Toolkit module names targeted by synthesized imports
UI_MODULE = "@fragment_ui/ui"
BLOCKS_MODULE = "@fragment_ui/blocks"
