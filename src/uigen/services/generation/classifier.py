"""Request Classifier
==================

Decides how a prompt is turned into source: the rule-based route (one of
the builder subtypes) or the free-form route that delegates to the external
generation service.

Precedence:
1. landing page
2. decision patterns (compare-3, recommendation, tradeoffs, review-confirm)
3. dashboard
4. multi-screen app flows
5. forms, where the simple/complex heuristic picks the route

Classification never raises; the generic form is the defined outcome for
prompts that match nothing.
"""

from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from uigen.constants import DecisionPattern, Route, Subtype
from .field_extraction import FIELD_LIST_RE
from .patterns import (
    DEFAULT_LIBRARY,
    PatternLibrary,
    detect_app_flow,
    detect_form_type,
    detect_screen_type,
    suggest_components,
)

logger = logging.getLogger(__name__)

CODE_FENCE_RE = re.compile(r"```(?:typescript|tsx|ts)?\n([\s\S]*?)```")
_MODIFY_PREFIX_RE = re.compile(r"modify.*component.*:", re.IGNORECASE)
_CURRENT_CODE_RE = re.compile(r"current code.*:", re.IGNORECASE)
_DASHBOARD_RE = re.compile(r"dashboard", re.IGNORECASE)

# Base confidence per subtype; the strongest component suggestion adds to it
_BASE_CONFIDENCE = {
    Subtype.LANDING: 0.9,
    Subtype.DECISION: 0.9,
    Subtype.DASHBOARD: 0.8,
    Subtype.APP_FLOW: 0.8,
    Subtype.FORM: 0.5,
}


@dataclass
class Classification:
    """Outcome of classifying one prompt.

    Attributes:
        route: Rule-based or free-form
        subtype: Builder used on the rule-based route (and as fallback)
        confidence: 0..1 heuristic strength of the match
        flow: App flow key for app-flow prompts
        screen_type: Detected screen type, if any
        form_type: Detected form template type, if any
        decision_pattern: Decision block pattern for decision prompts
        has_existing_code: Prompt carried source to modify
        suggestions: Scored component suggestions
    """
    route: Route
    subtype: Subtype
    confidence: float
    flow: Optional[str] = None
    screen_type: Optional[str] = None
    form_type: Optional[str] = None
    decision_pattern: Optional[str] = None
    has_existing_code: bool = False
    suggestions: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def is_free_form(self) -> bool:
        return self.route == Route.FREE_FORM

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['route'] = self.route.value
        data['subtype'] = self.subtype.value
        return data


def split_existing_code(prompt: str) -> Tuple[str, Optional[str]]:
    """Split a prompt into the modification request and embedded source.

    The request is the text before the first fence with "modify ...
    component ...:" and "current code ...:" phrases removed.
    """
    match = CODE_FENCE_RE.search(prompt)
    if not match:
        return prompt, None
    existing = match.group(1).strip()
    clean = prompt[:prompt.index("```")].strip()
    clean = _MODIFY_PREFIX_RE.sub("", clean, count=1)
    clean = _CURRENT_CODE_RE.sub("", clean, count=1).strip()
    return clean, existing


def is_landing_page(prompt: str) -> bool:
    lowered = prompt.lower()
    return "landing page" in lowered or (
        "hero" in lowered and "pricing" in lowered and "faq" in lowered
    )


def detect_decision_pattern(prompt: str) -> Optional[DecisionPattern]:
    """Return the decision block pattern a prompt asks for, if any."""
    p = prompt.lower()
    if (
        ("pricing" in p and ("3" in p or "three" in p or "plan" in p))
        or ("compare" in p and ("3" in p or "three" in p or "options" in p))
        or "3 plans" in p or "three plans" in p
        or ("pricing page" in p and "plan" in p)
    ):
        return DecisionPattern.COMPARE_3
    if "recommendation" in p or "recommended" in p or "ranked" in p:
        return DecisionPattern.RECOMMENDATION
    if "tradeoff" in p or "cost vs risk" in p or "dimension" in p:
        return DecisionPattern.TRADEOFFS
    if "review" in p and ("confirm" in p or "checkout" in p):
        return DecisionPattern.REVIEW_CONFIRM
    return None


class RequestClassifier:
    """Rule-based prompt classifier.

    ``free_form_enabled`` tells the classifier whether the external service
    is configured; without it every prompt stays on the rule-based route.
    """

    def __init__(self, library: PatternLibrary = DEFAULT_LIBRARY, free_form_enabled: bool = False,
                 simple_word_limit: int = 25):
        self.library = library
        self.free_form_enabled = free_form_enabled
        self.simple_word_limit = simple_word_limit

    def is_simple(self, prompt: str, form_type: Optional[str] = None) -> bool:
        """Short prompts that clearly ask for a form stay rule-based."""
        if len(prompt.split()) > self.simple_word_limit:
            return False
        lowered = prompt.lower()
        return bool(
            form_type
            or "form" in lowered
            or "formularz" in lowered
            or FIELD_LIST_RE.search(prompt)
        )

    def _rule_based_subtype(self, prompt: str) -> Tuple[Subtype, Dict[str, Any]]:
        if is_landing_page(prompt):
            return Subtype.LANDING, {}
        pattern = detect_decision_pattern(prompt)
        if pattern is not None:
            return Subtype.DECISION, {'decision_pattern': pattern.value}
        if _DASHBOARD_RE.search(prompt):
            return Subtype.DASHBOARD, {}
        flow = detect_app_flow(prompt, self.library)
        if flow is not None:
            return Subtype.APP_FLOW, {'flow': flow}
        return Subtype.FORM, {}

    def classify(self, prompt: str, has_existing_code: bool = False) -> Classification:
        has_existing_code = has_existing_code or bool(CODE_FENCE_RE.search(prompt))
        subtype, extra = self._rule_based_subtype(prompt)
        form_type = detect_form_type(prompt, self.library)
        suggestions = suggest_components(prompt, self.library)

        route = Route.RULE_BASED
        if self.free_form_enabled:
            if has_existing_code:
                route = Route.FREE_FORM
            elif subtype == Subtype.FORM and not self.is_simple(prompt, form_type):
                route = Route.FREE_FORM

        top = suggestions[0]['confidence'] if suggestions else 0.0
        confidence = round(min(1.0, _BASE_CONFIDENCE[subtype] + top / 100), 2)

        result = Classification(
            route=route,
            subtype=subtype,
            confidence=confidence,
            screen_type=detect_screen_type(prompt, self.library),
            form_type=form_type,
            has_existing_code=has_existing_code,
            suggestions=suggestions,
            **extra,
        )
        logger.info(
            f"Classified prompt: route={result.route} subtype={result.subtype} "
            f"confidence={result.confidence} form_type={form_type}"
        )
        return result


def classify(prompt: str, library: PatternLibrary = DEFAULT_LIBRARY, free_form_enabled: bool = False) -> Classification:
    """Module-level convenience wrapper around ``RequestClassifier``."""
    return RequestClassifier(library, free_form_enabled=free_form_enabled).classify(prompt)
