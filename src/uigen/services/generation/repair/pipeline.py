"""Repair pipeline
===============

Ordered fold of every repair rule over one source text. Order matters:
names are corrected before imports are computed, type syntax is stripped
before object literals are inspected, and ids are injected only after the
tags they attach to have been fixed.
"""

from __future__ import annotations

import logging
from functools import reduce
from typing import Iterable, Tuple

from . import charts, imports, markup, syntax
from .base import RepairRule

logger = logging.getLogger(__name__)

REPAIR_RULES: Tuple[RepairRule, ...] = (
    *markup.NAME_RULES,
    *syntax.RULES,
    *charts.RULES,
    *syntax.LATE_RULES,
    *markup.RULES,
    *charts.DATA_RULES,
    *markup.LATE_RULES,
    *imports.RULES,
)


def _apply(source: str, rule: RepairRule) -> str:
    repaired = rule.apply(source)
    if repaired != source:
        logger.debug(f"Repair rule '{rule.name}' changed the source")
    return repaired


def repair(source: str, rules: Iterable[RepairRule] = REPAIR_RULES) -> str:
    """Run every rule in order; safe to call on already repaired text."""
    return reduce(_apply, rules, source)


def rule_names() -> Tuple[str, ...]:
    return tuple(rule.name for rule in REPAIR_RULES)
