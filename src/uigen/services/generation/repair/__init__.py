"""Repair / normalization pass for synthesized and generated UI source."""

from .base import RepairRule
from .pipeline import REPAIR_RULES, repair, rule_names

__all__ = [
    'RepairRule',
    'REPAIR_RULES',
    'repair',
    'rule_names',
]
