"""
Rule sets, their configuration, and the validation engine.
"""

from .rule_config import RuleConfigLoader
from .rule_engine import EMPTY, ValidationEngine, validate
from .rule_set import BoundRule, ResolvedRuleSet, RuleSet, RuleSetBuilder, build_rule_set

__all__ = [
    "EMPTY",
    "BoundRule",
    "ResolvedRuleSet",
    "RuleSet",
    "RuleSetBuilder",
    "RuleConfigLoader",
    "ValidationEngine",
    "build_rule_set",
    "validate",
]
