"""
rules package for ghwatch

This package contains the dangerous workflow rules, the expression risk
matcher they share, and the engine that runs them.
"""

from .base import Rule
from .engine import RuleEngine, create_rule_engine
from .expressions import (
    UNTRUSTED_CONTEXT_PATTERNS,
    UNTRUSTED_CONTEXT_PATTERNS_VERSION,
    ExpressionMatcher,
    contains_untrusted_context_pattern,
    extract_expressions,
)
from .security import ImposterCommitRule, ScriptInjectionRule, UntrustedCheckoutRule

__all__ = [
    "Rule",
    "RuleEngine",
    "create_rule_engine",
    "UntrustedCheckoutRule",
    "ScriptInjectionRule",
    "ImposterCommitRule",
    "ExpressionMatcher",
    "extract_expressions",
    "contains_untrusted_context_pattern",
    "UNTRUSTED_CONTEXT_PATTERNS",
    "UNTRUSTED_CONTEXT_PATTERNS_VERSION",
]
