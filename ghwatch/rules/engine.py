"""
engine.py - Rule engine for ghwatch

This module provides the rule engine that holds the three dangerous workflow
rules and runs them, in a fixed order, against a parsed workflow.
"""

import logging
from typing import Any, Dict, List, Optional

from ..clients.reachability import ReachabilityCache
from ..core.models import DangerousWorkflowData, Workflow
from .base import Rule
from .expressions import ExpressionMatcher
from .security import ImposterCommitRule, ScriptInjectionRule, UntrustedCheckoutRule

logger = logging.getLogger(__name__)

# Config keys enabling each rule, by rule id
RULE_CONFIG_KEYS = {
    "untrusted_checkout": "check_untrusted_checkout",
    "script_injection": "check_script_injection",
    "imposter_commits": "check_imposter_commits",
}


class RuleEngine:
    """Engine for managing and running dangerous workflow rules"""

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        cache: Optional[ReachabilityCache] = None,
    ) -> None:
        """
        Initialize the rule engine

        Args:
            config: Configuration dictionary
            cache: Reachability cache for the scan; without one the imposter
                commit rule is disabled
        """
        self.config = config or {}
        self.cache = cache
        self.rules: List[Rule] = []

        self._register_default_rules()

        self._apply_config()

    def _register_default_rules(self) -> None:
        """Register the rules in the order they run"""
        matcher = ExpressionMatcher(self.config.get("untrusted_context_patterns"))

        self.rules.append(UntrustedCheckoutRule())
        self.rules.append(ScriptInjectionRule(matcher))
        self.rules.append(ImposterCommitRule(self.cache))

    def _apply_config(self) -> None:
        """Apply configuration to rules"""
        for rule in self.rules:
            for key in (rule.rule_id, RULE_CONFIG_KEYS.get(rule.rule_id)):
                if key and key in self.config:
                    rule.enabled = bool(self.config[key])

        imposter = self.get_rule_by_id("imposter_commits")
        if imposter is not None and imposter.enabled and self.cache is None:
            logger.info("no repository client configured, imposter commit check disabled")
            imposter.enabled = False

    def get_rule_by_id(self, rule_id: str) -> Optional[Rule]:
        """
        Get a rule by its ID

        Args:
            rule_id: Rule ID to look for

        Returns:
            Rule instance or None if not found
        """
        for rule in self.rules:
            if rule.rule_id == rule_id:
                return rule
        return None

    def list_rules(self) -> List[Dict[str, Any]]:
        """
        Get information about all registered rules

        Returns:
            List of rule information dictionaries
        """
        return [
            {
                "id": rule.rule_id,
                "type": rule.finding_type.value,
                "enabled": rule.enabled,
                "description": rule.description,
                "remediation": rule.remediation,
            }
            for rule in self.rules
        ]

    def enable_rule(self, rule_id: str) -> bool:
        rule = self.get_rule_by_id(rule_id)
        if rule:
            rule.enabled = True
            return True
        return False

    def disable_rule(self, rule_id: str) -> bool:
        rule = self.get_rule_by_id(rule_id)
        if rule:
            rule.enabled = False
            return True
        return False

    def scan_workflow(self, workflow: Workflow, file_path: str, data: DangerousWorkflowData) -> None:
        """
        Run all enabled rules against a workflow

        Rules run in registration order. An error from a rule stops the scan
        of this workflow; findings already appended are kept.

        Args:
            workflow: Parsed workflow
            file_path: Path to the workflow file
            data: Result collection shared across the scan
        """
        for rule in self.rules:
            if not rule.enabled:
                continue
            logger.debug("running rule %s on %s", rule.rule_id, file_path)
            rule.check(workflow, file_path, data)


def create_rule_engine(
    config: Optional[Dict[str, Any]] = None, cache: Optional[ReachabilityCache] = None
) -> RuleEngine:
    """
    Create a rule engine with the specified configuration

    Args:
        config: Configuration dictionary
        cache: Reachability cache for the scan

    Returns:
        Configured RuleEngine instance
    """
    return RuleEngine(config, cache)
