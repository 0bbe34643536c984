"""
security.py - Dangerous workflow rules

This module provides the three dangerous workflow rules: checkout of
untrusted code under a privileged trigger, script injection through
template expressions, and action pins to imposter commits.
"""

from typing import Optional, Tuple

from ..clients.base import normalize_repository
from ..clients.reachability import ReachabilityCache
from ..core.errors import (
    InternalError,
    InvalidActionReferenceError,
    InvalidRepositoryError,
    UnterminatedExpressionError,
)
from ..core.models import (
    ActionExec,
    DangerousWorkflowData,
    DangerousWorkflowType,
    RunExec,
    Workflow,
)
from .base import Rule
from .expressions import ExpressionMatcher, UnterminatedExpression, extract_expressions

HIGH_RISK_TRIGGERS = ("pull_request_target", "workflow_run")
UNTRUSTED_CHECKOUT_REFS = ("github.event.pull_request", "github.event.workflow_run")
CHECKOUT_ACTION = "actions/checkout"
ACTIONS_SCHEME = "actions://"


class UntrustedCheckoutRule(Rule):
    """Rule for detecting checkout of untrusted code under privileged triggers"""

    def __init__(self) -> None:
        super().__init__(
            rule_id="untrusted_checkout",
            finding_type=DangerousWorkflowType.UNTRUSTED_CHECKOUT,
            description=(
                "Detects actions/checkout of pull request or workflow_run code in workflows "
                "triggered by pull_request_target or workflow_run"
            ),
            remediation=(
                "Do not check out the pull request head in privileged workflows; use the "
                "pull_request trigger, or drop the 'ref' input to check out the base branch"
            ),
        )

    def check(self, workflow: Workflow, file_path: str, data: DangerousWorkflowData) -> None:
        """Check checkout steps when a high-risk trigger is declared"""
        if not any(workflow.uses_trigger(trigger) for trigger in HIGH_RISK_TRIGGERS):
            return

        for job in workflow.jobs:
            for step in job.steps:
                if not isinstance(step.exec, ActionExec):
                    continue
                if CHECKOUT_ACTION not in step.exec.uses.value:
                    continue

                # Without 'ref' the base branch is checked out, which is safe.
                ref = step.exec.inputs.get("ref")
                if ref is None:
                    continue

                if any(untrusted in ref.value for untrusted in UNTRUSTED_CHECKOUT_REFS):
                    data.append(self.create_finding(file_path, ref.value, step.line, job))


class ScriptInjectionRule(Rule):
    """Rule for detecting untrusted input interpolated into inline scripts"""

    def __init__(self, matcher: Optional[ExpressionMatcher] = None) -> None:
        super().__init__(
            rule_id="script_injection",
            finding_type=DangerousWorkflowType.SCRIPT_INJECTION,
            description=(
                "Detects template expressions over attacker-controlled event data "
                "in 'run' scripts"
            ),
            remediation=(
                "Pass untrusted values through an intermediate environment variable "
                "and reference it with shell quoting, e.g. \"$TITLE\""
            ),
        )
        self.matcher = matcher or ExpressionMatcher()

    def check(self, workflow: Workflow, file_path: str, data: DangerousWorkflowData) -> None:
        """Check every inline script for risky expressions"""
        for job in workflow.jobs:
            for step in job.steps:
                if not isinstance(step.exec, RunExec):
                    continue

                script = step.exec.run
                try:
                    expressions = extract_expressions(script.value)
                except UnterminatedExpression as e:
                    raise UnterminatedExpressionError(
                        f"unterminated '${{{{' at offset {e.offset} of script",
                        path=file_path,
                        line=script.line,
                    )

                for expression in expressions:
                    if self.matcher.is_untrusted(expression):
                        data.append(self.create_finding(file_path, expression, script.line, job))


def split_action_reference(reference: str) -> Tuple[str, str]:
    """
    Split 'owner/repo@revision' into repository and revision

    Args:
        reference: Action reference from a step's 'uses'

    Returns:
        Tuple of (repository, revision)

    Raises:
        ValueError: If the reference does not contain exactly one '@'
            with text on both sides
    """
    if reference.count("@") != 1:
        raise ValueError(f"unexpected reference: {reference}")
    repository, revision = reference.rsplit("@", 1)
    if not repository or not revision:
        raise ValueError(f"unexpected reference: {reference}")
    return repository, revision


class ImposterCommitRule(Rule):
    """Rule for detecting action pins to commits outside the claimed repository"""

    def __init__(self, cache: Optional[ReachabilityCache] = None) -> None:
        super().__init__(
            rule_id="imposter_commits",
            finding_type=DangerousWorkflowType.IMPOSTER_COMMIT,
            description=(
                "Detects actions pinned to commits that are not reachable from any "
                "branch or tag of the referenced repository"
            ),
            remediation=(
                "Pin the action to a commit from the action repository's own history, "
                "e.g. the commit of a release tag"
            ),
        )
        self.cache = cache

    def check(self, workflow: Workflow, file_path: str, data: DangerousWorkflowData) -> None:
        """Check each action pin against the referenced repository's refs"""
        if self.cache is None:
            raise InternalError("imposter commit rule requires a reachability cache")

        for job in workflow.jobs:
            for step in job.steps:
                if not isinstance(step.exec, ActionExec):
                    continue

                reference = step.exec.uses.value.strip().removeprefix(ACTIONS_SCHEME)

                try:
                    repository, revision = split_action_reference(reference)
                    normalize_repository(repository)
                except (ValueError, InvalidRepositoryError) as e:
                    raise InvalidActionReferenceError(str(e), path=file_path, line=step.line)

                reachable = self.cache.contains(repository, revision)

                if not reachable:
                    data.append(self.create_finding(file_path, reference, step.line, job))
