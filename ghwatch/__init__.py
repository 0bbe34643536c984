"""
ghwatch - dangerous GitHub Actions workflow detector

Scans a repository's workflow files for patterns that let an attacker run
code with the repository's privileges: checkout of untrusted pull request
code under privileged triggers, script injection through template
expressions, and action pins to commits outside the action's repository.
"""

from .core import (
    ConfigurationError,
    DangerousWorkflow,
    DangerousWorkflowData,
    DangerousWorkflowDetector,
    DangerousWorkflowType,
    GhwatchError,
    MalformedWorkflowError,
    RepoClientError,
    ScanResult,
    load_config,
    parse_workflow,
    scan_repository,
)
from .clients import GitHubRepoClient, ReachabilityCache, RepoClient
from .rules import Rule, RuleEngine, create_rule_engine
from .utils.version import __version__, get_version, get_version_info

__all__ = [
    "__version__",
    "get_version",
    "get_version_info",
    "GitHubRepoClient",
    "ReachabilityCache",
    "RepoClient",
    "ConfigurationError",
    "DangerousWorkflow",
    "DangerousWorkflowData",
    "DangerousWorkflowDetector",
    "DangerousWorkflowType",
    "GhwatchError",
    "MalformedWorkflowError",
    "RepoClientError",
    "ScanResult",
    "load_config",
    "parse_workflow",
    "scan_repository",
    "Rule",
    "RuleEngine",
    "create_rule_engine",
]


def main() -> None:
    """Main entry point for the ghwatch CLI tool"""
    from .cli import cli

    cli()
