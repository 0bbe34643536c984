"""
core package for ghwatch

This package contains the workflow model, parser, configuration and the
detector that runs the rules over a repository's workflow files.
"""

from .config import (
    DEFAULT_CONFIG,
    ConfigurationError,
    disable_rules,
    generate_default_config,
    load_config,
    save_config,
)
from .errors import (
    GhwatchError,
    InternalError,
    InvalidActionReferenceError,
    InvalidRepositoryError,
    MalformedWorkflowError,
    RepoClientError,
    RepoNotFoundError,
    UnterminatedExpressionError,
)
from .models import (
    DangerousWorkflow,
    DangerousWorkflowData,
    DangerousWorkflowType,
    File,
    Workflow,
    WorkflowJob,
)
from .parser import WorkflowSyntaxError, parse_workflow
from .scanner import (
    DangerousWorkflowDetector,
    FileResult,
    ScanResult,
    WorkflowState,
    scan_repository,
)

__all__ = [
    "DEFAULT_CONFIG",
    "ConfigurationError",
    "disable_rules",
    "generate_default_config",
    "load_config",
    "save_config",
    "GhwatchError",
    "InternalError",
    "InvalidActionReferenceError",
    "InvalidRepositoryError",
    "MalformedWorkflowError",
    "RepoClientError",
    "RepoNotFoundError",
    "UnterminatedExpressionError",
    "DangerousWorkflow",
    "DangerousWorkflowData",
    "DangerousWorkflowType",
    "File",
    "Workflow",
    "WorkflowJob",
    "WorkflowSyntaxError",
    "parse_workflow",
    "DangerousWorkflowDetector",
    "FileResult",
    "ScanResult",
    "WorkflowState",
    "scan_repository",
]
