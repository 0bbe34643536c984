"""
scanner.py - Dangerous workflow detection for ghwatch

This module drives the analysis: each workflow file is parsed and handed to
the rule engine, and all findings of a repository scan go into one shared
DangerousWorkflowData.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from ..clients.base import RepoClient
from ..clients.reachability import ReachabilityCache
from ..rules.engine import RuleEngine
from ..utils.file_handler import file_contains_commands, is_workflow_file, iter_workflow_contents
from .errors import GhwatchError, InternalError
from .models import DangerousWorkflowData, DangerousWorkflowType
from .parser import format_syntax_errors, parse_workflow

logger = logging.getLogger(__name__)


class WorkflowState(Enum):
    """Progress of a single workflow file through the detector"""

    NOT_STARTED = "not_started"
    PARSED = "parsed"
    ANALYZED = "analyzed"
    DONE = "done"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class FileResult:
    """Outcome of analyzing one workflow file"""

    path: str
    state: WorkflowState = WorkflowState.NOT_STARTED
    error: Optional[GhwatchError] = None
    findings: int = 0


class DangerousWorkflowDetector:
    """Runs the dangerous workflow rules over workflow files"""

    def __init__(
        self,
        client: Optional[RepoClient] = None,
        config: Optional[Dict[str, Any]] = None,
        cache: Optional[ReachabilityCache] = None,
    ) -> None:
        """
        Initialize the detector

        Args:
            client: Repository client used to open clients for action
                repositories; without it imposter commits are not checked
            config: Configuration dictionary
            cache: Reachability cache to share; one is created from
                ``client`` when omitted
        """
        self.config = config or {}
        if cache is None and client is not None:
            cache = ReachabilityCache(client)
        self.cache = cache
        self.engine = RuleEngine(self.config, cache)

    def validate(self, path: str, content: Any, data: Any) -> FileResult:
        """
        Analyze one workflow file and append its findings to ``data``

        Args:
            path: Path of the file, used in findings
            content: Raw file content
            data: Result collection shared across the scan

        Returns:
            FileResult in state DONE or SKIPPED

        Raises:
            InternalError: If called with arguments of the wrong type
            MalformedWorkflowError: If the file cannot be parsed or analyzed
            RepoClientError: If a reachability query fails
        """
        if not isinstance(data, DangerousWorkflowData):
            raise InternalError(
                f"validate expects a DangerousWorkflowData accumulator, got {type(data).__name__}"
            )
        if not isinstance(content, (bytes, str)):
            raise InternalError(
                f"validate expects bytes or str content, got {type(content).__name__}"
            )

        result = FileResult(path=path)

        if not is_workflow_file(path) or not file_contains_commands(content):
            logger.debug("skipping %s", path)
            result.state = WorkflowState.SKIPPED
            return result

        workflow, errors = parse_workflow(content)
        if workflow is None:
            raise format_syntax_errors(errors, path)
        for err in errors:
            logger.warning("%s: %s", path, err)
        result.state = WorkflowState.PARSED

        before = len(data)
        self.engine.scan_workflow(workflow, path, data)
        result.state = WorkflowState.ANALYZED

        result.findings = len(data) - before
        result.state = WorkflowState.DONE
        return result


@dataclass
class ScanResult:
    """Findings and per-file outcomes of a repository scan"""

    repo_path: str
    data: DangerousWorkflowData = field(default_factory=DangerousWorkflowData)
    files: List[FileResult] = field(default_factory=list)
    start_time: Optional[str] = None
    end_time: Optional[str] = None

    @property
    def errors(self) -> List[FileResult]:
        return [f for f in self.files if f.state == WorkflowState.FAILED]

    def stats(self) -> Dict[str, Any]:
        type_counts = {t.value: len(self.data.by_type(t)) for t in DangerousWorkflowType}
        return {
            "start_time": self.start_time,
            "end_time": self.end_time,
            "repo_path": self.repo_path,
            "total_files": len(self.files),
            "analyzed_files": sum(1 for f in self.files if f.state == WorkflowState.DONE),
            "failed_files": len(self.errors),
            "total_findings": len(self.data),
            "type_counts": type_counts,
        }


def scan_repository(
    repo_path: str,
    client: Optional[RepoClient] = None,
    config: Optional[Dict[str, Any]] = None,
) -> ScanResult:
    """
    Scan every workflow file in a repository

    Files are analyzed one at a time with a shared result collection and a
    shared reachability cache. A failing file is recorded and the scan goes
    on, unless 'fail_fast' is set in the config.

    Args:
        repo_path: Path to repository root
        client: Repository client for imposter commit checks
        config: Configuration dictionary

    Returns:
        ScanResult

    Raises:
        GhwatchError: The first per-file error, when 'fail_fast' is set
    """
    config = config or {}
    detector = DangerousWorkflowDetector(client=client, config=config)
    result = ScanResult(repo_path=repo_path, start_time=datetime.now().isoformat())

    for path, content in iter_workflow_contents(repo_path):
        try:
            file_result = detector.validate(path, content, result.data)
        except InternalError:
            raise
        except GhwatchError as e:
            logger.debug("analysis of %s failed: %s", path, e)
            file_result = FileResult(path=path, state=WorkflowState.FAILED, error=e)
            result.files.append(file_result)
            if config.get("fail_fast"):
                raise
            continue
        result.files.append(file_result)

    result.end_time = datetime.now().isoformat()
    return result
