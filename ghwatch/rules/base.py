"""
base.py - Base class for dangerous workflow rules

A rule walks one parsed workflow and appends any findings to the shared
result collection for the scan.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..core.models import (
    DangerousWorkflow,
    DangerousWorkflowData,
    DangerousWorkflowType,
    File,
    Job,
    Workflow,
    WorkflowJob,
)


class Rule(ABC):
    """Base class for all ghwatch rules"""

    def __init__(
        self,
        rule_id: str,
        finding_type: DangerousWorkflowType,
        description: str,
        remediation: str,
    ):
        """
        Initialize a rule

        Args:
            rule_id: Unique identifier for the rule, also its config key
            finding_type: Type of the findings this rule emits
            description: Human-readable description of the rule
            remediation: Generic remediation advice for this rule
        """
        self.rule_id = rule_id
        self.finding_type = finding_type
        self.description = description
        self.remediation = remediation
        self.enabled = True

    @abstractmethod
    def check(self, workflow: Workflow, file_path: str, data: DangerousWorkflowData) -> None:
        """
        Check a workflow and append findings

        Args:
            workflow: Parsed workflow
            file_path: Path to the workflow file
            data: Result collection shared across the scan

        Raises:
            MalformedWorkflowError: If the workflow cannot be analyzed
        """
        pass

    def create_finding(
        self,
        file_path: str,
        snippet: str,
        offset: Optional[int] = None,
        job: Optional[Job] = None,
    ) -> DangerousWorkflow:
        """
        Create a finding of this rule's type

        Args:
            file_path: Path to the workflow file
            snippet: Offending text, verbatim
            offset: Line number of the offending text
            job: Enclosing job, if any

        Returns:
            DangerousWorkflow finding
        """
        return DangerousWorkflow(
            type=self.finding_type,
            file=File(path=file_path, offset=offset, snippet=snippet),
            job=WorkflowJob.from_job(job),
        )
