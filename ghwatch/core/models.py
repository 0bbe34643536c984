"""
models.py - Data model for ghwatch

This module holds two groups of types: the parsed workflow structure that
the rules walk (triggers, jobs, steps) and the findings they produce.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Union


@dataclass(frozen=True)
class PositionedString:
    """A string value from the workflow document with its source position"""

    value: str
    line: Optional[int] = None
    column: Optional[int] = None


@dataclass(frozen=True)
class Trigger:
    """A workflow trigger event, e.g. 'pull_request_target'"""

    name: str
    line: Optional[int] = None


@dataclass(frozen=True)
class ActionExec:
    """Step body that references an action: 'uses' plus 'with' inputs"""

    uses: PositionedString
    inputs: Dict[str, PositionedString] = field(default_factory=dict)


@dataclass(frozen=True)
class RunExec:
    """Step body that runs an inline shell script"""

    run: PositionedString
    shell: Optional[str] = None


StepExec = Union[ActionExec, RunExec]


@dataclass(frozen=True)
class Step:
    """A single job step. ``exec`` is None for inert steps."""

    exec: Optional[StepExec] = None
    name: Optional[str] = None
    line: Optional[int] = None


@dataclass(frozen=True)
class Job:
    """A workflow job"""

    id: Optional[str] = None
    name: Optional[str] = None
    steps: List[Step] = field(default_factory=list)
    line: Optional[int] = None


@dataclass(frozen=True)
class Workflow:
    """A parsed workflow document"""

    triggers: List[Trigger] = field(default_factory=list)
    jobs: List[Job] = field(default_factory=list)
    name: Optional[str] = None

    def uses_trigger(self, name: str) -> bool:
        return any(trigger.name == name for trigger in self.triggers)


class DangerousWorkflowType(Enum):
    """Kinds of dangerous workflow patterns"""

    UNTRUSTED_CHECKOUT = "untrustedCheckout"
    SCRIPT_INJECTION = "scriptInjection"
    IMPOSTER_COMMIT = "imposterCommit"


@dataclass(frozen=True)
class File:
    """Location of a finding inside a workflow file"""

    path: str
    offset: Optional[int] = None
    snippet: str = ""


@dataclass(frozen=True)
class WorkflowJob:
    """Name and id of the job enclosing a finding"""

    name: Optional[str] = None
    id: Optional[str] = None

    @classmethod
    def from_job(cls, job: Optional[Job]) -> Optional["WorkflowJob"]:
        if job is None or (job.name is None and job.id is None):
            return None
        return cls(name=job.name, id=job.id)


@dataclass(frozen=True)
class DangerousWorkflow:
    """A single dangerous workflow finding"""

    type: DangerousWorkflowType
    file: File
    job: Optional[WorkflowJob] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "type": self.type.value,
            "file": {
                "path": self.file.path,
                "offset": self.file.offset,
                "snippet": self.file.snippet,
            },
        }
        if self.job is not None:
            result["job"] = {"name": self.job.name, "id": self.job.id}
        return result


class DangerousWorkflowData:
    """
    Ordered, append-only collection of findings for one repository scan

    A single instance is shared by every workflow file analyzed in the scan.
    """

    def __init__(self) -> None:
        self._workflows: List[DangerousWorkflow] = []

    def append(self, finding: DangerousWorkflow) -> None:
        self._workflows.append(finding)

    @property
    def workflows(self) -> List[DangerousWorkflow]:
        return list(self._workflows)

    def by_type(self, finding_type: DangerousWorkflowType) -> List[DangerousWorkflow]:
        return [f for f in self._workflows if f.type == finding_type]

    def __iter__(self) -> Iterator[DangerousWorkflow]:
        return iter(list(self._workflows))

    def __len__(self) -> int:
        return len(self._workflows)

    def __bool__(self) -> bool:
        return bool(self._workflows)
