"""
parser.py - Workflow document parser

Turns raw workflow bytes into the structural model in ``models``. Parsing is
tolerant below the document root: malformed jobs or steps are reported as
syntax errors and skipped, and only an unreadable document is a hard failure.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import yaml

from ..utils.yaml_handler import (
    LINE_KEY,
    load_yaml_with_positions,
    mapping_items,
    value_line,
)
from .errors import MalformedWorkflowError
from .models import (
    ActionExec,
    Job,
    PositionedString,
    RunExec,
    Step,
    Trigger,
    Workflow,
)


@dataclass(frozen=True)
class WorkflowSyntaxError:
    """A problem found while parsing a workflow document"""

    message: str
    line: Optional[int] = None
    column: Optional[int] = None

    def __str__(self) -> str:
        if self.line is not None:
            return f"line {self.line}: {self.message}"
        return self.message


def _to_text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list)):
        return None
    return str(value)


def _parse_triggers(on_section: Any, line: Optional[int]) -> List[Trigger]:
    if isinstance(on_section, str):
        return [Trigger(name=on_section, line=line)]
    if isinstance(on_section, list):
        return [Trigger(name=str(event), line=line) for event in on_section if event is not None]
    if isinstance(on_section, dict):
        return [
            Trigger(name=str(event), line=value_line(on_section, event) or line)
            for event, _ in mapping_items(on_section)
        ]
    return []


def _parse_step(
    step: Dict[str, Any], job_id: str, index: int, errors: List[WorkflowSyntaxError]
) -> Step:
    line = step.get(LINE_KEY)
    name = _to_text(step.get("name"))

    if "uses" in step and "run" in step:
        errors.append(
            WorkflowSyntaxError(
                f"step {index + 1} in job '{job_id}' has both 'uses' and 'run'", line=line
            )
        )
        return Step(exec=None, name=name, line=line)

    uses = _to_text(step.get("uses"))
    if uses is not None:
        inputs: Dict[str, PositionedString] = {}
        with_section = step.get("with")
        if isinstance(with_section, dict):
            for key, value in mapping_items(with_section):
                text = _to_text(value)
                if text is not None:
                    inputs[str(key)] = PositionedString(text, line=value_line(with_section, key))
        action = ActionExec(
            uses=PositionedString(uses, line=value_line(step, "uses")), inputs=inputs
        )
        return Step(exec=action, name=name, line=line)

    run = _to_text(step.get("run"))
    if run is not None:
        script = RunExec(
            run=PositionedString(run, line=value_line(step, "run")),
            shell=_to_text(step.get("shell")),
        )
        return Step(exec=script, name=name, line=line)

    return Step(exec=None, name=name, line=line)


def _parse_job(job_id: str, job: Dict[str, Any], errors: List[WorkflowSyntaxError]) -> Job:
    steps: List[Step] = []
    raw_steps = job.get("steps")

    if raw_steps is not None and not isinstance(raw_steps, list):
        errors.append(
            WorkflowSyntaxError(f"'steps' in job '{job_id}' must be a sequence", job.get(LINE_KEY))
        )
        raw_steps = []

    for index, step in enumerate(raw_steps or []):
        if not isinstance(step, dict):
            errors.append(
                WorkflowSyntaxError(
                    f"step {index + 1} in job '{job_id}' must be a mapping", job.get(LINE_KEY)
                )
            )
            continue
        steps.append(_parse_step(step, job_id, index, errors))

    return Job(
        id=job_id,
        name=_to_text(job.get("name")),
        steps=steps,
        line=job.get(LINE_KEY),
    )


def parse_workflow(content: bytes | str) -> Tuple[Optional[Workflow], List[WorkflowSyntaxError]]:
    """
    Parse a workflow document

    Args:
        content: Raw workflow file content

    Returns:
        Tuple of (workflow, errors). ``workflow`` is None when the document
        could not be read at all; otherwise ``errors`` lists the parts that
        were skipped.
    """
    errors: List[WorkflowSyntaxError] = []

    try:
        document = load_yaml_with_positions(content)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        problem = getattr(e, "problem", None) or str(e)
        if mark is not None:
            errors.append(WorkflowSyntaxError(problem, mark.line + 1, mark.column + 1))
        else:
            errors.append(WorkflowSyntaxError(problem))
        return None, errors

    if not isinstance(document, dict):
        errors.append(WorkflowSyntaxError("workflow must be a mapping at the top level", line=1))
        return None, errors

    triggers = _parse_triggers(document.get("on"), value_line(document, "on"))

    jobs: List[Job] = []
    raw_jobs = document.get("jobs")
    if isinstance(raw_jobs, dict):
        for job_id, job in mapping_items(raw_jobs):
            if not isinstance(job, dict):
                errors.append(
                    WorkflowSyntaxError(
                        f"job '{job_id}' must be a mapping", value_line(raw_jobs, job_id)
                    )
                )
                continue
            jobs.append(_parse_job(str(job_id), job, errors))
    elif raw_jobs is not None:
        errors.append(WorkflowSyntaxError("'jobs' must be a mapping", value_line(document, "jobs")))

    return Workflow(triggers=triggers, jobs=jobs, name=_to_text(document.get("name"))), errors


def format_syntax_errors(
    errors: List[WorkflowSyntaxError], path: Optional[str] = None
) -> MalformedWorkflowError:
    """
    Build a single error from a list of parser errors

    Args:
        errors: Errors returned by ``parse_workflow``
        path: Path of the workflow file

    Returns:
        MalformedWorkflowError pointing at the first error
    """
    first_line = errors[0].line if errors else None
    details = "; ".join(str(err) for err in errors) or "unknown syntax error"
    return MalformedWorkflowError(f"invalid workflow syntax: {details}", path=path, line=first_line)
