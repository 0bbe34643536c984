"""
console.py - Console/terminal reporting for ghwatch

This module formats scan results in a human-readable form for terminal output.
"""

import os
import sys
from datetime import datetime
from typing import Any, Dict, List, Optional, TextIO

import click

from ..core.models import DangerousWorkflow, DangerousWorkflowType
from ..core.scanner import FileResult, ScanResult

TYPE_LABELS = {
    DangerousWorkflowType.UNTRUSTED_CHECKOUT: "Untrusted code checkout",
    DangerousWorkflowType.SCRIPT_INJECTION: "Script injection",
    DangerousWorkflowType.IMPOSTER_COMMIT: "Imposter commit",
}

TYPE_REMEDIATION = {
    DangerousWorkflowType.UNTRUSTED_CHECKOUT: (
        "Avoid checking out the pull request head under pull_request_target or workflow_run"
    ),
    DangerousWorkflowType.SCRIPT_INJECTION: (
        "Move the expression into an environment variable and quote it in the script"
    ),
    DangerousWorkflowType.IMPOSTER_COMMIT: (
        "Pin the action to a commit from its own repository's branches or tags"
    ),
}


def colorize(text: str, color: str) -> str:
    """
    Apply color to text if color output is enabled

    Args:
        text: Text to colorize
        color: Color to apply

    Returns:
        Colorized text or original text if color is disabled
    """
    if os.environ.get("NO_COLOR"):
        return text

    return click.style(text, fg=color)


def format_finding(finding: DangerousWorkflow, verbose: bool = False) -> str:
    """
    Format a single finding for console output

    Args:
        finding: Finding to format
        verbose: Whether to include remediation advice

    Returns:
        Formatted finding as string
    """
    label = TYPE_LABELS.get(finding.type, finding.type.value)
    formatted = f"{colorize(label, 'red')}: {finding.file.snippet}\n"

    file_info = f"  File: {finding.file.path}"
    if finding.file.offset is not None:
        file_info += f":{finding.file.offset}"
    formatted += f"{file_info}\n"

    if finding.job is not None:
        job = finding.job.name or finding.job.id
        formatted += f"  Job: {job}\n"

    if verbose:
        formatted += f"  Remediation: {TYPE_REMEDIATION[finding.type]}\n"

    return formatted


def format_findings_by_file(findings: List[DangerousWorkflow], verbose: bool = False) -> str:
    """
    Format findings grouped by file

    Args:
        findings: List of findings to format
        verbose: Whether to include remediation advice

    Returns:
        Formatted findings as string
    """
    if not findings:
        return "No dangerous workflow patterns found.\n"

    findings_by_file: Dict[str, List[DangerousWorkflow]] = {}
    for finding in findings:
        findings_by_file.setdefault(finding.file.path, []).append(finding)

    output = ""
    for file_path, file_findings in findings_by_file.items():
        output += f"\n{click.style('File: ' + file_path, bold=True)}\n"
        for finding in file_findings:
            output += format_finding(finding, verbose) + "\n"

    return output


def format_errors(errors: List[FileResult]) -> str:
    """Format per-file analysis errors"""
    if not errors:
        return ""

    output = f"\n{colorize('Files that could not be analyzed', 'yellow')}\n"
    for file_result in errors:
        output += f"  {file_result.path}: {file_result.error}\n"
    return output


def format_summary(stats: Dict[str, Any]) -> str:
    """
    Format summary statistics

    Args:
        stats: Statistics dictionary

    Returns:
        Formatted summary as string
    """
    output = f"\n{click.style('Scan Summary', bold=True)}\n"
    output += "=" * 50 + "\n"

    output += f"Total files scanned: {stats.get('total_files', 0)}\n"
    output += f"Files with errors: {stats.get('failed_files', 0)}\n"
    output += f"Total issues found: {stats.get('total_findings', 0)}\n"

    type_counts = stats.get("type_counts", {})
    if any(type_counts.values()):
        output += "\nIssues by type:\n"
        for finding_type in DangerousWorkflowType:
            count = type_counts.get(finding_type.value, 0)
            if count > 0:
                output += f"  {TYPE_LABELS[finding_type]}: {count}\n"

    start_time = stats.get("start_time")
    end_time = stats.get("end_time")
    if start_time and end_time:
        try:
            duration = (
                datetime.fromisoformat(end_time) - datetime.fromisoformat(start_time)
            ).total_seconds()
            output += f"\nScan duration: {duration:.2f} seconds\n"
        except (ValueError, TypeError):
            pass

    return output


def format_console_report(scan: ScanResult, verbose: bool = False, show_summary: bool = True) -> str:
    """
    Generate a complete console report

    Args:
        scan: Result of a repository scan
        verbose: Whether to include remediation advice
        show_summary: Whether to include summary statistics

    Returns:
        Complete formatted report as string
    """
    output = format_findings_by_file(list(scan.data), verbose)
    output += format_errors(scan.errors)

    if show_summary:
        output += format_summary(scan.stats())

    return output


def print_console_report(
    scan: ScanResult,
    verbose: bool = False,
    show_summary: bool = True,
    output_stream: Optional[TextIO] = None,
) -> None:
    """
    Print console report to output stream

    Args:
        scan: Result of a repository scan
        verbose: Whether to include remediation advice
        show_summary: Whether to include summary statistics
        output_stream: Output stream to write to (defaults to sys.stdout)
    """
    report = format_console_report(scan, verbose=verbose, show_summary=show_summary)

    if output_stream is None:
        output_stream = sys.stdout

    output_stream.write(report)
    output_stream.flush()
