"""
json.py - JSON reporting for ghwatch

This module formats scan results as JSON, suitable for machine processing or
integration with other tools.
"""

import json
from datetime import datetime
from typing import Any, Dict, List

from ..core.scanner import FileResult, ScanResult
from ..utils.version import __version__


def file_result_to_dict(file_result: FileResult) -> Dict[str, Any]:
    """
    Convert a failed FileResult to a dictionary

    Args:
        file_result: Per-file outcome

    Returns:
        Dictionary with the path and error details
    """
    error = file_result.error
    result: Dict[str, Any] = {"path": file_result.path, "state": file_result.state.value}
    if error is not None:
        result["error"] = {"type": type(error).__name__, "message": str(error)}
    return result


def generate_json_report(scan: ScanResult, include_stats: bool = True) -> str:
    """
    Generate a JSON report of findings, per-file errors and statistics

    Args:
        scan: Result of a repository scan
        include_stats: Whether to include statistics in the output

    Returns:
        JSON string representation of the report
    """
    findings: List[Dict[str, Any]] = [finding.to_dict() for finding in scan.data]

    report: Dict[str, Any] = {
        "ghwatch_version": __version__,
        "generated_at": datetime.now().isoformat(),
        "findings": findings,
        "errors": [file_result_to_dict(f) for f in scan.errors],
    }

    if include_stats:
        report["stats"] = scan.stats()

    return json.dumps(report, indent=2)


def save_json_report(scan: ScanResult, output_path: str, include_stats: bool = True) -> None:
    """
    Generate a JSON report and save it to a file

    Args:
        scan: Result of a repository scan
        output_path: Path to save the report to
        include_stats: Whether to include statistics in the output

    Raises:
        IOError: If the file cannot be written
    """
    report = generate_json_report(scan, include_stats)

    with open(output_path, "w", encoding="utf-8") as f:
        f.write(report)
