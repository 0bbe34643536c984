"""
reports package for ghwatch

This package renders scan results for the terminal or as JSON.
"""

from .console import format_console_report, format_finding, format_summary, print_console_report
from .json import generate_json_report, save_json_report

__all__ = [
    "format_console_report",
    "print_console_report",
    "format_finding",
    "format_summary",
    "generate_json_report",
    "save_json_report",
]
