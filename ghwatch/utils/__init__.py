"""
utils package for ghwatch

YAML loading, workflow file discovery and version information.
"""

from .file_handler import (
    file_contains_commands,
    is_workflow_file,
    iter_workflow_contents,
    list_workflow_files,
)
from .version import __version__, get_version, get_version_info
from .yaml_handler import load_yaml_with_positions

__all__ = [
    "file_contains_commands",
    "is_workflow_file",
    "iter_workflow_contents",
    "list_workflow_files",
    "load_yaml_with_positions",
    "__version__",
    "get_version",
    "get_version_info",
]
