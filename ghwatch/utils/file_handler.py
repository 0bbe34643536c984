"""
file_handler.py - Workflow file discovery

This module finds the workflow files a repository scan should analyze.
"""

import os
from pathlib import Path
from typing import Iterator, List, Tuple

WORKFLOW_EXTENSIONS = (".yml", ".yaml")
WORKFLOWS_DIR = (".github", "workflows")


def is_workflow_file(path: str) -> bool:
    """
    Check whether a path has a workflow file extension

    Args:
        path: File path

    Returns:
        True for .yml and .yaml files (any case)
    """
    return path.lower().endswith(WORKFLOW_EXTENSIONS)


def file_contains_commands(content: bytes | str, comment: str = "#") -> bool:
    """
    Check whether a file has any line that is not blank or a comment

    Args:
        content: File content
        comment: Line comment marker

    Returns:
        True if at least one line holds something other than a comment
    """
    if isinstance(content, bytes):
        content = content.decode("utf-8", errors="replace")

    for line in content.splitlines():
        stripped = line.strip()
        if stripped and not stripped.startswith(comment):
            return True
    return False


def _child_dir_ignoring_case(parent: Path, name: str) -> List[Path]:
    if not parent.is_dir():
        return []
    return sorted(
        child for child in parent.iterdir() if child.is_dir() and child.name.lower() == name
    )


def find_workflows_dirs(repo_path: str) -> List[Path]:
    """
    Find '.github/workflows' directories in a repository, matching case-insensitively

    Args:
        repo_path: Path to repository root

    Returns:
        Matching directories
    """
    dirs = [Path(repo_path)]
    for part in WORKFLOWS_DIR:
        dirs = [child for d in dirs for child in _child_dir_ignoring_case(d, part)]
    return dirs


def list_workflow_files(repo_path: str) -> List[str]:
    """
    List workflow files directly under the repository's workflows directory

    Args:
        repo_path: Path to repository root

    Returns:
        Sorted list of workflow file paths
    """
    files = []
    for workflows_dir in find_workflows_dirs(repo_path):
        for entry in workflows_dir.iterdir():
            if entry.is_file() and is_workflow_file(entry.name):
                files.append(str(entry))
    return sorted(files)


def iter_workflow_contents(repo_path: str) -> Iterator[Tuple[str, bytes]]:
    """
    Yield (path, content) pairs for each workflow file in a repository

    Paths are relative to the repository root, using '/' separators.

    Args:
        repo_path: Path to repository root
    """
    for file_path in list_workflow_files(repo_path):
        with open(file_path, "rb") as f:
            content = f.read()
        yield Path(os.path.relpath(file_path, repo_path)).as_posix(), content
