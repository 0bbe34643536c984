"""
conftest.py - Pytest fixtures for ghwatch tests
"""

import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Set

import pytest

from ghwatch.clients.base import Branch, RepoClient, Tag
from ghwatch.core.errors import RepoClientError


class FakeRepoClient(RepoClient):
    """
    In-memory RepoClient that records every remote call

    ``history`` maps a repository to {ref: set of reachable SHAs}. Refs that
    start with 'refs/heads/' are branches, 'refs/tags/' are tags. A repository
    named in ``failing`` raises RepoClientError on listing.
    """

    def __init__(
        self,
        history: Optional[Dict[str, Dict[str, Set[str]]]] = None,
        repository: Optional[str] = None,
        calls: Optional[List[tuple]] = None,
        failing: Optional[Set[str]] = None,
    ) -> None:
        self.history = history or {}
        self.repository = repository
        self.calls = calls if calls is not None else []
        self.failing = failing if failing is not None else set()

    def _refs(self) -> Dict[str, Set[str]]:
        return self.history.get(self.repository or "", {})

    def list_branches(self) -> List[Branch]:
        self.calls.append(("list_branches", self.repository))
        if self.repository in self.failing:
            raise RepoClientError(f"listing branches for {self.repository}: HTTP 502")
        prefix = "refs/heads/"
        return [Branch(ref[len(prefix) :]) for ref in self._refs() if ref.startswith(prefix)]

    def list_tags(self) -> List[Tag]:
        self.calls.append(("list_tags", self.repository))
        prefix = "refs/tags/"
        return [Tag(ref[len(prefix) :]) for ref in self._refs() if ref.startswith(prefix)]

    def contains_revision(self, ref: str, sha: str) -> bool:
        self.calls.append(("contains_revision", self.repository, ref, sha))
        return sha in self._refs().get(ref, set())

    def new_client(self, repository: str) -> "FakeRepoClient":
        self.calls.append(("new_client", repository))
        return FakeRepoClient(self.history, repository, self.calls, self.failing)

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)


@pytest.fixture
def temp_dir():
    """Create a temporary directory that is removed after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def fake_client():
    """Client where acme/build-action has 'good' on main and 'tagged' on v1."""
    return FakeRepoClient(
        history={
            "acme/build-action": {
                "refs/heads/main": {"good"},
                "refs/tags/v1": {"tagged"},
            },
            "actions/checkout": {
                "refs/heads/main": {"v4"},
                "refs/tags/v4": {"v4"},
            },
        }
    )


@pytest.fixture
def untrusted_checkout_content():
    """Workflow that checks out the PR head under pull_request_target."""
    return """
name: Untrusted Checkout

on:
  pull_request_target:
    branches: [ main ]

jobs:
  build:
    name: Build PR
    runs-on: ubuntu-latest
    steps:
      - uses: actions/checkout@v4
        with:
          ref: ${{ github.event.pull_request.head.sha }}
      - run: make test
"""


@pytest.fixture
def script_injection_content():
    """Workflow that interpolates an issue title into a shell script."""
    return """
on: issues

jobs:
  triage:
    runs-on: ubuntu-latest
    steps:
      - name: Echo title
        run: |
          echo "${{ github.event.issue.title }}"
          echo "${{ github.repository }}"
"""


@pytest.fixture
def safe_workflow_content():
    """Workflow with no dangerous patterns."""
    return """
# CI workflow
name: CI

on:
  push:
    branches: [ main ]
  pull_request:

jobs:
  test:
    runs-on: ubuntu-latest
    steps:
      - uses: actions/checkout@v4
      - run: echo "${{ github.sha }}"
"""


def write_workflow(repo_dir: str, name: str, content: str) -> str:
    workflows_dir = Path(repo_dir) / ".github" / "workflows"
    workflows_dir.mkdir(parents=True, exist_ok=True)
    workflow_file = workflows_dir / name
    workflow_file.write_text(content)
    return str(workflow_file)


@pytest.fixture
def workflow_writer():
    """Return a helper that writes a workflow file into a repository."""
    return write_workflow


@pytest.fixture
def mock_repo(temp_dir, untrusted_checkout_content, script_injection_content, safe_workflow_content):
    """Create a repository with one safe and two dangerous workflows."""
    write_workflow(temp_dir, "checkout.yml", untrusted_checkout_content)
    write_workflow(temp_dir, "injection.yaml", script_injection_content)
    write_workflow(temp_dir, "ci.yml", safe_workflow_content)
    (Path(temp_dir) / "README.md").write_text("# Mock Repository\n")
    return temp_dir


@pytest.fixture
def fake_client_cls():
    """The FakeRepoClient class, for tests that build their own history."""
    return FakeRepoClient
