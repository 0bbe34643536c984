"""
test_scanner.py - Tests for the dangerous workflow detector
"""

import pytest

from ghwatch.clients.reachability import ReachabilityCache
from ghwatch.core.errors import InternalError, MalformedWorkflowError, RepoClientError
from ghwatch.core.models import DangerousWorkflowData, DangerousWorkflowType, WorkflowJob
from ghwatch.core.scanner import (
    DangerousWorkflowDetector,
    WorkflowState,
    scan_repository,
)

IMPOSTER_TWO_JOBS = """
on: push
jobs:
  build:
    steps:
      - uses: acme/build-action@deadbeef
  release:
    steps:
      - uses: acme/build-action@deadbeef
"""


def test_scenario_untrusted_checkout(fake_client, untrusted_checkout_content):
    data = DangerousWorkflowData()
    detector = DangerousWorkflowDetector(client=fake_client)

    result = detector.validate(".github/workflows/pr.yml", untrusted_checkout_content, data)

    assert result.state == WorkflowState.DONE
    assert result.findings == 1
    finding = data.workflows[0]
    assert finding.type == DangerousWorkflowType.UNTRUSTED_CHECKOUT
    assert finding.file.snippet == "${{ github.event.pull_request.head.sha }}"
    assert finding.file.path == ".github/workflows/pr.yml"
    assert finding.job == WorkflowJob(name="Build PR", id="build")


def test_scenario_script_injection(script_injection_content):
    data = DangerousWorkflowData()

    DangerousWorkflowDetector().validate("wf.yml", script_injection_content, data)

    assert len(data) == 1
    finding = data.workflows[0]
    assert finding.type == DangerousWorkflowType.SCRIPT_INJECTION
    assert finding.file.snippet == "github.event.issue.title"


def test_scenario_imposter_commit(fake_client):
    content = "on: push\njobs:\n  build:\n    steps:\n      - uses: acme/build-action@deadbeef\n"
    data = DangerousWorkflowData()

    DangerousWorkflowDetector(client=fake_client).validate("wf.yml", content, data)

    assert len(data) == 1
    finding = data.workflows[0]
    assert finding.type == DangerousWorkflowType.IMPOSTER_COMMIT
    assert finding.file.snippet == "acme/build-action@deadbeef"
    assert finding.file.offset == 5


def test_scenario_repeated_reference_queries_once(fake_client):
    """Two jobs pinning the same unreachable SHA give two findings, one lookup."""
    data = DangerousWorkflowData()

    DangerousWorkflowDetector(client=fake_client).validate("wf.yml", IMPOSTER_TWO_JOBS, data)

    assert [f.job.id for f in data] == ["build", "release"]
    assert fake_client.count("list_branches") == 1
    assert fake_client.count("list_tags") == 1


def test_cache_shared_between_files(fake_client):
    cache = ReachabilityCache(fake_client)
    detector = DangerousWorkflowDetector(cache=cache)
    data = DangerousWorkflowData()

    detector.validate("a.yml", IMPOSTER_TWO_JOBS, data)
    detector.validate("b.yml", IMPOSTER_TWO_JOBS, data)

    assert len(data) == 4
    assert fake_client.count("list_branches") == 1


def test_validate_rejects_wrong_accumulator():
    with pytest.raises(InternalError):
        DangerousWorkflowDetector().validate("wf.yml", "on: push\n", [])


def test_validate_rejects_wrong_content():
    with pytest.raises(InternalError):
        DangerousWorkflowDetector().validate("wf.yml", {"on": "push"}, DangerousWorkflowData())


@pytest.mark.parametrize(
    "path,content",
    [
        ("wf.yml", "# only a comment\n\n   # and another\n"),
        ("wf.yml", ""),
        ("notes.txt", 'on: issues\njobs:\n  a:\n    steps:\n      - run: echo "${{ github.event.issue.title }}"\n'),
    ],
)
def test_skipped_files(path, content):
    data = DangerousWorkflowData()
    result = DangerousWorkflowDetector().validate(path, content, data)
    assert result.state == WorkflowState.SKIPPED
    assert len(data) == 0


def test_malformed_yaml_raises():
    with pytest.raises(MalformedWorkflowError) as exc_info:
        DangerousWorkflowDetector().validate("wf.yml", "on: [push\n", DangerousWorkflowData())
    assert exc_info.value.path == "wf.yml"


def test_validate_accepts_bytes(script_injection_content):
    data = DangerousWorkflowData()
    DangerousWorkflowDetector().validate("wf.yml", script_injection_content.encode("utf-8"), data)
    assert len(data) == 1


def test_scan_repository(mock_repo, fake_client):
    scan = scan_repository(mock_repo, client=fake_client)

    assert [f.path for f in scan.files] == [
        ".github/workflows/checkout.yml",
        ".github/workflows/ci.yml",
        ".github/workflows/injection.yaml",
    ]
    assert all(f.state == WorkflowState.DONE for f in scan.files)
    assert [f.type for f in scan.data] == [
        DangerousWorkflowType.UNTRUSTED_CHECKOUT,
        DangerousWorkflowType.SCRIPT_INJECTION,
    ]

    stats = scan.stats()
    assert stats["total_files"] == 3
    assert stats["analyzed_files"] == 3
    assert stats["failed_files"] == 0
    assert stats["total_findings"] == 2
    assert stats["type_counts"]["imposterCommit"] == 0


def test_scan_repository_without_client(mock_repo):
    scan = scan_repository(mock_repo)
    assert len(scan.data) == 2
    assert scan.errors == []


def test_scan_repository_continues_after_error(mock_repo, workflow_writer):
    workflow_writer(mock_repo, "broken.yml", "on: [push\n")

    scan = scan_repository(mock_repo)

    assert len(scan.errors) == 1
    failed = scan.errors[0]
    assert failed.path == ".github/workflows/broken.yml"
    assert isinstance(failed.error, MalformedWorkflowError)
    # findings from the other files are kept
    assert len(scan.data) == 2


def test_scan_repository_fail_fast(mock_repo, workflow_writer):
    workflow_writer(mock_repo, "broken.yml", "on: [push\n")

    with pytest.raises(MalformedWorkflowError):
        scan_repository(mock_repo, config={"fail_fast": True})


def test_scan_repository_client_failure(temp_dir, workflow_writer, fake_client_cls):
    client = fake_client_cls(failing={"acme/build-action"})
    workflow_writer(temp_dir, "build.yml", IMPOSTER_TWO_JOBS)

    scan = scan_repository(temp_dir, client=client)

    assert len(scan.errors) == 1
    assert isinstance(scan.errors[0].error, RepoClientError)


def test_scan_repository_no_workflows(temp_dir):
    scan = scan_repository(temp_dir)
    assert scan.files == []
    assert len(scan.data) == 0
