"""
cli.py - Command-line interface for ghwatch

This module provides the command-line interface for the ghwatch tool,
allowing users to scan a repository's GitHub Actions workflows for
dangerous patterns.
"""

import json
import logging
import os
import sys
from typing import Any, Dict, Optional, Tuple

import click

from .clients.github import GitHubRepoClient
from .core import (
    ConfigurationError,
    DangerousWorkflowData,
    DangerousWorkflowDetector,
    GhwatchError,
    WorkflowState,
    disable_rules,
    generate_default_config,
    load_config,
    scan_repository,
)
from .reports import format_finding, print_console_report, save_json_report
from .reports.json import generate_json_report
from .rules import create_rule_engine
from .utils.file_handler import list_workflow_files
from .utils.version import __version__

OUTPUT_FORMATS = ["text", "json"]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_config_or_exit(config: Optional[str]) -> Dict[str, Any]:
    try:
        return load_config(config)
    except ConfigurationError as e:
        click.echo(f"Error loading config file: {e}", err=True)
        sys.exit(1)


def _make_client(config_data: Dict[str, Any]) -> Optional[GitHubRepoClient]:
    if not config_data.get("check_imposter_commits", True):
        return None
    return GitHubRepoClient.from_config(config_data)


@click.group(invoke_without_command=True)
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """ghwatch - dangerous GitHub Actions workflow detector

    Finds untrusted code checkouts, script injection and imposter commit
    pins in a repository's workflows.
    """
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.argument("repo_path", type=click.Path())
@click.option("--config", type=click.Path(), help="Path to YAML config file")
@click.option("--disable", multiple=True, help="Disable specific rule(s)")
@click.option(
    "--output",
    type=click.Choice(OUTPUT_FORMATS),
    default="text",
    help="Output format for results",
)
@click.option("--output-file", type=click.Path(), help="Write output to file instead of stdout")
@click.option(
    "--no-imposter-check",
    is_flag=True,
    help="Skip imposter commit checks (no network access)",
)
@click.option("--fail-fast", is_flag=True, help="Stop at the first file that cannot be analyzed")
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.option("--verbose", is_flag=True, help="Show remediation advice and debug logging")
def scan(
    repo_path: str,
    config: Optional[str],
    disable: Tuple[str, ...],
    output: str,
    output_file: Optional[str],
    no_imposter_check: bool,
    fail_fast: bool,
    no_color: bool,
    verbose: bool,
) -> None:
    """Scan a repository's workflows for dangerous patterns

    REPO_PATH: Path to the repository root
    """
    _configure_logging(verbose)
    if no_color:
        os.environ["NO_COLOR"] = "1"

    config_data = _load_config_or_exit(config)
    if disable:
        try:
            config_data = disable_rules(config_data, list(disable))
        except ConfigurationError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)
    if no_imposter_check:
        config_data["check_imposter_commits"] = False
    if fail_fast:
        config_data["fail_fast"] = True

    workflow_files = list_workflow_files(repo_path)
    if not workflow_files:
        click.echo(f"No workflows found in {repo_path}", err=True)
        sys.exit(1)

    if output == "text":
        click.echo(f"Scanning repository: {repo_path}")
        click.echo(f"Found {len(workflow_files)} workflow file(s) to scan")

    try:
        result = scan_repository(repo_path, client=_make_client(config_data), config=config_data)
    except GhwatchError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    verbose = verbose or bool(config_data.get("report", {}).get("verbose"))
    if output_file:
        if output == "json":
            save_json_report(result, output_file)
        else:
            with open(output_file, "w", encoding="utf-8") as f:
                print_console_report(result, verbose=verbose, output_stream=f)
        click.echo(f"Results written to {output_file}")
    elif output == "json":
        click.echo(generate_json_report(result))
    else:
        print_console_report(result, verbose=verbose)

    if result.data or result.errors:
        sys.exit(1)


@cli.command()
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--config", type=click.Path(), help="Path to YAML config file")
@click.option("--no-imposter-check", is_flag=True, help="Skip imposter commit checks")
def analyze(file_path: str, config: Optional[str], no_imposter_check: bool) -> None:
    """Analyze a single workflow file"""
    config_data = _load_config_or_exit(config)
    if no_imposter_check:
        config_data["check_imposter_commits"] = False

    with open(file_path, "rb") as f:
        content = f.read()

    data = DangerousWorkflowData()
    detector = DangerousWorkflowDetector(client=_make_client(config_data), config=config_data)
    try:
        result = detector.validate(file_path, content, data)
    except GhwatchError as e:
        click.echo(f"Error analyzing file: {e}", err=True)
        sys.exit(1)

    if result.state == WorkflowState.SKIPPED:
        click.echo(
            f"Skipped {file_path}: not a .yml/.yaml workflow file, or it holds only comments",
            err=True,
        )
        sys.exit(1)

    click.echo(f"Analysis of {file_path}:\n")
    if not data:
        click.echo("No dangerous workflow patterns found.")
        return

    for finding in data:
        click.echo(format_finding(finding, verbose=True))
    sys.exit(1)


@cli.command()
@click.option("--config", type=click.Path(exists=True), help="Path to YAML config file to validate")
@click.option("--generate", is_flag=True, help="Generate a default config file")
@click.option("--output", type=click.Path(), help="Output path for generated config")
def config(config: Optional[str], generate: bool, output: Optional[str]) -> None:
    """View or validate current config"""
    if generate:
        try:
            config_str = generate_default_config(output_path=output)
        except ConfigurationError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)

        if output:
            click.echo(f"Default config written to {output}")
        else:
            click.echo(config_str)
        return

    try:
        config_data = load_config(config)
    except ConfigurationError as e:
        click.echo(f"Config validation failed: {e}", err=True)
        sys.exit(1)

    click.echo("Config loaded and valid.")
    for rule_info in create_rule_engine(config_data).list_rules():
        enabled = config_data.get(f"check_{rule_info['id']}", True)
        click.echo(f" - {rule_info['id']}: {'enabled' if enabled else 'disabled'}")


@cli.command()
@click.option(
    "--format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)
def rules(format: str) -> None:
    """List all available rules and what they do"""
    rules_list = create_rule_engine().list_rules()

    if format == "json":
        click.echo(json.dumps(rules_list, indent=2))
        return

    click.echo("ghwatch runs the following rules, in order:")
    for rule in rules_list:
        click.echo(f" - {rule['id']} ({rule['type']})")
        click.echo(f"   {rule['description']}")


if __name__ == "__main__":
    cli()
