"""CLI entry point for the incident reporter."""

import asyncio
import json
import logging
import os
import sys
from pathlib import Path

import typer

from boostsec.incident_reporter.analyzer import analyze, failing_records, save_analysis
from boostsec.incident_reporter.ingest import ingest_report
from boostsec.incident_reporter.models.provider_config import GitHubConfig
from boostsec.incident_reporter.orchestrator import IncidentOrchestrator
from boostsec.incident_reporter.parsers.base import ParseError
from boostsec.incident_reporter.providers.github import GitHubIssueTracker
from boostsec.incident_reporter.reconciler import UnmatchedFailurePolicy
from boostsec.incident_reporter.summary import build_summary
from boostsec.incident_reporter.threshold_loader import (
    load_perf_execution,
    load_thresholds,
)

# Configure logging - force reconfiguration
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
    force=True,  # Force reconfiguration even if already set up
)
logger = logging.getLogger(__name__)

app = typer.Typer()


@app.command()
def incident(  # noqa: PLR0913
    service: str = typer.Option(..., help="Name identifying the incident service"),
    repository: str = typer.Option(
        ..., help="GitHub repository holding the issues (owner/repo)"
    ),
    github_token: str = typer.Option(
        ..., envvar="GITHUB_TOKEN", help="GitHub token used for authentication"
    ),
    source_type: str = typer.Option(
        "xml", "--source-type", "-t", help="Report format (xml, json, json-perf)"
    ),
    source_path: Path | None = typer.Option(  # noqa: B008
        None, help="A report file or a folder containing report files"
    ),
    incident_message: str = typer.Option(
        "", help="Incident message, used when no report is available"
    ),
    incident_details_path: Path | None = typer.Option(  # noqa: B008
        None, help="File whose content is appended to a message incident"
    ),
    source_url: str = typer.Option("", help="Link to the CI run"),
    issue_label: str = typer.Option("incident", help="Label of created issues"),
    assignee: str | None = typer.Option(
        None, help="Fixed assignee, skips the repository property lookup"
    ),
    assignee_property: str = typer.Option(
        "Champion", help="Repository custom property holding the assignee"
    ),
    force_success: bool = typer.Option(
        False, help="Force the failure count to 0, whatever the reports say"
    ),
    create_unmatched: bool = typer.Option(
        False, help="Open an issue for failures matching no existing issue"
    ),
    dry_run: bool = typer.Option(False, help="Decide without changing issues"),
) -> None:
    """Create, close or reopen the incident issue of a CI run."""
    logger.info("=" * 80)
    logger.info("Incident Reporter - Starting")
    logger.info("=" * 80)
    logger.info(f"Service: {service}")
    logger.info(f"Repository: {repository}")
    logger.info(f"Source: {source_path or 'incident message'} ({source_type})")

    try:
        tracker = _create_tracker(
            repository=repository,
            token=github_token,
            issue_label=issue_label,
            assignee=assignee,
            assignee_property=assignee_property,
        )
    except ValueError as e:
        logger.error(f"Failed to create issue tracker: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    policy = (
        UnmatchedFailurePolicy.CREATE
        if create_unmatched
        else UnmatchedFailurePolicy.IGNORE
    )
    orchestrator = IncidentOrchestrator(
        tracker, unmatched_policy=policy, dry_run=dry_run
    )

    try:
        current_incident, action = asyncio.run(
            orchestrator.process(
                service,
                source_type=source_type,
                source_path=source_path,
                incident_message=incident_message,
                details_path=incident_details_path,
                source_url=source_url,
                forced_success=force_success,
            )
        )
    except Exception as e:
        logger.exception("Incident reconciliation failed")
        typer.echo(f"Error processing incident: {e}", err=True)
        raise typer.Exit(code=1)

    output = {
        "service": current_incident.service,
        "dedup_key": current_incident.dedup_key,
        "title": current_incident.title,
        "counts": current_incident.counts.model_dump(),
        "action": action.kind.value,
        "reason": action.reason,
        "dry_run": dry_run,
        "issues": [{"number": i.number, "url": i.url} for i in action.issues],
    }
    typer.echo(json.dumps(output, indent=2))


@app.command(name="analyze")
def analyze_command(
    runs_file: Path = typer.Option(..., help="Run statistics JSON file"),  # noqa: B008
    thresholds_file: Path = typer.Option(  # noqa: B008
        ..., help="Threshold specification (JSON or YAML)"
    ),
    report_file: Path | None = typer.Option(  # noqa: B008
        None, help="Where to save the analysis report"
    ),
    fail_on_error: bool = typer.Option(
        False, help="Exit with an error when a metric fails its threshold"
    ),
) -> None:
    """Analyze performance run statistics against thresholds."""
    try:
        execution = load_perf_execution(runs_file)
        thresholds = load_thresholds(thresholds_file)
    except (FileNotFoundError, ValueError, ParseError) as e:
        logger.error(f"Failed to load analysis inputs: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    records = analyze(execution, thresholds)
    failures = failing_records(records)

    if report_file is not None:
        save_analysis(report_file, execution, records)

    output = {
        "analyzed": len(records),
        "failed": len(failures),
        "failures": [record.describe() for record in failures],
    }
    typer.echo(json.dumps(output, indent=2))

    if failures:
        logger.error(f"Metrics failing their threshold: {len(failures)}")
        if fail_on_error:
            raise typer.Exit(code=1)


@app.command()
def summary(
    source_path: Path = typer.Option(  # noqa: B008
        ..., help="A report file or a folder containing report files"
    ),
    source_type: str = typer.Option(
        "xml", "--source-type", "-t", help="Report format (xml, json, json-perf)"
    ),
) -> None:
    """Print the summary of a test report."""
    try:
        run = ingest_report(source_type, source_path)
    except (FileNotFoundError, ValueError, ParseError) as e:
        logger.error(f"Failed to ingest report: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(build_summary(run, source_type))


def _create_tracker(
    repository: str,
    token: str,
    issue_label: str,
    assignee: str | None,
    assignee_property: str,
) -> GitHubIssueTracker:
    """Create the GitHub issue tracker, honoring GITHUB_API_URL."""
    config = GitHubConfig(
        token=token,
        repository=repository,
        issue_label=issue_label,
        assignee=assignee,
        assignee_property=assignee_property,
    )
    if "GITHUB_API_URL" in os.environ:
        config.base_url = os.environ["GITHUB_API_URL"]
    return GitHubIssueTracker(config)


if __name__ == "__main__":  # pragma: no cover
    app()
