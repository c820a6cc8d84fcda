# rn_version_labeler/cli.py

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from pydantic import SecretStr, ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from rn_version_labeler.config.settings import (
    ConfigurationError,
    IssueContext,
    get_settings,
)
from rn_version_labeler.extraction.version_extractor import extract_version_from_body
from rn_version_labeler.github_client import GitHubClient, GitHubClientConfig, TrackerError
from rn_version_labeler.labels import label_for_version
from rn_version_labeler.reconcile import ReconcileResult, ReconcileStatus, reconcile_issue

app = typer.Typer(help="Keep an issue's 'Version: x.y.z' label in sync with its body.")
console = Console()

EXIT_OK = 0
EXIT_MUTATION_FAILED = 1
EXIT_CONFIG_ERROR = 2

logger = logging.getLogger("rn_version_labeler")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _print_result(result: ReconcileResult) -> None:
    if result.status == ReconcileStatus.SKIPPED:
        console.print(f"[yellow]Skipped:[/yellow] {result.reason.value if result.reason else ''}")
        return

    plan = result.plan
    console.print(f"Detected version: [bold]{result.version or 'none'}[/bold]")
    if plan is not None:
        console.print(f"Target label: [bold]{plan.target}[/bold]")
        if plan.is_noop:
            console.print("[green]Labels already up to date.[/green]")
            return

    table = Table("Action", "Label", "Result")
    for outcome in result.outcomes:
        if outcome.skipped:
            status = f"[yellow]skipped[/yellow] {outcome.error or ''}".rstrip()
        elif outcome.ok:
            status = "[green]ok[/green]"
        else:
            status = f"[red]failed[/red] {outcome.error or ''}".rstrip()
        table.add_row(outcome.action, outcome.label, status)
    console.print(table)


@app.command("run")
def run(
    owner: Optional[str] = typer.Option(
        None, "--owner", help="Repository owner. Defaults to the workflow's repository."
    ),
    repo: Optional[str] = typer.Option(
        None, "--repo", help="Repository name. Defaults to the workflow's repository."
    ),
    issue: Optional[int] = typer.Option(
        None, "--issue", "-i", help="Issue number. Defaults to the issue in the event payload."
    ),
    required_label: Optional[str] = typer.Option(
        None, "--required-label", help="Only reconcile issues carrying this label."
    ),
    token: Optional[str] = typer.Option(
        None, "--token", help="GitHub token (prefer the GITHUB_TOKEN env var)."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Compute label changes without applying them."
    ),
) -> None:
    """
    Reconcile the version label of one issue.

    Example (outside Actions):
        rn-version-labeler run --owner facebook --repo react-native -i 1234 \\
            --required-label "Needs: Triage"
    """
    try:
        settings = get_settings()
    except ValidationError as exc:
        console.print(f"[red]Configuration error:[/red] invalid settings\n{escape(str(exc))}")
        raise typer.Exit(code=EXIT_CONFIG_ERROR)
    _configure_logging(settings.log_level)

    if token:
        settings = settings.model_copy(update={"github_token": SecretStr(token)})
    if required_label:
        settings = settings.model_copy(update={"required_label": required_label})

    try:
        _, gate_label = settings.require_credentials()
        if owner and repo and issue is not None:
            ctx = IssueContext(owner=owner, repo=repo, number=issue)
        else:
            env_ctx = IssueContext.from_env()
            ctx = IssueContext(
                owner=owner or env_ctx.owner,
                repo=repo or env_ctx.repo,
                number=issue if issue is not None else env_ctx.number,
            )
    except ConfigurationError as exc:
        console.print(f"[red]Configuration error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=EXIT_CONFIG_ERROR)

    config = GitHubClientConfig.from_settings(settings)
    client = GitHubClient(config)

    console.rule(f"[bold cyan]{ctx.owner}/{ctx.repo}#{ctx.number}[/bold cyan]")

    try:
        result = reconcile_issue(
            client,
            ctx.owner,
            ctx.repo,
            ctx.number,
            gate_label,
            max_workers=settings.max_workers,
            dry_run=dry_run,
        )
    except TrackerError as exc:
        logger.error("Could not read issue state: %s", exc)
        console.print(f"[red]Failed to read issue:[/red] {escape(str(exc))}")
        raise typer.Exit(code=EXIT_MUTATION_FAILED)

    _print_result(result)

    if result.status == ReconcileStatus.PARTIAL_FAILURE:
        console.print("[red]Some label changes failed.[/red]")
        raise typer.Exit(code=EXIT_MUTATION_FAILED)


@app.command("extract")
def extract(
    path: Optional[Path] = typer.Argument(
        None,
        exists=True,
        dir_okay=False,
        help="Markdown file holding an issue body. Reads stdin when omitted.",
    ),
) -> None:
    """
    Print the version and target label for an issue body, without any API calls.
    """
    body = path.read_text(encoding="utf-8") if path is not None else sys.stdin.read()
    version = extract_version_from_body(body)
    console.print(f"version: {version or '(none)'}")
    console.print(f"label: {label_for_version(version)}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
