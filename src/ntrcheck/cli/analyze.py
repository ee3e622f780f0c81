"""ntrcheck analyze — run the compliance analysis on one issue."""

import asyncio
import json
from pathlib import Path

import httpx
import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from ntrcheck.broker import GeneLookupBroker, HttpTransport, LocalTransport
from ntrcheck.config import config
from ntrcheck.host.controller import ControllerRegistry
from ntrcheck.host.settings_store import JsonFileSettingsStore
from ntrcheck.models import (
    NEW_TERM_REQUEST_LABEL,
    AnalysisReport,
    IssuePage,
    RunState,
)
from ntrcheck.services.github import fetch_issue, parse_issue_url

console = Console()

_STATUS_STYLE = {
    "OK": "[green]✔ OK[/green]",
    "NOT_APPLICABLE": "[dim]- N/A[/dim]",
    "MISSING": "[yellow]⚠ MISSING[/yellow]",
    "INCOMPLETE": "[yellow]⚠ INCOMPLETE[/yellow]",
    "INVALID_FORMAT": "[yellow]⚠ INVALID FORMAT[/yellow]",
}


def analyze_cmd(
    url: str = typer.Argument(None, help="GitHub issue URL"),
    title: str = typer.Option(None, "--title", "-t", help="Issue title (instead of a URL)"),
    body: str = typer.Option("", "--body", "-b", help="Issue body text"),
    body_file: Path = typer.Option(None, "--body-file", help="Read the issue body from a file"),
    output: Path = typer.Option(None, "--output", "-o", help="Write the HTML fragment here"),
    output_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
    label_check: bool = typer.Option(
        True, "--label-check/--no-label-check",
        help=f"Require the '{NEW_TERM_REQUEST_LABEL}' label on fetched issues",
    ),
    broker_url: str = typer.Option(
        None, "--broker-url", help="Send gene lookups to a running `ntrcheck serve`",
    ),
):
    """Analyze a new term request issue against the Mondo template."""
    if not url and not title:
        console.print("[red]Error: give an issue URL or --title[/red]")
        raise typer.Exit(code=2)
    if body_file is not None:
        body = body_file.read_text()
    asyncio.run(_run(url, title, body, output, output_json, label_check, broker_url))


async def _load_page(http: httpx.AsyncClient, url: str | None, title: str | None, body: str) -> IssuePage:
    if url:
        repo, number = parse_issue_url(url)
        return await fetch_issue(http, repo, number)
    return IssuePage(title=title or "", body=body, labels=[NEW_TERM_REQUEST_LABEL])


async def _run(
    url: str | None,
    title: str | None,
    body: str,
    output: Path | None,
    output_json: bool,
    label_check: bool,
    broker_url: str | None,
) -> None:
    async with httpx.AsyncClient(timeout=config.http_timeout, follow_redirects=True) as http:
        try:
            page = await _load_page(http, url, title, body)
        except Exception as exc:
            console.print(f"[red]Error: {exc}[/red]")
            raise typer.Exit(code=1)

        if not label_check:
            page = page.model_copy(update={"labels": [*page.labels, NEW_TERM_REQUEST_LABEL]})

        if broker_url:
            transport = HttpTransport(http, broker_url)
        else:
            transport = LocalTransport(GeneLookupBroker(http))
        registry = ControllerRegistry(
            store=JsonFileSettingsStore(config.settings_store.path),
            http=http,
            transport=transport,
        )
        controller = registry.controller_for(page)
        if not controller.inject():
            console.print(
                f"[yellow]Issue is not labelled '{NEW_TERM_REQUEST_LABEL}'; nothing to analyze.[/yellow]"
            )
            raise typer.Exit(code=1)

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task("Starting analysis...", total=None)
            terminal = await controller.analyze(
                listener=lambda event: progress.update(task, description=event.message),
            )

    result = terminal.result
    if output is not None and terminal.html:
        output.write_text(terminal.html)
        console.print(f"[dim]HTML written to {output}[/dim]")

    if output_json:
        typer.echo(json.dumps(result.model_dump(mode="json", by_alias=True), indent=2))
    elif isinstance(result, AnalysisReport):
        _print_report(page, result)

    if terminal.state == RunState.FAILED:
        console.print(f"[red]{terminal.message}[/red]")
        raise typer.Exit(code=1)


def _print_report(page: IssuePage, report: AnalysisReport) -> None:
    action = (report.recommended_action or "NONE").replace("_", " ")
    console.print()
    console.print(Panel(
        f"{report.summary or ''}\n\n"
        f"[bold]Recommended action:[/bold] {action}"
        + (f" - {report.action_comment}" if report.action_comment else ""),
        title=page.title,
        border_style="cyan",
    ))

    table = Table(title="Template Checklist")
    table.add_column("Field", style="bold")
    table.add_column("Status")
    table.add_column("Comment")
    for item in report.checks:
        status = _STATUS_STYLE.get((item.status or "").upper(), f"[red]✖ {item.status or 'NONE'}[/red]")
        table.add_row(item.field, status, item.comment or "")
    console.print(table)
