"""
Main CLI entry point for LokiEye.

This module provides the command-line front end: it fetches logs from Loki,
shows them, and runs the AI analysis on the fetched batch.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from lokieye import __version__
from lokieye.analyzer import (
    AnalysisError,
    AnalysisOrchestrator,
    AnalyzerSettings,
    ProviderConfig,
)
from lokieye.fetcher import FetchError, LokiClient, QueryConfig, count_levels
from lokieye.schemas import AnalysisResult, LogEntry
from lokieye.utils.logger import get_logger, set_level

app = typer.Typer(
    name="lokieye",
    help="LokiEye - fetch logs from Grafana Loki and get an AI incident summary",
    add_completion=False,
)

console = Console()
logger = get_logger(__name__)

LEVEL_STYLES = {
    "error": "bold red",
    "warn": "yellow",
    "info": "blue",
    "debug": "magenta",
    "unknown": "dim",
}

PRIORITY_STYLES = {
    "high": "bold red",
    "medium": "yellow",
    "low": "green",
}

UrlOption = Annotated[
    str | None,
    typer.Option("--url", "-u", help="Loki base URL [env: LOKI_URL]"),
]
TokenOption = Annotated[
    str | None,
    typer.Option("--token", "-t", help="Bearer token or full Authorization value [env: LOKI_TOKEN]"),
]
QueryOption = Annotated[
    str | None,
    typer.Option("--query", "-q", help='LogQL query, e.g. {job="varlogs"} [env: LOKI_QUERY]'),
]
LimitOption = Annotated[
    int,
    typer.Option("--limit", "-n", help="Maximum number of log lines", min=1, max=5000),
]
RangeOption = Annotated[
    str | None,
    typer.Option("--range", "-r", help="Lookback window: 15m, 1h, 6h, 24h, 7d"),
]
RetriesOption = Annotated[
    int,
    typer.Option("--retries", help="Retry the Loki query this many times on failure", min=0, max=10),
]
TimeoutOption = Annotated[
    float | None,
    typer.Option("--timeout", help="Request timeout in seconds (default: none)", min=1),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Enable verbose output"),
]


async def fetch_with_retries(
    client: LokiClient,
    config: QueryConfig,
    retries: int = 0,
) -> list[LogEntry]:
    """
    Fetch logs, retrying on FetchError with exponential backoff.

    Args:
        client: Loki client
        config: Query configuration
        retries: Extra attempts after the first failure (0 = no retry)

    Returns:
        Entries returned by the successful attempt

    Raises:
        FetchError: If every attempt failed
    """
    entries: list[LogEntry] = []
    async for attempt in AsyncRetrying(
        retry=retry_if_exception_type(FetchError),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        stop=stop_after_attempt(retries + 1),
        reraise=True,
    ):
        with attempt:
            if attempt.retry_state.attempt_number > 1:
                logger.warning(
                    f"Retrying Loki query (attempt {attempt.retry_state.attempt_number}/{retries + 1})"
                )
            entries = await client.fetch(config)
    return entries


def _render_logs(entries: list[LogEntry], max_rows: int) -> None:
    table = Table(title=f"Logs ({len(entries)} lines, newest first)", show_lines=False)
    table.add_column("Timestamp", style="cyan", no_wrap=True)
    table.add_column("Level", no_wrap=True)
    table.add_column("Line", overflow="fold")

    for entry in entries[:max_rows]:
        style = LEVEL_STYLES[entry.level]
        table.add_row(entry.timestamp, f"[{style}]{entry.level.upper()}[/{style}]", entry.line)

    console.print(table)
    if len(entries) > max_rows:
        console.print(f"[dim]... {len(entries) - max_rows} more lines not shown[/dim]")


def _render_counts(entries: list[LogEntry]) -> None:
    counts = count_levels(entries)
    parts = [
        f"[{LEVEL_STYLES[level]}]{level}: {count}[/{LEVEL_STYLES[level]}]"
        for level, count in counts.items()
        if count
    ]
    console.print("[bold]Levels:[/bold] " + ("  ".join(parts) if parts else "none"))


def _render_analysis(result: AnalysisResult) -> None:
    console.print(Panel(result.summary, title="Summary", border_style="blue"))

    if result.detected_errors:
        errors = Table(title="Detected Errors")
        errors.add_column("Type", style="bold red")
        errors.add_column("Description", overflow="fold")
        errors.add_column("Count", justify="right")
        for error in result.detected_errors:
            errors.add_row(error.type, error.description, str(error.count))
        console.print(errors)

    if result.recommendations:
        recs = Table(title="Recommendations")
        recs.add_column("Priority", no_wrap=True)
        recs.add_column("Title", style="bold")
        recs.add_column("Action", overflow="fold")
        for rec in result.recommendations:
            style = PRIORITY_STYLES[rec.priority]
            recs.add_row(f"[{style}]{rec.priority.upper()}[/{style}]", rec.title, rec.action)
        console.print(recs)


def _write_json(path: Path, data: Any) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    console.print(f"Output written to: {path}")


def _query_config(
    url: str | None,
    token: str | None,
    query: str | None,
    limit: int | None = None,
    lookback: str | None = None,
) -> QueryConfig:
    try:
        return QueryConfig.from_env(
            url=url, token=token, query=query, limit=limit, lookback=lookback
        )
    except ValueError as e:
        console.print(f"[bold red]Configuration Error:[/bold red] {e}")
        raise typer.Exit(1) from e


@app.command()
def check(
    url: UrlOption = None,
    token: TokenOption = None,
) -> None:
    """
    Check that the Loki backend is reachable.

    Lists labels with a 5 second bound. Exits with status 1 if the backend
    cannot be reached or does not answer with a 2xx status.
    """
    config = _query_config(url, token, None)

    async def run_check() -> bool:
        async with LokiClient() as client:
            return await client.test_connectivity(config)

    if asyncio.run(run_check()):
        console.print(f"[bold green]Connected:[/bold green] {config.url}")
    else:
        console.print(f"[bold red]Cannot connect:[/bold red] {config.url}")
        raise typer.Exit(1)


@app.command()
def fetch(
    url: UrlOption = None,
    token: TokenOption = None,
    query: QueryOption = None,
    limit: LimitOption = 100,
    lookback: RangeOption = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the entries to this JSON file"),
    ] = None,
    max_rows: Annotated[
        int,
        typer.Option("--max-rows", help="Maximum number of lines to print", min=0),
    ] = 50,
    retries: RetriesOption = 0,
    timeout: TimeoutOption = None,
    verbose: VerboseOption = False,
) -> None:
    """
    Fetch and classify logs without AI analysis.

    Examples:

        # Last 100 lines of a stream
        lokieye fetch -u http://localhost:3100 -q '{job="varlogs"}'

        # Errors from the last 6 hours, saved to a file
        lokieye fetch -q '{app="api"} |= "error"' -r 6h -o logs.json
    """
    if verbose:
        set_level(logging.DEBUG)
    config = _query_config(url, token, query, limit, lookback)

    async def run_fetch() -> list[LogEntry]:
        async with LokiClient(timeout=timeout) as client:
            return await fetch_with_retries(client, config, retries)

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task("Fetching logs from Loki...", total=None)
            entries = asyncio.run(run_fetch())
    except FetchError as e:
        console.print(f"[bold red]Could not reach log source:[/bold red] {e}")
        if verbose:
            console.print_exception()
        raise typer.Exit(1) from None

    if not entries:
        console.print("[yellow]No logs found matching the filter.[/yellow]")
    else:
        _render_logs(entries, max_rows)
        _render_counts(entries)

    if output:
        _write_json(output, [entry.model_dump() for entry in entries])


@app.command()
def analyze(
    url: UrlOption = None,
    token: TokenOption = None,
    query: QueryOption = None,
    limit: LimitOption = 100,
    lookback: RangeOption = None,
    provider: Annotated[
        str,
        typer.Option("--provider", "-p", help="LLM provider to use for analysis"),
    ] = "gemini",
    model: Annotated[
        str | None,
        typer.Option("--model", "-m", help="Model identifier (provider default if omitted)"),
    ] = None,
    api_key: Annotated[
        str | None,
        typer.Option("--api-key", "-k", help="Provider API key (Gemini falls back to GEMINI_API_KEY)"),
    ] = None,
    language: Annotated[
        str,
        typer.Option("--language", "-l", help="Language of the analysis (en=English, ru=Russian)"),
    ] = "en",
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the analysis to this JSON file"),
    ] = None,
    show_logs: Annotated[
        bool,
        typer.Option("--show-logs", help="Print the fetched log lines too"),
    ] = False,
    retries: RetriesOption = 0,
    timeout: TimeoutOption = None,
    verbose: VerboseOption = False,
) -> None:
    """
    Fetch logs and produce an AI incident summary.

    The most recent 50 lines are sent to the provider. The summary lists
    recurring error patterns with counts and prioritised remediation steps.

    Examples:

        # Gemini with the key from GEMINI_API_KEY
        lokieye analyze -q '{job="varlogs"}' -r 1h

        # OpenAI
        lokieye analyze -q '{app="api"}' -p openai -k sk-...

        # OpenRouter with a specific model, Russian output
        lokieye analyze -p openrouter -m anthropic/claude-3.5-haiku -k ... -l ru
    """
    if verbose:
        set_level(logging.DEBUG)
    query_config = _query_config(url, token, query, limit, lookback)

    try:
        provider_config = ProviderConfig(
            provider=provider,
            api_key=api_key,
            model=model,
            language=language,
            timeout=timeout,
        )
    except ValueError as e:
        console.print(f"[bold red]Configuration Error:[/bold red] {e}")
        raise typer.Exit(1) from e

    orchestrator = AnalysisOrchestrator(AnalyzerSettings.from_env())

    console.print("[bold blue]LokiEye - AI Log Analysis[/bold blue]")
    console.print(f"Loki: {query_config.url}")
    console.print(f"Query: {query_config.query}")
    console.print(f"Provider: {provider_config.provider}")
    console.print()

    async def run_fetch() -> list[LogEntry]:
        async with LokiClient(timeout=timeout) as client:
            return await fetch_with_retries(client, query_config, retries)

    try:
        with console.status("Fetching logs from Loki..."):
            entries = asyncio.run(run_fetch())
    except FetchError as e:
        console.print(f"[bold red]Could not reach log source:[/bold red] {e}")
        if verbose:
            console.print_exception()
        raise typer.Exit(1) from None

    if not entries:
        console.print("[yellow]No logs found matching the filter.[/yellow]")
        return

    if show_logs:
        _render_logs(entries, max_rows=50)
    _render_counts(entries)

    try:
        with console.status(f"Analyzing with {provider_config.provider}..."):
            result = asyncio.run(orchestrator.analyze(entries, provider_config))
    except AnalysisError as e:
        console.print(f"[bold red]Logs loaded, analysis failed:[/bold red] {e}")
        if verbose:
            console.print_exception()
        logger.error(f"Analysis error: {e}", exc_info=verbose)
        raise typer.Exit(2) from None

    console.print()
    _render_analysis(result)

    if output:
        _write_json(output, result.to_json_dict())


@app.command()
def models(
    provider: Annotated[
        str,
        typer.Argument(help="Provider to list models for"),
    ],
    api_key: Annotated[
        str | None,
        typer.Option("--api-key", "-k", help="Provider API key"),
    ] = None,
) -> None:
    """List models available for a provider (best effort)."""
    orchestrator = AnalysisOrchestrator(AnalyzerSettings.from_env())
    available = asyncio.run(orchestrator.list_available_models(provider, api_key))

    if not available:
        console.print(f"[yellow]No models available for {provider}.[/yellow] Check the API key.")
        return

    table = Table(title=f"{provider} models")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    for info in available:
        table.add_row(info.id, info.name)
    console.print(table)


@app.command()
def version() -> None:
    """Display version information."""
    console.print(f"[bold]LokiEye[/bold] version {__version__}")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
