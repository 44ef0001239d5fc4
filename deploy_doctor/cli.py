"""Command-line interface for the Netlify deployment diagnostics.

This module exposes the same reports as the MCP server for use from a
terminal. Each command fetches fresh data from Netlify, runs the diagnostics
engine and renders the resulting markdown report with Rich.
"""

import asyncio
from typing import Awaitable

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from typing_extensions import Annotated

from . import reports
from .client import NetlifyAPIError
from .config import AppConfig
from .monitor import DeploymentMonitor

app = typer.Typer(
    name="deploy-doctor",
    help="Netlify deployment diagnostics",
    rich_markup_mode="rich",
)

console = Console()


def _render(report: str):
    # keep report line breaks inside markdown paragraphs
    console.print(Markdown(report.replace("\n", "  \n")))


def _run(action: str, coro: Awaitable):
    """Run a monitor coroutine, turning API failures into a clean exit."""
    try:
        return asyncio.run(coro)
    except NetlifyAPIError as e:
        console.print(f"[red]❌ Error {action}: {e}[/red]")
        raise typer.Exit(code=1)


def _monitor() -> DeploymentMonitor:
    config = AppConfig()
    if not config.netlify.access_token:
        console.print(
            "[yellow]⚠️ NETLIFY_ACCESS_TOKEN is not set - check your .env file[/yellow]"
        )
    return DeploymentMonitor(config)


@app.command()
def sites():
    """List all Netlify sites in your account."""
    result = _run("listing sites", _monitor().list_sites())
    _render(reports.format_sites(result))


@app.command()
def status(
    site_id: Annotated[str, typer.Argument(help="Netlify site ID")],
    advanced: Annotated[
        bool, typer.Option("--advanced", "-a", help="Include build usage and latest failure")
    ] = False,
    limit: Annotated[int, typer.Option("--limit", "-n", help="Deployments to show")] = 5,
):
    """Show recent deployments of a site."""
    monitor = _monitor()
    if advanced:
        result = _run("fetching deployment status", monitor.site_status(site_id))
        _render(reports.format_site_status(result))
    else:
        result = _run("checking deployment status", monitor.deployment_status(site_id, limit))
        _render(reports.format_deployment_status(site_id, result))


@app.command()
def metrics(site_id: Annotated[str, typer.Argument(help="Netlify site ID")]):
    """Show build-minute usage and the monthly quota status."""
    monitor = _monitor()
    result = _run("checking build minutes", monitor.build_metrics(site_id))
    _render(reports.format_build_minutes(result, monitor.engine.quota_status(result)))


@app.command()
def analyze(deploy_id: Annotated[str, typer.Argument(help="Deployment ID")]):
    """Classify a deployment's build error."""
    result = _run("analyzing build error", _monitor().analyze_build_error(deploy_id))
    _render(reports.format_error_analysis(result))


@app.command()
def retry(deploy_id: Annotated[str, typer.Argument(help="Failed deployment ID")]):
    """Decide whether a failed deployment should be retried."""
    result = _run("analyzing retry strategy", _monitor().smart_retry(deploy_id))
    verdict = result.verdict
    console.print(
        Panel.fit(
            "[bold green]RETRY[/bold green]" if verdict.recommended else "[bold red]DO NOT RETRY[/bold red]",
            title=result.classification.category,
        )
    )
    _render(reports.format_retry_analysis(result))


@app.command()
def content(site_id: Annotated[str, typer.Argument(help="Netlify site ID")]):
    """Estimate the build-time impact of content updates."""
    result = _run("analyzing content impact", _monitor().content_analysis(site_id))
    _render(reports.format_content_analysis(result))


@app.command()
def strategy(
    site_id: Annotated[str, typer.Argument(help="Netlify site ID")],
    timeframe: Annotated[
        str, typer.Option("--timeframe", "-t", help="Analysis timeframe: week or month")
    ] = "month",
):
    """Suggest build-strategy optimizations for the free tier."""
    if timeframe not in ("week", "month"):
        console.print(f"[red]ERROR: Invalid timeframe: {timeframe}[/red]")
        raise typer.Exit(code=1)
    result = _run("analyzing build strategy", _monitor().build_strategy(site_id, timeframe))
    _render(reports.format_build_strategy(result))


if __name__ == "__main__":
    app()
