#!/usr/bin/env python3
"""
Node Checker CLI

Command-line interface for checking Ethereum nodes and verifying saved light
client updates.
"""

import logging
import re
import sys
from typing import List, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import config
from .checks import CheckResult
from .checks.beacon import check_lcu_file
from .detect import NodeDetectionError
from .main import NodeReport, check_node

# Configure rich console
console = Console()
logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def parse_urls(values: List[str]) -> List[str]:
    """Split arguments on commas and whitespace, dropping empty entries."""
    urls = []
    for value in values:
        urls.extend(u for u in re.split(r"[,\s]+", value) if u)
    return urls


def result_symbol(result: CheckResult) -> str:
    if result.passed:
        return "✅"
    return "❌" if result.required else "⚠️"


def print_report(report: NodeReport):
    """Print the check results of one node as a table."""
    table = Table(title=f"{report.url} ({report.type})")
    table.add_column("", no_wrap=True)
    table.add_column("Check", style="cyan")
    table.add_column("Result")

    for result in report.results:
        style = "green" if result.passed else ("red" if result.required else "yellow")
        table.add_row(result_symbol(result), result.name, f"[{style}]{escape(result.result)}[/{style}]")

    console.print(table)


def print_summary(reports: List[NodeReport]):
    """Print which of the checked nodes are suitable."""
    suitable = [r for r in reports if r.suitable]
    console.print("\n[bold cyan]Summary:[/bold cyan]")
    if not suitable:
        console.print("[red]No suitable nodes found[/red]")
        return
    console.print(f"[green]{len(suitable)} of {len(reports)} nodes suitable:[/green]")
    for report in suitable:
        console.print(f"  ✅ {report.url} ({report.type})")


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx, verbose: bool):
    """
    Node Checker CLI - Check Ethereum nodes for colibri light client support.

    Detects whether a URL serves a beacon node, an execution node or a colibri
    prover, runs the matching checks and reports whether the node is suitable.
    """
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


@cli.command()
@click.argument("urls", nargs=-1, required=True)
@click.option(
    "--history-depth",
    type=click.IntRange(min=1),
    default=None,
    help=f"Sync committee periods to verify on beacon nodes (default: {config.HISTORY_DEPTH})",
)
@click.option("--timeout", type=float, default=None, help="Request timeout in seconds")
def check(urls: List[str], history_depth: Optional[int] = None, timeout: Optional[float] = None):
    """
    Check one or more nodes.

    URLS: Node URLs or saved light client update files, separated by spaces or commas
    """
    reports = []
    for url in parse_urls(urls):
        console.print(f"[cyan]Checking {url}...[/cyan]")
        try:
            report = check_node(url, history_depth=history_depth, timeout=timeout)
        except (NodeDetectionError, FileNotFoundError, ValueError) as e:
            console.print(f"[red]❌ {url}: {escape(str(e))}[/red]")
            continue
        print_report(report)
        reports.append(report)

    print_summary(reports)
    if not any(r.suitable for r in reports):
        sys.exit(1)


@cli.command("verify-file")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--history-depth",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum number of periods to verify from a JSON file",
)
def verify_file(path: str, history_depth: Optional[int] = None):
    """
    Verify a saved light client update.

    PATH: SSZ response from the light client updates endpoint, or its JSON form
    """
    try:
        result = check_lcu_file(path, history_depth)
    except Exception as e:
        raise click.ClickException(f"Verification failed: {e}")
    console.print(f"[green]✅ {path}: {escape(result)}[/green]")


@cli.command()
@click.option("--host", default="0.0.0.0", help="Host to bind to")
@click.option("--port", type=int, default=None, help="Port to bind to (default: PORT or 8080)")
@click.option("--dev", is_flag=True, help="Enable auto-reload")
def serve(host: str, port: Optional[int], dev: bool):
    """Start the REST API server."""
    from .api.rest_api import run_server

    port = port or config.PORT
    console.print(f"[cyan]Starting Node Checker API on {host}:{port}[/cyan]")
    run_server(host=host, port=port, dev=dev)


if __name__ == "__main__":
    cli()
