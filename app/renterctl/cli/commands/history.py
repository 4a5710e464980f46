"""History command for viewing past garbage collection runs.

This module provides the `renterctl history` command for viewing
which hosts sectors were deleted from, and when.
"""

import json
from datetime import datetime
from typing import Annotated

import typer
from rich.table import Table

from renterctl.core.state import StateManager
from renterctl.models.history import HistoryEntry
from renterctl.models.host import short_key
from renterctl.utils.formatting import console, print_info

# Hosts listed per row before the rest are abbreviated
MAX_HOSTS_SHOWN = 3

app = typer.Typer(
    name="history",
    help="View history of sector deletions.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def history(
    ctx: typer.Context,
    limit: Annotated[
        int,
        typer.Option(
            "--limit",
            "-n",
            help="Maximum number of entries to show.",
        ),
    ] = 20,
    since: Annotated[
        str | None,
        typer.Option(
            "--since",
            help="Show entries since date (YYYY-MM-DD).",
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON.",
        ),
    ] = False,
) -> None:
    """Show history of sector deletions.

    Every garbage collection run that deleted something is recorded with
    the hosts it touched and how many sectors each lost.

    Examples:
        renterctl history              # Show last 20 entries
        renterctl history -n 50        # Show last 50 entries
        renterctl history --since 2026-01-01
        renterctl history --json       # JSON output for scripting
    """
    if ctx.invoked_subcommand is not None:
        return

    entries = StateManager().get_history(limit=limit)

    if since:
        try:
            since_parsed = datetime.fromisoformat(since)
        except ValueError:
            typer.echo(f"Invalid date format: {since}. Use YYYY-MM-DD.", err=True)
            raise typer.Exit(code=1) from None

        if since_parsed.tzinfo is None:
            # Naive dates compare by calendar day
            since_date = since_parsed.strftime("%Y-%m-%d")
            entries = [e for e in entries if e.timestamp[:10] >= since_date]
        else:
            entries = [e for e in entries if _parse_timestamp(e.timestamp) >= since_parsed]

    if not entries:
        print_info("No history entries found.")
        return

    if json_output:
        _print_json(entries)
    else:
        _print_table(entries)


def _print_table(entries: list[HistoryEntry]) -> None:
    """Print history as Rich table.

    Args:
        entries: List of history entries to display.
    """
    table = Table(title="Deletion History", header_style="bold_header", border_style="border")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Timestamp", style="info", no_wrap=True)
    table.add_column("Hosts", style="text")
    table.add_column("Sectors", justify="right", style="warning")
    table.add_column("Metafolder", style="muted")

    for entry in entries:
        hosts = ", ".join(short_key(item.host) for item in entry.items[:MAX_HOSTS_SHOWN])
        if len(entry.items) > MAX_HOSTS_SHOWN:
            hosts += f" (+{len(entry.items) - MAX_HOSTS_SHOWN} more)"

        table.add_row(
            entry.id[:8],
            _format_timestamp(entry.timestamp),
            hosts,
            str(entry.total_sectors),
            str(entry.metadata.get("metafolder", "")),
        )

    console.print(table)


def _parse_timestamp(iso_timestamp: str) -> datetime:
    return datetime.fromisoformat(iso_timestamp.replace("Z", "+00:00"))


def _format_timestamp(iso_timestamp: str) -> str:
    """Format ISO timestamp for display as YYYY-MM-DD HH:MM."""
    return _parse_timestamp(iso_timestamp).strftime("%Y-%m-%d %H:%M")


def _print_json(entries: list[HistoryEntry]) -> None:
    """Print history as JSON for scripting."""
    output = [entry.to_dict() for entry in entries]
    typer.echo(json.dumps(output, indent=2))
