"""Shared Rich display functions for garbage collection.

Provides the summary table shown before deletion, the planned-actions
table used by dry runs, the per-host outcome lines, and the interactive
confirmation prompt.
"""

import typer
from rich.markup import escape
from rich.table import Table

from renterctl.gc.confirm import Confirmation
from renterctl.gc.models import GCResult, GCState, GCSummary, HostOutcome, HostStatus
from renterctl.gc.report import Reporter, format_tally
from renterctl.models.action import WriteAction
from renterctl.utils.formatting import console, filesize_units

# Plans longer than this are abbreviated in the dry-run table
MAX_ACTIONS_SHOWN = 8


def create_summary_table(summary: GCSummary) -> Table:
    """Create a Rich table with the totals of a pending deletion.

    Args:
        summary: Totals from reconciliation.

    Returns:
        Rich Table configured for summary display.
    """
    table = Table(
        title="Garbage Collection",
        show_header=False,
        border_style="border",
    )
    table.add_column("Metric", style="muted")
    table.add_column("Value", justify="right")

    table.add_row("Metafiles scanned", str(summary.files_scanned))
    table.add_row("Sector references", str(summary.referenced_count))
    table.add_row("Hosts", str(summary.host_count))
    table.add_row("Sectors stored", str(summary.original_count))
    table.add_row(
        "Unreferenced sectors",
        f"[warning]{summary.garbage_count}[/warning] ({filesize_units(summary.garbage_bytes)})",
    )
    return table


def create_plan_table(outcomes: list[HostOutcome]) -> Table:
    """Create a Rich table listing the actions each host would receive.

    Args:
        outcomes: Outcomes of a dry run.

    Returns:
        Rich Table configured for plan display.
    """
    table = Table(
        title="Planned Deletions (Dry Run)",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Host", no_wrap=True)
    table.add_column("Sectors", justify="right")
    table.add_column("Actions")

    for outcome in outcomes:
        if outcome.status != HostStatus.PLANNED:
            continue
        shown = [_format_action(a) for a in outcome.actions[:MAX_ACTIONS_SHOWN]]
        if len(outcome.actions) > MAX_ACTIONS_SHOWN:
            shown.append(f"[muted](+{len(outcome.actions) - MAX_ACTIONS_SHOWN} more)[/muted]")
        table.add_row(f"[host]{outcome.short_key}[/host]", str(outcome.sectors), " ".join(shown))

    return table


def _format_action(action: WriteAction) -> str:
    style = "trim" if action.is_trim else "swap"
    return f"[{style}]{action}[/{style}]"


def format_outcome(outcome: HostOutcome) -> str:
    """Format one host outcome with Rich markup.

    Args:
        outcome: Host outcome.

    Returns:
        Markup line such as "abcd1234: Deleted 3 sectors".
    """
    style = {
        HostStatus.DELETED: "success",
        HostStatus.FAILED: "error",
        HostStatus.SKIPPED: "warning",
        HostStatus.PLANNED: "info",
    }.get(outcome.status, "muted")
    return f"[host]{outcome.short_key}[/host]: [{style}]{escape(outcome.message)}[/{style}]"


def print_summary_sentence(summary: GCSummary) -> None:
    """Print the cross-reference sentence shown before the prompt."""
    console.print(
        f"\nCross-referenced {summary.referenced_count} sectors in {summary.files_scanned} "
        f"metafiles with {summary.original_count} sectors stored on {summary.host_count} hosts.\n"
        f"[warning]{summary.garbage_count} unreferenced sectors "
        f"({filesize_units(summary.garbage_bytes)}) will be deleted.[/warning]"
    )


class ConsoleReporter(Reporter):
    """Prints host outcomes and the final tally to the console."""

    def host_outcome(self, outcome: HostOutcome) -> None:
        console.print(format_outcome(outcome))

    def finish(self, result: GCResult) -> None:
        tally = format_tally(result)
        if result.state == GCState.CANCELLED:
            console.print(f"[info]{tally}[/info]")
        elif result.failures:
            console.print(f"\n[warning]{tally}[/warning]")
        else:
            console.print(f"\n[success]{tally}[/success]")


class PromptConfirmation(Confirmation):
    """Shows the summary and asks the user before deleting."""

    def confirm(self, summary: GCSummary) -> bool:
        console.print(create_summary_table(summary))
        print_summary_sentence(summary)
        return typer.confirm("\nProceed with deletion?", default=False)
