"""Reporting sink for garbage collection cycles.

The engine reports each host outcome as soon as it is known and a final
tally at the end of the cycle.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable

from renterctl.gc.models import GCResult, GCState, HostOutcome, HostStatus

logger = logging.getLogger(__name__)


class Reporter(ABC):
    """Receives per-host outcomes and the end-of-cycle result."""

    @abstractmethod
    def host_outcome(self, outcome: HostOutcome) -> None:
        """Report the outcome of one host."""

    @abstractmethod
    def finish(self, result: GCResult) -> None:
        """Report the end of the cycle."""


def format_tally(result: GCResult) -> str:
    """Build the end-of-cycle tally line.

    Args:
        result: Final cycle result.

    Returns:
        Human-readable summary of the cycle.
    """
    if result.state == GCState.CANCELLED and not result.deleted:
        return "Aborted; no sectors were deleted."

    failures = len(result.failures)
    planned = [o for o in result.outcomes if o.status == HostStatus.PLANNED]
    if result.state == GCState.CANCELLED:
        tally = (
            f"Interrupted; deleted {result.total_deleted} sectors "
            f"from {len(result.deleted)} host(s)"
        )
    elif result.summary is not None and result.summary.garbage_count == 0:
        tally = "No unreferenced sectors found"
    elif planned:
        sectors = sum(o.sectors for o in planned)
        tally = f"Dry run: would delete {sectors} sectors from {len(planned)} host(s)"
    else:
        tally = f"Deleted {result.total_deleted} sectors from {len(result.deleted)} host(s)"
    if failures:
        tally += f", {failures} host(s) failed"
    return tally + "."


class LineReporter(Reporter):
    """Emits one line per host and a final tally through a callable.

    Args:
        emit: Receives each formatted line. Defaults to the module logger.
    """

    def __init__(self, emit: Callable[[str], None] | None = None) -> None:
        self._emit = emit or logger.info

    def host_outcome(self, outcome: HostOutcome) -> None:
        self._emit(f"{outcome.short_key}: {outcome.message}")

    def finish(self, result: GCResult) -> None:
        self._emit(format_tally(result))
