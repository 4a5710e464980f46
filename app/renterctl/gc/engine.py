"""Garbage collection cycle.

Ties the stages together::

    SCANNING -> LISTING -> RECONCILING -> DONE                     (no garbage)
                                       -> AWAITING_CONFIRMATION -> CANCELLED
                                                                -> DELETING -> DONE

Only an unreadable metafile aborts the cycle, and it does so before any
host is contacted. Every host-scoped failure becomes a FAILED outcome.
"""

import logging
from collections.abc import Callable, Sequence
from pathlib import Path

from renterctl.gc.confirm import Confirmation
from renterctl.gc.executor import DeletionExecutor
from renterctl.gc.index import ReferenceIndexBuilder
from renterctl.gc.models import GCResult, GCState, GCSummary, HostOutcome, HostStatus
from renterctl.gc.reconcile import reconcile
from renterctl.gc.report import Reporter
from renterctl.gc.scanner import MetadataScanner
from renterctl.host.base import HostKeyResolver, SessionOpener
from renterctl.models.host import Contract, HostPublicKey

logger = logging.getLogger(__name__)


class GarbageCollector:
    """Runs garbage collection cycles against a set of contracts.

    Args:
        contracts: Contracts whose hosts are collected. A host with several
            contracts is collected once, under the last of them.
        resolver: Resolves host keys to network addresses.
        opener: Opens host sessions.
        confirmation: Asked once before anything is deleted. Not consulted
            in dry-run mode.
        reporter: Optional sink for per-host lines and the final tally.
        dry_run: Plan deletions without submitting them.
        should_cancel: Polled before each host deletion starts.
    """

    def __init__(
        self,
        contracts: Sequence[Contract],
        resolver: HostKeyResolver,
        opener: SessionOpener,
        confirmation: Confirmation,
        *,
        reporter: Reporter | None = None,
        dry_run: bool = False,
        should_cancel: Callable[[], bool] | None = None,
    ) -> None:
        by_host: dict[HostPublicKey, Contract] = {}
        for contract in contracts:
            by_host[contract.host_key] = contract
        self._contracts = list(by_host.values())
        self._confirmation = confirmation
        self._reporter = reporter
        self._dry_run = dry_run
        self._index = ReferenceIndexBuilder(resolver, opener)
        self._executor = DeletionExecutor(
            resolver,
            opener,
            dry_run=dry_run,
            should_cancel=should_cancel,
        )
        self._state: GCState | None = None
        self._summary: GCSummary | None = None
        self._outcomes: list[HostOutcome] = []

    @property
    def state(self) -> GCState | None:
        """Current run-level state, None before the first run."""
        return self._state

    def _enter(self, state: GCState) -> None:
        logger.debug("gc: %s -> %s", self._state.value if self._state else "idle", state.value)
        self._state = state

    def _report(self, outcome: HostOutcome) -> None:
        self._outcomes.append(outcome)
        if self._reporter is not None:
            self._reporter.host_outcome(outcome)

    def _finish(self, state: GCState) -> GCResult:
        result = GCResult(state=state, summary=self._summary, outcomes=list(self._outcomes))
        self._enter(state)
        if self._reporter is not None:
            self._reporter.finish(result)
        return result

    def run(self, metafolder: Path | str) -> GCResult:
        """Run one garbage collection cycle.

        Args:
            metafolder: Folder whose metafiles define what is referenced.

        Returns:
            GCResult in state DONE or CANCELLED.

        Raises:
            MetaFileUnreadableError: If any metafile cannot be read. No host
                is contacted in that case.
        """
        self._summary = None
        self._outcomes = []

        self._enter(GCState.SCANNING)
        scan = MetadataScanner(metafolder).scan()

        self._enter(GCState.LISTING)
        listings = self._index.build(self._contracts)

        self._enter(GCState.RECONCILING)
        reconciliation = reconcile(scan, listings)
        self._summary = reconciliation.summary

        for unreachable in reconciliation.unreachable:
            self._report(
                HostOutcome(
                    host_key=unreachable.host_key,
                    status=HostStatus.FAILED,
                    error=unreachable.reason,
                )
            )

        if not reconciliation.has_garbage:
            logger.info("No unreferenced sectors found")
            return self._finish(GCState.DONE)

        if not self._dry_run:
            self._enter(GCState.AWAITING_CONFIRMATION)
            if not self._confirmation.confirm(self._summary):
                logger.info("Deletion declined")
                return self._finish(GCState.CANCELLED)

        self._enter(GCState.DELETING)
        self._executor.execute(self._contracts, reconciliation.garbage, on_outcome=self._report)
        return self._finish(GCState.DONE)

    def interrupted(self) -> GCResult:
        """Close a run that was interrupted before it finished.

        Outcomes reported before the interruption are kept, so hosts that
        were already deleted from still appear in the result. A host whose
        batch was in flight has no outcome.

        Returns:
            GCResult in state CANCELLED.
        """
        logger.info("Run interrupted in state %s", self._state.value if self._state else "idle")
        return self._finish(GCState.CANCELLED)
