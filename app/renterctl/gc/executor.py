"""Deletion executor.

Submits each host's deletion plan as one write batch. Hosts are handled
independently: a failure on one host is reported and the executor moves
on. There is no cross-host rollback.
"""

import logging
from collections.abc import Callable, Iterable, Mapping

from renterctl.gc.models import HostGarbage, HostOutcome, HostStatus
from renterctl.gc.planner import plan_deletion
from renterctl.host.base import (
    HostError,
    HostKeyResolver,
    HostWriteError,
    SessionOpener,
    open_session,
)
from renterctl.models.action import WriteAction
from renterctl.models.host import Contract, HostPublicKey

logger = logging.getLogger(__name__)


class DeletionExecutor:
    """Deletes garbage sectors from hosts.

    Args:
        resolver: Resolves host keys to network addresses.
        opener: Opens host sessions.
        dry_run: If True, compute plans without contacting hosts.
        should_cancel: Polled before each host is started. Once it returns
            True, remaining hosts are skipped. A batch already submitted
            always runs to completion.
    """

    def __init__(
        self,
        resolver: HostKeyResolver,
        opener: SessionOpener,
        *,
        dry_run: bool = False,
        should_cancel: Callable[[], bool] | None = None,
    ) -> None:
        self._resolver = resolver
        self._opener = opener
        self._dry_run = dry_run
        self._should_cancel = should_cancel or (lambda: False)

    def execute(
        self,
        contracts: Iterable[Contract],
        garbage: Mapping[HostPublicKey, HostGarbage],
        on_outcome: Callable[[HostOutcome], None] | None = None,
    ) -> list[HostOutcome]:
        """Delete garbage from every host that has some.

        Contracts whose host is absent from ``garbage`` (hosts that failed
        listing) are ignored. Each host is handled at most once; later
        contracts for a host already handled are ignored.

        Args:
            contracts: Contracts in the order hosts should be processed.
            garbage: Garbage per listed host.
            on_outcome: Called with each outcome as soon as it is known.

        Returns:
            One HostOutcome per listed host.
        """
        outcomes: list[HostOutcome] = []
        handled: set[HostPublicKey] = set()
        cancelled = False

        for contract in contracts:
            host_garbage = garbage.get(contract.host_key)
            if host_garbage is None or contract.host_key in handled:
                continue
            handled.add(contract.host_key)

            if host_garbage.count == 0:
                outcome = HostOutcome(
                    host_key=contract.host_key,
                    status=HostStatus.NOTHING_TO_DELETE,
                )
            elif cancelled or self._should_cancel():
                cancelled = True
                outcome = HostOutcome(host_key=contract.host_key, status=HostStatus.SKIPPED)
            else:
                outcome = self.delete_from_host(contract, host_garbage)

            outcomes.append(outcome)
            if on_outcome is not None:
                on_outcome(outcome)

        return outcomes

    def delete_from_host(self, contract: Contract, host_garbage: HostGarbage) -> HostOutcome:
        """Plan and submit the deletion for one host.

        Args:
            contract: Contract with the host.
            host_garbage: Garbage found on the host.

        Returns:
            DELETED, PLANNED (dry-run) or FAILED outcome.
        """
        actions = plan_deletion(host_garbage.sectors.values(), host_garbage.num_sectors)

        if self._dry_run:
            logger.info(
                "Dry-run: would submit %d action(s) to %s", len(actions), contract.short_key
            )
            return HostOutcome(
                host_key=contract.host_key,
                status=HostStatus.PLANNED,
                sectors=host_garbage.count,
                actions=tuple(actions),
            )

        try:
            self._submit(contract, actions)
        except HostError as e:
            logger.warning("Deletion failed on host %s: %s", contract.short_key, e)
            return HostOutcome(
                host_key=contract.host_key,
                status=HostStatus.FAILED,
                error=str(e),
                actions=tuple(actions),
            )

        logger.info("Deleted %d sector(s) from %s", host_garbage.count, contract.short_key)
        return HostOutcome(
            host_key=contract.host_key,
            status=HostStatus.DELETED,
            sectors=host_garbage.count,
            actions=tuple(actions),
        )

    def _submit(self, contract: Contract, actions: list[WriteAction]) -> None:
        """Open a session and submit ``actions`` as one batch.

        Raises:
            HostUnreachableError: If no session could be opened.
            HostWriteError: If the host fails the batch.
        """
        with open_session(self._resolver, self._opener, contract) as session:
            try:
                session.write(actions)
            except Exception as e:
                msg = f"write rejected: {e}"
                raise HostWriteError(contract.host_key, msg) from e
