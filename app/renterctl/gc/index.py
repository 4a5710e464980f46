"""Reference index builder.

Downloads the sector roots of every host under contract and records
where each root sits in the host's sector array. A host that cannot be
reached or listed is recorded as :class:`Unreachable` and the cycle
continues with the others.
"""

import logging
from collections.abc import Iterable

from renterctl.gc.models import HostListing, Listed, Unreachable
from renterctl.host.base import (
    HostError,
    HostKeyResolver,
    HostListError,
    SessionOpener,
    open_session,
)
from renterctl.models.host import Contract, HostPublicKey, SectorRoot

logger = logging.getLogger(__name__)


def build_sector_map(roots: list[SectorRoot]) -> dict[SectorRoot, int]:
    """Map each root to its position in the sector array.

    If the same root is stored more than once, the last position wins.

    Args:
        roots: Sector roots in on-host order.

    Returns:
        Dictionary of root to index.
    """
    return {root: i for i, root in enumerate(roots)}


class ReferenceIndexBuilder:
    """Lists the sector roots of every contracted host.

    Args:
        resolver: Resolves host keys to network addresses.
        opener: Opens host sessions.
    """

    def __init__(self, resolver: HostKeyResolver, opener: SessionOpener) -> None:
        self._resolver = resolver
        self._opener = opener

    def list_host(self, contract: Contract) -> HostListing:
        """List one host's sector roots.

        Args:
            contract: Contract with the host.

        Returns:
            Listed on success, Unreachable with the failure reason otherwise.
        """
        try:
            with open_session(self._resolver, self._opener, contract) as session:
                try:
                    roots = session.sector_roots()
                except Exception as e:
                    msg = f"could not download sector roots: {e}"
                    raise HostListError(contract.host_key, msg) from e
        except HostError as e:
            logger.warning("Could not list sectors on host %s: %s", contract.short_key, e)
            return Unreachable(host_key=contract.host_key, reason=str(e))

        sector_map = build_sector_map(roots)
        if len(sector_map) != len(roots):
            logger.debug(
                "Host %s stores %d duplicate root(s)",
                contract.short_key,
                len(roots) - len(sector_map),
            )
        logger.info("Host %s stores %d sector(s)", contract.short_key, len(roots))
        return Listed(host_key=contract.host_key, sector_map=sector_map, num_sectors=len(roots))

    def build(self, contracts: Iterable[Contract]) -> dict[HostPublicKey, HostListing]:
        """List every contracted host, one at a time.

        Args:
            contracts: Contracts to list.

        Returns:
            Listing outcome per host key, in contract order.
        """
        return {contract.host_key: self.list_host(contract) for contract in contracts}
