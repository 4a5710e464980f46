"""Reconciliation of stored sectors against referenced sectors.

For every host that was listed, garbage is exactly the set of stored
roots that no metafile references. The shard reference counter from the
scan is carried into the summary for display only and never influences
which sectors are garbage.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from renterctl.gc.models import (
    GCSummary,
    HostGarbage,
    HostListing,
    ScanResult,
    Unreachable,
)
from renterctl.models.host import HostPublicKey, SectorRoot, short_key

logger = logging.getLogger(__name__)


def find_garbage(
    sector_map: Mapping[SectorRoot, int],
    referenced: set[SectorRoot],
) -> dict[SectorRoot, int]:
    """Return the stored sectors that are not referenced.

    Referenced roots that the host no longer stores are ignored.

    Args:
        sector_map: Stored root to on-host index.
        referenced: Roots referenced by metafiles for this host.

    Returns:
        Garbage root to on-host index.
    """
    return {root: index for root, index in sector_map.items() if root not in referenced}


@dataclass(frozen=True, slots=True)
class Reconciliation:
    """Garbage per listed host plus the run summary.

    Attributes:
        garbage: Garbage per successfully listed host, in listing order.
        unreachable: Hosts excluded from the cycle.
        summary: Totals for the confirmation prompt.
    """

    garbage: dict[HostPublicKey, HostGarbage] = field(default_factory=dict)
    unreachable: list[Unreachable] = field(default_factory=list)
    summary: GCSummary = field(
        default_factory=lambda: GCSummary(
            files_scanned=0,
            referenced_count=0,
            original_count=0,
            host_count=0,
            garbage_count=0,
        )
    )

    @property
    def has_garbage(self) -> bool:
        """Check if any host has garbage."""
        return self.summary.garbage_count > 0


def reconcile(scan: ScanResult, listings: Mapping[HostPublicKey, HostListing]) -> Reconciliation:
    """Compute garbage for every listed host.

    Args:
        scan: Roots referenced by the metafolder.
        listings: Listing outcome per host.

    Returns:
        Reconciliation with per-host garbage and aggregate totals.
    """
    garbage: dict[HostPublicKey, HostGarbage] = {}
    unreachable: list[Unreachable] = []
    original_count = 0

    for host_key, listing in listings.items():
        if isinstance(listing, Unreachable):
            unreachable.append(listing)
            continue

        sectors = find_garbage(listing.sector_map, scan.roots_for(host_key))
        garbage[host_key] = HostGarbage(
            host_key=host_key,
            num_sectors=listing.num_sectors,
            sectors=sectors,
        )
        original_count += listing.num_sectors
        logger.debug(
            "Host %s: %d of %d sector(s) unreferenced",
            short_key(host_key),
            len(sectors),
            listing.num_sectors,
        )

    summary = GCSummary(
        files_scanned=scan.files_scanned,
        referenced_count=scan.shard_references,
        original_count=original_count,
        host_count=len(garbage),
        garbage_count=sum(g.count for g in garbage.values()),
    )
    return Reconciliation(garbage=garbage, unreachable=unreachable, summary=summary)
