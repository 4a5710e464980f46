"""Garbage collection domain models.

These structures carry data between the stages of a garbage collection
cycle: the scan of referenced roots, the per-host listings, the garbage
computed for each host, the run summary shown before deletion, and the
per-host outcomes reported at the end.
"""

from dataclasses import dataclass, field
from enum import Enum

from renterctl.models.action import WriteAction
from renterctl.models.host import SECTOR_SIZE, HostPublicKey, SectorRoot, short_key


class GCState(str, Enum):
    """Run-level state of a garbage collection cycle.

    Attributes:
        SCANNING: Reading metafiles.
        LISTING: Downloading sector roots from hosts.
        RECONCILING: Computing garbage per host.
        AWAITING_CONFIRMATION: Blocked on the confirmation capability.
        DELETING: Submitting deletion batches to hosts.
        DONE: Finished (with or without deletions).
        CANCELLED: The user declined the deletion.
    """

    SCANNING = "scanning"
    LISTING = "listing"
    RECONCILING = "reconciling"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    DELETING = "deleting"
    DONE = "done"
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Sector roots referenced by a metafolder.

    Attributes:
        referenced: Per host, every root any metafile references.
        files_scanned: Number of metafiles read.
        shard_references: Total slice references seen. Roots referenced by
            several files are counted once per reference.
    """

    referenced: dict[HostPublicKey, set[SectorRoot]] = field(default_factory=dict)
    files_scanned: int = 0
    shard_references: int = 0

    def roots_for(self, host_key: HostPublicKey) -> set[SectorRoot]:
        """Roots referenced on ``host_key`` (empty if none)."""
        return self.referenced.get(host_key, set())


@dataclass(frozen=True, slots=True)
class Listed:
    """A host whose sector roots were listed successfully.

    Attributes:
        host_key: Public key of the host.
        sector_map: Root to on-host index.
        num_sectors: Length of the host's sector array.
    """

    host_key: HostPublicKey
    sector_map: dict[SectorRoot, int]
    num_sectors: int


@dataclass(frozen=True, slots=True)
class Unreachable:
    """A host that could not be listed and is excluded from the cycle.

    Attributes:
        host_key: Public key of the host.
        reason: Why listing failed.
    """

    host_key: HostPublicKey
    reason: str


HostListing = Listed | Unreachable


@dataclass(frozen=True, slots=True)
class HostGarbage:
    """Unreferenced sectors found on one host.

    Attributes:
        host_key: Public key of the host.
        num_sectors: Length of the host's sector array when listed.
        sectors: Garbage root to its on-host index.
    """

    host_key: HostPublicKey
    num_sectors: int
    sectors: dict[SectorRoot, int] = field(default_factory=dict)

    @property
    def count(self) -> int:
        """Number of garbage sectors."""
        return len(self.sectors)


@dataclass(frozen=True, slots=True)
class GCSummary:
    """Totals presented before any destructive action.

    Attributes:
        files_scanned: Metafiles read.
        referenced_count: Slice references across all metafiles.
        original_count: Sectors stored across all listed hosts.
        host_count: Hosts listed successfully.
        garbage_count: Unreferenced sectors across all listed hosts.
    """

    files_scanned: int
    referenced_count: int
    original_count: int
    host_count: int
    garbage_count: int

    @property
    def garbage_bytes(self) -> int:
        """Storage reclaimed by deleting the garbage."""
        return self.garbage_count * SECTOR_SIZE


class HostStatus(str, Enum):
    """Outcome of a cycle for one host.

    Attributes:
        DELETED: Garbage deleted.
        NOTHING_TO_DELETE: Host had no garbage.
        FAILED: Listing or deletion failed.
        SKIPPED: Cancelled before the host was started.
        PLANNED: Dry-run; plan computed but not submitted.
    """

    DELETED = "deleted"
    NOTHING_TO_DELETE = "nothing_to_delete"
    FAILED = "failed"
    SKIPPED = "skipped"
    PLANNED = "planned"


@dataclass(frozen=True, slots=True)
class HostOutcome:
    """Result of a cycle for one host.

    Attributes:
        host_key: Public key of the host.
        status: What happened.
        sectors: Sectors deleted (or planned for deletion).
        error: Failure reason when status is FAILED.
        actions: Submitted (or planned) write actions.
    """

    host_key: HostPublicKey
    status: HostStatus
    sectors: int = 0
    error: str | None = None
    actions: tuple[WriteAction, ...] = ()

    @property
    def short_key(self) -> str:
        """Abbreviated host key for display."""
        return short_key(self.host_key)

    @property
    def failed(self) -> bool:
        """Check if this host failed."""
        return self.status == HostStatus.FAILED

    @property
    def message(self) -> str:
        """One-line description of the outcome."""
        if self.status == HostStatus.DELETED:
            return f"Deleted {self.sectors} sectors"
        if self.status == HostStatus.FAILED:
            return f"Failed: {self.error or 'unknown error'}"
        if self.status == HostStatus.SKIPPED:
            return "Skipped: cancelled"
        if self.status == HostStatus.PLANNED:
            return f"Would delete {self.sectors} sectors ({len(self.actions)} actions)"
        return "Nothing to delete"


@dataclass(slots=True)
class GCResult:
    """Final result of a garbage collection cycle.

    Attributes:
        state: Terminal run state (DONE or CANCELLED).
        summary: Totals, None if the cycle never reached reconciliation.
        outcomes: Per-host outcomes from listing and deletion, in contract order.
    """

    state: GCState
    summary: GCSummary | None = None
    outcomes: list[HostOutcome] = field(default_factory=list)

    @property
    def failures(self) -> list[HostOutcome]:
        """Hosts that failed listing or deletion."""
        return [o for o in self.outcomes if o.failed]

    @property
    def deleted(self) -> dict[HostPublicKey, int]:
        """Sectors deleted per host, for hosts that were deleted from."""
        return {o.host_key: o.sectors for o in self.outcomes if o.status == HostStatus.DELETED}

    @property
    def total_deleted(self) -> int:
        """Sectors deleted across all hosts."""
        return sum(self.deleted.values())
