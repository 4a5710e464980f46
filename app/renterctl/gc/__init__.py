"""Garbage collection of unreferenced sectors.

A cycle cross-references the sectors each host stores against the
sectors the metafiles in a folder reference, then deletes the surplus
using the swap and trim primitives of the host write protocol.
"""

from renterctl.gc.confirm import AlwaysConfirm, Confirmation, NeverConfirm
from renterctl.gc.engine import GarbageCollector
from renterctl.gc.executor import DeletionExecutor
from renterctl.gc.index import ReferenceIndexBuilder, build_sector_map
from renterctl.gc.models import (
    GCResult,
    GCState,
    GCSummary,
    HostGarbage,
    HostListing,
    HostOutcome,
    HostStatus,
    Listed,
    ScanResult,
    Unreachable,
)
from renterctl.gc.planner import apply_actions, plan_deletion, swap_count
from renterctl.gc.reconcile import Reconciliation, find_garbage, reconcile
from renterctl.gc.report import LineReporter, Reporter, format_tally
from renterctl.gc.scanner import MetadataScanner

__all__ = [
    "AlwaysConfirm",
    "Confirmation",
    "DeletionExecutor",
    "GCResult",
    "GCState",
    "GCSummary",
    "GarbageCollector",
    "HostGarbage",
    "HostListing",
    "HostOutcome",
    "HostStatus",
    "LineReporter",
    "Listed",
    "MetadataScanner",
    "NeverConfirm",
    "Reconciliation",
    "ReferenceIndexBuilder",
    "Reporter",
    "ScanResult",
    "Unreachable",
    "apply_actions",
    "build_sector_map",
    "find_garbage",
    "format_tally",
    "plan_deletion",
    "reconcile",
    "swap_count",
]
