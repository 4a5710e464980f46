"""Data models for renterctl.

This module exports the core data structures used throughout the application.
"""

from renterctl.models.action import WriteAction, WriteActionType, swap, trim
from renterctl.models.history import (
    HistoryActionType,
    HistoryEntry,
    HistoryItem,
    create_history_entry,
)
from renterctl.models.host import (
    SECTOR_SIZE,
    SEGMENT_SIZE,
    Contract,
    HostPublicKey,
    SectorRoot,
    short_key,
)
from renterctl.models.metafile import MetaFile, MetaIndex, SectorSlice

__all__ = [
    "SECTOR_SIZE",
    "SEGMENT_SIZE",
    "Contract",
    "HistoryActionType",
    "HistoryEntry",
    "HistoryItem",
    "HostPublicKey",
    "MetaFile",
    "MetaIndex",
    "SectorRoot",
    "SectorSlice",
    "WriteAction",
    "WriteActionType",
    "create_history_entry",
    "short_key",
    "swap",
    "trim",
]
