"""Metafile models.

A metafile records everything needed to reassemble one file from the
hosts it was uploaded to: the file's attributes, the erasure-coding
parameters, the ordered host set, and for each host the list of sector
slices holding that host's shard.
"""

import re
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_pascal

from renterctl.models.host import SECTOR_ROOT_SIZE, SEGMENT_SIZE, HostPublicKey, SectorRoot

METAFILE_VERSION = 2

# Go encodes times with nanoseconds; datetime keeps microseconds.
_SUBMICRO_RE = re.compile(r"(\.\d{6})\d+")


class MetaIndex(BaseModel):
    """Index section of a metafile.

    Attributes:
        version: Metafile format version.
        filesize: Size of the original file in bytes.
        mode: Unix permission bits of the original file.
        mod_time: Modification time recorded at upload.
        master_key: Hex-encoded seed from which shard keys are derived.
        min_shards: Number of shards required to recover the file.
        hosts: Ordered host keys; ``hosts[i]`` stores shard ``i``.

    On disk the index uses the Go field names (``Version``, ``Filesize``,
    ``Mode``, ``ModTime``, ``MasterKey``, ``MinShards``, ``Hosts``).
    The snake_case names are accepted as well.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        alias_generator=to_pascal,
        populate_by_name=True,
    )

    version: Annotated[int, Field(ge=1)] = METAFILE_VERSION
    filesize: Annotated[int, Field(ge=0)] = 0
    mode: Annotated[int, Field(ge=0)] = 0o600
    mod_time: datetime = Field(default_factory=lambda: datetime.now(UTC))
    master_key: str = ""
    min_shards: Annotated[int, Field(ge=0)] = 0
    hosts: tuple[HostPublicKey, ...] = ()

    @field_validator("mod_time", mode="before")
    @classmethod
    def _trim_nanoseconds(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _SUBMICRO_RE.sub(r"\1", value, count=1)
        return value

    @field_validator("master_key", mode="before")
    @classmethod
    def _key_bytes_to_hex(cls, value: Any) -> Any:
        if isinstance(value, list) and all(isinstance(b, int) for b in value):
            return bytes(value).hex()
        return value

    @model_validator(mode="after")
    def _check_shards(self) -> "MetaIndex":
        if self.hosts and self.min_shards > len(self.hosts):
            msg = f"min_shards ({self.min_shards}) exceeds host count ({len(self.hosts)})"
            raise ValueError(msg)
        if len(set(self.hosts)) != len(self.hosts):
            msg = "Duplicate host in metafile host set"
            raise ValueError(msg)
        return self


@dataclass(frozen=True, slots=True)
class SectorSlice:
    """Contiguous run of segments within one stored sector.

    Attributes:
        merkle_root: Root of the sector holding the data.
        segment_index: First segment of the slice within the sector.
        num_segments: Number of segments in the slice.
    """

    merkle_root: SectorRoot
    segment_index: int
    num_segments: int

    def __post_init__(self) -> None:
        """Validate slice data after initialization."""
        if len(self.merkle_root) != SECTOR_ROOT_SIZE:
            msg = f"Merkle root must be {SECTOR_ROOT_SIZE} bytes, got {len(self.merkle_root)}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class MetaFile:
    """A fully loaded metafile.

    Attributes:
        index: Metafile index.
        shards: ``shards[i]`` is the slice list stored on ``index.hosts[i]``.
    """

    index: MetaIndex
    shards: tuple[tuple[SectorSlice, ...], ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """Validate that every host has exactly one shard."""
        if len(self.shards) != len(self.index.hosts):
            msg = f"Metafile has {len(self.index.hosts)} hosts but {len(self.shards)} shards"
            raise ValueError(msg)

    @property
    def hosts(self) -> tuple[HostPublicKey, ...]:
        """Ordered host set."""
        return self.index.hosts

    def host_roots(self) -> dict[HostPublicKey, list[SectorRoot]]:
        """Map each host to the ordered sector roots of its shard.

        Returns:
            Dictionary of host key to list of merkle roots (duplicates kept).
        """
        return {
            host: [s.merkle_root for s in shard]
            for host, shard in zip(self.index.hosts, self.shards, strict=True)
        }

    @property
    def uploaded_bytes(self) -> int:
        """Total bytes stored across all shards."""
        return sum(s.num_segments * SEGMENT_SIZE for shard in self.shards for s in shard)

    @property
    def redundancy(self) -> float:
        """Replication factor implied by the erasure-coding parameters."""
        if self.index.min_shards == 0:
            return 0.0
        return len(self.index.hosts) / self.index.min_shards

    @property
    def percent_full_redundancy(self) -> float:
        """Share of fully redundant data that has been uploaded, capped at 100."""
        full = self.index.filesize * self.redundancy
        if full == 0:
            return 100.0
        return min(100.0, 100 * self.uploaded_bytes / full)
