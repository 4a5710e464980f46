"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules, most notably
an in-memory host network standing in for a session backend.
"""

from dataclasses import dataclass, field
from pathlib import Path

import pytest
from renterctl.gc.planner import apply_actions
from renterctl.host.base import HostKeyResolver, HostSession, SessionOpener
from renterctl.host.service import ServiceError
from renterctl.metafile.codec import write_meta_file
from renterctl.models.action import WriteAction
from renterctl.models.host import Contract, HostPublicKey, SectorRoot
from renterctl.models.metafile import MetaFile, MetaIndex, SectorSlice


def make_root(n: int) -> SectorRoot:
    """Deterministic 32-byte sector root."""
    return n.to_bytes(32, "big")


def make_host_key(n: int) -> HostPublicKey:
    """Deterministic host public key."""
    return f"ed25519:{n:02x}" + "ab" * 31


def make_contract(host_key: HostPublicKey) -> Contract:
    """Contract with dummy identifiers for ``host_key``."""
    return Contract(host_key=host_key, id="ff" * 32, renter_key="ee" * 32)


def make_metafile(shards: dict[HostPublicKey, list[SectorRoot]], filesize: int = 0) -> MetaFile:
    """Build a metafile whose host ``k`` stores one full slice per root."""
    hosts = tuple(shards)
    index = MetaIndex(filesize=filesize, min_shards=min(1, len(hosts)), hosts=hosts)
    return MetaFile(
        index=index,
        shards=tuple(
            tuple(SectorSlice(merkle_root=r, segment_index=0, num_segments=64) for r in roots)
            for roots in shards.values()
        ),
    )


@dataclass
class FakeHost:
    """Sector array and failure switches of one simulated host."""

    key: HostPublicKey
    roots: list[SectorRoot]
    reachable: bool = True
    fail_listing: bool = False
    fail_write: bool = False
    interrupt_write: bool = False
    writes: list[list[WriteAction]] = field(default_factory=list)
    sessions_opened: int = 0
    sessions_closed: int = 0


class FakeSession(HostSession):
    """Session over a FakeHost."""

    def __init__(self, host: FakeHost) -> None:
        self._host = host

    def sector_roots(self) -> list[SectorRoot]:
        if self._host.fail_listing:
            raise ConnectionError("connection reset by peer")
        return list(self._host.roots)

    def write(self, actions: list[WriteAction]) -> None:
        if self._host.interrupt_write:
            raise KeyboardInterrupt
        if self._host.fail_write:
            raise ConnectionError("host rejected revision")
        self._host.roots = apply_actions(self._host.roots, actions)
        self._host.writes.append(list(actions))

    def close(self) -> None:
        self._host.sessions_closed += 1


class FakeNetwork(HostKeyResolver, SessionOpener):
    """Resolver and session opener backed by in-memory hosts."""

    def __init__(self) -> None:
        self.hosts: dict[HostPublicKey, FakeHost] = {}
        self.resolved: list[HostPublicKey] = []
        self.chain_synced = True
        self.height = 250_000

    def add_host(self, n: int, roots: list[SectorRoot], **switches: bool) -> FakeHost:
        host = FakeHost(key=make_host_key(n), roots=list(roots), **switches)
        self.hosts[host.key] = host
        return host

    @property
    def contracts(self) -> list[Contract]:
        return [make_contract(key) for key in self.hosts]

    @property
    def sessions_opened(self) -> int:
        return sum(h.sessions_opened for h in self.hosts.values())

    def current_height(self) -> int:
        if not self.chain_synced:
            raise ServiceError("blockchain is not synchronized")
        return self.height

    def resolve_host_key(self, host_key: HostPublicKey) -> str:
        self.resolved.append(host_key)
        if host_key not in self.hosts:
            raise LookupError("host not announced")
        return f"{host_key[8:16]}.example:9982"

    def open(self, address: str, contract: Contract) -> HostSession:
        host = self.hosts[contract.host_key]
        if not host.reachable:
            raise ConnectionRefusedError("connection refused")
        host.sessions_opened += 1
        return FakeSession(host)


@pytest.fixture
def network() -> FakeNetwork:
    """Empty simulated host network."""
    return FakeNetwork()


@pytest.fixture
def metafolder(tmp_path: Path) -> Path:
    """Empty metafolder."""
    folder = tmp_path / "meta"
    folder.mkdir()
    return folder


def add_metafile(
    folder: Path,
    name: str,
    shards: dict[HostPublicKey, list[SectorRoot]],
    filesize: int = 0,
) -> Path:
    """Write a metafile into ``folder`` and return its path."""
    return write_meta_file(make_metafile(shards, filesize=filesize), folder / f"{name}.usa")
