"""Unit tests for reference indexing and reconciliation.

Tests for listing hosts and computing per-host garbage.
"""

import pytest
from conftest import FakeNetwork, make_contract, make_host_key, make_root
from renterctl.gc.index import ReferenceIndexBuilder, build_sector_map
from renterctl.gc.models import Listed, ScanResult, Unreachable
from renterctl.gc.reconcile import find_garbage, reconcile


class TestBuildSectorMap:
    """Tests for build_sector_map function."""

    def test_maps_root_to_index(self) -> None:
        """Each root maps to its position."""
        roots = [make_root(i) for i in range(3)]

        assert build_sector_map(roots) == {roots[0]: 0, roots[1]: 1, roots[2]: 2}

    def test_duplicate_root_keeps_last_index(self) -> None:
        """A root stored twice maps to its last position."""
        roots = [make_root(1), make_root(2), make_root(1)]

        assert build_sector_map(roots) == {make_root(1): 2, make_root(2): 1}


class TestReferenceIndexBuilder:
    """Tests for ReferenceIndexBuilder class."""

    def test_lists_reachable_host(self, network: FakeNetwork) -> None:
        """A reachable host yields a Listed result and its session is closed."""
        host = network.add_host(1, [make_root(1), make_root(2)])

        listing = ReferenceIndexBuilder(network, network).list_host(make_contract(host.key))

        assert isinstance(listing, Listed)
        assert listing.num_sectors == 2
        assert listing.sector_map == {make_root(1): 0, make_root(2): 1}
        assert host.sessions_closed == 1

    def test_unresolvable_host(self, network: FakeNetwork) -> None:
        """A host the resolver doesn't know is Unreachable."""
        contract = make_contract(make_host_key(7))

        listing = ReferenceIndexBuilder(network, network).list_host(contract)

        assert isinstance(listing, Unreachable)
        assert "could not resolve host address" in listing.reason

    def test_refused_connection(self, network: FakeNetwork) -> None:
        """A host refusing connections is Unreachable."""
        host = network.add_host(1, [make_root(1)], reachable=False)

        listing = ReferenceIndexBuilder(network, network).list_host(make_contract(host.key))

        assert isinstance(listing, Unreachable)
        assert "connection refused" in listing.reason

    def test_listing_failure_closes_session(self, network: FakeNetwork) -> None:
        """A failed root download is Unreachable and still closes the session."""
        host = network.add_host(1, [make_root(1)], fail_listing=True)

        listing = ReferenceIndexBuilder(network, network).list_host(make_contract(host.key))

        assert isinstance(listing, Unreachable)
        assert "could not download sector roots" in listing.reason
        assert host.sessions_closed == 1

    def test_build_keeps_contract_order(self, network: FakeNetwork) -> None:
        """build lists every host, failures included."""
        network.add_host(2, [make_root(1)])
        network.add_host(1, [], reachable=False)

        listings = ReferenceIndexBuilder(network, network).build(network.contracts)

        assert list(listings) == [make_host_key(2), make_host_key(1)]
        assert isinstance(listings[make_host_key(1)], Unreachable)


class TestFindGarbage:
    """Tests for find_garbage function."""

    def test_unreferenced_roots_are_garbage(self) -> None:
        """Only stored roots missing from the reference set are returned."""
        sector_map = {make_root(1): 0, make_root(2): 1, make_root(3): 2}

        garbage = find_garbage(sector_map, {make_root(2), make_root(9)})

        assert garbage == {make_root(1): 0, make_root(3): 2}

    def test_superset_references_yield_nothing(self) -> None:
        """Nothing is garbage when every stored root is referenced."""
        sector_map = {make_root(1): 0}

        assert find_garbage(sector_map, {make_root(1), make_root(2)}) == {}


class TestReconcile:
    """Tests for reconcile function."""

    @pytest.fixture
    def scan(self) -> ScanResult:
        """Scan referencing root 1 on host 1 and root 5 on host 2."""
        return ScanResult(
            referenced={make_host_key(1): {make_root(1)}, make_host_key(2): {make_root(5)}},
            files_scanned=2,
            shard_references=4,
        )

    def test_computes_garbage_and_summary(self, scan: ScanResult) -> None:
        """Garbage and totals are computed across listed hosts."""
        h1, h2, h3 = make_host_key(1), make_host_key(2), make_host_key(3)
        listings = {
            h1: Listed(h1, {make_root(1): 0, make_root(2): 1}, 2),
            h2: Listed(h2, {make_root(5): 0}, 1),
            h3: Listed(h3, {make_root(7): 0, make_root(8): 1}, 2),
        }

        result = reconcile(scan, listings)

        assert result.garbage[h1].sectors == {make_root(2): 1}
        assert result.garbage[h2].count == 0
        assert result.garbage[h3].sectors == {make_root(7): 0, make_root(8): 1}
        assert result.summary.files_scanned == 2
        assert result.summary.referenced_count == 4
        assert result.summary.original_count == 5
        assert result.summary.host_count == 3
        assert result.summary.garbage_count == 3
        assert result.has_garbage

    def test_unreachable_hosts_are_excluded(self, scan: ScanResult) -> None:
        """Unreachable hosts contribute no garbage and no totals."""
        h1, h2 = make_host_key(1), make_host_key(2)
        listings = {
            h1: Listed(h1, {make_root(1): 0}, 1),
            h2: Unreachable(h2, "timed out"),
        }

        result = reconcile(scan, listings)

        assert list(result.garbage) == [h1]
        assert result.unreachable == [Unreachable(h2, "timed out")]
        assert result.summary.host_count == 1
        assert not result.has_garbage
