"""Unit tests for the muse and SHARD clients.

HTTP traffic is served by httpx.MockTransport handlers.
"""

from collections.abc import Callable

import httpx
import pytest
from conftest import make_host_key
from renterctl.host.muse import MuseClient
from renterctl.host.service import ServiceClient, ServiceError
from renterctl.host.shard import ShardClient

Handler = Callable[[httpx.Request], httpx.Response]


def _transport(handler: Handler, seen: list[httpx.Request] | None = None) -> httpx.MockTransport:
    def record(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return handler(request)

    return httpx.MockTransport(record)


class TestServiceClient:
    """Tests for ServiceClient base class."""

    def test_adds_scheme(self) -> None:
        """Bare host:port addresses are treated as http."""
        with ServiceClient("localhost:9580") as client:
            assert client.base_url == "http://localhost:9580"

    def test_keeps_scheme(self) -> None:
        """Explicit schemes are kept, trailing slashes dropped."""
        with ServiceClient("https://muse.example/") as client:
            assert client.base_url == "https://muse.example"

    def test_empty_address(self) -> None:
        """An empty address is rejected."""
        with pytest.raises(ServiceError, match="No service address"):
            ServiceClient("")

    def test_http_error_status(self) -> None:
        """Non-2xx responses raise ServiceError with the body."""
        transport = _transport(lambda r: httpx.Response(500, text="db locked"))

        with ServiceClient("svc", transport=transport) as client:
            with pytest.raises(ServiceError, match="returned 500 for /x: db locked"):
                client.get_json("/x")

    def test_transport_error(self) -> None:
        """Connection failures raise ServiceError."""

        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with ServiceClient("svc", transport=_transport(refuse)) as client:
            with pytest.raises(ServiceError, match="could not reach service"):
                client.get_json("/x")

    def test_invalid_json(self) -> None:
        """Bodies that aren't JSON raise ServiceError."""
        transport = _transport(lambda r: httpx.Response(200, text="<html>"))

        with ServiceClient("svc", transport=transport) as client:
            with pytest.raises(ServiceError, match="invalid JSON"):
                client.get_json("/x")


class TestMuseClient:
    """Tests for MuseClient.contracts method."""

    def test_lists_contracts_of_host_set(self) -> None:
        """Contracts are parsed and the host set is sent as a query parameter."""
        h1, h2 = make_host_key(1), make_host_key(2)
        body = [
            {"hostKey": h1, "id": "aa" * 32, "renterKey": "bb" * 32},
            {"hostKey": h2, "id": "cc" * 32, "renterKey": "dd" * 32},
        ]
        seen: list[httpx.Request] = []
        transport = _transport(lambda r: httpx.Response(200, json=body), seen)

        with MuseClient("muse:9580", transport=transport) as muse:
            contracts = muse.contracts("archive")

        assert [c.host_key for c in contracts] == [h1, h2]
        assert contracts[0].id == "aa" * 32
        assert contracts[1].renter_key == "dd" * 32
        assert seen[0].url.path == "/contracts"
        assert seen[0].url.params["hostset"] == "archive"

    def test_last_contract_per_host_wins(self) -> None:
        """Duplicate hosts collapse to their last contract."""
        h1 = make_host_key(1)
        body = [
            {"hostKey": h1, "id": "01", "renterKey": "x"},
            {"hostKey": h1, "id": "02", "renterKey": "y"},
        ]
        transport = _transport(lambda r: httpx.Response(200, json=body))

        with MuseClient("muse", transport=transport) as muse:
            contracts = muse.contracts()

        assert [c.id for c in contracts] == ["02"]

    @pytest.mark.parametrize(
        "body",
        [
            {"contracts": []},
            ["not an object"],
            [{"id": "01"}],
            [{"hostKey": "", "id": "01"}],
        ],
    )
    def test_malformed_response(self, body: object) -> None:
        """Unexpected shapes raise ServiceError."""
        transport = _transport(lambda r: httpx.Response(200, json=body))

        with MuseClient("muse", transport=transport) as muse:
            with pytest.raises(ServiceError, match="muse returned"):
                muse.contracts()


class TestShardClient:
    """Tests for ShardClient class."""

    def test_resolves_host_key(self) -> None:
        """The announced address is returned."""
        key = make_host_key(1)
        seen: list[httpx.Request] = []
        transport = _transport(lambda r: httpx.Response(200, json="host.example:9982"), seen)

        with ShardClient("shard:9580", transport=transport) as shard:
            assert shard.resolve_host_key(key) == "host.example:9982"

        assert seen[0].url.path == f"/host/{key}"

    def test_unknown_host(self) -> None:
        """An empty address means the host never announced."""
        transport = _transport(lambda r: httpx.Response(200, json=""))

        with ShardClient("shard", transport=transport) as shard:
            with pytest.raises(ServiceError, match="no address for host"):
                shard.resolve_host_key(make_host_key(1))

    def test_synced_and_height(self) -> None:
        """Chain state endpoints are decoded."""
        routes = {"/synced": True, "/height": 123456}
        transport = _transport(lambda r: httpx.Response(200, json=routes[r.url.path]))

        with ShardClient("shard", transport=transport) as shard:
            assert shard.synced() is True
            assert shard.chain_height() == 123456

    def test_current_height(self) -> None:
        """A synchronized SHARD reports its height."""
        routes = {"/synced": True, "/height": 250_000}
        transport = _transport(lambda r: httpx.Response(200, json=routes[r.url.path]))

        with ShardClient("shard", transport=transport) as shard:
            assert shard.current_height() == 250_000

    def test_current_height_requires_sync(self) -> None:
        """No height is returned while SHARD is still syncing."""
        seen: list[httpx.Request] = []
        transport = _transport(lambda r: httpx.Response(200, json=False), seen)

        with ShardClient("shard", transport=transport) as shard:
            with pytest.raises(ServiceError, match="not synchronized"):
                shard.current_height()

        assert [r.url.path for r in seen] == ["/synced"]

    def test_invalid_height(self) -> None:
        """A non-integer height raises ServiceError."""
        transport = _transport(lambda r: httpx.Response(200, json=True))

        with ShardClient("shard", transport=transport) as shard:
            with pytest.raises(ServiceError, match="invalid height"):
                shard.chain_height()
