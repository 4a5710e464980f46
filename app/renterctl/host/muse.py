"""Client for the muse contract server.

muse stores the contracts a renter has formed, grouped into named host
sets. renterctl only needs to read them.
"""

import logging
from typing import Any

from renterctl.host.service import ServiceClient, ServiceError
from renterctl.models.host import Contract

logger = logging.getLogger(__name__)


class MuseClient(ServiceClient):
    """Reads contracts from a muse server."""

    SERVICE_NAME = "muse"

    def contracts(self, host_set: str | None = None) -> list[Contract]:
        """List the contracts of a host set.

        Args:
            host_set: Host set name. If None, all contracts are returned.

        Returns:
            One Contract per host. If the server lists several contracts
            for the same host, the last one wins.

        Raises:
            ServiceError: If the request fails or the response is malformed.
        """
        params = {"hostset": host_set} if host_set else None
        data = self.get_json("/contracts", params=params)
        if not isinstance(data, list):
            msg = f"muse returned {type(data).__name__} instead of a contract list"
            raise ServiceError(msg)

        by_host: dict[str, Contract] = {}
        for raw in data:
            contract = _parse_contract(raw)
            by_host[contract.host_key] = contract

        logger.debug("Loaded %d contract(s) from %s", len(by_host), self.base_url)
        return list(by_host.values())


def _parse_contract(raw: Any) -> Contract:
    """Build a Contract from a muse JSON object."""
    if not isinstance(raw, dict):
        msg = f"muse returned malformed contract entry: {raw!r}"
        raise ServiceError(msg)
    try:
        return Contract(
            host_key=str(raw["hostKey"]),
            id=str(raw["id"]),
            renter_key=str(raw.get("renterKey", "")),
        )
    except (KeyError, ValueError) as e:
        msg = f"muse returned malformed contract entry: {e}"
        raise ServiceError(msg) from e
