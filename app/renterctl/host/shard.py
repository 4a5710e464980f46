"""Client for the SHARD host directory.

SHARD watches the blockchain for host announcements and answers which
network address a host public key currently announces, along with the
chain height and sync status.
"""

from renterctl.host.base import HostKeyResolver
from renterctl.host.service import ServiceClient, ServiceError
from renterctl.models.host import HostPublicKey


class ShardClient(ServiceClient, HostKeyResolver):
    """Resolves host keys and reports chain state via a SHARD server."""

    SERVICE_NAME = "SHARD"

    def resolve_host_key(self, host_key: HostPublicKey) -> str:
        """Return the latest announced address of ``host_key``.

        Raises:
            ServiceError: If the host is unknown or the response is malformed.
        """
        address = self.get_json(f"/host/{host_key}")
        if not isinstance(address, str) or not address:
            msg = f"SHARD has no address for host {host_key}"
            raise ServiceError(msg)
        return address

    def synced(self) -> bool:
        """Report whether SHARD is synchronized with the blockchain."""
        return bool(self.get_json("/synced"))

    def chain_height(self) -> int:
        """Return the current block height.

        Raises:
            ServiceError: If the response is not an integer.
        """
        height = self.get_json("/height")
        if not isinstance(height, int) or isinstance(height, bool):
            msg = f"SHARD returned invalid height: {height!r}"
            raise ServiceError(msg)
        return height

    def current_height(self) -> int:
        """Return the block height once SHARD has caught up with the chain.

        Raises:
            ServiceError: If SHARD is still syncing or the height is invalid.
        """
        if not self.synced():
            msg = "blockchain is not synchronized"
            raise ServiceError(msg)
        return self.chain_height()
