"""Host and contract models.

Hosts are identified by their public key string, e.g.
``ed25519:<64 hex chars>``. Sector roots are raw 32-byte hashes and
are used directly as dictionary keys.
"""

from dataclasses import dataclass

# Type aliases used throughout the garbage collection pipeline
HostPublicKey = str
SectorRoot = bytes

SECTOR_ROOT_SIZE = 32

# Size of a single sector stored on a host (4 MiB)
SECTOR_SIZE = 1 << 22

# Size of a Merkle segment within a sector
SEGMENT_SIZE = 64


def short_key(host_key: HostPublicKey) -> str:
    """Return an abbreviated host key for display.

    Args:
        host_key: Full host public key, with or without algorithm prefix.

    Returns:
        The first 8 characters of the key material.
    """
    _, _, material = host_key.rpartition(":")
    return material[:8]


@dataclass(frozen=True, slots=True)
class Contract:
    """A storage contract formed with a single host.

    Attributes:
        host_key: Public key of the host the contract is formed with.
        id: Hex-encoded contract ID.
        renter_key: Hex-encoded secret key used to sign revisions.
    """

    host_key: HostPublicKey
    id: str
    renter_key: str

    def __post_init__(self) -> None:
        """Validate contract data after initialization."""
        if not self.host_key:
            msg = "Contract host key cannot be empty"
            raise ValueError(msg)
        if not self.id:
            msg = "Contract ID cannot be empty"
            raise ValueError(msg)

    @property
    def short_key(self) -> str:
        """Abbreviated host key for display."""
        return short_key(self.host_key)
