"""Sector write actions.

A host's write RPC accepts a batch of actions applied in order to its
contiguous sector array. Only two mutations are needed for deletion:
swapping two positions and trimming sectors off the end.
"""

from dataclasses import dataclass
from enum import Enum


class WriteActionType(Enum):
    """Type of sector array mutation.

    Attributes:
        SWAP: Exchange the sectors at positions ``a`` and ``b``.
        TRIM: Drop the last ``a`` sectors.
    """

    SWAP = "swap"
    TRIM = "trim"


@dataclass(frozen=True, slots=True)
class WriteAction:
    """A single mutation of a host's sector array.

    Attributes:
        action_type: SWAP or TRIM.
        a: First index for SWAP, number of sectors for TRIM.
        b: Second index for SWAP, unused (0) for TRIM.
    """

    action_type: WriteActionType
    a: int
    b: int = 0

    def __post_init__(self) -> None:
        """Validate action data after initialization."""
        if self.a < 0 or self.b < 0:
            msg = f"Action arguments must be non-negative, got ({self.a}, {self.b})"
            raise ValueError(msg)

    @property
    def is_swap(self) -> bool:
        """Check if this is a swap action."""
        return self.action_type == WriteActionType.SWAP

    @property
    def is_trim(self) -> bool:
        """Check if this is a trim action."""
        return self.action_type == WriteActionType.TRIM

    def __str__(self) -> str:
        if self.is_swap:
            return f"swap({self.a}, {self.b})"
        return f"trim({self.a})"


def swap(a: int, b: int) -> WriteAction:
    """Create a swap action.

    Args:
        a: Index of the first sector.
        b: Index of the second sector.

    Returns:
        WriteAction exchanging the two positions.
    """
    return WriteAction(action_type=WriteActionType.SWAP, a=a, b=b)


def trim(n: int) -> WriteAction:
    """Create a trim action.

    Args:
        n: Number of sectors to drop from the end of the array.

    Returns:
        WriteAction removing the last ``n`` sectors.
    """
    return WriteAction(action_type=WriteActionType.TRIM, a=n)
