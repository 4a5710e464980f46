"""Deletion planning.

A host's write RPC cannot delete an arbitrary sector. It can only swap
two positions and trim sectors off the end of the array. Deleting a set
of indices therefore means moving every bad sector into the tail and
trimming the tail.

Walking the bad indices from highest to lowest, with a cursor starting
at the last position, each bad index either already sits at the cursor
(it is part of the tail and needs nothing) or is swapped with the
sector at the cursor. Every sector at the cursor is good at that point,
because all higher bad indices have already been handled. Each good
sector moves at most once.
"""

from collections.abc import Iterable, Sequence
from typing import TypeVar

from renterctl.models.action import WriteAction, swap, trim

T = TypeVar("T")


def plan_deletion(bad_indices: Iterable[int], num_sectors: int) -> list[WriteAction]:
    """Compile a set of indices into a swap+trim action sequence.

    Args:
        bad_indices: Sector indices to delete.
        num_sectors: Current length of the host's sector array.

    Returns:
        Actions to apply in order. Empty if there is nothing to delete;
        otherwise zero or more swaps followed by a single trim.

    Raises:
        ValueError: If an index is out of range or repeated.
    """
    bad = sorted(bad_indices, reverse=True)
    if not bad:
        return []

    if len(set(bad)) != len(bad):
        msg = "Duplicate sector index in deletion set"
        raise ValueError(msg)
    if bad[0] >= num_sectors or bad[-1] < 0:
        msg = f"Sector index out of range for array of {num_sectors} sectors"
        raise ValueError(msg)

    actions: list[WriteAction] = []
    cursor = num_sectors - 1
    for index in bad:
        if cursor != index:
            actions.append(swap(cursor, index))
        cursor -= 1

    actions.append(trim(len(bad)))
    return actions


def swap_count(bad_indices: Iterable[int], num_sectors: int) -> int:
    """Number of swaps :func:`plan_deletion` emits.

    Bad indices already inside the final tail need no swap.
    """
    bad = set(bad_indices)
    tail_start = num_sectors - len(bad)
    return len(bad) - sum(1 for i in bad if i >= tail_start)


def apply_actions(sectors: Sequence[T], actions: Iterable[WriteAction]) -> list[T]:
    """Apply write actions to a local copy of a sector array.

    Args:
        sectors: Sector array (any element type).
        actions: Actions to apply in order.

    Returns:
        The resulting array.

    Raises:
        IndexError: If an action refers to a position outside the array.
    """
    result = list(sectors)
    for action in actions:
        if action.is_swap:
            if action.a >= len(result) or action.b >= len(result):
                msg = f"{action} out of range for array of {len(result)}"
                raise IndexError(msg)
            result[action.a], result[action.b] = result[action.b], result[action.a]
        else:
            if action.a > len(result):
                msg = f"{action} exceeds array of {len(result)}"
                raise IndexError(msg)
            del result[len(result) - action.a :]
    return result
