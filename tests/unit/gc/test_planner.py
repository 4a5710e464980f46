"""Unit tests for deletion planning.

Tests for compiling a set of sector indices into swap and trim actions.
"""

from itertools import combinations

import pytest
from renterctl.gc.planner import apply_actions, plan_deletion, swap_count
from renterctl.models.action import WriteActionType, swap, trim


class TestPlanDeletion:
    """Tests for plan_deletion function."""

    def test_swaps_good_sectors_into_holes(self) -> None:
        """Bad sectors outside the tail are swapped with the tail."""
        actions = plan_deletion({1, 3}, 5)

        assert actions == [swap(4, 3), swap(3, 1), trim(2)]

    def test_bad_tail_needs_no_swaps(self) -> None:
        """Bad sectors already at the end are trimmed directly."""
        actions = plan_deletion({2, 3}, 4)

        assert actions == [trim(2)]

    def test_empty_set_plans_nothing(self) -> None:
        """No bad indices produce no actions at all."""
        assert plan_deletion([], 10) == []

    def test_delete_everything(self) -> None:
        """Deleting every sector is a single trim."""
        assert plan_deletion(range(6), 6) == [trim(6)]

    def test_single_sector_at_front(self) -> None:
        """Deleting index 0 swaps in the last sector."""
        assert plan_deletion([0], 3) == [swap(2, 0), trim(1)]

    def test_order_of_input_is_irrelevant(self) -> None:
        """The plan depends only on the set of indices."""
        assert plan_deletion([1, 3], 5) == plan_deletion([3, 1], 5)

    def test_trim_is_last(self) -> None:
        """The final action is always the only trim."""
        actions = plan_deletion({0, 2, 5}, 9)

        assert actions[-1].action_type == WriteActionType.TRIM
        assert all(a.is_swap for a in actions[:-1])

    def test_rejects_out_of_range(self) -> None:
        """Indices beyond the array raise ValueError."""
        with pytest.raises(ValueError, match="out of range"):
            plan_deletion([5], 5)

    def test_rejects_negative(self) -> None:
        """Negative indices raise ValueError."""
        with pytest.raises(ValueError, match="out of range"):
            plan_deletion([-1], 5)

    def test_rejects_duplicates(self) -> None:
        """Repeated indices raise ValueError."""
        with pytest.raises(ValueError, match="Duplicate"):
            plan_deletion([1, 1], 5)


class TestSwapCount:
    """Tests for swap_count function."""

    @pytest.mark.parametrize(
        ("bad", "n", "expected"),
        [
            ({1, 3}, 5, 2),
            ({2, 3}, 4, 0),
            ({0}, 1, 0),
            ({0, 1}, 10, 2),
            ({0, 9}, 10, 1),
            (set(), 4, 0),
        ],
    )
    def test_matches_formula(self, bad: set[int], n: int, expected: int) -> None:
        """Swaps equal bad indices minus those already in the tail."""
        assert swap_count(bad, n) == expected
        assert sum(1 for a in plan_deletion(bad, n) if a.is_swap) == expected


class TestApplyActions:
    """Tests for apply_actions function."""

    def test_swap_and_trim(self) -> None:
        """Actions apply in order to a copy of the array."""
        original = ["a", "b", "c", "d", "e"]

        result = apply_actions(original, [swap(4, 3), swap(3, 1), trim(2)])

        assert result == ["a", "e", "c"]
        assert original == ["a", "b", "c", "d", "e"]

    def test_swap_out_of_range(self) -> None:
        """Swapping past the end raises IndexError."""
        with pytest.raises(IndexError):
            apply_actions([1, 2], [swap(0, 2)])

    def test_trim_too_many(self) -> None:
        """Trimming more sectors than exist raises IndexError."""
        with pytest.raises(IndexError):
            apply_actions([1, 2], [trim(3)])


class TestPlanProperties:
    """Exhaustive checks over every deletion set of small arrays."""

    @pytest.mark.parametrize("n", range(8))
    def test_every_subset(self, n: int) -> None:
        """Exactly the good sectors survive, each moved at most once."""
        for size in range(n + 1):
            for bad in combinations(range(n), size):
                bad_set = set(bad)
                actions = plan_deletion(bad_set, n)

                result = apply_actions(list(range(n)), actions)

                assert len(result) == n - len(bad_set)
                assert set(result) == set(range(n)) - bad_set
                assert sum(1 for a in actions if a.is_swap) == swap_count(bad_set, n)

                moved: list[int] = []
                array = list(range(n))
                for action in actions:
                    if action.is_swap:
                        # The sector pulled from the cursor must be one we keep
                        assert array[action.a] not in bad_set
                        moved.append(array[action.a])
                        array[action.a], array[action.b] = array[action.b], array[action.a]
                assert len(moved) == len(set(moved))
