"""
Shanten Calculator

Calculates the shanten number (distance to tenpai) of a hand for the
standard form (4 groups + 1 pair), the only form the completion engine
recognises.

Shanten values:
- -1: Complete hand (already won)
-  0: Tenpai (one tile away from winning)
-  1: Iishanten (one away from tenpai)
-  2+: Further from tenpai
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import List, Sequence, Tuple
import numpy as np

from .hand import NUM_KINDS, TilesOrCounts, _as_counts, _check_meld_count

_HONOR_START = 27


@dataclass
class ShantenResult:
    """Result of shanten calculation."""
    shanten: int
    improving_tiles: List[int]  # Tile kinds that lower the shanten
    ukeire: int  # Unseen copies of those kinds (from this hand's view)


def _take(counts: Tuple[int, ...], *indices: int) -> Tuple[int, ...]:
    lst = list(counts)
    for idx in indices:
        lst[idx] -= 1
    return tuple(lst)


@lru_cache(maxsize=1 << 16)
def _best_blocks(counts: Tuple[int, ...], slots: int) -> int:
    """
    Best value of 2*groups + partial_groups using at most `slots` blocks.

    Pivots on the lowest remaining tile: it either joins a group, a
    partial group (pair, adjacent or one-gap shape), or is left isolated.
    """
    if slots == 0:
        return 0
    pivot = next((i for i, c in enumerate(counts) if c), -1)
    if pivot < 0:
        return 0

    best = _best_blocks(_take(counts, pivot), slots)
    is_number = pivot < _HONOR_START
    rank = pivot % 9

    if counts[pivot] >= 3:
        best = max(best, 2 + _best_blocks(_take(counts, pivot, pivot, pivot), slots - 1))
    if is_number and rank <= 6 and counts[pivot + 1] and counts[pivot + 2]:
        best = max(best, 2 + _best_blocks(_take(counts, pivot, pivot + 1, pivot + 2), slots - 1))
    if counts[pivot] >= 2:
        best = max(best, 1 + _best_blocks(_take(counts, pivot, pivot), slots - 1))
    if is_number and rank <= 7 and counts[pivot + 1]:
        best = max(best, 1 + _best_blocks(_take(counts, pivot, pivot + 1), slots - 1))
    if is_number and rank <= 6 and counts[pivot + 2]:
        best = max(best, 1 + _best_blocks(_take(counts, pivot, pivot + 2), slots - 1))

    return best


def _standard_shanten(counts: Tuple[int, ...], num_melds: int) -> int:
    sets_needed = 4 - num_melds

    # No pair head
    best = 2 * sets_needed - _best_blocks(counts, sets_needed)

    # Try each kind as pair head
    for idx, count in enumerate(counts):
        if count >= 2:
            rest = _take(counts, idx, idx)
            best = min(best, 2 * sets_needed - 1 - _best_blocks(rest, sets_needed))

    return best


class ShantenCalculator:
    """
    Standard-form shanten calculator.

    Results for identical count vectors are memoised, so repeated queries
    from the advisor and bots stay cheap.
    """

    def calculate(self, hand: TilesOrCounts, num_melds: int = 0) -> ShantenResult:
        """
        Calculate shanten and the tiles that improve it.

        Args:
            hand: Tiles or 34-element count array
            num_melds: Number of declared melds

        Returns:
            ShantenResult with shanten value and improving tiles
        """
        _check_meld_count(num_melds)
        counts = tuple(int(c) for c in _as_counts(hand))
        shanten = _standard_shanten(counts, num_melds)
        improving, ukeire = self._calculate_ukeire(counts, num_melds, shanten)
        return ShantenResult(shanten=shanten, improving_tiles=improving, ukeire=ukeire)

    def _calculate_ukeire(
        self,
        counts: Tuple[int, ...],
        num_melds: int,
        current_shanten: int,
    ) -> Tuple[List[int], int]:
        improving = []
        total = 0
        for tile_idx in range(NUM_KINDS):
            if counts[tile_idx] >= 4:
                continue
            lst = list(counts)
            lst[tile_idx] += 1
            if _standard_shanten(tuple(lst), num_melds) < current_shanten:
                improving.append(tile_idx)
                total += 4 - counts[tile_idx]
        return improving, total


def calculate_shanten(hand: TilesOrCounts, num_melds: int = 0) -> int:
    """
    Convenience function to calculate shanten.

    Returns:
        Shanten value (-1 to 8)
    """
    _check_meld_count(num_melds)
    counts = tuple(int(c) for c in _as_counts(hand))
    return _standard_shanten(counts, num_melds)


def counts_from_sequence(values: Sequence[int]) -> np.ndarray:
    """Build a count array from kind indices (test and tooling helper)"""
    counts = np.zeros(NUM_KINDS, dtype=np.int8)
    for idx in values:
        counts[idx] += 1
    return counts
