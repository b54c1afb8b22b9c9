"""
Hand Completion Engine

Decides whether concealed tiles plus already-declared melds form a complete
hand (4 groups + 1 pair), and enumerates the tiles that would complete a
hand ("waits").

All checks run over a 34-slot count array indexed by tile kind. Each
branch of the search works on its own copy of the counts, so callers'
arrays are never modified.
"""

from typing import Iterable, Iterator, List, Sequence, Union
import numpy as np

from .errors import MalformedHand
from .tiles import Tile, tiles_to_counts

GROUPS_PER_HAND = 4
WINNING_TILE_COUNT = 14
NUM_KINDS = 34
_HONOR_START = 27

TilesOrCounts = Union[Iterable[Tile], np.ndarray]


def _as_counts(tiles: TilesOrCounts) -> np.ndarray:
    if isinstance(tiles, np.ndarray):
        if tiles.shape != (NUM_KINDS,):
            raise MalformedHand(f"Count array must have shape (34,), got {tiles.shape}")
        return tiles
    return tiles_to_counts(tiles)


def _check_meld_count(declared_meld_count: int) -> None:
    if not 0 <= declared_meld_count <= GROUPS_PER_HAND:
        raise MalformedHand(
            f"declared_meld_count must be in [0, 4], got {declared_meld_count}"
        )


def _decompose(counts: np.ndarray, groups_needed: int, need_pair: bool) -> bool:
    """Backtracking search pivoting on the lowest remaining tile."""
    remaining = int(counts.sum())

    if groups_needed == 0:
        if need_pair:
            return remaining == 2 and int(counts.max()) == 2
        return remaining == 0

    if remaining < 3:
        return False

    pivot = int(np.flatnonzero(counts)[0])

    # Triplet
    if counts[pivot] >= 3:
        rest = counts.copy()
        rest[pivot] -= 3
        if _decompose(rest, groups_needed - 1, need_pair):
            return True

    # Run (numbered suits only, pivot rank 1-7)
    if pivot < _HONOR_START and pivot % 9 <= 6:
        if counts[pivot + 1] > 0 and counts[pivot + 2] > 0:
            rest = counts.copy()
            rest[pivot:pivot + 3] -= 1
            if _decompose(rest, groups_needed - 1, need_pair):
                return True

    # Pair
    if need_pair and counts[pivot] >= 2:
        rest = counts.copy()
        rest[pivot] -= 2
        if _decompose(rest, groups_needed, False):
            return True

    return False


def can_complete_counts(counts: np.ndarray, declared_meld_count: int = 0) -> bool:
    """
    Check a 34-slot count array for a complete hand.

    Args:
        counts: Concealed tile counts by kind
        declared_meld_count: Melds already declared (0-4)

    Returns:
        True if the concealed tiles form the missing groups plus a pair
    """
    _check_meld_count(declared_meld_count)
    counts = _as_counts(counts)
    if int(counts.sum()) + 3 * declared_meld_count != WINNING_TILE_COUNT:
        return False
    return _decompose(counts.copy(), GROUPS_PER_HAND - declared_meld_count, True)


def can_complete(tiles: TilesOrCounts, declared_meld_count: int = 0) -> bool:
    """
    Check whether tiles form a complete hand.

    `tiles` may be any iterable of Tile or a 34-element count array.
    Hands whose size does not add up to 14 with the declared melds are
    never complete.
    """
    return can_complete_counts(_as_counts(tiles), declared_meld_count)


def iter_winning_tiles(hand: TilesOrCounts, melds: Sequence = ()) -> Iterator[Tile]:
    """
    Lazily yield one probe Tile per kind that would complete the hand.

    Kinds are tried in canonical order (1m .. 9s, east .. red). Nothing is
    cached: a new call re-derives the waits from its inputs.
    """
    counts = _as_counts(hand)
    num_melds = len(melds)
    _check_meld_count(num_melds)
    for tile_idx in range(NUM_KINDS):
        test_counts = counts.copy()
        test_counts[tile_idx] += 1
        if can_complete_counts(test_counts, num_melds):
            yield Tile.from_index(tile_idx)


def winning_tiles(hand: TilesOrCounts, melds: Sequence = ()) -> List[Tile]:
    """Tiles that would complete the hand, one per kind"""
    return list(iter_winning_tiles(hand, melds))


def is_tenpai(hand: TilesOrCounts, melds: Sequence = ()) -> bool:
    """One tile away from a complete hand"""
    for _ in iter_winning_tiles(hand, melds):
        return True
    return False
