"""
Wall Module

Builds and shuffles the wall (undrawn tile pile) and deals starting hands.
Randomness comes from an injected numpy Generator so deals are reproducible.
"""

from typing import List, Optional
import numpy as np

from .errors import WallExhausted
from .tiles import Tile, TileSet


def build_wall(rng: np.random.Generator, red_fives: int = 3) -> List[Tile]:
    """Create all 136 tiles and shuffle them"""
    tiles = list(TileSet.create_full_set(red_fives=red_fives))
    order = rng.permutation(len(tiles))
    return [tiles[i] for i in order]


def draw_tile(wall: List[Tile]) -> Tile:
    """
    Pop the front tile of the wall.

    Raises:
        WallExhausted: if the wall is empty
    """
    if not wall:
        raise WallExhausted("Cannot draw from an empty wall")
    return wall.pop(0)


def deal_hands(
    wall: List[Tile],
    num_players: int = 4,
    dealer: Optional[int] = 0,
    hand_size: int = 13,
) -> List[List[Tile]]:
    """
    Deal starting hands from the front of the wall.

    Tiles go round the table one at a time, `hand_size` rounds, starting
    from seat 0; the dealer then takes one extra tile. Dealt tiles are
    removed from `wall`.

    Returns list of hands indexed by seat.
    """
    needed = num_players * hand_size + (1 if dealer is not None else 0)
    if len(wall) < needed:
        raise WallExhausted(f"Need {needed} tiles to deal, wall has {len(wall)}")

    hands: List[List[Tile]] = [[] for _ in range(num_players)]
    for _ in range(hand_size):
        for seat in range(num_players):
            hands[seat].append(draw_tile(wall))

    if dealer is not None:
        hands[dealer].append(draw_tile(wall))

    return hands
