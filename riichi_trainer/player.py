"""
Player Module

Handles player state: concealed hand, discards, declared melds and riichi.
"""

from enum import IntEnum
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .tiles import HonorType, Tile, TileSet, NUMBER_SUITS


class MeldType(IntEnum):
    """Types of declared melds"""
    RUN = 0             # Chi - 3 consecutive tiles in one suit
    TRIPLET = 1         # Pon - 3 identical tiles
    QUAD = 2            # Open kan - 4 identical tiles
    CONCEALED_QUAD = 3  # Ankan - 4 identical tiles, self-drawn


@dataclass(frozen=True)
class Meld:
    """
    Represents a declared meld.

    Attributes:
        meld_type: Run, triplet, quad or concealed quad
        tiles: The physical tiles of the meld
        called_from: Seat the claimed tile came from (None if self-formed)
    """
    meld_type: MeldType
    tiles: Tuple[Tile, ...]
    called_from: Optional[int] = None

    def __post_init__(self):
        """Validate meld"""
        object.__setattr__(self, "tiles", tuple(self.tiles))
        if self.meld_type == MeldType.RUN:
            if len(self.tiles) != 3:
                raise ValueError("Run must have exactly 3 tiles")
            if not self._is_valid_sequence(sorted(self.tiles)):
                raise ValueError(f"Invalid run: {[str(t) for t in self.tiles]}")
        elif self.meld_type == MeldType.TRIPLET:
            if len(self.tiles) != 3:
                raise ValueError("Triplet must have exactly 3 tiles")
            if not all(t == self.tiles[0] for t in self.tiles):
                raise ValueError("Triplet tiles must be identical")
        else:
            if len(self.tiles) != 4:
                raise ValueError("Quad must have exactly 4 tiles")
            if not all(t == self.tiles[0] for t in self.tiles):
                raise ValueError("Quad tiles must be identical")

    @staticmethod
    def _is_valid_sequence(tiles: Sequence[Tile]) -> bool:
        if tiles[0].suit not in NUMBER_SUITS:
            return False
        if not all(t.suit == tiles[0].suit for t in tiles):
            return False
        return tiles[1].value == tiles[0].value + 1 and tiles[2].value == tiles[1].value + 1

    @property
    def is_concealed(self) -> bool:
        return self.meld_type == MeldType.CONCEALED_QUAD

    def __len__(self) -> int:
        return len(self.tiles)

    def __str__(self) -> str:
        tiles_str = "".join(str(t) for t in sorted(self.tiles))
        return f"[{self.meld_type.name}: {tiles_str}]"


SEAT_WINDS = (HonorType.EAST, HonorType.SOUTH, HonorType.WEST, HonorType.NORTH)


@dataclass
class Player:
    """
    Represents a player at the table.

    Attributes:
        index: Seat index (0-3)
        hand: Concealed tiles
        melds: Declared melds in call order
        discards: Discarded tiles in order
        score: Current point total
        seat_wind: Wind of this seat relative to the dealer
        is_dealer: Whether this seat is the dealer (oya)
        is_riichi: Whether riichi has been declared
        is_scripted: Whether this seat is driven by a scripted opponent
        name: Display name
    """
    index: int
    hand: TileSet = field(default_factory=TileSet)
    melds: List[Meld] = field(default_factory=list)
    discards: List[Tile] = field(default_factory=list)
    score: int = 25000
    seat_wind: HonorType = HonorType.EAST
    is_dealer: bool = False
    is_riichi: bool = False
    is_scripted: bool = False
    name: str = ""

    @property
    def expected_hand_size(self) -> int:
        """Concealed count between turns: 13 - 3 per declared meld"""
        return 13 - 3 * len(self.melds)

    @property
    def needs_draw(self) -> bool:
        return len(self.hand) == self.expected_hand_size

    @property
    def is_mid_turn(self) -> bool:
        """Holding the extra tile that must be discarded"""
        return len(self.hand) == self.expected_hand_size + 1

    @property
    def is_menzen(self) -> bool:
        """Hand is closed: no melds other than concealed quads"""
        return all(m.is_concealed for m in self.melds)

    @property
    def num_tiles(self) -> int:
        """Tiles owned across hand, discards and melds"""
        return len(self.hand) + len(self.discards) + sum(len(m) for m in self.melds)

    def get_hand_tiles(self) -> List[Tile]:
        return list(self.hand.tiles)

    def can_pon(self, tile: Tile) -> bool:
        if self.is_riichi:
            return False
        return self.hand.count(tile) >= 2

    def can_open_kan(self, tile: Tile) -> bool:
        if self.is_riichi:
            return False
        return self.hand.count(tile) >= 3

    def chi_options(self, tile: Tile) -> List[Tuple[Tile, Tile]]:
        """
        Pairs of held tiles that form a run with `tile`.
        Callers must also check the tile came from the preceding seat.
        """
        if self.is_riichi or tile.suit not in NUMBER_SUITS:
            return []

        options = []
        value = tile.value
        for low, high in ((value - 2, value - 1), (value - 1, value + 1), (value + 1, value + 2)):
            if low < 1 or high > 9:
                continue
            first = self.hand.find(Tile(tile.suit, low))
            second = self.hand.find(Tile(tile.suit, high))
            if first is not None and second is not None:
                options.append((first, second))
        return options

    def concealed_quad_options(self) -> List[Tile]:
        """Kinds held four times"""
        return [t for t in self.hand.get_unique_tiles() if self.hand.count(t) == 4]

    def copy(self) -> "Player":
        """Copy with independent containers (tiles and melds are immutable)"""
        return Player(
            index=self.index,
            hand=self.hand.copy(),
            melds=list(self.melds),
            discards=list(self.discards),
            score=self.score,
            seat_wind=self.seat_wind,
            is_dealer=self.is_dealer,
            is_riichi=self.is_riichi,
            is_scripted=self.is_scripted,
            name=self.name,
        )

    def __repr__(self) -> str:
        status = " RIICHI" if self.is_riichi else ""
        return f"Player({self.index}, tiles={len(self.hand)},{status} {self.score}pts)"

    def __str__(self) -> str:
        positions = ["East", "South", "West", "North"]
        wind = positions[int(self.seat_wind) - 1]
        parts = [str(self.hand)] + [str(m) for m in self.melds]
        status = " [RIICHI]" if self.is_riichi else ""
        return f"{wind}{status}: {' '.join(parts)} ({self.score}pts)"
