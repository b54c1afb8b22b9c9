"""
Riichi Mahjong Tiles System

Defines the 136 tiles used in Japanese Mahjong:
- 9 Characters (m) x4 = 36
- 9 Dots (p) x4 = 36
- 9 Bamboos (s) x4 = 36
- 4 Winds (東南西北) x4 = 16
- 3 Dragons (白發中) x4 = 12
Total: 136 tiles

Each physical tile carries an instance id. Equality only looks at the
(suit, value) pair, so two copies of 5m compare equal whatever their id
or red-five flag.
"""

from enum import IntEnum
from dataclasses import dataclass, field
from typing import Iterable, List, Optional
import numpy as np


class TileSuit(IntEnum):
    """Tile suits in sort order"""
    CHARACTERS = 0  # m (Manzu)
    DOTS = 1        # p (Pinzu)
    BAMBOOS = 2     # s (Souzu)
    HONORS = 3      # z (Jihai)


class HonorType(IntEnum):
    """Honor tile kinds, numbered as in "1z".."7z" notation"""
    EAST = 1
    SOUTH = 2
    WEST = 3
    NORTH = 4
    WHITE = 5   # Haku
    GREEN = 6   # Hatsu
    RED = 7     # Chun


NUMBER_SUITS = (TileSuit.CHARACTERS, TileSuit.DOTS, TileSuit.BAMBOOS)

SUIT_LETTERS = {
    TileSuit.CHARACTERS: "m",
    TileSuit.DOTS: "p",
    TileSuit.BAMBOOS: "s",
    TileSuit.HONORS: "z",
}

HONOR_NAMES = {
    HonorType.EAST: "東",
    HonorType.SOUTH: "南",
    HonorType.WEST: "西",
    HonorType.NORTH: "北",
    HonorType.WHITE: "白",
    HonorType.GREEN: "發",
    HonorType.RED: "中",
}

# Unicode Mahjong Tiles block
_HONOR_GLYPHS = {
    HonorType.EAST: 0x1F000,
    HonorType.SOUTH: 0x1F001,
    HonorType.WEST: 0x1F002,
    HonorType.NORTH: 0x1F003,
    HonorType.RED: 0x1F004,
    HonorType.GREEN: 0x1F005,
    HonorType.WHITE: 0x1F006,
}
_SUIT_GLYPH_BASE = {
    TileSuit.CHARACTERS: 0x1F007,
    TileSuit.BAMBOOS: 0x1F010,
    TileSuit.DOTS: 0x1F019,
}

PROBE_ID = -1


@dataclass(frozen=True)
class Tile:
    """
    Represents a single Mahjong tile.

    Attributes:
        suit: The suit of the tile
        value: 1-9 for numbered suits, HonorType value (1-7) for honors
        id: Instance id of the physical tile (0-135), PROBE_ID for tiles
            that were never part of a wall
        is_red: Whether this five is a red five (akadora)
    """
    suit: TileSuit
    value: int
    id: int = PROBE_ID
    is_red: bool = field(default=False, compare=False)

    def __post_init__(self):
        """Validate tile values"""
        if self.suit in NUMBER_SUITS:
            if not 1 <= self.value <= 9:
                raise ValueError(f"Numbered suits must have value 1-9, got {self.value}")
            if self.is_red and self.value != 5:
                raise ValueError("Only fives can be red")
        elif self.suit == TileSuit.HONORS:
            if not 1 <= self.value <= 7:
                raise ValueError(f"Honor tiles must have value 1-7, got {self.value}")
            if self.is_red:
                raise ValueError("Honor tiles cannot be red")
        else:
            raise ValueError(f"Unknown suit: {self.suit}")

    @property
    def is_honor(self) -> bool:
        return self.suit == TileSuit.HONORS

    @property
    def is_terminal(self) -> bool:
        """1 or 9 of a numbered suit"""
        return self.suit in NUMBER_SUITS and self.value in (1, 9)

    @property
    def is_terminal_or_honor(self) -> bool:
        return self.is_terminal or self.is_honor

    @property
    def is_simple(self) -> bool:
        """2-8 of a numbered suit"""
        return self.suit in NUMBER_SUITS and 2 <= self.value <= 8

    @property
    def tile_index(self) -> int:
        """
        Kind index (0-33): 0-8 characters, 9-17 dots, 18-26 bamboos,
        27-33 honors (east, south, west, north, white, green, red).
        """
        return int(self.suit) * 9 + self.value - 1

    @property
    def glyph(self) -> str:
        """Unicode presentation glyph"""
        if self.is_honor:
            return chr(_HONOR_GLYPHS[HonorType(self.value)])
        return chr(_SUIT_GLYPH_BASE[self.suit] + self.value - 1)

    def same_instance(self, other: "Tile") -> bool:
        """Physical identity: same kind and same instance id"""
        return self == other and self.id == other.id

    def __eq__(self, other) -> bool:
        if not isinstance(other, Tile):
            return NotImplemented
        return self.suit == other.suit and self.value == other.value

    def __hash__(self) -> int:
        return hash((self.suit, self.value))

    def __lt__(self, other) -> bool:
        if not isinstance(other, Tile):
            return NotImplemented
        return self.tile_index < other.tile_index

    def __repr__(self) -> str:
        return f"Tile({self}, id={self.id})"

    def __str__(self) -> str:
        if self.is_honor:
            return HONOR_NAMES[HonorType(self.value)]
        return f"{self.value}{SUIT_LETTERS[self.suit]}"

    @classmethod
    def from_index(cls, tile_index: int, instance_id: int = PROBE_ID) -> "Tile":
        """Create a tile from its kind index (0-33)"""
        if not 0 <= tile_index < 34:
            raise ValueError(f"Tile index must be 0-33, got {tile_index}")
        return cls(TileSuit(tile_index // 9), tile_index % 9 + 1, instance_id)

    @classmethod
    def from_string(cls, s: str, instance_id: int = PROBE_ID) -> "Tile":
        """
        Create a tile from its text form.

        Accepts "1m".."9s", "0m"/"0p"/"0s" for red fives, "1z".."7z"
        and the honor glyphs 東南西北白發中.
        """
        s = s.strip()
        for kind, name in HONOR_NAMES.items():
            if s == name:
                return cls(TileSuit.HONORS, int(kind), instance_id)

        if len(s) == 2 and s[0].isdigit():
            value = int(s[0])
            for suit, letter in SUIT_LETTERS.items():
                if s[1] != letter:
                    continue
                if value == 0 and suit in NUMBER_SUITS:
                    return cls(suit, 5, instance_id, is_red=True)
                return cls(suit, value, instance_id)

        raise ValueError(f"Cannot parse tile string: {s!r}")


def parse_tiles(text: str) -> List[Tile]:
    """
    Parse compact notation such as "123m456p789s11155z".

    Digits accumulate until a suit letter closes the group. Whitespace
    separated single tiles ("1m 2m 東") are accepted as well.
    """
    tiles: List[Tile] = []
    pending = ""
    for ch in text:
        if ch.isspace():
            continue
        if ch.isdigit():
            pending += ch
        elif ch in "mpsz":
            if not pending:
                raise ValueError(f"Suit letter {ch!r} without ranks in {text!r}")
            tiles.extend(Tile.from_string(digit + ch) for digit in pending)
            pending = ""
        else:
            if pending:
                raise ValueError(f"Dangling ranks {pending!r} in {text!r}")
            tiles.append(Tile.from_string(ch))
    if pending:
        raise ValueError(f"Dangling ranks {pending!r} in {text!r}")
    return tiles


def sort_tiles(tiles: Iterable[Tile]) -> List[Tile]:
    """Canonical order: m, p, s, then honors; instance id breaks ties"""
    return sorted(tiles, key=lambda t: (t.tile_index, t.id))


class TileSet:
    """
    A mutable multiset of tiles with utility methods.
    Used to represent concealed hands.
    """

    NUM_TILE_TYPES = 34
    NUM_TILES = 136
    COPIES_PER_TYPE = 4

    def __init__(self, tiles: Optional[Iterable[Tile]] = None):
        self.tiles: List[Tile] = list(tiles) if tiles else []

    def add(self, tile: Tile) -> None:
        self.tiles.append(tile)

    def find(self, tile: Tile) -> Optional[Tile]:
        """
        Locate the held tile matching `tile`.

        Prefers the exact physical instance; falls back to the first tile
        of the same kind.
        """
        for t in self.tiles:
            if t.same_instance(tile):
                return t
        for t in self.tiles:
            if t == tile:
                return t
        return None

    def remove(self, tile: Tile) -> Optional[Tile]:
        """
        Remove a tile (see `find` for matching).
        Returns the removed physical tile, or None if not found.
        """
        held = self.find(tile)
        if held is None:
            return None
        for i, t in enumerate(self.tiles):
            if t is held:
                return self.tiles.pop(i)
        return None

    def contains(self, tile: Tile) -> bool:
        return tile in self.tiles

    def count(self, tile: Tile) -> int:
        """Count occurrences of a tile kind"""
        return sum(1 for t in self.tiles if t == tile)

    def sort(self) -> None:
        self.tiles = sort_tiles(self.tiles)

    def to_count_array(self) -> np.ndarray:
        """34-element array counting each tile kind"""
        return tiles_to_counts(self.tiles)

    def get_unique_tiles(self) -> List[Tile]:
        """One held tile per kind, in canonical order"""
        seen = set()
        unique = []
        for tile in sort_tiles(self.tiles):
            if tile not in seen:
                seen.add(tile)
                unique.append(tile)
        return unique

    @classmethod
    def create_full_set(cls, red_fives: int = 3) -> "TileSet":
        """
        Create the complete 136-tile set.

        The first copy of 5m, 5p and 5s (in that order) is flagged red,
        up to `red_fives` of them.
        """
        if not 0 <= red_fives <= 3:
            raise ValueError(f"red_fives must be 0-3, got {red_fives}")
        tiles = []
        instance_id = 0
        reds_left = red_fives
        for suit in NUMBER_SUITS:
            for value in range(1, 10):
                for copy in range(cls.COPIES_PER_TYPE):
                    is_red = value == 5 and copy == 0 and reds_left > 0
                    if is_red:
                        reds_left -= 1
                    tiles.append(Tile(suit, value, instance_id, is_red=is_red))
                    instance_id += 1
        for honor in HonorType:
            for copy in range(cls.COPIES_PER_TYPE):
                tiles.append(Tile(TileSuit.HONORS, int(honor), instance_id))
                instance_id += 1
        return cls(tiles)

    def copy(self) -> "TileSet":
        return TileSet(self.tiles)

    def __len__(self) -> int:
        return len(self.tiles)

    def __iter__(self):
        return iter(self.tiles)

    def __getitem__(self, index):
        return self.tiles[index]

    def __repr__(self) -> str:
        return f"TileSet({len(self.tiles)} tiles)"

    def __str__(self) -> str:
        return " ".join(str(t) for t in sort_tiles(self.tiles))


def tiles_to_counts(tiles: Iterable[Tile]) -> np.ndarray:
    """Convert tiles to a 34-element int8 count array"""
    counts = np.zeros(TileSet.NUM_TILE_TYPES, dtype=np.int8)
    for tile in tiles:
        counts[tile.tile_index] += 1
    return counts


# Convenience functions for creating specific tiles
def man(value: int, instance_id: int = PROBE_ID) -> Tile:
    """Create a Characters tile (1-9m)"""
    return Tile(TileSuit.CHARACTERS, value, instance_id)

def pin(value: int, instance_id: int = PROBE_ID) -> Tile:
    """Create a Dots tile (1-9p)"""
    return Tile(TileSuit.DOTS, value, instance_id)

def sou(value: int, instance_id: int = PROBE_ID) -> Tile:
    """Create a Bamboos tile (1-9s)"""
    return Tile(TileSuit.BAMBOOS, value, instance_id)

def honor(kind: HonorType, instance_id: int = PROBE_ID) -> Tile:
    """Create an honor tile"""
    return Tile(TileSuit.HONORS, int(kind), instance_id)


EAST = honor(HonorType.EAST)
SOUTH = honor(HonorType.SOUTH)
WEST = honor(HonorType.WEST)
NORTH = honor(HonorType.NORTH)
WHITE_DRAGON = honor(HonorType.WHITE)
GREEN_DRAGON = honor(HonorType.GREEN)
RED_DRAGON = honor(HonorType.RED)
