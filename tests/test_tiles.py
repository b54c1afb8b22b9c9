"""
Tests for the tile model
"""

import pytest
import numpy as np

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from riichi_trainer.tiles import (
    Tile, TileSet, TileSuit, HonorType, PROBE_ID,
    man, pin, sou, honor, parse_tiles, sort_tiles, tiles_to_counts,
    EAST, RED_DRAGON, WHITE_DRAGON,
)


class TestTile:
    """Test single tiles"""

    def test_tile_creation(self):
        t = man(1)
        assert t.suit == TileSuit.CHARACTERS
        assert t.value == 1
        assert t.id == PROBE_ID

        assert sou(5).suit == TileSuit.BAMBOOS
        assert pin(9).suit == TileSuit.DOTS

    def test_invalid_values(self):
        with pytest.raises(ValueError):
            Tile(TileSuit.DOTS, 10)
        with pytest.raises(ValueError):
            Tile(TileSuit.HONORS, 8)
        with pytest.raises(ValueError):
            Tile(TileSuit.CHARACTERS, 4, is_red=True)

    def test_equality_ignores_instance(self):
        """Copies of a kind are equal whatever their id or red flag"""
        a = Tile(TileSuit.CHARACTERS, 5, 16, is_red=True)
        b = Tile(TileSuit.CHARACTERS, 5, 17)
        assert a == b
        assert hash(a) == hash(b)
        assert not a.same_instance(b)
        assert a.same_instance(Tile(TileSuit.CHARACTERS, 5, 16))
        assert a != pin(5)

    def test_terminal_and_honor(self):
        assert man(1).is_terminal
        assert sou(9).is_terminal
        assert not pin(5).is_terminal
        assert EAST.is_honor
        assert not EAST.is_terminal
        assert EAST.is_terminal_or_honor
        assert pin(5).is_simple

    def test_tile_index(self):
        assert man(1).tile_index == 0
        assert man(9).tile_index == 8
        assert pin(1).tile_index == 9
        assert sou(1).tile_index == 18
        assert EAST.tile_index == 27
        assert RED_DRAGON.tile_index == 33

    def test_from_index(self):
        for idx in range(34):
            assert Tile.from_index(idx).tile_index == idx
        with pytest.raises(ValueError):
            Tile.from_index(34)

    def test_ordering(self):
        tiles = [RED_DRAGON, sou(1), EAST, man(9), pin(3), man(1)]
        assert sort_tiles(tiles) == [man(1), man(9), pin(3), sou(1), EAST, RED_DRAGON]
        assert man(9) < pin(1)
        assert EAST < WHITE_DRAGON

    def test_text_form(self):
        assert str(man(5)) == "5m"
        assert str(pin(1)) == "1p"
        assert str(EAST) == "東"
        assert str(honor(HonorType.GREEN)) == "發"

    def test_from_string(self):
        assert Tile.from_string("3s") == sou(3)
        assert Tile.from_string("中") == RED_DRAGON
        assert Tile.from_string("1z") == EAST
        assert Tile.from_string("5z") == WHITE_DRAGON
        red = Tile.from_string("0p")
        assert red == pin(5)
        assert red.is_red
        with pytest.raises(ValueError):
            Tile.from_string("8z")
        with pytest.raises(ValueError):
            Tile.from_string("x")

    def test_glyph(self):
        assert man(1).glyph == "\U0001F007"
        assert sou(1).glyph == "\U0001F010"
        assert pin(1).glyph == "\U0001F019"
        assert EAST.glyph == "\U0001F000"
        assert RED_DRAGON.glyph == "\U0001F004"
        assert WHITE_DRAGON.glyph == "\U0001F006"


class TestParseTiles:
    """Test compact notation"""

    def test_compact(self):
        tiles = parse_tiles("123m456p789s11155z")
        assert len(tiles) == 14
        assert tiles[0] == man(1)
        assert tiles[-1] == WHITE_DRAGON
        assert sum(1 for t in tiles if t == EAST) == 3

    def test_glyphs_and_spaces(self):
        assert parse_tiles("1m 2m 東") == [man(1), man(2), EAST]

    def test_dangling_ranks(self):
        with pytest.raises(ValueError):
            parse_tiles("123")
        with pytest.raises(ValueError):
            parse_tiles("m")


class TestTileSet:
    """Test tile multisets"""

    def test_create_full_set(self):
        full = TileSet.create_full_set()
        assert len(full) == 136
        assert len({t.id for t in full}) == 136
        for tile in full.get_unique_tiles():
            assert full.count(tile) == 4

    def test_red_fives(self):
        full = TileSet.create_full_set(red_fives=3)
        reds = [t for t in full if t.is_red]
        assert sorted(reds) == [man(5), pin(5), sou(5)]
        assert not any(t.is_red for t in TileSet.create_full_set(red_fives=0))
        with pytest.raises(ValueError):
            TileSet.create_full_set(red_fives=4)

    def test_to_count_array(self):
        ts = TileSet(parse_tiles("112m9p東"))
        counts = ts.to_count_array()
        assert counts.shape == (34,)
        assert counts.dtype == np.int8
        assert counts[0] == 2
        assert counts[1] == 1
        assert counts[17] == 1
        assert counts[27] == 1
        assert counts.sum() == 5
        assert np.array_equal(counts, tiles_to_counts(ts))

    def test_remove_prefers_instance(self):
        a = Tile(TileSuit.DOTS, 3, 40)
        b = Tile(TileSuit.DOTS, 3, 41)
        ts = TileSet([a, b])
        removed = ts.remove(Tile(TileSuit.DOTS, 3, 41))
        assert removed.id == 41
        assert ts[0].id == 40

    def test_remove_falls_back_to_kind(self):
        ts = TileSet([Tile(TileSuit.DOTS, 3, 40), Tile(TileSuit.DOTS, 4, 44)])
        removed = ts.remove(pin(3))
        assert removed.id == 40
        assert len(ts) == 1
        assert ts.remove(pin(3)) is None

    def test_copy_is_independent(self):
        ts = TileSet(parse_tiles("123m"))
        other = ts.copy()
        other.remove(man(1))
        assert len(ts) == 3
        assert len(other) == 2
