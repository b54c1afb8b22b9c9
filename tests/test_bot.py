"""
Tests for scripted opponents
"""

import pytest
import numpy as np

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from riichi_trainer.actions import ChiAction, DiscardAction, PonAction, RonAction, TsumoAction
from riichi_trainer.bot import ScriptedOpponent, danger_tiles, tile_efficiency, tile_safety
from riichi_trainer.config import Difficulty, FAST_CONFIG
from riichi_trainer.game import Phase, TableState
from riichi_trainer.player import Player, SEAT_WINDS
from riichi_trainer.tiles import (
    Tile, TileSet, man, pin, sou, parse_tiles, EAST, RED_DRAGON, WHITE_DRAGON,
)

JUNK = "1357m2468p1357s2z"


def make_table(hands, current=0) -> TableState:
    players = [
        Player(index=i, hand=TileSet(parse_tiles(text)), seat_wind=SEAT_WINDS[i], is_scripted=True)
        for i, text in enumerate(hands)
    ]
    return TableState(
        players=players,
        current_player=current,
        phase=Phase.PLAYING,
        config=FAST_CONFIG.with_overrides(human_seat=None),
    )


def bot(difficulty, seed=0) -> ScriptedOpponent:
    return ScriptedOpponent(difficulty, np.random.default_rng(seed), FAST_CONFIG)


class TestDecide:
    """Test turn decisions"""

    def test_tsumo_on_drawn_tile(self):
        state = make_table(["123m456p789s11155z", JUNK, JUNK, JUNK])
        player = state.players[0]
        action = bot(Difficulty.NOVICE).decide(player, state, drawn_tile=WHITE_DRAGON)
        assert action == TsumoAction(0)

    def test_drawn_tile_not_yet_in_hand(self):
        state = make_table(["123m456p789s1115z", JUNK, JUNK, JUNK])
        player = state.players[0]
        drawn = Tile(WHITE_DRAGON.suit, WHITE_DRAGON.value, 128)
        action = bot(Difficulty.ADVANCED).decide(player, state, drawn_tile=drawn)
        assert isinstance(action, TsumoAction)

    def test_ron_on_last_discard(self):
        state = make_table(["123m456p789s1115z", JUNK, JUNK, JUNK])
        state.players[3].discards.append(WHITE_DRAGON)
        state.last_action = DiscardAction(3, WHITE_DRAGON)
        action = bot(Difficulty.INTERMEDIATE).decide(state.players[0], state)
        assert action == RonAction(0, WHITE_DRAGON, 3)

    def test_discard_when_not_complete(self):
        state = make_table(["1357m2468p1357s26z", JUNK, JUNK, JUNK])
        player = state.players[0]
        for difficulty in Difficulty:
            action = bot(difficulty).decide(player, state, drawn_tile=Tile.from_string("6z"))
            assert isinstance(action, DiscardAction)
            assert player.hand.contains(action.tile)


class TestDiscardTiers:
    """Test the three discard strategies"""

    def test_novice_is_reproducible(self):
        state = make_table(["1357m2468p1357s26z", JUNK, JUNK, JUNK])
        hand = state.players[0].get_hand_tiles()
        a = [bot(Difficulty.NOVICE, 5).choose_discard(hand, state.players[0], state) for _ in range(3)]
        b = [bot(Difficulty.NOVICE, 5).choose_discard(hand, state.players[0], state) for _ in range(3)]
        assert a == b

    def test_novice_leans_to_terminals(self):
        state = make_table(["2345678m234567p9s", JUNK, JUNK, JUNK])
        player = state.players[0]
        hand = player.get_hand_tiles()
        novice = bot(Difficulty.NOVICE, 11)
        picks = [novice.choose_discard(hand, player, state) for _ in range(500)]
        terminal_share = sum(1 for t in picks if t == sou(9)) / len(picks)
        assert terminal_share > 0.6

    def test_intermediate_drops_least_connected(self):
        state = make_table(["123m456p789s11z55z7z", JUNK, JUNK, JUNK])
        player = state.players[0]
        tile = bot(Difficulty.INTERMEDIATE).choose_discard(player.get_hand_tiles(), player, state)
        assert tile == RED_DRAGON

    def test_intermediate_avoids_middle_tiles_against_riichi(self):
        state = make_table(["123m5p789s111z55z7z9s", JUNK, JUNK, JUNK])
        player = state.players[0]
        player.hand.sort()
        intermediate = bot(Difficulty.INTERMEDIATE)

        assert intermediate.choose_discard(player.get_hand_tiles(), player, state) == pin(5)
        state.players[2].is_riichi = True
        assert intermediate.choose_discard(player.get_hand_tiles(), player, state) == RED_DRAGON

    def test_advanced_returns_held_tile(self):
        state = make_table(["123m456p789s11z55z7z", JUNK, JUNK, JUNK])
        player = state.players[0]
        tile = bot(Difficulty.ADVANCED).choose_discard(player.get_hand_tiles(), player, state)
        assert player.hand.contains(tile)


class TestHeuristics:
    """Test efficiency, safety and danger"""

    def test_efficiency(self):
        hand = parse_tiles("345677m")
        assert tile_efficiency(man(5), hand) == pytest.approx(1.2)
        assert tile_efficiency(man(7), hand) == pytest.approx(0.6 + 0.5)
        assert tile_efficiency(EAST, parse_tiles("11z")) == pytest.approx(0.5)
        assert tile_efficiency(EAST, parse_tiles("1z")) == 0.0

    def test_safety(self):
        state = make_table([JUNK, JUNK, JUNK, JUNK])
        assert tile_safety(EAST, state, 0) == pytest.approx(0.3)
        assert tile_safety(pin(5), state, 0) == 0.0
        state.players[1].discards.append(EAST)
        assert tile_safety(EAST, state, 0) == 1.0
        assert tile_safety(EAST, state, 1) == pytest.approx(0.3)
        state.players[1].discards.clear()
        state.players[2].is_riichi = True
        assert tile_safety(EAST, state, 0) == 0.0

    def test_danger_tiles(self):
        state = make_table([JUNK, JUNK, JUNK, JUNK])
        assert danger_tiles(state, 0) == set()
        state.players[0].is_riichi = True
        assert danger_tiles(state, 0) == set()
        assert len(danger_tiles(state, 1)) == 9
        assert man(5) in danger_tiles(state, 1)
        assert man(3) not in danger_tiles(state, 1)


class TestShouldCallMeld:
    """Test pon and chi decisions"""

    def test_pon_that_reaches_tenpai(self):
        player = Player(index=1, hand=TileSet(parse_tiles("123m456p789s557z9m")))
        action = bot(Difficulty.INTERMEDIATE).should_call_meld(player, WHITE_DRAGON, 0)
        assert action == PonAction(1, WHITE_DRAGON, 0)

    def test_pon_that_does_not_help(self):
        player = Player(index=1, hand=TileSet(parse_tiles("1357m2468p135s55z")))
        assert bot(Difficulty.ADVANCED).should_call_meld(player, WHITE_DRAGON, 0) is None

    def test_chi_only_from_preceding_seat(self):
        player = Player(index=1, hand=TileSet(parse_tiles("46m456p789s1155z9m")))
        intermediate = bot(Difficulty.INTERMEDIATE)
        assert intermediate.should_call_meld(player, man(5), 2) is None
        action = intermediate.should_call_meld(player, man(5), 0)
        assert isinstance(action, ChiAction)
        assert action.tiles == (man(4), man(6))

    def test_no_calls_in_riichi(self):
        player = Player(index=1, hand=TileSet(parse_tiles("123m456p789s557z9m")), is_riichi=True)
        assert bot(Difficulty.NOVICE).should_call_meld(player, WHITE_DRAGON, 0) is None
        assert bot(Difficulty.ADVANCED).should_call_meld(player, WHITE_DRAGON, 0) is None

    def test_novice_calls_sometimes(self):
        player = Player(index=1, hand=TileSet(parse_tiles("1357m2468p135s55z")))
        novice = bot(Difficulty.NOVICE, 3)
        calls = [novice.should_call_meld(player, WHITE_DRAGON, 0) for _ in range(300)]
        made = [c for c in calls if c is not None]
        assert 0 < len(made) < 150
        assert all(c == PonAction(1, WHITE_DRAGON, 0) for c in made)

    def test_novice_needs_a_shape(self):
        player = Player(index=1, hand=TileSet(parse_tiles(JUNK)))
        novice = bot(Difficulty.NOVICE)
        assert all(novice.should_call_meld(player, RED_DRAGON, 0) is None for _ in range(50))

    def test_chi_that_keeps_wait_count(self):
        # Noten before and after: chi still does not reduce the waits
        player = Player(index=1, hand=TileSet(parse_tiles(JUNK)))
        action = bot(Difficulty.INTERMEDIATE).should_call_meld(player, pin(5), 0)
        assert action == ChiAction(1, pin(5), (pin(4), pin(6)), 0)

    def test_pon_that_loses_waits(self):
        # Nine waits before; at most five after ponning 9m and discarding
        player = Player(index=1, hand=TileSet(parse_tiles("1112345678999m")))
        assert bot(Difficulty.ADVANCED).should_call_meld(player, man(9), 2) is None
