"""
Tests for action records
"""

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from riichi_trainer.actions import (
    ActionType, ChiAction, DiscardAction, DrawAction, KanAction, PonAction,
    RonAction, TsumoAction, action_from_record, action_to_record,
)
from riichi_trainer.errors import InvalidMove
from riichi_trainer.tiles import man, pin, RED_DRAGON


class TestActionFromRecord:
    """Test parsing external records"""

    def test_discard(self):
        action = action_from_record({"type": "discard", "playerId": 0, "tile": "5m", "timestamp": 12.5})
        assert action == DiscardAction(0, man(5), 12.5)
        assert action.action_type == ActionType.DISCARD

    def test_red_five(self):
        action = action_from_record({"type": "discard", "playerId": 2, "tile": "0p"})
        assert action.tile == pin(5)
        assert action.tile.is_red

    def test_glyph_tile(self):
        action = action_from_record({"type": "pon", "playerId": 1, "tile": "中", "fromSeat": 0})
        assert action == PonAction(1, RED_DRAGON, 0)

    def test_chi(self):
        action = action_from_record({
            "type": "chi", "playerId": 1, "tile": "3m", "tiles": ["1m", "2m"], "from": 0,
        })
        assert isinstance(action, ChiAction)
        assert action.tiles == (man(1), man(2))
        assert action.from_seat == 0

    def test_draw_and_tsumo_need_no_tile(self):
        assert action_from_record({"type": "draw", "playerId": 3}) == DrawAction(3)
        assert action_from_record({"type": "tsumo", "playerId": 3}) == TsumoAction(3)

    def test_concealed_kan(self):
        action = action_from_record({"type": "kan", "playerId": 0, "tile": "1z"})
        assert isinstance(action, KanAction)
        assert action.from_seat is None

    @pytest.mark.parametrize("record", [
        {"type": "shout", "playerId": 0},
        {"playerId": 0, "tile": "1m"},
        {"type": "discard", "playerId": 4, "tile": "1m"},
        {"type": "discard", "playerId": "north", "tile": "1m"},
        {"type": "discard", "playerId": 0},
        {"type": "discard", "playerId": 0, "tile": "10m"},
        {"type": "pon", "playerId": 0, "tile": "1m"},
        {"type": "chi", "playerId": 1, "tile": "3m", "tiles": ["1m"], "fromSeat": 0},
    ])
    def test_malformed(self, record):
        with pytest.raises(InvalidMove):
            action_from_record(record)


class TestActionToRecord:
    """Test serialising actions"""

    def test_ron_record(self):
        record = action_to_record(RonAction(2, RED_DRAGON, 1, timestamp=3.0))
        assert record == {"type": "ron", "playerId": 2, "timestamp": 3.0, "tile": "中", "fromSeat": 1}

    def test_chi_record_parses_back(self):
        action = ChiAction(1, man(3), (man(1), man(2)), 0)
        assert action_from_record(action_to_record(action)) == action

    def test_repr(self):
        assert repr(DiscardAction(0, man(5))) == "DiscardAction(P0, 5m)"
        assert repr(DrawAction(1)) == "DrawAction(P1)"
