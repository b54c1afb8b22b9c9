"""
Tests for scoring
"""

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from riichi_trainer.player import Meld, MeldType
from riichi_trainer.scoring import (
    CHINITSU, HONITSU, MENZEN_TSUMO, RIICHI, TSUUIISOU,
    calculate_score, detect_yaku, score_hand,
)
from riichi_trainer.tiles import parse_tiles


class TestCalculateScore:
    """Test the points table"""

    @pytest.mark.parametrize("han,is_dealer,points", [
        (1, False, 1000),
        (1, True, 1500),
        (2, False, 2000),
        (4, False, 7700),
        (5, False, 8000),
        (6, False, 12000),
        (8, False, 16000),
        (11, False, 24000),
        (13, False, 32000),
        (13, True, 48000),
    ])
    def test_points(self, han, is_dealer, points):
        assert calculate_score(han, 30, is_dealer) == points


class TestYaku:
    """Test yaku detection and hand scoring"""

    def test_no_yaku_pays_one_han(self):
        result = score_hand(parse_tiles("123m456p789s11155z"), [], False, False, False)
        assert result.yaku_list == []
        assert result.han == 1
        assert result.fu == 30
        assert result.points == 1000

    def test_riichi_tsumo(self):
        result = score_hand(parse_tiles("123m456p789s11155z"), [], True, True, False)
        assert result.yaku_names == ["Riichi", "Menzen Tsumo"]
        assert result.han == 2
        assert result.points == 2000

    def test_open_hand_has_no_menzen_tsumo(self):
        melds = [Meld(MeldType.TRIPLET, parse_tiles("111z"), called_from=3)]
        yaku = detect_yaku(parse_tiles("123m456p789s55z"), melds, False, True)
        assert MENZEN_TSUMO not in yaku

    def test_concealed_quad_keeps_menzen_tsumo(self):
        melds = [Meld(MeldType.CONCEALED_QUAD, parse_tiles("1111z"))]
        yaku = detect_yaku(parse_tiles("123m456p789s55z"), melds, False, True)
        assert MENZEN_TSUMO in yaku

    def test_chinitsu(self):
        yaku = detect_yaku(parse_tiles("11123455678999m"), [], False, False)
        assert yaku == [CHINITSU]

    def test_honitsu(self):
        result = score_hand(parse_tiles("123456789m11155z"), [], True, False, False)
        assert result.yaku_list == [RIICHI, HONITSU]
        assert result.han == 4

    def test_tsuuiisou_is_yakuman_only(self):
        result = score_hand(parse_tiles("11122233344455z"), [], True, True, True)
        assert result.yaku_list == [TSUUIISOU]
        assert result.han == 13
        assert result.points == 48000
