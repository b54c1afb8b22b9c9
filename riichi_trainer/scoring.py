"""
Scoring

A deliberately small scorer: a handful of easily recognised yaku and the
basic-points formula with limit hands. Fu is a flat placeholder.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence
import math

from .player import Meld
from .tiles import Tile, TileSuit


@dataclass(frozen=True)
class Yaku:
    """A winning pattern"""
    name: str
    han: int
    description: str

    @property
    def is_yakuman(self) -> bool:
        return self.han >= 13


RIICHI = Yaku("Riichi", 1, "Declared ready hand")
MENZEN_TSUMO = Yaku("Menzen Tsumo", 1, "Self-drawn winning tile with closed hand")
HONROUTOU = Yaku("Honroutou", 2, "All terminals and honors")
HONITSU = Yaku("Honitsu", 3, "Half flush")
CHINITSU = Yaku("Chinitsu", 6, "Full flush")
TSUUIISOU = Yaku("Tsuuiisou", 13, "All honors")

# Basic-points limits by minimum han
_LIMITS = (
    (13, 8000),  # Yakuman
    (11, 6000),  # Sanbaiman
    (8, 4000),   # Baiman
    (6, 3000),   # Haneman
)
MANGAN_BASE = 2000


@dataclass
class ScoringResult:
    """Result of scoring a winning hand"""
    han: int = 0
    fu: int = 0
    points: int = 0
    yaku_list: List[Yaku] = field(default_factory=list)

    @property
    def yaku_names(self) -> List[str]:
        return [y.name for y in self.yaku_list]


def detect_yaku(
    tiles: Iterable[Tile],
    melds: Sequence[Meld],
    is_riichi: bool,
    is_tsumo: bool,
) -> List[Yaku]:
    """
    Find the supported yaku in a winning hand.

    Args:
        tiles: Concealed tiles including the winning tile
        melds: Declared melds
        is_riichi: Winner had declared riichi
        is_tsumo: Won by self-draw
    """
    all_tiles = list(tiles)
    for meld in melds:
        all_tiles.extend(meld.tiles)

    yaku = []
    if is_riichi:
        yaku.append(RIICHI)
    if is_tsumo and all(m.is_concealed for m in melds):
        yaku.append(MENZEN_TSUMO)

    if all_tiles and all(t.is_terminal_or_honor for t in all_tiles):
        yaku.append(HONROUTOU)

    suits = {t.suit for t in all_tiles}
    if len(suits) == 1:
        yaku.append(TSUUIISOU if TileSuit.HONORS in suits else CHINITSU)
    elif len(suits) == 2 and TileSuit.HONORS in suits:
        yaku.append(HONITSU)

    return yaku


def calculate_score(han: int, fu: int, is_dealer: bool) -> int:
    """
    Points paid for a win.

    basic = fu * 2^(han+2), capped at mangan and replaced by the limit
    values from haneman upward; the dealer receives 6x basic, others 4x,
    rounded up to the next 100.
    """
    basic = fu * 2 ** (han + 2)
    for min_han, limit in _LIMITS:
        if han >= min_han:
            basic = limit
            break
    else:
        basic = min(basic, MANGAN_BASE)

    multiplier = 6 if is_dealer else 4
    return int(math.ceil(basic * multiplier / 100) * 100)


def score_hand(
    tiles: Iterable[Tile],
    melds: Sequence[Meld],
    is_riichi: bool,
    is_tsumo: bool,
    is_dealer: bool,
    fu: int = 30,
) -> ScoringResult:
    """
    Score a winning hand.

    A hand without any supported yaku is still paid at one han.
    """
    yaku = detect_yaku(tiles, melds, is_riichi, is_tsumo)
    yakuman = [y for y in yaku if y.is_yakuman]
    if yakuman:
        yaku = yakuman
        han = 13
    else:
        han = max(1, sum(y.han for y in yaku))
    return ScoringResult(
        han=han,
        fu=fu,
        points=calculate_score(han, fu, is_dealer),
        yaku_list=yaku,
    )
