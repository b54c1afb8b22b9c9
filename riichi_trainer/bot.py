"""
Scripted Opponent

Rule-based opponents in three tiers:
- Novice: random discards that lean toward terminals and honors
- Intermediate: drops the least connected tile, avoiding middle tiles
  when someone is in riichi
- Advanced: weighs connectivity, safety and hand speed for every tile

All randomness comes from the injected generator so games replay exactly
from a seed.
"""

from typing import List, Optional, Sequence, Set, Tuple
import logging
import numpy as np

from .actions import Action, ChiAction, DiscardAction, PonAction, RonAction, TsumoAction
from .config import DEFAULT_CONFIG, Difficulty, TrainerConfig
from .game import TableState
from .hand import can_complete, winning_tiles
from .player import Meld, MeldType, Player
from .tiles import NUMBER_SUITS, Tile

logger = logging.getLogger(__name__)

# Middle ranks treated as dangerous against a riichi
DANGER_RANKS = (4, 5, 6)


def danger_tiles(state: TableState, player_idx: int) -> Set[Tile]:
    """Tile kinds that are risky to discard for `player_idx`"""
    if not any(p.is_riichi for p in state.players if p.index != player_idx):
        return set()
    return {Tile(suit, rank) for suit in NUMBER_SUITS for rank in DANGER_RANKS}


def tile_efficiency(tile: Tile, hand: Sequence[Tile]) -> float:
    """
    How well a tile connects to the rest of the hand.

    +0.3 for each distinct rank within two in the same suit that is held,
    +0.5 for each other copy of the tile.
    """
    efficiency = 0.0
    if not tile.is_honor:
        for offset in (-2, -1, 1, 2):
            rank = tile.value + offset
            if 1 <= rank <= 9 and any(t.suit == tile.suit and t.value == rank for t in hand):
                efficiency += 0.3

    copies = sum(1 for t in hand if t == tile) - 1
    efficiency += 0.5 * max(copies, 0)
    return efficiency


def tile_safety(tile: Tile, state: TableState, player_idx: int) -> float:
    """Safety of discarding `tile` in [0, 1], higher is safer"""
    safety = 0.0
    opponents = [p for p in state.players if p.index != player_idx]
    for opponent in opponents:
        if tile in opponent.discards:
            safety += 0.8
    if tile.is_terminal_or_honor:
        safety += 0.3
    if any(p.is_riichi for p in opponents):
        safety -= 0.5
    return max(0.0, min(1.0, safety))


class ScriptedOpponent:
    """
    Decision logic for one scripted seat.

    The opponent never mutates the table; it only returns actions for the
    session to submit.
    """

    def __init__(
        self,
        difficulty: Difficulty = Difficulty.INTERMEDIATE,
        rng: Optional[np.random.Generator] = None,
        config: TrainerConfig = DEFAULT_CONFIG,
    ):
        self.difficulty = Difficulty(difficulty)
        self.rng = rng if rng is not None else np.random.default_rng(config.seed)
        self.config = config

    def decide(
        self,
        player: Player,
        state: TableState,
        drawn_tile: Optional[Tile] = None,
    ) -> Action:
        """
        Choose a turn action: tsumo, ron or a discard.

        Args:
            player: Seat to act for
            state: Committed table
            drawn_tile: Tile just drawn, if this is a self-draw turn
        """
        hand = player.get_hand_tiles()
        num_melds = len(player.melds)

        if drawn_tile is not None:
            if not any(t.same_instance(drawn_tile) for t in hand):
                hand.append(drawn_tile)
            if can_complete(hand, num_melds):
                return TsumoAction(player.index)
        else:
            claim = state.last_discard
            if claim is not None and claim[0] != player.index:
                seat, tile = claim
                if can_complete(hand + [tile], num_melds):
                    return RonAction(player.index, tile, seat)

        tile = self.choose_discard(hand, player, state)
        logger.debug(f"P{player.index} ({self.difficulty.name}) discards {tile}")
        return DiscardAction(player.index, tile)

    def choose_discard(self, hand: List[Tile], player: Player, state: TableState) -> Tile:
        if player.is_riichi and state.last_draw is not None:
            return state.last_draw
        if self.difficulty == Difficulty.NOVICE:
            return self._novice_discard(hand)
        if self.difficulty == Difficulty.ADVANCED:
            return self._advanced_discard(hand, player, state)
        return self._intermediate_discard(hand, player, state)

    def _novice_discard(self, hand: List[Tile]) -> Tile:
        outer = [t for t in hand if t.is_terminal_or_honor]
        if outer and self.rng.random() < self.config.novice_terminal_bias:
            return outer[int(self.rng.integers(len(outer)))]
        return hand[int(self.rng.integers(len(hand)))]

    def _intermediate_discard(self, hand: List[Tile], player: Player, state: TableState) -> Tile:
        danger = danger_tiles(state, player.index)
        candidates = [t for t in hand if t not in danger] or hand
        return min(candidates, key=lambda t: tile_efficiency(t, hand))

    def _advanced_discard(self, hand: List[Tile], player: Player, state: TableState) -> Tile:
        waits = winning_tiles(hand, player.melds)
        speed = 0.8 if len(waits) > 6 else 0.5

        def score(tile: Tile) -> float:
            efficiency = tile_efficiency(tile, hand)
            safety = tile_safety(tile, state, player.index)
            return efficiency * 0.4 + safety * 0.4 + speed * 0.2

        return min(hand, key=score)

    def should_call_meld(
        self,
        player: Player,
        discarded_tile: Tile,
        source_seat: int,
    ) -> Optional[Action]:
        """
        Decide whether to pon or chi a discard.

        Returns the claim action, or None to pass.
        """
        if player.index == source_seat or player.is_riichi:
            return None
        can_pon = player.can_pon(discarded_tile)
        chi_shapes = player.chi_options(discarded_tile) if (source_seat + 1) % 4 == player.index else []

        if self.difficulty == Difficulty.NOVICE:
            if not (can_pon or chi_shapes):
                return None
            if self.rng.random() >= self.config.novice_call_rate:
                return None
            if can_pon:
                return PonAction(player.index, discarded_tile, source_seat)
            return ChiAction(player.index, discarded_tile, chi_shapes[0], source_seat)

        current = len(winning_tiles(player.get_hand_tiles(), player.melds))

        if can_pon:
            hand = player.hand.copy()
            held = (hand.remove(discarded_tile), hand.remove(discarded_tile))
            meld = Meld(MeldType.TRIPLET, held + (discarded_tile,), source_seat)
            after = self._best_waits_after_call(hand.tiles, player.melds, meld)
            if after > current * self.config.pon_wait_ratio:
                logger.debug(f"P{player.index} pons {discarded_tile} ({current} -> {after} waits)")
                return PonAction(player.index, discarded_tile, source_seat)

        best: Optional[Tuple[int, Tuple[Tile, Tile]]] = None
        for pair in chi_shapes:
            hand = player.hand.copy()
            for t in pair:
                hand.remove(t)
            meld = Meld(MeldType.RUN, pair + (discarded_tile,), source_seat)
            after = self._best_waits_after_call(hand.tiles, player.melds, meld)
            if best is None or after > best[0]:
                best = (after, pair)
        if best is not None and best[0] >= current:
            logger.debug(f"P{player.index} chis {discarded_tile} ({current} -> {best[0]} waits)")
            return ChiAction(player.index, discarded_tile, best[1], source_seat)

        return None

    @staticmethod
    def _best_waits_after_call(hand: List[Tile], melds: Sequence[Meld], meld: Meld) -> int:
        """Most waits reachable by the discard that follows a call"""
        new_melds = list(melds) + [meld]
        best = 0
        seen: Set[Tile] = set()
        for i, tile in enumerate(hand):
            if tile in seen:
                continue
            seen.add(tile)
            rest = hand[:i] + hand[i + 1:]
            best = max(best, len(winning_tiles(rest, new_melds)))
        return best
