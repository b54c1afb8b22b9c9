"""
Riichi Trainer Game State

Table state for one round and the reducer that applies actions to it.

`apply` never mutates its input: it copies the table, runs the handler for
the action's class against the copy and returns the copy. A rejected
action raises `InvalidMove` and the caller keeps the previous table.
"""

from enum import IntEnum
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple
import logging
import numpy as np

from .actions import (
    Action, ChiAction, DiscardAction, DrawAction, KanAction, PonAction,
    RiichiAction, RonAction, TsumoAction,
)
from .config import DEFAULT_CONFIG, TrainerConfig
from .errors import InvalidMove
from .hand import can_complete, is_tenpai
from .player import Meld, MeldType, Player, SEAT_WINDS
from .scoring import score_hand
from .tiles import Tile, TileSet
from .wall import build_wall, deal_hands, draw_tile

logger = logging.getLogger(__name__)

NUM_PLAYERS = 4


class Phase(IntEnum):
    """Phases of a round"""
    DEALING = 0
    PLAYING = 1
    WON = 2     # Terminal
    DRAW = 3    # Terminal, wall exhausted


@dataclass
class RoundResult:
    """Result of a round"""
    winner: Optional[int] = None
    loser: Optional[int] = None  # For ron
    win_type: str = ""  # "tsumo", "ron", "draw"
    winning_tile: Optional[Tile] = None
    han: int = 0
    fu: int = 0
    points: int = 0
    yaku_list: List[str] = field(default_factory=list)


@dataclass
class TableState:
    """
    Everything on the table for one round.

    Every tile is in exactly one of: the wall, a concealed hand, a discard
    pile or a meld.
    """
    players: List[Player]
    wall: List[Tile] = field(default_factory=list)
    current_player: int = 0
    dealer: int = 0
    round_number: int = 1
    honba: int = 0
    riichi_sticks: int = 0
    phase: Phase = Phase.DEALING
    last_action: Optional[Action] = None
    last_draw: Optional[Tile] = None
    action_log: List[Action] = field(default_factory=list)
    result: Optional[RoundResult] = None
    config: TrainerConfig = DEFAULT_CONFIG

    @property
    def is_terminal(self) -> bool:
        return self.phase in (Phase.WON, Phase.DRAW)

    @property
    def turn_player(self) -> Player:
        return self.players[self.current_player]

    @property
    def last_discard(self) -> Optional[Tuple[int, Tile]]:
        """
        (seat, tile) of the discard that can still be claimed, if any.

        Only the most recent action can open a claim window, and only while
        the tile is still on top of the discarder's pile.
        """
        action = self.last_action
        if not isinstance(action, (DiscardAction, RiichiAction)):
            return None
        discards = self.players[action.player_idx].discards
        if not discards:
            return None
        return action.player_idx, discards[-1]

    def total_tiles(self) -> int:
        return len(self.wall) + sum(p.num_tiles for p in self.players)

    def copy(self) -> "TableState":
        return TableState(
            players=[p.copy() for p in self.players],
            wall=list(self.wall),
            current_player=self.current_player,
            dealer=self.dealer,
            round_number=self.round_number,
            honba=self.honba,
            riichi_sticks=self.riichi_sticks,
            phase=self.phase,
            last_action=self.last_action,
            last_draw=self.last_draw,
            action_log=list(self.action_log),
            result=self.result,
            config=self.config,
        )

    def __repr__(self) -> str:
        return (
            f"TableState(round={self.round_number}, phase={self.phase.name}, "
            f"turn=P{self.current_player}, wall={len(self.wall)})"
        )


def new_table(
    config: TrainerConfig = DEFAULT_CONFIG,
    rng: Optional[np.random.Generator] = None,
    dealer: int = 0,
    round_number: int = 1,
    scores: Optional[Sequence[int]] = None,
    honba: int = 0,
    riichi_sticks: int = 0,
) -> TableState:
    """
    Create a table with a freshly shuffled wall, ready to deal.

    Args:
        config: Table configuration
        rng: Random source for the shuffle
        dealer: Dealer seat
        round_number: Round counter carried between rounds
        scores: Carried-over scores (default: starting points)
        honba: Repeat counter
        riichi_sticks: Sticks left on the table by previous rounds
    """
    if rng is None:
        rng = np.random.default_rng(config.seed)

    players = []
    for i in range(NUM_PLAYERS):
        scripted = i != config.human_seat
        players.append(Player(
            index=i,
            score=scores[i] if scores is not None else config.starting_points,
            is_scripted=scripted,
            name=f"Bot {i}" if scripted else "You",
        ))

    return TableState(
        players=players,
        wall=build_wall(rng, red_fives=config.red_fives),
        current_player=dealer,
        dealer=dealer,
        round_number=round_number,
        honba=honba,
        riichi_sticks=riichi_sticks,
        config=config,
    )


def deal(state: TableState) -> TableState:
    """
    Deal 13 tiles to every seat and a 14th to the dealer.
    The dealer starts mid-turn and opens with a discard.
    """
    if state.phase != Phase.DEALING:
        raise InvalidMove(f"Cannot deal in phase {state.phase.name}")

    new = state.copy()
    hands = deal_hands(new.wall, NUM_PLAYERS, dealer=new.dealer)
    for player, tiles in zip(new.players, hands):
        player.hand = TileSet(tiles)
        player.hand.sort()
        player.seat_wind = SEAT_WINDS[(player.index - new.dealer) % NUM_PLAYERS]
        player.is_dealer = player.index == new.dealer

    new.current_player = new.dealer
    new.phase = Phase.PLAYING
    logger.info(f"Round {new.round_number} dealt, dealer P{new.dealer}, wall {len(new.wall)}")
    return new


def start_round(
    config: TrainerConfig = DEFAULT_CONFIG,
    rng: Optional[np.random.Generator] = None,
    **kwargs,
) -> TableState:
    """Shuffle and deal in one step"""
    return deal(new_table(config, rng, **kwargs))


def apply(
    state: TableState,
    action: Action,
    rng: Optional[np.random.Generator] = None,
) -> TableState:
    """
    Apply one action and return the resulting table.

    Args:
        state: Current table (not modified)
        action: Action to apply
        rng: Random source for scripted ron calls

    Raises:
        InvalidMove: if the action is not legal on this table
    """
    if state.phase == Phase.DEALING:
        raise InvalidMove("Round has not been dealt", action)
    if state.is_terminal:
        raise InvalidMove(f"Round is over ({state.phase.name})", action)
    if not 0 <= action.player_idx < NUM_PLAYERS:
        raise InvalidMove(f"No such seat: {action.player_idx}", action)

    handlers: Dict[type, Callable[[TableState, Action, Optional[np.random.Generator]], None]] = {
        DrawAction: _handle_draw,
        DiscardAction: _handle_discard,
        RiichiAction: _handle_riichi,
        ChiAction: _handle_chi,
        PonAction: _handle_pon,
        KanAction: _handle_kan,
        TsumoAction: _handle_tsumo,
        RonAction: _handle_ron,
    }
    handler = handlers.get(type(action))
    if handler is None:
        raise InvalidMove(f"Unknown action {action!r}", action)

    # Handlers still see the previous last_action, so claims find their discard
    new = state.copy()
    new.action_log.append(action)
    try:
        handler(new, action, rng)
    except InvalidMove as e:
        if e.action is None:
            e.action = action
        raise
    new.last_action = new.action_log[-1]
    return new


def _require_turn(state: TableState, action: Action) -> Player:
    if action.player_idx != state.current_player:
        raise InvalidMove(
            f"P{action.player_idx} acted out of turn (turn holder P{state.current_player})"
        )
    return state.players[action.player_idx]


def _require_mid_turn(player: Player) -> None:
    if not player.is_mid_turn:
        raise InvalidMove(
            f"P{player.index} holds {len(player.hand)} tiles, "
            f"needs {player.expected_hand_size + 1} to discard"
        )


def _require_claim(state: TableState, action: Action) -> Tuple[int, Tile]:
    """Validate a claim on the last discard, return (discarder, tile)"""
    claim = state.last_discard
    if claim is None:
        raise InvalidMove("No discard to claim")
    seat, tile = claim
    if seat == action.player_idx:
        raise InvalidMove("Cannot claim own discard")
    from_seat = getattr(action, "from_seat", None)
    if from_seat is not None and from_seat != seat:
        raise InvalidMove(f"Last discard came from P{seat}, not P{from_seat}")
    if action.tile != tile:
        raise InvalidMove(f"Last discard is {tile}, not {action.tile}")
    if not state.players[action.player_idx].needs_draw:
        raise InvalidMove(f"P{action.player_idx} cannot claim mid-turn")
    return seat, tile


def _take_from_hand(player: Player, tile: Tile, count: int) -> List[Tile]:
    if player.hand.count(tile) < count:
        raise InvalidMove(f"P{player.index} needs {count}x {tile} in hand")
    return [player.hand.remove(tile) for _ in range(count)]


def _take_discard(state: TableState, seat: int) -> Tile:
    return state.players[seat].discards.pop()


def _handle_draw(state: TableState, action: DrawAction, rng) -> None:
    player = _require_turn(state, action)
    if not player.needs_draw:
        raise InvalidMove(f"P{player.index} already holds {len(player.hand)} tiles")

    if not state.wall:
        state.phase = Phase.DRAW
        state.result = RoundResult(win_type="draw")
        logger.info(f"Round {state.round_number}: wall exhausted")
        return

    tile = draw_tile(state.wall)
    player.hand.add(tile)
    player.hand.sort()
    state.last_draw = tile
    logger.debug(f"P{player.index} draws {tile} ({len(state.wall)} left)")


def _discard(state: TableState, action: Action, rng) -> None:
    player = _require_turn(state, action)
    _require_mid_turn(player)

    # A player already in riichi must let the drawn tile go
    if player.is_riichi and isinstance(action, DiscardAction) and state.last_draw is not None:
        if action.tile != state.last_draw:
            raise InvalidMove(f"P{player.index} is in riichi and must discard {state.last_draw}")

    held = player.hand.remove(action.tile)
    if held is None:
        raise InvalidMove(f"P{player.index} doesn't have tile {action.tile}")

    player.discards.append(held)
    state.last_draw = None
    state.current_player = (player.index + 1) % NUM_PLAYERS
    logger.debug(f"P{player.index} discards {held}")

    _scripted_ron_check(state, player.index, held, rng)


def _scripted_ron_check(state: TableState, discarder: int, tile: Tile, rng) -> None:
    """
    Let scripted seats call ron on a discard.

    Seats are tried in seat order and the first seat that decides to call
    wins; there is no head-bump priority.
    """
    for other in state.players:
        if other.index == discarder or not other.is_scripted:
            continue
        if not can_complete(other.get_hand_tiles() + [tile], len(other.melds)):
            continue
        if rng is None:
            rng = np.random.default_rng()
        if rng.random() < state.config.ron_call_probability:
            ron = RonAction(other.index, tile, discarder)
            state.action_log.append(ron)
            _win(state, other.index, discarder, tile, is_tsumo=False)
            return
        logger.debug(f"P{other.index} lets {tile} pass")


def _handle_discard(state: TableState, action: DiscardAction, rng) -> None:
    _discard(state, action, rng)


def _handle_riichi(state: TableState, action: RiichiAction, rng) -> None:
    player = _require_turn(state, action)
    _require_mid_turn(player)
    cost = state.config.riichi_cost

    if player.is_riichi:
        raise InvalidMove(f"P{player.index} is already in riichi")
    if not player.is_menzen:
        raise InvalidMove(f"P{player.index} has an open hand")
    if player.score < cost:
        raise InvalidMove(f"P{player.index} cannot pay the riichi stick")
    if not player.hand.contains(action.tile):
        raise InvalidMove(f"P{player.index} doesn't have tile {action.tile}")

    remaining = player.hand.copy()
    remaining.remove(action.tile)
    if not is_tenpai(remaining.tiles, player.melds):
        raise InvalidMove(f"P{player.index} is not tenpai after discarding {action.tile}")

    player.is_riichi = True
    player.score -= cost
    state.riichi_sticks += 1
    logger.info(f"P{player.index} declares riichi")
    _discard(state, action, rng)


def _claim_meld(
    state: TableState,
    action: Action,
    seat: int,
    meld_type: MeldType,
    held: List[Tile],
) -> None:
    player = state.players[action.player_idx]
    claimed = _take_discard(state, seat)
    try:
        meld = Meld(meld_type, tuple(held) + (claimed,), called_from=seat)
    except ValueError as e:
        raise InvalidMove(str(e)) from e
    player.melds.append(meld)
    player.hand.sort()
    state.current_player = player.index
    state.last_draw = None
    logger.debug(f"P{player.index} calls {meld} from P{seat}")


def _handle_chi(state: TableState, action: ChiAction, rng) -> None:
    seat, _ = _require_claim(state, action)
    player = state.players[action.player_idx]
    if (seat + 1) % NUM_PLAYERS != player.index:
        raise InvalidMove("Chi is only allowed from the preceding seat")
    if player.is_riichi:
        raise InvalidMove(f"P{player.index} is in riichi")

    first, second = action.tiles
    if first == second or not (player.hand.contains(first) and player.hand.contains(second)):
        raise InvalidMove(f"P{player.index} cannot chi with {first}{second}")
    held = [player.hand.remove(first), player.hand.remove(second)]
    _claim_meld(state, action, seat, MeldType.RUN, held)


def _handle_pon(state: TableState, action: PonAction, rng) -> None:
    seat, tile = _require_claim(state, action)
    player = state.players[action.player_idx]
    if player.is_riichi:
        raise InvalidMove(f"P{player.index} is in riichi")
    held = _take_from_hand(player, tile, 2)
    _claim_meld(state, action, seat, MeldType.TRIPLET, held)


def _handle_kan(state: TableState, action: KanAction, rng) -> None:
    """
    Open kan on the last discard, or a concealed kan on one's own turn.
    Either way the caller then needs a draw, which stands in for the
    replacement tile.
    """
    if action.from_seat is not None:
        seat, tile = _require_claim(state, action)
        player = state.players[action.player_idx]
        if player.is_riichi:
            raise InvalidMove(f"P{player.index} is in riichi")
        held = _take_from_hand(player, tile, 3)
        _claim_meld(state, action, seat, MeldType.QUAD, held)
        return

    player = _require_turn(state, action)
    _require_mid_turn(player)
    tiles = _take_from_hand(player, action.tile, 4)
    player.melds.append(Meld(MeldType.CONCEALED_QUAD, tuple(tiles)))
    state.last_draw = None
    logger.debug(f"P{player.index} declares concealed kan {action.tile}")


def _handle_tsumo(state: TableState, action: TsumoAction, rng) -> None:
    player = _require_turn(state, action)
    _require_mid_turn(player)
    if state.last_draw is None:
        raise InvalidMove(f"P{player.index} has no drawn tile to win on")
    if not can_complete(player.get_hand_tiles(), len(player.melds)):
        raise InvalidMove(f"P{player.index} declared tsumo without a complete hand")
    _win(state, player.index, None, state.last_draw, is_tsumo=True)


def _handle_ron(state: TableState, action: RonAction, rng) -> None:
    seat, tile = _require_claim(state, action)
    player = state.players[action.player_idx]
    if not can_complete(player.get_hand_tiles() + [tile], len(player.melds)):
        raise InvalidMove(f"P{player.index} cannot win on {tile}")
    _win(state, player.index, seat, tile, is_tsumo=False)


def _win(
    state: TableState,
    winner_idx: int,
    loser_idx: Optional[int],
    winning_tile: Tile,
    is_tsumo: bool,
) -> None:
    """Score the win, move points and end the round"""
    winner = state.players[winner_idx]
    tiles = winner.get_hand_tiles()
    if not is_tsumo:
        tiles.append(winning_tile)

    scored = score_hand(
        tiles,
        winner.melds,
        is_riichi=winner.is_riichi,
        is_tsumo=is_tsumo,
        is_dealer=winner_idx == state.dealer,
        fu=state.config.base_fu,
    )
    state.result = RoundResult(
        winner=winner_idx,
        loser=loser_idx,
        win_type="tsumo" if is_tsumo else "ron",
        winning_tile=winning_tile,
        han=scored.han,
        fu=scored.fu,
        points=scored.points,
        yaku_list=scored.yaku_names,
    )

    if is_tsumo:
        _apply_tsumo_scores(state, winner_idx, scored.points)
    else:
        _apply_ron_scores(state, winner_idx, loser_idx, scored.points)

    state.phase = Phase.WON
    logger.info(
        f"P{winner_idx} wins by {state.result.win_type} on {winning_tile}: "
        f"{scored.han} han {scored.fu} fu, {scored.points} points {scored.yaku_names}"
    )


def _apply_tsumo_scores(state: TableState, winner_idx: int, points: int) -> None:
    winner = state.players[winner_idx]

    if winner_idx == state.dealer:
        # Dealer tsumo: all pay equal
        payment = (points + state.honba * 300) // 3
        for player in state.players:
            if player.index != winner_idx:
                player.score -= payment
                winner.score += payment
    else:
        # Non-dealer tsumo: dealer pays half, others a quarter
        dealer_payment = points // 2 + state.honba * 100
        other_payment = points // 4 + state.honba * 100
        for player in state.players:
            if player.index == winner_idx:
                continue
            payment = dealer_payment if player.index == state.dealer else other_payment
            player.score -= payment
            winner.score += payment

    _collect_riichi_sticks(state, winner)


def _apply_ron_scores(state: TableState, winner_idx: int, loser_idx: int, points: int) -> None:
    winner = state.players[winner_idx]
    loser = state.players[loser_idx]

    payment = points + state.honba * 300
    loser.score -= payment
    winner.score += payment
    _collect_riichi_sticks(state, winner)


def _collect_riichi_sticks(state: TableState, winner: Player) -> None:
    winner.score += state.riichi_sticks * state.config.riichi_cost
    state.riichi_sticks = 0


def claim_options(state: TableState, seat: int) -> List[Action]:
    """
    Claims `seat` may make on the last discard: ron, open kan, pon and
    every chi shape. Empty when there is nothing to claim.
    """
    claim = state.last_discard
    if state.phase != Phase.PLAYING or claim is None:
        return []
    discarder, tile = claim
    player = state.players[seat]
    if seat == discarder or not player.needs_draw:
        return []

    options: List[Action] = []
    if can_complete(player.get_hand_tiles() + [tile], len(player.melds)):
        options.append(RonAction(seat, tile, discarder))
    if player.can_open_kan(tile):
        options.append(KanAction(seat, tile, discarder))
    if player.can_pon(tile):
        options.append(PonAction(seat, tile, discarder))
    if (discarder + 1) % NUM_PLAYERS == seat:
        for pair in player.chi_options(tile):
            options.append(ChiAction(seat, tile, pair, discarder))
    return options


def valid_actions(state: TableState, seat: int) -> List[Action]:
    """All actions `seat` could legally submit right now"""
    if state.phase != Phase.PLAYING:
        return []
    player = state.players[seat]
    if seat != state.current_player:
        return claim_options(state, seat)

    if player.needs_draw:
        return claim_options(state, seat) + [DrawAction(seat)]

    actions: List[Action] = []
    if state.last_draw is not None and can_complete(player.get_hand_tiles(), len(player.melds)):
        actions.append(TsumoAction(seat))

    if player.is_riichi and state.last_draw is not None:
        actions.append(DiscardAction(seat, state.last_draw))
    else:
        for tile in player.hand.get_unique_tiles():
            actions.append(DiscardAction(seat, tile))

    if (not player.is_riichi and player.is_menzen
            and player.score >= state.config.riichi_cost):
        for tile in player.hand.get_unique_tiles():
            remaining = player.hand.copy()
            remaining.remove(tile)
            if is_tenpai(remaining.tiles, player.melds):
                actions.append(RiichiAction(seat, tile))

    for tile in player.concealed_quad_options():
        actions.append(KanAction(seat, tile))
    return actions
